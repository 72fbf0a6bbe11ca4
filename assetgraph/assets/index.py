# assetgraph/assets/index.py
from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from threading import RLock
from types import MappingProxyType
from typing import NamedTuple

from assetgraph.assets.resolver import DependencyList, ModuleDependencyResolver, ResolvedEntries
from assetgraph.core.paths import (
    DECLARATION_SUFFIX,
    SCRIPT_SUFFIX,
    SOURCE_SUFFIX,
    normalizeRelativePath,
    stripLeadingSlash,
    toScriptModulePath,
)

logger = logging.getLogger(__name__)

__all__ = ["DependencyIndex", "discoverScripts"]



def discoverScripts(projectRoot: Path, srcDir: str) -> list[str]:
    """
    Lists every script module under `projectRoot / srcDir` as project-relative
    `.js` module paths. A `.ts` file and its compiled `.js` sibling count once;
    `.d.ts` declarations are skipped.
    """
    root = Path(projectRoot)
    base = root / srcDir
    if not base.is_dir():
        logger.warning("Script source directory '%s' doesn't exist; nothing to index", base)
        return []
    
    found: set[str] = set()
    for path in base.rglob("*"):
        name = path.name
        if name.endswith(DECLARATION_SUFFIX) or not name.endswith((SCRIPT_SUFFIX, SOURCE_SUFFIX)):
            continue
        if not path.is_file():
            continue
        found.add(toScriptModulePath(path.relative_to(root).as_posix()))
    return sorted(found)



class _Published(NamedTuple):
    dependencies: Mapping[str, DependencyList]
    entries: Mapping[str, ResolvedEntries]



_EMPTY = _Published(MappingProxyType({}), MappingProxyType({}))



class DependencyIndex:
    """
    Process-wide cache `module path -> DependencyList`.

    Resolution runs without holding the index lock; writers then publish a fresh
    read-only snapshot under it. Readers on the request path only ever see a
    complete snapshot, never a dict being mutated.
    """
    def __init__(self, resolver: ModuleDependencyResolver) -> None:
        self._resolver = resolver
        self._published = _EMPTY
        self._lock = RLock()

    @staticmethod
    def keyFor(modulePath: str) -> str:
        return toScriptModulePath(stripLeadingSlash(normalizeRelativePath(modulePath)))

    def get(self, modulePath: str) -> DependencyList:
        """
        Returns the dependency list of `modulePath`, resolving it on first access.
        May raise FatalStartupError subclasses when the module can't be resolved.
        """
        key = self.keyFor(modulePath)
        found = self._published.dependencies.get(key)
        if found is not None:
            return found

        result = self._resolver.resolve(key)
        self._publish()
        return result

    def lookup(self, modulePath: str) -> DependencyList | None:
        """Cached list or None when the module isn't indexed. Never touches the disk."""
        return self._published.dependencies.get(self.keyFor(modulePath))

    def lookupEntries(self, modulePath: str) -> ResolvedEntries | None:
        """lookup() with the kind (script, stylesheet, package) of every dependency."""
        return self._published.entries.get(self.keyFor(modulePath))

    def __contains__(self, modulePath: object) -> bool:
        return isinstance(modulePath, str) and self.keyFor(modulePath) in self._published.dependencies

    def __len__(self) -> int:
        return len(self._published.dependencies)

    def snapshot(self) -> Mapping[str, DependencyList]:
        return self._published.dependencies

    def warm(self, modules: Iterable[str], *, workers: int = 1) -> int:
        """
        Resolves every module eagerly and publishes the result once. With
        `workers > 1` the modules are fanned out over a thread pool; the first
        failure propagates and nothing new is published.
        Returns the number of indexed modules.
        """
        resolver = self._resolver
        moduleList = [self.keyFor(modulePath) for modulePath in modules]
        if workers > 1 and len(moduleList) > 1:
            with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="assetgraph-index") as pool:
                # list() re-raises the first worker exception
                list(pool.map(resolver.resolve, moduleList))
        else:
            for modulePath in moduleList:
                resolver.resolve(modulePath)

        self._publish()
        logger.info("Dependency index warmed: %d module(s) indexed", len(self))
        return len(self)

    def rebuild(self, modules: Iterable[str]) -> int:
        """
        Re-resolves `modules` from disk with a fresh resolver and swaps the result
        in at once. On failure the current snapshot stays in place.
        """
        resolver = self._resolver.clone()
        for modulePath in modules:
            resolver.resolve(modulePath)

        with self._lock:
            self._resolver = resolver
            self._publish()
        logger.info("Dependency index rebuilt: %d module(s) indexed", len(self))
        return len(self)

    def _publish(self) -> None:
        # The resolver memo only grows, so it is always a superset of what is published
        with self._lock:
            self._published = _Published(
                MappingProxyType(self._resolver.resolved()),
                MappingProxyType(self._resolver.resolvedEntries()),
            )
