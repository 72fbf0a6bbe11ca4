# assetgraph/assets/resolver.py
from __future__ import annotations

import logging
from collections.abc import Sequence
from enum import Enum
from pathlib import Path
from typing import NamedTuple, TypeAlias

from assetgraph.assets.aliases import AliasTable
from assetgraph.assets.ordering import RepositioningList
from assetgraph.assets.scanner import isPackageSpecifier, scanImports
from assetgraph.core.errors import DependencyCycleError, ModuleReadError
from assetgraph.core.paths import (
    hasSuffix,
    joinPaths,
    normalizeRelativePath,
    parentDir,
    stripLeadingSlash,
    toScriptModulePath,
    toSourcePath,
)

logger = logging.getLogger(__name__)

__all__ = [
    "DEFAULT_STYLESHEET_SUFFIXES",
    "DependencyList",
    "ResolvedEntries",
    "SpecifierKind",
    "IdentityKind",
    "ResolvedSpecifier",
    "ModuleDependencyResolver",
    "classifySpecifier",
]

# Ordered, duplicate-free module paths and package names
DependencyList: TypeAlias = tuple[str, ...]

DEFAULT_STYLESHEET_SUFFIXES: tuple[str, ...] = (".css",)



class SpecifierKind(str, Enum):
    RELATIVE = "relative"      # "./x", "../x"
    ROOTED = "rooted"          # "/public/x.js", relative to the project root
    ALIASED = "aliased"        # "~/x" with a registered "~" prefix
    PACKAGE = "package"        # "htmx.org", "normalize.css"
    UNSUPPORTED = "unsupported"



class IdentityKind(str, Enum):
    SCRIPT = "script"
    STYLESHEET = "stylesheet"
    PACKAGE = "package"



class ResolvedSpecifier(NamedTuple):
    identity: str
    kind: IdentityKind


# Same order as the DependencyList, each identity with its kind
ResolvedEntries: TypeAlias = tuple[ResolvedSpecifier, ...]



def classifySpecifier(specifier: str, aliases: AliasTable) -> SpecifierKind:
    if specifier.startswith("."):
        return SpecifierKind.RELATIVE
    if aliases.matchPrefix(specifier) is not None:
        return SpecifierKind.ALIASED
    if specifier.startswith("/"):
        return SpecifierKind.ROOTED
    if isPackageSpecifier(specifier):
        return SpecifierKind.PACKAGE
    return SpecifierKind.UNSUPPORTED



class ModuleDependencyResolver:
    """
    Computes the flattened dependency list of a script module.

    Each import is pushed in source order; when it is a script module, its own
    (recursively flattened) list is pushed right after it. Pushing moves an
    entry that is already present to the end, so a shared dependency ends up
    after the last module that required it.

    Every identity keeps the kind it was resolved as, so a package named
    "normalize.css" never gets mistaken for a stylesheet module.

    Results are memoized per resolver. Concurrent callers may resolve the same
    module twice; both compute the same tuple and the memo keeps one of them.
    Cyclic imports raise DependencyCycleError.
    """
    def __init__(
        self,
        *,
        projectRoot: Path,
        aliases: AliasTable,
        stylesheetSuffixes: Sequence[str] = DEFAULT_STYLESHEET_SUFFIXES,
    ) -> None:
        self.projectRoot = Path(projectRoot)
        self.aliases = aliases
        self.stylesheetSuffixes = tuple(stylesheetSuffixes)
        self._entries: dict[str, ResolvedEntries] = {}
        self._resolved: dict[str, DependencyList] = {}

    def clone(self) -> "ModuleDependencyResolver":
        """Same configuration, empty memo."""
        return ModuleDependencyResolver(
            projectRoot=self.projectRoot,
            aliases=self.aliases,
            stylesheetSuffixes=self.stylesheetSuffixes,
        )

    def resolved(self) -> dict[str, DependencyList]:
        """Copy of every module resolved so far, transitive ones included."""
        return dict(self._resolved)

    def resolvedEntries(self) -> dict[str, ResolvedEntries]:
        """Same as resolved() with the kind of every identity."""
        return dict(self._entries)

    def resolve(self, modulePath: str) -> DependencyList:
        key = toScriptModulePath(stripLeadingSlash(modulePath))
        self._resolve(key, ())
        return self._resolved[key]

    def resolveEntries(self, modulePath: str) -> ResolvedEntries:
        return self._resolve(toScriptModulePath(stripLeadingSlash(modulePath)), ())

    def resolveSpecifier(self, specifier: str, importer: str) -> ResolvedSpecifier | None:
        """
        Turns a raw specifier found in `importer` into a dependency identity.
        Returns None (after logging a warning) for aliases no root can satisfy
        and for specifiers that are neither paths nor package names.
        """
        kind = classifySpecifier(specifier, self.aliases)

        if kind is SpecifierKind.PACKAGE:
            return ResolvedSpecifier(specifier, IdentityKind.PACKAGE)

        if kind is SpecifierKind.RELATIVE:
            return self._fileIdentity(joinPaths(parentDir(importer), specifier))

        if kind is SpecifierKind.ROOTED:
            return self._fileIdentity(stripLeadingSlash(normalizeRelativePath(specifier)))

        if kind is SpecifierKind.UNSUPPORTED:
            logger.warning(
                "Import '%s' (in '%s') isn't a path, an alias or a package name; skipping it",
                specifier,
                importer,
            )
            return None

        if self._isStylesheet(specifier):
            # Stylesheets are never scanned, so the first root is taken as-is
            prefix = self.aliases.matchPrefix(specifier) or ""
            roots = self.aliases.rootsFor(prefix)
            if roots:
                return ResolvedSpecifier(joinPaths(roots[0], specifier[len(prefix):]), IdentityKind.STYLESHEET)
        else:
            resolved = self.aliases.resolve(specifier)
            if resolved is not None:
                return ResolvedSpecifier(resolved, IdentityKind.SCRIPT)

        logger.warning(
            "Couldn't find a file corresponding to '%s' (imported from '%s'); skipping it",
            specifier,
            importer,
        )
        return None

    # ------------------------------------------------------------------ #
    # Internals
    # ------------------------------------------------------------------ #

    def _isStylesheet(self, path: str) -> bool:
        return hasSuffix(path, self.stylesheetSuffixes)

    def _fileIdentity(self, path: str) -> ResolvedSpecifier:
        if self._isStylesheet(path):
            return ResolvedSpecifier(path, IdentityKind.STYLESHEET)
        return ResolvedSpecifier(toScriptModulePath(path), IdentityKind.SCRIPT)

    def _readSource(self, modulePath: str) -> str:
        # TypeScript source wins over the compiled file sitting next to it
        sourcePath = self.projectRoot / toSourcePath(modulePath)
        if not sourcePath.is_file():
            sourcePath = self.projectRoot / modulePath
        try:
            return sourcePath.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as err:
            raise ModuleReadError(modulePath, str(sourcePath), str(err)) from err

    def _store(self, modulePath: str, entries: ResolvedEntries) -> ResolvedEntries:
        # entries first: whoever sees a module in _resolved can read its kinds
        self._entries[modulePath] = entries
        self._resolved[modulePath] = tuple(entry.identity for entry in entries)
        return entries

    def _resolve(self, modulePath: str, stack: tuple[str, ...]) -> ResolvedEntries:
        cached = self._entries.get(modulePath)
        if cached is not None:
            return cached

        if modulePath in stack:
            cycle = stack[stack.index(modulePath):] + (modulePath,)
            raise DependencyCycleError(cycle)

        specifiers = scanImports(self._readSource(modulePath))
        if not specifiers:
            return self._store(modulePath, ())

        innerStack = stack + (modulePath,)
        dependencies: RepositioningList[str] = RepositioningList()
        kinds: dict[str, IdentityKind] = {}

        for specifier in specifiers:
            resolved = self.resolveSpecifier(specifier, modulePath)
            if resolved is None:
                continue

            dependencies.push(resolved.identity)
            kinds[resolved.identity] = resolved.kind

            if resolved.kind is IdentityKind.SCRIPT:
                for entry in self._resolve(resolved.identity, innerStack):
                    dependencies.push(entry.identity)
                    kinds[entry.identity] = entry.kind

        entries = tuple(ResolvedSpecifier(identity, kinds[identity]) for identity in dependencies)
        logger.debug("Resolved %d dependencies for '%s'", len(entries), modulePath)
        return self._store(modulePath, entries)
