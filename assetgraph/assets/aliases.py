# assetgraph/assets/aliases.py
from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path

import json5
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from assetgraph.core.errors import ConfigLoadError
from assetgraph.core.paths import (
    joinPaths,
    normalizeRelativePath,
    toScriptModulePath,
    toSourcePath,
)

logger = logging.getLogger(__name__)

__all__ = ["CompilerOptions", "TsConfig", "AliasTable", "loadAliasTable"]



class CompilerOptions(BaseModel):
    model_config = ConfigDict(extra="ignore")

    baseUrl: str | None = None
    paths: dict[str, list[str]] | None = None



class TsConfig(BaseModel):
    """The part of `tsconfig.json` the resolver cares about."""
    model_config = ConfigDict(extra="ignore")

    compilerOptions: CompilerOptions = Field(default_factory=CompilerOptions)



def _stripWildcard(value: str) -> str:
    return value[:-2] if value.endswith("/*") else value



@dataclass(frozen=True)
class AliasTable:
    """
    Path-alias prefixes (e.g. "~" -> ["src"]) with their candidate roots.

    `entries` keeps registration order; `prefixes()` is sorted longest first so
    "~/utils" is tried before "~". Ties keep registration order.
    """
    entries: Mapping[str, tuple[str, ...]] = field(default_factory=dict)
    projectRoot: Path = field(default_factory=Path.cwd)
    _prefixes: tuple[str, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        frozenEntries = {prefix: tuple(roots) for prefix, roots in self.entries.items()}
        object.__setattr__(self, "entries", frozenEntries)
        # sorted() is stable, so equal lengths keep registration order
        object.__setattr__(self, "_prefixes", tuple(sorted(frozenEntries, key=len, reverse=True)))

    @classmethod
    def fromPaths(
        cls,
        paths: Mapping[str, Sequence[str]],
        *,
        projectRoot: Path,
        baseUrl: str | None = None,
    ) -> "AliasTable":
        """Builds a table from tsconfig-style `paths` ("~/*": ["./src/*"])."""
        entries: dict[str, tuple[str, ...]] = {}
        for key, values in paths.items():
            prefix = _stripWildcard(key)
            if not prefix:
                logger.warning("Ignoring empty path alias '%s'", key)
                continue
            roots = tuple(
                joinPaths(baseUrl or "", _stripWildcard(value))
                for value in values
            )
            if not roots:
                logger.warning("Path alias '%s' has no target directories; ignoring it", key)
                continue
            entries[prefix] = roots
        return cls(entries=entries, projectRoot=projectRoot)

    def prefixes(self) -> tuple[str, ...]:
        return self._prefixes

    def matchPrefix(self, specifier: str) -> str | None:
        """Returns the longest registered prefix of `specifier`, if any."""
        return next((prefix for prefix in self._prefixes if specifier.startswith(prefix)), None)

    def rootsFor(self, prefix: str) -> tuple[str, ...]:
        return self.entries.get(prefix, ())

    def _exists(self, modulePath: str) -> bool:
        return (
            (self.projectRoot / modulePath).is_file()
            or (self.projectRoot / toSourcePath(modulePath)).is_file()
        )

    def resolve(self, specifier: str) -> str | None:
        """
        Resolves an aliased specifier to a script module path.

        With a single root the path is returned without checking the disk. With
        several roots the first one (registration order) holding the file wins;
        None when no root has it or no prefix matches.
        """
        prefix = self.matchPrefix(specifier)
        if prefix is None:
            return None
        
        roots = self.entries[prefix]
        remainder = specifier[len(prefix):]
        
        if len(roots) == 1:
            return toScriptModulePath(joinPaths(roots[0], remainder))
        
        for root in roots:
            candidate = toScriptModulePath(joinPaths(root, remainder))
            if self._exists(candidate):
                return candidate
        return None

    def __len__(self) -> int:
        return len(self.entries)



def loadAliasTable(tsconfigPath: Path, *, projectRoot: Path) -> AliasTable:
    """
    Reads `compilerOptions.paths` from a tsconfig file (comments and trailing
    commas are fine). A missing file yields an empty table with a warning; a
    broken one raises ConfigLoadError.
    """
    try:
        text = tsconfigPath.read_text(encoding="utf-8")
    except FileNotFoundError:
        logger.warning("No tsconfig at '%s'; path aliases disabled", tsconfigPath)
        return AliasTable(projectRoot=projectRoot)
    except OSError as err:
        raise ConfigLoadError(str(tsconfigPath), str(err)) from err
    
    try:
        raw = json5.loads(text)
        tsconfig = TsConfig.model_validate(raw)
    except (ValueError, ValidationError) as err:
        raise ConfigLoadError(str(tsconfigPath), str(err)) from err
    
    options = tsconfig.compilerOptions
    baseUrl = normalizeRelativePath(options.baseUrl) if options.baseUrl else None
    table = AliasTable.fromPaths(options.paths or {}, projectRoot=projectRoot, baseUrl=baseUrl)
    logger.info("Loaded %d path alias(es) from '%s'", len(table), tsconfigPath)
    return table
