# assetgraph/assets/linearizer.py
from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any

from assetgraph.assets.index import DependencyIndex
from assetgraph.assets.ordering import RepositioningList
from assetgraph.assets.packages import PackageRegistry
from assetgraph.assets.resolver import DEFAULT_STYLESHEET_SUFFIXES, IdentityKind, ResolvedEntries
from assetgraph.core.paths import (
    SCRIPT_SUFFIX,
    hasSuffix,
    joinPaths,
    normalizeRelativePath,
    stripLeadingSlash,
)

logger = logging.getLogger(__name__)

__all__ = ["AssetManifest", "LoadOrderLinearizer", "splitDirectFiles"]



@dataclass(frozen=True)
class AssetManifest:
    """Scripts in emission order (dependencies first) and the unordered stylesheet set."""
    scripts: tuple[str, ...] = ()
    stylesheets: frozenset[str] = field(default_factory=frozenset)

    def toDict(self) -> dict[str, Any]:
        return {
            "scripts": list(self.scripts),
            "stylesheets": sorted(self.stylesheets),
        }



def splitDirectFiles(
    files: Iterable[str],
    *,
    stylesheetSuffixes: Sequence[str] = DEFAULT_STYLESHEET_SUFFIXES,
) -> tuple[list[str], list[str]]:
    """
    Partitions the files contributed by layouts/components/pages into
    (scripts, stylesheets). Anything that is neither is dropped.
    """
    scripts: list[str] = []
    styles: list[str] = []
    for file in files:
        if not file:
            continue
        if hasSuffix(file, tuple(stylesheetSuffixes)):
            styles.append(file)
        elif file.endswith(SCRIPT_SUFFIX):
            scripts.append(file)
    return scripts, styles



class LoadOrderLinearizer:
    """
    Merges the scripts referenced while rendering one response into a single
    list where every dependency comes before its dependents.

    The list is built dependents-first: direct scripts, then their module
    dependencies (pulled to the end when already present), then package
    assets. Reversing it at the end gives the emission order.
    """
    def __init__(
        self,
        *,
        index: DependencyIndex,
        packages: PackageRegistry,
        publicDir: str = "public",
        stylesheetSuffixes: Sequence[str] = DEFAULT_STYLESHEET_SUFFIXES,
    ) -> None:
        self.index = index
        self.packages = packages
        self.publicDir = normalizeRelativePath(publicDir)
        self.stylesheetSuffixes = tuple(stylesheetSuffixes)

    # ------------------------------------------------------------------ #
    # Path mapping
    # ------------------------------------------------------------------ #

    def urlFor(self, modulePath: str) -> str:
        """Module path -> served URL. Files under the public directory are served from "/"."""
        path = stripLeadingSlash(normalizeRelativePath(modulePath))
        if self.publicDir and path.startswith(self.publicDir + "/"):
            path = path[len(self.publicDir) + 1:]
        return "/" + path

    def entriesOf(self, script: str) -> ResolvedEntries:
        """
        Indexed dependencies of a direct script given as URL or module path, each
        with its kind. Public URLs ("/helpers.js") are looked up under the public
        directory too.
        """
        path = stripLeadingSlash(normalizeRelativePath(script))
        found = self.index.lookupEntries(path)
        if found is None and self.publicDir:
            found = self.index.lookupEntries(joinPaths(self.publicDir, path))
        if found is None:
            logger.debug("Script '%s' isn't indexed; treating it as dependency-free", script)
            return ()
        return found

    def dependenciesOf(self, script: str) -> tuple[str, ...]:
        return tuple(entry.identity for entry in self.entriesOf(script))

    # ------------------------------------------------------------------ #
    # Linearization
    # ------------------------------------------------------------------ #

    def linearize(self, directScripts: Iterable[str], directStylesheets: Iterable[str] = ()) -> AssetManifest:
        direct = [script for script in directScripts if script]
        
        scripts: RepositioningList[str] = RepositioningList(self.urlFor(script) for script in direct)
        stylesheets: set[str] = {self.urlFor(sheet) for sheet in directStylesheets if sheet}
        
        moduleDependencies: list[str] = []
        packageNames: RepositioningList[str] = RepositioningList()
        
        for script in direct:
            for entry in self.entriesOf(script):
                if entry.kind is IdentityKind.PACKAGE:
                    packageNames.push(entry.identity)
                elif entry.kind is IdentityKind.STYLESHEET:
                    stylesheets.add(self.urlFor(entry.identity))
                else:
                    moduleDependencies.append(self.urlFor(entry.identity))
        
        for dependency in moduleDependencies:
            scripts.push(dependency)
        
        for packageName in packageNames:
            assets = self.packages.assetsFor(packageName)
            if assets is None:
                logger.warning(
                    "The package '%s' doesn't have any associated file; nothing will be sent for it",
                    packageName,
                )
                continue
            for asset in assets:
                if hasSuffix(asset, self.stylesheetSuffixes):
                    stylesheets.add(asset)
                else:
                    scripts.push(asset)
        
        return AssetManifest(scripts=scripts.reversedTuple(), stylesheets=frozenset(stylesheets))

    def linearizeFiles(self, files: Iterable[str]) -> AssetManifest:
        """linearize() over a mixed bag of script and stylesheet files."""
        scripts, styles = splitDirectFiles(files, stylesheetSuffixes=self.stylesheetSuffixes)
        return self.linearize(scripts, styles)
