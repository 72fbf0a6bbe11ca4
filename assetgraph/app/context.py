# assetgraph/app/context.py
from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, cast

from fastapi import Request

from assetgraph.app.settings import loadSettings, setting
from assetgraph.assets.aliases import AliasTable, loadAliasTable
from assetgraph.assets.index import DependencyIndex, discoverScripts
from assetgraph.assets.linearizer import AssetManifest, LoadOrderLinearizer
from assetgraph.assets.packages import PackageRegistry, loadPackageRegistry
from assetgraph.assets.resolver import ModuleDependencyResolver

logger = logging.getLogger(__name__)

__all__ = ["AssetContext", "bootstrapAssetContext", "getAssetContext"]



@dataclass(frozen=True)
class AssetContext:
    """
    Everything the request path needs, built once at startup and read-only afterwards.
    """
    projectRoot: Path
    settings: Mapping[str, Any]
    aliases: AliasTable
    packages: PackageRegistry
    index: DependencyIndex
    linearizer: LoadOrderLinearizer
    modules: tuple[str, ...]

    def manifestFor(self, files: Iterable[str]) -> AssetManifest:
        return self.linearizer.linearizeFiles(files)

    def reindex(self) -> int:
        """Re-reads every script module and swaps the new index in."""
        return self.index.rebuild(discoverScripts(self.projectRoot, str(setting(self.settings, "paths.src", "src"))))



def bootstrapAssetContext(
    projectRoot: Path | str,
    *,
    settings: Mapping[str, Any] | None = None,
) -> AssetContext:
    """
    Startup phase: loads aliases and packages, discovers every script module and
    resolves all of them. Any FatalStartupError propagates, the service must not
    start with a broken asset graph.
    """
    root = Path(projectRoot).resolve()
    settings = settings if settings is not None else loadSettings(root)
    
    stylesheetSuffixes = tuple(setting(settings, "assets.stylesheetExtensions", [".css"]))
    
    aliases = loadAliasTable(root / str(setting(settings, "files.tsconfig", "tsconfig.json")), projectRoot=root)
    packages = loadPackageRegistry(
        root / str(setting(settings, "files.packages", "packages-files.json5")),
        modulesDir=str(setting(settings, "paths.modules", "modules")),
    )
    
    resolver = ModuleDependencyResolver(projectRoot=root, aliases=aliases, stylesheetSuffixes=stylesheetSuffixes)
    index = DependencyIndex(resolver)
    
    modules = tuple(discoverScripts(root, str(setting(settings, "paths.src", "src"))))
    index.warm(modules, workers=int(setting(settings, "index.warmupWorkers", 1)))
    
    linearizer = LoadOrderLinearizer(
        index=index,
        packages=packages,
        publicDir=str(setting(settings, "paths.public", "public")),
        stylesheetSuffixes=stylesheetSuffixes,
    )
    
    logger.info(
        "Asset graph ready: %d module(s), %d alias(es), %d package(s)",
        len(index),
        len(aliases),
        len(packages),
    )
    return AssetContext(
        projectRoot=root,
        settings=settings,
        aliases=aliases,
        packages=packages,
        index=index,
        linearizer=linearizer,
        modules=modules,
    )



def getAssetContext(request: Request) -> AssetContext:
    """FastAPI dependency handing the startup-built context to handlers."""
    return cast(AssetContext, request.app.state.assets)
