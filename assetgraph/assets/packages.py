# assetgraph/assets/packages.py
from __future__ import annotations

import logging
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import TypeAlias

import json5
from pydantic import RootModel, ValidationError

from assetgraph.core.errors import ConfigLoadError
from assetgraph.core.paths import joinPaths

logger = logging.getLogger(__name__)

__all__ = [
    "PackageAssets",
    "PackagesManifest",
    "PackageRegistry",
    "assetUrlFor",
    "loadPackageRegistry",
]

# A package is bundled as one file or as an ordered list of files
PackageAssets: TypeAlias = str | tuple[str, ...]

_REMOTE_PREFIXES = ("https://", "http://", "//")



class PackagesManifest(RootModel[dict[str, str | list[str]]]):
    """Shape of the package manifest: `{"htmx.org": "htmx.min.js", "x": ["x.js", "x.css"]}`."""
    pass



def assetUrlFor(package: str, file: str, *, modulesDir: str) -> str:
    """
    Maps a manifest entry to the URL it is served from.

    Remote URLs are kept verbatim; local files land under
    `/<modulesDir>/<package>/<basename>`.
    """
    if file.startswith(_REMOTE_PREFIXES):
        return file
    return "/" + joinPaths(modulesDir, package, PurePosixPath(file.replace("\\", "/")).name)



@dataclass(frozen=True)
class PackageRegistry:
    packages: Mapping[str, PackageAssets] = field(default_factory=dict)

    @classmethod
    def fromManifest(cls, raw: Mapping[str, str | list[str]], *, modulesDir: str) -> "PackageRegistry":
        packages: dict[str, PackageAssets] = {}
        for name, files in raw.items():
            if isinstance(files, str):
                packages[name] = assetUrlFor(name, files, modulesDir=modulesDir)
            else:
                packages[name] = tuple(assetUrlFor(name, file, modulesDir=modulesDir) for file in files)
        return cls(packages=packages)

    def get(self, name: str) -> PackageAssets | None:
        """Returns the single asset or the ordered asset tuple registered for `name`."""
        return self.packages.get(name)

    def assetsFor(self, name: str) -> tuple[str, ...] | None:
        """Same as get() with single assets wrapped in a 1-tuple. None for unknown packages."""
        entry = self.packages.get(name)
        if entry is None:
            return None
        if isinstance(entry, str):
            return (entry,)
        return entry

    def __contains__(self, name: object) -> bool:
        return name in self.packages

    def __len__(self) -> int:
        return len(self.packages)



def _parseManifestText(path: Path, text: str) -> object:
    if path.suffix.lower() == ".toml":
        return tomllib.loads(text)
    return json5.loads(text)



def loadPackageRegistry(manifestPath: Path, *, modulesDir: str) -> PackageRegistry:
    """
    Loads the package manifest (json5, or TOML when the file ends in `.toml`).
    The manifest is required: a missing or malformed file raises ConfigLoadError.
    """
    try:
        text = manifestPath.read_text(encoding="utf-8")
    except FileNotFoundError as err:
        raise ConfigLoadError(str(manifestPath), "file doesn't exist") from err
    except OSError as err:
        raise ConfigLoadError(str(manifestPath), str(err)) from err
    
    try:
        manifest = PackagesManifest.model_validate(_parseManifestText(manifestPath, text))
    except (ValueError, tomllib.TOMLDecodeError, ValidationError) as err:
        raise ConfigLoadError(str(manifestPath), str(err)) from err
    
    registry = PackageRegistry.fromManifest(manifest.root, modulesDir=modulesDir)
    logger.info("Loaded %d package(s) from '%s'", len(registry), manifestPath)
    return registry
