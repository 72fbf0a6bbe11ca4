# assetgraph/core/errors.py
from __future__ import annotations

from collections.abc import Sequence

__all__ = [
    "AssetGraphError",
    "FatalStartupError",
    "ModuleReadError",
    "DependencyCycleError",
    "ConfigLoadError",
]



class AssetGraphError(Exception):
    """Base class for every error raised by the asset resolver."""
    pass



class FatalStartupError(AssetGraphError):
    """
    The asset graph could not be built. Raised only while the process warms up;
    the service must refuse to start rather than serve pages with missing assets.
    """
    pass



class ModuleReadError(FatalStartupError):
    def __init__(self, modulePath: str, filePath: str, reason: str = "") -> None:
        message = f"Couldn't read module '{modulePath}' from '{filePath}'"
        if reason:
            message += f": {reason}"
        super().__init__(message)
        self.modulePath = modulePath
        self.filePath = filePath



class DependencyCycleError(FatalStartupError):
    def __init__(self, cycle: Sequence[str]) -> None:
        super().__init__("Cyclic script imports: " + " -> ".join(cycle))
        self.cycle: tuple[str, ...] = tuple(cycle)



class ConfigLoadError(FatalStartupError):
    def __init__(self, filePath: str, reason: str) -> None:
        super().__init__(f"'{filePath}' seems to have an invalid configuration: {reason}")
        self.filePath = filePath
