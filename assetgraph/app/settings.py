# assetgraph/app/settings.py
from __future__ import annotations
import copy
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any, cast

import json5
from pydantic import JsonValue

from assetgraph.core.dictpath import getByPath
from assetgraph.core.errors import ConfigLoadError

logger = logging.getLogger(__name__)

__all__ = [
    "SETTINGS_FILE_NAME", "DEFAULT_SETTINGS", "loadSettings",
    "deepMerge", "setting", "settingBool",
]


SETTINGS_FILE_NAME = "assetgraph.json5"

DEFAULT_SETTINGS: dict[str, JsonValue] = {
    "__source": "ASSETGRAPH_DEFAULTS",
    "paths": {
        "src": "src",          # scanned for script modules
        "public": "public",    # served from "/"
        "modules": "modules",  # URL prefix of package assets
    },
    "files": {
        "tsconfig": "tsconfig.json",
        "packages": "packages-files.json5",
    },
    "index": {"warmupWorkers": 1},
    "assets": {"stylesheetExtensions": [".css"]},
    "logging": {
        "devMode": True,
        "file": None,
        "suppressRecurringMessages": {"enabled": False, "windowSeconds": 60, "maxPerWindow": 5, "summaryLevel": "INFO"},
    },
}



def deepMerge(first: JsonValue, second: JsonValue) -> JsonValue:
    """
    Returns a new JsonValue where keys from `second` override/extend `first`.
    Only merges recursively when BOTH sides are JSON objects (dicts).
    For all other JSON types (lists, strings, numbers, booleans, null),
    the right-hand value `second` replaces `first`.
    """
    if isinstance(first, dict) and isinstance(second, dict):
        out: dict[str, JsonValue] = {}
        for key, value in first.items():
            out[key] = cast(JsonValue, value)
        for key, value in second.items():
            if key in out:
                out[key] = deepMerge(out[key], cast(JsonValue, value))
            else:
                out[key] = cast(JsonValue, value)
        return cast(JsonValue, out)
    
    return cast(JsonValue, second)



def loadSettings(projectRoot: Path, overrides: Mapping[str, Any] | None = None) -> dict[str, Any]:
    """
    Merges, in order: built-in defaults, `<projectRoot>/assetgraph.json5` (optional),
    `overrides`. A settings file that isn't a JSON5 object raises ConfigLoadError.
    """
    merged: JsonValue = copy.deepcopy(DEFAULT_SETTINGS)
    
    filePath = Path(projectRoot) / SETTINGS_FILE_NAME
    if filePath.is_file():
        try:
            fromFile = json5.loads(filePath.read_text(encoding="utf-8"))
        except (OSError, ValueError) as err:
            raise ConfigLoadError(str(filePath), str(err)) from err
        if not isinstance(fromFile, dict):
            raise ConfigLoadError(str(filePath), "expected an object at the top level")
        merged = deepMerge(merged, fromFile)
    else:
        logger.debug("No '%s' in '%s'; using defaults", SETTINGS_FILE_NAME, projectRoot)
    
    if overrides:
        merged = deepMerge(merged, dict(overrides))
    return cast(dict[str, Any], merged)



def setting(settings: Mapping[str, Any], path: str, default: Any = None) -> Any:
    """Returns value at dotted `path`, or `default` if missing."""
    val = getByPath(settings, path)
    return default if val is None else val



def settingBool(settings: Mapping[str, Any], path: str, default: bool = False) -> bool:
    val = getByPath(settings, path)
    if isinstance(val, bool):
        return val
    if val is None:
        return default
    return bool(val)
