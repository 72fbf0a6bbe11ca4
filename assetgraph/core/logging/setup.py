# assetgraph/core/logging/setup.py
from __future__ import annotations
import logging
import logging.handlers
from collections.abc import Mapping
from typing import Any

from assetgraph.core.dictpath import getByPath
from .formatters import DevFormatter, JsonFormatter
from .filters import RecurringSuppressFilter

__all__ = [
    "NO_PROPAGATE",
    "configureLogging",
]



# Disable propagation from common libraries
NO_PROPAGATE = [
    "uvicorn", "uvicorn.access", "uvicorn.error",
    "fastapi", "concurrent.futures", "asyncio",
]



def configureLogging(settings: Mapping[str, Any] | None = None) -> None:
    """
    Initiate the global logging configuration from project settings.

    Dev (logging.devMode, default):
      - Console pretty logs (DEBUG)
      - JSON file log (DEBUG) when logging.file is set
    
    Prod:
      - Console INFO
      - JSON file logs INFO with rotation
      - Optional recurring suppression (toggle)
    """
    settings = settings or {}
    devMode = bool(getByPath(settings, "logging.devMode", True))
    rootLevel = logging.DEBUG if devMode else logging.INFO

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(rootLevel)
    
    for name in NO_PROPAGATE:
        logging.getLogger(name).propagate = False

    handlers: list[logging.Handler] = []

    consoleHandler = logging.StreamHandler()
    consoleHandler.setLevel(rootLevel)
    consoleHandler.setFormatter(DevFormatter())
    handlers.append(consoleHandler)

    logFile = getByPath(settings, "logging.file")
    if logFile:
        fileHandler = logging.handlers.RotatingFileHandler(
            str(logFile),
            maxBytes=10 * 1024 * 1024,
            backupCount=5,
            encoding="utf-8"
        )
        fileHandler.setLevel(rootLevel)
        fileHandler.setFormatter(JsonFormatter())
        handlers.append(fileHandler)

    # Optional recurring suppression (disabled by default)
    if bool(getByPath(settings, "logging.suppressRecurringMessages.enabled", False)):
        # Resolve summaryLevel string like "INFO" → logging.INFO, fallback safe
        levelName = str(getByPath(settings, "logging.suppressRecurringMessages.summaryLevel", "INFO")).upper()
        summaryLevel = getattr(logging, levelName, logging.INFO)

        suppressFilter = RecurringSuppressFilter(
            windowSeconds=int(getByPath(settings, "logging.suppressRecurringMessages.windowSeconds", 60)),
            maxPerWindow=int(getByPath(settings, "logging.suppressRecurringMessages.maxPerWindow", 5)),
            summaryLevel=summaryLevel,
        )
        for handler in handlers:
            handler.addFilter(suppressFilter)

    for handler in handlers:
        root.addHandler(handler)

    # Per-logger tweaks (reduce noise)
    logging.getLogger("uvicorn").setLevel(logging.INFO)
    logging.getLogger("fastapi").setLevel(logging.INFO)
