# assetgraph/server.py
from __future__ import annotations

import logging
import os

from assetgraph.app.factory import createApp

# Basic logging setup, before project settings can tell us how to log
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)
logger.info("Basic logging initiated...")


app = createApp(os.environ.get("ASSETGRAPH_ROOT", "."))
