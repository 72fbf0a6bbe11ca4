# assetgraph/__main__.py
from __future__ import annotations

from assetgraph.cli import main

raise SystemExit(main())
