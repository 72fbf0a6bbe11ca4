# assetgraph/cli.py
from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from assetgraph.app.context import AssetContext, bootstrapAssetContext
from assetgraph.app.settings import loadSettings
from assetgraph.core.errors import AssetGraphError
from assetgraph.core.jsonutils import safeJsonDumps, serializeError
from assetgraph.core.logging import configureLogging

logger = logging.getLogger(__name__)



def _buildParser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="assetgraph",
        description="Resolve script dependencies and compute per-page asset load order.",
    )
    parser.add_argument("--root", default=".", help="Project root (default: current directory)")
    parser.add_argument("--indent", type=int, default=None, help="Pretty-print JSON output")

    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("index", help="Print the dependency list of every indexed module")

    deps = sub.add_parser("deps", help="Print the dependency list of one module")
    deps.add_argument("module", help="Module path, e.g. src/pages/home/script.js")

    manifest = sub.add_parser("manifest", help="Linearize a bag of direct script/stylesheet files")
    manifest.add_argument("files", nargs="+", help="Files referenced by the rendered page")

    serve = sub.add_parser("serve", help="Run the HTTP API with uvicorn")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)

    return parser



def _emit(payload: Any, indent: int | None) -> None:
    sys.stdout.write(safeJsonDumps(payload, indent=indent) + "\n")



def _runCommand(args: argparse.Namespace, assets: AssetContext) -> dict[str, Any]:
    if args.command == "index":
        snapshot = assets.index.snapshot()
        return {
            "ok": True,
            "count": len(snapshot),
            "modules": {modulePath: list(deps) for modulePath, deps in sorted(snapshot.items())},
        }
    
    if args.command == "deps":
        return {
            "ok": True,
            "module": assets.index.keyFor(args.module),
            "dependencies": list(assets.index.get(args.module)),
        }
    
    if args.command == "manifest":
        return {"ok": True, **assets.manifestFor(args.files).toDict()}
    
    raise ValueError(f"Unknown command '{args.command}'")



def main(argv: Sequence[str] | None = None) -> int:
    args = _buildParser().parse_args(argv)
    root = Path(args.root).resolve()

    try:
        settings = loadSettings(root)
        configureLogging(settings)
        
        if args.command == "serve":
            import uvicorn
            from assetgraph.app.factory import createApp
            
            app = createApp(root, settings=settings, setupLogging=False)
            uvicorn.run(app, host=args.host, port=args.port)
            return 0
        
        assets = bootstrapAssetContext(root, settings=settings)
        _emit(_runCommand(args, assets), args.indent)
        return 0
    except AssetGraphError as err:
        logger.error("%s", err)
        _emit(serializeError(err), args.indent)
        return 1



if __name__ == "__main__":
    raise SystemExit(main())
