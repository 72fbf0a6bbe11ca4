# assetgraph/app/factory.py
from __future__ import annotations
import logging
import uuid
from collections.abc import AsyncIterator, Mapping, Sequence
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

from fastapi import APIRouter, FastAPI, Request

from assetgraph.app.context import AssetContext, bootstrapAssetContext
from assetgraph.app.settings import loadSettings
from assetgraph.core.logging import clearLogContext, configureLogging, setLogContext

logger = logging.getLogger(__name__)



def createApp(
    projectRoot: Path | str = ".",
    *,
    settings: Mapping[str, Any] | None = None,
    assets: AssetContext | None = None,
    extraRouters: Sequence[APIRouter] = (),
    setupLogging: bool = True,
) -> FastAPI:
    """
    Builds the asset graph (fail-fast) and the FastAPI app serving it.

    A prebuilt `assets` context skips the startup phase, which is handy for tests
    and for hosts that build the context themselves.
    """
    if assets is None:
        root = Path(projectRoot).resolve()
        settings = settings if settings is not None else loadSettings(root)
        if setupLogging:
            configureLogging(settings)
        # Raises FatalStartupError on a broken asset graph
        assets = bootstrapAssetContext(root, settings=settings)
    elif setupLogging:
        configureLogging(assets.settings)

    @asynccontextmanager
    async def life(app: FastAPI) -> AsyncIterator[None]:
        logger.info("Serving asset manifests for '%s'", assets.projectRoot)
        yield
        logger.info("Asset server shutting down")

    app = FastAPI(lifespan=life)
    app.state.assets = assets

    @app.middleware("http")
    async def requestLogContext(request: Request, callNext):
        requestId = request.headers.get("x-request-id") or uuid.uuid4().hex[:12]
        setLogContext(requestId=requestId, path=request.url.path)
        try:
            response = await callNext(request)
            response.headers["x-request-id"] = requestId
            return response
        finally:
            clearLogContext()

    from assetgraph.app.web import router as webRouter
    app.include_router(webRouter)

    for router in extraRouters:
        app.include_router(router)

    logger.info("Asset server initialized with %d extra router(s)", len(extraRouters))
    return app
