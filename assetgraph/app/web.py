# assetgraph/app/web.py
from __future__ import annotations

import time

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from assetgraph.app.context import AssetContext, getAssetContext

router = APIRouter()



class ManifestRequest(BaseModel):
    """Files contributed by the layouts/components/page of one response, duplicates allowed."""
    files: list[str] = Field(default_factory=list)



@router.get("/health")
async def health():
    return {"ok": True, "ts": int(time.time() * 1000)}



@router.post("/assets/manifest")
def buildManifest(body: ManifestRequest, assets: AssetContext = Depends(getAssetContext)) -> dict:
    return assets.manifestFor(body.files).toDict()



@router.get("/assets/dependencies/{modulePath:path}")
def moduleDependencies(modulePath: str, assets: AssetContext = Depends(getAssetContext)) -> dict:
    dependencies = assets.index.lookup(modulePath)
    if dependencies is None:
        raise HTTPException(status_code=404, detail=f"Module '{modulePath}' isn't indexed.")
    return {
        "module": assets.index.keyFor(modulePath),
        "dependencies": list(dependencies),
    }



@router.get("/assets/index")
def dependencyIndex(assets: AssetContext = Depends(getAssetContext)) -> dict:
    snapshot = assets.index.snapshot()
    return {
        "count": len(snapshot),
        "modules": {modulePath: list(deps) for modulePath, deps in sorted(snapshot.items())},
    }
