"""
Health endpoint reporting whether the profile store is reachable.
"""

from typing import Dict

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from profile_api.app.core.db import ping


router = APIRouter()


@router.get("", response_model=Dict[str, str])
async def health():
    if await ping():
        return {"status": "ok", "store": "up"}
    return JSONResponse(status_code=503, content={"status": "degraded", "store": "down"})
