# FILE: app/providers/router.py
"""
Model selection endpoints.

- GET  /api/websites/models/available - enabled providers with credential status
- GET  /api/websites/models/current   - the current provider
- POST /api/websites/models/switch    - change the current provider
"""
import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from app.dependencies import get_registry
from app.providers.errors import ProviderUnavailableError
from app.providers.registry import ProviderRegistry

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/websites/models", tags=["models"])


class SwitchModelRequest(BaseModel):
    provider: str = Field(..., description="Provider id, e.g. qwen3, doubao, zhipu")


@router.get("/available")
async def list_available_models(registry: ProviderRegistry = Depends(get_registry)):
    return {
        "success": True,
        "models": [d.to_dict() for d in registry.list_available()],
    }


@router.get("/current")
async def get_current_model(registry: ProviderRegistry = Depends(get_registry)):
    try:
        descriptor = registry.current()
    except ProviderUnavailableError as e:
        return JSONResponse(status_code=503, content={"success": False, "error": str(e)})
    return {"success": True, "model": descriptor.to_dict()}


@router.post("/switch")
async def switch_model(
    request: SwitchModelRequest,
    registry: ProviderRegistry = Depends(get_registry),
):
    """
    Switch the current provider.

    Unknown ids are rejected (success=false, current unchanged). A known id
    without an API key is still selected but reported with success=false.
    """
    result = registry.switch_current(request.provider.strip())
    if not result.ok:
        logger.info("[models] Switch to %s: %s", request.provider, result.message)
    return result.to_dict()
