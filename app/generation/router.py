# FILE: app/generation/router.py
"""
Site generation endpoints.

- POST /api/websites/generate         buffered, always returns HTML
                                      (fallback page when the provider fails)
- POST /api/websites/generate-stream  SSE progress events, see events.py
- POST /api/websites/generate-text    single-shot generation, no requirement stage

Empty prompts are rejected with 400 before any provider is called.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse
from pydantic import BaseModel, Field

from app.dependencies import get_orchestrator
from app.generation.events import start_channel
from app.generation.orchestrator import GenerationOrchestrator, GenerationResult, require_prompt

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/websites", tags=["generation"])


class GenerateRequest(BaseModel):
    prompt: Optional[str] = Field(None, description="What the site should be about")
    provider: Optional[str] = Field(None, description="Provider id for this request only")


def _result_body(result: GenerationResult) -> dict:
    return {
        "success": True,
        "html": result.html,
        "degraded": result.degraded,
        "provider": result.provider_id,
        "message": "网站生成失败，已使用默认模板" if result.degraded else "网站生成成功",
    }


@router.post("/generate")
async def generate_website(
    request: GenerateRequest,
    orchestrator: GenerationOrchestrator = Depends(get_orchestrator),
):
    prompt = require_prompt(request.prompt)
    result = await orchestrator.generate(prompt, provider_id=request.provider)
    return _result_body(result)


@router.post("/generate-text")
async def generate_website_single_shot(
    request: GenerateRequest,
    orchestrator: GenerationOrchestrator = Depends(get_orchestrator),
):
    prompt = require_prompt(request.prompt)
    result = await orchestrator.generate_text(prompt, provider_id=request.provider)
    return _result_body(result)


@router.post("/generate-stream")
async def generate_website_stream(
    request: GenerateRequest,
    orchestrator: GenerationOrchestrator = Depends(get_orchestrator),
):
    """
    Stream generation progress as Server-Sent Events.

    The generation runs in a background task; if the client goes away the
    remaining events are dropped but the task is allowed to finish.
    """
    prompt = require_prompt(request.prompt)
    logger.info("[generate] Stream requested (provider=%s)", request.provider or "current")
    channel = start_channel(orchestrator.stream(prompt, provider_id=request.provider))
    return StreamingResponse(
        channel.frames(),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
    )
