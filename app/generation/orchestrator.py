# FILE: app/generation/orchestrator.py
"""
Site Generation Orchestrator

Two-stage pipeline per request:

    START -> REQUIREMENT_DOC -> HTML_SYNTHESIS -> COMPLETE | FAILED

Stage 1 turns the user prompt into a requirement document (opaque text).
Stage 2 turns that document into a full HTML page under the fixed visual
contract, then markdown fences are stripped.

Two presentation modes share the pipeline but differ on failure:
- generate(): buffered. Provider failures are replaced by the fallback
  template and reported through GenerationResult.degraded.
- stream(): progressive StreamEvents. Provider failures become one error
  event; no fallback page is sent.

The provider is resolved once at the start of a request, so both stages hit
the same adapter even if the registry's current provider changes meanwhile.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import AsyncIterator, Optional

from app.exceptions import BadRequestError
from app.generation.events import StreamEvent, Step
from app.generation.templates import render_fallback_html, strip_markdown_fence
from app.providers.errors import MalformedResponseError, ProviderError
from app.providers.registry import ProviderRegistry

logger = logging.getLogger(__name__)

PREVIEW_CHARS = 200


class GenerationStage(str, Enum):
    START = "start"
    REQUIREMENT_DOC = "requirement_doc"
    HTML_SYNTHESIS = "html_synthesis"
    COMPLETE = "complete"
    FAILED = "failed"


@dataclass
class GenerationResult:
    html: str
    degraded: bool = False
    provider_id: Optional[str] = None
    requirement_doc: Optional[str] = None
    stage: GenerationStage = GenerationStage.COMPLETE
    failed_stage: Optional[GenerationStage] = None
    error: Optional[str] = None


def require_prompt(prompt: Optional[str]) -> str:
    if prompt is None or not str(prompt).strip():
        raise BadRequestError("Prompt is required")
    return str(prompt).strip()


def preview(text: str, limit: int = PREVIEW_CHARS) -> str:
    if len(text) <= limit:
        return text
    return text[:limit] + "..."


def _finalize_html(raw: str) -> str:
    html = strip_markdown_fence(raw or "")
    if not html.strip():
        raise MalformedResponseError("Empty HTML in provider response", raw=raw)
    return html


class GenerationOrchestrator:
    def __init__(self, registry: ProviderRegistry, preview_chars: int = PREVIEW_CHARS):
        self.registry = registry
        self.preview_chars = preview_chars

    # =========================================================================
    # BUFFERED
    # =========================================================================

    async def generate(self, prompt: str, provider_id: Optional[str] = None) -> GenerationResult:
        """Run both stages; on provider failure return the fallback page (degraded)."""
        prompt = require_prompt(prompt)
        stage = GenerationStage.START
        resolved_id = provider_id
        requirement_doc: Optional[str] = None

        try:
            descriptor, adapter = self.registry.resolve(provider_id)
            resolved_id = descriptor.id

            stage = GenerationStage.REQUIREMENT_DOC
            logger.info("[orchestrator] %s: requirement doc (prompt %d chars)", resolved_id, len(prompt))
            requirement_doc = await adapter.generate_requirement_doc(prompt)

            stage = GenerationStage.HTML_SYNTHESIS
            logger.info("[orchestrator] %s: html synthesis (doc %d chars)", resolved_id, len(requirement_doc))
            raw = await adapter.generate_html_from_requirement(requirement_doc)
            html = _finalize_html(raw)
        except ProviderError as exc:
            logger.warning(
                "[orchestrator] %s failed at %s: %s; using fallback template",
                resolved_id,
                stage.value,
                exc,
            )
            return self._fallback(prompt, resolved_id, stage, exc, requirement_doc)
        except Exception as exc:
            logger.exception(
                "[orchestrator] %s crashed at %s; using fallback template",
                resolved_id,
                stage.value,
            )
            return self._fallback(prompt, resolved_id, stage, exc, requirement_doc)

        logger.info("[orchestrator] %s: complete (%d chars html)", resolved_id, len(html))
        return GenerationResult(
            html=html,
            provider_id=resolved_id,
            requirement_doc=requirement_doc,
        )

    async def generate_text(self, prompt: str, provider_id: Optional[str] = None) -> GenerationResult:
        """Single-shot generation without the requirement stage. Same fallback policy."""
        prompt = require_prompt(prompt)
        resolved_id = provider_id
        try:
            descriptor, adapter = self.registry.resolve(provider_id)
            resolved_id = descriptor.id
            html = _finalize_html(await adapter.generate_text(prompt))
        except ProviderError as exc:
            logger.warning("[orchestrator] %s single-shot failed: %s; using fallback template", resolved_id, exc)
            return self._fallback(prompt, resolved_id, GenerationStage.HTML_SYNTHESIS, exc)
        except Exception as exc:
            logger.exception("[orchestrator] %s single-shot crashed; using fallback template", resolved_id)
            return self._fallback(prompt, resolved_id, GenerationStage.HTML_SYNTHESIS, exc)
        return GenerationResult(html=html, provider_id=resolved_id)

    @staticmethod
    def _fallback(
        prompt: str,
        provider_id: Optional[str],
        failed_stage: GenerationStage,
        exc: BaseException,
        requirement_doc: Optional[str] = None,
    ) -> GenerationResult:
        return GenerationResult(
            html=render_fallback_html(prompt),
            degraded=True,
            provider_id=provider_id,
            requirement_doc=requirement_doc,
            stage=GenerationStage.FAILED,
            failed_stage=failed_stage,
            error=str(exc) or exc.__class__.__name__,
        )

    # =========================================================================
    # STREAMING
    # =========================================================================

    async def stream(self, prompt: str, provider_id: Optional[str] = None) -> AsyncIterator[StreamEvent]:
        """
        Yield lifecycle events for one generation. Never raises for provider
        or unexpected failures; those become a single error event.
        """
        prompt = require_prompt(prompt)
        stage = GenerationStage.START
        resolved_id = provider_id

        yield StreamEvent.info(Step.START, "开始生成网站...")
        try:
            descriptor, adapter = self.registry.resolve(provider_id)
            resolved_id = descriptor.id

            stage = GenerationStage.REQUIREMENT_DOC
            yield StreamEvent.info(
                Step.REQUIREMENT,
                f"正在使用 {descriptor.display_name} 分析需求并生成需求文档...",
            )
            requirement_doc = await adapter.generate_requirement_doc(prompt)
            yield StreamEvent.progress(
                Step.REQUIREMENT_COMPLETE,
                preview(requirement_doc, self.preview_chars),
            )

            stage = GenerationStage.HTML_SYNTHESIS
            yield StreamEvent.info(Step.HTML, "正在根据需求文档生成HTML代码...")
            html = _finalize_html(await adapter.generate_html_from_requirement(requirement_doc))
            yield StreamEvent.success(Step.COMPLETE, html)
            logger.info("[orchestrator] %s: stream complete (%d chars html)", resolved_id, len(html))
        except ProviderError as exc:
            logger.warning("[orchestrator] %s stream failed at %s: %s", resolved_id, stage.value, exc)
            yield StreamEvent.error(str(exc))
        except Exception as exc:
            logger.exception("[orchestrator] %s stream crashed at %s", resolved_id, stage.value)
            yield StreamEvent.error(str(exc) or exc.__class__.__name__)

        yield StreamEvent.info(Step.DONE, "生成流程结束")


__all__ = [
    "GenerationStage",
    "GenerationResult",
    "GenerationOrchestrator",
    "require_prompt",
    "preview",
    "PREVIEW_CHARS",
]
