# FILE: app/providers/adapters.py
"""
Provider adapters - one uniform capability surface per upstream LLM vendor.

Capabilities (all built on complete()):
- generate_text(prompt)                      single-shot HTML authoring
- generate_requirement_doc(prompt)           stage 1 of the site pipeline
- generate_html_from_requirement(doc)        stage 2 of the site pipeline

Transport is picked by AdapterKind:
- DASHSCOPE: Alibaba DashScope native API over httpx.
    body  {model, input: {messages}, parameters: {result_format: "message"}}
    text  output.choices[0].message.content
- OPENAI_COMPATIBLE: chat/completions endpoints (Doubao ark, Zhipu) through
    the openai SDK with a vendor base_url.
    text  choices[0].message.content

Adapters never retry. Network failures, non-2xx statuses and unparseable
bodies all surface as UpstreamError (MalformedResponseError for shape
failures) so callers need no vendor-specific handling.
"""
from __future__ import annotations

import logging
import time
from enum import Enum
from typing import Any, Dict, List, Optional

import httpx

from config.providers import DASHSCOPE_GENERATION_PATH, ProviderConfig, get_api_key
from app.generation import prompts
from app.providers.errors import (
    MalformedResponseError,
    MissingCredentialError,
    UpstreamError,
)

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 120


class AdapterKind(str, Enum):
    DASHSCOPE = "dashscope"
    OPENAI_COMPATIBLE = "openai_compatible"


def _now_ms() -> int:
    return int(time.time() * 1000)


def _build_messages(system_prompt: Optional[str], user_message: str) -> List[dict]:
    out: List[dict] = []
    if system_prompt:
        out.append({"role": "system", "content": system_prompt})
    out.append({"role": "user", "content": str(user_message)})
    return out


def _extract_dashscope_text(payload: Any) -> str:
    try:
        content = payload["output"]["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        content = None
    if not isinstance(content, str):
        raise MalformedResponseError("Invalid DashScope response format", raw=payload)
    return content


class ProviderAdapter:
    """
    Adapter for a single provider id.

    http_client is optional; when given it is reused for every call and never
    closed here (tests inject one backed by httpx.MockTransport).
    """

    def __init__(
        self,
        config: ProviderConfig,
        api_key: Optional[str],
        *,
        timeout_seconds: int = DEFAULT_TIMEOUT_SECONDS,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.config = config
        self.kind = AdapterKind(config.kind)
        self.model = config.model
        self.timeout_seconds = timeout_seconds
        self._api_key = api_key
        self._http_client = http_client

    @classmethod
    def from_config(
        cls,
        config: ProviderConfig,
        *,
        timeout_seconds: int = DEFAULT_TIMEOUT_SECONDS,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> "ProviderAdapter":
        """Build an adapter, failing fast when a required credential is absent."""
        api_key = get_api_key(config.provider_id)
        if api_key is None:
            if not config.credential_optional:
                raise MissingCredentialError(config.provider_id, config.env_key_name)
            logger.warning(
                "[provider] %s: %s not set; calls will fail until it is configured",
                config.provider_id,
                config.env_key_name,
            )
        return cls(config, api_key, timeout_seconds=timeout_seconds, http_client=http_client)

    @property
    def provider_id(self) -> str:
        return self.config.provider_id

    # =========================================================================
    # CAPABILITIES
    # =========================================================================

    async def generate_text(self, prompt: str) -> str:
        return await self.complete(prompts.TEXT_SYSTEM_PROMPT, prompt)

    async def generate_requirement_doc(self, prompt: str) -> str:
        return await self.complete(
            prompts.REQUIREMENT_SYSTEM_PROMPT,
            prompts.build_requirement_message(prompt),
        )

    async def generate_html_from_requirement(self, requirement_doc: str) -> str:
        return await self.complete(
            prompts.HTML_SYSTEM_PROMPT,
            prompts.build_html_message(requirement_doc),
        )

    # =========================================================================
    # TRANSPORT
    # =========================================================================

    async def complete(self, system_prompt: Optional[str], user_message: str) -> str:
        """Send one system+user exchange and return the first completion's text."""
        if not self._api_key:
            raise UpstreamError(
                f"{self.config.env_key_name} not set",
                provider_id=self.provider_id,
                code="MissingCredential",
            )

        messages = _build_messages(system_prompt, user_message)
        started = _now_ms()
        logger.info(
            "[provider] %s call model=%s kind=%s chars=%d",
            self.provider_id,
            self.model,
            self.kind.value,
            len(user_message),
        )

        if self.kind is AdapterKind.DASHSCOPE:
            text = await self._call_dashscope(messages)
        else:
            text = await self._call_openai_compatible(messages)

        logger.info(
            "[provider] %s ok in %dms (%d chars)",
            self.provider_id,
            _now_ms() - started,
            len(text),
        )
        return text

    async def _post(self, url: str, body: Dict[str, Any], headers: Dict[str, str]) -> httpx.Response:
        if self._http_client is not None:
            return await self._http_client.post(url, json=body, headers=headers)
        timeout = httpx.Timeout(self.timeout_seconds)
        async with httpx.AsyncClient(timeout=timeout) as client:
            return await client.post(url, json=body, headers=headers)

    async def _call_dashscope(self, messages: List[dict]) -> str:
        url = self.config.base_url.rstrip("/") + DASHSCOPE_GENERATION_PATH
        body = {
            "model": self.model,
            "input": {"messages": messages},
            "parameters": {"result_format": "message"},
        }
        headers = {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }

        try:
            resp = await self._post(url, body, headers)
        except httpx.HTTPError as exc:
            raise UpstreamError(
                f"DashScope request failed: {exc}",
                provider_id=self.provider_id,
            ) from exc

        try:
            payload = resp.json()
        except ValueError:
            payload = None

        if resp.status_code >= 400:
            code = payload.get("code") if isinstance(payload, dict) else None
            message = payload.get("message") if isinstance(payload, dict) else None
            raise UpstreamError(
                message or f"DashScope returned HTTP {resp.status_code}",
                provider_id=self.provider_id,
                status_code=resp.status_code,
                code=code,
            )

        if payload is None:
            raise MalformedResponseError(
                "Response parsing error",
                raw=resp.text,
                provider_id=self.provider_id,
                status_code=resp.status_code,
            )

        try:
            return _extract_dashscope_text(payload)
        except MalformedResponseError as exc:
            exc.provider_id = self.provider_id
            exc.status_code = resp.status_code
            raise

    async def _call_openai_compatible(self, messages: List[dict]) -> str:
        from openai import APIConnectionError, APIError, APIStatusError, AsyncOpenAI

        client = AsyncOpenAI(
            api_key=self._api_key,
            base_url=self.config.base_url,
            timeout=self.timeout_seconds,
            max_retries=0,
            http_client=self._http_client,
        )
        try:
            resp = await client.chat.completions.create(model=self.model, messages=messages)
        except APIStatusError as exc:
            body = exc.body if isinstance(exc.body, dict) else {}
            raise UpstreamError(
                exc.message,
                provider_id=self.provider_id,
                status_code=exc.status_code,
                code=body.get("code") or getattr(exc, "code", None),
            ) from exc
        except APIConnectionError as exc:
            raise UpstreamError(
                f"{self.config.vendor_name} request failed: {exc}",
                provider_id=self.provider_id,
            ) from exc
        except APIError as exc:
            raise UpstreamError(str(exc), provider_id=self.provider_id) from exc
        finally:
            if self._http_client is None:
                await client.close()

        choices = getattr(resp, "choices", None) or []
        message = getattr(choices[0], "message", None) if choices else None
        content = getattr(message, "content", None)
        if not isinstance(content, str):
            raw = resp.model_dump() if hasattr(resp, "model_dump") else resp
            raise MalformedResponseError(
                "Invalid API response format",
                raw=raw,
                provider_id=self.provider_id,
            )
        return content


__all__ = ["AdapterKind", "ProviderAdapter", "DEFAULT_TIMEOUT_SECONDS"]
