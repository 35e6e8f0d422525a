# FILE: config/providers.py
"""
LLM provider catalogue.

One entry per selectable provider id. Several ids may share a vendor (qwen and
qwen3 both talk to DashScope with different models). Registration order in
the registry follows the order of PROVIDER_CATALOG.

credential_optional:
    True  -> adapter is built even without a key; calls fail as upstream errors
    False -> adapter construction raises MissingCredentialError without a key
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

DEFAULT_CAPABILITIES: Tuple[str, ...] = ("代码生成", "需求分析", "HTML生成")

DASHSCOPE_BASE_URL = "https://dashscope.aliyuncs.com"
DASHSCOPE_GENERATION_PATH = "/api/v1/services/aigc/text-generation/generation"
DOUBAO_BASE_URL = "https://ark.cn-beijing.volces.com/api/v3"
ZHIPU_BASE_URL = "https://open.bigmodel.cn/api/paas/v4"


@dataclass(frozen=True)
class ProviderConfig:
    provider_id: str
    display_name: str
    vendor_name: str
    description: str
    kind: str
    model: str
    env_key_name: str
    base_url: str
    credential_optional: bool = False
    capabilities: Tuple[str, ...] = DEFAULT_CAPABILITIES


PROVIDER_CATALOG: Dict[str, ProviderConfig] = {
    "qwen": ProviderConfig(
        provider_id="qwen",
        display_name="通义千问",
        vendor_name="Alibaba",
        description="阿里巴巴通义千问大模型",
        kind="dashscope",
        model=os.getenv("QWEN_MODEL", "qwen-max"),
        env_key_name="QWEN_API_KEY",
        base_url=DASHSCOPE_BASE_URL,
        credential_optional=True,
    ),
    "qwen3": ProviderConfig(
        provider_id="qwen3",
        display_name="通义千问3",
        vendor_name="Alibaba",
        description="阿里巴巴通义千问3代 coder plus模型",
        kind="dashscope",
        model=os.getenv("QWEN3_MODEL", "qwen3-coder-plus"),
        env_key_name="QWEN_API_KEY",
        base_url=DASHSCOPE_BASE_URL,
        credential_optional=True,
    ),
    "doubao": ProviderConfig(
        provider_id="doubao",
        display_name="豆包",
        vendor_name="ByteDance",
        description="字节跳动豆包大模型",
        kind="openai_compatible",
        model=os.getenv("DOUBAO_MODEL", "doubao-pro"),
        env_key_name="DOUBAO_API_KEY",
        base_url=DOUBAO_BASE_URL,
    ),
    "zhipu": ProviderConfig(
        provider_id="zhipu",
        display_name="智谱AI",
        vendor_name="Zhipu AI",
        description="智谱AI大模型",
        kind="openai_compatible",
        model=os.getenv("ZHIPU_MODEL", "glm-4"),
        env_key_name="ZHIPU_API_KEY",
        base_url=ZHIPU_BASE_URL,
    ),
}


def get_api_key(provider_id: str) -> Optional[str]:
    """Current credential for a provider id, or None when unset/blank."""
    cfg = PROVIDER_CATALOG.get(provider_id)
    if not cfg:
        return None
    key = os.getenv(cfg.env_key_name, "").strip()
    return key or None


def has_credential(provider_id: str) -> bool:
    return get_api_key(provider_id) is not None
