# FILE: app/generation/templates.py
"""
Local HTML helpers: markdown fence stripping and the fallback template used
when upstream generation fails.
"""
from __future__ import annotations

import html
import re

from app.generation.prompts import TAILWIND_CDN

# First fenced block, optional "html" info string, non-greedy across newlines.
_FENCE_RE = re.compile(r"```(?:html)?([\s\S]*?)```", re.IGNORECASE)

FALLBACK_TITLE_CHARS = 100


def strip_markdown_fence(text: str) -> str:
    """Return the first fenced block's contents (trimmed), or the text unchanged."""
    if not text or "```" not in text:
        return text
    match = _FENCE_RE.search(text)
    if match:
        return match.group(1).strip()
    return text


def _shorten(text: str, limit: int) -> str:
    text = (text or "").strip()
    if len(text) <= limit:
        return text
    return text[:limit] + "..."


def render_fallback_html(prompt: str) -> str:
    """Minimal deterministic page built from the prompt (or document) text."""
    title = html.escape(_shorten(prompt, FALLBACK_TITLE_CHARS) or "AI生成的网站")
    return f"""<!DOCTYPE html>
<html lang="zh-CN">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{title}</title>
    {TAILWIND_CDN}
</head>
<body class="bg-gradient-to-br from-gray-50 to-gray-100 min-h-screen">
    <div class="max-w-4xl mx-auto p-8">
        <h1 class="text-3xl font-bold text-center text-indigo-600 mb-6">{title}</h1>
        <p class="text-center text-gray-600">这是一个根据您的提示词生成的网站。</p>
    </div>
</body>
</html>"""
