# FILE: app/generation/prompts.py
"""
Prompt library for the two-stage site generation pipeline.

Stage 1 (requirement doc): product-manager role, fixed six-section outline.
Stage 2 (HTML synthesis): front-end role pinned to VISUAL_CONTRACT so output
looks consistent whatever stage 1 produced.

The text is user-facing product copy (zh-CN) and is sent verbatim.
"""

TAILWIND_CDN = '<script src="https://cdn.tailwindcss.com"></script>'

# Mandatory style classes. Tests and the fallback template read from here.
VISUAL_CONTRACT = {
    "page": "bg-gray-100",
    "nav": "bg-white shadow-sm",
    "container": "container mx-auto px-4",
    "card": "bg-white rounded-lg shadow-md hover:shadow-lg transition-shadow",
    "button": "bg-indigo-600 text-white hover:bg-indigo-700 transition-colors",
    "footer": "bg-white border-t",
    "heading": "text-gray-800",
    "body": "text-gray-600",
}

# =============================================================================
# SINGLE-SHOT
# =============================================================================

TEXT_SYSTEM_PROMPT = (
    "你是一个专业的Web开发者，擅长使用Tailwind CSS创建现代化的网站。"
    "请根据用户的提示生成完整的HTML代码，确保包含适当的Tailwind CSS类来实现美观的设计。"
)

# =============================================================================
# STAGE 1 - REQUIREMENT DOCUMENT
# =============================================================================

REQUIREMENT_SYSTEM_PROMPT = "你是一个专业的产品经理，擅长将用户需求转化为详细的产品需求文档。"

REQUIREMENT_USER_TEMPLATE = """请根据以下用户提示词生成一份详细的网站需求文档：

用户提示词：{prompt}

请按照以下格式生成需求文档：

1. 网站目标和受众:
   - 目标：[描述网站的主要目标]
   - 受众：[描述目标用户群体]

2. 核心功能模块:
   - [列出主要功能模块]

3. 页面结构和布局:
   - [描述页面结构和布局]

4. 设计风格和色彩搭配:
   - [描述设计风格和色彩方案]

5. 交互细节:
   - [描述交互设计细节]

6. 内容要求:
   - [描述内容要求]

请确保需求文档详细且具体，以便后续用于生成HTML代码。"""

# =============================================================================
# STAGE 2 - HTML SYNTHESIS
# =============================================================================

_CONTRACT_RULES = f"""1. 必须在head部分引入Tailwind CSS CDN链接：{TAILWIND_CDN}
2. 页面背景必须使用 {VISUAL_CONTRACT["page"]}
3. 导航栏必须使用 {VISUAL_CONTRACT["nav"]} 样式
4. 内容容器必须使用 {VISUAL_CONTRACT["container"]} 布局
5. 卡片必须使用 bg-white rounded-lg shadow-md 样式，并添加 hover:shadow-lg transition-shadow 效果
6. 按钮必须使用 bg-indigo-600 text-white 样式，并添加 hover:bg-indigo-700 transition-colors 效果
7. 页脚必须使用 {VISUAL_CONTRACT["footer"]} 样式
8. 标题颜色使用 {VISUAL_CONTRACT["heading"]}，正文颜色使用 {VISUAL_CONTRACT["body"]}
9. 不要包含任何JavaScript代码
10. 不要使用内联样式
11. 直接返回HTML代码，不要包含任何解释性文字或其他内容"""

HTML_SYSTEM_PROMPT = (
    "你是一个专业的Web开发者，擅长使用Tailwind CSS创建现代化的网站。"
    "请根据用户的提示生成完整的HTML代码，必须严格遵守以下要求：\n" + _CONTRACT_RULES
)

HTML_USER_TEMPLATE = """请根据以下网站需求文档生成一个完整的HTML页面代码：

需求文档：
{requirement_doc}

强制要求（必须严格遵守）：
""" + _CONTRACT_RULES + """

请生成高质量的HTML代码。"""


def build_requirement_message(prompt: str) -> str:
    return REQUIREMENT_USER_TEMPLATE.format(prompt=prompt)


def build_html_message(requirement_doc: str) -> str:
    return HTML_USER_TEMPLATE.format(requirement_doc=requirement_doc)
