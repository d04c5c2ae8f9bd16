"""系统提示词加载与组装。

默认模板存放在 prompts 目录下的 default_system.md，
包含 {question} 与 {context} 两个占位符。
"""

from pathlib import Path
from typing import Optional, Sequence


PROMPTS_DIR = Path(__file__).resolve().parent


def load_system_prompt(name: str = "default_system") -> str:
    """按名称读取 prompts 目录下的模板文本。"""

    fname = PROMPTS_DIR / f"{name}.md"
    return fname.read_text(encoding="utf-8")


def create_system_prompt(
    question: str,
    contexts: Sequence[str],
    template: Optional[str] = None,
) -> str:
    """把问题与检索到的上下文片段填入模板。

    只替换第一次出现的 {question} 与 {context}（先问题后上下文），
    其余出现保持原样；上下文片段之间以空行分隔。
    """

    if template is None:
        template = load_system_prompt()
    context = "\n\n".join(contexts)
    return template.replace("{question}", question, 1).replace("{context}", context, 1)
