from __future__ import annotations

from typing import Sequence


PROMPT_TEMPLATE = """
You are a friendly CTO sending a single short motivational quote to a small dev team shipping products in Myanmar.
{context}Requirements:
- 1–2 sentences MAX, punchy.
- Focus on engineering momentum, code quality, learning, teamwork, shipping.
- Avoid clichés; be concrete.
- LANGUAGE={language}
- If LANGUAGE=EN -> English only.
- If LANGUAGE=MM -> Myanmar (Burmese) only.
- If LANGUAGE=EN_MM -> Give English line then Myanmar line on the next line.

Return ONLY the quote text. No extra commentary."""


def format_context(context_lines: Sequence[str]) -> str:
    if not context_lines:
        return ""
    return "Context:\n- " + "\n- ".join(context_lines) + "\n"


def build_prompt(language: str, context_lines: Sequence[str] = ()) -> str:
    return PROMPT_TEMPLATE.format(context=format_context(context_lines), language=language)
