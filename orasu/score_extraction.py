from __future__ import annotations

import base64
import re
from typing import Any

from openai import OpenAI

from orasu.config import settings

MAX_SCORE = 60000
DIGITS_RE = re.compile(r"\d+")

SYSTEM_PROMPT = """You read mahjong score displays.
Return only the numbers shown on the four players' score displays, in seat order,
separated by spaces. Do not add any other text."""


def extract_scores(text: str) -> list[int]:
    """OCR text -> plausible scores, floored to 100 points."""
    scores = []
    for token in DIGITS_RE.findall(text):
        value = int(token)
        if 0 <= value <= MAX_SCORE:
            scores.append(value // 100 * 100)
    return scores


def extract_scores_from_image(image_bytes: bytes) -> dict[str, Any]:
    """Image -> score candidates. This module must not run any condition search."""
    if not settings.openai_api_key:
        return {"scores": [], "raw_text": "", "warnings": ["OPENAI_API_KEY is not set; enter scores manually."]}

    client = OpenAI(api_key=settings.openai_api_key)
    image_b64 = base64.b64encode(image_bytes).decode("ascii")
    response = client.chat.completions.create(
        model=settings.openai_model,
        temperature=0,
        messages=[
            {"role": "system", "content": SYSTEM_PROMPT},
            {
                "role": "user",
                "content": [
                    {"type": "text", "text": "Read the four scores."},
                    {"type": "image_url", "image_url": {"url": f"data:image/jpeg;base64,{image_b64}"}},
                ],
            },
        ],
    )
    raw_text = response.choices[0].message.content or ""
    scores = extract_scores(raw_text)
    warnings = []
    if len(scores) != 4:
        warnings.append(f"expected 4 scores, recognized {len(scores)}")
    return {"scores": scores, "raw_text": raw_text, "warnings": warnings}
