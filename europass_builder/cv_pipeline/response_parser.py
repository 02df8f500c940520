"""Best-effort recovery of a ResumeDocument from raw completion text."""

import json
import re
from dataclasses import dataclass
from typing import Union

from europass_builder.schemas import ResumeDocument, normalize


@dataclass(frozen=True)
class Ok:
    document: ResumeDocument


@dataclass(frozen=True)
class Err:
    reason: str


ParseResult = Union[Ok, Err]


def _strip_code_fence(text: str) -> str:
    raw = text.strip()
    if raw.startswith("```"):
        raw = re.sub(r"^```(?:json)?\s*", "", raw)
        raw = re.sub(r"\s*```$", "", raw)
    return raw


def parse_extraction_response(text: str) -> ParseResult:
    """Locate the outermost {...} span, parse it and normalize it.

    Err when the text holds no JSON object; never raises.
    """
    raw = _strip_code_fence(text or "")
    if not raw:
        return Err("empty response")
    start, end = raw.find("{"), raw.rfind("}")
    if start == -1 or end <= start:
        return Err("no JSON object found in response")
    try:
        data = json.loads(raw[start : end + 1])
    except (ValueError, RecursionError) as e:
        return Err(f"invalid JSON: {e}")
    if not isinstance(data, dict):
        return Err("response JSON is not an object")
    return Ok(normalize(data))
