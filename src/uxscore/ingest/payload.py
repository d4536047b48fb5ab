# src/uxscore/ingest/payload.py
from __future__ import annotations

import json
from typing import Any, Dict, Optional


def parse_payload(text: Optional[str]) -> Optional[Dict[str, Any]]:
    """
    Decodes the JSON payload stored with each response.

    The payload looks like {"questionnaireId": "sus", "answers": {"Q1": 3, ...}}.
    Blank, malformed or non-object payloads give None instead of raising, so
    one corrupt response never blocks the rest of a project.
    """
    if text is None:
        return None
    text = str(text).strip()
    if not text:
        return None
    try:
        decoded = json.loads(text)
    except ValueError:
        return None
    if not isinstance(decoded, dict):
        return None
    return decoded


def answers_from_payload(text: Optional[str]) -> Optional[Dict[str, Any]]:
    payload = parse_payload(text)
    if payload is None:
        return None
    answers = payload.get("answers")
    if not isinstance(answers, dict):
        return None
    # Null answers are left out; other values are kept and validated by the scorers.
    return {str(k): v for k, v in answers.items() if v is not None}
