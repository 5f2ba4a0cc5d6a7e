"""Accessors for JSON blobs stored as text columns.

Rows written by older clients may hold malformed or double-encoded JSON;
readers get an empty container instead of an exception.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Optional

logger = logging.getLogger(__name__)


def _decode(raw: Any) -> Any:
    if raw is None:
        return None
    if not isinstance(raw, str):
        return raw
    text = raw.strip()
    if not text:
        return None
    try:
        value = json.loads(text)
        # Some rows were stored as a JSON string containing JSON
        if isinstance(value, str):
            value = json.loads(value)
        return value
    except (TypeError, ValueError):
        logger.debug("Ignoring malformed JSON field value: %r", raw[:100])
        return None


def load_json_object(raw: Any) -> dict:
    value = _decode(raw)
    return value if isinstance(value, dict) else {}


def load_json_list(raw: Any) -> list:
    value = _decode(raw)
    return value if isinstance(value, list) else []


def dump_json(value: Any) -> Optional[str]:
    if value is None:
        return None
    return json.dumps(value, ensure_ascii=False, default=str)
