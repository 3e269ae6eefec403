"""
Small helpers shared across the package.
"""

import json
import uuid
from typing import Any


def generate_id() -> str:
    """Generate a unique identifier."""
    return uuid.uuid4().hex


def parse_json_object(raw: str | None) -> dict[str, Any]:
    """Parse a JSON object, returning an empty dict for anything else.

    Model-produced function arguments are not trusted to be valid JSON.
    """
    if not raw:
        return {}
    try:
        value = json.loads(raw)
    except (TypeError, ValueError):
        return {}
    return value if isinstance(value, dict) else {}


def truncate(text: str, max_length: int) -> str:
    """Truncate text to max_length, marking the cut with an ellipsis."""
    if len(text) <= max_length:
        return text
    return text[: max(max_length - 3, 0)] + "..."
