"""Input normalizer: "single value or array" fields to ordered sequences.

Downstream code only ever sees ``list[str]``. Callers that can only pass
a flat string may pass a JSON array literal (``'["a", "b"]'``) to get the
same batch behaviour as a real array. Timestamp validity is not checked
here; that is the resolver's job.
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from typing import Any


def parse_array_literal(value: str) -> list[str] | None:
    """Return the elements of a JSON array literal, or None if *value* is not one."""
    text = value.strip()
    if not (text.startswith("[") and text.endswith("]")):
        return None
    try:
        parsed = json.loads(text)
    except ValueError:
        return None
    if not isinstance(parsed, list):
        return None
    return [item if isinstance(item, str) else str(item) for item in parsed]


def normalize_times(value: Any, *, default: str | None = None) -> list[str]:
    """Coerce a timestamp field into a list of strings.

    ``None`` and empty arrays become ``[default]`` (or ``[]`` without a
    default). Never raises.
    """
    if value is None:
        return [default] if default is not None else []

    if isinstance(value, str):
        elements = parse_array_literal(value)
        if elements is None:
            return [value]
    elif isinstance(value, Sequence):
        elements = [item if isinstance(item, str) else str(item) for item in value]
    else:
        return [str(value)]

    if not elements:
        return [default] if default is not None else []
    return elements
