"""
Best-effort JSON recovery from free-form model output.

Each strategy takes the raw text and returns the parsed value or None.
`extract_json` walks them in order and keeps the first value the caller accepts.
"""
import json
import re
from typing import Any, Callable, Optional, Sequence

_FENCED = re.compile(r"```(?:json)?\s*\n([\s\S]*?)```", re.IGNORECASE)
_BARE_ARRAY = re.compile(r"\[\s*\{[\s\S]*\}\s*\]")
_BARE_OBJECT = re.compile(r"\{[\s\S]*\}")


def _loads(text: str) -> Optional[Any]:
    try:
        return json.loads(text)
    except (TypeError, ValueError):
        return None


def parse_direct(text: str) -> Optional[Any]:
    return _loads(text.strip())


def parse_fenced_block(text: str) -> Optional[Any]:
    match = _FENCED.search(text)
    return _loads(match.group(1)) if match else None


def parse_bare_array(text: str) -> Optional[Any]:
    match = _BARE_ARRAY.search(text)
    return _loads(match.group(0)) if match else None


def parse_bare_object(text: str) -> Optional[Any]:
    match = _BARE_OBJECT.search(text)
    return _loads(match.group(0)) if match else None


STRATEGIES: Sequence[Callable[[str], Optional[Any]]] = (
    parse_direct,
    parse_fenced_block,
    parse_bare_array,
    parse_bare_object,
)


def extract_json(
    text: Optional[str],
    accept: Callable[[Any], bool] = lambda value: value is not None,
    strategies: Sequence[Callable[[str], Optional[Any]]] = STRATEGIES,
) -> Optional[Any]:
    if not text:
        return None
    for strategy in strategies:
        value = strategy(text)
        if value is not None and accept(value):
            return value
    return None
