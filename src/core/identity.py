from __future__ import annotations

from typing import Any, Callable, Mapping

from core.errors import ValidationError


def field_key(field: str) -> Callable[[Mapping[str, Any]], str]:
    """Build an identity extractor that reads `field` from mapping items.

    Keys are normalised to str so ids arriving as JSON numbers and ids typed
    into a tool call compare equal.
    """
    name = (field or "").strip()
    if not name:
        raise ValidationError("Identity field name is empty")

    def _extract(item: Mapping[str, Any]) -> str:
        try:
            value = item[name]
        except (KeyError, TypeError) as e:
            raise ValidationError(f"Item has no '{name}' field") from e
        if value is None:
            raise ValidationError(f"Item '{name}' field is null")
        return str(value)

    return _extract
