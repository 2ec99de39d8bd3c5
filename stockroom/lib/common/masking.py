"""Redaction helpers for query parameters and filter objects written to logs."""

import re
from datetime import date, datetime
from typing import Any, Mapping

UUID_PATTERN = re.compile(
    r'^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$'
)
MASK = '***'


def mask_value(value: Any) -> Any:
    """Return a log-safe rendition of a single bound value."""
    if value is None or isinstance(value, (bool, int, float)):
        return value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, str):
        if UUID_PATTERN.match(value):
            return value
        if len(value) <= 4:
            return MASK
        return f"{value[:2]}{MASK}"
    if isinstance(value, Mapping):
        return {k: mask_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set)):
        return [mask_value(v) for v in value]
    return MASK


def mask_params(params: Any) -> list[Any]:
    """Mask a positional parameter list."""
    if params is None:
        return []
    return [mask_value(p) for p in params]


def mask_filters(filters: Any) -> dict[str, Any]:
    """Mask a filter mapping (or pydantic model) for structured logging."""
    if filters is None:
        return {}
    if hasattr(filters, 'model_dump'):
        filters = filters.model_dump(exclude_none=True)
    if not isinstance(filters, Mapping):
        return {'value': MASK}
    return {str(k): mask_value(v) for k, v in filters.items() if v is not None}
