"""Typed errors raised by the listing query layer.

Upper layers distinguish these from business-rule failures and decide how
much of ``details`` to surface. Messages never embed SQL text or raw
parameter values; that context lives in ``details`` in masked form.
"""
from __future__ import annotations

from typing import Any


class QueryError(Exception):
    """Base class for every error raised while building or running a listing query."""

    code = 'QUERY_ERROR'

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details: dict[str, Any] = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Serialize for structured logs or an error response body."""
        return {
            'type': type(self).__name__,
            'code': self.code,
            'message': self.message,
            'details': self.details,
        }

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r})"


class QueryValidationError(QueryError):
    """Caller supplied a filter, sort key or page window this layer cannot interpret."""

    code = 'VALIDATION_ERROR'

    @classmethod
    def from_pydantic(cls, message: str, exc: Any, **details: Any) -> 'QueryValidationError':
        """Wrap a pydantic ``ValidationError`` keeping locations and messages only."""
        errors = [
            {
                'field': '.'.join(str(part) for part in err.get('loc', ())),
                'message': err.get('msg', ''),
                'type': err.get('type', ''),
            }
            for err in exc.errors()
        ]
        return cls(message, {'errors': errors, **details})


class QueryConstructionError(QueryError):
    """Unexpected failure while assembling a WHERE clause."""

    code = 'QUERY_CONSTRUCTION_ERROR'


class QueryExecutionError(QueryError):
    """The database rejected or failed to run a listing query."""

    code = 'DATABASE_ERROR'
