"""Plumbing shared by every domain filter builder."""

import logging
from contextlib import contextmanager
from typing import Any, Iterator, Mapping, Optional, Sequence, Type, TypeVar

from pydantic import BaseModel, ValidationError

from stockroom.lib.common.errors import QueryConstructionError, QueryError, QueryValidationError
from stockroom.lib.common.masking import mask_filters
from stockroom.services.listings.schemas import VisibilityScope
from stockroom.services.listings.utils.date_range import normalize_date_ranges
from stockroom.services.listings.utils.query_builder import ConditionBuilder, WhereClause

logger = logging.getLogger(__name__)

M = TypeVar('M', bound=BaseModel)


def empty_result() -> WhereClause:
    """Clause matching no rows, for scopes that forbid any results."""
    return WhereClause('1=1 AND 1=0', [])


def coerce_filters(model: Type[M], filters: Any, domain: str) -> M:
    """Validate a mapping (camelCase or snake_case keys) into ``model``.

    Raises:
        QueryValidationError: If ``filters`` is not a mapping or a field has the wrong shape.
    """
    if filters is None:
        return model()
    if isinstance(filters, model):
        return filters
    if isinstance(filters, BaseModel):
        filters = filters.model_dump(exclude_none=True)
    if not isinstance(filters, Mapping):
        raise QueryValidationError(
            f"{domain} filters must be an object",
            {'domain': domain, 'received': type(filters).__name__}
        )
    try:
        return model.model_validate(dict(filters))
    except ValidationError as exc:
        raise QueryValidationError.from_pydantic(f"Invalid {domain} filters", exc, domain=domain)


def normalized_ranges(filters: BaseModel, *pairs: tuple[str, str]) -> dict[str, Any]:
    """Half-open bounds for each ``(after, before)`` field pair of ``filters``."""
    keys = {key for pair in pairs for key in pair}
    return normalize_date_ranges(filters.model_dump(include=keys), *pairs)


def permitted_columns(columns: Sequence[str], scope: Optional[VisibilityScope]) -> list[str]:
    """Narrow a domain's keyword columns to those the scope allows."""
    if scope is None or scope.keyword_fields is None:
        return list(columns)
    allowed = set(scope.keyword_fields)
    return [col for col in columns if col in allowed]


def apply_currently_valid(builder: ConditionBuilder, valid_from: str, valid_to: str) -> None:
    """Restrict to rows whose validity window contains ``NOW()``; an open end never expires."""
    builder.add_raw(f"{valid_from} <= NOW()")
    builder.add_raw(f"({valid_to} IS NULL OR {valid_to} >= NOW())")


@contextmanager
def filter_build_context(domain: str, filters: Any, log: Optional[logging.Logger] = None) -> Iterator[None]:
    """Wrap unexpected failures while building a WHERE clause.

    :class:`QueryError` subclasses pass through untouched. Anything else is
    logged with masked filters and re-raised as :class:`QueryConstructionError`.
    """
    log = log or logger
    try:
        yield
    except QueryError:
        raise
    except Exception as exc:
        details = {
            'domain': domain,
            'stage': f"build-{domain}-where-clause",
            'filters': mask_filters(filters),
            'reason': type(exc).__name__,
        }
        log.error(f"FilterBuilder.{domain}: Failed to build WHERE clause: {type(exc).__name__}",
                  exc_info=True, extra={'query_context': details})
        raise QueryConstructionError(f"Failed to prepare {domain} filter", details) from exc
