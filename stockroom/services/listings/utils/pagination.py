"""Pagination utilities shared by every listing query.

``paginate`` turns one filter predicate into a COUNT query and a page
query, runs both concurrently and returns the ``{data, pagination}``
envelope. Both statements reuse the identical WHERE clause and parameter
list so totals and pages are computed from the same predicate.

Sort expressions are interpolated into SQL. Callers must resolve them
through :func:`stockroom.services.listings.sort.resolve_sort` first.
"""

import asyncio
import logging
import math
from typing import Any, Awaitable, Callable, Optional, Sequence

from pydantic import ValidationError

from stockroom.lib.common.errors import QueryExecutionError, QueryValidationError
from stockroom.lib.common.masking import mask_params
from stockroom.lib.enums import normalize_sort_order
from stockroom.services.listings.schemas import OffsetPage, PaginatedResult, Pagination, PaginationParams

logger = logging.getLogger(__name__)

DEFAULT_PAGE_LIMIT = 20
MAX_PAGE_LIMIT = 100

# execute(sql, params) -> rows
QueryExecutor = Callable[[str, Sequence[Any]], Awaitable[Sequence[Any]]]


def validate_pagination(
    page: Any = None,
    limit: Any = None,
    max_limit: int = MAX_PAGE_LIMIT,
    default_limit: int = DEFAULT_PAGE_LIMIT,
) -> PaginationParams:
    """Coerce ``page``/``limit`` to positive integers, rejecting out-of-range values.

    Raises:
        QueryValidationError: If either value is not a positive integer or
            ``limit`` exceeds ``max_limit``.
    """
    try:
        window = PaginationParams(
            page=1 if page is None else page,
            limit=default_limit if limit is None else limit,
        )
    except ValidationError as exc:
        raise QueryValidationError.from_pydantic("Invalid pagination parameters", exc)
    if window.limit > max_limit:
        raise QueryValidationError(
            f"limit must not exceed {max_limit}",
            {'limit': window.limit, 'max_limit': max_limit}
        )
    return window


def total_pages_for(total_records: int, limit: int) -> int:
    """``ceil(total_records / limit)``, or 0 when nothing matched."""
    if total_records <= 0:
        return 0
    return math.ceil(total_records / limit)


def build_count_query(
    table_name: str,
    joins: Sequence[str],
    where_clause: str,
) -> str:
    """Build the COUNT statement for a listing from its FROM/JOIN/WHERE parts."""
    join_sql = "\n".join(joins)
    return (
        "SELECT COUNT(*) AS total_records\n"
        f"FROM {table_name}\n"
        f"{join_sql}\n"
        f"WHERE {where_clause}"
    )


def build_data_query(query_text: str, sort_by: Optional[str], sort_order: str, limit_idx: int) -> str:
    """Append ORDER BY and bound LIMIT/OFFSET placeholders to ``query_text``."""
    base = query_text.strip().rstrip(';')
    order_sql = f"\nORDER BY {sort_by} {sort_order}" if sort_by else ""
    return f"{base}{order_sql}\nLIMIT ${limit_idx} OFFSET ${limit_idx + 1}"


def _total_from(count_rows: Sequence[Any]) -> int:
    if not count_rows:
        return 0
    value = count_rows[0]['total_records']
    return int(value) if value is not None else 0


async def paginate(
    execute: QueryExecutor,
    *,
    table_name: str,
    query_text: str,
    joins: Sequence[str] = (),
    where_clause: str = '1=1',
    params: Sequence[Any] = (),
    page: Any = 1,
    limit: Any = DEFAULT_PAGE_LIMIT,
    sort_by: Optional[str] = None,
    sort_order: Optional[str] = None,
    max_limit: int = MAX_PAGE_LIMIT,
    log: Optional[logging.Logger] = None,
) -> PaginatedResult:
    """Run a page query and its matching COUNT query.

    Args:
        execute: Query primitive, ``execute(sql, params) -> rows``.
        table_name: FROM target including its alias, e.g. ``'boms b'``.
        query_text: Full SELECT ... WHERE ... statement without ORDER BY/LIMIT.
        joins: JOIN clauses used by ``query_text``; repeated in the COUNT query.
        where_clause: The predicate embedded in ``query_text``.
        params: Values for the predicate's ``$1..$N`` placeholders.
        page: 1-based page number.
        limit: Page size, at most ``max_limit``.
        sort_by: Allow-listed SQL sort expression.
        sort_order: ``ASC`` or ``DESC`` in any case; anything else sorts DESC.
        log: Logger for this call; defaults to the module logger.

    Returns:
        PaginatedResult: ``{data, pagination}`` envelope.

    Raises:
        QueryValidationError: For an invalid page window.
        QueryExecutionError: If either statement fails.
    """
    log = log or logger
    window = validate_pagination(page, limit, max_limit)
    order = normalize_sort_order(sort_order).value
    base_params = list(params)

    count_query = build_count_query(table_name, joins, where_clause)
    data_query = build_data_query(query_text, sort_by, order, len(base_params) + 1)
    data_params = base_params + [window.limit, window.offset]

    try:
        rows, count_rows = await asyncio.gather(
            execute(data_query, data_params),
            execute(count_query, base_params),
        )
    except Exception as exc:
        details = {
            'data_query': data_query,
            'count_query': count_query,
            'params': mask_params(base_params),
            'page': window.page,
            'limit': window.limit,
            'sort_by': sort_by,
            'sort_order': order,
            'reason': type(exc).__name__,
        }
        log.error(f"Pagination.paginate: Failed to fetch page {window.page} from {table_name}: {type(exc).__name__}",
                  exc_info=True, extra={'query_context': details})
        raise QueryExecutionError("Failed to fetch paginated records", details) from exc

    total_records = _total_from(count_rows)
    result = PaginatedResult(
        data=[dict(row) for row in rows],
        pagination=Pagination(
            page=window.page,
            limit=window.limit,
            total_records=total_records,
            total_pages=total_pages_for(total_records, window.limit),
        ),
    )
    log.debug(
        "Pagination.paginate: %s page=%d limit=%d returned=%d total=%d",
        table_name, window.page, window.limit, len(result.data), total_records
    )
    return result


async def paginate_results(
    execute: QueryExecutor,
    *,
    data_query: str,
    params: Sequence[Any] = (),
    page: Any = 1,
    limit: Any = DEFAULT_PAGE_LIMIT,
    max_limit: int = MAX_PAGE_LIMIT,
    log: Optional[logging.Logger] = None,
) -> PaginatedResult:
    """Paginate a statement that already carries its own ORDER BY or GROUP BY.

    The total is counted over ``data_query`` wrapped as a subquery, so
    grouped listings count groups rather than joined rows.
    """
    log = log or logger
    window = validate_pagination(page, limit, max_limit)
    base_params = list(params)
    base = data_query.strip().rstrip(';')
    limit_idx = len(base_params) + 1

    count_query = f"SELECT COUNT(*) AS total_records FROM (\n{base}\n) AS counted"
    paged_query = f"{base}\nLIMIT ${limit_idx} OFFSET ${limit_idx + 1}"

    try:
        rows, count_rows = await asyncio.gather(
            execute(paged_query, base_params + [window.limit, window.offset]),
            execute(count_query, base_params),
        )
    except Exception as exc:
        details = {
            'data_query': paged_query,
            'count_query': count_query,
            'params': mask_params(base_params),
            'page': window.page,
            'limit': window.limit,
            'reason': type(exc).__name__,
        }
        log.error(f"Pagination.paginate_results: Failed to fetch page {window.page}: {type(exc).__name__}",
                  exc_info=True, extra={'query_context': details})
        raise QueryExecutionError("Failed to fetch paginated records", details) from exc

    total_records = _total_from(count_rows)
    return PaginatedResult(
        data=[dict(row) for row in rows],
        pagination=Pagination(
            page=window.page,
            limit=window.limit,
            total_records=total_records,
            total_pages=total_pages_for(total_records, window.limit),
        ),
    )


async def paginate_by_offset(
    execute: QueryExecutor,
    *,
    query_text: str,
    params: Sequence[Any] = (),
    offset: Any = 0,
    limit: Any = DEFAULT_PAGE_LIMIT,
    sort_by: Optional[str] = None,
    sort_order: Optional[str] = None,
    max_limit: int = MAX_PAGE_LIMIT,
    log: Optional[logging.Logger] = None,
) -> OffsetPage:
    """Fetch one slice for load-more or autocomplete lookups.

    One row beyond ``limit`` is requested; its presence sets ``has_more``
    and it is dropped from ``items``. No COUNT query is issued.
    """
    log = log or logger
    window = validate_pagination(1, limit, max_limit)
    try:
        offset = int(offset)
    except (TypeError, ValueError):
        raise QueryValidationError("offset must be a non-negative integer", {'offset': offset})
    if offset < 0:
        raise QueryValidationError("offset must be a non-negative integer", {'offset': offset})

    order = normalize_sort_order(sort_order).value
    base_params = list(params)
    data_query = build_data_query(query_text, sort_by, order, len(base_params) + 1)

    try:
        rows = await execute(data_query, base_params + [window.limit + 1, offset])
    except Exception as exc:
        details = {
            'data_query': data_query,
            'params': mask_params(base_params),
            'offset': offset,
            'limit': window.limit,
            'sort_by': sort_by,
            'sort_order': order,
            'reason': type(exc).__name__,
        }
        log.error(f"Pagination.paginate_by_offset: Failed to fetch slice at offset {offset}: {type(exc).__name__}",
                  exc_info=True, extra={'query_context': details})
        raise QueryExecutionError("Failed to fetch lookup records", details) from exc

    items = [dict(row) for row in rows]
    has_more = len(items) > window.limit
    return OffsetPage(items=items[:window.limit], has_more=has_more, offset=offset, limit=window.limit)
