"""Listing utility modules."""

from stockroom.services.listings.utils.date_range import normalize_date_range, normalize_date_ranges, parse_bound
from stockroom.services.listings.utils.pagination import (
    paginate,
    paginate_by_offset,
    paginate_results,
    validate_pagination,
)
from stockroom.services.listings.utils.query_builder import (
    ConditionBuilder,
    ParamIndex,
    WhereClause,
    apply_date_range_condition,
    normalize_keyword,
)

__all__ = [
    'ConditionBuilder',
    'ParamIndex',
    'WhereClause',
    'apply_date_range_condition',
    'normalize_date_range',
    'normalize_date_ranges',
    'normalize_keyword',
    'paginate',
    'paginate_by_offset',
    'paginate_results',
    'parse_bound',
    'validate_pagination',
]
