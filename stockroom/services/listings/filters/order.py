"""WHERE clause builder for orders (``orders o``)."""

import logging
from typing import Any, Optional

from stockroom.services.listings.filters.base import (
    coerce_filters,
    filter_build_context,
    normalized_ranges,
    permitted_columns,
)
from stockroom.services.listings.schemas import OrderFilters, VisibilityScope
from stockroom.services.listings.utils.query_builder import ConditionBuilder, WhereClause

ORDER_KEYWORD_COLUMNS = ('o.order_number', 'o.note')


def build_order_filter(
    filters: Any = None,
    scope: Optional[VisibilityScope] = None,
    log: Optional[logging.Logger] = None,
) -> WhereClause:
    """Build the WHERE clause for an order listing.

    ``scope.active_status_id`` replaces any caller-supplied ``order_status_id``;
    ``order_status_ids`` still narrows further.
    """
    f = coerce_filters(OrderFilters, filters, 'order')
    scope = scope or VisibilityScope()
    with filter_build_context('order', f, log):
        ranges = normalized_ranges(
            f,
            ('created_after', 'created_before'),
            ('status_after', 'status_before'),
        )
        builder = ConditionBuilder()

        builder.add_ilike('o.order_number', f.order_number)
        builder.add_one_or_many('o.order_type_id', f.order_type_id)

        if scope.active_status_id is not None:
            builder.add('o.order_status_id', scope.active_status_id)
        else:
            builder.add('o.order_status_id', f.order_status_id)
        builder.add_any('o.order_status_id', f.order_status_ids, cast='uuid[]')

        builder.add('o.created_by', f.created_by)
        builder.add('o.updated_by', f.updated_by)
        builder.add_date_range('o.created_at', ranges['created_after'], ranges['created_before'])
        builder.add_date_range('o.status_date', ranges['status_after'], ranges['status_before'])

        columns = ORDER_KEYWORD_COLUMNS[:1] if scope.restrict_keyword_to_order_number else ORDER_KEYWORD_COLUMNS
        builder.add_keyword(permitted_columns(columns, scope), f.keyword)
        return builder.build()
