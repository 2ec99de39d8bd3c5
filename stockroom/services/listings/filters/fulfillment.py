"""WHERE clause builder for outbound fulfillments.

Expected aliases: ``outbound_shipments os``, ``orders o``, ``warehouses w``
and ``delivery_methods dm``.
"""

import logging
from typing import Any, Optional

from stockroom.services.listings.filters.base import (
    coerce_filters,
    filter_build_context,
    normalized_ranges,
    permitted_columns,
)
from stockroom.services.listings.schemas import FulfillmentFilters, VisibilityScope
from stockroom.services.listings.utils.query_builder import ConditionBuilder, WhereClause

FULFILLMENT_KEYWORD_COLUMNS = ('o.order_number', 'w.name', 'dm.method_name')


def build_fulfillment_filter(
    filters: Any = None,
    scope: Optional[VisibilityScope] = None,
    log: Optional[logging.Logger] = None,
) -> WhereClause:
    """Build the WHERE clause for a fulfillment listing.

    Id lists bind as a single ``uuid[]`` array each.
    """
    f = coerce_filters(FulfillmentFilters, filters, 'fulfillment')
    with filter_build_context('fulfillment', f, log):
        ranges = normalized_ranges(
            f,
            ('created_after', 'created_before'),
            ('shipped_after', 'shipped_before'),
        )
        builder = ConditionBuilder()

        builder.add_any('os.status_id', f.status_ids, cast='uuid[]')
        builder.add_any('os.warehouse_id', f.warehouse_ids, cast='uuid[]')
        builder.add_any('os.delivery_method_id', f.delivery_method_ids, cast='uuid[]')

        builder.add('os.created_by', f.created_by)
        builder.add('os.updated_by', f.updated_by)
        builder.add_date_range('os.created_at', ranges['created_after'], ranges['created_before'])
        builder.add_date_range('os.shipped_at', ranges['shipped_after'], ranges['shipped_before'])

        builder.add('os.order_id', f.order_id)
        builder.add_ilike('o.order_number', f.order_number)

        builder.add_keyword(permitted_columns(FULFILLMENT_KEYWORD_COLUMNS, scope), f.keyword)
        return builder.build()
