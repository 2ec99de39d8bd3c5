"""WHERE clause builder for customer lists and dropdowns (``customers c``)."""

import logging
from typing import Any, Optional

from stockroom.services.listings.filters.base import (
    coerce_filters,
    filter_build_context,
    normalized_ranges,
    permitted_columns,
)
from stockroom.services.listings.schemas import CustomerFilters, VisibilityScope
from stockroom.services.listings.utils.query_builder import ConditionBuilder, WhereClause

CUSTOMER_KEYWORD_COLUMNS = ('c.firstname', 'c.lastname', 'c.email', 'c.phone_number')


def build_customer_filter(
    filters: Any = None,
    scope: Optional[VisibilityScope] = None,
    log: Optional[logging.Logger] = None,
) -> WhereClause:
    """Build the WHERE clause for a customer listing.

    An explicit ``status_id`` wins. Otherwise ``scope.active_status_id``
    applies unless ``scope.override_default_status`` is set. Archived
    customers are hidden unless ``scope.include_archived`` is set, in which
    case the caller's ``is_archived`` filter is honoured.
    """
    f = coerce_filters(CustomerFilters, filters, 'customer')
    scope = scope or VisibilityScope()
    with filter_build_context('customer', f, log):
        ranges = normalized_ranges(
            f,
            ('created_after', 'created_before'),
            ('status_date_after', 'status_date_before'),
        )
        builder = ConditionBuilder()

        if f.status_id is not None:
            builder.add('c.status_id', f.status_id)
        elif not scope.override_default_status:
            builder.add('c.status_id', scope.active_status_id)

        if scope.include_archived:
            builder.add('c.is_archived', f.is_archived)
        else:
            builder.add_raw('c.is_archived = false')

        builder.add('c.region', f.region)
        builder.add('c.country', f.country)
        builder.add('c.created_by', f.created_by)
        builder.add_keyword(permitted_columns(CUSTOMER_KEYWORD_COLUMNS, scope), f.keyword)

        builder.add_date_range('c.created_at', ranges['created_after'], ranges['created_before'])
        builder.add_date_range('c.status_date', ranges['status_date_after'], ranges['status_date_before'])
        return builder.build()
