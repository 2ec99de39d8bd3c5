"""WHERE clause builder for customer addresses (``addresses a``)."""

import logging
from typing import Any, Optional

from stockroom.services.listings.filters.base import (
    coerce_filters,
    filter_build_context,
    normalized_ranges,
    permitted_columns,
)
from stockroom.services.listings.schemas import AddressFilters, VisibilityScope
from stockroom.services.listings.utils.query_builder import ConditionBuilder, WhereClause

ADDRESS_KEYWORD_COLUMNS = ('a.label', 'a.full_name', 'a.email', 'a.phone', 'a.city')


def build_address_filter(
    filters: Any = None,
    scope: Optional[VisibilityScope] = None,
    log: Optional[logging.Logger] = None,
) -> WhereClause:
    """Build the WHERE clause for an address listing.

    With ``scope.include_unassigned`` a ``customer_id`` filter also matches
    addresses not yet linked to any customer.
    """
    f = coerce_filters(AddressFilters, filters, 'address')
    scope = scope or VisibilityScope()
    with filter_build_context('address', f, log):
        ranges = normalized_ranges(
            f,
            ('created_after', 'created_before'),
            ('updated_after', 'updated_before'),
        )
        builder = ConditionBuilder()

        if scope.include_unassigned:
            builder.add_template('(a.customer_id = {p} OR a.customer_id IS NULL)', f.customer_id)
        else:
            builder.add('a.customer_id', f.customer_id)

        builder.add('a.created_by', f.created_by)
        builder.add('a.updated_by', f.updated_by)
        builder.add('a.region', f.region)
        builder.add('a.country', f.country)
        builder.add_keyword(permitted_columns(ADDRESS_KEYWORD_COLUMNS, scope), f.keyword)

        builder.add_date_range('a.created_at', ranges['created_after'], ranges['created_before'])
        builder.add_date_range('a.updated_at', ranges['updated_after'], ranges['updated_before'])
        return builder.build()
