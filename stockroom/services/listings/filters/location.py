"""WHERE clause builder for locations (``locations l``)."""

import logging
from typing import Any, Optional

from stockroom.services.listings.filters.base import (
    coerce_filters,
    filter_build_context,
    normalized_ranges,
    permitted_columns,
)
from stockroom.services.listings.schemas import LocationFilters, VisibilityScope
from stockroom.services.listings.utils.query_builder import ConditionBuilder, WhereClause

LOCATION_KEYWORD_COLUMNS = (
    'l.name',
    'l.address_line1',
    'l.address_line2',
    'l.city',
    'l.province_or_state',
    'l.postal_code',
    'l.country',
)


def build_location_filter(
    filters: Any = None,
    scope: Optional[VisibilityScope] = None,
    log: Optional[logging.Logger] = None,
) -> WhereClause:
    """Build the WHERE clause for a location listing.

    Status precedence: ``status_ids``, then ``status_id``, then the scope's
    ``active_status_id``.
    """
    f = coerce_filters(LocationFilters, filters, 'location')
    scope = scope or VisibilityScope()
    with filter_build_context('location', f, log):
        ranges = normalized_ranges(f, ('created_after', 'created_before'))
        builder = ConditionBuilder()

        if not scope.include_archived:
            builder.add_raw('l.is_archived = false')

        if f.status_ids:
            builder.add_any('l.status_id', f.status_ids, cast='uuid[]')
        elif f.status_id is not None:
            builder.add('l.status_id', f.status_id)
        elif not scope.override_default_status:
            builder.add('l.status_id', scope.active_status_id)

        builder.add('l.location_type_id', f.location_type_id)
        builder.add_ilike('l.city', f.city)
        builder.add_ilike('l.province_or_state', f.province_or_state)
        builder.add_ilike('l.country', f.country)

        builder.add('l.created_by', f.created_by)
        builder.add_date_range('l.created_at', ranges['created_after'], ranges['created_before'])

        builder.add_keyword(permitted_columns(LOCATION_KEYWORD_COLUMNS, scope), f.keyword)
        return builder.build()
