"""WHERE clause builder for discounts (``discounts d``)."""

import logging
from typing import Any, Optional

from stockroom.services.listings.filters.base import (
    apply_currently_valid,
    coerce_filters,
    filter_build_context,
    normalized_ranges,
    permitted_columns,
)
from stockroom.services.listings.schemas import DiscountFilters, VisibilityScope
from stockroom.services.listings.utils.date_range import parse_bound
from stockroom.services.listings.utils.query_builder import ConditionBuilder, WhereClause

DISCOUNT_KEYWORD_COLUMNS = ('d.name', 'd.description')


def build_discount_filter(
    filters: Any = None,
    scope: Optional[VisibilityScope] = None,
    log: Optional[logging.Logger] = None,
) -> WhereClause:
    """Build the WHERE clause for a discount listing.

    ``valid_on`` matches discounts whose window contains that instant;
    ``currently_valid`` (from the filter or the scope) does the same for ``NOW()``.
    """
    f = coerce_filters(DiscountFilters, filters, 'discount')
    scope = scope or VisibilityScope()
    with filter_build_context('discount', f, log):
        ranges = normalized_ranges(f, ('created_after', 'created_before'))
        builder = ConditionBuilder()

        builder.add('d.name', f.name)
        builder.add('d.discount_type', f.discount_type)

        if f.status_id is not None:
            builder.add('d.status_id', f.status_id)
        elif not scope.override_default_status:
            builder.add('d.status_id', scope.active_status_id)

        builder.add_compare('d.valid_from', '>=', parse_bound(f.valid_from))
        builder.add_compare('d.valid_to', '<=', parse_bound(f.valid_to))
        builder.add_template(
            '(d.valid_from <= {p} AND (d.valid_to IS NULL OR d.valid_to >= {p}))',
            parse_bound(f.valid_on),
        )
        if f.currently_valid or scope.restrict_to_currently_valid:
            apply_currently_valid(builder, 'd.valid_from', 'd.valid_to')

        builder.add('d.created_by', f.created_by)
        builder.add('d.updated_by', f.updated_by)
        builder.add_date_range('d.created_at', ranges['created_after'], ranges['created_before'])

        builder.add_keyword(permitted_columns(DISCOUNT_KEYWORD_COLUMNS, scope), f.keyword)
        return builder.build()
