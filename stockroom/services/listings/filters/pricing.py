"""WHERE clause builder for pricing records.

Expected aliases: ``pricing p``, ``products pr``, ``skus s`` and ``pricing_types pt``.
"""

import logging
from typing import Any, Optional

from stockroom.services.listings.filters.base import (
    apply_currently_valid,
    coerce_filters,
    filter_build_context,
    normalized_ranges,
    permitted_columns,
)
from stockroom.services.listings.schemas import PricingFilters, VisibilityScope
from stockroom.services.listings.utils.date_range import parse_bound
from stockroom.services.listings.utils.query_builder import ConditionBuilder, WhereClause

PRICING_KEYWORD_COLUMNS = ('pr.name', 's.sku', 'pt.name')


def build_pricing_filter(
    filters: Any = None,
    scope: Optional[VisibilityScope] = None,
    log: Optional[logging.Logger] = None,
) -> WhereClause:
    """Build the WHERE clause for a pricing listing."""
    f = coerce_filters(PricingFilters, filters, 'pricing')
    scope = scope or VisibilityScope()
    with filter_build_context('pricing', f, log):
        ranges = normalized_ranges(f, ('created_after', 'created_before'))
        builder = ConditionBuilder()

        builder.add('pr.brand', f.brand)
        builder.add('pt.name', f.pricing_type)
        builder.add('s.country_code', f.country_code)
        builder.add('s.size_label', f.size_label)

        builder.add('p.sku_id', f.sku_id)
        builder.add('p.price_type_id', f.price_type_id)
        builder.add('p.location_id', f.location_id)
        if f.status_id is not None:
            builder.add('p.status_id', f.status_id)
        elif not scope.override_default_status:
            builder.add('p.status_id', scope.active_status_id)

        builder.add_compare('p.valid_from', '>=', parse_bound(f.valid_from))
        builder.add_compare('p.valid_to', '<=', parse_bound(f.valid_to))
        builder.add_template(
            '(p.valid_from <= {p} AND (p.valid_to IS NULL OR p.valid_to >= {p}))',
            parse_bound(f.valid_on),
        )
        if f.currently_valid or scope.restrict_to_currently_valid:
            apply_currently_valid(builder, 'p.valid_from', 'p.valid_to')

        builder.add('p.created_by', f.created_by)
        builder.add('p.updated_by', f.updated_by)
        builder.add_date_range('p.created_at', ranges['created_after'], ranges['created_before'])

        builder.add_keyword(permitted_columns(PRICING_KEYWORD_COLUMNS, scope), f.keyword)
        return builder.build()
