"""WHERE clause builder for BOM listings.

Expected aliases: ``boms b``, ``skus s``, ``products p``,
``compliance_records cr`` and ``status st_compliance``.
"""

import logging
from typing import Any, Optional

from stockroom.services.listings.filters.base import (
    coerce_filters,
    filter_build_context,
    normalized_ranges,
    permitted_columns,
)
from stockroom.services.listings.schemas import BomFilters, VisibilityScope
from stockroom.services.listings.utils.query_builder import ConditionBuilder, WhereClause

BOM_KEYWORD_COLUMNS = ('b.name', 'b.code', 'b.description')


def build_bom_filter(
    filters: Any = None,
    *,
    scope: Optional[VisibilityScope] = None,
    log: Optional[logging.Logger] = None,
) -> WhereClause:
    """Build the WHERE clause for a BOM listing.

    Args:
        filters: ``BomFilters`` or a mapping with camelCase/snake_case keys.
        scope: Optional visibility constraints; only ``keyword_fields`` applies here.
        log: Logger for construction failures.

    Returns:
        WhereClause: ``(where_clause, params)`` with placeholders from ``$1``.

    Raises:
        QueryValidationError: If a filter has the wrong shape.
        QueryConstructionError: On any other failure while building.
    """
    f = coerce_filters(BomFilters, filters, 'bom')
    with filter_build_context('bom', f, log):
        ranges = normalized_ranges(
            f,
            ('compliance_issued_after', 'compliance_expired_before'),
            ('created_after', 'created_before'),
        )
        builder = ConditionBuilder()

        builder.add_one_or_many('b.sku_id', f.sku_id)
        builder.add_one_or_many('p.id', f.product_id)
        builder.add_ilike('p.name', f.product_name)
        builder.add_ilike('s.sku', f.sku_code)

        builder.add_ilike('cr.type', f.compliance_type)
        builder.add('cr.status_id', f.compliance_status_id)
        if f.only_active_compliance:
            builder.add_raw("LOWER(st_compliance.name) = 'active'")
        builder.add_date_range('cr.issued_date', after=ranges['compliance_issued_after'])
        builder.add_date_range('cr.expiry_date', before=ranges['compliance_expired_before'])

        builder.add('b.status_id', f.status_id)
        builder.add('b.is_active', f.is_active)
        builder.add('b.is_default', f.is_default)
        builder.add_compare('b.revision', '>=', f.revision_min)
        builder.add_compare('b.revision', '<=', f.revision_max)

        builder.add('b.created_by', f.created_by)
        builder.add('b.updated_by', f.updated_by)
        builder.add_date_range('b.created_at', ranges['created_after'], ranges['created_before'])

        builder.add_keyword(permitted_columns(BOM_KEYWORD_COLUMNS, scope), f.keyword)
        return builder.build()
