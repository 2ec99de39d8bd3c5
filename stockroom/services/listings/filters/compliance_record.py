"""WHERE clause builder for compliance records.

Expected aliases: ``compliance_records cr``, ``skus s`` and ``products p``.
"""

import logging
from typing import Any, Optional

from stockroom.services.listings.filters.base import (
    coerce_filters,
    filter_build_context,
    normalized_ranges,
    permitted_columns,
)
from stockroom.services.listings.schemas import ComplianceRecordFilters, VisibilityScope
from stockroom.services.listings.utils.query_builder import ConditionBuilder, WhereClause

COMPLIANCE_KEYWORD_COLUMNS = ('cr.compliance_id', 's.sku', 'p.name', 'p.brand', 'p.category')


def build_compliance_record_filter(
    filters: Any = None,
    scope: Optional[VisibilityScope] = None,
    log: Optional[logging.Logger] = None,
) -> WhereClause:
    """Build the WHERE clause for a compliance record listing."""
    f = coerce_filters(ComplianceRecordFilters, filters, 'compliance-record')
    with filter_build_context('compliance-record', f, log):
        ranges = normalized_ranges(
            f,
            ('issued_after', 'issued_before'),
            ('expiring_after', 'expiring_before'),
            ('created_after', 'created_before'),
            ('updated_after', 'updated_before'),
        )
        builder = ConditionBuilder()

        builder.add('cr.type', f.type)
        builder.add_any('cr.status_id', f.status_ids, cast='uuid[]')
        builder.add_ilike('cr.compliance_id', f.compliance_id)
        builder.add_date_range('cr.issued_date', ranges['issued_after'], ranges['issued_before'])
        builder.add_date_range('cr.expiry_date', ranges['expiring_after'], ranges['expiring_before'])

        builder.add('cr.created_by', f.created_by)
        builder.add('cr.updated_by', f.updated_by)
        builder.add_date_range('cr.created_at', ranges['created_after'], ranges['created_before'])
        builder.add_date_range('cr.updated_at', ranges['updated_after'], ranges['updated_before'])

        builder.add_any('s.id', f.sku_ids, cast='uuid[]')
        builder.add_ilike('s.sku', f.sku)
        builder.add_ilike('s.size_label', f.size_label)
        builder.add_ilike('s.market_region', f.market_region)
        builder.add_ilike('p.name', f.product_name)
        builder.add_ilike('p.brand', f.brand)
        builder.add_ilike('p.category', f.category)

        builder.add_keyword(permitted_columns(COMPLIANCE_KEYWORD_COLUMNS, scope), f.keyword)
        return builder.build()
