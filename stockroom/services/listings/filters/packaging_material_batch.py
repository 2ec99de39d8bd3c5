"""WHERE clause builder for packaging material batch listings.

Expected aliases: ``packaging_material_batches pmb``,
``packaging_material_suppliers pms``, ``packaging_materials pm`` and
``suppliers s``. Names are matched on the batch's snapshot columns, not
on the mutable material master.
"""

import logging
from typing import Any, Optional

from stockroom.services.listings.filters.base import (
    coerce_filters,
    empty_result,
    filter_build_context,
    normalized_ranges,
    permitted_columns,
)
from stockroom.services.listings.schemas import PackagingMaterialBatchFilters, VisibilityScope
from stockroom.services.listings.utils.query_builder import ConditionBuilder, WhereClause, normalize_keyword

MATERIAL_BATCH_LOT_COLUMN = 'pmb.lot_number'
MATERIAL_BATCH_KEYWORD_COLUMNS = (
    'pmb.material_snapshot_name',
    'pmb.received_label_name',
    'pm.code',
    's.name',
)


def build_packaging_material_batch_filter(
    filters: Any = None,
    scope: Optional[VisibilityScope] = None,
    log: Optional[logging.Logger] = None,
) -> WhereClause:
    """Build the WHERE clause for a packaging material batch listing."""
    f = coerce_filters(PackagingMaterialBatchFilters, filters, 'packaging-material-batch')
    if scope is not None and scope.force_empty_result:
        return empty_result()
    with filter_build_context('packaging-material-batch', f, log):
        ranges = normalized_ranges(
            f,
            ('expiry_after', 'expiry_before'),
            ('received_after', 'received_before'),
        )
        builder = ConditionBuilder()

        builder.add_any('pmb.status_id', f.status_ids, cast='uuid[]')
        builder.add_any('pm.id', f.packaging_material_ids, cast='uuid[]')
        builder.add_any('s.id', f.supplier_ids, cast='uuid[]')
        if f.preferred_supplier_only:
            builder.add_raw('pms.is_preferred = true')

        builder.add_template(f"{MATERIAL_BATCH_LOT_COLUMN} ILIKE {{p}}", normalize_keyword(f.lot_number))
        builder.add_date_range('pmb.expiry_date', ranges['expiry_after'], ranges['expiry_before'])
        builder.add_date_range('pmb.received_at', ranges['received_after'], ranges['received_before'])

        columns = [MATERIAL_BATCH_LOT_COLUMN, *permitted_columns(MATERIAL_BATCH_KEYWORD_COLUMNS, scope)]
        builder.add_keyword(columns, f.keyword)
        return builder.build()
