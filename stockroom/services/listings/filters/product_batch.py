"""WHERE clause builder for product batch listings.

Expected aliases: ``product_batches pb``, ``skus sk``, ``products p`` and
``manufacturers m``.
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
from stockroom.services.listings.schemas import ProductBatchFilters, VisibilityScope
from stockroom.services.listings.utils.query_builder import ConditionBuilder, WhereClause, normalize_keyword

# Lot numbers are always searchable; the rest follow the caller's permissions.
PRODUCT_BATCH_LOT_COLUMN = 'pb.lot_number'
PRODUCT_BATCH_KEYWORD_COLUMNS = ('p.name', 'sk.sku', 'm.name')


def build_product_batch_filter(
    filters: Any = None,
    scope: Optional[VisibilityScope] = None,
    log: Optional[logging.Logger] = None,
) -> WhereClause:
    """Build the WHERE clause for a product batch listing.

    Args:
        filters: ``ProductBatchFilters`` or a mapping with camelCase/snake_case keys.
        scope: ``force_empty_result`` short-circuits to no rows;
            ``keyword_fields`` narrows the optional keyword columns.
        log: Logger for construction failures.

    Returns:
        WhereClause: ``(where_clause, params)`` with placeholders from ``$1``.
    """
    f = coerce_filters(ProductBatchFilters, filters, 'product-batch')
    if scope is not None and scope.force_empty_result:
        return empty_result()
    with filter_build_context('product-batch', f, log):
        ranges = normalized_ranges(f, ('expiry_after', 'expiry_before'))
        builder = ConditionBuilder()

        builder.add_any('pb.status_id', f.status_ids, cast='uuid[]')
        builder.add_any('pb.sku_id', f.sku_ids, cast='uuid[]')
        builder.add_any('p.id', f.product_ids, cast='uuid[]')
        builder.add_any('pb.manufacturer_id', f.manufacturer_ids, cast='uuid[]')

        builder.add_template(f"{PRODUCT_BATCH_LOT_COLUMN} ILIKE {{p}}", normalize_keyword(f.lot_number))
        builder.add_date_range('pb.expiry_date', ranges['expiry_after'], ranges['expiry_before'])

        columns = [PRODUCT_BATCH_LOT_COLUMN, *permitted_columns(PRODUCT_BATCH_KEYWORD_COLUMNS, scope)]
        builder.add_keyword(columns, f.keyword)
        return builder.build()
