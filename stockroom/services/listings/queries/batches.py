"""Product and packaging material batch listing queries."""

import logging
from typing import Any, Optional

from stockroom.services.listings.filters.packaging_material_batch import build_packaging_material_batch_filter
from stockroom.services.listings.filters.product_batch import build_product_batch_filter
from stockroom.services.listings.queries.base import QueryMixin
from stockroom.services.listings.schemas import PaginatedResult, VisibilityScope

logger = logging.getLogger(__name__)

PRODUCT_BATCH_TABLE = 'product_batches pb'

PRODUCT_BATCH_JOINS = (
    'JOIN skus sk ON sk.id = pb.sku_id',
    'JOIN products p ON p.id = sk.product_id',
    'LEFT JOIN manufacturers m ON m.id = pb.manufacturer_id',
    'JOIN batch_status bs ON bs.id = pb.status_id',
    'LEFT JOIN users rb ON rb.id = pb.released_by',
    'LEFT JOIN users cb ON cb.id = pb.created_by',
    'LEFT JOIN users ub ON ub.id = pb.updated_by',
)

PRODUCT_BATCH_COLUMNS = """\
    pb.id,
    pb.lot_number,
    pb.sku_id,
    sk.sku AS sku_code,
    sk.size_label,
    sk.country_code,
    p.id AS product_id,
    p.name AS product_name,
    p.brand,
    p.category,
    pb.manufacturer_id,
    m.name AS manufacturer_name,
    pb.manufacture_date,
    pb.expiry_date,
    pb.received_date,
    pb.initial_quantity,
    pb.status_id,
    bs.name AS status_name,
    pb.status_date,
    pb.released_at,
    rb.firstname AS released_by_firstname,
    rb.lastname AS released_by_lastname,
    pb.created_at,
    cb.firstname AS created_by_firstname,
    cb.lastname AS created_by_lastname,
    pb.updated_at,
    ub.firstname AS updated_by_firstname,
    ub.lastname AS updated_by_lastname"""

MATERIAL_BATCH_TABLE = 'packaging_material_batches pmb'

MATERIAL_BATCH_JOINS = (
    'JOIN packaging_material_suppliers pms ON pmb.packaging_material_supplier_id = pms.id',
    'JOIN packaging_materials pm ON pms.packaging_material_id = pm.id',
    'JOIN suppliers s ON pms.supplier_id = s.id',
    'JOIN batch_status bs ON bs.id = pmb.status_id',
    'LEFT JOIN users rb ON rb.id = pmb.received_by',
    'LEFT JOIN users cb ON cb.id = pmb.created_by',
    'LEFT JOIN users ub ON ub.id = pmb.updated_by',
)

MATERIAL_BATCH_COLUMNS = """\
    pmb.id,
    pmb.lot_number,
    pmb.quantity,
    pmb.unit,
    pmb.manufacture_date,
    pmb.expiry_date,
    pmb.received_at,
    rb.firstname AS received_by_firstname,
    rb.lastname AS received_by_lastname,
    pmb.material_snapshot_name,
    pmb.received_label_name,
    pmb.unit_cost,
    pmb.currency,
    pmb.total_cost,
    pmb.status_id,
    bs.name AS status_name,
    pmb.status_date,
    pm.id AS packaging_material_id,
    pm.code AS packaging_material_code,
    pm.category AS packaging_material_category,
    s.id AS supplier_id,
    s.name AS supplier_name,
    pms.is_preferred,
    pms.lead_time_days,
    pmb.created_at,
    cb.firstname AS created_by_firstname,
    cb.lastname AS created_by_lastname,
    pmb.updated_at,
    ub.firstname AS updated_by_firstname,
    ub.lastname AS updated_by_lastname"""


class BatchQueriesMixin(QueryMixin):
    """Paginated product and packaging material batches."""

    async def get_paginated_product_batches(
        self,
        filters: Any = None,
        page: Any = None,
        limit: Any = None,
        sort_by: Optional[str] = None,
        sort_order: Optional[str] = None,
        scope: Optional[VisibilityScope] = None,
    ) -> PaginatedResult:
        """List product batches with SKU, product and manufacturer context.

        Args:
            filters: ``ProductBatchFilters`` or a mapping of filter keys.
            page: 1-based page number.
            limit: Page size.
            sort_by: Key from ``SORTABLE_FIELDS['product_batches']``.
            sort_order: ``ASC`` or ``DESC``.
            scope: Keyword permissions and the empty-result flag.

        Returns:
            PaginatedResult: ``{data, pagination}``.
        """
        where = build_product_batch_filter(filters, scope, log=logger)
        return await self._paginate_listing(
            domain='product_batches',
            columns=PRODUCT_BATCH_COLUMNS,
            table_name=PRODUCT_BATCH_TABLE,
            joins=PRODUCT_BATCH_JOINS,
            where=where,
            page=page,
            limit=limit,
            sort_by=sort_by,
            sort_order=sort_order,
        )

    async def get_paginated_packaging_material_batches(
        self,
        filters: Any = None,
        page: Any = None,
        limit: Any = None,
        sort_by: Optional[str] = None,
        sort_order: Optional[str] = None,
        scope: Optional[VisibilityScope] = None,
    ) -> PaginatedResult:
        """List packaging material batches with supplier context."""
        where = build_packaging_material_batch_filter(filters, scope, log=logger)
        return await self._paginate_listing(
            domain='packaging_material_batches',
            columns=MATERIAL_BATCH_COLUMNS,
            table_name=MATERIAL_BATCH_TABLE,
            joins=MATERIAL_BATCH_JOINS,
            where=where,
            page=page,
            limit=limit,
            sort_by=sort_by,
            sort_order=sort_order,
        )
