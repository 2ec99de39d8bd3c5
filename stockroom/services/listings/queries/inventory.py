"""Location and warehouse inventory listing queries.

Both listings join the polymorphic batch registry to either side of the
product / packaging material split. Filter builders add the visibility
guard that keeps half-linked rows out of both the page and the total.
"""

import logging
from typing import Any, Optional

from stockroom.services.listings.filters.inventory import (
    build_location_inventory_filter,
    build_warehouse_inventory_filter,
)
from stockroom.services.listings.queries.base import QueryMixin
from stockroom.services.listings.schemas import PaginatedResult

logger = logging.getLogger(__name__)

BATCH_JOINS = (
    'JOIN batch_registry br ON {prefix}.batch_id = br.id',
    'LEFT JOIN product_batches pb ON br.product_batch_id = pb.id',
    'LEFT JOIN skus s ON pb.sku_id = s.id',
    'LEFT JOIN products p ON s.product_id = p.id',
    'LEFT JOIN packaging_material_batches pmb ON br.packaging_material_batch_id = pmb.id',
    'LEFT JOIN packaging_material_suppliers pms ON pmb.packaging_material_supplier_id = pms.id',
    'LEFT JOIN packaging_materials pm ON pms.packaging_material_id = pm.id',
    'LEFT JOIN parts pt ON pm.part_id = pt.id',
    'LEFT JOIN inventory_status st ON {prefix}.status_id = st.id',
)

ITEM_COLUMNS = """\
    br.batch_type,
    CASE
        WHEN br.batch_type = 'product' THEN pb.lot_number
        WHEN br.batch_type = 'packaging_material' THEN pmb.lot_number
    END AS lot_number,
    CASE
        WHEN br.batch_type = 'product' THEN pb.expiry_date
        WHEN br.batch_type = 'packaging_material' THEN pmb.expiry_date
    END AS expiry_date,
    s.sku,
    p.name AS product_name,
    p.brand,
    pmb.material_snapshot_name AS material_name,
    pm.code AS material_code,
    pt.code AS part_code,
    pt.name AS part_name,
    st.name AS status_name"""

LOCATION_INVENTORY_TABLE = 'location_inventory li'

LOCATION_INVENTORY_JOINS = (
    'JOIN locations loc ON li.location_id = loc.id',
    *(join.format(prefix='li') for join in BATCH_JOINS),
)

LOCATION_INVENTORY_COLUMNS = f"""\
    li.id AS location_inventory_id,
    li.location_id,
    loc.name AS location_name,
    li.location_quantity,
    li.reserved_quantity,
    (li.location_quantity - li.reserved_quantity) AS available_quantity,
    li.inbound_date,
    li.outbound_date,
    li.last_update,
    li.created_at,
{ITEM_COLUMNS}"""

WAREHOUSE_INVENTORY_TABLE = 'warehouse_inventory wi'

WAREHOUSE_INVENTORY_JOINS = (
    'JOIN warehouses wh ON wi.warehouse_id = wh.id',
    *(join.format(prefix='wi') for join in BATCH_JOINS),
)

WAREHOUSE_INVENTORY_COLUMNS = f"""\
    wi.id AS warehouse_inventory_id,
    wi.warehouse_id,
    wh.name AS warehouse_name,
    wi.warehouse_quantity,
    wi.reserved_quantity,
    (wi.warehouse_quantity - wi.reserved_quantity) AS available_quantity,
    wi.inbound_date,
    wi.outbound_date,
    wi.last_update,
    wi.created_at,
{ITEM_COLUMNS}"""


class InventoryQueriesMixin(QueryMixin):
    """Paginated location and warehouse inventory."""

    async def get_paginated_location_inventory(
        self,
        filters: Any = None,
        page: Any = None,
        limit: Any = None,
        sort_by: Optional[str] = None,
        sort_order: Optional[str] = None,
    ) -> PaginatedResult:
        """List location inventory rows of both batch types.

        Args:
            filters: ``LocationInventoryFilters`` or a mapping; ``batchType``
                narrows to one side of the batch registry.
            page: 1-based page number.
            limit: Page size.
            sort_by: Key from ``SORTABLE_FIELDS['location_inventory']``.
            sort_order: ``ASC`` or ``DESC``.

        Returns:
            PaginatedResult: ``{data, pagination}``.
        """
        where = build_location_inventory_filter(filters, log=logger)
        return await self._paginate_listing(
            domain='location_inventory',
            columns=LOCATION_INVENTORY_COLUMNS,
            table_name=LOCATION_INVENTORY_TABLE,
            joins=LOCATION_INVENTORY_JOINS,
            where=where,
            page=page,
            limit=limit,
            sort_by=sort_by,
            sort_order=sort_order,
        )

    async def get_paginated_warehouse_inventory(
        self,
        filters: Any = None,
        page: Any = None,
        limit: Any = None,
        sort_by: Optional[str] = None,
        sort_order: Optional[str] = None,
    ) -> PaginatedResult:
        """List warehouse inventory rows of both batch types."""
        where = build_warehouse_inventory_filter(filters, log=logger)
        return await self._paginate_listing(
            domain='warehouse_inventory',
            columns=WAREHOUSE_INVENTORY_COLUMNS,
            table_name=WAREHOUSE_INVENTORY_TABLE,
            joins=WAREHOUSE_INVENTORY_JOINS,
            where=where,
            page=page,
            limit=limit,
            sort_by=sort_by,
            sort_order=sort_order,
        )
