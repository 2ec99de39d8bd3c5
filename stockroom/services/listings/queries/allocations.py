"""Inventory allocation summary queries.

Allocations are listed one row per order: matching allocation rows are
aggregated in a CTE before orders and customers are joined, so the page
and its total both count orders rather than allocation rows.
"""

import logging
from typing import Any, Optional

from stockroom.lib.enums import normalize_sort_order
from stockroom.services.listings.filters.inventory_allocation import build_inventory_allocation_filter
from stockroom.services.listings.queries.base import QueryMixin
from stockroom.services.listings.schemas import PaginatedResult, VisibilityScope
from stockroom.services.listings.sort import resolve_sort
from stockroom.services.listings.utils.pagination import paginate_results

logger = logging.getLogger(__name__)

ALLOCATION_SUMMARY_QUERY = """\
WITH filtered_allocations AS (
    SELECT
        oi.order_id,
        ia.order_item_id,
        ia.warehouse_id,
        ia.allocated_quantity,
        ia.allocated_at,
        ia.created_at
    FROM inventory_allocations ia
    JOIN order_items oi ON ia.order_item_id = oi.id
    WHERE {raw_where}
),
allocation_summary AS (
    SELECT
        fa.order_id,
        COUNT(DISTINCT fa.order_item_id) AS allocated_item_count,
        SUM(fa.allocated_quantity) AS total_allocated_quantity,
        ARRAY_AGG(DISTINCT fa.warehouse_id) AS warehouse_ids,
        MAX(fa.allocated_at) AS allocated_at,
        MAX(fa.created_at) AS allocated_created_at
    FROM filtered_allocations fa
    GROUP BY fa.order_id
)
SELECT
    o.id AS order_id,
    o.order_number,
    o.order_date,
    ot.name AS order_type,
    ost.name AS order_status,
    so.payment_status_id,
    c.firstname AS customer_firstname,
    c.lastname AS customer_lastname,
    aa.allocated_item_count,
    aa.total_allocated_quantity,
    aa.warehouse_ids,
    aa.allocated_at,
    aa.allocated_created_at
FROM allocation_summary aa
JOIN orders o ON o.id = aa.order_id
LEFT JOIN sales_orders so ON so.id = o.id
LEFT JOIN customers c ON c.id = so.customer_id
LEFT JOIN order_types ot ON o.order_type_id = ot.id
LEFT JOIN order_status ost ON o.order_status_id = ost.id
WHERE {outer_where}
ORDER BY {sort_by} {sort_order}"""


class AllocationQueriesMixin(QueryMixin):
    """Paginated inventory allocation summaries."""

    async def get_paginated_inventory_allocations(
        self,
        filters: Any = None,
        page: Any = None,
        limit: Any = None,
        sort_by: Optional[str] = None,
        sort_order: Optional[str] = None,
        scope: Optional[VisibilityScope] = None,
    ) -> PaginatedResult:
        """List allocation summaries, one row per order.

        Args:
            filters: ``InventoryAllocationFilters`` or a mapping of filter keys.
            page: 1-based page number.
            limit: Page size.
            sort_by: Key from ``SORTABLE_FIELDS['inventory_allocations']``.
            sort_order: ``ASC`` or ``DESC``.
            scope: Keyword column restrictions.

        Returns:
            PaginatedResult: ``{data, pagination}``.
        """
        clauses = build_inventory_allocation_filter(filters, scope, log=logger)
        data_query = ALLOCATION_SUMMARY_QUERY.format(
            raw_where=clauses.raw.where_clause,
            outer_where=clauses.outer.where_clause,
            sort_by=resolve_sort('inventory_allocations', sort_by),
            sort_order=normalize_sort_order(sort_order).value,
        )
        return await paginate_results(
            self.execute,
            data_query=data_query,
            params=clauses.params,
            page=1 if page is None else page,
            limit=self.default_page_limit if limit is None else limit,
            max_limit=self.max_page_limit,
            log=logger,
        )
