"""WHERE clause builder for inventory allocation summaries.

Allocation summaries are built in two stages: raw ``inventory_allocations
ia`` rows are filtered and aggregated per order into ``aa``, which is then
joined to ``orders o``, ``sales_orders so`` and ``customers c`` and
filtered again. Each stage gets its own clause, numbered from one shared
counter so both can be bound into a single statement.
"""

import logging
from typing import Any, List, NamedTuple, Optional

from stockroom.services.listings.filters.base import (
    coerce_filters,
    filter_build_context,
    normalized_ranges,
    permitted_columns,
)
from stockroom.services.listings.schemas import InventoryAllocationFilters, VisibilityScope
from stockroom.services.listings.utils.query_builder import ConditionBuilder, WhereClause

ALLOCATION_KEYWORD_COLUMNS = (
    'o.order_number',
    "COALESCE(c.firstname || ' ' || c.lastname, '')",
)


class AllocationWhereClauses(NamedTuple):
    """Clauses for the raw allocation rows and for the per-order aggregate."""
    raw: WhereClause
    outer: WhereClause

    @property
    def params(self) -> List[Any]:
        """Values for the combined statement, raw placeholders first."""
        return [*self.raw.params, *self.outer.params]


def build_inventory_allocation_filter(
    filters: Any = None,
    scope: Optional[VisibilityScope] = None,
    log: Optional[logging.Logger] = None,
) -> AllocationWhereClauses:
    """Build both WHERE clauses for an allocation summary listing.

    The outer clause continues numbering where the raw clause stops, so
    ``raw`` uses ``$1..$k`` and ``outer`` uses ``$k+1..$n``.
    """
    f = coerce_filters(InventoryAllocationFilters, filters, 'inventory-allocation')
    with filter_build_context('inventory-allocation', f, log):
        ranges = normalized_ranges(
            f,
            ('allocated_after', 'allocated_before'),
            ('aggregated_allocated_after', 'aggregated_allocated_before'),
            ('aggregated_created_after', 'aggregated_created_before'),
        )

        raw = ConditionBuilder()
        raw.add_any('ia.status_id', f.status_ids, cast='uuid[]')
        raw.add_any('ia.warehouse_id', f.warehouse_ids, cast='uuid[]')
        raw.add_any('ia.batch_id', f.batch_ids, cast='uuid[]')
        raw.add('ia.created_by', f.allocation_created_by)
        raw.add_date_range('ia.allocated_at', ranges['allocated_after'], ranges['allocated_before'])
        raw_clause = raw.build()

        outer = ConditionBuilder(param_index=raw.param_index)
        outer.add_date_range(
            'aa.allocated_at',
            ranges['aggregated_allocated_after'],
            ranges['aggregated_allocated_before'],
        )
        outer.add_date_range(
            'aa.allocated_created_at',
            ranges['aggregated_created_after'],
            ranges['aggregated_created_before'],
        )
        outer.add_ilike('o.order_number', f.order_number)
        outer.add('o.order_status_id', f.order_status_id)
        outer.add('o.order_type_id', f.order_type_id)
        outer.add('o.created_by', f.order_created_by)
        outer.add('so.payment_status_id', f.payment_status_id)
        outer.add_keyword(permitted_columns(ALLOCATION_KEYWORD_COLUMNS, scope), f.keyword)

        return AllocationWhereClauses(raw_clause, outer.build())
