"""Outbound fulfillment listing queries."""

import logging
from typing import Any, Optional

from stockroom.services.listings.filters.fulfillment import build_fulfillment_filter
from stockroom.services.listings.queries.base import QueryMixin
from stockroom.services.listings.schemas import PaginatedResult, VisibilityScope

logger = logging.getLogger(__name__)

FULFILLMENT_TABLE = 'outbound_shipments os'

FULFILLMENT_JOINS = (
    'JOIN orders o ON os.order_id = o.id',
    'LEFT JOIN warehouses w ON os.warehouse_id = w.id',
    'LEFT JOIN delivery_methods dm ON os.delivery_method_id = dm.id',
    'LEFT JOIN shipment_status ss ON os.status_id = ss.id',
    'LEFT JOIN users u1 ON os.created_by = u1.id',
)

FULFILLMENT_COLUMNS = """\
    os.id AS shipment_id,
    os.order_id,
    o.order_number,
    os.warehouse_id,
    w.name AS warehouse_name,
    os.delivery_method_id,
    dm.method_name AS delivery_method,
    os.status_id,
    ss.code AS status_code,
    ss.name AS status_name,
    os.tracking_number,
    os.shipped_at,
    os.expected_delivery_date,
    os.created_at,
    os.updated_at,
    u1.firstname AS created_by_firstname,
    u1.lastname AS created_by_lastname"""


class FulfillmentQueriesMixin(QueryMixin):
    """Paginated outbound fulfillment listing."""

    async def get_paginated_fulfillments(
        self,
        filters: Any = None,
        page: Any = None,
        limit: Any = None,
        sort_by: Optional[str] = None,
        sort_order: Optional[str] = None,
        scope: Optional[VisibilityScope] = None,
    ) -> PaginatedResult:
        where = build_fulfillment_filter(filters, scope, log=logger)
        return await self._paginate_listing(
            domain='fulfillments',
            columns=FULFILLMENT_COLUMNS,
            table_name=FULFILLMENT_TABLE,
            joins=FULFILLMENT_JOINS,
            where=where,
            page=page,
            limit=limit,
            sort_by=sort_by,
            sort_order=sort_order,
        )
