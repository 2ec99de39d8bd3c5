"""Order listing queries."""

import logging
from typing import Any, Optional

from stockroom.services.listings.filters.order import build_order_filter
from stockroom.services.listings.queries.base import QueryMixin
from stockroom.services.listings.schemas import PaginatedResult, VisibilityScope

logger = logging.getLogger(__name__)

ORDER_TABLE = 'orders o'

ORDER_JOINS = (
    'LEFT JOIN order_types ot ON o.order_type_id = ot.id',
    'LEFT JOIN order_status os ON o.order_status_id = os.id',
    'LEFT JOIN users u1 ON o.created_by = u1.id',
    'LEFT JOIN users u2 ON o.updated_by = u2.id',
)

ORDER_COLUMNS = """\
    o.id,
    o.order_number,
    ot.name AS order_type,
    o.order_date,
    os.name AS status_name,
    os.code AS status_code,
    o.status_date,
    o.note,
    o.created_at,
    o.updated_at,
    u1.firstname AS created_by_firstname,
    u1.lastname AS created_by_lastname,
    u2.firstname AS updated_by_firstname,
    u2.lastname AS updated_by_lastname"""


class OrderQueriesMixin(QueryMixin):
    """Paginated order listing."""

    async def get_paginated_orders(
        self,
        filters: Any = None,
        page: Any = None,
        limit: Any = None,
        sort_by: Optional[str] = None,
        sort_order: Optional[str] = None,
        scope: Optional[VisibilityScope] = None,
    ) -> PaginatedResult:
        where = build_order_filter(filters, scope, log=logger)
        return await self._paginate_listing(
            domain='orders',
            columns=ORDER_COLUMNS,
            table_name=ORDER_TABLE,
            joins=ORDER_JOINS,
            where=where,
            page=page,
            limit=limit,
            sort_by=sort_by,
            sort_order=sort_order,
        )
