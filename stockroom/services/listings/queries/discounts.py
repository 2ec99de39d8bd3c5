"""Discount listing queries."""

import logging
from typing import Any, Optional

from stockroom.services.listings.filters.discount import build_discount_filter
from stockroom.services.listings.queries.base import QueryMixin
from stockroom.services.listings.schemas import PaginatedResult, VisibilityScope

logger = logging.getLogger(__name__)

DISCOUNT_TABLE = 'discounts d'

DISCOUNT_JOINS = (
    'LEFT JOIN status s ON d.status_id = s.id',
    'LEFT JOIN users u1 ON d.created_by = u1.id',
    'LEFT JOIN users u2 ON d.updated_by = u2.id',
)

DISCOUNT_COLUMNS = """\
    d.id,
    d.name,
    d.discount_type,
    d.discount_value,
    d.valid_from,
    d.valid_to,
    d.description,
    d.status_id,
    s.name AS status_name,
    d.created_at,
    d.updated_at,
    u1.firstname AS created_by_firstname,
    u1.lastname AS created_by_lastname,
    u2.firstname AS updated_by_firstname,
    u2.lastname AS updated_by_lastname"""


class DiscountQueriesMixin(QueryMixin):
    """Paginated discount listing."""

    async def get_paginated_discounts(
        self,
        filters: Any = None,
        page: Any = None,
        limit: Any = None,
        sort_by: Optional[str] = None,
        sort_order: Optional[str] = None,
        scope: Optional[VisibilityScope] = None,
    ) -> PaginatedResult:
        where = build_discount_filter(filters, scope, log=logger)
        return await self._paginate_listing(
            domain='discounts',
            columns=DISCOUNT_COLUMNS,
            table_name=DISCOUNT_TABLE,
            joins=DISCOUNT_JOINS,
            where=where,
            page=page,
            limit=limit,
            sort_by=sort_by,
            sort_order=sort_order,
        )
