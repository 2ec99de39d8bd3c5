"""Address listing queries."""

import logging
from typing import Any, Optional

from stockroom.services.listings.filters.address import build_address_filter
from stockroom.services.listings.queries.base import QueryMixin
from stockroom.services.listings.schemas import PaginatedResult, VisibilityScope

logger = logging.getLogger(__name__)

ADDRESS_TABLE = 'addresses a'

ADDRESS_JOINS = (
    'LEFT JOIN customers c ON a.customer_id = c.id',
    'LEFT JOIN users u1 ON a.created_by = u1.id',
    'LEFT JOIN users u2 ON a.updated_by = u2.id',
)

ADDRESS_COLUMNS = """\
    a.id,
    a.customer_id,
    a.full_name,
    a.phone,
    a.email,
    a.label,
    a.address_line1,
    a.address_line2,
    a.city,
    a.state,
    a.postal_code,
    a.country,
    a.region,
    a.note,
    a.created_at,
    a.updated_at,
    c.firstname AS customer_firstname,
    c.lastname AS customer_lastname,
    c.email AS customer_email,
    u1.firstname AS created_by_firstname,
    u1.lastname AS created_by_lastname,
    u2.firstname AS updated_by_firstname,
    u2.lastname AS updated_by_lastname"""


class AddressQueriesMixin(QueryMixin):
    """Paginated address listing."""

    async def get_paginated_addresses(
        self,
        filters: Any = None,
        page: Any = None,
        limit: Any = None,
        sort_by: Optional[str] = None,
        sort_order: Optional[str] = None,
        scope: Optional[VisibilityScope] = None,
    ) -> PaginatedResult:
        where = build_address_filter(filters, scope, log=logger)
        return await self._paginate_listing(
            domain='addresses',
            columns=ADDRESS_COLUMNS,
            table_name=ADDRESS_TABLE,
            joins=ADDRESS_JOINS,
            where=where,
            page=page,
            limit=limit,
            sort_by=sort_by,
            sort_order=sort_order,
        )
