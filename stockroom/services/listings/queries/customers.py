"""Customer listing and lookup queries."""

import logging
from typing import Any, Optional

from stockroom.services.listings.filters.customer import build_customer_filter
from stockroom.services.listings.queries.base import QueryMixin, render_select
from stockroom.services.listings.schemas import OffsetPage, PaginatedResult, VisibilityScope
from stockroom.services.listings.sort import resolve_sort
from stockroom.services.listings.utils.pagination import paginate_by_offset

logger = logging.getLogger(__name__)

CUSTOMER_TABLE = 'customers c'

CUSTOMER_JOINS = (
    'LEFT JOIN status s ON c.status_id = s.id',
    'LEFT JOIN users u1 ON c.created_by = u1.id',
    'LEFT JOIN users u2 ON c.updated_by = u2.id',
)

CUSTOMER_COLUMNS = """\
    c.id,
    c.firstname,
    c.lastname,
    c.email,
    c.phone_number,
    c.region,
    c.country,
    c.note,
    c.is_archived,
    s.name AS status_name,
    c.status_date,
    c.created_at,
    c.updated_at,
    u1.firstname AS created_by_firstname,
    u1.lastname AS created_by_lastname,
    u2.firstname AS updated_by_firstname,
    u2.lastname AS updated_by_lastname"""

CUSTOMER_LOOKUP_COLUMNS = """\
    c.id,
    c.firstname,
    c.lastname,
    c.email,
    c.phone_number"""


class CustomerQueriesMixin(QueryMixin):
    """Customer table listing and dropdown lookup."""

    async def get_paginated_customers(
        self,
        filters: Any = None,
        page: Any = None,
        limit: Any = None,
        sort_by: Optional[str] = None,
        sort_order: Optional[str] = None,
        scope: Optional[VisibilityScope] = None,
    ) -> PaginatedResult:
        """List customers with status and audit names."""
        where = build_customer_filter(filters, scope, log=logger)
        return await self._paginate_listing(
            domain='customers',
            columns=CUSTOMER_COLUMNS,
            table_name=CUSTOMER_TABLE,
            joins=CUSTOMER_JOINS,
            where=where,
            page=page,
            limit=limit,
            sort_by=sort_by,
            sort_order=sort_order,
        )

    async def lookup_customers(
        self,
        filters: Any = None,
        offset: Any = 0,
        limit: Any = None,
        scope: Optional[VisibilityScope] = None,
    ) -> OffsetPage:
        """Load-more slice of customers for dropdowns, ordered by name."""
        where = build_customer_filter(filters, scope, log=logger)
        query_text = render_select(CUSTOMER_LOOKUP_COLUMNS, CUSTOMER_TABLE, CUSTOMER_JOINS, where.where_clause)
        return await paginate_by_offset(
            self.execute,
            query_text=query_text,
            params=where.params,
            offset=offset,
            limit=self.default_page_limit if limit is None else limit,
            sort_by=resolve_sort('customers', 'firstname'),
            sort_order='ASC',
            max_limit=self.max_page_limit,
            log=logger,
        )
