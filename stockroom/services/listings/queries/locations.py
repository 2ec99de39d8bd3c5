"""Location listing queries."""

import logging
from typing import Any, Optional

from stockroom.services.listings.filters.location import build_location_filter
from stockroom.services.listings.queries.base import QueryMixin
from stockroom.services.listings.schemas import PaginatedResult, VisibilityScope

logger = logging.getLogger(__name__)

LOCATION_TABLE = 'locations l'

LOCATION_JOINS = (
    'LEFT JOIN location_types lt ON l.location_type_id = lt.id',
    'LEFT JOIN status s ON l.status_id = s.id',
    'LEFT JOIN users u1 ON l.created_by = u1.id',
)

LOCATION_COLUMNS = """\
    l.id,
    l.name,
    lt.name AS location_type_name,
    l.address_line1,
    l.address_line2,
    l.city,
    l.province_or_state,
    l.postal_code,
    l.country,
    l.is_archived,
    s.name AS status_name,
    l.status_date,
    l.created_at,
    l.updated_at,
    u1.firstname AS created_by_firstname,
    u1.lastname AS created_by_lastname"""


class LocationQueriesMixin(QueryMixin):
    """Paginated location listing."""

    async def get_paginated_locations(
        self,
        filters: Any = None,
        page: Any = None,
        limit: Any = None,
        sort_by: Optional[str] = None,
        sort_order: Optional[str] = None,
        scope: Optional[VisibilityScope] = None,
    ) -> PaginatedResult:
        where = build_location_filter(filters, scope, log=logger)
        return await self._paginate_listing(
            domain='locations',
            columns=LOCATION_COLUMNS,
            table_name=LOCATION_TABLE,
            joins=LOCATION_JOINS,
            where=where,
            page=page,
            limit=limit,
            sort_by=sort_by,
            sort_order=sort_order,
        )
