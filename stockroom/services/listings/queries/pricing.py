"""Pricing listing queries."""

import logging
from typing import Any, Optional

from stockroom.services.listings.filters.pricing import build_pricing_filter
from stockroom.services.listings.queries.base import QueryMixin
from stockroom.services.listings.schemas import PaginatedResult, VisibilityScope

logger = logging.getLogger(__name__)

PRICING_TABLE = 'pricing p'

PRICING_JOINS = (
    'JOIN skus s ON p.sku_id = s.id',
    'JOIN products pr ON s.product_id = pr.id',
    'JOIN pricing_types pt ON p.price_type_id = pt.id',
    'LEFT JOIN locations l ON p.location_id = l.id',
    'LEFT JOIN status st ON p.status_id = st.id',
)

PRICING_COLUMNS = """\
    p.id AS pricing_id,
    p.price,
    p.valid_from,
    p.valid_to,
    p.status_id,
    st.name AS status_name,
    pt.id AS pricing_type_id,
    pt.name AS pricing_type,
    l.id AS location_id,
    l.name AS location_name,
    s.id AS sku_id,
    s.sku,
    s.country_code,
    s.size_label,
    s.market_region,
    pr.id AS product_id,
    pr.name AS product_name,
    pr.brand,
    pr.category,
    p.created_at,
    p.updated_at"""


class PricingQueriesMixin(QueryMixin):
    """Paginated pricing listing."""

    async def get_paginated_pricing(
        self,
        filters: Any = None,
        page: Any = None,
        limit: Any = None,
        sort_by: Optional[str] = None,
        sort_order: Optional[str] = None,
        scope: Optional[VisibilityScope] = None,
    ) -> PaginatedResult:
        """List price points joined to SKU, product and pricing type."""
        where = build_pricing_filter(filters, scope, log=logger)
        return await self._paginate_listing(
            domain='pricing',
            columns=PRICING_COLUMNS,
            table_name=PRICING_TABLE,
            joins=PRICING_JOINS,
            where=where,
            page=page,
            limit=limit,
            sort_by=sort_by,
            sort_order=sort_order,
        )
