"""Compliance record listing queries."""

import logging
from typing import Any, Optional

from stockroom.services.listings.filters.compliance_record import build_compliance_record_filter
from stockroom.services.listings.queries.base import QueryMixin
from stockroom.services.listings.schemas import PaginatedResult, VisibilityScope

logger = logging.getLogger(__name__)

COMPLIANCE_TABLE = 'compliance_records cr'

COMPLIANCE_JOINS = (
    'JOIN skus s ON cr.sku_id = s.id',
    'JOIN products p ON s.product_id = p.id',
    'LEFT JOIN status st ON cr.status_id = st.id',
    'LEFT JOIN users u1 ON cr.created_by = u1.id',
    'LEFT JOIN users u2 ON cr.updated_by = u2.id',
)

COMPLIANCE_COLUMNS = """\
    cr.id,
    cr.type,
    cr.compliance_id,
    cr.issued_date,
    cr.expiry_date,
    cr.description,
    st.name AS status_name,
    cr.status_date,
    cr.created_at,
    cr.updated_at,
    s.id AS sku_id,
    s.sku,
    s.size_label,
    s.market_region,
    p.id AS product_id,
    p.name AS product_name,
    p.brand,
    p.category,
    u1.firstname AS created_by_firstname,
    u1.lastname AS created_by_lastname,
    u2.firstname AS updated_by_firstname,
    u2.lastname AS updated_by_lastname"""


class ComplianceQueriesMixin(QueryMixin):
    """Paginated compliance record listing."""

    async def get_paginated_compliance_records(
        self,
        filters: Any = None,
        page: Any = None,
        limit: Any = None,
        sort_by: Optional[str] = None,
        sort_order: Optional[str] = None,
        scope: Optional[VisibilityScope] = None,
    ) -> PaginatedResult:
        where = build_compliance_record_filter(filters, scope, log=logger)
        return await self._paginate_listing(
            domain='compliance_records',
            columns=COMPLIANCE_COLUMNS,
            table_name=COMPLIANCE_TABLE,
            joins=COMPLIANCE_JOINS,
            where=where,
            page=page,
            limit=limit,
            sort_by=sort_by,
            sort_order=sort_order,
        )
