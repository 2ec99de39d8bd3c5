"""BOM listing queries."""

import logging
from typing import Any, Optional

from stockroom.services.listings.filters.bom import build_bom_filter
from stockroom.services.listings.queries.base import QueryMixin
from stockroom.services.listings.schemas import PaginatedResult, VisibilityScope

logger = logging.getLogger(__name__)

BOM_TABLE = 'boms b'

BOM_JOINS = (
    'JOIN skus s ON b.sku_id = s.id',
    'JOIN products p ON s.product_id = p.id',
    'LEFT JOIN compliance_records cr ON cr.sku_id = s.id',
    'LEFT JOIN status st_bom ON st_bom.id = b.status_id',
    'LEFT JOIN status st_compliance ON st_compliance.id = cr.status_id',
    'LEFT JOIN users cu ON cu.id = b.created_by',
    'LEFT JOIN users uu ON uu.id = b.updated_by',
)

BOM_COLUMNS = """\
    b.id AS bom_id,
    b.code AS bom_code,
    b.name AS bom_name,
    b.revision,
    b.is_active,
    b.is_default,
    b.description,
    b.status_id,
    st_bom.name AS status_name,
    b.created_at,
    b.updated_at,
    cu.firstname AS created_by_firstname,
    cu.lastname AS created_by_lastname,
    uu.firstname AS updated_by_firstname,
    uu.lastname AS updated_by_lastname,
    s.id AS sku_id,
    s.sku AS sku_code,
    p.id AS product_id,
    p.name AS product_name,
    p.brand,
    cr.type AS compliance_type,
    cr.compliance_id AS compliance_number,
    st_compliance.name AS compliance_status,
    cr.issued_date AS compliance_issued_date,
    cr.expiry_date AS compliance_expiry_date"""


class BomQueriesMixin(QueryMixin):
    """Paginated BOM listing."""

    async def get_paginated_boms(
        self,
        filters: Any = None,
        page: Any = None,
        limit: Any = None,
        sort_by: Optional[str] = None,
        sort_order: Optional[str] = None,
        scope: Optional[VisibilityScope] = None,
    ) -> PaginatedResult:
        """List BOMs with SKU, product and compliance context.

        Args:
            filters: ``BomFilters`` or a mapping of filter keys.
            page: 1-based page number.
            limit: Page size.
            sort_by: Key from ``SORTABLE_FIELDS['boms']``.
            sort_order: ``ASC`` or ``DESC``.
            scope: Keyword column restrictions.

        Returns:
            PaginatedResult: ``{data, pagination}``.
        """
        where = build_bom_filter(filters, scope=scope, log=logger)
        return await self._paginate_listing(
            domain='boms',
            columns=BOM_COLUMNS,
            table_name=BOM_TABLE,
            joins=BOM_JOINS,
            where=where,
            page=page,
            limit=limit,
            sort_by=sort_by,
            sort_order=sort_order,
        )
