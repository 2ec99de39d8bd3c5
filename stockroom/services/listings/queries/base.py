"""Base class for Listings query mixins."""

import logging
from typing import TYPE_CHECKING, Any, Optional, Sequence

from stockroom.services.listings.schemas import PaginatedResult
from stockroom.services.listings.sort import resolve_sort
from stockroom.services.listings.utils.pagination import paginate
from stockroom.services.listings.utils.query_builder import WhereClause

if TYPE_CHECKING:
    from stockroom.services.listings.utils.pagination import QueryExecutor

logger = logging.getLogger(__name__)


def render_select(columns: str, table_name: str, joins: Sequence[str], where_clause: str) -> str:
    """Assemble ``SELECT ... FROM ... JOIN ... WHERE ...`` without ORDER BY/LIMIT."""
    join_sql = "\n".join(joins)
    return (
        f"SELECT\n{columns}\n"
        f"FROM {table_name}\n"
        f"{join_sql}\n"
        f"WHERE {where_clause}"
    )


class QueryMixin:
    """Base mixin providing access to Listings dependencies.

    Query mixins inherit from this to reach the query primitive and page
    limits. The actual implementations come from the Listings class that
    inherits from the mixins.
    """

    # These are provided by Listings class
    name: str
    execute: 'QueryExecutor'
    default_page_limit: int
    max_page_limit: int

    async def _paginate_listing(
        self,
        *,
        domain: str,
        columns: str,
        table_name: str,
        joins: Sequence[str],
        where: WhereClause,
        page: Any = None,
        limit: Any = None,
        sort_by: Optional[str] = None,
        sort_order: Optional[str] = None,
    ) -> PaginatedResult:
        """Resolve the sort key and run the page and COUNT queries for one listing."""
        order_by = resolve_sort(domain, sort_by)
        query_text = render_select(columns, table_name, joins, where.where_clause)
        return await paginate(
            self.execute,
            table_name=table_name,
            query_text=query_text,
            joins=joins,
            where_clause=where.where_clause,
            params=where.params,
            page=1 if page is None else page,
            limit=self.default_page_limit if limit is None else limit,
            sort_by=order_by,
            sort_order=sort_order,
            max_limit=self.max_page_limit,
            log=logger,
        )
