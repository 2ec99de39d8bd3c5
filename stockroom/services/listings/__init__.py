"""Paginated ERP listings: filter builders, sort allow-lists and the pagination executor."""

from stockroom.services.listings.core import Listings
from stockroom.services.listings.schemas import OffsetPage, PaginatedResult, Pagination, VisibilityScope

__all__ = ['Listings', 'OffsetPage', 'PaginatedResult', 'Pagination', 'VisibilityScope']
