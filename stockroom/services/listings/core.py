"""Listings service core: paginated ERP listings over one asyncpg pool."""

from typing import Optional

import asyncpg

from stockroom.lib.common.config import Settings
from stockroom.lib.common.database_handler import DatabaseHandler
from stockroom.services.listings.queries import (
    AddressQueriesMixin,
    AllocationQueriesMixin,
    BatchQueriesMixin,
    BomQueriesMixin,
    ComplianceQueriesMixin,
    CustomerQueriesMixin,
    DiscountQueriesMixin,
    FulfillmentQueriesMixin,
    InventoryQueriesMixin,
    LocationQueriesMixin,
    OrderQueriesMixin,
    PricingQueriesMixin,
)

import logging
logger = logging.getLogger(__name__)


class Listings(
    DatabaseHandler,
    AddressQueriesMixin,
    AllocationQueriesMixin,
    BatchQueriesMixin,
    BomQueriesMixin,
    ComplianceQueriesMixin,
    CustomerQueriesMixin,
    DiscountQueriesMixin,
    FulfillmentQueriesMixin,
    InventoryQueriesMixin,
    LocationQueriesMixin,
    OrderQueriesMixin,
    PricingQueriesMixin,
):
    """Filtered, sorted and paginated reads for every ERP listing."""
    name = "Listings"

    def __init__(
            self,
            dsn: str | None = None,
            pool: Optional[asyncpg.Pool] = None,
            settings: Optional[Settings] = None) -> None:
        """Create a Listings instance.

        Args:
            dsn (str | None): Database DSN for internal pool creation; falls
                back to ``settings.dsn``.
            pool (asyncpg.Pool | None): Existing pool to reuse.
            settings (Settings | None): Page limits and slow query threshold;
                read from the environment when omitted.
        """
        self.settings = settings or Settings.from_env()
        super().__init__(
            dsn=dsn or self.settings.dsn,
            pool=pool,
            slow_query_threshold_ms=self.settings.slow_query_threshold_ms,
        )
        self.default_page_limit = self.settings.default_page_limit
        self.max_page_limit = self.settings.max_page_limit
        logger.debug(
            "%s: page limits default=%d max=%d",
            self.name, self.default_page_limit, self.max_page_limit
        )

    async def start(self) -> None:
        """Open the connection pool."""
        await self.init_pool()
        logger.info(f"{self.name} started")

    async def stop(self) -> None:
        """Close the connection pool."""
        await self.close_pool()
        logger.info(f"{self.name} stopped")
