"""Listings query mixins package.

Each mixin owns the SELECT list and joins for one listing and is combined
into the Listings class via multiple inheritance:

- AddressQueriesMixin: customer addresses
- AllocationQueriesMixin: inventory allocation summaries per order
- BatchQueriesMixin: product and packaging material batches
- BomQueriesMixin: bills of materials
- ComplianceQueriesMixin: compliance records
- CustomerQueriesMixin: customer listing and dropdown lookup
- DiscountQueriesMixin: discounts
- FulfillmentQueriesMixin: outbound shipments
- InventoryQueriesMixin: location and warehouse inventory
- LocationQueriesMixin: locations
- OrderQueriesMixin: orders
- PricingQueriesMixin: pricing records
"""

from stockroom.services.listings.queries.addresses import AddressQueriesMixin
from stockroom.services.listings.queries.allocations import AllocationQueriesMixin
from stockroom.services.listings.queries.batches import BatchQueriesMixin
from stockroom.services.listings.queries.boms import BomQueriesMixin
from stockroom.services.listings.queries.compliance import ComplianceQueriesMixin
from stockroom.services.listings.queries.customers import CustomerQueriesMixin
from stockroom.services.listings.queries.discounts import DiscountQueriesMixin
from stockroom.services.listings.queries.fulfillments import FulfillmentQueriesMixin
from stockroom.services.listings.queries.inventory import InventoryQueriesMixin
from stockroom.services.listings.queries.locations import LocationQueriesMixin
from stockroom.services.listings.queries.orders import OrderQueriesMixin
from stockroom.services.listings.queries.pricing import PricingQueriesMixin

__all__ = [
    'AddressQueriesMixin',
    'AllocationQueriesMixin',
    'BatchQueriesMixin',
    'BomQueriesMixin',
    'ComplianceQueriesMixin',
    'CustomerQueriesMixin',
    'DiscountQueriesMixin',
    'FulfillmentQueriesMixin',
    'InventoryQueriesMixin',
    'LocationQueriesMixin',
    'OrderQueriesMixin',
    'PricingQueriesMixin',
]
