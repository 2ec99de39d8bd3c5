"""Per-domain WHERE clause builders."""

from stockroom.services.listings.filters.address import build_address_filter
from stockroom.services.listings.filters.bom import build_bom_filter
from stockroom.services.listings.filters.compliance_record import build_compliance_record_filter
from stockroom.services.listings.filters.customer import build_customer_filter
from stockroom.services.listings.filters.discount import build_discount_filter
from stockroom.services.listings.filters.fulfillment import build_fulfillment_filter
from stockroom.services.listings.filters.inventory import (
    build_inventory_filter_conditions,
    build_location_inventory_filter,
    build_warehouse_inventory_filter,
    is_visible,
    visibility_guard_sql,
)
from stockroom.services.listings.filters.inventory_allocation import (
    AllocationWhereClauses,
    build_inventory_allocation_filter,
)
from stockroom.services.listings.filters.location import build_location_filter
from stockroom.services.listings.filters.order import build_order_filter
from stockroom.services.listings.filters.packaging_material_batch import build_packaging_material_batch_filter
from stockroom.services.listings.filters.pricing import build_pricing_filter
from stockroom.services.listings.filters.product_batch import build_product_batch_filter

__all__ = [
    'AllocationWhereClauses',
    'build_address_filter',
    'build_bom_filter',
    'build_compliance_record_filter',
    'build_customer_filter',
    'build_discount_filter',
    'build_fulfillment_filter',
    'build_inventory_allocation_filter',
    'build_inventory_filter_conditions',
    'build_location_filter',
    'build_location_inventory_filter',
    'build_order_filter',
    'build_packaging_material_batch_filter',
    'build_pricing_filter',
    'build_product_batch_filter',
    'build_warehouse_inventory_filter',
    'is_visible',
    'visibility_guard_sql',
]
