"""
Listing-specific Pydantic schemas for filter requests and paginated responses.

Filter models accept the camelCase keys used by API clients (``skuId``,
``createdAfter``) as well as snake_case field names, and silently ignore
keys they do not know.
"""
from datetime import date, datetime
from typing import Any, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from stockroom.lib.enums import BatchType


# A date-only bound as supplied by the caller ('2026-01-20'), or an already
# parsed date/datetime. Normalized to a half-open range before binding.
DateBound = Union[datetime, date, str]

# One identifier or a list of them.
IdOrIds = Union[str, List[str]]


class FilterModel(BaseModel):
    """Base for per-domain filter requests."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra='ignore',
    )


class VisibilityScope(BaseModel):
    """System-enforced visibility constraints, set by services rather than end users.

    Kept apart from the user filter object so a client can never widen
    its own visibility by sending these keys.
    """
    active_status_id: Optional[str] = Field(default=None, description="Status applied when the caller gives none")
    override_default_status: bool = Field(default=False, description="Skip the default status restriction")
    restrict_to_currently_valid: bool = Field(default=False, description="Limit to rows valid at NOW()")
    include_archived: bool = Field(default=False, description="Allow archived rows and the isArchived filter")
    include_unassigned: bool = Field(default=False, description="Addresses: also match rows with no customer")
    restrict_keyword_to_order_number: bool = Field(default=False, description="Orders: keyword searches order number only")
    force_empty_result: bool = Field(default=False, description="Batches: match nothing regardless of filters")
    keyword_fields: Optional[List[str]] = Field(
        default=None,
        description="Searchable columns the caller may use; None allows the domain default set"
    )


# BOM Filters
class BomFilters(FilterModel):
    """Filters for BOM listings (``boms b`` joined to SKU, product and compliance)."""
    sku_id: Optional[IdOrIds] = None
    product_id: Optional[IdOrIds] = None
    product_name: Optional[str] = None
    sku_code: Optional[str] = None
    compliance_type: Optional[str] = None
    compliance_status_id: Optional[str] = None
    only_active_compliance: Optional[bool] = None
    compliance_issued_after: Optional[DateBound] = None
    compliance_expired_before: Optional[DateBound] = None
    status_id: Optional[str] = None
    is_active: Optional[bool] = None
    is_default: Optional[bool] = None
    revision_min: Optional[int] = Field(default=None, ge=0)
    revision_max: Optional[int] = Field(default=None, ge=0)
    created_by: Optional[str] = None
    updated_by: Optional[str] = None
    created_after: Optional[DateBound] = None
    created_before: Optional[DateBound] = None
    keyword: Optional[str] = None


# Customer Filters
class CustomerFilters(FilterModel):
    """Filters for customer lists and dropdowns (``customers c``)."""
    status_id: Optional[str] = None
    is_archived: Optional[bool] = None
    region: Optional[str] = None
    country: Optional[str] = None
    created_by: Optional[str] = None
    keyword: Optional[str] = None
    created_after: Optional[DateBound] = None
    created_before: Optional[DateBound] = None
    status_date_after: Optional[DateBound] = None
    status_date_before: Optional[DateBound] = None


# Discount Filters
class DiscountFilters(FilterModel):
    """Filters for discounts (``discounts d``)."""
    name: Optional[str] = None
    discount_type: Optional[str] = None
    status_id: Optional[str] = None
    created_by: Optional[str] = None
    updated_by: Optional[str] = None
    keyword: Optional[str] = None
    valid_from: Optional[DateBound] = None
    valid_to: Optional[DateBound] = None
    valid_on: Optional[DateBound] = None
    currently_valid: Optional[bool] = None
    created_after: Optional[DateBound] = None
    created_before: Optional[DateBound] = None


# Pricing Filters
class PricingFilters(FilterModel):
    """Filters for pricing records (``pricing p`` joined to ``products pr``, ``skus s``, ``pricing_types pt``)."""
    sku_id: Optional[str] = None
    price_type_id: Optional[str] = None
    location_id: Optional[str] = None
    status_id: Optional[str] = None
    brand: Optional[str] = None
    pricing_type: Optional[str] = None
    country_code: Optional[str] = None
    size_label: Optional[str] = None
    valid_from: Optional[DateBound] = None
    valid_to: Optional[DateBound] = None
    valid_on: Optional[DateBound] = None
    currently_valid: Optional[bool] = None
    created_after: Optional[DateBound] = None
    created_before: Optional[DateBound] = None
    created_by: Optional[str] = None
    updated_by: Optional[str] = None
    keyword: Optional[str] = None


# Outbound Fulfillment Filters
class FulfillmentFilters(FilterModel):
    """Filters for outbound shipments (``outbound_shipments os`` joined to orders, warehouses, delivery methods)."""
    status_ids: Optional[List[str]] = None
    warehouse_ids: Optional[List[str]] = None
    delivery_method_ids: Optional[List[str]] = None
    created_by: Optional[str] = None
    updated_by: Optional[str] = None
    created_after: Optional[DateBound] = None
    created_before: Optional[DateBound] = None
    shipped_after: Optional[DateBound] = None
    shipped_before: Optional[DateBound] = None
    order_id: Optional[str] = None
    order_number: Optional[str] = None
    keyword: Optional[str] = None


# Inventory Filters
class InventoryFilters(FilterModel):
    """Filters shared by location and warehouse inventory listings."""
    batch_type: Optional[BatchType] = None
    sku: Optional[str] = None
    product_name: Optional[str] = None
    material_name: Optional[str] = None
    material_code: Optional[str] = None
    part_code: Optional[str] = None
    part_name: Optional[str] = None
    part_type: Optional[str] = None
    lot_number: Optional[str] = None
    expiry_date: Optional[date] = None
    status: Optional[str] = None
    created_after: Optional[DateBound] = None
    created_before: Optional[DateBound] = None
    inbound_after: Optional[DateBound] = None
    inbound_before: Optional[DateBound] = None
    expiry_after: Optional[DateBound] = None
    expiry_before: Optional[DateBound] = None
    exclude_zero_quantity: Optional[bool] = None


class LocationInventoryFilters(InventoryFilters):
    """Filters for ``location_inventory li``."""
    location_name: Optional[str] = None
    location_ids: Optional[List[str]] = None


class WarehouseInventoryFilters(InventoryFilters):
    """Filters for ``warehouse_inventory wi``."""
    warehouse_name: Optional[str] = None
    warehouse_ids: Optional[List[str]] = None


# Address Filters
class AddressFilters(FilterModel):
    """Filters for customer addresses (``addresses a``)."""
    customer_id: Optional[str] = None
    created_by: Optional[str] = None
    updated_by: Optional[str] = None
    region: Optional[str] = None
    country: Optional[str] = None
    keyword: Optional[str] = None
    created_after: Optional[DateBound] = None
    created_before: Optional[DateBound] = None
    updated_after: Optional[DateBound] = None
    updated_before: Optional[DateBound] = None


# Order Filters
class OrderFilters(FilterModel):
    """Filters for orders (``orders o``)."""
    order_number: Optional[str] = None
    order_type_id: Optional[IdOrIds] = None
    order_status_id: Optional[str] = None
    order_status_ids: Optional[List[str]] = None
    created_by: Optional[str] = None
    updated_by: Optional[str] = None
    created_after: Optional[DateBound] = None
    created_before: Optional[DateBound] = None
    status_after: Optional[DateBound] = None
    status_before: Optional[DateBound] = None
    keyword: Optional[str] = None


# Location Filters
class LocationFilters(FilterModel):
    """Filters for locations (``locations l``)."""
    status_ids: Optional[List[str]] = None
    status_id: Optional[str] = None
    location_type_id: Optional[str] = None
    city: Optional[str] = None
    province_or_state: Optional[str] = None
    country: Optional[str] = None
    created_by: Optional[str] = None
    created_after: Optional[DateBound] = None
    created_before: Optional[DateBound] = None
    keyword: Optional[str] = None


# Compliance Record Filters
class ComplianceRecordFilters(FilterModel):
    """Filters for compliance records (``compliance_records cr`` joined to SKU and product)."""
    type: Optional[str] = None
    status_ids: Optional[List[str]] = None
    compliance_id: Optional[str] = None
    issued_after: Optional[DateBound] = None
    issued_before: Optional[DateBound] = None
    expiring_after: Optional[DateBound] = None
    expiring_before: Optional[DateBound] = None
    created_by: Optional[str] = None
    updated_by: Optional[str] = None
    created_after: Optional[DateBound] = None
    created_before: Optional[DateBound] = None
    updated_after: Optional[DateBound] = None
    updated_before: Optional[DateBound] = None
    sku_ids: Optional[List[str]] = None
    sku: Optional[str] = None
    size_label: Optional[str] = None
    market_region: Optional[str] = None
    product_name: Optional[str] = None
    brand: Optional[str] = None
    category: Optional[str] = None
    keyword: Optional[str] = None


# Product Batch Filters
class ProductBatchFilters(FilterModel):
    """Filters for product batches (``product_batches pb`` joined to SKU, product and manufacturer)."""
    status_ids: Optional[List[str]] = None
    sku_ids: Optional[List[str]] = None
    product_ids: Optional[List[str]] = None
    manufacturer_ids: Optional[List[str]] = None
    lot_number: Optional[str] = None
    expiry_after: Optional[DateBound] = None
    expiry_before: Optional[DateBound] = None
    keyword: Optional[str] = None


# Packaging Material Batch Filters
class PackagingMaterialBatchFilters(FilterModel):
    """Filters for packaging material batches (``packaging_material_batches pmb``)."""
    status_ids: Optional[List[str]] = None
    packaging_material_ids: Optional[List[str]] = None
    supplier_ids: Optional[List[str]] = None
    preferred_supplier_only: Optional[bool] = None
    lot_number: Optional[str] = None
    expiry_after: Optional[DateBound] = None
    expiry_before: Optional[DateBound] = None
    received_after: Optional[DateBound] = None
    received_before: Optional[DateBound] = None
    keyword: Optional[str] = None


# Inventory Allocation Filters
class InventoryAllocationFilters(FilterModel):
    """Filters for allocation summaries.

    Allocation-level keys narrow ``inventory_allocations ia`` before it is
    aggregated per order; the rest apply to the aggregate ``aa`` and the
    order, sales order and customer joined to it.
    """
    status_ids: Optional[List[str]] = None
    warehouse_ids: Optional[List[str]] = None
    batch_ids: Optional[List[str]] = None
    allocation_created_by: Optional[str] = None
    allocated_after: Optional[DateBound] = None
    allocated_before: Optional[DateBound] = None
    aggregated_allocated_after: Optional[DateBound] = None
    aggregated_allocated_before: Optional[DateBound] = None
    aggregated_created_after: Optional[DateBound] = None
    aggregated_created_before: Optional[DateBound] = None
    order_number: Optional[str] = None
    order_status_id: Optional[str] = None
    order_type_id: Optional[str] = None
    order_created_by: Optional[str] = None
    payment_status_id: Optional[str] = None
    keyword: Optional[str] = None

# Pagination
class PaginationParams(BaseModel):
    """Validated page window."""
    page: int = Field(default=1, ge=1, description="1-based page number")
    limit: int = Field(default=20, ge=1, description="Number of items per page; ceiling enforced by the caller")

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


class Pagination(BaseModel):
    """Pagination block of the list envelope."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
    page: int
    limit: int
    total_records: int
    total_pages: int


class PaginatedResult(BaseModel):
    """Envelope returned by every paginated listing: ``{data, pagination}``."""
    data: List[dict[str, Any]] = Field(default_factory=list)
    pagination: Pagination


class OffsetPage(BaseModel):
    """Envelope for load-more and autocomplete lookups."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
    items: List[dict[str, Any]] = Field(default_factory=list)
    has_more: bool = False
    offset: int = 0
    limit: int
