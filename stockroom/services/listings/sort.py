"""Allow-listed sort expressions per listing.

``ORDER BY`` targets cannot be bound as parameters, so the only SQL that
reaches an ORDER BY clause is the expression looked up here from a key
the client sent. Unknown keys are rejected.
"""

from typing import Dict, Optional

from stockroom.lib.common.errors import QueryValidationError

_LOT_NUMBER_BY_BATCH = """CASE
        WHEN br.batch_type = 'product' THEN pb.lot_number
        WHEN br.batch_type = 'packaging_material' THEN pmb.lot_number
        ELSE NULL
    END"""

_EXPIRY_DATE_BY_BATCH = """CASE
        WHEN br.batch_type = 'product' THEN pb.expiry_date
        WHEN br.batch_type = 'packaging_material' THEN pmb.expiry_date
        ELSE NULL
    END"""

_ITEM_NAME_BY_BATCH = """CASE
        WHEN br.batch_type = 'product' THEN p.name
        ELSE COALESCE(pmb.material_snapshot_name, pt.name, p.name)
    END"""

DEFAULT_KEY = '_default'

SORTABLE_FIELDS: Dict[str, Dict[str, str]] = {
    'boms': {
        'name': 'b.name',
        'code': 'b.code',
        'revision': 'b.revision',
        'productName': 'p.name',
        'skuCode': 's.sku',
        'isActive': 'b.is_active',
        'createdAt': 'b.created_at',
        'updatedAt': 'b.updated_at',
        DEFAULT_KEY: 'b.created_at',
    },
    'customers': {
        'firstname': 'c.firstname',
        'lastname': 'c.lastname',
        'email': 'c.email',
        'region': 'c.region',
        'country': 'c.country',
        'statusDate': 'c.status_date',
        'createdAt': 'c.created_at',
        DEFAULT_KEY: 'c.created_at',
    },
    'discounts': {
        'name': 'd.name',
        'discountType': 'd.discount_type',
        'discountValue': 'd.discount_value',
        'validFrom': 'd.valid_from',
        'validTo': 'd.valid_to',
        'createdAt': 'd.created_at',
        DEFAULT_KEY: 'd.valid_from',
    },
    'pricing': {
        'productName': 'pr.name',
        'brand': 'pr.brand',
        'category': 'pr.category',
        'sku': 's.sku',
        'countryCode': 's.country_code',
        'sizeLabel': 's.size_label',
        'pricingType': 'pt.name',
        'marketRegion': 's.market_region',
        'price': 'p.price',
        'validFrom': 'p.valid_from',
        'validTo': 'p.valid_to',
        DEFAULT_KEY: 'p.valid_from',
    },
    'fulfillments': {
        'orderNumber': 'o.order_number',
        'warehouseName': 'w.name',
        'deliveryMethod': 'dm.method_name',
        'shippedAt': 'os.shipped_at',
        'createdAt': 'os.created_at',
        'updatedAt': 'os.updated_at',
        DEFAULT_KEY: 'os.created_at',
    },
    'location_inventory': {
        'locationName': 'loc.name',
        'productName': 'p.name',
        'materialName': 'pmb.material_snapshot_name',
        'lotNumber': _LOT_NUMBER_BY_BATCH,
        'inboundDate': 'li.inbound_date',
        'outboundDate': 'li.outbound_date',
        'expiryDate': _EXPIRY_DATE_BY_BATCH,
        'createdAt': 'li.created_at',
        'lastUpdate': 'li.last_update',
        'availableQuantity': '(li.location_quantity - li.reserved_quantity)',
        'status': 'st.name',
        'name': _ITEM_NAME_BY_BATCH,
        DEFAULT_KEY: 'li.created_at',
    },
    'warehouse_inventory': {
        'warehouseName': 'wh.name',
        'productName': 'p.name',
        'materialName': 'pmb.material_snapshot_name',
        'lotNumber': _LOT_NUMBER_BY_BATCH,
        'inboundDate': 'wi.inbound_date',
        'outboundDate': 'wi.outbound_date',
        'expiryDate': _EXPIRY_DATE_BY_BATCH,
        'createdAt': 'wi.created_at',
        'lastUpdate': 'wi.last_update',
        'availableQuantity': '(wi.warehouse_quantity - wi.reserved_quantity)',
        'status': 'st.name',
        'name': _ITEM_NAME_BY_BATCH,
        DEFAULT_KEY: 'wi.created_at',
    },
    'addresses': {
        'label': 'a.label',
        'fullName': 'a.full_name',
        'city': 'a.city',
        'country': 'a.country',
        'createdAt': 'a.created_at',
        'updatedAt': 'a.updated_at',
        DEFAULT_KEY: 'a.created_at',
    },
    'orders': {
        'orderNumber': 'o.order_number',
        'orderDate': 'o.order_date',
        'statusDate': 'o.status_date',
        'createdAt': 'o.created_at',
        'updatedAt': 'o.updated_at',
        DEFAULT_KEY: 'o.created_at',
    },
    'locations': {
        'name': 'l.name',
        'city': 'l.city',
        'provinceOrState': 'l.province_or_state',
        'country': 'l.country',
        'createdAt': 'l.created_at',
        DEFAULT_KEY: 'l.name',
    },
    'compliance_records': {
        'complianceId': 'cr.compliance_id',
        'type': 'cr.type',
        'issuedDate': 'cr.issued_date',
        'expiryDate': 'cr.expiry_date',
        'sku': 's.sku',
        'productName': 'p.name',
        'createdAt': 'cr.created_at',
        DEFAULT_KEY: 'cr.created_at',
    },
    'product_batches': {
        'lotNumber': 'pb.lot_number',
        'productName': 'p.name',
        'sku': 'sk.sku',
        'manufacturerName': 'm.name',
        'manufactureDate': 'pb.manufacture_date',
        'expiryDate': 'pb.expiry_date',
        'receivedDate': 'pb.received_date',
        'status': 'bs.name',
        'createdAt': 'pb.created_at',
        DEFAULT_KEY: 'pb.expiry_date',
    },
    'packaging_material_batches': {
        'lotNumber': 'pmb.lot_number',
        'materialName': 'pmb.material_snapshot_name',
        'materialCode': 'pm.code',
        'supplierName': 's.name',
        'expiryDate': 'pmb.expiry_date',
        'receivedAt': 'pmb.received_at',
        'status': 'bs.name',
        'createdAt': 'pmb.created_at',
        DEFAULT_KEY: 'pmb.received_at',
    },
    'inventory_allocations': {
        'orderNumber': 'o.order_number',
        'orderDate': 'o.order_date',
        'orderType': 'ot.name',
        'orderStatus': 'ost.name',
        'customerName': "COALESCE(c.firstname || ' ' || c.lastname, '')",
        'allocatedAt': 'aa.allocated_at',
        'allocatedCreatedAt': 'aa.allocated_created_at',
        'totalAllocatedQuantity': 'aa.total_allocated_quantity',
        DEFAULT_KEY: 'aa.allocated_created_at',
    },
}


def sortable_keys(domain: str) -> list[str]:
    """Client-facing sort keys accepted for ``domain``."""
    return [k for k in SORTABLE_FIELDS.get(domain, {}) if k != DEFAULT_KEY]


def resolve_sort(domain: str, sort_by: Optional[str]) -> str:
    """Translate a client sort key into its SQL expression.

    Raises:
        QueryValidationError: If ``domain`` has no sort map or ``sort_by`` is not allow-listed.
    """
    mapping = SORTABLE_FIELDS.get(domain)
    if mapping is None:
        raise QueryValidationError(f"No sortable fields defined for '{domain}'", {'domain': domain})
    if sort_by is None or not str(sort_by).strip():
        return mapping[DEFAULT_KEY]
    key = str(sort_by).strip()
    if key == DEFAULT_KEY or key not in mapping:
        raise QueryValidationError(
            f"Invalid sortBy '{key}' for {domain}",
            {'domain': domain, 'sort_by': key, 'allowed': sortable_keys(domain)}
        )
    return mapping[key]
