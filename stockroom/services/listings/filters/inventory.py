"""WHERE clause builders for location and warehouse inventory.

Inventory rows are polymorphic. ``batch_registry br`` points either at a
product batch (``product_batches pb`` -> ``skus s`` -> ``products p``) or at
a packaging material batch (``packaging_material_batches pmb`` ->
``packaging_materials pm`` / ``parts pt``), discriminated by
``br.batch_type``. Every column that exists on both sides is therefore
filtered through an OR group with one branch per batch type, and a
visibility guard drops rows whose linkage is incomplete for their type.

Both the SQL guard and :func:`is_visible` are generated from
``VISIBILITY_REQUIREMENTS`` so the database and in-memory checks agree.
"""

import logging
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Tuple

from stockroom.lib.enums import BatchType, normalize_batch_type
from stockroom.services.listings.filters.base import coerce_filters, filter_build_context, normalized_ranges
from stockroom.services.listings.schemas import (
    InventoryFilters,
    LocationInventoryFilters,
    WarehouseInventoryFilters,
)
from stockroom.services.listings.utils.date_range import parse_bound
from stockroom.services.listings.utils.query_builder import (
    ConditionBuilder,
    ParamIndex,
    WhereClause,
    normalize_keyword,
)

logger = logging.getLogger(__name__)

BATCH_TYPE_COLUMN = 'br.batch_type'

# Columns that must be non-null for a row of each batch type to be listed.
VISIBILITY_REQUIREMENTS: dict[BatchType, Tuple[str, ...]] = {
    BatchType.PRODUCT: ('p.status_id', 's.status_id', 'pb.status_id'),
    BatchType.PACKAGING_MATERIAL: ('pmb.id',),
}

# Same logical field, different column per batch type.
BATCH_COLUMNS: dict[str, dict[BatchType, str]] = {
    'lot_number': {
        BatchType.PRODUCT: 'pb.lot_number',
        BatchType.PACKAGING_MATERIAL: 'pmb.lot_number',
    },
    'expiry_date': {
        BatchType.PRODUCT: 'pb.expiry_date',
        BatchType.PACKAGING_MATERIAL: 'pmb.expiry_date',
    },
}

# Filters that can only match one batch type.
PRODUCT_ONLY_FIELDS = ('sku', 'product_name')
MATERIAL_ONLY_FIELDS = ('material_name', 'material_code', 'part_code', 'part_name', 'part_type')


@dataclass(frozen=True)
class InventoryFieldMap:
    """Column names that differ between location and warehouse inventory."""
    prefix: str
    site_id: str
    site_name: str
    quantity: str
    reserved_quantity: str


LOCATION_FIELD_MAP = InventoryFieldMap(
    prefix='li',
    site_id='li.location_id',
    site_name='loc.name',
    quantity='li.location_quantity',
    reserved_quantity='li.reserved_quantity',
)

WAREHOUSE_FIELD_MAP = InventoryFieldMap(
    prefix='wi',
    site_id='wi.warehouse_id',
    site_name='wh.name',
    quantity='wi.warehouse_quantity',
    reserved_quantity='wi.reserved_quantity',
)


def _branch(batch_type: BatchType, predicate: str) -> str:
    return f"({BATCH_TYPE_COLUMN} = '{batch_type.value}' AND {predicate})"


def visibility_guard_sql() -> str:
    """SQL predicate admitting only rows whose linkage is complete for their batch type."""
    branches = [
        _branch(batch_type, ' AND '.join(f"{col} IS NOT NULL" for col in columns))
        for batch_type, columns in VISIBILITY_REQUIREMENTS.items()
    ]
    return '(' + ' OR '.join(branches) + ')'


def is_visible(row: Mapping[str, Any]) -> bool:
    """Evaluate the visibility guard against a row keyed by qualified column name.

    Rows with an unknown or missing ``br.batch_type`` are never visible.
    """
    batch_type = normalize_batch_type(row.get(BATCH_TYPE_COLUMN))
    if batch_type is None:
        return False
    return all(row.get(col) is not None for col in VISIBILITY_REQUIREMENTS[batch_type])


def polymorphic_condition(field: str, operator: str, placeholder: str) -> str:
    """OR group testing one placeholder against ``field``'s column on each batch type."""
    branches = [
        _branch(batch_type, f"{column} {operator} {placeholder}")
        for batch_type, column in BATCH_COLUMNS[field].items()
    ]
    return '(' + ' OR '.join(branches) + ')'


def drop_irrelevant_fields(filters: InventoryFilters) -> InventoryFilters:
    """Clear filters that cannot match the requested batch type."""
    if filters.batch_type is BatchType.PRODUCT:
        cleared = MATERIAL_ONLY_FIELDS
    elif filters.batch_type is BatchType.PACKAGING_MATERIAL:
        cleared = PRODUCT_ONLY_FIELDS
    else:
        return filters
    return filters.model_copy(update={key: None for key in cleared})


def build_inventory_filter_conditions(
    filters: InventoryFilters,
    field_map: InventoryFieldMap,
    param_index: ParamIndex,
) -> Tuple[List[str], List[Any]]:
    """Conditions shared by location and warehouse inventory.

    Placeholders are drawn from ``param_index`` so the caller can merge the
    result into its own condition list.

    Returns:
        ``(conditions, params)`` with no seed condition.
    """
    ranges = normalized_ranges(
        filters,
        ('created_after', 'created_before'),
        ('inbound_after', 'inbound_before'),
        ('expiry_after', 'expiry_before'),
    )
    builder = ConditionBuilder(seed=None, param_index=param_index)

    if filters.batch_type is not None:
        builder.add(BATCH_TYPE_COLUMN, filters.batch_type.value)

    builder.add_ilike('s.sku', filters.sku)
    builder.add_ilike('p.name', filters.product_name)
    builder.add_ilike('pmb.material_snapshot_name', filters.material_name)
    builder.add_ilike('pm.code', filters.material_code)
    builder.add_ilike('pt.code', filters.part_code)
    builder.add_ilike('pt.name', filters.part_name)
    builder.add_ilike('pt.type', filters.part_type)

    builder.add_template(polymorphic_condition('lot_number', 'ILIKE', '{p}'), normalize_keyword(filters.lot_number))
    builder.add_template(polymorphic_condition('expiry_date', '=', '{p}'), filters.expiry_date)
    builder.add_template(polymorphic_condition('expiry_date', '>=', '{p}'), parse_bound(ranges['expiry_after']))
    builder.add_template(polymorphic_condition('expiry_date', '<', '{p}'), parse_bound(ranges['expiry_before']))

    builder.add('st.name', filters.status)
    builder.add_date_range(f"{field_map.prefix}.inbound_date", ranges['inbound_after'], ranges['inbound_before'])
    builder.add_date_range(f"{field_map.prefix}.created_at", ranges['created_after'], ranges['created_before'])

    built = builder.build()
    return list(builder.conditions), built.params


def _exclude_zero_quantity_sql(field_map: InventoryFieldMap) -> str:
    return f"({field_map.quantity} > 0 OR {field_map.reserved_quantity} > 0)"


def _build_site_inventory_filter(
    filters: InventoryFilters,
    field_map: InventoryFieldMap,
    site_name: Optional[str],
    site_ids: Optional[List[str]],
) -> WhereClause:
    filters = drop_irrelevant_fields(filters)
    builder = ConditionBuilder()
    builder.add_raw(visibility_guard_sql())

    builder.add_any(field_map.site_id, site_ids, cast='uuid[]')
    builder.add_ilike(field_map.site_name, site_name)

    conditions, params = build_inventory_filter_conditions(filters, field_map, builder.param_index)
    builder.extend(conditions, params)

    if filters.exclude_zero_quantity:
        builder.add_raw(_exclude_zero_quantity_sql(field_map))
    return builder.build()


def build_location_inventory_filter(
    filters: Any = None,
    log: Optional[logging.Logger] = None,
) -> WhereClause:
    """Build the WHERE clause for ``location_inventory li``.

    The visibility guard is always the first condition after the seed.
    """
    f = coerce_filters(LocationInventoryFilters, filters, 'location-inventory')
    with filter_build_context('location-inventory', f, log or logger):
        return _build_site_inventory_filter(f, LOCATION_FIELD_MAP, f.location_name, f.location_ids)


def build_warehouse_inventory_filter(
    filters: Any = None,
    log: Optional[logging.Logger] = None,
) -> WhereClause:
    """Build the WHERE clause for ``warehouse_inventory wi``."""
    f = coerce_filters(WarehouseInventoryFilters, filters, 'warehouse-inventory')
    with filter_build_context('warehouse-inventory', f, log or logger):
        return _build_site_inventory_filter(f, WAREHOUSE_FIELD_MAP, f.warehouse_name, f.warehouse_ids)
