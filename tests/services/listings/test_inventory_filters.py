"""Unit tests for the polymorphic inventory filter builders."""

from datetime import date, datetime, timezone

import pytest

from stockroom.lib.common.errors import QueryValidationError
from stockroom.lib.enums import BatchType
from stockroom.services.listings.filters.inventory import (
    LOCATION_FIELD_MAP,
    WAREHOUSE_FIELD_MAP,
    build_inventory_filter_conditions,
    build_location_inventory_filter,
    build_warehouse_inventory_filter,
    drop_irrelevant_fields,
    is_visible,
    polymorphic_condition,
    visibility_guard_sql,
)
from stockroom.services.listings.schemas import InventoryFilters
from stockroom.services.listings.utils.query_builder import ParamIndex

GUARD = (
    "((br.batch_type = 'product' AND p.status_id IS NOT NULL AND s.status_id IS NOT NULL"
    " AND pb.status_id IS NOT NULL)"
    " OR (br.batch_type = 'packaging_material' AND pmb.id IS NOT NULL))"
)


class TestVisibilityGuard:
    """Tests for the visibility guard and its in-memory twin."""

    def test_guard_sql(self):
        assert visibility_guard_sql() == GUARD

    def test_packaging_material_row_visible_without_product_status(self):
        row = {
            'br.batch_type': 'packaging_material',
            'pmb.id': 'pmb-1',
            'p.status_id': None,
            's.status_id': None,
            'pb.status_id': None,
        }
        assert is_visible(row) is True

    @pytest.mark.parametrize('missing', ['p.status_id', 's.status_id', 'pb.status_id'])
    def test_product_row_with_null_status_hidden(self, missing):
        row = {
            'br.batch_type': 'product',
            'p.status_id': 'a',
            's.status_id': 'b',
            'pb.status_id': 'c',
        }
        row[missing] = None
        assert is_visible(row) is False

    def test_complete_product_row_visible(self):
        row = {'br.batch_type': BatchType.PRODUCT, 'p.status_id': 'a', 's.status_id': 'b', 'pb.status_id': 'c'}
        assert is_visible(row) is True

    def test_packaging_material_row_without_batch_hidden(self):
        assert is_visible({'br.batch_type': 'packaging_material', 'pmb.id': None}) is False

    @pytest.mark.parametrize('batch_type', [None, '', 'raw_material'])
    def test_unknown_shape_hidden(self, batch_type):
        assert is_visible({'br.batch_type': batch_type, 'pmb.id': 'x'}) is False


class TestLocationInventoryFilter:
    """Tests for build_location_inventory_filter."""

    def test_guard_always_present(self):
        where_clause, params = build_location_inventory_filter()
        assert where_clause == f"1=1 AND {GUARD}"
        assert params == []

    def test_lot_number_spans_both_batch_types(self):
        where_clause, params = build_location_inventory_filter({'lotNumber': 'LOT-7'})

        assert (
            "((br.batch_type = 'product' AND pb.lot_number ILIKE $1)"
            " OR (br.batch_type = 'packaging_material' AND pmb.lot_number ILIKE $1))"
        ) in where_clause
        assert params == ['%LOT-7%']

    def test_lot_number_whitespace_collapsed(self):
        _, params = build_location_inventory_filter({'lotNumber': '  L   1 '})
        assert params == ['%L 1%']

    def test_blank_lot_number_ignored(self):
        assert build_location_inventory_filter({'lotNumber': '   '}).params == []

    def test_expiry_date_exact(self):
        where_clause, params = build_location_inventory_filter({'expiryDate': '2027-05-01'})

        assert "(br.batch_type = 'product' AND pb.expiry_date = $1)" in where_clause
        assert "(br.batch_type = 'packaging_material' AND pmb.expiry_date = $1)" in where_clause
        assert params == [date(2027, 5, 1)]

    def test_expiry_range_is_half_open_per_branch(self):
        where_clause, params = build_location_inventory_filter({'expiryAfter': '2027-01-01', 'expiryBefore': '2027-01-31'})

        assert "pb.expiry_date >= $1" in where_clause
        assert "pmb.expiry_date < $2" in where_clause
        assert params == [
            datetime(2027, 1, 1, tzinfo=timezone.utc),
            datetime(2027, 2, 1, tzinfo=timezone.utc),
        ]

    def test_exclude_zero_quantity(self):
        where_clause, params = build_location_inventory_filter({'excludeZeroQuantity': True})

        assert where_clause.endswith('(li.location_quantity > 0 OR li.reserved_quantity > 0)')
        assert params == []

    def test_site_conditions_precede_shared_ones(self):
        where_clause, params = build_location_inventory_filter({
            'locationIds': ['loc-1'],
            'locationName': 'Main',
            'batchType': 'product',
            'sku': 'CH-001',
            'createdAfter': '2026-01-01',
        })

        assert 'li.location_id = ANY($1::uuid[])' in where_clause
        assert 'loc.name ILIKE $2' in where_clause
        assert 'br.batch_type = $3' in where_clause
        assert 's.sku ILIKE $4' in where_clause
        assert 'li.created_at >= $5' in where_clause
        assert params == [['loc-1'], '%Main%', 'product', '%CH-001%', datetime(2026, 1, 1, tzinfo=timezone.utc)]

    def test_material_only_filters_dropped_for_product(self):
        where_clause, params = build_location_inventory_filter({'batchType': 'product', 'materialName': 'Bottle'})

        assert 'pmb.material_snapshot_name' not in where_clause
        assert params == ['product']

    def test_product_only_filters_dropped_for_material(self):
        where_clause, params = build_location_inventory_filter({
            'batchType': 'packaging_material',
            'productName': 'Omega',
            'partCode': 'CAP-1',
        })

        assert 'p.name ILIKE' not in where_clause
        assert 'pt.code ILIKE $2' in where_clause
        assert params == ['packaging_material', '%CAP-1%']

    def test_unknown_batch_type_rejected(self):
        with pytest.raises(QueryValidationError):
            build_location_inventory_filter({'batchType': 'widget'})


class TestWarehouseInventoryFilter:
    """Tests for build_warehouse_inventory_filter."""

    def test_warehouse_columns(self):
        where_clause, params = build_warehouse_inventory_filter({
            'warehouseName': 'East',
            'inboundBefore': '2026-02-10',
            'excludeZeroQuantity': True,
        })

        assert where_clause.startswith(f"1=1 AND {GUARD}")
        assert 'wh.name ILIKE $1' in where_clause
        assert 'wi.inbound_date < $2' in where_clause
        assert '(wi.warehouse_quantity > 0 OR wi.reserved_quantity > 0)' in where_clause
        assert params == ['%East%', datetime(2026, 2, 11, tzinfo=timezone.utc)]


class TestSharedConditions:
    """Tests for build_inventory_filter_conditions."""

    def test_numbering_continues_from_shared_index(self):
        idx = ParamIndex(5)
        conditions, params = build_inventory_filter_conditions(
            InventoryFilters(status='in_stock', part_type='cap'), WAREHOUSE_FIELD_MAP, idx
        )

        assert conditions == ['pt.type ILIKE $5', 'st.name = $6']
        assert params == ['%cap%', 'in_stock']
        assert idx.value == 7

    def test_no_seed_condition(self):
        conditions, params = build_inventory_filter_conditions(InventoryFilters(), LOCATION_FIELD_MAP, ParamIndex())
        assert conditions == []
        assert params == []

    def test_polymorphic_condition(self):
        assert polymorphic_condition('lot_number', '=', '$9') == (
            "((br.batch_type = 'product' AND pb.lot_number = $9)"
            " OR (br.batch_type = 'packaging_material' AND pmb.lot_number = $9))"
        )

    def test_drop_irrelevant_fields_without_batch_type_keeps_all(self):
        filters = InventoryFilters(sku='a', material_name='b')
        assert drop_irrelevant_fields(filters) is filters
