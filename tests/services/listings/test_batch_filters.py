"""Unit tests for the batch and allocation WHERE clause builders."""

import logging
import re
from datetime import datetime, timezone

import pytest

from stockroom.lib.common.errors import QueryConstructionError, QueryValidationError
from stockroom.services.listings.filters import (
    build_inventory_allocation_filter,
    build_packaging_material_batch_filter,
    build_product_batch_filter,
)
from stockroom.services.listings.schemas import VisibilityScope

UTC = timezone.utc

CUSTOMER_NAME = "COALESCE(c.firstname || ' ' || c.lastname, '')"


def placeholders(where_clause):
    return sorted({int(n) for n in re.findall(r'\$(\d+)', where_clause)})


class TestProductBatchFilter:
    """Tests for build_product_batch_filter."""

    def test_empty_filters(self):
        assert build_product_batch_filter() == ('1=1', [])

    def test_id_lists_and_lot_number(self):
        where_clause, params = build_product_batch_filter({
            'statusIds': ['st-1'],
            'skuIds': ['sku-1', 'sku-2'],
            'productIds': ['p-1'],
            'manufacturerIds': ['m-1'],
            'lotNumber': '  L   1 ',
        })

        assert where_clause == (
            '1=1 AND pb.status_id = ANY($1::uuid[])'
            ' AND pb.sku_id = ANY($2::uuid[])'
            ' AND p.id = ANY($3::uuid[])'
            ' AND pb.manufacturer_id = ANY($4::uuid[])'
            ' AND pb.lot_number ILIKE $5'
        )
        assert params == [['st-1'], ['sku-1', 'sku-2'], ['p-1'], ['m-1'], '%L 1%']

    def test_expiry_range_is_half_open(self):
        where_clause, params = build_product_batch_filter({'expiryAfter': '2027-03-01', 'expiryBefore': '2027-03-31'})

        assert 'pb.expiry_date >= $1' in where_clause
        assert 'pb.expiry_date < $2' in where_clause
        assert params == [datetime(2027, 3, 1, tzinfo=UTC), datetime(2027, 4, 1, tzinfo=UTC)]

    def test_keyword_default_columns(self):
        where_clause, params = build_product_batch_filter({'keyword': ' omega  3 '})

        assert where_clause == (
            '1=1 AND (pb.lot_number ILIKE $1 OR p.name ILIKE $1 OR sk.sku ILIKE $1 OR m.name ILIKE $1)'
        )
        assert params == ['%omega 3%']

    def test_keyword_permissions_keep_lot_number(self):
        scope = VisibilityScope(keyword_fields=['sk.sku'])
        where_clause, _ = build_product_batch_filter({'keyword': 'omega'}, scope)
        assert where_clause == '1=1 AND (pb.lot_number ILIKE $1 OR sk.sku ILIKE $1)'

    def test_no_keyword_permissions_still_searches_lot_number(self):
        scope = VisibilityScope(keyword_fields=[])
        where_clause, _ = build_product_batch_filter({'keyword': 'omega'}, scope)
        assert where_clause == '1=1 AND (pb.lot_number ILIKE $1)'

    def test_force_empty_result(self):
        scope = VisibilityScope(force_empty_result=True)

        where_clause, params = build_product_batch_filter({'statusIds': ['st-1'], 'keyword': 'x'}, scope)

        assert where_clause == '1=1 AND 1=0'
        assert params == []

    def test_force_empty_result_still_validates(self):
        with pytest.raises(QueryValidationError):
            build_product_batch_filter({'skuIds': 'sku-1'}, VisibilityScope(force_empty_result=True))


class TestPackagingMaterialBatchFilter:
    """Tests for build_packaging_material_batch_filter."""

    def test_ids_and_preferred_supplier(self):
        where_clause, params = build_packaging_material_batch_filter({
            'statusIds': ['st-1'],
            'packagingMaterialIds': ['pm-1'],
            'supplierIds': ['s-1'],
            'preferredSupplierOnly': True,
        })

        assert where_clause == (
            '1=1 AND pmb.status_id = ANY($1::uuid[])'
            ' AND pm.id = ANY($2::uuid[])'
            ' AND s.id = ANY($3::uuid[])'
            ' AND pms.is_preferred = true'
        )
        assert params == [['st-1'], ['pm-1'], ['s-1']]

    def test_preferred_supplier_false_adds_nothing(self):
        assert build_packaging_material_batch_filter({'preferredSupplierOnly': False}) == ('1=1', [])

    def test_received_and_expiry_ranges(self):
        where_clause, params = build_packaging_material_batch_filter({
            'lotNumber': 'PM-9',
            'expiryBefore': '2027-06-30',
            'receivedAfter': '2026-01-20',
            'receivedBefore': '2026-01-20',
        })

        assert where_clause == (
            '1=1 AND pmb.lot_number ILIKE $1'
            ' AND pmb.expiry_date < $2'
            ' AND pmb.received_at >= $3 AND pmb.received_at < $4'
        )
        assert params == [
            '%PM-9%',
            datetime(2027, 7, 1, tzinfo=UTC),
            datetime(2026, 1, 20, tzinfo=UTC),
            datetime(2026, 1, 21, tzinfo=UTC),
        ]

    def test_keyword_columns(self):
        where_clause, _ = build_packaging_material_batch_filter({'keyword': 'label'})
        assert where_clause == (
            '1=1 AND (pmb.lot_number ILIKE $1 OR pmb.material_snapshot_name ILIKE $1'
            ' OR pmb.received_label_name ILIKE $1 OR pm.code ILIKE $1 OR s.name ILIKE $1)'
        )

    def test_force_empty_result(self):
        scope = VisibilityScope(force_empty_result=True)
        assert build_packaging_material_batch_filter({'supplierIds': ['s-1']}, scope) == ('1=1 AND 1=0', [])


class TestInventoryAllocationFilter:
    """Tests for build_inventory_allocation_filter."""

    def test_empty_filters(self):
        clauses = build_inventory_allocation_filter()

        assert clauses.raw == ('1=1', [])
        assert clauses.outer == ('1=1', [])
        assert clauses.params == []

    def test_outer_numbering_continues_after_raw(self):
        clauses = build_inventory_allocation_filter({
            'statusIds': ['st-1'],
            'allocatedAfter': '2026-01-01',
            'orderNumber': ' SO-1 ',
            'keyword': 'Jane',
        })

        assert clauses.raw.where_clause == '1=1 AND ia.status_id = ANY($1::uuid[]) AND ia.allocated_at >= $2'
        assert clauses.outer.where_clause == (
            f"1=1 AND o.order_number ILIKE $3 AND (o.order_number ILIKE $4 OR {CUSTOMER_NAME} ILIKE $4)"
        )
        assert clauses.params == [['st-1'], datetime(2026, 1, 1, tzinfo=UTC), '%SO-1%', '%Jane%']

    def test_outer_only_starts_at_one(self):
        clauses = build_inventory_allocation_filter({'orderStatusId': 'os-1', 'paymentStatusId': 'ps-1'})

        assert clauses.raw == ('1=1', [])
        assert clauses.outer.where_clause == '1=1 AND o.order_status_id = $1 AND so.payment_status_id = $2'
        assert clauses.params == ['os-1', 'ps-1']

    def test_aggregated_ranges(self):
        clauses = build_inventory_allocation_filter({
            'aggregatedAllocatedAfter': '2026-02-01',
            'aggregatedCreatedBefore': '2026-02-28',
        })

        assert clauses.outer.where_clause == '1=1 AND aa.allocated_at >= $1 AND aa.allocated_created_at < $2'
        assert clauses.outer.params == [datetime(2026, 2, 1, tzinfo=UTC), datetime(2026, 3, 1, tzinfo=UTC)]

    def test_every_filter_keeps_placeholders_aligned(self):
        clauses = build_inventory_allocation_filter({
            'statusIds': ['a'],
            'warehouseIds': ['w'],
            'batchIds': ['b'],
            'allocationCreatedBy': 'u-1',
            'allocatedAfter': '2026-01-01',
            'allocatedBefore': '2026-01-31',
            'aggregatedAllocatedAfter': '2026-01-01',
            'aggregatedAllocatedBefore': '2026-01-31',
            'aggregatedCreatedAfter': '2026-01-01',
            'aggregatedCreatedBefore': '2026-01-31',
            'orderNumber': 'SO',
            'orderStatusId': 'os',
            'orderTypeId': 'ot',
            'orderCreatedBy': 'u-2',
            'paymentStatusId': 'ps',
            'keyword': 'k',
        })

        raw_used = placeholders(clauses.raw.where_clause)
        outer_used = placeholders(clauses.outer.where_clause)
        assert raw_used == list(range(1, len(clauses.raw.params) + 1))
        assert outer_used == list(range(len(raw_used) + 1, len(clauses.params) + 1))

    def test_keyword_narrowed_by_scope(self):
        scope = VisibilityScope(keyword_fields=['o.order_number'])
        clauses = build_inventory_allocation_filter({'keyword': 'SO-9'}, scope)
        assert clauses.outer.where_clause == '1=1 AND (o.order_number ILIKE $1)'

    def test_unexpected_failure_wrapped(self, monkeypatch, caplog):
        def explode(*args, **kwargs):
            raise KeyError('boom')

        monkeypatch.setattr(
            'stockroom.services.listings.filters.inventory_allocation.normalized_ranges', explode
        )

        with caplog.at_level(logging.ERROR):
            with pytest.raises(QueryConstructionError) as exc_info:
                build_inventory_allocation_filter({'orderNumber': 'SO-1'})

        assert exc_info.value.details['stage'] == 'build-inventory-allocation-where-clause'
        assert 'FilterBuilder.inventory-allocation' in caplog.text
