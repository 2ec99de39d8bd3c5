"""Unit tests for the per-domain WHERE clause builders."""

import re
from datetime import datetime, timezone

import pytest

from stockroom.lib.common.errors import QueryConstructionError, QueryValidationError
from stockroom.services.listings.filters import (
    build_address_filter,
    build_bom_filter,
    build_compliance_record_filter,
    build_customer_filter,
    build_discount_filter,
    build_fulfillment_filter,
    build_location_filter,
    build_order_filter,
    build_pricing_filter,
)
from stockroom.services.listings.schemas import BomFilters, VisibilityScope

UTC = timezone.utc


def assert_aligned(where_clause, params):
    """Every placeholder has a value and every value a placeholder."""
    used = sorted({int(n) for n in re.findall(r'\$(\d+)', where_clause)})
    assert used == list(range(1, len(params) + 1))


class TestBomFilter:
    """Tests for build_bom_filter."""

    def test_empty_filters(self):
        where_clause, params = build_bom_filter()
        assert where_clause == '1=1'
        assert params == []

    def test_keyword_bound_once_across_columns(self):
        where_clause, params = build_bom_filter({'keyword': 'Omega'})

        assert where_clause == '1=1 AND (b.name ILIKE $1 OR b.code ILIKE $1 OR b.description ILIKE $1)'
        assert params == ['%Omega%']

    def test_camel_and_snake_case_keys(self):
        camel = build_bom_filter({'skuCode': 'SKU-1', 'isActive': False})
        snake = build_bom_filter({'sku_code': 'SKU-1', 'is_active': False})

        assert camel == snake
        assert camel.params == ['%SKU-1%', False]

    def test_model_instance_accepted(self):
        where_clause, params = build_bom_filter(BomFilters(status_id='st-1'))
        assert 'b.status_id = $1' in where_clause
        assert params == ['st-1']

    def test_sku_ids_list_uses_in(self):
        where_clause, params = build_bom_filter({'skuId': ['s1', 's2'], 'productId': 'p1'})

        assert 'b.sku_id IN ($1, $2)' in where_clause
        assert 'p.id = $3' in where_clause
        assert params == ['s1', 's2', 'p1']

    def test_created_range_is_half_open(self):
        where_clause, params = build_bom_filter({'createdAfter': '2026-01-20', 'createdBefore': '2026-01-20'})

        assert 'b.created_at >= $1' in where_clause
        assert 'b.created_at < $2' in where_clause
        assert params == [datetime(2026, 1, 20, tzinfo=UTC), datetime(2026, 1, 21, tzinfo=UTC)]

    def test_compliance_conditions(self):
        where_clause, params = build_bom_filter({
            'complianceType': 'NPN',
            'onlyActiveCompliance': True,
            'complianceExpiredBefore': '2026-06-30',
        })

        assert 'cr.type ILIKE $1' in where_clause
        assert "LOWER(st_compliance.name) = 'active'" in where_clause
        assert 'cr.expiry_date < $2' in where_clause
        assert params == ['%NPN%', datetime(2026, 7, 1, tzinfo=UTC)]

    def test_revision_range_keeps_zero(self):
        where_clause, params = build_bom_filter({'revisionMin': 0, 'revisionMax': 3})

        assert 'b.revision >= $1' in where_clause
        assert 'b.revision <= $2' in where_clause
        assert params == [0, 3]

    def test_unknown_keys_ignored(self):
        assert build_bom_filter({'_activeStatusId': 'x', 'bogus': 1}).params == []

    def test_wrong_shape_is_validation_error(self):
        with pytest.raises(QueryValidationError) as exc_info:
            build_bom_filter({'revisionMin': 'abc'})

        err = exc_info.value
        assert err.details['domain'] == 'bom'
        assert err.details['errors'][0]['field'] == 'revisionMin'

    def test_non_mapping_rejected(self):
        with pytest.raises(QueryValidationError, match="must be an object"):
            build_bom_filter(['keyword'])

    def test_unexpected_failure_becomes_construction_error(self, monkeypatch: pytest.MonkeyPatch):
        def explode(*args, **kwargs):
            raise TypeError("unexpected")

        monkeypatch.setattr('stockroom.services.listings.filters.bom.normalized_ranges', explode)

        with pytest.raises(QueryConstructionError) as exc_info:
            build_bom_filter({'keyword': 'Omega Plus'})

        details = exc_info.value.details
        assert details['stage'] == 'build-bom-where-clause'
        assert details['reason'] == 'TypeError'
        assert details['filters'] == {'keyword': 'Om***'}

    def test_keyword_fields_restricted_by_scope(self):
        where_clause, _ = build_bom_filter({'keyword': 'x'}, scope=VisibilityScope(keyword_fields=['b.code']))
        assert where_clause == '1=1 AND (b.code ILIKE $1)'

    def test_keyword_with_no_permitted_fields_matches_nothing(self):
        where_clause, params = build_bom_filter({'keyword': 'x'}, scope=VisibilityScope(keyword_fields=[]))
        assert where_clause == '1=1 AND 1 = 0'
        assert params == []


class TestCustomerFilter:
    """Tests for build_customer_filter."""

    def test_archived_hidden_by_default(self):
        where_clause, params = build_customer_filter({})
        assert where_clause == '1=1 AND c.is_archived = false'
        assert params == []

    def test_include_archived_honours_caller_filter(self):
        where_clause, params = build_customer_filter(
            {'isArchived': True}, VisibilityScope(include_archived=True)
        )
        assert 'c.is_archived = $1' in where_clause
        assert 'c.is_archived = false' not in where_clause
        assert params == [True]

    def test_active_status_applied_when_none_given(self):
        where_clause, params = build_customer_filter({}, VisibilityScope(active_status_id='active-id'))
        assert 'c.status_id = $1' in where_clause
        assert params == ['active-id']

    def test_explicit_status_wins(self):
        _, params = build_customer_filter({'statusId': 'inactive-id'}, VisibilityScope(active_status_id='active-id'))
        assert params == ['inactive-id']

    def test_override_skips_default_status(self):
        where_clause, params = build_customer_filter(
            {}, VisibilityScope(active_status_id='active-id', override_default_status=True)
        )
        assert 'c.status_id' not in where_clause
        assert params == []

    def test_keyword_and_status_date(self):
        where_clause, params = build_customer_filter({'keyword': 'jane', 'statusDateAfter': '2026-02-01'})

        assert '(c.firstname ILIKE $1 OR c.lastname ILIKE $1 OR c.email ILIKE $1 OR c.phone_number ILIKE $1)' in where_clause
        assert 'c.status_date >= $2' in where_clause
        assert params == ['%jane%', datetime(2026, 2, 1, tzinfo=UTC)]


class TestDiscountFilter:
    """Tests for build_discount_filter."""

    def test_valid_on_reuses_one_placeholder(self):
        where_clause, params = build_discount_filter({'validOn': '2026-03-01'})

        assert '(d.valid_from <= $1 AND (d.valid_to IS NULL OR d.valid_to >= $1))' in where_clause
        assert params == [datetime(2026, 3, 1, tzinfo=UTC)]

    def test_currently_valid_from_scope(self):
        where_clause, params = build_discount_filter({}, VisibilityScope(restrict_to_currently_valid=True))

        assert 'd.valid_from <= NOW()' in where_clause
        assert '(d.valid_to IS NULL OR d.valid_to >= NOW())' in where_clause
        assert params == []

    def test_unparseable_valid_from_is_ignored(self):
        where_clause, params = build_discount_filter({'validFrom': 'soon', 'discountType': 'percentage'})

        assert 'd.valid_from' not in where_clause
        assert params == ['percentage']


class TestPricingFilter:
    """Tests for build_pricing_filter."""

    def test_brand_and_currently_valid(self):
        where_clause, params = build_pricing_filter({'brand': 'Canaherb', 'currentlyValid': True})

        assert 'pr.brand = $1' in where_clause
        assert 'p.valid_from <= NOW()' in where_clause
        assert '(p.valid_to IS NULL OR p.valid_to >= NOW())' in where_clause
        assert params == ['Canaherb']

    def test_keyword_columns(self):
        where_clause, params = build_pricing_filter({'keyword': 'omega'})
        assert '(pr.name ILIKE $1 OR s.sku ILIKE $1 OR pt.name ILIKE $1)' in where_clause
        assert params == ['%omega%']

    def test_placeholders_stay_aligned(self):
        where_clause, params = build_pricing_filter({
            'skuId': 'sku-1', 'pricingType': 'Retail', 'countryCode': 'CA',
            'validOn': '2026-01-01', 'createdAfter': '2026-01-01', 'keyword': 'x',
        }, VisibilityScope(active_status_id='st'))

        assert_aligned(where_clause, params)
        assert len(params) == 7


class TestFulfillmentFilter:
    """Tests for build_fulfillment_filter."""

    def test_id_lists_bind_as_arrays(self):
        where_clause, params = build_fulfillment_filter({'statusIds': ['a', 'b'], 'warehouseIds': ['w']})

        assert 'os.status_id = ANY($1::uuid[])' in where_clause
        assert 'os.warehouse_id = ANY($2::uuid[])' in where_clause
        assert params == [['a', 'b'], ['w']]

    def test_scalar_for_list_field_rejected(self):
        with pytest.raises(QueryValidationError):
            build_fulfillment_filter({'statusIds': 'a'})

    def test_shipped_range_and_order_number(self):
        where_clause, params = build_fulfillment_filter({'shippedBefore': '2026-04-30', 'orderNumber': 'SO-1'})

        assert 'os.shipped_at < $1' in where_clause
        assert 'o.order_number ILIKE $2' in where_clause
        assert params == [datetime(2026, 5, 1, tzinfo=UTC), '%SO-1%']


class TestAddressFilter:
    """Tests for build_address_filter."""

    def test_customer_id(self):
        where_clause, params = build_address_filter({'customerId': 'c1'})
        assert where_clause == '1=1 AND a.customer_id = $1'
        assert params == ['c1']

    def test_include_unassigned(self):
        where_clause, params = build_address_filter({'customerId': 'c1'}, VisibilityScope(include_unassigned=True))
        assert '(a.customer_id = $1 OR a.customer_id IS NULL)' in where_clause
        assert params == ['c1']


class TestOrderFilter:
    """Tests for build_order_filter."""

    def test_active_status_overrides_caller(self):
        where_clause, params = build_order_filter({'orderStatusId': 'mine'}, VisibilityScope(active_status_id='active'))
        assert 'o.order_status_id = $1' in where_clause
        assert params == ['active']

    def test_order_type_list_and_status_ids(self):
        where_clause, params = build_order_filter({'orderTypeId': ['t1', 't2'], 'orderStatusIds': ['s1']})

        assert 'o.order_type_id IN ($1, $2)' in where_clause
        assert 'o.order_status_id = ANY($3::uuid[])' in where_clause
        assert params == ['t1', 't2', ['s1']]

    def test_keyword_restricted_to_order_number(self):
        where_clause, _ = build_order_filter({'keyword': 'SO-'}, VisibilityScope(restrict_keyword_to_order_number=True))
        assert '(o.order_number ILIKE $1)' in where_clause
        assert 'o.note' not in where_clause

    def test_keyword_default_columns(self):
        where_clause, _ = build_order_filter({'keyword': 'SO-'})
        assert '(o.order_number ILIKE $1 OR o.note ILIKE $1)' in where_clause


class TestLocationFilter:
    """Tests for build_location_filter."""

    def test_defaults(self):
        assert build_location_filter().where_clause == '1=1 AND l.is_archived = false'

    def test_status_ids_take_precedence(self):
        where_clause, params = build_location_filter(
            {'statusIds': ['a'], 'statusId': 'b'}, VisibilityScope(active_status_id='c')
        )
        assert 'l.status_id = ANY($1::uuid[])' in where_clause
        assert params == [['a']]

    def test_keyword_spans_address_columns(self):
        where_clause, _ = build_location_filter({'keyword': 'Toronto'})
        assert 'l.postal_code ILIKE $1' in where_clause
        assert where_clause.count('$1') == 7


class TestComplianceRecordFilter:
    """Tests for build_compliance_record_filter."""

    def test_expiring_window_and_sku_ids(self):
        where_clause, params = build_compliance_record_filter({
            'expiringAfter': '2026-01-01',
            'expiringBefore': '2026-03-31',
            'skuIds': ['s1'],
        })

        assert 'cr.expiry_date >= $1' in where_clause
        assert 'cr.expiry_date < $2' in where_clause
        assert 's.id = ANY($3::uuid[])' in where_clause
        assert params == [
            datetime(2026, 1, 1, tzinfo=UTC),
            datetime(2026, 4, 1, tzinfo=UTC),
            ['s1'],
        ]

    def test_keyword_columns(self):
        where_clause, _ = build_compliance_record_filter({'keyword': 'NPN'})
        assert '(cr.compliance_id ILIKE $1 OR s.sku ILIKE $1 OR p.name ILIKE $1 OR p.brand ILIKE $1 OR p.category ILIKE $1)' in where_clause


def test_builders_are_independent_across_calls():
    first = build_bom_filter({'keyword': 'a'})
    second = build_bom_filter({'keyword': 'b'})

    assert first.where_clause == second.where_clause
    assert first.params == ['%a%']
    assert second.params == ['%b%']
