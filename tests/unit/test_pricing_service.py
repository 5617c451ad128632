"""
Unit tests for order totals and tax.
"""

from decimal import Decimal

from misproductos.services.pricing_service import compute_order_totals, tax_label
from misproductos.utils.formatters import format_price
from misproductos.value_objects import TenantPricingConfig


class TestComputeOrderTotals:
    """Tests for compute_order_totals."""

    def test_percentage_tax(self):
        config = TenantPricingConfig(enable_tax=True, tax_type='percentage', tax_value=Decimal('21'))

        totals = compute_order_totals(100, config)

        assert totals == {'sub_total': Decimal('100'), 'tax': Decimal('21'), 'total': Decimal('121')}

    def test_tax_disabled_ignores_tax_value(self):
        config = TenantPricingConfig(enable_tax=False, tax_value=Decimal('21'))

        totals = compute_order_totals(Decimal('59.90'), config)

        assert totals['tax'] == 0
        assert totals['total'] == Decimal('59.90')

    def test_fixed_tax_is_flat(self):
        config = TenantPricingConfig(enable_tax=True, tax_type='fixed', tax_value=Decimal('50'))

        assert compute_order_totals(1000, config)['total'] == Decimal('1050')
        assert compute_order_totals(10, config)['tax'] == Decimal('50')

    def test_zero_tax_is_valid(self):
        config = TenantPricingConfig(enable_tax=True, tax_value=Decimal('0'))

        totals = compute_order_totals(80, config)

        assert totals['tax'] == 0
        assert totals['total'] == Decimal('80')

    def test_never_negative(self):
        config = TenantPricingConfig(enable_tax=True, tax_value=Decimal('-10'))

        totals = compute_order_totals(-50, config)

        assert totals == {'sub_total': 0, 'tax': 0, 'total': 0}

    def test_defaults_without_config(self):
        assert compute_order_totals('abc')['total'] == 0


class TestTaxLabel:
    """Tests for the checkout tax label."""

    def test_percentage_label(self):
        config = TenantPricingConfig(enable_tax=True, tax_value=Decimal('10.5'))
        assert tax_label(config) == 'Impuestos (10.5%)'

    def test_plain_label(self):
        assert tax_label(TenantPricingConfig()) == 'Impuestos'
        assert tax_label(TenantPricingConfig(enable_tax=True, tax_type='fixed', tax_value=Decimal('5'))) == 'Impuestos'


class TestTotalsExtremeInputs:
    """compute_order_totals never raises on extreme or missing values."""

    def test_missing_tax_value(self):
        config = TenantPricingConfig(enable_tax=True, tax_type=None, tax_value=None)

        assert compute_order_totals(100, config) == {'sub_total': 100, 'tax': 0, 'total': 100}
        assert tax_label(config) == 'Impuestos'

    def test_huge_subtotal(self):
        config = TenantPricingConfig(enable_tax=True, tax_value=Decimal('21'))

        totals = compute_order_totals(Decimal('1e27'), config)

        assert totals['tax'] == Decimal('2.1e26')
        assert totals['total'] == Decimal('1.21e27')
        assert format_price(totals['total']) == '$121' + '0' * 25 + '.00'
