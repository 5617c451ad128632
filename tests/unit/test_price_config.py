"""
Unit tests for typing prices.* settings into TenantPricingConfig.
"""

from decimal import Decimal

from misproductos.services.price_config_service import build_price_config
from misproductos.utils.formatters import format_price
from misproductos.value_objects import TenantPricingConfig


class TestBuildPriceConfig:
    """Tests for build_price_config."""

    def test_empty_map_uses_defaults(self):
        assert build_price_config({}) == TenantPricingConfig()
        assert build_price_config(None) == TenantPricingConfig()

    def test_full_map(self):
        config = build_price_config({
            'prices.currency': 'ars',
            'prices.format': 'code-after',
            'prices.showPrices': True,
            'prices.decimals': 0,
            'prices.enableTax': True,
            'prices.taxType': 'fixed',
            'prices.taxValue': 150,
        })

        assert config == TenantPricingConfig(
            currency='ARS', format='code-after', show_prices=True, decimals=0,
            enable_tax=True, tax_type='fixed', tax_value=Decimal('150'),
        )

    def test_string_values_from_forms(self):
        config = build_price_config({
            'prices.showPrices': 'false',
            'prices.enableTax': 'true',
            'prices.taxValue': '21,5',
            'prices.decimals': '3',
        })

        assert config.show_prices is False
        assert config.enable_tax is True
        assert config.tax_value == Decimal('21.5')
        assert config.decimals == 3

    def test_malformed_values_fall_back(self):
        config = build_price_config({
            'prices.format': 'big-symbol',
            'prices.taxType': 'vat',
            'prices.taxValue': 'veintiuno',
            'prices.decimals': '-1',
            'prices.showPrices': 'maybe',
        })

        assert config.format == 'symbol-before'
        assert config.tax_type == 'percentage'
        assert config.tax_value == 0
        assert config.decimals == 2
        assert config.show_prices is True

    def test_negative_tax_value_is_zero(self):
        assert build_price_config({'prices.taxValue': -5}).tax_value == 0

    def test_default_currency(self):
        assert build_price_config({}, default_currency='mxn').currency == 'MXN'
        assert build_price_config({'prices.currency': 'COP'}, default_currency='MXN').currency == 'COP'

    def test_large_decimals_are_capped(self):
        config = build_price_config({'prices.decimals': '30'})

        assert config.decimals == 8
        assert format_price(100, config) == '$100.00000000'
