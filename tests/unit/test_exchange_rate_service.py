"""
Unit tests for USD conversion.
"""

from decimal import Decimal
from unittest.mock import MagicMock, patch

import requests

from misproductos.services.exchange_rate_service import ExchangeRateClient


def _response(rates):
    response = MagicMock()
    response.json.return_value = {'data': {'currency': 'USD', 'rates': rates}}
    response.raise_for_status.return_value = None
    return response


class TestConvertToUsd:
    """Tests for ExchangeRateClient.convert_to_usd."""

    @patch('misproductos.services.exchange_rate_service.requests.get')
    def test_usd_needs_no_rates(self, mock_get):
        client = ExchangeRateClient()

        assert client.convert_to_usd('99.90', 'usd', use_cache=False) == Decimal('99.90')
        mock_get.assert_not_called()

    @patch('misproductos.services.exchange_rate_service.requests.get')
    def test_converts_with_rate(self, mock_get):
        mock_get.return_value = _response({'ARS': '1000', 'EUR': '0.9'})
        client = ExchangeRateClient()

        assert client.convert_to_usd(5000, 'ARS', use_cache=False) == Decimal('5.00')
        assert client.convert_to_usd(10, 'eur', use_cache=False) == Decimal('11.11')
        mock_get.assert_called_with(client.base_url, params={'currency': 'USD'}, timeout=client.timeout)

    @patch('misproductos.services.exchange_rate_service.requests.get')
    def test_unknown_currency(self, mock_get):
        mock_get.return_value = _response({'ARS': '1000'})

        assert ExchangeRateClient().convert_to_usd(10, 'XYZ', use_cache=False) is None

    @patch('misproductos.services.exchange_rate_service.requests.get')
    def test_invalid_rates_are_dropped(self, mock_get):
        mock_get.return_value = _response({'ARS': '0', 'BRL': 'abc'})
        client = ExchangeRateClient()

        assert client.convert_to_usd(10, 'ARS', use_cache=False) is None
        assert client.convert_to_usd(10, 'BRL', use_cache=False) is None

    @patch('misproductos.services.exchange_rate_service.requests.get')
    def test_http_error(self, mock_get):
        response = MagicMock()
        response.raise_for_status.side_effect = requests.HTTPError('503 Service Unavailable')
        mock_get.return_value = response

        assert ExchangeRateClient().convert_to_usd(10, 'ARS', use_cache=False) is None

    @patch('misproductos.services.exchange_rate_service.requests.get')
    def test_network_error(self, mock_get):
        mock_get.side_effect = requests.ConnectionError('boom')

        assert ExchangeRateClient().convert_to_usd(10, 'ARS', use_cache=False) is None

    @patch('misproductos.services.exchange_rate_service.requests.get')
    def test_empty_payload(self, mock_get):
        response = MagicMock()
        response.json.return_value = {'data': {}}
        mock_get.return_value = response

        assert ExchangeRateClient().get_rates(use_cache=False) is None
