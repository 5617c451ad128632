"""Exchange rates for charging foreign-currency stores through USD-only gateways."""
import logging
from decimal import Decimal
from typing import Any, Dict, Optional

import requests
from flask import current_app, has_app_context

from misproductos.services.cache_service import cached
from misproductos.utils.number_format import round_half_up, to_decimal

logger = logging.getLogger(__name__)

CACHE_MODULE = 'exchange_rates'


class ExchangeRateClient:
    """Cliente para la API pública de cotizaciones de Coinbase."""

    BASE_URL = "https://api.coinbase.com/v2/exchange-rates"

    def __init__(self, base_url: Optional[str] = None, timeout: Optional[int] = None):
        if has_app_context():
            base_url = base_url or current_app.config.get('EXCHANGE_RATES_URL')
            timeout = timeout or current_app.config.get('EXCHANGE_RATES_TIMEOUT')
        self.base_url = base_url or self.BASE_URL
        self.timeout = timeout or 10

    def fetch_rates(self, base_currency: str = 'USD') -> Dict[str, Decimal]:
        """
        Fetch current rates: 1 base_currency = rate units of each currency.

        Raises:
            requests.RequestException: on network or HTTP errors
            ValueError: if the payload has no rates
        """
        logger.info(f"[FX] Fetching rates for {base_currency}")
        response = requests.get(
            self.base_url,
            params={'currency': base_currency},
            timeout=self.timeout
        )
        response.raise_for_status()
        data = response.json()

        raw_rates = (data.get('data') or {}).get('rates')
        if not raw_rates:
            raise ValueError(f"Respuesta sin cotizaciones para {base_currency}")

        rates = {}
        for code, rate in raw_rates.items():
            value = to_decimal(rate)
            if value > 0:
                rates[code.upper()] = value
        return rates

    def get_rates(self, base_currency: str = 'USD', use_cache: bool = True) -> Optional[Dict[str, Decimal]]:
        """Cached rates, or None when the provider is unavailable."""
        ttl = current_app.config.get('CACHE_EXCHANGE_RATES_TTL') if has_app_context() else None
        try:
            return cached(
                None, CACHE_MODULE, base_currency.upper(),
                lambda: self.fetch_rates(base_currency),
                ttl=ttl, use_cache=use_cache
            )
        except (requests.RequestException, ValueError) as e:
            logger.error(f"[FX] Error fetching exchange rates: {e}")
            return None

    def convert_to_usd(self, amount: Any, from_currency: str, use_cache: bool = True) -> Optional[Decimal]:
        """
        Convert an amount to USD, rounded half-up to cents.

        Returns:
            The USD amount, or None if no valid rate is available.
        """
        amount = to_decimal(amount)
        from_currency = (from_currency or 'USD').upper()
        if from_currency == 'USD':
            return amount

        rates = self.get_rates('USD', use_cache=use_cache)
        if not rates:
            return None

        rate = rates.get(from_currency)
        if rate is None or rate <= 0:
            logger.error(f"[FX] No exchange rate for {from_currency}")
            return None

        # Rates are 1 USD = rate [from_currency]
        return round_half_up(amount / rate, 2)
