"""
Historical currency conversion.

Rates come from the ECB reference rates shipped with the ``currency_converter``
package. Rates known in advance (e.g. the official rates of the domestic
central bank) can be supplied as overrides and always take precedence.
"""
import logging
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Dict, Optional, Tuple

import currency_converter

from interest_tax_report.currency import Cash, to_decimal
from interest_tax_report.exceptions import ConversionError, RateUnavailableError

logger = logging.getLogger(__name__)

RateOverrides = Dict[date, Dict[Tuple[str, str], Decimal]]


class CurrencyConverter:
    """
    Converts cash between currencies at the rate of a given day.

    Args:
        backend: Object with the ``currency_converter.CurrencyConverter.convert``
            signature. Created lazily from the bundled ECB data when omitted.
        rate_overrides: Mapping of ``date -> {(from_currency, to_currency): rate}``.
            The inverse pair is derived automatically.
    """

    def __init__(self, backend=None, rate_overrides: Optional[RateOverrides] = None):
        self._backend = backend
        self._rate_overrides: RateOverrides = {}

        for day, rates in (rate_overrides or {}).items():
            for (from_currency, to_currency), rate in rates.items():
                self.add_rate(day, from_currency, to_currency, rate)

    def add_rate(self, day: date, from_currency: str, to_currency: str, rate) -> None:
        """Register a known rate for ``from_currency -> to_currency`` on ``day``."""
        rate = to_decimal(rate)
        if rate <= 0:
            raise ConversionError(f"Invalid {from_currency}/{to_currency} rate for {day}: {rate}")
        self._rate_overrides.setdefault(day, {})[(from_currency.upper(), to_currency.upper())] = rate

    @property
    def backend(self):
        if self._backend is None:
            self._backend = currency_converter.CurrencyConverter(fallback_on_missing_rate=True)
        return self._backend

    def _override(self, day: date, from_currency: str, to_currency: str) -> Optional[Decimal]:
        rates = self._rate_overrides.get(day, {})

        if (rate := rates.get((from_currency, to_currency))) is not None:
            return rate

        if (rate := rates.get((to_currency, from_currency))) is not None:
            return Decimal(1) / rate

        return None

    def precise_currency_rate(self, day: date, from_currency: str, to_currency: str) -> Decimal:
        """
        Return the unrounded rate to convert ``from_currency`` into ``to_currency`` on ``day``.

        Raises:
            RateUnavailableError: If there is no rate for the pair on that date.
        """
        from_currency, to_currency = from_currency.upper(), to_currency.upper()
        if from_currency == to_currency:
            return Decimal(1)

        if (rate := self._override(day, from_currency, to_currency)) is not None:
            logger.debug("Using known %s/%s rate for %s: %s", from_currency, to_currency, day, rate)
            return rate

        try:
            rate = self.backend.convert(1, from_currency, to_currency, date=day)
        except (currency_converter.RateNotFoundError, ValueError) as e:
            raise RateUnavailableError(
                f"Unable to get {from_currency}/{to_currency} rate for {day}: {e}") from e

        logger.debug("Got %s/%s rate for %s: %s", from_currency, to_currency, day, rate)
        return to_decimal(rate)

    def convert_to(self, day: date, cash: Cash, to_currency: str) -> Decimal:
        """Convert ``cash`` into ``to_currency`` at the rate of ``day`` without rounding."""
        if cash.currency == to_currency.upper():
            return cash.amount

        rate = self.precise_currency_rate(day, cash.currency, to_currency)

        try:
            return cash.amount * rate
        except InvalidOperation as e:
            raise ConversionError(f"Unable to convert {cash} to {to_currency}: {e}") from e
