from datetime import date
from decimal import Decimal

import currency_converter
import pytest

from interest_tax_report.converter import CurrencyConverter
from interest_tax_report.currency import Cash
from interest_tax_report.models import Broker, BrokerStatement, InterestPayment, PortfolioConfig


class FakeRateBackend:
    """Stands in for the ECB backend with a fixed table of rates."""

    def __init__(self, rates=None):
        self.rates = rates or {}
        self.calls = []

    def convert(self, amount, currency, new_currency='EUR', date=None):
        self.calls.append((currency, new_currency, date))
        try:
            return amount * self.rates[(currency, new_currency, date)]
        except KeyError:
            raise currency_converter.RateNotFoundError(f"{currency} has no rate for {date}") from None


def payment(day: date, amount: str, currency: str = 'USD') -> InterestPayment:
    return InterestPayment(date=day, amount=Cash(currency, Decimal(amount)))


@pytest.fixture
def broker():
    return Broker("Interactive Brokers")


@pytest.fixture
def portfolio(broker):
    return PortfolioConfig(broker=broker, tax_country='ru')


@pytest.fixture
def make_statement(broker):
    def _make(*payments):
        return BrokerStatement(broker=broker, idle_cash_interest=list(payments))
    return _make


@pytest.fixture
def backend():
    return FakeRateBackend()


@pytest.fixture
def converter(backend):
    return CurrencyConverter(backend=backend, rate_overrides={
        date(2022, 12, 30): {('USD', 'RUB'): Decimal('70.3375')},
        date(2023, 1, 31): {('USD', 'RUB'): Decimal('70.3002'), ('EUR', 'RUB'): Decimal('76.5155')},
        date(2023, 2, 28): {('USD', 'RUB'): Decimal('75.4323')},
        date(2023, 6, 1): {('USD', 'RUB'): Decimal('90.0')},
        date(2023, 7, 3): {('USD', 'RUB'): Decimal('90.1')},
    })
