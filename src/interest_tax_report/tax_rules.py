"""
Tax rules for interest income, selected by tax country code.

A rule only decides how much tax is owed on an amount that has already been
converted to the domestic currency. ``compute_tax`` does the conversion and
delegates to the rule of the payment's tax country.
"""
from abc import ABC, abstractmethod
from decimal import Decimal

from interest_tax_report.currency import Cash, PrecisionLookup, precision_for, round_amount
from interest_tax_report.exceptions import (
    ConfigurationError, ConversionError, RateUnavailableError, TaxComputationError
)
from interest_tax_report.models import InterestPayment, TaxCountry


class TaxRule(ABC):
    """Computes the tax owed on income expressed in the domestic currency."""

    @abstractmethod
    def tax_to_pay(self, country: TaxCountry, income: Decimal) -> Decimal:
        raise NotImplementedError


class FlatRateTaxRule(TaxRule):
    """
    Tax is a fixed share of the income, rounded half-up to the country's tax precision.

    Used for Russian NDFL (13%, whole rubles) and Austrian KESt (27.5%, cents).
    """

    def tax_to_pay(self, country: TaxCountry, income: Decimal) -> Decimal:
        if income <= 0:
            return Decimal(0)
        return round_amount(income * country.tax_rate, country.tax_precision)


_TAX_RULES = {
    'ru': FlatRateTaxRule(),
    'at': FlatRateTaxRule(),
}


def get_tax_rule(country_code: str) -> TaxRule:
    """Return the tax rule registered for ``country_code``."""
    try:
        return _TAX_RULES[country_code.lower()]
    except KeyError:
        raise ConfigurationError(f"No tax rule for country {country_code!r}") from None


def register_tax_rule(country_code: str, rule: TaxRule) -> None:
    _TAX_RULES[country_code.lower()] = rule


def compute_tax(
        payment: InterestPayment, country: TaxCountry, converter,
        precision_lookup: PrecisionLookup = precision_for
) -> Cash:
    """
    Calculate the tax owed on an interest payment in the country's currency.

    Args:
        payment: The interest payment
        country: Tax country the income is declared in
        converter: Currency converter used to convert the payment amount
        precision_lookup: Display precision of a currency

    Returns:
        Tax owed, in the domestic currency

    Raises:
        RateUnavailableError, ConversionError: If the payment can't be converted
        TaxComputationError: If the tax rule fails
    """
    rule = get_tax_rule(country.code)

    try:
        income = round_amount(
            converter.convert_to(payment.date, payment.amount, country.currency),
            precision_lookup(country.currency))
        return Cash(country.currency, rule.tax_to_pay(country, income))
    except (RateUnavailableError, ConversionError):
        raise
    except ArithmeticError as e:
        raise TaxComputationError(
            f"Unable to calculate tax on {payment.amount} interest from {payment.date}: {e}") from e
