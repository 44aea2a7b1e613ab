import csv
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Dict, List, Optional, Union

from interest_tax_report.constants import (
    CSV_DELIMITER, DATE_FORMAT_ISO, DEFAULT_FILE_ENCODING, TAX_COUNTRIES
)
from interest_tax_report.currency import Cash, MultiCurrencyAccount
from interest_tax_report.exceptions import ConfigurationError, ValidationError


def parse_decimal(value: str) -> Decimal:
    """
    Parse a decimal number written either as 1234.56 or in European format (1.234,56).
    """
    value = value.strip().replace(' ', '')
    if not value:
        raise ValidationError("Empty amount")

    if ',' in value:
        if '.' in value and value.rindex('.') > value.rindex(','):
            raise ValidationError(f"Ambiguous amount: {value!r}")
        value = value.replace('.', '').replace(',', '.')

    try:
        return Decimal(value)
    except InvalidOperation as e:
        raise ValidationError(f"Invalid amount: {value!r}") from e


@dataclass(frozen=True)
class Broker:
    """The broker the interest was credited by."""
    name: str


@dataclass(frozen=True)
class InterestPayment:
    """
    Interest credited on the idle cash balance of a brokerage account.
    """
    date: date
    amount: Cash

    @classmethod
    def from_csv_row(cls, row: dict) -> 'InterestPayment':
        """
        Create an InterestPayment from a CSV row with ``date``, ``amount`` and ``currency`` columns.

        Args:
            row: Dictionary containing payment data from CSV

        Returns:
            New InterestPayment instance
        """
        missing = [column for column in ('date', 'amount', 'currency') if row.get(column) is None]
        if missing:
            raise ValidationError(f"Missing {', '.join(missing)} in interest payment row {row}")

        try:
            day = datetime.strptime(row['date'].strip(), DATE_FORMAT_ISO).date()
            return cls(date=day, amount=Cash(row['currency'].strip(), parse_decimal(row['amount'])))
        except ValueError as e:
            raise ValidationError(f"Invalid interest payment row {row}: {e}") from e


@dataclass
class BrokerStatement:
    """Interest payments of a single broker in the order they were credited."""
    broker: Broker
    idle_cash_interest: List[InterestPayment] = field(default_factory=list)

    @classmethod
    def from_csv(cls, csv_file_path: str, broker: Broker) -> 'BrokerStatement':
        """
        Load interest payments from a ``;``-delimited CSV file.

        Args:
            csv_file_path: Path to the CSV file
            broker: Broker that credited the payments

        Returns:
            BrokerStatement with the payments in file order
        """
        payments = []

        with open(csv_file_path, 'r', encoding=DEFAULT_FILE_ENCODING, newline='') as file:
            reader = csv.DictReader(file, delimiter=CSV_DELIMITER)
            for row in reader:
                payments.append(InterestPayment.from_csv_row(row))

        return cls(broker=broker, idle_cash_interest=payments)


@dataclass(frozen=True)
class TaxCountry:
    """
    Tax jurisdiction in which the income is declared.
    """
    # Lowercase country code the tax rule is selected by
    code: str
    # Domestic currency
    currency: str
    # Flat tax rate applied to interest income
    tax_rate: Decimal
    # Number of decimal places the tax is rounded to
    tax_precision: int

    @classmethod
    def from_code(cls, code: str, tax_rate: Optional[str] = None, currency: Optional[str] = None) -> 'TaxCountry':
        """Create a TaxCountry from the built-in defaults, optionally overriding rate and currency."""
        code = code.lower()
        if (defaults := TAX_COUNTRIES.get(code)) is None:
            raise ConfigurationError(f"Unsupported tax country: {code!r}")

        try:
            rate = Decimal(str(tax_rate if tax_rate is not None else defaults['tax_rate']))
        except InvalidOperation as e:
            raise ConfigurationError(f"Invalid tax rate: {tax_rate!r}") from e

        if not Decimal(0) <= rate < Decimal(1):
            raise ConfigurationError(f"Tax rate must be in [0, 1): {rate}")

        return cls(
            code=code,
            currency=(currency or defaults['currency']).upper(),
            tax_rate=rate,
            tax_precision=defaults['tax_precision'],
        )


@dataclass
class PortfolioConfig:
    """
    Configuration of a brokerage account.
    """
    broker: Broker
    tax_country: str
    # Overrides of the country defaults
    tax_rate: Optional[str] = None
    currency: Optional[str] = None
    # Known rates of foreign currencies to the domestic currency: date -> {currency: rate}
    currency_rates: Dict[date, Dict[str, Decimal]] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict) -> 'PortfolioConfig':
        """Create a PortfolioConfig instance from a dictionary."""
        try:
            config = cls(
                broker=Broker(data['broker']),
                tax_country=data['tax_country'],
                tax_rate=data.get('tax_rate'),
                currency=data.get('currency'),
                currency_rates=cls._parse_currency_rates(data.get('currency_rates') or {}),
            )
        except KeyError as e:
            raise ConfigurationError(f"Missing configuration key: {e}") from e

        # Fail early on unknown countries and invalid overrides.
        config.get_tax_country()
        return config

    @staticmethod
    def _parse_currency_rates(data: dict) -> Dict[date, Dict[str, Decimal]]:
        """Parse ``{"2023-06-01": {"USD": "90.0"}}`` into dates and decimal rates."""
        rates = {}

        for day, currency_rates in data.items():
            try:
                day = datetime.strptime(day, DATE_FORMAT_ISO).date()
                rates[day] = {
                    currency.upper(): Decimal(str(rate)) for currency, rate in currency_rates.items()
                }
            except (ValueError, InvalidOperation, AttributeError) as e:
                raise ConfigurationError(f"Invalid currency rates for {day}: {e}") from e

        return rates

    def get_tax_country(self) -> TaxCountry:
        return TaxCountry.from_code(self.tax_country, tax_rate=self.tax_rate, currency=self.currency)


@dataclass(frozen=True)
class ReportRow:
    """
    A single row of the interest income report.

    Date, currency and exchange rate are empty for the totals row, whose foreign
    amount is the multi-currency summary of all payments.
    """
    date: Optional[date]
    currency: Optional[str]
    foreign_amount: Union[Cash, MultiCurrencyAccount]
    currency_rate: Optional[Decimal]
    amount: Cash
    tax_to_pay: Cash
    income: Cash

    @property
    def is_totals(self) -> bool:
        return self.date is None


class TotalsAccumulator:
    """
    Running totals of the report: foreign amounts per currency and domestic sums.
    """

    def __init__(self, currency: str):
        self.currency = currency
        self.foreign_amount = MultiCurrencyAccount()
        self.amount = Decimal(0)
        self.tax_to_pay = Decimal(0)
        self.income = Decimal(0)

    def add(self, row: ReportRow) -> None:
        self.foreign_amount.deposit(row.foreign_amount)
        self.amount += row.amount.amount
        self.tax_to_pay += row.tax_to_pay.amount
        self.income += row.income.amount

    def to_row(self) -> ReportRow:
        return ReportRow(
            date=None,
            currency=None,
            foreign_amount=self.foreign_amount,
            currency_rate=None,
            amount=Cash(self.currency, self.amount),
            tax_to_pay=Cash(self.currency, self.tax_to_pay),
            income=Cash(self.currency, self.income),
        )
