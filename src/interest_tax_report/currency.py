"""
Cash amounts tagged with a currency and a per-currency running account.

Amounts are always ``Decimal``; rounding follows the display precision of the
currency as returned by ``precision_for``.
"""
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Callable, Dict, Iterator, Union

from interest_tax_report.constants import CURRENCY_PRECISIONS, DEFAULT_CURRENCY_PRECISION
from interest_tax_report.exceptions import CurrencyMismatchError, ValidationError

PrecisionLookup = Callable[[str], int]


def precision_for(currency: str) -> int:
    """Return the number of decimal places amounts in ``currency`` are displayed with."""
    return CURRENCY_PRECISIONS.get(currency.upper(), DEFAULT_CURRENCY_PRECISION)


def round_amount(amount: Decimal, precision: int) -> Decimal:
    """Round ``amount`` half-up to ``precision`` decimal places."""
    return amount.quantize(Decimal(1).scaleb(-precision), rounding=ROUND_HALF_UP)


def to_decimal(value: Union[Decimal, int, float, str]) -> Decimal:
    """
    Convert a numeric value to Decimal.

    Floats go through ``str`` so that 0.1 becomes Decimal('0.1') and not its
    binary approximation.
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


@dataclass(frozen=True)
class Cash:
    """
    An amount of money in a single currency.

    Addition and subtraction are only defined between amounts of the same
    currency. Mixing currencies has to go through a currency converter.
    """
    currency: str
    amount: Decimal

    def __post_init__(self):
        if not isinstance(self.currency, str) or len(self.currency) != 3 or not self.currency.isalpha():
            raise ValidationError(f"Invalid currency code: {self.currency!r}")
        object.__setattr__(self, 'currency', self.currency.upper())
        object.__setattr__(self, 'amount', to_decimal(self.amount))

    def round(self, precision_lookup: PrecisionLookup = precision_for) -> 'Cash':
        """Return the amount rounded to the display precision of its currency."""
        return Cash(self.currency, round_amount(self.amount, precision_lookup(self.currency)))

    def _check_currency(self, other: 'Cash') -> None:
        if not isinstance(other, Cash):
            raise TypeError(f"Can't combine Cash with {type(other).__name__}")
        if other.currency != self.currency:
            raise CurrencyMismatchError(
                f"Currency mismatch: {self.currency} and {other.currency}")

    def __add__(self, other: 'Cash') -> 'Cash':
        self._check_currency(other)
        return Cash(self.currency, self.amount + other.amount)

    def __sub__(self, other: 'Cash') -> 'Cash':
        self._check_currency(other)
        return Cash(self.currency, self.amount - other.amount)

    def format(self, precision_lookup: PrecisionLookup = precision_for) -> str:
        """Format the amount for display, e.g. ``100.00 USD``."""
        return f"{self.amount:.{precision_lookup(self.currency)}f} {self.currency}"

    def __str__(self) -> str:
        return self.format()


class MultiCurrencyAccount:
    """
    Running totals kept separately for every currency.

    Only used for display: the buckets hold the deposited amounts in their
    original currency and are never converted.
    """

    def __init__(self):
        self._assets: Dict[str, Decimal] = {}

    def deposit(self, cash: Cash) -> None:
        """Add ``cash`` to the bucket of its currency, creating the bucket if needed."""
        self._assets[cash.currency] = self._assets.get(cash.currency, Decimal(0)) + cash.amount

    def is_empty(self) -> bool:
        return not self._assets

    def to_display(self) -> Dict[str, Cash]:
        """Return the balance of every currency, ordered by currency code."""
        return {currency: Cash(currency, amount) for currency, amount in sorted(self._assets.items())}

    def __iter__(self) -> Iterator[Cash]:
        return iter(self.to_display().values())

    def __eq__(self, other) -> bool:
        if not isinstance(other, MultiCurrencyAccount):
            return NotImplemented
        return self._assets == other._assets

    def format(self, precision_lookup: PrecisionLookup = precision_for) -> str:
        return ', '.join(cash.format(precision_lookup) for cash in self)

    def __str__(self) -> str:
        return self.format()

    def __repr__(self) -> str:
        return f"MultiCurrencyAccount({self.format()})"
