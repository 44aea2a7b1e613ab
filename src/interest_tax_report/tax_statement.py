"""
Tax statement that collects foreign income entries for the tax return.

Only the entries are kept in memory; writing the statement to the tax
authority's file format is left to the caller.
"""
import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import List

from interest_tax_report.exceptions import ValidationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InterestIncomeEntry:
    """A single foreign interest income entry of the tax statement."""
    description: str
    date: date
    currency: str
    currency_rate: Decimal
    foreign_amount: Decimal
    amount: Decimal


class TaxStatement:
    """
    Foreign income section of a tax return for a single year.

    Args:
        year: Tax year the statement is filed for
        currency: Domestic currency of the statement
    """

    def __init__(self, year: int, currency: str):
        self.year = year
        self.currency = currency.upper()
        self._interest_incomes: List[InterestIncomeEntry] = []

    def add_interest_income(
            self, description: str, date: date, currency: str, currency_rate: Decimal,
            foreign_amount: Decimal, amount: Decimal
    ) -> None:
        """
        Add an interest income entry.

        Raises:
            ValidationError: If the entry doesn't belong to this statement or is already in it
        """
        entry = InterestIncomeEntry(
            description=description,
            date=date,
            currency=currency.upper(),
            currency_rate=currency_rate,
            foreign_amount=foreign_amount,
            amount=amount,
        )
        self._validate(entry)

        logger.debug("Adding interest income entry: %s", entry)
        self._interest_incomes.append(entry)

    def _validate(self, entry: InterestIncomeEntry) -> None:
        if not entry.description.strip():
            raise ValidationError("Income description is empty")

        if entry.date.year != self.year:
            raise ValidationError(
                f"The income is received in {entry.date.year}, but the tax statement is for {self.year}")

        if entry.currency_rate <= 0:
            raise ValidationError(f"Invalid currency rate: {entry.currency_rate}")

        if entry.foreign_amount <= 0 or entry.amount <= 0:
            raise ValidationError(
                f"Income amount must be positive: {entry.foreign_amount} {entry.currency} / "
                f"{entry.amount} {self.currency}")

        if entry in self._interest_incomes:
            raise ValidationError("The income has already been added to the tax statement")

    def get_interest_incomes(self) -> List[InterestIncomeEntry]:
        return list(self._interest_incomes)

    def total_amount(self) -> Decimal:
        """Total declared interest income in the domestic currency."""
        return sum((entry.amount for entry in self._interest_incomes), Decimal(0))
