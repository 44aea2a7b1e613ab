from datetime import date
from decimal import Decimal

import pytest

from interest_tax_report.exceptions import ValidationError
from interest_tax_report.tax_statement import InterestIncomeEntry, TaxStatement

DESCRIPTION = "Interactive Brokers: interest on brokerage account balance"


@pytest.fixture
def statement():
    return TaxStatement(2023, 'RUB')


def add(statement, day=date(2023, 6, 1), currency='USD', rate=Decimal('90'),
        foreign_amount=Decimal('100'), amount=Decimal('9000'), description=DESCRIPTION):
    statement.add_interest_income(description, day, currency, rate, foreign_amount, amount)


def test_entries_are_kept_in_order(statement):
    add(statement)
    add(statement, day=date(2023, 7, 3), rate=Decimal('90.1'), foreign_amount=Decimal('10.01'),
        amount=Decimal('901.45'))

    assert statement.get_interest_incomes() == [
        InterestIncomeEntry(DESCRIPTION, date(2023, 6, 1), 'USD', Decimal('90'), Decimal('100'), Decimal('9000')),
        InterestIncomeEntry(DESCRIPTION, date(2023, 7, 3), 'USD', Decimal('90.1'), Decimal('10.01'),
                            Decimal('901.45')),
    ]
    assert statement.total_amount() == Decimal('9901.45')


@pytest.mark.parametrize('kwargs, message', [
    ({'day': date(2022, 12, 30)}, 'received in 2022'),
    ({'rate': Decimal('0')}, 'Invalid currency rate'),
    ({'foreign_amount': Decimal('0')}, 'must be positive'),
    ({'amount': Decimal('-1')}, 'must be positive'),
    ({'description': ' '}, 'description is empty'),
])
def test_invalid_entries_are_rejected(statement, kwargs, message):
    with pytest.raises(ValidationError, match=message):
        add(statement, **kwargs)
    assert statement.get_interest_incomes() == []


def test_duplicate_entry_is_rejected(statement):
    add(statement)
    with pytest.raises(ValidationError, match='already been added'):
        add(statement)
    assert len(statement.get_interest_incomes()) == 1


def test_domestic_currency_entry_is_accepted(statement):
    add(statement, currency='RUB', rate=Decimal(1), amount=Decimal('100'))

    assert statement.get_interest_incomes() == [
        InterestIncomeEntry(DESCRIPTION, date(2023, 6, 1), 'RUB', Decimal(1), Decimal('100'), Decimal('100'))]
