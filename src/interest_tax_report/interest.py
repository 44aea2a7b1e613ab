"""
Interest income on the idle cash balance of a brokerage account.

Converts every interest payment of the tax year to the domestic currency at the
rate of the payment date, calculates the tax owed and the income left after tax,
prints the report and optionally adds the payments to the tax statement.
"""
import logging
from typing import Optional

from interest_tax_report.constants import INTEREST_INCOME_DESCRIPTION, INTEREST_REPORT_CAPTION
from interest_tax_report.currency import Cash, PrecisionLookup, precision_for, round_amount
from interest_tax_report.exceptions import FilingRejectedError, ValidationError
from interest_tax_report.models import BrokerStatement, PortfolioConfig, ReportRow, TotalsAccumulator
from interest_tax_report.report import InterestReportTable
from interest_tax_report.tax_rules import compute_tax
from interest_tax_report.tax_statement import TaxStatement

logger = logging.getLogger(__name__)


def process_income(
        portfolio: PortfolioConfig, broker_statement: BrokerStatement, year: Optional[int],
        tax_statement: Optional[TaxStatement], converter,
        precision_lookup: PrecisionLookup = precision_for
) -> Optional[InterestReportTable]:
    """
    Calculate taxable income from interest credited on the brokerage account balance.

    Args:
        portfolio: Portfolio configuration with the tax country
        broker_statement: Interest payments in the order they were credited
        year: Only payments received in this year are processed (all when None)
        tax_statement: Tax statement to add the income to, if any
        converter: Currency converter with ``precise_currency_rate`` and ``convert_to``
        precision_lookup: Display precision of a currency

    Returns:
        The printed report table, or None when there was nothing to report

    Raises:
        RateUnavailableError, ConversionError: If a payment can't be converted
        TaxComputationError: If the tax owed can't be calculated
        FilingRejectedError: If the tax statement rejects a payment
    """
    table = InterestReportTable(precision_lookup)
    country = portfolio.get_tax_country()
    broker_name = broker_statement.broker.name

    totals = TotalsAccumulator(country.currency)

    for interest in broker_statement.idle_cash_interest:
        if year is not None and interest.date.year != year:
            logger.debug("Skipping %s interest from %s: not in %s", interest.amount, interest.date, year)
            continue

        foreign_amount = interest.amount.round(precision_lookup)

        precise_currency_rate = converter.precise_currency_rate(
            interest.date, foreign_amount.currency, country.currency)

        # Rounded only after conversion
        amount = round_amount(
            converter.convert_to(interest.date, interest.amount, country.currency),
            precision_lookup(country.currency))

        tax_to_pay = compute_tax(interest, country, converter, precision_lookup).amount
        income = amount - tax_to_pay

        row = ReportRow(
            date=interest.date,
            currency=foreign_amount.currency,
            foreign_amount=foreign_amount,
            currency_rate=precise_currency_rate,
            amount=Cash(country.currency, amount),
            tax_to_pay=Cash(country.currency, tax_to_pay),
            income=Cash(country.currency, income),
        )
        totals.add(row)
        table.add_row(row)

        logger.debug(
            "%s interest from %s: %s at %s, tax %s", foreign_amount, interest.date,
            row.amount, precise_currency_rate, row.tax_to_pay)

        if tax_statement is not None:
            description = INTEREST_INCOME_DESCRIPTION.format(broker=broker_name)

            try:
                tax_statement.add_interest_income(
                    description, interest.date, foreign_amount.currency, precise_currency_rate,
                    foreign_amount.amount, amount)
            except ValidationError as e:
                raise FilingRejectedError(interest.date, str(e)) from e

    if table.is_empty():
        logger.info("No interest income from %s to report", broker_name)
        return None

    table.set_totals(totals)
    table.print(INTEREST_REPORT_CAPTION.format(broker=broker_name))

    return table
