"""
Interest income tax report - taxable income from interest on brokerage account balances.

This package converts foreign-currency interest credited by a broker to the domestic
currency at historical exchange rates, calculates the tax owed under the rules of the
tax country and produces an itemized report and tax statement entries.
"""

from interest_tax_report.converter import CurrencyConverter
from interest_tax_report.currency import Cash, MultiCurrencyAccount
from interest_tax_report.excel_report import generate_excel_report
from interest_tax_report.interest import process_income
from interest_tax_report.tax_statement import TaxStatement

__all__ = [
    "Cash",
    "CurrencyConverter",
    "MultiCurrencyAccount",
    "TaxStatement",
    "generate_excel_report",
    "process_income",
]

__version__ = "1.0.0"
