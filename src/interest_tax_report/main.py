"""
Main entry point for the interest income tax report.
Converts interest credited on a brokerage account balance and calculates the tax owed on it.
"""
import json
import logging
import os
import sys
from typing import Optional

from interest_tax_report.constants import DATE_FORMAT_DISPLAY, DEFAULT_FILE_ENCODING, INTEREST_REPORT_CAPTION
from interest_tax_report.converter import CurrencyConverter
from interest_tax_report.excel_report import generate_excel_report
from interest_tax_report.exceptions import ConfigurationError, TaxReportError
from interest_tax_report.interest import process_income
from interest_tax_report.models import BrokerStatement, PortfolioConfig
from interest_tax_report.tax_statement import TaxStatement

logger = logging.getLogger(__name__)


def load_config(config_path: str) -> PortfolioConfig:
    """
    Load and parse the portfolio configuration from a JSON file.

    Args:
        config_path: Path to the JSON configuration file

    Returns:
        PortfolioConfig object

    Raises:
        ConfigurationError: If the configuration file is invalid
    """
    try:
        with open(config_path, 'r', encoding=DEFAULT_FILE_ENCODING) as f:
            config_data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid configuration file: {str(e)}") from e

    if not isinstance(config_data, dict):
        raise ConfigurationError("Invalid configuration file: expected a JSON object")

    return PortfolioConfig.from_dict(config_data)


def create_converter(config: PortfolioConfig) -> CurrencyConverter:
    """Create a currency converter that knows the rates listed in the configuration."""
    domestic_currency = config.get_tax_country().currency

    return CurrencyConverter(rate_overrides={
        day: {(currency, domestic_currency): rate for currency, rate in rates.items()}
        for day, rates in config.currency_rates.items()
    })


def parse_year(value: str) -> int:
    try:
        return int(value)
    except ValueError:
        raise ConfigurationError(f"Invalid tax year: {value}") from None


def print_tax_statement_summary(tax_statement: TaxStatement) -> None:
    """Print the entries added to the tax statement."""
    entries = tax_statement.get_interest_incomes()

    print("\n" + "=" * 80)
    title = f"TAX STATEMENT {tax_statement.year}"
    print(f"{title:^80}")
    print("=" * 80 + "\n")

    for entry in entries:
        print(f"{entry.date.strftime(DATE_FORMAT_DISPLAY):12} {entry.description}")
        print(f"{'':12} {entry.foreign_amount} {entry.currency} x {entry.currency_rate} = "
              f"{entry.amount} {tax_statement.currency}")

    print(f"\n{'Total interest income:':<50} {tax_statement.total_amount():>14} {tax_statement.currency}")


def run(config_path: str, payments_path: str, year: Optional[int] = None,
        excel_path: Optional[str] = None) -> None:
    """Load the inputs, process the interest income and write the requested reports."""
    config = load_config(config_path)
    broker_statement = BrokerStatement.from_csv(payments_path, config.broker)
    converter = create_converter(config)

    tax_statement = None
    if year is not None:
        tax_statement = TaxStatement(year, config.get_tax_country().currency)

    table = process_income(config, broker_statement, year, tax_statement, converter)
    if table is None:
        print("\nNo interest income to report.")
        return

    if tax_statement is not None:
        print_tax_statement_summary(tax_statement)

    if excel_path:
        caption = INTEREST_REPORT_CAPTION.format(broker=config.broker.name)
        generate_excel_report(table, caption, excel_path)
        print(f"\nExcel report generated successfully: {excel_path}")


def main():
    """
    Main entry point of the interest income tax report.

    Exits with status 1 on error.
    """
    if len(sys.argv) < 3 or len(sys.argv) > 5:
        print("Usage: interest-tax-report <config_file> <payments_file> [year] [excel_output]")
        print("\n  config_file: JSON file with the broker name and the tax country")
        print("  payments_file: CSV file with date;amount;currency columns")
        print("  year: Optional tax year; when given, the tax statement entries are printed too")
        print("  excel_output: Optional path for Excel report output")
        sys.exit(1)

    logging.basicConfig(
        level=os.environ.get('INTEREST_TAX_REPORT_LOG_LEVEL', 'WARNING').upper(),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s')

    config_path = sys.argv[1]
    payments_path = sys.argv[2]

    for path in (config_path, payments_path):
        if not os.path.isfile(path):
            print(f"Error: File not found: {path}")
            sys.exit(1)

    try:
        year = parse_year(sys.argv[3]) if len(sys.argv) >= 4 else None
        excel_path = sys.argv[4] if len(sys.argv) == 5 else None

        run(config_path, payments_path, year, excel_path)
    except TaxReportError as e:
        logger.debug("Report failed", exc_info=True)
        print(f"\nError: {str(e)}")
        sys.exit(1)


if __name__ == '__main__':
    main()
