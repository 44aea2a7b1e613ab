"""
Constants used throughout the interest income tax report.

This module centralizes currency metadata, tax country defaults, report labels
and formatting values to keep them out of the calculation code.
"""

# File encoding
DEFAULT_FILE_ENCODING = 'utf-8'

# CSV configuration
CSV_DELIMITER = ';'

# Decimal precision for different types of values
DEFAULT_CURRENCY_PRECISION = 2
DECIMAL_PRECISION_RATE = 4

# Currencies whose minor unit differs from the usual two decimal places
CURRENCY_PRECISIONS = {
    'JPY': 0,
    'KRW': 0,
    'ISK': 0,
    'BHD': 3,
    'KWD': 3,
    'OMR': 3,
}

# Tax countries: domestic currency, flat tax rate and precision the tax is rounded to
TAX_COUNTRIES = {
    'ru': {'currency': 'RUB', 'tax_rate': '0.13', 'tax_precision': 0},
    'at': {'currency': 'EUR', 'tax_rate': '0.275', 'tax_precision': 2},
}

# Date formats
DATE_FORMAT_DISPLAY = '%d.%m.%Y'
DATE_FORMAT_ISO = '%Y-%m-%d'

# Report columns, in display order
REPORT_COLUMNS = [
    'Date',
    'Currency',
    'Foreign Amount',
    'Exchange Rate',
    'Domestic Amount',
    'Tax Owed',
    'Real Income',
]

# Report labels
INTEREST_INCOME_DESCRIPTION = '{broker}: interest on brokerage account balance'
INTEREST_REPORT_CAPTION = 'Interest income on brokerage account balance received through {broker}'

# Terminal display
TERMINAL_COLUMN_WIDTH_NARROW = 10
TERMINAL_COLUMN_WIDTH_MEDIUM = 16
TERMINAL_COLUMN_WIDTH_WIDE = 24

# Excel formatting
EXCEL_SHEET_NAME = 'Interest income'
EXCEL_COLUMN_WIDTH_NARROW = 12
EXCEL_COLUMN_WIDTH_MEDIUM = 16
EXCEL_COLUMN_WIDTH_WIDE = 28
