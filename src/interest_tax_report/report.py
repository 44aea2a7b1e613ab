"""
Terminal report of interest income.
Collects one row per interest payment plus a totals row and renders them as a table.
"""
from typing import List, Optional

import pandas as pd

from interest_tax_report.constants import (
    DATE_FORMAT_DISPLAY, DECIMAL_PRECISION_RATE, REPORT_COLUMNS, TERMINAL_COLUMN_WIDTH_MEDIUM,
    TERMINAL_COLUMN_WIDTH_NARROW, TERMINAL_COLUMN_WIDTH_WIDE
)
from interest_tax_report.currency import PrecisionLookup, precision_for
from interest_tax_report.models import ReportRow, TotalsAccumulator

_COLUMN_WIDTHS = [
    TERMINAL_COLUMN_WIDTH_NARROW,   # Date
    TERMINAL_COLUMN_WIDTH_NARROW,   # Currency
    TERMINAL_COLUMN_WIDTH_WIDE,     # Foreign Amount
    TERMINAL_COLUMN_WIDTH_NARROW,   # Exchange Rate
    TERMINAL_COLUMN_WIDTH_MEDIUM,   # Domestic Amount
    TERMINAL_COLUMN_WIDTH_MEDIUM,   # Tax Owed
    TERMINAL_COLUMN_WIDTH_MEDIUM,   # Real Income
]


class InterestReportTable:
    """Rows of the interest income report, in processing order."""

    def __init__(self, precision_lookup: PrecisionLookup = precision_for):
        self._rows: List[ReportRow] = []
        self._totals: Optional[TotalsAccumulator] = None
        self._precision_lookup = precision_lookup

    @property
    def precision_lookup(self) -> PrecisionLookup:
        return self._precision_lookup

    @property
    def rows(self) -> List[ReportRow]:
        return list(self._rows)

    @property
    def totals(self) -> Optional[ReportRow]:
        return self._totals.to_row() if self._totals is not None else None

    def add_row(self, row: ReportRow) -> None:
        self._rows.append(row)

    def set_totals(self, totals: TotalsAccumulator) -> None:
        self._totals = totals

    def is_empty(self) -> bool:
        return not self._rows

    def _format_cash(self, cash) -> str:
        return cash.format(self._precision_lookup)

    def _format_row(self, row: ReportRow) -> List[str]:
        if row.is_totals:
            date, currency, rate = '', '', ''
        else:
            date = row.date.strftime(DATE_FORMAT_DISPLAY)
            currency = row.currency
            rate = f"{row.currency_rate:.{DECIMAL_PRECISION_RATE}f}"

        return [
            date,
            currency,
            self._format_cash(row.foreign_amount),
            rate,
            self._format_cash(row.amount),
            self._format_cash(row.tax_to_pay),
            self._format_cash(row.income),
        ]

    @staticmethod
    def _format_line(cells: List[str], widths: List[int]) -> str:
        date, currency, *amounts = cells
        line = [f"{date:<{widths[0]}}", f"{currency:^{widths[1]}}"]
        line.extend(f"{value:>{width}}" for value, width in zip(amounts, widths[2:]))
        return ' '.join(line)

    def render(self, caption: str) -> str:
        """
        Render the table with ``caption`` as a title.

        Rendering doesn't change the table, so it can be repeated.
        """
        lines = [self._format_row(row) for row in self._rows]
        totals = self.totals
        if totals is not None:
            lines.append(self._format_row(totals))

        widths = [
            max([width, len(header)] + [len(line[index]) for line in lines])
            for index, (header, width) in enumerate(zip(REPORT_COLUMNS, _COLUMN_WIDTHS))
        ]
        table_width = sum(widths) + len(widths) - 1

        output = [
            '=' * table_width,
            f"{caption:^{table_width}}",
            '=' * table_width,
            self._format_line(REPORT_COLUMNS, widths),
            '-' * table_width,
        ]
        output.extend(self._format_line(line, widths) for line in lines[:len(self._rows)])

        if totals is not None:
            output.append('-' * table_width)
            output.append(self._format_line(lines[-1], widths))

        return '\n'.join(output)

    def print(self, caption: str) -> None:
        print("\n" + self.render(caption))

    def to_dataframe(self) -> pd.DataFrame:
        """Return the rows and the totals row as a DataFrame with the report columns."""
        data = []

        for row in self._rows:
            data.append({
                'Date': pd.to_datetime(row.date),
                'Currency': row.currency,
                'Foreign Amount': float(row.foreign_amount.amount),
                'Exchange Rate': float(row.currency_rate),
                'Domestic Amount': float(row.amount.amount),
                'Tax Owed': float(row.tax_to_pay.amount),
                'Real Income': float(row.income.amount),
            })

        totals = self.totals
        if totals is not None:
            data.append({
                'Date': pd.NaT,
                'Currency': None,
                'Foreign Amount': self._format_cash(totals.foreign_amount),
                'Exchange Rate': None,
                'Domestic Amount': float(totals.amount.amount),
                'Tax Owed': float(totals.tax_to_pay.amount),
                'Real Income': float(totals.income.amount),
            })

        return pd.DataFrame(data, columns=REPORT_COLUMNS)
