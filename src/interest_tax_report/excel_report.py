"""
Excel report generator for interest income calculations.
Writes the interest report table, including its totals row, to an Excel workbook.
"""
import pandas as pd

from interest_tax_report.constants import (
    EXCEL_COLUMN_WIDTH_MEDIUM, EXCEL_COLUMN_WIDTH_NARROW, EXCEL_COLUMN_WIDTH_WIDE, EXCEL_SHEET_NAME
)
from interest_tax_report.exceptions import ReportGenerationError
from interest_tax_report.report import InterestReportTable


class ExcelReportGenerator:
    """Create an Excel workbook with the interest income report."""

    def __init__(self, table: InterestReportTable, caption: str):
        """Store the report table to export and its caption."""
        self.table = table
        self.caption = caption

    def generate_report(self, output_path: str) -> None:
        """Write an Excel file with the caption followed by the report table."""
        if self.table.is_empty():
            raise ReportGenerationError("There is no interest income to export")

        df = self.table.to_dataframe()

        with pd.ExcelWriter(output_path, engine='xlsxwriter') as writer:
            workbook = writer.book
            worksheet = workbook.add_worksheet(EXCEL_SHEET_NAME)

            title_format = workbook.add_format({
                'bold': True,
                'font_size': 12,
                'bg_color': '#4F81BD',
                'font_color': 'white',
                'align': 'center',
                'border': 1
            })

            header_format = workbook.add_format({
                'bold': True,
                'bg_color': '#D3D3D3',
                'border': 1
            })

            cell_format = workbook.add_format({
                'border': 1
            })

            totals_format = workbook.add_format({
                'bold': True,
                'border': 1
            })

            amount_formats = {}

            def amount_format(currency, bold=False):
                """Number format showing the display precision of ``currency``, one per precision."""
                precision = self.table.precision_lookup(currency)
                if (precision, bold) not in amount_formats:
                    amount_formats[(precision, bold)] = workbook.add_format({
                        'bold': bold,
                        'num_format': '0.' + '0' * precision if precision else '0',
                        'border': 1
                    })
                return amount_formats[(precision, bold)]

            number_format_4d = workbook.add_format({
                'num_format': '0.0000',
                'border': 1
            })

            date_format = workbook.add_format({
                'num_format': 'dd.mm.yyyy',
                'border': 1,
                'align': 'center'
            })

            worksheet.merge_range(0, 0, 0, len(df.columns) - 1, self.caption, title_format)

            for col_num, value in enumerate(df.columns.values):
                worksheet.write(1, col_num, value, header_format)

            domestic_currency = self.table.totals.amount.currency
            domestic_format = amount_format(domestic_currency)
            totals_number_format = amount_format(domestic_currency, bold=True)

            totals_row = len(df) - 1
            for index, (_, row) in enumerate(df.iterrows()):
                excel_row = index + 2

                if index == totals_row:
                    worksheet.write_blank(excel_row, 0, None, totals_format)
                    worksheet.write_blank(excel_row, 1, None, totals_format)
                    worksheet.write(excel_row, 2, row['Foreign Amount'], totals_format)
                    worksheet.write_blank(excel_row, 3, None, totals_format)
                    worksheet.write(excel_row, 4, row['Domestic Amount'], totals_number_format)
                    worksheet.write(excel_row, 5, row['Tax Owed'], totals_number_format)
                    worksheet.write(excel_row, 6, row['Real Income'], totals_number_format)
                    continue

                worksheet.write_datetime(excel_row, 0, row['Date'].to_pydatetime(), date_format)
                worksheet.write(excel_row, 1, row['Currency'], cell_format)
                worksheet.write(excel_row, 2, row['Foreign Amount'], amount_format(row['Currency']))
                worksheet.write(excel_row, 3, row['Exchange Rate'], number_format_4d)
                worksheet.write(excel_row, 4, row['Domestic Amount'], domestic_format)
                worksheet.write(excel_row, 5, row['Tax Owed'], domestic_format)
                worksheet.write(excel_row, 6, row['Real Income'], domestic_format)

            worksheet.set_column('A:B', EXCEL_COLUMN_WIDTH_NARROW)  # Date and Currency
            worksheet.set_column('C:C', EXCEL_COLUMN_WIDTH_WIDE)  # Foreign Amount
            worksheet.set_column('D:G', EXCEL_COLUMN_WIDTH_MEDIUM)  # Rate and domestic amounts


def generate_excel_report(table: InterestReportTable, caption: str, output_path: str):
    """Generate an Excel report for ``table`` and save it to ``output_path``."""
    generator = ExcelReportGenerator(table, caption)
    generator.generate_report(output_path)
