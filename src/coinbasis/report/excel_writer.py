"""ExcelWriter — capital gains workbook with openpyxl."""

from io import BytesIO

from openpyxl import Workbook
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter

from coinbasis.domain.models.tax import CapitalGainsResult
from coinbasis.report.csv_writer import format_date

SUMMARY_HEADERS = ["Metric", "Value (USD)"]
GAINS_HEADERS = [
    "Description", "Asset", "Amount", "Date Acquired", "Date Sold",
    "Proceeds (USD)", "Cost Basis (USD)", "Gain/Loss (USD)", "Term",
]
# 0-based column index -> number format
GAINS_NUMBER_FORMATS = {2: "#,##0.00000000", 5: "$#,##0.00", 6: "$#,##0.00", 7: "$#,##0.00"}

HEADER_FONT = Font(bold=True)


class ExcelWriter:
    """Writes a CapitalGainsResult to an in-memory Excel buffer."""

    def write_to_buffer(self, result: CapitalGainsResult, tax_year: int) -> BytesIO:
        wb = Workbook()

        ws = wb.active
        ws.title = "summary"
        _write_header(ws, SUMMARY_HEADERS)
        money = "$#,##0.00"
        summary_rows = [
            ("Tax Year", tax_year, None),
            ("Short-Term Gains", result.short_term_gains, money),
            ("Short-Term Losses", result.short_term_losses, money),
            ("Long-Term Gains", result.long_term_gains, money),
            ("Long-Term Losses", result.long_term_losses, money),
            ("Total Gains", result.total_gains, money),
            ("Total Losses", result.total_losses, money),
            ("Net Gain/Loss", result.net_gain_loss, money),
            ("Items", result.transactions_included, None),
        ]
        for row_idx, (metric, value, fmt) in enumerate(summary_rows, start=2):
            ws.cell(row=row_idx, column=1, value=metric)
            cell = ws.cell(row=row_idx, column=2, value=value)
            if fmt:
                cell.number_format = fmt
        _auto_fit_columns(ws)

        ws = wb.create_sheet(title="capital_gains")
        _write_header(ws, GAINS_HEADERS)
        for row_idx, item in enumerate(result.items, start=2):
            row = [
                item.description,
                item.asset,
                item.amount,
                format_date(item.date_acquired),
                format_date(item.date_sold),
                item.proceeds,
                item.cost_basis,
                item.gain_or_loss,
                "Long" if item.is_long_term else "Short",
            ]
            for col_idx, value in enumerate(row, start=1):
                cell = ws.cell(row=row_idx, column=col_idx, value=value)
                fmt = GAINS_NUMBER_FORMATS.get(col_idx - 1)
                if fmt:
                    cell.number_format = fmt
        _auto_fit_columns(ws)

        buf = BytesIO()
        wb.save(buf)
        buf.seek(0)
        return buf


def _write_header(ws, headers: list[str]) -> None:
    for col_idx, header in enumerate(headers, start=1):
        cell = ws.cell(row=1, column=col_idx, value=header)
        cell.font = HEADER_FONT


def _auto_fit_columns(ws) -> None:
    """Set column widths based on content (approximate)."""
    for col_cells in ws.columns:
        max_len = 0
        col_letter = get_column_letter(col_cells[0].column)
        for cell in col_cells:
            if cell.value is not None:
                max_len = max(max_len, len(str(cell.value)))
        ws.column_dimensions[col_letter].width = min(max_len + 3, 50)
