"""CSV exports of capital gain items: Form 8949, TurboTax and TaxAct layouts."""

import csv
import io
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Callable

from coinbasis.domain.enums import ExportFormat
from coinbasis.domain.models.tax import UNKNOWN_ACQUISITION_DATE, CapitalGainItem

VARIOUS = "VARIOUS"


def format_date(value: datetime) -> str:
    if value == UNKNOWN_ACQUISITION_DATE:
        return VARIOUS
    return value.strftime("%m/%d/%Y")


def whole_dollars(value: Decimal) -> int:
    return int(value.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def _form_8949_row(item: CapitalGainItem, tax_year: int) -> list:
    return [
        item.description,
        format_date(item.date_acquired),
        format_date(item.date_sold),
        whole_dollars(item.proceeds),
        whole_dollars(item.cost_basis),
        "",
        "",
        whole_dollars(item.gain_or_loss),
        "Long" if item.is_long_term else "Short",
        tax_year,
    ]


def _turbotax_row(item: CapitalGainItem, tax_year: int) -> list:
    return [
        item.description,
        format_date(item.date_acquired),
        format_date(item.date_sold),
        whole_dollars(item.proceeds),
        whole_dollars(item.cost_basis),
        whole_dollars(item.gain_or_loss),
        "Long-term" if item.is_long_term else "Short-term",
    ]


def _taxact_row(item: CapitalGainItem, tax_year: int) -> list:
    return [
        item.description,
        format_date(item.date_acquired),
        format_date(item.date_sold),
        whole_dollars(item.proceeds),
        whole_dollars(item.cost_basis),
        whole_dollars(item.gain_or_loss),
        "L" if item.is_long_term else "S",
    ]


# format -> (headers, row builder)
CSV_LAYOUTS: dict[ExportFormat, tuple[list[str], Callable[[CapitalGainItem, int], list]]] = {
    ExportFormat.FORM_8949: (
        ["Description", "Date Acquired", "Date Sold", "Proceeds", "Cost Basis",
         "Adjustment Code", "Adjustment Amount", "Gain or Loss", "Term", "Tax Year"],
        _form_8949_row,
    ),
    ExportFormat.TURBOTAX: (
        ["Description of Property", "Date Acquired", "Date Sold", "Sales Price",
         "Cost or Basis", "Gain or Loss", "Short or Long Term"],
        _turbotax_row,
    ),
    ExportFormat.TAXACT: (
        ["Property Description", "Acquired", "Sold", "Proceeds", "Cost", "Gain/Loss", "Holding Period"],
        _taxact_row,
    ),
}


def write_csv(items: list[CapitalGainItem], tax_year: int, fmt: ExportFormat = ExportFormat.FORM_8949) -> str:
    """Render items in one of the CSV layouts. Raises KeyError for non-CSV formats."""
    headers, build_row = CSV_LAYOUTS[fmt]
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(headers)
    for item in items:
        writer.writerow(build_row(item, tax_year))
    return buf.getvalue()
