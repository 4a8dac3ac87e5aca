"""Tests for CSV exports of capital gain items."""

import csv
import io
from datetime import datetime
from decimal import Decimal

import pytest

from coinbasis.domain.enums import ExportFormat
from coinbasis.domain.models.tax import UNKNOWN_ACQUISITION_DATE, CapitalGainItem
from coinbasis.report.csv_writer import format_date, whole_dollars, write_csv


def _item(**overrides) -> CapitalGainItem:
    data = dict(
        description="0.50000000 BTC",
        asset="BTC",
        amount=Decimal("0.5"),
        date_acquired=datetime(2023, 1, 1),
        date_sold=datetime(2024, 2, 1),
        proceeds=Decimal("7500.49"),
        cost_basis=Decimal("5000.50"),
        gain_or_loss=Decimal("2499.99"),
        is_long_term=True,
    )
    data.update(overrides)
    return CapitalGainItem(**data)


def _rows(content: str) -> list[list[str]]:
    return list(csv.reader(io.StringIO(content)))


class TestHelpers:
    def test_format_date(self):
        assert format_date(datetime(2024, 2, 1, 15, 30)) == "02/01/2024"

    def test_unknown_acquisition_is_various(self):
        assert format_date(UNKNOWN_ACQUISITION_DATE) == "VARIOUS"

    def test_whole_dollars_rounds_half_up(self):
        assert whole_dollars(Decimal("10.5")) == 11
        assert whole_dollars(Decimal("10.49")) == 10
        assert whole_dollars(Decimal("-10.5")) == -11


class TestWriteCsv:
    def test_form_8949(self):
        rows = _rows(write_csv([_item()], 2024, ExportFormat.FORM_8949))

        assert rows[0][0] == "Description"
        assert len(rows[0]) == 10
        assert rows[1] == [
            "0.50000000 BTC", "01/01/2023", "02/01/2024", "7500", "5001", "", "", "2500", "Long", "2024",
        ]

    def test_turbotax(self):
        rows = _rows(write_csv([_item(is_long_term=False)], 2024, ExportFormat.TURBOTAX))
        assert rows[0][-1] == "Short or Long Term"
        assert rows[1][-1] == "Short-term"

    def test_taxact(self):
        rows = _rows(write_csv([_item()], 2024, ExportFormat.TAXACT))
        assert rows[0] == ["Property Description", "Acquired", "Sold", "Proceeds", "Cost", "Gain/Loss", "Holding Period"]
        assert rows[1][-1] == "L"

    def test_unknown_basis_row(self):
        item = _item(
            description="2.00000000 BTC (unknown cost basis)",
            date_acquired=UNKNOWN_ACQUISITION_DATE,
            cost_basis=Decimal(0),
        )
        rows = _rows(write_csv([item], 2024))
        assert rows[1][1] == "VARIOUS"
        assert rows[1][4] == "0"

    def test_description_with_comma_is_quoted(self):
        content = write_csv([_item(description="1 BTC, gift")], 2024)
        assert '"1 BTC, gift"' in content
        assert _rows(content)[1][0] == "1 BTC, gift"

    def test_header_only_when_empty(self):
        assert len(_rows(write_csv([], 2024))) == 1

    def test_xlsx_is_not_a_csv_layout(self):
        with pytest.raises(KeyError):
            write_csv([], 2024, ExportFormat.XLSX)
