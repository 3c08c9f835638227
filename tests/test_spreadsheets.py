"""Tests for the Excel serializer."""

import io
from datetime import datetime, timezone

import pandas as pd

from finance_tracker import spreadsheets
from finance_tracker.aggregation import build_export_document
from finance_tracker.models import DateRange
from finance_tracker.modules import MODULES


def _read(content):
    return pd.read_excel(io.BytesIO(content), sheet_name=None, header=None, engine="openpyxl")


def _records():
    return {
        "sales": [
            {"date": "2025-01-15", "description": "License", "cost": 100, "sellingPrice": 300,
             "expenses": 50, "grossProfit": 200, "grossProfitMargin": 66.6666, "netProfit": 150,
             "netProfitMargin": 50.0},
        ],
        "expenses": [
            {"date": "2025-01-20", "category": "Rent", "description": "Office", "vendor": "Landlord",
             "amount": 1234.5, "status": "paid"},
        ],
    }


def test_filenames_replace_colons_and_dots():
    moment = datetime(2025, 3, 4, 5, 6, 7, 890000, tzinfo=timezone.utc)

    assert spreadsheets.export_timestamp(moment) == "2025-03-04T05-06-07-890Z"
    assert spreadsheets.export_filename("finance-tracker", moment) == "finance-tracker-export-2025-03-04T05-06-07-890Z.xlsx"
    assert spreadsheets.module_filename("cashflow", moment) == "cash-flow-data-2025-03-04T05-06-07-890Z.xlsx"


def test_export_workbook_sheets_and_headers():
    document = build_export_document(_records())

    sheets = _read(spreadsheets.build_export_workbook(document))

    assert list(sheets) == [
        "Summary", "Sales", "Expenses", "Liabilities", "Salaries",
        "Cash Flow", "Bank PDC", "Business In Hand", "Future Needs",
    ]
    for module_id, descriptor in MODULES.items():
        header = [column.header for column in descriptor.export_columns]
        assert list(sheets[descriptor.sheet_name].iloc[0]) == header

    sales = sheets["Sales"]
    assert list(sales.iloc[1])[:4] == ["2025-01-15", "License", 100, 300]
    assert sales.iloc[1, 5] == 66.67
    assert sheets["Expenses"].iloc[1, 2] == 1234.5


def test_summary_sheet_formats_totals():
    document = build_export_document(_records(), date_range=DateRange("2025-01-01", "2025-01-31"))

    summary = _read(spreadsheets.build_export_workbook(document, ["sales", "expenses"]))["Summary"]
    rows = {row[0]: row[1] for row in summary.itertuples(index=False) if isinstance(row[0], str)}

    assert summary.iloc[0, 0] == "Finance Tracker Export Summary"
    assert rows["Currency"] == "PKR"
    assert rows["Date Range"] == "2025-01-01 to 2025-01-31"
    assert rows["Total Sales"] == "₨ 300.00"
    assert rows["Total Expenses"] == "₨ 1,234.50"
    assert rows["Net Cash Flow"] == "₨ 0.00"


def test_summary_rows_without_range():
    rows = spreadsheets.summary_rows(build_export_document({}))

    assert ["Date Range", "All Data"] in rows


def test_export_workbook_only_includes_selected_modules():
    document = build_export_document(_records(), modules=["expenses"])

    sheets = _read(spreadsheets.build_export_workbook(document, ["expenses"]))

    assert list(sheets) == ["Summary", "Expenses"]


def test_module_workbook_uses_table_columns():
    documents = [
        {"type": "po_in_hand", "description": "PO 7", "amount": 10, "expectedDate": "2025-05-01", "status": "pending"},
    ]

    sheets = _read(spreadsheets.build_module_workbook("businessInHand", documents))

    assert list(sheets) == ["Business in Hand"]
    sheet = sheets["Business in Hand"]
    assert list(sheet.iloc[0]) == [column.header for column in MODULES["businessInHand"].table_columns]
    assert list(sheet.iloc[1]) == ["po_in_hand", "PO 7", 10, "2025-05-01", "pending", "PKR"]


def test_write_failure_returns_none(monkeypatch, caplog):
    def broken_writer(*args, **kwargs):
        raise RuntimeError("disk full")

    monkeypatch.setattr(spreadsheets.pd, "ExcelWriter", broken_writer)

    assert spreadsheets.write_workbook([("Sheet", [["a"]])]) is None
    assert "Workbook generation failed" in caplog.text


def test_missing_engine_returns_none(monkeypatch):
    def missing_engine(*args, **kwargs):
        raise ImportError("No module named 'openpyxl'")

    monkeypatch.setattr(spreadsheets.pd, "ExcelWriter", missing_engine)

    assert spreadsheets.build_module_workbook("sales", []) is None
