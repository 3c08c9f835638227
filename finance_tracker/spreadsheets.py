"""Excel serialisation of export documents and module tables.

Workbooks are written with pandas through the openpyxl engine. Module sheets
keep raw numbers so the spreadsheet stays sortable; only the Summary sheet
carries formatted currency strings. Any failure while loading the engine or
writing the file is logged and reported as ``None`` instead of raising.
"""
from __future__ import annotations

import io
import logging
from datetime import datetime, timezone
from typing import Any, Iterable, Mapping, Optional, Sequence

import pandas as pd

from .currency import format_currency
from .modules import MODULE_IDS, SheetColumn, get_module, resolve_modules

logger = logging.getLogger(__name__)

SUMMARY_SHEET = "Summary"

_SUMMARY_TOTALS = (
    ("Total Sales", "totalSales"),
    ("Total Expenses", "totalExpenses"),
    ("Total Profit", "totalProfit"),
    ("Outstanding Liabilities", "outstandingLiabilities"),
    ("Business in Hand", "businessInHandValue"),
    ("Total Salaries", "totalSalaries"),
    ("Paid Salaries", "paidSalaries"),
    ("Pending Salaries", "pendingSalaries"),
    ("Total Inflows", "totalInflows"),
    ("Total Outflows", "totalOutflows"),
    ("Net Cash Flow", "netCashflow"),
)


def export_timestamp(moment: Optional[datetime] = None) -> str:
    """Return a UTC ISO timestamp that is safe to embed in a filename."""

    moment = (moment or datetime.now(timezone.utc)).astimezone(timezone.utc)
    iso = moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")
    return iso.replace(":", "-").replace(".", "-")


def export_filename(context: str, moment: Optional[datetime] = None) -> str:
    return f"{context}-export-{export_timestamp(moment)}.xlsx"


def module_filename(module_id: str, moment: Optional[datetime] = None) -> str:
    return f"{get_module(module_id).file_slug}-data-{export_timestamp(moment)}.xlsx"


def table_rows(columns: Sequence[SheetColumn], rows: Iterable[Mapping[str, Any]]) -> list[list[Any]]:
    """Return a header row followed by one value row per record."""

    table = [[column.header for column in columns]]
    table.extend([column.value(row) for column in columns] for row in rows)
    return table


def summary_rows(document: Mapping[str, Any]) -> list[list[Any]]:
    summary = document["summary"]
    totals = document["totals"]
    currency = summary.get("currency", "PKR")
    date_range = summary.get("dateRange")
    if date_range:
        range_text = f"{date_range['startDate']} to {date_range['endDate']}"
    else:
        range_text = "All Data"

    rows: list[list[Any]] = [
        ["Finance Tracker Export Summary"],
        ["Export Date", summary.get("exportDate", "")],
        ["Currency", currency],
        ["Date Range", range_text],
        [""],
        ["Financial Totals"],
    ]
    rows.extend([label, format_currency(totals.get(key), currency)] for label, key in _SUMMARY_TOTALS)
    return rows


def build_export_workbook(
    document: Mapping[str, Any],
    modules: Optional[Iterable[str]] = None,
) -> Optional[bytes]:
    """Serialise an export document: a Summary sheet plus one sheet per module."""

    included = resolve_modules(modules)
    sheets = [(SUMMARY_SHEET, summary_rows(document))]
    for module_id in MODULE_IDS:
        if module_id not in included:
            continue
        descriptor = get_module(module_id)
        sheets.append(
            (descriptor.sheet_name, table_rows(descriptor.export_columns, document["data"][module_id]))
        )
    return write_workbook(sheets)


def build_module_workbook(module_id: str, documents: Iterable[Mapping[str, Any]]) -> Optional[bytes]:
    """Serialise the stored records of one module into a single-sheet workbook."""

    descriptor = get_module(module_id)
    sheet_name = descriptor.table_sheet_name or descriptor.sheet_name
    return write_workbook([(sheet_name, table_rows(descriptor.table_columns, documents))])


def write_workbook(sheets: Sequence[tuple[str, list[list[Any]]]]) -> Optional[bytes]:
    """Write ``(sheet name, rows)`` pairs into an in-memory ``.xlsx`` file.

    Rows are written verbatim: no pandas header or index is added, so the first
    row of each sheet is whatever the caller put first.
    """

    buffer = io.BytesIO()
    try:
        with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
            for sheet_name, rows in sheets:
                pd.DataFrame(rows).to_excel(writer, sheet_name=sheet_name, header=False, index=False)
    except ImportError:
        logger.error("Excel engine could not be loaded; no workbook produced", exc_info=True)
        return None
    except Exception:
        logger.exception("Workbook generation failed")
        return None
    return buffer.getvalue()
