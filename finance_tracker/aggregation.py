"""Read-side aggregations: export document, module summaries and dashboard.

All functions here are pure. They receive the module documents already read
from the repository (``{module_id: [document, ...]}``) and never touch the
store, so every call recomputes from whatever the caller loaded.
"""
from __future__ import annotations

from datetime import date
from typing import Any, Callable, Iterable, Mapping, Optional, Sequence

import pandas as pd

from .currency import safe_amount
from .models import DateRange, ExportTotals
from .modules import MODULE_IDS, MODULES, get_module, resolve_modules

Document = Mapping[str, Any]
RecordSets = Mapping[str, Sequence[Document]]


def filter_by_date(
    rows: Iterable[Document],
    date_field: str,
    date_range: Optional[DateRange],
) -> list[Document]:
    """Keep the rows whose ``date_field`` lies inside ``date_range``."""

    if date_range is None or date_range.is_unbounded:
        return list(rows)
    return [row for row in rows if date_range.contains(row.get(date_field))]


def _sum(
    rows: Iterable[Document],
    field: str,
    predicate: Optional[Callable[[Document], bool]] = None,
) -> float:
    return sum(
        (safe_amount(row.get(field)) for row in rows if predicate is None or predicate(row)),
        0.0,
    )


# ---------------------------------------------------------------------------
# Cross-module export
# ---------------------------------------------------------------------------

def compute_export_totals(rows: RecordSets) -> ExportTotals:
    """Sum the cross-module totals over already filtered module rows."""

    sales = rows.get("sales", ())
    salaries = rows.get("salaries", ())
    cashflow = rows.get("cashflow", ())
    liabilities = rows.get("liabilities", ())
    return ExportTotals(
        total_sales=_sum(sales, "sellingPrice"),
        total_expenses=_sum(rows.get("expenses", ()), "amount"),
        total_liabilities=_sum(liabilities, "originalAmount"),
        outstanding_liabilities=_sum(liabilities, "outstandingBalance"),
        total_salaries=_sum(salaries, "netSalary"),
        paid_salaries=_sum(salaries, "netSalary", lambda row: row.get("paymentStatus") == "paid"),
        total_inflows=_sum(cashflow, "amount", lambda row: row.get("type") == "inflow"),
        total_outflows=_sum(cashflow, "amount", lambda row: row.get("type") == "outflow"),
        total_profit=_sum(sales, "netProfit"),
        business_in_hand_value=_sum(
            rows.get("businessInHand", ()),
            "amount",
            lambda row: row.get("status") != "received",
        ),
    )


def build_export_document(
    records: RecordSets,
    *,
    date_range: Optional[DateRange] = None,
    modules: Optional[Iterable[str]] = None,
    currency: str = "PKR",
    export_date: Optional[date] = None,
) -> dict[str, Any]:
    """Join the module collections into a single export document.

    Only the periodic modules (sales, expenses, salaries by month, cash flow)
    honour ``date_range``; liabilities, bank PDCs, business in hand and future
    needs are always exported in full. Excluded modules produce empty lists
    and contribute nothing to the totals.
    """

    included = resolve_modules(modules)
    selected: dict[str, list[Document]] = {}
    for module_id in MODULE_IDS:
        descriptor = MODULES[module_id]
        module_rows = list(records.get(module_id, ())) if module_id in included else []
        if descriptor.export_filtered:
            module_rows = filter_by_date(module_rows, descriptor.date_field, date_range)
        selected[module_id] = module_rows

    totals = compute_export_totals(selected)
    return {
        "summary": {
            "exportDate": (export_date or date.today()).isoformat(),
            "dateRange": date_range.to_dict() if date_range is not None else None,
            "currency": currency,
        },
        "data": {
            module_id: [MODULES[module_id].shape_export(row) for row in selected[module_id]]
            for module_id in MODULE_IDS
        },
        "totals": totals.to_dict(),
    }


# ---------------------------------------------------------------------------
# Per-module summaries
# ---------------------------------------------------------------------------

def summarize_module(
    module_id: str,
    rows: Iterable[Document],
    date_range: Optional[DateRange] = None,
) -> dict[str, Any]:
    """Return the counts and sums of one module, optionally date filtered."""

    descriptor = get_module(module_id)
    spec = descriptor.summary
    module_rows = filter_by_date(rows, descriptor.date_field, date_range)

    summary: dict[str, Any] = {spec.count_key: len(module_rows)}
    for sum_spec in spec.sums:
        summary[sum_spec.key] = sum(
            (sum_spec.amount(row) for row in module_rows if sum_spec.matches(row)),
            0.0,
        )
    for key, minuend, subtrahend in spec.differences:
        summary[key] = summary[minuend] - summary[subtrahend]
    for key, field in spec.averages:
        values = [safe_amount(row.get(field)) for row in module_rows]
        summary[key] = sum(values) / len(values) if values else 0.0
    return summary


def expense_categories(rows: Iterable[Document]) -> list[str]:
    return sorted({row.get("category") for row in rows if row.get("category")})


# ---------------------------------------------------------------------------
# Dashboard
# ---------------------------------------------------------------------------

def _month_of(value: Any) -> str:
    return str(value or "")[:7]


def _cashflow_trend(rows: Sequence[Document]) -> list[dict[str, Any]]:
    frame = pd.DataFrame(
        [
            (
                _month_of(row.get("date")),
                safe_amount(row.get("amount")) if row.get("type") == "inflow" else 0.0,
                safe_amount(row.get("amount")) if row.get("type") == "outflow" else 0.0,
            )
            for row in rows
        ],
        columns=["month", "inflows", "outflows"],
    )
    grouped = frame.groupby("month", sort=True)[["inflows", "outflows"]].sum()
    return [
        {
            "month": month,
            "inflows": float(values["inflows"]),
            "outflows": float(values["outflows"]),
            "netCashflow": float(values["inflows"] - values["outflows"]),
        }
        for month, values in grouped.iterrows()
    ]


def _expenses_by_category(rows: Sequence[Document]) -> list[dict[str, Any]]:
    frame = pd.DataFrame(
        [(row.get("category") or "Uncategorized", safe_amount(row.get("amount"))) for row in rows],
        columns=["category", "amount"],
    )
    grouped = frame.groupby("category")["amount"].sum().sort_values(ascending=False, kind="stable")
    return [{"category": category, "amount": float(amount)} for category, amount in grouped.items()]


def _sales_trend(rows: Sequence[Document]) -> list[dict[str, Any]]:
    frame = pd.DataFrame(
        [
            (
                _month_of(row.get("date")),
                safe_amount(row.get("sellingPrice")),
                safe_amount(row.get("netProfit")),
            )
            for row in rows
        ],
        columns=["month", "sales", "profit"],
    )
    grouped = frame.groupby("month", sort=True)[["sales", "profit"]].sum()
    return [
        {"month": month, "sales": float(values["sales"]), "profit": float(values["profit"])}
        for month, values in grouped.iterrows()
    ]


def _liabilities_by_due_date(rows: Sequence[Document]) -> list[dict[str, Any]]:
    frame = pd.DataFrame(
        [(_month_of(row.get("dueDate")), safe_amount(row.get("outstandingBalance"))) for row in rows],
        columns=["month", "amount"],
    )
    grouped = frame.groupby("month", sort=True)["amount"].sum()
    return [{"month": month, "amount": float(amount)} for month, amount in grouped.items()]


_ACTIVITY_SOURCES = (
    ("sales", "Sale", "sellingPrice"),
    ("expenses", "Expense", "amount"),
    ("cashflow", "Cash Flow", "amount"),
)


def _recent_activity(records: RecordSets, limit: int) -> list[dict[str, Any]]:
    activity = []
    for module_id, label, amount_field in _ACTIVITY_SOURCES:
        for row in records.get(module_id, ()):
            activity.append(
                {
                    "type": label,
                    "module": module_id,
                    "description": row.get("description", ""),
                    "amount": safe_amount(row.get(amount_field)),
                    "date": row.get("date", ""),
                    "_creationTime": row.get("_creationTime", 0),
                }
            )
    activity.sort(key=lambda item: item["_creationTime"], reverse=True)
    return [
        {key: value for key, value in item.items() if key != "_creationTime"}
        for item in activity[:limit]
    ]


def build_dashboard(records: RecordSets, recent_limit: int = 10) -> dict[str, Any]:
    """Aggregate the dashboard cards, chart series and recent activity."""

    totals = compute_export_totals(records)
    summary = {
        "totalSales": totals.total_sales,
        "totalExpenses": totals.total_expenses,
        "outstandingLiabilities": totals.outstanding_liabilities,
        "totalInflows": totals.total_inflows,
        "totalOutflows": totals.total_outflows,
        "netCashflow": totals.net_cashflow,
        "totalProfit": totals.total_profit,
        "salariesPending": totals.pending_salaries,
        "businessInHandValue": totals.business_in_hand_value,
        "pendingPdcAmount": _sum(
            records.get("bankPdc", ()),
            "amount",
            lambda row: row.get("status") == "pending",
        ),
    }
    return {
        "summary": summary,
        "charts": {
            "cashflowTrend": _cashflow_trend(records.get("cashflow", ())),
            "expensesByCategory": _expenses_by_category(records.get("expenses", ())),
            "salesTrend": _sales_trend(records.get("sales", ())),
            "liabilitiesByDueDate": _liabilities_by_due_date(records.get("liabilities", ())),
        },
        "recentActivity": _recent_activity(records, recent_limit),
    }
