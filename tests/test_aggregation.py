"""Tests for the export document, module summaries and dashboard."""

from datetime import date

import pytest

from finance_tracker.aggregation import (
    build_dashboard,
    build_export_document,
    expense_categories,
    filter_by_date,
    summarize_module,
)
from finance_tracker.errors import UnknownModuleError
from finance_tracker.models import DateRange
from finance_tracker.modules import MODULE_IDS


def _records():
    return {
        "sales": [
            {"date": "2025-01-15", "description": "License", "cost": 100, "sellingPrice": 300,
             "expenses": 50, "grossProfit": 200, "grossProfitMargin": 66.666, "netProfit": 150,
             "netProfitMargin": 50.0, "_creationTime": 1},
            {"date": "2025-03-01", "description": "Support", "cost": 10, "sellingPrice": 20,
             "expenses": 0, "grossProfit": 10, "grossProfitMargin": 50.0, "netProfit": 10,
             "netProfitMargin": 50.0, "_creationTime": 5},
        ],
        "expenses": [
            {"date": "2025-01-20", "category": "Rent", "description": "Office", "vendor": "Landlord",
             "amount": 40, "status": "paid", "_creationTime": 2},
            {"date": "2025-02-20", "category": "Marketing", "description": "Ads", "vendor": "Google",
             "amount": 60, "status": "unpaid", "_creationTime": 3},
        ],
        "liabilities": [
            {"lenderParty": "Bank", "liabilityType": "Loan", "startDate": "2024-01-01",
             "dueDate": "2030-01-01", "originalAmount": 1000, "outstandingBalance": 700},
        ],
        "salaries": [
            {"employeeName": "A", "role": "Dev", "month": "2025-01", "netSalary": 100, "paymentStatus": "paid"},
            {"employeeName": "B", "role": "Dev", "month": "2025-01", "netSalary": 80, "paymentStatus": "pending"},
            {"employeeName": "C", "role": "Dev", "month": "2025-02", "netSalary": 30, "paymentStatus": "on-hold"},
        ],
        "cashflow": [
            {"date": "2025-01-10", "type": "inflow", "category": "manual", "description": "Receipt",
             "amount": 500, "_creationTime": 4},
            {"date": "2025-01-12", "type": "outflow", "category": "manual", "description": "Payment",
             "amount": 120, "_creationTime": 6},
        ],
        "bankPdc": [
            {"date": "2020-01-01", "bank": "HBL", "chequeNumber": "1", "code": "C-1", "supplier": "S",
             "description": "D", "amount": 90, "status": "pending"},
        ],
        "businessInHand": [
            {"type": "po_in_hand", "description": "PO 1", "amount": 400, "expectedDate": "2025-05-01",
             "status": "confirmed"},
            {"type": "pending_invoice", "description": "Invoice", "amount": 100, "expectedDate": "2025-05-01",
             "status": "received"},
        ],
        "futureNeeds": [
            {"month": "2019-01", "description": "Servers", "quantity": 2, "amount": 50, "status": "recurring"},
        ],
    }


def test_filter_by_date_is_inclusive_and_open_ended():
    rows = [{"date": "2025-01-01"}, {"date": "2025-01-31"}, {"date": "2025-02-01"}, {}]
    assert filter_by_date(rows, "date", DateRange("2025-01-01", "2025-01-31")) == rows[:2]
    assert filter_by_date(rows, "date", DateRange(start_date="2025-01-31")) == rows[1:3]
    assert filter_by_date(rows, "date", DateRange()) == rows
    assert filter_by_date(rows, "date", None) == rows


def test_export_document_shape():
    document = build_export_document(_records(), export_date=date(2025, 6, 1))

    assert document["summary"] == {"exportDate": "2025-06-01", "dateRange": None, "currency": "PKR"}
    assert set(document["data"]) == set(MODULE_IDS)
    liability = document["data"]["liabilities"][0]
    assert liability["description"] == "Bank"
    assert liability["creditor"] == "Bank"
    assert liability["status"] == "active"
    salary = document["data"]["salaries"][0]
    assert salary["basicSalary"] == salary["netSalary"] == 100
    assert salary["allowances"] == salary["deductions"] == 0
    assert salary["paymentDate"] == ""
    assert document["data"]["futureNeeds"][0]["amount"] == 100
    assert document["data"]["futureNeeds"][0]["type"] == "recurring"
    pdc = document["data"]["bankPdc"][0]
    assert pdc == {"bankName": "HBL", "supplierCode": "C-1", "amount": 90, "status": "pending", "dueDate": "2020-01-01"}
    po, invoice = document["data"]["businessInHand"]
    assert (po["poNumber"], po["supplier"]) == ("PO 1", "")
    assert (invoice["poNumber"], invoice["supplier"]) == ("", "Invoice")


def test_export_totals():
    totals = build_export_document(_records())["totals"]

    assert totals["totalSales"] == 320
    assert totals["totalExpenses"] == 100
    assert totals["totalLiabilities"] == 1000
    assert totals["outstandingLiabilities"] == 700
    assert totals["totalProfit"] == 160
    assert totals["businessInHandValue"] == 400
    assert totals["netCashflow"] == totals["totalInflows"] - totals["totalOutflows"] == 380


def test_pending_salaries_includes_any_status_other_than_paid():
    totals = build_export_document(_records())["totals"]

    assert totals["totalSalaries"] == 210
    assert totals["paidSalaries"] == 100
    assert totals["pendingSalaries"] == 110


def test_date_range_only_filters_periodic_modules():
    document = build_export_document(_records(), date_range=DateRange("2025-01", "2025-01-31"))

    assert [row["description"] for row in document["data"]["sales"]] == ["License"]
    assert [row["description"] for row in document["data"]["expenses"]] == ["Office"]
    assert [row["employeeName"] for row in document["data"]["salaries"]] == ["A", "B"]
    assert len(document["data"]["cashflow"]) == 2
    # Point-in-time modules are exported whole, even outside the range.
    assert len(document["data"]["liabilities"]) == 1
    assert len(document["data"]["bankPdc"]) == 1
    assert len(document["data"]["businessInHand"]) == 2
    assert len(document["data"]["futureNeeds"]) == 1
    assert document["summary"]["dateRange"] == {"startDate": "2025-01", "endDate": "2025-01-31"}


def test_salary_months_compare_as_plain_strings():
    document = build_export_document(_records(), date_range=DateRange("2025-01-01", "2025-02-28"))

    # "2025-01" sorts before "2025-01-01", so January salaries fall outside.
    assert [row["employeeName"] for row in document["data"]["salaries"]] == ["C"]


def test_module_selection_excludes_other_modules():
    document = build_export_document(_records(), modules=["expenses"])

    assert len(document["data"]["expenses"]) == 2
    for module_id in MODULE_IDS:
        if module_id != "expenses":
            assert document["data"][module_id] == []
    assert document["totals"]["totalSales"] == 0
    assert document["totals"]["totalExpenses"] == 100


def test_unknown_module_is_rejected():
    with pytest.raises(UnknownModuleError):
        build_export_document(_records(), modules=["payroll"])


def test_export_is_idempotent():
    records = _records()
    first = build_export_document(records, export_date=date(2025, 6, 1))
    second = build_export_document(records, export_date=date(2025, 6, 1))
    assert first == second


def test_missing_amounts_count_as_zero():
    records = {"expenses": [{"date": "2025-01-01", "amount": None}, {"date": "2025-01-02", "amount": float("nan")}]}
    assert build_export_document(records)["totals"]["totalExpenses"] == 0


def test_summaries():
    records = _records()

    expenses = summarize_module("expenses", records["expenses"])
    assert expenses == {"expenseCount": 2, "totalExpenses": 100, "paidExpenses": 40, "unpaidExpenses": 60}

    sales = summarize_module("sales", records["sales"])
    assert sales["salesCount"] == 2
    assert sales["totalNetProfit"] == 160
    assert sales["averageNetProfitMargin"] == 50.0

    bih = summarize_module("businessInHand", records["businessInHand"])
    assert bih["totalCount"] == 2
    assert (bih["pendingAmount"], bih["confirmedAmount"], bih["receivedAmount"]) == (0, 400, 100)

    needs = summarize_module("futureNeeds", records["futureNeeds"])
    assert needs["totalAmount"] == needs["recurringAmount"] == 100

    cashflow = summarize_module("cashflow", records["cashflow"], DateRange(end_date="2025-01-10"))
    assert cashflow == {"entryCount": 1, "totalInflows": 500, "totalOutflows": 0, "netCashflow": 500}


def test_expense_categories_are_sorted_and_distinct():
    rows = [{"category": "Rent"}, {"category": "Ads"}, {"category": "Rent"}, {}]
    assert expense_categories(rows) == ["Ads", "Rent"]


def test_dashboard():
    dashboard = build_dashboard(_records(), recent_limit=3)

    assert dashboard["summary"]["totalSales"] == 320
    assert dashboard["summary"]["salariesPending"] == 110
    assert dashboard["summary"]["pendingPdcAmount"] == 90
    assert dashboard["summary"]["totalInflows"] == 500
    assert dashboard["summary"]["totalOutflows"] == 120
    assert dashboard["summary"]["netCashflow"] == 380
    assert dashboard["charts"]["cashflowTrend"] == [
        {"month": "2025-01", "inflows": 500.0, "outflows": 120.0, "netCashflow": 380.0}
    ]
    assert dashboard["charts"]["expensesByCategory"][0] == {"category": "Marketing", "amount": 60.0}
    assert [point["month"] for point in dashboard["charts"]["salesTrend"]] == ["2025-01", "2025-03"]
    assert dashboard["charts"]["liabilitiesByDueDate"] == [{"month": "2030-01", "amount": 700.0}]
    assert [item["description"] for item in dashboard["recentActivity"]] == ["Payment", "Support", "Receipt"]
    assert [item["type"] for item in dashboard["recentActivity"]] == ["Cash Flow", "Sale", "Cash Flow"]


def test_dashboard_on_empty_store():
    dashboard = build_dashboard({})

    assert dashboard["summary"]["totalSales"] == 0
    assert dashboard["charts"]["cashflowTrend"] == []
    assert dashboard["recentActivity"] == []
