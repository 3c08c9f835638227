"""Tests for FinanceService CRUD and aggregation wiring."""

import pytest

from finance_tracker.errors import RecordNotFoundError, RecordValidationError, UnknownModuleError
from finance_tracker.models import DateRange


def _sale(**overrides):
    payload = {
        "date": "2025-01-15",
        "description": "Consulting",
        "cost": 1000,
        "sellingPrice": 2000,
        "expenses": 200,
    }
    payload.update(overrides)
    return payload


def test_create_sale_derives_profits(finance_service):
    record = finance_service.create_record("sales", _sale())

    assert record["grossProfit"] == 1000
    assert record["grossProfitMargin"] == 50
    assert record["netProfit"] == 800
    assert record["netProfitMargin"] == 40
    assert record["isSeedData"] is False
    assert record["_id"]
    assert finance_service.get_record("sales", record["_id"]) == record


def test_zero_selling_price_gives_zero_margins(finance_service):
    record = finance_service.create_record("sales", _sale(sellingPrice=0, cost=0, expenses=0))

    assert record["grossProfitMargin"] == 0
    assert record["netProfitMargin"] == 0


def test_update_sale_recomputes_profits(finance_service):
    record = finance_service.create_record("sales", _sale())

    updated = finance_service.update_record("sales", record["_id"], {"sellingPrice": 4000, "description": None})

    assert updated["description"] == "Consulting"
    assert updated["netProfit"] == 2800
    assert finance_service.get_record("sales", record["_id"])["sellingPrice"] == 4000


def test_liability_outstanding_defaults_to_original(finance_service):
    record = finance_service.create_record(
        "liabilities",
        {
            "lenderParty": "Bank",
            "liabilityType": "Loan",
            "startDate": "2025-01-01",
            "dueDate": "2026-01-01",
            "originalAmount": 5000,
        },
    )

    assert record["outstandingBalance"] == 5000


def test_schema_defaults_and_date_normalisation(finance_service):
    entry = finance_service.create_record(
        "cashflow",
        {"date": "2025-03-04T10:00:00", "type": "inflow", "description": "Deposit", "amount": 10},
    )
    need = finance_service.create_record("futureNeeds", {"month": "2025-04", "description": "Desk", "amount": 5})

    assert entry["category"] == "manual"
    assert entry["date"] == "2025-03-04"
    assert need["quantity"] == 1
    assert need["status"] == "one-time"


@pytest.mark.parametrize(
    "payload",
    [
        {"date": "2025-01-15", "description": "Missing price", "cost": 1},
        _sale(cost=-1),
        _sale(date="15/01/2025"),
        _sale(unexpected="field"),
        _sale(description="   "),
    ],
)
def test_invalid_payloads_are_rejected(finance_service, payload):
    with pytest.raises(RecordValidationError):
        finance_service.create_record("sales", payload)
    assert finance_service.count_records("sales") == 0


def test_invalid_enum_is_rejected(finance_service):
    with pytest.raises(RecordValidationError, match="status"):
        finance_service.create_record(
            "expenses",
            {"date": "2025-01-01", "category": "Rent", "description": "Office", "vendor": "X",
             "amount": 1, "status": "overdue"},
        )


def test_missing_and_unknown_records(finance_service):
    with pytest.raises(RecordNotFoundError):
        finance_service.get_record("sales", "missing")
    with pytest.raises(RecordNotFoundError):
        finance_service.update_record("sales", "missing", {"cost": 1})
    with pytest.raises(RecordNotFoundError):
        finance_service.delete_record("sales", "missing")
    with pytest.raises(UnknownModuleError):
        finance_service.list_records("payroll")


def test_list_is_newest_first_and_delete(finance_service):
    first = finance_service.create_record("sales", _sale(description="First"))
    second = finance_service.create_record("sales", _sale(description="Second"))

    assert [row["_id"] for row in finance_service.list_records("sales")] == [second["_id"], first["_id"]]

    finance_service.delete_record("sales", first["_id"])
    assert finance_service.count_records("sales") == 1


def test_module_summary_and_categories(finance_service):
    for category, status, day in (("Rent", "paid", "01"), ("Ads", "unpaid", "15"), ("Rent", "unpaid", "20")):
        finance_service.create_record(
            "expenses",
            {"date": f"2025-01-{day}", "category": category, "description": "x", "vendor": "v",
             "amount": 10, "status": status},
        )

    summary = finance_service.module_summary("expenses", DateRange(start_date="2025-01-10"))

    assert summary == {"expenseCount": 2, "totalExpenses": 20, "paidExpenses": 0, "unpaidExpenses": 20}
    assert finance_service.expense_categories() == ["Ads", "Rent"]


def test_export_data_reads_only_selected_modules(finance_service):
    finance_service.create_record("sales", _sale())

    document = finance_service.export_data(modules=["expenses"])

    assert document["data"]["sales"] == []
    assert document["totals"]["totalSales"] == 0
    assert document["summary"]["currency"] == "PKR"


def test_export_workbook_filename(finance_service):
    finance_service.create_record("sales", _sale())

    filename, content = finance_service.export_workbook()

    assert filename.startswith("finance-tracker-export-")
    assert filename.endswith(".xlsx")
    assert content[:2] == b"PK"

    filename, _ = finance_service.module_workbook("bankPdc")
    assert filename.startswith("bank-pdc-data-")
