"""Registry describing the eight financial modules.

Every module shares the same CRUD, summary and export machinery. What differs
between them (validation schema, date field, export reshaping, spreadsheet
columns, summary sums, sample-data match fields) is captured by a
:class:`ModuleDescriptor`, so the generic code in :mod:`.services`,
:mod:`.aggregation`, :mod:`.spreadsheets` and :mod:`.seeding` never branches
on module names.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Mapping, Optional

from pydantic import BaseModel

from . import schemas
from .currency import safe_amount
from .errors import UnknownModuleError, unknown_module

Fields = Mapping[str, Any]


@dataclass(frozen=True, slots=True)
class SheetColumn:
    """One spreadsheet column: literal header plus the field it reads."""

    header: str
    field: str
    digits: Optional[int] = None
    default: Any = ""

    def value(self, row: Fields) -> Any:
        value = row.get(self.field)
        if value is None:
            return self.default
        if self.digits is not None:
            return round(safe_amount(value), self.digits)
        return value


@dataclass(frozen=True, slots=True)
class SumSpec:
    """A named sum over one numeric field.

    ``where`` keeps only rows whose field equals the value; ``exclude`` drops
    rows whose field equals the value. ``multiply_by`` scales each row by a
    second field (unit amount times quantity).
    """

    key: str
    field: str
    where: Optional[tuple[str, str]] = None
    exclude: Optional[tuple[str, str]] = None
    multiply_by: Optional[str] = None

    def matches(self, row: Fields) -> bool:
        if self.where is not None and row.get(self.where[0]) != self.where[1]:
            return False
        if self.exclude is not None and row.get(self.exclude[0]) == self.exclude[1]:
            return False
        return True

    def amount(self, row: Fields) -> float:
        value = safe_amount(row.get(self.field))
        if self.multiply_by is not None:
            value *= safe_amount(row.get(self.multiply_by))
        return value


@dataclass(frozen=True, slots=True)
class SummarySpec:
    count_key: str
    sums: tuple[SumSpec, ...]
    differences: tuple[tuple[str, str, str], ...] = ()
    averages: tuple[tuple[str, str], ...] = ()


@dataclass(frozen=True, slots=True)
class ModuleDescriptor:
    """Static description of a module collection.

    Attributes:
        id: Public identifier used by the API and the export document.
        table: SQLite table name.
        label: Human readable name.
        sheet_name: Sheet title in the all-module workbook.
        file_slug: Prefix of the per-module export filename.
        create_schema: Validation schema for ``create*``.
        update_schema: Validation schema for ``update*``.
        date_field: Field holding the record's date or month.
        export_filtered: Whether ``getExportData`` applies its date range to
            this module. Only the periodic modules are filtered.
        shape_export: Maps a stored record onto the export field names.
        export_columns: Columns of the module sheet in the all-module export,
            reading the reshaped export rows.
        table_columns: Columns of the per-module export, reading stored fields.
        summary: Sums returned by the per-module summary.
        sample_fields: Fields compared against the sample catalog literals.
        table_sheet_name: Sheet title of the per-module export when it differs
            from ``sheet_name``.
        derive: Hook computing stored fields derived at write time.
    """

    id: str
    table: str
    label: str
    sheet_name: str
    file_slug: str
    create_schema: type[BaseModel]
    update_schema: type[BaseModel]
    date_field: str
    export_filtered: bool
    shape_export: Callable[[Fields], dict[str, Any]]
    export_columns: tuple[SheetColumn, ...]
    table_columns: tuple[SheetColumn, ...]
    summary: SummarySpec
    sample_fields: tuple[str, ...] = ()
    table_sheet_name: Optional[str] = None
    derive: Optional[Callable[[dict[str, Any]], dict[str, Any]]] = field(default=None)


# ---------------------------------------------------------------------------
# Write-time derivations
# ---------------------------------------------------------------------------

def derive_sale_profits(fields: dict[str, Any]) -> dict[str, Any]:
    """Fill the stored profit figures of a sale from cost, price and expenses."""

    cost = safe_amount(fields.get("cost"))
    selling_price = safe_amount(fields.get("sellingPrice"))
    expenses = safe_amount(fields.get("expenses"))
    gross_profit = selling_price - cost
    net_profit = gross_profit - expenses
    derived = dict(fields)
    derived.update(
        {
            "expenses": expenses,
            "grossProfit": gross_profit,
            "grossProfitMargin": gross_profit / selling_price * 100 if selling_price else 0.0,
            "netProfit": net_profit,
            "netProfitMargin": net_profit / selling_price * 100 if selling_price else 0.0,
        }
    )
    return derived


def derive_liability_balance(fields: dict[str, Any]) -> dict[str, Any]:
    derived = dict(fields)
    if derived.get("outstandingBalance") is None:
        derived["outstandingBalance"] = safe_amount(derived.get("originalAmount"))
    return derived


# ---------------------------------------------------------------------------
# Export reshaping
# ---------------------------------------------------------------------------

def _shape_sale(row: Fields) -> dict[str, Any]:
    return {
        "date": row.get("date", ""),
        "description": row.get("description", ""),
        "cost": safe_amount(row.get("cost")),
        "sellingPrice": safe_amount(row.get("sellingPrice")),
        "grossProfit": safe_amount(row.get("grossProfit")),
        "grossProfitMargin": safe_amount(row.get("grossProfitMargin")),
        "expenses": safe_amount(row.get("expenses")),
        "netProfit": safe_amount(row.get("netProfit")),
        "netProfitMargin": safe_amount(row.get("netProfitMargin")),
    }


def _shape_expense(row: Fields) -> dict[str, Any]:
    return {
        "date": row.get("date", ""),
        "description": row.get("description", ""),
        "amount": safe_amount(row.get("amount")),
        "category": row.get("category", ""),
        "vendor": row.get("vendor", ""),
        "status": row.get("status", ""),
    }


def _shape_liability(row: Fields) -> dict[str, Any]:
    return {
        "description": row.get("description") or row.get("lenderParty", ""),
        "amount": safe_amount(row.get("originalAmount")),
        "outstandingBalance": safe_amount(row.get("outstandingBalance")),
        "dueDate": row.get("dueDate", ""),
        "creditor": row.get("lenderParty", ""),
        # No status is persisted for liabilities.
        "status": "active",
    }


def _shape_salary(row: Fields) -> dict[str, Any]:
    net_salary = safe_amount(row.get("netSalary"))
    return {
        "employeeName": row.get("employeeName", ""),
        "month": row.get("month", ""),
        "basicSalary": net_salary,
        "allowances": 0.0,
        "deductions": 0.0,
        "netSalary": net_salary,
        "paymentStatus": row.get("paymentStatus", ""),
        "paymentDate": row.get("paymentDate") or "",
    }


def _shape_cashflow(row: Fields) -> dict[str, Any]:
    return {
        "date": row.get("date", ""),
        "type": row.get("type", ""),
        "category": row.get("category", ""),
        "description": row.get("description", ""),
        "amount": safe_amount(row.get("amount")),
    }


def _shape_bank_pdc(row: Fields) -> dict[str, Any]:
    return {
        "bankName": row.get("bank", ""),
        "supplierCode": row.get("code", ""),
        "amount": safe_amount(row.get("amount")),
        "status": row.get("status", ""),
        "dueDate": row.get("date", ""),
    }


def _shape_business_in_hand(row: Fields) -> dict[str, Any]:
    description = row.get("description", "")
    kind = row.get("type")
    return {
        "poNumber": description if kind == "po_in_hand" else "",
        "supplier": description if kind == "pending_invoice" else "",
        "description": description,
        "amount": safe_amount(row.get("amount")),
        "status": row.get("status", ""),
        "expectedDate": row.get("expectedDate", ""),
    }


def _shape_future_need(row: Fields) -> dict[str, Any]:
    return {
        "description": row.get("description", ""),
        "category": "",
        "month": row.get("month", ""),
        "amount": safe_amount(row.get("amount")) * safe_amount(row.get("quantity")),
        "type": row.get("status", ""),
    }


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

SALES = ModuleDescriptor(
    id="sales",
    table="sales",
    label="Sales Data",
    sheet_name="Sales",
    file_slug="sales",
    create_schema=schemas.SaleCreate,
    update_schema=schemas.SaleUpdate,
    date_field="date",
    export_filtered=True,
    shape_export=_shape_sale,
    export_columns=(
        SheetColumn("Date", "date"),
        SheetColumn("Description", "description"),
        SheetColumn("Cost (PKR)", "cost"),
        SheetColumn("Selling Price (PKR)", "sellingPrice"),
        SheetColumn("Gross Profit (PKR)", "grossProfit"),
        SheetColumn("Gross Margin (%)", "grossProfitMargin", digits=2),
        SheetColumn("Expenses (PKR)", "expenses"),
        SheetColumn("Net Profit (PKR)", "netProfit"),
        SheetColumn("Net Margin (%)", "netProfitMargin", digits=2),
    ),
    table_columns=(
        SheetColumn("Date", "date"),
        SheetColumn("Description", "description"),
        SheetColumn("Cost (PKR)", "cost"),
        SheetColumn("Selling Price (PKR)", "sellingPrice"),
        SheetColumn("Gross Profit (PKR)", "grossProfit"),
        SheetColumn("Gross Margin (%)", "grossProfitMargin", digits=2),
        SheetColumn("Expenses (PKR)", "expenses"),
        SheetColumn("Net Profit (PKR)", "netProfit"),
        SheetColumn("Net Margin (%)", "netProfitMargin", digits=2),
    ),
    summary=SummarySpec(
        count_key="salesCount",
        sums=(
            SumSpec("totalSales", "sellingPrice"),
            SumSpec("totalCost", "cost"),
            SumSpec("totalGrossProfit", "grossProfit"),
            SumSpec("totalNetProfit", "netProfit"),
        ),
        averages=(("averageNetProfitMargin", "netProfitMargin"),),
    ),
    sample_fields=("description",),
    derive=derive_sale_profits,
)

EXPENSES = ModuleDescriptor(
    id="expenses",
    table="expenses",
    label="Expenses",
    sheet_name="Expenses",
    file_slug="expenses",
    create_schema=schemas.ExpenseCreate,
    update_schema=schemas.ExpenseUpdate,
    date_field="date",
    export_filtered=True,
    shape_export=_shape_expense,
    export_columns=(
        SheetColumn("Date", "date"),
        SheetColumn("Description", "description"),
        SheetColumn("Amount (PKR)", "amount"),
        SheetColumn("Category", "category"),
        SheetColumn("Vendor", "vendor"),
        SheetColumn("Status", "status"),
    ),
    table_columns=(
        SheetColumn("Date", "date"),
        SheetColumn("Category", "category"),
        SheetColumn("Description", "description"),
        SheetColumn("Vendor", "vendor"),
        SheetColumn("Amount (PKR)", "amount"),
        SheetColumn("Status", "status"),
    ),
    summary=SummarySpec(
        count_key="expenseCount",
        sums=(
            SumSpec("totalExpenses", "amount"),
            SumSpec("paidExpenses", "amount", where=("status", "paid")),
            SumSpec("unpaidExpenses", "amount", where=("status", "unpaid")),
        ),
    ),
    sample_fields=("description",),
)

LIABILITIES = ModuleDescriptor(
    id="liabilities",
    table="liabilities",
    label="Liabilities",
    sheet_name="Liabilities",
    file_slug="liabilities",
    create_schema=schemas.LiabilityCreate,
    update_schema=schemas.LiabilityUpdate,
    date_field="dueDate",
    export_filtered=False,
    shape_export=_shape_liability,
    export_columns=(
        SheetColumn("Description", "description"),
        SheetColumn("Original Amount (PKR)", "amount"),
        SheetColumn("Outstanding Balance", "outstandingBalance"),
        SheetColumn("Due Date", "dueDate"),
        SheetColumn("Creditor", "creditor"),
        SheetColumn("Status", "status"),
    ),
    table_columns=(
        SheetColumn("Lender/Party", "lenderParty"),
        SheetColumn("Type", "liabilityType"),
        SheetColumn("Start Date", "startDate"),
        SheetColumn("Due Date", "dueDate"),
        SheetColumn("Original Amount (PKR)", "originalAmount"),
        SheetColumn("Outstanding Balance (PKR)", "outstandingBalance"),
        SheetColumn("Description", "description"),
    ),
    summary=SummarySpec(
        count_key="liabilityCount",
        sums=(
            SumSpec("totalOriginalAmount", "originalAmount"),
            SumSpec("totalOutstanding", "outstandingBalance"),
        ),
    ),
    sample_fields=("description",),
    derive=derive_liability_balance,
)

SALARIES = ModuleDescriptor(
    id="salaries",
    table="salaries",
    label="Salaries",
    sheet_name="Salaries",
    file_slug="salaries",
    create_schema=schemas.SalaryCreate,
    update_schema=schemas.SalaryUpdate,
    date_field="month",
    export_filtered=True,
    shape_export=_shape_salary,
    export_columns=(
        SheetColumn("Employee Name", "employeeName"),
        SheetColumn("Month", "month"),
        SheetColumn("Basic Salary (PKR)", "basicSalary"),
        SheetColumn("Allowances (PKR)", "allowances"),
        SheetColumn("Deductions (PKR)", "deductions"),
        SheetColumn("Net Salary (PKR)", "netSalary"),
        SheetColumn("Payment Status", "paymentStatus"),
        SheetColumn("Payment Date", "paymentDate"),
    ),
    table_columns=(
        SheetColumn("Employee Name", "employeeName"),
        SheetColumn("Role", "role"),
        SheetColumn("Month", "month"),
        SheetColumn("Net Salary (PKR)", "netSalary"),
        SheetColumn("Payment Status", "paymentStatus"),
        SheetColumn("Payment Date", "paymentDate"),
    ),
    summary=SummarySpec(
        count_key="salaryCount",
        sums=(
            SumSpec("totalSalaries", "netSalary"),
            SumSpec("paidSalaries", "netSalary", where=("paymentStatus", "paid")),
        ),
        differences=(("pendingSalaries", "totalSalaries", "paidSalaries"),),
    ),
    sample_fields=("employeeName",),
)

CASHFLOW = ModuleDescriptor(
    id="cashflow",
    table="cashflow",
    label="Cash Flow",
    sheet_name="Cash Flow",
    file_slug="cash-flow",
    create_schema=schemas.CashflowCreate,
    update_schema=schemas.CashflowUpdate,
    date_field="date",
    export_filtered=True,
    shape_export=_shape_cashflow,
    export_columns=(
        SheetColumn("Date", "date"),
        SheetColumn("Type", "type"),
        SheetColumn("Category", "category"),
        SheetColumn("Description", "description"),
        SheetColumn("Amount (PKR)", "amount"),
    ),
    table_columns=(
        SheetColumn("Date", "date"),
        SheetColumn("Type", "type"),
        SheetColumn("Category", "category"),
        SheetColumn("Description", "description"),
        SheetColumn("Amount (PKR)", "amount"),
    ),
    summary=SummarySpec(
        count_key="entryCount",
        sums=(
            SumSpec("totalInflows", "amount", where=("type", "inflow")),
            SumSpec("totalOutflows", "amount", where=("type", "outflow")),
        ),
        differences=(("netCashflow", "totalInflows", "totalOutflows"),),
    ),
)

BANK_PDC = ModuleDescriptor(
    id="bankPdc",
    table="bank_pdc",
    label="Bank PDC",
    sheet_name="Bank PDC",
    file_slug="bank-pdc",
    create_schema=schemas.BankPdcCreate,
    update_schema=schemas.BankPdcUpdate,
    date_field="date",
    export_filtered=False,
    shape_export=_shape_bank_pdc,
    export_columns=(
        SheetColumn("Bank Name", "bankName"),
        SheetColumn("Supplier Code", "supplierCode"),
        SheetColumn("Amount (PKR)", "amount"),
        SheetColumn("Status", "status"),
        SheetColumn("Due Date", "dueDate"),
    ),
    table_columns=(
        SheetColumn("Date", "date"),
        SheetColumn("Bank", "bank"),
        SheetColumn("Cheque Number", "chequeNumber"),
        SheetColumn("Code", "code"),
        SheetColumn("Supplier", "supplier"),
        SheetColumn("Description", "description"),
        SheetColumn("Amount (PKR)", "amount"),
        SheetColumn("Status", "status"),
    ),
    summary=SummarySpec(
        count_key="pdcCount",
        sums=(
            SumSpec("totalAmount", "amount"),
            SumSpec("pendingAmount", "amount", where=("status", "pending")),
            SumSpec("clearedAmount", "amount", where=("status", "cleared")),
        ),
    ),
    sample_fields=("description", "supplier"),
)

BUSINESS_IN_HAND = ModuleDescriptor(
    id="businessInHand",
    table="business_in_hand",
    label="Business in Hand",
    sheet_name="Business In Hand",
    file_slug="business-in-hand",
    create_schema=schemas.BusinessInHandCreate,
    update_schema=schemas.BusinessInHandUpdate,
    date_field="expectedDate",
    export_filtered=False,
    shape_export=_shape_business_in_hand,
    export_columns=(
        SheetColumn("PO Number", "poNumber"),
        SheetColumn("Supplier", "supplier"),
        SheetColumn("Description", "description"),
        SheetColumn("Amount (PKR)", "amount"),
        SheetColumn("Status", "status"),
        SheetColumn("Expected Date", "expectedDate"),
    ),
    table_columns=(
        SheetColumn("Type", "type"),
        SheetColumn("Description", "description"),
        SheetColumn("Amount (PKR)", "amount"),
        SheetColumn("Expected Date", "expectedDate"),
        SheetColumn("Status", "status"),
        SheetColumn("Currency", "currency", default="PKR"),
    ),
    summary=SummarySpec(
        count_key="totalCount",
        sums=(
            SumSpec("totalAmount", "amount"),
            SumSpec("pendingAmount", "amount", where=("status", "pending")),
            SumSpec("confirmedAmount", "amount", where=("status", "confirmed")),
            SumSpec("receivedAmount", "amount", where=("status", "received")),
        ),
    ),
    sample_fields=("description",),
    table_sheet_name="Business in Hand",
)

FUTURE_NEEDS = ModuleDescriptor(
    id="futureNeeds",
    table="future_needs",
    label="Future Needs",
    sheet_name="Future Needs",
    file_slug="future-needs",
    create_schema=schemas.FutureNeedCreate,
    update_schema=schemas.FutureNeedUpdate,
    date_field="month",
    export_filtered=False,
    shape_export=_shape_future_need,
    export_columns=(
        SheetColumn("Description", "description"),
        SheetColumn("Category", "category"),
        SheetColumn("Month", "month"),
        SheetColumn("Total Amount (PKR)", "amount"),
        SheetColumn("Type", "type"),
    ),
    table_columns=(
        SheetColumn("Month", "month"),
        SheetColumn("Description", "description"),
        SheetColumn("Quantity", "quantity"),
        SheetColumn("Unit Amount (PKR)", "amount"),
        SheetColumn("Status", "status"),
    ),
    summary=SummarySpec(
        count_key="needCount",
        sums=(
            SumSpec("totalAmount", "amount", multiply_by="quantity"),
            SumSpec("recurringAmount", "amount", where=("status", "recurring"), multiply_by="quantity"),
            SumSpec("oneTimeAmount", "amount", where=("status", "one-time"), multiply_by="quantity"),
        ),
    ),
    sample_fields=("description",),
)

MODULES: dict[str, ModuleDescriptor] = {
    descriptor.id: descriptor
    for descriptor in (
        SALES,
        EXPENSES,
        LIABILITIES,
        SALARIES,
        CASHFLOW,
        BANK_PDC,
        BUSINESS_IN_HAND,
        FUTURE_NEEDS,
    )
}
MODULE_IDS: tuple[str, ...] = tuple(MODULES)


def get_module(module_id: str) -> ModuleDescriptor:
    try:
        return MODULES[module_id]
    except KeyError:
        raise UnknownModuleError(unknown_module(module_id)) from None


def resolve_modules(module_ids: Optional[Iterable[str]]) -> tuple[str, ...]:
    """Validate a module selection and return it in canonical order.

    ``None`` selects every module; an empty selection selects none.
    """

    if module_ids is None:
        return MODULE_IDS
    requested = set()
    for module_id in module_ids:
        requested.add(get_module(module_id).id)
    return tuple(module_id for module_id in MODULE_IDS if module_id in requested)
