"""Validation schemas for the module mutations.

Each module has a create schema (required fields enforced) and an update
schema (every field optional, used for partial patches). Attribute names are
snake_case; the camelCase aliases are the storage and wire field names.
"""
from __future__ import annotations

from typing import Annotated, Literal, Optional

from dateutil.parser import isoparse
from pydantic import AfterValidator, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def _normalise_date(value: str) -> str:
    try:
        return isoparse(value.strip()).date().isoformat()
    except (ValueError, OverflowError) as exc:
        raise ValueError(f"'{value}' is not an ISO date (YYYY-MM-DD)") from exc


def _normalise_month(value: str) -> str:
    try:
        return isoparse(value.strip()).strftime("%Y-%m")
    except (ValueError, OverflowError) as exc:
        raise ValueError(f"'{value}' is not an ISO month (YYYY-MM)") from exc


IsoDate = Annotated[str, AfterValidator(_normalise_date)]
IsoMonth = Annotated[str, AfterValidator(_normalise_month)]
Amount = Annotated[float, Field(ge=0)]
Text = Annotated[str, Field(min_length=1)]


class _Schema(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
        allow_inf_nan=False,
        str_strip_whitespace=True,
    )


# ------------------ Sales ------------------
class SaleCreate(_Schema):
    date: IsoDate
    description: Text
    cost: Amount
    selling_price: Amount
    expenses: Amount = 0.0


class SaleUpdate(_Schema):
    date: Optional[IsoDate] = None
    description: Optional[Text] = None
    cost: Optional[Amount] = None
    selling_price: Optional[Amount] = None
    expenses: Optional[Amount] = None


# ------------------ Expenses ------------------
class ExpenseCreate(_Schema):
    date: IsoDate
    category: Text
    description: Text
    vendor: Text
    amount: Amount
    status: Literal["paid", "unpaid"] = "unpaid"


class ExpenseUpdate(_Schema):
    date: Optional[IsoDate] = None
    category: Optional[Text] = None
    description: Optional[Text] = None
    vendor: Optional[Text] = None
    amount: Optional[Amount] = None
    status: Optional[Literal["paid", "unpaid"]] = None


# ------------------ Liabilities ------------------
class LiabilityCreate(_Schema):
    lender_party: Text
    liability_type: Text
    start_date: IsoDate
    due_date: IsoDate
    original_amount: Amount
    outstanding_balance: Optional[Amount] = None
    description: Optional[str] = None


class LiabilityUpdate(_Schema):
    lender_party: Optional[Text] = None
    liability_type: Optional[Text] = None
    start_date: Optional[IsoDate] = None
    due_date: Optional[IsoDate] = None
    original_amount: Optional[Amount] = None
    outstanding_balance: Optional[Amount] = None
    description: Optional[str] = None


# ------------------ Salaries ------------------
class SalaryCreate(_Schema):
    employee_name: Text
    role: Text
    month: IsoMonth
    net_salary: Amount
    payment_status: Literal["paid", "pending"] = "pending"
    payment_date: Optional[IsoDate] = None


class SalaryUpdate(_Schema):
    employee_name: Optional[Text] = None
    role: Optional[Text] = None
    month: Optional[IsoMonth] = None
    net_salary: Optional[Amount] = None
    payment_status: Optional[Literal["paid", "pending"]] = None
    payment_date: Optional[IsoDate] = None


# ------------------ Cash flow ------------------
class CashflowCreate(_Schema):
    date: IsoDate
    type: Literal["inflow", "outflow"]
    category: Text = "manual"
    description: Text
    amount: Amount


class CashflowUpdate(_Schema):
    date: Optional[IsoDate] = None
    type: Optional[Literal["inflow", "outflow"]] = None
    category: Optional[Text] = None
    description: Optional[Text] = None
    amount: Optional[Amount] = None


# ------------------ Bank PDC ------------------
class BankPdcCreate(_Schema):
    date: IsoDate
    bank: Text
    cheque_number: Text
    code: Text
    supplier: Text
    description: Text
    amount: Amount
    status: Literal["pending", "cleared"] = "pending"


class BankPdcUpdate(_Schema):
    date: Optional[IsoDate] = None
    bank: Optional[Text] = None
    cheque_number: Optional[Text] = None
    code: Optional[Text] = None
    supplier: Optional[Text] = None
    description: Optional[Text] = None
    amount: Optional[Amount] = None
    status: Optional[Literal["pending", "cleared"]] = None


# ------------------ Business in hand ------------------
BusinessInHandType = Literal["po_in_hand", "pending_invoice", "expected_revenue"]
BusinessInHandStatus = Literal["pending", "confirmed", "received"]


class BusinessInHandCreate(_Schema):
    type: BusinessInHandType
    description: Text
    amount: Amount
    expected_date: IsoDate
    status: BusinessInHandStatus = "pending"


class BusinessInHandUpdate(_Schema):
    type: Optional[BusinessInHandType] = None
    description: Optional[Text] = None
    amount: Optional[Amount] = None
    expected_date: Optional[IsoDate] = None
    status: Optional[BusinessInHandStatus] = None


# ------------------ Future needs ------------------
class FutureNeedCreate(_Schema):
    month: IsoMonth
    description: Text
    quantity: int = Field(1, ge=0)
    amount: Amount
    status: Literal["recurring", "one-time"] = "one-time"


class FutureNeedUpdate(_Schema):
    month: Optional[IsoMonth] = None
    description: Optional[Text] = None
    quantity: Optional[int] = Field(None, ge=0)
    amount: Optional[Amount] = None
    status: Optional[Literal["recurring", "one-time"]] = None
