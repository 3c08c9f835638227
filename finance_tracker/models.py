"""Domain models used by the finance tracker backend.

The classes defined here are intentionally lightweight data containers that do
not know anything about persistence or transport concerns. Record payloads
keep the camelCase field names of the documented storage schema; the Python
attributes around them are snake_case.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass(slots=True)
class StoredRecord:
    """A single document in one of the module collections.

    Attributes:
        id: Opaque identifier generated at insert time.
        module: Module identifier the record belongs to (``sales``, ...).
        creation_time: Insert timestamp in milliseconds since the epoch.
            Used to scope the removal of seeded cash flow entries.
        is_seed_data: ``True`` when the seeding utility inserted the record.
        fields: Module-specific payload, keyed by storage field name.
    """

    id: str
    module: str
    creation_time: int
    is_seed_data: bool = False
    fields: dict[str, Any] = field(default_factory=dict)

    def get(self, name: str, default: Any = None) -> Any:
        return self.fields.get(name, default)

    def to_document(self) -> dict[str, Any]:
        """Return the wire representation of the record."""

        document = {
            "_id": self.id,
            "_creationTime": self.creation_time,
            "isSeedData": self.is_seed_data,
        }
        document.update(self.fields)
        return document


@dataclass(slots=True)
class SeedingSession:
    """Marker of the time window opened by the latest seed operation."""

    start_time: int
    active: bool

    def to_document(self) -> dict[str, Any]:
        return {"startTime": self.start_time, "active": self.active}


@dataclass(frozen=True, slots=True)
class DateRange:
    """Inclusive range of ISO date strings.

    Comparison is lexicographic, which orders ``YYYY-MM`` and ``YYYY-MM-DD``
    strings chronologically. An empty bound leaves that side open.
    """

    start_date: str = ""
    end_date: str = ""

    @property
    def is_unbounded(self) -> bool:
        return not self.start_date and not self.end_date

    def contains(self, value: Optional[str]) -> bool:
        value = value or ""
        if self.start_date and value < self.start_date:
            return False
        if self.end_date and value > self.end_date:
            return False
        return True

    def to_dict(self) -> dict[str, str]:
        return {"startDate": self.start_date, "endDate": self.end_date}


@dataclass(slots=True)
class ExportTotals:
    """Cross-module financial totals of an export document."""

    total_sales: float = 0.0
    total_expenses: float = 0.0
    total_liabilities: float = 0.0
    outstanding_liabilities: float = 0.0
    total_salaries: float = 0.0
    paid_salaries: float = 0.0
    total_inflows: float = 0.0
    total_outflows: float = 0.0
    total_profit: float = 0.0
    business_in_hand_value: float = 0.0

    @property
    def pending_salaries(self) -> float:
        return self.total_salaries - self.paid_salaries

    @property
    def net_cashflow(self) -> float:
        return self.total_inflows - self.total_outflows

    def to_dict(self) -> dict[str, float]:
        return {
            "totalSales": self.total_sales,
            "totalExpenses": self.total_expenses,
            "totalLiabilities": self.total_liabilities,
            "outstandingLiabilities": self.outstanding_liabilities,
            "totalSalaries": self.total_salaries,
            "paidSalaries": self.paid_salaries,
            "pendingSalaries": self.pending_salaries,
            "totalInflows": self.total_inflows,
            "totalOutflows": self.total_outflows,
            "netCashflow": self.net_cashflow,
            "totalProfit": self.total_profit,
            "businessInHandValue": self.business_in_hand_value,
        }


__all__ = [
    "StoredRecord",
    "SeedingSession",
    "DateRange",
    "ExportTotals",
]
