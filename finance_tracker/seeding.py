"""Sample data loading and reset utilities for the admin page.

Every bulk operation here is a sequence of independent single-record
mutations. A failing record is logged and skipped; nothing is rolled back.
"""
from __future__ import annotations

import logging
import sqlite3
from typing import Any, Callable, Optional

from .database import SQLiteRepository, now_millis
from .errors import FinanceTrackerError
from .models import SeedingSession, StoredRecord
from .modules import MODULES
from .sample_catalog import sample_catalog
from .services import FinanceService

logger = logging.getLogger(__name__)

# Order used by the seed, remove and clear loops. Cash flow comes last so its
# removal can rely on the seeding session window.
MODULE_ORDER = (
    "sales",
    "expenses",
    "liabilities",
    "salaries",
    "bankPdc",
    "futureNeeds",
    "businessInHand",
    "cashflow",
)


# Cash flow descriptions and categories that mark entries generated from
# other modules, used when no seeding session is active.
GENERATED_CASHFLOW_MARKERS = ("Sale", "Expense", "Salary", "PDC", "Future Need", "Business in Hand")
MANUAL_CASHFLOW_CATEGORY = "manual"


def _sample_patterns() -> dict[str, dict[str, tuple[str, ...]]]:
    patterns: dict[str, dict[str, tuple[str, ...]]] = {}
    for module_id, samples in sample_catalog(extended=True).items():
        patterns[module_id] = {
            field: tuple(sample[field] for sample in samples if sample.get(field))
            for field in MODULES[module_id].sample_fields
        }
    return patterns


SAMPLE_PATTERNS = _sample_patterns()


def matches_sample(module_id: str, record: StoredRecord) -> bool:
    """Return whether a record looks like one of the catalog samples."""

    if record.is_seed_data:
        return True
    for field, literals in SAMPLE_PATTERNS.get(module_id, {}).items():
        value = record.get(field) or ""
        if any(literal in value for literal in literals):
            return True
    return False


def looks_generated_cashflow(record: StoredRecord) -> bool:
    description = record.get("description") or ""
    if any(marker in description for marker in GENERATED_CASHFLOW_MARKERS):
        return True
    return record.get("category") != MANUAL_CASHFLOW_CATEGORY


class SampleDataService:
    """Seeds, removes and clears data across every module collection."""

    def __init__(
        self,
        repository: SQLiteRepository,
        finance_service: FinanceService,
        clock: Callable[[], int] = now_millis,
    ) -> None:
        self._repository = repository
        self._finance = finance_service
        self._clock = clock

    def active_session(self) -> Optional[SeedingSession]:
        return self._repository.get_active_seeding_session()

    # ------------------------------------------------------------------
    # Seed
    # ------------------------------------------------------------------
    def seed_database(self, extended: bool = False) -> dict[str, Any]:
        """Insert the sample catalog and open a seeding session.

        Returns the message and per-module insert counts shown by the admin
        page. Records that fail validation or storage are skipped. With
        ``extended`` the mid and late 2025 records are loaded as well.
        """

        catalog = sample_catalog(extended)

        logger.info("Starting sample data seeding")
        try:
            self._repository.mark_seeding_session(self._clock())
        except sqlite3.Error:
            logger.exception("Could not mark seeding session")

        added: dict[str, int] = {}
        for module_id in MODULE_ORDER:
            added[module_id] = 0
            for sample in catalog[module_id]:
                try:
                    self._finance.create_record(module_id, sample, is_seed_data=True)
                except (FinanceTrackerError, sqlite3.Error):
                    logger.exception("Failed to seed %s record %r", module_id, sample.get("description"))
                    continue
                added[module_id] += 1
            logger.info("Seeded %d %s records", added[module_id], module_id)

        total = sum(added.values())
        logger.info("Sample data seeding completed: %d records", total)
        return {
            "message": f"Successfully added {total} records across all modules!",
            "recordsAdded": added,
        }

    # ------------------------------------------------------------------
    # Remove seeded
    # ------------------------------------------------------------------
    def remove_seeded_data(self) -> int:
        """Delete sample records from every module, preserving user data.

        Cash flow entries are matched by creation time inside the active
        seeding session window, falling back to description and category
        heuristics when there is no active session.
        """

        logger.info("Starting removal of sample data")
        removed = 0
        for module_id in MODULE_ORDER:
            try:
                if module_id == "cashflow":
                    predicate = self._seeded_cashflow_predicate()
                else:
                    predicate = _module_sample_predicate(module_id)
                candidates = [
                    record for record in self._repository.list_records(module_id) if predicate(record)
                ]
            except sqlite3.Error:
                logger.exception("Error reading %s while removing sample data", module_id)
                continue
            count = self._delete_each(module_id, candidates)
            logger.info("Removed %d sample %s records", count, module_id)
            removed += count

        try:
            if self._repository.get_active_seeding_session() is not None:
                self._repository.deactivate_seeding_session()
        except sqlite3.Error:
            logger.exception("Error marking seeding session inactive")

        logger.info("Removed %d sample records in total; user data preserved", removed)
        return removed

    def _seeded_cashflow_predicate(self) -> Callable[[StoredRecord], bool]:
        session = self._repository.get_active_seeding_session()
        if session is None:
            return lambda record: record.is_seed_data or looks_generated_cashflow(record)
        window_end = self._clock()
        return lambda record: record.is_seed_data or (
            session.start_time <= record.creation_time <= window_end
        )

    # ------------------------------------------------------------------
    # Clear all
    # ------------------------------------------------------------------
    def clear_all_data(self) -> int:
        """Delete every record of every module. Irreversible."""

        logger.warning("Clearing all data from every module")
        cleared = 0
        for module_id in MODULE_ORDER:
            try:
                records = self._repository.list_records(module_id)
            except sqlite3.Error:
                logger.exception("Error reading %s while clearing data", module_id)
                continue
            count = self._delete_each(module_id, records)
            logger.info("Cleared %d %s records", count, module_id)
            cleared += count
        logger.info("Cleanup completed; %d records cleared", cleared)
        return cleared

    def _delete_each(self, module_id: str, records: list[StoredRecord]) -> int:
        deleted = 0
        for record in records:
            try:
                self._finance.delete_record(module_id, record.id)
            except (FinanceTrackerError, sqlite3.Error):
                logger.exception("Failed to delete %s record %s", module_id, record.id)
                continue
            deleted += 1
        return deleted


def _module_sample_predicate(module_id: str) -> Callable[[StoredRecord], bool]:
    return lambda record: matches_sample(module_id, record)
