"""High-level application services orchestrating the finance tracker backend."""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Iterable, Mapping, Optional

from pydantic import BaseModel, ValidationError

from . import aggregation, spreadsheets
from .config import AppConfig
from .database import SQLiteRepository
from .errors import RecordNotFoundError, RecordValidationError, record_not_found
from .models import DateRange
from .modules import MODULE_IDS, MODULES, get_module, resolve_modules

logger = logging.getLogger(__name__)


class FinanceService:
    """Coordinates validation, persistence and aggregation for every module."""

    def __init__(self, config: AppConfig, repository: SQLiteRepository) -> None:
        self._config = config
        self._repository = repository

    # ------------------------------------------------------------------
    # Module catalog
    # ------------------------------------------------------------------
    def module_catalog(self) -> list[dict[str, str]]:
        return [{"id": module_id, "label": MODULES[module_id].label} for module_id in MODULE_IDS]

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def list_records(self, module_id: str) -> list[dict[str, Any]]:
        """Return every record of a module, newest first."""

        get_module(module_id)
        return [record.to_document() for record in self._repository.list_records(module_id, newest_first=True)]

    def get_record(self, module_id: str, record_id: str) -> dict[str, Any]:
        record = self._repository.get_record(module_id, record_id)
        if record is None:
            raise RecordNotFoundError(record_not_found(module_id, record_id))
        return record.to_document()

    def count_records(self, module_id: str) -> int:
        return self._repository.count_records(module_id)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    def create_record(
        self,
        module_id: str,
        payload: Mapping[str, Any],
        *,
        is_seed_data: bool = False,
    ) -> dict[str, Any]:
        """Validate ``payload`` against the module schema and insert it.

        Derived fields (sale profits, default outstanding balance) are
        computed here so they are stored alongside the user input.
        """

        descriptor = get_module(module_id)
        fields = _validate(descriptor.create_schema, payload).model_dump(by_alias=True, exclude_none=True)
        if descriptor.derive is not None:
            fields = descriptor.derive(fields)
        record = self._repository.insert_record(module_id, fields, is_seed_data=is_seed_data)
        logger.debug("Created %s record %s", module_id, record.id)
        return record.to_document()

    def update_record(self, module_id: str, record_id: str, patch: Mapping[str, Any]) -> dict[str, Any]:
        """Apply a partial update. Fields sent as ``null`` are left untouched."""

        descriptor = get_module(module_id)
        changes = _validate(descriptor.update_schema, patch).model_dump(by_alias=True, exclude_none=True)
        record = self._repository.get_record(module_id, record_id)
        if record is None:
            raise RecordNotFoundError(record_not_found(module_id, record_id))

        fields = dict(record.fields)
        fields.update(changes)
        if descriptor.derive is not None:
            fields = descriptor.derive(fields)
        if not self._repository.replace_record(module_id, record_id, fields):
            raise RecordNotFoundError(record_not_found(module_id, record_id))
        record.fields = fields
        return record.to_document()

    def delete_record(self, module_id: str, record_id: str) -> None:
        if not self._repository.delete_record(module_id, record_id):
            raise RecordNotFoundError(record_not_found(module_id, record_id))
        logger.debug("Deleted %s record %s", module_id, record_id)

    # ------------------------------------------------------------------
    # Aggregations
    # ------------------------------------------------------------------
    def module_summary(self, module_id: str, date_range: Optional[DateRange] = None) -> dict[str, Any]:
        return aggregation.summarize_module(module_id, self.list_records(module_id), date_range)

    def expense_categories(self) -> list[str]:
        return aggregation.expense_categories(self.list_records("expenses"))

    def dashboard(self) -> dict[str, Any]:
        return aggregation.build_dashboard(self._load(MODULE_IDS))

    def export_data(
        self,
        date_range: Optional[DateRange] = None,
        modules: Optional[Iterable[str]] = None,
    ) -> dict[str, Any]:
        """Build the cross-module export document.

        Only the included modules are read from the store.
        """

        included = resolve_modules(modules)
        return aggregation.build_export_document(
            self._load(included),
            date_range=date_range,
            modules=included,
            currency=self._config.currency,
        )

    # ------------------------------------------------------------------
    # Workbooks
    # ------------------------------------------------------------------
    def export_workbook(
        self,
        date_range: Optional[DateRange] = None,
        modules: Optional[Iterable[str]] = None,
    ) -> Optional[tuple[str, bytes]]:
        """Return ``(filename, content)`` of the all-module workbook.

        ``None`` means the workbook could not be produced; the cause has
        already been logged.
        """

        included = resolve_modules(modules)
        document = self.export_data(date_range, included)
        content = spreadsheets.build_export_workbook(document, included)
        if content is None:
            return None
        moment = datetime.now(timezone.utc)
        return spreadsheets.export_filename(self._config.export_context, moment), content

    def module_workbook(self, module_id: str) -> Optional[tuple[str, bytes]]:
        content = spreadsheets.build_module_workbook(module_id, self.list_records(module_id))
        if content is None:
            return None
        return spreadsheets.module_filename(module_id, datetime.now(timezone.utc)), content

    def _load(self, module_ids: Iterable[str]) -> dict[str, list[dict[str, Any]]]:
        return {module_id: self.list_records(module_id) for module_id in module_ids}


def _validate(schema: type[BaseModel], payload: Mapping[str, Any]) -> BaseModel:
    try:
        return schema.model_validate(payload)
    except ValidationError as exc:
        message = "; ".join(
            f"{'.'.join(str(part) for part in error['loc']) or 'payload'}: {error['msg']}"
            for error in exc.errors()
        )
        raise RecordValidationError(message) from exc
