"""FastAPI application exposing the finance tracker backend."""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Annotated, Any, Optional

from fastapi import Body, Depends, FastAPI, HTTPException, Query, Response
from fastapi.middleware.cors import CORSMiddleware

from .config import load_config
from .database import SQLiteRepository
from .errors import FinanceTrackerError, RecordNotFoundError, RecordValidationError, UnknownModuleError
from .models import DateRange
from .modules import get_module
from .seeding import SampleDataService
from .services import FinanceService

logger = logging.getLogger(__name__)

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


@asynccontextmanager
async def lifespan(_: FastAPI):
    """Initialise shared services once and reuse them across requests."""

    config = load_config()
    repository = SQLiteRepository(config.database_file)
    repository.initialise_schema()
    finance_service = FinanceService(config, repository)
    sample_data_service = SampleDataService(repository, finance_service)

    app.state.config = config
    app.state.repository = repository
    app.state.finance = finance_service
    app.state.sample_data = sample_data_service
    logger.info("Finance tracker ready (database: %s)", config.database_file)

    yield

    repository.close()


app = FastAPI(lifespan=lifespan, title="finance tracker backend", version="0.1.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Dependency injection ------------------------------------------------------

def get_finance_service() -> FinanceService:
    service: FinanceService = app.state.finance
    return service


def get_sample_data_service() -> SampleDataService:
    service: SampleDataService = app.state.sample_data
    return service


def date_range_query(
    start_date: Annotated[Optional[str], Query(alias="startDate")] = None,
    end_date: Annotated[Optional[str], Query(alias="endDate")] = None,
) -> Optional[DateRange]:
    if not start_date and not end_date:
        return None
    return DateRange(start_date=start_date or "", end_date=end_date or "")


def _http_error(exc: FinanceTrackerError) -> HTTPException:
    if isinstance(exc, (UnknownModuleError, RecordNotFoundError)):
        return HTTPException(status_code=404, detail=str(exc))
    if isinstance(exc, RecordValidationError):
        return HTTPException(status_code=422, detail=str(exc))
    return HTTPException(status_code=400, detail=str(exc))


def _workbook_response(workbook: Optional[tuple[str, bytes]]) -> Response:
    if workbook is None:
        raise HTTPException(status_code=503, detail="Spreadsheet export unavailable. Check the server logs.")
    filename, content = workbook
    return Response(
        content=content,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


# Routes --------------------------------------------------------------------


@app.get("/health")
def health_check() -> dict[str, str]:
    """Return a basic heartbeat payload for monitoring purposes."""

    return {"status": "ok"}


@app.get("/api/modules")
def list_modules(
    finance_service: Annotated[FinanceService, Depends(get_finance_service)],
) -> dict[str, object]:
    return {"modules": finance_service.module_catalog()}


@app.get("/api/dashboard")
def dashboard(
    finance_service: Annotated[FinanceService, Depends(get_finance_service)],
) -> dict[str, Any]:
    return finance_service.dashboard()


@app.get("/api/export")
def export_data(
    date_range: Annotated[Optional[DateRange], Depends(date_range_query)],
    modules: Annotated[list[str] | None, Query(description="Modules to include; all when omitted")] = None,
    finance_service: Annotated[FinanceService, Depends(get_finance_service)] = None,
) -> dict[str, Any]:
    """Return the cross-module export document."""

    try:
        return finance_service.export_data(date_range, modules)
    except FinanceTrackerError as exc:
        raise _http_error(exc) from exc


@app.get("/api/export/xlsx")
def export_workbook(
    date_range: Annotated[Optional[DateRange], Depends(date_range_query)],
    modules: Annotated[list[str] | None, Query(description="Modules to include; all when omitted")] = None,
    finance_service: Annotated[FinanceService, Depends(get_finance_service)] = None,
) -> Response:
    try:
        workbook = finance_service.export_workbook(date_range, modules)
    except FinanceTrackerError as exc:
        raise _http_error(exc) from exc
    return _workbook_response(workbook)


@app.get("/api/expenses/categories")
def expense_categories(
    finance_service: Annotated[FinanceService, Depends(get_finance_service)],
) -> dict[str, list[str]]:
    return {"categories": finance_service.expense_categories()}


# Admin ---------------------------------------------------------------------


@app.post("/api/admin/seed")
def seed_database(
    extended: Annotated[bool, Query(description="Also load the mid and late 2025 records")] = False,
    sample_data_service: Annotated[SampleDataService, Depends(get_sample_data_service)] = None,
) -> dict[str, object]:
    return sample_data_service.seed_database(extended=extended)


@app.post("/api/admin/remove-seeded")
def remove_seeded_data(
    sample_data_service: Annotated[SampleDataService, Depends(get_sample_data_service)],
) -> dict[str, int]:
    return {"removed": sample_data_service.remove_seeded_data()}


@app.post("/api/admin/clear")
def clear_all_data(
    sample_data_service: Annotated[SampleDataService, Depends(get_sample_data_service)],
) -> dict[str, int]:
    return {"cleared": sample_data_service.clear_all_data()}


@app.get("/api/admin/session")
def seeding_session(
    sample_data_service: Annotated[SampleDataService, Depends(get_sample_data_service)],
) -> dict[str, object]:
    session = sample_data_service.active_session()
    return {"session": session.to_document() if session else None}


# Generic module routes -----------------------------------------------------


@app.get("/api/{module}")
def list_records(
    module: str,
    finance_service: Annotated[FinanceService, Depends(get_finance_service)],
) -> dict[str, object]:
    try:
        records = finance_service.list_records(module)
    except FinanceTrackerError as exc:
        raise _http_error(exc) from exc
    return {"records": records, "count": len(records)}


@app.get("/api/{module}/count")
def count_records(
    module: str,
    finance_service: Annotated[FinanceService, Depends(get_finance_service)],
) -> dict[str, object]:
    try:
        return {"module": get_module(module).id, "count": finance_service.count_records(module)}
    except FinanceTrackerError as exc:
        raise _http_error(exc) from exc


@app.get("/api/{module}/summary")
def module_summary(
    module: str,
    date_range: Annotated[Optional[DateRange], Depends(date_range_query)],
    finance_service: Annotated[FinanceService, Depends(get_finance_service)],
) -> dict[str, Any]:
    try:
        return finance_service.module_summary(module, date_range)
    except FinanceTrackerError as exc:
        raise _http_error(exc) from exc


@app.get("/api/{module}/export")
def module_workbook(
    module: str,
    finance_service: Annotated[FinanceService, Depends(get_finance_service)],
) -> Response:
    try:
        workbook = finance_service.module_workbook(module)
    except FinanceTrackerError as exc:
        raise _http_error(exc) from exc
    return _workbook_response(workbook)


@app.get("/api/{module}/{record_id}")
def get_record(
    module: str,
    record_id: str,
    finance_service: Annotated[FinanceService, Depends(get_finance_service)],
) -> dict[str, Any]:
    try:
        return finance_service.get_record(module, record_id)
    except FinanceTrackerError as exc:
        raise _http_error(exc) from exc


@app.post("/api/{module}", status_code=201)
def create_record(
    module: str,
    payload: Annotated[dict[str, Any], Body()],
    finance_service: Annotated[FinanceService, Depends(get_finance_service)],
) -> dict[str, Any]:
    try:
        return finance_service.create_record(module, payload)
    except FinanceTrackerError as exc:
        raise _http_error(exc) from exc


@app.patch("/api/{module}/{record_id}")
def update_record(
    module: str,
    record_id: str,
    patch: Annotated[dict[str, Any], Body()],
    finance_service: Annotated[FinanceService, Depends(get_finance_service)],
) -> dict[str, Any]:
    try:
        return finance_service.update_record(module, record_id, patch)
    except FinanceTrackerError as exc:
        raise _http_error(exc) from exc


@app.delete("/api/{module}/{record_id}")
def delete_record(
    module: str,
    record_id: str,
    finance_service: Annotated[FinanceService, Depends(get_finance_service)],
) -> dict[str, object]:
    try:
        finance_service.delete_record(module, record_id)
    except FinanceTrackerError as exc:
        raise _http_error(exc) from exc
    return {"deleted": True, "id": record_id}
