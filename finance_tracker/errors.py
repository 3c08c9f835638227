"""Domain error types shared by the services and the HTTP layer."""


class FinanceTrackerError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for callers that only care about bad input.
    """


class UnknownModuleError(FinanceTrackerError):
    """The requested module identifier is not one of the eight modules."""


class RecordNotFoundError(FinanceTrackerError):
    """No record with the given id exists in the module collection."""


class RecordValidationError(FinanceTrackerError):
    """A create or update payload failed schema validation."""


def unknown_module(module_id: str) -> str:
    """Return message for an unrecognised module identifier."""
    return f"Unknown module '{module_id}'"


def record_not_found(module_id: str, record_id: str) -> str:
    """Return message for a missing record."""
    return f"Record {record_id} not found in {module_id}"
