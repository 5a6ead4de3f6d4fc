from __future__ import annotations

from typing import Any, Optional


class TaskTrackerError(Exception):
    """Base error carrying everything needed for a structured response."""

    error_code = "INTERNAL_ERROR"
    status_code = 500

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.message,
            "error_code": self.error_code,
            "details": self.details,
        }


class TaskValidationError(TaskTrackerError):
    """Malformed or missing input. Raised before anything is written."""

    error_code = "VALIDATION_ERROR"
    status_code = 400

    def __init__(self, errors: list[dict[str, str]]):
        self.errors = errors
        if errors:
            first = errors[0]
            message = f"{first['field']}: {first['message']}" if first.get("field") else first["message"]
        else:
            message = "Invalid request"
        super().__init__(message, details={"errors": errors})

    @classmethod
    def from_pydantic(cls, raw_errors) -> "TaskValidationError":
        """Build from pydantic's ``errors()`` list (model or request validation)."""
        errors = []
        for err in raw_errors:
            # request errors are located as ("body", "title"); model errors as ("title",)
            loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "path", "query")]
            errors.append({"field": ".".join(loc), "message": _clean_message(err.get("msg", "invalid value"))})
        return cls(errors)


class TaskNotFound(TaskTrackerError):
    error_code = "NOT_FOUND"
    status_code = 404

    def __init__(self, task_id: int):
        self.task_id = task_id
        super().__init__("Task not found", details={"id": task_id})


class StoreUnavailable(TaskTrackerError):
    """The backing store failed or could not be reached."""

    error_code = "STORE_UNAVAILABLE"
    status_code = 500

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(f"Failed to {operation}", details={"operation": operation})


def _clean_message(msg: str) -> str:
    # pydantic prefixes messages raised from validators
    prefix = "Value error, "
    return msg[len(prefix):] if msg.startswith(prefix) else msg
