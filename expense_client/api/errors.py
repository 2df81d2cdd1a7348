from __future__ import annotations

from typing import Any, Literal

from pydantic import ValidationError

from expense_client.schemas.envelope import FieldError

ErrorKind = Literal["network", "http", "logical"]

GENERIC_MESSAGE = "An unexpected error occurred."

STATUS_MESSAGES: dict[int, str] = {
    400: "Invalid request. Please check your input.",
    401: "Session expired. Please log in again.",
    403: "You don't have permission to perform this action.",
    404: "The requested resource was not found.",
    409: "This resource already exists.",
    500: "Server error. Please try again later.",
}


class ApiError(Exception):
    """A failed backend call.

    ``kind`` tells transport failures (``network``) apart from HTTP error
    statuses (``http``) and ``success: false`` envelopes on a 2xx (``logical``).
    """

    def __init__(
        self,
        message: str | None,
        status_code: int | None = None,
        errors: list[FieldError] | None = None,
        kind: ErrorKind = "http",
    ) -> None:
        self.message = message
        self.status_code = status_code
        self.errors = errors or []
        self.kind = kind
        super().__init__(get_error_message(self))

    @classmethod
    def from_body(cls, body: Any, status_code: int, kind: ErrorKind) -> ApiError:
        message = None
        errors: list[FieldError] = []
        if isinstance(body, dict):
            if isinstance(body.get("message"), str) and body["message"]:
                message = body["message"]
            for item in body.get("errors") or []:
                if isinstance(item, dict):
                    errors.append(
                        FieldError(
                            field=str(item.get("field", "")),
                            message=str(item.get("message", "")),
                        )
                    )
        return cls(message, status_code, errors, kind)


def format_field_errors(errors: list[FieldError]) -> str:
    return ", ".join(f"{e.field}: {e.message}" for e in errors)


def _validation_message(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        field = ".".join(str(p) for p in err["loc"]) or "input"
        parts.append(f"{field}: {err['msg']}")
    return ", ".join(parts)


def get_error_message(exc: BaseException) -> str:
    """Translate any failure into the single sentence shown to the user."""
    if isinstance(exc, ApiError):
        if exc.errors:
            return format_field_errors(exc.errors)
        if exc.message:
            return exc.message
        if exc.status_code in STATUS_MESSAGES:
            return STATUS_MESSAGES[exc.status_code]
        return GENERIC_MESSAGE
    if isinstance(exc, ValidationError):
        return _validation_message(exc)
    return str(exc) or GENERIC_MESSAGE
