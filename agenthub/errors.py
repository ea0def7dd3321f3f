"""Domain errors raised by services and rendered by the API layer."""


class AppError(Exception):
    """Base class for errors with a public message and an HTTP status."""

    status_code = 500
    code = "error"

    def __init__(self, message: str, **extra):
        super().__init__(message)
        self.message = message
        self.extra = extra

    def to_dict(self) -> dict:
        return {"detail": self.message, "error": self.code, **self.extra}


class NotFound(AppError):
    status_code = 404
    code = "not_found"


class ValidationFailed(AppError):
    """Rejected input. ``question_id`` names the first offending question, if any."""

    status_code = 422
    code = "validation_failed"

    def __init__(self, message: str, question_id: str | None = None, errors: dict | None = None):
        super().__init__(message, questionId=question_id, errors=errors or {})
        self.question_id = question_id
        self.errors = errors or {}


class DuplicateApplication(AppError):
    status_code = 409
    code = "duplicate_application"


class StorageFailure(AppError):
    status_code = 500
    code = "storage_failure"

    def __init__(self, message: str = "Something went wrong, please try again"):
        super().__init__(message)


class Unauthorized(AppError):
    status_code = 401
    code = "unauthorized"


class Forbidden(AppError):
    status_code = 403
    code = "forbidden"
