"""
Error taxonomy shared by services and routes.

Services raise these; the application exception handler turns them into the
``{"status": "error", "error": {"code", "message"}}`` envelope.
"""

SERVER_ERROR = "SERVER_ERROR"

STATUS_BY_CODE = {
    "NOT_FOUND": 404,
    "VALIDATION_ERROR": 400,
    "FORBIDDEN": 403,
    "BAD_REQUEST": 400,
    "UNAUTHORIZED": 401,
    "RATE_LIMITED": 429,
    SERVER_ERROR: 500,
}

CODE_BY_STATUS = {
    400: "BAD_REQUEST",
    401: "UNAUTHORIZED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    405: "BAD_REQUEST",
    429: "RATE_LIMITED",
}


def status_for_code(code: str) -> int:
    """HTTP status for an error code; unknown codes are server errors."""
    return STATUS_BY_CODE.get(code, 500)


class ApiError(Exception):
    code = SERVER_ERROR

    def __init__(self, message: str, code: str | None = None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code

    @property
    def status_code(self) -> int:
        return status_for_code(self.code)

    def __repr__(self) -> str:
        return f"<{type(self).__name__}(code={self.code}, message={self.message!r})>"


class NotFoundError(ApiError):
    code = "NOT_FOUND"


class ValidationError(ApiError):
    code = "VALIDATION_ERROR"


class ForbiddenError(ApiError):
    code = "FORBIDDEN"


class BadRequestError(ApiError):
    code = "BAD_REQUEST"


class UnauthorizedError(ApiError):
    code = "UNAUTHORIZED"


class ServerError(ApiError):
    code = SERVER_ERROR
