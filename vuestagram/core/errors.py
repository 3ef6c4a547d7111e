"""Tagged application errors.

Every error carries a short application code the client shows to the user
(``E01`` for fixable input problems, ``E1x``/``E2x`` for auth, ``E99`` for
anything unexpected) and the HTTP status it maps to.
"""

GENERIC_ERROR_CODE = "E99"


class VuestagramError(Exception):
    """Base exception for all errors surfaced through the API envelope."""

    code = GENERIC_ERROR_CODE
    http_status = 500
    default_message = "An unexpected error occurred"

    def __init__(self, message: str | None = None, code: str | None = None):
        self.message = message or self.default_message
        if code is not None:
            self.code = code
        super().__init__(self.message)

    def to_response(self) -> dict:
        return {"code": self.code, "msg": self.message}


class ValidationFailed(VuestagramError):
    code = "E01"
    http_status = 400
    default_message = "Invalid input"

    def __init__(self, message: str | None = None, errors: dict | None = None):
        super().__init__(message)
        self.errors = errors or {}


class AuthenticationFailed(VuestagramError):
    code = "E10"
    http_status = 401
    default_message = "Authentication required"


class LoginFailed(VuestagramError):
    code = "E20"
    http_status = 401
    default_message = "Account or password does not match"


class AccountExists(VuestagramError):
    code = "E21"
    http_status = 409
    default_message = "Account already registered"


class NotFound(VuestagramError):
    code = "E40"
    http_status = 404
    default_message = "Resource not found"
