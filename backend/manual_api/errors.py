"""
Domain errors raised by the service layer.

Routers don't catch these. The exception handlers registered in
``manual_api.responses`` turn each one into an error envelope with the
right status code, so every endpoint reports failures the same way.
"""

from typing import Optional


class ManualError(Exception):
    """Base class for user manual errors."""

    status_code = 500
    message = "Server Error"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.message)
        if message:
            self.message = message


class ManualNotFound(ManualError):
    """Referenced id is absent, or soft-deleted in a default-scope lookup.

    ``status_code`` is 404 for reads. Update/delete callers may override it
    (see ``Settings.MUTATION_NOT_FOUND_STATUS``).
    """

    status_code = 404
    message = "User manual not found"

    def __init__(self, manual_id: int, status_code: Optional[int] = None):
        super().__init__()
        self.manual_id = manual_id
        if status_code is not None:
            self.status_code = status_code


class ManualValidationError(ManualError):
    """One or more field constraints failed. Carries field -> messages."""

    status_code = 422
    message = "The given data was invalid."

    def __init__(self, errors: dict[str, list[str]]):
        super().__init__()
        self.errors = errors
