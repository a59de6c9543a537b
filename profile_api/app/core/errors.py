"""
Error taxonomy for profile operations.

Services raise these exceptions and the handlers registered in
``exception_handlers`` turn them into JSON responses.  Every error
carries the HTTP status it maps to and a message that is safe to
show to the caller; store errors are never passed through verbatim.
"""

from typing import Any, Dict

from pydantic import ValidationError as PydanticValidationError


class ProfileError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code: int = 500
    default_message: str = "Request failed"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_public_dict(self) -> Dict[str, Any]:
        return {"message": self.message}


class ValidationError(ProfileError):
    """Payload rejected before reaching the store.

    ``errors`` maps a field name (dotted for nested fields such as
    ``date.start``) to a human-readable message.
    """

    status_code = 400
    default_message = "Invalid payload"

    def __init__(self, errors: Dict[str, str]) -> None:
        self.errors = dict(errors)
        super().__init__(", ".join(f"{k}: {v}" for k, v in self.errors.items()))

    def to_public_dict(self) -> Dict[str, Any]:
        return {"message": self.errors}


class NotFound(ProfileError):
    status_code = 404
    default_message = "Not found."


class InvalidIdentifier(ProfileError):
    # Reported as 404: a malformed id can never name an existing element.
    status_code = 404
    default_message = "Invalid identifier."


class StoreUnavailable(ProfileError):
    # Reported as 404 {message}, the same shape as any other failed lookup;
    # the message stays generic so store details never reach the client.
    status_code = 404
    default_message = "Profile store is unavailable, please try again later."


def field_errors(exc: PydanticValidationError) -> Dict[str, str]:
    """Flatten a pydantic error into ``{field: message}``.

    The first error reported for a field wins.  Errors raised by a
    model-level validator have an empty location and are reported
    under ``__root__``.
    """
    errors: Dict[str, str] = {}
    for error in exc.errors():
        field = ".".join(str(part) for part in error.get("loc", ())) or "__root__"
        message = error.get("msg", "Invalid value")
        # pydantic prefixes messages from custom validators
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        errors.setdefault(field, message)
    return errors
