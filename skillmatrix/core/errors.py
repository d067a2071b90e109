"""Domain error types raised by repositories and services.

Controllers never build error payloads themselves: the exception handlers
registered in ``main.py`` turn these into ``success: false`` envelopes.
"""


class SkillMatrixError(Exception):
    """Base error for every expected failure of a request."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class ConfigurationError(SkillMatrixError):
    """A required setting (connection string, database name) is missing."""


class InvalidIdError(SkillMatrixError, ValueError):
    """An identifier is not a well-formed ObjectId."""


class NotFoundError(SkillMatrixError, KeyError):
    """No document matches the requested identifier."""


class ValidationFailed(SkillMatrixError, ValueError):
    """Request payload rejected before any write."""

    def __init__(self, message: str, errors: list[str] | None = None):
        super().__init__(message)
        self.errors = errors or []


class DuplicateError(SkillMatrixError):
    """A unique field (member email, skill name) already exists."""


class UnsupportedOperationError(SkillMatrixError):
    """Method / path combination not handled by a function entry point."""
