"""
Exception hierarchy shared by the catalog, the file store and the web layer.
"""

from typing import Dict, List, Optional


class ShelfError(Exception):
    """Base class for all book shelf errors."""


class ValidationError(ShelfError):
    """
    A record or request failed validation.

    Carries a list of ``{"field": ..., "message": ...}`` diagnostics so the
    shelf page can show them next to the form.
    """

    def __init__(self, message: str, errors: Optional[List[Dict[str, str]]] = None):
        super().__init__(message)
        self.errors = errors or []

    @classmethod
    def from_pydantic(cls, exc) -> "ValidationError":
        """Build diagnostics from a pydantic ValidationError."""
        errors = []
        for error in exc.errors():
            location = ".".join(str(part) for part in error.get("loc", ()))
            errors.append({
                "field": location or "__root__",
                "message": error.get("msg", "invalid value"),
            })
        return cls("Validation failed", errors)


class NotFoundError(ShelfError):
    """A named resource does not exist."""


class MalformedNameError(ShelfError):
    """A name cannot be resolved to a storage location."""


class InvalidInputError(ShelfError):
    """Input was rejected before reaching storage (e.g. an empty filename)."""
