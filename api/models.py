"""
API models: the shelf page model, redirects, and JSON error/health responses.
"""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from catalog.models import BookFilter, BookRecord
from storage.file_store import StoredFileInfo

SHELF_PATH = "/books/shelf"


class FieldError(BaseModel):
    """A single validation diagnostic shown on the shelf page."""
    field: str = Field(..., description="Offending field")
    message: str = Field(..., description="What is wrong with it")


class ShelfPage(BaseModel):
    """Everything the shelf template needs to render."""
    books: List[BookRecord] = Field(default_factory=list, description="Books to show")
    files: List[StoredFileInfo] = Field(default_factory=list, description="Uploaded files")
    book_filter: BookFilter = Field(default_factory=BookFilter, description="Filter echoed back into the form")
    errors: List[FieldError] = Field(default_factory=list, description="Validation diagnostics")
    form: Dict[str, str] = Field(default_factory=dict, description="Submitted form values to redisplay")
    form_name: Optional[str] = Field(None, description="Form the diagnostics belong to")

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)


class Redirect(BaseModel):
    """Handler outcome asking the client to load another page."""
    location: str = Field(SHELF_PATH, description="Target path")


class ErrorResponse(BaseModel):
    """Error response model."""
    error: str = Field(..., description="Error message")
    detail: Optional[str] = Field(None, description="Additional error details")
    status_code: int = Field(..., description="HTTP status code")


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str = Field(..., description="Service status")
    timestamp: datetime = Field(..., description="Current timestamp")
    version: str = Field(..., description="API version")
    books: int = Field(..., description="Number of books in the catalog")
    files: int = Field(..., description="Number of stored files")
    storage_status: str = Field(..., description="Upload directory status")
