"""
Pydantic models for book records and the transient request shapes
used to filter and remove them.
"""

from typing import Optional
from pydantic import BaseModel, Field, validator


def _blank_to_none(v):
    """Empty form/query values bind to "absent", not to an invalid integer."""
    if isinstance(v, str) and not v.strip():
        return None
    return v


class BookRecord(BaseModel):
    """
    A book on the shelf.

    ``id`` stays unset until the catalog stores the record.
    """
    id: Optional[int] = Field(None, description="Catalog identifier, assigned on save")
    author: str = Field(..., description="Book author")
    title: str = Field(..., description="Book title")
    size: int = Field(..., description="Shelf size code")

    @validator('id', pre=True)
    def validate_id(cls, v):
        return _blank_to_none(v)

    @validator('author', 'title')
    def validate_not_blank(cls, v):
        """Reject empty and whitespace-only strings."""
        if not v or not v.strip():
            raise ValueError('must not be blank')
        return v

    @validator('size', pre=True)
    def validate_size(cls, v):
        """Size is required; an empty form field counts as missing."""
        v = _blank_to_none(v)
        if v is None:
            raise ValueError('must not be null')
        return v

    class Config:
        """Pydantic configuration."""
        json_schema_extra = {
            "example": {
                "id": 1,
                "author": "George Orwell",
                "title": "1984",
                "size": 10
            }
        }

    def same_book(self, author: Optional[str], title: Optional[str], size: Optional[int]) -> bool:
        """Exact match on (author, title, size)."""
        return self.author == author and self.title == title and self.size == size


class BookFilter(BaseModel):
    """Shelf filter. Every field is optional; absent fields match everything."""
    author: Optional[str] = Field(None, description="Author prefix")
    title: Optional[str] = Field(None, description="Title prefix")
    size: Optional[int] = Field(None, description="Exact size code")

    @validator('size', pre=True)
    def validate_size(cls, v):
        return _blank_to_none(v)

    def is_empty(self) -> bool:
        return not self.author and not self.title and self.size is None


class BookRemovalRequest(BaseModel):
    """
    Criteria for removing books.

    If ``id`` is set the book with that id is removed; otherwise every book
    whose author, title and size all equal the given values is removed.
    """
    id: Optional[int] = Field(None, description="Identifier of the book to remove")
    author: Optional[str] = Field(None, description="Author to match")
    title: Optional[str] = Field(None, description="Title to match")
    size: Optional[int] = Field(None, description="Size code to match")

    @validator('id', 'size', pre=True)
    def validate_optional_int(cls, v):
        return _blank_to_none(v)

    def is_empty(self) -> bool:
        """True when the request carries no usable criteria."""
        return (
            self.id is None
            and not self.author
            and not self.title
            and self.size is None
        )
