"""
Book catalog: record models and the in-memory catalog service.
"""

from .models import BookFilter, BookRecord, BookRemovalRequest
from .service import BookCatalogService, filter_books

__all__ = [
    "BookCatalogService",
    "BookFilter",
    "BookRecord",
    "BookRemovalRequest",
    "filter_books",
]
