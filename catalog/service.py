"""
In-memory book catalog.
Owns the book records and implements list, save, remove and filtering.
"""

import threading
from typing import Iterable, List

import structlog

from utilities.exceptions import ValidationError
from .models import BookFilter, BookRecord, BookRemovalRequest

logger = structlog.get_logger(__name__)


def filter_books(books: Iterable[BookRecord], book_filter: BookFilter) -> List[BookRecord]:
    """
    Apply a shelf filter to a sequence of books.

    Predicates are applied in order: author prefix, title prefix, exact size.
    Prefix matches are case-sensitive. Empty or absent filter fields match
    every book. Input order is preserved.

    Args:
        books: Books to filter
        book_filter: Filter criteria

    Returns:
        List of matching books
    """
    result = list(books)

    if book_filter.author:
        result = [book for book in result if book.author.startswith(book_filter.author)]

    if book_filter.title:
        result = [book for book in result if book.title.startswith(book_filter.title)]

    if book_filter.size is not None:
        result = [book for book in result if book.size == book_filter.size]

    return result


class BookCatalogService:
    """
    Thread-safe in-memory collection of book records.

    Records are kept in insertion order. Ids are assigned from a counter that
    only moves forward, so a removed id is never handed out again.
    """

    def __init__(self, books: Iterable[BookRecord] = ()):
        self._lock = threading.Lock()
        self._books: List[BookRecord] = []
        self._next_id = 1
        for book in books:
            self.save(book)

    def list_all(self) -> List[BookRecord]:
        """Get all books in insertion order."""
        with self._lock:
            return [book.model_copy() for book in self._books]

    def count(self) -> int:
        with self._lock:
            return len(self._books)

    def filter(self, book_filter: BookFilter) -> List[BookRecord]:
        """Get the books matching a shelf filter."""
        return filter_books(self.list_all(), book_filter)

    def save(self, record: BookRecord) -> BookRecord:
        """
        Store a book.

        A record without an id gets the next free id and is appended. A record
        with an id replaces the stored record with that id in place; if no
        record has that id the record is appended as-is and later ids are
        allocated above it.

        Args:
            record: Book to store

        Returns:
            The stored copy of the record, with its id set

        Raises:
            ValidationError: If author or title is blank or size is missing
        """
        self._validate(record)

        with self._lock:
            if record.id is None:
                stored = record.model_copy(update={"id": self._next_id})
                self._next_id += 1
                self._books.append(stored)
                logger.info("Book added", book_id=stored.id, author=stored.author, title=stored.title)
                return stored.model_copy()

            stored = record.model_copy()
            for index, book in enumerate(self._books):
                if book.id == record.id:
                    self._books[index] = stored
                    logger.info("Book replaced", book_id=stored.id)
                    return stored.model_copy()

            self._books.append(stored)
            self._next_id = max(self._next_id, stored.id + 1)
            logger.info("Book added with caller-supplied id", book_id=stored.id)
            return stored.model_copy()

    def remove(self, request: BookRemovalRequest) -> bool:
        """
        Remove books matching a removal request.

        Matches by id when the request has one, otherwise by exact equality of
        author, title and size. All matching books are removed.

        Args:
            request: Removal criteria

        Returns:
            True if at least one book was removed, False otherwise
        """
        if request.is_empty():
            logger.debug("Removal request has no criteria")
            return False

        if request.id is not None:
            def matches(book: BookRecord) -> bool:
                return book.id == request.id
        else:
            def matches(book: BookRecord) -> bool:
                return book.same_book(request.author, request.title, request.size)

        with self._lock:
            remaining = [book for book in self._books if not matches(book)]
            removed = len(self._books) - len(remaining)
            self._books = remaining

        if removed:
            logger.info("Books removed", count=removed, book_id=request.id)
        return removed > 0

    @staticmethod
    def _validate(record: BookRecord) -> None:
        errors = []
        if not record.author or not record.author.strip():
            errors.append({"field": "author", "message": "must not be blank"})
        if not record.title or not record.title.strip():
            errors.append({"field": "title", "message": "must not be blank"})
        if record.size is None:
            errors.append({"field": "size", "message": "must not be null"})
        if errors:
            raise ValidationError("Invalid book record", errors)
