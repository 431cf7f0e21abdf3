"""
Unit tests for the catalog models.
Tests form-value binding, required fields and blank handling.
"""

import pytest
from pydantic import ValidationError

from catalog.models import BookFilter, BookRecord, BookRemovalRequest


class TestBookRecord:
    """Test cases for BookRecord model."""

    def test_valid_book_from_form_strings(self):
        """Test that form strings bind to the right types."""
        book = BookRecord(id="", author="Orwell", title="1984", size="10")

        assert book.id is None
        assert book.size == 10
        assert book.author == "Orwell"

    def test_blank_author_rejected(self):
        """Test that whitespace-only authors are rejected."""
        with pytest.raises(ValidationError) as exc_info:
            BookRecord(author="   ", title="1984", size=10)

        assert "must not be blank" in str(exc_info.value)

    def test_empty_title_rejected(self):
        with pytest.raises(ValidationError):
            BookRecord(author="Orwell", title="", size=10)

    def test_missing_size_rejected(self):
        """Test that size is required."""
        with pytest.raises(ValidationError):
            BookRecord(author="Orwell", title="1984")

    def test_empty_size_rejected(self):
        """Test that an empty size form value counts as missing."""
        with pytest.raises(ValidationError) as exc_info:
            BookRecord(author="Orwell", title="1984", size="")

        assert "must not be null" in str(exc_info.value)

    def test_non_numeric_size_rejected(self):
        with pytest.raises(ValidationError):
            BookRecord(author="Orwell", title="1984", size="large")

    def test_same_book(self):
        book = BookRecord(id=1, author="Orwell", title="1984", size=10)

        assert book.same_book("Orwell", "1984", 10)
        assert not book.same_book("Orwell", "1984", 5)
        assert not book.same_book("orwell", "1984", 10)


class TestBookFilter:
    """Test cases for BookFilter model."""

    def test_all_fields_optional(self):
        book_filter = BookFilter()

        assert book_filter.is_empty()

    def test_empty_size_is_absent(self):
        book_filter = BookFilter(author="", title="", size="")

        assert book_filter.size is None
        assert book_filter.is_empty()

    def test_invalid_size(self):
        with pytest.raises(ValidationError):
            BookFilter(size="abc")


class TestBookRemovalRequest:
    """Test cases for BookRemovalRequest model."""

    def test_empty_request(self):
        request = BookRemovalRequest(id="", author="", title="", size="")

        assert request.is_empty()

    def test_id_only(self):
        request = BookRemovalRequest(id="3")

        assert request.id == 3
        assert not request.is_empty()

    def test_size_only_is_not_empty(self):
        assert not BookRemovalRequest(size=10).is_empty()

    def test_invalid_id(self):
        with pytest.raises(ValidationError):
            BookRemovalRequest(id="three")
