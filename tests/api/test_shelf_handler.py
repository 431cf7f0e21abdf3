"""
Tests for the shelf request handler, independent of HTTP.
"""

from unittest.mock import MagicMock

import pytest

from api.models import Redirect, ShelfPage
from api.shelf import ShelfRequestHandler
from storage.file_store import FileStore
from utilities.exceptions import MalformedNameError, NotFoundError


@pytest.fixture
def handler(catalog, file_store):
    return ShelfRequestHandler(catalog, file_store)


def _titles(page):
    return [book.title for book in page.books]


class TestListAndFilter:
    """Test cases for list_and_filter."""

    def test_no_params_lists_everything(self, handler, catalog):
        page = handler.list_and_filter({})

        assert isinstance(page, ShelfPage)
        assert page.books == catalog.list_all()
        assert not page.has_errors

    def test_all_empty_params(self, handler, catalog):
        page = handler.list_and_filter({"author": "", "title": "", "size": ""})

        assert page.books == catalog.list_all()

    def test_conjunctive_filter(self, handler):
        page = handler.list_and_filter({"author": "Orwell", "size": "10"})

        assert _titles(page) == ["1984"]
        assert page.book_filter.author == "Orwell"
        assert page.book_filter.size == 10

    def test_invalid_size_degrades_to_full_list(self, handler, catalog):
        page = handler.list_and_filter({"author": "Orwell", "size": "abc"})

        assert page.books == catalog.list_all()
        assert [error.field for error in page.errors] == ["size"]
        assert page.form_name == "filter"

    def test_includes_files(self, handler, file_store):
        file_store.upload("catalogue.csv", b"a,b")

        page = handler.list_and_filter({"title": "Brave"})

        assert [f.name for f in page.files] == ["catalogue.csv"]


class TestSave:
    """Test cases for save."""

    def test_valid_book_redirects(self, handler, catalog):
        result = handler.save({"id": "", "author": "Bradbury", "title": "Fahrenheit 451", "size": "7"})

        assert result == Redirect(location="/books/shelf")
        assert catalog.list_all()[-1].title == "Fahrenheit 451"

    def test_empty_author_rerenders_with_errors(self, handler, catalog):
        before = catalog.list_all()

        result = handler.save({"author": "", "title": "Untitled", "size": "3"})

        assert isinstance(result, ShelfPage)
        assert [error.field for error in result.errors] == ["author"]
        assert result.form_name == "save"
        assert result.form["title"] == "Untitled"
        assert catalog.list_all() == before

    def test_missing_size(self, handler, catalog):
        result = handler.save({"author": "Orwell", "title": "Burmese Days"})

        assert isinstance(result, ShelfPage)
        assert "size" in [error.field for error in result.errors]
        assert catalog.count() == 3

    def test_save_with_id_replaces(self, handler, catalog):
        handler.save({"id": "1", "author": "Orwell", "title": "Nineteen Eighty-Four", "size": "10"})

        assert catalog.list_all()[0].title == "Nineteen Eighty-Four"
        assert catalog.count() == 3


class TestRemove:
    """Test cases for remove."""

    def test_remove_by_id(self, handler, catalog):
        result = handler.remove({"id": "1", "author": "", "title": "", "size": ""})

        assert isinstance(result, Redirect)
        assert 1 not in [book.id for book in catalog.list_all()]

    def test_remove_by_fields(self, handler, catalog):
        handler.remove({"author": "Orwell", "title": "Animal Farm", "size": "5"})

        assert [book.title for book in catalog.list_all()] == ["1984", "Brave New World"]

    def test_empty_request_is_noop(self, handler):
        catalog = MagicMock()
        handler = ShelfRequestHandler(catalog, handler.file_store)

        result = handler.remove({"id": "", "author": "", "title": "", "size": ""})

        assert isinstance(result, Redirect)
        catalog.remove.assert_not_called()

    def test_not_found_still_redirects(self, handler, catalog):
        result = handler.remove({"id": "42"})

        assert isinstance(result, Redirect)
        assert catalog.count() == 3

    def test_malformed_id_rerenders(self, handler, catalog):
        result = handler.remove({"id": "first"})

        assert isinstance(result, ShelfPage)
        assert [error.field for error in result.errors] == ["id"]
        assert result.form_name == "remove"
        assert catalog.count() == 3


class TestFiles:
    """Test cases for upload and download."""

    def test_empty_filename_skips_store(self, catalog):
        store = MagicMock(spec=FileStore)
        handler = ShelfRequestHandler(catalog, store)

        result = handler.upload("", b"")

        assert isinstance(result, Redirect)
        store.upload.assert_not_called()

    def test_upload_delegates(self, handler, file_store):
        result = handler.upload("report.pdf", b"%PDF")

        assert isinstance(result, Redirect)
        assert file_store.load("report.pdf").content == b"%PDF"

    def test_download(self, handler, file_store):
        file_store.upload("report.pdf", b"%PDF")

        path = handler.download("report.pdf")

        assert path.parent == file_store.root_dir
        assert path.read_bytes() == b"%PDF"

    def test_download_missing(self, handler):
        with pytest.raises(NotFoundError):
            handler.download("missing.pdf")

    def test_download_without_name(self, handler):
        with pytest.raises(MalformedNameError):
            handler.download(None)

    def test_upload_name_too_long_skips_store(self, handler, file_store):
        result = handler.upload("b" * 300, b"data")

        assert isinstance(result, Redirect)
        assert file_store.list_all() == []
        assert list(file_store.root_dir.iterdir()) == []

    def test_upload_control_character_name_skips_store(self, handler, file_store):
        result = handler.upload("a\nb.txt", b"data")

        assert isinstance(result, Redirect)
        assert file_store.list_all() == []
