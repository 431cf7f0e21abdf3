"""
Shelf request handling.

The handler works on plain mappings of query/form values and returns either a
``ShelfPage`` to render or a ``Redirect``. It knows nothing about HTTP; the
routing table in ``api.routes`` does the request parsing and response building.
"""

from pathlib import Path
from typing import BinaryIO, List, Mapping, Optional, Union

import structlog
from pydantic import ValidationError as PydanticValidationError

from catalog.models import BookFilter, BookRecord, BookRemovalRequest
from catalog.service import BookCatalogService
from storage.file_store import FileStore
from utilities.exceptions import MalformedNameError, ValidationError
from api.models import FieldError, Redirect, ShelfPage

logger = structlog.get_logger(__name__)

BOOK_FIELDS = ("id", "author", "title", "size")


def _form_values(data: Mapping) -> dict:
    """Keep the known book fields as strings for redisplay."""
    return {key: str(data.get(key) or "") for key in BOOK_FIELDS}


def _field_errors(exc: ValidationError) -> List[FieldError]:
    return [FieldError(**error) for error in exc.errors]


class ShelfRequestHandler:
    """
    Orchestrates one shelf request at a time.

    Holds no per-request state; the catalog and file store are passed in.
    """

    def __init__(self, catalog: BookCatalogService, file_store: FileStore):
        self.catalog = catalog
        self.file_store = file_store

    def list_and_filter(self, params: Mapping) -> ShelfPage:
        """
        Build the shelf page for a filter request.

        Invalid filters fall back to the unfiltered shelf with diagnostics.

        Args:
            params: Query values (author, title, size), all optional

        Returns:
            ShelfPage with the filtered books and all stored files
        """
        try:
            book_filter = self._parse(BookFilter, params)
        except ValidationError as e:
            logger.warning("Invalid shelf filter", errors=e.errors)
            return self._page(errors=_field_errors(e), form_name="filter", form=_form_values(params))

        logger.info(
            "Filter books",
            author=book_filter.author,
            title=book_filter.title,
            size=book_filter.size
        )

        return ShelfPage(
            books=self.catalog.filter(book_filter),
            files=self.file_store.list_all(),
            book_filter=book_filter
        )

    def save(self, form: Mapping) -> Union[ShelfPage, Redirect]:
        """
        Save a book from form values.

        Returns:
            Redirect to the shelf on success, otherwise the unfiltered shelf
            page with diagnostics
        """
        try:
            book = self._parse(BookRecord, form)
            self.catalog.save(book)
        except ValidationError as e:
            logger.warning("Invalid book", errors=e.errors)
            return self._page(errors=_field_errors(e), form_name="save", form=_form_values(form))

        logger.info("Current repository size", size=self.catalog.count())
        return Redirect()

    def remove(self, form: Mapping) -> Union[ShelfPage, Redirect]:
        """
        Remove books from form values.

        A request with no criteria is logged and otherwise ignored.
        """
        try:
            request = self._parse(BookRemovalRequest, form)
        except ValidationError as e:
            logger.warning("Invalid removal request", errors=e.errors)
            return self._page(errors=_field_errors(e), form_name="remove", form=_form_values(form))

        if request.is_empty():
            logger.warning("Empty book removal request")
        elif not self.catalog.remove(request):
            logger.warning("Book not found", request=request.model_dump())

        return Redirect()

    def upload(self, filename: Optional[str], content: Union[bytes, BinaryIO]) -> Redirect:
        """
        Store an uploaded file.

        Uploads without a filename, or with a name the store cannot hold, are
        skipped with a warning.
        """
        if not filename:
            logger.warning("Upload without file name skipped")
            return Redirect()

        try:
            self.file_store.upload(filename, content)
        except MalformedNameError as e:
            logger.warning("Upload with invalid file name skipped", error=str(e))
        return Redirect()

    def download(self, name: Optional[str]) -> Path:
        """
        Locate a stored file for download.

        Raises:
            NotFoundError: If the file does not exist
            MalformedNameError: If the name cannot be resolved
        """
        logger.info("Download requested", name=name)
        return self.file_store.path_for(name or "")

    def _page(self, errors: List[FieldError], form_name: str, form: dict) -> ShelfPage:
        """Unfiltered shelf used whenever a request fails validation."""
        return ShelfPage(
            books=self.catalog.list_all(),
            files=self.file_store.list_all(),
            errors=errors,
            form_name=form_name,
            form=form
        )

    @staticmethod
    def _parse(model, data: Mapping):
        values = {key: data[key] for key in BOOK_FIELDS if key in data}
        try:
            return model(**values)
        except PydanticValidationError as e:
            raise ValidationError.from_pydantic(e) from e
