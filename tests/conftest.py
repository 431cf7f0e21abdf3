"""
Pytest configuration and shared fixtures.
"""

import os
import tempfile

# Keep the module-level app in api.main from writing into the working tree
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="book-shelf-tests-"))

import pytest
from fastapi.testclient import TestClient

from catalog.models import BookRecord
from catalog.service import BookCatalogService
from storage.file_store import FileStore


@pytest.fixture
def sample_books():
    """The three-book shelf used across tests."""
    return [
        BookRecord(author="Orwell", title="1984", size=10),
        BookRecord(author="Orwell", title="Animal Farm", size=5),
        BookRecord(author="Huxley", title="Brave New World", size=10),
    ]


@pytest.fixture
def catalog(sample_books):
    """Catalog seeded with the sample books (ids 1, 2, 3)."""
    return BookCatalogService(sample_books)


@pytest.fixture
def empty_catalog():
    return BookCatalogService()


@pytest.fixture
def file_store(tmp_path):
    """File store rooted in a fresh temporary directory."""
    return FileStore(tmp_path / "uploads")


@pytest.fixture
def app(catalog, file_store):
    """Application wired to the test catalog and file store."""
    from api.main import create_app
    return create_app(catalog=catalog, file_store=file_store)


@pytest.fixture
def client(app):
    """Create test client."""
    return TestClient(app)
