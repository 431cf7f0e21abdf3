"""
File storage for uploads offered on the shelf page.
"""

from .file_store import FileStore, StoredFile, StoredFileInfo

__all__ = ["FileStore", "StoredFile", "StoredFileInfo"]
