"""
Directory-backed file store for shelf uploads.
"""

import errno
import io
import os
import tempfile
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO, List, Union

import structlog
from pydantic import BaseModel, Field

from utilities.exceptions import InvalidInputError, MalformedNameError, NotFoundError

logger = structlog.get_logger(__name__)

CHUNK_SIZE = 1024 * 1024
DEFAULT_NAME_MAX = 255


class StoredFileInfo(BaseModel):
    """Listing entry for a stored file."""
    name: str = Field(..., description="File name")
    size: int = Field(..., ge=0, description="Content length in bytes")


class StoredFile(BaseModel):
    """A stored file with its content."""
    name: str = Field(..., description="File name")
    content: bytes = Field(..., description="File content")


class FileStore:
    """
    Stores uploaded files as plain files inside one directory.

    File names are flat: a name must resolve to a file directly inside the
    upload directory. Uploading an existing name replaces its content.
    """

    def __init__(self, root_dir: Union[str, Path]):
        self.root_dir = Path(root_dir).resolve()
        self.root_dir.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()
        logger.info("File store ready", root_dir=str(self.root_dir))

    def list_all(self) -> List[StoredFileInfo]:
        """Get all stored files sorted by name."""
        with self._lock:
            entries = [
                StoredFileInfo(name=path.name, size=path.stat().st_size)
                for path in self.root_dir.iterdir()
                if not path.name.startswith(".") and path.is_file()
            ]
        return sorted(entries, key=lambda entry: entry.name)

    def upload(self, name: str, content: Union[bytes, BinaryIO]) -> StoredFileInfo:
        """
        Store content under a name.

        Content is copied to a temporary file in chunks and then renamed into
        place, so readers see either the old file or the new one.

        Args:
            name: File name, without any directory part
            content: File content, as bytes or a readable binary stream

        Returns:
            Listing entry for the stored file

        Raises:
            InvalidInputError: If the name is empty
            MalformedNameError: If the name is not a plain file name
        """
        if not name:
            raise InvalidInputError("File name must not be empty")

        target = self._resolve(name)
        source = io.BytesIO(content) if isinstance(content, (bytes, bytearray)) else content

        fd, tmp_path = tempfile.mkstemp(dir=self.root_dir, prefix=".upload-")
        try:
            size = 0
            with os.fdopen(fd, "wb") as out:
                while True:
                    chunk = source.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    out.write(chunk)
                    size += len(chunk)
            with self._lock, _name_errors(name):
                os.replace(tmp_path, target)
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise

        logger.info("File uploaded", name=name, size=size)
        return StoredFileInfo(name=name, size=size)

    def path_for(self, name: str) -> Path:
        """
        Locate a stored file on disk.

        Raises:
            NotFoundError: If no file has this name
            MalformedNameError: If the name is not a plain file name
        """
        target = self._resolve(name)

        with self._lock, _name_errors(name):
            if not target.is_file():
                raise NotFoundError(f"File '{name}' not found")
        return target

    def load(self, name: str) -> StoredFile:
        """
        Read a stored file.

        Raises:
            NotFoundError: If no file has this name
            MalformedNameError: If the name is not a plain file name
        """
        target = self.path_for(name)

        try:
            content = target.read_bytes()
        except FileNotFoundError:
            raise NotFoundError(f"File '{name}' not found")

        logger.debug("File loaded", name=name, size=len(content))
        return StoredFile(name=target.name, content=content)

    def _resolve(self, name: str) -> Path:
        """Map a file name to its path inside the upload directory."""
        if not name or name in (".", "..") or name.startswith("."):
            raise MalformedNameError(f"Invalid file name: {name!r}")
        if "/" in name or "\\" in name or any(ord(ch) < 0x20 or ord(ch) == 0x7f for ch in name):
            raise MalformedNameError(f"Invalid file name: {name!r}")
        if len(name.encode("utf-8", "surrogateescape")) > self._name_max:
            raise MalformedNameError(f"File name too long: {len(name)} characters")

        target = self.root_dir / name
        if target.parent != self.root_dir:
            raise MalformedNameError(f"Invalid file name: {name!r}")
        return target

    @property
    def _name_max(self) -> int:
        try:
            return os.pathconf(self.root_dir, "PC_NAME_MAX")
        except (AttributeError, OSError, ValueError):
            return DEFAULT_NAME_MAX


@contextmanager
def _name_errors(name: str):
    """Report names the filesystem cannot represent as malformed."""
    try:
        yield
    except OSError as e:
        if e.errno in (errno.ENAMETOOLONG, errno.EINVAL):
            raise MalformedNameError(f"Invalid file name: {name!r}") from e
        raise
