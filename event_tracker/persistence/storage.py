"""Whole-document JSON file storage.

Every read loads the complete document and every write replaces it. Writes
go to a temporary file in the same directory which is then renamed over the
target, so readers see either the old or the new document, never a partial
one.
"""

import json
import os
import tempfile
import threading
from pathlib import Path
from typing import Any, Callable

from event_tracker.logging import get_logger

from .exceptions import PersistenceError, StoreCorruptedError

logger = get_logger(__name__, component="store")

# Serialises read-modify-write cycles on the data files within this process
store_lock = threading.RLock()


class JSONFileStore:
    """A single JSON document on disk.

    Attributes:
        path: Location of the file
    """

    def __init__(self, path: Path, default_factory: Callable[[], Any]) -> None:
        """
        Args:
            path: File location; parent directories are created on first write
            default_factory: Produces the document returned when the file does not exist
        """
        self.path = Path(path)
        self._default_factory = default_factory

    def exists(self) -> bool:
        return self.path.exists()

    def read(self) -> Any:
        """
        Load the whole document.

        Returns:
            Parsed JSON value, or the default when the file does not exist

        Raises:
            StoreCorruptedError: If the file is not valid JSON
            PersistenceError: If the file cannot be read
        """
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                return json.load(f)
        except FileNotFoundError:
            return self._default_factory()
        except json.JSONDecodeError as e:
            logger.error(
                f"Data file {self.path} is not valid JSON",
                extra={"event": "store.read.corrupted", "path": str(self.path), "error": str(e)},
            )
            raise StoreCorruptedError(f"{self.path} is not valid JSON: {e}") from e
        except OSError as e:
            raise PersistenceError(f"Failed to read {self.path}: {e}") from e

    def write(self, document: Any) -> None:
        """
        Replace the whole document atomically.

        Raises:
            PersistenceError: If the file cannot be written
        """
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(document, f, indent=2, ensure_ascii=False)
                    f.flush()
                    os.fsync(f.fileno())
                os.replace(tmp_name, self.path)
            except BaseException:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise
        except OSError as e:
            logger.error(
                f"Failed to write {self.path}: {e}",
                extra={"event": "store.write.failed", "path": str(self.path)},
                exc_info=True,
            )
            raise PersistenceError(f"Failed to write {self.path}: {e}") from e

        logger.debug(
            f"Wrote {self.path}",
            extra={"event": "store.write.completed", "path": str(self.path)},
        )
