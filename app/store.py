import json
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, List

from loguru import logger

from .exceptions import PersistenceError


class ContactStore:
    """
    Whole-document JSON storage for the contact collection.

    The file holds a single array of contact objects in append order:
    [{"id": "...", "firstName": "...", "lastName": "...", "phone": "..."}]
    """

    def __init__(self, path):
        self.path = Path(path)

    def load_all(self) -> List[Dict[str, Any]]:
        """
        Read every stored contact.

        A missing or unreadable document counts as an empty collection.
        Other I/O errors (permissions, path is a directory) propagate.

        :return: List of contact records in append order
        """
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            logger.debug(f"No contacts file at {self.path}, starting empty")
            return []
        except ValueError as e:
            # JSONDecodeError and UnicodeDecodeError are both ValueErrors
            logger.warning(f"Ignoring malformed contacts file {self.path}: {e}")
            return []

        if not isinstance(data, list):
            logger.warning(f"Ignoring contacts file {self.path}: expected a JSON array")
            return []

        logger.debug(f"Loaded {len(data)} contacts from {self.path}")
        return data

    def save_all(self, contacts: List[Dict[str, Any]]) -> None:
        """
        Overwrite the document with the full collection.

        Written to a temporary file first and moved into place, so readers
        see either the old or the new collection, never a partial one.

        :param contacts: Full contact collection
        :raises PersistenceError: When the collection could not be written
        """
        contacts = list(contacts)
        tmp_path = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            payload = json.dumps(contacts, indent=2, ensure_ascii=False)
            fd, tmp_path = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, self.path)
            tmp_path = None
        except (OSError, TypeError, ValueError) as e:
            raise PersistenceError(f"Could not write contacts to {self.path}: {e}") from e
        finally:
            if tmp_path is not None and os.path.exists(tmp_path):
                os.remove(tmp_path)

        logger.info(f"Saved {len(contacts)} contacts to {self.path}")
