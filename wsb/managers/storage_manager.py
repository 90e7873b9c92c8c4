"""
Storage manager for the WSB tracker.

Handles loading and saving of the project file in the .wsb/ directory.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import ValidationError as PydanticValidationError

from wsb.constants import DEFAULT_WSB_DIR, STORE_FORMAT_VERSION, get_store_file_name
from wsb.exceptions import StorageError, WsbError
from wsb.models.files import StoreFile
from wsb.models.store import TaskStore

logger = logging.getLogger(__name__)


class StorageManager:
    """
    Manages persistence of the task store to a JSON file in the .wsb/ directory.

    Handles atomic writes to prevent data corruption.
    """

    def __init__(self, wsb_dir: Optional[Path] = None) -> None:
        """
        Initialize the StorageManager with a .wsb/ directory path.

        Args:
            wsb_dir: Path to the .wsb/ directory. Defaults to .wsb/ in current directory.
        """
        self.wsb_dir = wsb_dir if wsb_dir else Path(DEFAULT_WSB_DIR)
        self.store_path = self.wsb_dir / get_store_file_name()

    def _ensure_wsb_dir(self) -> None:
        """Create the .wsb/ directory if it doesn't exist."""
        self.wsb_dir.mkdir(parents=True, exist_ok=True)

    def _atomic_write(self, file_path: Path, data: Dict[str, Any]) -> None:
        """Write data to a JSON file atomically to prevent corruption.

        Args:
            file_path: Path to the file to write.
            data: Dictionary data to write as JSON.

        Raises:
            StorageError: If writing to file fails.
        """
        temp_fd, temp_path = tempfile.mkstemp(
            dir=self.wsb_dir, prefix=".tmp_wsb_", suffix=".json"
        )

        try:
            with os.fdopen(temp_fd, "w", encoding="utf-8") as temp_file:
                json.dump(data, temp_file, indent=2, ensure_ascii=False)
            os.replace(temp_path, file_path)
        except Exception as e:
            try:
                os.unlink(temp_path)
            except OSError:
                pass
            raise StorageError(f"Failed to write to {file_path}: {e}")

    def exists(self) -> bool:
        """Whether a project file has been written."""
        return self.store_path.exists()

    def load(self) -> TaskStore:
        """Load the project file and rebuild the task store.

        Raises:
            StorageError: If the file is missing, unreadable or inconsistent.
        """
        if not self.store_path.exists():
            raise StorageError(
                f"No project found at {self.store_path}. Run 'wsb init NAME' first."
            )

        try:
            with open(self.store_path, "r", encoding="utf-8") as f:
                data = json.load(f)
            store_file = StoreFile.model_validate(data)
        except (json.JSONDecodeError, UnicodeDecodeError, PydanticValidationError) as e:
            raise StorageError(f"Failed to load {self.store_path.name}: {e}")
        except OSError as e:
            raise StorageError(f"Failed to read {self.store_path}: {e}")

        if store_file.version != STORE_FORMAT_VERSION:
            raise StorageError(
                f"Unsupported project file version {store_file.version} "
                f"(expected {STORE_FORMAT_VERSION})."
            )

        try:
            store = TaskStore.from_dict(
                {task_id: record.model_dump(mode="json") for task_id, record in store_file.tasks.items()}
            )
        except WsbError as e:
            raise StorageError(f"Corrupt project file {self.store_path.name}: {e}")

        logger.debug("Loaded %d task(s) from %s", len(store), self.store_path)
        return store

    def save(self, store: TaskStore) -> None:
        """Save the task store to the project file."""
        self._ensure_wsb_dir()
        store_file = StoreFile(tasks=store.to_dict())
        self._atomic_write(self.store_path, store_file.model_dump(mode="json"))
        logger.debug("Saved %d task(s) to %s", len(store), self.store_path)
