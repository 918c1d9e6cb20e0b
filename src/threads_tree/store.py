"""Read-only access to the threads.json data file."""

import json
from pathlib import Path
from typing import Any

from loguru import logger

from threads_tree.config import BACKUP_FILE_NAME, DATA_FILE_NAME, resolve_data_directory
from threads_tree.core.importer.json_reader import parse_threads_data
from threads_tree.models.entity import ThreadsData


class JsonFileStore:
    """Load snapshots from a threads.json file, falling back to its backup.

    The store never writes: a missing file reads as empty data, and a
    corrupted file is replaced (in memory only) by its backup copy.
    """

    def __init__(self, data_file: str | Path | None = None, backup_file: str | Path | None = None) -> None:
        data_dir = resolve_data_directory()
        self.data_file = Path(data_file) if data_file else data_dir / DATA_FILE_NAME
        self.backup_file = (
            Path(backup_file) if backup_file else self.data_file.with_name(BACKUP_FILE_NAME)
        )
        logger.debug("Store ready: data {}, backup {}", self.data_file, self.backup_file)

    def _read_json(self, path: Path) -> dict[str, Any]:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            msg = f"{path} does not contain a JSON object"
            raise ValueError(msg)
        return data

    def load(self) -> ThreadsData:
        """Read the data file and parse it into models.

        Raises:
            MalformedEntity: If a stored record has no id.
        """
        if not self.data_file.exists():
            logger.debug("Data file {} does not exist, starting empty", self.data_file)
            return ThreadsData()

        try:
            raw = self._read_json(self.data_file)
        except (OSError, ValueError):
            logger.warning("Cannot read {}, trying backup {}", self.data_file, self.backup_file)
            try:
                raw = self._read_json(self.backup_file)
            except (OSError, ValueError):
                logger.warning("Backup {} unusable as well, using empty data", self.backup_file)
                return ThreadsData()

        return parse_threads_data(raw)
