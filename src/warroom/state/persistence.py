"""JSON document storage for the tracker state."""

from __future__ import annotations

import json
import os
import shutil
import tempfile
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

from .models import Document
from ..utils.logger import Logger


class CorruptDocumentError(ValueError):
    """Raised when the data file cannot be parsed into a document."""


@dataclass
class SaveResult:
    success: bool
    error: Optional[str] = None


@dataclass
class BackupResult:
    success: bool
    file: Optional[Path] = None
    error: Optional[str] = None


class Persistence:
    """Handles atomic JSON file operations."""

    @staticmethod
    def read_json(file_path: Path) -> Dict[str, Any]:
        """Read a JSON object from file.

        Raises ``CorruptDocumentError`` if the content is not valid JSON or
        the top-level value is not an object.
        """
        try:
            data = json.loads(file_path.read_text(encoding="utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise CorruptDocumentError(f"{file_path}: {exc}") from exc
        if not isinstance(data, dict):
            raise CorruptDocumentError(f"{file_path}: expected an object, got {type(data).__name__}")
        return data

    @staticmethod
    def save_json(file_path: Path, data: Dict[str, Any]) -> None:
        """Atomically save JSON to file."""
        Persistence.ensure_dir(file_path.parent)
        tmp_fd, tmp_path = tempfile.mkstemp(dir=file_path.parent, suffix=".tmp")
        try:
            with os.fdopen(tmp_fd, "w", encoding="utf-8") as fp:
                json.dump(data, fp, indent=2)
                fp.flush()
                os.fsync(fp.fileno())
            shutil.move(tmp_path, file_path)
        finally:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)

    @staticmethod
    def ensure_dir(dir_path: Path) -> None:
        """Create directory if it doesn't exist."""
        dir_path.mkdir(parents=True, exist_ok=True)


class DocumentStore:
    """Loads and saves the whole document as a single JSON file."""

    def __init__(
        self,
        data_file: Path,
        backups_dir: Optional[Path] = None,
        logger: Optional[Logger] = None,
    ) -> None:
        self.data_file = data_file
        self.backups_dir = backups_dir or data_file.parent / "backups"
        self.logger = logger

    def load(self) -> Document:
        """Load the document, substituting defaults for a missing or corrupt file."""
        if not self.data_file.exists():
            document = Document.default()
            Persistence.save_json(self.data_file, document.to_dict())
            return document

        try:
            data = Persistence.read_json(self.data_file)
        except CorruptDocumentError as exc:
            if self.logger:
                self.logger.error("storage_reset", file=str(self.data_file), reason=str(exc))
            document = Document.default()
            Persistence.save_json(self.data_file, document.to_dict())
            return document

        return Document.from_dict(data)

    def save(self, document: Document) -> SaveResult:
        """Replace the data file with the serialized document."""
        try:
            Persistence.save_json(self.data_file, document.to_dict())
        except OSError as exc:
            if self.logger:
                self.logger.error("save_failed", file=str(self.data_file), reason=str(exc))
            return SaveResult(success=False, error=str(exc))
        return SaveResult(success=True)

    def backup(self) -> BackupResult:
        """Copy the data file into the backups directory under a timestamped name."""
        stamp = datetime.now().strftime("%Y%m%d-%H%M%S")
        target = self.backups_dir / f"{self.data_file.stem}-{stamp}.json"
        suffix = 1
        while target.exists():
            target = self.backups_dir / f"{self.data_file.stem}-{stamp}-{suffix}.json"
            suffix += 1
        try:
            Persistence.ensure_dir(self.backups_dir)
            shutil.copy2(self.data_file, target)
        except OSError as exc:
            if self.logger:
                self.logger.error("backup_failed", file=str(self.data_file), reason=str(exc))
            return BackupResult(success=False, error=str(exc))

        if self.logger:
            self.logger.info("backup_created", file=str(target))
        return BackupResult(success=True, file=target)
