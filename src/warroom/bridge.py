"""Boundary operations a UI shell needs from the host process."""

from __future__ import annotations

from typing import Optional

import click

from . import __version__
from .config import Config
from .state.manager import StateManager
from .state.models import Document
from .state.persistence import BackupResult, DocumentStore, Persistence, SaveResult
from .utils.logger import Logger


class HostBridge:
    """Load/save/backup plus a few host helpers, wired from config."""

    def __init__(self, store: DocumentStore, logger: Optional[Logger] = None, undo_window: float = 6.0) -> None:
        self.store = store
        self.logger = logger
        self.undo_window = undo_window

    @classmethod
    def from_config(cls, config: Config) -> "HostBridge":
        logger = Logger(config.logs_dir, level=config.log_level)
        store = DocumentStore(config.data_file, backups_dir=config.backups_dir, logger=logger)
        return cls(store, logger=logger, undo_window=config.undo_window)

    def load(self) -> Document:
        return self.store.load()

    def save(self, document: Document) -> SaveResult:
        return self.store.save(document)

    def backup(self) -> BackupResult:
        return self.store.backup()

    def open_storage_folder(self) -> int:
        """Open the folder holding the data file in the platform file browser."""
        folder = self.store.data_file.parent
        Persistence.ensure_dir(folder)
        return click.launch(str(folder))

    @staticmethod
    def get_version() -> str:
        return __version__

    def create_manager(self) -> StateManager:
        """Load the document and hand it to a fresh state manager."""
        return StateManager(
            self.store,
            document=self.load(),
            logger=self.logger,
            undo_window=self.undo_window,
        )
