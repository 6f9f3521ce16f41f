from pathlib import Path

import pytest

from warroom.state.manager import StateManager
from warroom.state.persistence import DocumentStore
from warroom.utils.logger import Logger


class TickingClock:
    """Epoch-ms clock that advances by one on every read."""

    def __init__(self, start: int = 1_700_000_000_000) -> None:
        self.now = start

    def __call__(self) -> int:
        self.now += 1
        return self.now


class ManualClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self) -> None:
        self.now = 100.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def data_file(tmp_path: Path) -> Path:
    return tmp_path / "data" / "data.json"


@pytest.fixture
def logger(tmp_path: Path) -> Logger:
    return Logger(tmp_path / "logs", level="debug")


@pytest.fixture
def store(data_file: Path, logger: Logger) -> DocumentStore:
    return DocumentStore(data_file, logger=logger)


@pytest.fixture
def monotonic() -> ManualClock:
    return ManualClock()


@pytest.fixture
def manager(store: DocumentStore, logger: Logger, monotonic: ManualClock) -> StateManager:
    return StateManager(store, logger=logger, clock=TickingClock(), monotonic=monotonic)
