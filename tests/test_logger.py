from pathlib import Path

import click

from warroom.bridge import HostBridge
from warroom.config import Config
from warroom.utils.logger import Logger


def test_events_written_as_json_lines(tmp_path: Path) -> None:
    logger = Logger(tmp_path / "logs")

    logger.info("task_added", task_id="t-1")
    logger.warning("not_found", id="x")

    events = logger.read_events()
    assert [e["event"] for e in events] == ["task_added", "not_found"]
    assert events[0]["task_id"] == "t-1"
    assert events[1]["level"] == "warning"
    assert "timestamp" in events[0]


def test_level_threshold_drops_lower_events(tmp_path: Path) -> None:
    logger = Logger(tmp_path / "logs", level="warning")

    logger.debug("noise")
    logger.info("chatter")
    logger.error("save_failed")

    assert [e["event"] for e in logger.read_events()] == ["save_failed"]


def test_bridge_wires_store_and_logger_from_config(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("WARROOM_UNDO_WINDOW_SECONDS", "3")
    config = Config(tmp_path)

    bridge = HostBridge.from_config(config)
    manager = bridge.create_manager()
    manager.add_task("Hello")

    assert bridge.store.data_file == tmp_path / "data.json"
    assert manager.undo.window == 3.0
    assert [t.title for t in bridge.load().tasks] == ["Hello"]
    assert bridge.get_version() == "0.1.0"
    assert any(e["event"] == "task_added" for e in bridge.logger.read_events())


def test_bridge_open_storage_folder_uses_click_launch(tmp_path: Path, monkeypatch) -> None:
    launched = []
    monkeypatch.setattr(click, "launch", lambda target: launched.append(target) or 0)
    bridge = HostBridge.from_config(Config(tmp_path))

    assert bridge.open_storage_folder() == 0
    assert launched == [str(tmp_path)]


def test_write_recreates_removed_logs_dir(tmp_path: Path) -> None:
    logger = Logger(tmp_path / "logs")
    logger.logs_dir.rmdir()

    logger.info("task_added", task_id="t-1")

    assert [e["event"] for e in logger.read_events()] == ["task_added"]


def test_unwritable_logs_dir_is_ignored(tmp_path: Path) -> None:
    logger = Logger(tmp_path / "logs")
    logger.logs_dir.rmdir()
    logger.logs_dir.write_text("not a directory", encoding="utf-8")

    logger.error("save_failed", error="disk full")

    assert logger.read_events() == []
