import json
from pathlib import Path

from warroom.state.models import DEFAULT_SETTINGS, Document, Mission, Task
from warroom.state.persistence import DocumentStore


def test_load_missing_file_creates_default(store: DocumentStore, data_file: Path) -> None:
    assert not data_file.exists()

    document = store.load()

    assert document.tasks == []
    assert document.missions == []
    assert document.settings == DEFAULT_SETTINGS
    on_disk = json.loads(data_file.read_text(encoding="utf-8"))
    assert on_disk == {"tasks": [], "missions": [], "settings": DEFAULT_SETTINGS}


def test_save_then_load_round_trip(store: DocumentStore) -> None:
    mission = Mission(id="m-1", title="Alpha", is_manually_completed=True, created_at=5, updated_at=9)
    document = Document(
        tasks=[
            Task(id="t-1", title="T1", is_done=True, mission_id="m-1", created_at=1, updated_at=2),
            Task(id="t-2", title="T2", created_at=3, updated_at=3),
        ],
        missions=[mission],
        settings={"theme": "light", "visibilityMode": "focus"},
    )

    result = store.save(document)

    assert result.success
    assert result.error is None
    loaded = store.load()
    assert loaded == document
    assert [task.id for task in loaded.tasks] == ["t-1", "t-2"]
    assert loaded.settings["theme"] == "light"
    assert loaded.settings["showCompletedTasks"] is True


def test_persisted_field_names(store: DocumentStore, data_file: Path) -> None:
    store.save(Document(tasks=[Task(id="t-1", title="T1", created_at=1, updated_at=1)]))

    raw = json.loads(data_file.read_text(encoding="utf-8"))

    assert raw["tasks"][0] == {
        "id": "t-1",
        "title": "T1",
        "isDone": False,
        "missionId": None,
        "createdAt": 1,
        "updatedAt": 1,
    }
    assert "  " in data_file.read_text(encoding="utf-8")


def test_corrupt_file_is_replaced_with_defaults(store: DocumentStore, data_file: Path, logger) -> None:
    data_file.parent.mkdir(parents=True, exist_ok=True)
    data_file.write_text("{not json", encoding="utf-8")

    document = store.load()

    assert document == Document.default()
    assert json.loads(data_file.read_text(encoding="utf-8"))["tasks"] == []
    events = [entry["event"] for entry in logger.read_events()]
    assert "storage_reset" in events


def test_non_object_document_counts_as_corrupt(store: DocumentStore, data_file: Path) -> None:
    data_file.parent.mkdir(parents=True, exist_ok=True)
    data_file.write_text("[1, 2, 3]", encoding="utf-8")

    assert store.load() == Document.default()


def test_missing_optional_fields_get_defaults(store: DocumentStore, data_file: Path) -> None:
    data_file.parent.mkdir(parents=True, exist_ok=True)
    data_file.write_text(
        json.dumps(
            {
                "tasks": [{"id": "t-1", "title": "Bare"}, {"title": "no id"}, "junk"],
                "missions": [{"id": "m-1", "title": "Alpha", "createdAt": 42}],
            }
        ),
        encoding="utf-8",
    )

    document = store.load()

    assert len(document.tasks) == 1
    task = document.tasks[0]
    assert task.is_done is False
    assert task.mission_id is None
    assert task.updated_at == task.created_at
    mission = document.missions[0]
    assert mission.is_manually_completed is False
    assert mission.created_at == 42
    assert mission.updated_at == 42
    assert document.settings == DEFAULT_SETTINGS


def test_save_failure_is_reported(tmp_path: Path, logger) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("a file, not a directory", encoding="utf-8")
    store = DocumentStore(blocker / "data.json", logger=logger)

    result = store.save(Document.default())

    assert result.success is False
    assert result.error
    assert any(entry["event"] == "save_failed" for entry in logger.read_events())


def test_backup_copies_data_file(store: DocumentStore, data_file: Path) -> None:
    store.load()

    first = store.backup()
    second = store.backup()

    assert first.success and second.success
    assert first.file != second.file
    assert first.file.parent == data_file.parent / "backups"
    assert json.loads(first.file.read_text(encoding="utf-8")) == json.loads(data_file.read_text(encoding="utf-8"))


def test_backup_without_data_file_returns_failure(store: DocumentStore) -> None:
    result = store.backup()

    assert result.success is False
    assert result.file is None
    assert result.error


def test_load_accepts_only_real_booleans(store: DocumentStore, data_file: Path) -> None:
    data_file.parent.mkdir(parents=True, exist_ok=True)
    data_file.write_text(
        json.dumps(
            {
                "tasks": [
                    {"id": "t-1", "title": "Quoted", "isDone": "false"},
                    {"id": "t-2", "title": "Numeric", "isDone": 1},
                    {"id": "t-3", "title": "Real", "isDone": True},
                ],
                "missions": [{"id": "m-1", "title": "Alpha", "isManuallyCompleted": "true"}],
            }
        ),
        encoding="utf-8",
    )

    document = store.load()

    assert [task.is_done for task in document.tasks] == [False, False, True]
    assert document.missions[0].is_manually_completed is False
