import os
from pathlib import Path

from warroom.config import Config


def test_first_run_writes_default_config(tmp_path: Path, monkeypatch) -> None:
    for key in [k for k in os.environ if k.startswith("WARROOM_")]:
        monkeypatch.delenv(key)

    config = Config(tmp_path)

    assert (tmp_path / "config.toml").exists()
    assert config.data_dir == tmp_path
    assert config.data_file == tmp_path / "data.json"
    assert config.backups_dir == tmp_path / "backups"
    assert config.logs_dir == tmp_path / "logs"
    assert config.undo_window == 6.0
    assert config.title_max_length == 40
    assert config.default_mode == "overview"

    # The written file loads back to the same values.
    reloaded = Config(tmp_path)
    assert reloaded.config == config.config


def test_file_values_override_defaults(tmp_path: Path) -> None:
    data_dir = tmp_path / "elsewhere"
    (tmp_path / "config.toml").write_text(
        "\n".join(
            [
                "[storage]",
                f'data_dir = "{data_dir.as_posix()}"',
                'backups_dir = "snapshots"',
                "[undo]",
                "window_seconds = 10",
                "",
            ]
        ),
        encoding="utf-8",
    )

    config = Config(tmp_path)

    assert config.data_file == data_dir / "data.json"
    assert config.backups_dir == data_dir / "snapshots"
    assert config.undo_window == 10.0
    assert config.title_max_length == 40


def test_environment_overrides(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("WARROOM_UNDO_WINDOW_SECONDS", "2.5")
    monkeypatch.setenv("WARROOM_UI_DEFAULT_MODE", "FOCUS")

    config = Config(tmp_path)

    assert config.undo_window == 2.5
    assert config.default_mode == "focus"
    assert config.get("undo.window_seconds") == "2.5"


def test_get_with_missing_key_returns_default(tmp_path: Path) -> None:
    config = Config(tmp_path)

    assert config.get("nope.nothing", "fallback") == "fallback"
    config.set("ui.theme", "light")
    assert config.get("ui.theme") == "light"
