from __future__ import annotations

import json
import logging
from pathlib import Path

from gutterdiff.core.markers.classifier import DiffAlgorithm
from gutterdiff.services.settings import ApplicationSettings, EngineSettings, SettingsManager


def test_missing_file_gives_defaults(tmp_path: Path) -> None:
    manager = SettingsManager(tmp_path / "settings.json")
    assert manager.settings == ApplicationSettings()


def test_save_and_load_roundtrip(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "settings.json"
    settings = ApplicationSettings()
    settings.engine.algorithm = DiffAlgorithm.EXACT
    settings.engine.max_lines = 50
    settings.colors.added_marker = "#00ff00"

    assert SettingsManager(path).save(settings)

    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["engine"]["algorithm"] == "EXACT"

    loaded = SettingsManager(path).load()
    assert loaded.engine.algorithm is DiffAlgorithm.EXACT
    assert loaded.engine.max_lines == 50
    assert loaded.colors.added_marker == "#00ff00"


def test_invalid_json_falls_back_to_defaults(tmp_path: Path, caplog) -> None:
    path = tmp_path / "settings.json"
    path.write_text("{not json", encoding="utf-8")

    with caplog.at_level(logging.WARNING):
        settings = SettingsManager(path).load()

    assert settings == ApplicationSettings()
    assert "Could not load settings" in caplog.text


def test_non_object_json_falls_back_to_defaults(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    path.write_text("[1, 2]", encoding="utf-8")
    assert SettingsManager(path).load() == ApplicationSettings()


def test_wrongly_typed_values_use_defaults(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({
        "engine": {"max_lines": "lots", "algorithm": "BOGUS", "max_cells": 10},
        "ui": "not a section",
    }), encoding="utf-8")

    settings = SettingsManager(path).load()

    assert settings.engine.max_lines == EngineSettings().max_lines
    assert settings.engine.algorithm is DiffAlgorithm.SCALABLE
    assert settings.engine.max_cells == 10
    assert settings.ui == ApplicationSettings().ui


def test_observers_notified_on_save(tmp_path: Path) -> None:
    manager = SettingsManager(tmp_path / "settings.json")
    seen = []
    manager.add_observer(seen.append)

    manager.reset()
    assert len(seen) == 1

    manager.remove_observer(seen.append)
    manager.save()
    assert len(seen) == 1


def test_engine_settings_build_options() -> None:
    engine = EngineSettings(algorithm=DiffAlgorithm.EXACT, max_lines=10, max_cells=99, max_text_chars=5)
    options = engine.to_marker_options()
    assert options.algorithm is DiffAlgorithm.EXACT
    assert options.limits.max_lines == 10
    assert options.limits.max_cells == 99
    assert options.max_text_chars == 5


def test_unknown_top_level_keys_are_dropped(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({
        "engine": {"max_lines": 12},
        "recent_files": ["/tmp/a.txt"],
    }), encoding="utf-8")

    manager = SettingsManager(path)
    assert manager.settings.engine.max_lines == 12
    assert not hasattr(manager.settings, "recent_files")

    assert manager.save()
    data = json.loads(path.read_text(encoding="utf-8"))
    assert set(data) == {"engine", "ui", "colors"}
