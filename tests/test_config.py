"""Config loading/validation tests."""

import json
import logging
from pathlib import Path

from logroll.config import (
    DEFAULT_CONFIG,
    build_handler,
    build_rolling,
    load_config,
    resolve_log_path,
    save_config,
    validate_config,
)
from logroll.formatters import JsonLineFormatter


class TestDefaultConfig:
    def test_validates_clean(self) -> None:
        assert validate_config(DEFAULT_CONFIG) == []

    def test_go_layout_is_valid(self) -> None:
        assert validate_config({**DEFAULT_CONFIG, "pattern": "2006-01-02"}) == []


class TestValidation:
    def test_missing_file_path(self) -> None:
        errors = validate_config({**DEFAULT_CONFIG, "file_path": ""})
        assert any("file_path" in e for e in errors)

    def test_file_path_is_directory(self) -> None:
        errors = validate_config({**DEFAULT_CONFIG, "file_path": "logs/"})
        assert any("file_path" in e for e in errors)

    def test_pattern_without_time(self) -> None:
        errors = validate_config({**DEFAULT_CONFIG, "pattern": "static"})
        assert any("pattern" in e for e in errors)

    def test_week_pattern_rejected(self) -> None:
        errors = validate_config({**DEFAULT_CONFIG, "pattern": "%Y-W%W"})
        assert any("does not parse back" in e for e in errors)

    def test_yearless_pattern_accepted(self) -> None:
        assert validate_config({**DEFAULT_CONFIG, "pattern": "%m-%d"}) == []

    def test_max_rolls_type(self) -> None:
        assert any("max_rolls" in e for e in validate_config({**DEFAULT_CONFIG, "max_rolls": "7"}))
        assert any("max_rolls" in e for e in validate_config({**DEFAULT_CONFIG, "max_rolls": True}))

    def test_negative_max_rolls_allowed(self) -> None:
        assert validate_config({**DEFAULT_CONFIG, "max_rolls": -1}) == []

    def test_invalid_format(self) -> None:
        errors = validate_config({**DEFAULT_CONFIG, "format": "xml"})
        assert any("format" in e for e in errors)

    def test_unknown_encoding(self) -> None:
        errors = validate_config({**DEFAULT_CONFIG, "encoding": "klingon-8"})
        assert any("encoding" in e for e in errors)


class TestSaveLoadConfig:
    def test_save_and_load(self, tmp_path: Path) -> None:
        save_config({**DEFAULT_CONFIG, "max_rolls": 3}, tmp_path)
        assert (tmp_path / ".logroll" / "config.json").exists()
        assert load_config(tmp_path)["max_rolls"] == 3

    def test_found_from_subdirectory(self, tmp_path: Path) -> None:
        save_config({**DEFAULT_CONFIG, "pattern": "%Y-%m"}, tmp_path)
        sub = tmp_path / "a" / "b"
        sub.mkdir(parents=True)
        assert load_config(sub)["pattern"] == "%Y-%m"

    def test_partial_config_merged_with_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / ".logroll" / "config.json"
        path.parent.mkdir()
        path.write_text(json.dumps({"max_rolls": 2}))
        config = load_config(tmp_path)
        assert config["max_rolls"] == 2
        assert config["pattern"] == DEFAULT_CONFIG["pattern"]

    def test_corrupt_config_falls_back(self, tmp_path: Path, caplog) -> None:
        path = tmp_path / ".logroll" / "config.json"
        path.parent.mkdir()
        path.write_text("{broken")
        with caplog.at_level(logging.WARNING, logger="logroll.config"):
            config = load_config(tmp_path)
        assert config == DEFAULT_CONFIG
        assert "could not be loaded" in caplog.text

    def test_no_config_returns_defaults(self, tmp_path: Path) -> None:
        assert load_config(tmp_path) == DEFAULT_CONFIG


class TestBuild:
    def test_relative_path_resolved_against_base(self, tmp_path: Path) -> None:
        assert resolve_log_path(DEFAULT_CONFIG, tmp_path) == tmp_path / "logs" / "app.log"

    def test_absolute_path_kept(self, tmp_path: Path) -> None:
        config = {**DEFAULT_CONFIG, "file_path": str(tmp_path / "x.log")}
        assert resolve_log_path(config, Path("/elsewhere")) == tmp_path / "x.log"

    def test_build_rolling(self, tmp_path: Path) -> None:
        rolling = build_rolling({**DEFAULT_CONFIG, "max_rolls": 4}, tmp_path)
        assert rolling.file_name == "app.log"
        assert rolling.max_rolls == 4
        assert rolling.policy.pattern == "%Y-%m-%d"

    def test_text_handler(self, tmp_path: Path) -> None:
        handler = build_handler(DEFAULT_CONFIG, tmp_path)
        try:
            assert not isinstance(handler.formatter, JsonLineFormatter)
            assert handler.formatter._fmt == DEFAULT_CONFIG["text_format"]
        finally:
            handler.close()

    def test_json_handler(self, tmp_path: Path) -> None:
        handler = build_handler({**DEFAULT_CONFIG, "format": "json"}, tmp_path)
        try:
            assert isinstance(handler.formatter, JsonLineFormatter)
        finally:
            handler.close()
