"""Config loading, defaults, validation, and handler construction."""

from __future__ import annotations

import codecs
import logging
from pathlib import Path

from logroll.formatters import JsonLineFormatter
from logroll.handler import TimedRollingFileHandler
from logroll.policy import TimeBucketPolicy
from logroll.rolling import RollingFile
from logroll.utils import deep_merge, load_json, save_json

logger = logging.getLogger(__name__)

CONFIG_DIR = ".logroll"
CONFIG_FILE = "config.json"

VALID_FORMATS = {"text", "json"}

DEFAULT_CONFIG: dict = {
    "version": 1,
    "file_path": "logs/app.log",
    "pattern": "%Y-%m-%d",
    "max_rolls": 7,
    "encoding": "utf-8",
    "format": "text",
    "text_format": "%(asctime)s %(levelname)s %(name)s %(message)s",
}


def get_config_path(start_dir: Path | None = None) -> Path:
    """Find .logroll/config.json by walking up from start_dir."""
    search = start_dir or Path.cwd()
    for d in [search, *search.parents]:
        candidate = d / CONFIG_DIR / CONFIG_FILE
        if candidate.exists():
            return candidate
    return (start_dir or Path.cwd()) / CONFIG_DIR / CONFIG_FILE


def load_config(start_dir: Path | None = None) -> dict:
    """Load config from .logroll/config.json, merged with defaults."""
    config_path = get_config_path(start_dir)
    if config_path.exists():
        user_config = load_json(config_path)
        if not user_config:
            logger.warning(
                "Config file exists but could not be loaded (corrupt?): %s "
                "Using defaults.", config_path
            )
        return deep_merge(DEFAULT_CONFIG, user_config)
    return DEFAULT_CONFIG.copy()


def save_config(config: dict, target_dir: Path | None = None) -> Path:
    """Save config to .logroll/config.json."""
    target = target_dir or Path.cwd()
    config_path = target / CONFIG_DIR / CONFIG_FILE
    save_json(config_path, config)
    return config_path


def validate_config(config: dict) -> list[str]:
    """Validate config, returning list of error messages (empty if valid)."""
    errors = []
    file_path = config.get("file_path")
    if not isinstance(file_path, str) or not file_path.strip():
        errors.append("'file_path' must be a non-empty string")
    elif file_path.endswith(("/", "\\")):
        errors.append(f"'file_path' must name a file, got directory '{file_path}'")

    pattern = config.get("pattern")
    if not isinstance(pattern, str):
        errors.append(f"'pattern' must be a string, got {pattern!r}")
    else:
        try:
            TimeBucketPolicy("check", pattern)
        except ValueError as exc:
            errors.append(f"invalid 'pattern': {exc}")

    max_rolls = config.get("max_rolls")
    if isinstance(max_rolls, bool) or not isinstance(max_rolls, int):
        errors.append(f"'max_rolls' must be an integer, got {max_rolls!r}")

    fmt = config.get("format")
    if fmt not in VALID_FORMATS:
        errors.append(f"invalid format '{fmt}' (expected one of {sorted(VALID_FORMATS)})")

    encoding = config.get("encoding")
    try:
        codecs.lookup(encoding)
    except (LookupError, TypeError):
        errors.append(f"unknown encoding '{encoding}'")
    return errors


def resolve_log_path(config: dict, base_dir: Path | None = None) -> Path:
    """Absolute path of the active log file; relative paths hang off base_dir."""
    path = Path(config["file_path"])
    if not path.is_absolute():
        path = (base_dir or Path.cwd()) / path
    return path


def build_rolling(config: dict, base_dir: Path | None = None) -> RollingFile:
    """Create the rolling core (time-bucket policy) described by config."""
    path = resolve_log_path(config, base_dir)
    policy = TimeBucketPolicy(path.name, config["pattern"])
    return RollingFile(path, policy, max_rolls=config["max_rolls"], encoding=config["encoding"])


def build_handler(config: dict, base_dir: Path | None = None) -> TimedRollingFileHandler:
    """Create a TimedRollingFileHandler from a validated config."""
    handler = TimedRollingFileHandler.from_rolling_file(build_rolling(config, base_dir))
    if config["format"] == "json":
        handler.setFormatter(JsonLineFormatter())
    else:
        handler.setFormatter(logging.Formatter(config["text_format"]))
    return handler
