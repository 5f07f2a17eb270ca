from __future__ import annotations

"""Configuration loading utilities for parazip."""

from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any
import textwrap

try:
    import tomllib
except ModuleNotFoundError:  # pragma: no cover - Python <3.11 fallback
    import tomli as tomllib  # type: ignore

from .errors import ConfigError

__all__ = ["Options", "load_config", "write_default_config", "DEFAULT_CONFIG_TOML"]

READ_BUFFER_SIZE = 512 * 1024
WRITE_BUFFER_SIZE = 1024 * 1024
LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")

DEFAULT_CONFIG_TOML = textwrap.dedent(
    """
    [compress]
    # workers = 8
    compression_level = 6
    fail_fast = false
    read_buffer_size = 524288
    write_buffer_size = 1048576

    [extract]
    overwrite = true

    [logging]
    level = "WARNING"
    # file = "parazip.log"
    """
)


@dataclass(slots=True)
class Options:
    """Runtime options shared by compression and extraction."""

    workers: int | None = None
    compression_level: int = 6
    fail_fast: bool = False
    overwrite: bool = True
    read_buffer_size: int = READ_BUFFER_SIZE
    write_buffer_size: int = WRITE_BUFFER_SIZE
    log_level: str = "WARNING"
    log_file: str | None = None

    def merged(self, **overrides: Any) -> "Options":
        """Return a copy with every non-``None`` override applied."""
        known = {f.name for f in fields(self)}
        unknown = set(overrides) - known
        if unknown:
            raise ConfigError(f"unknown option(s): {', '.join(sorted(unknown))}")
        changes = {key: value for key, value in overrides.items() if value is not None}
        return _validated(replace(self, **changes))


def load_config(config_path: str | Path | None = None) -> Options:
    """Load options from ``config_path``.

    Only an explicitly given file is read; without one the built-in
    defaults are returned.
    """

    if config_path is None:
        return Options()

    path = Path(config_path).expanduser()
    if not path.is_file():
        raise ConfigError(f"config file not found: {path}")
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as error:
        raise ConfigError(f"cannot read config file {path}: {error}") from error
    return _config_from_toml(raw)


def _config_from_toml(content: str) -> Options:
    try:
        data = tomllib.loads(content)
    except tomllib.TOMLDecodeError as error:
        raise ConfigError(f"invalid TOML: {error}") from error

    compress = data.get("compress", {})
    extract = data.get("extract", {})
    logging_section = data.get("logging", {})

    defaults = Options()
    options = Options(
        workers=_int_or_none(compress.get("workers"), "compress.workers"),
        compression_level=_int(compress.get("compression_level", defaults.compression_level), "compress.compression_level"),
        fail_fast=_bool(compress.get("fail_fast", defaults.fail_fast), "compress.fail_fast"),
        overwrite=_bool(extract.get("overwrite", defaults.overwrite), "extract.overwrite"),
        read_buffer_size=_int(compress.get("read_buffer_size", defaults.read_buffer_size), "compress.read_buffer_size"),
        write_buffer_size=_int(compress.get("write_buffer_size", defaults.write_buffer_size), "compress.write_buffer_size"),
        log_level=str(logging_section.get("level", defaults.log_level)),
        log_file=_str_or_none(logging_section.get("file")),
    )
    return _validated(options)


def _validated(options: Options) -> Options:
    if not 0 <= options.compression_level <= 9:
        raise ConfigError(f"compression_level must be between 0 and 9, got {options.compression_level}")
    if options.workers is not None and options.workers < 1:
        raise ConfigError(f"workers must be at least 1, got {options.workers}")
    if options.read_buffer_size < 1 or options.write_buffer_size < 1:
        raise ConfigError("buffer sizes must be positive")
    level = options.log_level.upper()
    if level not in LOG_LEVELS:
        raise ConfigError(f"unknown log level: {options.log_level}")
    options.log_level = level
    return options


def _int(value: Any, key: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"{key} must be an integer, got {value!r}")
    return value


def _int_or_none(value: Any, key: str) -> int | None:
    if value is None:
        return None
    return _int(value, key)


def _bool(value: Any, key: str) -> bool:
    if not isinstance(value, bool):
        raise ConfigError(f"{key} must be true or false, got {value!r}")
    return value


def _str_or_none(value: Any) -> str | None:
    if value is None or value == "":
        return None
    return str(value)


def write_default_config(target_path: str | Path) -> Path:
    """Write the default configuration to ``target_path``.

    Creates parent directories if needed and returns the absolute path
    to the created file.
    """

    target = Path(target_path).expanduser()
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(DEFAULT_CONFIG_TOML, encoding="utf-8")
    return target.resolve()
