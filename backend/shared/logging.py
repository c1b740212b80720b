"""Structured logging for tally, built on structlog over stdlib logging.

Environment variables:
- LOG_FORMAT: "json" renders one JSON object per line; "console" or unset
  renders key=value lines.
- LOG_LEVEL: "DEBUG", "INFO" (default), "WARNING", "ERROR" or "CRITICAL".
  A `level` passed to setup_logging takes precedence.

Events always go to stderr, keeping stdout for command output.
"""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from collections.abc import MutableMapping
    from typing import Any

LOG_FILE_TIMESTAMP_FORMAT = "%Y-%m-%d_%H-%M-%S"

_LOG_FORMATS = ("json", "console", "")
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class _LogConfig:
    json_mode: bool
    level: int

    @classmethod
    def resolve(cls, level: int | None) -> _LogConfig:
        """Read LOG_FORMAT and LOG_LEVEL; raise ValueError on unknown values."""
        log_format = os.environ.get("LOG_FORMAT", "").lower()
        if log_format not in _LOG_FORMATS:
            msg = f"Invalid LOG_FORMAT={log_format!r}. Must be 'json', 'console', or unset."
            raise ValueError(msg)
        if level is None:
            name = os.environ.get("LOG_LEVEL", "INFO").upper()
            if name not in _LOG_LEVELS:
                msg = f"Invalid LOG_LEVEL={name!r}. Must be one of {', '.join(_LOG_LEVELS)}."
                raise ValueError(msg)
            level = logging.getLevelName(name)
        return cls(json_mode=log_format == "json", level=level)


def _serialize_enums(
    _logger: object,
    _method_name: str,
    event_dict: MutableMapping[str, Any],
) -> MutableMapping[str, Any]:
    """Render Enum values (e.g. feedback kinds) by their .value."""
    for key, value in event_dict.items():
        if isinstance(value, Enum):
            event_dict[key] = value.value
    return event_dict


def _is_test() -> bool:
    return "pytest" in sys.modules


def configure_structlog() -> None:
    """Send structlog events through stdlib logging handlers.

    Exceptions are formatted by the handler's ProcessorFormatter, not here.
    """
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            _serialize_enums,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.UnicodeDecoder(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )


def _formatter(config: _LogConfig, *, colors: bool) -> logging.Formatter:
    renderer: Any
    if config.json_mode:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=colors)
    return structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.format_exc_info,
            renderer,
        ],
    )


def _open_log_file(log_dir: Path | str, config: _LogConfig) -> tuple[logging.Handler, Path]:
    directory = Path(log_dir).expanduser()
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / f"{datetime.now(tz=UTC).strftime(LOG_FILE_TIMESTAMP_FORMAT)}.log"
    handler = logging.FileHandler(path)
    handler.setFormatter(_formatter(config, colors=False))
    return handler, path


def setup_logging(
    log_dir: Path | str | None = None,
    level: int | None = None,
) -> Path | None:
    """Route structlog events to stderr and, optionally, a log file.

    Replaces any handlers already on the root logger, so repeated calls are
    safe. With `log_dir`, events are also written to a new timestamped file
    in that directory and its path is returned. No file is opened under
    pytest.
    """
    config = _LogConfig.resolve(level)
    configure_structlog()

    root = logging.getLogger()
    root.setLevel(config.level)
    root.handlers.clear()

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setFormatter(_formatter(config, colors=sys.stderr.isatty()))
    root.addHandler(stderr_handler)

    if log_dir is None or _is_test():
        return None
    file_handler, path = _open_log_file(log_dir, config)
    root.addHandler(file_handler)
    return path
