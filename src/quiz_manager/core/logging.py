"""Structured logging for quiz-manager commands."""

from __future__ import annotations

import json
import logging
import sys
import tempfile
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

__all__ = [
    "JsonLogFormatter",
    "configure_logger",
    "release_logger",
]

_FILE_MARKER = "_quiz_manager_file"
_CONSOLE_MARKER = "_quiz_manager_console"
_FALLBACK_DIRNAME = "quiz-manager-logs"


class JsonLogFormatter(logging.Formatter):
    """Render log records as one JSON object per line."""

    _RESERVED = frozenset(
        {
            "name",
            "msg",
            "args",
            "levelname",
            "levelno",
            "pathname",
            "filename",
            "module",
            "exc_info",
            "exc_text",
            "stack_info",
            "lineno",
            "funcName",
            "created",
            "msecs",
            "relativeCreated",
            "thread",
            "threadName",
            "processName",
            "process",
            "taskName",
            "message",
            "asctime",
        }
    )

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        extras = {
            key: _jsonable(value)
            for key, value in record.__dict__.items()
            if key not in self._RESERVED
        }
        if extras:
            payload["extra"] = extras
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        if record.stack_info:
            payload["stack"] = record.stack_info
        return json.dumps(payload, ensure_ascii=True)


def configure_logger(
    name: str,
    *,
    log_dir: Path,
    level: str = "INFO",
    verbose: bool = False,
    max_bytes: int = 2 * 1024 * 1024,
    backup_count: int = 3,
    filename: str | None = None,
) -> tuple[logging.Logger, Path]:
    """Return ``name``'s logger wired to a rotating JSON file.

    Calling this again for the same logger reuses the managed handlers, so
    repeated shell launches inside one process do not duplicate output.
    With ``verbose`` the file captures DEBUG records and a plain-text stderr
    handler is attached as well.
    """

    logger = logging.getLogger(name)
    logger.propagate = False
    logger.setLevel(logging.DEBUG)

    file_level = logging.DEBUG if verbose else _level_from_name(level)

    log_name = filename or f"{name.rsplit('.', 1)[-1]}.log"
    target = _touch_log_file(_usable_dir(log_dir), log_name)

    handler, active = _attach_file_handler(
        logger,
        target,
        log_name=log_name,
        max_bytes=max_bytes,
        backup_count=backup_count,
    )
    handler.setLevel(file_level)

    if verbose:
        _attach_console_handler(logger)
    else:
        _detach_console_handler(logger)

    return logger, active


def release_logger(logger: logging.Logger) -> None:
    """Close and detach the handlers managed by :func:`configure_logger`."""

    for handler in list(logger.handlers):
        if getattr(handler, _FILE_MARKER, False) or getattr(
            handler, _CONSOLE_MARKER, False
        ):
            logger.removeHandler(handler)
            handler.close()


def _level_from_name(level: str) -> int:
    numeric = logging.getLevelName(level.strip().upper())
    if isinstance(numeric, int):
        return numeric
    return logging.INFO


def _attach_file_handler(
    logger: logging.Logger,
    path: Path,
    *,
    log_name: str,
    max_bytes: int,
    backup_count: int,
) -> tuple[RotatingFileHandler, Path]:
    for existing in logger.handlers:
        if getattr(existing, _FILE_MARKER, False):
            current = Path(existing.baseFilename)  # type: ignore[attr-defined]
            if current != path:
                logger.removeHandler(existing)
                existing.close()
                break
            return existing, path  # type: ignore[return-value]

    try:
        handler = RotatingFileHandler(
            path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
    except PermissionError:
        path = _touch_log_file(_usable_dir(_fallback_dir()), log_name)
        handler = RotatingFileHandler(
            path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
    handler.setFormatter(JsonLogFormatter())
    setattr(handler, _FILE_MARKER, True)
    logger.addHandler(handler)
    return handler, path


def _attach_console_handler(logger: logging.Logger) -> None:
    for handler in logger.handlers:
        if getattr(handler, _CONSOLE_MARKER, False):
            return
    console = logging.StreamHandler(stream=sys.stderr)
    console.setLevel(logging.DEBUG)
    console.setFormatter(logging.Formatter("%(levelname)s %(message)s"))
    setattr(console, _CONSOLE_MARKER, True)
    logger.addHandler(console)


def _detach_console_handler(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        if getattr(handler, _CONSOLE_MARKER, False):
            logger.removeHandler(handler)
            handler.close()


def _jsonable(value: Any) -> Any:
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, Path):
        return str(value)
    if isinstance(value, dict):
        return {str(key): _jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [_jsonable(item) for item in value]
    return repr(value)


def _usable_dir(log_dir: Path) -> Path:
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
    except PermissionError:
        log_dir = _fallback_dir()
        log_dir.mkdir(parents=True, exist_ok=True)
    try:
        log_dir.chmod(0o700)
    except PermissionError:  # pragma: no cover - depends on filesystem
        pass
    return log_dir


def _touch_log_file(log_dir: Path, filename: str) -> Path:
    path = log_dir / filename
    try:
        path.touch(exist_ok=True)
    except PermissionError:
        fallback = _fallback_dir()
        fallback.mkdir(parents=True, exist_ok=True)
        path = fallback / filename
        path.touch(exist_ok=True)
    try:
        path.chmod(0o600)
    except PermissionError:  # pragma: no cover - depends on filesystem
        pass
    return path


def _fallback_dir() -> Path:
    return Path(tempfile.gettempdir()) / _FALLBACK_DIRNAME
