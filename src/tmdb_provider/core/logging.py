"""
Structured logging helpers for the TMDB provider.

Loggers are obtained through :func:`get_logger` so every module shares the same
``key=value`` formatting. Provider code frequently attaches credentials to the
log context while configuring the client; any extra whose key is listed in
:data:`SENSITIVE_FIELDS` is masked by the formatter before it reaches a handler.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from copy import copy
from functools import lru_cache
from logging import Logger, LoggerAdapter
from typing import Any, Iterable, Mapping, MutableMapping, Optional, Sequence

DEFAULT_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
DEFAULT_LEVEL = "WARNING"
MASK = "***"
SENSITIVE_FIELDS = frozenset({"tmdb_apikey", "api_key", "key"})
_ENV_LEVEL = "TMDB_PROVIDER_LOG_LEVEL"
_ENV_COLOR = "TMDB_PROVIDER_LOG_COLOR"
_EXTRA_FOCUS_ORDER: Sequence[str] = (
    "phase",
    "step",
    "status",
    "success",
    "data_source",
    "type_name",
    "tags",
    "method",
    "url",
    "status_code",
    "attempt",
    "diagnostics",
)

_LEVEL_STYLES = {
    "DEBUG": "\033[36m",
    "INFO": "\033[32m",
    "WARNING": "\033[33m",
    "ERROR": "\033[31m",
    "CRITICAL": "\033[95m",
}
_RESET = "\033[0m"

_RESERVED_ATTRS = {
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
    "message",
    "asctime",
    "taskName",
}


def mask_secret(value: Optional[str]) -> str:
    """Return a printable stand-in for a secret value."""

    if not value:
        return ""
    return MASK


def _resolve_level(level: Optional[int | str]) -> int:
    if isinstance(level, int):
        return level
    candidate = (level or os.getenv(_ENV_LEVEL) or DEFAULT_LEVEL).upper()
    resolved = logging.getLevelName(candidate)
    return resolved if isinstance(resolved, int) else logging.WARNING


def _supports_color(stream: Any) -> bool:
    preference = (os.getenv(_ENV_COLOR) or "").strip().lower()
    if preference in {"1", "true", "yes", "on"}:
        return True
    if preference in {"0", "false", "no", "off"}:
        return False
    return hasattr(stream, "isatty") and bool(stream.isatty())


def _iter_extras(record: logging.LogRecord) -> Iterable[tuple[str, Any]]:
    payload = {key: value for key, value in record.__dict__.items() if key not in _RESERVED_ATTRS and not key.startswith("_") and value is not None}

    for key in _EXTRA_FOCUS_ORDER:
        if key in payload:
            yield key, payload.pop(key)

    for key in sorted(payload):
        yield key, payload[key]


def _format_extra_value(key: str, value: Any) -> str:
    if key in SENSITIVE_FIELDS:
        return mask_secret(str(value))
    if isinstance(value, (list, tuple, set)):
        return "[" + ", ".join(_format_extra_value("", item) for item in value) + "]"
    if isinstance(value, Mapping):
        masked = {k: (MASK if k in SENSITIVE_FIELDS else v) for k, v in value.items()}
        try:
            return json.dumps(masked, ensure_ascii=False, default=str)
        except TypeError:
            return repr(masked)
    return str(value)


class StructuredLogFormatter(logging.Formatter):
    """Formatter that appends masked structured extras and supports optional colour output."""

    def __init__(self, *, use_color: bool = False) -> None:
        super().__init__(DEFAULT_FORMAT, datefmt=DEFAULT_DATE_FORMAT)
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        working = copy(record)
        if self.use_color:
            working.levelname = self._colourise_level(working.levelname)
        base = super().format(working)
        extras = " ".join(f"{key}={_format_extra_value(key, value)}" for key, value in _iter_extras(record))
        if extras:
            return f"{base} | {extras}"
        return base

    @staticmethod
    def _colourise_level(levelname: str) -> str:
        style = _LEVEL_STYLES.get(levelname.strip().upper())
        if not style:
            return levelname
        return f"{style}{levelname}{_RESET}"


@lru_cache(maxsize=1)
def _base_logger_configured() -> bool:
    return False


def _build_handler(level: Optional[int | str]) -> logging.Handler:
    # stdout belongs to the host protocol / CLI output, diagnostics go to stderr
    handler = logging.StreamHandler(stream=sys.stderr)
    handler.setLevel(_resolve_level(level))
    handler.setFormatter(StructuredLogFormatter(use_color=_supports_color(handler.stream)))
    return handler


def configure_logging(level: Optional[int | str] = None, *, force: bool = False) -> None:
    """
    Configure root logging handlers unless already initialised.

    Parameters
    ----------
    level:
        Optional logging level override. Falls back to ``TMDB_PROVIDER_LOG_LEVEL`` or ``WARNING``.
    force:
        When ``True`` the configuration is reapplied even if previously initialised.
    """

    if not force and _base_logger_configured.cache_info().currsize:
        return
    handler = _build_handler(level)
    logging.basicConfig(level=_resolve_level(level), handlers=[handler], force=force)
    _base_logger_configured.cache_clear()
    _base_logger_configured()


def get_logger(
    name: str,
    *,
    level: Optional[int | str] = None,
    tags: Optional[Sequence[str]] = None,
    extra: Optional[Mapping[str, object]] = None,
) -> LoggerAdapter:
    """
    Return a configured :class:`logging.LoggerAdapter` instance.

    Parameters
    ----------
    name:
        Logger namespace, typically ``__name__``.
    level:
        Optional per-logger level override.
    tags:
        Optional observability tags attached to the ``extra`` payload.
    extra:
        Additional structured metadata recorded with each log entry.
    """

    configure_logging(level)
    base: Logger = logging.getLogger(name)
    if level is not None:
        base.setLevel(_resolve_level(level))
    payload: MutableMapping[str, object] = {}
    if tags:
        payload["tags"] = tuple(tags)
    if extra:
        payload.update({key: value for key, value in extra.items() if value is not None})
    return LoggerAdapter(base, payload)


def bind_tags(logger: LoggerAdapter, tags: Sequence[str]) -> LoggerAdapter:
    """Create a child logger with additional observability tags, leaving the original untouched."""

    current = dict(logger.extra) if isinstance(logger.extra, Mapping) else {}
    merged_tags = tuple(dict.fromkeys((*current.get("tags", ()), *tags)))
    new_extra = dict(current)
    new_extra["tags"] = merged_tags
    return LoggerAdapter(logger.logger, new_extra)


def bind_fields(logger: LoggerAdapter, **fields: object) -> LoggerAdapter:
    """Create a child logger carrying extra structured fields on every record."""

    current = dict(logger.extra) if isinstance(logger.extra, Mapping) else {}
    current.update({key: value for key, value in fields.items() if value is not None})
    return LoggerAdapter(logger.logger, current)


def log_progress(
    logger: LoggerAdapter | Logger,
    message: str,
    *,
    phase: Optional[str] = None,
    step: Optional[str] = None,
    status: Optional[str] = None,
    level: int = logging.INFO,
    extra: Optional[Mapping[str, object]] = None,
) -> None:
    """Emit a progress log with structured metadata describing the current step and outcome."""

    payload: MutableMapping[str, object] = {}
    if isinstance(logger, LoggerAdapter) and isinstance(logger.extra, Mapping):
        payload.update({key: value for key, value in logger.extra.items() if value is not None})
    if extra:
        payload.update(extra)
    if phase:
        payload["phase"] = phase
    if step:
        payload["step"] = step
    if status:
        payload["status"] = status
    target = logger.logger if isinstance(logger, LoggerAdapter) else logger
    if payload:
        target.log(level, message, extra=dict(payload))
    else:
        target.log(level, message)
