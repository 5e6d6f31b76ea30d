"""Logging setup: readable log lines followed by structured extras as JSON."""

import json
import logging
import sys
from typing import Any

LOGGER_NAME = "aso_combos"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Attributes every LogRecord carries; anything else arrived through `extra=`.
_STANDARD_RECORD_ATTRS = frozenset(
    logging.LogRecord("", logging.INFO, "", 0, "", None, None).__dict__
) | {"message", "asctime", "taskName"}


def _json_default(value: Any) -> Any:
    to_dict = getattr(value, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    if isinstance(value, set | frozenset):
        return sorted(value)
    return str(value)


class JSONExtrasFormatter(logging.Formatter):
    """Render `time | LEVEL | logger | message {extras}`.

    Example:
        2026-01-15 10:30:45 | INFO     | aso_combos.services.combos.generation | Combo
        generation ceiling reached {"source": "title", "quota": 500}
    """

    def extras(self, record: logging.LogRecord) -> dict[str, Any]:
        return {
            key: value
            for key, value in record.__dict__.items()
            if key not in _STANDARD_RECORD_ATTRS and not key.startswith("_")
        }

    def format(self, record: logging.LogRecord) -> str:
        record.message = record.getMessage()
        line = (
            f"{self.formatTime(record, self.datefmt)} | {record.levelname:<8} | "
            f"{record.name} | {record.message}"
        )

        extras = self.extras(record)
        if extras:
            try:
                line = f"{line} {json.dumps(extras, default=_json_default, ensure_ascii=False)}"
            except (TypeError, ValueError):
                line = f"{line} {extras!r}"

        if record.exc_info and not record.exc_text:
            record.exc_text = self.formatException(record.exc_info)
        if record.exc_text:
            line = f"{line}\n{record.exc_text}"
        if record.stack_info:
            line = f"{line}\n{self.formatStack(record.stack_info)}"
        return line


def setup_logging(level: str = "INFO") -> None:
    """Attach a stdout handler to the package logger at the given level.

    Unknown level names fall back to INFO. Repeated calls only update the level.
    """
    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        resolved = logging.INFO

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(resolved)
    logger.propagate = False

    if logger.handlers:
        for existing in logger.handlers:
            existing.setLevel(resolved)
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(resolved)
    handler.setFormatter(JSONExtrasFormatter(datefmt=DATE_FORMAT))
    logger.addHandler(handler)
