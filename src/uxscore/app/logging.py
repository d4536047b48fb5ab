from __future__ import annotations

import json
import logging
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, Optional


# Questionnaire being scored, attached to every log record of a report.
_QUESTIONNAIRE: ContextVar[Optional[str]] = ContextVar("questionnaire", default=None)

# LogRecord attributes that are not user extras.
_RESERVED = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", None, None)).keys()
) | {"message", "asctime", "questionnaire"}


@contextmanager
def questionnaire_context(questionnaire: str) -> Iterator[None]:
    token = _QUESTIONNAIRE.set(questionnaire)
    try:
        yield
    finally:
        _QUESTIONNAIRE.reset(token)


class QuestionnaireFilter(logging.Filter):
    # Adds questionnaire to log records.
    def filter(self, record: logging.LogRecord) -> bool:
        record.questionnaire = _QUESTIONNAIRE.get()
        return True


class JsonFormatter(logging.Formatter):
    # One JSON object per line.
    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
            "questionnaire": getattr(record, "questionnaire", None),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)

        # Extras passed with extra={...}; non-serializable values are stringified.
        for key, value in record.__dict__.items():
            if key in _RESERVED:
                continue
            try:
                json.dumps(value, ensure_ascii=False)
                payload[key] = value
            except TypeError:
                payload[key] = str(value)

        return json.dumps(payload, ensure_ascii=False)


def setup_logging(level: str = "INFO", json_logs: bool = True) -> None:
    # Configure root logging once. Logs go to stderr so stdout stays a clean report.
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level.upper())

    handler = logging.StreamHandler(sys.stderr)
    handler.addFilter(QuestionnaireFilter())

    if json_logs:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            fmt="%(asctime)s %(levelname)s %(name)s questionnaire=%(questionnaire)s %(message)s"
        ))

    root.addHandler(handler)
