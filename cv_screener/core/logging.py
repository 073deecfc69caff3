"""
JSON logging with correlation fields.

Request handlers are tagged with `request_id`; background pipeline work runs
after the response, so it is tagged with `submission_id` instead.
"""
import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Dict, Iterator
from pythonjsonlogger import jsonlogger
from contextvars import ContextVar

request_id_var: ContextVar[str] = ContextVar("request_id", default="")
submission_id_var: ContextVar[str] = ContextVar("submission_id", default="")

# Library loggers that drown out pipeline lines at INFO
_QUIET_LOGGERS = {
    "uvicorn.access": logging.WARNING,
    "sqlalchemy.engine": logging.WARNING,
    "PyPDF2": logging.ERROR,
    "urllib3": logging.WARNING,
}


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super(CustomJsonFormatter, self).add_fields(log_record, record, message_dict)

        for key, var in (("request_id", request_id_var), ("submission_id", submission_id_var)):
            value = var.get()
            if value:
                log_record[key] = value

        if not log_record.get("timestamp"):
            log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname


@contextmanager
def submission_context(submission_id: str) -> Iterator[None]:
    """Tag every log line in this block (and this thread) with the submission id."""
    token = submission_id_var.set(submission_id)
    try:
        yield
    finally:
        submission_id_var.reset(token)


def setup_logging(level: str = "INFO"):
    root = logging.getLogger()
    root.setLevel(level.upper())
    # The app module may be imported more than once (tests, reloader)
    if any(isinstance(h.formatter, CustomJsonFormatter) for h in root.handlers):
        return
    handler = logging.StreamHandler()
    handler.setFormatter(CustomJsonFormatter("%(timestamp) %(level) %(name) %(message)"))
    root.addHandler(handler)

    for name, quiet_level in _QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(quiet_level)
