"""
Logging setup.

Modules log through ``logging.getLogger(__name__)``; this module only
decides where records go and how they look. Call ``configure_logging``
once per process (the API lifespan and run_api.py do).
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Optional, TextIO

TEXT_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


class JSONFormatter(logging.Formatter):
    """Formats log records as one JSON object per line."""

    _STANDARD_ATTRS: frozenset[str] = frozenset(
        logging.LogRecord(
            name="", level=0, pathname="", lineno=0, msg="", args=(), exc_info=None
        ).__dict__.keys()
    ) | {"message", "asctime"}

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "logger_name": record.name,
            "message": record.getMessage(),
        }

        # Fields passed via ``extra=`` end up as record attributes.
        extra_fields = {
            key: str(value)
            for key, value in record.__dict__.items()
            if key not in self._STANDARD_ATTRS
        }
        if extra_fields:
            entry["extra"] = extra_fields

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, ensure_ascii=False)


def configure_logging(
    level: str = "INFO",
    json_format: bool = False,
    stream: Optional[TextIO] = None,
) -> logging.Handler:
    """
    Install a single stream handler on the root logger.

    Re-running replaces the handler installed by a previous call, so the
    app factory can be invoked repeatedly (tests) without duplicating output.

    Returns:
        The installed handler
    """
    root = logging.getLogger()
    for existing in list(root.handlers):
        if getattr(existing, "_module_hub_handler", False):
            root.removeHandler(existing)

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(JSONFormatter() if json_format else logging.Formatter(TEXT_FORMAT))
    handler._module_hub_handler = True  # type: ignore[attr-defined]

    root.addHandler(handler)
    root.setLevel(level.upper())
    return handler
