"""JSON logging for the broadcast API and worker.

Every record is written as one JSON object per line. Context passed with
``extra={...}`` becomes top-level keys. Push credentials never reach the
output: any extra key listed in ``REDACTED_FIELDS`` is masked.
"""

import json
import logging
import sys
from collections.abc import Iterable, Sequence
from datetime import datetime, timezone

REDACTED_FIELDS = frozenset({"p256dh", "auth", "endpoint", "vapid_private_key"})
REDACTED = "[redacted]"

# Attributes every LogRecord carries; anything else came from ``extra``.
_RECORD_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__.keys()
    | {"message", "asctime"}
)


class JsonFormatter(logging.Formatter):
    def __init__(self, redact: Iterable[str] = REDACTED_FIELDS) -> None:
        super().__init__()
        self._redact = frozenset(redact)

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, object] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        entry.update(
            (key, REDACTED if key in self._redact else value)
            for key, value in record.__dict__.items()
            if key not in _RECORD_ATTRS
        )

        if record.exc_info and record.exc_info[1]:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


def setup_logging(level: str = "INFO", suppress: Sequence[str] = ()) -> None:
    """Send JSON logs to stdout from the root logger.

    Args:
        level: Root level name; unknown names fall back to INFO.
        suppress: Chatty third-party loggers to raise to WARNING.
    """
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonFormatter())

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    for name in suppress:
        logging.getLogger(name).setLevel(logging.WARNING)
