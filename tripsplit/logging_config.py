import json
import logging
from datetime import datetime, timezone

from tripsplit import config

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class JSONFormatter(logging.Formatter):
    def format(self, record):
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if hasattr(record, "extra_data"):
            log_entry.update(record.extra_data)
        if record.exc_info and record.exc_info[0]:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry)


class TripsplitHandler(logging.StreamHandler):
    """Stream handler installed by setup_logging()."""


def setup_logging(level: str | None = None, fmt: str | None = None):
    root_logger = logging.getLogger("tripsplit")

    # Repeated CLI invocations in one process must not stack handlers
    for existing in list(root_logger.handlers):
        if isinstance(existing, TripsplitHandler):
            root_logger.removeHandler(existing)

    handler = TripsplitHandler()
    if (fmt or config.LOG_FORMAT) == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))

    root_logger.addHandler(handler)
    root_logger.setLevel((level or config.LOG_LEVEL).upper())

    return root_logger
