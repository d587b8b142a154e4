"""
Logging setup for the relay.

Plain text lines while developing, one JSON object per line everywhere else
so log shippers can parse them.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from relay.core.config import settings


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        data: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            data["exception"] = self.formatException(record.exc_info)
        return json.dumps(data, default=str)


DEV_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def setup_logging(level: str | None = None, env: str | None = None) -> None:
    level = (level or settings.LOG_LEVEL).upper()
    env = env or settings.ENV

    handler = logging.StreamHandler(sys.stdout)
    if env == "dev":
        handler.setFormatter(logging.Formatter(DEV_FORMAT))
    else:
        handler.setFormatter(JsonFormatter())

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)
