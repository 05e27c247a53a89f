"""
Logging configuration.
Call setup_logging() once at startup (CLI or web app).
"""

import json
import logging
import logging.handlers
from datetime import datetime, timezone
from typing import Optional

from config import settings


class JSONFormatter(logging.Formatter):
    """Structured JSON log lines"""

    EXTRA_KEYS = ("file_name", "rows", "items", "total", "route", "user")

    def format(self, record):
        entry = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
            "module": record.module,
            "line": record.lineno,
        }
        if record.exc_info and record.exc_info[0]:
            entry["exception"] = self.formatException(record.exc_info)
        for key in self.EXTRA_KEYS:
            if hasattr(record, key):
                entry[key] = getattr(record, key)
        return json.dumps(entry, default=str, ensure_ascii=False)


class HumanFormatter(logging.Formatter):
    """Readable console format"""

    def format(self, record):
        ts = datetime.now().strftime("%H:%M:%S")
        line = f"{ts} [{record.levelname[0]}] {record.name}: {record.getMessage()}"
        if record.exc_info and record.exc_info[0]:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


def setup_logging(level: Optional[str] = None, json_logs: Optional[bool] = None) -> None:
    """
    Configure the root logger

    Args:
        level: Override log level (default: settings.LOG_LEVEL)
        json_logs: Force JSON format (default: settings.LOG_JSON)
    """
    level = (level or settings.LOG_LEVEL).upper()
    if json_logs is None:
        json_logs = settings.LOG_JSON

    root = logging.getLogger()
    root.setLevel(getattr(logging, level, logging.INFO))
    root.handlers.clear()

    console = logging.StreamHandler()
    console.setFormatter(JSONFormatter() if json_logs else HumanFormatter())
    root.addHandler(console)

    log_path = settings.get_log_path()
    if log_path:
        fh = logging.handlers.RotatingFileHandler(
            log_path / "windesk.log",
            maxBytes=5_000_000,
            backupCount=5,
            encoding="utf-8",
        )
        fh.setFormatter(JSONFormatter())
        root.addHandler(fh)

    # Quiet noisy client libraries
    for name in ("httpx", "httpcore", "hpack"):
        logging.getLogger(name).setLevel(logging.WARNING)
