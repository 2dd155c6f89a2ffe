from __future__ import annotations
import json
import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional
from .settings import Settings

class _JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": self.formatTime(record, datefmt="%Y-%m-%dT%H:%M:%S%z"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)

def setup_logging(settings: Settings, logs_dir: Optional[Path] = None) -> None:
    log_file = settings.log_file or (logs_dir / "launcher.log" if logs_dir else None)

    root = logging.getLogger()
    root.handlers.clear()
    launcher_log = logging.getLogger("hytale.launcher")
    for h in list(launcher_log.handlers):
        launcher_log.removeHandler(h)
        h.close()
    root.setLevel(settings.log_level.upper())

    fmt = _JsonFormatter() if settings.log_json else logging.Formatter(
        fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    ch = logging.StreamHandler(sys.stderr)
    ch.setFormatter(fmt)
    root.addHandler(ch)

    if log_file:
        try:
            log_path = Path(log_file)
            log_path.parent.mkdir(parents=True, exist_ok=True)
            fh = RotatingFileHandler(log_path, maxBytes=5_000_000, backupCount=3, encoding="utf-8")
            fh.setLevel(settings.log_level.upper())
            fh.setFormatter(fmt)
            launcher_log.addHandler(fh)
        except OSError as e:
            root.warning("Could not open log file '%s' (%s), continuing with console logging only.", log_file, e)

def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
