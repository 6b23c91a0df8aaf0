from __future__ import annotations
from pathlib import Path
import json, logging, time
from typing import Any

from sentclf.errors import FileError

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(module)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class RunLogger:
    """Logging context for one process run.

    Created once at start-up and handed to the components that log. Text lines
    are appended to ``log_file``; structured events go to ``events_file`` as
    JSON lines. Use as a context manager so handlers are flushed and closed on exit.
    """

    def __init__(self, run_id: str, log_file: str | Path = "log/log.log",
                 events_file: str | Path | None = "log/events.jsonl", level: str = "INFO"):
        self.run_id = run_id
        self.log_file = Path(log_file)
        self.events_file = Path(events_file) if events_file else None
        try:
            self.log_file.parent.mkdir(parents=True, exist_ok=True)
            if self.events_file: self.events_file.parent.mkdir(parents=True, exist_ok=True)
            self._handler = logging.FileHandler(self.log_file, mode="a", encoding="utf-8")
        except OSError as e:
            raise FileError(f"cannot open log file {self.log_file}: {e}") from e
        self._handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        self.logger = logging.getLogger(f"sentclf.{run_id}")
        self.logger.setLevel(level.upper())
        self.logger.propagate = False
        self.logger.addHandler(self._handler)

    def info(self, msg: str, *args):
        self.logger.info(msg, *args, stacklevel=2)

    def error(self, msg: str, *args):
        self.logger.error(msg, *args, stacklevel=2)

    def event(self, name: str, **fields: Any):
        if self.events_file is None: return
        row = {"ts": int(time.time()), "run_id": self.run_id, "event": name, **fields}
        with open(self.events_file, "a", encoding="utf-8") as f:
            f.write(json.dumps(row, ensure_ascii=False) + "\n")

    def close(self):
        self._handler.flush(); self._handler.close()
        self.logger.removeHandler(self._handler)

    def __enter__(self) -> "RunLogger":
        return self

    def __exit__(self, *exc):
        self.close()
        return False

