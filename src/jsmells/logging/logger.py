"""JSONL run logger for analysis events."""

import json
import time
from contextlib import contextmanager
from datetime import UTC, datetime
from pathlib import Path


class RunLogger:
    """Append-only JSONL event log, one file per day."""

    def __init__(self, log_dir: Path) -> None:
        self.log_dir = log_dir
        self.log_dir.mkdir(parents=True, exist_ok=True)

    @property
    def _log_file(self) -> Path:
        """Current log file (one per day)."""
        today = datetime.now(UTC).strftime("%Y-%m-%d")
        return self.log_dir / f"jsmells-{today}.jsonl"

    def log(
        self,
        event_type: str,
        data: dict,
        *,
        file_path: str | None = None,
        duration_ms: int | None = None,
    ) -> None:
        """Append one event. Write failures propagate."""
        entry = {
            "event_type": event_type,
            "data": data,
            "file_path": file_path,
            "duration_ms": duration_ms,
            "timestamp": datetime.now(UTC).isoformat(),
        }
        with self._log_file.open("a") as f:
            f.write(json.dumps(entry) + "\n")

    @contextmanager
    def timed(self, event_type: str, **kwargs):
        """Context manager that auto-captures duration and status.

        The yielded dict is logged as the event data, so callers can add
        counters to it before the block exits.
        """
        context = {"status": "started"}
        start = time.monotonic()
        try:
            yield context
            context["status"] = "success"
        except Exception as e:
            context["status"] = "error"
            context["error"] = str(e)
            raise
        finally:
            duration_ms = int((time.monotonic() - start) * 1000)
            self.log(event_type, context, duration_ms=duration_ms, **kwargs)
