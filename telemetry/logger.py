from __future__ import annotations

import json
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional


def _now_iso() -> str:
    # Local wall-clock time, second resolution
    return time.strftime("%Y-%m-%dT%H:%M:%S", time.localtime())


@dataclass
class TelemetryLogger:
    """JSON-lines event sink for generation runs. Disabled until init()."""
    path: Optional[Path] = None
    enabled: bool = True
    flush_each_write: bool = False
    keep_in_memory: bool = False
    events: List[Dict[str, Any]] = field(default_factory=list)
    _started_at: float = field(default_factory=time.time)

    def init(self, path: Path) -> None:
        self.path = path
        self.path.parent.mkdir(parents=True, exist_ok=True)
        # Touch file (don't overwrite)
        self.path.touch(exist_ok=True)
        self.log("telemetry_init", file=str(self.path))

    def log(self, event: str, **fields: Any) -> None:
        if not self.enabled:
            return

        row: Dict[str, Any] = {
            "t": time.time(),
            "ts": _now_iso(),
            "event": event,
            **fields,
        }

        if self.keep_in_memory:
            self.events.append(row)

        if self.path is None:
            return

        try:
            with self.path.open("a", encoding="utf-8") as f:
                f.write(json.dumps(row, ensure_ascii=False, default=str) + "\n")
                if self.flush_each_write:
                    f.flush()
        except OSError:
            # Telemetry must never break generation.
            return

    def uptime(self) -> float:
        return time.time() - self._started_at


# global singleton (easy import everywhere)
telemetry = TelemetryLogger()
