from __future__ import annotations

import json
import time
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any


@dataclass(slots=True)
class StageTimings:
    read_ms: float = 0.0
    parse_ms: float = 0.0
    convert_ms: float = 0.0
    render_ms: float = 0.0
    write_ms: float = 0.0


@dataclass(slots=True)
class RunLogEntry:
    source: str
    output_path: str
    status: str
    error_code: str | None
    timings: StageTimings
    size_bytes: int
    timestamp: float = field(default_factory=time.time)

    def to_dict(self) -> dict[str, Any]:
        payload = asdict(self)
        payload["timings"] = asdict(self.timings)
        payload["timestamp"] = time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime(self.timestamp))
        return payload


class RunLogger:
    def __init__(self, log_file: Path | None) -> None:
        self._log_file = log_file

    @property
    def enabled(self) -> bool:
        return self._log_file is not None

    def append(self, entry: RunLogEntry) -> None:
        if self._log_file is None:
            return
        self._log_file.parent.mkdir(parents=True, exist_ok=True)
        line = json.dumps(entry.to_dict(), ensure_ascii=False)
        with self._log_file.open("a", encoding="utf-8") as handle:
            handle.write(line + "\n")


__all__ = ["StageTimings", "RunLogEntry", "RunLogger"]
