"""Per-scenario results and the run report."""

from __future__ import annotations

import csv
import json
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any


@dataclass
class RunResult:
    scenario_id: str
    name: str
    input: str
    output: str
    passed: bool
    detail: str | None = None
    duration_s: float = 0.0
    screenshot: str | None = None

    def to_dict(self) -> dict[str, Any]:
        payload = asdict(self)
        payload["id"] = payload.pop("scenario_id")
        return payload


@dataclass
class Report:
    results: list[RunResult] = field(default_factory=list)
    complete: bool = True
    abort_reason: str | None = None

    @property
    def passed(self) -> int:
        return sum(1 for r in self.results if r.passed)

    @property
    def failed(self) -> int:
        return sum(1 for r in self.results if not r.passed)

    @property
    def ok(self) -> bool:
        return self.complete and self.failed == 0

    def add(self, result: RunResult) -> None:
        self.results.append(result)

    def summary_line(self) -> str:
        line = f"{len(self.results)} run, {self.passed} passed, {self.failed} failed"
        if not self.complete:
            line += f" (aborted: {self.abort_reason})"
        return line

    def to_dict(self) -> dict[str, Any]:
        return {
            "complete": self.complete,
            "abort_reason": self.abort_reason,
            "summary": {
                "total": len(self.results),
                "passed": self.passed,
                "failed": self.failed,
            },
            "results": [r.to_dict() for r in self.results],
        }

    def write_json(self, path: str | Path) -> Path:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(self.to_dict(), indent=2, ensure_ascii=False), encoding="utf-8")
        return path

    def write_csv(self, path: str | Path) -> Path:
        """Spreadsheet export for reviewing outputs by hand."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        columns = ["id", "name", "input", "output", "passed", "detail", "duration_s", "screenshot"]
        # utf-8-sig so Excel picks up the Sinhala text.
        with open(path, "w", newline="", encoding="utf-8-sig") as f:
            writer = csv.DictWriter(f, fieldnames=columns)
            writer.writeheader()
            for r in self.results:
                writer.writerow(r.to_dict())
        return path
