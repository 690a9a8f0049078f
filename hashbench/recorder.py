"""ResultRecorder -- collects benchmark results and writes one JSON report per run."""

from __future__ import annotations

import json
import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path

from .schema import BenchmarkReport, BenchmarkResult, RunMetadata
from .system_info import (
    capture_hardware,
    get_client_version,
    git_branch,
    git_is_dirty,
    git_short_commit,
)


class ResultRecorder:
    """Collects BenchmarkResult entries and writes a BenchmarkReport JSON file.

    Host and git metadata are captured once, at construction, so every
    result in the report shares the same snapshot.
    """

    def __init__(self, category: str):
        self.category = category
        now = datetime.now(timezone.utc)
        commit = git_short_commit()

        self._report = BenchmarkReport(
            metadata=RunMetadata(
                timestamp=now.isoformat(),
                git_commit=commit,
                git_branch=git_branch(),
                git_dirty=git_is_dirty(),
                client_version=get_client_version(),
                hardware=capture_hardware(),
            ),
        )
        self._timestamp_slug = now.strftime("%Y-%m-%dT%H-%M-%SZ")
        self._commit_slug = commit or "unknown"

    def record(self, result: BenchmarkResult) -> None:
        self._report.results.append(result)

    def save(self, output_dir: str | Path) -> Path:
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)
        path = output_dir / f"{self.category}-{self._timestamp_slug}-{self._commit_slug}.json"

        # Write to a temp file in the same directory, then rename over.
        fd, tmp_path = tempfile.mkstemp(dir=output_dir, suffix=".json.tmp")
        try:
            with os.fdopen(fd, "w") as f:
                json.dump(self._report.to_dict(), f, indent=2)
            os.replace(tmp_path, path)
        except Exception:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
            raise

        print(f"\nResults saved to {path}")
        return path
