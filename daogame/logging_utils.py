from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from daogame.types import ArtifactBundle, RunLogEntry, RunResult

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging once for CLI entrypoints."""
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


class JsonlRunLogger:
    """
    Minimal JSONL logger for production runs.

    Writes one JSON object per line, using RunLogEntry.to_dict().
    """

    def __init__(self, path: Path) -> None:
        self._path = Path(path)
        self._path.parent.mkdir(parents=True, exist_ok=True)

    @property
    def path(self) -> Path:
        return self._path

    def write_entry(self, entry: RunLogEntry) -> None:
        line = json.dumps(entry.to_dict(), separators=(",", ":"))
        with self._path.open("a", encoding="utf-8") as f:
            f.write(line)
            f.write("\n")


def log_run(
    run_logger: JsonlRunLogger,
    run_index: int,
    seed: int,
    treasury_before: int,
    result: RunResult,
    artifacts: Optional[ArtifactBundle] = None,
    extra: Optional[Dict[str, Any]] = None,
) -> None:
    entry = RunLogEntry(
        run_index=run_index,
        seed=seed,
        treasury_before=treasury_before,
        treasury_after=treasury_before - result.cost,
        result=result,
        artifacts=artifacts,
        extra=dict(extra or {}),
    )
    # Logging must not break a play-through; report and continue.
    try:
        run_logger.write_entry(entry)
    except OSError as exc:
        logger.warning("could not write run log entry to %s: %s", run_logger.path, exc)


def read_run_log_entries(path: Path) -> List[RunLogEntry]:
    """Read a JSONL file of run entries.

    Fail-soft: if the file doesn't exist, return an empty list. Any
    malformed lines, including ones that are not valid UTF-8, are skipped.
    """
    p = Path(path)
    if not p.exists():
        return []
    entries: List[RunLogEntry] = []
    try:
        with p.open("r", encoding="utf-8", errors="replace") as f:
            for line in f:
                line = line.strip()
                if not line:
                    continue
                try:
                    data = json.loads(line)
                    entries.append(RunLogEntry.from_dict(data))
                except (ValueError, TypeError, AttributeError):
                    logger.debug("skipping malformed run log line: %r", line[:200])
                    continue
    except OSError as exc:
        # If the file becomes unreadable, return what we have so far
        logger.warning("stopped reading run log %s: %s", p, exc)
    return entries
