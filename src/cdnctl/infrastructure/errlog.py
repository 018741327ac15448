"""Error log — records failed invocations with diagnostic context.

Entries are kept in memory for the lifetime of one command, logged via
structlog as they arrive, and appended as JSON lines to the configured
error log file when the command finishes.
"""

from __future__ import annotations

import json
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import structlog

log = structlog.get_logger("cdnctl.errlog")


class ErrorLog:
    """Collects errors raised while a command runs."""

    def __init__(self, path: Path | None = None) -> None:
        self.path = path
        self.entries: list[dict[str, Any]] = []

    def add(self, err: BaseException | str, context: dict[str, Any] | None = None) -> None:
        """Record an error, optionally with contextual fields."""
        entry = {
            "time": datetime.now(UTC).isoformat(),
            "type": type(err).__name__ if isinstance(err, BaseException) else "error",
            "error": str(err),
            "context": dict(context or {}),
        }
        self.entries.append(entry)
        log.debug("error.recorded", error=entry["error"], **entry["context"])

    def persist(self) -> None:
        """Append pending entries to the log file, then clear them.

        No-op without a configured path.  Write failures are logged, never
        raised: the command's own error is what the user needs to see.
        """
        if self.path is None or not self.entries:
            return
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open("a", encoding="utf-8") as fh:
                for entry in self.entries:
                    fh.write(json.dumps(entry, default=str) + "\n")
        except OSError as exc:
            log.warning("errlog.persist_failed", path=str(self.path), error=str(exc))
            return
        self.entries.clear()
