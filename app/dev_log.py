"""
app/dev_log.py

Best-effort development logging of enrichment and aggregation snapshots.

Snapshots are appended as JSON lines to ``{log_dir}/enrichment-YYYY-MM-DD.json``
only when development logging is enabled. Failures are logged and dropped;
they never reach the caller.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from app.config import DevLogSettings

logger = logging.getLogger(__name__)


class DevSnapshotLogger:
    """
    Appends labelled JSON snapshots to a dated file in the log directory.
    """

    def __init__(self, settings: DevLogSettings) -> None:
        self._enabled = settings.enabled
        self._log_dir = Path(settings.log_dir)

    @property
    def enabled(self) -> bool:
        return self._enabled

    def log_snapshot(self, data: Any, label: str = "enrichment") -> Path | None:
        """
        Append one snapshot; return the file written, or None when skipped or failed.
        """

        if not self._enabled:
            return None

        now = datetime.now(timezone.utc)
        log_file = self._log_dir / f"enrichment-{now.date().isoformat()}.json"
        entry = {
            "timestamp": now.isoformat(),
            "label": label,
            "data": data,
        }
        try:
            self._log_dir.mkdir(parents=True, exist_ok=True)
            line = json.dumps(entry, default=str)
            with log_file.open("a", encoding="utf-8") as fp:
                fp.write(line + "\n")
        except (OSError, TypeError, ValueError) as exc:
            logger.warning("Development snapshot not written label=%s error=%s", label, exc)
            return None
        return log_file
