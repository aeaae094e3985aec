#!/usr/bin/env python3
"""
Capped trend history.

Keeps the most recent snapshots of a recurring analysis in a single JSON file
of the form ``{"snapshots": [...]}``. Older entries fall off the front once
the limit is reached.
"""

import json
import logging
from collections import deque
from pathlib import Path
from typing import Dict, Any, List, Optional, Union

from core.exceptions import ReportReadError

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 90


class TrendHistory:
    """Ring buffer of snapshots persisted to a JSON file."""

    def __init__(self, path: Union[str, Path], limit: int = DEFAULT_LIMIT):
        if limit < 1:
            raise ValueError(f"History limit must be at least 1, got {limit}")
        self.path = Path(path)
        self.limit = limit

    def load(self) -> List[Dict[str, Any]]:
        """
        Read stored snapshots, oldest first.

        A missing file is an empty history.

        Raises:
            ReportReadError: If the file exists but is not a valid history
        """
        if not self.path.exists():
            return []

        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ReportReadError(str(self.path), e)

        snapshots = data.get('snapshots') if isinstance(data, dict) else None
        if not isinstance(snapshots, list):
            raise ReportReadError(str(self.path), ValueError("expected a 'snapshots' list"))
        return snapshots

    def append(self, snapshot: Dict[str, Any]) -> int:
        """
        Add a snapshot and persist the last ``limit`` entries.

        Returns:
            Number of snapshots now stored
        """
        buffer = deque(self.load(), maxlen=self.limit)
        buffer.append(snapshot)

        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, 'w', encoding='utf-8') as f:
            json.dump({'snapshots': list(buffer)}, f, indent=2, ensure_ascii=False)

        logger.debug(f"Stored {len(buffer)} snapshots in {self.path}")
        return len(buffer)

    def latest(self) -> Optional[Dict[str, Any]]:
        snapshots = self.load()
        return snapshots[-1] if snapshots else None

    def values(self, key: str) -> List[Any]:
        """Collect one field across snapshots, skipping entries without it."""
        return [s[key] for s in self.load() if isinstance(s, dict) and key in s]

    def __len__(self) -> int:
        return len(self.load())
