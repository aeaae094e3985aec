#!/usr/bin/env python3
"""
File-backed metrics source.

Replays a snapshot written by an earlier CWV report (or any JSON with the
same ``pages`` block) so analyses can be rerun against fixed data.
"""

import json
import logging
from pathlib import Path
from typing import Dict, Any, Optional, Union

from core.exceptions import ReportReadError
from core.models.metrics import MetricsSnapshot
from .base import MetricsSource, SourceMetadata

logger = logging.getLogger(__name__)


class FileMetricsSource(MetricsSource):
    """Loads a MetricsSnapshot from a JSON file."""

    def __init__(self, path: Union[str, Path], config: Optional[Dict[str, Any]] = None):
        super().__init__(config)
        self.path = Path(path)

    def fetch_snapshot(self, date_range: str = "last7days") -> MetricsSnapshot:
        """
        Read the snapshot file.

        Raises:
            FileNotFoundError: If the file does not exist
            ReportReadError: If the file is not valid snapshot JSON
        """
        with open(self.path, 'r', encoding='utf-8') as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise ReportReadError(str(self.path), e)

        if not isinstance(data, dict) or 'pages' not in data:
            raise ReportReadError(str(self.path), ValueError("missing 'pages' block"))

        try:
            snapshot = MetricsSnapshot.from_dict(data)
        except (KeyError, TypeError, ValueError) as e:
            raise ReportReadError(str(self.path), e)

        snapshot.source = 'file'
        logger.info(f"Loaded {len(snapshot.pages)} pages from {self.path}")
        return snapshot

    def get_metadata(self) -> SourceMetadata:
        return SourceMetadata(
            name='file',
            display_name='Snapshot File',
            description=f'Replays measurements from {self.path}',
            metrics=[]
        )

    def health_check(self) -> Dict[str, Any]:
        return {
            'available': self.path.is_file(),
            'path': str(self.path)
        }
