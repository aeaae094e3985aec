#!/usr/bin/env python3
"""
Report file writer.

Places dated report files under the reports directory, optionally refreshing
a ``latest`` alias next to them.
"""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Optional, Union

from core.exceptions import ReportWriteError

logger = logging.getLogger(__name__)


class ReportWriter:
    """Writes JSON, Markdown and HTML reports under a base directory."""

    def __init__(self, base_dir: Union[str, Path], clock: Optional[Callable[[], datetime]] = None):
        """
        Args:
            base_dir: Root reports directory
            clock: Returns the current time; used for the date in file names
        """
        self.base_dir = Path(base_dir)
        self.clock = clock or datetime.now

    def today(self) -> str:
        return self.clock().strftime('%Y-%m-%d')

    def dated_path(self, subdir: str, stem: str, ext: str) -> Path:
        directory = self.base_dir / subdir if subdir else self.base_dir
        return directory / f"{stem}-{self.today()}.{ext}"

    def _write(self, path: Path, content: str) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w', encoding='utf-8') as f:
            f.write(content)
        logger.debug(f"Wrote {path}")
        return path

    def write_text(self, subdir: str, stem: str, ext: str, content: str,
                   latest: bool = False, dated: bool = True) -> Path:
        """
        Write text content to ``<subdir>/<stem>-DATE.<ext>``.

        With ``dated=False`` the file is written as ``<subdir>/<stem>.<ext>``.
        With ``latest=True`` the same content is also written to
        ``<subdir>/latest.<ext>``.
        """
        if dated:
            path = self.dated_path(subdir, stem, ext)
        else:
            directory = self.base_dir / subdir if subdir else self.base_dir
            path = directory / f"{stem}.{ext}"

        self._write(path, content)
        if latest:
            self._write(path.parent / f"latest.{ext}", content)
        return path

    def write_json(self, subdir: str, stem: str, data: Any, latest: bool = False, dated: bool = True) -> Path:
        try:
            content = json.dumps(data, indent=2, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            raise ReportWriteError(f"{subdir}/{stem}.json", e)
        return self.write_text(subdir, stem, 'json', content, latest=latest, dated=dated)

    def write_markdown(self, subdir: str, stem: str, content: str, latest: bool = False, dated: bool = True) -> Path:
        return self.write_text(subdir, stem, 'md', content, latest=latest, dated=dated)

    def write_html(self, subdir: str, stem: str, content: str, latest: bool = False, dated: bool = True) -> Path:
        return self.write_text(subdir, stem, 'html', content, latest=latest, dated=dated)
