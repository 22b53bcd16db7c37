"""
Feed file writer.

Writes the canonical `<stem>.xml` (the URL the marketplace fetches) and a
dated `<stem>-YYYY-MM-DD.xml` copy next to it.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import List

from ..common.text_utils import remove_replacement_chars

logger = logging.getLogger(__name__)


class FeedWriter:
    """
    Usage:
        writer = FeedWriter("feeds")
        paths = writer.write("bestprice-gr", xml, datetime.now())
    """

    def __init__(self, output_dir: str | Path):
        self.output_dir = Path(output_dir)

    def canonical_path(self, stem: str) -> Path:
        return self.output_dir / f"{stem}.xml"

    def dated_path(self, stem: str, when: datetime) -> Path:
        return self.output_dir / f"{stem}-{when.strftime('%Y-%m-%d')}.xml"

    def write(self, stem: str, xml: str, when: datetime) -> List[Path]:
        """
        Write both files (UTF-8), creating the output directory if needed.

        U+FFFD replacement characters from broken upstream encodings are
        removed before writing.

        Returns:
            [canonical path, dated path]
        """
        xml, removed = remove_replacement_chars(xml)
        if removed:
            logger.warning("Removed %d corrupted characters (U+FFFD) from %s", removed, stem)

        self.output_dir.mkdir(parents=True, exist_ok=True)
        paths = [self.canonical_path(stem), self.dated_path(stem, when)]
        for path in paths:
            path.write_text(xml, encoding="utf-8")
            logger.debug("Wrote %s (%.1f KB)", path, len(xml.encode("utf-8")) / 1024)
        return paths
