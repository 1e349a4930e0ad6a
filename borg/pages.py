from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Dict, Optional


@dataclass
class RenderedPage:
    """What one exported document leaves behind for aggregation.

    Attributes:
        source: Source document path.
        output: Written HTML file.
        title: TITLE keyword, else first top-level headline, else file stem.
        date: Parsed DATE keyword, if any.
        description: DESCRIPTION keyword, if any.
        position: Index of the source in the project's discovery order.
        keywords: Every keyword seen (upper-case keys, first value wins).
    """
    source: Path
    output: Path
    title: str
    date: Optional[datetime] = None
    description: Optional[str] = None
    position: int = 0
    keywords: Dict[str, str] = field(default_factory=dict)

    def sort_date(self) -> datetime:
        """DATE keyword, falling back to the source file's mtime."""
        if self.date is not None:
            return self.date
        try:
            return datetime.fromtimestamp(self.source.stat().st_mtime)
        except OSError:
            return datetime.min
