from __future__ import annotations
import re
import yaml
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional, Tuple


def read_text(path: Path) -> str:
    return path.read_text(encoding="utf-8")


def extract_frontmatter(text: str) -> Tuple[Dict[str, Any], str]:
    if text.startswith("---\n"):
        end = text.find("\n---", 4)
        if end != -1:
            fm = text[4:end]
            body = text[end + 4:]
            try:
                data = yaml.safe_load(fm) or {}
                if not isinstance(data, dict):
                    data = {}
                return data, body.lstrip()
            except yaml.YAMLError:
                return {}, text
    return {}, text


# <2024-01-01 Mon 10:00>, [2024-01-01 Mon], 2024-01-01, 2024-01-01T10:00
_DATE_RE = re.compile(
    r"(\d{4})-(\d{2})-(\d{2})"
    r"(?:[ T](\d{1,2}):(\d{2})(?::(\d{2}))?)?"
)
_WEEKDAY_RE = re.compile(r"(\d{4}-\d{2}-\d{2})\s+[^\d\s>\]]+")


def parse_date(value: Optional[str]) -> Optional[datetime]:
    """Parse an Org timestamp or ISO date; `None` when nothing usable is found."""
    if not value:
        return None
    text = _WEEKDAY_RE.sub(r"\1", value.strip())
    m = _DATE_RE.search(text)
    if not m:
        return None
    y, mo, d, hh, mm, ss = m.groups()
    try:
        return datetime(int(y), int(mo), int(d), int(hh or 0), int(mm or 0), int(ss or 0))
    except ValueError:
        return None
