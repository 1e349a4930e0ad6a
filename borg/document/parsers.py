from __future__ import annotations
from pathlib import Path
from typing import Callable, Dict

from borg.document.markdown import parse_markdown
from borg.document.nodes import Node
from borg.document.org import parse_org

# text -> document tree
Parser = Callable[[str], Node]
_REGISTRY: Dict[str, Parser] = {}


def register(suffix: str, parser: Parser) -> None:
    _REGISTRY[suffix.lower()] = parser


def get_registry() -> Dict[str, Parser]:
    return dict(_REGISTRY)


def parser_for(path: Path) -> Parser:
    """Parser registered for the file suffix; Org for anything unknown."""
    return _REGISTRY.get(Path(path).suffix.lower(), parse_org)


# --- built-in formats ---

register(".org", parse_org)
register(".md", parse_markdown)
register(".markdown", parse_markdown)
