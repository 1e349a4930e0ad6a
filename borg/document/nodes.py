from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Tuple

ENTER = "enter"
EXIT = "exit"


@dataclass
class Node:
    """One element of a parsed document.

    `kind` selects the renderer: block kinds are ``document``, ``headline``
    (attrs: ``level``), ``paragraph``, ``list`` (attrs: ``ordered``), ``item``,
    ``quote``, ``block`` (attrs: ``name``), ``src`` / ``example`` (verbatim
    ``text``, attrs: ``lang``), ``table``, ``row`` (attrs: ``header``),
    ``cell``, ``rule`` and ``raw``; inline kinds are ``text``, ``bold``,
    ``italic``, ``underline``, ``strike``, ``verbatim``, ``code``, ``link``
    (attrs: ``href``), ``image`` (attrs: ``src``) and ``line_break``.
    """
    kind: str
    children: List["Node"] = field(default_factory=list)
    text: str = ""
    attrs: Dict[str, object] = field(default_factory=dict)

    def append(self, child: "Node") -> "Node":
        self.children.append(child)
        return child

    def plain_text(self) -> str:
        """Concatenated text of this node and everything below it."""
        if not self.children:
            return self.text
        return "".join(c.plain_text() for c in self.children)


@dataclass
class Keyword(Node):
    """Metadata line such as ``#+DATE: 2024-01-01``."""
    kind: str = "keyword"
    key: str = ""
    value: str = ""


def walk(node: Node) -> Iterator[Tuple[str, Node]]:
    """Yield ``(ENTER, node)`` before and ``(EXIT, node)`` after its children."""
    yield ENTER, node
    for child in node.children:
        yield from walk(child)
    yield EXIT, node


def keywords(tree: Node) -> Iterator[Keyword]:
    for event, node in walk(tree):
        if event == ENTER and isinstance(node, Keyword):
            yield node
