from __future__ import annotations
from typing import List

from markdown_it import MarkdownIt
from markdown_it.tree import SyntaxTreeNode

from borg.document.nodes import Keyword, Node
from borg.util import extract_frontmatter

_KINDS = {
    "paragraph": "paragraph",
    "bullet_list": "list",
    "ordered_list": "list",
    "list_item": "item",
    "blockquote": "quote",
    "table": "table",
    "tr": "row",
    "th": "cell",
    "td": "cell",
    "strong": "bold",
    "em": "italic",
    "s": "strike",
    "link": "link",
}

_md = MarkdownIt("commonmark").enable("table").enable("strikethrough")


def parse_markdown(text: str) -> Node:
    """Parse Markdown into the same node tree the Org reader produces.

    YAML frontmatter keys become leading :class:`Keyword` nodes, so a
    ``date:`` entry is rendered and harvested exactly like ``#+DATE:``.
    """
    fm, body = extract_frontmatter(text)
    doc = Node("document")
    for key, value in fm.items():
        doc.append(Keyword(key=str(key), value="" if value is None else str(value)))
    root = SyntaxTreeNode(_md.parse(body))
    doc.children.extend(_convert(root))
    return doc


def _convert(node: SyntaxTreeNode) -> List[Node]:
    t = node.type
    if t == "text":
        return [Node("text", text=node.content)]
    if t == "softbreak":
        return [Node("text", text="\n")]
    if t == "hardbreak":
        return [Node("line_break")]
    if t == "code_inline":
        return [Node("code", text=node.content)]
    if t in ("fence", "code_block"):
        info = (node.info or "").split()
        return [Node("src", text=node.content.rstrip("\n"), attrs={"lang": info[0] if info else ""})]
    if t == "hr":
        return [Node("rule")]
    if t in ("html_block", "html_inline"):
        return [Node("raw", text=node.content)]
    if t == "image":
        return [Node("image", attrs={"src": node.attrs.get("src", ""), "alt": node.content})]

    children = [c for child in node.children for c in _convert(child)]
    if t == "heading":
        return [Node("headline", children=children, attrs={"level": int(node.tag[1:])})]

    kind = _KINDS.get(t)
    # root, inline, thead/tbody and tight-list paragraphs only group their children
    if kind is None or (t == "paragraph" and node.hidden):
        return children

    out = Node(kind, children=children)
    if t in ("bullet_list", "ordered_list"):
        out.attrs["ordered"] = t == "ordered_list"
    elif t == "link":
        out.attrs["href"] = str(node.attrs.get("href", ""))
    elif t == "tr":
        out.attrs["header"] = node.parent is not None and node.parent.type == "thead"
    return [out]
