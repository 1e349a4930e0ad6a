"""Line-oriented reader for the subset of Org syntax we publish.

Handled: ``#+KEY: value`` keywords, headlines (with TODO/DONE and tags),
paragraphs, plain lists (nested by indentation), tables, horizontal rules,
fixed-width ``:`` lines, drawers (dropped), comments (dropped), and
``#+BEGIN_x`` / ``#+END_x`` blocks (``src``, ``example``, ``quote``,
``export html`` and generic special blocks). Inline markup: emphasis
markers, ``[[target][description]]`` links and trailing ``\\\\`` line breaks.

Anything unrecognized degrades to paragraph text rather than failing.
"""
from __future__ import annotations
from typing import List, Optional, Tuple

import re

from borg.document.nodes import Keyword, Node

_HEADLINE_RE = re.compile(r"^(\*+)\s+(.*?)\s*$")
_TODO_RE = re.compile(r"^(TODO|DONE)\s+")
_TAGS_RE = re.compile(r"\s+:([\w@#%:]+):$")
_KEYWORD_RE = re.compile(r"^\s*#\+(\w[\w-]*):\s*(.*?)\s*$")
_BEGIN_RE = re.compile(r"^\s*#\+begin_(\w+)(?:\s+(.*?))?\s*$", re.IGNORECASE)
_COMMENT_RE = re.compile(r"^\s*#(?:\s|$)")
_DRAWER_RE = re.compile(r"^\s*:([\w-]+):\s*$")
_DRAWER_END_RE = re.compile(r"^\s*:END:\s*$", re.IGNORECASE)
_RULE_RE = re.compile(r"^\s*-{5,}\s*$")
_TABLE_RE = re.compile(r"^\s*\|")
_TABLE_SEP_RE = re.compile(r"^\s*\|[-+:]+\|?\s*$")
_FIXED_RE = re.compile(r"^\s*:(?: (.*)|$)")
_LIST_RE = re.compile(r"^(\s*)([-+]|\d+[.)])\s+(.*)$")
_ESCAPED_LINE_RE = re.compile(r"^(\s*),([*#])")
_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*:")
_IMAGE_EXTS = (".png", ".jpg", ".jpeg", ".gif", ".svg", ".webp")

_MARKERS = {
    "*": "bold",
    "/": "italic",
    "_": "underline",
    "+": "strike",
    "=": "verbatim",
    "~": "code",
}

_INLINE_RE = re.compile(
    r"\[\[(?P<target>[^\]\n]+)\](?:\[(?P<desc>[^\]\n]+)\])?\]"
    r"|(?:^|(?<=[\s({'\"-]))(?P<marker>[*/_=~+])(?P<body>\S(?:.*?\S)?)(?P=marker)"
    r"(?=[\s.,:;!?'\")}\[-]|$)"
    r"|(?P<br>\\\\[ \t]*$)",
    re.MULTILINE,
)


def parse_org(text: str) -> Node:
    """Parse Org `text` into a ``document`` node."""
    doc = Node("document")
    doc.children = _parse_blocks(text.splitlines())
    return doc


def parse_inline(text: str) -> List[Node]:
    out: List[Node] = []
    pos = 0
    for m in _INLINE_RE.finditer(text):
        if m.start() > pos:
            out.append(Node("text", text=text[pos:m.start()]))
        if m.group("target"):
            out.append(_link(m.group("target"), m.group("desc")))
        elif m.group("marker"):
            kind = _MARKERS[m.group("marker")]
            body = m.group("body")
            if kind in ("verbatim", "code"):
                out.append(Node(kind, text=body))
            else:
                out.append(Node(kind, children=parse_inline(body)))
        else:
            out.append(Node("line_break"))
        pos = m.end()
    if pos < len(text):
        out.append(Node("text", text=text[pos:]))
    return out


def _link(target: str, desc: Optional[str]) -> Node:
    href = target.strip()
    if href.startswith("file:"):
        href = href[len("file:"):]
    local = not _SCHEME_RE.match(href)
    if local:
        path, sep, anchor = href.partition("::")
        if path.endswith(".org"):
            path = path[:-len(".org")] + ".html"
        href = path + ("#" + anchor.lstrip("#*") if sep and anchor else "")
    if not desc and href.lower().endswith(_IMAGE_EXTS):
        return Node("image", attrs={"src": href})
    children = parse_inline(desc) if desc else [Node("text", text=target)]
    return Node("link", children=children, attrs={"href": href})


def _headline(stars: str, title: str) -> Node:
    attrs: dict = {"level": len(stars)}
    m = _TODO_RE.match(title)
    if m:
        attrs["todo"] = m.group(1)
        title = title[m.end():]
    m = _TAGS_RE.search(title)
    if m:
        attrs["tags"] = [t for t in m.group(1).split(":") if t]
        title = title[:m.start()]
    return Node("headline", children=parse_inline(title.strip()), attrs=attrs)


def _find_end(lines: List[str], start: int, name: str) -> Optional[int]:
    end_re = re.compile(r"^\s*#\+end_" + re.escape(name) + r"\s*$", re.IGNORECASE)
    for j in range(start, len(lines)):
        if end_re.match(lines[j]):
            return j
    return None


def _block(name: str, args: str, body: List[str]) -> Optional[Node]:
    verbatim = "\n".join(_ESCAPED_LINE_RE.sub(r"\1\2", line) for line in body)
    if name == "src":
        lang = args.split()[0] if args.split() else ""
        return Node("src", text=verbatim, attrs={"lang": lang})
    if name == "example":
        return Node("example", text=verbatim)
    if name == "export":
        # only html exports survive an html export
        if args.split()[:1] == ["html"]:
            return Node("raw", text=verbatim)
        return None
    if name == "quote":
        return Node("quote", children=_parse_blocks(body))
    return Node("block", children=_parse_blocks(body), attrs={"name": name})


def _parse_table(lines: List[str]) -> Node:
    table = Node("table")
    rows: List[Node] = []
    header_done = False
    for line in lines:
        if _TABLE_SEP_RE.match(line):
            if rows and not header_done:
                for r in rows:
                    r.attrs["header"] = True
                header_done = True
            continue
        cells = line.strip().strip("|").split("|")
        row = Node("row", attrs={"header": False})
        for c in cells:
            row.append(Node("cell", children=parse_inline(c.strip())))
        rows.append(row)
    table.children = rows
    return table


def _parse_list(lines: List[str], i: int) -> Tuple[Node, int]:
    first = _LIST_RE.match(lines[i])
    indent = len(first.group(1))
    lst = Node("list", attrs={"ordered": first.group(2)[0].isdigit()})

    while i < len(lines):
        m = _LIST_RE.match(lines[i])
        if not m or len(m.group(1)) != indent:
            break
        if m.group(2)[0].isdigit() != lst.attrs["ordered"]:
            break
        text_lines = [m.group(3)]
        nested: List[Node] = []
        i += 1
        while i < len(lines):
            line = lines[i]
            if not line.strip():
                break
            sub = _LIST_RE.match(line)
            lead = len(line) - len(line.lstrip())
            if sub and lead > indent:
                child, i = _parse_list(lines, i)
                nested.append(child)
                continue
            if sub or lead <= indent:
                break
            text_lines.append(line.strip())
            i += 1
        item = lst.append(Node("item", children=parse_inline("\n".join(text_lines))))
        item.children.extend(nested)

        # a single blank line between siblings keeps the list open
        if i < len(lines) and not lines[i].strip():
            nxt = _LIST_RE.match(lines[i + 1]) if i + 1 < len(lines) else None
            if nxt and len(nxt.group(1)) == indent:
                i += 1
    return lst, i


def _parse_blocks(lines: List[str]) -> List[Node]:
    nodes: List[Node] = []
    para: List[str] = []

    def flush() -> None:
        if para:
            nodes.append(Node("paragraph", children=parse_inline("\n".join(para))))
            para.clear()

    i = 0
    while i < len(lines):
        line = lines[i]
        if not line.strip():
            flush()
            i += 1
            continue

        m = _BEGIN_RE.match(line)
        if m:
            name = m.group(1).lower()
            end = _find_end(lines, i + 1, name)
            if end is not None:
                flush()
                node = _block(name, m.group(2) or "", lines[i + 1:end])
                if node is not None:
                    nodes.append(node)
                i = end + 1
                continue

        m = _KEYWORD_RE.match(line)
        if m:
            flush()
            nodes.append(Keyword(key=m.group(1), value=m.group(2)))
            i += 1
            continue

        if _COMMENT_RE.match(line):
            flush()
            i += 1
            continue

        m = _HEADLINE_RE.match(line)
        if m:
            flush()
            nodes.append(_headline(m.group(1), m.group(2)))
            i += 1
            continue

        if _DRAWER_RE.match(line):
            end = next((j for j in range(i + 1, len(lines)) if _DRAWER_END_RE.match(lines[j])), None)
            if end is not None:
                flush()
                i = end + 1
                continue

        if _RULE_RE.match(line):
            flush()
            nodes.append(Node("rule"))
            i += 1
            continue

        if _TABLE_RE.match(line):
            flush()
            j = i
            while j < len(lines) and _TABLE_RE.match(lines[j]):
                j += 1
            nodes.append(_parse_table(lines[i:j]))
            i = j
            continue

        if _FIXED_RE.match(line):
            flush()
            j = i
            fixed: List[str] = []
            while j < len(lines):
                fm = _FIXED_RE.match(lines[j])
                if not fm:
                    break
                fixed.append(fm.group(1) or "")
                j += 1
            nodes.append(Node("example", text="\n".join(fixed)))
            i = j
            continue

        if _LIST_RE.match(line):
            flush()
            lst, i = _parse_list(lines, i)
            nodes.append(lst)
            continue

        para.append(line.strip())
        i += 1

    flush()
    return nodes
