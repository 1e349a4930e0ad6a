from __future__ import annotations
from html import escape
from io import StringIO
from typing import Callable, Dict, Mapping, Optional, TextIO, Tuple

from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound

from borg.document.nodes import ENTER, Keyword, Node, walk

# spans only; the <pre><code> wrapper is ours
_FORMATTER = HtmlFormatter(nowrap=True)

KeywordRenderer = Callable[[Keyword], str]
NodeRenderer = Callable[[Node], str]


def render_date(kw: Keyword) -> str:
    return f'<span class="date">{escape(kw.value)}</span>'


def render_time(kw: Keyword) -> str:
    return f"<h1>{escape(kw.value)}</h1>"


# keyword key (lower case) -> markup; unmapped keys render nothing
DEFAULT_KEYWORD_RENDERERS: Dict[str, KeywordRenderer] = {
    "date": render_date,
    "time": render_time,
}


def _nothing(node: Node) -> str:
    return ""


def _const(markup: str) -> NodeRenderer:
    return lambda node: markup


def _headline_open(node: Node) -> str:
    level = min(int(node.attrs.get("level", 1)), 6)
    todo = node.attrs.get("todo")
    prefix = f'<span class="todo {escape(str(todo))}">{escape(str(todo))}</span> ' if todo else ""
    return f"<h{level}>{prefix}"


def _headline_close(node: Node) -> str:
    level = min(int(node.attrs.get("level", 1)), 6)
    tags = node.attrs.get("tags") or []
    suffix = ""
    if tags:
        suffix = " " + "".join(f'<span class="tag">{escape(str(t))}</span>' for t in tags)
    return f"{suffix}</h{level}>\n"


def _list_open(node: Node) -> str:
    return "<ol>\n" if node.attrs.get("ordered") else "<ul>\n"


def _list_close(node: Node) -> str:
    return "</ol>\n" if node.attrs.get("ordered") else "</ul>\n"


def _highlight(code: str, lang: str) -> str:
    """Pygments token spans for `code`, or the escaped text when `lang` has no lexer."""
    if not lang:
        return escape(code)
    try:
        lexer = get_lexer_by_name(lang)
    except ClassNotFound:
        return escape(code)
    return highlight(code, lexer, _FORMATTER).rstrip("\n")


def _src(node: Node) -> str:
    lang = str(node.attrs.get("lang") or "")
    cls = f"src src-{escape(lang)}" if lang else "src"
    return f'<pre class="{cls}"><code>{_highlight(node.text, lang)}</code></pre>\n'


def _image(node: Node) -> str:
    src = escape(str(node.attrs.get("src", "")))
    alt = escape(str(node.attrs.get("alt", "")))
    return f'<img src="{src}" alt="{alt}">'


DEFAULT_RULES: Dict[str, Tuple[NodeRenderer, NodeRenderer]] = {
    "document": (_nothing, _nothing),
    "headline": (_headline_open, _headline_close),
    "paragraph": (_const("<p>"), _const("</p>\n")),
    "list": (_list_open, _list_close),
    "item": (_const("<li>"), _const("</li>\n")),
    "quote": (_const("<blockquote>\n"), _const("</blockquote>\n")),
    "block": (
        lambda n: f'<div class="{escape(str(n.attrs.get("name", "")))}">\n',
        _const("</div>\n"),
    ),
    "src": (_src, _nothing),
    "example": (lambda n: f'<pre class="example">{escape(n.text)}</pre>\n', _nothing),
    "raw": (lambda n: n.text + "\n", _nothing),
    "table": (_const("<table>\n"), _const("</table>\n")),
    "row": (_const("<tr>"), _const("</tr>\n")),
    "rule": (_const("<hr>\n"), _nothing),
    "text": (lambda n: escape(n.text, quote=False), _nothing),
    "bold": (_const("<b>"), _const("</b>")),
    "italic": (_const("<i>"), _const("</i>")),
    "underline": (_const('<span class="underline">'), _const("</span>")),
    "strike": (_const("<del>"), _const("</del>")),
    "verbatim": (lambda n: f"<code>{escape(n.text)}</code>", _nothing),
    "code": (lambda n: f"<code>{escape(n.text)}</code>", _nothing),
    "link": (lambda n: f'<a href="{escape(str(n.attrs.get("href", "")))}">', _const("</a>")),
    "image": (_image, _nothing),
    "line_break": (_const("<br>\n"), _nothing),
}


class HtmlExporter:
    """Render a document tree to HTML in one pre/post-order pass.

    Node kinds go through a rule table (``kind -> (enter, exit)``); unknown
    kinds emit nothing themselves but their children are still rendered.
    Keyword nodes go through a separate ``key -> renderer`` table with
    case-insensitive keys; keys missing from it are silently skipped, so a
    new metadata line never breaks an export.

    Every keyword met during the walk is captured (upper-cased key, first
    occurrence wins) and returned by :meth:`export`.
    """

    def __init__(
        self,
        keyword_renderers: Optional[Mapping[str, KeywordRenderer]] = None,
        rules: Optional[Mapping[str, Tuple[NodeRenderer, NodeRenderer]]] = None,
    ) -> None:
        self.keyword_renderers: Dict[str, KeywordRenderer] = dict(DEFAULT_KEYWORD_RENDERERS)
        for key, fn in (keyword_renderers or {}).items():
            self.keyword_renderers[key.lower()] = fn
        self.rules: Dict[str, Tuple[NodeRenderer, NodeRenderer]] = dict(DEFAULT_RULES)
        self.rules.update(rules or {})
        self._header_row = False

    def enter(self, node: Node) -> str:
        if isinstance(node, Keyword):
            fn = self.keyword_renderers.get(node.key.lower())
            return fn(node) if fn else ""
        if node.kind == "row":
            self._header_row = bool(node.attrs.get("header"))
        if node.kind == "cell":
            return "<th>" if self._header_row else "<td>"
        rule = self.rules.get(node.kind)
        return rule[0](node) if rule else ""

    def exit(self, node: Node) -> str:
        if isinstance(node, Keyword):
            return ""
        if node.kind == "cell":
            return "</th>" if self._header_row else "</td>"
        rule = self.rules.get(node.kind)
        return rule[1](node) if rule else ""

    def export(self, tree: Node, out: TextIO) -> Dict[str, str]:
        captured: Dict[str, str] = {}
        for event, node in walk(tree):
            if event == ENTER:
                if isinstance(node, Keyword):
                    captured.setdefault(node.key.upper(), node.value)
                out.write(self.enter(node))
            else:
                out.write(self.exit(node))
        return captured

    def render(self, tree: Node) -> str:
        buf = StringIO()
        self.export(tree, buf)
        return buf.getvalue()
