from __future__ import annotations
import textwrap

from borg.document.nodes import ENTER, EXIT, Keyword, keywords, walk
from borg.document.org import parse_inline, parse_org


def _doc(s: str):
    return parse_org(textwrap.dedent(s).lstrip())


def test_keywords_and_headlines():
    doc = _doc(
        """
        #+TITLE: Hello
        #+date: <2024-01-01 Mon>

        * TODO First :blog:org:
        ** Second
        Some text.
        """
    )
    kws = list(keywords(doc))
    assert [(k.key, k.value) for k in kws] == [("TITLE", "Hello"), ("date", "<2024-01-01 Mon>")]

    heads = [n for n in doc.children if n.kind == "headline"]
    assert [h.attrs["level"] for h in heads] == [1, 2]
    assert heads[0].attrs["todo"] == "TODO"
    assert heads[0].attrs["tags"] == ["blog", "org"]
    assert heads[0].plain_text() == "First"
    assert doc.children[-1].kind == "paragraph"


def test_paragraphs_split_on_blank_lines():
    doc = _doc(
        """
        one
        still one

        two
        """
    )
    paras = [n for n in doc.children if n.kind == "paragraph"]
    assert [p.plain_text() for p in paras] == ["one\nstill one", "two"]


def test_inline_markup():
    nodes = parse_inline("a *bold* /it/ =v= ~c~ +s+ _u_ end")
    kinds = [n.kind for n in nodes if n.kind != "text"]
    assert kinds == ["bold", "italic", "verbatim", "code", "strike", "underline"]


def test_inline_markup_ignores_urls_and_math():
    nodes = parse_inline("see http://x.org/a/b and 2*3*4")
    assert all(n.kind == "text" for n in nodes)


def test_links_rewrite_org_files():
    (link,) = [n for n in parse_inline("[[file:post.org][A post]]") if n.kind == "link"]
    assert link.attrs["href"] == "post.html"
    assert link.plain_text() == "A post"

    (ext,) = parse_inline("[[https://example.org/x.org]]")
    assert ext.attrs["href"] == "https://example.org/x.org"

    (img,) = parse_inline("[[./cat.png]]")
    assert img.kind == "image"


def test_blocks():
    doc = _doc(
        """
        #+BEGIN_SRC python
        print("hi")
        ,* not a headline
        #+END_SRC

        #+begin_quote
        quoted *text*
        #+end_quote

        #+BEGIN_EXPORT latex
        \\LaTeX
        #+END_EXPORT

        : fixed width
        """
    )
    kinds = [n.kind for n in doc.children]
    assert kinds == ["src", "quote", "example"]
    src = doc.children[0]
    assert src.attrs["lang"] == "python"
    assert src.text == 'print("hi")\n* not a headline'
    assert doc.children[1].children[0].kind == "paragraph"
    assert doc.children[2].text == "fixed width"


def test_unterminated_block_is_plain_text():
    doc = _doc("#+BEGIN_SRC sh\necho\n")
    assert [n.kind for n in doc.children] == ["paragraph"]


def test_nested_lists():
    doc = _doc(
        """
        - one
          - one.a
          - one.b
        - two

        - three
        1. first
        """
    )
    lists = [n for n in doc.children if n.kind == "list"]
    assert len(lists) == 2
    outer, ordered = lists
    assert outer.attrs["ordered"] is False
    assert len(outer.children) == 3
    nested = [c for c in outer.children[0].children if c.kind == "list"]
    assert len(nested) == 1 and len(nested[0].children) == 2
    assert ordered.attrs["ordered"] is True


def test_table_header_rows():
    doc = _doc(
        """
        | a | b |
        |---+---|
        | 1 | 2 |
        """
    )
    (table,) = doc.children
    rows = table.children
    assert [r.attrs["header"] for r in rows] == [True, False]
    assert [c.plain_text() for c in rows[1].children] == ["1", "2"]


def test_drawers_and_comments_are_dropped():
    doc = _doc(
        """
        * Head
        :PROPERTIES:
        :ID: 123
        :END:
        # a comment
        body
        -----
        """
    )
    assert [n.kind for n in doc.children] == ["headline", "paragraph", "rule"]


def test_walk_is_pre_and_post_order():
    doc = _doc("#+DATE: 2024-01-01\n")
    events = [(e, n.kind) for e, n in walk(doc)]
    assert events == [
        (ENTER, "document"),
        (ENTER, "keyword"),
        (EXIT, "keyword"),
        (EXIT, "document"),
    ]
    assert isinstance(doc.children[0], Keyword)
