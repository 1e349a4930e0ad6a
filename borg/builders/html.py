from __future__ import annotations
from html import escape
from pathlib import Path
from typing import Dict, List, Optional, TextIO

from tqdm import tqdm

from borg.context import BuildContext
from borg.discovery import FileSet
from borg.document.nodes import Node, keywords
from borg.document.parsers import parser_for
from borg.errors import BuildIOError, RenderError
from borg.export.html import HtmlExporter
from borg.pages import RenderedPage
from borg.site.models import Project
from borg.util import parse_date, read_text


def infer_title(tree: Node, stem: str) -> str:
    # 1) TITLE keyword
    for kw in keywords(tree):
        if kw.key.upper() == "TITLE" and kw.value.strip():
            return kw.value.strip()
    # 2) first top-level headline
    for node in tree.children:
        if node.kind == "headline" and node.attrs.get("level") == 1:
            title = node.plain_text().strip()
            if title:
                return title
    # 3) fallback to filename stem
    return stem


class DocumentExporter:
    """Export each discovered document to ``<publish_root>/<stem>.html``.

    Output is flat: a document found in a subdirectory still lands directly
    under the publish root. Two sources sharing a stem would overwrite each
    other, so the second one aborts the run with :class:`RenderError`.

    Any read, parse or write failure aborts the whole project run.
    """

    def __init__(
        self,
        project: Project,
        fileset: FileSet,
        ctx: BuildContext,
        exporter: Optional[HtmlExporter] = None,
    ) -> None:
        self.project = project
        self.fileset = fileset
        self.ctx = ctx
        self.exporter = exporter or HtmlExporter()

    def output_path(self, source: Path) -> Path:
        return self.fileset.publish_root / (source.stem + ".html")

    def build(self) -> List[RenderedPage]:
        log = self.ctx.logger
        pages: List[RenderedPage] = []
        claimed: Dict[Path, Path] = {}
        for position, entry in enumerate(tqdm(self.fileset.entries, desc="Rendering",
                                              unit="doc", disable=not self.ctx.progress)):
            output = self.output_path(entry)
            if output in claimed:
                raise RenderError(
                    f"{entry} and {claimed[output]} would both publish to {output}",
                    path=entry,
                )
            claimed[output] = entry
            try:
                text = read_text(entry)
            except (OSError, UnicodeDecodeError) as e:
                raise BuildIOError(f"Could not read {entry}: {e}", path=entry) from e
            pages.append(self.export_text(text, output, source=entry, position=position))
            log.debug("rendered %s -> %s", entry, output)
        log.info("Rendered %d documents to %s", len(pages), self.fileset.publish_root)
        return pages

    def export_text(self, text: str, output: Path, source: Path, position: int = 0) -> RenderedPage:
        """Parse `text` as `source` would be parsed and write the page to `output`."""
        parse = parser_for(source)
        try:
            tree = parse(text)
        except Exception as e:
            raise RenderError(f"Failed to parse {source}: {e}", path=source) from e

        title = infer_title(tree, source.stem)
        try:
            with open(output, "w", encoding="utf-8") as out:
                self._write_head(out, title)
                try:
                    captured = self.exporter.export(tree, out)
                except OSError:
                    raise
                except Exception as e:
                    raise RenderError(f"Failed to process {source}: {e}", path=source) from e
                self._write_tail(out)
        except OSError as e:
            raise BuildIOError(f"Could not create output file {output}: {e}",
                               path=source, destination=output) from e

        return RenderedPage(
            source=source,
            output=output,
            title=title,
            date=parse_date(captured.get("DATE")),
            description=captured.get("DESCRIPTION"),
            position=position,
            keywords=captured,
        )

    def _write_head(self, out: TextIO, title: str) -> None:
        p = self.project
        out.write("<!DOCTYPE html>\n<html>\n<head>\n<meta charset=\"utf-8\">\n")
        out.write(f"<title>{escape(title)}</title>\n")
        if p.html_head:
            out.write(p.html_head.rstrip("\n") + "\n")
        out.write("</head>\n<body>\n")
        if p.link_up or p.link_home:
            links = []
            if p.link_up:
                links.append(f'<a accesskey="h" href="{escape(p.link_up)}"> UP </a>')
            if p.link_home:
                links.append(f'<a accesskey="H" href="{escape(p.link_home)}"> HOME </a>')
            out.write('<div id="org-div-home-and-up">\n' + "\n|\n".join(links) + "\n</div>\n")
        if p.html_preamble:
            out.write(f'<div id="preamble" class="status">\n{p.html_preamble}\n</div>\n')
        out.write("<main>\n")

    def _write_tail(self, out: TextIO) -> None:
        out.write("</main>\n")
        if self.project.html_postamble:
            out.write(f'<div id="postamble" class="status">\n{self.project.html_postamble}\n</div>\n')
        out.write("</body>\n</html>\n")
