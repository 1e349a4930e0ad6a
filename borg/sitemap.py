from __future__ import annotations
from pathlib import Path
from typing import TYPE_CHECKING, List

from borg.context import BuildContext
from borg.errors import AggregationError
from borg.pages import RenderedPage
from borg.site.models import Project

if TYPE_CHECKING:
    from borg.builders.html import DocumentExporter


def _org_link_text(s: str) -> str:
    # brackets would close the link early
    return s.replace("[", "(").replace("]", ")")


class SitemapGenerator:
    """Build the index page listing a project's rendered documents.

    The index is produced as Org text and rendered by the project's own
    :class:`DocumentExporter`, so it shares the page layout of every other
    document.
    """

    def __init__(self, project: Project, ctx: BuildContext) -> None:
        self.project = project
        self.ctx = ctx
        self.title = project.effective_sitemap_title
        self.pages: List[RenderedPage] = []

    def add_page(self, page: RenderedPage) -> None:
        self.pages.append(page)

    def ordered_pages(self) -> List[RenderedPage]:
        by_discovery = sorted(self.pages, key=lambda p: p.position)
        if not self.project.recent_first:
            return by_discovery
        # sort is stable under reverse=True, so equal dates keep discovery order
        return sorted(by_discovery, key=lambda p: p.sort_date(), reverse=True)

    def to_org(self) -> str:
        lines = [f"#+TITLE: {self.title}", ""]
        for page in self.ordered_pages():
            lines.append(f"- [[file:{page.output.name}][{_org_link_text(page.title)}]]")
        return "\n".join(lines) + "\n"

    def output_path(self, publish_root: Path) -> Path:
        return publish_root / (Path(self.project.sitemap_filename).stem + ".html")

    def write(self, exporter: "DocumentExporter") -> RenderedPage:
        publish_root = exporter.fileset.publish_root
        output = self.output_path(publish_root)
        clash = next((p for p in self.pages if p.output == output), None)
        if clash is not None:
            raise AggregationError(
                f"Sitemap {output} would overwrite the page rendered from {clash.source}",
                path=output,
            )
        source = publish_root / self.project.sitemap_filename
        page = exporter.export_text(self.to_org(), output, source=source.with_suffix(".org"))
        self.ctx.logger.info("Wrote sitemap with %d entries to %s", len(self.pages), output)
        return page
