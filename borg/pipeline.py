"""
Publish pipeline: one project at a time, three phases each.

1) discovery: resolve the project's directories and collect its FileSet,
2) transform: run the builder chosen for the project's publish action,
3) aggregate: for HTML projects, write the sitemap and feed once every
   document has been rendered.

A failure in any phase aborts that project only; `run_site` records it and
moves on to the next project.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, List, Optional

from borg.builders.html import DocumentExporter
from borg.builders.registry import build_builder
from borg.context import BuildContext
from borg.discovery import FileSet
from borg.errors import AggregationError, BorgError
from borg.feed import FeedGenerator
from borg.pages import RenderedPage
from borg.paths import resolve
from borg.site.models import Project, Site
from borg.sitemap import SitemapGenerator


@dataclass
class ProjectResult:
    name: str
    error: Optional[BorgError] = None
    pages: int = 0

    @property
    def ok(self) -> bool:
        return self.error is None


def discover_project(project: Project, ctx: BuildContext) -> FileSet:
    source = resolve(project.base_directory, ctx.root)
    publish = resolve(project.publishing_directory, ctx.root)
    return FileSet.discover(
        source,
        publish,
        extension=project.base_extension,
        exclude=project.exclude,
        recursive=project.recursive,
    )


def aggregate(project: Project, exporter: DocumentExporter, pages: List[RenderedPage],
              ctx: BuildContext) -> None:
    if project.auto_sitemap:
        sitemap = SitemapGenerator(project, ctx)
        for page in pages:
            sitemap.add_page(page)
        sitemap.write(exporter)

    if project.auto_feed:
        feed = FeedGenerator.from_project(project)
        home = project.link_home.rstrip("/") + "/" if project.link_home else None
        for page in pages:
            feed.add_article(
                page.title,
                page.description,
                page.sort_date(),
                link=home + page.output.name if home else None,
            )
        output = exporter.fileset.publish_root / project.feed_filename
        try:
            with open(output, "wb") as fh:
                feed.generate(fh)
        except OSError as e:
            raise AggregationError(f"Could not write feed {output}: {e}", path=output) from e
        ctx.logger.info("Wrote feed with %d items to %s", len(pages), output)


def run_project(project: Project, ctx: BuildContext) -> int:
    """Build one project; return the number of files transformed."""
    ctx = ctx.for_project(project.name)
    ctx.logger.info("Processing project %s", project.name)

    fileset = discover_project(project, ctx)
    ctx.logger.info("Discovered %d files under %s", len(fileset), fileset.source_root)

    builder = build_builder(project, fileset, ctx)
    if isinstance(builder, DocumentExporter):
        pages = builder.build()
        aggregate(project, builder, pages, ctx)
    else:
        builder.build()
    return len(fileset)


def run_site(site: Site, ctx: BuildContext) -> Dict[str, ProjectResult]:
    """Build every project in order; a failing project does not stop the rest."""
    results: Dict[str, ProjectResult] = {}
    for project in site.projects:
        try:
            count = run_project(project, ctx)
        except BorgError as e:
            ctx.logger.error("Project %s failed: %s", project.name, e)
            results[project.name] = ProjectResult(project.name, error=e)
            continue
        results[project.name] = ProjectResult(project.name, pages=count)
    return results
