from __future__ import annotations
from enum import Enum
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class PublishAction(str, Enum):
    """What a project's build step does with its files."""
    TO_HTML = "to-html"
    ATTACHMENT = "attachment"


class Project(BaseModel):
    """One publishing project, modelled on org-publish project options.

    Required:
        name: unique project name
        base_directory: source directory (relative paths resolve against
                        the site file's directory)
        publishing_directory: output directory, created when missing

    Optional:
        base_extension: single extension filter, e.g. "org"
        recursive: descend into subdirectories (default: False)
        exclude: glob patterns matched against full paths
        publish_action: "attachment" (copy, default) or "to-html"
        auto_sitemap / sitemap_filename / sitemap_title / recent_first:
            generate an index page of the rendered documents
        auto_feed / feed_filename: generate an RSS feed
        link_home / link_up: navigation links, also the feed link
        html_head / html_preamble / html_postamble: raw HTML snippets
    """
    model_config = ConfigDict(frozen=True)

    name: str
    description: Optional[str] = None
    base_directory: Path
    base_extension: Optional[str] = None
    recursive: bool = False
    publishing_directory: Path
    exclude: List[str] = Field(default_factory=list)

    auto_sitemap: bool = False
    sitemap_filename: str = "sitemap.org"
    sitemap_title: Optional[str] = None
    recent_first: bool = False

    auto_feed: bool = False
    feed_filename: str = "rss.xml"

    link_home: Optional[str] = None
    link_up: Optional[str] = None
    html_head: Optional[str] = None
    html_preamble: Optional[str] = None
    html_postamble: Optional[str] = None

    publish_action: PublishAction = PublishAction.ATTACHMENT

    @field_validator("name")
    @classmethod
    def _name_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("project name must not be empty")
        return v

    @field_validator("base_extension")
    @classmethod
    def _normalize_extension(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip()
        if v.startswith("*."):
            v = v[2:]
        return v.lstrip(".") or None

    @field_validator("sitemap_filename", "feed_filename")
    @classmethod
    def _bare_filename(cls, v: str) -> str:
        if not v or Path(v).name != v:
            raise ValueError(f"expected a plain file name, got '{v}'")
        return v

    @property
    def effective_sitemap_title(self) -> str:
        return self.sitemap_title or f"Sitemap for project {self.name}"


class Site(BaseModel):
    """Top-level site description: an ordered list of projects."""
    projects: List[Project] = Field(default_factory=list)

    @model_validator(mode="after")
    def _unique_names(self):
        seen = set()
        for p in self.projects:
            if p.name in seen:
                raise ValueError(f"duplicate project name '{p.name}'")
            seen.add(p.name)
        return self
