"""RSS 2.0 channel for a project's rendered pages."""
from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime
from email.utils import format_datetime
from enum import Enum
from typing import BinaryIO, List, Optional
from xml.etree.ElementTree import Element, ElementTree, SubElement

from borg.errors import AggregationError, FeedFinalizedError
from borg.site.models import Project


class FeedState(Enum):
    BUILDING = "building"
    FINALIZED = "finalized"


@dataclass(frozen=True)
class FeedItem:
    title: str
    date: datetime
    description: Optional[str] = None
    link: Optional[str] = None


class FeedGenerator:
    """Accumulate articles, then serialize them exactly once.

    A generator starts in ``BUILDING``. :meth:`generate` moves it to
    ``FINALIZED`` and writes the channel; from then on both
    :meth:`add_article` and :meth:`generate` raise :class:`FeedFinalizedError`.
    """

    def __init__(self, title: str, link: Optional[str] = None,
                 description: Optional[str] = None) -> None:
        self.title = title
        self.link = link
        self.description = description
        self.state = FeedState.BUILDING
        self._items: List[FeedItem] = []

    @classmethod
    def from_project(cls, project: Project) -> "FeedGenerator":
        return cls(title=project.name, link=project.link_home, description=project.description)

    @property
    def items(self) -> List[FeedItem]:
        return list(self._items)

    def _check_building(self, operation: str) -> None:
        if self.state is FeedState.FINALIZED:
            raise FeedFinalizedError(f"Cannot {operation}: feed '{self.title}' was already generated")

    def add_article(self, title: str, description: Optional[str], date: datetime,
                    link: Optional[str] = None) -> None:
        self._check_building("add an article")
        self._items.append(FeedItem(title=title, date=date, description=description, link=link))

    def to_element(self) -> Element:
        rss = Element("rss", attrib={"version": "2.0"})
        channel = SubElement(rss, "channel")
        SubElement(channel, "title").text = self.title
        if self.link:
            SubElement(channel, "link").text = self.link
        if self.description:
            SubElement(channel, "description").text = self.description
        for item in self._items:
            item_el = SubElement(channel, "item")
            SubElement(item_el, "title").text = item.title
            if item.link:
                SubElement(item_el, "link").text = item.link
                SubElement(item_el, "guid").text = item.link
            if item.description:
                SubElement(item_el, "description").text = item.description
            SubElement(item_el, "pubDate").text = format_datetime(item.date)
        return rss

    def generate(self, output: BinaryIO) -> None:
        """Finalize and write the channel as UTF-8 XML to `output`."""
        self._check_building("generate")
        self.state = FeedState.FINALIZED
        try:
            ElementTree(self.to_element()).write(output, encoding="utf-8", xml_declaration=True)
        except (OSError, TypeError, ValueError) as e:
            raise AggregationError(f"Could not serialize feed '{self.title}': {e}") from e
