from __future__ import annotations
from pathlib import Path
from typing import Optional


class BorgError(Exception):
    """Base class for every failure raised while publishing a site.

    Attributes:
        path: The file or directory the failing operation was working on.
    """

    def __init__(self, message: str, path: Optional[Path] = None) -> None:
        super().__init__(message)
        self.path = path


class ConfigError(BorgError):
    """Site description is malformed or names something we cannot build."""


class DiscoveryError(BorgError):
    """Bad exclude pattern or unreadable directory during discovery."""


class PathError(BorgError):
    pass


class PathNotFoundError(PathError):
    pass


class PathEscapeError(PathError):
    """Entry resolves outside the canonical source root."""

    def __init__(self, entry: Path, root: Path) -> None:
        super().__init__(f"{entry} resolves outside of source root {root}", path=entry)
        self.root = root


class BuildIOError(BorgError):
    """Copy, read, write or mkdir failure.

    Attributes:
        destination: Target path when the operation had one.
    """

    def __init__(self, message: str, path: Optional[Path] = None,
                 destination: Optional[Path] = None) -> None:
        super().__init__(message, path=path)
        self.destination = destination


class RenderError(BorgError):
    pass


class AggregationError(BorgError):
    pass


class FeedFinalizedError(AggregationError):
    """A finalized feed was asked to change or serialize again."""
