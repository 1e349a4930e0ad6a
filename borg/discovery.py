from __future__ import annotations
from dataclasses import dataclass
from fnmatch import fnmatchcase, translate
from pathlib import Path
from typing import Iterable, List, Optional, Pattern, Set, Tuple

import os
import re

from borg.errors import DiscoveryError
from borg.paths import canonicalize, ensure_directory

# Ceiling for recursive walks; symlink cycles are cut earlier by inode.
MAX_DEPTH = 64
HIDDEN_PREFIX = "."


def _compile_excludes(patterns: Iterable[str]) -> List[Pattern[str]]:
    compiled: List[Pattern[str]] = []
    for pat in patterns:
        if not pat or not pat.strip():
            raise DiscoveryError("Empty exclude pattern")
        try:
            compiled.append(re.compile(translate(pat)))
        except re.error as e:
            raise DiscoveryError(f"Invalid exclude pattern '{pat}': {e}") from e
    return compiled


def _extension_glob(extension: Optional[str]) -> Optional[str]:
    if not extension:
        return None
    ext = extension.strip()
    if ext.startswith("*."):
        return ext
    return "*." + ext.lstrip(".")


def _is_hidden(name: str) -> bool:
    return name.startswith(HIDDEN_PREFIX)


def discover_files(
    root: Path,
    extension: Optional[str] = None,
    exclude: Iterable[str] = (),
    recursive: bool = False,
) -> List[Path]:
    """Walk `root` and return the matching regular files, sorted by path.

    Parameters
    ----------
    root :
        Directory to walk. Entries are reported under this path as given
        (callers pass the canonical source root).
    extension :
        Optional single extension filter (`"org"`, `".org"` or `"*.org"`).
        Directories are always descended regardless of the filter.
    exclude :
        Glob patterns matched against the full path of every entry. A
        matching directory prunes its whole subtree.
    recursive :
        When false only the direct children of `root` are considered.

    Raises
    ------
    DiscoveryError
        Bad exclude pattern, or any directory could not be listed.
    """
    root = Path(root)
    include_glob = _extension_glob(extension)
    excludes = _compile_excludes(exclude)
    max_depth = MAX_DEPTH if recursive else 0

    def excluded(path: str) -> bool:
        return any(p.match(path) for p in excludes)

    def on_error(err: OSError) -> None:
        raise DiscoveryError(
            f"Cannot read directory {err.filename}: {err.strerror}",
            path=Path(err.filename) if err.filename else root,
        ) from err

    if not root.is_dir():
        raise DiscoveryError(f"Source directory is not a directory: {root}", path=root)

    found: List[Path] = []
    visited: Set[Tuple[int, int]] = set()
    for dirpath, dirnames, filenames in os.walk(root, onerror=on_error, followlinks=True):
        depth = len(Path(dirpath).relative_to(root).parts)

        # a directory reached twice through symlinks is listed only once
        try:
            st = os.stat(dirpath)
        except OSError as e:
            on_error(e)
        if (st.st_dev, st.st_ino) in visited:
            dirnames[:] = []
            continue
        visited.add((st.st_dev, st.st_ino))

        # prune in place so os.walk never descends
        if depth >= max_depth:
            dirnames[:] = []
        else:
            dirnames[:] = sorted(
                d for d in dirnames
                if not _is_hidden(d) and not excluded(os.path.join(dirpath, d))
            )

        for name in filenames:
            if _is_hidden(name):
                continue
            if include_glob and not fnmatchcase(name, include_glob):
                continue
            full = os.path.join(dirpath, name)
            if excluded(full):
                continue
            # broken links, fifos, sockets
            if not os.path.isfile(full):
                continue
            found.append(Path(full))
    return sorted(found)


@dataclass(frozen=True)
class FileSet:
    """The files one project transforms, computed once and read-only after.

    Attributes:
        source_root: Canonical source directory.
        publish_root: Canonical output directory (created if it was missing).
        entries: Matched files under `source_root`, sorted by path.
    """
    source_root: Path
    publish_root: Path
    entries: Tuple[Path, ...]

    @classmethod
    def discover(
        cls,
        source_root: Path,
        publish_root: Path,
        extension: Optional[str] = None,
        exclude: Iterable[str] = (),
        recursive: bool = False,
    ) -> "FileSet":
        src = canonicalize(source_root)
        entries = discover_files(src, extension=extension, exclude=exclude, recursive=recursive)
        dest = ensure_directory(publish_root)
        return cls(source_root=src, publish_root=dest, entries=tuple(entries))

    def __len__(self) -> int:
        return len(self.entries)
