from __future__ import annotations
from pathlib import Path
from typing import Union

from borg.errors import BuildIOError, PathEscapeError, PathNotFoundError

PathLike = Union[str, Path]


def resolve(path: PathLike, root: PathLike) -> Path:
    """Join a relative `path` under `root`; absolute paths pass through."""
    p = Path(path).expanduser()
    if p.is_absolute():
        return p
    return Path(root) / p


def canonicalize(path: PathLike) -> Path:
    try:
        return Path(path).resolve(strict=True)
    except FileNotFoundError as e:
        raise PathNotFoundError(f"No such file or directory: {path}", path=Path(path)) from e
    except (OSError, RuntimeError) as e:
        # not a directory, permission denied, symlink loop
        raise PathNotFoundError(f"Cannot canonicalize {path}: {e}", path=Path(path)) from e


def relativize(entry: PathLike, source_root: PathLike) -> Path:
    """Return `entry` relative to the canonical `source_root`.

    Both sides are canonicalized first, so a symlink whose target lives
    outside the source tree is rejected with :class:`PathEscapeError`
    instead of producing a `..` path.
    """
    root = canonicalize(source_root)
    target = canonicalize(entry)
    try:
        return target.relative_to(root)
    except ValueError as e:
        raise PathEscapeError(Path(entry), root) from e


def ensure_directory(path: PathLike) -> Path:
    p = Path(path)
    if p.exists():
        if not p.is_dir():
            raise BuildIOError(f"Not a directory: {p}", path=p)
        return p.resolve()
    try:
        p.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise BuildIOError(f"Could not create directory {p}: {e}", path=p) from e
    return p.resolve()
