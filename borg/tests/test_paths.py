from __future__ import annotations
from pathlib import Path

import pytest

from borg.errors import BuildIOError, PathEscapeError, PathNotFoundError
from borg.paths import canonicalize, ensure_directory, relativize, resolve


def test_resolve_joins_relative_and_keeps_absolute(tmp_path: Path):
    assert resolve("docs", tmp_path) == tmp_path / "docs"
    assert resolve(tmp_path / "abs", "/elsewhere") == tmp_path / "abs"


def test_canonicalize_missing(tmp_path: Path):
    with pytest.raises(PathNotFoundError):
        canonicalize(tmp_path / "missing")


def test_relativize_inside_root(tmp_path: Path):
    f = tmp_path / "a" / "b.txt"
    f.parent.mkdir()
    f.write_text("x")
    assert relativize(f, tmp_path) == Path("a/b.txt")


def test_relativize_symlink_escaping_root(tmp_path: Path):
    root = tmp_path / "root"
    root.mkdir()
    outside = tmp_path / "secret.txt"
    outside.write_text("s")
    link = root / "link.txt"
    link.symlink_to(outside)
    with pytest.raises(PathEscapeError):
        relativize(link, root)


def test_relativize_through_symlinked_root(tmp_path: Path):
    real = tmp_path / "real"
    real.mkdir()
    (real / "f.txt").write_text("x")
    alias = tmp_path / "alias"
    alias.symlink_to(real, target_is_directory=True)
    assert relativize(alias / "f.txt", alias) == Path("f.txt")


def test_ensure_directory_creates_chain(tmp_path: Path):
    target = tmp_path / "x" / "y" / "z"
    out = ensure_directory(target)
    assert target.is_dir()
    assert out == target.resolve()
    # idempotent
    assert ensure_directory(target) == out


def test_ensure_directory_on_a_file(tmp_path: Path):
    f = tmp_path / "file"
    f.write_text("x")
    with pytest.raises(BuildIOError):
        ensure_directory(f)


def test_canonicalize_path_under_a_file(tmp_path: Path):
    f = tmp_path / "file"
    f.write_text("x")
    with pytest.raises(PathNotFoundError):
        canonicalize(f / "sub")


def test_canonicalize_symlink_loop(tmp_path: Path):
    a = tmp_path / "a"
    b = tmp_path / "b"
    a.symlink_to(b)
    b.symlink_to(a)
    with pytest.raises(PathNotFoundError):
        canonicalize(a)
