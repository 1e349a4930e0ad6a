from __future__ import annotations
from pathlib import Path
import textwrap

import pytest

from borg.cli.publish import build_parser, main


def _site(tmp_path: Path, body: str) -> Path:
    cfg = tmp_path / "site.yaml"
    cfg.write_text(textwrap.dedent(body).lstrip(), encoding="utf-8")
    return cfg


def _run(argv) -> int:
    with pytest.raises(SystemExit) as ei:
        main(argv)
    return ei.value.code


def test_parser_defaults():
    ns = build_parser().parse_args(["publish", "site.yaml"])
    assert ns.file == "site.yaml"
    assert ns.no_progress is False
    assert ns.cmd == "publish"


def test_publish_success(tmp_path: Path):
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "a.org").write_text("* Hi\n", encoding="utf-8")
    cfg = _site(tmp_path, """
        projects:
          - name: site
            base_directory: src
            publishing_directory: out
            publish_action: to-html
        """)
    assert _run(["publish", str(cfg), "--no-progress"]) == 0
    assert (tmp_path / "out" / "a.html").exists()


def test_publish_with_a_failing_project(tmp_path: Path):
    cfg = _site(tmp_path, """
        projects:
          - {name: broken, base_directory: nowhere, publishing_directory: out}
        """)
    assert _run(["publish", str(cfg), "--no-progress"]) == 1


def test_invalid_or_missing_site(tmp_path: Path):
    assert _run(["publish", str(tmp_path / "missing.yaml")]) == 2
    cfg = _site(tmp_path, "projects:\n  - {name: x}\n")
    assert _run(["validate", str(cfg)]) == 2


def test_validate_lists_projects(tmp_path: Path, capsys):
    cfg = _site(tmp_path, """
        projects:
          - {name: one, base_directory: a, publishing_directory: o}
        """)
    assert _run(["validate", str(cfg)]) == 0
    assert "one (attachment)" in capsys.readouterr().out
