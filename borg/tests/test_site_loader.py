from __future__ import annotations
from pathlib import Path
import textwrap

import pytest
from pydantic import ValidationError

from borg.errors import ConfigError
from borg.site.loader import load_site
from borg.site.models import PublishAction


def _write_yaml(p: Path, s: str) -> None:
    p.write_text(textwrap.dedent(s).lstrip(), encoding="utf-8")


def test_minimal_site_with_defaults(tmp_path: Path):
    cfg = tmp_path / "site.yaml"
    _write_yaml(
        cfg,
        """
        projects:
          - name: static
            base_directory: static
            publishing_directory: public/static
          - name: blog
            base_directory: posts
            base_extension: "*.org"
            publishing_directory: public
            publish_action: to-html
            auto_sitemap: true
            recent_first: true
            exclude: ["*/drafts"]
        """,
    )
    site = load_site(cfg)
    static, blog = site.projects
    assert static.publish_action is PublishAction.ATTACHMENT
    assert static.recursive is False
    assert static.exclude == []
    assert static.auto_sitemap is False
    assert blog.publish_action is PublishAction.TO_HTML
    assert blog.base_extension == "org"
    assert blog.sitemap_filename == "sitemap.org"
    assert blog.effective_sitemap_title == "Sitemap for project blog"
    assert blog.exclude == ["*/drafts"]


def test_projects_are_immutable(tmp_path: Path):
    cfg = tmp_path / "site.yaml"
    _write_yaml(cfg, """
        projects:
          - name: a
            base_directory: a
            publishing_directory: out
        """)
    (project,) = load_site(cfg).projects
    with pytest.raises(ValidationError):
        project.name = "b"


def test_duplicate_project_names(tmp_path: Path):
    cfg = tmp_path / "site.yaml"
    _write_yaml(cfg, """
        projects:
          - {name: a, base_directory: a, publishing_directory: out}
          - {name: a, base_directory: b, publishing_directory: out2}
        """)
    with pytest.raises(ValidationError):
        load_site(cfg)


def test_unknown_publish_action(tmp_path: Path):
    cfg = tmp_path / "site.yaml"
    _write_yaml(cfg, """
        projects:
          - {name: a, base_directory: a, publishing_directory: o, publish_action: rss}
        """)
    with pytest.raises(ValidationError):
        load_site(cfg)


def test_empty_name_and_nested_sitemap_filename(tmp_path: Path):
    cfg = tmp_path / "site.yaml"
    _write_yaml(cfg, """
        projects:
          - {name: " ", base_directory: a, publishing_directory: o}
        """)
    with pytest.raises(ValidationError):
        load_site(cfg)
    _write_yaml(cfg, """
        projects:
          - {name: a, base_directory: a, publishing_directory: o, sitemap_filename: sub/x.org}
        """)
    with pytest.raises(ValidationError):
        load_site(cfg)


def test_missing_and_malformed_files(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        load_site(tmp_path / "nope.yaml")
    bad = tmp_path / "bad.yaml"
    bad.write_text("projects: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_site(bad)
    scalar = tmp_path / "scalar.yaml"
    scalar.write_text("just a string\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_site(scalar)
