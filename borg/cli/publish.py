"""
borg: publish a site of Org/Markdown projects to static HTML.

Typical use:
    borg publish site.yaml
    borg validate site.yaml

Environment:
- BORG_LOG_LEVEL (default for --log-level; a .env file is honoured)

Exit codes:
- 0 every project built
- 1 at least one project failed (the others were still built)
- 2 the site description is missing or invalid
"""
from __future__ import annotations
import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List

from dotenv import load_dotenv
from pydantic import ValidationError

from borg.context import BuildContext
from borg.errors import ConfigError
from borg.pipeline import run_site
from borg.site.loader import load_site
from borg.site.models import Site

EXIT_OK = 0
EXIT_PROJECT_FAILED = 1
EXIT_BAD_CONFIG = 2


def _setup_logging(level: str) -> None:
    lvl = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=lvl,
        format="%(asctime)s | %(levelname)-8s | %(message)s",
        datefmt="%H:%M:%S",
    )


def _load(path_arg: str) -> tuple[Path, Site]:
    cfg_path = Path(path_arg).resolve()
    site = load_site(cfg_path)
    return cfg_path, site


def cmd_publish(args: argparse.Namespace) -> int:
    try:
        cfg_path, site = _load(args.file)
    except (FileNotFoundError, ConfigError, ValidationError) as e:
        print(f"[!] Invalid site description: {e}", file=sys.stderr)
        return EXIT_BAD_CONFIG

    ctx = BuildContext(
        root=cfg_path.parent,
        logger=logging.getLogger("borg"),
        progress=not args.no_progress,
    )
    results = run_site(site, ctx)
    failed = [r for r in results.values() if not r.ok]
    if failed:
        for r in failed:
            print(f"[!] {r.name}: {r.error}", file=sys.stderr)
        return EXIT_PROJECT_FAILED
    print(f"[ok] Published {len(results)} projects from {cfg_path}")
    return EXIT_OK


def cmd_validate(args: argparse.Namespace) -> int:
    try:
        cfg_path, site = _load(args.file)
    except (FileNotFoundError, ConfigError, ValidationError) as e:
        print(f"[!] Invalid site description: {e}", file=sys.stderr)
        return EXIT_BAD_CONFIG

    print(f"[ok] Site description valid: {cfg_path}")
    for p in site.projects:
        print(f"  - {p.name} ({p.publish_action.value})")
        print(f"      source:    {p.base_directory}")
        print(f"      publish:   {p.publishing_directory}")
        print(f"      extension: {p.base_extension or '*'}")
        print(f"      recursive: {p.recursive}")
        print(f"      exclude:   {p.exclude}")
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="borg", description="Publish Org projects to a static site")
    p.add_argument("--log-level", default=os.getenv("BORG_LOG_LEVEL", "INFO"),
                   help="DEBUG, INFO, WARNING, ERROR")
    sub = p.add_subparsers(dest="cmd", required=True)

    p_pub = sub.add_parser("publish", help="Execute the publish actions on the projects")
    p_pub.add_argument("file", help="Path to the site description (YAML)")
    p_pub.add_argument("--no-progress", action="store_true", help="Disable progress bars")
    p_pub.set_defaults(func=cmd_publish)

    p_val = sub.add_parser("validate", help="Validate and show the projects")
    p_val.add_argument("file", help="Path to the site description (YAML)")
    p_val.set_defaults(func=cmd_validate)
    return p


def main(argv: List[str] | None = None) -> None:
    load_dotenv()
    parser = build_parser()
    args = parser.parse_args(argv)
    _setup_logging(args.log_level)
    rc = args.func(args)
    raise SystemExit(rc)


if __name__ == "__main__":
    main()
