"""Entrypoint: generate implementation guides and inspect the usage audit log."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

sys.path.insert(0, str(Path(__file__).resolve().parent / "src"))

from guide_agent.config import ConfigError, load_settings
from guide_agent.guide import Guide
from guide_agent.models import apply_migrations, get_connection, get_usage_summary, list_usage_records
from guide_agent.orchestrator import build_generator
from guide_agent.outcomes import Failure
from guide_agent.parsing.render import render_markdown
from guide_agent.utils import json_dumps


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Client request -> AI implementation guide")
    parser.add_argument("--settings", default="config/settings.yaml", help="Path to settings.yaml")
    parser.add_argument("--log-level", default="WARNING", help="Logging level (DEBUG, INFO, ...)")

    subparsers = parser.add_subparsers(dest="command")

    generate = subparsers.add_parser("generate", help="Generate a guide for one client request")
    generate.add_argument("text", nargs="?", help="Client request text")
    generate.add_argument("--file", help="Read the client request from a file")
    generate.add_argument("--provider", help="Provider override: name or provider:model")
    generate.add_argument("--actor", help="Authenticated actor id recorded in the audit log")
    generate.add_argument("--markdown", action="store_true", help="Print the guide as Markdown")

    usage = subparsers.add_parser("usage", help="Show the usage audit summary")
    usage.add_argument("--limit", type=int, default=10, help="Recent records to list")

    render = subparsers.add_parser("render", help="Render a stored guide JSON file as Markdown")
    render.add_argument("path", help="Path to a guide JSON file")

    subparsers.add_parser("init-db", help="Apply SQLite migrations only")
    return parser


def _read_request(args: argparse.Namespace) -> str:
    if getattr(args, "file", None):
        return Path(args.file).read_text(encoding="utf-8")
    if getattr(args, "text", None):
        return args.text
    return sys.stdin.read()


def main() -> int:
    load_dotenv()
    parser = _build_parser()
    args = parser.parse_args()
    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    command = args.command or "generate"

    config = load_settings(args.settings)
    db_path = config["database"]["path"]
    apply_migrations(db_path)

    if command == "init-db":
        print(f"Database initialized at {db_path}")
        return 0

    if command == "usage":
        with get_connection(db_path) as conn:
            summary = get_usage_summary(conn)
            recent = list_usage_records(conn, limit=args.limit)
        print(json_dumps({"summary": summary, "recent": recent}))
        return 0

    if command == "render":
        data = json.loads(Path(args.path).read_text(encoding="utf-8"))
        print(render_markdown(Guide.from_dict(data.get("guide", data))))
        return 0

    try:
        generator = build_generator(config)
    except ConfigError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2

    outcome = generator.generate_guide(
        _read_request(args),
        provider=getattr(args, "provider", None),
        actor_id=getattr(args, "actor", None),
    )
    if getattr(args, "markdown", False) and outcome.status == "success":
        print(render_markdown(outcome.guide))
    else:
        print(json_dumps(outcome.to_dict()))
    return 1 if isinstance(outcome, Failure) else 0


if __name__ == "__main__":
    sys.exit(main())
