"""Command-line interface for rendering, validating, and updating roadmaps.

All commands run locally against a roadmap markdown file. PATH arguments may
name the file or its directory; without one, the configured roadmap filename
at the git root (or the current directory) is used.
"""

from __future__ import annotations

import argparse
import json
import sys
from typing import Any

from seslog import __version__
from seslog.app.api import api_complete, api_validate, load_plan
from seslog.app.dashboard import run_dashboard_server
from seslog.app.render import plan_to_dict, render_text
from seslog.config.logging import configure_logging
from seslog.config.settings import get_config


def _emit(message: object = "", *, file: Any | None = None) -> None:
    """Write one CLI output line to stdout or a provided file-like target."""
    target = file if file is not None else sys.stdout
    target.write(f"{message}\n")


def _emit_json(payload: dict[str, Any]) -> None:
    """Write one JSON document to stdout."""
    _emit(json.dumps(payload, indent=2, ensure_ascii=True))


def _missing(exc: FileNotFoundError) -> int:
    """Report a missing roadmap file and return exit 1."""
    _emit(f"Roadmap not found: {str(exc).split(':', 1)[-1]}", file=sys.stderr)
    return 1


def _unreadable(exc: ValueError) -> int:
    """Report a roadmap file that is not valid UTF-8 and return exit 1."""
    _emit(f"Roadmap is not valid UTF-8: {str(exc).split(':', 1)[-1]}", file=sys.stderr)
    return 1


def _hoist_global_json_flag(raw: list[str]) -> list[str]:
    """Allow ``--json`` before or after subcommands by normalizing argv order."""
    if "--json" not in raw:
        return raw
    return ["--json"] + [item for item in raw if item != "--json"]


def _cmd_roadmap(args: argparse.Namespace) -> int:
    """Handle ``seslog roadmap``: print the indented, phase-grouped roadmap."""
    config = get_config()
    try:
        path, plan = load_plan(args.path)
    except FileNotFoundError as exc:
        return _missing(exc)
    except ValueError as exc:
        return _unreadable(exc)
    if args.json:
        payload = plan_to_dict(plan)
        payload["path"] = str(path)
        _emit_json(payload)
        return 0
    show_ids = config.show_ids and not args.no_ids
    _emit(
        render_text(
            plan,
            indent_width=config.indent_width,
            show_ids=show_ids,
            no_phase_label=config.no_phase_label,
        )
    )
    return 0


def _cmd_validate(args: argparse.Namespace) -> int:
    """Handle ``seslog validate``: list dangling dependency references."""
    try:
        payload = api_validate(args.path)
    except FileNotFoundError as exc:
        return _missing(exc)
    except ValueError as exc:
        return _unreadable(exc)
    if args.json:
        _emit_json(payload)
    elif payload["warnings"]:
        for warning in payload["warnings"]:
            _emit(f"! {warning}")
    else:
        _emit(f"{payload['items']} items, all dependencies resolve")
    return 0 if payload["ok"] else 1


def _cmd_complete(args: argparse.Namespace) -> int:
    """Handle ``seslog complete``: check off one item in place."""
    try:
        payload = api_complete(args.item_text, args.path)
    except FileNotFoundError as exc:
        return _missing(exc)
    except ValueError as exc:
        return _unreadable(exc)
    if args.json:
        _emit_json(payload)
    elif payload["updated"]:
        _emit(f"Marked done: {args.item_text}")
    else:
        _emit(f"No roadmap item matches: {args.item_text}", file=sys.stderr)
    return 0 if payload["updated"] else 1


def _cmd_dashboard(args: argparse.Namespace) -> int:
    """Handle ``seslog dashboard``: serve the read-only JSON API."""
    return run_dashboard_server(host=args.host, port=args.port)


def build_parser() -> argparse.ArgumentParser:
    """Construct the canonical seslog command-line parser."""
    _F = argparse.RawDescriptionHelpFormatter  # noqa: N806
    parser = argparse.ArgumentParser(
        prog="seslog",
        formatter_class=_F,
        description="seslog -- coding session log and roadmap viewer.\n"
        "Renders dependency-aware project roadmaps from markdown.",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Emit structured JSON instead of human-readable text",
    )
    sub = parser.add_subparsers(dest="command")

    # ── roadmap ──────────────────────────────────────────────────────
    roadmap = sub.add_parser(
        "roadmap",
        formatter_class=_F,
        help="Render a roadmap as an indented, phase-grouped tree",
        description=(
            "Render a roadmap. Items with {id: ...} / {depends: ...} attributes\n"
            "are indented under the item named by their last dependency.\n\n"
            "Examples:\n"
            "  seslog roadmap                  # ROADMAP.md at the git root\n"
            "  seslog roadmap docs/PLAN.md\n"
            "  seslog roadmap --json"
        ),
    )
    roadmap.add_argument("path", nargs="?", help="Roadmap file or its directory")
    roadmap.add_argument(
        "--no-ids", action="store_true", help="Hide [item_id] suffixes"
    )
    roadmap.set_defaults(func=_cmd_roadmap)

    # ── validate ─────────────────────────────────────────────────────
    validate = sub.add_parser(
        "validate",
        help="Report dependencies that reference unknown ids (exit 1 if any)",
    )
    validate.add_argument("path", nargs="?", help="Roadmap file or its directory")
    validate.set_defaults(func=_cmd_validate)

    # ── complete ─────────────────────────────────────────────────────
    complete = sub.add_parser(
        "complete",
        help="Mark an item done and activate the next pending item",
    )
    complete.add_argument("item_text", help="Item text, without the {...} attribute block")
    complete.add_argument("--path", help="Roadmap file or its directory")
    complete.set_defaults(func=_cmd_complete)

    # ── dashboard ────────────────────────────────────────────────────
    dashboard = sub.add_parser("dashboard", help="Serve the read-only JSON API")
    dashboard.add_argument("--host", help="Bind host (default from config)")
    dashboard.add_argument("--port", type=int, help="Bind port (default from config)")
    dashboard.set_defaults(func=_cmd_dashboard)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Entrypoint for CLI invocation with global flags and dispatch."""
    configure_logging()
    parser = build_parser()
    args = parser.parse_args(_hoist_global_json_flag(list(argv or sys.argv[1:])))

    if not getattr(args, "command", None):
        parser.print_help()
        return 0

    handler = getattr(args, "func", None)
    if handler is None:
        parser.print_help()
        return 2
    return int(handler(args))


if __name__ == "__main__":
    raise SystemExit(main())
