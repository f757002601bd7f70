"""Shared test utilities for configuration, roadmap items, and CLI runs."""

from __future__ import annotations

import io
import json
from contextlib import redirect_stdout
from pathlib import Path
from typing import Any

from seslog.config.settings import Config
from seslog.roadmap.models import RoadmapItem

ROADMAPS_DIR = Path(__file__).parent / "fixtures" / "roadmaps"


def make_config() -> Config:
    """Build a deterministic Config object matching the test config file."""
    return Config(
        roadmap_filename="ROADMAP.md",
        indent_width=2,
        show_ids=True,
        no_phase_label="",
        server_host="127.0.0.1",
        server_port=8766,
    )


def write_test_config(tmp_path: Path, **sections: dict[str, Any]) -> Path:
    """Write a test config.toml into ``tmp_path`` with optional section overrides.

    Usage::

        write_test_config(tmp_path, roadmap={"indent_width": 4})
    """
    all_sections: dict[str, dict[str, Any]] = {
        "roadmap": {
            "filename": "ROADMAP.md",
            "indent_width": 2,
            "show_ids": True,
            "no_phase_label": "",
        },
        "server": {"host": "127.0.0.1", "port": 8766},
    }
    for name, payload in sections.items():
        if isinstance(payload, dict):
            all_sections.setdefault(name, {}).update(payload)

    lines: list[str] = []
    for section_name, fields in all_sections.items():
        lines.append(f"[{section_name}]")
        for key, value in fields.items():
            if isinstance(value, bool):
                lines.append(f"{key} = {'true' if value else 'false'}")
            elif isinstance(value, (int, float)):
                lines.append(f"{key} = {value}")
            else:
                lines.append(f'{key} = "{value}"')
        lines.append("")

    config_path = tmp_path / "test_config.toml"
    config_path.write_text("\n".join(lines), encoding="utf-8")
    return config_path


def item(
    text: str,
    *,
    item_id: str | None = None,
    deps: tuple[str, ...] | list[str] = (),
    phase: str | None = None,
    status: str = "pending",
) -> RoadmapItem:
    """Build one roadmap item with short keyword names."""
    return RoadmapItem(
        item_text=text,
        item_id=item_id,
        depends_on=tuple(deps),
        phase=phase,
        status=status,
    )


def run_cli(args: list[str]) -> tuple[int, str]:
    """Run CLI command and return ``(exit_code, stdout_text)``."""
    from seslog.app import cli

    out = io.StringIO()
    with redirect_stdout(out):
        code = cli.main(args)
    return code, out.getvalue()


def run_cli_json(args: list[str]) -> tuple[int, dict]:
    """Run CLI command and parse stdout JSON payload."""
    code, output = run_cli(args)
    return code, json.loads(output)
