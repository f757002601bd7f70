"""Shared API logic for CLI and HTTP endpoints.

Both the argparse CLI and the dashboard handler call these functions so the
roadmap payloads stay identical across surfaces.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from seslog import __version__
from seslog.app.render import plan_to_dict
from seslog.config.logging import logger
from seslog.config.project_scope import resolve_roadmap_path
from seslog.config.settings import get_config
from seslog.roadmap.parser import load_roadmap, mark_complete, read_roadmap_text
from seslog.roadmap.tree import RenderPlan, build_render_plan


def api_health() -> dict[str, Any]:
    """Return health check payload."""
    return {"status": "ok", "version": __version__}


def roadmap_path(raw: str | Path | None = None) -> Path:
    """Resolve the roadmap file for an explicit path or the current project."""
    return resolve_roadmap_path(raw, filename=get_config().roadmap_filename)


def load_plan(raw: str | Path | None = None) -> tuple[Path, RenderPlan]:
    """Load one roadmap file and build its rendering plan."""
    path = roadmap_path(raw)
    plan = build_render_plan(load_roadmap(path))
    return path, plan


def api_roadmap(raw: str | Path | None = None) -> dict[str, Any]:
    """Return the rendering plan payload for one roadmap file."""
    path, plan = load_plan(raw)
    payload = plan_to_dict(plan)
    payload["path"] = str(path)
    return payload


def api_validate(raw: str | Path | None = None) -> dict[str, Any]:
    """Return dependency warnings for one roadmap file."""
    path = roadmap_path(raw)
    data = load_roadmap(path)
    return {
        "path": str(path),
        "items": len(data.items),
        "warnings": list(data.warnings),
        "ok": not data.warnings,
    }


def api_complete(item_text: str, raw: str | Path | None = None) -> dict[str, Any]:
    """Mark one item done in the roadmap file and activate the next pending item."""
    path = roadmap_path(raw)
    content = read_roadmap_text(path)
    updated = mark_complete(content, item_text)
    if updated is None:
        return {"path": str(path), "updated": False, "error": f"item_not_found:{item_text}"}
    path.write_text(updated, encoding="utf-8")
    logger.info("Marked '{}' done in {}", item_text, path)
    return {"path": str(path), "updated": True}
