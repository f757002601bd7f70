"""Text and JSON rendering of roadmap plans."""

from __future__ import annotations

from typing import Any

from seslog.roadmap.models import ItemStatus
from seslog.roadmap.tree import RenderEntry, RenderPlan

STATUS_GLYPHS: dict[ItemStatus, str] = {
    ItemStatus.done: "[x]",
    ItemStatus.active: "[>]",
    ItemStatus.pending: "[ ]",
    ItemStatus.suspended: "[~]",
    ItemStatus.blocked: "[!]",
}


def clamp_percent(value: Any) -> float:
    """Clamp a progress value into ``[0, 100]``; unusable values become 0."""
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return 0.0
    if parsed != parsed:  # NaN
        return 0.0
    return max(0.0, min(100.0, parsed))


def progress_bar(percent: float, width: int = 20) -> str:
    """Render ``[#####-----]  25%`` for a clamped percentage."""
    pct = clamp_percent(percent)
    filled = int(pct / 100 * width + 0.5)
    return f"[{'#' * filled}{'-' * (width - filled)}] {int(pct + 0.5):3d}%"


def render_entry(entry: RenderEntry, *, indent_width: int = 2, show_ids: bool = True) -> str:
    """Render one item line indented by its depth."""
    item = entry.item
    line = f"{' ' * (indent_width * entry.depth)}{STATUS_GLYPHS[item.status]} {item.item_text}"
    if show_ids and item.item_id:
        line += f" [{item.item_id}]"
    return line


def render_text(
    plan: RenderPlan,
    *,
    indent_width: int = 2,
    show_ids: bool = True,
    no_phase_label: str = "",
) -> str:
    """Render a plan as plain text: progress, phase sections, then warnings."""
    lines = [f"Progress {progress_bar(plan.progress_percent)}"]
    for group in plan.groups:
        heading = group.phase if group.phase is not None else no_phase_label
        lines.append("")
        if heading:
            lines.append(f"## {heading}")
        lines.extend(
            render_entry(entry, indent_width=indent_width, show_ids=show_ids)
            for entry in group.entries
        )
    if plan.warnings:
        lines.append("")
        lines.extend(f"! {warning}" for warning in plan.warnings)
    return "\n".join(lines)


def plan_to_dict(plan: RenderPlan) -> dict[str, Any]:
    """Serialize a plan into a JSON-safe payload."""
    return {
        "progress_percent": clamp_percent(plan.progress_percent),
        "dependency_mode": plan.dependency_mode,
        "groups": [
            {
                "phase": group.phase,
                "entries": [
                    {
                        "depth": entry.depth,
                        "item": entry.item.model_dump(mode="json"),
                    }
                    for entry in group.entries
                ],
            }
            for group in plan.groups
        ],
        "warnings": list(plan.warnings),
    }
