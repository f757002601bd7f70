"""Roadmap package exports for models, parsing, and the dependency forest."""

from seslog.roadmap.models import ItemStatus, RoadmapData, RoadmapItem
from seslog.roadmap.parser import (
    load_roadmap,
    mark_complete,
    parse_roadmap,
    parse_roadmap_data,
    validate_dependencies,
)
from seslog.roadmap.tree import (
    PhaseGroup,
    RenderEntry,
    RenderPlan,
    TreeNode,
    assign_depths,
    build_render_plan,
    build_tree,
    flatten_tree,
    group_by_phase,
    has_dependency_info,
)

__all__ = [
    "ItemStatus",
    "RoadmapData",
    "RoadmapItem",
    "load_roadmap",
    "mark_complete",
    "parse_roadmap",
    "parse_roadmap_data",
    "validate_dependencies",
    "PhaseGroup",
    "RenderEntry",
    "RenderPlan",
    "TreeNode",
    "assign_depths",
    "build_render_plan",
    "build_tree",
    "flatten_tree",
    "group_by_phase",
    "has_dependency_info",
]
