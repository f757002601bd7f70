"""Roadmap dependency forest: build, depth assignment, flattening, phase grouping.

Roadmap data comes from user- or agent-authored markdown and is never
validated upstream, so every function here is total over its input: dangling
references become roots, duplicate ids resolve to the last occurrence, and
cycles are cut instead of traversed.

Structure rules:

- Each item has at most one parent: the item whose ``item_id`` matches the
  LAST entry of its ``depends_on`` list. Earlier entries do not shape the tree.
- Forests are built per phase bucket, so an edge whose target sits in another
  phase is dangling within the bucket and its source becomes a root there.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from seslog.config.logging import logger
from seslog.roadmap.models import RoadmapData, RoadmapItem


@dataclass(eq=False)
class TreeNode:
    """One roadmap item placed in the dependency forest."""

    item: RoadmapItem
    children: list[TreeNode] = field(default_factory=list, repr=False)
    depth: int = 0


@dataclass(frozen=True)
class RenderEntry:
    """One item in on-screen order with its indentation depth."""

    item: RoadmapItem
    depth: int


@dataclass(frozen=True)
class PhaseGroup:
    """Ordered entries for one phase; ``phase`` is None for the residual bucket."""

    phase: str | None
    entries: list[RenderEntry]


@dataclass(frozen=True)
class RenderPlan:
    """Complete rendering order for one roadmap."""

    groups: list[PhaseGroup]
    dependency_mode: bool
    progress_percent: float
    warnings: list[str]

    def entries(self) -> list[RenderEntry]:
        """Return all entries across groups in rendering order."""
        return [entry for group in self.groups for entry in group.entries]


def has_dependency_info(items: Iterable[RoadmapItem]) -> bool:
    """Return True when any item carries an id or a dependency reference."""
    return any(item.item_id or item.depends_on for item in items)


def build_tree(items: Sequence[RoadmapItem]) -> list[TreeNode]:
    """Build the dependency forest and return its roots in input order.

    Nodes caught in a dependency loop (self-reference, mutual references) are
    unreachable from any root. The first such node in input order is detached
    from its parent and promoted to a root, which breaks the loop; this
    repeats until every node hangs under some root.
    """
    nodes = [TreeNode(item=item) for item in items]

    index: dict[str, TreeNode] = {}
    for node in nodes:
        if node.item.item_id:
            index[node.item.item_id] = node

    parents: dict[int, TreeNode] = {}
    for node in nodes:
        if not node.item.depends_on:
            continue
        parent = index.get(node.item.depends_on[-1])
        if parent is None:
            continue
        parent.children.append(node)
        parents[id(node)] = parent

    roots_by_id = {id(node) for node in nodes if id(node) not in parents}
    reached = _reachable([node for node in nodes if id(node) in roots_by_id])
    for node in nodes:
        if id(node) in reached:
            continue
        parent = parents.pop(id(node))
        parent.children = [child for child in parent.children if child is not node]
        roots_by_id.add(id(node))
        reached |= _reachable([node])
        logger.debug(
            "roadmap | dependency loop cut at '{}'", node.item.item_id or node.item.item_text
        )

    return [node for node in nodes if id(node) in roots_by_id]


def _reachable(starts: Sequence[TreeNode]) -> set[int]:
    """Return identity keys of every node reachable from ``starts``."""
    seen: set[int] = set()
    stack = list(starts)
    while stack:
        node = stack.pop()
        if id(node) in seen:
            continue
        seen.add(id(node))
        stack.extend(node.children)
    return seen


def assign_depths(roots: Sequence[TreeNode]) -> None:
    """Set ``depth`` breadth-first: roots at 0, children one below their parent."""
    visited: set[int] = set()
    queue: deque[TreeNode] = deque()
    for root in roots:
        if id(root) in visited:
            continue
        visited.add(id(root))
        root.depth = 0
        queue.append(root)
    while queue:
        node = queue.popleft()
        for child in node.children:
            if id(child) in visited:
                continue
            visited.add(id(child))
            child.depth = node.depth + 1
            queue.append(child)


def flatten_tree(roots: Sequence[TreeNode]) -> list[RenderEntry]:
    """Walk the forest pre-order: each node, then its whole subtree, then siblings."""
    entries: list[RenderEntry] = []
    visited: set[int] = set()
    stack = list(reversed(roots))
    while stack:
        node = stack.pop()
        if id(node) in visited:
            continue
        visited.add(id(node))
        entries.append(RenderEntry(item=node.item, depth=node.depth))
        stack.extend(reversed(node.children))
    return entries


def group_by_phase(
    items: Iterable[RoadmapItem],
) -> list[tuple[str | None, list[RoadmapItem]]]:
    """Partition items by phase in first-seen order; unphased items come last."""
    phases: dict[str, list[RoadmapItem]] = {}
    no_phase: list[RoadmapItem] = []
    for item in items:
        if item.phase:
            phases.setdefault(item.phase, []).append(item)
        else:
            no_phase.append(item)
    groups: list[tuple[str | None, list[RoadmapItem]]] = list(phases.items())
    if no_phase:
        groups.append((None, no_phase))
    return groups


def build_render_plan(data: RoadmapData) -> RenderPlan:
    """Turn roadmap data into phase groups of depth-tagged entries.

    Legacy roadmaps without ids or dependencies render flat. Otherwise each
    phase bucket gets its own forest. Warnings pass through verbatim.
    """
    dependency_mode = has_dependency_info(data.items)
    groups: list[PhaseGroup] = []
    for phase, items in group_by_phase(data.items):
        if dependency_mode:
            roots = build_tree(items)
            assign_depths(roots)
            entries = flatten_tree(roots)
        else:
            entries = [RenderEntry(item=item, depth=0) for item in items]
        groups.append(PhaseGroup(phase=phase, entries=entries))
    return RenderPlan(
        groups=groups,
        dependency_mode=dependency_mode,
        progress_percent=data.progress_percent,
        warnings=list(data.warnings),
    )


if __name__ == "__main__":
    """Run a real-path smoke test for the design/implement/orphan roadmap."""
    sample = [
        RoadmapItem(item_id="1", item_text="Design", phase="P1"),
        RoadmapItem(item_id="2", depends_on=("1",), item_text="Implement", phase="P1"),
        RoadmapItem(item_id="3", depends_on=("9",), item_text="Orphan", phase="P1"),
    ]
    plan = build_render_plan(RoadmapData(items=sample))
    flat = [(entry.item.item_id, entry.depth) for entry in plan.entries()]
    assert flat == [("1", 0), ("2", 1), ("3", 0)], flat
    loop = [
        RoadmapItem(item_id="a", depends_on=("b",), item_text="A"),
        RoadmapItem(item_id="b", depends_on=("a",), item_text="B"),
    ]
    assert len(build_render_plan(RoadmapData(items=loop)).entries()) == 2
    print("roadmap.tree: self-test passed")
