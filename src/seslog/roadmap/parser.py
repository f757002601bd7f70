"""Markdown roadmap parsing, dependency validation, and checkbox updates.

Roadmap format::

    ## Phase 1: Data Prep
    - [x] Download dataset {id: data}
    - [>] Train baseline model {id: train, depends: data}
    - [ ] Evaluate {depends: train, data}

``## `` headings set the phase of the items below them. The checkbox marker
selects the status (see ``STATUS_MARKERS``). A trailing ``{...}`` block is
read as attributes only when it starts with ``id:`` or ``depends:``, so text
such as ``Implement {HashMap} cache`` is left alone.
"""

from __future__ import annotations

import re
from pathlib import Path

from seslog.config.logging import logger
from seslog.roadmap.models import STATUS_MARKERS, ItemStatus, RoadmapData, RoadmapItem

ITEM_RE = re.compile(r"^-\s+\[([ x>~!])\]\s+(.+?)\s*$")
ATTR_RE = re.compile(r"\s*\{((?:id|depends)\s*:[^}]*)\}\s*$")
PHASE_RE = re.compile(r"^##\s+(.+)$")
_ATTR_KEY_RE = re.compile(r"(?<![\w-])(id|depends)\s*:")
_MARKER_RE = re.compile(r"\[[ x>~!]\]")


def parse_attributes(raw: str) -> tuple[str | None, list[str]]:
    """Parse ``id: train, depends: a, b`` into ``("train", ["a", "b"])``.

    ``depends`` values run until the next keyword; a repeated ``id`` keeps the
    last value. Text before the first keyword is ignored.
    """
    item_id: str | None = None
    depends: list[str] = []
    keys = list(_ATTR_KEY_RE.finditer(raw))
    for pos, match in enumerate(keys):
        end = keys[pos + 1].start() if pos + 1 < len(keys) else len(raw)
        value = raw[match.end() : end].strip().rstrip(",").strip()
        if match.group(1) == "id":
            if value:
                item_id = value
        else:
            depends.extend(part.strip() for part in value.split(",") if part.strip())
    return item_id, depends


def _split_attributes(full_text: str) -> tuple[str, str | None, list[str]]:
    """Split item text from its trailing attribute block, if any."""
    match = ATTR_RE.search(full_text)
    if match is None:
        return full_text.strip(), None, []
    item_id, depends = parse_attributes(match.group(1))
    return full_text[: match.start()].strip(), item_id, depends


def parse_roadmap(content: str) -> list[RoadmapItem]:
    """Parse roadmap markdown into items in document order."""
    items: list[RoadmapItem] = []
    phase: str | None = None
    for lineno, line in enumerate(content.splitlines(), start=1):
        trimmed = line.strip()
        heading = PHASE_RE.match(trimmed)
        if heading:
            phase = heading.group(1).strip()
            continue
        match = ITEM_RE.match(trimmed)
        if match is None:
            continue
        text, item_id, depends = _split_attributes(match.group(2))
        items.append(
            RoadmapItem(
                phase=phase,
                item_text=text,
                status=STATUS_MARKERS[match.group(1)],
                item_id=item_id,
                depends_on=tuple(depends),
                line_number=lineno,
            )
        )
    return items


def validate_dependencies(items: list[RoadmapItem]) -> list[str]:
    """Return one warning per dependency reference that names no known id."""
    known_ids = {item.item_id for item in items if item.item_id}
    warnings: list[str] = []
    for item in items:
        for dep in item.depends_on:
            if dep not in known_ids:
                label = item.item_id or item.item_text
                warnings.append(f"Item '{label}' depends on '{dep}' which does not exist")
    return warnings


def compute_progress(items: list[RoadmapItem]) -> float:
    """Return the share of done items as a whole-number percentage."""
    if not items:
        return 0.0
    done = sum(1 for item in items if item.status is ItemStatus.done)
    # Half-up rounding; round() would send 12.5 to 12.
    return float(int(done / len(items) * 100 + 0.5))


def parse_roadmap_data(content: str) -> RoadmapData:
    """Parse markdown into items plus progress and dependency warnings."""
    items = parse_roadmap(content)
    return RoadmapData(
        items=items,
        progress_percent=compute_progress(items),
        warnings=validate_dependencies(items),
    )


def active_item(content: str) -> RoadmapItem | None:
    """Return the first active item, if any."""
    return next(
        (item for item in parse_roadmap(content) if item.status is ItemStatus.active),
        None,
    )


def mark_complete(content: str, item_text: str) -> str | None:
    """Check off the item whose text matches and activate the next pending item.

    Matching ignores the attribute block, which is preserved in the output.
    Returns the updated document, or None when no item matches.
    """
    lines = content.splitlines()
    target: int | None = None
    for idx, line in enumerate(lines):
        match = ITEM_RE.match(line.strip())
        if match and _split_attributes(match.group(2))[0] == item_text:
            target = idx
            break
    if target is None:
        return None

    lines[target] = _MARKER_RE.sub("[x]", lines[target], count=1)
    for idx in range(target + 1, len(lines)):
        match = ITEM_RE.match(lines[idx].strip())
        if match and match.group(1) == " ":
            lines[idx] = _MARKER_RE.sub("[>]", lines[idx], count=1)
            break

    updated = "\n".join(lines)
    if content.endswith("\n"):
        updated += "\n"
    return updated


def read_roadmap_text(path: Path) -> str:
    """Return roadmap file content, raising coded errors for missing or non-UTF-8 files."""
    if not path.is_file():
        raise FileNotFoundError(f"roadmap_missing:{path}")
    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise ValueError(f"roadmap_unreadable:{path}") from exc


def load_roadmap(path: Path) -> RoadmapData:
    """Read and parse one roadmap file."""
    data = parse_roadmap_data(read_roadmap_text(path))
    logger.debug(
        "roadmap | loaded {} items from {} ({} warnings)",
        len(data.items),
        path,
        len(data.warnings),
    )
    return data


if __name__ == "__main__":
    """Run a real-path smoke test for attribute parsing and checkbox updates."""
    sample = "## P\n- [x] A {id: a}\n- [>] B {id: b, depends: a}\n- [ ] C {depends: b, z}\n"
    data = parse_roadmap_data(sample)
    assert [item.item_id for item in data.items] == ["a", "b", None]
    assert data.items[2].depends_on == ("b", "z")
    assert data.warnings == ["Item 'C' depends on 'z' which does not exist"]
    assert data.progress_percent == 33.0
    updated = mark_complete(sample, "B")
    assert updated is not None and "- [>] C {depends: b, z}" in updated
    print("roadmap.parser: self-test passed")
