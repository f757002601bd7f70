"""Roadmap item and aggregate models shared by the parser, builder, and renderer.

Items are frozen: one render pass never mutates caller-owned data.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ItemStatus(str, Enum):
    """Lifecycle status of one roadmap item."""

    done = "done"
    active = "active"
    pending = "pending"
    suspended = "suspended"
    blocked = "blocked"


# Checkbox marker inside ``- [ ]`` for each status.
STATUS_MARKERS: dict[str, ItemStatus] = {
    "x": ItemStatus.done,
    ">": ItemStatus.active,
    " ": ItemStatus.pending,
    "~": ItemStatus.suspended,
    "!": ItemStatus.blocked,
}


class RoadmapItem(BaseModel):
    """One checklist entry of a project roadmap."""

    model_config = ConfigDict(frozen=True)

    phase: str | None = Field(default=None, description="Optional group label.")
    item_text: str = Field(description="Display text without the attribute block.")
    status: ItemStatus = ItemStatus.pending
    item_id: str | None = Field(
        default=None,
        description="Identifier other items may depend on. Empty means not referenceable.",
    )
    depends_on: tuple[str, ...] = Field(
        default=(),
        description="Ordered dependency identifiers; may dangle or form cycles.",
    )
    line_number: int | None = Field(
        default=None, description="1-based source line when parsed from markdown."
    )

    @field_validator("depends_on", mode="before")
    @classmethod
    def _none_as_empty(cls, value: object) -> object:
        """Treat a null dependency list as empty."""
        return () if value is None else value


class RoadmapData(BaseModel):
    """Items plus the source-supplied progress figure and warnings."""

    items: list[RoadmapItem] = Field(default_factory=list)
    progress_percent: float = 0.0
    warnings: list[str] = Field(default_factory=list)


if __name__ == "__main__":
    item = RoadmapItem(item_text="Train model", status="active", item_id="train")
    assert item.status is ItemStatus.active
    assert item.depends_on == ()
    data = RoadmapData.model_validate(
        {"items": [item.model_dump()], "progress_percent": 10}
    )
    assert data.items[0] == item
    print("roadmap.models: self-test passed")
