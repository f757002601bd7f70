"""Unit tests for text and JSON rendering of roadmap plans."""

from __future__ import annotations

import json

import pytest

from seslog.app.render import clamp_percent, plan_to_dict, progress_bar, render_text
from seslog.roadmap.models import RoadmapData
from seslog.roadmap.tree import build_render_plan
from tests.helpers import item


def _plan(**kwargs):
    items = [
        item("Design", item_id="1", phase="P1", status="done"),
        item("Implement", item_id="2", deps=["1"], phase="P1", status="active"),
        item("Loose end", status="blocked"),
    ]
    return build_render_plan(RoadmapData(items=items, **kwargs))


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (-5, 0.0),
        (0, 0.0),
        (42.5, 42.5),
        (100, 100.0),
        (250, 100.0),
        ("x", 0.0),
        (None, 0.0),
        (float("nan"), 0.0),
    ],
)
def test_clamp_percent(raw, expected):
    assert clamp_percent(raw) == expected


def test_progress_bar_is_clamped():
    assert progress_bar(-10, width=10) == "[----------]   0%"
    assert progress_bar(50, width=10) == "[#####-----]  50%"
    assert progress_bar(300, width=10) == "[##########] 100%"


@pytest.mark.parametrize(
    ("raw", "expected"),
    [(12.5, "[#-------]  13%"), (0.5, "[--------]   1%"), (99.5, "[########] 100%")],
)
def test_progress_bar_rounds_half_up(raw, expected):
    assert progress_bar(raw, width=8) == expected


def test_render_text_indents_by_depth_and_shows_ids():
    text = render_text(_plan(progress_percent=50))
    lines = text.splitlines()
    assert lines[0].startswith("Progress [")
    assert "## P1" in lines
    assert "[x] Design [1]" in lines
    assert "  [>] Implement [2]" in lines
    assert "[!] Loose end" in lines


def test_render_text_wider_indent_and_hidden_ids():
    text = render_text(_plan(), indent_width=4, show_ids=False)
    assert "    [>] Implement" in text.splitlines()
    assert "[1]" not in text


def test_render_text_unphased_bucket_label_and_order():
    lines = render_text(_plan(), no_phase_label="General").splitlines()
    assert lines.index("## General") > lines.index("## P1")
    assert lines[-1] == "[!] Loose end"


def test_render_text_unphased_bucket_without_label_has_no_heading():
    lines = render_text(_plan()).splitlines()
    headings = [line for line in lines if line.startswith("## ")]
    assert headings == ["## P1"]


def test_render_text_appends_warnings():
    text = render_text(_plan(warnings=["Item 'x' depends on 'y' which does not exist"]))
    assert text.splitlines()[-1] == "! Item 'x' depends on 'y' which does not exist"


def test_plan_to_dict_is_json_safe():
    payload = plan_to_dict(_plan(progress_percent=-3, warnings=["w"]))
    decoded = json.loads(json.dumps(payload))
    assert decoded["progress_percent"] == 0.0
    assert decoded["dependency_mode"] is True
    assert decoded["warnings"] == ["w"]
    assert [g["phase"] for g in decoded["groups"]] == ["P1", None]
    first_group = decoded["groups"][0]["entries"]
    assert [(e["item"]["item_id"], e["depth"]) for e in first_group] == [("1", 0), ("2", 1)]
    assert first_group[1]["item"]["status"] == "active"
    assert first_group[1]["item"]["depends_on"] == ["1"]
