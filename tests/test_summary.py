"""Tests for the Markdown build summary."""

from __future__ import annotations

from boxgraph.models import ErrorTemplateSet, SearchIndex
from boxgraph.summary import render_summary
from tests._fixtures.sample_graph import make_box, make_context


def _render(boxes, **kwargs) -> str:
    ctx = make_context(boxes)
    return render_summary(
        ctx.legend,
        SearchIndex(created="now", embedding_dimensions=16),
        ErrorTemplateSet(protocol="p", version="1.0", created="now"),
        generated="2026-01-01T00:00:00Z",
        **kwargs,
    )


def test_summary_header_and_statistics() -> None:
    text = _render([make_box("MainBox", "src/main.cpp", category="core-consensus")])

    assert text.startswith("# Sample Knowledge Graph Summary\n")
    assert "**Generated:** 2026-01-01T00:00:00Z" in text
    assert "**Protocol:** City of Boxes v1.0" in text
    assert "- **Total Boxes:** 1" in text
    assert "- **Categories:** 1" in text
    assert "- **Embeddings:** 0" in text


def test_summary_previews_first_five_boxes_per_category() -> None:
    boxes = [make_box(f"Net{index}Box", f"src/net{index}.cpp", category="network") for index in range(7)]

    text = _render(boxes)

    assert "### network\nBoxes: 7\n" in text
    assert "- Net0Box, Net1Box, Net2Box, Net3Box, Net4Box, ... (2 more)" in text
    assert "Net5Box" not in text


def test_summary_describes_present_key_boxes() -> None:
    text = _render(
        [
            make_box(
                "MainBox",
                "src/main.cpp",
                description="Core logic",
                functions=["ProcessBlock", "CheckBlock"],
            ),
            make_box("UtilBox", "src/util.cpp"),
        ]
    )

    assert "### MainBox\n**Path:** `src/main.cpp`" in text
    assert "**Description:** Core logic" in text
    assert "**Functions:** 2" in text
    assert "### UtilBox" not in text


def test_summary_without_key_boxes_says_so() -> None:
    text = _render([make_box("OtherBox", "other.txt")], key_boxes=("MissingBox",))

    assert "None of the key boxes are present in this project." in text


def test_summary_usage_points_at_output_dir() -> None:
    text = _render([], output_dir="kg")

    assert 'output = Path("kg")' in text
