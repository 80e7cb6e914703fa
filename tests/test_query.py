"""Tests for boxgraph.query."""

from __future__ import annotations

from boxgraph import query
from tests._fixtures.sample_graph import make_box, make_context


def _ranking_context():
    return make_context(
        [
            make_box("OneBox", "src/one.cpp", category="network", description="tx"),
            make_box("ThreeBox", "src/three.cpp", category="network", description="tx tx tx"),
            make_box("FiveBox", "src/five.cpp", category="wallet", description="tx tx tx tx tx"),
            make_box(
                "OtherThreeBox",
                "src/other.cpp",
                category="api",
                description="tx",
                functions=["SendTx", "RelayTx"],
            ),
            make_box("NoneBox", "src/none.cpp", description="nothing here"),
        ]
    )


def test_by_keyword_ranks_by_occurrences_with_stable_ties() -> None:
    result = query.by_keyword(_ranking_context(), "TX")

    assert [(match.box.id, match.relevance) for match in result.matches] == [
        ("FiveBox", 5),
        ("ThreeBox", 3),
        ("OtherThreeBox", 3),
        ("OneBox", 1),
    ]
    assert result.total == 4
    assert result.overflow == 0
    assert result.fallback is False


def test_by_keyword_limits_results_and_reports_overflow() -> None:
    boxes = [
        make_box(f"Item{index}Box", f"src/item{index}.cpp", description="block")
        for index in range(12)
    ]
    result = query.by_keyword(make_context(boxes), "block")

    assert len(result.matches) == 10
    assert result.total == 12
    assert result.overflow == 2


def test_by_keyword_treats_keyword_literally() -> None:
    ctx = make_context(
        [
            make_box("DotBox", "src/dot.cpp", description="a.b"),
            make_box("PlainBox", "src/plain.cpp", description="axb"),
        ]
    )

    result = query.by_keyword(ctx, "a.b")

    assert [match.box.id for match in result.matches] == ["DotBox"]


def test_search_text_covers_interface_and_context() -> None:
    box = make_box(
        "ScriptBox",
        "src/Script.cpp",
        description="Evaluates",
        ai_context="Purpose: Engine",
        functions=["EvalScript"],
        classes=["CScript"],
        opcodes=["OP_CAT"],
    )

    text = query.search_text(box)

    assert text == "src/script.cpp\nevaluates\npurpose: engine\nevalscript\ncscript\nop_cat"


def test_by_category_returns_boxes_in_registry_order() -> None:
    ctx = _ranking_context()

    result = query.by_category(ctx, "network")

    assert result.found
    assert [box.id for box in result.boxes] == ["OneBox", "ThreeBox"]


def test_by_category_miss_lists_available_categories() -> None:
    result = query.by_category(_ranking_context(), "gui")

    assert not result.found
    assert result.boxes == []
    assert result.available == [("network", 2), ("wallet", 1), ("api", 1), ("other", 1)]


def test_list_categories_sorts_by_count_descending() -> None:
    ctx = make_context(
        [
            make_box("ABox", "a.cpp", category="api"),
            make_box("BBox", "b.cpp", category="wallet"),
            make_box("CBox", "c.cpp", category="wallet"),
            make_box("DBox", "d.cpp", category="storage"),
        ]
    )

    assert query.list_categories(ctx) == [("wallet", 2), ("api", 1), ("storage", 1)]


def test_by_dependency_lists_dependents() -> None:
    ctx = make_context(
        [
            make_box("MainBox", "src/main.cpp", dependencies=["util.h", "net.h"]),
            make_box("NetBox", "src/net.cpp", dependencies=["util.h"]),
        ]
    )

    result = query.by_dependency(ctx, "util.h")

    assert result.found
    assert [box.id for box in result.dependents] == ["MainBox", "NetBox"]


def test_by_dependency_miss_suggests_related_names() -> None:
    ctx = make_context(
        [
            make_box(
                "MainBox",
                "src/main.cpp",
                dependencies=["script.h", "script/interpreter.h", "util.h", "crypto/sha256.h"],
            ),
        ]
    )

    result = query.by_dependency(ctx, "script")

    assert not result.found
    assert result.suggestions == ["script.h", "script/interpreter.h"]


def test_by_dependency_suggests_names_contained_in_query() -> None:
    ctx = make_context([make_box("MainBox", "src/main.cpp", dependencies=["util.h"])])

    result = query.by_dependency(ctx, "src/util.h")

    assert result.suggestions == ["util.h"]


def test_by_box_id_hit_and_miss() -> None:
    ctx = make_context(
        [
            make_box("WalletBox", "src/wallet.cpp"),
            make_box("WalletdbBox", "src/walletdb.cpp"),
            make_box("MainBox", "src/main.cpp"),
        ]
    )

    hit = query.by_box_id(ctx, "MainBox")
    assert hit.found
    assert hit.box is ctx.legend.boxes["MainBox"]

    miss = query.by_box_id(ctx, "wallet")
    assert not miss.found
    assert miss.suggestions == ["WalletBox", "WalletdbBox"]


def test_stats_counts_artifacts() -> None:
    ctx = make_context(
        [
            make_box("MainBox", "src/main.cpp", category="core", dependencies=["util.h"]),
            make_box("UtilBox", "src/util.h", category="utilities"),
        ],
        security={"audit_required": True},
    )

    summary = query.stats(ctx)

    assert summary.boxes == 2
    assert summary.categories == 2
    assert summary.dependencies == 1
    assert summary.embeddings == 0
    assert summary.error_templates == 0
    assert summary.metadata["project"] == "Sample"
    assert summary.security == {"audit_required": True}


def test_semantic_falls_back_to_keyword_search() -> None:
    ctx = _ranking_context()

    result = query.semantic(ctx, "tx")

    assert result.fallback is True
    assert [match.box.id for match in result.matches] == [
        match.box.id for match in query.by_keyword(ctx, "tx").matches
    ]
