import logging

from routedoc.domain.grouping import group_by_resource
from routedoc.domain.models import RouteSummary, route_signature
from routedoc.publish.merge import (
    Preamble,
    extract_preamble,
    find_regions,
    merge_regions,
    publish,
)
from routedoc.render.markdown import render_route

DEFAULT = Preamble(frontmatter="title: API", info="# Info")

A = route_signature("a", ["GET"])
B = route_signature("b", ["GET"])
C = route_signature("c", ["GET"])


def _region(rid: str, body: str) -> str:
    return f"<!-- START_{rid} -->\n{body}\n<!-- END_{rid} -->"


def _summary(uri: str, title: str, group: str = "Things", methods=("GET",)) -> RouteSummary:
    return RouteSummary(
        id=route_signature(uri, list(methods)),
        resource_group=group,
        uri=uri,
        methods=list(methods),
        title=title,
    )


def test_find_regions():
    text = "intro\n" + _region(A, "one") + "\n\n" + _region(B, "two\nlines") + "\n"
    regions = find_regions(text)

    assert list(regions) == [A, B]
    assert regions[B] == _region(B, "two\nlines")
    assert find_regions(None) == {}


def test_find_regions_ignores_info_block():
    assert find_regions("<!-- START_INFO -->\nx\n<!-- END_INFO -->") == {}


def test_merge_new_route_uses_fresh():
    out = merge_regions({A: _region(A, "fresh")}, {}, {})
    assert out.regions == {A: _region(A, "fresh")}
    assert out.preserved == ()


def test_merge_unedited_region_is_overwritten():
    out = merge_regions(
        fresh={A: _region(A, "new")},
        published={A: _region(A, "old")},
        snapshot={A: _region(A, "old")},
    )
    assert out.regions[A] == _region(A, "new")
    assert out.preserved == ()


def test_merge_missing_snapshot_region_is_overwritten():
    out = merge_regions({A: _region(A, "new")}, {A: _region(A, "edited")}, {})
    assert out.regions[A] == _region(A, "new")
    assert out.preserved == ()


def test_merge_edited_region_is_kept():
    out = merge_regions(
        fresh={A: _region(A, "new"), B: _region(B, "b new")},
        published={A: _region(A, "hand edited"), B: _region(B, "b old")},
        snapshot={A: _region(A, "old"), B: _region(B, "b old")},
    )
    assert out.regions[A] == _region(A, "hand edited")
    assert out.regions[B] == _region(B, "b new")
    assert out.preserved == (A,)


def test_merge_drops_routes_missing_from_fresh():
    out = merge_regions({A: _region(A, "a")}, {A: _region(A, "a"), C: _region(C, "gone")}, {})
    assert list(out.regions) == [A]


def test_extract_preamble_carries_over_or_defaults():
    doc = "---\ntitle: Custom\nsearch: false\n---\n\n<!-- START_INFO -->\n# My info\n<!-- END_INFO -->\n"
    assert extract_preamble(doc, DEFAULT) == Preamble(frontmatter="title: Custom\nsearch: false", info="# My info")
    assert extract_preamble(None, DEFAULT) == DEFAULT
    assert extract_preamble("no blocks here", DEFAULT) == DEFAULT


def _publish(summaries, published=None, snapshot=None, render=render_route):
    groups = group_by_resource(summaries)
    fresh = {s.id: render(s) for s in summaries}
    return publish(groups, fresh, published, snapshot, DEFAULT)


def test_publish_round_trip_is_byte_identical():
    summaries = [_summary("a", "A"), _summary("b", "B", group="Other")]

    first = _publish(summaries)
    assert first.document == first.snapshot

    second = _publish(summaries, published=first.document, snapshot=first.snapshot)
    assert second.document == first.document
    assert second.snapshot == first.snapshot
    assert second.preserved == ()


def test_publish_keeps_hand_edits_and_warns(caplog):
    summaries = [_summary("a", "A"), _summary("b", "B")]
    first = _publish(summaries)

    edited = first.document.replace("## A\n", "## A, explained by a human\n")
    changed = [_summary("a", "A v2"), _summary("b", "B v2")]

    with caplog.at_level(logging.WARNING):
        result = _publish(changed, published=edited, snapshot=first.snapshot)

    assert "## A, explained by a human" in result.document
    assert "## A v2" not in result.document
    assert "## B v2" in result.document
    assert [s.uri for s in result.preserved] == ["a"]
    assert "Skipping modified route [GET] a" in caplog.text

    # snapshot always gets the unmerged rendering
    assert "## A v2" in result.snapshot
    assert "explained by a human" not in result.snapshot


def test_publish_edit_survives_until_snapshot_matches_again():
    summaries = [_summary("a", "A")]
    first = _publish(summaries)
    edited = first.document.replace("## A\n", "## A edited\n")

    second = _publish([_summary("a", "A v2")], published=edited, snapshot=first.snapshot)
    third = _publish([_summary("a", "A v3")], published=second.document, snapshot=second.snapshot)

    assert "## A edited" in third.document
    assert "## A v3" in third.snapshot


def test_publish_carries_preamble_over():
    summaries = [_summary("a", "A")]
    first = _publish(summaries)
    custom = first.document.replace("title: API", "title: Hand written")

    result = _publish(summaries, published=custom, snapshot=first.snapshot)
    assert result.document.startswith("---\ntitle: Hand written\n---")
    assert result.snapshot.startswith("---\ntitle: Hand written\n---")


def test_publish_groups_sorted_with_headings():
    summaries = [_summary("z", "Z", group="beta"), _summary("a", "A", group="Alpha")]
    doc = _publish(summaries).document
    assert doc.index("# Alpha") < doc.index("## A") < doc.index("# beta") < doc.index("## Z")


def test_publish_drops_deleted_routes():
    first = _publish([_summary("a", "A"), _summary("b", "B")])
    second = _publish([_summary("a", "A")], published=first.document, snapshot=first.snapshot)
    assert _summary("b", "B").id not in second.document
