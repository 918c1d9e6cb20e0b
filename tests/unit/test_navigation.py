"""Tests for tree navigation."""

from tests.unit.fakes import NOW, make_chain, make_container, make_group, make_thread
from threads_tree.config import NodeLabels
from threads_tree.core.tree.navigation import (
    build_subtree,
    find_entity,
    get_ancestry,
    get_siblings,
    render_path,
    render_subtree,
)
from threads_tree.models.entity import ThreadsData

PLAIN = NodeLabels(thread="", container="", group="")


def _by_id(data: ThreadsData) -> dict:
    return {e.id: e for e in data.entities}


def test_find_entity_by_exact_id(sample_data: ThreadsData) -> None:
    found = find_entity(sample_data.entities, "t-api-0001")
    assert found is not None and found.name == "Ship API"


def test_find_entity_by_name_is_case_insensitive(sample_data: ThreadsData) -> None:
    found = find_entity(sample_data.entities, "backend")
    assert found is not None and found.id == "c-backend"


def test_find_entity_by_unique_partial_match(sample_data: ThreadsData) -> None:
    found = find_entity(sample_data.entities, "garde")
    assert found is not None and found.id == "t-garden-03"
    found = find_entity(sample_data.entities, "t-tax")
    assert found is not None and found.id == "t-taxes-04"


def test_find_entity_ambiguous_or_missing(sample_data: ThreadsData) -> None:
    assert find_entity(sample_data.entities, "t-") is None
    assert find_entity(sample_data.entities, "nothing like this") is None


def test_exact_id_beats_name() -> None:
    by_name = make_thread("x", name="y")
    by_id = make_thread("y", name="other")
    assert find_entity([by_name, by_id], "y") is by_id


def test_ancestry_is_root_first(sample_data: ThreadsData) -> None:
    auth = _by_id(sample_data)["t-auth-0002"]
    path = get_ancestry(auth, _by_id(sample_data))
    assert [e.id for e in path] == ["c-backend", "t-api-0001", "t-auth-0002"]


def test_ancestry_stops_on_cycle_and_missing_parent() -> None:
    a = make_thread("a", parent_id="b")
    b = make_thread("b", parent_id="a")
    assert [e.id for e in get_ancestry(a, {"a": a, "b": b})] == ["b", "a"]
    orphan = make_thread("o", parent_id="gone")
    assert get_ancestry(orphan, {"o": orphan}) == [orphan]


def test_siblings_share_a_parent() -> None:
    entities = [
        make_thread("a"),
        make_thread("b"),
        make_thread("a1", parent_id="a"),
        make_thread("a2", parent_id="a"),
    ]
    assert [e.id for e in get_siblings(entities[2], entities)] == ["a2"]
    assert [e.id for e in get_siblings(entities[0], entities)] == ["b"]


def test_subtree_ignores_groups() -> None:
    root = make_container("c", group_id="g1")
    child = make_thread("t", parent_id="c", group_id="g2")
    node = build_subtree(root, [root, child])
    assert [n.entity.id for n in node.children] == ["t"]


def test_subtree_depth_limit() -> None:
    entities = [make_thread("a"), make_thread("b", parent_id="a"), make_thread("c", parent_id="b")]
    assert build_subtree(entities[0], entities, max_depth=0).children == ()
    one = build_subtree(entities[0], entities, max_depth=1)
    assert [n.entity.id for n in one.children] == ["b"]
    assert one.children[0].children == ()
    full = build_subtree(entities[0], entities)
    assert full.children[0].children[0].entity.id == "c"


def test_subtree_terminates_on_cycle() -> None:
    a = make_thread("a", parent_id="b")
    b = make_thread("b", parent_id="a")
    node = build_subtree(a, [a, b])
    assert node.children[0].entity.id == "b"
    assert node.children[0].children == ()


def test_render_subtree_puts_root_on_its_own_line() -> None:
    entities = [make_thread("a"), make_thread("b", parent_id="a")]
    lines = render_subtree(build_subtree(entities[0], entities), labels=PLAIN, now=NOW)
    assert lines == ["Thread a [a] Hot ★★★☆☆", "└── Thread b [b] Hot ★★★☆☆"]


def test_render_path(sample_data: ThreadsData) -> None:
    auth = _by_id(sample_data)["t-auth-0002"]
    path = get_ancestry(auth, _by_id(sample_data))
    work = make_group("g-work", "Work")
    assert render_path(path, group=work, labels=PLAIN) == "Work › Backend › Ship API › Auth tokens"
    assert render_path(path) == "\U0001f4c1 Backend › Ship API › Auth tokens"


def test_subtree_of_deep_parent_chain() -> None:
    chain = make_chain(1500)
    node = build_subtree(chain[0], chain)
    depth = 0
    while node.children:
        (node,) = node.children
        depth += 1
    assert depth == 1499
    limited = build_subtree(chain[0], chain, max_depth=3)
    assert limited.children[0].children[0].children[0].children == ()
    assert len(render_subtree(node, labels=PLAIN, now=NOW)) == 1
    assert len(render_subtree(build_subtree(chain[0], chain), now=NOW)) == 1500
