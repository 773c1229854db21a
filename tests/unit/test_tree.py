import pytest

from domain.errors import AmbiguousCode, MalformedResponse, NotFound
from domain.schemas import NodeKind
from domain.taxonomy import parse_taxonomy_tree
from infrastructure.transport.mock import SAMPLE_TREE


def test_parse_finds_nodes_at_any_depth() -> None:
    tree = parse_taxonomy_tree(SAMPLE_TREE)

    # Root has no taxonomy code and is not a node
    assert len(tree) == 7
    assert {n.taxonomy_code for n in tree} == {24, 431, 430, 14, 390, 4, 32}
    assert tree.find_unique(390, NodeKind.ATTRIBUTE).id == 1004


def test_parse_keeps_document_order() -> None:
    tree = parse_taxonomy_tree(SAMPLE_TREE)

    assert [n.id for n in tree][:3] == [1, 1001, 1002]


def test_kind_is_parsed_from_type() -> None:
    tree = parse_taxonomy_tree(
        [
            {"id": 1, "tc": 5, "type": "A"},
            {"id": 2, "tc": 5, "type": "E"},
            {"id": 3, "tc": 5, "type": "V"},
            {"id": 4, "tc": 5},
        ]
    )

    assert [n.kind for n in tree] == [NodeKind.ATTRIBUTE, NodeKind.ENTITY, NodeKind.OTHER, NodeKind.OTHER]


def test_same_code_with_different_kind_is_not_ambiguous() -> None:
    tree = parse_taxonomy_tree([{"id": 1, "tc": 5, "type": "A"}, {"id": 2, "tc": 5, "type": "E"}])

    assert tree.find_unique(5, NodeKind.ATTRIBUTE).id == 1
    assert tree.find_unique(5, NodeKind.ENTITY).id == 2


def test_objects_without_id_and_tc_are_ignored() -> None:
    tree = parse_taxonomy_tree({"meta": {"id": 9}, "nodes": [{"tc": 3}, {"id": 7, "tc": 3, "type": "A", "label": None}]})

    (node,) = list(tree)
    assert node.id == 7
    assert node.label == ""


def test_empty_document_gives_empty_tree() -> None:
    assert len(parse_taxonomy_tree(None)) == 0
    assert len(parse_taxonomy_tree({})) == 0


def test_find_unique_raises_not_found() -> None:
    tree = parse_taxonomy_tree(SAMPLE_TREE)

    with pytest.raises(NotFound) as excinfo:
        tree.find_unique(431, NodeKind.ENTITY)

    assert excinfo.value.code == 431
    assert isinstance(excinfo.value, LookupError)


def test_find_unique_raises_on_duplicate_code() -> None:
    tree = parse_taxonomy_tree([{"id": 1, "tc": 5, "type": "A"}, {"id": 2, "tc": 5, "type": "A"}])

    with pytest.raises(AmbiguousCode) as excinfo:
        tree.find_unique(5, NodeKind.ATTRIBUTE)

    assert excinfo.value.matches == [1, 2]


def test_invalid_node_is_malformed() -> None:
    with pytest.raises(MalformedResponse):
        parse_taxonomy_tree([{"id": "not-a-number", "tc": 5, "type": "A"}])


def test_invalid_entity_node_is_malformed() -> None:
    with pytest.raises(MalformedResponse):
        parse_taxonomy_tree([{"id": 2, "tc": None, "type": "E"}])


def test_codeless_grouping_node_is_skipped() -> None:
    document = {"children": [SAMPLE_TREE, {"id": 99, "tc": None, "type": "G", "label": "Grouping"}]}

    tree = parse_taxonomy_tree(document)

    assert len(tree) == 7
    assert tree.find_unique(431, NodeKind.ATTRIBUTE).id == 1001
