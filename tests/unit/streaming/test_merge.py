from typing import Any

from regparse_kit.streaming.merge import merge_children, merge_hierarchies, merge_node
from regparse_kit.streaming.schema import HierarchyNode


def node(node_id: str, text: str = "", **fields: Any) -> HierarchyNode:
    return HierarchyNode.model_validate(
        {
            "id": node_id,
            "type": "section",
            "text": text,
            "level": 1,
            "references": fields.pop("references", []),
            "children": fields.pop("children", []),
            **fields,
        }
    )


def ids(nodes: list[HierarchyNode]) -> list[str]:
    return [n.id for n in nodes]


class TestMergeNode:
    def test_texts_are_joined_with_a_space(self) -> None:
        merged = merge_node(node("s1", "A"), node("s1", "B"))

        assert merged.text == "A B"

    def test_references_are_concatenated_without_dedup(self) -> None:
        ref = {"target": "sec9", "text": "under section 9", "type": "internal"}
        left = node("s1", references=[ref])
        right = node("s1", references=[ref, {"target": "external", "text": "Act"}])

        merged = merge_node(left, right)

        assert [r.target for r in merged.references] == ["sec9", "sec9", "external"]

    def test_children_merge_by_id(self) -> None:
        left = node("s1", children=[node("s1:a", "x").model_dump()])
        right = node(
            "s1",
            children=[node("s1:a", "y").model_dump(), node("s1:b").model_dump()],
        )

        merged = merge_node(left, right)

        assert ids(merged.children) == ["s1:a", "s1:b"]
        assert merged.children[0].text == "x y"

    def test_other_fields_come_from_existing(self) -> None:
        left = node("s1", title="First")
        right = node("s1", title="Second")

        assert merge_node(left, right).title == "First"

    def test_inputs_are_not_mutated(self) -> None:
        left = node("s1", "A")

        merge_node(left, node("s1", "B"))

        assert left.text == "A"


class TestMergeChildren:
    def test_new_ids_are_appended_in_order(self) -> None:
        merged = merge_children([node("a"), node("b")], [node("c"), node("a", "more")])

        assert ids(merged) == ["a", "b", "c"]
        assert merged[0].text == " more"

    def test_disjoint_merges_are_associative(self) -> None:
        x, y, z = [node("a")], [node("b")], [node("c")]

        left = merge_children(merge_children(x, y), z)
        right = merge_children(x, merge_children(y, z))

        assert left == right
        assert ids(left) == ["a", "b", "c"]

    def test_merge_hierarchies_folds_left(self) -> None:
        merged = merge_hierarchies([node("a", "1")], [node("a", "2")], [node("a", "3")])

        assert merged[0].text == "1 2 3"

    def test_merge_hierarchies_with_nothing_to_add(self) -> None:
        base = [node("a")]

        assert merge_hierarchies(base) == base
