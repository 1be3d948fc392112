# src/regparse_kit/streaming/merge.py

"""Merging of same-id nodes discovered by different chunk streams.

Plain append/concat: texts are joined with one space, references are
concatenated without de-duplication and children are merged by id. No
semantic reconciliation happens; repeated model output stays repeated.
"""

from .schema import HierarchyNode


def merge_node(existing: HierarchyNode, incoming: HierarchyNode) -> HierarchyNode:
    return existing.model_copy(
        update={
            "text": existing.text + " " + incoming.text,
            "references": [*existing.references, *incoming.references],
            "children": merge_children(existing.children, incoming.children),
        }
    )


def merge_children(
    existing: list[HierarchyNode], incoming: list[HierarchyNode]
) -> list[HierarchyNode]:
    merged = list(existing)
    positions = {node.id: index for index, node in enumerate(merged)}
    for node in incoming:
        index = positions.get(node.id)
        if index is None:
            positions[node.id] = len(merged)
            merged.append(node)
        else:
            merged[index] = merge_node(merged[index], node)
    return merged


def merge_hierarchies(
    base: list[HierarchyNode], *others: list[HierarchyNode]
) -> list[HierarchyNode]:
    merged = list(base)
    for other in others:
        merged = merge_children(merged, other)
    return merged
