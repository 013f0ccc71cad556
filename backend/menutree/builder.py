"""
menutree/builder.py

Flat list -> nested forest, and back.
"""
from typing import Iterable, List, Set, Tuple

from menutree.index import NodeIndex
from menutree.types import MenuNode, ROOT_ID, TreeNode


def build_tree(nodes: Iterable[MenuNode]) -> List[TreeNode]:
    """Build the navigation forest for one site.

    Children are sorted by (order, id), so the result does not depend on the
    order of the input list. Nodes whose parent is missing from the list are
    shown at top level rather than dropped.
    """
    index = NodeIndex(nodes)
    roots = [
        n for n in index.nodes()
        if n.parent_id == ROOT_ID or n.parent_id not in index
    ]
    roots.sort(key=lambda n: (n.order, n.id))

    visited: Set[str] = set()

    def attach(node: MenuNode) -> TreeNode:
        visited.add(node.id)
        children = tuple(
            attach(child) for child in index.children_of(node.id)
            if child.id not in visited
        )
        return TreeNode(node=node, children=children)

    forest = [attach(root) for root in roots]
    # nodes caught in a parent cycle are unreachable from any root
    for node in sorted(index.nodes(), key=lambda n: (n.order, n.id)):
        if node.id not in visited:
            forest.append(attach(node))
    return forest


def flatten_tree(forest: Iterable[TreeNode]) -> List[MenuNode]:
    """Pre-order walk, the order used for the parent select list."""
    result: List[MenuNode] = []

    def walk(tree: TreeNode) -> None:
        result.append(tree.node)
        for child in tree.children:
            walk(child)

    for tree in forest:
        walk(tree)
    return result


def find_in_tree(forest: Iterable[TreeNode], node_id: str):
    for tree in forest:
        if tree.id == node_id:
            return tree
        found = find_in_tree(tree.children, node_id)
        if found is not None:
            return found
    return None


def next_child_position(nodes: Iterable[MenuNode], parent_id: str) -> Tuple[int, int]:
    """(depth, order) for a node appended under parent_id."""
    index = NodeIndex(nodes)
    siblings = index.children_of(parent_id)
    order = max(s.order for s in siblings) + 1 if siblings else 1
    return index.depth_for_parent(parent_id), order
