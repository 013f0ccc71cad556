"""
menutree/guard.py

Deletion guard: a menu with sub-menus cannot be deleted.
"""
from typing import Iterable, List

from menutree.errors import ConflictError
from menutree.index import NodeIndex
from menutree.types import MenuNode


def find_blocking_children(nodes: Iterable[MenuNode], node_id: str) -> List[str]:
    """Ids of all transitive children, deepest first (a valid deletion order)."""
    index = nodes if isinstance(nodes, NodeIndex) else NodeIndex(nodes)
    index.get(node_id)
    descendants = index.descendants_of(node_id)
    # descendants_of is breadth-first, so reversing puts deeper levels first
    return [n.id for n in reversed(descendants)]


def check_deletable(nodes: Iterable[MenuNode], node_id: str) -> None:
    """Raise ConflictError if node_id still has children."""
    children = find_blocking_children(nodes, node_id)
    if children:
        raise ConflictError(
            "This menu has sub-menus and cannot be deleted; delete the sub-menus first",
            node_id=node_id, child_ids=children,
        )
