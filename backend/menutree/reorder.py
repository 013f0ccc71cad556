"""
menutree/reorder.py

Reordering a node inside its current sibling group.
"""
import logging
from typing import Iterable, List

from menutree.errors import ValidationError
from menutree.index import NodeIndex
from menutree.types import MenuNode, MenuPatch

logger = logging.getLogger(__name__)


def check_index(target_index) -> int:
    """Reject non-integer drop indexes; bool is not an index."""
    if isinstance(target_index, bool) or not isinstance(target_index, int):
        raise ValidationError(f"Invalid target index: {target_index!r}")
    return target_index


def clamp(value: int, low: int, high: int) -> int:
    return max(low, min(value, high))


def resequence(siblings: List[MenuNode]) -> List[MenuPatch]:
    """Order patches making siblings 1..N in list order, changed ones only."""
    return [
        MenuPatch(id=node.id, order=position)
        for position, node in enumerate(siblings, start=1)
        if node.order != position
    ]


def reorder(nodes: Iterable[MenuNode], moved_id: str, target_index: int) -> List[MenuPatch]:
    """Move moved_id to target_index among its current siblings.

    Args:
        nodes: Flat snapshot of one site
        moved_id: Node being dragged
        target_index: Zero-based position in the sibling group, clamped

    Returns:
        Order patches for the sibling group; empty when the node is already
        at target_index.

    Raises:
        NotFoundError: moved_id is not in the snapshot
        ValidationError: target_index is not an int
    """
    target_index = check_index(target_index)
    index = nodes if isinstance(nodes, NodeIndex) else NodeIndex(nodes)
    moved = index.get(moved_id)

    siblings = index.children_of(moved.parent_id)
    current = next(i for i, s in enumerate(siblings) if s.id == moved_id)
    target = clamp(target_index, 0, len(siblings) - 1)
    if target == current:
        return []

    siblings.pop(current)
    siblings.insert(target, moved)
    patches = resequence(siblings)
    logger.debug(f"reorder {moved_id}: {current} -> {target}, {len(patches)} patches")
    return patches
