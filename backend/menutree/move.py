"""
menutree/move.py

Moving a node (with its subtree) under a different parent.

The moved node gets a parent_id/depth/order patch, its descendants get
depth-only patches, and both the old and the new sibling groups are
re-sequenced densely. A subtree moved under a parent that is disabled in
some locale is disabled in that locale too.
"""
import logging
from typing import Iterable, List

from menutree.errors import ValidationError
from menutree.index import NodeIndex
from menutree.reorder import check_index, clamp, reorder, resequence
from menutree.types import MenuNode, MenuPatch, ROOT_ID, merge_patches

logger = logging.getLogger(__name__)


def _as_index(nodes) -> NodeIndex:
    return nodes if isinstance(nodes, NodeIndex) else NodeIndex(nodes)


def can_drop(nodes: Iterable[MenuNode], dragged_id: str, candidate_parent_id: str) -> bool:
    """True unless candidate_parent_id is dragged_id itself or one of its descendants."""
    if candidate_parent_id == ROOT_ID:
        return True
    if candidate_parent_id == dragged_id:
        return False
    index = _as_index(nodes)
    return not index.is_descendant(candidate_parent_id, dragged_id)


def move(
    nodes: Iterable[MenuNode],
    moved_id: str,
    new_parent_id: str,
    target_index: int,
) -> List[MenuPatch]:
    """Plan moving moved_id under new_parent_id at target_index.

    Delegates to reorder() when the parent does not change.

    Raises:
        NotFoundError: moved_id or new_parent_id is unknown
        ValidationError: the move would create a cycle, cross sites, or the
            index is not an int
    """
    target_index = check_index(target_index)
    index = _as_index(nodes)
    moved = index.get(moved_id)

    if new_parent_id == moved.parent_id:
        return reorder(index, moved_id, target_index)

    if new_parent_id == moved_id:
        raise ValidationError("A menu cannot be moved under itself")

    new_parent = None
    if new_parent_id != ROOT_ID:
        new_parent = index.get(new_parent_id)
        if new_parent.site != moved.site:
            raise ValidationError("A menu cannot be moved to another site")

    descendants = index.descendants_of(moved_id)
    if any(d.id == new_parent_id for d in descendants):
        raise ValidationError(
            f"Cannot move \"{moved.label()}\" under its own descendant \"{new_parent.label()}\""
        )

    new_depth = 1 if new_parent is None else new_parent.depth + 1
    delta = new_depth - moved.depth

    patches: List[MenuPatch] = []

    # subtree depth
    if delta:
        for node in descendants:
            patches.append(MenuPatch(id=node.id, depth=node.depth + delta))

    # locales hidden on the new parent are hidden on the whole moved subtree
    if new_parent is not None:
        hidden = [loc for loc, on in new_parent.enabled.items() if not on]
        for node in [moved] + descendants:
            if any(node.is_enabled(loc) for loc in hidden):
                enabled = dict(node.enabled)
                enabled.update({loc: False for loc in hidden if loc in enabled})
                patches.append(MenuPatch(id=node.id, enabled=enabled))

    # close the gap in the old group
    old_siblings = [s for s in index.children_of(moved.parent_id) if s.id != moved_id]
    patches.extend(resequence(old_siblings))

    # open a slot in the new group
    new_siblings = index.children_of(new_parent_id)
    target = clamp(target_index, 0, len(new_siblings))
    new_siblings.insert(target, moved)
    for position, node in enumerate(new_siblings, start=1):
        if node.id == moved_id:
            patches.append(MenuPatch(
                id=moved_id, parent_id=new_parent_id, depth=new_depth, order=position,
            ))
        elif node.order != position:
            patches.append(MenuPatch(id=node.id, order=position))

    patches = merge_patches(patches)
    logger.debug(
        f"move {moved_id}: {moved.parent_id} -> {new_parent_id} at {target}, "
        f"depth delta {delta}, {len(patches)} patches"
    )
    return patches
