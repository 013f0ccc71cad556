"""
menutree/dragdrop.py

Reduces a drop event from the tree widget to one planning call.
"""
import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from menutree.errors import ValidationError
from menutree.index import NodeIndex
from menutree.move import can_drop, move
from menutree.reorder import check_index, reorder
from menutree.types import MenuNode, MenuPatch

logger = logging.getLogger(__name__)

NOOP = "noop"
REORDER = "reorder"
MOVE = "move"


@dataclass
class DropPlan:
    """What a drop resolved to and the patches it needs."""
    kind: str
    patches: List[MenuPatch] = field(default_factory=list)
    parent_id: Optional[str] = None

    @property
    def is_noop(self) -> bool:
        return not self.patches


def plan_drop(
    nodes: Iterable[MenuNode],
    dragged_id: str,
    over_id: Optional[str],
    over_index: int,
) -> DropPlan:
    """Plan dropping dragged_id onto the slot of over_id.

    The dragged node joins over_id's sibling group at over_index. When that
    group is the dragged node's own group this is a reorder, otherwise a
    move, guarded by can_drop() before the mover runs.

    Raises:
        NotFoundError: dragged_id is unknown
        ValidationError: the drop would put a node under itself or a descendant
    """
    if not over_id or over_id == dragged_id:
        return DropPlan(kind=NOOP)
    over_index = check_index(over_index)

    index = NodeIndex(nodes)
    dragged = index.get(dragged_id)
    target = index.find(over_id)

    if target is None:
        # stale drop target: treat as a reorder within the current group
        logger.debug(f"drop target {over_id} not in snapshot, reordering {dragged_id}")
        return DropPlan(
            kind=REORDER,
            patches=reorder(index, dragged_id, over_index),
            parent_id=dragged.parent_id,
        )

    if target.parent_id == dragged.parent_id:
        return DropPlan(
            kind=REORDER,
            patches=reorder(index, dragged_id, over_index),
            parent_id=dragged.parent_id,
        )

    if not can_drop(index, dragged_id, target.parent_id):
        logger.warning(f"rejected drop of {dragged_id} under {target.parent_id}: cycle")
        raise ValidationError("A menu cannot be moved under itself or one of its sub-menus")

    return DropPlan(
        kind=MOVE,
        patches=move(index, dragged_id, target.parent_id, over_index),
        parent_id=target.parent_id,
    )
