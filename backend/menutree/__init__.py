"""
menutree - navigation tree algorithms

Pure planning functions over a flat snapshot of one site's menus. Nothing in
this package performs I/O; each operation returns the MenuPatch list that
the caller applies to its store.

Usage:
    >>> from menutree import build_tree, plan_drop, plan_toggle
    >>> forest = build_tree(nodes)
    >>> plan = plan_drop(nodes, dragged_id, over_id, over_index)
"""
from menutree.builder import build_tree, find_in_tree, flatten_tree, next_child_position
from menutree.cascade import plan_disable, plan_enable, plan_toggle
from menutree.dragdrop import DropPlan, plan_drop
from menutree.errors import (
    ConflictError,
    MenuTreeError,
    NotFoundError,
    PartialFailureError,
    PrecedenceError,
    ValidationError,
)
from menutree.guard import check_deletable, find_blocking_children
from menutree.index import NodeIndex
from menutree.invariants import InvariantViolation, find_violations
from menutree.move import can_drop, move
from menutree.reorder import reorder
from menutree.types import (
    LOCALES,
    PRIMARY_LOCALE,
    ROOT_ID,
    MenuNode,
    MenuPatch,
    PageType,
    Site,
    TreeNode,
    apply_patches_locally,
)

__all__ = [
    "build_tree", "find_in_tree", "flatten_tree", "next_child_position",
    "plan_disable", "plan_enable", "plan_toggle",
    "DropPlan", "plan_drop",
    "ConflictError", "MenuTreeError", "NotFoundError", "PartialFailureError",
    "PrecedenceError", "ValidationError",
    "check_deletable", "find_blocking_children",
    "NodeIndex",
    "InvariantViolation", "find_violations",
    "can_drop", "move",
    "reorder",
    "LOCALES", "PRIMARY_LOCALE", "ROOT_ID", "MenuNode", "MenuPatch", "PageType",
    "Site", "TreeNode", "apply_patches_locally",
]
