"""
menutree/invariants.py

Structural checks over a stored snapshot. Used after a partially failed
fan-out to report how far the stored tree is from consistent, and by tests.
"""
from dataclasses import dataclass
from typing import Iterable, List, Sequence

from menutree.index import NodeIndex
from menutree.types import LOCALES, MenuNode

DEPTH = "depth"
CYCLE = "cycle"
ORDER = "order"
ENABLED = "enabled"
ORPHAN = "orphan"


@dataclass(frozen=True)
class InvariantViolation:
    kind: str
    node_id: str
    message: str


def find_violations(
    nodes: Iterable[MenuNode], locales: Sequence[str] = LOCALES,
) -> List[InvariantViolation]:
    index = NodeIndex(nodes)
    violations: List[InvariantViolation] = []

    for node in index.nodes():
        if node.is_root:
            if node.depth != 1:
                violations.append(InvariantViolation(
                    DEPTH, node.id, f"root depth is {node.depth}, expected 1"))
            continue

        parent = index.find(node.parent_id)
        if parent is None:
            violations.append(InvariantViolation(
                ORPHAN, node.id, f"parent {node.parent_id} does not exist"))
            continue
        if node.depth != parent.depth + 1:
            violations.append(InvariantViolation(
                DEPTH, node.id, f"depth is {node.depth}, expected {parent.depth + 1}"))
        for locale in locales:
            if node.is_enabled(locale) and not parent.is_enabled(locale):
                violations.append(InvariantViolation(
                    ENABLED, node.id, f"enabled for '{locale}' under disabled parent {parent.id}"))

        # walk up; the chain must reach a root without revisiting
        seen = {node.id}
        current = node
        while not current.is_root:
            nxt = index.find(current.parent_id)
            if nxt is None:
                break
            if nxt.id in seen:
                violations.append(InvariantViolation(
                    CYCLE, node.id, "node is its own ancestor"))
                break
            seen.add(nxt.id)
            current = nxt

    for parent_id in index.parent_ids():
        siblings = index.children_of(parent_id)
        orders = [s.order for s in siblings]
        if orders and orders != list(range(1, len(orders) + 1)):
            violations.append(InvariantViolation(
                ORDER, parent_id, f"sibling orders {orders} are not 1..{len(orders)}"))

    return violations
