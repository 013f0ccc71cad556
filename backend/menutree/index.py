"""
menutree/index.py

Arena-style view over a flat snapshot: id -> node plus parent/children
lookups derived on demand. Nodes never hold references to each other.
"""
from collections import defaultdict, deque
from typing import Dict, Iterable, List, Optional

from menutree.errors import NotFoundError
from menutree.types import MenuNode, ROOT_ID


def sibling_key(node: MenuNode):
    return (node.order, node.id)


class NodeIndex:
    """Read-only lookups over one site's flat menu list."""

    def __init__(self, nodes: Iterable[MenuNode]):
        self._by_id: Dict[str, MenuNode] = {}
        self._children: Dict[str, List[MenuNode]] = defaultdict(list)
        for node in nodes:
            self._by_id[node.id] = node
        for node in self._by_id.values():
            self._children[node.parent_id].append(node)
        for siblings in self._children.values():
            siblings.sort(key=sibling_key)

    def __contains__(self, node_id: str) -> bool:
        return node_id in self._by_id

    def __len__(self) -> int:
        return len(self._by_id)

    def nodes(self) -> List[MenuNode]:
        return list(self._by_id.values())

    def get(self, node_id: str) -> MenuNode:
        node = self._by_id.get(node_id)
        if node is None:
            raise NotFoundError(node_id)
        return node

    def find(self, node_id: str) -> Optional[MenuNode]:
        return self._by_id.get(node_id)

    def parent_of(self, node_id: str) -> Optional[MenuNode]:
        """Parent node, or None for roots and dangling parent ids."""
        node = self.get(node_id)
        if node.is_root:
            return None
        return self._by_id.get(node.parent_id)

    def children_of(self, parent_id: str) -> List[MenuNode]:
        """Direct children sorted by (order, id)."""
        return list(self._children.get(parent_id, ()))

    def parent_ids(self) -> List[str]:
        return [pid for pid, kids in self._children.items() if kids]

    def descendants_of(self, node_id: str) -> List[MenuNode]:
        """All transitive children, breadth-first. Stops on revisits."""
        result: List[MenuNode] = []
        seen = {node_id}
        queue = deque([node_id])
        while queue:
            current = queue.popleft()
            for child in self._children.get(current, ()):
                if child.id in seen:
                    continue
                seen.add(child.id)
                result.append(child)
                queue.append(child.id)
        return result

    def descendant_ids(self, node_id: str) -> List[str]:
        return [n.id for n in self.descendants_of(node_id)]

    def ancestors_of(self, node_id: str) -> List[MenuNode]:
        """Parent chain from nearest to farthest. Stops on a cycle."""
        result: List[MenuNode] = []
        seen = {node_id}
        current = self.get(node_id)
        while not current.is_root:
            parent = self._by_id.get(current.parent_id)
            if parent is None or parent.id in seen:
                break
            seen.add(parent.id)
            result.append(parent)
            current = parent
        return result

    def is_descendant(self, candidate_id: str, ancestor_id: str) -> bool:
        return candidate_id in set(self.descendant_ids(ancestor_id))

    def depth_for_parent(self, parent_id: str) -> int:
        """Depth a child of parent_id must have."""
        if parent_id == ROOT_ID:
            return 1
        return self.get(parent_id).depth + 1
