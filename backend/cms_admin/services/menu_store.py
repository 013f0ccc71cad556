"""
Menu store - persistence boundary for flat menu nodes

NodeStore is the interface the menu service consumes. Every call stands on
its own: there is no transaction spanning several calls.
"""
import threading
import uuid
from dataclasses import dataclass, field
from datetime import datetime, UTC
from typing import Any, Dict, List, Optional, Protocol

from sqlalchemy.orm import Session

from cms_admin.models.menu import CmsMenu
from menutree.errors import NotFoundError
from menutree.types import MenuNode, PageType, ROOT_ID, Site, default_enabled

# fields NodeStore.update accepts
UPDATABLE_FIELDS = {
    "labels", "path", "page_type", "depth", "parent_id", "order",
    "enabled", "description", "updated_by",
}


@dataclass
class MenuDraft:
    """A menu node before the store has assigned an id."""
    site: Site
    labels: Dict[str, str]
    path: str
    depth: int
    parent_id: str = ROOT_ID
    order: int = 1
    enabled: Dict[str, bool] = field(default_factory=default_enabled)
    page_type: PageType = PageType.DYNAMIC
    description: Optional[Dict[str, str]] = None
    created_by: Optional[str] = None


class NodeStore(Protocol):
    """Persistence collaborator for menu nodes"""

    supports_concurrent_writes: bool

    def list(self, site: Site) -> List[MenuNode]:
        ...

    def get(self, node_id: str) -> MenuNode:
        ...

    def create(self, draft: MenuDraft) -> str:
        ...

    def update(self, node_id: str, changes: Dict[str, Any]) -> None:
        ...

    def delete(self, node_id: str) -> None:
        ...


def _check_fields(changes: Dict[str, Any]) -> None:
    unknown = set(changes) - UPDATABLE_FIELDS
    if unknown:
        raise ValueError(f"Fields cannot be updated: {', '.join(sorted(unknown))}")


class SqlAlchemyNodeStore:
    """NodeStore over the cms_menu table. Each call commits on its own."""

    # a Session is not thread-safe
    supports_concurrent_writes = False

    def __init__(self, db: Session):
        self.db = db

    def _row(self, node_id: str) -> CmsMenu:
        row = self.db.query(CmsMenu).filter(CmsMenu.id == node_id).first()
        if row is None:
            raise NotFoundError(node_id)
        return row

    def list(self, site: Site) -> List[MenuNode]:
        rows = (
            self.db.query(CmsMenu)
            .filter(CmsMenu.site == Site(site))
            .order_by(CmsMenu.order, CmsMenu.id)
            .all()
        )
        return [row.to_node() for row in rows]

    def get(self, node_id: str) -> MenuNode:
        return self._row(node_id).to_node()

    def create(self, draft: MenuDraft) -> str:
        row = CmsMenu(
            site=draft.site,
            labels=dict(draft.labels),
            path=draft.path,
            page_type=draft.page_type,
            depth=draft.depth,
            parent_id=draft.parent_id or ROOT_ID,
            order=draft.order,
            enabled=dict(draft.enabled),
            description=dict(draft.description) if draft.description else None,
            created_by=draft.created_by,
            updated_by=draft.created_by,
        )
        self.db.add(row)
        self.db.commit()
        self.db.refresh(row)
        return row.id

    def update(self, node_id: str, changes: Dict[str, Any]) -> None:
        _check_fields(changes)
        row = self._row(node_id)
        for key, value in changes.items():
            # JSON columns need a new object to be flagged dirty
            setattr(row, key, dict(value) if isinstance(value, dict) else value)
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

    def delete(self, node_id: str) -> None:
        row = self._row(node_id)
        self.db.delete(row)
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise


class InMemoryNodeStore:
    """Thread-safe NodeStore kept in a dict; used by tests and local tooling."""

    supports_concurrent_writes = True

    def __init__(self, nodes: Optional[List[MenuNode]] = None):
        self._lock = threading.Lock()
        self._nodes: Dict[str, MenuNode] = {n.id: n for n in (nodes or [])}

    def list(self, site: Site) -> List[MenuNode]:
        with self._lock:
            nodes = [n for n in self._nodes.values() if n.site == Site(site)]
        return sorted(nodes, key=lambda n: (n.order, n.id))

    def get(self, node_id: str) -> MenuNode:
        with self._lock:
            node = self._nodes.get(node_id)
        if node is None:
            raise NotFoundError(node_id)
        return node

    def create(self, draft: MenuDraft) -> str:
        now = datetime.now(UTC)
        node = MenuNode(
            id=uuid.uuid4().hex,
            site=Site(draft.site),
            labels=dict(draft.labels),
            path=draft.path,
            depth=draft.depth,
            parent_id=draft.parent_id or ROOT_ID,
            order=draft.order,
            enabled=dict(draft.enabled),
            page_type=PageType(draft.page_type),
            description=dict(draft.description) if draft.description else None,
            created_at=now,
            updated_at=now,
            created_by=draft.created_by,
            updated_by=draft.created_by,
        )
        with self._lock:
            self._nodes[node.id] = node
        return node.id

    def update(self, node_id: str, changes: Dict[str, Any]) -> None:
        _check_fields(changes)
        with self._lock:
            node = self._nodes.get(node_id)
            if node is None:
                raise NotFoundError(node_id)
            self._nodes[node_id] = node.with_changes(updated_at=datetime.now(UTC), **changes)

    def delete(self, node_id: str) -> None:
        with self._lock:
            if self._nodes.pop(node_id, None) is None:
                raise NotFoundError(node_id)
