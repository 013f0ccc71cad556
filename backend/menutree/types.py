"""
menutree/types.py

Value types shared by the menu tree algorithms: the flat MenuNode, the
nested TreeNode produced by the builder, and the MenuPatch diffs produced by
the planners.
"""
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

# parent_id value meaning "top level"
ROOT_ID = "0"

PRIMARY_LOCALE = "ko"
LOCALES: Tuple[str, ...] = ("ko", "en")


class Site(str, Enum):
    """Site a navigation tree belongs to"""
    WEB = "web"
    DOCS = "docs"


class PageType(str, Enum):
    """Kind of page a menu entry points to"""
    DYNAMIC = "dynamic"
    STATIC = "static"
    NOTICE = "notice"  # bulletin board
    LINKS = "links"  # external link, path holds an absolute URL


def default_enabled() -> Dict[str, bool]:
    return {"ko": True, "en": False}


@dataclass(frozen=True)
class MenuNode:
    """One flat, persisted navigation entry.

    Args:
        id: Store-assigned identifier
        site: Owning site; trees never span sites
        labels: Locale -> display text, primary locale mandatory
        path: URL path segment (absolute URL for PageType.LINKS)
        depth: 1 for roots, parent depth + 1 otherwise
        parent_id: ROOT_ID or the id of another node of the same site
        order: Sort key within the sibling group
        enabled: Locale -> visibility flag
        page_type: Kind of page behind the entry
        description: Optional localized text
    """
    id: str
    site: Site
    labels: Dict[str, str]
    path: str
    depth: int
    parent_id: str = ROOT_ID
    order: int = 1
    enabled: Dict[str, bool] = field(default_factory=default_enabled)
    page_type: PageType = PageType.DYNAMIC
    description: Optional[Dict[str, str]] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    created_by: Optional[str] = None
    updated_by: Optional[str] = None

    @property
    def is_root(self) -> bool:
        return self.parent_id == ROOT_ID

    def label(self, locale: str = PRIMARY_LOCALE) -> str:
        return self.labels.get(locale) or self.labels.get(PRIMARY_LOCALE, "")

    def is_enabled(self, locale: str) -> bool:
        return bool(self.enabled.get(locale, False))

    def with_changes(self, **changes: Any) -> "MenuNode":
        return replace(self, **changes)


@dataclass(frozen=True)
class TreeNode:
    """A MenuNode together with its ordered children."""
    node: MenuNode
    children: Tuple["TreeNode", ...] = ()

    @property
    def id(self) -> str:
        return self.node.id

    def to_dict(self) -> Dict[str, Any]:
        n = self.node
        return {
            "id": n.id,
            "site": n.site.value,
            "labels": dict(n.labels),
            "path": n.path,
            "page_type": n.page_type.value,
            "depth": n.depth,
            "parent_id": n.parent_id,
            "order": n.order,
            "enabled": dict(n.enabled),
            "description": dict(n.description) if n.description else None,
            "children": [child.to_dict() for child in self.children],
        }


@dataclass(frozen=True)
class MenuPatch:
    """Structural change for a single node. None means "leave unchanged"."""
    id: str
    parent_id: Optional[str] = None
    depth: Optional[int] = None
    order: Optional[int] = None
    enabled: Optional[Dict[str, bool]] = None

    def as_update(self) -> Dict[str, Any]:
        """Partial document for NodeStore.update"""
        changes: Dict[str, Any] = {}
        if self.parent_id is not None:
            changes["parent_id"] = self.parent_id
        if self.depth is not None:
            changes["depth"] = self.depth
        if self.order is not None:
            changes["order"] = self.order
        if self.enabled is not None:
            changes["enabled"] = dict(self.enabled)
        return changes

    def merge(self, other: "MenuPatch") -> "MenuPatch":
        """Combine two patches for the same node; fields set in other win."""
        if other.id != self.id:
            raise ValueError(f"cannot merge patches for {self.id} and {other.id}")
        return MenuPatch(
            id=self.id,
            parent_id=other.parent_id if other.parent_id is not None else self.parent_id,
            depth=other.depth if other.depth is not None else self.depth,
            order=other.order if other.order is not None else self.order,
            enabled=other.enabled if other.enabled is not None else self.enabled,
        )


def merge_patches(patches: List[MenuPatch]) -> List[MenuPatch]:
    """Collapse patches so each node id appears once, keeping first-seen order."""
    merged: Dict[str, MenuPatch] = {}
    for patch in patches:
        if patch.id in merged:
            merged[patch.id] = merged[patch.id].merge(patch)
        else:
            merged[patch.id] = patch
    return [p for p in merged.values() if p.as_update()]


def apply_patches_locally(nodes: List[MenuNode], patches: List[MenuPatch]) -> List[MenuNode]:
    """Return a new snapshot with the patches applied in memory."""
    by_id = {p.id: p.as_update() for p in patches}
    result = []
    for node in nodes:
        changes = by_id.get(node.id)
        result.append(node.with_changes(**changes) if changes else node)
    return result
