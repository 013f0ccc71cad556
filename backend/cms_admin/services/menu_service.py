"""
Menu service - navigation tree management

Every mutation follows the same steps:
1. snapshot the site's flat list from the store
2. plan the change with menutree (pure, raises before any write)
3. apply the patches as independent store calls
4. re-fetch and rebuild the tree
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from cms_admin.services.menu_store import MenuDraft, NodeStore
from cms_admin.services.page_lookup import LinkedPage, PageLinkLookup, deletion_prompt
from cms_admin.services.patch_applier import apply_patches
from menutree import (
    LOCALES,
    PRIMARY_LOCALE,
    ROOT_ID,
    MenuNode,
    MenuPatch,
    NodeIndex,
    PageType,
    PartialFailureError,
    Site,
    TreeNode,
    ValidationError,
    apply_patches_locally,
    build_tree,
    can_drop,
    check_deletable,
    find_blocking_children,
    find_violations,
    move,
    next_child_position,
    plan_disable,
    plan_drop,
    plan_enable,
    plan_toggle,
    reorder,
)
from menutree.paths import (
    find_duplicate_path,
    normalize_path,
    validate_external_url,
    validate_path,
)
from menutree.types import merge_patches

logger = logging.getLogger(__name__)


@dataclass
class MutationResult:
    """Outcome of a structural change: what ran and the re-fetched tree."""
    kind: str
    patches: List[MenuPatch] = field(default_factory=list)
    tree: List[TreeNode] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "patches": [dict(id=p.id, **p.as_update()) for p in self.patches],
            "menus": [t.to_dict() for t in self.tree],
        }


@dataclass
class DeleteCheck:
    menu_id: str
    deletable: bool
    child_ids: List[str]
    linked_pages: List[LinkedPage]
    prompt: str


class MenuService:
    """
    Menu tree management for one store.

    Supports dependency injection for tests:
    - store: NodeStore implementation
    - pages: PageLinkLookup (optional, also used for slug sync when it has sync_slug)
    """

    def __init__(
        self,
        store: NodeStore,
        pages: Optional[PageLinkLookup] = None,
        max_workers: int = 1,
        locales: Sequence[str] = LOCALES,
        primary_locale: str = PRIMARY_LOCALE,
    ):
        self.store = store
        self.pages = pages
        self.max_workers = max_workers
        self.locales = tuple(locales)
        self.primary_locale = primary_locale

    # =============== Reads ===============

    def list_menus(self, site: Site) -> List[MenuNode]:
        return sorted(self.store.list(Site(site)), key=lambda n: (n.order, n.id))

    def get_tree(self, site: Site) -> List[TreeNode]:
        return build_tree(self.store.list(Site(site)))

    def get_menu(self, menu_id: str) -> MenuNode:
        return self.store.get(menu_id)

    def _snapshot(self, menu_id: str) -> NodeIndex:
        """Site snapshot for the site menu_id belongs to."""
        node = self.store.get(menu_id)
        return NodeIndex(self.store.list(node.site))

    def _check_parent(self, menu: MenuNode, parent_id: str) -> None:
        """The new parent must exist and belong to menu's site."""
        if parent_id == ROOT_ID:
            return
        parent = self.store.get(parent_id)
        if parent.site != menu.site:
            raise ValidationError("A menu cannot be moved to another site")

    # =============== Create / edit ===============

    def _check_labels(self, labels: Optional[Dict[str, str]]) -> None:
        if not labels or not (labels.get(self.primary_locale) or "").strip():
            raise ValidationError(f"Menu name ({self.primary_locale}) is required")

    def _check_path(
        self,
        nodes: List[MenuNode],
        site: Site,
        path: str,
        page_type: PageType,
        exclude_id: Optional[str] = None,
        allow_duplicate: bool = False,
    ) -> str:
        """Validate path for page_type and return the value to store."""
        if not path:
            raise ValidationError("Path is required")
        if page_type == PageType.LINKS:
            error = validate_external_url(path)
            if error:
                raise ValidationError(error)
            return path

        path = normalize_path(path)
        error = validate_path(path)
        if error:
            raise ValidationError(error)
        duplicate = find_duplicate_path(nodes, site, path, page_type, exclude_id=exclude_id)
        if duplicate is not None and not allow_duplicate:
            raise ValidationError(
                f"Path '{path}' is already used by menu \"{duplicate.label(self.primary_locale)}\""
            )
        return path

    def create_menu(
        self,
        site: Site,
        labels: Dict[str, str],
        path: str,
        parent_id: str = ROOT_ID,
        page_type: PageType = PageType.DYNAMIC,
        depth: Optional[int] = None,
        order: Optional[int] = None,
        enabled: Optional[Dict[str, bool]] = None,
        description: Optional[Dict[str, str]] = None,
        actor_id: Optional[str] = None,
    ) -> MenuNode:
        """Create a menu. depth/order default to "last child of parent_id"."""
        site = Site(site)
        page_type = PageType(page_type)
        parent_id = parent_id or ROOT_ID
        self._check_labels(labels)

        nodes = self.store.list(site)
        parent = None
        if parent_id != ROOT_ID:
            parent = self.store.get(parent_id)
            if parent.site != site:
                raise ValidationError("Parent menu belongs to another site")

        path = self._check_path(nodes, site, path, page_type)

        expected_depth, next_order = next_child_position(nodes, parent_id)
        if depth is not None and depth != expected_depth:
            raise ValidationError(f"Depth must be {expected_depth} under this parent")
        if order is None:
            order = next_order

        requested = enabled if enabled is not None else {self.primary_locale: True}
        unknown = sorted(set(requested) - set(self.locales))
        if unknown:
            raise ValidationError(f"Unknown locale: {', '.join(unknown)}")
        flags = {locale: False for locale in self.locales}
        flags.update({locale: bool(value) for locale, value in requested.items()})
        if parent is not None:
            # a new child cannot be visible where its parent is hidden
            for locale, value in flags.items():
                if value and not parent.is_enabled(locale):
                    flags[locale] = False

        menu_id = self.store.create(MenuDraft(
            site=site,
            labels=dict(labels),
            path=path,
            depth=expected_depth,
            parent_id=parent_id,
            order=order,
            enabled=flags,
            page_type=page_type,
            description=description,
            created_by=actor_id,
        ))
        logger.info(f"Created menu {menu_id} under {parent_id} ({site.value})")
        return self.store.get(menu_id)

    def update_menu(
        self,
        menu_id: str,
        changes: Dict[str, Any],
        actor_id: Optional[str] = None,
        allow_duplicate_path: bool = False,
    ) -> MutationResult:
        """Edit a menu.

        A parent change is planned as a move to the end of the new sibling
        group, and enabled changes go through the cascade rules, so both keep
        the tree invariants. Content fields ride in the same update call as
        the menu's own structural patch.
        """
        index = self._snapshot(menu_id)
        menu = index.get(menu_id)
        nodes = index.nodes()

        content: Dict[str, Any] = {}
        if "labels" in changes and changes["labels"] is not None:
            self._check_labels(changes["labels"])
            content["labels"] = dict(changes["labels"])
        if "description" in changes:
            content["description"] = changes["description"]
        page_type = PageType(changes.get("page_type") or menu.page_type)
        if page_type != menu.page_type:
            content["page_type"] = page_type
        if changes.get("path") is not None or "page_type" in content:
            path = self._check_path(
                nodes, menu.site, changes.get("path") or menu.path, page_type,
                exclude_id=menu_id, allow_duplicate=allow_duplicate_path,
            )
            if path != menu.path:
                content["path"] = path

        # plan everything before writing anything
        structural: List[MenuPatch] = []
        new_parent = changes.get("parent_id")
        if new_parent is not None and new_parent != menu.parent_id:
            self._check_parent(menu, new_parent)
            target = len(index.children_of(new_parent))
            structural = move(index, menu_id, new_parent, target)
            nodes = apply_patches_locally(nodes, structural)

        enabled = changes.get("enabled")
        if enabled is not None:
            for locale, value in enabled.items():
                current = NodeIndex(nodes)
                if current.get(menu_id).is_enabled(locale) == bool(value):
                    continue
                planner = plan_enable if value else plan_disable
                step = planner(current, menu_id, locale, self.locales)
                structural.extend(step)
                nodes = apply_patches_locally(nodes, step)

        patches = merge_patches(structural)
        sync_path = (
            "path" in content
            and menu.page_type != PageType.LINKS
            and page_type != PageType.LINKS
        )
        try:
            self._apply(menu.site, patches, actor_id, extra={menu_id: content} if content else None)
        except PartialFailureError as e:
            # the menu row itself was written, keep its pages in step
            if sync_path and menu_id in e.succeeded:
                self._sync_slug(menu_id, content["path"])
            raise

        if content:
            logger.info(f"Updated menu {menu_id}: {', '.join(sorted(content))}")
        if sync_path:
            self._sync_slug(menu_id, content["path"])

        return MutationResult(kind="update", patches=patches, tree=self.get_tree(menu.site))

    def _sync_slug(self, menu_id: str, path: str) -> None:
        sync = getattr(self.pages, "sync_slug", None)
        if sync is not None:
            sync(menu_id, path)

    # =============== Delete ===============

    def delete_check(self, menu_id: str) -> DeleteCheck:
        index = self._snapshot(menu_id)
        menu = index.get(menu_id)
        children = find_blocking_children(index, menu_id)
        pages = self.pages.pages_for_menu(menu_id, menu.site) if self.pages else []
        if children:
            prompt = "This menu has sub-menus and cannot be deleted; delete the sub-menus first"
        else:
            prompt = deletion_prompt(menu.label(self.primary_locale), pages)
        return DeleteCheck(
            menu_id=menu_id,
            deletable=not children,
            child_ids=children,
            linked_pages=pages,
            prompt=prompt,
        )

    def delete_menu(self, menu_id: str) -> List[TreeNode]:
        index = self._snapshot(menu_id)
        menu = index.get(menu_id)
        check_deletable(index, menu_id)
        self.store.delete(menu_id)
        logger.info(f"Deleted menu {menu_id} ({menu.site.value})")
        return self.get_tree(menu.site)

    # =============== Structure ===============

    def toggle_enabled(self, menu_id: str, locale: str, actor_id: Optional[str] = None) -> MutationResult:
        index = self._snapshot(menu_id)
        patches = plan_toggle(index, menu_id, locale, self.locales)
        return self._commit("toggle", index.get(menu_id).site, patches, actor_id)

    def set_enabled(
        self, menu_id: str, locale: str, value: bool, actor_id: Optional[str] = None,
    ) -> MutationResult:
        index = self._snapshot(menu_id)
        planner = plan_enable if value else plan_disable
        patches = planner(index, menu_id, locale, self.locales)
        return self._commit("enable" if value else "disable", index.get(menu_id).site, patches, actor_id)

    def reorder_menu(self, menu_id: str, position: int, actor_id: Optional[str] = None) -> MutationResult:
        index = self._snapshot(menu_id)
        patches = reorder(index, menu_id, position)
        return self._commit("reorder", index.get(menu_id).site, patches, actor_id)

    def move_menu(
        self, menu_id: str, parent_id: str, position: int, actor_id: Optional[str] = None,
    ) -> MutationResult:
        index = self._snapshot(menu_id)
        menu = index.get(menu_id)
        kind = "reorder" if parent_id == menu.parent_id else "move"
        if kind == "move":
            self._check_parent(menu, parent_id)
        patches = move(index, menu_id, parent_id, position)
        return self._commit(kind, index.get(menu_id).site, patches, actor_id)

    def drop_menu(
        self, menu_id: str, over_id: Optional[str], over_index: int, actor_id: Optional[str] = None,
    ) -> MutationResult:
        index = self._snapshot(menu_id)
        plan = plan_drop(index.nodes(), menu_id, over_id, over_index)
        return self._commit(plan.kind, index.get(menu_id).site, plan.patches, actor_id)

    def can_drop(self, menu_id: str, parent_id: str) -> bool:
        """False also for a parent that is unknown or on another site."""
        index = self._snapshot(menu_id)
        if parent_id != ROOT_ID and parent_id not in index:
            return False
        return can_drop(index, menu_id, parent_id)

    # =============== Apply ===============

    def _commit(self, kind: str, site: Site, patches: List[MenuPatch], actor_id: Optional[str]) -> MutationResult:
        self._apply(site, patches, actor_id)
        return MutationResult(kind=kind, patches=patches, tree=self.get_tree(site))

    def _apply(
        self,
        site: Site,
        patches: List[MenuPatch],
        actor_id: Optional[str],
        extra: Optional[Dict[str, Dict[str, Any]]] = None,
    ) -> None:
        if not patches and not extra:
            return
        try:
            apply_patches(
                self.store, patches, max_workers=self.max_workers, actor_id=actor_id, extra=extra,
            )
        except PartialFailureError as e:
            violations = find_violations(self.store.list(site), self.locales)
            logger.warning(
                f"Partial menu update on {site.value}: {len(e.succeeded)} written, "
                f"{len(e.failed)} failed ({', '.join(e.failed)}); "
                f"{len(violations)} invariant violation(s) in the stored tree"
            )
            for v in violations:
                logger.warning(f"  {v.kind} {v.node_id}: {v.message}")
            raise
