# Business Services
from cms_admin.services.menu_service import MenuService, MutationResult, DeleteCheck
from cms_admin.services.menu_store import InMemoryNodeStore, MenuDraft, NodeStore, SqlAlchemyNodeStore
from cms_admin.services.page_lookup import LinkedPage, PageLinkLookup, SqlAlchemyPageLookup
from cms_admin.services.patch_applier import ApplyResult, apply_patches

__all__ = [
    'MenuService', 'MutationResult', 'DeleteCheck',
    'InMemoryNodeStore', 'MenuDraft', 'NodeStore', 'SqlAlchemyNodeStore',
    'LinkedPage', 'PageLinkLookup', 'SqlAlchemyPageLookup',
    'ApplyResult', 'apply_patches',
]
