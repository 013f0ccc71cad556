"""
Menu management API
Prefix: /menus
"""
import logging
from typing import List, NoReturn

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.orm import Session

from cms_admin.config import settings
from cms_admin.database import get_db
from cms_admin.schemas import (
    CanDropResponse, DeleteCheckResponse, DropRequest, MenuCreate, MenuResponse,
    MenuTreeResponse, MenuUpdate, MoveRequest, MutationResponse, ReorderRequest,
    ToggleRequest,
)
from cms_admin.security.auth import get_current_admin
from cms_admin.services.menu_service import MenuService
from cms_admin.services.menu_store import SqlAlchemyNodeStore
from cms_admin.services.page_lookup import SqlAlchemyPageLookup
from menutree import (
    ConflictError, MenuTreeError, NotFoundError, PartialFailureError,
    PrecedenceError, Site, ValidationError,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/menus", tags=["Menus"])


def get_menu_service(db: Session = Depends(get_db)) -> MenuService:
    return MenuService(
        SqlAlchemyNodeStore(db),
        pages=SqlAlchemyPageLookup(db),
        max_workers=settings.MENU_FANOUT_WORKERS,
        locales=settings.LOCALES,
        primary_locale=settings.PRIMARY_LOCALE,
    )


def raise_http(e: MenuTreeError) -> NoReturn:
    """Translate a menutree error into an HTTP error"""
    if isinstance(e, NotFoundError):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    if isinstance(e, (PrecedenceError, ConflictError)):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=e.message)
    if isinstance(e, PartialFailureError):
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "error": "partial_failure",
                "message": e.message,
                "succeeded": e.succeeded,
                "failed": e.failed,
                "reload": True,
            },
        )
    if isinstance(e, ValidationError):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=e.message)


@router.get("", response_model=List[MenuResponse])
def list_menus(
    site: Site = Query(...),
    service: MenuService = Depends(get_menu_service),
    admin_id: str = Depends(get_current_admin),
):
    """Flat menu list of a site, sorted by order"""
    return [MenuResponse.model_validate(m) for m in service.list_menus(site)]


@router.get("/tree", response_model=List[MenuTreeResponse])
def get_menu_tree(
    site: Site = Query(...),
    service: MenuService = Depends(get_menu_service),
    admin_id: str = Depends(get_current_admin),
):
    """Nested menu tree of a site"""
    return [t.to_dict() for t in service.get_tree(site)]


@router.get("/{menu_id}", response_model=MenuResponse)
def get_menu(
    menu_id: str,
    service: MenuService = Depends(get_menu_service),
    admin_id: str = Depends(get_current_admin),
):
    try:
        return MenuResponse.model_validate(service.get_menu(menu_id))
    except MenuTreeError as e:
        raise_http(e)


@router.post("", response_model=MenuResponse, status_code=status.HTTP_201_CREATED)
def create_menu(
    data: MenuCreate,
    service: MenuService = Depends(get_menu_service),
    admin_id: str = Depends(get_current_admin),
):
    """Create a menu; depth and order default to the last slot under parent_id"""
    try:
        menu = service.create_menu(
            site=data.site, labels=data.labels, path=data.path,
            parent_id=data.parent_id, page_type=data.page_type,
            depth=data.depth, order=data.order, enabled=data.enabled,
            description=data.description, actor_id=admin_id,
        )
        return MenuResponse.model_validate(menu)
    except MenuTreeError as e:
        raise_http(e)


@router.put("/{menu_id}", response_model=MutationResponse)
def update_menu(
    menu_id: str,
    data: MenuUpdate,
    service: MenuService = Depends(get_menu_service),
    admin_id: str = Depends(get_current_admin),
):
    """Edit a menu. A parent change moves it (with its sub-menus) to the end of the new parent."""
    changes = data.model_dump(exclude_unset=True)
    allow_duplicate = changes.pop("allow_duplicate_path", False)
    try:
        result = service.update_menu(
            menu_id, changes, actor_id=admin_id, allow_duplicate_path=allow_duplicate,
        )
        return result.to_dict()
    except MenuTreeError as e:
        raise_http(e)


@router.get("/{menu_id}/delete-check", response_model=DeleteCheckResponse)
def delete_check(
    menu_id: str,
    service: MenuService = Depends(get_menu_service),
    admin_id: str = Depends(get_current_admin),
):
    """Whether the menu can be deleted, and the confirmation prompt to show"""
    try:
        return DeleteCheckResponse.model_validate(service.delete_check(menu_id))
    except MenuTreeError as e:
        raise_http(e)


@router.delete("/{menu_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_menu(
    menu_id: str,
    service: MenuService = Depends(get_menu_service),
    admin_id: str = Depends(get_current_admin),
):
    """Delete a menu without sub-menus"""
    try:
        service.delete_menu(menu_id)
    except MenuTreeError as e:
        raise_http(e)
    logger.info(f"Menu {menu_id} deleted by {admin_id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{menu_id}/toggle", response_model=MutationResponse)
def toggle_menu(
    menu_id: str,
    data: ToggleRequest,
    service: MenuService = Depends(get_menu_service),
    admin_id: str = Depends(get_current_admin),
):
    """Enable/disable a locale; disabling also disables every sub-menu"""
    try:
        if data.enabled is None:
            result = service.toggle_enabled(menu_id, data.locale, actor_id=admin_id)
        else:
            result = service.set_enabled(menu_id, data.locale, data.enabled, actor_id=admin_id)
        return result.to_dict()
    except MenuTreeError as e:
        raise_http(e)


@router.post("/{menu_id}/reorder", response_model=MutationResponse)
def reorder_menu(
    menu_id: str,
    data: ReorderRequest,
    service: MenuService = Depends(get_menu_service),
    admin_id: str = Depends(get_current_admin),
):
    try:
        return service.reorder_menu(menu_id, data.index, actor_id=admin_id).to_dict()
    except MenuTreeError as e:
        raise_http(e)


@router.post("/{menu_id}/move", response_model=MutationResponse)
def move_menu(
    menu_id: str,
    data: MoveRequest,
    service: MenuService = Depends(get_menu_service),
    admin_id: str = Depends(get_current_admin),
):
    try:
        return service.move_menu(menu_id, data.parent_id, data.index, actor_id=admin_id).to_dict()
    except MenuTreeError as e:
        raise_http(e)


@router.post("/{menu_id}/drop", response_model=MutationResponse)
def drop_menu(
    menu_id: str,
    data: DropRequest,
    service: MenuService = Depends(get_menu_service),
    admin_id: str = Depends(get_current_admin),
):
    """Drag-and-drop: reorder when dropped among siblings, move otherwise"""
    try:
        return service.drop_menu(menu_id, data.over_id, data.over_index, actor_id=admin_id).to_dict()
    except MenuTreeError as e:
        raise_http(e)


@router.get("/{menu_id}/can-drop", response_model=CanDropResponse)
def can_drop(
    menu_id: str,
    parent_id: str = Query(...),
    service: MenuService = Depends(get_menu_service),
    admin_id: str = Depends(get_current_admin),
):
    try:
        allowed = service.can_drop(menu_id, parent_id)
    except MenuTreeError as e:
        raise_http(e)
    return CanDropResponse(menu_id=menu_id, parent_id=parent_id, can_drop=allowed)
