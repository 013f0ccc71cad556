"""
Pydantic schemas
Request/response validation for the menu API
"""
from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator, ConfigDict

from menutree.types import PageType, ROOT_ID, Site


# ============== Menu Schemas ==============

class MenuBase(BaseModel):
    labels: Dict[str, str]
    path: str = Field(..., max_length=500)
    page_type: PageType = PageType.DYNAMIC
    description: Optional[Dict[str, str]] = None

    @field_validator("labels")
    @classmethod
    def strip_labels(cls, v: Dict[str, str]) -> Dict[str, str]:
        return {locale: (text or "").strip() for locale, text in v.items()}


class MenuCreate(MenuBase):
    site: Site
    parent_id: str = ROOT_ID
    depth: Optional[int] = Field(None, ge=1)
    order: Optional[int] = None
    enabled: Optional[Dict[str, bool]] = None


class MenuUpdate(BaseModel):
    labels: Optional[Dict[str, str]] = None
    path: Optional[str] = Field(None, max_length=500)
    page_type: Optional[PageType] = None
    description: Optional[Dict[str, str]] = None
    parent_id: Optional[str] = None
    enabled: Optional[Dict[str, bool]] = None
    # edits may keep a duplicate path after the admin confirmed it
    allow_duplicate_path: bool = False


class MenuResponse(MenuBase):
    id: str
    site: Site
    depth: int
    parent_id: str
    order: int
    enabled: Dict[str, bool]
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    created_by: Optional[str] = None
    updated_by: Optional[str] = None
    model_config = ConfigDict(from_attributes=True)


class MenuTreeResponse(BaseModel):
    id: str
    site: Site
    labels: Dict[str, str]
    path: str
    page_type: PageType
    depth: int
    parent_id: str
    order: int
    enabled: Dict[str, bool]
    description: Optional[Dict[str, str]] = None
    children: List["MenuTreeResponse"] = []


MenuTreeResponse.model_rebuild()


class MenuPatchResponse(BaseModel):
    id: str
    parent_id: Optional[str] = None
    depth: Optional[int] = None
    order: Optional[int] = None
    enabled: Optional[Dict[str, bool]] = None


class MutationResponse(BaseModel):
    kind: str
    patches: List[MenuPatchResponse]
    menus: List[MenuTreeResponse]


# ============== Structure operations ==============

class ToggleRequest(BaseModel):
    locale: str
    enabled: Optional[bool] = None  # None flips the current value


class ReorderRequest(BaseModel):
    index: int = Field(..., ge=0)


class MoveRequest(BaseModel):
    parent_id: str = ROOT_ID
    index: int = Field(0, ge=0)


class DropRequest(BaseModel):
    over_id: Optional[str] = None
    over_index: int = Field(0, ge=0)


class CanDropResponse(BaseModel):
    menu_id: str
    parent_id: str
    can_drop: bool


class LinkedPageResponse(BaseModel):
    id: str
    slug: str
    labels: Dict[str, str]
    model_config = ConfigDict(from_attributes=True)


class DeleteCheckResponse(BaseModel):
    menu_id: str
    deletable: bool
    child_ids: List[str]
    linked_pages: List[LinkedPageResponse]
    prompt: str
    model_config = ConfigDict(from_attributes=True)
