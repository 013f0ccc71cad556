"""
Menu ORM model
Flat rows with a parent reference; parent_id "0" marks a top-level menu.
"""
import uuid
from datetime import datetime, UTC

from sqlalchemy import Column, Integer, String, DateTime, JSON, Enum as SQLEnum

from cms_admin.database import Base
from menutree.types import MenuNode, PageType, ROOT_ID, Site, default_enabled


def _new_id() -> str:
    return uuid.uuid4().hex


class CmsMenu(Base):
    __tablename__ = "cms_menu"

    id = Column(String(32), primary_key=True, default=_new_id)
    site = Column(SQLEnum(Site), nullable=False, index=True, comment="web | docs")
    labels = Column(JSON, nullable=False, comment="locale -> label")
    path = Column(String(500), nullable=False, default="", comment="URL path or external URL")
    page_type = Column(SQLEnum(PageType), nullable=False, default=PageType.DYNAMIC)
    depth = Column(Integer, nullable=False, default=1)
    parent_id = Column(String(32), nullable=False, default=ROOT_ID, index=True, comment="0 = top level")
    order = Column("sort_order", Integer, nullable=False, default=1)
    enabled = Column(JSON, nullable=False, default=default_enabled, comment="locale -> bool")
    description = Column(JSON, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC))
    updated_at = Column(DateTime, default=lambda: datetime.now(UTC), onupdate=lambda: datetime.now(UTC))
    created_by = Column(String(64), nullable=True)
    updated_by = Column(String(64), nullable=True)

    def to_node(self) -> MenuNode:
        return MenuNode(
            id=self.id,
            site=Site(self.site),
            labels=dict(self.labels or {}),
            path=self.path or "",
            depth=self.depth or 0,
            parent_id=self.parent_id or ROOT_ID,
            order=self.order or 0,
            enabled=dict(self.enabled) if self.enabled else default_enabled(),
            page_type=PageType(self.page_type or PageType.DYNAMIC),
            description=dict(self.description) if self.description else None,
            created_at=self.created_at,
            updated_at=self.updated_at,
            created_by=self.created_by,
            updated_by=self.updated_by,
        )
