"""
Content page ORM model (read side only)
Pages are edited elsewhere; the menu admin only needs to know which pages
hang off a menu and to keep their slug in step with the menu path.
"""
import uuid
from datetime import datetime, UTC

from sqlalchemy import Column, String, DateTime, JSON, Enum as SQLEnum

from cms_admin.database import Base
from menutree.types import Site


class CmsPage(Base):
    __tablename__ = "cms_page"

    id = Column(String(32), primary_key=True, default=lambda: uuid.uuid4().hex)
    site = Column(SQLEnum(Site), nullable=False, index=True)
    menu_id = Column(String(32), nullable=False, index=True)
    slug = Column(String(500), nullable=False, default="")
    labels = Column(JSON, nullable=True, comment="locale -> published title")
    updated_at = Column(DateTime, default=lambda: datetime.now(UTC), onupdate=lambda: datetime.now(UTC))
