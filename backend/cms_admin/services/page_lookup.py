"""
Page link lookup - which content pages hang off a menu

Read-only except for slug sync. The result only changes how a delete is
confirmed; it never decides whether a menu may be deleted.
"""
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Protocol

from sqlalchemy.orm import Session

from cms_admin.models.page import CmsPage
from menutree.types import PRIMARY_LOCALE, Site

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LinkedPage:
    id: str
    slug: str
    labels: Dict[str, str]

    def title(self, locale: str = PRIMARY_LOCALE) -> str:
        return self.labels.get(locale) or "(untitled)"


class PageLinkLookup(Protocol):
    def pages_for_menu(self, menu_id: str, site: Site) -> List[LinkedPage]:
        ...


class SqlAlchemyPageLookup:
    """PageLinkLookup over the cms_page table, plus slug sync on path change."""

    def __init__(self, db: Session):
        self.db = db

    def _query(self, menu_id: str, site: Optional[Site] = None):
        query = self.db.query(CmsPage).filter(CmsPage.menu_id == menu_id)
        if site is not None:
            query = query.filter(CmsPage.site == Site(site))
        return query

    def pages_for_menu(self, menu_id: str, site: Site) -> List[LinkedPage]:
        return [
            LinkedPage(id=p.id, slug=p.slug, labels=dict(p.labels or {}))
            for p in self._query(menu_id, site).order_by(CmsPage.id).all()
        ]

    def sync_slug(self, menu_id: str, new_path: str) -> int:
        """Point every page of menu_id at new_path. Returns pages updated."""
        pages = self._query(menu_id).all()
        for page in pages:
            page.slug = new_path
        if pages:
            self.db.commit()
            logger.info(f"Updated slug of {len(pages)} page(s) for menu {menu_id} to '{new_path}'")
        return len(pages)


def deletion_prompt(menu_label: str, pages: List[LinkedPage]) -> str:
    """Confirmation text shown before deleting a menu."""
    if pages:
        titles = "\n".join(f"(page title: {p.title()})" for p in pages)
        return (
            "Pages are linked to this menu. Delete the pages as well?\n\n"
            f"{titles}"
        )
    return f"Delete the menu \"{menu_label}\"?"
