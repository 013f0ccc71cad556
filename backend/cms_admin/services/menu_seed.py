"""
Menu seed data - default navigation for an empty site
"""
from typing import Dict, List

from cms_admin.services.menu_service import MenuService
from menutree.types import PageType, ROOT_ID, Site


SEED_MENUS: Dict[Site, List[dict]] = {
    Site.WEB: [
        {
            "labels": {"ko": "회사소개", "en": "Company"}, "path": "company",
            "page_type": PageType.STATIC, "enabled": {"ko": True, "en": True},
            "children": [
                {"labels": {"ko": "회사 개요", "en": "About Us"}, "path": "company/about-us",
                 "page_type": PageType.STATIC, "enabled": {"ko": True, "en": True}},
            ],
        },
        {
            "labels": {"ko": "요금", "en": "Pricing"}, "path": "pricing",
            "page_type": PageType.STATIC, "enabled": {"ko": True, "en": True},
            "children": [
                {"labels": {"ko": "요금 안내", "en": "Information"}, "path": "pricing/information",
                 "page_type": PageType.STATIC, "enabled": {"ko": True, "en": True}},
            ],
        },
        {
            "labels": {"ko": "공지사항", "en": "Notice"}, "path": "notice",
            "page_type": PageType.NOTICE, "enabled": {"ko": True, "en": False},
        },
    ],
    Site.DOCS: [
        {
            "labels": {"ko": "시작하기", "en": "Getting Started"}, "path": "getting-started",
            "page_type": PageType.DYNAMIC, "enabled": {"ko": True, "en": False},
        },
    ],
}


def seed_menu_data(service: MenuService) -> dict:
    """Seed default menus into sites that have none. Idempotent.

    Returns dict with count of created menus.
    """
    stats = {"menus": 0}

    def create(site: Site, item: dict, parent_id: str) -> None:
        menu = service.create_menu(
            site=site,
            labels=item["labels"],
            path=item["path"],
            parent_id=parent_id,
            page_type=item["page_type"],
            enabled=item["enabled"],
            actor_id="system",
        )
        stats["menus"] += 1
        for child in item.get("children", []):
            create(site, child, menu.id)

    for site, items in SEED_MENUS.items():
        if service.list_menus(site):
            continue
        for item in items:
            create(site, item, ROOT_ID)

    return stats
