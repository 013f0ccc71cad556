"""
Menu store and page lookup tests
"""
from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError

from cms_admin.models.page import CmsPage
from cms_admin.services.menu_store import InMemoryNodeStore, MenuDraft, SqlAlchemyNodeStore
from cms_admin.services.page_lookup import LinkedPage, SqlAlchemyPageLookup, deletion_prompt
from menutree import NotFoundError, PageType, Site


@pytest.fixture(params=["memory", "sqlalchemy"])
def node_store(request, db_session):
    if request.param == "memory":
        return InMemoryNodeStore()
    return SqlAlchemyNodeStore(db_session)


def _draft(**overrides):
    data = dict(site=Site.WEB, labels={"ko": "메뉴", "en": "Menu"}, path="menu", depth=1)
    data.update(overrides)
    return MenuDraft(**data)


class TestNodeStore:
    """Behaviour shared by both stores"""

    def test_create_and_get(self, node_store):
        menu_id = node_store.create(_draft(created_by="admin-1"))
        menu = node_store.get(menu_id)
        assert menu.labels == {"ko": "메뉴", "en": "Menu"}
        assert menu.site == Site.WEB
        assert menu.page_type == PageType.DYNAMIC
        assert menu.enabled == {"ko": True, "en": False}
        assert menu.created_by == "admin-1"

    def test_list_filters_site(self, node_store):
        node_store.create(_draft())
        node_store.create(_draft(site=Site.DOCS, path="docs"))
        assert [n.path for n in node_store.list(Site.DOCS)] == ["docs"]

    def test_list_sorted(self, node_store):
        node_store.create(_draft(path="second", order=2))
        node_store.create(_draft(path="first", order=1))
        assert [n.path for n in node_store.list(Site.WEB)] == ["first", "second"]

    def test_update(self, node_store):
        menu_id = node_store.create(_draft())
        node_store.update(menu_id, {"order": 4, "enabled": {"ko": False, "en": False}})
        menu = node_store.get(menu_id)
        assert menu.order == 4
        assert menu.enabled == {"ko": False, "en": False}

    def test_update_unknown_field(self, node_store):
        menu_id = node_store.create(_draft())
        with pytest.raises(ValueError):
            node_store.update(menu_id, {"site": Site.DOCS})

    def test_update_missing(self, node_store):
        with pytest.raises(NotFoundError):
            node_store.update("missing", {"order": 1})

    def test_delete(self, node_store):
        menu_id = node_store.create(_draft())
        node_store.delete(menu_id)
        with pytest.raises(NotFoundError):
            node_store.get(menu_id)
        with pytest.raises(NotFoundError):
            node_store.delete(menu_id)


class TestSqlAlchemyNodeStore:
    """Session handling when a commit fails"""

    def test_failed_delete_rolls_back(self, db_session):
        store = SqlAlchemyNodeStore(db_session)
        menu_id = store.create(_draft())

        with patch.object(db_session, "commit", side_effect=OperationalError("DELETE", {}, Exception("locked"))), \
                patch.object(db_session, "rollback", wraps=db_session.rollback) as rollback:
            with pytest.raises(OperationalError):
                store.delete(menu_id)

        rollback.assert_called_once()
        # the session is usable again and the row is still there
        assert store.get(menu_id).path == "menu"
        store.update(menu_id, {"order": 2})
        assert store.get(menu_id).order == 2

    def test_failed_update_rolls_back(self, db_session):
        store = SqlAlchemyNodeStore(db_session)
        menu_id = store.create(_draft())

        with patch.object(db_session, "commit", side_effect=OperationalError("UPDATE", {}, Exception("locked"))):
            with pytest.raises(OperationalError):
                store.update(menu_id, {"order": 7})

        assert store.get(menu_id).order == 1


class TestPageLookup:
    """cms_page reads and slug sync"""

    def test_pages_for_menu(self, db_session):
        db_session.add_all([
            CmsPage(id="p1", site=Site.WEB, menu_id="m1", slug="about", labels={"ko": "소개"}),
            CmsPage(id="p2", site=Site.DOCS, menu_id="m1", slug="about"),
            CmsPage(id="p3", site=Site.WEB, menu_id="m2", slug="other"),
        ])
        db_session.commit()

        pages = SqlAlchemyPageLookup(db_session).pages_for_menu("m1", Site.WEB)
        assert pages == [LinkedPage(id="p1", slug="about", labels={"ko": "소개"})]

    def test_sync_slug(self, db_session):
        db_session.add_all([
            CmsPage(id="p1", site=Site.WEB, menu_id="m1", slug="old"),
            CmsPage(id="p2", site=Site.WEB, menu_id="m1", slug="old"),
        ])
        db_session.commit()

        assert SqlAlchemyPageLookup(db_session).sync_slug("m1", "new") == 2
        assert {p.slug for p in db_session.query(CmsPage).all()} == {"new"}

    def test_sync_slug_without_pages(self, db_session):
        assert SqlAlchemyPageLookup(db_session).sync_slug("m1", "new") == 0

    def test_deletion_prompt(self):
        assert deletion_prompt("소개", []) == 'Delete the menu "소개"?'
        prompt = deletion_prompt("소개", [LinkedPage(id="p1", slug="a", labels={})])
        assert "(page title: (untitled))" in prompt
