"""
Menu management API tests
Covers the /menus endpoints
"""
import pytest
from fastapi.testclient import TestClient

from cms_admin.models.page import CmsPage
from cms_admin.routers.menus import get_menu_service
from cms_admin.main import app
from cms_admin.services.menu_service import MenuService
from cms_admin.services.menu_store import InMemoryNodeStore
from menutree import Site


def _create(client, headers, **fields):
    payload = {"site": "web", "labels": {"ko": fields.pop("ko", "메뉴")}, "path": "menu"}
    payload.update(fields)
    response = client.post("/menus", headers=headers, json=payload)
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture
def tree(client, auth_headers):
    """A -> [B -> [D], C] on the web site, ids by letter"""
    a = _create(client, auth_headers, ko="A", path="a", enabled={"ko": True, "en": True})
    b = _create(client, auth_headers, ko="B", path="a/b", parent_id=a["id"], enabled={"ko": True, "en": True})
    c = _create(client, auth_headers, ko="C", path="a/c", parent_id=a["id"], enabled={"ko": True, "en": True})
    d = _create(client, auth_headers, ko="D", path="a/b/d", parent_id=b["id"], enabled={"ko": True, "en": True})
    return {"A": a["id"], "B": b["id"], "C": c["id"], "D": d["id"]}


class TestMenuAuth:

    def test_requires_token(self, client: TestClient):
        response = client.get("/menus", params={"site": "web"})
        assert response.status_code in (401, 403)

    def test_rejects_bad_token(self, client: TestClient):
        response = client.get(
            "/menus", params={"site": "web"}, headers={"Authorization": "Bearer nope"},
        )
        assert response.status_code == 401

    def test_health_is_public(self, client: TestClient):
        assert client.get("/health").json() == {"status": "healthy"}


class TestMenuAPI:
    """CRUD endpoints"""

    def test_list_menus_empty(self, client: TestClient, auth_headers):
        response = client.get("/menus", params={"site": "web"}, headers=auth_headers)
        assert response.status_code == 200
        assert response.json() == []

    def test_unknown_site(self, client: TestClient, auth_headers):
        response = client.get("/menus", params={"site": "shop"}, headers=auth_headers)
        assert response.status_code == 422

    def test_create_menu(self, client: TestClient, auth_headers):
        data = _create(client, auth_headers, ko="회사소개", path="company")
        assert data["labels"]["ko"] == "회사소개"
        assert data["depth"] == 1
        assert data["parent_id"] == "0"
        assert data["order"] == 1
        assert data["enabled"] == {"ko": True, "en": False}
        assert data["created_by"] == "admin-1"

    def test_create_duplicate_path(self, client: TestClient, auth_headers):
        _create(client, auth_headers, path="dup")
        response = client.post("/menus", headers=auth_headers, json={
            "site": "web", "labels": {"ko": "중복"}, "path": "dup",
        })
        assert response.status_code == 400

    def test_create_invalid_path(self, client: TestClient, auth_headers):
        response = client.post("/menus", headers=auth_headers, json={
            "site": "web", "labels": {"ko": "잘못"}, "path": "회사",
        })
        assert response.status_code == 400
        assert "Korean" in response.json()["detail"]

    def test_create_unknown_locale(self, client: TestClient, auth_headers):
        response = client.post("/menus", headers=auth_headers, json={
            "site": "web", "labels": {"ko": "x"}, "path": "x", "enabled": {"ko": True, "fr": True},
        })
        assert response.status_code == 400
        assert "fr" in response.json()["detail"]

    def test_create_under_missing_parent(self, client: TestClient, auth_headers):
        response = client.post("/menus", headers=auth_headers, json={
            "site": "web", "labels": {"ko": "x"}, "path": "x", "parent_id": "missing",
        })
        assert response.status_code == 404

    def test_get_menu(self, client: TestClient, auth_headers, tree):
        response = client.get(f"/menus/{tree['D']}", headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["depth"] == 3

    def test_get_menu_not_found(self, client: TestClient, auth_headers):
        response = client.get("/menus/nope", headers=auth_headers)
        assert response.status_code == 404

    def test_tree(self, client: TestClient, auth_headers, tree):
        response = client.get("/menus/tree", params={"site": "web"}, headers=auth_headers)
        assert response.status_code == 200
        data = response.json()
        assert [m["id"] for m in data] == [tree["A"]]
        assert [m["id"] for m in data[0]["children"]] == [tree["B"], tree["C"]]
        assert data[0]["children"][0]["children"][0]["id"] == tree["D"]

    def test_update_menu(self, client: TestClient, auth_headers, tree):
        response = client.put(f"/menus/{tree['C']}", headers=auth_headers, json={
            "labels": {"ko": "씨", "en": "See"},
        })
        assert response.status_code == 200
        assert response.json()["kind"] == "update"
        menu = client.get(f"/menus/{tree['C']}", headers=auth_headers).json()
        assert menu["labels"] == {"ko": "씨", "en": "See"}

    def test_update_duplicate_path_needs_confirmation(self, client: TestClient, auth_headers, tree):
        response = client.put(f"/menus/{tree['C']}", headers=auth_headers, json={"path": "a/b"})
        assert response.status_code == 400
        response = client.put(f"/menus/{tree['C']}", headers=auth_headers, json={
            "path": "a/b", "allow_duplicate_path": True,
        })
        assert response.status_code == 200

    def test_update_path_syncs_pages(self, client: TestClient, auth_headers, tree, db_session):
        db_session.add(CmsPage(site=Site.WEB, menu_id=tree["C"], slug="a/c"))
        db_session.commit()
        client.put(f"/menus/{tree['C']}", headers=auth_headers, json={"path": "a/see"})
        page = db_session.query(CmsPage).filter(CmsPage.menu_id == tree["C"]).first()
        db_session.refresh(page)
        assert page.slug == "a/see"

    def test_update_parent(self, client: TestClient, auth_headers, tree):
        response = client.put(f"/menus/{tree['B']}", headers=auth_headers, json={"parent_id": tree["C"]})
        assert response.status_code == 200
        assert client.get(f"/menus/{tree['D']}", headers=auth_headers).json()["depth"] == 4


class TestMenuDelete:
    """delete-check and DELETE"""

    def test_delete_leaf(self, client: TestClient, auth_headers, tree):
        response = client.delete(f"/menus/{tree['D']}", headers=auth_headers)
        assert response.status_code == 204
        assert client.get(f"/menus/{tree['D']}", headers=auth_headers).status_code == 404

    def test_delete_with_children(self, client: TestClient, auth_headers, tree):
        response = client.delete(f"/menus/{tree['B']}", headers=auth_headers)
        assert response.status_code == 409

    def test_delete_check(self, client: TestClient, auth_headers, tree):
        data = client.get(f"/menus/{tree['A']}/delete-check", headers=auth_headers).json()
        assert data["deletable"] is False
        assert set(data["child_ids"]) == {tree["B"], tree["C"], tree["D"]}

    def test_delete_check_with_pages(self, client: TestClient, auth_headers, tree, db_session):
        db_session.add(CmsPage(site=Site.WEB, menu_id=tree["D"], slug="a/b/d", labels={"ko": "디"}))
        db_session.commit()
        data = client.get(f"/menus/{tree['D']}/delete-check", headers=auth_headers).json()
        assert data["deletable"] is True
        assert data["linked_pages"][0]["slug"] == "a/b/d"
        assert "(page title: 디)" in data["prompt"]


class TestMenuStructure:
    """toggle / reorder / move / drop endpoints"""

    def test_toggle_disables_subtree(self, client: TestClient, auth_headers, tree):
        response = client.post(f"/menus/{tree['A']}/toggle", headers=auth_headers, json={"locale": "ko"})
        assert response.status_code == 200
        data = response.json()
        assert data["kind"] == "toggle"
        assert len(data["patches"]) == 4
        assert all(p["enabled"] == {"ko": False, "en": True} for p in data["patches"])

    def test_enable_under_disabled_parent(self, client: TestClient, auth_headers, tree):
        client.post(f"/menus/{tree['A']}/toggle", headers=auth_headers, json={"locale": "en", "enabled": False})
        response = client.post(
            f"/menus/{tree['B']}/toggle", headers=auth_headers, json={"locale": "en", "enabled": True},
        )
        assert response.status_code == 409

    def test_unknown_locale(self, client: TestClient, auth_headers, tree):
        response = client.post(f"/menus/{tree['A']}/toggle", headers=auth_headers, json={"locale": "fr"})
        assert response.status_code == 400

    def test_reorder(self, client: TestClient, auth_headers, tree):
        response = client.post(f"/menus/{tree['C']}/reorder", headers=auth_headers, json={"index": 0})
        assert response.status_code == 200
        children = response.json()["menus"][0]["children"]
        assert [c["id"] for c in children] == [tree["C"], tree["B"]]
        assert [c["order"] for c in children] == [1, 2]

    def test_move(self, client: TestClient, auth_headers, tree):
        response = client.post(f"/menus/{tree['D']}/move", headers=auth_headers, json={
            "parent_id": tree["A"], "index": 0,
        })
        assert response.status_code == 200
        data = response.json()
        assert data["kind"] == "move"
        children = data["menus"][0]["children"]
        assert [c["id"] for c in children] == [tree["D"], tree["B"], tree["C"]]
        assert children[0]["depth"] == 2

    def test_move_into_descendant(self, client: TestClient, auth_headers, tree):
        response = client.post(f"/menus/{tree['A']}/move", headers=auth_headers, json={
            "parent_id": tree["D"], "index": 0,
        })
        assert response.status_code == 400

    def test_drop(self, client: TestClient, auth_headers, tree):
        response = client.post(f"/menus/{tree['D']}/drop", headers=auth_headers, json={
            "over_id": tree["C"], "over_index": 2,
        })
        assert response.status_code == 200
        assert response.json()["kind"] == "move"

    def test_drop_on_itself(self, client: TestClient, auth_headers, tree):
        response = client.post(f"/menus/{tree['D']}/drop", headers=auth_headers, json={
            "over_id": tree["D"], "over_index": 0,
        })
        assert response.json()["kind"] == "noop"
        assert response.json()["patches"] == []

    def test_can_drop(self, client: TestClient, auth_headers, tree):
        ok = client.get(f"/menus/{tree['D']}/can-drop", params={"parent_id": tree["C"]}, headers=auth_headers)
        bad = client.get(f"/menus/{tree['A']}/can-drop", params={"parent_id": tree["D"]}, headers=auth_headers)
        assert ok.json()["can_drop"] is True
        assert bad.json()["can_drop"] is False

    def test_move_to_other_site(self, client: TestClient, auth_headers, tree):
        docs = _create(client, auth_headers, site="docs", ko="G", path="guide")
        response = client.post(f"/menus/{tree['C']}/move", headers=auth_headers, json={
            "parent_id": docs["id"], "index": 0,
        })
        assert response.status_code == 400
        assert client.get(f"/menus/{tree['C']}", headers=auth_headers).json()["parent_id"] == tree["A"]

    def test_update_parent_to_other_site(self, client: TestClient, auth_headers, tree):
        docs = _create(client, auth_headers, site="docs", ko="G", path="guide")
        response = client.put(f"/menus/{tree['C']}", headers=auth_headers, json={"parent_id": docs["id"]})
        assert response.status_code == 400

    def test_can_drop_other_site_or_unknown_parent(self, client: TestClient, auth_headers, tree):
        docs = _create(client, auth_headers, site="docs", ko="G", path="guide")
        other = client.get(f"/menus/{tree['C']}/can-drop", params={"parent_id": docs["id"]}, headers=auth_headers)
        missing = client.get(f"/menus/{tree['C']}/can-drop", params={"parent_id": "nope"}, headers=auth_headers)
        assert other.status_code == 200
        assert other.json()["can_drop"] is False
        assert missing.json()["can_drop"] is False


class FailingStore(InMemoryNodeStore):
    def update(self, node_id, changes):
        if changes.get("order") == 3:
            raise RuntimeError("store unavailable")
        super().update(node_id, changes)


class TestPartialFailureResponse:

    def test_partial_failure_asks_for_reload(self, client: TestClient, auth_headers, abcd_nodes):
        store = FailingStore(abcd_nodes)
        app.dependency_overrides[get_menu_service] = lambda: MenuService(store)

        response = client.post("/menus/D/move", headers=auth_headers, json={"parent_id": "A", "index": 0})

        assert response.status_code == 500
        detail = response.json()["detail"]
        assert detail["error"] == "partial_failure"
        assert detail["reload"] is True
        assert detail["failed"] == {"C": "store unavailable"}
        assert set(detail["succeeded"]) == {"D", "B"}
