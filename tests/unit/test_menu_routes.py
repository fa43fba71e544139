from __future__ import annotations

import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

import bizcard.api.dependencies as dependencies
from bizcard.api.main import app
from bizcard.application.menus.repository import MenuRepository
from bizcard.application.ports.repositories import StoreError

MENUS = "/v1/cards/crd_001/menus"
OWNER = {"X-User-Id": "usr_001"}


class FailingMenuStore:
    def get(self, menu_id):
        raise StoreError("database unavailable")

    def put(self, menu):
        raise StoreError("database unavailable")

    def query(self, criteria, sort=()):
        raise StoreError("database unavailable")

    def remove(self, menu_id):
        raise StoreError("database unavailable")


@pytest.fixture
def client(monkeypatch, repository, cards, cache) -> TestClient:
    monkeypatch.setattr(dependencies, "menu_repository", lambda: repository)
    monkeypatch.setattr(dependencies, "card_repository", lambda: cards)
    monkeypatch.setattr(dependencies, "menu_cache", lambda: cache)
    monkeypatch.setattr(dependencies, "menu_cache_ttl_seconds", lambda: 30)
    return TestClient(app)


def _create(client: TestClient, **overrides) -> dict:
    payload = {"title": "Lunch", "items": [{"name": "Soup", "price": 4.5}], **overrides}
    response = client.post(MENUS, json=payload, headers=OWNER)
    assert response.status_code == 201
    return response.json()


def test_owner_flow_through_trash(client: TestClient) -> None:
    menu = _create(client)
    menu_url = f"{MENUS}/{menu['menuId']}"

    assert menu["cardId"] == "crd_001"
    assert menu["items"][0]["price"] == 4.5
    assert client.get(MENUS, headers=OWNER).json()["count"] == 1

    deleted = client.delete(menu_url, headers=OWNER)
    assert deleted.status_code == 200
    assert deleted.json()["isDeleted"] is True

    assert client.get(menu_url, headers=OWNER).status_code == 404
    assert client.get(MENUS, headers=OWNER).json()["count"] == 0
    trash = client.get(f"{MENUS}/trash", headers=OWNER).json()
    assert [item["menuId"] for item in trash["menus"]] == [menu["menuId"]]

    restored = client.post(f"{menu_url}/restore", headers=OWNER)
    assert restored.status_code == 200
    assert restored.json()["deletedAt"] is None

    purged = client.delete(f"{menu_url}/permanent", headers=OWNER)
    assert purged.status_code == 204
    assert client.delete(f"{menu_url}/permanent", headers=OWNER).status_code == 404


def test_update_menu(client: TestClient) -> None:
    menu = _create(client)

    response = client.put(
        f"{MENUS}/{menu['menuId']}",
        json={"title": "Late lunch", "displayOrder": 3},
        headers=OWNER,
    )

    assert response.status_code == 200
    body = response.json()
    assert (body["title"], body["displayOrder"]) == ("Late lunch", 3)
    assert body["items"][0]["itemId"] == menu["items"][0]["itemId"]


def test_list_sort_parameter(client: TestClient) -> None:
    _create(client, title="Second", displayOrder=2)
    _create(client, title="First", displayOrder=1)

    response = client.get(MENUS, params={"sort": "-displayOrder"}, headers=OWNER)

    assert [menu["title"] for menu in response.json()["menus"]] == ["Second", "First"]


def test_unknown_sort_field_is_rejected(client: TestClient) -> None:
    response = client.get(MENUS, params={"sort": "price"}, headers=OWNER)

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_MENU"


def test_missing_user_header_is_unauthorized(client: TestClient) -> None:
    response = client.get(MENUS)

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "UNAUTHORIZED"


def test_foreign_card_is_forbidden(client: TestClient) -> None:
    response = client.get(MENUS, headers={"X-User-Id": "usr_002"})

    assert response.status_code == 403
    assert response.json()["error"]["code"] == "CARD_ACCESS_DENIED"


def test_invalid_menu_payload_reports_fields(client: TestClient, store) -> None:
    response = client.post(
        MENUS,
        json={"title": "Lunch", "items": [{"name": "Soup", "price": -1}]},
        headers=OWNER,
    )

    assert response.status_code == 400
    body = response.json()
    assert body["error"]["code"] == "INVALID_MENU"
    assert body["error"]["details"]["errors"][0]["field"] == "items.0.price"
    assert body["requestId"]
    assert store.menus == {}


def test_non_object_body_is_rejected(client: TestClient) -> None:
    response = client.post(MENUS, json=["Lunch"], headers=OWNER)

    assert response.status_code == 400
    body = response.json()
    assert body["error"]["code"] == "INVALID_REQUEST"
    assert body["error"]["details"]["errors"][0]["field"] == "body"


def test_unknown_menu_is_not_found(client: TestClient) -> None:
    response = client.get(f"{MENUS}/men_missing", headers=OWNER)

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "MENU_NOT_FOUND"


def test_menu_item_routes(client: TestClient) -> None:
    menu = _create(client)
    items_url = f"{MENUS}/{menu['menuId']}/items"

    added = client.post(items_url, json={"name": "Bread", "price": 2}, headers=OWNER)
    assert added.status_code == 201
    bread_id = added.json()["items"][1]["itemId"]

    assert client.get(items_url, headers=OWNER).json()["count"] == 2
    assert client.get(f"{items_url}/{bread_id}", headers=OWNER).json()["name"] == "Bread"

    updated = client.put(
        f"{items_url}/{bread_id}",
        json={"isAvailable": False},
        headers=OWNER,
    )
    assert updated.json()["items"][1]["isAvailable"] is False

    removed = client.delete(f"{items_url}/{bread_id}", headers=OWNER)
    assert [item["name"] for item in removed.json()["items"]] == ["Soup"]

    missing = client.get(f"{items_url}/{bread_id}", headers=OWNER)
    assert missing.status_code == 404
    assert missing.json()["error"]["code"] == "MENU_ITEM_NOT_FOUND"


def test_public_menus_hide_inactive_and_are_cached(client: TestClient, cache) -> None:
    _create(client, title="Lunch")
    _create(client, title="Staff", isActive=False)

    response = client.get("/v1/public/cards/crd_001/menus")

    assert response.status_code == 200
    assert [menu["title"] for menu in response.json()["menus"]] == ["Lunch"]
    assert cache.values["menus:crd_001:public:version"] == "2"
    assert cache.ttls["menus:crd_001:public:v2"] == 30


def test_store_failure_maps_to_server_error(monkeypatch, client: TestClient) -> None:
    monkeypatch.setattr(
        dependencies,
        "menu_repository",
        lambda: MenuRepository(FailingMenuStore()),
    )

    response = client.get(MENUS, headers=OWNER)

    assert response.status_code == 500
    assert response.json()["error"] == {
        "code": "STORE_ERROR",
        "message": "storage is unavailable",
        "details": {},
    }
