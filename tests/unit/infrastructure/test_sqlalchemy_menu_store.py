from __future__ import annotations

import sys
from dataclasses import replace
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from pathlib import Path

import pytest
from sqlalchemy import create_engine, func, select
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

sys.path.insert(0, str(Path(__file__).resolve().parents[3] / "src"))

from bizcard.application.menus.repository import MenuRepository
from bizcard.application.ports.repositories import MenuCriteria, SortKey, StoreError
from bizcard.domain.common.ids import CardId, MenuId, MenuItemId
from bizcard.domain.menu.entities import Menu, MenuItem
from bizcard.infrastructure.db.models.menu import Base, CardModel, MenuItemModel
from bizcard.infrastructure.db.repositories.menu_repo import SqlAlchemyMenuStore

T0 = datetime(2026, 10, 19, 9, 0, tzinfo=timezone.utc)
CARD = CardId("crd_001")


def _sqlite_engine():
    return create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )


@pytest.fixture
def engine():
    engine = _sqlite_engine()
    Base.metadata.create_all(engine)
    with Session(engine) as session, session.begin():
        session.add(CardModel(id=str(CARD), user_id="usr_001", username="downtown"))
        session.add(CardModel(id="crd_002", user_id="usr_002", username="uptown"))
    yield engine
    engine.dispose()


@pytest.fixture
def sql_store(engine) -> SqlAlchemyMenuStore:
    return SqlAlchemyMenuStore(engine=engine)


def _item(item_id: str, name: str, price: str) -> MenuItem:
    return MenuItem(
        item_id=MenuItemId(item_id),
        name=name,
        price=Decimal(price),
        created_at=T0,
        updated_at=T0,
    )


def _menu(menu_id: str, card_id: CardId = CARD, **overrides) -> Menu:
    fields = {
        "menu_id": MenuId(menu_id),
        "card_id": card_id,
        "title": f"Menu {menu_id}",
        "items": [],
        "created_at": T0,
        "updated_at": T0,
    }
    fields.update(overrides)
    return Menu(**fields)


def _item_rows(engine) -> int:
    with Session(engine) as session:
        return session.execute(select(func.count()).select_from(MenuItemModel)).scalar_one()


def test_insert_then_get_preserves_menu(sql_store) -> None:
    menu = _menu(
        "men_a",
        description="Weekday lunch",
        items=[_item("itm_1", "Soup", "4.50"), _item("itm_2", "Bread", "1.25")],
        display_order=2,
    )

    sql_store.insert(menu)
    loaded = sql_store.get(MenuId("men_a"))

    assert loaded == menu
    assert loaded.created_at.tzinfo is not None
    assert [item.price for item in loaded.items] == [Decimal("4.50"), Decimal("1.25")]


def test_get_missing_menu_returns_none(sql_store) -> None:
    assert sql_store.get(MenuId("men_missing")) is None


def test_query_applies_tombstone_criteria_verbatim(sql_store) -> None:
    sql_store.insert(_menu("men_a"))
    sql_store.insert(_menu("men_b", is_deleted=True, deleted_at=T0 + timedelta(minutes=1)))
    sql_store.insert(_menu("men_c", card_id=CardId("crd_002")))

    active = sql_store.query(MenuCriteria(card_id=CARD, is_deleted=False))
    trashed = sql_store.query(MenuCriteria(card_id=CARD, is_deleted=True))
    everything = sql_store.query(MenuCriteria(card_id=CARD))

    assert [menu.menu_id for menu in active] == ["men_a"]
    assert [menu.menu_id for menu in trashed] == ["men_b"]
    assert [menu.menu_id for menu in everything] == ["men_a", "men_b"]


def test_query_sorts_by_keys_then_id(sql_store) -> None:
    sql_store.insert(_menu("men_a", display_order=1, created_at=T0, updated_at=T0))
    later = T0 + timedelta(hours=1)
    sql_store.insert(_menu("men_b", display_order=0, created_at=later, updated_at=later))
    sql_store.insert(_menu("men_c", display_order=1, created_at=later, updated_at=later))

    ordered = sql_store.query(
        MenuCriteria(card_id=CARD),
        sort=(SortKey("display_order"), SortKey("created_at", descending=True)),
    )

    assert [menu.menu_id for menu in ordered] == ["men_b", "men_c", "men_a"]


def test_put_syncs_items_and_drops_orphans(sql_store, engine) -> None:
    menu = sql_store.insert(
        _menu("men_a", items=[_item("itm_1", "Soup", "4.00"), _item("itm_2", "Bread", "1.00")])
    )

    updated = replace(
        menu,
        items=[replace(menu.items[1], name="Sourdough"), _item("itm_3", "Tea", "2.00")],
        updated_at=T0 + timedelta(minutes=5),
    )
    assert sql_store.put(updated, expect_deleted=False) is not None
    loaded = sql_store.get(MenuId("men_a"))

    assert [(item.item_id, item.name) for item in loaded.items] == [
        ("itm_2", "Sourdough"),
        ("itm_3", "Tea"),
    ]
    assert _item_rows(engine) == 2


def test_put_persists_tombstone_fields(sql_store) -> None:
    menu = sql_store.insert(_menu("men_a"))
    deleted_at = T0 + timedelta(minutes=3)

    sql_store.put(menu.soft_delete(deleted_at), expect_deleted=False)
    loaded = sql_store.get(MenuId("men_a"))

    assert loaded.is_deleted is True
    assert loaded.deleted_at == deleted_at


def test_remove_deletes_menu_and_items(sql_store, engine) -> None:
    sql_store.insert(_menu("men_a", items=[_item("itm_1", "Soup", "4.00")]))

    assert sql_store.remove(MenuId("men_a")) is True
    assert sql_store.get(MenuId("men_a")) is None
    assert _item_rows(engine) == 0
    assert sql_store.remove(MenuId("men_a")) is False


def test_store_failures_surface_as_store_error() -> None:
    store = SqlAlchemyMenuStore(engine=_sqlite_engine())

    with pytest.raises(StoreError):
        store.get(MenuId("men_a"))
    with pytest.raises(StoreError):
        store.query(MenuCriteria(card_id=CARD))
    with pytest.raises(StoreError):
        store.insert(_menu("men_a"))
    with pytest.raises(StoreError):
        store.put(_menu("men_a"), expect_deleted=False)
    with pytest.raises(StoreError):
        store.remove(MenuId("men_a"))


class InterleavingMenuStore(SqlAlchemyMenuStore):
    """Runs ``interleave`` once, right after the next query returns."""

    def __init__(self, engine) -> None:
        super().__init__(engine=engine)
        self.interleave = None

    def query(self, criteria: MenuCriteria, sort: tuple[SortKey, ...] = ()) -> list[Menu]:
        menus = super().query(criteria, sort)
        action, self.interleave = self.interleave, None
        if action is not None:
            action()
        return menus


@pytest.fixture
def interleaving_store(engine) -> InterleavingMenuStore:
    return InterleavingMenuStore(engine)


def test_duplicate_insert_is_a_store_error(sql_store) -> None:
    sql_store.insert(_menu("men_a"))

    with pytest.raises(StoreError):
        sql_store.insert(_menu("men_a"))


def test_put_refuses_missing_or_moved_rows(sql_store) -> None:
    menu = sql_store.insert(_menu("men_a"))

    assert sql_store.put(replace(menu, title="Dinner"), expect_deleted=True) is None
    assert sql_store.put(replace(menu, card_id=CardId("crd_002")), expect_deleted=False) is None
    assert sql_store.put(_menu("men_missing"), expect_deleted=False) is None
    assert sql_store.get(MenuId("men_missing")) is None
    assert sql_store.get(MenuId("men_a")) == menu


@pytest.mark.parametrize(
    "operation",
    [
        lambda repo, menu_id: repo.soft_delete(menu_id, CARD),
        lambda repo, menu_id: repo.update(menu_id, CARD, {"title": "Dinner"}),
        lambda repo, menu_id: repo.add_item(menu_id, CARD, {"name": "Tea", "price": 2}),
    ],
    ids=["soft_delete", "update", "add_item"],
)
def test_purge_between_read_and_write_is_not_undone(interleaving_store, operation) -> None:
    repository = MenuRepository(interleaving_store)
    menu = repository.create(CARD, {"title": "Lunch"})
    interleaving_store.interleave = lambda: interleaving_store.remove(menu.menu_id)

    assert operation(repository, menu.menu_id) is None
    assert interleaving_store.get(menu.menu_id) is None


def test_restore_after_concurrent_purge_is_not_found(interleaving_store) -> None:
    repository = MenuRepository(interleaving_store)
    menu = repository.create(CARD, {"title": "Lunch"})
    repository.soft_delete(menu.menu_id, CARD)
    interleaving_store.interleave = lambda: interleaving_store.remove(menu.menu_id)

    assert repository.restore(menu.menu_id, CARD) is None
    assert interleaving_store.get(menu.menu_id) is None


def test_update_after_concurrent_trash_keeps_menu_trashed(interleaving_store) -> None:
    repository = MenuRepository(interleaving_store)
    menu = repository.create(CARD, {"title": "Lunch"})
    interleaving_store.interleave = lambda: MenuRepository(interleaving_store).soft_delete(
        menu.menu_id, CARD
    )

    assert repository.update(menu.menu_id, CARD, {"title": "Dinner"}) is None

    stored = interleaving_store.get(menu.menu_id)
    assert stored.is_deleted is True
    assert stored.title == "Lunch"
