from __future__ import annotations

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from bizcard.application.menus.repository import MenuRepository
from bizcard.application.ports.repositories import MenuCriteria, SortKey, StoreError
from bizcard.domain.card.entities import Card
from bizcard.domain.common.ids import CardId, MenuId, UserId
from bizcard.domain.menu.entities import Menu


class InMemoryMenuStore:
    def __init__(self) -> None:
        self.menus: dict[str, Menu] = {}
        self.queries: list[MenuCriteria] = []

    def get(self, menu_id: MenuId) -> Menu | None:
        return self.menus.get(str(menu_id))

    def insert(self, menu: Menu) -> Menu:
        if str(menu.menu_id) in self.menus:
            raise StoreError(f"menu {menu.menu_id} already exists")
        self.menus[str(menu.menu_id)] = menu
        return menu

    def put(self, menu: Menu, expect_deleted: bool) -> Menu | None:
        current = self.menus.get(str(menu.menu_id))
        if (
            current is None
            or current.card_id != menu.card_id
            or current.is_deleted != expect_deleted
        ):
            return None
        self.menus[str(menu.menu_id)] = menu
        return menu

    def query(self, criteria: MenuCriteria, sort: tuple[SortKey, ...] = ()) -> list[Menu]:
        self.queries.append(criteria)
        matches = sorted(
            (menu for menu in self.menus.values() if criteria.matches(menu)),
            key=lambda menu: str(menu.menu_id),
        )
        for key in reversed(sort):
            matches.sort(key=lambda menu: getattr(menu, key.field), reverse=key.descending)
        return matches

    def remove(self, menu_id: MenuId) -> bool:
        return self.menus.pop(str(menu_id), None) is not None


class FakeCardRepository:
    def __init__(self, cards: list[Card]) -> None:
        self._cards = {str(card.card_id): card for card in cards}

    def get_by_id_and_user_id(self, card_id: CardId, user_id: UserId) -> Card | None:
        card = self._cards.get(str(card_id))
        if card is None or card.user_id != user_id:
            return None
        return card


class FakeCacheStore:
    def __init__(self) -> None:
        self.values: dict[str, str] = {}
        self.ttls: dict[str, int] = {}
        self.bumped: list[str] = []

    def get(self, key: str) -> str | None:
        return self.values.get(key)

    def set(self, key: str, value: str, ttl_seconds: int) -> None:
        self.values[key] = value
        self.ttls[key] = ttl_seconds

    def incr(self, key: str) -> int:
        self.bumped.append(key)
        value = int(self.values.get(key, "0")) + 1
        self.values[key] = str(value)
        return value


class TickingClock:
    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        self.now = self.now + timedelta(seconds=1)
        return self.now


@pytest.fixture
def clock() -> TickingClock:
    return TickingClock(datetime(2026, 10, 19, 9, 0, tzinfo=timezone.utc))


@pytest.fixture
def store() -> InMemoryMenuStore:
    return InMemoryMenuStore()


@pytest.fixture
def repository(store: InMemoryMenuStore, clock: TickingClock) -> MenuRepository:
    return MenuRepository(store, clock=clock)


@pytest.fixture
def cards() -> FakeCardRepository:
    return FakeCardRepository(
        [
            Card(card_id=CardId("crd_001"), user_id=UserId("usr_001"), username="downtown"),
            Card(card_id=CardId("crd_002"), user_id=UserId("usr_002"), username="uptown"),
        ]
    )


@pytest.fixture
def cache() -> FakeCacheStore:
    return FakeCacheStore()
