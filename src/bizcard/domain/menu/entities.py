from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum

from bizcard.domain.common.ids import CardId, MenuId, MenuItemId


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class MenuState(str, Enum):
    ACTIVE = "ACTIVE"
    TRASHED = "TRASHED"
    # Purged menus no longer exist in the store; no entity ever carries this state.
    PURGED = "PURGED"


@dataclass(frozen=True)
class MenuItem:
    item_id: MenuItemId
    name: str
    price: Decimal
    description: str | None = None
    image: str | None = None
    category: str | None = None
    is_available: bool = True
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    def __post_init__(self) -> None:
        if not self.name.strip():
            raise ValueError("name must be non-empty")
        if self.price < 0:
            raise ValueError("price must be >= 0")


@dataclass(frozen=True)
class Menu:
    menu_id: MenuId
    card_id: CardId
    title: str
    description: str | None = None
    items: list[MenuItem] = field(default_factory=list)
    is_active: bool = True
    display_order: int = 0
    is_deleted: bool = False
    deleted_at: datetime | None = None
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    def __post_init__(self) -> None:
        if not self.title.strip():
            raise ValueError("title must be non-empty")
        if self.is_deleted and self.deleted_at is None:
            raise ValueError("deleted_at must be set when menu is deleted")
        if not self.is_deleted and self.deleted_at is not None:
            raise ValueError("deleted_at must be empty when menu is not deleted")
        item_ids = [item.item_id for item in self.items]
        if len(item_ids) != len(set(item_ids)):
            raise ValueError("menu item ids must be unique within a menu")

    @property
    def state(self) -> MenuState:
        return MenuState.TRASHED if self.is_deleted else MenuState.ACTIVE

    def find_item(self, item_id: MenuItemId) -> MenuItem | None:
        for item in self.items:
            if item.item_id == item_id:
                return item
        return None

    def soft_delete(self, now: datetime) -> Menu:
        return replace(self, is_deleted=True, deleted_at=now, updated_at=now)

    def restore(self, now: datetime) -> Menu:
        if not self.is_deleted:
            raise MenuNotTrashedError(f"menu {self.menu_id} is not deleted")
        return replace(self, is_deleted=False, deleted_at=None, updated_at=now)

    def with_items(self, items: list[MenuItem], now: datetime) -> Menu:
        return replace(self, items=list(items), updated_at=now)


class MenuNotTrashedError(Exception):
    pass
