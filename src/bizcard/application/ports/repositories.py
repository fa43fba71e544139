from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from bizcard.domain.card.entities import Card
from bizcard.domain.common.ids import CardId, MenuId, UserId
from bizcard.domain.menu.entities import Menu

SORTABLE_MENU_FIELDS = frozenset(
    {"display_order", "created_at", "updated_at", "deleted_at", "title"}
)


@dataclass(frozen=True)
class SortKey:
    field: str
    descending: bool = False

    def __post_init__(self) -> None:
        if self.field not in SORTABLE_MENU_FIELDS:
            raise ValueError(f"cannot sort menus by {self.field!r}")


DEFAULT_MENU_SORT: tuple[SortKey, ...] = (
    SortKey("display_order"),
    SortKey("created_at", descending=True),
)

TRASH_MENU_SORT: tuple[SortKey, ...] = (SortKey("deleted_at", descending=True),)


@dataclass(frozen=True)
class MenuCriteria:
    """Plain equality predicate over stored menus.

    A field left as ``None`` does not constrain the match.
    """

    menu_id: MenuId | None = None
    card_id: CardId | None = None
    is_deleted: bool | None = None

    def matches(self, menu: Menu) -> bool:
        if self.menu_id is not None and menu.menu_id != self.menu_id:
            return False
        if self.card_id is not None and menu.card_id != self.card_id:
            return False
        if self.is_deleted is not None and menu.is_deleted != self.is_deleted:
            return False
        return True


class MenuStore(Protocol):
    def get(self, menu_id: MenuId) -> Menu | None: ...

    def insert(self, menu: Menu) -> Menu: ...

    def put(self, menu: Menu, expect_deleted: bool) -> Menu | None:
        """Overwrite an existing menu of the same card.

        The write only happens while the stored row still has
        ``is_deleted == expect_deleted``, checked under the same lock as the
        write. Returns ``None`` when the row is gone or has changed state.
        """
        ...

    def query(
        self,
        criteria: MenuCriteria,
        sort: tuple[SortKey, ...] = (),
    ) -> list[Menu]: ...

    def remove(self, menu_id: MenuId) -> bool: ...


class CardRepository(Protocol):
    def get_by_id_and_user_id(self, card_id: CardId, user_id: UserId) -> Card | None: ...


class StoreError(Exception):
    pass
