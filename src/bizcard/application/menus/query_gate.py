from __future__ import annotations

from dataclasses import replace
from enum import Enum

from bizcard.application.ports.repositories import MenuCriteria, MenuStore, SortKey
from bizcard.domain.menu.entities import Menu


class TombstoneScope(str, Enum):
    ACTIVE = "ACTIVE"
    INCLUDING_DELETED = "INCLUDING_DELETED"
    DELETED_ONLY = "DELETED_ONLY"


_TOMBSTONE_FILTERS: dict[TombstoneScope, bool | None] = {
    TombstoneScope.ACTIVE: False,
    TombstoneScope.INCLUDING_DELETED: None,
    TombstoneScope.DELETED_ONLY: True,
}


class MenuQueryGate:
    """Single read path into the menu store.

    Every read goes through :meth:`find`, which overwrites the tombstone part
    of the caller's criteria with the value implied by ``scope``. Callers
    cannot smuggle ``is_deleted`` in on the criteria: it is replaced on a
    fresh copy before the store ever sees the predicate, and the caller's
    object is left untouched.
    """

    def __init__(self, store: MenuStore) -> None:
        self._store = store

    @staticmethod
    def scoped(criteria: MenuCriteria, scope: TombstoneScope) -> MenuCriteria:
        return replace(criteria, is_deleted=_TOMBSTONE_FILTERS[scope])

    def find(
        self,
        criteria: MenuCriteria,
        scope: TombstoneScope = TombstoneScope.ACTIVE,
        sort: tuple[SortKey, ...] = (),
    ) -> list[Menu]:
        return self._store.query(self.scoped(criteria, scope), sort)

    def first(
        self,
        criteria: MenuCriteria,
        scope: TombstoneScope = TombstoneScope.ACTIVE,
    ) -> Menu | None:
        matches = self.find(criteria, scope)
        return matches[0] if matches else None

    def find_active(self, criteria: MenuCriteria, sort: tuple[SortKey, ...] = ()) -> list[Menu]:
        return self.find(criteria, TombstoneScope.ACTIVE, sort)

    def find_including_deleted(
        self,
        criteria: MenuCriteria,
        sort: tuple[SortKey, ...] = (),
    ) -> list[Menu]:
        return self.find(criteria, TombstoneScope.INCLUDING_DELETED, sort)

    def find_deleted_only(
        self,
        criteria: MenuCriteria,
        sort: tuple[SortKey, ...] = (),
    ) -> list[Menu]:
        return self.find(criteria, TombstoneScope.DELETED_ONLY, sort)
