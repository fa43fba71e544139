from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable

from bizcard.application.menus.query_gate import MenuQueryGate, TombstoneScope
from bizcard.application.metrics.menu_lifecycle import record_menu_transition
from bizcard.application.ports.repositories import MenuCriteria, MenuStore
from bizcard.domain.common.ids import CardId, MenuId
from bizcard.domain.menu.entities import Menu, MenuState

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class MenuLifecycle:
    """ACTIVE -> TRASHED -> ACTIVE, and ACTIVE | TRASHED -> PURGED.

    Lookups go through the query gate so each transition only sees records in
    the state it is allowed to leave. The write repeats that state check under
    the store's row lock, so a record purged or moved in between is reported
    as absent instead of being written back. Absence is reported as ``None`` (or
    ``False`` for purge), never raised.
    """

    def __init__(self, store: MenuStore, gate: MenuQueryGate, clock: Clock = utc_now) -> None:
        self._store = store
        self._gate = gate
        self._clock = clock

    def soft_delete(self, menu_id: MenuId, card_id: CardId) -> Menu | None:
        menu = self._gate.first(
            MenuCriteria(menu_id=menu_id, card_id=card_id),
            TombstoneScope.ACTIVE,
        )
        if menu is None:
            return None

        trashed = self._store.put(menu.soft_delete(self._clock()), expect_deleted=False)
        if trashed is None:
            return None
        self._record(menu_id, card_id, MenuState.ACTIVE, MenuState.TRASHED)
        return trashed

    def restore(self, menu_id: MenuId, card_id: CardId | None = None) -> Menu | None:
        menu = self._gate.first(
            MenuCriteria(menu_id=menu_id, card_id=card_id),
            TombstoneScope.DELETED_ONLY,
        )
        if menu is None:
            return None

        restored = self._store.put(menu.restore(self._clock()), expect_deleted=True)
        if restored is None:
            return None
        self._record(menu_id, restored.card_id, MenuState.TRASHED, MenuState.ACTIVE)
        return restored

    def permanently_delete(self, menu_id: MenuId, card_id: CardId) -> bool:
        menu = self._gate.first(
            MenuCriteria(menu_id=menu_id, card_id=card_id),
            TombstoneScope.INCLUDING_DELETED,
        )
        if menu is None:
            return False

        if not self._store.remove(menu_id):
            return False
        self._record(menu_id, card_id, menu.state, MenuState.PURGED)
        return True

    def _record(
        self,
        menu_id: MenuId,
        card_id: CardId,
        from_state: MenuState,
        to_state: MenuState,
    ) -> None:
        record_menu_transition(from_state=from_state.value, to_state=to_state.value)
        logger.info(
            "menu_transition",
            extra={
                "menu_id": str(menu_id),
                "card_id": str(card_id),
                "from_state": from_state.value,
                "to_state": to_state.value,
            },
        )
