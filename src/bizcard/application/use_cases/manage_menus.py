from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from bizcard.application.dto.responses import MenuListResponse, MenuResponse
from bizcard.application.mappers.menu_mapper import to_menu_list_response, to_menu_response
from bizcard.application.menus.errors import MenuNotFoundError
from bizcard.application.menus.repository import parse_sort_spec
from bizcard.application.use_cases.card_scope import CardScopedUseCase
from bizcard.domain.common.ids import CardId, MenuId, UserId


def _menu_not_found(card_id: CardId, menu_id: MenuId) -> MenuNotFoundError:
    return MenuNotFoundError(f"menu not found for card_id={card_id}, menu_id={menu_id}")


class CreateMenu(CardScopedUseCase):
    def execute(
        self,
        user_id: UserId,
        card_id: CardId,
        menu_data: Mapping[str, Any],
    ) -> MenuResponse:
        self._authorize(user_id, card_id)
        menu = self._menu_repository.create(card_id, menu_data)
        self._invalidate(card_id)
        return to_menu_response(menu)


class ListMenus(CardScopedUseCase):
    def execute(
        self,
        user_id: UserId,
        card_id: CardId,
        sort: str | None = None,
    ) -> MenuListResponse:
        sort_keys = parse_sort_spec(sort)
        self._authorize(user_id, card_id)
        return to_menu_list_response(self._menu_repository.list_by_card(card_id, sort_keys))


class GetMenu(CardScopedUseCase):
    def execute(self, user_id: UserId, card_id: CardId, menu_id: MenuId) -> MenuResponse:
        self._authorize(user_id, card_id)
        menu = self._menu_repository.get_by_id_and_card(menu_id, card_id)
        if menu is None:
            raise _menu_not_found(card_id, menu_id)
        return to_menu_response(menu)


class UpdateMenu(CardScopedUseCase):
    def execute(
        self,
        user_id: UserId,
        card_id: CardId,
        menu_id: MenuId,
        patch: Mapping[str, Any],
    ) -> MenuResponse:
        self._authorize(user_id, card_id)
        menu = self._menu_repository.update(menu_id, card_id, patch)
        if menu is None:
            raise _menu_not_found(card_id, menu_id)
        self._invalidate(card_id)
        return to_menu_response(menu)


class SoftDeleteMenu(CardScopedUseCase):
    def execute(self, user_id: UserId, card_id: CardId, menu_id: MenuId) -> MenuResponse:
        self._authorize(user_id, card_id)
        menu = self._menu_repository.soft_delete(menu_id, card_id)
        if menu is None:
            raise _menu_not_found(card_id, menu_id)
        self._invalidate(card_id)
        return to_menu_response(menu)


class RestoreMenu(CardScopedUseCase):
    def execute(self, user_id: UserId, card_id: CardId, menu_id: MenuId) -> MenuResponse:
        self._authorize(user_id, card_id)
        # Scoped to the caller's card so one owner cannot restore another's trash.
        menu = self._menu_repository.restore(menu_id, card_id)
        if menu is None:
            raise MenuNotFoundError(
                f"deleted menu not found for card_id={card_id}, menu_id={menu_id}"
            )
        self._invalidate(card_id)
        return to_menu_response(menu)


class PermanentlyDeleteMenu(CardScopedUseCase):
    def execute(self, user_id: UserId, card_id: CardId, menu_id: MenuId) -> None:
        self._authorize(user_id, card_id)
        if not self._menu_repository.permanently_delete(menu_id, card_id):
            raise _menu_not_found(card_id, menu_id)
        self._invalidate(card_id)


class ListDeletedMenus(CardScopedUseCase):
    def execute(self, user_id: UserId, card_id: CardId) -> MenuListResponse:
        self._authorize(user_id, card_id)
        return to_menu_list_response(self._menu_repository.list_deleted(card_id))
