from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from bizcard.application.dto.responses import MenuItemListResponse, MenuItemResponse, MenuResponse
from bizcard.application.mappers.menu_mapper import (
    to_menu_item_list_response,
    to_menu_item_response,
    to_menu_response,
)
from bizcard.application.menus.errors import MenuItemNotFoundError, MenuNotFoundError
from bizcard.application.use_cases.card_scope import CardScopedUseCase
from bizcard.domain.common.ids import CardId, MenuId, MenuItemId, UserId
from bizcard.domain.menu.entities import Menu, MenuItem


class _MenuItemUseCase(CardScopedUseCase):
    def _load_menu(self, card_id: CardId, menu_id: MenuId) -> Menu:
        menu = self._menu_repository.get_by_id_and_card(menu_id, card_id)
        if menu is None:
            raise MenuNotFoundError(f"menu not found for card_id={card_id}, menu_id={menu_id}")
        return menu

    def _load_item(self, card_id: CardId, menu_id: MenuId, item_id: MenuItemId) -> MenuItem:
        item = self._load_menu(card_id, menu_id).find_item(item_id)
        if item is None:
            raise MenuItemNotFoundError(
                f"menu item not found for menu_id={menu_id}, item_id={item_id}"
            )
        return item


class ListMenuItems(_MenuItemUseCase):
    def execute(self, user_id: UserId, card_id: CardId, menu_id: MenuId) -> MenuItemListResponse:
        self._authorize(user_id, card_id)
        return to_menu_item_list_response(self._load_menu(card_id, menu_id).items)


class GetMenuItem(_MenuItemUseCase):
    def execute(
        self,
        user_id: UserId,
        card_id: CardId,
        menu_id: MenuId,
        item_id: MenuItemId,
    ) -> MenuItemResponse:
        self._authorize(user_id, card_id)
        return to_menu_item_response(self._load_item(card_id, menu_id, item_id))


class AddMenuItem(_MenuItemUseCase):
    def execute(
        self,
        user_id: UserId,
        card_id: CardId,
        menu_id: MenuId,
        item_data: Mapping[str, Any],
    ) -> MenuResponse:
        self._authorize(user_id, card_id)
        menu = self._menu_repository.add_item(menu_id, card_id, item_data)
        if menu is None:
            raise MenuNotFoundError(f"menu not found for card_id={card_id}, menu_id={menu_id}")
        self._invalidate(card_id)
        return to_menu_response(menu)


class UpdateMenuItem(_MenuItemUseCase):
    def execute(
        self,
        user_id: UserId,
        card_id: CardId,
        menu_id: MenuId,
        item_id: MenuItemId,
        patch: Mapping[str, Any],
    ) -> MenuResponse:
        self._authorize(user_id, card_id)
        self._load_item(card_id, menu_id, item_id)
        menu = self._menu_repository.update_item(menu_id, card_id, item_id, patch)
        if menu is None:
            raise MenuItemNotFoundError(
                f"menu item not found for menu_id={menu_id}, item_id={item_id}"
            )
        self._invalidate(card_id)
        return to_menu_response(menu)


class RemoveMenuItem(_MenuItemUseCase):
    def execute(
        self,
        user_id: UserId,
        card_id: CardId,
        menu_id: MenuId,
        item_id: MenuItemId,
    ) -> MenuResponse:
        self._authorize(user_id, card_id)
        self._load_item(card_id, menu_id, item_id)
        menu = self._menu_repository.remove_item(menu_id, card_id, item_id)
        if menu is None:
            raise MenuItemNotFoundError(
                f"menu item not found for menu_id={menu_id}, item_id={item_id}"
            )
        self._invalidate(card_id)
        return to_menu_response(menu)
