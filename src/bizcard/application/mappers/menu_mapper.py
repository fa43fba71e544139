from __future__ import annotations

from bizcard.application.dto.responses import (
    MenuItemListResponse,
    MenuItemResponse,
    MenuListResponse,
    MenuResponse,
)
from bizcard.domain.menu.entities import Menu, MenuItem


def to_menu_item_response(item: MenuItem) -> MenuItemResponse:
    return MenuItemResponse(
        itemId=str(item.item_id),
        name=item.name,
        description=item.description,
        price=float(item.price),
        image=item.image,
        category=item.category,
        isAvailable=item.is_available,
        createdAt=item.created_at,
        updatedAt=item.updated_at,
    )


def to_menu_response(menu: Menu) -> MenuResponse:
    return MenuResponse(
        menuId=str(menu.menu_id),
        cardId=str(menu.card_id),
        title=menu.title,
        description=menu.description,
        items=[to_menu_item_response(item) for item in menu.items],
        isActive=menu.is_active,
        displayOrder=menu.display_order,
        isDeleted=menu.is_deleted,
        deletedAt=menu.deleted_at,
        createdAt=menu.created_at,
        updatedAt=menu.updated_at,
    )


def to_menu_list_response(menus: list[Menu]) -> MenuListResponse:
    return MenuListResponse(
        count=len(menus),
        menus=[to_menu_response(menu) for menu in menus],
    )


def to_menu_item_list_response(items: list[MenuItem]) -> MenuItemListResponse:
    return MenuItemListResponse(
        count=len(items),
        items=[to_menu_item_response(item) for item in items],
    )
