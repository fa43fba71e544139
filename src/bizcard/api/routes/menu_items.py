from __future__ import annotations

from typing import Any, TypeVar

from fastapi import APIRouter, Body, Depends, status

from bizcard.api import dependencies
from bizcard.application.dto.responses import MenuItemListResponse, MenuItemResponse, MenuResponse
from bizcard.application.use_cases.card_scope import CardScopedUseCase
from bizcard.application.use_cases.manage_menu_items import (
    AddMenuItem,
    GetMenuItem,
    ListMenuItems,
    RemoveMenuItem,
    UpdateMenuItem,
)
from bizcard.domain.common.ids import CardId, MenuId, MenuItemId, UserId

router = APIRouter(prefix="/v1/cards/{card_id}/menus/{menu_id}/items", tags=["menu-items"])

UseCaseT = TypeVar("UseCaseT", bound=CardScopedUseCase)


def _use_case(use_case_cls: type[UseCaseT]) -> UseCaseT:
    return use_case_cls(
        menu_repository=dependencies.menu_repository(),
        card_repository=dependencies.card_repository(),
        cache=dependencies.menu_cache(),
    )


@router.get("", response_model=MenuItemListResponse)
def list_menu_items(
    card_id: str,
    menu_id: str,
    user_id: UserId = Depends(dependencies.current_user_id),
) -> MenuItemListResponse:
    return _use_case(ListMenuItems).execute(
        user_id=user_id,
        card_id=CardId(card_id),
        menu_id=MenuId(menu_id),
    )


@router.post("", response_model=MenuResponse, status_code=status.HTTP_201_CREATED)
def add_menu_item(
    card_id: str,
    menu_id: str,
    payload: dict[str, Any] = Body(...),
    user_id: UserId = Depends(dependencies.current_user_id),
) -> MenuResponse:
    return _use_case(AddMenuItem).execute(
        user_id=user_id,
        card_id=CardId(card_id),
        menu_id=MenuId(menu_id),
        item_data=payload,
    )


@router.get("/{item_id}", response_model=MenuItemResponse)
def get_menu_item(
    card_id: str,
    menu_id: str,
    item_id: str,
    user_id: UserId = Depends(dependencies.current_user_id),
) -> MenuItemResponse:
    return _use_case(GetMenuItem).execute(
        user_id=user_id,
        card_id=CardId(card_id),
        menu_id=MenuId(menu_id),
        item_id=MenuItemId(item_id),
    )


@router.put("/{item_id}", response_model=MenuResponse)
def update_menu_item(
    card_id: str,
    menu_id: str,
    item_id: str,
    payload: dict[str, Any] = Body(...),
    user_id: UserId = Depends(dependencies.current_user_id),
) -> MenuResponse:
    return _use_case(UpdateMenuItem).execute(
        user_id=user_id,
        card_id=CardId(card_id),
        menu_id=MenuId(menu_id),
        item_id=MenuItemId(item_id),
        patch=payload,
    )


@router.delete("/{item_id}", response_model=MenuResponse)
def remove_menu_item(
    card_id: str,
    menu_id: str,
    item_id: str,
    user_id: UserId = Depends(dependencies.current_user_id),
) -> MenuResponse:
    return _use_case(RemoveMenuItem).execute(
        user_id=user_id,
        card_id=CardId(card_id),
        menu_id=MenuId(menu_id),
        item_id=MenuItemId(item_id),
    )
