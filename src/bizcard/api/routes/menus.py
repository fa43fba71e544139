from __future__ import annotations

from typing import Any, TypeVar

from fastapi import APIRouter, Body, Depends, Query, Response, status

from bizcard.api import dependencies
from bizcard.application.dto.responses import MenuListResponse, MenuResponse
from bizcard.application.use_cases.card_scope import CardScopedUseCase
from bizcard.application.use_cases.manage_menus import (
    CreateMenu,
    GetMenu,
    ListDeletedMenus,
    ListMenus,
    PermanentlyDeleteMenu,
    RestoreMenu,
    SoftDeleteMenu,
    UpdateMenu,
)
from bizcard.domain.common.ids import CardId, MenuId, UserId

router = APIRouter(prefix="/v1/cards/{card_id}/menus", tags=["menus"])

UseCaseT = TypeVar("UseCaseT", bound=CardScopedUseCase)


def _use_case(use_case_cls: type[UseCaseT]) -> UseCaseT:
    return use_case_cls(
        menu_repository=dependencies.menu_repository(),
        card_repository=dependencies.card_repository(),
        cache=dependencies.menu_cache(),
    )


@router.get("", response_model=MenuListResponse)
def list_menus(
    card_id: str,
    sort: str | None = Query(default=None),
    user_id: UserId = Depends(dependencies.current_user_id),
) -> MenuListResponse:
    return _use_case(ListMenus).execute(user_id=user_id, card_id=CardId(card_id), sort=sort)


@router.post("", response_model=MenuResponse, status_code=status.HTTP_201_CREATED)
def create_menu(
    card_id: str,
    payload: dict[str, Any] = Body(...),
    user_id: UserId = Depends(dependencies.current_user_id),
) -> MenuResponse:
    return _use_case(CreateMenu).execute(
        user_id=user_id,
        card_id=CardId(card_id),
        menu_data=payload,
    )


@router.get("/trash", response_model=MenuListResponse)
def list_deleted_menus(
    card_id: str,
    user_id: UserId = Depends(dependencies.current_user_id),
) -> MenuListResponse:
    return _use_case(ListDeletedMenus).execute(user_id=user_id, card_id=CardId(card_id))


@router.post("/{menu_id}/restore", response_model=MenuResponse)
def restore_menu(
    card_id: str,
    menu_id: str,
    user_id: UserId = Depends(dependencies.current_user_id),
) -> MenuResponse:
    return _use_case(RestoreMenu).execute(
        user_id=user_id,
        card_id=CardId(card_id),
        menu_id=MenuId(menu_id),
    )


@router.delete("/{menu_id}/permanent", status_code=status.HTTP_204_NO_CONTENT)
def permanently_delete_menu(
    card_id: str,
    menu_id: str,
    user_id: UserId = Depends(dependencies.current_user_id),
) -> Response:
    _use_case(PermanentlyDeleteMenu).execute(
        user_id=user_id,
        card_id=CardId(card_id),
        menu_id=MenuId(menu_id),
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{menu_id}", response_model=MenuResponse)
def get_menu(
    card_id: str,
    menu_id: str,
    user_id: UserId = Depends(dependencies.current_user_id),
) -> MenuResponse:
    return _use_case(GetMenu).execute(
        user_id=user_id,
        card_id=CardId(card_id),
        menu_id=MenuId(menu_id),
    )


@router.put("/{menu_id}", response_model=MenuResponse)
def update_menu(
    card_id: str,
    menu_id: str,
    payload: dict[str, Any] = Body(...),
    user_id: UserId = Depends(dependencies.current_user_id),
) -> MenuResponse:
    return _use_case(UpdateMenu).execute(
        user_id=user_id,
        card_id=CardId(card_id),
        menu_id=MenuId(menu_id),
        patch=payload,
    )


@router.delete("/{menu_id}", response_model=MenuResponse)
def soft_delete_menu(
    card_id: str,
    menu_id: str,
    user_id: UserId = Depends(dependencies.current_user_id),
) -> MenuResponse:
    return _use_case(SoftDeleteMenu).execute(
        user_id=user_id,
        card_id=CardId(card_id),
        menu_id=MenuId(menu_id),
    )
