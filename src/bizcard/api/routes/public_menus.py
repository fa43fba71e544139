from __future__ import annotations

from fastapi import APIRouter

from bizcard.api import dependencies
from bizcard.application.dto.responses import MenuListResponse
from bizcard.application.use_cases.public_menus import ListPublicMenus
from bizcard.domain.common.ids import CardId

router = APIRouter(tags=["public"])


def _list_public_menus_use_case() -> ListPublicMenus:
    return ListPublicMenus(
        repository=dependencies.menu_repository(),
        cache=dependencies.menu_cache(),
        ttl_seconds=dependencies.menu_cache_ttl_seconds(),
    )


@router.get("/v1/public/cards/{card_id}/menus", response_model=MenuListResponse)
def list_public_menus(card_id: str) -> MenuListResponse:
    return _list_public_menus_use_case().execute(CardId(card_id))
