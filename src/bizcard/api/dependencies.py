from __future__ import annotations

import os

from fastapi import Header, HTTPException, status

from bizcard.application.menus.repository import MenuRepository
from bizcard.application.ports.cache import CacheStore
from bizcard.application.ports.repositories import CardRepository
from bizcard.domain.common.ids import UserId
from bizcard.infrastructure.cache.cache_store import RedisCacheStore
from bizcard.infrastructure.db.repositories.card_repo import SqlAlchemyCardRepository
from bizcard.infrastructure.db.repositories.menu_repo import SqlAlchemyMenuStore

USER_ID_HEADER = "X-User-Id"


def menu_repository() -> MenuRepository:
    return MenuRepository(SqlAlchemyMenuStore())


def card_repository() -> CardRepository:
    return SqlAlchemyCardRepository()


def menu_cache() -> CacheStore:
    return RedisCacheStore()


def menu_cache_ttl_seconds() -> int:
    return int(os.getenv("MENU_CACHE_TTL_SECONDS", "300"))


def current_user_id(
    x_user_id: str | None = Header(default=None, alias=USER_ID_HEADER),
) -> UserId:
    # Set by the authentication layer in front of this service.
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"{USER_ID_HEADER} header is required",
        )
    return UserId(x_user_id.strip())
