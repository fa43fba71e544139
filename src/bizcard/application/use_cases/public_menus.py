from __future__ import annotations

import logging

from pydantic import ValidationError

from bizcard.application.dto.responses import MenuListResponse
from bizcard.application.mappers.menu_mapper import to_menu_list_response
from bizcard.application.menus.repository import MenuRepository
from bizcard.application.metrics.menu_lifecycle import record_public_cache_lookup
from bizcard.application.ports.cache import CacheStore
from bizcard.domain.common.ids import CardId

logger = logging.getLogger(__name__)


def public_menus_version_key(card_id: CardId) -> str:
    return f"menus:{card_id}:public:version"


def public_menus_cache_key(card_id: CardId, version: str) -> str:
    return f"menus:{card_id}:public:v{version}"


def invalidate_public_menus(cache: CacheStore, card_id: CardId) -> None:
    # Bumping the version orphans every list cached under an older one,
    # including a list a concurrent reader is about to store.
    try:
        cache.incr(public_menus_version_key(card_id))
    except Exception:
        logger.warning("menu_cache_invalidate_failed", exc_info=True, extra={"card_id": card_id})


class ListPublicMenus:
    """Visible menus of a card, outside the trash, read through a versioned cache.

    The cache version is read before the store, so a list loaded before a
    write is stored under the version that write has already retired.
    """

    def __init__(
        self,
        repository: MenuRepository,
        cache: CacheStore,
        ttl_seconds: int = 300,
    ) -> None:
        self._repository = repository
        self._cache = cache
        self._ttl_seconds = ttl_seconds

    def _current_version(self, card_id: CardId) -> str | None:
        try:
            return self._cache.get(public_menus_version_key(card_id)) or "0"
        except Exception:
            logger.warning("menu_cache_read_failed", exc_info=True)
            return None

    def _cached(self, key: str) -> MenuListResponse | None:
        try:
            payload = self._cache.get(key)
        except Exception:
            logger.warning("menu_cache_read_failed", exc_info=True)
            return None
        if not payload:
            return None
        try:
            return MenuListResponse.model_validate_json(payload)
        except ValidationError:
            return None

    def _cache_set(self, key: str, value: str) -> None:
        try:
            self._cache.set(key, value, ttl_seconds=self._ttl_seconds)
        except Exception:
            logger.warning("menu_cache_write_failed", exc_info=True)

    def execute(self, card_id: CardId) -> MenuListResponse:
        version = self._current_version(card_id)
        key = None if version is None else public_menus_cache_key(card_id, version)
        if key is not None:
            cached = self._cached(key)
            if cached is not None:
                record_public_cache_lookup(hit=True)
                return cached

        record_public_cache_lookup(hit=False)
        menus = [menu for menu in self._repository.list_by_card(card_id) if menu.is_active]
        response = to_menu_list_response(menus)
        if key is not None:
            self._cache_set(key, response.model_dump_json())
        return response
