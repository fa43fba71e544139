from __future__ import annotations

from bizcard.application.menus.repository import MenuRepository
from bizcard.application.ports.cache import CacheStore
from bizcard.application.ports.repositories import CardRepository
from bizcard.application.use_cases.public_menus import invalidate_public_menus
from bizcard.domain.card.entities import Card
from bizcard.domain.common.ids import CardId, UserId


class CardAccessDeniedError(Exception):
    pass


class CardScopedUseCase:
    """Base for owner-facing menu use cases.

    The caller must own the card before any menu is read or written, and every
    write drops the card's cached public menu list.
    """

    def __init__(
        self,
        menu_repository: MenuRepository,
        card_repository: CardRepository,
        cache: CacheStore | None = None,
    ) -> None:
        self._menu_repository = menu_repository
        self._card_repository = card_repository
        self._cache = cache

    def _authorize(self, user_id: UserId, card_id: CardId) -> Card:
        card = self._card_repository.get_by_id_and_user_id(card_id=card_id, user_id=user_id)
        if card is None:
            raise CardAccessDeniedError(
                f"card {card_id} not found or you do not have permission to access it"
            )
        return card

    def _invalidate(self, card_id: CardId) -> None:
        if self._cache is not None:
            invalidate_public_menus(self._cache, card_id)
