from __future__ import annotations

from dataclasses import dataclass

from bizcard.domain.common.ids import CardId, UserId


@dataclass(frozen=True)
class Card:
    card_id: CardId
    user_id: UserId
    username: str
