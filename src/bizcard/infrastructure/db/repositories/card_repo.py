from __future__ import annotations

from sqlalchemy import Engine, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from bizcard.application.ports.repositories import CardRepository, StoreError
from bizcard.domain.card.entities import Card
from bizcard.domain.common.ids import CardId, UserId
from bizcard.infrastructure.db.models.menu import CardModel
from bizcard.infrastructure.db.session import get_engine


class SqlAlchemyCardRepository(CardRepository):
    def __init__(self, engine: Engine | None = None) -> None:
        self._engine = engine or get_engine()

    def get_by_id_and_user_id(self, card_id: CardId, user_id: UserId) -> Card | None:
        statement = select(CardModel).where(
            CardModel.id == str(card_id),
            CardModel.user_id == str(user_id),
        )
        try:
            with Session(self._engine) as session:
                model = session.execute(statement).scalar_one_or_none()
        except SQLAlchemyError as exc:
            raise StoreError(f"failed to load card {card_id}") from exc

        if model is None:
            return None

        return Card(
            card_id=CardId(model.id),
            user_id=UserId(model.user_id),
            username=model.username,
        )
