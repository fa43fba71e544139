from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Engine, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from bizcard.application.ports.repositories import MenuCriteria, MenuStore, SortKey, StoreError
from bizcard.domain.common.ids import CardId, MenuId, MenuItemId
from bizcard.domain.menu.entities import Menu, MenuItem
from bizcard.infrastructure.db.models.menu import MenuItemModel, MenuModel
from bizcard.infrastructure.db.session import get_engine

_SORT_COLUMNS = {
    "display_order": MenuModel.display_order,
    "created_at": MenuModel.created_at,
    "updated_at": MenuModel.updated_at,
    "deleted_at": MenuModel.deleted_at,
    "title": MenuModel.title,
}


def _as_utc(value: datetime | None) -> datetime | None:
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class SqlAlchemyMenuStore(MenuStore):
    """Raw menu persistence. Applies exactly the criteria it is given."""

    def __init__(self, engine: Engine | None = None) -> None:
        self._engine = engine or get_engine()

    def get(self, menu_id: MenuId) -> Menu | None:
        statement = (
            select(MenuModel)
            .options(selectinload(MenuModel.items))
            .where(MenuModel.id == str(menu_id))
        )
        try:
            with Session(self._engine) as session:
                model = session.execute(statement).scalar_one_or_none()
                return None if model is None else self._to_domain(model)
        except SQLAlchemyError as exc:
            raise StoreError(f"failed to load menu {menu_id}") from exc

    def query(self, criteria: MenuCriteria, sort: tuple[SortKey, ...] = ()) -> list[Menu]:
        statement = select(MenuModel).options(selectinload(MenuModel.items))
        if criteria.menu_id is not None:
            statement = statement.where(MenuModel.id == str(criteria.menu_id))
        if criteria.card_id is not None:
            statement = statement.where(MenuModel.card_id == str(criteria.card_id))
        if criteria.is_deleted is not None:
            statement = statement.where(MenuModel.is_deleted.is_(criteria.is_deleted))

        for key in sort:
            column = _SORT_COLUMNS[key.field]
            statement = statement.order_by(column.desc() if key.descending else column.asc())
        statement = statement.order_by(MenuModel.id.asc())

        try:
            with Session(self._engine) as session:
                models = session.execute(statement).scalars().all()
                return [self._to_domain(model) for model in models]
        except SQLAlchemyError as exc:
            raise StoreError("failed to query menus") from exc

    def insert(self, menu: Menu) -> Menu:
        try:
            with Session(self._engine) as session, session.begin():
                model = MenuModel(id=str(menu.menu_id), card_id=str(menu.card_id))
                session.add(model)
                self._write(model, menu)
                session.flush()
                return self._to_domain(model)
        except SQLAlchemyError as exc:
            raise StoreError(f"failed to insert menu {menu.menu_id}") from exc

    def put(self, menu: Menu, expect_deleted: bool) -> Menu | None:
        try:
            with Session(self._engine) as session, session.begin():
                model = session.get(
                    MenuModel,
                    str(menu.menu_id),
                    options=[selectinload(MenuModel.items)],
                    with_for_update=True,
                )
                if (
                    model is None
                    or model.card_id != str(menu.card_id)
                    or model.is_deleted != expect_deleted
                ):
                    return None

                self._write(model, menu)
                session.flush()
                return self._to_domain(model)
        except SQLAlchemyError as exc:
            raise StoreError(f"failed to store menu {menu.menu_id}") from exc

    def _write(self, model: MenuModel, menu: Menu) -> None:
        model.title = menu.title
        model.description = menu.description
        model.is_active = menu.is_active
        model.display_order = menu.display_order
        model.is_deleted = menu.is_deleted
        model.deleted_at = menu.deleted_at
        model.created_at = menu.created_at
        model.updated_at = menu.updated_at
        model.items = self._sync_items(model, menu)

    def remove(self, menu_id: MenuId) -> bool:
        try:
            with Session(self._engine) as session, session.begin():
                model = session.get(MenuModel, str(menu_id), with_for_update=True)
                if model is None:
                    return False
                session.delete(model)
                return True
        except SQLAlchemyError as exc:
            raise StoreError(f"failed to remove menu {menu_id}") from exc

    def _sync_items(self, model: MenuModel, menu: Menu) -> list[MenuItemModel]:
        existing = {item.id: item for item in model.items}
        synced: list[MenuItemModel] = []
        for position, item in enumerate(menu.items):
            item_model = existing.get(str(item.item_id)) or MenuItemModel(id=str(item.item_id))
            item_model.position = position
            item_model.name = item.name
            item_model.description = item.description
            item_model.price = item.price
            item_model.image = item.image
            item_model.category = item.category
            item_model.is_available = item.is_available
            item_model.created_at = item.created_at
            item_model.updated_at = item.updated_at
            synced.append(item_model)
        return synced

    def _to_domain(self, model: MenuModel) -> Menu:
        items = [
            MenuItem(
                item_id=MenuItemId(item.id),
                name=item.name,
                price=item.price,
                description=item.description,
                image=item.image,
                category=item.category,
                is_available=item.is_available,
                created_at=_as_utc(item.created_at),
                updated_at=_as_utc(item.updated_at),
            )
            for item in sorted(model.items, key=lambda item: item.position)
        ]
        return Menu(
            menu_id=MenuId(model.id),
            card_id=CardId(model.card_id),
            title=model.title,
            description=model.description,
            items=items,
            is_active=model.is_active,
            display_order=model.display_order,
            is_deleted=model.is_deleted,
            deleted_at=_as_utc(model.deleted_at),
            created_at=_as_utc(model.created_at),
            updated_at=_as_utc(model.updated_at),
        )
