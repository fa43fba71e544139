from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import inspect
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.orm import Session

from bizcard.infrastructure.db.models.menu import CardModel, MenuItemModel, MenuModel
from bizcard.infrastructure.db.session import get_engine


def main() -> None:
    engine = get_engine(timeout_seconds=2.0)
    inspector = inspect(engine)
    required_tables = {"cards", "menus", "menu_items"}
    if not required_tables.issubset(set(inspector.get_table_names(schema="public"))):
        print("no schema yet")
        return

    now = datetime.now(timezone.utc)
    with Session(engine) as session:
        session.execute(
            insert(CardModel)
            .values(id="crd_001", user_id="usr_001", username="downtown-kitchen")
            .on_conflict_do_update(
                index_elements=[CardModel.id],
                set_={"user_id": "usr_001", "username": "downtown-kitchen"},
            )
        )

        session.execute(
            insert(MenuModel)
            .values(
                id="men_001",
                card_id="crd_001",
                title="Lunch",
                description="Served 11:00-15:00",
                is_active=True,
                display_order=0,
                is_deleted=False,
                deleted_at=None,
                created_at=now,
                updated_at=now,
            )
            .on_conflict_do_update(
                index_elements=[MenuModel.id],
                set_={
                    "card_id": "crd_001",
                    "title": "Lunch",
                    "is_deleted": False,
                    "deleted_at": None,
                    "updated_at": now,
                },
            )
        )

        items = [
            {
                "id": "itm_001",
                "name": "Margherita Pizza",
                "description": "Tomato, mozzarella, basil",
                "price": Decimal("14.50"),
                "category": "Mains",
                "is_available": True,
            },
            {
                "id": "itm_002",
                "name": "Caesar Salad",
                "description": "Romaine, croutons, parmesan",
                "price": Decimal("9.90"),
                "category": "Starters",
                "is_available": True,
            },
            {
                "id": "itm_003",
                "name": "Tiramisu",
                "description": "Espresso-soaked ladyfingers",
                "price": Decimal("8.50"),
                "category": "Desserts",
                "is_available": False,
            },
        ]

        for position, item in enumerate(items):
            values = {
                **item,
                "menu_id": "men_001",
                "position": position,
                "image": None,
                "created_at": now,
                "updated_at": now,
            }
            session.execute(
                insert(MenuItemModel)
                .values(**values)
                .on_conflict_do_update(
                    index_elements=[MenuItemModel.id],
                    set_={key: value for key, value in values.items() if key != "id"},
                )
            )

        session.commit()
        print("seed complete")


if __name__ == "__main__":
    main()
