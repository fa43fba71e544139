from __future__ import annotations

from typing import NewType
from uuid import uuid4

UserId = NewType("UserId", str)
CardId = NewType("CardId", str)
MenuId = NewType("MenuId", str)
MenuItemId = NewType("MenuItemId", str)


def new_menu_id() -> MenuId:
    return MenuId(f"men_{uuid4().hex[:12]}")


def new_menu_item_id() -> MenuItemId:
    return MenuItemId(f"itm_{uuid4().hex[:12]}")
