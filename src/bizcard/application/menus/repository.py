from __future__ import annotations

from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from dataclasses import replace
from datetime import datetime
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from bizcard.application.dto.requests import (
    CreateMenuRequest,
    MenuItemPatchRequest,
    MenuItemRequest,
    UpdateMenuRequest,
)
from bizcard.application.menus.errors import MenuValidationError
from bizcard.application.menus.lifecycle import Clock, MenuLifecycle, utc_now
from bizcard.application.menus.query_gate import MenuQueryGate
from bizcard.application.metrics.menu_lifecycle import (
    record_menu_created,
    record_validation_failure,
)
from bizcard.application.ports.repositories import (
    DEFAULT_MENU_SORT,
    TRASH_MENU_SORT,
    MenuCriteria,
    MenuStore,
    SortKey,
)
from bizcard.domain.common.ids import (
    CardId,
    MenuId,
    MenuItemId,
    new_menu_id,
    new_menu_item_id,
)
from bizcard.domain.menu.entities import Menu, MenuItem

RequestT = TypeVar("RequestT", bound=BaseModel)

_SORT_FIELD_ALIASES = {
    "displayOrder": "display_order",
    "createdAt": "created_at",
    "updatedAt": "updated_at",
    "deletedAt": "deleted_at",
}


def parse_sort_spec(raw: str | None) -> tuple[SortKey, ...]:
    """Parse ``displayOrder,-createdAt`` into sort keys.

    A leading ``-`` sorts that field descending. An empty spec yields the
    default ordering.
    """
    if raw is None or not raw.strip():
        return DEFAULT_MENU_SORT

    keys: list[SortKey] = []
    for index, token in enumerate(part.strip() for part in raw.split(",")):
        if not token:
            continue
        descending = token.startswith("-")
        name = token.lstrip("-+")
        try:
            keys.append(SortKey(_SORT_FIELD_ALIASES.get(name, name), descending=descending))
        except ValueError as exc:
            raise MenuValidationError(
                str(exc),
                [{"field": f"sort.{index}", "message": str(exc)}],
            ) from exc
    return tuple(keys) or DEFAULT_MENU_SORT


def _validate(model: type[RequestT], data: Any, operation: str) -> RequestT:
    if not isinstance(data, Mapping):
        record_validation_failure(operation)
        raise MenuValidationError(
            "payload must be an object",
            [{"field": "body", "message": "payload must be an object"}],
        )
    try:
        return model.model_validate(dict(data))
    except ValidationError as exc:
        record_validation_failure(operation)
        errors = [
            {
                "field": ".".join(str(part) for part in error["loc"]) or "body",
                "message": error["msg"],
            }
            for error in exc.errors()
        ]
        raise MenuValidationError(f"invalid {errors[0]['field']}", errors) from exc


@contextmanager
def _domain_rules(operation: str) -> Iterator[None]:
    try:
        yield
    except ValueError as exc:
        record_validation_failure(operation)
        raise MenuValidationError(str(exc), [{"field": "menu", "message": str(exc)}]) from exc


def _new_item(request: MenuItemRequest, now: datetime) -> MenuItem:
    return MenuItem(
        item_id=new_menu_item_id(),
        name=request.name,
        price=request.price,
        description=request.description,
        image=request.image,
        category=request.category,
        is_available=request.is_available,
        created_at=now,
        updated_at=now,
    )


def _merge_items(
    existing: list[MenuItem],
    requests: list[MenuItemRequest],
    now: datetime,
) -> list[MenuItem]:
    by_id = {str(item.item_id): item for item in existing}
    merged: list[MenuItem] = []
    for index, request in enumerate(requests):
        if request.item_id is None:
            merged.append(_new_item(request, now))
            continue

        current = by_id.get(request.item_id)
        if current is None:
            message = f"menu item {request.item_id} does not belong to this menu"
            raise MenuValidationError(
                message,
                [{"field": f"items.{index}.itemId", "message": message}],
            )
        merged.append(
            replace(
                current,
                name=request.name,
                price=request.price,
                description=request.description,
                image=request.image,
                category=request.category,
                is_available=request.is_available,
                updated_at=now,
            )
        )
    return merged


class MenuRepository:
    """Card-scoped menu operations used by the application layer.

    Reads go through :class:`MenuQueryGate` and only ever see active menus
    unless the method name says otherwise. Writes validate the whole record
    before anything is stored, so a rejected payload leaves the stored menu
    untouched. Absence is reported as ``None``; only malformed input raises.
    """

    def __init__(self, store: MenuStore, clock: Clock = utc_now) -> None:
        self._store = store
        self._clock = clock
        self._gate = MenuQueryGate(store)
        self._lifecycle = MenuLifecycle(store, self._gate, clock)

    def create(self, card_id: CardId, menu_data: Mapping[str, Any]) -> Menu:
        request = _validate(CreateMenuRequest, menu_data, operation="create")
        now = self._clock()
        with _domain_rules("create"):
            menu = Menu(
                menu_id=new_menu_id(),
                card_id=card_id,
                title=request.title,
                description=request.description,
                items=[_new_item(item, now) for item in request.items],
                is_active=request.is_active,
                display_order=request.display_order,
                created_at=now,
                updated_at=now,
            )
        created = self._store.insert(menu)
        record_menu_created()
        return created

    def list_by_card(
        self,
        card_id: CardId,
        sort: tuple[SortKey, ...] = DEFAULT_MENU_SORT,
    ) -> list[Menu]:
        return self._gate.find_active(MenuCriteria(card_id=card_id), sort)

    def get_by_id_and_card(self, menu_id: MenuId, card_id: CardId) -> Menu | None:
        return self._gate.first(MenuCriteria(menu_id=menu_id, card_id=card_id))

    def update(
        self,
        menu_id: MenuId,
        card_id: CardId,
        patch: Mapping[str, Any],
    ) -> Menu | None:
        request = _validate(UpdateMenuRequest, patch, operation="update")
        menu = self.get_by_id_and_card(menu_id, card_id)
        if menu is None:
            return None

        now = self._clock()
        changes: dict[str, Any] = {
            name: getattr(request, name)
            for name in ("title", "description", "is_active", "display_order")
            if name in request.model_fields_set
        }
        if request.items is not None:
            changes["items"] = _merge_items(menu.items, request.items, now)

        with _domain_rules("update"):
            updated = replace(menu, **changes, updated_at=now)
        return self._store.put(updated, expect_deleted=False)

    def add_item(
        self,
        menu_id: MenuId,
        card_id: CardId,
        item_data: Mapping[str, Any],
    ) -> Menu | None:
        request = _validate(MenuItemRequest, item_data, operation="add_item")
        if request.item_id is not None:
            message = "itemId is assigned by the server"
            raise MenuValidationError(message, [{"field": "itemId", "message": message}])

        menu = self.get_by_id_and_card(menu_id, card_id)
        if menu is None:
            return None

        now = self._clock()
        with _domain_rules("add_item"):
            updated = menu.with_items([*menu.items, _new_item(request, now)], now)
        return self._store.put(updated, expect_deleted=False)

    def update_item(
        self,
        menu_id: MenuId,
        card_id: CardId,
        item_id: MenuItemId,
        patch: Mapping[str, Any],
    ) -> Menu | None:
        request = _validate(MenuItemPatchRequest, patch, operation="update_item")
        menu = self.get_by_id_and_card(menu_id, card_id)
        if menu is None or menu.find_item(item_id) is None:
            return None

        now = self._clock()
        changes = {name: getattr(request, name) for name in request.model_fields_set}
        with _domain_rules("update_item"):
            items = [
                replace(item, **changes, updated_at=now) if item.item_id == item_id else item
                for item in menu.items
            ]
            updated = menu.with_items(items, now)
        return self._store.put(updated, expect_deleted=False)

    def remove_item(
        self,
        menu_id: MenuId,
        card_id: CardId,
        item_id: MenuItemId,
    ) -> Menu | None:
        menu = self.get_by_id_and_card(menu_id, card_id)
        if menu is None or menu.find_item(item_id) is None:
            return None

        items = [item for item in menu.items if item.item_id != item_id]
        return self._store.put(menu.with_items(items, self._clock()), expect_deleted=False)

    def soft_delete(self, menu_id: MenuId, card_id: CardId) -> Menu | None:
        return self._lifecycle.soft_delete(menu_id, card_id)

    def restore(self, menu_id: MenuId, card_id: CardId | None = None) -> Menu | None:
        return self._lifecycle.restore(menu_id, card_id)

    def permanently_delete(self, menu_id: MenuId, card_id: CardId) -> bool:
        return self._lifecycle.permanently_delete(menu_id, card_id)

    def list_deleted(
        self,
        card_id: CardId,
        sort: tuple[SortKey, ...] = TRASH_MENU_SORT,
    ) -> list[Menu]:
        return self._gate.find_deleted_only(MenuCriteria(card_id=card_id), sort)
