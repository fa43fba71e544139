from __future__ import annotations

from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _to_camel(value: str) -> str:
    parts = value.split("_")
    return parts[0] + "".join(part.capitalize() for part in parts[1:])


class CamelBaseModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=_to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        extra="forbid",
    )


class MenuItemRequest(CamelBaseModel):
    item_id: str | None = None
    name: str = Field(min_length=1, max_length=255)
    description: str | None = Field(default=None, max_length=1000)
    price: Decimal = Field(ge=0, max_digits=10, decimal_places=2)
    image: str | None = Field(default=None, max_length=2048)
    category: str | None = Field(default=None, max_length=255)
    is_available: bool = True


class MenuItemPatchRequest(CamelBaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = Field(default=None, max_length=1000)
    price: Decimal | None = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    image: str | None = Field(default=None, max_length=2048)
    category: str | None = Field(default=None, max_length=255)
    is_available: bool | None = None

    @field_validator("name", "price", "is_available")
    @classmethod
    def reject_null(cls, value: Any) -> Any:
        if value is None:
            raise ValueError("field cannot be null")
        return value


class CreateMenuRequest(CamelBaseModel):
    title: str = Field(min_length=1, max_length=255)
    description: str | None = Field(default=None, max_length=1000)
    items: list[MenuItemRequest] = Field(default_factory=list)
    is_active: bool = True
    display_order: int = 0


class UpdateMenuRequest(CamelBaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = Field(default=None, max_length=1000)
    items: list[MenuItemRequest] | None = None
    is_active: bool | None = None
    display_order: int | None = None

    @field_validator("title", "items", "is_active", "display_order")
    @classmethod
    def reject_null(cls, value: Any) -> Any:
        if value is None:
            raise ValueError("field cannot be null")
        return value
