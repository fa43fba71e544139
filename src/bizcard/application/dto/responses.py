from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class MenuItemResponse(BaseModel):
    itemId: str
    name: str
    description: str | None = None
    price: float
    image: str | None = None
    category: str | None = None
    isAvailable: bool
    createdAt: datetime
    updatedAt: datetime


class MenuResponse(BaseModel):
    menuId: str
    cardId: str
    title: str
    description: str | None = None
    items: list[MenuItemResponse] = Field(default_factory=list)
    isActive: bool
    displayOrder: int
    isDeleted: bool
    deletedAt: datetime | None = None
    createdAt: datetime
    updatedAt: datetime


class MenuListResponse(BaseModel):
    count: int
    menus: list[MenuResponse] = Field(default_factory=list)


class MenuItemListResponse(BaseModel):
    count: int
    items: list[MenuItemResponse] = Field(default_factory=list)
