from __future__ import annotations

from typing import Any


class MenuValidationError(Exception):
    def __init__(self, message: str, errors: list[dict[str, Any]] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or []
        self.details = {"errors": self.errors}


class MenuNotFoundError(Exception):
    pass


class MenuItemNotFoundError(Exception):
    pass
