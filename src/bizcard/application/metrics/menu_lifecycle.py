from __future__ import annotations

from prometheus_client import Counter

MENU_TRANSITIONS_TOTAL = Counter(
    "bizcard_menu_transitions_total",
    "Total number of menu lifecycle transitions.",
    ["from", "to"],
)

MENUS_CREATED_TOTAL = Counter(
    "bizcard_menus_created_total",
    "Total number of menus created.",
)

MENU_VALIDATION_FAILURES_TOTAL = Counter(
    "bizcard_menu_validation_failures_total",
    "Total number of rejected menu writes.",
    ["operation"],
)

PUBLIC_MENU_CACHE_TOTAL = Counter(
    "bizcard_public_menu_cache_total",
    "Public menu list cache lookups by result.",
    ["result"],
)


def record_menu_transition(from_state: str, to_state: str) -> None:
    MENU_TRANSITIONS_TOTAL.labels(**{"from": from_state, "to": to_state}).inc()


def record_menu_created() -> None:
    MENUS_CREATED_TOTAL.inc()


def record_validation_failure(operation: str) -> None:
    MENU_VALIDATION_FAILURES_TOTAL.labels(operation=operation).inc()


def record_public_cache_lookup(hit: bool) -> None:
    PUBLIC_MENU_CACHE_TOTAL.labels(result="hit" if hit else "miss").inc()
