"""
Lunch unit counting for reports.

Stored orders come in several generations of shapes: some carry an explicit
lunch count, some a list of meals, older ones only the message text or the
total. count_lunch_units tries each source in that priority order and falls
back to a price heuristic. Breakfast orders count as zero lunches.
"""

import json
import re
from typing import Any, Iterable

UNIT_PRICES = (13000, 12000, 16000)
MIN_UNIT_PRICE = 12000
MAX_UNIT_PRICE = 16000
MAX_EXACT_UNITS = 50

COUNT_KEYS = ("lunchCount", "almuerzos", "unidadesAlmuerzo", "almuerzosCount")

_BREAKFAST_RE = re.compile(r"desayun|breakfast", re.IGNORECASE)
_EMOJI_COUNT_RE = re.compile(r"🍽\s*(\d+)\s*almuerzos?", re.IGNORECASE)
# Two digits at most so "Almuerzo 1:" style lines never match
_TEXT_COUNT_RE = re.compile(r"\b(\d{1,2})\s*almuerzos?\b", re.IGNORECASE)


def _as_text(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, dict) and value.get("name"):
        return str(value["name"])
    return json.dumps(value, default=str, ensure_ascii=False)


def is_breakfast_order(order: Any) -> bool:
    """True when an order's type, category or item tags mention breakfast."""
    if not isinstance(order, dict):
        return False
    if order.get("isBreakfast"):
        return True
    parts = [
        _as_text(order[key])
        for key in ("meal", "type", "category", "group", "tag")
        if order.get(key)
    ]
    items = order.get("items")
    if isinstance(items, list):
        parts.extend(
            _as_text(item.get("category") or item.get("type") or "")
            for item in items
            if isinstance(item, dict)
        )
    return bool(_BREAKFAST_RE.search(" ".join(parts)))


def _explicit_count(order: dict) -> int | None:
    for key in COUNT_KEYS:
        value = order.get(key)
        if isinstance(value, bool):
            continue
        if isinstance(value, (int, float)) and value > 0:
            return int(value)
        if isinstance(value, str) and value.isdigit():
            return int(value)
    return None


def _is_lunch_meal(meal: Any) -> bool:
    if not isinstance(meal, dict):
        return True
    type_text = " ".join(
        _as_text(meal[key]) for key in ("mealType", "type", "category") if meal.get(key)
    )
    return not _BREAKFAST_RE.search(type_text)


def count_from_text(text: Any) -> int | None:
    """Units announced in a message text ("🍽 3 almuerzos en total")."""
    if not isinstance(text, str) or not text:
        return None
    match = _EMOJI_COUNT_RE.search(text) or _TEXT_COUNT_RE.search(text)
    return int(match.group(1)) if match else None


def count_from_total(total: int) -> int:
    """
    Estimate lunch units from an order total.

    Exact multiples of a unit price win; otherwise the largest unit count
    (10 down to 2) whose price range contains the total; otherwise 1.
    """
    if total < MIN_UNIT_PRICE:
        return 1 if total > 0 else 0
    for price in UNIT_PRICES:
        if total % price == 0:
            units = total // price
            if 1 <= units <= MAX_EXACT_UNITS:
                return units
    for units in range(10, 1, -1):
        if MIN_UNIT_PRICE * units <= total <= MAX_UNIT_PRICE * units:
            return units
    return 1


def _total_of(order: dict) -> int:
    try:
        return int(float(order.get("total") or 0))
    except (TypeError, ValueError):
        return 0


def count_lunch_units(order: Any) -> int:
    """Number of lunches in a stored order (0 for breakfast orders)."""
    if not order or not isinstance(order, dict):
        return 0
    if is_breakfast_order(order):
        return 0

    explicit = _explicit_count(order)
    if explicit is not None:
        return explicit

    meals = order.get("meals")
    if isinstance(meals, list) and meals:
        lunches = [meal for meal in meals if _is_lunch_meal(meal)]
        if lunches:
            return len(lunches)

    for value in order.values():
        units = count_from_text(value)
        if units:
            return units

    total = _total_of(order)
    if total > 0:
        return count_from_total(total)
    return 1


def sum_lunch_units(orders: Iterable[Any] | None) -> int:
    """Total lunch units across stored orders, breakfasts excluded."""
    return sum(count_lunch_units(order) for order in orders or [])
