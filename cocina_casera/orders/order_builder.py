"""
Helpers for building the list of line items of an order.

Every helper returns a new list and leaves the caller's list untouched.
Item ids are positions: a new item gets max(id) + 1 and removing an item
renumbers the rest from 0.
"""

import logging
from typing import Any

from .models import Address, LineItem, LunchItem, parse_line_item

logger = logging.getLogger(__name__)

# Messages shown after each list change
ADDED_MESSAGE = "Tu dirección, hora y método de pago se han copiado del primer almuerzo."
DUPLICATED_MESSAGE = "Se ha duplicado el almuerzo."
REMOVED_MESSAGE = "Almuerzo eliminado."
ALL_REMOVED_MESSAGE = "Todos los almuerzos han sido eliminados."


def _next_id(items: list[LineItem]) -> int:
    ids = [item.id for item in items if isinstance(item.id, int)]
    return max(ids) + 1 if ids else 0


def new_lunch_item(address: Address | dict | str | None = None) -> LunchItem:
    """An empty lunch with the customer's saved address."""
    return LunchItem(id=0, address=address)


def add_item(items: list[Any], template: Any = None) -> list[LineItem]:
    """
    Append a new item built from a template.

    Time, address and payment are copied from the first item when it has
    them, so customers only fill those in once.
    """
    current = [parse_line_item(item, position) for position, item in enumerate(items)]
    new_item = parse_line_item(template) if template is not None else new_lunch_item()
    update: dict[str, Any] = {"id": _next_id(current)}
    if current:
        first = current[0]
        for slot in ("time", "address", "payment"):
            value = getattr(first, slot)
            if value is not None:
                update[slot] = value.model_copy(deep=True)
    logger.debug("Adding item %d", update["id"])
    return current + [new_item.model_copy(update=update, deep=True)]


def duplicate_item(items: list[Any], item: Any) -> list[LineItem]:
    """Append a copy of an item with a fresh id."""
    current = [parse_line_item(existing, position) for position, existing in enumerate(items)]
    copy = parse_line_item(item).model_copy(update={"id": _next_id(current)}, deep=True)
    return current + [copy]


def remove_item(items: list[Any], item_id: Any) -> list[LineItem]:
    """Drop the item with the given id and renumber the rest."""
    current = [parse_line_item(item, position) for position, item in enumerate(items)]
    remaining = [item for item in current if item.id != item_id]
    return [item.model_copy(update={"id": index}) for index, item in enumerate(remaining)]


def removal_message(items: list[Any]) -> str:
    return ALL_REMOVED_MESSAGE if not items else REMOVED_MESSAGE
