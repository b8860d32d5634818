"""
Checkout validation for line items.

An order can be sent only when every line item has its mandatory slots
filled and every addition that needs a protein or replacement has one.
Which slots are mandatory depends on the item kind and on who is ordering:

- customers (delivery): the full wizard, including time, address and
  cutlery;
- staff or table orders: the kitchen slots plus order type, table and
  payment.

Only the first problem found is reported (earliest item, then slot order,
then additions), mirroring how the ordering screen focuses one wizard step
at a time.
"""

import logging
from typing import Any, Iterable

from .. import config
from .constants import PROTEIN_ADDITION_NAME
from .errors import MissingField, UnconfiguredAddition, ValidationError
from .models import (
    BreakfastItem,
    BreakfastTypeOption,
    LineItem,
    LunchItem,
    OptionKind,
    OrderChannel,
    OrderContext,
    UserRole,
    clean_name,
    parse_line_item,
)

logger = logging.getLogger(__name__)

SOUP = "Sopa"
PRINCIPLE = "Principio"
PROTEIN = "Proteína"
DRINK = "Bebida"
CUTLERY = "Cubiertos"
TIME = "Hora"
ADDRESS = "Dirección"
LOCAL_NAME = "Nombre del local"
PAYMENT = "Método de pago"
SIDES = "Acompañamientos"
ORDER_TYPE = "Tipo de pedido"
TABLE = "Mesa"

BREAKFAST_TYPE = "Tipo"
BROTH = "Caldo"
EGGS = "Huevos"
RICE_BREAD = "Arroz/Pan"

# Wizard slide to focus for each lunch slot
STEP_INDEX = {
    SOUP: 0,
    PRINCIPLE: 1,
    PROTEIN: 2,
    DRINK: 3,
    CUTLERY: 4,
    TIME: 5,
    ADDRESS: 6,
    LOCAL_NAME: 6,
    PAYMENT: 7,
    SIDES: 8,
}

# Steps assumed when a breakfast type is not in the catalog
DEFAULT_BREAKFAST_STEPS = ["type", "eggs", "broth", "riceBread", "drink", "protein"]

_BREAKFAST_STEP_LABELS = {
    "broth": BROTH,
    "eggs": EGGS,
    "riceBread": RICE_BREAD,
    "drink": DRINK,
    "protein": PROTEIN,
}

Slot = tuple[str, bool]


# =============================================================================
# Lunch Slots
# =============================================================================

def _soup_filled(item: LunchItem) -> bool:
    if item.soup_replacement is not None:
        return True
    return item.soup is not None and item.soup.kind != OptionKind.NO_SELECTION


def _principle_filled(item: LunchItem) -> bool:
    if item.principle_replacement_text():
        return True
    return any(p.kind not in (OptionKind.NO_SELECTION, OptionKind.REPLACEMENT) for p in item.principle)


def _is_table_mode(context: OrderContext) -> bool:
    return context.is_staff or context.channel == OrderChannel.TABLE


def _needs_table_number(item: LineItem, context: OrderContext) -> bool:
    channel = item.channel or context.channel
    return channel != OrderChannel.TAKEAWAY


def lunch_slots(item: LunchItem, context: OrderContext) -> list[Slot]:
    """
    Mandatory lunch slots in wizard order, each with whether it is filled.

    Combo rice dishes skip protein and sides since they include both.
    """
    combo = item.has_combo_rice()
    slots: list[Slot] = [
        (SOUP, _soup_filled(item)),
        (PRINCIPLE, _principle_filled(item)),
    ]
    if not combo:
        slots.append((PROTEIN, item.protein is not None))
    slots.append((DRINK, item.drink is not None))

    if _is_table_mode(context):
        slots.append((ORDER_TYPE, bool(item.order_type)))
        if _needs_table_number(item, context):
            slots.append((TABLE, bool(item.table_number)))
        slots.append((PAYMENT, item.payment is not None))
        return slots

    address = item.address
    slots.extend([
        (TIME, item.time is not None),
        (ADDRESS, bool(address and address.address)),
        (PAYMENT, item.payment is not None),
        (CUTLERY, item.cutlery is not None),
    ])
    if not combo:
        slots.append((SIDES, bool(item.sides)))
    if address is not None and address.address_type == "shop":
        slots.append((LOCAL_NAME, bool(address.local_name)))
    return slots


# =============================================================================
# Breakfast Slots
# =============================================================================

def _breakfast_type(item: BreakfastItem, catalog: Any = None) -> BreakfastTypeOption | None:
    """The item's type, completed from the catalog when it carries no steps."""
    if item.type is None or item.type.steps or catalog is None:
        return item.type
    found = catalog.find("breakfast_types", item.type)
    return found if isinstance(found, BreakfastTypeOption) else item.type


def breakfast_slots(item: BreakfastItem, context: OrderContext, catalog: Any = None) -> list[Slot]:
    """Mandatory breakfast slots: type, the type's steps, then channel slots."""
    slots: list[Slot] = [(BREAKFAST_TYPE, bool(item.type and item.type.display_name))]

    breakfast_type = _breakfast_type(item, catalog)
    steps = breakfast_type.steps if breakfast_type and breakfast_type.steps else DEFAULT_BREAKFAST_STEPS
    requires_protein = bool(breakfast_type and breakfast_type.requires_protein)
    for step in steps:
        label = _BREAKFAST_STEP_LABELS.get(step)
        if label is None:
            continue
        if step == "protein" and not requires_protein:
            continue
        slots.append((label, getattr(item, _snake(step)) is not None))

    if _is_table_mode(context):
        if _needs_table_number(item, context):
            slots.append((TABLE, bool(item.table_number)))
        slots.append((PAYMENT, item.payment is not None))
        if context.user_role == UserRole.WAITER:
            slots.append((ORDER_TYPE, bool(item.order_type)))
    else:
        slots.extend([
            (CUTLERY, item.cutlery is not None),
            (TIME, item.time is not None),
            (ADDRESS, bool(item.address and item.address.address)),
            (PAYMENT, item.payment is not None),
        ])
    return slots


def _snake(step: str) -> str:
    return "rice_bread" if step == "riceBread" else step


# =============================================================================
# Checks
# =============================================================================

def required_slots(item: LineItem, context: OrderContext | None = None, catalog: Any = None) -> list[Slot]:
    context = context or OrderContext()
    if isinstance(item, BreakfastItem):
        return breakfast_slots(item, context, catalog)
    return lunch_slots(item, context)


def missing_fields(item: LineItem, context: OrderContext | None = None, catalog: Any = None) -> list[str]:
    """Names of the mandatory slots still empty, in wizard order."""
    return [name for name, filled in required_slots(item, context, catalog) if not filled]


def unconfigured_additions(
    item: LineItem,
    requires_replacement: Iterable[str] | None = None,
) -> list[str]:
    """
    Names of additions that still need a protein or replacement.

    "Proteína adicional" needs a protein; the other configured additions
    need a replacement.
    """
    if requires_replacement is None:
        requires_replacement = config.get_requires_replacement_additions()
    names = {clean_name(name).lower() for name in requires_replacement}
    protein_addition = PROTEIN_ADDITION_NAME.lower()

    pending = []
    for addition in item.additions:
        name = clean_name(addition.name)
        if name.lower() not in names and not addition.requires_replacement:
            continue
        if name.lower() == protein_addition:
            configured = bool((addition.protein or "").strip())
        else:
            configured = bool((addition.replacement or "").strip())
        if not configured:
            pending.append(name)
    return pending


def completion_progress(item: Any, context: OrderContext | None = None, catalog: Any = None) -> int:
    """Percentage (0-100) of mandatory slots filled; a breakfast without type is 0."""
    parsed = parse_line_item(item)
    if isinstance(parsed, BreakfastItem) and parsed.type is None:
        return 0
    slots = required_slots(parsed, context, catalog)
    if not slots:
        return 0
    filled = sum(1 for _, ok in slots if ok)
    return round(filled / len(slots) * 100)


def _item_error(
    item: LineItem,
    number: int,
    context: OrderContext,
    catalog: Any,
    requires_replacement: Iterable[str] | None,
) -> ValidationError | None:
    missing = missing_fields(item, context, catalog)
    if missing:
        return MissingField(missing[0], number, STEP_INDEX.get(missing[0], 0), item.label)
    pending = unconfigured_additions(item, requires_replacement)
    if pending:
        return UnconfiguredAddition(pending[0], number, item.label)
    return None


def find_first_error(
    items: Iterable[Any],
    context: OrderContext | None = None,
    catalog: Any = None,
    requires_replacement: Iterable[str] | None = None,
) -> ValidationError | None:
    """
    Return the first blocking problem in an order, or None when it can be sent.

    Args:
        items: Line items (models or stored documents)
        context: Role and channel deciding which slots are mandatory
        catalog: Catalog used to look up breakfast type steps
        requires_replacement: Addition names needing a protein or replacement
                              (default: from config)
    """
    context = context or OrderContext()
    for position, data in enumerate(items):
        item = parse_line_item(data, position)
        error = _item_error(item, position + 1, context, catalog, requires_replacement)
        if error is not None:
            logger.debug("Order blocked at item %d: %s", position + 1, error)
            return error
    return None


def validate_order(
    items: Iterable[Any],
    context: OrderContext | None = None,
    catalog: Any = None,
    requires_replacement: Iterable[str] | None = None,
) -> None:
    """
    Raise the first blocking problem in an order.

    Raises:
        MissingField: A mandatory slot is empty.
        UnconfiguredAddition: An addition lacks its protein or replacement.
    """
    error = find_first_error(items, context, catalog, requires_replacement)
    if error is not None:
        raise error


def is_order_complete(
    items: Iterable[Any],
    context: OrderContext | None = None,
    catalog: Any = None,
) -> bool:
    return find_first_error(items, context, catalog) is None
