"""
Comparable fields of line items.

Each line item kind has an ordered list of fields. Every field has a single
extractor that turns an item into a hashable, normalized value, so two
items are equal on a field exactly when their extracted values are equal.
Multi-select slots are sorted so selection order never matters.

The list order is the display priority used by the summary and message
builders.
"""

from dataclasses import dataclass
from typing import Any, Callable, Hashable

from .constants import ADDRESS_FIELDS, ASAP_TIME
from .errors import InvalidLineItemKind
from .models import BreakfastItem, LineItem, LunchItem, Option, clean_name
from .pricing import normalize_payment_name

SOUP = "Sopa"
PRINCIPLE = "Principio"
PROTEIN = "Proteína"
DRINK = "Bebida"
CUTLERY = "Cubiertos"
SIDES = "Acompañamientos"
ADDITIONS = "Adiciones"
NOTES = "Notas"
DELIVERY_TIME = "Entrega"
ADDRESS = "Dirección"
PAYMENT = "Pago"

BREAKFAST_TYPE = "Tipo"
BROTH = "Caldo"
EGGS = "Huevos"
RICE_BREAD = "Arroz/Pan"
TABLE = "Mesa"


@dataclass(frozen=True)
class FieldSpec:
    """A named comparable field and its extractor."""
    name: str
    extract: Callable[[Any], Hashable]


def _name(option: Option | None) -> str:
    return option.display_name if option else ""


def _names(options: list[Option]) -> tuple[str, ...]:
    return tuple(sorted(o.display_name for o in options if o.display_name))


def additions_key(item: LineItem) -> tuple[tuple[str, str, int], ...]:
    """Additions as sorted (name, modifier, quantity) triples."""
    return tuple(sorted(
        (clean_name(a.name), a.modifier, a.effective_quantity)
        for a in item.additions
    ))


def address_values(item: LineItem) -> dict[str, str]:
    """Each address sub-field as text ("" when absent)."""
    address = item.address
    return {
        field: (getattr(address, field, None) or "") if address else ""
        for field in ADDRESS_FIELDS
    }


def address_key(item: LineItem) -> tuple[str, ...]:
    values = address_values(item)
    return tuple(values[field] for field in ADDRESS_FIELDS)


def delivery_time_key(item: LineItem) -> str:
    name = _name(item.time)
    return "" if name == ASAP_TIME else name


LUNCH_FIELDS: tuple[FieldSpec, ...] = (
    FieldSpec(SOUP, lambda m: (_name(m.soup), _name(m.soup_replacement), m.soup_replacement_text())),
    FieldSpec(PRINCIPLE, lambda m: (tuple(sorted(m.principle_names())), m.principle_replacement_text())),
    FieldSpec(PROTEIN, lambda m: _name(m.protein)),
    FieldSpec(DRINK, lambda m: _name(m.drink)),
    FieldSpec(CUTLERY, lambda m: m.cutlery),
    FieldSpec(SIDES, lambda m: _names(m.sides)),
    FieldSpec(ADDITIONS, additions_key),
    FieldSpec(NOTES, lambda m: m.notes.strip()),
    FieldSpec(DELIVERY_TIME, delivery_time_key),
    FieldSpec(ADDRESS, address_key),
    FieldSpec(PAYMENT, lambda m: normalize_payment_name(m.payment)),
)

BREAKFAST_FIELDS: tuple[FieldSpec, ...] = (
    FieldSpec(BREAKFAST_TYPE, lambda b: _name(b.type)),
    FieldSpec(BROTH, lambda b: _name(b.broth)),
    FieldSpec(EGGS, lambda b: _name(b.eggs)),
    FieldSpec(RICE_BREAD, lambda b: _name(b.rice_bread)),
    FieldSpec(DRINK, lambda b: _name(b.drink)),
    FieldSpec(PROTEIN, lambda b: _name(b.protein)),
    # Breakfast forms never distinguish "not asked" from "no"
    FieldSpec(CUTLERY, lambda b: bool(b.cutlery)),
    FieldSpec(ADDITIONS, additions_key),
    FieldSpec(TABLE, lambda b: b.table_number or ""),
    FieldSpec(ADDRESS, address_key),
)

_FIELDS_BY_KIND = {
    LunchItem.meal_kind: LUNCH_FIELDS,
    BreakfastItem.meal_kind: BREAKFAST_FIELDS,
}

LUNCH_FIELD_NAMES = tuple(spec.name for spec in LUNCH_FIELDS)
BREAKFAST_FIELD_NAMES = tuple(spec.name for spec in BREAKFAST_FIELDS)


def item_kind(item: Any, position: int | None = None) -> str:
    """Return "lunch" or "breakfast"; anything else is rejected."""
    if isinstance(item, (LunchItem, BreakfastItem)):
        return item.meal_kind
    raise InvalidLineItemKind(item, position)


def fields_for(item: LineItem) -> tuple[FieldSpec, ...]:
    return _FIELDS_BY_KIND[item_kind(item)]


def field_names_for_kind(kind: str) -> tuple[str, ...]:
    return tuple(spec.name for spec in _FIELDS_BY_KIND[kind])


def extract_values(item: LineItem) -> dict[str, Hashable]:
    """All comparable values of an item, in field order."""
    return {spec.name: spec.extract(item) for spec in fields_for(item)}


def field_diffs(a: LineItem, b: LineItem) -> list[str]:
    """
    Fields on which two items of the same kind differ, in field order.

    Raises:
        InvalidLineItemKind: If either item is not a lunch or breakfast.
        ValueError: If the items are of different kinds.
    """
    kind_a, kind_b = item_kind(a), item_kind(b)
    if kind_a != kind_b:
        raise ValueError(f"Cannot compare a {kind_a} with a {kind_b}")
    return [spec.name for spec in _FIELDS_BY_KIND[kind_a] if spec.extract(a) != spec.extract(b)]
