"""
Catalog snapshot and quick presets.

The catalog is the menu as currently configured: the options available for
every slot of a lunch or breakfast. Stored orders keep a copy of each option
they used, so when an order is reloaded its options are re-resolved against
the current catalog (by id first, then by name) to pick up price or kind
changes. References the catalog no longer knows keep their stored copy.

Quick presets are the one-tap buttons of the point-of-sale screen; each maps
to a starter line item built from catalog options.
"""

import logging
from dataclasses import dataclass
from typing import Any

from pydantic import Field

from .models import (
    BreakfastItem,
    BreakfastTypeOption,
    LineItem,
    LunchItem,
    Option,
    OrderModel,
    clean_name,
    parse_line_item,
)

logger = logging.getLogger(__name__)


class Catalog(OrderModel):
    """Options available for each slot, as loaded from the menu."""

    soups: list[Option] = Field(default_factory=list)
    soup_replacements: list[Option] = Field(default_factory=list)
    principles: list[Option] = Field(default_factory=list)
    proteins: list[Option] = Field(default_factory=list)
    drinks: list[Option] = Field(default_factory=list)
    sides: list[Option] = Field(default_factory=list)
    additions: list[Option] = Field(default_factory=list)
    times: list[Option] = Field(default_factory=list)
    payment_methods: list[Option] = Field(default_factory=list)

    breakfast_types: list[BreakfastTypeOption] = Field(default_factory=list)
    breakfast_broths: list[Option] = Field(default_factory=list)
    breakfast_eggs: list[Option] = Field(default_factory=list)
    breakfast_rice_bread: list[Option] = Field(default_factory=list)
    breakfast_drinks: list[Option] = Field(default_factory=list)
    breakfast_proteins: list[Option] = Field(default_factory=list)
    breakfast_additions: list[Option] = Field(default_factory=list)

    def options(self, slot: str) -> list[Option]:
        """Options of a slot, e.g. "soups" or "breakfast_broths"."""
        if slot not in type(self).model_fields:
            raise KeyError(f"Unknown catalog slot: {slot}")
        return getattr(self, slot)

    def find(self, slot: str, ref: Any) -> Option | None:
        """
        Resolve a reference to a catalog option.

        Args:
            slot: Catalog slot name
            ref: An Option, a stored option dict, a name or an id

        Returns:
            The matching option (id match wins over name match), or None
        """
        if ref is None:
            return None
        if isinstance(ref, Option):
            ref_id, ref_name = ref.id, ref.name
        elif isinstance(ref, dict):
            ref_id, ref_name = ref.get("id"), ref.get("name")
        elif isinstance(ref, str):
            ref_id, ref_name = None, ref
        else:
            ref_id, ref_name = ref, None

        options = self.options(slot)
        if ref_id is not None:
            for option in options:
                if option.id is not None and str(option.id) == str(ref_id):
                    return option
        wanted = clean_name(ref_name).lower()
        if wanted:
            for option in options:
                if option.display_name.lower() == wanted:
                    return option
        return None


# Item field -> catalog slot
LUNCH_SLOTS = {
    "soup": "soups",
    "soup_replacement": "soup_replacements",
    "principle": "principles",
    "principle_replacement": "principles",
    "protein": "proteins",
    "drink": "drinks",
    "sides": "sides",
    "time": "times",
    "payment": "payment_methods",
}

BREAKFAST_SLOTS = {
    "type": "breakfast_types",
    "broth": "breakfast_broths",
    "eggs": "breakfast_eggs",
    "rice_bread": "breakfast_rice_bread",
    "drink": "breakfast_drinks",
    "protein": "breakfast_proteins",
    "time": "times",
    "payment": "payment_methods",
}


def _resolve(catalog: Catalog, slot: str, stored: Option | None) -> Option | None:
    if stored is None:
        return None
    found = catalog.find(slot, stored)
    if found is None:
        logger.debug("Option %r not in catalog slot %s; keeping stored copy", stored.name, slot)
        return stored
    # The free-text replacement belongs to the order, not the catalog
    if stored.replacement:
        return found.model_copy(update={"replacement": stored.replacement})
    return found


def rehydrate_line_item(data: Any, catalog: Catalog, position: int | None = None) -> LineItem:
    """
    Rebuild a line item from a stored document, re-resolving its options.

    Raises:
        InvalidLineItemKind: If the document is neither a lunch nor a breakfast.
    """
    item = parse_line_item(data, position)
    slots = BREAKFAST_SLOTS if isinstance(item, BreakfastItem) else LUNCH_SLOTS
    update = {}
    for field_name, slot in slots.items():
        value = getattr(item, field_name)
        if isinstance(value, list):
            update[field_name] = [_resolve(catalog, slot, option) for option in value]
        else:
            update[field_name] = _resolve(catalog, slot, value)
    return item.model_copy(update=update)


# =============================================================================
# Quick Presets
# =============================================================================

@dataclass(frozen=True)
class QuickPreset:
    """A one-tap button on the point-of-sale screen; priced by PricingEngine once built."""
    id: str
    name: str
    variant: str
    base_type: str


LUNCH_QUICK_PRESETS = (
    QuickPreset("almuerzo-completo", "Almuerzo Completo", "normal", "almuerzo"),
    QuickPreset("almuerzo-sin-sopa", "Sin Sopa", "sin_sopa", "almuerzo"),
    QuickPreset("almuerzo-mojarra", "Mojarra", "mojarra", "almuerzo"),
    QuickPreset("almuerzo-pechuga-gratinada", "Pechuga Gratinada", "pechuga_gratinada", "almuerzo"),
    QuickPreset("almuerzo-pechuga-asada", "Pechuga Asada", "pechuga_asada", "almuerzo"),
    QuickPreset("almuerzo-solo-bandeja", "Solo Bandeja", "solo_bandeja", "almuerzo"),
)

BREAKFAST_QUICK_PRESETS = (
    QuickPreset("desayuno-costilla", "Desayuno Costilla", "desayuno_costilla", "desayuno"),
    QuickPreset("desayuno-pescado", "Desayuno Pescado", "desayuno_pescado", "desayuno"),
    QuickPreset("desayuno-pata", "Desayuno Pata", "desayuno_pata", "desayuno"),
    QuickPreset("desayuno-pajarilla", "Desayuno Pajarilla", "desayuno_pajarilla", "desayuno"),
    QuickPreset("solo-caldo-costilla", "Solo Caldo Costilla", "solo_caldo_costilla", "desayuno"),
    QuickPreset("solo-huevos", "Solo Huevos", "solo_huevos", "desayuno"),
)


def get_quick_presets(mode: str) -> tuple[QuickPreset, ...]:
    """Presets for "desayuno"/"breakfast"; anything else gets lunch presets."""
    if mode in ("desayuno", "breakfast"):
        return BREAKFAST_QUICK_PRESETS
    return LUNCH_QUICK_PRESETS


_LUNCH_VARIANT_PROTEINS = {
    "mojarra": "Mojarra",
    "pechuga_gratinada": "Pechuga gratinada",
    "pechuga_asada": "Pechuga asada",
}

_BREAKFAST_VARIANT_BROTHS = {
    "desayuno_costilla": "Costilla",
    "desayuno_pescado": "Pescado",
    "desayuno_pata": "Pata",
    "desayuno_pajarilla": "Pajarilla",
}


def quick_variant_to_lunch(variant: str, catalog: Catalog | None = None) -> LunchItem:
    """Starter lunch for a quick preset variant; unknown variants give an empty lunch."""
    catalog = catalog or Catalog()
    first_soup = catalog.soups[0] if catalog.soups else None

    if variant == "normal":
        return LunchItem(soup=first_soup)
    if variant == "sin_sopa":
        return LunchItem(soup=catalog.find("soups", "Sin sopa"), notes="Rápido: Sin sopa")
    if variant == "solo_bandeja":
        return LunchItem(soup=catalog.find("soups", "Solo bandeja"), notes="Rápido: Sin sopa")
    if variant in _LUNCH_VARIANT_PROTEINS:
        protein = catalog.find("proteins", _LUNCH_VARIANT_PROTEINS[variant])
        return LunchItem(soup=first_soup, protein=protein)
    return LunchItem()


def quick_variant_to_breakfast(variant: str, catalog: Catalog | None = None) -> BreakfastItem:
    """Starter breakfast for a quick preset variant; unknown variants give an empty breakfast."""
    catalog = catalog or Catalog()

    if variant in _BREAKFAST_VARIANT_BROTHS:
        return BreakfastItem(
            broth=catalog.find("breakfast_broths", _BREAKFAST_VARIANT_BROTHS[variant]),
            type=catalog.find("breakfast_types", "Desayuno completo"),
        )
    if variant == "solo_caldo_costilla":
        return BreakfastItem(
            broth=catalog.find("breakfast_broths", "Costilla"),
            type=catalog.find("breakfast_types", "Solo caldo"),
            notes="Rápido: Solo caldo",
        )
    if variant == "solo_huevos":
        return BreakfastItem(
            eggs=Option(name="Huevos"),
            type=catalog.find("breakfast_types", "Solo huevos"),
            notes="Rápido: Solo huevos",
        )
    return BreakfastItem()
