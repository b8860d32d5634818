"""
Tests for the catalog snapshot and quick presets.
"""

import pytest

from cocina_casera.orders.catalog import (
    BREAKFAST_QUICK_PRESETS,
    LUNCH_QUICK_PRESETS,
    get_quick_presets,
    quick_variant_to_breakfast,
    quick_variant_to_lunch,
    rehydrate_line_item,
)
from cocina_casera.orders.models import BreakfastItem, BreakfastTypeOption, LunchItem, Option, OptionKind
from cocina_casera.orders.pricing import price_line_item
from tests.helpers import make_breakfast, make_lunch


class TestCatalogFind:
    """Tests for resolving option references."""

    def test_find_by_id(self, catalog):
        assert catalog.find("proteins", {"id": "pr2", "name": "Otro nombre"}).name == "Mojarra"

    def test_find_by_name_case_insensitive(self, catalog):
        assert catalog.find("proteins", "pechuga GRATINADA").id == "pr3"

    def test_find_ignores_new_tag(self, catalog):
        assert catalog.find("principles", "Lentejas").id == "p2"

    def test_find_option_instance(self, catalog):
        assert catalog.find("drinks", Option(name="Limonada")).id == "d1"

    def test_find_missing(self, catalog):
        assert catalog.find("drinks", "Avena") is None
        assert catalog.find("drinks", None) is None

    def test_unknown_slot(self, catalog):
        with pytest.raises(KeyError):
            catalog.find("desserts", "Flan")

    def test_kinds_resolved_on_load(self, catalog):
        assert catalog.find("soups", "Solo bandeja").kind == OptionKind.TRAY_ONLY
        assert catalog.find("principles", "Arroz con pollo").kind == OptionKind.COMBO

    def test_breakfast_types_carry_steps(self, catalog):
        found = catalog.find("breakfast_types", "Moñona")
        assert isinstance(found, BreakfastTypeOption)
        assert found.requires_protein


class TestRehydrate:
    """Tests for rebuilding stored documents against the catalog."""

    def test_options_replaced_by_catalog_entries(self, catalog):
        stored = make_lunch(protein={"id": "pr2", "name": "Mojarra (vieja)"})
        item = rehydrate_line_item(stored, catalog)
        assert isinstance(item, LunchItem)
        assert item.protein.name == "Mojarra"
        assert price_line_item(item) == 13000

    def test_unknown_option_keeps_stored_copy(self, catalog):
        item = rehydrate_line_item(make_lunch(drink={"name": "Avena"}), catalog)
        assert item.drink.name == "Avena"

    def test_replacement_text_kept(self, catalog):
        stored = make_lunch(principle=[{"id": "p4", "name": "Remplazo por Principio", "replacement": "Papa"}])
        item = rehydrate_line_item(stored, catalog)
        assert item.principle_replacement_text() == "Papa"

    def test_breakfast(self, catalog):
        stored = make_breakfast(type={"id": "bt4", "name": "Moñona"}, broth=None)
        item = rehydrate_line_item(stored, catalog)
        assert isinstance(item, BreakfastItem)
        assert item.type.steps == ["type", "protein"]

    def test_stored_document_not_modified(self, catalog):
        stored = make_lunch()
        rehydrate_line_item(stored, catalog)
        assert stored == make_lunch()


class TestQuickPresets:
    """Tests for the point-of-sale quick buttons."""

    def test_presets_by_mode(self):
        assert get_quick_presets("desayuno") is BREAKFAST_QUICK_PRESETS
        assert get_quick_presets("breakfast") is BREAKFAST_QUICK_PRESETS
        assert get_quick_presets("almuerzo") is LUNCH_QUICK_PRESETS

    def test_preset_ids_unique(self):
        ids = [p.id for p in LUNCH_QUICK_PRESETS + BREAKFAST_QUICK_PRESETS]
        assert len(ids) == len(set(ids))

    def test_lunch_presets_priced_by_engine(self, catalog):
        prices = {
            preset.variant: price_line_item(quick_variant_to_lunch(preset.variant, catalog))
            for preset in LUNCH_QUICK_PRESETS
        }
        assert prices["normal"] == 13000
        assert prices["sin_sopa"] == 12000
        assert prices["solo_bandeja"] == 12000
        assert prices["mojarra"] == 13000
        assert not hasattr(LUNCH_QUICK_PRESETS[0], "price")

    def test_normal_lunch_uses_first_soup(self, catalog):
        item = quick_variant_to_lunch("normal", catalog)
        assert item.soup.name == "Sancocho"
        assert item.protein is None

    def test_mojarra_lunch(self, catalog):
        item = quick_variant_to_lunch("mojarra", catalog)
        assert item.protein.name == "Mojarra"
        assert price_line_item(item) == 13000

    def test_sin_sopa_lunch(self, catalog):
        item = quick_variant_to_lunch("sin_sopa", catalog)
        assert item.notes == "Rápido: Sin sopa"
        assert price_line_item(item) == 12000

    def test_unknown_variant(self, catalog):
        assert quick_variant_to_lunch("otro", catalog) == LunchItem()
        assert quick_variant_to_breakfast("otro", catalog) == BreakfastItem()

    def test_breakfast_variant(self, catalog):
        item = quick_variant_to_breakfast("desayuno_pajarilla", catalog)
        assert item.broth.name == "Pajarilla"
        assert item.type.name == "Desayuno completo"
        assert price_line_item(item) == 14000

    def test_solo_huevos(self, catalog):
        item = quick_variant_to_breakfast("solo_huevos", catalog)
        assert item.eggs.name == "Huevos"
        assert price_line_item(item) == 8000

    def test_without_catalog(self):
        item = quick_variant_to_lunch("pechuga_asada")
        assert item.soup is None
        assert item.protein is None
