"""
Tests for lunch and breakfast pricing.

Tests cover:
- Lunch base price rules (soup, replacement, tray only, fixed-price protein)
- Staff surcharges and combo rice dishes
- Breakfast price table lookups by type, broth and channel
- Dispatch, aggregates and payment breakdowns
"""

import logging

import pytest

from cocina_casera.orders.constants import UNSPECIFIED_PAYMENT
from cocina_casera.orders.models import (
    BreakfastItem,
    LunchItem,
    OrderChannel,
    OrderContext,
    UserRole,
)
from cocina_casera.orders.pricing import (
    PriceTable,
    PricingEngine,
    format_money,
    normalize_payment_name,
    price_line_item,
    price_order,
    sum_prices,
)
from tests.helpers import make_addition, make_breakfast, make_lunch


# =============================================================================
# Money Formatting
# =============================================================================

class TestFormatMoney:
    """Tests for peso formatting."""

    def test_thousands_separator(self):
        assert format_money(13000) == "$13.000"

    def test_millions(self):
        assert format_money(1250000) == "$1.250.000"

    def test_small_amount(self):
        assert format_money(0) == "$0"


# =============================================================================
# Lunch Pricing
# =============================================================================

class TestLunchPrice:
    """Tests for the lunch base price rules."""

    def test_no_soup_no_replacement(self):
        """A lunch without soup or replacement costs 12000."""
        item = LunchItem.model_validate(make_lunch(soup=None))
        assert price_line_item(item) == 12000

    def test_soup_costs_13000(self):
        item = LunchItem.model_validate(make_lunch())
        assert price_line_item(item) == 13000

    def test_sin_sopa_counts_as_no_soup(self):
        item = LunchItem.model_validate(make_lunch(soup={"name": "Sin sopa"}))
        assert price_line_item(item) == 12000

    def test_soup_replacement_any_name(self):
        """Any soup replacement prices as a lunch with soup."""
        item = LunchItem.model_validate(make_lunch(
            soup={"name": "Sin sopa"},
            soupReplacement={"name": "Remplazo por Sopa", "replacement": "Huevo frito"},
        ))
        assert price_line_item(item) == 13000

    def test_solo_bandeja_is_not_soup(self):
        """"Solo bandeja" without replacement costs 12000."""
        item = LunchItem.model_validate(make_lunch(soup={"name": "Solo bandeja"}))
        assert price_line_item(item) == 12000

    def test_new_tag_does_not_change_classification(self):
        item = LunchItem.model_validate(make_lunch(soup={"name": "Solo bandeja NUEVO"}))
        assert price_line_item(item) == 12000

    def test_mojarra_follows_base_rule_by_default(self):
        with_soup = LunchItem.model_validate(make_lunch(protein={"name": "Mojarra"}))
        without_soup = LunchItem.model_validate(make_lunch(soup=None, protein={"name": "Mojarra"}))
        assert price_line_item(with_soup) == 13000
        assert price_line_item(without_soup) == 12000

    def test_fixed_price_protein(self):
        engine = PricingEngine(PriceTable(fixed_price_proteins={"mojarra": 16000}))
        item = LunchItem.model_validate(make_lunch(protein={"name": "Mojarra NUEVO"}))
        assert engine.price_line_item(item) == 16000

    def test_fixed_price_protein_ignores_soup(self):
        engine = PricingEngine(PriceTable(fixed_price_proteins={"mojarra": 16000}))
        item = LunchItem.model_validate(make_lunch(soup=None, protein={"name": "mojarra"}))
        assert engine.price_line_item(item) == 16000

    def test_fixed_price_protein_plus_additions(self):
        engine = PricingEngine(PriceTable(fixed_price_proteins={"mojarra": 16000}))
        item = LunchItem.model_validate(make_lunch(
            protein={"name": "Mojarra"},
            additions=[make_addition("Huevo", price=2000)],
        ))
        assert engine.price_line_item(item) == 18000

    def test_additions_added_on_top(self):
        item = LunchItem.model_validate(make_lunch(additions=[
            make_addition("Huevo", price=2000, quantity=2),
            make_addition("Porción de arroz", price=3000),
        ]))
        assert price_line_item(item) == 13000 + 4000 + 3000

    def test_zero_quantity_counts_as_one(self):
        item = LunchItem.model_validate(make_lunch(additions=[
            make_addition("Huevo", price=2000, quantity=0),
        ]))
        assert price_line_item(item) == 15000

    def test_missing_addition_price_is_zero(self):
        item = LunchItem.model_validate(make_lunch(additions=[{"name": "Salsa", "price": None}]))
        assert price_line_item(item) == 13000


class TestStaffSurcharge:
    """Tests for role-aware protein surcharges."""

    def test_waiter_pays_gratinada_surcharge(self, waiter):
        item = LunchItem.model_validate(make_lunch(protein={"name": "Pechuga gratinada"}))
        assert price_line_item(item, waiter) == 15000

    def test_admin_pays_gratinada_surcharge(self):
        item = LunchItem.model_validate(make_lunch(protein={"name": "Pechuga gratinada"}))
        assert price_line_item(item, OrderContext(role=UserRole.ADMIN)) == 15000

    def test_customer_pays_no_surcharge(self, customer):
        item = LunchItem.model_validate(make_lunch(protein={"name": "Pechuga gratinada"}))
        assert price_line_item(item, customer) == 13000

    def test_delivery_role_pays_no_surcharge(self):
        item = LunchItem.model_validate(make_lunch(protein={"name": "Pechuga gratinada"}))
        assert price_line_item(item, OrderContext(role=UserRole.DELIVERY)) == 13000

    def test_combo_rice_skips_protein_rules(self, waiter):
        engine = PricingEngine(PriceTable(fixed_price_proteins={"mojarra": 16000}))
        item = LunchItem.model_validate(make_lunch(
            principle=[{"name": "Arroz con pollo"}],
            protein={"name": "Mojarra"},
        ))
        assert engine.price_line_item(item, waiter) == 13000

    def test_combo_rice_skips_surcharge(self, waiter):
        item = LunchItem.model_validate(make_lunch(
            principle=[{"name": "Arroz paisa"}],
            protein={"name": "Pechuga gratinada"},
        ))
        assert price_line_item(item, waiter) == 13000

    def test_unknown_role_number_prices_as_customer(self):
        item = make_lunch(protein={"name": "Pechuga gratinada"})
        context = OrderContext(role=5)
        assert not context.is_staff
        assert price_line_item(item, context) == 13000

    def test_unknown_role_passed_to_price_meal(self):
        engine = PricingEngine()
        item = LunchItem.model_validate(make_lunch(protein={"name": "Pechuga gratinada"}))
        assert engine.price_meal(item, role=99) == 13000
        assert engine.price_meal(item, role=2) == 15000

    def test_custom_price_table(self):
        table = PriceTable(lunch_with_soup=14000, fixed_price_proteins={})
        engine = PricingEngine(table)
        item = LunchItem.model_validate(make_lunch(protein={"name": "Mojarra"}))
        assert engine.price_line_item(item) == 14000


# =============================================================================
# Breakfast Pricing
# =============================================================================

class TestBreakfastPrice:
    """Tests for the breakfast price table."""

    def test_solo_huevos_takeaway(self):
        item = BreakfastItem.model_validate({"type": {"name": "Solo huevos"}, "orderType": "takeaway"})
        assert price_line_item(item) == 8000

    def test_completo_pajarilla_table(self):
        item = BreakfastItem.model_validate({
            "type": {"name": "Desayuno completo"},
            "broth": {"name": "Caldo de pajarilla"},
            "orderType": "table",
        })
        assert price_line_item(item) == 13000

    def test_monona_takeaway_with_addition(self):
        item = BreakfastItem.model_validate({
            "type": {"name": "Moñona"},
            "orderType": "takeaway",
            "additions": [make_addition("Huevo", price=2000, quantity=2)],
        })
        assert price_line_item(item) == 18000

    def test_pata_is_not_confused_with_pajarilla(self):
        item = BreakfastItem.model_validate({
            "type": {"name": "Solo caldo"},
            "broth": {"name": "Caldo de pata"},
            "orderType": "mesa",
        })
        assert price_line_item(item) == 8000

    def test_unknown_broth_uses_type_default(self):
        item = BreakfastItem.model_validate({
            "type": {"name": "Desayuno completo"},
            "broth": {"name": "Caldo de papa"},
        })
        assert price_line_item(item) == 12000

    def test_unknown_type(self):
        item = BreakfastItem.model_validate({"type": {"name": "Desayuno especial"}, "orderType": "table"})
        assert price_line_item(item) == 7000

    def test_missing_type_has_no_base_price(self):
        item = BreakfastItem.model_validate({"broth": {"name": "Costilla"}})
        assert price_line_item(item) == 0

    def test_missing_type_prices_additions_only(self):
        item = BreakfastItem.model_validate({
            "broth": {"name": "Costilla"},
            "additions": [make_addition("Huevo", price=2000, quantity=2)],
        })
        assert price_line_item(item) == 4000

    def test_blank_type_name_has_no_base_price(self):
        item = BreakfastItem.model_validate({
            "type": {"name": "  "},
            "orderType": "table",
            "additions": [make_addition("Arepa", price=1500)],
        })
        assert price_line_item(item) == 1500

    def test_item_order_type_wins_over_context(self):
        item = BreakfastItem.model_validate({"type": {"name": "Solo huevos"}, "orderType": "para llevar"})
        context = OrderContext(channel=OrderChannel.TABLE)
        assert price_line_item(item, context) == 8000

    def test_context_channel_used_when_item_has_none(self):
        item = BreakfastItem.model_validate({"type": {"name": "Solo huevos"}})
        assert price_line_item(item, OrderContext(channel=OrderChannel.TABLE)) == 7000

    def test_defaults_to_takeaway(self):
        item = BreakfastItem.model_validate({"type": {"name": "Solo huevos"}, "orderType": "???"})
        assert price_line_item(item) == 8000

    def test_price_is_logged_at_debug(self, caplog):
        item = BreakfastItem.model_validate({"type": {"name": "Solo huevos"}})
        with caplog.at_level(logging.DEBUG, logger="cocina_casera.orders.pricing"):
            price_line_item(item)
        assert any("Breakfast price" in record.message for record in caplog.records)


# =============================================================================
# Dispatch and Aggregates
# =============================================================================

class TestDispatch:
    """Tests for pricing raw documents and unknown shapes."""

    def test_prices_stored_documents(self):
        assert price_line_item(make_lunch()) == 13000
        assert price_line_item(make_breakfast()) == 12000

    def test_unknown_shape_prices_zero(self):
        assert price_line_item({"foo": "bar"}) == 0

    def test_none_prices_zero(self):
        assert price_line_item(None) == 0

    def test_cutlery_stored_as_text(self):
        assert price_line_item(make_lunch(cutlery="Sí")) == 13000
        assert price_line_item(make_lunch(cutlery="No")) == 13000
        assert price_line_item(make_breakfast(cutlery="")) == 12000

    def test_malformed_slot_prices_zero_and_logs_error(self, caplog):
        item = make_lunch(soup=42)
        with caplog.at_level(logging.ERROR, logger="cocina_casera.orders.pricing"):
            assert price_line_item(item) == 0
        assert any(
            record.levelno == logging.ERROR and "soup" in record.getMessage()
            for record in caplog.records
        )

    def test_malformed_slot_does_not_break_order_total(self):
        assert sum_prices([make_lunch(), make_lunch(soup=42)]) == 13000

    def test_deterministic(self, waiter):
        item = make_lunch(protein={"name": "Pechuga gratinada"}, additions=[make_addition("Huevo", 2000)])
        assert len({price_line_item(item, waiter) for _ in range(5)}) == 1


class TestAggregates:
    """Tests for order totals and payment breakdowns."""

    def test_empty_order(self):
        assert sum_prices([]) == 0
        assert price_order([]).total == 0

    def test_non_list_is_zero(self):
        assert sum_prices("not a list") == 0

    def test_total_is_sum_of_items(self, waiter):
        items = [
            make_lunch(),
            make_lunch(soup=None, protein={"name": "Pechuga gratinada"}),
            make_breakfast(orderType="table"),
        ]
        priced = price_order(items, waiter)
        assert priced.total == sum(price_line_item(item, waiter) for item in items)
        assert priced.total == 13000 + 14000 + 11000

    def test_breakdown_sums_to_total(self):
        items = [
            make_lunch(payment={"name": "Efectivo"}),
            make_lunch(payment={"name": "NEQUI"}),
            make_lunch(soup=None, payment="Daviplata"),
        ]
        priced = price_order(items)
        assert priced.breakdown == {"Efectivo": 13000, "Nequi": 13000, "Daviplata": 12000}
        assert sum(priced.breakdown.values()) == priced.total

    def test_missing_payment_goes_to_unspecified(self):
        items = [make_lunch(payment=None), make_lunch()]
        priced = price_order(items)
        assert priced.breakdown[UNSPECIFIED_PAYMENT] == 13000
        assert sum(priced.breakdown.values()) == priced.total
        assert UNSPECIFIED_PAYMENT not in priced.payable_breakdown

    def test_fallback_payment(self):
        priced = price_order([make_lunch(payment=None)], fallback_payment="nequi")
        assert priced.breakdown == {"Nequi": 13000}

    def test_payment_method_alias_key(self):
        item = make_lunch(paymentMethod={"name": "Efectivo"})
        del item["payment"]
        assert price_order([item]).breakdown == {"Efectivo": 13000}
        assert LunchItem.model_validate(item).payment.name == "Efectivo"


class TestNormalizePaymentName:
    """Tests for payment method name normalization."""

    @pytest.mark.parametrize("value,expected", [
        ("efectivo", "Efectivo"),
        ("  Efectivo ", "Efectivo"),
        ({"name": "NEQUI"}, "Nequi"),
        ({"method": "DaviPlata"}, "Daviplata"),
        ("Bancolombia", "Bancolombia"),
        (None, "No especificado"),
        ("", "No especificado"),
    ])
    def test_normalization(self, value, expected):
        assert normalize_payment_name(value) == expected
