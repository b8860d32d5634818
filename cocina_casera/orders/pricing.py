"""
Pricing Engine for Order Line Items.

This module computes the price of lunches and breakfasts from the selected
options, the order channel (table vs takeaway) and the role of whoever is
taking the order. Every constant lives in a PriceTable.

Prices are recomputed on every change while an item is still being built,
so nothing here raises on missing or partial data: an absent slot falls
into the "no selection" row of the relevant table.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable

from pydantic import ValidationError as PydanticValidationError

from .constants import (
    BREAKFAST_PRICES,
    BROTH_KEYWORDS,
    PAYMENT_ALIASES,
    UNKNOWN_BREAKFAST_PRICE,
    UNSPECIFIED_PAYMENT,
)
from .errors import InvalidLineItemKind
from .models import (
    BreakfastItem,
    LineItem,
    LunchItem,
    Money,
    Option,
    OrderChannel,
    OrderContext,
    UserRole,
    clean_name,
    parse_line_item,
)

logger = logging.getLogger(__name__)


def format_money(amount: Money) -> str:
    """Format pesos the way receipts show them: 13000 -> "$13.000"."""
    return "$" + f"{int(amount):,}".replace(",", ".")


def _default_role_surcharges() -> dict[UserRole, dict[str, Money]]:
    gratinada = {"pechuga gratinada": 2000}
    return {UserRole.WAITER: dict(gratinada), UserRole.ADMIN: dict(gratinada)}


@dataclass
class PriceTable:
    """All the numbers the pricing rules need."""

    lunch_with_soup: Money = 13000
    lunch_without_soup: Money = 12000
    # Proteins sold at a fixed lunch price regardless of soup, e.g. {"mojarra": 16000}
    fixed_price_proteins: dict[str, Money] = field(default_factory=dict)
    # Extra charged per protein when staff ring up the order
    role_protein_surcharges: dict[UserRole, dict[str, Money]] = field(
        default_factory=_default_role_surcharges
    )
    breakfast_prices: dict[str, dict[str, tuple[Money, Money]]] = field(
        default_factory=lambda: {k: dict(v) for k, v in BREAKFAST_PRICES.items()}
    )
    unknown_breakfast_price: tuple[Money, Money] = UNKNOWN_BREAKFAST_PRICE


@dataclass
class PricedOrder:
    """Total and per-payment-method breakdown of an order."""

    total: Money
    breakdown: dict[str, Money]

    @property
    def payable_breakdown(self) -> dict[str, Money]:
        """Breakdown without the unspecified method, for payment instructions."""
        return {
            method: amount
            for method, amount in self.breakdown.items()
            if method != UNSPECIFIED_PAYMENT and amount > 0
        }


def normalize_payment_name(value: Any, fallback: str | None = None) -> str:
    """
    Resolve a payment method name from an Option, dict or string.

    Known methods are normalized by substring ("efectivo" -> "Efectivo",
    "NEQUI" -> "Nequi", "DaviPlata" -> "Daviplata"); unknown names pass
    through trimmed. Missing values resolve to "No especificado".
    """
    if isinstance(value, Option):
        name = value.name
    elif isinstance(value, dict):
        name = value.get("name") or value.get("method") or ""
    elif isinstance(value, str):
        name = value
    else:
        name = ""

    normalized = (name or fallback or "").strip()
    if not normalized:
        return UNSPECIFIED_PAYMENT

    lowered = normalized.lower()
    for needle, canonical in PAYMENT_ALIASES:
        if needle in lowered:
            return canonical
    return normalized


def _additions_total(item: LineItem) -> Money:
    return sum(addition.total for addition in item.additions)


class PricingEngine:
    """
    Computes line item and order prices from a PriceTable.

    The engine holds no per-order state, so one instance can price any
    number of orders concurrently.
    """

    def __init__(self, price_table: PriceTable | None = None):
        self._table = price_table or PriceTable()

    @property
    def price_table(self) -> PriceTable:
        return self._table

    # =========================================================================
    # Lunch Pricing
    # =========================================================================

    def price_meal(self, item: LunchItem, role: UserRole | int | None = None) -> Money:
        """
        Price a lunch.

        Base is the soup price when a soup (or soup replacement) was chosen,
        the no-soup price otherwise; "Solo bandeja" counts as no soup.
        Fixed-price proteins replace the base, staff roles add the protein
        surcharge from the table, and additions are added on top. Combo rice
        dishes ignore protein rules since they bundle their own protein.

        Args:
            item: The lunch to price
            role: Role of whoever is ringing up the order (None = customer)

        Returns:
            Price in pesos
        """
        protein = clean_name(item.protein.name).lower() if item.protein else ""
        combo = item.has_combo_rice()

        if protein and not combo and protein in self._table.fixed_price_proteins:
            base = self._table.fixed_price_proteins[protein]
        elif item.has_soup():
            base = self._table.lunch_with_soup
        else:
            base = self._table.lunch_without_soup

        surcharge = 0
        if role is not None and protein and not combo:
            role_table = self._table.role_protein_surcharges.get(UserRole.parse(role), {})
            surcharge = role_table.get(protein, 0)

        additions = _additions_total(item)
        total = base + surcharge + additions
        logger.debug(
            "Lunch price: base=%d surcharge=%d additions=%d total=%d",
            base, surcharge, additions, total,
        )
        return total

    # =========================================================================
    # Breakfast Pricing
    # =========================================================================

    def resolve_breakfast_channel(
        self,
        item: BreakfastItem,
        channel: OrderChannel | None = None,
    ) -> OrderChannel:
        """Item's own order type first, then the context channel, else takeaway."""
        return item.channel or channel or OrderChannel.TAKEAWAY

    def lookup_breakfast_base(self, type_name: str, broth_name: str, channel: OrderChannel) -> Money:
        """
        Look up the base breakfast price.

        Args:
            type_name: Breakfast type, e.g. "Desayuno completo"
            broth_name: Broth name, e.g. "Caldo de pajarilla" (may be empty)
            channel: Table or takeaway

        Returns:
            Base price before additions
        """
        type_key = clean_name(type_name).lower()
        broth_lower = clean_name(broth_name).lower()

        type_prices = self._table.breakfast_prices.get(type_key)
        if type_prices is None:
            prices = self._table.unknown_breakfast_price
        else:
            broth_key = next(
                (keyword for keyword in BROTH_KEYWORDS if keyword in broth_lower and keyword in type_prices),
                "default",
            )
            prices = type_prices.get(broth_key, type_prices.get("default", self._table.unknown_breakfast_price))

        table_price, takeaway_price = prices
        return table_price if channel == OrderChannel.TABLE else takeaway_price

    def price_breakfast(self, item: BreakfastItem, channel: OrderChannel | None = None) -> Money:
        """
        Price a breakfast: table lookup by (type, broth, channel) plus additions.

        A breakfast whose type is not chosen yet has no base price.
        """
        resolved = self.resolve_breakfast_channel(item, channel)
        type_name = item.type.display_name if item.type else ""
        broth_name = item.broth.name if item.broth else ""

        if type_name:
            base = self.lookup_breakfast_base(type_name, broth_name, resolved)
        else:
            base = 0
        additions = _additions_total(item)
        total = base + additions
        logger.debug(
            "Breakfast price: type=%r broth=%r channel=%s base=%d additions=%d total=%d",
            type_name, broth_name, resolved.value, base, additions, total,
        )
        return total

    # =========================================================================
    # Dispatch and Aggregates
    # =========================================================================

    def price_line_item(self, item: Any, context: OrderContext | None = None) -> Money:
        """Price a lunch or breakfast; unknown shapes price as 0."""
        context = context or OrderContext()
        if item is None:
            return 0
        try:
            parsed = parse_line_item(item)
        except InvalidLineItemKind:
            logger.warning("Cannot price item of unknown kind; counting it as 0")
            return 0
        except PydanticValidationError as exc:
            logger.error("Cannot price item with malformed slots %s; counting it as 0", _error_fields(exc))
            return 0

        if isinstance(parsed, BreakfastItem):
            return self.price_breakfast(parsed, context.channel)
        role = context.user_role if context.is_staff else None
        return self.price_meal(parsed, role)

    def sum_prices(self, items: Iterable[Any] | None, context: OrderContext | None = None) -> Money:
        """Sum of line item prices; an empty or missing list is 0."""
        if not isinstance(items, (list, tuple)):
            if items is not None:
                logger.error("Expected a list of line items, got %s", type(items).__name__)
            return 0
        return sum(self.price_line_item(item, context) for item in items)

    def breakdown_by_payment(
        self,
        items: Iterable[Any] | None,
        context: OrderContext | None = None,
        fallback_payment: str | None = None,
    ) -> dict[str, Money]:
        """
        Sum prices per resolved payment method.

        Items without a payment method land under "No especificado" unless
        a fallback method name is given (e.g. the payment picked for the
        whole order).
        """
        breakdown: dict[str, Money] = {}
        if not isinstance(items, (list, tuple)):
            return breakdown
        for item in items:
            price = self.price_line_item(item, context)
            payment = _item_payment(item)
            method = normalize_payment_name(payment, fallback_payment)
            breakdown[method] = breakdown.get(method, 0) + price
        return breakdown

    def price_order(
        self,
        items: Iterable[Any] | None,
        context: OrderContext | None = None,
        fallback_payment: str | None = None,
    ) -> PricedOrder:
        """Total and payment breakdown for a list of line items."""
        return PricedOrder(
            total=self.sum_prices(items, context),
            breakdown=self.breakdown_by_payment(items, context, fallback_payment),
        )


def _error_fields(exc: PydanticValidationError) -> list[str]:
    return [".".join(str(part) for part in error["loc"]) for error in exc.errors()]


def _item_payment(item: Any) -> Any:
    if isinstance(item, (LunchItem, BreakfastItem)):
        return item.payment
    if isinstance(item, dict):
        return item.get("payment") or item.get("paymentMethod")
    return None


# =============================================================================
# Module-level API
# =============================================================================

_default_engine = PricingEngine()


def get_pricing_engine() -> PricingEngine:
    """Return the shared engine built from the default PriceTable."""
    return _default_engine


def price_meal(item: LunchItem, role: UserRole | int | None = None) -> Money:
    return _default_engine.price_meal(item, role)


def price_breakfast(item: BreakfastItem, channel: OrderChannel | None = None) -> Money:
    return _default_engine.price_breakfast(item, channel)


def price_line_item(item: Any, context: OrderContext | None = None) -> Money:
    return _default_engine.price_line_item(item, context)


def sum_prices(items: Iterable[Any] | None, context: OrderContext | None = None) -> Money:
    return _default_engine.sum_prices(items, context)


def breakdown_by_payment(
    items: Iterable[Any] | None,
    context: OrderContext | None = None,
    fallback_payment: str | None = None,
) -> dict[str, Money]:
    return _default_engine.breakdown_by_payment(items, context, fallback_payment)


def price_order(
    items: Iterable[Any] | None,
    context: OrderContext | None = None,
    fallback_payment: str | None = None,
) -> PricedOrder:
    return _default_engine.price_order(items, context, fallback_payment)
