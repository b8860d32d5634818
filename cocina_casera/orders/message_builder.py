"""
Message Builder for Order Summaries.

This module turns grouped line items into the ordered sections shown in the
on-screen order summary and sent as the WhatsApp order message:

- a header per group (count, subtotal, payment methods),
- the fields shared by the whole group, in fixed priority order,
- a differences section listing each item by its 1-based position with
  only the fields where it deviates,
- payment instructions and the order total.

The same StructuredSummary feeds both the screen and the text message, so
the two never disagree.
"""

from dataclasses import dataclass, field
from typing import Any, Iterable

from .. import config
from .constants import (
    ADDRESS_FIELDS,
    ADDRESS_TYPE_LABELS,
    ASAP_TIME,
    DRINK_NAME_FIXES,
    UNSPECIFIED_PAYMENT,
)
from .fields import (
    ADDITIONS,
    ADDRESS,
    BREAKFAST_TYPE,
    BROTH,
    CUTLERY,
    DELIVERY_TIME,
    DRINK,
    EGGS,
    NOTES,
    PAYMENT,
    PRINCIPLE,
    PROTEIN,
    RICE_BREAD,
    SIDES,
    SOUP,
    TABLE,
    address_values,
    field_names_for_kind,
)
from .grouping import Group, group_line_items
from .models import LineItem, LunchItem, Money, Option, OptionKind, OrderContext
from .pricing import PricingEngine, format_money, get_pricing_engine, normalize_payment_name

SEPARATOR = "────────────────"


@dataclass
class DifferenceEntry:
    """Deviating fields of one item inside a group."""
    number: int  # 1-based position in the order
    lines: list[str]
    is_representative: bool = False


@dataclass
class GroupSection:
    """Display-ready section for one group."""
    kind: str
    title: str
    count: int
    subtotal: Money
    payments: list[str]
    numbers: list[int]
    common_lines: list[str] = field(default_factory=list)
    differences: list[DifferenceEntry] = field(default_factory=list)

    def to_lines(self, item_label: str) -> list[str]:
        lines = [self.title, ""]
        lines.extend(self.common_lines)
        if self.differences:
            lines.append("")
            lines.append("🔄 Diferencias:")
            for entry in self.differences:
                lines.append(f"* {item_label} {entry.number}:")
                lines.extend(entry.lines)
        return lines


@dataclass
class StructuredSummary:
    """Ordered sections of an order summary."""
    header_lines: list[str]
    groups: list[GroupSection]
    total: Money
    payment_breakdown: dict[str, Money]
    payment_lines: list[str]
    identical_group_sizes: list[int] = field(default_factory=list)

    def to_text(self) -> str:
        lines = list(self.header_lines)
        for section in self.groups:
            lines.append(SEPARATOR)
            lines.extend(section.to_lines(MessageBuilder.ITEM_WORDS[section.kind][0]))
        if self.payment_lines:
            lines.append("")
            lines.extend(self.payment_lines)
        lines.append("")
        lines.append(f"💰 Total: {format_money(self.total)}")
        return "\n".join(lines)


def _option_name(option: Option | None) -> str:
    return option.display_name if option else ""


class MessageBuilder:
    """
    Builds order summaries and order message text from groups.

    Field rendering follows the kitchen's conventions: soup replacements are
    labeled "(por sopa)", mixed principles "(mixto)", combo rice dishes hide
    protein and sides, and additions are listed with their protein or
    replacement and quantity.
    """

    # (singular label, plural label, plural lowercase)
    ITEM_WORDS = {
        "lunch": ("Almuerzo", "Almuerzos", "almuerzos"),
        "breakfast": ("Desayuno", "Desayunos", "desayunos"),
    }

    def __init__(
        self,
        pricing_engine: PricingEngine | None = None,
        payment_phone: str | None = None,
        restaurant_name: str | None = None,
    ):
        self._pricing = pricing_engine or get_pricing_engine()
        self._payment_phone = payment_phone or config.PAYMENT_PHONE
        self._restaurant_name = restaurant_name or config.RESTAURANT_NAME

    # =========================================================================
    # Field Rendering
    # =========================================================================

    def soup_text(self, item: LunchItem) -> str:
        replacement = item.soup_replacement_text()
        if replacement:
            if replacement.lower() == "solo bandeja":
                return "solo bandeja"
            return f"{replacement} (por sopa)"
        if item.soup is None or item.soup.kind == OptionKind.NO_SELECTION:
            return "Sin sopa"
        if item.soup.kind == OptionKind.TRAY_ONLY:
            return "solo bandeja"
        return item.soup.display_name or "Sin sopa"

    def principle_text(self, item: LunchItem) -> str:
        replacement = item.principle_replacement_text()
        if replacement:
            return f"{replacement} (por principio)"
        names = item.principle_names()
        if not names:
            return "Sin principio"
        text = ", ".join(names)
        return f"{text} (mixto)" if len(names) > 1 else text

    def addition_line(self, addition) -> str:
        modifier = f" ({addition.modifier})" if addition.modifier else ""
        return f"- {addition.name.strip()}{modifier} ({addition.effective_quantity})"

    def address_lines(self, item: LineItem, sub_fields: Iterable[str] = ADDRESS_FIELDS) -> list[str]:
        """Lines for the given address parts, skipping empty ones."""
        values = address_values(item)
        wanted = set(sub_fields)
        lines = []
        if "address" in wanted and values["address"]:
            lines.append(f"📍 Dirección: {values['address']}")
        if "address_type" in wanted and values["address_type"]:
            label = ADDRESS_TYPE_LABELS.get(values["address_type"], "No especificado")
            lines.append(f"🏠 Lugar de entrega: {label}")
        if "recipient_name" in wanted and values["recipient_name"]:
            lines.append(f"👤 Receptor: {values['recipient_name']}")
        if "unit_details" in wanted and values["unit_details"]:
            lines.append(f"🏢 Detalles: {values['unit_details']}")
        if "local_name" in wanted and values["local_name"]:
            lines.append(f"🏬 Nombre del local: {values['local_name']}")
        if "phone_number" in wanted and values["phone_number"]:
            lines.append(f"📞 Teléfono: {values['phone_number']}")
        return lines

    def field_lines(
        self,
        item: LineItem,
        field_name: str,
        in_difference: bool = False,
        context: OrderContext | None = None,
    ) -> list[str]:
        """
        Render one field of an item.

        Args:
            item: The line item
            field_name: One of the comparable field names
            in_difference: True when rendering the differences section, where
                an empty slot is spelled out instead of omitted
            context: Used to price the item for the payment line

        Returns:
            Zero or more display lines
        """
        if isinstance(item, LunchItem):
            lines = self._lunch_field_lines(item, field_name, in_difference)
        else:
            lines = self._breakfast_field_lines(item, field_name, in_difference)
        if lines is not None:
            return lines
        return self._shared_field_lines(item, field_name, in_difference, context)

    def _lunch_field_lines(self, item: LunchItem, field_name: str, in_difference: bool) -> list[str] | None:
        if field_name == SOUP:
            return [self.soup_text(item)]
        if field_name == PRINCIPLE:
            return [self.principle_text(item)]
        if field_name == PROTEIN:
            if item.has_combo_rice():
                return []
            return [_option_name(item.protein) or "Sin proteína"]
        if field_name == DRINK:
            name = _option_name(item.drink)
            return [DRINK_NAME_FIXES.get(name, name) or "Sin bebida"]
        if field_name == SIDES:
            if item.has_combo_rice():
                return ["Acompañamientos ya incluidos"]
            names = [s.display_name for s in item.sides if s.display_name]
            return [", ".join(names) if names else "Sin acompañamientos"]
        return None

    def _breakfast_field_lines(self, item, field_name: str, in_difference: bool) -> list[str] | None:
        slots = {
            BREAKFAST_TYPE: (item.type, "Tipo", "Sin tipo"),
            BROTH: (item.broth, "Caldo", "Sin caldo"),
            EGGS: (item.eggs, "Huevos", "Sin huevos"),
            RICE_BREAD: (item.rice_bread, "Arroz/Pan", "Sin arroz/pan"),
            DRINK: (item.drink, "Bebida", "Sin bebida"),
            PROTEIN: (item.protein, "Proteína", "Sin proteína"),
        }
        if field_name in slots:
            option, label, empty = slots[field_name]
            name = _option_name(option)
            if name:
                return [f"{label}: {name}"]
            return [empty] if in_difference or field_name == BREAKFAST_TYPE else []
        if field_name == TABLE:
            if item.table_number:
                return [f"Mesa: {item.table_number}"]
            return ["Mesa: No especificada"] if in_difference else []
        return None

    def _shared_field_lines(
        self,
        item: LineItem,
        field_name: str,
        in_difference: bool,
        context: OrderContext | None,
    ) -> list[str]:
        if field_name == CUTLERY:
            return [f"Cubiertos: {'Sí' if item.cutlery else 'No'}"]
        if field_name == ADDITIONS:
            if not item.additions:
                return ["➕ Adiciones: Ninguna"] if in_difference else []
            return ["➕ Adiciones:"] + [self.addition_line(a) for a in item.additions]
        if field_name == NOTES:
            notes = item.notes.strip()
            return [f"📝 Notas: {notes or 'Ninguna'}"]
        if field_name == DELIVERY_TIME:
            name = _option_name(item.time)
            return [f"🕒 Entrega: {name or ASAP_TIME}"]
        if field_name == ADDRESS:
            lines = self.address_lines(item)
            if not lines and in_difference:
                return ["📍 Dirección: No especificada"]
            return lines
        if field_name == PAYMENT:
            method = normalize_payment_name(item.payment)
            if in_difference and method != UNSPECIFIED_PAYMENT:
                price = self._pricing.price_line_item(item, context)
                return [f"💳 Pago: {method} = {format_money(price)}"]
            return [f"💳 Pago: {method}"]
        return []

    # =========================================================================
    # Group Sections
    # =========================================================================

    def payment_text(self, payments: Iterable[str]) -> str:
        names = [name for name in payments if name and name != UNSPECIFIED_PAYMENT]
        return f"({' y '.join(names)})" if names else f"({UNSPECIFIED_PAYMENT})"

    def group_title(self, group: Group, subtotal: Money) -> str:
        singular, plural, _ = self.ITEM_WORDS[group.kind]
        payments = self.payment_text(group.payments)
        if group.count > 1:
            return f"🍽 {group.count} {plural} iguales – {format_money(subtotal)} {payments}"
        return f"🍽 1 {singular} – {format_money(subtotal)} {payments}"

    def _address_group_lines(self, group: Group) -> tuple[list[str], list[str]]:
        """Split address parts into the group-level part and the per-item part."""
        if group.shared_address:
            return list(ADDRESS_FIELDS), []
        shared = [
            sub_field
            for sub_field, value in group.common_address_fields.items()
            if value is not None
        ]
        varying = [sub_field for sub_field in ADDRESS_FIELDS if sub_field not in shared]
        return shared, varying

    def build_group_section(self, group: Group, context: OrderContext | None = None) -> GroupSection:
        """Render one group: title, common fields, then differences."""
        context = context or OrderContext()
        subtotal = sum(self._pricing.price_line_item(item, context) for item in group.items)
        representative = group.representative
        shared_address, varying_address = self._address_group_lines(group)

        common_lines: list[str] = []
        for field_name in field_names_for_kind(group.kind):
            if not group.is_common(field_name):
                if field_name == ADDRESS:
                    common_lines.extend(self.address_lines(representative, shared_address))
                continue
            common_lines.extend(self.field_lines(representative, field_name, context=context))

        differences: list[DifferenceEntry] = []
        varying = group.varying_fields
        if varying:
            differences.append(DifferenceEntry(
                number=group.members[0].number,
                lines=self._difference_lines(representative, varying, varying_address, context),
                is_representative=True,
            ))
            for member in group.member_diffs:
                differences.append(DifferenceEntry(
                    number=member.number,
                    lines=self._difference_lines(member.item, member.diff_fields, varying_address, context),
                ))

        return GroupSection(
            kind=group.kind,
            title=self.group_title(group, subtotal),
            count=group.count,
            subtotal=subtotal,
            payments=list(group.payments),
            numbers=[m.number for m in group.members],
            common_lines=common_lines,
            differences=differences,
        )

    def _difference_lines(
        self,
        item: LineItem,
        field_names: list[str],
        varying_address: list[str],
        context: OrderContext,
    ) -> list[str]:
        lines: list[str] = []
        for field_name in field_names_for_kind(item.meal_kind):
            if field_name not in field_names:
                continue
            if field_name == ADDRESS:
                address_lines = self.address_lines(item, varying_address)
                lines.extend(address_lines or ["📍 Dirección: No especificada"])
                continue
            lines.extend(self.field_lines(item, field_name, in_difference=True, context=context))
        return lines

    # =========================================================================
    # Order Summary
    # =========================================================================

    def payment_instruction_lines(self, breakdown: dict[str, Money], total: Money) -> list[str]:
        """Payment instructions; cash-only orders get the pay-on-delivery text."""
        payable = {
            method: amount
            for method, amount in breakdown.items()
            if method != UNSPECIFIED_PAYMENT and amount > 0
        }
        if all(method == "Efectivo" for method in payable):
            return [
                "Paga en efectivo al momento de la entrega.",
                f"💵 Efectivo: {format_money(total)}",
                "Si no tienes efectivo, puedes transferir por Nequi o DaviPlata "
                f"al número: {self._payment_phone}.",
            ]
        lines = [
            "💳 Instrucciones de pago:",
            f"Envía al número {self._payment_phone} (Nequi o DaviPlata):",
        ]
        for method, amount in payable.items():
            lines.append(f"🔹 {method}: {format_money(amount)}")
        return lines

    def render_group_summary(
        self,
        groups: list[Group],
        context: OrderContext | None = None,
        fallback_payment: str | None = None,
    ) -> StructuredSummary:
        """
        Build the structured summary for already grouped items.

        Args:
            groups: Output of group_line_items
            context: Role and channel; staff summaries omit payment instructions
            fallback_payment: Payment name for items without one

        Returns:
            StructuredSummary with header, group sections and payment lines
        """
        context = context or OrderContext()
        sections = [self.build_group_section(group, context) for group in groups]
        items = [item for group in groups for item in group.items]
        priced = self._pricing.price_order(items, context, fallback_payment)

        header_lines = []
        for kind in ("lunch", "breakfast"):
            kind_count = sum(g.count for g in groups if g.kind == kind)
            if not kind_count:
                continue
            singular, _, plural_lower = self.ITEM_WORDS[kind]
            word = plural_lower if kind_count > 1 else singular.lower()
            header_lines.append(f"🍽 {kind_count} {word} en total")
            for group in groups:
                if group.kind == kind and group.count > 1:
                    header_lines.append(f"• {group.count} {plural_lower} iguales")
        header_lines.append(f"💰 Total: {format_money(priced.total)}")

        payment_lines = []
        if groups and not context.is_staff:
            payment_lines = self.payment_instruction_lines(priced.breakdown, priced.total)

        return StructuredSummary(
            header_lines=header_lines,
            groups=sections,
            total=priced.total,
            payment_breakdown=priced.breakdown,
            payment_lines=payment_lines,
            identical_group_sizes=[g.count for g in groups if g.count > 1],
        )

    def build_order_message(
        self,
        items: list[Any],
        context: OrderContext | None = None,
        fallback_payment: str | None = None,
    ) -> str:
        """Full order message text: greeting, summary and delivery estimate."""
        groups = group_line_items(items, fallback_payment=fallback_payment)
        summary = self.render_group_summary(groups, context, fallback_payment)
        greeting = f"👋 ¡Hola {self._restaurant_name}! 🍴\nQuiero hacer mi pedido:\n"
        return f"{greeting}\n{summary.to_text()}\n🕐 {config.ESTIMATED_DELIVERY_TEXT}\n"


def render_group_summary(
    groups: list[Group],
    context: OrderContext | None = None,
    fallback_payment: str | None = None,
) -> StructuredSummary:
    """Module-level shortcut using a MessageBuilder with default settings."""
    return MessageBuilder().render_group_summary(groups, context, fallback_payment)
