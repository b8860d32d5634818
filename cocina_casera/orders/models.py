"""
Pydantic models for order line items.

An order is a list of line items, each either a lunch ("almuerzo") or a
breakfast ("desayuno"):
- LunchItem: soup, principle, protein, drink, sides, additions...
- BreakfastItem: type, broth, eggs, rice/bread, drink, protein, additions...

Both variants share the delivery/table slots (time, address, payment,
table number, order type, notes). Models accept the camelCase keys used by
stored order documents as well as snake_case field names.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from .constants import (
    COMBO_RICE_NAMES,
    CUTLERY_NO,
    CUTLERY_YES,
    NEW_OPTION_TAG,
    NO_SELECTION_NAMES,
    REPLACEMENT_MARKERS,
    TABLE_SYNONYMS,
    TAKEAWAY_SYNONYMS,
    TRAY_ONLY_NAMES,
)
from .errors import InvalidLineItemKind

Money = int


def clean_name(name: str | None) -> str:
    """Strip the " NUEVO" tag and surrounding whitespace from a display name."""
    if not name:
        return ""
    return str(name).replace(NEW_OPTION_TAG, "").strip()


# =============================================================================
# Enums
# =============================================================================

class OptionKind(str, Enum):
    """Role an option plays in the pricing and display rules."""
    REGULAR = "regular"
    NO_SELECTION = "no_selection"  # "Sin sopa", "Sin principio", ...
    TRAY_ONLY = "tray_only"  # "Solo bandeja"
    REPLACEMENT = "replacement"  # "Remplazo por Sopa", "Remplazo por Principio"
    COMBO = "combo"  # Rice dishes that bundle protein and sides


class OrderChannel(str, Enum):
    """Where the order is eaten; drives breakfast prices."""
    TABLE = "table"
    TAKEAWAY = "takeaway"


class UserRole(int, Enum):
    """Roles as stored on user documents."""
    CUSTOMER = 1
    ADMIN = 2
    WAITER = 3
    DELIVERY = 4

    @property
    def is_staff(self) -> bool:
        return self in (UserRole.ADMIN, UserRole.WAITER)

    @classmethod
    def parse(cls, value: Any) -> "UserRole":
        """Role from a stored role number; unknown numbers are customers."""
        try:
            return cls(int(value))
        except (TypeError, ValueError):
            return cls.CUSTOMER


def classify_option_name(name: str | None) -> OptionKind:
    """Classify a catalog option by its display name."""
    lowered = clean_name(name).lower()
    if not lowered:
        return OptionKind.REGULAR
    if lowered in NO_SELECTION_NAMES:
        return OptionKind.NO_SELECTION
    if lowered in TRAY_ONLY_NAMES:
        return OptionKind.TRAY_ONLY
    if any(marker in lowered for marker in REPLACEMENT_MARKERS):
        return OptionKind.REPLACEMENT
    if lowered in COMBO_RICE_NAMES:
        return OptionKind.COMBO
    return OptionKind.REGULAR


def normalize_order_type(value: Any) -> OrderChannel | None:
    """Map stored order type values ("mesa", "para llevar", ...) to a channel.

    Returns None when the value is empty or not recognized.
    """
    if isinstance(value, OrderChannel):
        return value
    if isinstance(value, dict):
        value = value.get("name") or value.get("value")
    elif value is not None and not isinstance(value, str):
        value = getattr(value, "name", None)
    lowered = str(value or "").strip().lower()
    if lowered in TABLE_SYNONYMS:
        return OrderChannel.TABLE
    if lowered in TAKEAWAY_SYNONYMS:
        return OrderChannel.TAKEAWAY
    return None


@dataclass(frozen=True)
class OrderContext:
    """Who is ordering and, when known, for which channel."""
    role: UserRole = UserRole.CUSTOMER
    channel: OrderChannel | None = None

    @property
    def user_role(self) -> UserRole:
        return UserRole.parse(self.role)

    @property
    def is_staff(self) -> bool:
        return self.user_role.is_staff


# =============================================================================
# Value Objects
# =============================================================================

class OrderModel(BaseModel):
    """Base model: accepts camelCase document keys and ignores UI-only keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class Option(OrderModel):
    """A catalog entry (soup, protein, drink, payment method, time slot...)."""

    id: str | int | None = None
    name: str = ""
    price: int | float | None = None
    is_finished: bool = False
    is_new: bool = False
    replacement: str | None = None  # Free text chosen for "Remplazo por ..." options
    kind: OptionKind | None = None

    @model_validator(mode="before")
    @classmethod
    def _coerce_text(cls, data: Any) -> Any:
        if isinstance(data, str):
            return {"name": data}
        if isinstance(data, dict) and not data.get("name") and data.get("method"):
            return {**data, "name": data["method"]}
        return data

    @model_validator(mode="after")
    def _resolve_kind(self) -> "Option":
        if self.kind is None:
            self.kind = classify_option_name(self.name)
        return self

    @property
    def display_name(self) -> str:
        return clean_name(self.name)


class BreakfastTypeOption(Option):
    """A breakfast type, carrying the wizard steps it requires."""

    steps: list[str] = Field(default_factory=list)
    requires_protein: bool = False


class Addition(OrderModel):
    """An extra charged on top of a line item."""

    id: str | int | None = None
    name: str = ""
    quantity: int = 1
    price: int | float = 0
    protein: str | None = None
    replacement: str | None = None
    requires_replacement: bool = False

    @model_validator(mode="before")
    @classmethod
    def _coerce_text(cls, data: Any) -> Any:
        if isinstance(data, str):
            return {"name": data}
        return data

    @field_validator("quantity", mode="before")
    @classmethod
    def _default_quantity(cls, value: Any) -> Any:
        return 1 if value is None else value

    @field_validator("price", mode="before")
    @classmethod
    def _default_price(cls, value: Any) -> Any:
        return 0 if value is None else value

    @property
    def effective_quantity(self) -> int:
        return self.quantity if self.quantity > 0 else 1

    @property
    def modifier(self) -> str:
        """The protein or replacement chosen for this addition, if any."""
        return (self.protein or self.replacement or "").strip()

    @property
    def total(self) -> Money:
        return int(self.price * self.effective_quantity)


class Address(OrderModel):
    """Delivery address; every part is compared independently."""

    address: str | None = None
    address_type: str | None = None
    phone_number: str | None = None
    unit_details: str | None = None
    local_name: str | None = None
    recipient_name: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _coerce_text(cls, data: Any) -> Any:
        if isinstance(data, str):
            return {"address": data}
        return data


# =============================================================================
# Line Items
# =============================================================================

class LineItemBase(OrderModel):
    """Slots shared by lunches and breakfasts."""

    meal_kind: ClassVar[str] = ""
    label: ClassVar[str] = ""

    id: str | int | None = None
    additions: list[Addition] = Field(default_factory=list)
    cutlery: bool | None = None
    time: Option | None = None
    address: Address | None = None
    payment: Option | None = Field(
        default=None,
        validation_alias=AliasChoices("payment", "paymentMethod", "payment_method"),
    )
    table_number: str | None = None
    order_type: str | None = None
    notes: str = ""

    @field_validator("additions", mode="before")
    @classmethod
    def _default_additions(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("cutlery", mode="before")
    @classmethod
    def _cutlery_answer(cls, value: Any) -> Any:
        # Stored as a bool, as "Sí"/"No", or as "" before the question is answered
        if value is None or isinstance(value, bool):
            return value
        text = str(value).strip().lower()
        if text in CUTLERY_YES:
            return True
        if text in CUTLERY_NO:
            return False
        if not text:
            return None
        return value

    @field_validator("table_number", mode="before")
    @classmethod
    def _table_number_text(cls, value: Any) -> Any:
        if isinstance(value, dict):
            value = value.get("name")
        if value is None or value == "":
            return None
        return str(value)

    @field_validator("order_type", mode="before")
    @classmethod
    def _order_type_text(cls, value: Any) -> Any:
        if isinstance(value, dict):
            value = value.get("name") or value.get("value")
        if isinstance(value, Enum):
            value = value.value
        return value or None

    @field_validator("notes", mode="before")
    @classmethod
    def _default_notes(cls, value: Any) -> Any:
        return value or ""

    @property
    def channel(self) -> OrderChannel | None:
        return normalize_order_type(self.order_type)


def _as_option_list(value: Any) -> Any:
    if value is None:
        return []
    if isinstance(value, (dict, str, Option)):
        return [value]
    return value


class LunchItem(LineItemBase):
    """A lunch ("almuerzo") line item."""

    meal_kind: ClassVar[str] = "lunch"
    label: ClassVar[str] = "Almuerzo"

    soup: Option | None = None
    soup_replacement: Option | None = None
    principle: list[Option] = Field(default_factory=list)
    principle_replacement: Option | None = None
    protein: Option | None = None
    drink: Option | None = None
    sides: list[Option] = Field(default_factory=list)

    @field_validator("principle", "sides", mode="before")
    @classmethod
    def _option_list(cls, value: Any) -> Any:
        return _as_option_list(value)

    def has_soup(self) -> bool:
        """True when a soup course (or its replacement) was chosen."""
        if self.soup_replacement is not None:
            return True
        return self.soup is not None and self.soup.kind not in (
            OptionKind.NO_SELECTION,
            OptionKind.TRAY_ONLY,
        )

    def is_tray_only(self) -> bool:
        if self.soup is not None and self.soup.kind == OptionKind.TRAY_ONLY:
            return True
        replacement = self.soup_replacement
        return (
            replacement is not None
            and replacement.kind == OptionKind.REPLACEMENT
            and (replacement.replacement or "").strip().lower() == "solo bandeja"
        )

    def has_combo_rice(self) -> bool:
        return any(p.kind == OptionKind.COMBO for p in self.principle)

    def soup_replacement_text(self) -> str:
        """What the customer gets instead of soup, or "" when no replacement."""
        if self.soup_replacement is None:
            return ""
        return (self.soup_replacement.replacement or "").strip() or self.soup_replacement.display_name

    def principle_replacement_text(self) -> str:
        """The principle replacement, from the dedicated slot or the placeholder option."""
        if self.principle_replacement is not None and self.principle_replacement.display_name:
            return (self.principle_replacement.replacement or "").strip() or self.principle_replacement.display_name
        for option in self.principle:
            if option.kind == OptionKind.REPLACEMENT and (option.replacement or "").strip():
                return option.replacement.strip()
        return ""

    def principle_names(self) -> list[str]:
        """Principle names without the replacement placeholder."""
        return [
            p.display_name
            for p in self.principle
            if p.kind != OptionKind.REPLACEMENT and p.display_name
        ]


class BreakfastItem(LineItemBase):
    """A breakfast ("desayuno") line item."""

    meal_kind: ClassVar[str] = "breakfast"
    label: ClassVar[str] = "Desayuno"

    type: BreakfastTypeOption | None = None
    broth: Option | None = None
    eggs: Option | None = None
    rice_bread: Option | None = None
    drink: Option | None = None
    protein: Option | None = None


LineItem = Union[LunchItem, BreakfastItem]

_BREAKFAST_KEYS = {"type", "broth", "eggs", "riceBread", "rice_bread"}
_LUNCH_KEYS = {
    "soup", "soupReplacement", "soup_replacement",
    "principle", "principleReplacement", "principle_replacement", "sides",
}


def parse_line_item(data: Any, position: int | None = None) -> LineItem:
    """
    Build a LineItem from a model or a stored document.

    The variant is chosen by shape: the key set (lunch-only vs breakfast-only
    keys) that the document matches more closely wins.

    Raises:
        InvalidLineItemKind: If the data matches neither shape.
    """
    if isinstance(data, (LunchItem, BreakfastItem)):
        return data
    if not isinstance(data, dict):
        raise InvalidLineItemKind(data, position)

    breakfast_score = sum(1 for key in _BREAKFAST_KEYS if key in data)
    lunch_score = sum(1 for key in _LUNCH_KEYS if key in data)
    if breakfast_score == lunch_score:
        raise InvalidLineItemKind(data, position)
    if breakfast_score > lunch_score:
        return BreakfastItem.model_validate(data)
    return LunchItem.model_validate(data)
