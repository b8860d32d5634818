"""
Order Core for Lunches and Breakfasts.

This package provides the logic shared by the customer, waiter and admin
screens:
- Line item models (lunch, breakfast) parsed from stored order documents
- Table-driven pricing with role and channel rules
- Greedy grouping of near-identical items for display
- Structured summaries and WhatsApp order messages
- Checkout validation and wizard progress
- Catalog re-resolution, quick presets and report unit counting
"""

from .errors import (
    OrderError,
    InvalidLineItemKind,
    ValidationError,
    MissingField,
    UnconfiguredAddition,
)

from .models import (
    Money,
    OptionKind,
    OrderChannel,
    UserRole,
    OrderContext,
    Option,
    BreakfastTypeOption,
    Addition,
    Address,
    LunchItem,
    BreakfastItem,
    LineItem,
    classify_option_name,
    normalize_order_type,
    parse_line_item,
)

from .pricing import (
    PriceTable,
    PricedOrder,
    PricingEngine,
    format_money,
    normalize_payment_name,
    price_meal,
    price_breakfast,
    price_line_item,
    sum_prices,
    breakdown_by_payment,
    price_order,
)

from .fields import (
    LUNCH_FIELD_NAMES,
    BREAKFAST_FIELD_NAMES,
    item_kind,
    field_diffs,
)

from .grouping import (
    FieldDiff,
    GroupMember,
    Group,
    group_line_items,
)

from .message_builder import (
    GroupSection,
    StructuredSummary,
    MessageBuilder,
    render_group_summary,
)

from .validation import (
    completion_progress,
    find_first_error,
    validate_order,
)

from .catalog import (
    Catalog,
    QuickPreset,
    LUNCH_QUICK_PRESETS,
    BREAKFAST_QUICK_PRESETS,
    get_quick_presets,
    quick_variant_to_lunch,
    quick_variant_to_breakfast,
    rehydrate_line_item,
)

from .units import (
    is_breakfast_order,
    count_lunch_units,
    sum_lunch_units,
)

from .order_builder import (
    new_lunch_item,
    add_item,
    duplicate_item,
    remove_item,
)

__all__ = [
    # Errors
    "OrderError",
    "InvalidLineItemKind",
    "ValidationError",
    "MissingField",
    "UnconfiguredAddition",
    # Models
    "Money",
    "OptionKind",
    "OrderChannel",
    "UserRole",
    "OrderContext",
    "Option",
    "BreakfastTypeOption",
    "Addition",
    "Address",
    "LunchItem",
    "BreakfastItem",
    "LineItem",
    "classify_option_name",
    "normalize_order_type",
    "parse_line_item",
    # Pricing
    "PriceTable",
    "PricedOrder",
    "PricingEngine",
    "format_money",
    "normalize_payment_name",
    "price_meal",
    "price_breakfast",
    "price_line_item",
    "sum_prices",
    "breakdown_by_payment",
    "price_order",
    # Fields and grouping
    "LUNCH_FIELD_NAMES",
    "BREAKFAST_FIELD_NAMES",
    "item_kind",
    "field_diffs",
    "FieldDiff",
    "GroupMember",
    "Group",
    "group_line_items",
    # Summaries
    "GroupSection",
    "StructuredSummary",
    "MessageBuilder",
    "render_group_summary",
    # Validation
    "completion_progress",
    "find_first_error",
    "validate_order",
    # Catalog
    "Catalog",
    "QuickPreset",
    "LUNCH_QUICK_PRESETS",
    "BREAKFAST_QUICK_PRESETS",
    "get_quick_presets",
    "quick_variant_to_lunch",
    "quick_variant_to_breakfast",
    "rehydrate_line_item",
    # Reports
    "is_breakfast_order",
    "count_lunch_units",
    "sum_lunch_units",
    # Order list
    "new_lunch_item",
    "add_item",
    "duplicate_item",
    "remove_item",
]
