"""
Grouping of near-identical line items.

Orders often contain several lunches that differ in one or two details
(another drink, no cutlery). For display they are clustered into groups:
the first unassigned item becomes the representative, and every later
unassigned item that differs from it in at most `threshold` fields joins
the group, keeping the list of fields where it differs.

The pass is greedy and order-dependent: later items are only
ever compared with representatives, never with each other, and a member
never becomes the reference for another comparison.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Hashable, Iterable

from .. import config
from .constants import ADDRESS_FIELDS
from .fields import ADDRESS, address_values, extract_values, field_names_for_kind
from .models import LineItem, parse_line_item
from .pricing import normalize_payment_name

logger = logging.getLogger(__name__)


@dataclass
class FieldDiff:
    """One differing field between the representative and a member."""
    field: str
    representative_value: Hashable
    member_value: Hashable


@dataclass
class GroupMember:
    """An item inside a group, with its differences from the representative."""
    index: int  # 0-based position in the original item list
    item: LineItem
    diffs: list[FieldDiff] = field(default_factory=list)

    @property
    def number(self) -> int:
        """1-based position, as shown to the customer."""
        return self.index + 1

    @property
    def diff_fields(self) -> list[str]:
        return [d.field for d in self.diffs]


@dataclass
class Group:
    """A cluster of line items treated as the same for display."""
    kind: str
    members: list[GroupMember]
    payments: list[str] = field(default_factory=list)
    common_fields: list[str] = field(default_factory=list)
    # Address sub-field -> shared value, or None when members disagree
    common_address_fields: dict[str, str | None] = field(default_factory=dict)

    @property
    def representative(self) -> LineItem:
        return self.members[0].item

    @property
    def items(self) -> list[LineItem]:
        return [m.item for m in self.members]

    @property
    def indices(self) -> list[int]:
        return [m.index for m in self.members]

    @property
    def count(self) -> int:
        return len(self.members)

    @property
    def shared_address(self) -> bool:
        return ADDRESS in self.common_fields

    @property
    def varying_fields(self) -> list[str]:
        """Fields not shared by every member, in display order."""
        return [name for name in field_names_for_kind(self.kind) if name not in self.common_fields]

    @property
    def member_diffs(self) -> list[GroupMember]:
        """Members other than the representative that differ from it."""
        return [m for m in self.members[1:] if m.diffs]

    def is_common(self, field_name: str) -> bool:
        return field_name in self.common_fields


def _payment_of(item: LineItem, fallback: str | None) -> str:
    return normalize_payment_name(item.payment, fallback)


def _summarize_group(group: Group, values: list[dict[str, Hashable]]) -> None:
    """Fill in the common fields and common address parts of a group."""
    reference = values[group.members[0].index]
    member_values = [values[m.index] for m in group.members]
    group.common_fields = [
        name
        for name in field_names_for_kind(group.kind)
        if all(v[name] == reference[name] for v in member_values)
    ]

    addresses = [address_values(m.item) for m in group.members]
    group.common_address_fields = {
        sub_field: addresses[0][sub_field]
        if all(a[sub_field] == addresses[0][sub_field] for a in addresses)
        else None
        for sub_field in ADDRESS_FIELDS
    }


def group_line_items(
    items: Iterable[Any],
    threshold: int | None = None,
    fallback_payment: str | None = None,
) -> list[Group]:
    """
    Cluster line items with a single greedy left-to-right pass.

    Args:
        items: Lunches and/or breakfasts (models or stored documents)
        threshold: Maximum differing fields to join a group
                   (default: GROUPING_DIFF_THRESHOLD from config)
        fallback_payment: Payment name used for items without one

    Returns:
        Groups in order of their representatives' positions

    Raises:
        InvalidLineItemKind: If an item is neither a lunch nor a breakfast.
    """
    if threshold is None:
        threshold = config.get_grouping_threshold()

    parsed = [parse_line_item(item, position) for position, item in enumerate(items)]
    values = [extract_values(item) for item in parsed]
    assigned = [False] * len(parsed)
    groups: list[Group] = []

    for i, representative in enumerate(parsed):
        if assigned[i]:
            continue
        assigned[i] = True
        group = Group(
            kind=representative.meal_kind,
            members=[GroupMember(index=i, item=representative)],
            payments=[_payment_of(representative, fallback_payment)],
        )

        for j in range(i + 1, len(parsed)):
            if assigned[j] or parsed[j].meal_kind != representative.meal_kind:
                continue
            diffs = [
                FieldDiff(name, values[i][name], values[j][name])
                for name in field_names_for_kind(group.kind)
                if values[i][name] != values[j][name]
            ]
            if len(diffs) > threshold:
                continue
            assigned[j] = True
            group.members.append(GroupMember(index=j, item=parsed[j], diffs=diffs))
            payment = _payment_of(parsed[j], fallback_payment)
            if payment not in group.payments:
                group.payments.append(payment)

        _summarize_group(group, values)
        groups.append(group)

    logger.debug("Grouped %d items into %d groups (threshold=%d)", len(parsed), len(groups), threshold)
    return groups
