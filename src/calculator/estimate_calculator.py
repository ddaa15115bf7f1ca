"""
Studio Estimator - Estimate Calculator

Prices an EstimateInput against a tenant's PricingConfiguration. Called on
every selection change for the live total and once more at submission.
"""

import math
from collections import OrderedDict
from dataclasses import dataclass, field
from numbers import Real
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple, Union

from .estimate_input import EstimateInput, ItemQuantity, RoomKind
from .pricing_config import (
    Category,
    PricingConfiguration,
    PricingMode,
    RoomRole,
    Tier,
)


@dataclass(frozen=True)
class BreakdownLine:
    """One priced (room/category, item, quantity) entry."""
    category: str
    item: str
    item_id: str
    quantity: float
    unit_price: float
    total: float
    mode: PricingMode = PricingMode.PER_UNIT

    def to_dict(self) -> Dict[str, Any]:
        return {
            "category": self.category,
            "item": self.item,
            "item_id": self.item_id,
            "quantity": self.quantity,
            "unit_price": self.unit_price,
            "total": self.total,
            "type": self.mode.value,
        }


@dataclass(frozen=True)
class EstimateResult:
    """Total cost and itemized breakdown for one pricing pass."""
    total: float = 0.0
    breakdown: Tuple[BreakdownLine, ...] = field(default_factory=tuple)

    def grouped(self) -> "OrderedDict[str, List[BreakdownLine]]":
        """Breakdown lines grouped by label, in order of first appearance."""
        groups: "OrderedDict[str, List[BreakdownLine]]" = OrderedDict()
        for line in self.breakdown:
            groups.setdefault(line.category, []).append(line)
        return groups

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total": self.total,
            "breakdown": [line.to_dict() for line in self.breakdown],
        }


# Quantity sources: each room role knows where its quantities are stored and
# how the resulting breakdown lines are labelled.
QuantitySource = Callable[[Category, EstimateInput], Iterator[Tuple[str, ItemQuantity]]]


def _general_source(category: Category, estimate_input: EstimateInput) -> Iterator[Tuple[str, ItemQuantity]]:
    yield category.name, estimate_input.general_items


def _kitchen_source(category: Category, estimate_input: EstimateInput) -> Iterator[Tuple[str, ItemQuantity]]:
    yield category.name, estimate_input.kitchen_items


def _room_source(kind: RoomKind) -> QuantitySource:
    def source(category: Category, estimate_input: EstimateInput) -> Iterator[Tuple[str, ItemQuantity]]:
        for index, room in enumerate(estimate_input.rooms(kind) or []):
            yield f"{kind.label} {index + 1}", getattr(room, "items", None)
    return source


QUANTITY_SOURCES: Dict[RoomRole, QuantitySource] = {
    RoomRole.LIVING_AREA: _general_source,
    RoomRole.OTHER: _general_source,
    RoomRole.KITCHEN: _kitchen_source,
    RoomRole.BEDROOM: _room_source(RoomKind.BEDROOM),
    RoomRole.BATHROOM: _room_source(RoomKind.BATHROOM),
    RoomRole.CABIN: _room_source(RoomKind.CABIN),
}


def _positive_quantity(value: Any) -> Optional[float]:
    """Usable quantity or None; non-numeric, non-finite and non-positive values are skipped."""
    if isinstance(value, bool) or not isinstance(value, Real):
        return None
    if not math.isfinite(value) or value <= 0:
        return None
    return value


def line_cost(quantity: float, unit_price: float) -> float:
    """
    Cost of a single line.

    Fixed and per-unit items multiply a count by the unit price; per-sqft items
    multiply the entered square footage by the rate. The formula is the same,
    only the meaning of ``quantity`` differs.
    """
    return quantity * unit_price


def compute(
    config: Optional[PricingConfiguration],
    tier: Union[Tier, str],
    estimate_input: EstimateInput
) -> EstimateResult:
    """
    Price an estimate.

    Args:
        config: Tenant pricing configuration, or None while it is still loading
        tier: Selected pricing tier (enum member or name)
        estimate_input: Current selections

    Returns:
        EstimateResult whose total is the exact sum of its breakdown lines.
        Quantities recorded for unknown or disabled items are left out.

    Raises:
        InvalidTierError: if ``tier`` does not name a pricing tier
    """
    tier = Tier.parse(tier)
    if config is None or not config.categories:
        return EstimateResult()

    total = 0.0
    breakdown: List[BreakdownLine] = []

    for category in config.categories:
        source = QUANTITY_SOURCES[category.resolve_role()]
        for label, quantities in source(category, estimate_input):
            # partial input: a missing quantity map prices nothing
            if not isinstance(quantities, dict):
                continue
            for item_id, raw_quantity in list(quantities.items()):
                quantity = _positive_quantity(raw_quantity)
                if quantity is None:
                    continue
                item = category.find_item(item_id)
                if item is None or not item.enabled:
                    continue

                unit_price = item.price_for(tier)
                cost = line_cost(quantity, unit_price)
                total += cost
                breakdown.append(BreakdownLine(
                    category=label,
                    item=item.name,
                    item_id=item.id,
                    quantity=quantity,
                    unit_price=unit_price,
                    total=cost,
                    mode=item.mode,
                ))

    return EstimateResult(total=total, breakdown=tuple(breakdown))


def compare_tiers(
    config: Optional[PricingConfiguration],
    estimate_input: EstimateInput
) -> Dict[str, float]:
    """
    Compare the estimate total across all pricing tiers.

    Returns:
        Dictionary mapping tier name to total
    """
    return {tier.value: compute(config, tier, estimate_input).total for tier in Tier}
