"""
Studio Estimator - Estimate Input

The user's selections gathered across the storefront's multi-step form:
tier, segment, area, shared item quantities and per-room quantities.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from enum import Enum

from .pricing_config import Segment, Tier

# item id -> quantity (count, or entered sqft for perSqft items)
ItemQuantity = Dict[str, float]


class RoomKind(Enum):
    """Repeatable room kinds; each instance holds its own quantities."""
    BEDROOM = "bedroom"
    BATHROOM = "bathroom"
    CABIN = "cabin"  # commercial projects only

    @property
    def label(self) -> str:
        return self.value.capitalize()


@dataclass
class RoomInstance:
    """One physical room of a repeatable kind."""
    items: ItemQuantity = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {"items": dict(self.items)}

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "RoomInstance":
        return cls(items=dict((data or {}).get("items") or {}))


def reconcile_room_instances(count: int, instances: List[RoomInstance]) -> List[RoomInstance]:
    """
    Resize a room list to the requested count.

    Growing appends empty rooms after the existing ones; shrinking keeps rooms
    1..count and drops the rest along with their quantities.

    Args:
        count: Desired number of rooms (negative values are treated as 0)
        instances: Current rooms in creation order

    Returns:
        A new list of length ``max(count, 0)``
    """
    count = max(0, int(count))
    if count <= len(instances):
        return list(instances[:count])
    return list(instances) + [RoomInstance() for _ in range(count - len(instances))]


def _clamped(current: float, value: float, mode: str) -> float:
    if mode == "delta":
        return max(0, (current or 0) + value)
    if mode == "direct":
        return max(0, value)
    raise ValueError(f"Unknown update mode: {mode}. Use 'delta' or 'direct'")


@dataclass
class EstimateInput:
    """Everything the calculator prices, plus project metadata it carries along."""
    tier: Tier = Tier.STANDARD
    segment: Segment = Segment.RESIDENTIAL
    total_area: float = 0.0
    general_items: ItemQuantity = field(default_factory=dict)
    kitchen_items: ItemQuantity = field(default_factory=dict)
    kitchen_layout: Optional[str] = None
    kitchen_material: Optional[str] = None
    bedrooms: List[RoomInstance] = field(default_factory=list)
    bathrooms: List[RoomInstance] = field(default_factory=list)
    cabins: List[RoomInstance] = field(default_factory=list)

    def rooms(self, kind: RoomKind) -> List[RoomInstance]:
        if kind == RoomKind.BEDROOM:
            return self.bedrooms
        if kind == RoomKind.BATHROOM:
            return self.bathrooms
        return self.cabins

    def room_count(self, kind: RoomKind) -> int:
        return len(self.rooms(kind))

    def set_room_count(self, kind: RoomKind, count: int) -> None:
        """Create or drop room instances so that ``kind`` has ``count`` of them."""
        resized = reconcile_room_instances(count, self.rooms(kind))
        if kind == RoomKind.BEDROOM:
            self.bedrooms = resized
        elif kind == RoomKind.BATHROOM:
            self.bathrooms = resized
        else:
            self.cabins = resized

    def update_item_quantity(
        self,
        target: str,
        item_id: str,
        value: float,
        mode: str = "delta",
        index: Optional[int] = None
    ) -> float:
        """
        Apply a quantity edit from the storefront.

        Args:
            target: 'general', 'kitchen', 'bedroom', 'bathroom' or 'cabin'
            item_id: Catalog item identifier
            value: Increment (delta mode) or new value (direct mode)
            mode: 'delta' for +/- buttons, 'direct' for typed sqft values
            index: 0-based room index, required for room targets

        Returns:
            The stored quantity, never below 0
        """
        if target == "general":
            quantities = self.general_items
        elif target == "kitchen":
            quantities = self.kitchen_items
        else:
            rooms = self.rooms(RoomKind(target))
            if index is None or not 0 <= index < len(rooms):
                raise IndexError(f"No {target} at index {index} (have {len(rooms)})")
            quantities = rooms[index].items

        quantities[item_id] = _clamped(quantities.get(item_id, 0), value, mode)
        return quantities[item_id]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "plan": self.tier.value,
            "segment": self.segment.value,
            "carpet_area": self.total_area,
            "bedroom_count": len(self.bedrooms),
            "bathroom_count": len(self.bathrooms),
            "configuration": {
                "living_area": dict(self.general_items),
                "kitchen": {
                    "layout": self.kitchen_layout,
                    "material": self.kitchen_material,
                    "items": dict(self.kitchen_items),
                },
                "bedrooms": [room.to_dict() for room in self.bedrooms],
                "bathrooms": [room.to_dict() for room in self.bathrooms],
                "cabins": [room.to_dict() for room in self.cabins],
            },
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EstimateInput":
        configuration = data.get("configuration") or {}
        kitchen = configuration.get("kitchen") or {}
        return cls(
            tier=Tier.parse(data.get("plan", Tier.STANDARD.value)),
            segment=Segment.parse(data.get("segment", Segment.RESIDENTIAL.value)),
            total_area=float(data.get("carpet_area") or 0),
            general_items=dict(configuration.get("living_area") or {}),
            kitchen_items=dict(kitchen.get("items") or {}),
            kitchen_layout=kitchen.get("layout"),
            kitchen_material=kitchen.get("material"),
            bedrooms=[RoomInstance.from_dict(r) for r in configuration.get("bedrooms") or []],
            bathrooms=[RoomInstance.from_dict(r) for r in configuration.get("bathrooms") or []],
            cabins=[RoomInstance.from_dict(r) for r in configuration.get("cabins") or []],
        )
