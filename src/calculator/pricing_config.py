"""
Studio Estimator - Pricing Configuration

Tenant-authored pricing catalog: categories of line items, each item carrying
one unit price per tier. Configurations are loaded once per tenant from the
record store and are read-only as far as the calculator is concerned.
"""

import math
import re
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional
from enum import Enum


class InvalidTierError(ValueError):
    """Raised when a tier value does not name one of the pricing tiers."""


class Tier(Enum):
    """Pricing tiers offered on the storefront."""
    BASIC = "basic"
    STANDARD = "standard"
    LUXE = "luxe"

    @classmethod
    def parse(cls, value: Any) -> "Tier":
        """Resolve a tier from an enum member or a case-insensitive name."""
        if isinstance(value, Tier):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise InvalidTierError(
            f"Unknown pricing tier: {value!r}. "
            f"Available: {[t.value for t in cls]}"
        )

    @property
    def price_key(self) -> str:
        """Field name used for this tier in stored configurations."""
        return f"{self.value}Price"

    @property
    def label(self) -> str:
        return self.value.capitalize()


class PricingMode(Enum):
    """How an item's quantity is collected."""
    FIXED = "fixed"
    PER_UNIT = "perUnit"
    PER_SQFT = "perSqft"  # quantity is an entered square footage


class Segment(Enum):
    """Project segments."""
    RESIDENTIAL = "residential"
    COMMERCIAL = "commercial"

    @classmethod
    def parse(cls, value: Any) -> "Segment":
        if isinstance(value, Segment):
            return value
        return cls(str(value).strip().lower())


class RoomRole(Enum):
    """Semantic role of a category; decides where its quantities live."""
    LIVING_AREA = "living_area"
    KITCHEN = "kitchen"
    BEDROOM = "bedroom"
    BATHROOM = "bathroom"
    CABIN = "cabin"
    OTHER = "other"


class RoomRoleDetector:
    """Infer a category's room role from its identifier and name.

    Used as a one-time backfill for configurations authored before roles were
    stored explicitly.
    """

    CANONICAL_ROLES = [
        RoomRole.LIVING_AREA,
        RoomRole.KITCHEN,
        RoomRole.BEDROOM,
        RoomRole.BATHROOM,
        RoomRole.CABIN,
    ]

    _SEPARATORS = re.compile(r"[\s_\-]+")

    @classmethod
    def normalize(cls, value: Optional[str]) -> str:
        if not value:
            return ""
        return cls._SEPARATORS.sub("", value.strip().lower())

    @classmethod
    def detect(cls, category_id: Optional[str], name: Optional[str]) -> RoomRole:
        """Detect the room role for a category.

        The identifier and the name are each compared with the canonical role
        names. A category that matches no role, or that matches two different
        roles, falls into the custom bucket.
        """
        candidates = {cls.normalize(category_id), cls.normalize(name)}
        matched = {
            role for role in cls.CANONICAL_ROLES
            if cls.normalize(role.value) in candidates
        }
        if len(matched) == 1:
            return matched.pop()
        return RoomRole.OTHER


def _parse_price(value: Any) -> float:
    """Coerce a stored price to float; missing, malformed or non-finite values price at 0."""
    if value is None or value == "":
        return 0.0
    try:
        price = float(value)
    except (TypeError, ValueError):
        return 0.0
    return price if math.isfinite(price) else 0.0


@dataclass
class PricingItem:
    """A purchasable line item within a category."""
    id: str
    name: str
    mode: PricingMode = PricingMode.PER_UNIT
    prices: Dict[Tier, float] = field(default_factory=dict)
    enabled: bool = True

    def __post_init__(self):
        for tier, price in self.prices.items():
            if not math.isfinite(price) or price < 0:
                raise ValueError(
                    f"Item {self.id!r} has an invalid {tier.value} price: {price}"
                )

    def price_for(self, tier: Tier) -> float:
        return self.prices.get(tier, 0.0)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PricingItem":
        try:
            mode = PricingMode(data.get("type") or PricingMode.PER_UNIT.value)
        except ValueError:
            mode = PricingMode.PER_UNIT
        return cls(
            id=str(data["id"]),
            name=data.get("name", str(data["id"])),
            mode=mode,
            prices={tier: _parse_price(data.get(tier.price_key)) for tier in Tier},
            enabled=bool(data.get("enabled", True)),
        )

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "id": self.id,
            "name": self.name,
            "type": self.mode.value,
            "enabled": self.enabled,
        }
        for tier in Tier:
            data[tier.price_key] = self.price_for(tier)
        return data


@dataclass
class Category:
    """A named grouping of pricing items."""
    id: str
    name: str
    items: List[PricingItem] = field(default_factory=list)
    segment: Optional[Segment] = None
    role: Optional[RoomRole] = None

    def resolve_role(self) -> RoomRole:
        """Explicit role when authored, otherwise the inferred one."""
        if self.role is not None:
            return self.role
        return RoomRoleDetector.detect(self.id, self.name)

    def find_item(self, item_id: str) -> Optional[PricingItem]:
        for item in self.items:
            if item.id == item_id:
                return item
        return None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Category":
        segment = None
        if data.get("type"):
            try:
                segment = Segment.parse(data["type"])
            except ValueError:
                segment = None
        role = None
        if data.get("role"):
            try:
                role = RoomRole(data["role"])
            except ValueError:
                role = None
        return cls(
            id=str(data["id"]),
            name=data.get("name", str(data["id"])),
            items=[PricingItem.from_dict(item) for item in data.get("items") or []],
            segment=segment,
            role=role,
        )

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "id": self.id,
            "name": self.name,
            "items": [item.to_dict() for item in self.items],
        }
        if self.segment is not None:
            data["type"] = self.segment.value
        if self.role is not None:
            data["role"] = self.role.value
        return data


@dataclass
class KitchenOption:
    """A kitchen layout or material choice."""
    id: str
    name: str
    enabled: bool = True

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "KitchenOption":
        return cls(
            id=str(data.get("id", data.get("name", ""))),
            name=data.get("name", ""),
            enabled=bool(data.get("enabled", True)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "enabled": self.enabled}


@dataclass
class PricingConfiguration:
    """A tenant's complete pricing catalog."""
    categories: List[Category] = field(default_factory=list)
    kitchen_layouts: List[KitchenOption] = field(default_factory=list)
    kitchen_materials: List[KitchenOption] = field(default_factory=list)

    def categories_for_segment(self, segment: Segment) -> List[Category]:
        """Categories offered for a segment.

        Residential projects see untagged and residential categories;
        commercial projects see only categories tagged commercial.
        """
        segment = Segment.parse(segment)
        if segment == Segment.RESIDENTIAL:
            return [
                c for c in self.categories
                if c.segment is None or c.segment == Segment.RESIDENTIAL
            ]
        return [c for c in self.categories if c.segment == Segment.COMMERCIAL]

    def default_kitchen_layout(self) -> Optional[str]:
        return _first_enabled(self.kitchen_layouts)

    def default_kitchen_material(self) -> Optional[str]:
        return _first_enabled(self.kitchen_materials)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "PricingConfiguration":
        data = data or {}
        return cls(
            categories=[Category.from_dict(c) for c in data.get("categories") or []],
            kitchen_layouts=[KitchenOption.from_dict(o) for o in data.get("kitchenLayouts") or []],
            kitchen_materials=[KitchenOption.from_dict(o) for o in data.get("kitchenMaterials") or []],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "categories": [c.to_dict() for c in self.categories],
            "kitchenLayouts": [o.to_dict() for o in self.kitchen_layouts],
            "kitchenMaterials": [o.to_dict() for o in self.kitchen_materials],
        }


def _first_enabled(options: List[KitchenOption]) -> Optional[str]:
    for option in options:
        if option.enabled:
            return option.name
    return None


def backfill_roles(config: PricingConfiguration) -> PricingConfiguration:
    """
    Return a copy of the configuration with every category's role set.

    Categories that already carry an explicit role keep it; the rest get the
    role inferred from their identifier and name.
    """
    return replace(
        config,
        categories=[replace(c, role=c.resolve_role()) for c in config.categories],
    )
