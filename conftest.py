"""
Shared test fixtures: a sample studio pricing configuration.
"""

import pytest

from calculator import (
    Category,
    KitchenOption,
    PricingConfiguration,
    PricingItem,
    PricingMode,
    Segment,
    Tier,
)


def make_item(item_id, name=None, basic=0.0, standard=0.0, luxe=0.0,
              mode=PricingMode.PER_UNIT, enabled=True):
    return PricingItem(
        id=item_id,
        name=name or item_id.replace("_", " ").title(),
        mode=mode,
        prices={Tier.BASIC: basic, Tier.STANDARD: standard, Tier.LUXE: luxe},
        enabled=enabled,
    )


@pytest.fixture
def sample_config():
    """A studio catalog covering every room role."""
    return PricingConfiguration(
        categories=[
            Category(id="living_area", name="Living Area", items=[
                make_item("tv_unit", "TV Unit", 100, 150, 200),
                make_item("false_ceiling", "False Ceiling", 40, 50, 70, mode=PricingMode.PER_SQFT),
                make_item("old_sofa", "Old Sofa", 500, 600, 700, enabled=False),
            ]),
            Category(id="kitchen", name="Kitchen", items=[
                make_item("modular_kitchen", "Modular Kitchen", 1000, 1500, 2500, mode=PricingMode.FIXED),
                make_item("chimney", "Chimney", 300, 400, 600),
            ]),
            Category(id="bedroom", name="Bedroom", items=[
                make_item("wardrobe", "Wardrobe", 100, 150, 250),
                make_item("bed", "Bed", 200, 300, 500),
            ]),
            Category(id="bathroom", name="Bathroom", items=[
                make_item("vanity", "Vanity", 80, 120, 200),
            ]),
            Category(id="cabin", name="Cabin", segment=Segment.COMMERCIAL, items=[
                make_item("workstation", "Workstation", 90, 110, 160),
            ]),
            Category(id="pooja_room", name="Pooja Room", items=[
                make_item("mandir", "Mandir Unit", 250, 350, 450),
            ]),
        ],
        kitchen_layouts=[
            KitchenOption(id="l", name="L-Shaped", enabled=False),
            KitchenOption(id="u", name="U-Shaped"),
        ],
        kitchen_materials=[
            KitchenOption(id="ply", name="BWP Plywood"),
        ],
    )
