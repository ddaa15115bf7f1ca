"""
Pricing configuration tests: role detection, stored-document parsing and
segment filtering.
"""

import pytest

from calculator import (
    Category,
    PricingConfiguration,
    PricingItem,
    PricingMode,
    RoomRole,
    RoomRoleDetector,
    Segment,
    Tier,
    InvalidTierError,
    backfill_roles,
)


@pytest.mark.parametrize("category_id,name,expected", [
    ("living_area", "Living Area", RoomRole.LIVING_AREA),
    ("abc123", "LIVING AREA", RoomRole.LIVING_AREA),
    ("abc123", "living-area", RoomRole.LIVING_AREA),
    ("kitchen", "Modular Kitchen", RoomRole.KITCHEN),
    ("x1", " Bedroom ", RoomRole.BEDROOM),
    ("bath_room", "Washrooms", RoomRole.BATHROOM),
    ("cabin", "Cabin", RoomRole.CABIN),
    ("pooja_room", "Pooja Room", RoomRole.OTHER),
    ("kitchen", "Bedroom", RoomRole.OTHER),
    (None, None, RoomRole.OTHER),
])
def test_room_role_detection(category_id, name, expected):
    assert RoomRoleDetector.detect(category_id, name) == expected


def test_backfill_sets_explicit_roles(sample_config):
    sample_config.categories.append(
        Category(id="suite", name="Suite", role=RoomRole.BEDROOM)
    )
    migrated = backfill_roles(sample_config)
    assert [c.role for c in migrated.categories] == [
        RoomRole.LIVING_AREA,
        RoomRole.KITCHEN,
        RoomRole.BEDROOM,
        RoomRole.BATHROOM,
        RoomRole.CABIN,
        RoomRole.OTHER,
        RoomRole.BEDROOM,
    ]
    # original left untouched
    assert sample_config.categories[0].role is None


@pytest.mark.parametrize("value,expected", [
    ("basic", Tier.BASIC),
    ("Standard", Tier.STANDARD),
    (" LUXE ", Tier.LUXE),
    (Tier.BASIC, Tier.BASIC),
])
def test_tier_parse(value, expected):
    assert Tier.parse(value) == expected


@pytest.mark.parametrize("value", ["premium", "", None, 2])
def test_tier_parse_rejects_unknown(value):
    with pytest.raises(InvalidTierError):
        Tier.parse(value)


@pytest.mark.parametrize("price", [-1, float("nan"), float("inf")])
def test_invalid_price_is_rejected(price):
    with pytest.raises(ValueError):
        PricingItem(id="x", name="X", prices={Tier.BASIC: price})


@pytest.mark.parametrize("stored", ["NaN", "inf", "-Infinity", float("nan")])
def test_non_finite_stored_price_reads_as_zero(stored):
    item = PricingItem.from_dict({"id": "tv", "name": "TV Unit", "basicPrice": stored})
    assert item.price_for(Tier.BASIC) == 0.0


def test_from_dict_reads_stored_document():
    config = PricingConfiguration.from_dict({
        "categories": [
            {
                "id": "living_area",
                "name": "Living Area",
                "items": [
                    {"id": "tv", "name": "TV Unit", "type": "perUnit",
                     "basicPrice": 100, "standardPrice": "150", "luxePrice": None, "enabled": True},
                    {"id": "paint", "name": "Painting", "type": "perSqft",
                     "basicPrice": 20, "standardPrice": 30, "luxePrice": 45, "enabled": False},
                ],
            },
            {"id": "cabin", "name": "Cabin", "type": "commercial", "items": []},
        ],
        "kitchenLayouts": [{"id": "l", "name": "L-Shaped", "enabled": True}],
    })

    tv, paint = config.categories[0].items
    assert tv.prices == {Tier.BASIC: 100.0, Tier.STANDARD: 150.0, Tier.LUXE: 0.0}
    assert paint.mode == PricingMode.PER_SQFT
    assert paint.enabled is False
    assert config.categories[1].segment == Segment.COMMERCIAL
    assert config.default_kitchen_layout() == "L-Shaped"
    assert config.default_kitchen_material() is None


def test_to_dict_round_trip(sample_config):
    assert PricingConfiguration.from_dict(sample_config.to_dict()) == sample_config


def test_from_dict_handles_missing_document():
    assert PricingConfiguration.from_dict(None).categories == []


def test_segment_filtering(sample_config):
    residential = [c.id for c in sample_config.categories_for_segment(Segment.RESIDENTIAL)]
    commercial = [c.id for c in sample_config.categories_for_segment("commercial")]
    assert residential == ["living_area", "kitchen", "bedroom", "bathroom", "pooja_room"]
    assert commercial == ["cabin"]


def test_default_kitchen_options_skip_disabled(sample_config):
    assert sample_config.default_kitchen_layout() == "U-Shaped"
    assert sample_config.default_kitchen_material() == "BWP Plywood"


def test_find_item(sample_config):
    kitchen = sample_config.categories[1]
    assert kitchen.find_item("chimney").name == "Chimney"
    assert kitchen.find_item("tv_unit") is None
