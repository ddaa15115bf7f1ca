"""
Estimate input tests: room count reconciliation, quantity edits and
serialisation for drafts.
"""

import pytest

from calculator import (
    EstimateInput,
    RoomInstance,
    RoomKind,
    Segment,
    Tier,
    reconcile_room_instances,
)


# --- Room count reconciliation ---

def test_growing_appends_empty_rooms_and_keeps_existing():
    first = RoomInstance({"bed": 1})
    rooms = reconcile_room_instances(3, [first])
    assert len(rooms) == 3
    assert rooms[0] is first
    assert rooms[1].items == {} and rooms[2].items == {}
    assert rooms[1] is not rooms[2]


def test_shrinking_keeps_leading_rooms():
    rooms = [RoomInstance({"bed": 1}), RoomInstance({"bed": 2}), RoomInstance({"bed": 3})]
    assert [r.items for r in reconcile_room_instances(2, rooms)] == [{"bed": 1}, {"bed": 2}]


def test_reconcile_returns_new_list():
    rooms = [RoomInstance()]
    resized = reconcile_room_instances(1, rooms)
    assert resized == rooms
    assert resized is not rooms


def test_negative_count_is_zero():
    assert reconcile_room_instances(-2, [RoomInstance()]) == []


def test_truncation_loses_trailing_quantities():
    estimate_input = EstimateInput(bedrooms=[
        RoomInstance({"bed": 1}), RoomInstance({"bed": 2}), RoomInstance({"bed": 3}),
    ])
    estimate_input.set_room_count(RoomKind.BEDROOM, 1)
    estimate_input.set_room_count(RoomKind.BEDROOM, 3)
    assert [r.items for r in estimate_input.bedrooms] == [{"bed": 1}, {}, {}]


def test_new_rooms_do_not_share_quantity_maps():
    estimate_input = EstimateInput()
    estimate_input.set_room_count(RoomKind.BATHROOM, 2)
    estimate_input.update_item_quantity("bathroom", "vanity", 1, index=0)
    assert estimate_input.bathrooms[1].items == {}


def test_set_room_count_per_kind():
    estimate_input = EstimateInput()
    estimate_input.set_room_count(RoomKind.CABIN, 4)
    assert estimate_input.room_count(RoomKind.CABIN) == 4
    assert estimate_input.room_count(RoomKind.BEDROOM) == 0


# --- Quantity edits ---

def test_delta_updates_clamp_at_zero():
    estimate_input = EstimateInput()
    assert estimate_input.update_item_quantity("general", "tv_unit", 1) == 1
    assert estimate_input.update_item_quantity("general", "tv_unit", 1) == 2
    assert estimate_input.update_item_quantity("general", "tv_unit", -5) == 0


def test_direct_updates_replace_value():
    estimate_input = EstimateInput()
    estimate_input.update_item_quantity("kitchen", "countertop", 12.5, mode="direct")
    assert estimate_input.kitchen_items == {"countertop": 12.5}
    estimate_input.update_item_quantity("kitchen", "countertop", -1, mode="direct")
    assert estimate_input.kitchen_items == {"countertop": 0}


def test_room_update_needs_valid_index():
    estimate_input = EstimateInput(bedrooms=[RoomInstance()])
    estimate_input.update_item_quantity("bedroom", "bed", 1, index=0)
    assert estimate_input.bedrooms[0].items == {"bed": 1}
    with pytest.raises(IndexError):
        estimate_input.update_item_quantity("bedroom", "bed", 1, index=1)
    with pytest.raises(IndexError):
        estimate_input.update_item_quantity("bedroom", "bed", 1)


def test_unknown_update_mode():
    with pytest.raises(ValueError):
        EstimateInput().update_item_quantity("general", "tv_unit", 1, mode="multiply")


# --- Serialisation ---

def test_round_trip_through_dict():
    estimate_input = EstimateInput(
        tier=Tier.LUXE,
        segment=Segment.COMMERCIAL,
        total_area=1200,
        general_items={"tv_unit": 1},
        kitchen_items={"chimney": 1},
        kitchen_layout="U-Shaped",
        kitchen_material="BWP Plywood",
        bedrooms=[RoomInstance({"bed": 1})],
        cabins=[RoomInstance({"workstation": 3}), RoomInstance()],
    )
    data = estimate_input.to_dict()
    assert data["plan"] == "luxe"
    assert data["bedroom_count"] == 1
    assert EstimateInput.from_dict(data) == estimate_input


def test_from_dict_accepts_capitalised_plan():
    estimate_input = EstimateInput.from_dict({"plan": "Standard", "segment": "Residential"})
    assert estimate_input.tier == Tier.STANDARD
    assert estimate_input.segment == Segment.RESIDENTIAL
    assert estimate_input.bedrooms == []
