"""
Tests for bed availability selection and the selection policies.
"""

import random

import pytest

from pg_finder.models.room import Bed
from pg_finder.services.bed_selector import select_available_beds, select_beds_for_room
from pg_finder.services.interfaces import RandomSelection, RotatingSelection
from pg_finder.services.strategy_factory import build_selection_policy, get_selection_policy
from pg_finder.core.exceptions import NotFound


def make_beds(occupancy: list[bool]) -> list[Bed]:
    return [
        Bed(id=i + 1, room_id=1, bed_number=i + 1, is_occupied=occupied)
        for i, occupied in enumerate(occupancy)
    ]


@pytest.mark.parametrize("vacant,required", [(0, 1), (1, 1), (3, 2), (2, 5), (5, 5), (4, 10)])
def test_selection_count_is_min_of_vacant_and_required(vacant, required):
    """Exactly min(vacant, required) distinct vacant beds are returned."""
    beds = make_beds([False] * vacant + [True] * 3)
    vacant_ids = {bed.id for bed in beds if not bed.is_occupied}

    selection = select_available_beds(beds, required, policy=RandomSelection(random.Random(7)))

    assert len(selection.bed_ids) == min(vacant, required)
    assert len(set(selection.bed_ids)) == len(selection.bed_ids)
    assert set(selection.bed_ids) <= vacant_ids
    assert selection.vacant_count == vacant


def test_selection_does_not_mutate_beds():
    beds = make_beds([False, False, True, False])
    before = [(bed.id, bed.is_occupied, bed.tenant_id) for bed in beds]

    select_available_beds(beds, 2)
    select_available_beds(beds, 2)

    assert [(bed.id, bed.is_occupied, bed.tenant_id) for bed in beds] == before


def test_bed_numbers_follow_selected_ids():
    beds = make_beds([False, True, False, False])
    by_id = {bed.id: bed.bed_number for bed in beds}

    selection = select_available_beds(beds, 3)

    assert selection.bed_numbers == [by_id[bed_id] for bed_id in selection.bed_ids]


def test_under_filled_selection_is_not_an_error():
    beds = make_beds([True, False, True])
    selection = select_available_beds(beds, 3)
    assert selection.bed_ids == [2]


def test_required_must_be_positive():
    with pytest.raises(ValueError):
        select_available_beds(make_beds([False]), 0)


def test_spec_room_scenario_picks_two_vacant_beds():
    """b1, b2 vacant and b3 occupied; two required -> exactly b1 and b2."""
    beds = make_beds([False, False, True])
    selection = select_available_beds(beds, 2)
    assert sorted(selection.bed_ids) == [1, 2]


def test_random_selection_is_reproducible_with_seed():
    beds = make_beds([False] * 10)
    first = select_available_beds(beds, 4, policy=RandomSelection(random.Random(42)))
    second = select_available_beds(beds, 4, policy=RandomSelection(random.Random(42)))
    assert first.bed_ids == second.bed_ids


def test_random_selection_is_not_pinned_to_low_numbers():
    beds = make_beds([False] * 6)
    policy = RandomSelection(random.Random(1))
    offered = {select_available_beds(beds, 1, policy=policy).bed_ids[0] for _ in range(60)}
    assert len(offered) > 1


def test_rotating_selection_advances_per_room():
    beds = make_beds([False, False, False, False])
    policy = RotatingSelection()

    first = select_available_beds(beds, 2, policy=policy, room_id=1)
    second = select_available_beds(beds, 2, policy=policy, room_id=1)
    third = select_available_beds(beds, 1, policy=policy, room_id=1)

    assert first.bed_numbers == [1, 2]
    assert second.bed_numbers == [3, 4]
    assert third.bed_numbers == [1]


def test_rotating_selection_keeps_rooms_independent():
    beds = make_beds([False, False, False])
    policy = RotatingSelection()

    select_available_beds(beds, 2, policy=policy, room_id=1)
    other_room = select_available_beds(beds, 1, policy=policy, room_id=2)

    assert other_room.bed_numbers == [1]
    policy.reset()
    assert select_available_beds(beds, 1, policy=policy, room_id=1).bed_numbers == [1]


def test_rotating_selection_skips_occupied_beds():
    beds = make_beds([False, True, False])
    policy = RotatingSelection()
    selection = select_available_beds(beds, 2, policy=policy, room_id=9)
    assert selection.bed_numbers == [1, 3]


def test_factory_builds_known_policies():
    assert build_selection_policy("random").name == "random"
    assert build_selection_policy("rotating").name == "rotating"
    with pytest.raises(ValueError):
        build_selection_policy("lowest-first")


def test_default_policy_is_random():
    assert get_selection_policy().name == "random"


@pytest.mark.asyncio
async def test_select_beds_for_room_reads_store(db_session, room):
    selection = await select_beds_for_room(db_session, room.id, 2)
    assert len(selection.bed_ids) == 2
    assert set(selection.bed_numbers) == {1, 2}


@pytest.mark.asyncio
async def test_select_beds_for_unknown_room(db_session):
    with pytest.raises(NotFound):
        await select_beds_for_room(db_session, 999, 1)
