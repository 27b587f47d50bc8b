import copy

import pytest

from app.services.availability import available_services, compute_availability
from app.services.db_service import BOOKINGS, SERVICES

SERVICES_FIXTURE = [
    {"id": "1", "name": "Cleaning", "price": 50, "slots": ["9am", "10am", "11am"]},
    {"id": "2", "name": "Whitening", "price": 120, "slots": ["9am", "2pm"]},
    {"id": "3", "name": "Consultation", "price": 0, "slots": []},
]

def test_booked_slots_are_removed_and_rest_kept():
    bookings = [
        {"treatment": "Cleaning", "slot": "10am"},
        {"treatment": "Whitening", "slot": "9am"},
    ]
    result = compute_availability(SERVICES_FIXTURE, bookings)

    for original, view in zip(SERVICES_FIXTURE, result):
        removed = {b["slot"] for b in bookings if b["treatment"] == original["name"]}
        kept = view["slots"]
        assert set(kept) | (removed & set(original["slots"])) == set(original["slots"])
        assert not set(kept) & removed

    assert result[0]["slots"] == ["9am", "11am"]
    assert result[1]["slots"] == ["2pm"]

def test_order_and_fields_preserved():
    result = compute_availability(SERVICES_FIXTURE, [{"treatment": "Cleaning", "slot": "9am"}])
    assert [s["name"] for s in result] == ["Cleaning", "Whitening", "Consultation"]
    assert result[0]["price"] == 50
    assert result[0]["slots"] == ["10am", "11am"]

def test_fully_booked_service_is_kept_with_empty_slots():
    bookings = [{"treatment": "Whitening", "slot": s} for s in ("9am", "2pm")]
    result = compute_availability(SERVICES_FIXTURE, bookings)
    assert result[1] == {"id": "2", "name": "Whitening", "price": 120, "slots": []}

def test_service_without_slots_stays_empty():
    result = compute_availability(SERVICES_FIXTURE, [])
    assert result[2]["slots"] == []

def test_unknown_treatment_and_case_mismatch_are_ignored():
    bookings = [
        {"treatment": "Surgery", "slot": "9am"},
        {"treatment": "cleaning", "slot": "9am"},
    ]
    result = compute_availability(SERVICES_FIXTURE, bookings)
    assert result[0]["slots"] == ["9am", "10am", "11am"]

def test_duplicate_bookings_collapse():
    bookings = [{"treatment": "Cleaning", "slot": "9am"}] * 3
    assert compute_availability(SERVICES_FIXTURE, bookings)[0]["slots"] == ["10am", "11am"]

def test_inputs_not_mutated_and_result_repeatable():
    services = copy.deepcopy(SERVICES_FIXTURE)
    bookings = [{"treatment": "Cleaning", "slot": "9am"}]

    first = compute_availability(services, bookings)
    second = compute_availability(services, bookings)

    assert first == second
    assert services == SERVICES_FIXTURE

def test_missing_slots_field_is_an_error():
    with pytest.raises(KeyError):
        compute_availability([{"name": "Broken"}], [])

@pytest.mark.asyncio
async def test_available_services_only_counts_bookings_on_that_date(store):
    store.seed(SERVICES, {"name": "Cleaning", "slots": ["9am", "10am"]})
    store.seed(
        BOOKINGS,
        {"treatment": "Cleaning", "date": "2024-01-01", "slot": "9am", "patientEmail": "a@x.com"},
        {"treatment": "Cleaning", "date": "2024-01-02", "slot": "10am", "patientEmail": "b@x.com"},
    )

    result = await available_services(store, "2024-01-01")
    assert result[0]["slots"] == ["10am"]

@pytest.mark.asyncio
async def test_available_services_without_date_means_no_bookings(store):
    store.seed(SERVICES, {"name": "Cleaning", "slots": ["9am", "10am"]})
    store.seed(BOOKINGS, {"treatment": "Cleaning", "date": "2024-01-01", "slot": "9am", "patientEmail": "a@x.com"})

    result = await available_services(store, None)
    assert result[0]["slots"] == ["9am", "10am"]
