"""Unit tests for the pure availability checker."""
from tracking import t

from dataclasses import replace

from models import Item, ReservationItem, ReservationStatus
from models.reservation import parse_clock
from reservations.availability import (
    available_stock_by_item,
    check_availability,
    overlapping_reservations,
    windows_overlap,
)

from tests.helpers import DummyLogger, make_reservation

CONES = Item(id='cones', name='Cones', quantity=10)
BALLS = Item(id='balls', name='Balls', quantity=4)
ITEMS = {item.id: item for item in (CONES, BALLS)}


def _request(item_id, quantity):
    t('tests.unit.test_availability._request')
    return [ReservationItem(item_id, '', quantity)]


def test_touching_windows_do_not_overlap():
    t('tests.unit.test_availability.test_touching_windows_do_not_overlap')
    ten, eleven, noon = parse_clock('10:00'), parse_clock('11:00'), parse_clock('12:00')
    assert windows_overlap(ten, eleven, eleven, noon) is False
    assert windows_overlap(eleven, noon, ten, eleven) is False
    assert windows_overlap(ten, eleven, parse_clock('10:30'), parse_clock('11:30')) is True


def test_back_to_back_bookings_share_full_stock():
    t('tests.unit.test_availability.test_back_to_back_bookings_share_full_stock')
    existing = [make_reservation('r1', [('cones', 10)], start_time='10:00', end_time='11:00')]

    result = check_availability(
        _request('cones', 10), '2025-03-10', '11:00', '12:00',
        items=ITEMS, reservations=existing,
    )

    assert result.available is True
    assert result.error is None


def test_partial_overlap_conflicts():
    t('tests.unit.test_availability.test_partial_overlap_conflicts')
    existing = [make_reservation('r1', [('cones', 10)], start_time='10:00', end_time='11:00')]

    result = check_availability(
        _request('cones', 1), '2025-03-10', '10:30', '11:30',
        items=ITEMS, reservations=existing,
    )

    assert result.available is False
    assert result.error == 'Insufficient stock for "Cones" in this time slot. Available: 0.'


def test_cones_scenario_reports_remaining_stock():
    t('tests.unit.test_availability.test_cones_scenario_reports_remaining_stock')
    existing = [make_reservation('r1', [('cones', 6)], date='2024-01-01', start_time='09:00', end_time='10:00')]

    blocked = check_availability(
        _request('cones', 5), '2024-01-01', '09:30', '10:30',
        items=ITEMS, reservations=existing,
    )
    shifted = check_availability(
        _request('cones', 5), '2024-01-01', '10:00', '11:00',
        items=ITEMS, reservations=existing,
    )

    assert blocked.available is False
    assert 'Available: 4.' in blocked.error
    assert shifted.available is True


def test_overlapping_demand_is_additive():
    t('tests.unit.test_availability.test_overlapping_demand_is_additive')
    existing = [
        make_reservation('r1', [('cones', 3)], start_time='09:00', end_time='10:30'),
        make_reservation('r2', [('cones', 4)], start_time='10:00', end_time='12:00'),
    ]

    fits = check_availability(
        _request('cones', 3), '2025-03-10', '10:15', '10:45',
        items=ITEMS, reservations=existing,
    )
    too_many = check_availability(
        _request('cones', 4), '2025-03-10', '10:15', '10:45',
        items=ITEMS, reservations=existing,
    )

    assert fits.available is True
    assert too_many.available is False
    assert 'Available: 3.' in too_many.error


def test_other_dates_and_inactive_reservations_are_ignored():
    t('tests.unit.test_availability.test_other_dates_and_inactive_reservations_are_ignored')
    cancelled = replace(
        make_reservation('r1', [('cones', 10)]),
        status=ReservationStatus.CANCELLED,
    )
    completed = replace(
        make_reservation('r2', [('cones', 10)]),
        status=ReservationStatus.COMPLETED,
    )
    other_day = make_reservation('r3', [('cones', 10)], date='2025-03-11')

    result = check_availability(
        _request('cones', 10), '2025-03-10', '10:00', '11:00',
        items=ITEMS, reservations=[cancelled, completed, other_day],
    )

    assert result.available is True


def test_unknown_item_is_reported():
    t('tests.unit.test_availability.test_unknown_item_is_reported')
    logger = DummyLogger()

    result = check_availability(
        _request('ghost', 1), '2025-03-10', '10:00', '11:00',
        items=ITEMS, reservations=[], logger=logger,
    )

    assert result.available is False
    assert result.error == 'Item not found.'
    assert logger.last('warning') is not None


def test_same_item_listed_twice_competes_with_itself():
    t('tests.unit.test_availability.test_same_item_listed_twice_competes_with_itself')
    requested = [ReservationItem('balls', 'Balls', 3), ReservationItem('balls', 'Balls', 2)]

    result = check_availability(
        requested, '2025-03-10', '10:00', '11:00',
        items=ITEMS, reservations=[],
    )

    assert result.available is False
    assert 'Available: 4.' in result.error


def test_excluded_reservation_does_not_count():
    t('tests.unit.test_availability.test_excluded_reservation_does_not_count')
    existing = [make_reservation('r1', [('cones', 8)])]

    result = check_availability(
        _request('cones', 10), '2025-03-10', '10:00', '11:00',
        items=ITEMS, reservations=existing, exclude_reservation_id='r1',
    )

    assert result.available is True


def test_overlapping_reservations_filters_by_window():
    t('tests.unit.test_availability.test_overlapping_reservations_filters_by_window')
    early = make_reservation('early', [('cones', 1)], start_time='08:00', end_time='09:00')
    middle = make_reservation('middle', [('cones', 1)], start_time='09:30', end_time='10:30')

    found = overlapping_reservations([early, middle], '2025-03-10', '09:00', '10:00')

    assert [r.id for r in found] == ['middle']


def test_available_stock_by_item():
    t('tests.unit.test_availability.test_available_stock_by_item')
    existing = [make_reservation('r1', [('cones', 6), ('balls', 1)])]

    stock = available_stock_by_item(ITEMS, existing, '2025-03-10', '10:30', '11:30')

    assert stock == {'cones': 4, 'balls': 3}


def test_result_shape():
    t('tests.unit.test_availability.test_result_shape')
    ok = check_availability(
        _request('cones', 1), '2025-03-10', '10:00', '11:00',
        items=ITEMS, reservations=[],
    )
    assert ok.as_dict() == {'available': True}
