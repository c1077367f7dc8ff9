import datetime as dt

import pytest

from campcart.conflicts import find_conflicts, is_available, ranges_overlap
from campcart.models import ItemType, activity_item, equipment_item, lodging_item


@pytest.mark.parametrize("start, end, expected", [
    (dt.date(2024, 8, 3), dt.date(2024, 8, 7), True),
    (dt.date(2024, 7, 28), dt.date(2024, 8, 2), True),
    (dt.date(2024, 8, 2), dt.date(2024, 8, 3), True),
    (dt.date(2024, 8, 5), dt.date(2024, 8, 8), False),
    (dt.date(2024, 7, 28), dt.date(2024, 8, 1), False),
])
def test_ranges_overlap_is_half_open(start, end, expected):
    assert ranges_overlap(start, end, dt.date(2024, 8, 1), dt.date(2024, 8, 5)) is expected


class TestLodging:

    @pytest.fixture
    def items(self, site, stay_dates):
        return [lodging_item(site, *stay_dates, guests=2)]

    def test_overlapping_stay_unavailable(self, items, site):
        assert not is_available(items, ItemType.LODGING, site.id, dt.date(2024, 8, 3), dt.date(2024, 8, 7))

    def test_checkout_day_is_free(self, items, site):
        assert is_available(items, ItemType.LODGING, site.id, dt.date(2024, 8, 5), dt.date(2024, 8, 8))

    def test_other_catalog_item_ignored(self, items):
        assert is_available(items, ItemType.LODGING, "site-2", dt.date(2024, 8, 3), dt.date(2024, 8, 7))

    def test_replaced_item_excluded(self, items, site):
        conflicts = find_conflicts(
            items, ItemType.LODGING, site.id, dt.date(2024, 8, 1), dt.date(2024, 8, 5),
            exclude_id=items[0].id,
        )
        assert conflicts == []


def test_empty_cart_is_available(site):
    assert is_available([], ItemType.LODGING, site.id, dt.date(2024, 8, 1), dt.date(2024, 8, 2))


def test_equipment_overlap(kayak):
    items = [equipment_item(kayak, dt.date(2024, 8, 1), dt.date(2024, 8, 4), 1)]
    assert not is_available(items, ItemType.EQUIPMENT, kayak.id, dt.date(2024, 8, 3), dt.date(2024, 8, 6))
    assert is_available(items, ItemType.EQUIPMENT, kayak.id, dt.date(2024, 8, 4), dt.date(2024, 8, 6))


def test_activity_same_day_conflicts_regardless_of_time(tour):
    items = [activity_item(tour, dt.date(2024, 9, 10), dt.time(9, 0), 2)]
    assert not is_available(items, ItemType.ACTIVITY, tour.id, dt.date(2024, 9, 10))
    assert is_available(items, ItemType.ACTIVITY, tour.id, dt.date(2024, 9, 11))


def test_types_do_not_cross(site):
    items = [lodging_item(site, dt.date(2024, 8, 1), dt.date(2024, 8, 5), guests=2)]
    assert is_available(items, ItemType.EQUIPMENT, site.id, dt.date(2024, 8, 2), dt.date(2024, 8, 3))
