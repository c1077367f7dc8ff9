import datetime as dt
import json
import shutil

import pytest

from campcart.adapters import EphemeralCartAdapter
from campcart.adapters.ephemeral import CART_KEY
from campcart.errors import LocalStorageError
from campcart.models import ItemType, equipment_item, lodging_item
from campcart.pricing import price_line_item
from campcart.storage import LocalStorage

pytestmark = pytest.mark.anyio


@pytest.fixture
def storage_file(tmp_path):
    return tmp_path / "campcart" / "storage.json"


async def test_survives_restart(storage_file, site, stay_dates):
    item = price_line_item(lodging_item(site, *stay_dates, guests=2))
    await EphemeralCartAdapter(LocalStorage(storage_file)).put(item)

    assert await EphemeralCartAdapter(LocalStorage(storage_file)).load() == [item]


async def test_put_replaces_by_id(ephemeral, kayak):
    start, end = dt.date(2024, 8, 1), dt.date(2024, 8, 3)
    await ephemeral.put(price_line_item(equipment_item(kayak, start, end, 1)))
    items = await ephemeral.put(price_line_item(equipment_item(kayak, start, end, 2)))

    assert len(items) == 1
    assert items[0].quantity == 2


async def test_delete_by_catalog_item(ephemeral, site):
    await ephemeral.put(lodging_item(site, dt.date(2024, 8, 1), dt.date(2024, 8, 3), 2))
    await ephemeral.put(lodging_item(site, dt.date(2024, 8, 5), dt.date(2024, 8, 6), 2))

    assert await ephemeral.delete(site.id, ItemType.LODGING) == []


async def test_delete_single_line(ephemeral, site):
    first = lodging_item(site, dt.date(2024, 8, 1), dt.date(2024, 8, 3), 2)
    second = lodging_item(site, dt.date(2024, 8, 5), dt.date(2024, 8, 6), 2)
    await ephemeral.put(first)
    await ephemeral.put(second)

    assert await ephemeral.delete(site.id, ItemType.LODGING, line_id=first.id) == [second]


async def test_corrupt_cart_loads_empty(storage_file):
    storage_file.parent.mkdir(parents=True)
    storage_file.write_text(json.dumps({CART_KEY: [{"name": "missing type"}]}))

    assert await EphemeralCartAdapter(LocalStorage(storage_file)).load() == []


def test_unreadable_storage_file_starts_empty(storage_file):
    storage_file.parent.mkdir(parents=True)
    storage_file.write_text("{not json")

    storage = LocalStorage(storage_file)
    assert storage.get(CART_KEY) is None
    storage.set("auth_token", "abc")
    assert LocalStorage(storage_file).get("auth_token") == "abc"


async def test_failed_write_keeps_previous_cart(tmp_path, site, stay_dates):
    data_dir = tmp_path / "data"
    adapter = EphemeralCartAdapter(LocalStorage(data_dir / "storage.json"))
    first = price_line_item(lodging_item(site, *stay_dates, guests=2))
    await adapter.put(first)

    shutil.rmtree(data_dir)
    data_dir.write_text("not a directory")

    with pytest.raises(LocalStorageError):
        await adapter.put(price_line_item(lodging_item(site, dt.date(2024, 8, 10), dt.date(2024, 8, 12), 2)))

    assert await adapter.load() == [first]
