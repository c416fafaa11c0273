"""Unit tests for InventoryManager."""
from tracking import t

from dataclasses import replace

import pytest

from inventory import InventoryManager
from storage import JsonStore

from tests.helpers import make_reservation


def _create_manager(tmp_path):
    t('tests.unit.test_inventory_manager._create_manager')
    return InventoryManager(JsonStore(tmp_path / 'data'))


def test_add_item_persists(tmp_path):
    t('tests.unit.test_inventory_manager.test_add_item_persists')
    manager = _create_manager(tmp_path)

    item = manager.add_item('Bibs', 12, category='Apparel', image_url='bibs.png')

    reloaded = _create_manager(tmp_path)
    assert reloaded.get_item(item.id) == item
    assert reloaded.get_item(item.id).image_url == 'bibs.png'


def test_add_item_rejects_duplicate_id_and_negative_quantity(tmp_path):
    t('tests.unit.test_inventory_manager.test_add_item_rejects_duplicate_id_and_negative_quantity')
    manager = _create_manager(tmp_path)
    manager.add_item('Cones', 10, item_id='cones')

    with pytest.raises(ValueError):
        manager.add_item('Cones again', 1, item_id='cones')
    with pytest.raises(ValueError):
        manager.add_item('Broken', -1)


def test_update_item_requires_existing_item(tmp_path):
    t('tests.unit.test_inventory_manager.test_update_item_requires_existing_item')
    manager = _create_manager(tmp_path)
    item = manager.add_item('Cones', 10)

    assert manager.update_item(replace(item, quantity=20)).success is True
    assert manager.get_item(item.id).quantity == 20
    assert manager.update_item(replace(item, id='missing')).success is False


def test_delete_item_blocked_by_active_reservation(tmp_path):
    t('tests.unit.test_inventory_manager.test_delete_item_blocked_by_active_reservation')
    manager = _create_manager(tmp_path)
    manager.add_item('Cones', 10, item_id='cones')
    active = make_reservation('r1', [('cones', 2)])

    blocked = manager.delete_item('cones', [active])
    allowed = manager.delete_item('cones', [])

    assert blocked.success is False
    assert 'Cones' in blocked.message
    assert allowed.success is True
    assert manager.get_item('cones') is None
    assert manager.delete_item('cones', []).success is False


def test_apply_damage_floors_at_zero(tmp_path):
    t('tests.unit.test_inventory_manager.test_apply_damage_floors_at_zero')
    manager = _create_manager(tmp_path)
    manager.add_item('Balls', 3, item_id='balls')

    assert manager.apply_damage('balls', 2).quantity == 1
    assert manager.apply_damage('balls', 9).quantity == 0
    assert manager.apply_damage('unknown', 1) is None


def test_low_stock_items(tmp_path):
    t('tests.unit.test_inventory_manager.test_low_stock_items')
    manager = _create_manager(tmp_path)
    manager.add_item('Cones', 10, item_id='cones')
    manager.add_item('Balls', 2, item_id='balls')

    assert [item.id for item in manager.low_stock_items(2)] == ['balls']


def test_invalid_records_skipped_on_load(tmp_path):
    t('tests.unit.test_inventory_manager.test_invalid_records_skipped_on_load')
    store = JsonStore(tmp_path / 'data')
    store.save('st_items', [
        {'id': 'ok', 'name': 'Cones', 'quantity': 4},
        {'id': 'neg', 'name': 'Bad', 'quantity': -3},
        {'name': 'No id'},
    ])

    manager = InventoryManager(store)

    assert [item.id for item in manager.list_items()] == ['ok']
