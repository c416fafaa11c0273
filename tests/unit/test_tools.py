from tracking import t

import pytest

import scripts.tools as tools
from clubapp import create_app
from storage import JsonStore

from tests.helpers import make_settings


@pytest.fixture(autouse=True)
def _no_log_files(monkeypatch):
    calls = []
    monkeypatch.setattr(tools, 'setup_logging', lambda **kwargs: calls.append(kwargs))
    return calls


def test_stock_and_listing_commands(tmp_path, capsys, _no_log_files):
    t('tests.unit.test_tools.test_stock_and_listing_commands')
    settings = make_settings(tmp_path)
    app = create_app(settings)
    app.register_club('Ana', 'ana@lions.pt', 'secret1', 'Lions', 'PIN1234')
    app.add_item('Cones', 10)
    cones = app.list_items()[0].id
    app.create_reservation([{'itemId': cones, 'quantity': 6}], '2024-01-01', '09:00', '10:00')
    data_dir = str(settings.data_path)

    assert tools.main(['--data-dir', data_dir, 'stock', '2024-01-01', '09:30', '10:30']) == 0
    assert 'Cones: 4/10 free' in capsys.readouterr().out
    assert _no_log_files[0]['log_dir'] == tools.LOG_DIR

    tools.main(['--data-dir', data_dir, 'list-clubs'])
    assert 'Lions: Ana <ana@lions.pt>, 0 coach(es)' in capsys.readouterr().out

    tools.main(['--data-dir', data_dir, 'list-reservations'])
    assert '[active] Cones x6' in capsys.readouterr().out


def test_empty_inventory(tmp_path, capsys):
    t('tests.unit.test_tools.test_empty_inventory')
    tools.main(['--data-dir', str(tmp_path / 'empty'), 'list-items'])

    assert 'Inventory is empty.' in capsys.readouterr().out


def test_inspection_leaves_legacy_users_untouched(tmp_path, capsys):
    t('tests.unit.test_tools.test_inspection_leaves_legacy_users_untouched')
    settings = make_settings(tmp_path)
    legacy = [{'id': 'admin-1', 'name': 'Ana', 'email': 'ana@lions.pt', 'role': 'admin',
               'clubName': 'Lions', 'password': 'secret1'}]
    JsonStore(settings.data_path).save('st_users', legacy)

    tools.main(['--data-dir', str(settings.data_path), 'list-clubs'])

    assert 'Lions: Ana <ana@lions.pt>' in capsys.readouterr().out
    assert JsonStore(settings.data_path).load('st_users', []) == legacy
