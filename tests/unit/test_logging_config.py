import logging

import pytest

from logging_config import setup_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    reservation_logger = logging.getLogger('ReservationManager')
    saved = (list(root.handlers), root.level, list(reservation_logger.handlers))
    yield
    for handler in root.handlers + reservation_logger.handlers:
        handler.close()
    root.handlers, root.level = saved[0], saved[1]
    reservation_logger.handlers = saved[2]


def test_setup_logging_creates_session_files(tmp_path, restore_root_logger):
    log_dir = tmp_path / 'logs'
    log_dir.mkdir()
    (log_dir / 'old.log').write_text('previous session', encoding='utf-8')

    setup_logging(production_mode=False, log_dir=str(log_dir))
    logging.getLogger('ReservationManager').info('booking event')

    names = {path.name for path in log_dir.iterdir()}
    assert 'old.log' not in names
    assert {'sporttrack.log', 'sporttrack_debug.log', 'sporttrack_errors.log', 'reservations.log'} <= names
    assert 'booking event' in (log_dir / 'reservations.log').read_text(encoding='utf-8')


def test_production_mode_skips_debug_file(tmp_path, restore_root_logger):
    setup_logging(production_mode=True, log_dir=str(tmp_path))

    assert not (tmp_path / 'sporttrack_debug.log').exists()
    assert logging.getLogger().level == logging.WARNING
