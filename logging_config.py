"""
Logging Configuration for SportTrack
Rotating file logs plus console output, verbosity driven by PRODUCTION_MODE
"""

import logging
import logging.handlers
import os
import shutil
from datetime import datetime
from typing import Optional

# Logs of the current session only; the directory is cleared on each setup
LOG_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'logs', 'latest_log')

COMPONENT_LOGGERS = (
    'SportTrackApp',
    'AccountService',
    'UserManager',
    'InventoryManager',
    'ReservationManager',
    'JsonStore',
    'PreferenceStore',
)


def _clear_log_dir(log_dir: str) -> None:
    if not os.path.exists(log_dir):
        return
    for filename in os.listdir(log_dir):
        file_path = os.path.join(log_dir, filename)
        try:
            if os.path.isfile(file_path) or os.path.islink(file_path):
                os.unlink(file_path)
            elif os.path.isdir(file_path):
                shutil.rmtree(file_path)
        except OSError as e:
            print(f'Failed to delete {file_path}. Reason: {e}')


def setup_logging(production_mode: Optional[bool] = None, log_dir: str = LOG_DIR) -> None:
    """
    Set up logging with console and rotating file handlers.

    Previous logs in ``log_dir`` are removed before the new session starts.
    When ``production_mode`` is None it is read from the PRODUCTION_MODE
    environment variable.
    """
    if production_mode is None:
        production_mode = os.getenv('PRODUCTION_MODE', 'false').lower() == 'true'

    _clear_log_dir(log_dir)
    os.makedirs(log_dir, exist_ok=True)

    main_log_file = os.path.join(log_dir, 'sporttrack.log')
    debug_log_file = os.path.join(log_dir, 'sporttrack_debug.log')
    error_log_file = os.path.join(log_dir, 'sporttrack_errors.log')
    reservations_log_file = os.path.join(log_dir, 'reservations.log')

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.WARNING if production_mode else logging.DEBUG)
    root_logger.handlers = []

    detailed_formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d in %(funcName)s()] - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    console_formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.WARNING if production_mode else logging.INFO)
    console_handler.setFormatter(console_formatter)
    root_logger.addHandler(console_handler)

    main_file_handler = logging.handlers.RotatingFileHandler(
        main_log_file,
        maxBytes=10*1024*1024,  # 10MB
        backupCount=5,
        encoding='utf-8'
    )
    main_file_handler.setLevel(logging.WARNING if production_mode else logging.INFO)
    main_file_handler.setFormatter(detailed_formatter)
    root_logger.addHandler(main_file_handler)

    if not production_mode:
        debug_file_handler = logging.handlers.RotatingFileHandler(
            debug_log_file,
            maxBytes=50*1024*1024,  # 50MB
            backupCount=3,
            encoding='utf-8'
        )
        debug_file_handler.setLevel(logging.DEBUG)
        debug_file_handler.setFormatter(detailed_formatter)
        root_logger.addHandler(debug_file_handler)

    error_file_handler = logging.handlers.RotatingFileHandler(
        error_log_file,
        maxBytes=5*1024*1024,  # 5MB
        backupCount=5,
        encoding='utf-8'
    )
    error_file_handler.setLevel(logging.ERROR)
    error_file_handler.setFormatter(detailed_formatter)
    root_logger.addHandler(error_file_handler)

    # Booking activity gets its own file
    reservations_handler = logging.handlers.RotatingFileHandler(
        reservations_log_file,
        maxBytes=20*1024*1024,  # 20MB
        backupCount=5,
        encoding='utf-8'
    )
    reservations_handler.setLevel(logging.INFO if production_mode else logging.DEBUG)
    reservations_handler.setFormatter(detailed_formatter)
    reservation_logger = logging.getLogger('ReservationManager')
    reservation_logger.handlers = [reservations_handler]

    component_level = logging.INFO if production_mode else logging.DEBUG
    for name in COMPONENT_LOGGERS:
        logging.getLogger(name).setLevel(component_level)

    root_logger.info("="*80)
    root_logger.info(f"SportTrack Logging Initialized - {datetime.now()}")
    root_logger.info(f"Production Mode: {'ON' if production_mode else 'OFF'}")
    root_logger.info(f"Main log: {main_log_file}")
    if not production_mode:
        root_logger.info(f"Debug log: {debug_log_file}")
    root_logger.info(f"Error log: {error_log_file}")
    root_logger.info(f"Reservations log: {reservations_log_file}")
    root_logger.info("="*80)
