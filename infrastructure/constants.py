"""
Constants Module - Centralized configuration values
===================================================

Single source of truth for storage keys, role and status names, defaults and
user-facing messages shared by the managers and the application facade.
"""

# Storage keys (one JSON file per key)
ITEMS_KEY = 'st_items'
USERS_KEY = 'st_users'
RESERVATIONS_KEY = 'st_reservations'
THEME_KEY = 'clubflow_theme'
DARK_MODE_KEY = 'clubflow_dark_mode'
SESSION_USER_KEY = 'clubflow_user'

# Settings defaults
DEFAULT_DATA_DIRECTORY = 'data'
DEFAULT_TIMEZONE = 'Europe/Lisbon'
DEFAULT_MIN_PASSWORD_LENGTH = 6
DEFAULT_LOW_STOCK_THRESHOLD = 2
DEFAULT_THEME_COLOR = '#2563eb'

# Roles
ROLE_ADMIN = 'admin'
ROLE_COACH = 'coach'
ROLE_SUPER_ADMIN = 'super-admin'
ROLES = (ROLE_ADMIN, ROLE_COACH, ROLE_SUPER_ADMIN)

# Bootstrap super-admin identity (never stored in the user collection)
DEFAULT_SUPER_ADMIN_USERNAME = 'sportstrack'
SUPER_ADMIN_ID = 'super-admin'
SUPER_ADMIN_NAME = 'Super Admin'
SUPER_ADMIN_EMAIL = 'superadmin@sporttrack.local'
SUPER_ADMIN_CLUB_NAME = 'Global Administration'

# Password reused by legacy seed data; never accepted as a new password
LEGACY_DEFAULT_PASSWORD = '123'

# Views
VIEW_DASHBOARD = 'dashboard'
VIEW_RESERVATIONS = 'reservations'
VIEW_INVENTORY = 'inventory'
VIEW_TEAM = 'team'
VIEW_SUPER_ADMIN = 'super-admin'

# Messages
MSG_RESERVATION_CONFIRMED = 'Reservation confirmed successfully!'
MSG_RESERVATION_UPDATED = 'Reservation updated successfully!'
MSG_RESERVATION_CANCELLED = 'Reservation cancelled.'
MSG_RESERVATION_RETURNED = 'Equipment returned.'
MSG_AVAILABILITY_ERROR = 'Availability error.'
MSG_ITEM_NOT_FOUND = 'Item not found.'
MSG_EMAIL_TAKEN = 'This email is already registered.'
MSG_USER_NOT_FOUND = 'User not found. Check the email or register your club.'
MSG_WRONG_PASSWORD = 'Incorrect password.'
MSG_RECOVERY_FAILED = 'Incorrect data. The email or recovery code does not match.'
MSG_NOT_AUTHORIZED = 'You are not allowed to perform this action.'
