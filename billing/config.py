# billing/config.py

import os
import logging
from decimal import Decimal

# --- Database Configuration ---
BASE_DIR = os.environ.get(
    "BILLING_HOME",
    os.path.dirname(os.path.dirname(os.path.abspath(__file__))),  # billing/ -> project root
)
DATA_DIR = os.path.join(BASE_DIR, "data")
DB_NAME = "billing_data.db"
DATABASE_PATH = os.path.join(DATA_DIR, DB_NAME)

# --- Logging Configuration ---
LOGS_DIR = os.path.join(BASE_DIR, "logs")
LOG_FILE_NAME = "app.log"
LOG_FILE_PATH = os.path.join(LOGS_DIR, LOG_FILE_NAME)

LOG_LEVEL = logging.DEBUG
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(module)s.%(funcName)s:%(lineno)d - %(message)s'

LOGGING_CONFIG = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'standard': {
            'format': LOG_FORMAT,
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'standard',
            'level': logging.DEBUG,
        },
        'file': {
            'class': 'logging.handlers.RotatingFileHandler',
            'formatter': 'standard',
            'filename': LOG_FILE_PATH,
            'maxBytes': 1024*1024*5,  # 5 MB
            'backupCount': 5,
            'level': logging.INFO,
            'encoding': 'utf-8',
        },
    },
    'root': {
        'handlers': ['console', 'file'],
        'level': LOG_LEVEL,
    },
}

# --- Application Settings (Defaults that might be overridden by DB settings) ---
DEFAULT_LOW_STOCK_ALERT = 5
DEFAULT_GST_PERCENTAGE = Decimal("18")
DEFAULT_UNIT = "pcs"

INVOICE_NUMBER_PREFIX = "INV"
SALES_RETURN_PREFIX = "SR"
PURCHASE_RETURN_PREFIX = "PR"
DOCUMENT_SEQUENCE_WIDTH = 3

FISCAL_CALENDAR = "gregorian"  # or "jalali"

# Keys in the settings table that override the defaults above
SETTING_FISCAL_CALENDAR = "fiscal_calendar"
SETTING_LOW_STOCK_ALERT = "low_stock_alert"


def ensure_directories() -> None:
    """Create the data and logs directories if they don't exist."""
    for directory in (DATA_DIR, LOGS_DIR):
        if not os.path.exists(directory):
            os.makedirs(directory)
