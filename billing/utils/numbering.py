# billing/utils/numbering.py
"""Sequential document numbers of the form PREFIX-YYMM-NNN."""

from datetime import date
from typing import Iterable

from billing.config import DOCUMENT_SEQUENCE_WIDTH
from billing.constants import FiscalCalendar
from billing.utils.date_converter import fiscal_period_code

import logging
logger = logging.getLogger(__name__)


def next_document_number(prefix: str,
                         existing_numbers: Iterable[str],
                         on_date: date,
                         calendar: FiscalCalendar = FiscalCalendar.GREGORIAN) -> str:
    """
    Next number in the fiscal month of on_date: highest existing sequence for
    that month plus one. Numbers that don't parse are ignored.
    """
    month_prefix = f"{prefix}-{fiscal_period_code(on_date, calendar)}-"
    max_number = 0
    for number in existing_numbers:
        if not number or not number.startswith(month_prefix):
            continue
        try:
            sequence = int(number[len(month_prefix):])
        except ValueError:
            logger.debug(f"Skipping unparseable document number '{number}'.")
            continue
        max_number = max(max_number, sequence)

    return f"{month_prefix}{max_number + 1:0{DOCUMENT_SEQUENCE_WIDTH}d}"
