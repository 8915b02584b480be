# billing/utils/date_converter.py

from datetime import date, datetime
from typing import Union
import jdatetime

from billing.constants import FiscalCalendar

# Requires the jdatetime library: pip install jdatetime

def fiscal_period_code(on_date: Union[date, datetime], calendar: FiscalCalendar = FiscalCalendar.GREGORIAN) -> str:
    """Two-digit year + two-digit month of the fiscal month containing on_date, e.g. '2410'."""
    if isinstance(on_date, datetime):
        on_date = on_date.date()
    if calendar == FiscalCalendar.JALALI:
        j_date = jdatetime.date.fromgregorian(date=on_date)
        year, month = j_date.year, j_date.month
    else:
        year, month = on_date.year, on_date.month
    return f"{year % 100:02d}{month:02d}"
