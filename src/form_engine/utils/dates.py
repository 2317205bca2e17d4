"""Date helpers exposed to form definitions.

Values arrive from form data as ``date``/``datetime`` objects or strings.
Strings are accepted as ISO (``2026-01-23``, optionally with a time part)
or numeric day-first (``23.01.2026``, ``23/01/2026``). Unparseable or
empty input yields an empty string, never an exception, so a definition
can render partially filled data.
"""

import re
from datetime import date, datetime
from typing import Any, Optional

# Numeric day-first with separators, optional time part
_RE_NUMERIC = re.compile(r"^(\d{1,2})[./\-](\d{1,2})[./\-](\d{2,4})(?:\s.*)?$")


def _expand_year(year: int) -> int:
    """Expand 2-digit year to 4-digit (assume 2000-2099)."""
    if year < 100:
        return 2000 + year
    return year


def to_datetime(value: Any) -> Optional[datetime]:
    """Coerce a date-like value to datetime, or None."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)

    text = str(value).strip()
    if not text:
        return None
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        pass

    m = _RE_NUMERIC.match(text)
    if m:
        try:
            return datetime(_expand_year(int(m.group(3))), int(m.group(2)), int(m.group(1)))
        except ValueError:
            return None
    return None


def get_date_string(value: Any) -> str:
    """ISO date part (YYYY-MM-DD) or ''."""
    dt = to_datetime(value)
    return dt.date().isoformat() if dt else ""


def get_time_string(value: Any) -> str:
    """Hours and minutes (HH:MM) or ''."""
    dt = to_datetime(value)
    return f"{dt.hour:02d}:{dt.minute:02d}" if dt else ""


def get_date_time_string(value: Any) -> str:
    dt = to_datetime(value)
    return dt.isoformat() if dt else ""


def get_age(birth_date: Any, today: Optional[date] = None) -> str:
    """Age in whole years, formatted as 'N years', or ''."""
    birth = to_datetime(birth_date)
    if birth is None:
        return ""
    today = today or date.today()
    years = today.year - birth.year
    if (today.month, today.day) < (birth.month, birth.day):
        years -= 1
    return f"{years} years"
