"""Free-form date parsing for list ordering.

Frontmatter dates are kept as the author wrote them; they are only
interpreted when a list page sorts by date.
"""

from __future__ import annotations

from datetime import date, datetime

# Tried in order; the first successful parse wins. Ambiguous slash forms
# are accepted as given (day-first is tried before month-first).
DATE_FORMATS: tuple[str, ...] = (
    "%Y-%m-%d",  # 2024-01-15
    "%B %d, %Y",  # January 15, 2024
    "%b %d, %Y",  # Jan 15, 2024
    "%d/%m/%Y",  # 15/01/2024
    "%m/%d/%Y",  # 01/15/2024
)


def parse_date(value: str | None) -> date | None:
    """Parse *value* with the first matching entry of :data:`DATE_FORMATS`.

    Returns None for missing, blank, or unparseable input (including
    impossible calendar dates such as ``2024-02-30``).

    Examples:
        >>> parse_date("2024-01-15")
        datetime.date(2024, 1, 15)
        >>> parse_date("Jan 15, 2024")
        datetime.date(2024, 1, 15)
        >>> parse_date("15th January 2024") is None
        True
    """
    if not value:
        return None
    text = value.strip()
    if not text:
        return None
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None
