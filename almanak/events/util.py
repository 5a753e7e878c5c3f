"""
Event utility functions - date and category parsing
"""

import logging
import re
from datetime import date, datetime

from almanak.constants import DATE_FORMAT
from almanak.exceptions import CategoryArityError, DateFormatError, DateParseError

logger = logging.getLogger(__name__)

# strptime happily takes 2023-3-3, which would not survive being written back out
DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def validate_date_format(date_str: str) -> bool:
    """
    Check that a date string is laid out exactly as YYYY-MM-DD, zero-padded
    """
    return DATE_RE.match(date_str) is not None


def parse_date(date_str: str) -> date:
    """
    Parse a date - YYYY-MM-DD
    """
    try:
        return datetime.strptime(date_str, DATE_FORMAT).date()
    except ValueError as e:
        raise DateParseError(f"Invalid date '{date_str}': {e}") from e


def parse_user_date(date_str: str) -> date:
    """
    Parse a date given by the user. Unlike parse_date(), the layout has to be exactly
    YYYY-MM-DD before we even try to parse it.
    """
    if not validate_date_format(date_str):
        raise DateFormatError(f"Invalid date '{date_str}', use format YYYY-MM-DD")
    return parse_date(date_str)


def split_category(categories: str, delimiter: str) -> tuple[str, str]:
    """
    Split a category string into its primary and secondary parts, like "work/meeting".
    Missing parts are empty strings.
    """
    parts = [p.strip() for p in categories.split(delimiter)]
    if len(parts) > 2:
        raise CategoryArityError(
            f"Too many parts in category '{categories}', expected at most 2"
        )

    primary = parts[0]
    secondary = parts[1] if len(parts) == 2 else ""
    return (primary, secondary)
