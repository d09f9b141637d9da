"""
Input Validators and Sanitizers

This module provides validation and sanitization functions for user inputs.
Schemas call into these so the same rules apply wherever a value enters
the system.
"""

import re
from datetime import date
from typing import Optional, Union

ISO_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")

MAX_SEARCH_LENGTH = 100


def parse_service_date(value: Union[str, date]) -> date:
    """
    Parse a calendar date in YYYY-MM-DD form.

    Only the plain ISO calendar form is accepted: no time component, no
    week dates, no compact "20240101" form.

    Args:
        value: A date, or its ISO string form

    Returns:
        The parsed date

    Raises:
        ValueError: If the value is not a well-formed calendar date
    """
    if isinstance(value, date):
        return value

    if not isinstance(value, str) or not ISO_DATE_PATTERN.match(value.strip()):
        raise ValueError("must be a calendar date in YYYY-MM-DD format")

    try:
        return date.fromisoformat(value.strip())
    except ValueError:
        raise ValueError(f"'{value}' is not a valid calendar date")


def sanitize_search_term(search: Optional[str]) -> Optional[str]:
    """
    Normalize a free-text search term.

    Returns:
        The stripped term, truncated to MAX_SEARCH_LENGTH, or None if empty
    """
    if not search or not isinstance(search, str):
        return None

    search = search.strip()
    if not search:
        return None

    return search[:MAX_SEARCH_LENGTH]
