"""
Service Status

Derives a record's service status from its next service date.

The current date is always a parameter: nothing here reads a clock, so
the same inputs give the same answer and callers decide what "today" is.
"""

from collections import Counter
from datetime import date, timedelta
from enum import Enum
from typing import Iterable

from garage_tracker.db.models import ServiceRecord

UPCOMING_WINDOW = timedelta(days=7)
TOP_MAKES_LIMIT = 5


class ServiceStatus(str, Enum):
    OVERDUE = "overdue"
    UPCOMING = "upcoming"
    SCHEDULED = "scheduled"


def classify_service_date(next_service_date: date, today: date) -> ServiceStatus:
    """
    Classify a next-service date relative to today.

    - overdue:   next < today
    - upcoming:  today <= next < today + 7 days
    - scheduled: anything later
    """
    if next_service_date < today:
        return ServiceStatus.OVERDUE
    if next_service_date < today + UPCOMING_WINDOW:
        return ServiceStatus.UPCOMING
    return ServiceStatus.SCHEDULED


def summarize_records(records: Iterable[ServiceRecord], today: date) -> dict:
    """
    Build dashboard statistics for a set of records.

    Returns:
        Dictionary with:
        - total: number of records
        - overdue / upcoming / scheduled: count per status
        - top_makes: up to five {"name", "value"} entries, most common make first
    """
    records = list(records)
    statuses = Counter(classify_service_date(r.next_service_date, today) for r in records)
    makes = Counter(r.make for r in records)

    # Ties broken by name so the chart order is stable
    top_makes = sorted(makes.items(), key=lambda item: (-item[1], item[0]))[:TOP_MAKES_LIMIT]

    return {
        "total": len(records),
        "overdue": statuses[ServiceStatus.OVERDUE],
        "upcoming": statuses[ServiceStatus.UPCOMING],
        "scheduled": statuses[ServiceStatus.SCHEDULED],
        "top_makes": [{"name": name, "value": count} for name, count in top_makes],
    }
