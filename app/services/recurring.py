from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, List, Mapping, Optional

from app.models.recurring import Frequency, RecurringStatus
from app.utils.dates import add_months, parse_datetime

# Upper bound on catch-up occurrences materialised in a single run.
MAX_OCCURRENCES_PER_RUN = 366

_DAY_STEPS = {
    Frequency.DAILY: 1,
    Frequency.WEEKLY: 7,
    Frequency.BIWEEKLY: 14,
}

_MONTH_STEPS = {
    Frequency.MONTHLY: 1,
    Frequency.QUARTERLY: 3,
    Frequency.YEARLY: 12,
}


@dataclass
class DueOccurrences:
    dates: List[datetime] = field(default_factory=list)
    next_occurrence_date: Optional[datetime] = None
    completed: bool = False


def advance_occurrence(when: datetime, frequency: Frequency | str) -> datetime:
    frequency = Frequency(frequency)
    if frequency in _DAY_STEPS:
        return when + timedelta(days=_DAY_STEPS[frequency])
    return add_months(when, _MONTH_STEPS[frequency])


def due_occurrences(recurring: Mapping[str, Any], now: datetime) -> DueOccurrences:
    """
    Dates of a recurring series that fell due up to ``now``.

    The result also carries the series' new next occurrence and whether it
    ran past its end date.
    """
    next_date = parse_datetime(recurring["next_occurrence_date"])
    status = RecurringStatus(recurring.get("status", RecurringStatus.ACTIVE))
    if status is not RecurringStatus.ACTIVE:
        return DueOccurrences(next_occurrence_date=next_date, completed=status is RecurringStatus.COMPLETED)

    end_date = recurring.get("end_date")
    end_date = parse_datetime(end_date) if end_date else None
    now = parse_datetime(now)

    result = DueOccurrences()
    while next_date <= now and len(result.dates) < MAX_OCCURRENCES_PER_RUN:
        if end_date is not None and next_date > end_date:
            break
        result.dates.append(next_date)
        next_date = advance_occurrence(next_date, recurring["frequency"])

    result.next_occurrence_date = next_date
    result.completed = end_date is not None and next_date > end_date
    return result
