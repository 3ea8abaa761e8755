"""Rate history lookup.

A loan's rate history is a set of RateEvent records, at most one per
effective date. The rate in force on a given day is the most recent event
whose effective date is on or before that day.
"""
from __future__ import annotations

from datetime import date
from typing import Iterable, Optional

from .models import RateEvent


class DuplicateRateEventError(ValueError):
    """Raised when a rate event would share its effective date with another."""


def sort_rate_events(events: Iterable[RateEvent]) -> list[RateEvent]:
    return sorted(events, key=lambda e: e.effective_date)


def applicable_rate(events: Iterable[RateEvent], on: date) -> Optional[RateEvent]:
    """Return the rate event in force on *on*, or None if *on* precedes them all."""
    found: Optional[RateEvent] = None
    for event in sort_rate_events(events):
        if event.effective_date > on:
            break
        found = event
    return found


def ensure_new_effective_date(events: Iterable[RateEvent], effective_date: date) -> None:
    """Raise DuplicateRateEventError if *effective_date* already has an event."""
    for event in events:
        if event.effective_date == effective_date:
            raise DuplicateRateEventError(
                f"Rate event already exists for this effective date ({effective_date.isoformat()})."
            )
