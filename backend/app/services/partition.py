"""
Split a user's trips into upcoming and past.

A trip is upcoming when it starts at or after ``now``; a trip starting
exactly at ``now`` counts as upcoming. Input order is preserved, so callers
pass trips already sorted by start date.
"""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Sequence


def _as_naive_utc(value: datetime) -> datetime:
    # Trip dates are stored as naive UTC
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


@dataclass
class TripPartition:
    trips: list = field(default_factory=list)
    upcoming: list = field(default_factory=list)

    @property
    def past(self) -> list:
        upcoming_ids = {id(t) for t in self.upcoming}
        return [t for t in self.trips if id(t) not in upcoming_ids]

    @property
    def count(self) -> int:
        return len(self.trips)

    @property
    def upcoming_count(self) -> int:
        return len(self.upcoming)

    def summary(self) -> str:
        if not self.trips:
            return "You have no trips yet."
        noun = "trip" if self.count == 1 else "trips"
        text = f"You have {self.count} {noun}"
        if self.upcoming:
            text += f", {self.upcoming_count} upcoming"
        return text + "."


def is_upcoming(start_date: datetime, now: datetime) -> bool:
    return _as_naive_utc(start_date) >= _as_naive_utc(now)


def partition(trips: Sequence, now: datetime) -> TripPartition:
    trips = list(trips)
    upcoming = [t for t in trips if is_upcoming(t.start_date, now)]
    return TripPartition(trips=trips, upcoming=upcoming)
