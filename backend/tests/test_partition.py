"""Tests for splitting trips into upcoming and past."""
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

from app.services.partition import TripPartition, is_upcoming, partition

NOW = datetime(2025, 6, 1, 12, 0, 0)


def _trip(name, start):
    return SimpleNamespace(name=name, start_date=start)


def _trips():
    return [
        _trip("Lisbon", NOW - timedelta(days=30)),
        _trip("Oslo", NOW - timedelta(seconds=1)),
        _trip("Tokyo", NOW),
        _trip("Lima", NOW + timedelta(days=10)),
    ]


class TestPartition:
    def test_start_at_now_is_upcoming(self):
        assert is_upcoming(NOW, NOW)
        assert not is_upcoming(NOW - timedelta(microseconds=1), NOW)

    def test_upcoming_preserves_order(self):
        result = partition(_trips(), NOW)
        assert [t.name for t in result.upcoming] == ["Tokyo", "Lima"]

    def test_all_contains_every_trip(self):
        trips = _trips()
        result = partition(trips, NOW)
        assert result.trips == trips

    def test_upcoming_and_past_split_the_list(self):
        trips = _trips()
        result = partition(trips, NOW)

        assert all(t in trips for t in result.upcoming)
        assert all(t.start_date >= NOW for t in result.upcoming)
        assert all(t.start_date < NOW for t in result.past)
        assert len(result.upcoming) + len(result.past) == len(trips)

    def test_aware_now_compared_as_utc(self):
        aware_now = (NOW + timedelta(hours=2)).replace(tzinfo=timezone(timedelta(hours=2)))
        result = partition(_trips(), aware_now)
        assert [t.name for t in result.upcoming] == ["Tokyo", "Lima"]

    def test_deterministic(self):
        trips = _trips()
        first = partition(trips, NOW)
        second = partition(trips, NOW)
        assert first.upcoming == second.upcoming

    def test_empty(self):
        result = partition([], NOW)
        assert result.trips == []
        assert result.upcoming == []


class TestSummary:
    def test_no_trips(self):
        assert TripPartition().summary() == "You have no trips yet."

    def test_single_trip_none_upcoming(self):
        result = partition([_trip("Lisbon", NOW - timedelta(days=1))], NOW)
        assert result.summary() == "You have 1 trip."

    def test_counts_upcoming(self):
        result = partition(_trips(), NOW)
        assert result.count == 4
        assert result.upcoming_count == 2
        assert result.summary() == "You have 4 trips, 2 upcoming."
