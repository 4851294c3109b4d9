"""
Itinerary ordering.

A trip's stops carry ``order`` values 0..N-1. Reordering takes the full new
sequence of location ids (what the client shows after a drag) and rewrites
every index from it in one transaction.
"""
import logging
from typing import Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.errors import (
    NotFoundError,
    PersistenceError,
    ServiceError,
    ServiceResult,
    ValidationError,
)
from app.models.location import Location
from app.models.trip import Trip

logger = logging.getLogger(__name__)


def move_location(stops: Sequence[dict], old_index: int, new_index: int) -> list[dict]:
    """
    Move one stop and relabel every stop's ``order`` to its new list index.

    This is the same transformation the client applies right after a drag
    gesture, so its id sequence is exactly what gets sent to ``reorder``.
    """
    size = len(stops)
    if not (0 <= old_index < size) or not (0 <= new_index < size):
        raise ValidationError(f"Position out of range (itinerary has {size} stops)")

    items = list(stops)
    moved = items.pop(old_index)
    items.insert(new_index, moved)
    return [{**stop, "order": index} for index, stop in enumerate(items)]


def stop_dict(location: Location) -> dict:
    return {
        "id": location.id,
        "lat": location.lat,
        "lng": location.lng,
        "title": location.title,
        "order": location.order,
    }


class OrderingService:

    def __init__(self, db: Session):
        self.db = db

    def reorder(
        self,
        trip_id: int,
        ordered_location_ids: Sequence[int],
        caller_id: Optional[int] = None,
    ) -> ServiceResult[None]:
        try:
            self._reorder(trip_id, ordered_location_ids, caller_id)
        except ServiceError as e:
            return ServiceResult.failure(e)
        return ServiceResult.success()

    def move(
        self,
        trip_id: int,
        location_id: int,
        new_index: int,
        caller_id: Optional[int] = None,
    ) -> ServiceResult[list[dict]]:
        """Apply a single drag (one stop to a new position) and persist it."""
        try:
            stops = [stop_dict(loc) for loc in self._locations(trip_id, caller_id)]
            positions = [s["id"] for s in stops]
            if location_id not in positions:
                raise ValidationError(f"Location {location_id} is not part of trip {trip_id}")

            moved = move_location(stops, positions.index(location_id), new_index)
            self._reorder(trip_id, [s["id"] for s in moved], caller_id)
        except ServiceError as e:
            return ServiceResult.failure(e)
        return ServiceResult.success(moved)

    def ordered_ids(self, trip_id: int) -> list[int]:
        rows = (
            self.db.query(Location.id)
            .filter(Location.trip_id == trip_id)
            .order_by(Location.order)
            .all()
        )
        return [row[0] for row in rows]

    def _locations(self, trip_id: int, caller_id: Optional[int]) -> list[Location]:
        try:
            trip = self.db.query(Trip).filter(Trip.id == trip_id).first()
            if trip is None or (caller_id is not None and trip.account_id != caller_id):
                raise NotFoundError("Trip not found")
            return (
                self.db.query(Location)
                .filter(Location.trip_id == trip_id)
                .order_by(Location.order)
                .all()
            )
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to load itinerary for trip {trip_id}: {e}")
            raise PersistenceError()

    def _reorder(self, trip_id: int, ordered_location_ids: Sequence[int], caller_id: Optional[int]):
        ordered_ids = list(ordered_location_ids)

        try:
            trip = (
                self.db.query(Trip)
                .filter(Trip.id == trip_id)
                .with_for_update()
                .first()
            )
            if trip is None or (caller_id is not None and trip.account_id != caller_id):
                raise NotFoundError("Trip not found")

            locations = self.db.query(Location).filter(Location.trip_id == trip_id).all()
            by_id = {loc.id: loc for loc in locations}

            if len(ordered_ids) != len(set(ordered_ids)):
                raise ValidationError("Location ids must not repeat")
            if set(ordered_ids) != set(by_id):
                missing = sorted(set(by_id) - set(ordered_ids))
                unknown = sorted(set(ordered_ids) - set(by_id))
                raise ValidationError(
                    f"Location ids must match the trip's itinerary "
                    f"(missing: {missing}, unknown: {unknown})"
                )

            # Park every stop on a negative slot first so (trip_id, order)
            # stays unique after each individual UPDATE
            for index, location_id in enumerate(ordered_ids):
                by_id[location_id].order = -(index + 1)
            self.db.flush()

            for index, location_id in enumerate(ordered_ids):
                by_id[location_id].order = index
            self.db.commit()
        except ServiceError:
            self.db.rollback()
            raise
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Reorder of trip {trip_id} failed: {e}")
            raise PersistenceError()

        logger.info(f"Reordered {len(ordered_ids)} stops on trip {trip_id}")
