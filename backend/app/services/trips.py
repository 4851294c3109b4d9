import logging
from datetime import date, datetime, timezone
from typing import Any, Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from app.errors import (
    GeocodeError,
    NotFoundError,
    PersistenceError,
    ServiceError,
    ServiceResult,
    ValidationError,
)
from app.models.account import Account
from app.models.location import Location
from app.models.trip import Trip
from app.services.geocoding import GeocodeResult, GeocodingClient
from app.services.partition import TripPartition, partition

logger = logging.getLogger(__name__)

REQUIRED_TRIP_FIELDS = ("name", "destination", "start_date", "end_date", "owner_id")
OPTIONAL_TRIP_FIELDS = ("country", "state", "category", "image_url")

# Attempts for the count-then-insert of a new stop when another writer
# takes the same order slot first
APPEND_ATTEMPTS = 3


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def _parse_date(value: Any, field_name: str) -> datetime:
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    else:
        try:
            parsed = datetime.fromisoformat(str(value).strip().replace("Z", "+00:00"))
        except ValueError:
            raise ValidationError(f"Invalid {field_name}: {value!r}")

    # Stored as naive UTC
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


class TripService:

    def __init__(self, db: Session, geocoder: Optional[GeocodingClient] = None):
        self.db = db
        self.geocoder = geocoder

    def create_trip(self, fields: dict) -> ServiceResult[int]:
        missing = [name for name in REQUIRED_TRIP_FIELDS if _is_blank(fields.get(name))]
        if missing:
            return ServiceResult.failure(
                ValidationError(f"Missing required fields: {', '.join(missing)}")
            )

        try:
            start_date = _parse_date(fields["start_date"], "start_date")
            end_date = _parse_date(fields["end_date"], "end_date")
        except ValidationError as e:
            return ServiceResult.failure(e)

        try:
            owner = self.db.query(Account.id).filter(Account.id == fields["owner_id"]).first()
            if owner is None:
                return ServiceResult.failure(NotFoundError("Account not found"))

            trip = Trip(
                account_id=fields["owner_id"],
                name=str(fields["name"]).strip(),
                destination=str(fields["destination"]).strip(),
                start_date=start_date,
                end_date=end_date,
                **{name: fields.get(name) or None for name in OPTIONAL_TRIP_FIELDS},
            )
            self.db.add(trip)
            self.db.commit()
            self.db.refresh(trip)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to create trip: {e}")
            return ServiceResult.failure(PersistenceError())

        logger.info(f"Created trip {trip.id} for account {trip.account_id}")
        return ServiceResult.success(trip.id)

    def get_trips_for_owner(
        self,
        owner_id: Optional[int],
        now: Optional[datetime] = None,
    ) -> ServiceResult[TripPartition]:
        if _is_blank(owner_id):
            return ServiceResult.failure(ValidationError("Missing owner id"))

        try:
            trips = (
                self.db.query(Trip)
                .filter(Trip.account_id == owner_id)
                .order_by(Trip.start_date.asc(), Trip.id.asc())
                .all()
            )
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to list trips for account {owner_id}: {e}")
            return ServiceResult.failure(PersistenceError())

        return ServiceResult.success(partition(trips, now or datetime.utcnow()))

    def get_trip_by_id(self, trip_id: int, caller_id: Optional[int] = None) -> ServiceResult[Trip]:
        try:
            return ServiceResult.success(self._load_trip(trip_id, caller_id))
        except ServiceError as e:
            return ServiceResult.failure(e)

    async def append_location(
        self,
        trip_id: int,
        address: Optional[str],
        caller_id: Optional[int] = None,
    ) -> ServiceResult[Trip]:
        """
        Geocode ``address`` and add it as the last stop of the trip.

        The geocoding call happens outside any transaction; only the
        count-and-insert runs under the trip's row lock.
        """
        if _is_blank(address):
            return ServiceResult.failure(ValidationError("Address is required"))
        if self.geocoder is None:
            return ServiceResult.failure(ServiceError("No geocoder configured"))

        try:
            self._load_trip(trip_id, caller_id)
            place = await self._geocode(address.strip())
            self._append_with_next_order(trip_id, place)
            return ServiceResult.success(self._load_trip(trip_id, caller_id))
        except ServiceError as e:
            return ServiceResult.failure(e)

    async def _geocode(self, address: str) -> GeocodeResult:
        try:
            return await self.geocoder.geocode(address)
        except ServiceError:
            raise
        except Exception as e:
            logger.error(f"Geocoder failed for '{address}': {e!r}")
            raise GeocodeError("Geocoding service unavailable")

    def _load_trip(self, trip_id: int, caller_id: Optional[int] = None) -> Trip:
        try:
            trip = (
                self.db.query(Trip)
                .options(selectinload(Trip.locations))
                .filter(Trip.id == trip_id)
                .first()
            )
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to load trip {trip_id}: {e}")
            raise PersistenceError()

        # Someone else's trip is reported exactly like a missing one
        if trip is None or (caller_id is not None and trip.account_id != caller_id):
            raise NotFoundError("Trip not found")
        return trip

    def _count_locations(self, trip_id: int) -> int:
        return (
            self.db.query(func.count(Location.id))
            .filter(Location.trip_id == trip_id)
            .scalar()
        )

    def _append_with_next_order(self, trip_id: int, place: GeocodeResult) -> Location:
        for attempt in range(1, APPEND_ATTEMPTS + 1):
            try:
                # Row lock serializes appends per trip where the store
                # supports it; SQLite serializes writers on its own
                locked = (
                    self.db.query(Trip.id)
                    .filter(Trip.id == trip_id)
                    .with_for_update()
                    .first()
                )
                if locked is None:
                    self.db.rollback()
                    raise NotFoundError("Trip not found")

                location = Location(
                    trip_id=trip_id,
                    lat=place.lat,
                    lng=place.lng,
                    title=place.display_name,
                    order=self._count_locations(trip_id),
                )
                self.db.add(location)
                self.db.commit()
            except IntegrityError as e:
                self.db.rollback()
                logger.warning(
                    f"Order slot taken on trip {trip_id} (attempt {attempt}/{APPEND_ATTEMPTS}): {e.orig}"
                )
                continue
            except SQLAlchemyError as e:
                self.db.rollback()
                logger.error(f"Failed to append location to trip {trip_id}: {e}")
                raise PersistenceError()

            logger.info(f"Appended stop {location.id} to trip {trip_id} at order {location.order}")
            return location

        logger.error(f"Gave up appending to trip {trip_id} after {APPEND_ATTEMPTS} attempts")
        raise PersistenceError()
