from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from app.api.deps import get_current_account_id, get_geocoding_client, unwrap_or_raise
from app.database import get_db
from app.schemas.trip import (
    AppendLocationRequest,
    LocationResponse,
    MoveLocationRequest,
    ReorderRequest,
    TripCreate,
    TripDetailResponse,
    TripResponse,
)
from app.services.geocoding import GeocodingClient
from app.services.ordering import OrderingService
from app.services.trips import TripService

router = APIRouter()


@router.get("/api/trips")
async def list_trips(
    account_id: int = Depends(get_current_account_id),
    db: Session = Depends(get_db),
):
    result = unwrap_or_raise(TripService(db).get_trips_for_owner(account_id))
    return {
        "trips": [TripResponse.model_validate(t) for t in result.trips],
        "upcoming_trips": [TripResponse.model_validate(t) for t in result.upcoming],
        "count": result.count,
        "upcoming_count": result.upcoming_count,
        "summary": result.summary(),
    }


@router.post("/api/trips", status_code=status.HTTP_201_CREATED)
async def create_trip(
    trip: TripCreate,
    account_id: int = Depends(get_current_account_id),
    db: Session = Depends(get_db),
):
    fields = {**trip.model_dump(), "owner_id": account_id}
    trip_id = unwrap_or_raise(TripService(db).create_trip(fields))
    return {"message": "Trip created successfully", "trip_id": trip_id}


@router.get("/api/trips/{trip_id}", response_model=TripDetailResponse)
async def get_trip(
    trip_id: int,
    account_id: int = Depends(get_current_account_id),
    db: Session = Depends(get_db),
):
    trip = unwrap_or_raise(TripService(db).get_trip_by_id(trip_id, caller_id=account_id))
    return TripDetailResponse.model_validate(trip)


@router.post("/api/trips/{trip_id}/locations", response_model=TripDetailResponse)
async def append_location(
    trip_id: int,
    payload: AppendLocationRequest,
    account_id: int = Depends(get_current_account_id),
    db: Session = Depends(get_db),
    geocoder: GeocodingClient = Depends(get_geocoding_client),
):
    service = TripService(db, geocoder=geocoder)
    trip = unwrap_or_raise(
        await service.append_location(trip_id, payload.address, caller_id=account_id)
    )
    return TripDetailResponse.model_validate(trip)


@router.put("/api/trips/{trip_id}/locations/order", status_code=status.HTTP_204_NO_CONTENT)
async def reorder_locations(
    trip_id: int,
    payload: ReorderRequest,
    account_id: int = Depends(get_current_account_id),
    db: Session = Depends(get_db),
):
    unwrap_or_raise(
        OrderingService(db).reorder(trip_id, payload.location_ids, caller_id=account_id)
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/api/trips/{trip_id}/locations/move")
async def move_location(
    trip_id: int,
    payload: MoveLocationRequest,
    account_id: int = Depends(get_current_account_id),
    db: Session = Depends(get_db),
):
    stops = unwrap_or_raise(
        OrderingService(db).move(
            trip_id, payload.location_id, payload.new_index, caller_id=account_id
        )
    )
    return {"locations": [LocationResponse.model_validate(s) for s in stops]}
