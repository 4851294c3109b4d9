from pydantic import BaseModel
from datetime import datetime
from typing import Optional


class LocationResponse(BaseModel):
    id: int
    lat: float
    lng: float
    title: str
    order: int

    class Config:
        from_attributes = True


class TripCreate(BaseModel):
    # Required fields are checked by TripService so a missing one is a 400,
    # matching every other validation failure
    name: Optional[str] = None
    destination: Optional[str] = None
    # ISO 8601 date or datetime, e.g. "2025-04-01"
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    country: Optional[str] = None
    state: Optional[str] = None
    category: Optional[str] = None
    image_url: Optional[str] = None


class TripResponse(BaseModel):
    id: int
    account_id: int
    name: str
    destination: str
    country: Optional[str]
    state: Optional[str]
    category: Optional[str]
    start_date: datetime
    end_date: datetime
    image_url: Optional[str]
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class TripDetailResponse(TripResponse):
    locations: list[LocationResponse] = []


class AppendLocationRequest(BaseModel):
    address: str = ""


class ReorderRequest(BaseModel):
    location_ids: list[int]


class MoveLocationRequest(BaseModel):
    location_id: int
    new_index: int
