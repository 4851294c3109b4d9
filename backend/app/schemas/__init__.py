from app.schemas.account import SignUpRequest, SignInRequest, TokenResponse
from app.schemas.trip import (
    AppendLocationRequest,
    LocationResponse,
    MoveLocationRequest,
    ReorderRequest,
    TripCreate,
    TripDetailResponse,
    TripResponse,
)

__all__ = [
    "SignUpRequest",
    "SignInRequest",
    "TokenResponse",
    "AppendLocationRequest",
    "LocationResponse",
    "MoveLocationRequest",
    "ReorderRequest",
    "TripCreate",
    "TripDetailResponse",
    "TripResponse",
]
