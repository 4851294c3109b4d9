# SQLAlchemy models
from app.models.account import Account
from app.models.trip import Trip
from app.models.location import Location

__all__ = [
    "Account",
    "Trip",
    "Location",
]
