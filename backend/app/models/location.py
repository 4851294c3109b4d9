"""
Location - one geocoded stop in a trip's itinerary.

For a given trip the ``order`` values are always 0..N-1 with no gaps and no
duplicates. Only the ordering service changes ``order`` after insert; the
(trip_id, order) unique constraint keeps concurrent writers from landing on
the same slot.
"""
from sqlalchemy import Column, Integer, String, DateTime, Float, ForeignKey, UniqueConstraint
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from app.database import Base


class Location(Base):
    __tablename__ = "locations"
    __table_args__ = (
        UniqueConstraint("trip_id", "order", name="uq_locations_trip_order"),
    )

    id = Column(Integer, primary_key=True, index=True)

    trip_id = Column(
        Integer,
        ForeignKey("trips.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    lat = Column(Float, nullable=False)
    lng = Column(Float, nullable=False)
    title = Column(String(500), nullable=False)

    order = Column("order", Integer, nullable=False, default=0)

    created_at = Column(DateTime, server_default=func.now())

    trip = relationship("Trip", back_populates="locations")

    def __repr__(self):
        return f"<Location {self.id} trip={self.trip_id} order={self.order}>"
