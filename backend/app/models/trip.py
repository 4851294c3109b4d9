from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Text
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from app.database import Base


class Trip(Base):
    __tablename__ = "trips"

    id = Column(Integer, primary_key=True, index=True)

    account_id = Column(
        Integer,
        ForeignKey("accounts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    name = Column(String(128), nullable=False)
    destination = Column(Text, nullable=False)

    # Optional structured tags
    country = Column(String(100), nullable=True)
    state = Column(String(100), nullable=True)
    category = Column(String(50), nullable=True)

    # end_date >= start_date is expected but not enforced
    start_date = Column(DateTime, nullable=False, index=True)
    end_date = Column(DateTime, nullable=False)

    image_url = Column(String(500), nullable=True)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    owner = relationship("Account", back_populates="trips")
    locations = relationship(
        "Location",
        back_populates="trip",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Location.order",
    )

    def __repr__(self):
        return f"<Trip {self.id} {self.name}>"
