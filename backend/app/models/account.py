from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from app.database import Base


class Account(Base):
    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True, index=True)

    # Compared exactly as stored (no case folding)
    email = Column(String(255), nullable=False, unique=True, index=True)
    name = Column(String(128), nullable=False)

    # NULL for accounts that only ever signed in through an OAuth provider
    password_hash = Column(String(128), nullable=True)
    image_url = Column(String(500), nullable=True)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    trips = relationship(
        "Trip",
        back_populates="owner",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self):
        return f"<Account {self.id} {self.email}>"
