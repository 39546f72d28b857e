from sqlalchemy import Column, Integer, Enum, ForeignKey, UniqueConstraint, CheckConstraint
from sqlalchemy.orm import relationship

from common.db.database import Base
from .RoomType import RoomType

MIN_ROOM_NUMBER = 1
MAX_ROOM_NUMBER = 6


class Room(Base):
    __tablename__ = "rooms"
    __table_args__ = (
        UniqueConstraint("hotel_id", "room_number", name="uq_room_hotel_number"),
        CheckConstraint(f"room_number BETWEEN {MIN_ROOM_NUMBER} AND {MAX_ROOM_NUMBER}", name="ck_room_number_range"),
        CheckConstraint("capacity > 0", name="ck_room_capacity_positive"),
    )

    id = Column(Integer, primary_key=True, index=True)
    hotel_id = Column(Integer, ForeignKey("hotels.id", ondelete="CASCADE"), nullable=False, index=True)
    room_number = Column(Integer, nullable=False)
    room_type = Column(
        Enum(RoomType, native_enum=False, length=20, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )
    capacity = Column(Integer, nullable=False)

    hotel = relationship("Hotel", back_populates="rooms")
    bookings = relationship("Booking", back_populates="room", cascade="all, delete-orphan", passive_deletes=True)
