from sqlalchemy import Column, Integer, String, Date, DateTime, ForeignKey, Index, CheckConstraint
from sqlalchemy.orm import relationship

from common.db.database import Base


class Booking(Base):
    __tablename__ = "bookings"
    __table_args__ = (
        CheckConstraint("end_date >= start_date", name="ck_booking_date_range"),
        CheckConstraint("guest_count > 0", name="ck_booking_guest_count_positive"),
        Index("ix_bookings_room_range", "room_id", "start_date", "end_date"),
    )

    id = Column(Integer, primary_key=True, index=True)
    booking_reference = Column(String(32), nullable=False, unique=True)
    hotel_id = Column(Integer, ForeignKey("hotels.id", ondelete="RESTRICT"), nullable=False, index=True)
    room_id = Column(Integer, ForeignKey("rooms.id", ondelete="CASCADE"), nullable=False)
    # Inclusive: the guest occupies the room every night from start_date to end_date
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    guest_count = Column(Integer, nullable=False)
    created_utc = Column(DateTime(timezone=True), nullable=False)

    hotel = relationship("Hotel")
    room = relationship("Room", back_populates="bookings")
    nights = relationship("BookingNight", back_populates="booking", cascade="all, delete-orphan", passive_deletes=True)
