from sqlalchemy import Column, Integer, Date, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from common.db.database import Base


class BookingNight(Base):
    """One occupied night of one room.

    The unique (room_id, night_date) pair is what prevents double booking:
    two transactions claiming the same night for the same room cannot both
    commit, the loser gets an IntegrityError.
    """
    __tablename__ = "booking_nights"
    __table_args__ = (
        UniqueConstraint("room_id", "night_date", name="uq_booking_night_room_date"),
    )

    id = Column(Integer, primary_key=True, index=True)
    booking_id = Column(Integer, ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False, index=True)
    room_id = Column(Integer, ForeignKey("rooms.id", ondelete="CASCADE"), nullable=False)
    night_date = Column(Date, nullable=False)

    booking = relationship("Booking", back_populates="nights")
