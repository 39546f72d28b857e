from sqlalchemy.orm import Session, joinedload
from typing import List, Optional
from datetime import date, datetime
from ..models.Booking import Booking
from ..models.BookingNight import BookingNight

def add_booking(
    db: Session,
    booking_reference: str,
    hotel_id: int,
    room_id: int,
    start_date: date,
    end_date: date,
    guest_count: int,
    created_utc: datetime
) -> Booking:
    """Stages the booking row and flushes it so its id is known. Does not commit."""
    new_booking = Booking(
        booking_reference=booking_reference,
        hotel_id=hotel_id,
        room_id=room_id,
        start_date=start_date,
        end_date=end_date,
        guest_count=guest_count,
        created_utc=created_utc
    )
    db.add(new_booking)
    db.flush()
    return new_booking

def add_booking_nights(db: Session, booking: Booking, nights: List[date]) -> List[BookingNight]:
    """Stages one row per occupied night. A taken (room, night) pair fails here with IntegrityError."""
    booking_nights = [
        BookingNight(booking_id=booking.id, room_id=booking.room_id, night_date=night)
        for night in nights
    ]
    db.add_all(booking_nights)
    db.flush()
    return booking_nights

def get_booking_by_reference(db: Session, booking_reference: str) -> Optional[Booking]:
    return db.query(Booking).options(
        joinedload(Booking.hotel),
        joinedload(Booking.room)
    ).filter(Booking.booking_reference == booking_reference).first()

def get_all_bookings(db: Session) -> List[Booking]:
    return db.query(Booking).options(
        joinedload(Booking.hotel),
        joinedload(Booking.room)
    ).order_by(Booking.created_utc.desc(), Booking.id.desc()).all()

def get_nights_by_booking(db: Session, booking_id: int) -> List[BookingNight]:
    return db.query(BookingNight).filter(
        BookingNight.booking_id == booking_id
    ).order_by(BookingNight.night_date).all()
