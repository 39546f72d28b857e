import logging
from datetime import date

from sqlalchemy.orm import Session

from ..models.Booking import Booking
from ..models.BookingNight import BookingNight
from ..models.Hotel import Hotel
from ..models.Room import Room
from ..models.RoomType import RoomType
from ..repositories import booking_repository, hotel_repository, room_repository
from ..schemas.admin import SeedCounts
from .dates import nights_inclusive, utc_now

logger = logging.getLogger(__name__)

SEED_HOTEL_NAMES = [
    "The Savoy Hotel London",
    "Contoso Grand Hotel",
    "The Balmoral Hotel Edinburgh",
]

# (room_number, room_type, capacity), identical for every hotel
SEED_ROOM_LAYOUT = [
    (1, RoomType.SINGLE, 1),
    (2, RoomType.SINGLE, 1),
    (3, RoomType.DOUBLE, 2),
    (4, RoomType.DOUBLE, 2),
    (5, RoomType.DELUXE, 4),
    (6, RoomType.DELUXE, 4),
]

# (reference, hotel name prefix, room_number, start, end, guests)
SEED_BOOKINGS = [
    ("BK-000001", "Contoso", 1, date(2026, 1, 10), date(2026, 1, 12), 1),
    ("BK-000002", "Contoso", 4, date(2026, 1, 15), date(2026, 1, 18), 2),
]


def reset_database(db: Session) -> None:
    """Deletes every row, children first so foreign keys never block."""
    db.query(BookingNight).delete(synchronize_session=False)
    db.query(Booking).delete(synchronize_session=False)
    db.query(Room).delete(synchronize_session=False)
    db.query(Hotel).delete(synchronize_session=False)
    db.commit()
    logger.info("Database reset")


def seed_database(db: Session) -> SeedCounts:
    """
    Loads the deterministic demo dataset.

    Idempotent: once any hotel exists nothing is written and all counts are 0.
    """
    if hotel_repository.any_hotels(db):
        logger.info("Seed skipped, hotels already present")
        return SeedCounts()

    now = utc_now()
    try:
        hotels = hotel_repository.add_hotels(db, SEED_HOTEL_NAMES)

        rooms_by_hotel = {
            hotel.id: room_repository.add_rooms(db, hotel.id, SEED_ROOM_LAYOUT)
            for hotel in hotels
        }

        booking_count = 0
        night_count = 0
        for reference, hotel_prefix, room_number, start, end, guests in SEED_BOOKINGS:
            hotel = next(h for h in hotels if h.name.lower().startswith(hotel_prefix.lower()))
            room = next(r for r in rooms_by_hotel[hotel.id] if r.room_number == room_number)

            booking = booking_repository.add_booking(
                db,
                booking_reference=reference,
                hotel_id=hotel.id,
                room_id=room.id,
                start_date=start,
                end_date=end,
                guest_count=guests,
                created_utc=now
            )
            nights = booking_repository.add_booking_nights(db, booking, nights_inclusive(start, end))
            booking_count += 1
            night_count += len(nights)

        db.commit()
    except BaseException:
        db.rollback()
        raise

    counts = SeedCounts(
        hotels=len(hotels),
        rooms=sum(len(rooms) for rooms in rooms_by_hotel.values()),
        bookings=booking_count,
        booking_nights=night_count
    )
    logger.info("Database seeded: %s", counts.model_dump())
    return counts
