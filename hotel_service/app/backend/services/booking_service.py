"""Room allocation for new bookings, plus booking lookups.

A booking claims one room for every night of an inclusive date range. The
(room_id, night_date) unique constraint on booking_nights is the only
concurrency control: the allocator walks the candidate rooms best fit first,
tries to insert the booking and its nights in one transaction, and moves on
to the next room when the database rejects a night as already taken.
"""

import enum
import logging
import uuid
from dataclasses import dataclass
from datetime import date
from typing import List, Optional, Union

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..repositories import booking_repository, hotel_repository, room_repository
from ..schemas.booking import BookingCreated, BookingDetails, BookingListItem, CreateBookingRequest
from .dates import nights_inclusive, utc_now, utc_today

logger = logging.getLogger(__name__)

BOOKING_REFERENCE_PREFIX = "BK-"
MAX_STAY_NIGHTS = 365


class StorageError(Exception):
    """A write failed for a reason other than a taken night or reference."""


class FailureCode(str, enum.Enum):
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    NO_ROOMS = "no_rooms"
    CONFLICT = "conflict"


class AttemptOutcome(enum.Enum):
    COMMITTED = "committed"
    CONFLICT = "conflict"


@dataclass(frozen=True)
class BookingFailure:
    code: FailureCode
    message: str


@dataclass(frozen=True)
class BookingSuccess:
    result: BookingCreated


BookingResult = Union[BookingSuccess, BookingFailure]


def generate_booking_reference() -> str:
    return BOOKING_REFERENCE_PREFIX + uuid.uuid4().hex[:12].upper()


def validate_request(request: CreateBookingRequest, today: date) -> Optional[BookingFailure]:
    if request.hotel_id <= 0:
        return BookingFailure(FailureCode.VALIDATION, "HotelId must be a positive integer.")
    if request.guests <= 0:
        return BookingFailure(FailureCode.VALIDATION, "Guests must be at least 1.")
    if request.to_date < request.from_date:
        return BookingFailure(FailureCode.VALIDATION, "'to' must be on or after 'from'.")
    if (request.to_date - request.from_date).days + 1 > MAX_STAY_NIGHTS:
        return BookingFailure(FailureCode.VALIDATION, f"A stay may not exceed {MAX_STAY_NIGHTS} nights.")
    if request.from_date < today:
        return BookingFailure(FailureCode.VALIDATION, "'from' must be today or in the future.")
    return None


def create_booking(
    db: Session,
    request: CreateBookingRequest,
    today: Optional[date] = None
) -> BookingResult:
    """
    Books a single room for every night in [request.from_date, request.to_date].

    Returns BookingSuccess for the first candidate room whose transaction
    commits, otherwise a BookingFailure with exactly one of the FailureCode
    values. Raises StorageError when the database fails for a reason other
    than a uniqueness violation; the attempt is rolled back first.
    """
    today = today or utc_today()

    failure = validate_request(request, today)
    if failure is not None:
        return failure

    if not hotel_repository.hotel_exists(db, request.hotel_id):
        return BookingFailure(FailureCode.NOT_FOUND, f"No hotel exists with id '{request.hotel_id}'.")

    candidates = room_repository.get_candidate_rooms(
        db, request.hotel_id, request.guests, request.room_type
    )
    # Release the read transaction before the write attempts start
    db.rollback()

    if not candidates:
        return BookingFailure(
            FailureCode.NO_ROOMS,
            "No rooms match the guest count (and optional room type)."
        )

    logger.debug(
        "Hotel %s: %d candidate room(s) for %d guest(s) %s..%s",
        request.hotel_id, len(candidates), request.guests, request.from_date, request.to_date
    )

    nights = nights_inclusive(request.from_date, request.to_date)

    for room in candidates:
        booking_reference = generate_booking_reference()
        outcome = _attempt_reservation(db, request, room.id, booking_reference, nights)

        if outcome is AttemptOutcome.COMMITTED:
            logger.info(
                "Booking %s: room %s (#%s) of hotel %s for %s..%s",
                booking_reference, room.id, room.room_number, request.hotel_id,
                request.from_date, request.to_date
            )
            return BookingSuccess(BookingCreated(
                booking_reference=booking_reference,
                hotel_id=request.hotel_id,
                room_id=room.id,
                room_number=room.room_number,
                room_type=room.room_type,
                capacity=room.capacity,
                from_date=request.from_date,
                to_date=request.to_date,
                guests=request.guests
            ))

    logger.warning(
        "Hotel %s: all %d candidate room(s) taken for %s..%s",
        request.hotel_id, len(candidates), request.from_date, request.to_date
    )
    return BookingFailure(
        FailureCode.CONFLICT,
        "No rooms are available for the full requested date range."
    )


def _attempt_reservation(
    db: Session,
    request: CreateBookingRequest,
    room_id: int,
    booking_reference: str,
    nights: List[date]
) -> AttemptOutcome:
    """Inserts the booking and all of its nights for one room, all or nothing."""
    try:
        booking = booking_repository.add_booking(
            db,
            booking_reference=booking_reference,
            hotel_id=request.hotel_id,
            room_id=room_id,
            start_date=request.from_date,
            end_date=request.to_date,
            guest_count=request.guests,
            created_utc=utc_now()
        )
        booking_repository.add_booking_nights(db, booking, nights)
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.info("Room %s not available for %s (%s)", room_id, booking_reference, e.orig)
        return AttemptOutcome.CONFLICT
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Storage failure while booking room %s", room_id, exc_info=True)
        raise StorageError(f"Could not store booking for room {room_id}.") from e
    except BaseException:
        # Cancellation included: nothing half-written may survive
        db.rollback()
        raise

    return AttemptOutcome.COMMITTED


def get_booking_details(db: Session, booking_reference: str) -> Optional[BookingDetails]:
    booking = booking_repository.get_booking_by_reference(db, booking_reference.strip())
    if booking is None:
        return None

    return BookingDetails(
        booking_reference=booking.booking_reference,
        hotel_id=booking.hotel_id,
        hotel_name=booking.hotel.name,
        room_id=booking.room_id,
        room_number=booking.room.room_number,
        room_type=booking.room.room_type,
        capacity=booking.room.capacity,
        from_date=booking.start_date,
        to_date=booking.end_date,
        guests=booking.guest_count,
        created_utc=booking.created_utc
    )


def list_bookings(db: Session) -> List[BookingListItem]:
    return [
        BookingListItem(
            booking_reference=booking.booking_reference,
            hotel_id=booking.hotel_id,
            hotel_name=booking.hotel.name,
            room_number=booking.room.room_number,
            room_type=booking.room.room_type,
            guests=booking.guest_count,
            from_date=booking.start_date,
            to_date=booking.end_date,
            created_utc=booking.created_utc
        )
        for booking in booking_repository.get_all_bookings(db)
    ]
