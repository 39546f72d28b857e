import threading
from collections import Counter
from datetime import date, timedelta

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from hotel_service.app.backend.models.Booking import Booking
from hotel_service.app.backend.models.BookingNight import BookingNight
from hotel_service.app.backend.models.Hotel import Hotel
from hotel_service.app.backend.models.Room import Room
from hotel_service.app.backend.models.RoomType import RoomType
from hotel_service.app.backend.repositories import booking_repository
from hotel_service.app.backend.schemas.booking import CreateBookingRequest
from hotel_service.app.backend.services import booking_service, seed_service
from hotel_service.app.backend.services.booking_service import (
    AttemptOutcome,
    BookingFailure,
    BookingSuccess,
    FailureCode,
    MAX_STAY_NIGHTS,
    StorageError,
)
from hotel_service.app.backend.services.dates import nights_inclusive, utc_now

TODAY = date(2026, 1, 1)


@pytest.fixture
def seeded_db(db):
    seed_service.seed_database(db)
    return db


@pytest.fixture
def contoso(seeded_db):
    return seeded_db.query(Hotel).filter(Hotel.name == "Contoso Grand Hotel").one()


def request_for(hotel_id, start, end, guests=1, room_type=None):
    return CreateBookingRequest(
        hotel_id=hotel_id,
        from_date=start,
        to_date=end,
        guests=guests,
        room_type=room_type
    )


def claim_night(db, hotel_id, room_number, night):
    """Commits a one-night booking the way a concurrent request would."""
    room = db.query(Room).filter(Room.hotel_id == hotel_id, Room.room_number == room_number).one()
    booking = booking_repository.add_booking(
        db,
        booking_reference=booking_service.generate_booking_reference(),
        hotel_id=hotel_id,
        room_id=room.id,
        start_date=night,
        end_date=night,
        guest_count=1,
        created_utc=utc_now()
    )
    booking_repository.add_booking_nights(db, booking, [night])
    db.commit()
    return room


def test_nights_inclusive_covers_both_ends():
    assert nights_inclusive(date(2026, 2, 27), date(2026, 3, 2)) == [
        date(2026, 2, 27), date(2026, 2, 28), date(2026, 3, 1), date(2026, 3, 2)
    ]
    assert nights_inclusive(date(2026, 5, 1), date(2026, 5, 1)) == [date(2026, 5, 1)]


def test_booking_reference_format_and_uniqueness():
    references = {booking_service.generate_booking_reference() for _ in range(200)}

    assert len(references) == 200
    for reference in references:
        assert reference.startswith("BK-")
        assert len(reference) == 15
        assert reference[3:] == reference[3:].upper()


def test_success_persists_one_night_per_day(seeded_db, contoso):
    result = booking_service.create_booking(
        seeded_db, request_for(contoso.id, date(2026, 3, 30), date(2026, 4, 2), guests=2), today=TODAY
    )

    assert isinstance(result, BookingSuccess)
    booking = booking_repository.get_booking_by_reference(seeded_db, result.result.booking_reference)
    nights = booking_repository.get_nights_by_booking(seeded_db, booking.id)
    assert [night.night_date for night in nights] == nights_inclusive(date(2026, 3, 30), date(2026, 4, 2))
    assert {night.room_id for night in nights} == {booking.room_id}


def test_taken_night_on_first_candidate_moves_to_next_room(seeded_db, contoso):
    # Room 3 loses a single night in the middle of the requested range
    taken_room = claim_night(seeded_db, contoso.id, 3, date(2026, 2, 2))

    result = booking_service.create_booking(
        seeded_db,
        request_for(contoso.id, date(2026, 2, 1), date(2026, 2, 3), guests=2, room_type=RoomType.DOUBLE),
        today=TODAY
    )

    assert isinstance(result, BookingSuccess)
    assert result.result.room_number == 4
    # The losing attempt left nothing behind
    assert seeded_db.query(Booking).filter(Booking.room_id == taken_room.id).count() == 1
    assert seeded_db.query(BookingNight).filter(BookingNight.room_id == taken_room.id).count() == 1


def test_conflict_when_every_candidate_is_taken(seeded_db, contoso):
    claim_night(seeded_db, contoso.id, 5, date(2026, 6, 1))
    claim_night(seeded_db, contoso.id, 6, date(2026, 6, 3))
    bookings_before = seeded_db.query(Booking).count()

    result = booking_service.create_booking(
        seeded_db, request_for(contoso.id, date(2026, 6, 1), date(2026, 6, 3), guests=3), today=TODAY
    )

    assert result == BookingFailure(FailureCode.CONFLICT, "No rooms are available for the full requested date range.")
    assert seeded_db.query(Booking).count() == bookings_before


def test_room_type_filter_can_leave_no_candidates(seeded_db, contoso):
    result = booking_service.create_booking(
        seeded_db,
        request_for(contoso.id, date(2026, 6, 1), date(2026, 6, 1), guests=3, room_type=RoomType.DOUBLE),
        today=TODAY
    )

    assert isinstance(result, BookingFailure)
    assert result.code is FailureCode.NO_ROOMS


def test_validation_happens_before_hotel_lookup(seeded_db):
    result = booking_service.create_booking(
        seeded_db, request_for(999, date(2026, 6, 3), date(2026, 6, 1)), today=TODAY
    )

    assert result.code is FailureCode.VALIDATION


def test_unknown_hotel_is_not_found(seeded_db):
    result = booking_service.create_booking(
        seeded_db, request_for(999, date(2026, 6, 1), date(2026, 6, 1)), today=TODAY
    )

    assert result.code is FailureCode.NOT_FOUND


def test_storage_fault_is_fatal_and_rolled_back(seeded_db, contoso, monkeypatch):
    def broken_nights(db, booking, nights):
        raise OperationalError("INSERT INTO booking_nights", {}, Exception("disk I/O error"))

    monkeypatch.setattr(booking_repository, "add_booking_nights", broken_nights)
    bookings_before = seeded_db.query(Booking).count()

    with pytest.raises(StorageError):
        booking_service.create_booking(
            seeded_db, request_for(contoso.id, date(2026, 7, 1), date(2026, 7, 2)), today=TODAY
        )

    assert seeded_db.query(Booking).count() == bookings_before


def test_interrupted_attempt_leaves_no_rows(seeded_db, contoso, monkeypatch):
    def interrupted(db, booking, nights):
        raise KeyboardInterrupt

    monkeypatch.setattr(booking_repository, "add_booking_nights", interrupted)
    bookings_before = seeded_db.query(Booking).count()
    nights_before = seeded_db.query(BookingNight).count()

    with pytest.raises(KeyboardInterrupt):
        booking_service.create_booking(
            seeded_db, request_for(contoso.id, date(2026, 7, 1), date(2026, 7, 2)), today=TODAY
        )

    assert seeded_db.query(Booking).count() == bookings_before
    assert seeded_db.query(BookingNight).count() == nights_before


def test_attempt_reports_conflict_on_duplicate_reference(seeded_db, contoso):
    request = request_for(contoso.id, date(2026, 8, 1), date(2026, 8, 1))
    room = seeded_db.query(Room).filter(Room.hotel_id == contoso.id, Room.room_number == 2).one()

    outcome = booking_service._attempt_reservation(seeded_db, request, room.id, "BK-000001", [date(2026, 8, 1)])

    assert outcome is AttemptOutcome.CONFLICT


def test_nights_never_overlap_and_match_booking_ranges(seeded_db, contoso):
    ranges = [
        (date(2026, 3, 1), date(2026, 3, 4), 1),
        (date(2026, 3, 2), date(2026, 3, 3), 1),
        (date(2026, 3, 3), date(2026, 3, 6), 2),
        (date(2026, 3, 1), date(2026, 3, 1), 1),
        (date(2026, 3, 4), date(2026, 3, 8), 1),
        (date(2026, 3, 2), date(2026, 3, 5), 3),
    ]
    for start, end, guests in ranges:
        booking_service.create_booking(seeded_db, request_for(contoso.id, start, end, guests=guests), today=TODAY)

    pairs = Counter(seeded_db.query(BookingNight.room_id, BookingNight.night_date).all())
    assert all(count == 1 for count in pairs.values())

    for booking in seeded_db.query(Booking).all():
        nights = booking_repository.get_nights_by_booking(seeded_db, booking.id)
        assert len(nights) == (booking.end_date - booking.start_date).days + 1
        assert [night.night_date for night in nights] == nights_inclusive(booking.start_date, booking.end_date)
        assert all(night.room_id == booking.room_id for night in nights)


def test_nights_inclusive_reaches_last_calendar_day():
    assert nights_inclusive(date.max - timedelta(days=1), date.max) == [date.max - timedelta(days=1), date.max]


def test_booking_the_last_representable_night(seeded_db, contoso):
    result = booking_service.create_booking(
        seeded_db, request_for(contoso.id, date.max, date.max), today=TODAY
    )

    assert isinstance(result, BookingSuccess)
    booking = booking_repository.get_booking_by_reference(seeded_db, result.result.booking_reference)
    assert [night.night_date for night in booking_repository.get_nights_by_booking(seeded_db, booking.id)] == [date.max]


def test_stay_longer_than_limit_is_rejected(seeded_db, contoso):
    start = date(2026, 2, 1)
    too_long = request_for(contoso.id, start, start + timedelta(days=MAX_STAY_NIGHTS))
    longest = request_for(contoso.id, start, start + timedelta(days=MAX_STAY_NIGHTS - 1))

    rejected = booking_service.create_booking(seeded_db, too_long, today=TODAY)
    accepted = booking_service.create_booking(seeded_db, longest, today=TODAY)

    assert rejected.code is FailureCode.VALIDATION
    assert isinstance(accepted, BookingSuccess)
    booking = booking_repository.get_booking_by_reference(seeded_db, accepted.result.booking_reference)
    assert len(booking_repository.get_nights_by_booking(seeded_db, booking.id)) == MAX_STAY_NIGHTS


def test_concurrent_requests_for_same_nights_never_double_book(seeded_db, session_factory):
    savoy_id = seeded_db.query(Hotel.id).filter(Hotel.name == "The Savoy Hotel London").scalar()
    seeded_db.rollback()

    workers = 8
    barrier = threading.Barrier(workers)
    results = []
    errors = []
    lock = threading.Lock()

    def book_double():
        session = session_factory()
        try:
            barrier.wait()
            result = booking_service.create_booking(
                session,
                request_for(savoy_id, date(2026, 9, 1), date(2026, 9, 4), guests=2, room_type=RoomType.DOUBLE),
                today=TODAY
            )
            with lock:
                results.append(result)
        except Exception as e:
            with lock:
                errors.append(e)
        finally:
            session.close()

    threads = [threading.Thread(target=book_double) for _ in range(workers)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert errors == []
    successes = [r for r in results if isinstance(r, BookingSuccess)]
    failures = [r for r in results if isinstance(r, BookingFailure)]
    assert len(successes) == 2
    assert {r.result.room_number for r in successes} == {3, 4}
    assert len(failures) == 6
    assert all(f.code is FailureCode.CONFLICT for f in failures)

    pairs = Counter(seeded_db.query(BookingNight.room_id, BookingNight.night_date).all())
    assert all(count == 1 for count in pairs.values())


def test_room_number_is_unique_per_hotel(seeded_db, contoso):
    seeded_db.add(Room(hotel_id=contoso.id, room_number=1, room_type=RoomType.SINGLE, capacity=1))

    with pytest.raises(IntegrityError):
        seeded_db.flush()
    seeded_db.rollback()


@pytest.mark.parametrize("room_number", [0, 7])
def test_room_number_outside_range_is_rejected(db, room_number):
    hotel = Hotel(name="Empty Hotel")
    db.add(hotel)
    db.flush()
    db.add(Room(hotel_id=hotel.id, room_number=room_number, room_type=RoomType.SINGLE, capacity=1))

    with pytest.raises(IntegrityError):
        db.flush()
    db.rollback()
