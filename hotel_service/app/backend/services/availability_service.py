from datetime import date
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from ..repositories import room_repository
from ..schemas.availability import AvailabilityResult, RoomAvailability


def validate_query(
    from_date: Optional[date],
    to_date: Optional[date],
    guests: Optional[int],
    today: date
) -> Dict[str, List[str]]:
    """Collects every problem with the query at once, keyed by parameter name."""
    errors: Dict[str, List[str]] = {}

    if from_date is None:
        errors["from"] = ["Query parameter 'from' is required (yyyy-MM-dd)."]
    if to_date is None:
        errors["to"] = ["Query parameter 'to' is required (yyyy-MM-dd)."]
    if guests is None:
        errors["guests"] = ["Query parameter 'guests' is required."]
    elif guests <= 0:
        errors["guests"] = ["'guests' must be at least 1."]

    if from_date is not None and to_date is not None and to_date < from_date:
        errors["to"] = ["'to' must be on or after 'from'."]

    if from_date is not None and from_date < today:
        errors["from"] = ["The 'from' date must be today or a future date."]

    return errors


def find_available_rooms(
    db: Session,
    hotel_id: int,
    from_date: date,
    to_date: date,
    guests: int
) -> AvailabilityResult:
    """
    Rooms of the hotel that can hold `guests` and have no booking overlapping
    [from_date, to_date], smallest sufficient room first.

    Callers validate the query and check that the hotel exists beforehand.
    """
    rooms = room_repository.get_available_rooms(db, hotel_id, from_date, to_date, guests)

    available_rooms = [
        RoomAvailability(
            room_id=room.id,
            room_number=room.room_number,
            room_type=room.room_type,
            capacity=room.capacity
        )
        for room in rooms
    ]

    if available_rooms:
        message = f"Found {len(available_rooms)} available room(s)."
    else:
        message = "No rooms available for the given dates and guest count."

    return AvailabilityResult(
        hotel_id=hotel_id,
        from_date=from_date,
        to_date=to_date,
        guests=guests,
        available_rooms=available_rooms,
        message=message
    )
