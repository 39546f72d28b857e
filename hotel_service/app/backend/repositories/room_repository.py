from datetime import date
from sqlalchemy import exists
from sqlalchemy.orm import Session
from typing import List, Optional, Iterable, Tuple
from ..models.Room import Room
from ..models.Booking import Booking
from ..models.RoomType import RoomType

def add_rooms(db: Session, hotel_id: int, layout: Iterable[Tuple[int, RoomType, int]]) -> List[Room]:
    rooms = [
        Room(hotel_id=hotel_id, room_number=number, room_type=room_type, capacity=capacity)
        for number, room_type, capacity in layout
    ]
    db.add_all(rooms)
    db.flush()
    return rooms

def get_candidate_rooms(
    db: Session,
    hotel_id: int,
    guest_count: int,
    room_type: Optional[RoomType] = None
):
    """
    Rooms that could ever hold the request, best fit first.

    Occupancy is deliberately not looked at here: whether a candidate is
    free is only known once its nights are inserted. Returns plain rows
    (id, room_number, room_type, capacity) so they survive a rollback.
    """
    query = db.query(Room.id, Room.room_number, Room.room_type, Room.capacity).filter(
        Room.hotel_id == hotel_id,
        Room.capacity >= guest_count
    )
    if room_type is not None:
        query = query.filter(Room.room_type == room_type)

    return query.order_by(Room.capacity, Room.room_number).all()

def get_available_rooms(
    db: Session,
    hotel_id: int,
    from_date: date,
    to_date: date,
    guest_count: int
) -> List[Room]:
    # Two inclusive ranges overlap iff each one starts before the other ends
    overlapping_booking = exists().where(
        Booking.room_id == Room.id,
        Booking.start_date <= to_date,
        Booking.end_date >= from_date
    )
    return db.query(Room).filter(
        Room.hotel_id == hotel_id,
        Room.capacity >= guest_count,
        ~overlapping_booking
    ).order_by(Room.capacity, Room.room_number).all()
