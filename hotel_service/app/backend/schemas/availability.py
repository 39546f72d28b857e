from datetime import date
from typing import List

from pydantic import Field

from ..models.RoomType import RoomType
from .base import CamelModel


class RoomAvailability(CamelModel):
    room_id: int
    room_number: int
    room_type: RoomType
    capacity: int


class AvailabilityResult(CamelModel):
    hotel_id: int
    from_date: date = Field(alias="from")
    to_date: date = Field(alias="to")
    guests: int
    available_rooms: List[RoomAvailability]
    message: str
