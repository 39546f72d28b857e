from datetime import date, datetime, timezone
from typing import Optional

from pydantic import Field, field_serializer, field_validator

from ..models.RoomType import RoomType
from .base import CamelModel


def format_utc(value: datetime) -> str:
    # SQLite hands timestamps back naive; they were written as UTC
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


class CreateBookingRequest(CamelModel):
    """Range checks (positive ids, guests, date order) are done by the allocator."""
    hotel_id: int
    from_date: date = Field(alias="from")
    to_date: date = Field(alias="to")
    guests: int
    room_type: Optional[RoomType] = None

    @field_validator("room_type", mode="before")
    @classmethod
    def _parse_room_type(cls, value):
        return RoomType.parse(value)


class BookingCreated(CamelModel):
    booking_reference: str
    hotel_id: int
    room_id: int
    room_number: int
    room_type: RoomType
    capacity: int
    from_date: date = Field(alias="from")
    to_date: date = Field(alias="to")
    guests: int


class BookingDetails(CamelModel):
    booking_reference: str
    hotel_id: int
    hotel_name: str
    room_id: int
    room_number: int
    room_type: RoomType
    capacity: int
    from_date: date = Field(alias="from")
    to_date: date = Field(alias="to")
    guests: int
    created_utc: datetime

    @field_serializer("created_utc")
    def _serialize_created_utc(self, value: datetime) -> str:
        return format_utc(value)


class BookingListItem(CamelModel):
    booking_reference: str
    hotel_id: int
    hotel_name: str
    room_number: int
    room_type: RoomType
    guests: int
    from_date: date = Field(alias="from")
    to_date: date = Field(alias="to")
    created_utc: datetime

    @field_serializer("created_utc")
    def _serialize_created_utc(self, value: datetime) -> str:
        return format_utc(value)
