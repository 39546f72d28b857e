from typing import Optional

from .base import CamelModel


class SeedCounts(CamelModel):
    hotels: int = 0
    rooms: int = 0
    bookings: int = 0
    booking_nights: int = 0

    @property
    def is_empty(self) -> bool:
        return not (self.hotels or self.rooms or self.bookings or self.booking_nights)


class AdminMessage(CamelModel):
    message: str
    result: Optional[SeedCounts] = None
