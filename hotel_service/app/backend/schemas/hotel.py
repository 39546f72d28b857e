from typing import List

from .base import CamelModel


class HotelSummary(CamelModel):
    id: int
    name: str


class HotelSearchResult(CamelModel):
    items: List[HotelSummary]
    message: str
