from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import Optional

from common.db.database import get_db
from common.pydantic.problem import ApiProblem
from ..repositories import hotel_repository
from ..schemas.hotel import HotelSearchResult, HotelSummary

router = APIRouter(prefix="/api/hotels", tags=["hotels"])

@router.get("", response_model=HotelSearchResult)
def search_hotels(name: Optional[str] = Query(None), db: Session = Depends(get_db)):
    if name is None or not name.strip():
        raise ApiProblem(
            status.HTTP_400_BAD_REQUEST,
            "Invalid query parameters",
            code="validation",
            errors={"name": ["Query parameter 'name' is required."]}
        )

    term = name.strip()
    hotels = hotel_repository.search_hotels_by_name(db, term)

    if hotels:
        message = f"Found {len(hotels)} hotel(s)."
    else:
        message = f"No hotels found matching '{term}'."

    return HotelSearchResult(
        items=[HotelSummary(id=hotel.id, name=hotel.name) for hotel in hotels],
        message=message
    )
