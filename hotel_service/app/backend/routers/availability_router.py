from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from datetime import date
from typing import Optional

from common.db.database import get_db
from common.pydantic.problem import ApiProblem
from ..repositories import hotel_repository
from ..schemas.availability import AvailabilityResult
from ..services import availability_service
from ..services.dates import get_today

router = APIRouter(prefix="/api/hotels", tags=["availability"])

@router.get("/{hotel_id}/availability", response_model=AvailabilityResult)
def get_availability(
    hotel_id: int,
    from_date: Optional[date] = Query(None, alias="from"),
    to_date: Optional[date] = Query(None, alias="to"),
    guests: Optional[int] = Query(None),
    db: Session = Depends(get_db),
    today: date = Depends(get_today)
):
    """Rooms free for the whole inclusive range [from..to] that fit the guests."""
    errors = availability_service.validate_query(from_date, to_date, guests, today)
    if errors:
        raise ApiProblem(
            status.HTTP_400_BAD_REQUEST,
            "Invalid query parameters",
            code="validation",
            errors=errors
        )

    if not hotel_repository.hotel_exists(db, hotel_id):
        raise ApiProblem(
            status.HTTP_404_NOT_FOUND,
            "Hotel not found",
            detail=f"No hotel exists with id '{hotel_id}'.",
            code="not_found"
        )

    return availability_service.find_available_rooms(db, hotel_id, from_date, to_date, guests)
