from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.orm import Session
from datetime import date

from common.db.database import get_db
from common.pydantic.problem import ApiProblem
from ..schemas.booking import BookingCreated, BookingDetails, CreateBookingRequest
from ..services import booking_service
from ..services.booking_service import BookingFailure, FailureCode
from ..services.dates import get_today

router = APIRouter(prefix="/api/bookings", tags=["bookings"])

_FAILURE_RESPONSES = {
    FailureCode.VALIDATION: (status.HTTP_400_BAD_REQUEST, "Invalid request"),
    FailureCode.NO_ROOMS: (status.HTTP_400_BAD_REQUEST, "Invalid request"),
    FailureCode.NOT_FOUND: (status.HTTP_404_NOT_FOUND, "Not found"),
    FailureCode.CONFLICT: (status.HTTP_409_CONFLICT, "Booking conflict"),
}

def failure_to_problem(failure: BookingFailure) -> ApiProblem:
    status_code, title = _FAILURE_RESPONSES[failure.code]
    return ApiProblem(status_code, title, detail=failure.message, code=failure.code.value)

@router.post("", status_code=status.HTTP_201_CREATED, response_model=BookingCreated)
def create_booking(
    payload: CreateBookingRequest,
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
    today: date = Depends(get_today)
):
    """Books a single room for the entire inclusive date range [from..to]."""
    result = booking_service.create_booking(db, payload, today=today)

    if isinstance(result, BookingFailure):
        raise failure_to_problem(result)

    created = result.result
    response.headers["Location"] = str(
        request.url_for("get_booking", booking_reference=created.booking_reference)
    )
    return created

@router.get("/{booking_reference}", response_model=BookingDetails, name="get_booking")
def get_booking(booking_reference: str, db: Session = Depends(get_db)):
    details = booking_service.get_booking_details(db, booking_reference)
    if details is None:
        raise ApiProblem(
            status.HTTP_404_NOT_FOUND,
            "Booking not found",
            detail=f"No booking exists with reference '{booking_reference}'.",
            code="not_found"
        )
    return details
