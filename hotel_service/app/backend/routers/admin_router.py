from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from common.config.settings import Settings, get_settings
from common.db.database import get_db
from common.pydantic.problem import ApiProblem
from ..schemas.admin import AdminMessage
from ..schemas.booking import BookingListItem
from ..services import booking_service, seed_service

def require_admin_environment(settings: Settings = Depends(get_settings)):
    # Outside Development/Test the admin routes pretend not to exist
    if not settings.admin_enabled:
        raise ApiProblem(status.HTTP_404_NOT_FOUND, "Not Found")

router = APIRouter(
    prefix="/api/admin",
    tags=["admin"],
    dependencies=[Depends(require_admin_environment)]
)

@router.post("/reset", response_model=AdminMessage, response_model_exclude_none=True)
def reset(db: Session = Depends(get_db)):
    seed_service.reset_database(db)
    return AdminMessage(message="Database reset complete.")

@router.post("/seed", response_model=AdminMessage)
def seed(db: Session = Depends(get_db)):
    counts = seed_service.seed_database(db)
    if counts.is_empty:
        message = "Database already seeded (no changes made)."
    else:
        message = "Database seeded successfully."
    return AdminMessage(message=message, result=counts)

@router.get("/bookings", response_model=List[BookingListItem])
def list_bookings(db: Session = Depends(get_db)):
    return booking_service.list_bookings(db)
