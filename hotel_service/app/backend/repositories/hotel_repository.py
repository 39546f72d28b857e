from sqlalchemy import func
from sqlalchemy.orm import Session
from typing import List
from ..models.Hotel import Hotel

def hotel_exists(db: Session, hotel_id: int) -> bool:
    return db.query(Hotel.id).filter(Hotel.id == hotel_id).first() is not None

def any_hotels(db: Session) -> bool:
    return db.query(Hotel.id).first() is not None

def search_hotels_by_name(db: Session, term: str) -> List[Hotel]:
    """Case-insensitive substring match on the hotel name."""
    escaped = term.upper().replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return db.query(Hotel).filter(
        func.upper(Hotel.name).like(f"%{escaped}%", escape="\\")
    ).order_by(Hotel.name).all()

def add_hotels(db: Session, names: List[str]) -> List[Hotel]:
    hotels = [Hotel(name=name.strip()) for name in names]
    db.add_all(hotels)
    db.flush()
    return hotels
