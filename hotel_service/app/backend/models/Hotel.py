from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship

from common.db.database import Base


class Hotel(Base):
    __tablename__ = "hotels"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False, index=True)

    rooms = relationship("Room", back_populates="hotel", cascade="all, delete-orphan", passive_deletes=True)
