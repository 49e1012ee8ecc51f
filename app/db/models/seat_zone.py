from sqlalchemy import Column, Integer, String, DateTime, func, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from app.db.session import Base


class SeatZone(Base):
    __tablename__ = "seat_zones"
    __table_args__ = (
        UniqueConstraint("floor_id", "readable_id", name="uq_seat_zone_readable_id_per_floor"),
    )

    seq = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String(36), unique=True, nullable=False)
    readable_id = Column(String(240), nullable=False)
    floor_id = Column(String(36), ForeignKey("floors.id"), nullable=False, index=True)
    name = Column(String(150), nullable=False)
    occupancy_status = Column(String(20), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    floor = relationship("Floor", back_populates="seat_zones")
