from sqlalchemy import Column, Integer, String, Float, DateTime, JSON, func, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from app.db.session import Base


class Floor(Base):
    __tablename__ = "floors"
    __table_args__ = (
        UniqueConstraint("building_id", "readable_id", name="uq_floor_readable_id_per_building"),
    )

    seq = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String(36), unique=True, nullable=False)
    readable_id = Column(String(200), nullable=False)
    building_id = Column(String(36), ForeignKey("buildings.id"), nullable=False, index=True)
    floor_number = Column(String(20), nullable=False)
    floor_area = Column(Float, nullable=False, default=0.0)

    # total de asientos se deriva de seat_counts, no se guarda
    seat_counts = Column(JSON, nullable=False, default=dict)

    parking_allocation_2w = Column(Integer, nullable=False, default=0)
    parking_allocation_4w = Column(Integer, nullable=False, default=0)
    parking_allocation_ev = Column(Integer, nullable=False, default=0)
    amenities = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    building = relationship("Building", back_populates="floors")
    seat_zones = relationship("SeatZone", back_populates="floor")
