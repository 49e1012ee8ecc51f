from sqlalchemy import Column, Integer, String, Float, DateTime, JSON, func, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from app.db.session import Base


class Building(Base):
    __tablename__ = "buildings"
    __table_args__ = (
        UniqueConstraint("campus_id", "readable_id", name="uq_building_readable_id_per_campus"),
    )

    seq = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String(36), unique=True, nullable=False)
    readable_id = Column(String(160), nullable=False)
    campus_id = Column(String(36), ForeignKey("campuses.id"), nullable=False, index=True)
    name = Column(String(150), nullable=False)
    code = Column(String(20))
    alias_name = Column(String(150))

    # áreas (BUA / RA / carpet)
    total_area_bua = Column(Float, nullable=False, default=0.0)
    total_area_ra = Column(Float, nullable=False, default=0.0)
    total_area_carpet = Column(Float, nullable=False, default=0.0)
    number_of_floors = Column(Integer, nullable=False, default=0)

    ownership_type = Column(String(20), nullable=False)
    # solo presente si ownership_type == leased
    lease_details = Column(JSON)
    status = Column(String(20), nullable=False)

    parking_allocation_2w = Column(Integer, nullable=False, default=0)
    parking_allocation_4w = Column(Integer, nullable=False, default=0)
    parking_allocation_ev = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    campus = relationship("Campus", back_populates="buildings")
    floors = relationship("Floor", back_populates="building")
