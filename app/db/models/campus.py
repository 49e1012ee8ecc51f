from sqlalchemy import Column, Integer, String, Boolean, DateTime, JSON, func, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from app.db.session import Base


class Campus(Base):
    __tablename__ = "campuses"
    __table_args__ = (
        UniqueConstraint("portfolio_id", "readable_id", name="uq_campus_readable_id_per_portfolio"),
    )

    seq = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String(36), unique=True, nullable=False)
    readable_id = Column(String(120), nullable=False)
    portfolio_id = Column(String(36), ForeignKey("portfolios.id"), nullable=False, index=True)
    name = Column(String(150), nullable=False)
    city = Column(String(100))
    address = Column(String(300))
    gps_coordinates = Column(String(60))
    type = Column(String(40), nullable=False)
    status = Column(String(20), nullable=False)

    # parqueo
    total_parking_slots_2w = Column(Integer, nullable=False, default=0)
    total_parking_slots_4w = Column(Integer, nullable=False, default=0)
    total_parking_ev_slots = Column(Integer, nullable=False, default=0)

    amenities = Column(JSON, nullable=False, default=list)
    green_infrastructure = Column(JSON, nullable=False, default=dict)
    bcp_dr_available = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    portfolio = relationship("Portfolio", back_populates="campuses")
    buildings = relationship("Building", back_populates="campus")
