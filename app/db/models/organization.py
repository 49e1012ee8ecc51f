from sqlalchemy import Column, Integer, String, DateTime, func
from sqlalchemy.orm import relationship
from app.db.session import Base


class Organization(Base):
    __tablename__ = "organizations"

    seq = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String(36), unique=True, nullable=False)
    readable_id = Column(String(120), unique=True, nullable=False)
    name = Column(String(150), nullable=False)
    description = Column(String(500))
    headquarters = Column(String(200))
    website = Column(String(200))
    country_code = Column(String(8))
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    portfolios = relationship("Portfolio", back_populates="organization")
