from sqlalchemy import Column, Integer, String, Text, ForeignKey
from sqlalchemy.orm import relationship
from impact_desk.core.db import Base

class Service(Base):
    """
    An internal IT system users depend on, weighted by business criticality.
    Created at admin time and immutable afterwards.
    """
    __tablename__ = "services"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False, unique=True)
    category = Column(String(100), nullable=False, index=True)
    criticality_score = Column(Integer, nullable=False)
    user_count_estimate = Column(Integer, nullable=False, default=0)

    alternatives = relationship("Alternative", back_populates="service", order_by="Alternative.id")

class Alternative(Base):
    """
    Pre-authored workaround for a service and issue type. Read-only at runtime.
    """
    __tablename__ = "alternatives"

    id = Column(Integer, primary_key=True, index=True)
    service_id = Column(Integer, ForeignKey("services.id"), nullable=False, index=True)
    issue_type = Column(String(100), nullable=False)
    description = Column(Text, nullable=False)

    service = relationship("Service", back_populates="alternatives")
