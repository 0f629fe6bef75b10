from datetime import datetime, timezone
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Text
from sqlalchemy.orm import relationship
from impact_desk.core.db import Base
from impact_desk.models.service import Service


def utcnow() -> datetime:
    """Naive UTC timestamp, the form every datetime column is stored in."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Ticket(Base):
    __tablename__ = "tickets"

    id = Column(Integer, primary_key=True, index=True)
    incident_id = Column(String(64), nullable=False, unique=True, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    service_id = Column(Integer, ForeignKey("services.id"), nullable=False, index=True)
    status = Column(String(50), nullable=False, default="Open", index=True)
    priority = Column(String(50), nullable=False, default="Medium", index=True)
    impact_score = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime, default=utcnow, nullable=False, index=True)

    # Populated only by resolution
    resolved_at = Column(DateTime, nullable=True)
    root_cause = Column(Text, nullable=True)
    root_cause_category = Column(String(100), nullable=True)

    # Manual ETA text set by an operator, wins over computed estimates
    eta_override = Column(String(100), nullable=True)

    service = relationship(Service)

    @property
    def service_name(self):
        return self.service.name if self.service is not None else None

    @property
    def service_category(self):
        return self.service.category if self.service is not None else None
