"""Search that surfaces open incidents and workarounds before a duplicate ticket is filed."""

from typing import Optional
from sqlalchemy import or_
from sqlalchemy.orm import Session
from impact_desk.core.config import settings
from impact_desk.models.service import Alternative, Service
from impact_desk.models.ticket import Ticket
from impact_desk.schemas.dashboard import DeflectionResult, IncidentSummary, Suggestion
from impact_desk.schemas.ticket import TicketStatus


def _like_pattern(query: str) -> str:
    escaped = query.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class DeflectionSearch:
    def __init__(self, db: Session):
        self.db = db

    def search(self, q: Optional[str]) -> DeflectionResult:
        query = (q or "").strip()
        if len(query) < settings.DEFLECTION_MIN_QUERY_LENGTH:
            return DeflectionResult()

        pattern = _like_pattern(query)

        tickets = (
            self.db.query(Ticket)
            .filter(
                Ticket.status != TicketStatus.RESOLVED.value,
                or_(
                    Ticket.title.ilike(pattern, escape="\\"),
                    Ticket.description.ilike(pattern, escape="\\"),
                ),
            )
            .order_by(Ticket.created_at.desc(), Ticket.id.desc())
            .limit(settings.DEFLECTION_INCIDENT_LIMIT)
            .all()
        )

        alternatives = (
            self.db.query(Alternative.description, Service.name)
            .join(Service, Alternative.service_id == Service.id)
            .filter(
                or_(
                    Service.name.ilike(pattern, escape="\\"),
                    Alternative.issue_type.ilike(pattern, escape="\\"),
                    Alternative.description.ilike(pattern, escape="\\"),
                )
            )
            .order_by(Alternative.id)
            .limit(settings.DEFLECTION_SUGGESTION_LIMIT)
            .all()
        )

        return DeflectionResult(
            existing_incidents=[
                IncidentSummary(id=t.id, incident_id=t.incident_id, title=t.title, status=t.status)
                for t in tickets
            ],
            suggestions=[
                Suggestion(description=description, service_name=name)
                for description, name in alternatives
            ],
        )
