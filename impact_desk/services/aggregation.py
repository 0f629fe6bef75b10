"""Dashboard statistics and the activity feed."""

from typing import List
from sqlalchemy import func
from sqlalchemy.orm import Session
from impact_desk.core.config import settings
from impact_desk.models.service import Service
from impact_desk.models.ticket import Ticket
from impact_desk.schemas.dashboard import ActivityEntry, AffectedService, DashboardStats
from impact_desk.schemas.ticket import TicketPriority, TicketStatus, to_utc_iso
from impact_desk.services.estimator import mean_resolution_seconds

RESOLVED = TicketStatus.RESOLVED.value


class DashboardAggregator:
    def __init__(self, db: Session):
        self.db = db

    def total_open(self) -> int:
        return self.db.query(func.count(Ticket.id)).filter(Ticket.status != RESOLVED).scalar() or 0

    def avg_resolution_hours(self) -> float:
        spans = (
            self.db.query(Ticket.created_at, Ticket.resolved_at)
            .filter(Ticket.status == RESOLVED, Ticket.resolved_at.isnot(None))
            .all()
        )
        mean = mean_resolution_seconds(spans)
        if mean is None:
            return 0
        return round(mean / 3600, 1)

    def critical_open(self) -> int:
        return (
            self.db.query(func.count(Ticket.id))
            .filter(Ticket.priority == TicketPriority.CRITICAL.value, Ticket.status != RESOLVED)
            .scalar()
            or 0
        )

    def affected_services(self) -> List[AffectedService]:
        ticket_count = func.count(Ticket.id).label("ticket_count")
        rows = (
            self.db.query(Service.name, ticket_count)
            .join(Ticket, Ticket.service_id == Service.id)
            .filter(Ticket.status != RESOLVED)
            .group_by(Service.id, Service.name)
            .order_by(ticket_count.desc(), Service.name)
            .limit(settings.AFFECTED_SERVICES_LIMIT)
            .all()
        )
        return [AffectedService(name=name, ticket_count=count) for name, count in rows]

    def stats(self) -> DashboardStats:
        return DashboardStats(
            totalOpen=self.total_open(),
            avgResolutionHours=self.avg_resolution_hours(),
            criticalTickets=self.critical_open(),
            affectedServices=self.affected_services(),
        )

    def activity_feed(self) -> List[ActivityEntry]:
        tickets = (
            self.db.query(Ticket.title, Ticket.incident_id, Ticket.created_at)
            .order_by(Ticket.created_at.desc(), Ticket.id.desc())
            .limit(settings.ACTIVITY_FEED_LIMIT)
            .all()
        )
        return [
            ActivityEntry(
                type="created",
                title=title,
                incident_id=incident_id,
                time=to_utc_iso(created_at),
            )
            for title, incident_id, created_at in tickets
        ]
