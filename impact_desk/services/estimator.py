"""Impact scoring, ETA estimation and root-cause display for tickets."""

from datetime import datetime
from typing import Dict, Iterable, Optional, Tuple
from sqlalchemy.orm import Session
from impact_desk.core.config import settings
from impact_desk.core.errors import NotFoundError
from impact_desk.models.service import Service
from impact_desk.models.ticket import Ticket
from impact_desk.schemas.ticket import TicketStatus


def mean_resolution_seconds(spans: Iterable[Tuple[datetime, datetime]]) -> Optional[float]:
    """Average of (resolved_at - created_at) in seconds, or None when there is nothing to average."""
    total = 0.0
    count = 0
    for created_at, resolved_at in spans:
        if created_at is None or resolved_at is None:
            continue
        total += (resolved_at - created_at).total_seconds()
        count += 1
    if count == 0:
        return None
    return total / count


def _trim(value: float) -> str:
    text = f"{value:.1f}"
    return text[:-2] if text.endswith(".0") else text


def format_duration(seconds: float) -> str:
    """
    Render a duration in the unit that reads best at its magnitude.

    Minutes up to three hours, hours up to two days, days beyond that.
    """
    minutes = seconds / 60
    if minutes < 180:
        return f"{int(round(minutes))} mins"
    hours = minutes / 60
    if hours < 48:
        return f"{_trim(hours)} hours"
    return f"{_trim(hours / 24)} days"


class ImpactEstimator:
    def __init__(self, db: Session):
        self.db = db
        self._eta_cache: Dict[Tuple[int, str], str] = {}

    def get_service(self, service_id: int) -> Service:
        service = self.db.query(Service).filter(Service.id == service_id).first()
        if not service:
            raise NotFoundError(f"Service {service_id} not found")
        return service

    def impact_score(self, service: Service) -> int:
        return max(0, (service.criticality_score or 0) * (service.user_count_estimate or 0))

    def eta_display(self, service_id: int, priority: str, eta_override: Optional[str] = None) -> str:
        """
        Estimated time to resolution for a ticket.

        An operator override always wins. Otherwise the mean resolution time of
        resolved tickets with the same service and priority is used, falling back
        to the configured default when no such history exists.
        """
        if eta_override and eta_override.strip():
            return eta_override

        key = (service_id, priority)
        if key not in self._eta_cache:
            spans = (
                self.db.query(Ticket.created_at, Ticket.resolved_at)
                .filter(
                    Ticket.service_id == service_id,
                    Ticket.priority == priority,
                    Ticket.status == TicketStatus.RESOLVED.value,
                    Ticket.resolved_at.isnot(None),
                )
                .all()
            )
            mean = mean_resolution_seconds(spans)
            self._eta_cache[key] = settings.DEFAULT_ETA if mean is None else format_duration(mean)
        return self._eta_cache[key]

    def eta_for(self, ticket: Ticket) -> str:
        return self.eta_display(ticket.service_id, ticket.priority, ticket.eta_override)

    def root_cause_display(self, ticket: Ticket, category: Optional[str] = None) -> str:
        if ticket.root_cause:
            return ticket.root_cause
        if category is None:
            category = ticket.service_category
        return settings.ROOT_CAUSE_DEFAULTS.get(category or "", settings.ROOT_CAUSE_FALLBACK)
