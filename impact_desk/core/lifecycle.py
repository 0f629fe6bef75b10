from typing import Optional
from sqlalchemy.orm import Session
from impact_desk.core.errors import ConflictError, InvalidRequestError
from impact_desk.core.logging import get_logger
from impact_desk.models.ticket import Ticket, utcnow
from impact_desk.schemas.ticket import TicketStatus

logger = get_logger(__name__)

VALID_TRANSITIONS = {
    TicketStatus.OPEN: [TicketStatus.IN_PROGRESS, TicketStatus.DIAGNOSING, TicketStatus.RESOLVED],
    TicketStatus.IN_PROGRESS: [TicketStatus.OPEN, TicketStatus.DIAGNOSING, TicketStatus.RESOLVED],
    TicketStatus.DIAGNOSING: [TicketStatus.IN_PROGRESS, TicketStatus.RESOLVED],
    TicketStatus.RESOLVED: [],
}

class TicketLifecycle:
    def __init__(self, db: Session):
        self.db = db

    def validate_transition(self, current: str, new: TicketStatus):
        try:
            current_status = TicketStatus(current)
        except ValueError:
            raise ConflictError(f"Ticket is in unrecognised status '{current}'")
        if new not in VALID_TRANSITIONS[current_status]:
            raise ConflictError(f"Transition from {current_status.value} to {new.value} is not permitted.")

    def transition(self, ticket: Ticket, new_status: TicketStatus) -> Ticket:
        """
        Move a ticket between non-resolved states.
        Resolution must go through resolve() so that its fields are populated together.
        Does NOT commit. The caller must commit the transaction.
        """
        if new_status == TicketStatus.RESOLVED:
            raise InvalidRequestError("Status cannot be set to Resolved directly. Use the resolve endpoint.")
        if ticket.status == new_status.value:
            return ticket
        self.validate_transition(ticket.status, new_status)

        previous = ticket.status
        ticket.status = new_status.value
        logger.info("ticket transitioned", extra={"incident_id": ticket.incident_id, "from": previous, "to": new_status.value})
        return ticket

    def set_eta_override(self, ticket: Ticket, eta_override: Optional[str]) -> Ticket:
        if ticket.status == TicketStatus.RESOLVED.value:
            raise ConflictError("Cannot change the ETA of a resolved ticket.")
        value = eta_override.strip() if eta_override else ""
        ticket.eta_override = value or None
        return ticket

    def resolve(self, ticket: Ticket, root_cause: str, root_cause_category: Optional[str] = None) -> Ticket:
        """
        Resolve a ticket, stamping resolved_at and the recorded root cause.
        Does NOT commit. The caller must commit the transaction.
        """
        self.validate_transition(ticket.status, TicketStatus.RESOLVED)

        now = utcnow()
        ticket.status = TicketStatus.RESOLVED.value
        # Clock skew must never produce a negative resolution time
        ticket.resolved_at = max(now, ticket.created_at) if ticket.created_at else now
        ticket.root_cause = root_cause
        ticket.root_cause_category = root_cause_category
        logger.info("ticket resolved", extra={"incident_id": ticket.incident_id, "root_cause_category": root_cause_category})
        return ticket
