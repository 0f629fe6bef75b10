import time
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from impact_desk.core.db import get_db
from impact_desk.core.errors import NotFoundError
from impact_desk.core.lifecycle import TicketLifecycle
from impact_desk.core.logging import get_logger
from impact_desk.models.ticket import Ticket, utcnow
from impact_desk.schemas.service import AlternativeResponse
from impact_desk.schemas.ticket import (
    ResolutionRequest,
    TicketCreate,
    TicketCreated,
    TicketDetailResponse,
    TicketResponse,
    TicketStatus,
    TicketUpdate,
)
from impact_desk.services.estimator import ImpactEstimator

router = APIRouter(prefix="/api/tickets", tags=["Tickets"])
logger = get_logger(__name__)


def _new_incident_id(db: Session) -> str:
    base = f"INC-{int(time.time() * 1000)}"
    candidate = base
    suffix = 1
    while db.query(Ticket.id).filter(Ticket.incident_id == candidate).first() is not None:
        suffix += 1
        candidate = f"{base}-{suffix}"
    return candidate


def _get_ticket_or_404(db: Session, ticket_id: int) -> Ticket:
    ticket = db.query(Ticket).filter(Ticket.id == ticket_id).first()
    if not ticket:
        raise NotFoundError("Ticket not found")
    return ticket


@router.post("", response_model=TicketCreated, status_code=status.HTTP_201_CREATED)
def create_ticket(ticket_in: TicketCreate, db: Session = Depends(get_db)):
    """
    Submit a new incident.
    The impact score is frozen at creation from the service's criticality and user count.
    """
    estimator = ImpactEstimator(db)
    service = estimator.get_service(ticket_in.service_id)

    try:
        db_ticket = Ticket(
            incident_id=_new_incident_id(db),
            title=ticket_in.title,
            description=ticket_in.description,
            service_id=service.id,
            status=TicketStatus.OPEN.value,
            priority=ticket_in.priority.value,
            impact_score=estimator.impact_score(service),
            created_at=utcnow(),
        )
        db.add(db_ticket)
        db.commit()
        db.refresh(db_ticket)
    except Exception:
        db.rollback()
        raise

    logger.info(
        "ticket created",
        extra={"incident_id": db_ticket.incident_id, "service": service.name, "impact_score": db_ticket.impact_score},
    )
    return TicketCreated(id=db_ticket.id, incident_id=db_ticket.incident_id)


@router.get("", response_model=List[TicketResponse])
def get_tickets(
    status: Optional[TicketStatus] = None,
    limit: Optional[int] = Query(None, ge=1, le=1000),
    db: Session = Depends(get_db)
):
    """
    List tickets newest first, optionally filtered by status and capped.
    """
    query = db.query(Ticket)

    if status is not None:
        query = query.filter(Ticket.status == status.value)

    query = query.order_by(Ticket.created_at.desc(), Ticket.id.desc())
    if limit is not None:
        query = query.limit(limit)
    return query.all()


@router.get("/{ticket_id}", response_model=TicketDetailResponse)
def get_ticket(ticket_id: int, db: Session = Depends(get_db)):
    """
    Retrieve a ticket with its service figures, ETA and available workarounds.
    """
    ticket = _get_ticket_or_404(db, ticket_id)
    estimator = ImpactEstimator(db)
    eta = estimator.eta_for(ticket)

    payload = TicketResponse.model_validate(ticket).model_dump()
    payload.update(
        criticality_score=ticket.service.criticality_score,
        user_count_estimate=ticket.service.user_count_estimate,
        eta_display=eta,
        eta=eta,
        alternatives=[AlternativeResponse.model_validate(a) for a in ticket.service.alternatives],
    )
    return TicketDetailResponse(**payload)


@router.patch("/{ticket_id}", response_model=TicketResponse)
def update_ticket(ticket_id: int, update_data: TicketUpdate, db: Session = Depends(get_db)):
    """
    Change a ticket's working status or its manual ETA.
    Resolution MUST go through /resolve.
    """
    ticket = _get_ticket_or_404(db, ticket_id)
    lifecycle = TicketLifecycle(db)

    try:
        if update_data.status is not None:
            lifecycle.transition(ticket, update_data.status)
        if "eta_override" in update_data.model_fields_set:
            lifecycle.set_eta_override(ticket, update_data.eta_override)

        db.commit()
        db.refresh(ticket)
        return ticket
    except Exception:
        db.rollback()
        raise


@router.post("/{ticket_id}/resolve", response_model=TicketResponse)
def resolve_ticket(ticket_id: int, request: ResolutionRequest, db: Session = Depends(get_db)):
    """
    Close a ticket with its recorded root cause.
    """
    ticket = _get_ticket_or_404(db, ticket_id)
    lifecycle = TicketLifecycle(db)

    try:
        lifecycle.resolve(ticket, request.root_cause, request.root_cause_category)
        db.commit()
        db.refresh(ticket)
        return ticket
    except Exception:
        db.rollback()
        raise
