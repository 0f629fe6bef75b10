from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from impact_desk.core.db import get_db
from impact_desk.models.ticket import Ticket
from impact_desk.schemas.service import AlternativeResponse
from impact_desk.schemas.ticket import ActiveImpactResponse, TicketResponse, TicketStatus
from impact_desk.services.estimator import ImpactEstimator

router = APIRouter(prefix="/api", tags=["Impact"])


@router.get("/active-impacts", response_model=List[ActiveImpactResponse])
def get_active_impacts(db: Session = Depends(get_db)):
    """
    Every unresolved ticket, highest business impact first, with its predicted
    root cause, ETA and the workarounds known for its service.
    """
    tickets = (
        db.query(Ticket)
        .filter(Ticket.status != TicketStatus.RESOLVED.value)
        .order_by(Ticket.impact_score.desc(), Ticket.created_at.desc(), Ticket.id.desc())
        .all()
    )
    estimator = ImpactEstimator(db)

    impacts = []
    for ticket in tickets:
        payload = TicketResponse.model_validate(ticket).model_dump()
        payload.update(
            service_category=ticket.service_category,
            root_cause_display=estimator.root_cause_display(ticket),
            eta_display=estimator.eta_for(ticket),
            alternatives=[AlternativeResponse.model_validate(a) for a in ticket.service.alternatives],
        )
        impacts.append(ActiveImpactResponse(**payload))
    return impacts
