from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from impact_desk.core.db import get_db
from impact_desk.core.errors import ConflictError, NotFoundError
from impact_desk.core.logging import get_logger
from impact_desk.models.service import Alternative, Service
from impact_desk.schemas.service import AlternativeCreate, AlternativeResponse, ServiceCreate, ServiceResponse

router = APIRouter(prefix="/api/services", tags=["Services"])
logger = get_logger(__name__)


def _get_service_or_404(db: Session, service_id: int) -> Service:
    service = db.query(Service).filter(Service.id == service_id).first()
    if not service:
        raise NotFoundError("Service not found")
    return service


@router.get("", response_model=List[ServiceResponse])
def get_services(db: Session = Depends(get_db)):
    return db.query(Service).order_by(Service.name).all()


@router.post("", response_model=ServiceResponse, status_code=status.HTTP_201_CREATED)
def create_service(service_in: ServiceCreate, db: Session = Depends(get_db)):
    """
    Register a service. Admin-time operation; services are not edited afterwards.
    """
    if db.query(Service.id).filter(Service.name == service_in.name).first() is not None:
        raise ConflictError(f"Service '{service_in.name}' already exists")

    try:
        service = Service(**service_in.model_dump())
        db.add(service)
        db.commit()
        db.refresh(service)
    except Exception:
        db.rollback()
        raise

    logger.info("service registered", extra={"service": service.name, "criticality_score": service.criticality_score})
    return service


@router.get("/{service_id}/alternatives", response_model=List[AlternativeResponse])
def get_alternatives(service_id: int, db: Session = Depends(get_db)):
    return _get_service_or_404(db, service_id).alternatives


@router.post("/{service_id}/alternatives", response_model=AlternativeResponse, status_code=status.HTTP_201_CREATED)
def create_alternative(service_id: int, alternative_in: AlternativeCreate, db: Session = Depends(get_db)):
    service = _get_service_or_404(db, service_id)

    try:
        alternative = Alternative(service_id=service.id, **alternative_in.model_dump())
        db.add(alternative)
        db.commit()
        db.refresh(alternative)
        return alternative
    except Exception:
        db.rollback()
        raise
