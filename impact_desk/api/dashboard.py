from typing import List, Optional
from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from impact_desk.core.db import get_db
from impact_desk.core.logging import get_logger
from impact_desk.schemas.dashboard import ActivityEntry, DashboardStats, DeflectionResult
from impact_desk.services.aggregation import DashboardAggregator
from impact_desk.services.deflection import DeflectionSearch

router = APIRouter(prefix="/api", tags=["Dashboard"])
logger = get_logger(__name__)


@router.get("/dashboard", response_model=DashboardStats)
def get_dashboard(db: Session = Depends(get_db)):
    return DashboardAggregator(db).stats()


# The two endpoints below feed optional UI widgets, so store failures
# degrade to empty payloads instead of an error status.

@router.get("/activity-log", response_model=List[ActivityEntry])
def get_activity_log(db: Session = Depends(get_db)):
    try:
        return DashboardAggregator(db).activity_feed()
    except SQLAlchemyError:
        logger.exception("activity feed unavailable")
        return []


@router.get("/search-deflection", response_model=DeflectionResult)
def search_deflection(q: Optional[str] = None, db: Session = Depends(get_db)):
    try:
        return DeflectionSearch(db).search(q)
    except SQLAlchemyError:
        logger.exception("deflection search unavailable", extra={"query": q})
        return DeflectionResult()
