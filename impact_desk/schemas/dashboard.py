from pydantic import BaseModel
from typing import List, Optional


class AffectedService(BaseModel):
    name: str
    ticket_count: int

class DashboardStats(BaseModel):
    totalOpen: int
    avgResolutionHours: float
    criticalTickets: int
    affectedServices: List[AffectedService] = []

class ActivityEntry(BaseModel):
    type: str = "created"
    title: str
    incident_id: str
    time: Optional[str] = None


class IncidentSummary(BaseModel):
    id: int
    incident_id: str
    title: str
    status: str

class Suggestion(BaseModel):
    description: str
    service_name: str

class DeflectionResult(BaseModel):
    existing_incidents: List[IncidentSummary] = []
    suggestions: List[Suggestion] = []
