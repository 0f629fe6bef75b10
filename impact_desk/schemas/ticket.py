from pydantic import BaseModel, Field, ConfigDict, field_serializer
from typing import Optional, List
from datetime import datetime, timezone
from enum import Enum
from impact_desk.schemas.service import AlternativeResponse

class TicketStatus(str, Enum):
    OPEN = "Open"
    IN_PROGRESS = "In Progress"
    DIAGNOSING = "Diagnosing"
    RESOLVED = "Resolved"

class TicketPriority(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    CRITICAL = "Critical"


class TicketCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255, description="Short summary of the incident.")
    description: Optional[str] = Field(None, description="Free-text details from the requester.")
    service_id: int = Field(..., description="The affected service.")
    priority: TicketPriority = Field(TicketPriority.MEDIUM, description="Requested priority.")

class TicketCreated(BaseModel):
    success: bool = True
    id: int
    incident_id: str

class TicketUpdate(BaseModel):
    status: Optional[TicketStatus] = None
    eta_override: Optional[str] = Field(None, max_length=100, description="Manual ETA text, empty string clears it.")

class ResolutionRequest(BaseModel):
    root_cause: str = Field(..., min_length=1, description="What caused the incident.")
    root_cause_category: Optional[str] = Field(None, max_length=100, description="Classification of the root cause.")


def to_utc_iso(value: Optional[datetime]) -> Optional[str]:
    """ISO-8601 with an explicit UTC offset; stored datetimes are naive UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat()


class TicketResponse(BaseModel):
    id: int
    incident_id: str
    title: str
    description: Optional[str] = None
    service_id: int
    service_name: Optional[str] = None
    # Enums are enforced on write; reads pass stored values through
    status: str
    priority: str
    impact_score: int
    created_at: datetime
    resolved_at: Optional[datetime] = None
    root_cause: Optional[str] = None
    root_cause_category: Optional[str] = None
    eta_override: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("created_at", "resolved_at", when_used="json")
    def _serialize_timestamp(self, value: Optional[datetime]) -> Optional[str]:
        return to_utc_iso(value)

class TicketDetailResponse(TicketResponse):
    criticality_score: int
    user_count_estimate: int
    eta_display: str
    eta: str
    alternatives: List[AlternativeResponse] = []

class ActiveImpactResponse(TicketResponse):
    service_category: Optional[str] = None
    root_cause_display: str
    eta_display: str
    alternatives: List[AlternativeResponse] = []
