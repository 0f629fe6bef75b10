from pydantic import BaseModel, Field, ConfigDict


class ServiceCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255, description="Unique human-readable service name.")
    category: str = Field(..., min_length=1, max_length=100, description="Free-text classification, e.g. 'Network'.")
    criticality_score: int = Field(..., ge=1, le=5, description="Business-set weight from 1 to 5.")
    user_count_estimate: int = Field(..., ge=0, description="Approximate number of users depending on the service.")

class ServiceResponse(ServiceCreate):
    id: int

    model_config = ConfigDict(from_attributes=True)


class AlternativeCreate(BaseModel):
    issue_type: str = Field(..., min_length=1, max_length=100, description="Issue category, e.g. 'Network' or 'Auth'.")
    description: str = Field(..., min_length=1, description="The workaround text.")

class AlternativeResponse(AlternativeCreate):
    id: int
    service_id: int

    model_config = ConfigDict(from_attributes=True)
