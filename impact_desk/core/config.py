from typing import Dict
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    PROJECT_NAME: str = "Impact Desk API"
    DATABASE_URL: str = "sqlite:///./impact_desk.db"
    LOG_LEVEL: str = "INFO"

    # Shown when a (service, priority) pair has no resolved history yet
    DEFAULT_ETA: str = "2 hours (est)"

    # Predicted root cause per service category, shown until one is recorded
    ROOT_CAUSE_DEFAULTS: Dict[str, str] = {
        "Network": "Upstream ISP Packet Loss",
        "Communication": "Mail Transport Queue Backlog",
        "Finance": "Batch Job Contention",
        "External": "Third-party API Degradation",
        "DevOps": "Failed Deployment Rollout",
    }
    ROOT_CAUSE_FALLBACK: str = "Pending analysis"

    DEFLECTION_MIN_QUERY_LENGTH: int = 3
    DEFLECTION_INCIDENT_LIMIT: int = 3
    DEFLECTION_SUGGESTION_LIMIT: int = 2

    ACTIVITY_FEED_LIMIT: int = 5
    AFFECTED_SERVICES_LIMIT: int = 5

    class Config:
        env_file = ".env"

settings = Settings()
