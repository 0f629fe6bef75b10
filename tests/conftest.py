from datetime import datetime, timedelta
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from impact_desk.core.db import Base, get_db
from impact_desk.main import app
from impact_desk.models.service import Alternative, Service
from impact_desk.models.ticket import Ticket

SQLALCHEMY_DATABASE_URL = "sqlite:///./test_impact_desk.db"
engine = create_engine(
    SQLALCHEMY_DATABASE_URL, connect_args={"check_same_thread": False}
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

BASE_TIME = datetime(2026, 1, 15, 12, 0, 0)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(scope="function")
def db_session():
    # Create the tables
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        # Drop the tables after the test
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db_session):
    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.pop(get_db, None)


@pytest.fixture
def make_service(db_session):
    def _make(name="Test VPN", category="Network", criticality_score=4, user_count_estimate=100):
        service = Service(
            name=name,
            category=category,
            criticality_score=criticality_score,
            user_count_estimate=user_count_estimate,
        )
        db_session.add(service)
        db_session.commit()
        db_session.refresh(service)
        return service
    return _make


@pytest.fixture
def make_alternative(db_session):
    def _make(service, issue_type="Network", description="Connect to the backup gateway."):
        alternative = Alternative(service_id=service.id, issue_type=issue_type, description=description)
        db_session.add(alternative)
        db_session.commit()
        db_session.refresh(alternative)
        return alternative
    return _make


@pytest.fixture
def make_ticket(db_session):
    counter = {"n": 0}

    def _make(
        service,
        title="Cannot connect",
        description=None,
        status="Open",
        priority="Medium",
        impact_score=None,
        created_at=None,
        resolved_after=None,
        root_cause=None,
        eta_override=None,
    ):
        counter["n"] += 1
        created = created_at or BASE_TIME + timedelta(minutes=counter["n"])
        ticket = Ticket(
            incident_id=f"INC-TEST-{counter['n']:04d}",
            title=title,
            description=description,
            service_id=service.id,
            status=status,
            priority=priority,
            impact_score=impact_score if impact_score is not None else service.criticality_score * service.user_count_estimate,
            created_at=created,
            resolved_at=created + resolved_after if resolved_after is not None else None,
            root_cause=root_cause,
            eta_override=eta_override,
        )
        db_session.add(ticket)
        db_session.commit()
        db_session.refresh(ticket)
        return ticket
    return _make
