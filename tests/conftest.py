"""
Pytest fixtures: in-memory database, API client and factor tables.
"""
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from co2survey import crud
from co2survey.database import Base, get_db
from co2survey.factors import ENERGY_DEMAND_WARM_WATER, FLIGHT, HEATING, TRANSPORT, Factor
from co2survey.main import app
from co2survey.models import Role


@pytest.fixture
def factors():
    return [
        Factor(TRANSPORT, "PKW Benzin", 120.0, "g/km"),
        Factor(TRANSPORT, "ÖPNV Bahn/Tram", 30.0, "g/km"),
        Factor(TRANSPORT, "Fahrrad", 0.0, "g/km"),
        Factor(FLIGHT, "Flugreisen Kurzstrecke (<1500 km)", 1000.0, "g/Flug"),
        Factor(HEATING, ENERGY_DEMAND_WARM_WATER, 3000.0, "kWh/a"),
        Factor(HEATING, "Erdgas (Brennwert)", 0.2, "kg/kWh"),
    ]


@pytest.fixture
def db():
    engine = create_engine(
        "sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    """Create a user with a role and return (user, auth headers)."""
    def _make(email, role=Role.EMPLOYEE, password="secret123", name=None):
        user = crud.create_user(db, email, password, name=name, role=role)
        user = crud.issue_token(db, user)
        return user, {"Authorization": f"Bearer {user.token}"}
    return _make
