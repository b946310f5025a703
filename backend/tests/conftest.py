"""
Configuration partagée pour tous les tests.

- client       : API avec la BDD mockée (les services sont patchés dans chaque test)
- staff_client : idem, avec une session staff simulée
- team_client  : idem, avec la session de l'équipe 5
- db           : vraie session SQLAlchemy sur SQLite en mémoire (tests de service)
"""

import os

# Avant tout import de l'application : pas de PostgreSQL ni de scheduler en test
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SCHEDULER_ENABLED"] = "false"

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.database import Base, get_db
from app.dependencies import (
    Actor,
    get_current_actor,
    get_current_staff,
    get_current_team,
    get_optional_staff,
)
from app.main import app


def make_staff(staff_id=1, name="admin"):
    return SimpleNamespace(id=staff_id, name=name, checkpoint_id=None, is_admin=True)


def make_team(team_id=5, name="Équipe Rouge"):
    return SimpleNamespace(
        id=team_id, name=name, team_code="red123", color="#FF5555", total_score=0
    )


@pytest.fixture
def client():
    """Client HTTP de test avec la BDD mockée."""
    mock_db = MagicMock()
    app.dependency_overrides[get_db] = lambda: mock_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def staff_client():
    """Client HTTP authentifié comme membre du staff."""
    mock_db = MagicMock()
    staff = make_staff()
    app.dependency_overrides[get_db] = lambda: mock_db
    app.dependency_overrides[get_current_staff] = lambda: staff
    app.dependency_overrides[get_optional_staff] = lambda: staff
    app.dependency_overrides[get_current_actor] = lambda: Actor("staff", staff)
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def team_client():
    """Client HTTP authentifié comme l'équipe 5."""
    mock_db = MagicMock()
    team = make_team()
    app.dependency_overrides[get_db] = lambda: mock_db
    app.dependency_overrides[get_current_team] = lambda: team
    app.dependency_overrides[get_current_actor] = lambda: Actor("team", team)
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def db():
    """Session SQLite en mémoire avec toutes les tables créées."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()
