"""Pytest configuration and fixtures."""

import itertools
import os
from datetime import datetime

# Settings are read at import time; keep tests off Prometheus and in UTC
os.environ.setdefault("METRICS_ENABLED", "false")
os.environ.setdefault("DEFAULT_TIMEZONE", "UTC")
os.environ.setdefault("SECRET_KEY", "test-secret")

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from partnerhub.db.base import Base
from partnerhub.models import Partner, Project, Task, User

FIXED_NOW = datetime(2024, 6, 15, 12, 0, 0)

_seq = itertools.count(1)


def fixed_clock() -> datetime:
    return FIXED_NOW


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    TestingSession = sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)
    session = TestingSession()
    yield session
    session.close()


@pytest.fixture
def query_counter(engine):
    """Counts SQL statements executed against the test engine."""
    statements = []

    def _record(conn, cursor, statement, parameters, context, executemany):
        statements.append(statement)

    event.listen(engine, "before_cursor_execute", _record)
    yield statements
    event.remove(engine, "before_cursor_execute", _record)


@pytest.fixture
def make_user(db):
    def _make(**kwargs) -> User:
        n = next(_seq)
        data = {"email": f"user{n}@example.com", "full_name": f"User {n}", "role": "member"}
        data.update(kwargs)
        user = User(**data)
        db.add(user)
        db.commit()
        return user
    return _make


@pytest.fixture
def make_project(db, make_user):
    def _make(owner: User = None, **kwargs) -> Project:
        n = next(_seq)
        owner = owner or make_user()
        data = {
            "name": f"Project {n}",
            "status": "in_progress",
            "owner_id": owner.id,
            "health_score": 100,
        }
        data.update(kwargs)
        project = Project(**data)
        db.add(project)
        db.commit()
        return project
    return _make


@pytest.fixture
def make_task(db):
    def _make(project: Project = None, **kwargs) -> Task:
        n = next(_seq)
        data = {"title": f"Task {n}", "status": "todo"}
        if project is not None:
            data["project_id"] = project.id
        data.update(kwargs)
        task = Task(**data)
        db.add(task)
        db.commit()
        return task
    return _make


@pytest.fixture
def make_partner(db):
    def _make(**kwargs) -> Partner:
        n = next(_seq)
        data = {"name": f"Contact {n}", "email": f"partner{n}@example.com", "status": "active"}
        data.update(kwargs)
        partner = Partner(**data)
        db.add(partner)
        db.commit()
        return partner
    return _make
