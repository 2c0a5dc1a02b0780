"""Pytest configuration and fixtures shared across all test modules.

This file is automatically loaded by pytest before running any tests.
Environment variables are set before any ``collab_board`` import so the
global settings pick up the testing configuration: an in-memory database
and the cheapest bcrypt cost.
"""

import os

# CRITICAL: Set these before any imports that might load settings
os.environ["APP_ENV"] = "testing"
os.environ.setdefault("DB_URL", "sqlite://")
os.environ.setdefault("APP_BCRYPT_ROUNDS", "4")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from typing import Iterator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from collab_board.adapters.store.database import build_engine, build_session_factory, create_schema, db_session
from collab_board.core.app_factory import create_app


class FakeClock:
    """Deterministic clock for sliding-window tests."""

    def __init__(self, start: float = 1_000_000.0) -> None:
        self.current = start

    def __call__(self) -> float:
        return self.current

    def advance(self, seconds: float) -> None:
        self.current += seconds


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def session() -> Iterator[Session]:
    """A session bound to a fresh in-memory database."""
    engine = build_engine("sqlite://")
    create_schema(engine)
    with db_session(build_session_factory(engine)) as db:
        yield db
    engine.dispose()


@pytest.fixture
def app() -> FastAPI:
    """An isolated application: its own database and attempt limiter."""
    return create_app(database_url="sqlite://")


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app)
