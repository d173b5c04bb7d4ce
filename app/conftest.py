import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

import models_sqlalchemy as models
from api_endpoints import app, get_query_service
from executor import QueryExecutor
from query_service import QueryService

# ---------- TEST FIXTURES ----------

# Use in-memory SQLite for test isolation; StaticPool keeps one shared connection
TEST_DATABASE_URL = "sqlite://"

@pytest.fixture(scope="function")
def executor():
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    # The executor installs its connect hooks before the first connection opens
    executor = QueryExecutor(engine)
    models.create_schema(engine)
    yield executor
    models.drop_schema(engine)
    executor.dispose()

@pytest.fixture(scope="function")
def service(executor):
    return QueryService(executor)

@pytest.fixture(scope="function")
def client(service):
    """Override get_query_service dependency for FastAPI TestClient."""
    app.dependency_overrides[get_query_service] = lambda: service
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()

@pytest.fixture(scope="function")
def db_session(executor):
    """ORM session for seeding rows the service has no insert for."""
    session = Session(bind=executor.engine)
    yield session
    session.close()
