import os

# Settings are cached on first import, so the environment is set up front
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["OPENROUTER_API_KEY"] = "test-key"

import pytest
import requests
from unittest.mock import MagicMock
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from pricetracker.main import app
from pricetracker.database import Base, get_db
from pricetracker.models.product import Product


# Create test database (SQLite in-memory for testing)
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    """Override database dependency for testing."""
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


# Override the dependency
app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(scope="function")
def client():
    """Create test client with fresh database for each test."""
    # Create tables
    Base.metadata.create_all(bind=engine)

    with TestClient(app) as test_client:
        yield test_client

    # Drop tables after test
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def db_session():
    """Create database session for direct database access in tests."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()

    yield session

    session.close()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def product_payload():
    """Valid product fields as posted by a client."""
    return {
        "category": "Beverage",
        "name": "Cola",
        "brand": "Acme",
        "purchase_price": 1.00,
        "current_price": 1.20,
        "quality": "medium",
        "urgency": "low",
    }


@pytest.fixture
def make_product(db_session):
    """Insert a product directly and return it."""
    def _make_product(**overrides):
        fields = {
            "category": "Food",
            "name": "Bread",
            "brand": "Bakery",
            "purchase_price": 0.80,
            "current_price": 1.10,
            "quality": "medium",
            "urgency": "low",
        }
        fields.update(overrides)
        product = Product(**fields)
        db_session.add(product)
        db_session.commit()
        db_session.refresh(product)
        return product

    return _make_product


@pytest.fixture
def oracle_reply():
    """Build a fake chat-completion HTTP response."""
    def _oracle_reply(content, status_code=200):
        response = MagicMock()
        response.status_code = status_code
        response.text = content
        response.json.return_value = {
            "choices": [{"message": {"role": "assistant", "content": content}}]
        }
        if status_code >= 400:
            response.raise_for_status.side_effect = requests.HTTPError(
                f"{status_code} Error", response=response
            )
        else:
            response.raise_for_status.return_value = None
        return response

    return _oracle_reply
