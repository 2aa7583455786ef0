"""
Pytest configuration and fixtures for backend tests.
"""

import os

# Must be set before the app (and its engine) is imported
os.environ.setdefault("DATABASE_URL", "sqlite://")

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from orders_api.main import app
from orders_api.models import Base, Restaurant, Dish, Table
from shared.infrastructure.db import get_db
from shared.security.auth import sign_jwt
from shared.utils.schemas import CreateOrderRequest


# SQLite in-memory database for testing
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

CUSTOMER_ID = 42
OTHER_CUSTOMER_ID = 43
STAFF_ID = 7


@pytest.fixture(scope="function")
def db_session():
    """
    Create a fresh database session for each test.
    Uses SQLite in-memory for isolation.
    """
    Base.metadata.create_all(bind=engine)

    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db_session):
    """
    Create a test client with database session override.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# =============================================================================
# Seed data
# =============================================================================


@pytest.fixture
def seed_restaurant(db_session):
    """Restaurant with 8.5% tax, 10% service charge and a 2.99 delivery fee."""
    restaurant = Restaurant(
        name="Test Bistro",
        tax_rate=Decimal("8.50"),
        service_charge_rate=Decimal("10.00"),
        delivery_fee_cents=299,
    )
    db_session.add(restaurant)
    db_session.commit()
    db_session.refresh(restaurant)
    return restaurant


@pytest.fixture
def other_restaurant(db_session):
    restaurant = Restaurant(name="Other Place")
    db_session.add(restaurant)
    db_session.commit()
    db_session.refresh(restaurant)
    return restaurant


def _dish(restaurant_id: int, name: str, price_cents: int, stock: int, **kwargs) -> Dish:
    dish = Dish(
        restaurant_id=restaurant_id,
        name=name,
        price_cents=price_cents,
        stock_quantity=stock,
        low_stock_threshold=kwargs.pop("low_stock_threshold", 10),
        is_available=kwargs.pop("is_available", True),
        **kwargs,
    )
    return dish.check_stock_status()


@pytest.fixture
def seed_dishes(db_session, seed_restaurant):
    """
    Menu for seed_restaurant:
    - burger: 12.99, 20 in stock
    - fries: 4.50, 5 in stock (low)
    - soup: out of stock
    - special: unavailable
    """
    dishes = {
        "burger": _dish(seed_restaurant.id, "Burger", 1299, 20),
        "fries": _dish(seed_restaurant.id, "Fries", 450, 5),
        "soup": _dish(seed_restaurant.id, "Soup", 600, 0),
        "special": _dish(seed_restaurant.id, "Chef Special", 2500, 15, is_available=False),
    }
    db_session.add_all(dishes.values())
    db_session.commit()
    for dish in dishes.values():
        db_session.refresh(dish)
    return dishes


@pytest.fixture
def foreign_dish(db_session, other_restaurant):
    dish = _dish(other_restaurant.id, "Foreign Pasta", 1100, 30)
    db_session.add(dish)
    db_session.commit()
    db_session.refresh(dish)
    return dish


@pytest.fixture
def seed_table(db_session, seed_restaurant):
    table = Table(restaurant_id=seed_restaurant.id, table_number="4", capacity=4)
    db_session.add(table)
    db_session.commit()
    db_session.refresh(table)
    return table


@pytest.fixture
def foreign_table(db_session, other_restaurant):
    table = Table(restaurant_id=other_restaurant.id, table_number="1", capacity=2)
    db_session.add(table)
    db_session.commit()
    db_session.refresh(table)
    return table


# =============================================================================
# Requests and auth
# =============================================================================


@pytest.fixture
def order_request(seed_restaurant, seed_dishes):
    """
    Factory for CreateOrderRequest against seed_restaurant.

    Default: two burgers with a +1.50 "Size: Large" customization, paid in cash,
    which prices to subtotal 27.48 / tax 2.34 / service 2.75 / total 32.57.
    """
    def _make(**overrides) -> CreateOrderRequest:
        data = {
            "restaurant_id": seed_restaurant.id,
            "order_type": "takeout",
            "payment_method": "cash",
            "items": [
                {
                    "dish_id": seed_dishes["burger"].id,
                    "quantity": 2,
                    "customizations": [
                        {"name": "Size", "option": "Large", "price_cents": 150},
                    ],
                },
            ],
        }
        data.update(overrides)
        return CreateOrderRequest.model_validate(data)

    return _make


def _bearer(sub: int, role: str, **claims) -> dict[str, str]:
    token = sign_jwt({"sub": sub, "role": role, **claims})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def customer_headers():
    return _bearer(CUSTOMER_ID, "customer")


@pytest.fixture
def other_customer_headers():
    return _bearer(OTHER_CUSTOMER_ID, "customer")


@pytest.fixture
def staff_headers(seed_restaurant):
    return _bearer(STAFF_ID, "staff", restaurant_id=seed_restaurant.id)


@pytest.fixture
def foreign_owner_headers(other_restaurant):
    """Owner of other_restaurant, with no reach into seed_restaurant."""
    return _bearer(STAFF_ID, "restaurant_owner", restaurant_id=other_restaurant.id)


@pytest.fixture
def super_admin_headers():
    return _bearer(STAFF_ID, "super_admin")
