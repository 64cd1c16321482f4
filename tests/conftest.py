import os

os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("SUPABASE_JWT_SECRET", "test-supabase-jwt-secret")

import pytest
from datetime import datetime, timedelta, UTC
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from jose import jwt

from neocrm.database import get_db
from neocrm.models.base import Base
from neocrm.config import settings
# Import all model classes to ensure they're registered with SQLAlchemy
from neocrm.models.profile import Profile
from neocrm.models.cliente import Cliente
from neocrm.models.cliente_member import ClienteMember
from neocrm.models.session_state import SessionState  # noqa: F401
# Import FastAPI app AFTER model imports
from neocrm.main import app

# Test database (SQLite in-memory for speed)
# Use StaticPool to ensure all connections share the same in-memory database
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"
engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db_session():
    """Create fresh database for each test"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db_session):
    """FastAPI test client with test database"""

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def create_test_token(
    user_id: str = "test-user-123",
    expired: bool = False,
    email: str | None = None,
    secret: str | None = None,
    **overrides,
) -> str:
    """
    Generate a Supabase-style access token for testing.

    Args:
        user_id: User ID to embed in 'sub' claim
        expired: If True, create expired token
        email: Email claim, defaults to <user_id>@example.com
        secret: Signing key, defaults to the configured Supabase secret
        overrides: Claims to replace; a None value drops the claim

    Returns:
        Encoded JWT token
    """
    if expired:
        exp = datetime.now(UTC) - timedelta(minutes=5)
    else:
        exp = datetime.now(UTC) + timedelta(minutes=15)

    payload = {
        "sub": user_id,
        "exp": exp,
        "iat": datetime.now(UTC),
        "aud": settings.JWT_AUDIENCE,
        "email": email or f"{user_id}@example.com",
    }
    payload.update(overrides)
    payload = {key: value for key, value in payload.items() if value is not None}

    return jwt.encode(payload, secret or settings.SUPABASE_JWT_SECRET, algorithm="HS256")


@pytest.fixture
def make_token():
    """Token factory, see create_test_token"""
    return create_test_token


@pytest.fixture
def headers_for():
    """Authorization headers for a given user id"""

    def _headers(user_id: str) -> dict:
        return {"Authorization": f"Bearer {create_test_token(user_id=user_id)}"}

    return _headers


@pytest.fixture
def make_profile(db_session):
    """Create a profile row with the given role"""

    def _make(user_id: str, role: str | None = "viewer", email: str | None = None) -> Profile:
        profile = Profile(
            id=user_id,
            email=email or f"{user_id}@example.com",
            full_name=user_id.replace("-", " ").title(),
            role=role,
        )
        db_session.add(profile)
        db_session.commit()
        db_session.refresh(profile)
        return profile

    return _make


@pytest.fixture
def add_member(db_session):
    """Create a membership; the role defaults to the profile's role"""

    def _add(profile: Profile, cliente: Cliente, role: str | None = None) -> ClienteMember:
        membership = ClienteMember(
            cliente_id=cliente.id,
            user_id=profile.id,
            role=role or profile.role,
        )
        db_session.add(membership)
        db_session.commit()
        db_session.refresh(membership)
        return membership

    return _add


@pytest.fixture
def cliente_a(db_session):
    cliente = Cliente(id="cliente-a", nome="Acme Imóveis")
    db_session.add(cliente)
    db_session.commit()
    db_session.refresh(cliente)
    return cliente


@pytest.fixture
def cliente_b(db_session):
    cliente = Cliente(id="cliente-b", nome="Beta Seguros")
    db_session.add(cliente)
    db_session.commit()
    db_session.refresh(cliente)
    return cliente
