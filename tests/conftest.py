import os
import tempfile
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient

# Set required environment variables for testing
os.environ["API_PREFIX"] = "/api"
os.environ["JWT_ACCESS_SECRET"] = "test-access-secret-key-for-testing-only"
os.environ["JWT_REFRESH_SECRET"] = "test-refresh-secret-key-for-testing-only"
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="familyhub-uploads-")

from familyhub.main import app
from familyhub.database import get_db
from familyhub.models import Base, User, Family, FamilyMember, FamilyRole, Category, TaskTemplate
from familyhub.utils.security import get_password_hash

TEST_DATABASE_URL = "sqlite:///:memory:"


@pytest.fixture
def engine():
    """A fresh in-memory database for every test."""
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(engine):
    """
    Database session shared by the test and the app under test.
    Services commit and roll back for real against the per-test database.
    """
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()

    def override_get_db():
        try:
            yield session
        finally:
            pass  # Closed after the test

    app.dependency_overrides[get_db] = override_get_db
    yield session

    # Cleanup
    session.close()
    app.dependency_overrides.clear()


@pytest.fixture
def client(db_session):
    """Create a FastAPI TestClient with database session override."""
    with TestClient(app) as c:
        yield c


@pytest.fixture
def test_user(db_session):
    """Create a test user for authentication tests."""
    user = User(
        email="test@example.com",
        phone="5550000001",
        country_code="+1",
        name="Test User",
        password_hash=get_password_hash("testpass123"),
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def other_user(db_session):
    user = User(
        email="other@example.com",
        phone="5550000002",
        country_code="+1",
        name="Other User",
        password_hash=get_password_hash("otherpass123"),
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def auth_token(client, test_user):
    """Get authentication token for test user."""
    response = client.post(
        "/api/auth/login",
        json={"email": "test@example.com", "password": "testpass123"},
    )
    return response.json()["data"]["access"]


@pytest.fixture
def auth_headers(auth_token):
    """Get authorization headers with bearer token."""
    return {"Authorization": f"Bearer {auth_token}"}


@pytest.fixture
def test_family(db_session, test_user):
    """A family owned by test_user, who is its FATHER member."""
    family = Family(name="The Tests", owner_id=test_user.id)
    db_session.add(family)
    db_session.flush()
    db_session.add(FamilyMember(family_id=family.id, user_id=test_user.id, role=FamilyRole.FATHER))
    db_session.commit()
    db_session.refresh(family)
    return family


@pytest.fixture
def owner_membership(db_session, test_family, test_user):
    return (
        db_session.query(FamilyMember)
        .filter_by(family_id=test_family.id, user_id=test_user.id)
        .one()
    )


@pytest.fixture
def child_membership(db_session, test_family):
    """A passwordless child in test_family."""
    child = User(name="Kid", login_code="KID123")
    db_session.add(child)
    db_session.flush()
    member = FamilyMember(family_id=test_family.id, user_id=child.id, role=FamilyRole.SON)
    db_session.add(member)
    db_session.commit()
    db_session.refresh(member)
    return member


@pytest.fixture
def test_category(db_session):
    category = Category(name="Chores", icon_url="https://cdn.example.com/chores.png")
    db_session.add(category)
    db_session.commit()
    db_session.refresh(category)
    return category


@pytest.fixture
def global_template(db_session, test_category):
    """A template with no creator, visible to everyone."""
    template = TaskTemplate(
        title="Make the bed",
        description="Every morning",
        category_id=test_category.id,
    )
    db_session.add(template)
    db_session.commit()
    db_session.refresh(template)
    return template
