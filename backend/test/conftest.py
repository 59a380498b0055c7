"""
Pytest Configuration and Fixtures
"""

import os

# Settings are read on import; point them at an in-memory database first
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["DEBUG"] = "false"
os.environ["TWILIO_ACCOUNT_SID"] = ""
os.environ["TWILIO_AUTH_TOKEN"] = ""
os.environ["TWILIO_PHONE_NUMBER"] = ""

from datetime import datetime, timedelta  # noqa: E402
from typing import Generator  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import Session, sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

import flexispace.database as database  # noqa: E402
import flexispace.models  # noqa: E402,F401
from flexispace.config import settings  # noqa: E402
from flexispace.database import Base, get_db  # noqa: E402
from flexispace.main import app  # noqa: E402
from flexispace.models.booking import Booking, BookingStatus, PaymentStatus  # noqa: E402
from flexispace.models.invoice import Invoice  # noqa: E402
from flexispace.models.space import Space, SpaceType  # noqa: E402
from flexispace.models.user import User, UserType  # noqa: E402
from flexispace.services.invoice_service import issue_invoice  # noqa: E402
from test_utils import create_booking, create_space, create_user, future_slot, make_headers  # noqa: E402

# One shared in-memory connection for the app and the tests
engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

database._engine = engine
database._SessionLocal = TestingSessionLocal


@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """Fresh schema for every test"""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db: Session) -> Generator[TestClient, None, None]:
    """Create a test client with database override"""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def guest_user(db: Session) -> User:
    return create_user(db, "guest@example.com", "Grace Guest", phone="+15550000001")


@pytest.fixture
def provider_user(db: Session) -> User:
    return create_user(db, "host@example.com", "Harry Host", user_type=UserType.PROVIDER, phone="+15550000002")


@pytest.fixture
def other_user(db: Session) -> User:
    return create_user(db, "other@example.com", "Olivia Other")


@pytest.fixture
def admin_user(db: Session) -> User:
    return create_user(db, "admin@example.com", "Ada Admin", user_type=UserType.ADMIN)


@pytest.fixture
def guest_headers(guest_user: User) -> dict:
    return make_headers(guest_user)


@pytest.fixture
def provider_headers(provider_user: User) -> dict:
    return make_headers(provider_user)


@pytest.fixture
def other_headers(other_user: User) -> dict:
    return make_headers(other_user)


@pytest.fixture
def admin_headers(admin_user: User) -> dict:
    return make_headers(admin_user)


@pytest.fixture
def test_space(db: Session, provider_user: User) -> Space:
    """A space whose requests need approval"""
    return create_space(db, provider_user)


@pytest.fixture
def instant_space(db: Session, provider_user: User) -> Space:
    """A space that confirms bookings at once"""
    return create_space(
        db,
        provider_user,
        title="Rooftop Event Hall",
        space_type=SpaceType.EVENT_VENUE,
        category="Conference Hall",
        capacity=100,
        city="Brooklyn",
        amenities=["WiFi", "Sound System"],
        requires_approval=False,
        instant_booking=True,
    )


@pytest.fixture
def pending_booking(db: Session, guest_user: User, test_space: Space) -> Booking:
    start, end = future_slot(days=3)
    return create_booking(db, guest_user, test_space, start, end)


@pytest.fixture
def approved_booking(db: Session, guest_user: User, test_space: Space) -> Booking:
    """Approved booking with its invoice"""
    start, end = future_slot(days=4)
    booking = create_booking(db, guest_user, test_space, start, end, status=BookingStatus.APPROVED)
    issue_invoice(db, booking)
    db.refresh(booking)
    return booking


@pytest.fixture
def completed_booking(db: Session, guest_user: User, test_space: Space) -> Booking:
    start = (datetime.utcnow() - timedelta(days=3)).replace(hour=10, minute=0, second=0, microsecond=0)
    return create_booking(
        db,
        guest_user,
        test_space,
        start,
        start + timedelta(hours=2),
        status=BookingStatus.COMPLETED,
        payment_status=PaymentStatus.PAID,
    )


@pytest.fixture
def test_invoice(approved_booking: Booking) -> Invoice:
    return approved_booking.invoice


@pytest.fixture
def mock_twilio(mocker):
    """Twilio configured, with the REST client mocked"""
    mocker.patch.object(settings, "TWILIO_ACCOUNT_SID", "ACtest")
    mocker.patch.object(settings, "TWILIO_AUTH_TOKEN", "token")
    mocker.patch.object(settings, "TWILIO_PHONE_NUMBER", "+15559999999")

    mock_client = mocker.patch("flexispace.services.notification_service.Client")
    message = mock_client.return_value.messages.create.return_value
    message.sid = "SM123"
    message.status = "queued"

    return mock_client.return_value
