import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from datetime import date, datetime, time, timedelta
import os

# Set testing environment variable before the app reads its settings
os.environ["TESTING"] = "1"
os.environ["TEST_DATABASE_URL"] = "sqlite:///./test.db"

from clinic.main import app
from clinic.core.database import get_db, get_redis, Base
from clinic.core.security import UserKind, create_access_token
from clinic.models import User, ScheduleSlot, TimeOff, TimeOffStatus, Appointment, AppointmentStatus

# Create test database
SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(
    SQLALCHEMY_DATABASE_URL, connect_args={"check_same_thread": False}
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

def override_get_db():
    try:
        db = TestingSessionLocal()
        yield db
    finally:
        db.close()

class InMemoryRedis:
    """Just enough of the redis client for the rate limiter."""

    def __init__(self):
        self.values = {}

    def get(self, key):
        return self.values.get(key)

    def setex(self, key, seconds, value):
        self.values[key] = value

    def incr(self, key):
        self.values[key] = int(self.values.get(key, 0)) + 1
        return self.values[key]

test_redis = InMemoryRedis()

app.dependency_overrides[get_db] = override_get_db
app.dependency_overrides[get_redis] = lambda: test_redis

@pytest.fixture(scope="function")
def test_db():
    # Create tables
    Base.metadata.create_all(bind=engine)
    test_redis.values.clear()
    yield
    Base.metadata.drop_all(bind=engine)

@pytest.fixture
def db(test_db):
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()

@pytest.fixture
def client(test_db):
    with TestClient(app, base_url="http://testserver") as test_client:
        yield test_client

# Test data helpers

def make_user(db, email, kind, first_name="Test", last_name="User", is_active=True):
    user = User(email=email, first_name=first_name, last_name=last_name, kind=kind, is_active=is_active)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user

def add_shift(db, employee, day_of_week, start=time(9, 0), end=time(17, 0)):
    slot = ScheduleSlot(employee_id=employee.id, day_of_week=day_of_week, start_time=start, end_time=end)
    db.add(slot)
    db.commit()
    return slot

def add_time_off(db, employee, start, end, status=TimeOffStatus.APPROVED):
    time_off = TimeOff(employee_id=employee.id, start_datetime=start, end_datetime=end, status=status)
    db.add(time_off)
    db.commit()
    db.refresh(time_off)
    return time_off

def add_appointment(db, doctor, patient, start, duration_minutes=30, is_done=False):
    appointment = Appointment(
        doctor_id=doctor.id,
        patient_id=patient.id,
        start_datetime=start,
        duration_minutes=duration_minutes,
        status=AppointmentStatus.DONE if is_done else AppointmentStatus.OPEN,
        is_done=is_done,
    )
    db.add(appointment)
    db.commit()
    db.refresh(appointment)
    return appointment

def auth_headers(user):
    token = create_access_token({"sub": str(user.id), "email": user.email, "kind": user.kind.value})
    return {"Authorization": f"Bearer {token}"}

def next_monday(weeks_ahead=1) -> date:
    """A Monday at least `weeks_ahead` weeks out, so it is always bookable."""
    today = date.today()
    return today + timedelta(days=7 - today.weekday() + 7 * weeks_ahead)

@pytest.fixture
def doctor(db):
    user = make_user(db, "doctor@clinic.com", UserKind.DOCTOR, "Gregory", "House")
    add_shift(db, user, 0)
    return user

@pytest.fixture
def patient(db):
    return make_user(db, "patient@clinic.com", UserKind.PATIENT, "Pat", "Ient")

@pytest.fixture
def admin(db):
    return make_user(db, "admin@clinic.com", UserKind.ADMIN, "Ada", "Min")

@pytest.fixture
def monday():
    return next_monday()

@pytest.fixture
def fixed_clock():
    """Clock pinned to a Wednesday morning."""
    now = datetime(2030, 1, 2, 8, 0)
    return lambda: now
