import os
from datetime import date, time, timedelta

# Must be set before the application settings are imported
os.environ["TESTING"] = "1"
os.environ["TEST_DATABASE_URL"] = "sqlite:///./test.db"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from clinic_api.main import app
from clinic_api.core.database import get_db, get_redis, Base
from clinic_api.core.security import UserRole, create_user_token, get_password_hash
from clinic_api.models import Appointment, Doctor, DoctorSchedule, User
from clinic_api.scheduling import AppointmentStatus

SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(
    SQLALCHEMY_DATABASE_URL, connect_args={"check_same_thread": False}
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# A date far enough ahead that no slot is "in the past"
FUTURE_DATE = date.today() + timedelta(days=30)
DEFAULT_PASSWORD = "Password123"

def override_get_db():
    try:
        db = TestingSessionLocal()
        yield db
    finally:
        db.close()

app.dependency_overrides[get_db] = override_get_db

class FakeRedis:
    """Dict-backed stand-in for the handful of redis commands the rate limiter uses."""

    def __init__(self):
        self.data = {}

    def setex(self, key, ttl, value):
        self.data[key] = str(value)
        return True

    def get(self, key):
        return self.data.get(key)

    def incr(self, key):
        self.data[key] = str(int(self.data.get(key, "0")) + 1)
        return int(self.data[key])

@pytest.fixture(scope="function")
def test_db():
    # Create tables
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)

@pytest.fixture
def fake_redis():
    redis_client = FakeRedis()
    app.dependency_overrides[get_redis] = lambda: redis_client
    yield redis_client
    app.dependency_overrides.pop(get_redis, None)

@pytest.fixture
def client(test_db, fake_redis):
    with TestClient(app, base_url="http://testserver") as test_client:
        yield test_client

@pytest.fixture
def db_session(test_db):
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()

def make_user(db, username: str, role: UserRole = UserRole.PATIENT) -> dict:
    """Insert a user and return its id together with bearer headers."""
    user = User(
        username=username,
        email=f"{username}@example.com",
        password_hash=get_password_hash(DEFAULT_PASSWORD),
        role=role,
        first_name=username.title(),
        last_name="Tester",
        phone_number="555-0100",
        is_active=True,
    )
    db.add(user)
    db.commit()
    db.refresh(user)

    token = create_user_token(user.id, user.username, user.role)
    return {
        "id": user.id,
        "username": user.username,
        "headers": {"Authorization": f"Bearer {token.access_token}"},
    }

def make_doctor(db, first_name: str = "Gregory", last_name: str = "House") -> int:
    doctor = Doctor(first_name=first_name, last_name=last_name, specialization="Diagnostics")
    db.add(doctor)
    db.commit()
    db.refresh(doctor)
    return doctor.id

def make_schedule(db, doctor_id: int, on_date: date, start: time, end: time) -> int:
    schedule = DoctorSchedule(doctor_id=doctor_id, date=on_date, start_time=start, end_time=end)
    db.add(schedule)
    db.commit()
    db.refresh(schedule)
    return schedule.id

def make_appointment(
    db,
    patient_id: int,
    doctor_id: int,
    on_date: date,
    at: time,
    status: AppointmentStatus = AppointmentStatus.PENDING
) -> int:
    appointment = Appointment(
        patient_id=patient_id,
        doctor_id=doctor_id,
        date=on_date,
        time=at,
        service="General consultation",
        status=status,
    )
    db.add(appointment)
    db.commit()
    db.refresh(appointment)
    return appointment.id

@pytest.fixture
def admin(db_session):
    return make_user(db_session, "admin", UserRole.ADMIN)

@pytest.fixture
def patient(db_session):
    return make_user(db_session, "patient", UserRole.PATIENT)

@pytest.fixture
def other_patient(db_session):
    return make_user(db_session, "otherpatient", UserRole.PATIENT)

@pytest.fixture
def doctor_user(db_session):
    return make_user(db_session, "drstaff", UserRole.DOCTOR)

@pytest.fixture
def doctor_id(db_session):
    return make_doctor(db_session)

@pytest.fixture
def morning_schedule(db_session, doctor_id):
    """09:00-11:00 window on FUTURE_DATE."""
    return make_schedule(db_session, doctor_id, FUTURE_DATE, time(9, 0), time(11, 0))
