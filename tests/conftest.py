import os
import random
import uuid

# Keep the module-level engine off disk before anything imports rentmimi.database
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("DB_LOG_SLOW_QUERIES", "false")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from rentmimi import models  # noqa: F401
from rentmimi.database import Base, build_engine
from rentmimi.domain.bookings.service import BookingService
from rentmimi.main import app
from rentmimi.schemas import Booking, BookingOptions, PartnerApplication, PartnerApplicationData, User
from rentmimi.services.notification_service import NotificationService, get_notification_service
from rentmimi.store import DataStore, get_store


@pytest.fixture
def session_factory():
    engine = build_engine("sqlite://")
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture
def store(session_factory):
    data_store = DataStore(session_factory)
    data_store.load()
    return data_store


@pytest.fixture
def notifier():
    return NotificationService()


@pytest.fixture
def booking_service(store, notifier):
    return BookingService(store, notifier, rng=random.Random(7))


@pytest.fixture
def client(store, notifier):
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_notification_service] = lambda: notifier
    yield TestClient(app)
    app.dependency_overrides.clear()


def as_user(phone):
    return {"X-User-Phone": phone}


def add_user(store, phone, nickname="tester", roles=("client",)):
    user = User(phone=phone, nickname=nickname, region="서울", roles=list(roles))
    with store.write() as s:
        s.users.upsert(user)
    return user


def add_partner(
    store,
    phone,
    name="미미",
    grade="BRONZE",
    available_for_booking=True,
    available_days=(),
    available_dates=None,
    latitude=None,
    longitude=None,
    styles=(),
):
    user = add_user(store, phone, nickname=name, roles=("client", "partner"))
    application = PartnerApplication(
        id=str(uuid.uuid4()),
        applicant=user,
        form_data=PartnerApplicationData(
            name=name,
            region="서울",
            account_number="110-123-456789",
            available_days=list(available_days),
            available_dates=available_dates,
            latitude=latitude,
            longitude=longitude,
            styles=list(styles),
            available_for_booking=available_for_booking,
            grade=grade,
        ),
    )
    with store.write() as s:
        s.partner_applications.upsert(application)
    return application


def add_booking(store, client_user, mimi=None, status="pending", **overrides):
    fields = {
        "id": str(uuid.uuid4()),
        "user": client_user,
        "mimi": mimi,
        "date": "2025-03-01",
        "time": "14:00",
        "duration": "2",
        "plan": "PREMIUM",
        "location": "강남역 11번 출구",
        "options": BookingOptions(),
        "total_cost": 140000,
        "status": status,
    }
    fields.update(overrides)
    booking = Booking(**fields)
    with store.write() as s:
        s.bookings.upsert(booking)
    return booking
