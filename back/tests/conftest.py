"""
Test configuration and fixtures.

Provides:
- Temporary SQLite database configured before the app is imported
- Tables created/dropped around every test
- Recording notification/evidence sinks for service-level tests
- TestClient for API tests
"""
import itertools
import os
import tempfile
from typing import Generator

_TEST_DB_DIR = tempfile.mkdtemp(prefix="booking-tests-")
TEST_DATABASE_URL = f"sqlite:///{os.path.join(_TEST_DB_DIR, 'test.db')}"

# 앱 import 전에 환경 구성
os.environ["DATABASE_URL"] = TEST_DATABASE_URL
os.environ["JWT_SECRET_KEY"] = "test-secret-key"
os.environ["DB_AUTO_CREATE"] = "false"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from app import app
from appointment.service import BookingService
from appointment.unit_of_work import UnitOfWork
from database import Base, engine, init_db
from helpers import RecordingEvidenceSink, RecordingNotificationSink, future_window
from models.enums import Role, ScheduleMode
from models.user import User
from notification.dispatcher import SideEffectDispatcher


# 테스트 코드가 직접 쓰는 세션은 pysqlite 기본 동작(조회 시 잠금 없음)을 사용한다.
# 앱 엔진(BEGIN IMMEDIATE)과 같은 파일을 공유한다.
test_engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest.fixture(autouse=True)
def tables() -> Generator[None, None, None]:
    init_db(engine)
    yield
    test_engine.dispose()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def session_factory(tables):
    return TestSessionLocal


@pytest.fixture
def db(tables) -> Generator[Session, None, None]:
    session = TestSessionLocal()
    yield session
    session.close()


# =============================================================================
# Service Fixtures
# =============================================================================

@pytest.fixture
def notification_sink() -> RecordingNotificationSink:
    return RecordingNotificationSink()


@pytest.fixture
def evidence_sink() -> RecordingEvidenceSink:
    return RecordingEvidenceSink()


@pytest.fixture
def dispatcher(notification_sink, evidence_sink) -> SideEffectDispatcher:
    return SideEffectDispatcher(notification_sink, evidence_sink)


@pytest.fixture
def service(db, dispatcher) -> BookingService:
    return BookingService(UnitOfWork(db), dispatcher)


@pytest.fixture
def make_user(db):
    counter = itertools.count(1)

    def _make(role: Role = Role.USER) -> User:
        n = next(counter)
        prefix = role.value.lower()
        user = User(
            email=f"{prefix}{n}@example.com",
            username=f"{prefix}{n}",
            full_name=f"{prefix.title()} {n}",
            hashed_password="not-a-real-hash",
            role=role,
            is_active=True,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture
def counselor(make_user) -> User:
    return make_user(Role.COUNSELOR)


@pytest.fixture
def client_user(make_user) -> User:
    return make_user(Role.USER)


@pytest.fixture
def admin(make_user) -> User:
    return make_user(Role.ADMIN)


@pytest.fixture
def make_schedule(db, dispatcher):
    def _make(counselor: User, hours_from_now: int = 24, mode: ScheduleMode = ScheduleMode.ONLINE, location=None):
        start, end = future_window(hours_from_now)
        return BookingService(UnitOfWork(db), dispatcher).create_schedule(counselor.id, start, end, mode, location)

    return _make


# =============================================================================
# API Fixtures
# =============================================================================

@pytest.fixture
def api(tables) -> Generator[TestClient, None, None]:
    with TestClient(app) as test_client:
        yield test_client
