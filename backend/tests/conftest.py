"""
EventHub - Test Configuration and Fixtures
"""
import os
import itertools
from datetime import date, time, timedelta
from typing import AsyncGenerator, Dict, Any, List
import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import NullPool
from faker import Faker

# Set testing environment (before any eventhub import reads settings)
os.environ['ENVIRONMENT'] = 'testing'
os.environ['DATABASE_URL'] = 'sqlite+aiosqlite:///./test.db'
os.environ['SESSION_BACKEND'] = 'database'
os.environ['RATE_LIMIT_ENABLED'] = 'false'
os.environ['BCRYPT_ROUNDS'] = '4'
os.environ['RAZORPAY_KEY_ID'] = 'rzp_test_key'
os.environ['RAZORPAY_KEY_SECRET'] = 'rzp_test_secret'
os.environ['FRONTEND_URL'] = 'http://localhost:5173'
os.environ['LEGACY_SCAN_QR_ENABLED'] = 'true'

from eventhub.main import app
from eventhub.core.database import Base, get_db
from eventhub.core.security import get_password_hash
from eventhub.models import Student, Club, Membership, Event
from eventhub.services.email_service import EmailService, get_email_service
from eventhub.services.payment_service import PaymentGateway, get_payment_gateway

fake = Faker('en_IN')

TEST_PASSWORD = 'testpassword123'
TEST_KEY_ID = 'rzp_test_key'
TEST_KEY_SECRET = 'rzp_test_secret'

# Test database setup
TEST_DATABASE_URL = 'sqlite+aiosqlite:///./test.db'
test_engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=NullPool)
TestSessionLocal = sessionmaker(
    bind=test_engine,
    class_=AsyncSession,
    expire_on_commit=False
)

_usn_counter = itertools.count(1)


def next_usn(branch: str = 'CS') -> str:
    """Unique, well-formed USN for this test run"""
    return f"1BM23{branch}{next(_usn_counter):03d}"


def signup_payload(**overrides) -> Dict[str, Any]:
    usn = overrides.pop('usn', None) or next_usn()
    payload = {
        'name': fake.name(),
        'usn': usn,
        'sem': 5,
        'mobno': '98' + fake.numerify('########'),
        'email': f"{usn.lower()}@bmsce.ac.in",
        'password': TEST_PASSWORD,
    }
    payload.update(overrides)
    return payload


def event_payload(days_ahead: int = 7, **overrides) -> Dict[str, Any]:
    payload = {
        'eventName': 'Hackathon 2.0',
        'eventDescription': '24 hour hackathon',
        'eventDate': (date.today() + timedelta(days=days_ahead)).isoformat(),
        'eventTime': '10:30',
        'eventLocation': 'Main Auditorium',
    }
    payload.update(overrides)
    return payload


class FakeEmailService(EmailService):
    """Records reset emails instead of sending them"""

    def __init__(self):
        super().__init__()
        self.sent: List[Dict[str, str]] = []
        self.fail = False

    async def send_password_reset_email(self, to_email: str, user_name: str, reset_token: str) -> bool:
        if self.fail:
            return False
        self.sent.append({
            'to': to_email,
            'name': user_name,
            'token': reset_token,
            'link': self.reset_link(reset_token),
        })
        return True


class FakePaymentGateway(PaymentGateway):
    """Returns canned Razorpay orders; signature checks use the real HMAC"""

    def __init__(self):
        super().__init__(TEST_KEY_ID, TEST_KEY_SECRET)
        self.orders: List[Dict[str, Any]] = []
        self.fail = False

    async def create_order(self, amount: int, currency: str, receipt: str, notes: Dict[str, Any]) -> Dict[str, Any]:
        if self.fail:
            raise RuntimeError("gateway unavailable")
        order = {
            'id': f"order_test{len(self.orders) + 1:04d}",
            'entity': 'order',
            'amount': amount,
            'currency': currency,
            'receipt': receipt,
            'notes': notes,
            'status': 'created',
        }
        self.orders.append(order)
        return order


@pytest_asyncio.fixture(scope='function')
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create a fresh database for each test"""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with TestSessionLocal() as session:
        yield session
        await session.rollback()

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
def email_service() -> FakeEmailService:
    return FakeEmailService()


@pytest.fixture
def payment_gateway() -> FakePaymentGateway:
    return FakePaymentGateway()


@pytest_asyncio.fixture
async def client_factory(db_session: AsyncSession, email_service, payment_gateway):
    """
    Build test clients. Each client has its own cookie jar, so each one
    can be signed in as a different student.
    """
    async def override_get_db():
        async with TestSessionLocal() as session:
            try:
                yield session
                if session.new or session.dirty or session.deleted:
                    await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_email_service] = lambda: email_service
    app.dependency_overrides[get_payment_gateway] = lambda: payment_gateway

    clients: List[AsyncClient] = []

    def make() -> AsyncClient:
        ac = AsyncClient(transport=ASGITransport(app=app), base_url='http://test')
        clients.append(ac)
        return ac

    yield make

    for ac in clients:
        await ac.aclose()
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(client_factory) -> AsyncClient:
    """Anonymous test client"""
    return client_factory()


async def signup(client: AsyncClient, **overrides) -> Dict[str, Any]:
    """Sign up through the API; the client keeps the session cookie"""
    payload = signup_payload(**overrides)
    response = await client.post('/api/signup', json=payload)
    assert response.status_code == 201, response.text
    return payload


@pytest_asyncio.fixture
async def student_client(client_factory):
    """Factory returning (client, signup payload) for a freshly signed-up student"""
    async def make(**overrides):
        ac = client_factory()
        payload = await signup(ac, **overrides)
        return ac, payload
    return make


@pytest_asyncio.fixture
async def test_student(db_session: AsyncSession) -> Dict[str, Any]:
    """Student inserted directly into the database"""
    usn = next_usn()
    data = {
        'usn': usn,
        'name': fake.name(),
        'semester': 3,
        'mobile': '9123456780',
        'email': f"{usn.lower()}@bmsce.ac.in",
    }
    db_session.add(Student(hashed_password=get_password_hash(TEST_PASSWORD), **data))
    await db_session.commit()
    return data


@pytest_asyncio.fixture
async def test_club(db_session: AsyncSession) -> Dict[str, Any]:
    club = Club(name='Coding Club', description='Competitive programming', max_members=100)
    db_session.add(club)
    await db_session.commit()
    return {'id': club.id, 'name': club.name}


async def add_membership(db_session: AsyncSession, usn: str, club_id: int) -> None:
    db_session.add(Membership(student_usn=usn, club_id=club_id))
    await db_session.commit()


async def insert_event(
    db_session: AsyncSession,
    organizer_usn: str,
    event_date: date,
    **fields
) -> int:
    """Insert an event row directly (allows past dates)"""
    values = {
        'name': 'Tech Talk',
        'description': 'Talk on distributed systems',
        'event_time': time(14, 30),
        'location': 'Seminar Hall 1',
        'registration_fee': 0,
    }
    values.update(fields)
    event = Event(organizer_usn=organizer_usn, event_date=event_date, **values)
    db_session.add(event)
    await db_session.commit()
    event_id = event.id
    db_session.expunge(event)
    return event_id
