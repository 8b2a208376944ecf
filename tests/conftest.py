"""
FundRaiser - Test Configuration and Fixtures
"""
import os
import shutil
import tempfile
from collections.abc import AsyncGenerator
from decimal import Decimal
from pathlib import Path
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel, select

# One directory per run; the engine binds to this URL at import time
TEST_DB_DIR = Path(tempfile.mkdtemp(prefix="fundraiser-tests-"))
TEST_DB_PATH = TEST_DB_DIR / "fundraiser_test.db"

# Settings are read once at import time
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{TEST_DB_PATH}"
os.environ["JWT_SECRET"] = "test-jwt-secret-for-testing-only"
os.environ["FRONTEND_URL"] = "https://fundraiser.test"
os.environ["BACKEND_URL"] = "https://api.fundraiser.test"
os.environ["SSL_STORE_ID"] = "teststore"
os.environ["SSL_STORE_PASSWORD"] = "teststore@ssl"
os.environ["ADMIN_EMAIL"] = "admin@fundraiser.test"

from src.core.config import Settings, get_settings  # noqa: E402
from src.core.exceptions import GatewayUnavailableError, NotificationDeliveryError  # noqa: E402
from src.core.security import hash_password  # noqa: E402
from src.db.engine import async_session_factory, engine  # noqa: E402
from src.gateway.base import GatewaySession, GatewayVerification, PaymentGateway  # noqa: E402
from src.models.transaction import Transaction, TransactionStatus  # noqa: E402
from src.models.user import User  # noqa: E402

TEST_PASSWORD = "correct-horse-battery"


class FakeGateway(PaymentGateway):
    """In-memory gateway double."""

    def __init__(self) -> None:
        self.redirect_url: str | None = "https://sandbox.sslcommerz.test/gwprocess/v4/gw.php?Q=pay"
        self.session_error: Exception | None = None
        self.verify_error: Exception | None = None
        self.verifications: dict[str, GatewayVerification] = {}
        self.session_requests: list[dict[str, Any]] = []
        self.verify_calls: list[str] = []

    @property
    def name(self) -> str:
        return "fake"

    async def create_session(self, request: dict[str, Any]) -> GatewaySession:
        self.session_requests.append(request)
        if self.session_error is not None:
            raise self.session_error
        return GatewaySession(
            redirect_url=self.redirect_url,
            status="SUCCESS" if self.redirect_url else "FAILED",
            failed_reason=None if self.redirect_url else "Store Credential Error",
        )

    async def verify(self, validation_id: str) -> GatewayVerification:
        self.verify_calls.append(validation_id)
        if self.verify_error is not None:
            raise self.verify_error
        try:
            return self.verifications[validation_id]
        except KeyError:
            return GatewayVerification(status="INVALID_TRANSACTION", transaction_id=None, amount=None)

    def confirm(
        self,
        val_id: str,
        tran_id: str,
        amount: str,
        payer_email: str | None = "donor@example.com",
        status: str = "VALID",
        currency: str = "BDT",
    ) -> None:
        """Register the gateway's record for a validation ID."""
        self.verifications[val_id] = GatewayVerification(
            status=status,
            transaction_id=tran_id,
            amount=Decimal(amount),
            currency=currency,
            payer_email=payer_email,
            bank_transaction_id=f"BANK{val_id}",
            card_type="VISA-Dutch Bangla",
            raw={"status": status, "tran_id": tran_id, "amount": amount, "val_id": val_id},
        )

    def go_down(self) -> None:
        self.session_error = GatewayUnavailableError("Payment gateway timed out")
        self.verify_error = GatewayUnavailableError("Payment gateway timed out")


class FakeNotifier:
    """Records notices instead of enqueueing them."""

    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.sent: list[tuple[str, str, dict[str, Any]]] = []

    def notify(self, recipient: str, template_kind: str, template_data: dict[str, Any]) -> bool:
        if self.fail:
            raise RuntimeError("broker unavailable")
        self.sent.append((recipient, template_kind, template_data))
        return True


class FakeEmailService:
    """Records rendered emails instead of talking to SMTP."""

    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.sent: list[dict[str, Any]] = []

    async def send_template(
        self,
        to: str,
        kind: str,
        data: dict[str, Any],
        reply_to: str | None = None,
    ) -> None:
        if self.fail:
            raise NotificationDeliveryError("SMTP server unreachable", {"to": to})
        self.sent.append({"to": to, "kind": kind, "data": data, "reply_to": reply_to})


@pytest.fixture(scope="session", autouse=True)
def _remove_test_database():
    yield
    shutil.rmtree(TEST_DB_DIR, ignore_errors=True)


@pytest.fixture
def settings() -> Settings:
    return get_settings()


@pytest.fixture
async def database() -> AsyncGenerator[None, None]:
    """Create fresh tables for one test."""
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    # Pooled connections are bound to this test's event loop
    await engine.dispose()


@pytest.fixture
async def db_session(database) -> AsyncGenerator[AsyncSession, None]:
    async with async_session_factory() as session:
        yield session


@pytest.fixture
def session_factory(database):
    return async_session_factory


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def notifier() -> FakeNotifier:
    return FakeNotifier()


@pytest.fixture
def email_service() -> FakeEmailService:
    return FakeEmailService()


@pytest.fixture
async def donor(db_session: AsyncSession) -> User:
    """Create a donor with zero donated amount."""
    user = User(
        first_name="Rahim",
        last_name="Uddin",
        email="donor@example.com",
        phone="01700000000",
        username="rahim",
        description="Regular donor",
        password_hash=hash_password(TEST_PASSWORD, rounds=4),
    )
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest.fixture
def make_transaction(db_session: AsyncSession, donor: User):
    """Factory for transactions owned by the test donor."""

    async def _make(
        transaction_id: str = "TR1702345678000ABC123DEF0",
        amount: str = "500.00",
        status: TransactionStatus = TransactionStatus.INITIATED,
        currency: str = "BDT",
    ) -> Transaction:
        transaction = Transaction(
            transaction_id=transaction_id,
            user_id=donor.id,
            amount=Decimal(amount),
            currency=currency,
            status=status,
        )
        db_session.add(transaction)
        await db_session.commit()
        await db_session.refresh(transaction)
        return transaction

    return _make


@pytest.fixture
def load_state(session_factory):
    """Read a transaction and its donor through a fresh session."""

    async def _load(transaction_id: str, user_id: int) -> tuple[Transaction, User]:
        async with session_factory() as session:
            result = await session.execute(
                select(Transaction).where(Transaction.transaction_id == transaction_id)
            )
            transaction = result.scalar_one()
            user = await session.get(User, user_id)
            return transaction, user

    return _load


@pytest.fixture
async def client(
    database,
    gateway: FakeGateway,
    notifier: FakeNotifier,
    email_service: FakeEmailService,
) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client against the app with external services replaced."""
    from src.api.deps import get_email_service, get_notifier
    from src.gateway import get_payment_gateway
    from src.main import app

    app.dependency_overrides[get_payment_gateway] = lambda: gateway
    app.dependency_overrides[get_notifier] = lambda: notifier
    app.dependency_overrides[get_email_service] = lambda: email_service

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
