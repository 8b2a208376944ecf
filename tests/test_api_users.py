from datetime import datetime, timedelta

from sqlmodel import select

from src.core.security import create_access_token, hash_password
from src.models.user import AccountStatus, User

REGISTRATION = {
    "first_name": "Karim",
    "last_name": "Ahmed",
    "email": "Karim@Example.com",
    "phone": "01811111111",
    "username": "karim",
    "description": "First-time donor",
    "password": "s3cret-pass",
    "confirm_password": "s3cret-pass",
}


def auth_headers(user, settings) -> dict[str, str]:
    token = create_access_token(user.id, user.role.value, settings)
    return {"Authorization": f"Bearer {token}"}


# ============ Registration & login ============


async def test_register_creates_donor_and_sends_welcome(client, notifier) -> None:
    response = await client.post("/api/user/register", json=REGISTRATION)

    assert response.status_code == 201
    user = response.json()["user"]
    assert user["email"] == "karim@example.com"
    assert user["donated_amount"] == "0.00"
    assert "password_hash" not in user
    assert notifier.sent[0][0] == "karim@example.com"
    assert notifier.sent[0][1] == "welcome"


async def test_register_duplicate_email_conflicts(client, donor) -> None:
    response = await client.post(
        "/api/user/register", json={**REGISTRATION, "email": "DONOR@example.com", "username": "other"}
    )

    assert response.status_code == 409
    assert response.json()["error_code"] == "CONFLICT"


async def test_register_password_mismatch(client) -> None:
    response = await client.post("/api/user/register", json={**REGISTRATION, "confirm_password": "nope-nope"})

    assert response.status_code == 400
    assert response.json()["message"] == "Passwords do not match"


async def test_register_rejects_bad_phone(client) -> None:
    response = await client.post("/api/user/register", json={**REGISTRATION, "phone": "12ab"})

    assert response.status_code == 422


async def test_login_sets_cookie_and_me_works(client) -> None:
    await client.post("/api/user/register", json=REGISTRATION)

    response = await client.post(
        "/api/user/login", json={"email": "KARIM@example.com", "password": "s3cret-pass"}
    )

    assert response.status_code == 200
    assert response.json()["token"]
    assert "token" in response.cookies

    me = await client.get("/api/user/me")
    assert me.status_code == 200
    assert me.json()["username"] == "karim"
    assert me.json()["last_login"] is not None


async def test_login_wrong_password(client, donor) -> None:
    response = await client.post("/api/user/login", json={"email": "donor@example.com", "password": "wrong"})

    assert response.status_code == 401
    assert response.json()["message"] == "Invalid credentials"


async def test_me_rejects_garbage_token(client, database) -> None:
    response = await client.get("/api/user/me", headers={"Authorization": "Bearer not-a-jwt"})

    assert response.status_code == 401


async def test_suspended_donor_is_rejected(client, db_session, donor, settings) -> None:
    donor.account_status = AccountStatus.SUSPENDED
    await db_session.commit()

    response = await client.get("/api/user/me", headers=auth_headers(donor, settings))

    assert response.status_code == 401


async def test_logout_clears_cookie(client, donor, settings) -> None:
    response = await client.post("/api/user/logout", headers=auth_headers(donor, settings))

    assert response.status_code == 200
    assert 'token=""' in response.headers["set-cookie"] or "Max-Age=0" in response.headers["set-cookie"]


# ============ Password update with OTP ============


async def test_request_otp_emails_code(client, session_factory, donor, email_service, settings) -> None:
    response = await client.post("/api/user/password/otp", headers=auth_headers(donor, settings))

    assert response.status_code == 200
    sent = email_service.sent[0]
    assert sent["to"] == "donor@example.com"
    assert sent["kind"] == "password_otp"
    assert len(sent["data"]["otp"]) == 4

    async with session_factory() as session:
        user = await session.get(User, donor.id)
        assert user.otp_hash is not None
        assert user.otp_hash != sent["data"]["otp"]


async def test_request_otp_email_failure_clears_otp(client, session_factory, donor, email_service, settings) -> None:
    email_service.fail = True

    response = await client.post("/api/user/password/otp", headers=auth_headers(donor, settings))

    assert response.status_code == 500
    assert response.json()["message"] == "Failed to send OTP. Please try again later."
    async with session_factory() as session:
        user = await session.get(User, donor.id)
        assert user.otp_hash is None
        assert user.otp_expires_at is None


async def test_update_password_with_otp(client, session_factory, donor, email_service, settings) -> None:
    headers = auth_headers(donor, settings)
    await client.post("/api/user/password/otp", headers=headers)
    otp = email_service.sent[0]["data"]["otp"]

    response = await client.patch(
        "/api/user/password", json={"otp": otp, "new_password": "brand-new-password"}, headers=headers
    )

    assert response.status_code == 200
    login = await client.post(
        "/api/user/login", json={"email": "donor@example.com", "password": "brand-new-password"}
    )
    assert login.status_code == 200


async def test_update_password_with_expired_otp(client, db_session, donor, settings) -> None:
    donor.otp_hash = hash_password("1234", rounds=4)
    donor.otp_expires_at = datetime.utcnow() - timedelta(minutes=1)
    await db_session.commit()

    response = await client.patch(
        "/api/user/password",
        json={"otp": "1234", "new_password": "brand-new-password"},
        headers=auth_headers(donor, settings),
    )

    assert response.status_code == 400
    assert "expired" in response.json()["message"]


async def test_update_password_with_wrong_otp(client, db_session, donor, settings) -> None:
    donor.otp_hash = hash_password("1234", rounds=4)
    donor.otp_expires_at = datetime.utcnow() + timedelta(minutes=5)
    await db_session.commit()

    response = await client.patch(
        "/api/user/password",
        json={"otp": "4321", "new_password": "brand-new-password"},
        headers=auth_headers(donor, settings),
    )

    assert response.status_code == 400
    assert response.json()["message"] == "Invalid OTP."


# ============ Contact form ============


async def test_contact_message_goes_to_admin(client, email_service) -> None:
    response = await client.post(
        "/api/contact/send-message",
        json={"name": "Nadia", "email": "nadia@example.com", "subject": "Hello", "message": "Great work!"},
    )

    assert response.status_code == 200
    assert response.json()["success"] is True
    sent = email_service.sent[0]
    assert sent["to"] == "admin@fundraiser.test"
    assert sent["reply_to"] == "nadia@example.com"
    assert sent["kind"] == "contact_message"


async def test_contact_message_delivery_failure(client, email_service) -> None:
    email_service.fail = True

    response = await client.post(
        "/api/contact/send-message",
        json={"name": "Nadia", "email": "nadia@example.com", "subject": "Hello", "message": "Great work!"},
    )

    assert response.status_code == 500
    assert response.json()["error_code"] == "NOTIFICATION_FAILED"


async def test_registered_emails_are_stored_lowercase(client, session_factory) -> None:
    await client.post("/api/user/register", json=REGISTRATION)

    async with session_factory() as session:
        emails = (await session.execute(select(User.email))).scalars().all()
    assert emails == ["karim@example.com"]
