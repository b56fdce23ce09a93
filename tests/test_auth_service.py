from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest

from fintrack.auth import SessionManager
from fintrack.services.auth_service import AuthService


def _auth_response(user_id: str = "user-1", with_session: bool = True) -> SimpleNamespace:
    return SimpleNamespace(
        user=SimpleNamespace(id=user_id, email="me@example.com", user_metadata={"display_name": "Me"}),
        session=object() if with_session else None,
    )


@pytest.fixture
def auth():
    return AsyncMock()


@pytest.fixture
def service(auth, logger):
    session = SessionManager()
    db = SimpleNamespace(supabase=SimpleNamespace(auth=auth))
    return AuthService(db=db, session=session, logger=logger), session


@pytest.mark.unit
@pytest.mark.asyncio
async def test_sign_in_records_session_user(service, auth):
    svc, session = service
    auth.sign_in_with_password.return_value = _auth_response()

    result = await svc.sign_in(" Me@Example.com ", "secret123")

    assert result.success
    assert session.user_id == "user-1"
    assert result.data.display_name == "Me"
    auth.sign_in_with_password.assert_awaited_once_with(
        {"email": "me@example.com", "password": "secret123"},
    )


@pytest.mark.unit
@pytest.mark.asyncio
async def test_sign_in_maps_invalid_credentials(service, auth):
    svc, session = service
    auth.sign_in_with_password.side_effect = Exception("Invalid login credentials")

    result = await svc.sign_in("me@example.com", "wrong")

    assert result.status_code == 401
    assert result.error == "Incorrect email or password."
    assert not session.is_authenticated


@pytest.mark.unit
@pytest.mark.asyncio
async def test_sign_in_rejects_malformed_email(service, auth):
    svc, _ = service
    result = await svc.sign_in("not-an-email", "secret123")
    assert result.status_code == 422
    auth.sign_in_with_password.assert_not_awaited()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_sign_up_without_session_does_not_sign_in(service, auth):
    svc, session = service
    auth.sign_up.return_value = _auth_response(with_session=False)

    result = await svc.sign_up("new@example.com", "secret123", display_name="New")

    assert result.success
    assert result.status_code == 201
    assert not session.is_authenticated
    credentials = auth.sign_up.await_args.args[0]
    assert credentials["options"] == {"data": {"display_name": "New"}}


@pytest.mark.unit
@pytest.mark.asyncio
async def test_sign_up_enforces_password_policy(service, auth):
    svc, _ = service
    result = await svc.sign_up("new@example.com", "short")
    assert not result.success
    auth.sign_up.assert_not_awaited()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_sign_out_clears_session_even_when_server_fails(service, auth):
    svc, session = service
    auth.sign_in_with_password.return_value = _auth_response()
    await svc.sign_in("me@example.com", "secret123")
    auth.sign_out.side_effect = ConnectionError("offline")

    result = await svc.sign_out()

    assert result.success
    assert not session.is_authenticated


@pytest.mark.unit
@pytest.mark.asyncio
async def test_update_password_requires_session(service, auth):
    svc, _ = service
    result = await svc.update_password("newsecret123")
    assert result.status_code == 401
    auth.update_user.assert_not_awaited()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_reset_password_sends_normalized_email(service, auth):
    svc, _ = service
    result = await svc.reset_password("Me@Example.com")
    assert result.success
    auth.reset_password_for_email.assert_awaited_once_with("me@example.com")
