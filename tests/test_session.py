# tests/test_session.py
import httpx
import pytest

from conftest import PASSWORD
from notesync.client import create_client
from notesync.client.api import RemoteServiceError
from notesync.client.session import AuthState
from notesync.client.storage import TOKEN_KEY, USER_KEY


def test_starts_unauthenticated(device):
    assert device.session.state is AuthState.UNAUTHENTICATED
    assert device.api.token is None


def test_register_persists_session_and_survives_restart(device, tmp_path, transport):
    user = device.session.register("new@example.com", "newbie", PASSWORD)
    assert user["email"] == "new@example.com"
    assert device.session.is_authenticated
    assert device.storage.get_item(TOKEN_KEY) == device.api.token
    assert device.storage.get_item(USER_KEY)["username"] == "newbie"

    reopened = create_client(storage_dir=device.storage.directory, base_url="http://testserver/api",
                             transport=transport)
    assert reopened.session.state is AuthState.AUTHENTICATED
    assert reopened.session.user["email"] == "new@example.com"
    assert reopened.api.token == device.api.token


def test_failed_login_keeps_state(device):
    device.session.register("known@example.com", "known", PASSWORD)
    device.session.logout()

    with pytest.raises(RemoteServiceError) as exc:
        device.session.login("known@example.com", "wrong-password")
    assert exc.value.status_code == 401
    assert device.session.state is AuthState.UNAUTHENTICATED
    assert device.storage.get_item(TOKEN_KEY) is None


def test_short_password_registration_surfaces_field_error(device):
    with pytest.raises(RemoteServiceError) as exc:
        device.session.register("short@example.com", "shorty", "12345")
    assert exc.value.status_code == 400
    assert "password" in exc.value.details
    assert not device.session.is_authenticated


def test_logout_revokes_and_clears(device, transport):
    device.session.register("bye@example.com", "bye", PASSWORD)
    token = device.api.token

    device.session.logout()
    assert device.session.state is AuthState.UNAUTHENTICATED
    assert device.storage.get_item(TOKEN_KEY) is None
    assert device.storage.get_item(USER_KEY) is None

    r = httpx.Client(transport=transport, base_url="http://testserver/api").get(
        "/user/profile", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 401


def test_logout_clears_local_state_when_offline(device, transport):
    device.session.register("offline@example.com", "offline", PASSWORD)
    transport.failure = httpx.ConnectError

    device.session.logout()
    assert device.session.state is AuthState.UNAUTHENTICATED
    assert device.storage.get_item(TOKEN_KEY) is None


def test_skip_is_remembered_and_behaves_as_signed_out(device, transport):
    device.session.skip()
    assert device.session.state is AuthState.SKIPPED
    assert not device.session.is_authenticated

    reopened = create_client(storage_dir=device.storage.directory, base_url="http://testserver/api",
                             transport=transport)
    assert reopened.session.state is AuthState.SKIPPED

    # se connecter plus tard reste possible
    reopened.session.register("later@example.com", "later", PASSWORD)
    assert reopened.session.is_authenticated
    again = create_client(storage_dir=device.storage.directory, base_url="http://testserver/api",
                          transport=transport)
    assert again.session.state is AuthState.AUTHENTICATED
