"""Tests for the auth session kept in a key/value store."""

import json

import httpx
import pytest

from costprint.api import TOKEN_KEY, USER_KEY, ApiClient
from costprint.errors import AuthenticationError, NetworkError
from costprint.models import UserRole
from costprint.session import AuthSession
from costprint.storage import MappingStore

LOGIN_BODY = {
    "token": "jwt-token",
    "user": {"id": "u1", "email": "ann@shop.test", "name": "Ann", "role": "Admin"},
}


def make_session(handler, store=None) -> AuthSession:
    store = store if store is not None else MappingStore()
    client = ApiClient(
        "http://api.test", token_store=store, transport=httpx.MockTransport(handler)
    )
    return AuthSession(client, store)


def routes(mapping):
    def handler(request: httpx.Request) -> httpx.Response:
        status, body = mapping[(request.method, request.url.path)]
        return httpx.Response(status, json=body)

    return handler


class TestLogin:
    def test_login_stores_token_and_user(self):
        session = make_session(routes({("POST", "/api/auth/login"): (200, LOGIN_BODY)}))

        user = session.login("  ann@shop.test ", "pw")

        assert user.role == UserRole.ADMIN
        assert session.token == "jwt-token"
        assert session.user == user
        assert session.is_authenticated
        assert json.loads(session.store.get(USER_KEY))["email"] == "ann@shop.test"

    def test_failed_login_leaves_session_empty(self):
        session = make_session(
            routes({("POST", "/api/auth/login"): (401, {"error": "Invalid credentials"})})
        )

        with pytest.raises(AuthenticationError):
            session.login("ann@shop.test", "wrong")

        assert not session.is_authenticated

    def test_login_network_error(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(NetworkError):
            make_session(handler).login("a", "b")


class TestSessionState:
    def test_empty_session(self):
        session = make_session(routes({}))
        assert session.token is None
        assert session.user is None
        assert not session.is_authenticated

    def test_token_without_user_is_not_authenticated(self):
        session = make_session(routes({}), MappingStore({TOKEN_KEY: "t"}))
        assert not session.is_authenticated

    def test_unreadable_user_is_discarded(self):
        store = MappingStore({TOKEN_KEY: "t", USER_KEY: "not json"})
        session = make_session(routes({}), store)

        assert session.user is None
        assert store.get(USER_KEY) is None


class TestLogout:
    def test_logout_clears_session(self):
        session = make_session(
            routes(
                {
                    ("POST", "/api/auth/login"): (200, LOGIN_BODY),
                    ("POST", "/api/auth/logout"): (200, {}),
                }
            )
        )
        session.login("ann@shop.test", "pw")

        session.logout()

        assert session.token is None
        assert session.user is None

    def test_logout_succeeds_locally_when_backend_fails(self):
        store = MappingStore({TOKEN_KEY: "t", USER_KEY: json.dumps(LOGIN_BODY["user"])})
        session = make_session(
            routes({("POST", "/api/auth/logout"): (500, {"error": "boom"})}), store
        )

        session.logout()

        assert not session.is_authenticated


class TestRefresh:
    def test_refresh_updates_user(self):
        store = MappingStore({TOKEN_KEY: "t"})
        session = make_session(
            routes({("GET", "/api/auth/me"): (200, {**LOGIN_BODY["user"], "name": "Ann B"})}),
            store,
        )

        user = session.refresh()

        assert user.name == "Ann B"
        assert session.user.name == "Ann B"

    def test_refresh_with_expired_token(self):
        store = MappingStore({TOKEN_KEY: "expired", USER_KEY: json.dumps(LOGIN_BODY["user"])})
        session = make_session(
            routes({("GET", "/api/auth/me"): (401, {"error": "expired"})}), store
        )

        assert session.refresh() is None
        assert session.token is None
        assert not session.is_authenticated

    def test_refresh_without_token(self):
        assert make_session(routes({})).refresh() is None
