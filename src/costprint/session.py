"""Authenticated session: who is signed in, login and logout."""

import json
import logging

from .api import TOKEN_KEY, USER_KEY, ApiClient
from .errors import ApiError, AuthenticationError
from .models import User
from .storage import KeyValueStore

logger = logging.getLogger(__name__)


class AuthSession:
    """
    Auth state kept in a key/value store (st.session_state in the app).

    The token and a JSON copy of the user live under the same keys the API
    client clears on a 401, so an expired token logs the session out.
    """

    def __init__(self, client: ApiClient, store: KeyValueStore):
        self.client = client
        self.store = store

    @property
    def token(self) -> str | None:
        return self.store.get(TOKEN_KEY)

    @property
    def user(self) -> User | None:
        raw = self.store.get(USER_KEY)
        if not raw:
            return None
        try:
            return User.from_dict(json.loads(raw))
        except (ValueError, TypeError, AttributeError):
            logger.warning("discarding unreadable stored user")
            self.store.delete(USER_KEY)
            return None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token) and self.user is not None

    def login(self, email: str, password: str) -> User:
        response = self.client.auth.login(email.strip(), password)
        self.store.set(TOKEN_KEY, response.token)
        self.store.set(USER_KEY, json.dumps(response.user.to_dict()))
        logger.info("signed in user %s", response.user.id)
        return response.user

    def logout(self) -> None:
        """Sign out locally even if the backend call fails."""
        try:
            self.client.auth.logout()
        except ApiError:
            logger.warning("logout request failed; clearing local session", exc_info=True)
        finally:
            self.client.clear_credentials()

    def refresh(self) -> User | None:
        """Re-validate the stored token against /api/auth/me."""
        if not self.token:
            return None
        try:
            user = self.client.auth.me()
        except AuthenticationError:
            return None
        self.store.set(USER_KEY, json.dumps(user.to_dict()))
        return user
