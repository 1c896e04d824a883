"""Per-client sessions fed by the auth provider.

Each signed-in client gets its own :class:`SessionStore`, reachable through an
opaque token handed out at login or registration. The :class:`SessionRegistry`
owns every store: it is created at startup, subscribes to the provider's
state-change stream in :meth:`SessionRegistry.start` so profile changes reach
the stores of the affected user, and unsubscribes in :meth:`SessionRegistry.stop`.
"""

from __future__ import annotations

import logging
import secrets
import threading
from typing import Any, Callable, Optional

from supabase import Client

from ...data.users_repository import get_user_data
from ...models.domain import UserProfile, UserSession
from ...persistence.profiles import avatar_url

UserLoader = Callable[[Client, str], Optional[UserProfile]]

logger = logging.getLogger(__name__)


class SessionStore:
    """Session state for one signed-in client."""

    def __init__(self, client: Client | None, user_loader: UserLoader = get_user_data) -> None:
        self._client = client
        self._user_loader = user_loader
        self._lock = threading.Lock()
        self._user: Any = None
        self._current: Optional[UserSession] = None

    @property
    def user_id(self) -> Optional[str]:
        user = self._user
        return user.id if user is not None else None

    def apply(self, user: Any) -> None:
        """Derive the session for an auth user (None signs the client out)."""
        derived = self._derive(user) if user is not None else None
        with self._lock:
            self._user = user
            self._current = derived

    def refresh(self) -> None:
        """Reload the mirrored profile for the current user."""
        self.apply(self._user)

    def clear(self) -> None:
        self.apply(None)

    def _derive(self, user: Any) -> UserSession:
        email = getattr(user, "email", None) or ""
        profile = None
        if self._client is not None:
            try:
                profile = self._user_loader(self._client, user.id)
            except Exception as exc:
                logger.error(f"Session store could not load profile for {user.id}: {exc}")

        if profile is None:
            metadata = getattr(user, "user_metadata", None) or {}
            display_name = metadata.get("display_name") or (email.split("@")[0] if email else "User")
            profile = UserProfile(
                id=user.id,
                email=email,
                display_name=display_name,
                role="customer",
                photo_url=avatar_url(display_name),
            )
        return UserSession(user_id=user.id, email=email, profile=profile)

    @property
    def current(self) -> Optional[UserSession]:
        with self._lock:
            return self._current

    @property
    def is_authenticated(self) -> bool:
        return self.current is not None

    @property
    def is_customer(self) -> bool:
        session = self.current
        return session is not None and session.is_customer

    @property
    def is_electrician(self) -> bool:
        session = self.current
        return session is not None and session.is_electrician


class SessionRegistry:
    """Session stores keyed by client token."""

    def __init__(self, client: Client | None, user_loader: UserLoader = get_user_data) -> None:
        self._client = client
        self._user_loader = user_loader
        self._lock = threading.Lock()
        self._stores: dict[str, SessionStore] = {}
        self._subscription: Any = None

    @property
    def client(self) -> Client | None:
        return self._client

    def start(self) -> None:
        if self._client is None:
            logger.warning("Session registry started without an auth client; everyone is signed out")
            return
        if self._subscription is not None:
            return
        self._subscription = self._client.auth.on_auth_state_change(self._on_auth_state_change)

    def stop(self) -> None:
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None
        with self._lock:
            self._stores.clear()

    def open(self, user: Any) -> str:
        """Create a store for ``user`` and return the token that reaches it."""
        store = SessionStore(self._client, self._user_loader)
        store.apply(user)
        token = secrets.token_urlsafe(32)
        with self._lock:
            self._stores[token] = store
        logger.info(f"Opened session for {store.user_id}")
        return token

    def get(self, token: str | None) -> Optional[SessionStore]:
        if not token:
            return None
        with self._lock:
            return self._stores.get(token)

    def current(self, token: str | None) -> Optional[UserSession]:
        store = self.get(token)
        return store.current if store is not None else None

    def close(self, token: str | None) -> None:
        if not token:
            return
        with self._lock:
            store = self._stores.pop(token, None)
        if store is not None:
            store.clear()

    def _stores_for(self, user_id: str) -> list[SessionStore]:
        with self._lock:
            return [store for store in self._stores.values() if store.user_id == user_id]

    def _on_auth_state_change(self, event: Any, session: Any) -> None:
        logger.debug(f"Auth state change: {event}")
        user = getattr(session, "user", None) if session is not None else None
        if user is None:
            return
        for store in self._stores_for(user.id):
            store.apply(user)
