"""Authentication flow and session state."""

from .service import (
    AuthResult,
    login_user,
    logout_user,
    register_user,
    update_electrician,
    update_profile,
)
from .session import SessionRegistry, SessionStore

__all__ = [
    "AuthResult",
    "SessionRegistry",
    "SessionStore",
    "login_user",
    "logout_user",
    "register_user",
    "update_electrician",
    "update_profile",
]
