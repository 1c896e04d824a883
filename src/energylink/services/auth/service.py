"""Registration, login and profile updates against the hosted auth platform.

Every operation returns an :class:`AuthResult`; provider errors are passed
through verbatim in ``error`` rather than raised.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from supabase import Client

from ...config import settings
from ...models.domain import Coordinate
from ...persistence.profiles import (
    build_user_record,
    save_new_profile,
    update_electrician_profile,
    update_user_profile,
)
from ...schemas.auth import ProfileUpdateRequest, RegistrationRequest
from ...schemas.electricians import ElectricianProfileUpdate

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class AuthResult:
    success: bool
    error: Optional[str] = None
    user_id: Optional[str] = None
    user: Any = field(default=None, compare=False, repr=False)


def _error_message(exc: Exception, default: str) -> str:
    message = getattr(exc, "message", None) or str(exc)
    return message or default


def register_user(client: Client, request: RegistrationRequest) -> AuthResult:
    """Create the auth account, then its ``users`` (and ``electricians``) rows."""
    try:
        response = client.auth.sign_up(
            {
                "email": request.email,
                "password": request.password,
                "options": {"data": {"display_name": request.name, "role": request.role}},
            }
        )
        user = response.user
        if user is None:
            return AuthResult(success=False, error="Registration failed. Please try again.")

        location: Optional[Coordinate] = request.location.to_coordinate() if request.location else None
        if location is None and request.role == "electrician":
            location = Coordinate(*settings.default_electrician_location)

        record = build_user_record(
            user_id=user.id,
            email=request.email,
            display_name=request.name,
            role=request.role,
            phone=request.phone,
            location=location,
        )
        save_new_profile(client, record)
    except Exception as exc:
        logger.error(f"Registration error: {exc}")
        return AuthResult(success=False, error=_error_message(exc, "Registration failed. Please try again."))

    return AuthResult(success=True, user_id=user.id, user=user)


def login_user(client: Client, email: str, password: str) -> AuthResult:
    try:
        response = client.auth.sign_in_with_password({"email": email, "password": password})
    except Exception as exc:
        logger.error(f"Login error: {exc}")
        return AuthResult(success=False, error=_error_message(exc, "Login failed. Please check your credentials."))

    user = getattr(response, "user", None)
    if user is None:
        return AuthResult(success=False, error="Login failed. Please check your credentials.")
    return AuthResult(success=True, user_id=user.id, user=user)


def logout_user(client: Client) -> AuthResult:
    try:
        client.auth.sign_out()
    except Exception as exc:
        logger.error(f"Logout error: {exc}")
        return AuthResult(success=False, error=_error_message(exc, "Logout failed."))
    return AuthResult(success=True)


def update_profile(client: Client, user_id: str, request: ProfileUpdateRequest) -> AuthResult:
    changes = request.model_dump(exclude_none=True)
    if not changes:
        return AuthResult(success=True, user_id=user_id)
    try:
        update_user_profile(client, user_id, changes)
    except Exception as exc:
        logger.error(f"Error updating user profile: {exc}")
        return AuthResult(
            success=False, error=_error_message(exc, "Failed to update profile. Please try again.")
        )
    return AuthResult(success=True, user_id=user_id)


def update_electrician(client: Client, user_id: str, request: ElectricianProfileUpdate) -> AuthResult:
    changes = request.model_dump(exclude_none=True)
    if not changes:
        return AuthResult(success=True, user_id=user_id)
    try:
        update_electrician_profile(client, user_id, changes)
    except Exception as exc:
        logger.error(f"Error updating electrician profile: {exc}")
        return AuthResult(
            success=False, error=_error_message(exc, "Failed to update profile. Please try again.")
        )
    return AuthResult(success=True, user_id=user_id)
