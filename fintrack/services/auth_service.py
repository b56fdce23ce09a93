"""
Authentication Service.

Sign-in, registration, sign-out and password management against Supabase
auth.  On success the resolved user is recorded in the
:class:`SessionManager`, which in turn notifies its identity listeners
(the composition root clears the entity cache there).

All methods return ``ServiceResult``; callers never inspect raw
exceptions.
"""

from __future__ import annotations

import re
from typing import Optional

from fintrack.auth import SessionManager
from fintrack.database import DatabaseManager
from fintrack.logger import StructuredLogger
from fintrack.models.service_models import ServiceResult
from fintrack.models.user import SessionUser
from fintrack.services.base_service import BaseService

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_EMAIL_RE: re.Pattern[str] = re.compile(
    r"^[a-zA-Z0-9.!#$%&'*+/=?^_`{|}~-]+"
    r"@[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?"
    r"(?:\.[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?)+$"
)

_MIN_PASSWORD_LENGTH: int = 8

# Substrings of Supabase auth error messages / codes mapped to
# (status code, user-facing message).
SUPABASE_ERROR_MAP: dict[str, tuple[int, str]] = {
    "invalid_credentials": (401, "Incorrect email or password."),
    "invalid login credentials": (401, "Incorrect email or password."),
    "invalid_grant": (401, "Incorrect email or password."),
    "email_not_confirmed": (403, "Please confirm your email address first."),
    "user_already_exists": (409, "An account with this email already exists."),
    "user already registered": (409, "An account with this email already exists."),
    "weak_password": (422, "Password is too weak."),
}


class AuthService(BaseService):
    """Orchestrates Supabase auth calls and the in-process session."""

    def __init__(
        self,
        db: DatabaseManager,
        session: SessionManager,
        logger: StructuredLogger,
    ) -> None:
        super().__init__(logger)
        self._db = db
        self._session = session

    # ==================================================================
    # Validation helpers
    # ==================================================================

    @staticmethod
    def validate_email(email: str) -> Optional[str]:
        """Return an error message for an invalid address, else ``None``."""
        if not email or not email.strip():
            return "Email address is required."
        if not _EMAIL_RE.match(email.strip()):
            return "Please enter a valid email address."
        return None

    @staticmethod
    def validate_password(password: str) -> Optional[str]:
        """Minimum length plus at least one letter and one digit."""
        if len(password) < _MIN_PASSWORD_LENGTH:
            return f"Password must be at least {_MIN_PASSWORD_LENGTH} characters."
        if not re.search(r"[A-Za-z]", password):
            return "Password must contain at least one letter."
        if not re.search(r"\d", password):
            return "Password must contain at least one digit."
        return None

    @staticmethod
    def normalize_email(email: str) -> str:
        return email.strip().lower()

    # ==================================================================
    # Sign-in / sign-up / sign-out
    # ==================================================================

    async def sign_in(self, email: str, password: str) -> ServiceResult[SessionUser]:
        invalid = self.validate_email(email)
        if invalid:
            return ServiceResult(success=False, error=invalid, status_code=422)
        email = self.normalize_email(email)

        try:
            response = await self._db.supabase.auth.sign_in_with_password({
                "email": email,
                "password": password,
            })
        except Exception as exc:
            return self._classify_error(exc, "sign_in", "Sign-in failed.")

        if response.user is None:
            return ServiceResult(
                success=False, error="Incorrect email or password.", status_code=401,
            )
        user = self._session_user(response.user)
        self._session.set_current_user(user)
        self._logger.info(
            "User signed in: %s", email,
            extra={"event": "LOGIN", "user_id": user.id},
        )
        return ServiceResult(success=True, data=user)

    async def sign_up(
        self,
        email: str,
        password: str,
        display_name: Optional[str] = None,
    ) -> ServiceResult[SessionUser]:
        """Register a new account.

        When email confirmation is disabled Supabase returns a session and
        the user is signed in immediately; otherwise the session stays
        empty until the address is confirmed.
        """
        invalid = self.validate_email(email) or self.validate_password(password)
        if invalid:
            return ServiceResult(success=False, error=invalid, status_code=422)
        email = self.normalize_email(email)

        credentials: dict[str, object] = {"email": email, "password": password}
        if display_name:
            credentials["options"] = {"data": {"display_name": display_name}}
        try:
            response = await self._db.supabase.auth.sign_up(credentials)  # type: ignore[arg-type]
        except Exception as exc:
            return self._classify_error(exc, "sign_up", "Registration failed.")

        if response.user is None:
            return ServiceResult(
                success=False, error="Registration failed.", status_code=500,
            )
        user = self._session_user(response.user)
        if response.session is not None:
            self._session.set_current_user(user)
        self._logger.info(
            "User registered: %s", email,
            extra={"event": "REGISTER", "user_id": user.id},
        )
        return ServiceResult(success=True, data=user, status_code=201)

    async def sign_out(self) -> ServiceResult[None]:
        """Revoke the server session and clear the local one.

        The local session is cleared even when the server call fails so
        that a user can always sign out while offline.
        """
        user_id = self._session.user_id
        try:
            await self._db.supabase.auth.sign_out()
        except RuntimeError:
            self._logger.debug("Offline; skipping server-side sign_out.")
        except Exception as exc:
            self._logger.warning("Server-side sign_out failed: %s", exc)

        self._session.clear()
        self._logger.info(
            "User signed out", extra={"event": "LOGOUT", "user_id": user_id},
        )
        return ServiceResult(success=True)

    # ==================================================================
    # Password management
    # ==================================================================

    async def reset_password(self, email: str) -> ServiceResult[None]:
        """Send a password reset email."""
        invalid = self.validate_email(email)
        if invalid:
            return ServiceResult(success=False, error=invalid, status_code=422)
        try:
            await self._db.supabase.auth.reset_password_for_email(
                self.normalize_email(email),
            )
        except Exception as exc:
            return self._classify_error(
                exc, "reset_password", "Could not send the password reset email.",
            )
        return ServiceResult(success=True)

    async def update_password(self, new_password: str) -> ServiceResult[None]:
        """Change the signed-in user's password."""
        invalid = self.validate_password(new_password)
        if invalid:
            return ServiceResult(success=False, error=invalid, status_code=422)
        if not self._session.is_authenticated:
            return self._unauthenticated()
        try:
            await self._db.supabase.auth.update_user({"password": new_password})
        except Exception as exc:
            return self._classify_error(
                exc, "update_password", "Could not update the password.",
            )
        self._logger.info(
            "Password updated",
            extra={"event": "PASSWORD_UPDATE", "user_id": self._session.user_id},
        )
        return ServiceResult(success=True)

    # ==================================================================
    # Helpers
    # ==================================================================

    @staticmethod
    def _session_user(user: object) -> SessionUser:
        metadata = getattr(user, "user_metadata", None) or {}
        return SessionUser(
            id=str(getattr(user, "id")),
            email=getattr(user, "email", None),
            display_name=metadata.get("display_name") if isinstance(metadata, dict) else None,
        )

    def _classify_error(
        self, exc: Exception, operation: str, fallback: str,
    ) -> ServiceResult:
        """Map a Supabase or network exception to a failed result."""
        if isinstance(exc, RuntimeError):
            return ServiceResult(
                success=False,
                error="Not connected. Check the Supabase configuration.",
                status_code=503,
            )
        if isinstance(exc, (ConnectionError, TimeoutError)):
            self._logger.warning("Network error during %s: %s", operation, exc)
            return ServiceResult(
                success=False,
                error="Cannot reach the server. Check your internet connection.",
                status_code=503,
            )

        error_str = str(exc).lower()
        code = str(getattr(exc, "code", "") or "").lower()
        for key, (status_code, message) in SUPABASE_ERROR_MAP.items():
            if key in code or key in error_str:
                self._logger.warning(
                    "Auth error during %s (%s): %s", operation, key, exc,
                    extra={"event": "AUTH_FAILED", "error_code": key},
                )
                return ServiceResult(success=False, error=message, status_code=status_code)

        self._logger.error("Unexpected auth error during %s: %s", operation, exc, exc_info=True)
        return ServiceResult(success=False, error=fallback, status_code=500)
