"""Adapter over the hosted identity service (Supabase Auth).

Every request builds its own client through :class:`SupabaseIdentityFactory`;
the supabase client keeps the signed-in session in memory, so sharing one
across requests would mix users up.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Protocol

import httpx
from supabase import AuthApiError, AuthError, Client, ClientOptions, create_client

from ..core.security import TokenPayload, decode_access_token

logger = logging.getLogger(__name__)

GUEST_NAME = "Guest"
# Statuses the auth server uses to say "this token is not a session".
_REJECTED_TOKEN_STATUSES = {400, 401, 403, 404}


class IdentityError(Exception):
    """The identity service could not give an answer."""


class InvalidCredentials(Exception):
    """Sign-in or sign-up was refused by the identity service."""


@dataclass(frozen=True)
class User:
    id: str
    email: str | None = None
    display_name: str = GUEST_NAME

    @classmethod
    def from_claims(cls, user_id: str, email: str | None, metadata: Mapping[str, Any] | None) -> "User":
        metadata = metadata or {}
        name = metadata.get("display_name") or metadata.get("full_name") or metadata.get("name")
        if not name and email:
            name = email.split("@", 1)[0]
        return cls(id=str(user_id), email=email, display_name=(str(name).strip() if name else "") or GUEST_NAME)


@dataclass(frozen=True)
class AuthTokens:
    access_token: str


class IdentityService(Protocol):
    def get_user(self, access_token: str) -> User | None: ...

    def sign_in(self, email: str, password: str) -> tuple[User, AuthTokens]: ...

    def sign_up(self, email: str, password: str, display_name: str | None = None) -> tuple[User, AuthTokens | None]: ...

    def sign_out(self, access_token: str) -> None: ...


def _user_from_payload(payload: TokenPayload) -> User:
    return User.from_claims(payload.sub, payload.email, payload.user_metadata)


def _user_from_supabase(user) -> User:
    return User.from_claims(user.id, getattr(user, "email", None), getattr(user, "user_metadata", None))


def _tokens_from_supabase(session) -> AuthTokens | None:
    if session is None or not session.access_token:
        return None
    return AuthTokens(access_token=session.access_token)


class SupabaseIdentity:
    def __init__(self, client: Client | None, jwt_secret: str = "") -> None:
        self.client = client
        self.jwt_secret = jwt_secret

    def _require_client(self) -> Client:
        if self.client is None:
            raise IdentityError("Identity service is not configured")
        return self.client

    def get_user(self, access_token: str) -> User | None:
        if self.jwt_secret:
            try:
                payload = decode_access_token(access_token, self.jwt_secret)
            except ValueError:
                return None
            return _user_from_payload(payload)

        client = self._require_client()
        try:
            response = client.auth.get_user(access_token)
        except AuthApiError as exc:
            if exc.status in _REJECTED_TOKEN_STATUSES:
                return None
            raise IdentityError(f"get_user failed with status {exc.status}") from exc
        except (AuthError, httpx.HTTPError) as exc:
            raise IdentityError("get_user failed") from exc
        if response is None or response.user is None:
            return None
        return _user_from_supabase(response.user)

    def sign_in(self, email: str, password: str) -> tuple[User, AuthTokens]:
        client = self._require_client()
        try:
            response = client.auth.sign_in_with_password({"email": email, "password": password})
        except AuthApiError as exc:
            if exc.status in _REJECTED_TOKEN_STATUSES:
                raise InvalidCredentials(exc.message or "Invalid email or password") from exc
            raise IdentityError(f"sign_in failed with status {exc.status}") from exc
        except (AuthError, httpx.HTTPError) as exc:
            raise IdentityError("sign_in failed") from exc
        tokens = _tokens_from_supabase(response.session)
        if response.user is None or tokens is None:
            raise InvalidCredentials("Invalid email or password")
        return _user_from_supabase(response.user), tokens

    def sign_up(self, email: str, password: str, display_name: str | None = None) -> tuple[User, AuthTokens | None]:
        client = self._require_client()
        credentials: dict[str, Any] = {"email": email, "password": password}
        if display_name:
            credentials["options"] = {"data": {"display_name": display_name}}
        try:
            response = client.auth.sign_up(credentials)
        except AuthApiError as exc:
            if 400 <= (exc.status or 0) < 500 and exc.status != 429:
                raise InvalidCredentials(exc.message or "Sign up was rejected") from exc
            raise IdentityError(f"sign_up failed with status {exc.status}") from exc
        except (AuthError, httpx.HTTPError) as exc:
            raise IdentityError("sign_up failed") from exc
        if response.user is None:
            raise InvalidCredentials("Sign up was rejected")
        # No session here means the project requires email confirmation first.
        return _user_from_supabase(response.user), _tokens_from_supabase(response.session)

    def sign_out(self, access_token: str) -> None:
        client = self._require_client()
        try:
            client.auth.admin.sign_out(access_token)
        except AuthApiError as exc:
            if exc.status in _REJECTED_TOKEN_STATUSES:
                # Already invalid on the server side.
                return
            raise IdentityError(f"sign_out failed with status {exc.status}") from exc
        except (AuthError, httpx.HTTPError) as exc:
            raise IdentityError("sign_out failed") from exc


class SupabaseIdentityFactory:
    """Build a fresh :class:`SupabaseIdentity` per request."""

    def __init__(self, settings) -> None:
        self.settings = settings

    def __call__(self) -> SupabaseIdentity:
        settings = self.settings
        client: Client | None = None
        if settings.identity_configured:
            try:
                client = create_client(
                    settings.SUPABASE_URL,
                    settings.SUPABASE_ANON_KEY,
                    options=ClientOptions(auto_refresh_token=False, persist_session=False),
                )
            except Exception as exc:
                raise IdentityError("Could not create identity client") from exc
        elif not settings.SUPABASE_JWT_SECRET:
            raise IdentityError("Identity service is not configured")
        return SupabaseIdentity(client, jwt_secret=settings.SUPABASE_JWT_SECRET)
