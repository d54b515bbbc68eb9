"""Local access-token verification and user naming."""

from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from serenity.core.config import AppSettings
from serenity.core.security import decode_access_token, peek_expiry
from serenity.services.identity import (
    GUEST_NAME,
    IdentityError,
    SupabaseIdentity,
    SupabaseIdentityFactory,
    User,
)

SECRET = "super-secret-jwt-token-with-at-least-32-characters"


def _token(secret=SECRET, minutes=30, audience="authenticated", **claims):
    now = datetime.now(timezone.utc)
    payload = {
        "sub": "8f1c2d6e",
        "aud": audience,
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(minutes=minutes)).timestamp()),
        "email": "river@example.com",
        "role": "authenticated",
    }
    payload.update(claims)
    return jwt.encode(payload, secret, algorithm="HS256")


def test_decode_access_token_reads_claims():
    payload = decode_access_token(_token(user_metadata={"full_name": "River Song"}), SECRET)

    assert payload.sub == "8f1c2d6e"
    assert payload.email == "river@example.com"
    assert payload.user_metadata == {"full_name": "River Song"}


@pytest.mark.parametrize(
    "token",
    [
        _token(minutes=-1),
        _token(secret="another-secret-entirely-with-enough-length"),
        _token(audience="anon"),
        "not-a-jwt",
    ],
)
def test_decode_access_token_rejects_bad_tokens(token):
    with pytest.raises(ValueError):
        decode_access_token(token, SECRET)


def test_local_verification_needs_no_client():
    identity = SupabaseIdentity(client=None, jwt_secret=SECRET)

    user = identity.get_user(_token(user_metadata={"display_name": "River"}))

    assert user == User(id="8f1c2d6e", email="river@example.com", display_name="River")
    assert identity.get_user(_token(minutes=-5)) is None


def test_remote_calls_without_client_raise_identity_error():
    identity = SupabaseIdentity(client=None)

    with pytest.raises(IdentityError):
        identity.get_user("token")
    with pytest.raises(IdentityError):
        identity.sign_out("token")


def test_factory_refuses_when_nothing_is_configured():
    settings = AppSettings(_env_file=None, SUPABASE_URL="", SUPABASE_ANON_KEY="", SUPABASE_JWT_SECRET="")

    with pytest.raises(IdentityError):
        SupabaseIdentityFactory(settings)()


def test_factory_with_only_jwt_secret_verifies_locally():
    settings = AppSettings(_env_file=None, SUPABASE_URL="", SUPABASE_ANON_KEY="", SUPABASE_JWT_SECRET=SECRET)

    identity = SupabaseIdentityFactory(settings)()

    assert identity.client is None
    assert identity.get_user(_token()).id == "8f1c2d6e"


@pytest.mark.parametrize(
    "email, metadata, expected",
    [
        ("river@example.com", {"display_name": "River"}, "River"),
        ("river@example.com", {"full_name": "River Song"}, "River Song"),
        ("river@example.com", {}, "river"),
        (None, None, GUEST_NAME),
        (None, {"display_name": "   "}, GUEST_NAME),
    ],
)
def test_display_name_fallbacks(email, metadata, expected):
    assert User.from_claims("u1", email, metadata).display_name == expected


def test_peek_expiry():
    expires = peek_expiry(_token(minutes=10))

    assert expires is not None
    assert expires > datetime.now(timezone.utc)
    assert peek_expiry("opaque") is None
