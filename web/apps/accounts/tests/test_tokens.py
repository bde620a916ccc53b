from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from apps.accounts.tokens import ACCESS, REFRESH, decode_token, issue_access_token, issue_refresh_token
from apps.common.errors import Unauthorized


@pytest.mark.django_db
def test_access_token_claims(make_customer):
    user = make_customer().user
    claims = decode_token(issue_access_token(user))

    assert claims["sub"] == str(user.pk)
    assert claims["username"] == user.username
    assert claims["role"] == "customer"
    assert claims["type"] == ACCESS
    assert claims["exp"] - claims["iat"] == 3600


@pytest.mark.django_db
def test_refresh_token_is_not_an_access_token(make_customer):
    token = issue_refresh_token(make_customer().user)

    assert decode_token(token, REFRESH)["type"] == REFRESH
    with pytest.raises(Unauthorized) as e:
        decode_token(token, ACCESS)
    assert e.value.message == "Invalid token type"


def test_expired_token_is_rejected(settings):
    now = datetime.now(timezone.utc)
    token = jwt.encode(
        {"sub": "1", "type": ACCESS, "iat": now - timedelta(hours=2), "exp": now - timedelta(hours=1)},
        settings.JWT_SECRET,
        algorithm=settings.JWT_ALGORITHM,
    )
    with pytest.raises(Unauthorized) as e:
        decode_token(token)
    assert e.value.message == "Token has expired"


def test_token_signed_with_another_secret_is_rejected(settings):
    token = jwt.encode({"sub": "1", "type": ACCESS}, "not-the-secret", algorithm=settings.JWT_ALGORITHM)
    with pytest.raises(Unauthorized) as e:
        decode_token(token)
    assert e.value.message == "Invalid token"


def test_garbage_is_rejected():
    with pytest.raises(Unauthorized):
        decode_token("definitely.not.a-jwt")
