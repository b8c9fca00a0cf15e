from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest

from tubely.config import AuthConfig
from tubely.helpers.auth import get_bearer_token, make_jwt, validate_jwt
from tubely.models.errors import AuthError


@pytest.fixture
def auth_config():
    return AuthConfig(jwt_secret="s3cr3t")


def test_bearer_token_extraction():
    assert get_bearer_token({"Authorization": "Bearer abc.def.ghi"}) == "abc.def.ghi"
    assert get_bearer_token({"authorization": "bearer tok"}) == "tok"


@pytest.mark.parametrize("headers", [{}, {"Authorization": ""}, {"Authorization": "Basic dXNlcg=="},
                                     {"Authorization": "Bearer"}, {"Authorization": "Bearer a b"}])
def test_missing_or_malformed_bearer(headers):
    with pytest.raises(AuthError):
        get_bearer_token(headers)


def test_jwt_round_trip(auth_config):
    user_id = uuid4()
    assert validate_jwt(make_jwt(user_id, auth_config), auth_config) == user_id


def test_expired_jwt(auth_config):
    issued = datetime.now(timezone.utc) - timedelta(hours=2)
    token = make_jwt(uuid4(), auth_config, expires_in=timedelta(hours=1), now=issued)
    with pytest.raises(AuthError):
        validate_jwt(token, auth_config)


def test_wrong_secret(auth_config):
    token = make_jwt(uuid4(), AuthConfig(jwt_secret="other"))
    with pytest.raises(AuthError):
        validate_jwt(token, auth_config)


def test_wrong_issuer(auth_config):
    token = make_jwt(uuid4(), AuthConfig(jwt_secret="s3cr3t", jwt_issuer="someone-else"))
    with pytest.raises(AuthError):
        validate_jwt(token, auth_config)


def test_subject_must_be_uuid(auth_config):
    import jwt
    now = datetime.now(timezone.utc)
    token = jwt.encode({"iss": "tubely-access", "sub": "not-a-uuid", "exp": now + timedelta(minutes=5)},
                       "s3cr3t", algorithm="HS256")
    with pytest.raises(AuthError):
        validate_jwt(token, auth_config)
