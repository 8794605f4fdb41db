from datetime import datetime, timedelta, timezone
from uuid import uuid4

from jose import jwt
from pawhub.core.config import AuthConfig
from pawhub.core.results import Err, GateFailure, Ok
from pawhub.core.security import create_access_token
from pawhub.models.enums import UserRole
from pawhub.schemas.token import Identity
from pawhub.services.request_gate import RequestGate

UNAUTHORIZED = Err(GateFailure.UNAUTHORIZED)


def _identity(role=UserRole.USER):
    return Identity(subject_id=uuid4(), role=role)


def test_valid_token_yields_identity(auth_config, clock):
    identity = _identity(UserRole.ADMIN)
    access = create_access_token(identity, auth_config, now=clock())
    assert RequestGate(auth_config, clock).authenticate(access.token) == Ok(identity)


def test_token_rejected_once_ttl_has_passed(auth_config, clock):
    access = create_access_token(_identity(), auth_config, now=clock())
    gate = RequestGate(auth_config, clock)

    clock.advance(minutes=14)
    assert isinstance(gate.authenticate(access.token), Ok)
    clock.advance(minutes=2)
    assert gate.authenticate(access.token) == UNAUTHORIZED


def test_token_signed_with_other_secret(auth_config, clock):
    forged = create_access_token(_identity(), AuthConfig(secret_key="someone-else"), now=clock())
    assert RequestGate(auth_config, clock).authenticate(forged.token) == UNAUTHORIZED


def test_malformed_and_missing_tokens(auth_config, clock):
    gate = RequestGate(auth_config, clock)
    for token in (None, "", "garbage", "a.b.c"):
        assert gate.authenticate(token) == UNAUTHORIZED


def test_token_of_wrong_type(auth_config, clock):
    now = datetime.now(timezone.utc)
    claims = {
        "sub": str(uuid4()),
        "role": "USER",
        "type": "refresh",
        "exp": int((now + timedelta(minutes=5)).timestamp()),
    }
    token = jwt.encode(claims, auth_config.secret_key, algorithm=auth_config.algorithm)
    assert RequestGate(auth_config, clock).authenticate(token) == UNAUTHORIZED


def test_token_with_unknown_role(auth_config, clock):
    now = datetime.now(timezone.utc)
    claims = {
        "sub": str(uuid4()),
        "role": "SUPERUSER",
        "type": "access",
        "exp": int((now + timedelta(minutes=5)).timestamp()),
    }
    token = jwt.encode(claims, auth_config.secret_key, algorithm=auth_config.algorithm)
    assert RequestGate(auth_config, clock).authenticate(token) == UNAUTHORIZED
