"""
Outcome values returned by the auth services.

Expected failures (bad password, reused refresh token, ...) are returned as
``Err(reason)`` instead of raised, so the HTTP layer decides how much of the
reason reaches the client. Only unexpected faults are raised.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E", bound=Enum)


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    reason: E


Result = Union[Ok[T], Err[E]]


class RegistrationFailure(Enum):
    CONFLICT = "ConflictError"


class LoginFailure(Enum):
    INVALID_CREDENTIALS = "InvalidCredentials"
    ACCOUNT_INACTIVE = "AccountInactive"


class RotationFailure(Enum):
    INVALID_TOKEN = "InvalidToken"
    TOKEN_REVOKED = "TokenRevoked"
    TOKEN_EXPIRED = "TokenExpired"
    USER_UNAVAILABLE = "UserUnavailable"


class GateFailure(Enum):
    UNAUTHORIZED = "Unauthorized"
