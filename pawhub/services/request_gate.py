from pawhub.core.config import AuthConfig
from pawhub.core.results import Err, GateFailure, Ok, Result
from pawhub.core.security import Clock, decode_access_token, utc_now
from pawhub.schemas.token import Identity


class RequestGate:
    """
    Stateless bearer-token check run in front of every protected route.

    Only the signature, the claims and the expiry are inspected; the
    credential store is never consulted. Every failure collapses into the
    same GateFailure.UNAUTHORIZED.
    """

    def __init__(self, config: AuthConfig, clock: Clock = utc_now):
        self.config = config
        self.clock = clock

    def authenticate(self, token: str | None) -> Result[Identity, GateFailure]:
        if not token:
            return Err(GateFailure.UNAUTHORIZED)
        payload = decode_access_token(token, self.config, now=self.clock())
        if payload is None:
            return Err(GateFailure.UNAUTHORIZED)
        return Ok(Identity(subject_id=payload.sub, role=payload.role))
