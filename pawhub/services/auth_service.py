from uuid import UUID
from sqlalchemy.exc import IntegrityError
from pawhub.core.config import AuthConfig
from pawhub.core.results import Err, LoginFailure, Ok, RegistrationFailure, Result, RotationFailure
from pawhub.core.security import (
    Clock,
    as_utc,
    create_access_token,
    dummy_verify_password,
    get_password_hash,
    hash_token,
    new_token,
    utc_now,
    verify_password,
)
from pawhub.models.enums import UserRole
from pawhub.models.token import RefreshToken
from pawhub.models.user import User
from pawhub.repositories.token_repo import TokenRepository
from pawhub.repositories.user_repo import UserRepository
from pawhub.schemas.token import AccessToken, Identity, IssuedRefreshToken, RotatedSession
from pawhub.schemas.user import RegisterRequest
import logging

logger = logging.getLogger(__name__)


class AuthService:
    """
    Registration, login and the refresh-token lifecycle.

    Every method works inside the caller's database transaction. A rotation
    inserts the successor row and revokes the presented row in that same
    transaction, so both land or neither does.
    """

    def __init__(
        self,
        user_repo: UserRepository,
        token_repo: TokenRepository,
        config: AuthConfig,
        clock: Clock = utc_now,
    ):
        self.user_repo = user_repo
        self.token_repo = token_repo
        self.config = config
        self.clock = clock


    async def register(self, user_in: RegisterRequest) -> Result[User, RegistrationFailure]:
        if await self.user_repo.get_by_phone_number(user_in.phone_number):
            logger.warning("Registration rejected: phone number already registered")
            return Err(RegistrationFailure.CONFLICT)
        if user_in.email and await self.user_repo.get_by_email(user_in.email):
            logger.warning("Registration rejected: email already registered")
            return Err(RegistrationFailure.CONFLICT)

        user_data = user_in.model_dump(mode="json", exclude={"password"})
        user_model = User(
            **user_data,
            password_hash=get_password_hash(user_in.password),
            role=UserRole.USER.value,
            is_active=True,
        )
        try:
            created_user = await self.user_repo.create(user_model)
        except IntegrityError:
            # Lost a race against a concurrent registration with the same handle.
            await self.user_repo.rollback()
            logger.warning("Registration rejected: unique constraint violated on insert")
            return Err(RegistrationFailure.CONFLICT)
        logger.info("User registered: user_id=%s", created_user.id)
        return Ok(created_user)


    async def login(self, phone_number: str, password: str) -> Result[Identity, LoginFailure]:
        user = await self.user_repo.get_by_phone_number(phone_number)
        if not user:
            dummy_verify_password()
            logger.warning("Login failed: no user for the given phone number")
            return Err(LoginFailure.INVALID_CREDENTIALS)
        if not verify_password(password, user.password_hash):
            logger.warning("Login failed: invalid password for user_id=%s", user.id)
            return Err(LoginFailure.INVALID_CREDENTIALS)
        if not user.is_active:
            logger.warning("Login failed: inactive account user_id=%s", user.id)
            return Err(LoginFailure.ACCOUNT_INACTIVE)
        logger.info("User logged in successfully: user_id=%s", user.id)
        return Ok(Identity(subject_id=user.id, role=UserRole(user.role)))


    def mint_access_token(self, identity: Identity) -> AccessToken:
        return create_access_token(identity, self.config, now=self.clock())


    async def issue_refresh_token(
        self,
        user_id: UUID,
        user_agent: str | None = None,
        ip_address: str | None = None,
    ) -> IssuedRefreshToken:
        _, issued = await self._insert_refresh_token(user_id, user_agent, ip_address)
        logger.info("Refresh token issued: token_id=%s user_id=%s", issued.id, user_id)
        return issued


    async def rotate_refresh_token(
        self,
        refresh_token: str,
        user_agent: str | None = None,
        ip_address: str | None = None,
    ) -> Result[RotatedSession, RotationFailure]:
        stored_token = await self.token_repo.get_by_digest(hash_token(refresh_token), for_update=True)
        if not stored_token:
            logger.warning("Refresh rejected: unknown token")
            return Err(RotationFailure.INVALID_TOKEN)
        if stored_token.is_revoked:
            logger.warning(
                "Refresh rejected: revoked token presented again, possible reuse or theft: "
                "token_id=%s user_id=%s replaced_by_id=%s",
                stored_token.id, stored_token.user_id, stored_token.replaced_by_id,
            )
            return Err(RotationFailure.TOKEN_REVOKED)

        now = self.clock()
        if now > as_utc(stored_token.expires_at):
            logger.info("Refresh rejected: token expired token_id=%s", stored_token.id)
            return Err(RotationFailure.TOKEN_EXPIRED)

        user = await self.user_repo.get_by_id(stored_token.user_id)
        if not user or not user.is_active:
            logger.warning("Refresh rejected: user unavailable user_id=%s", stored_token.user_id)
            return Err(RotationFailure.USER_UNAVAILABLE)

        successor, issued = await self._insert_refresh_token(user.id, user_agent, ip_address)
        if not await self.token_repo.revise(stored_token.id, now, successor.id):
            # A concurrent rotation revoked the row between our read and our write.
            await self.token_repo.delete(successor)
            logger.warning("Refresh rejected: concurrent rotation of token_id=%s", stored_token.id)
            return Err(RotationFailure.TOKEN_REVOKED)

        logger.info(
            "Refresh token rotated: token_id=%s replaced_by_id=%s user_id=%s",
            stored_token.id, successor.id, user.id,
        )
        identity = Identity(subject_id=user.id, role=UserRole(user.role))
        return Ok(RotatedSession(identity=identity, refresh=issued))


    async def revoke_refresh_token(self, refresh_token: str) -> None:
        stored_token = await self.token_repo.get_by_digest(hash_token(refresh_token), for_update=True)
        if not stored_token or stored_token.is_revoked:
            logger.info("Logout with unknown or already revoked token, nothing to do")
            return
        await self.token_repo.revise(stored_token.id, self.clock())
        logger.info("User logged out, refresh token revoked: token_id=%s", stored_token.id)


    async def revoke_all_for_user(self, user_id: UUID) -> int:
        revoked = await self.token_repo.revoke_all_for_user(user_id, self.clock())
        logger.info("Revoked %d refresh tokens for user_id=%s", revoked, user_id)
        return revoked


    async def _insert_refresh_token(
        self,
        user_id: UUID,
        user_agent: str | None,
        ip_address: str | None,
    ) -> tuple[RefreshToken, IssuedRefreshToken]:
        raw_token = new_token(self.config.refresh_token_bytes)
        expires_at = self.clock() + self.config.refresh_token_ttl
        db_token = await self.token_repo.create(RefreshToken(
            token_hash=hash_token(raw_token),
            user_id=user_id,
            expires_at=expires_at,
            user_agent=user_agent,
            ip_address=ip_address,
        ))
        return db_token, IssuedRefreshToken(id=db_token.id, raw_token=raw_token, expires_at=expires_at)
