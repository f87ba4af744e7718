"""
Auth Service.

Account registration and credential checks. Issues bearer tokens whose
subject is the user id; everything downstream only sees that id.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from modules.backend.core.config import get_app_config
from modules.backend.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
)
from modules.backend.core.security import create_access_token, hash_password, verify_password
from modules.backend.models.user import User
from modules.backend.repositories.user import UserRepository
from modules.backend.schemas.auth import TokenResponse, UserResponse
from modules.backend.services.base import BaseService


class AuthService(BaseService):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.repo = UserRepository(session)

    @staticmethod
    def _normalize_email(email: str) -> str:
        return email.strip().lower()

    async def register(self, email: str, password: str) -> UserResponse:
        """
        Create an account.

        Raises:
            AuthorizationError: If registration is switched off in features.yaml
            ValidationError: If the password is shorter than the configured minimum
            ConflictError: If the email is already registered
        """
        config = get_app_config()
        if not config.features.auth_registration_enabled:
            raise AuthorizationError("Registration is disabled")

        self._validate_string_length(
            password,
            "password",
            min_length=config.security.password.min_length,
        )

        email = self._normalize_email(email)
        if await self.repo.exists_by_email(email):
            raise ConflictError("Email already registered")

        user = await self._execute_db_operation(
            "register_user",
            self.repo.create(email=email, hashed_password=hash_password(password)),
        )
        self._log_operation("User registered", user_id=user.id)
        return UserResponse.model_validate(user)

    async def authenticate(self, email: str, password: str) -> TokenResponse:
        """
        Check credentials and issue an access token.

        Raises:
            AuthenticationError: If the email is unknown or the password is wrong
        """
        user = await self.repo.get_by_email(self._normalize_email(email))
        if user is None or not verify_password(password, user.hashed_password):
            self._logger.warning("Login failed")
            raise AuthenticationError("Invalid email or password")

        self._log_operation("User logged in", user_id=user.id)
        return TokenResponse(
            access_token=create_access_token(user.id),
            user=UserResponse.model_validate(user),
        )

    async def get_user(self, user_id: str) -> UserResponse:
        """
        The account behind a resolved identity.

        Raises:
            AuthenticationError: If the user no longer exists
        """
        self._require_user(user_id)
        user: User | None = await self.repo.get_by_id_or_none(user_id)
        if user is None:
            raise AuthenticationError()
        return UserResponse.model_validate(user)
