"""
Account registration, login and token verification.

Tokens are opaque random UUIDs stored on the user row. Registration issues one
and every login rotates it, so only the most recent login's token can open a
realtime session.
"""

import uuid
from dataclasses import dataclass

from argon2 import PasswordHasher
from starlette.concurrency import run_in_threadpool

from ..error_types import ErrorMessages
from ..exceptions import AuthenticationError, DatabaseError, ValidationError
from ..persistence.protocols import ChatStoreProtocol
from ..structured_logging.enhanced_logging_config import get_logger
from ..utils.sanitization import validate_username
from .argon2_utils import hash_password, verify_password

logger = get_logger(__name__)


def generate_token() -> str:
    """Return a fresh session token."""
    return str(uuid.uuid4())


@dataclass(frozen=True)
class AuthResult:
    """Successful register or login."""

    token: str
    username: str


class AccountService:
    """Registers users, logs them in and resolves realtime tokens."""

    def __init__(self, store: ChatStoreProtocol, hasher: PasswordHasher, min_password_length: int = 4) -> None:
        self._store = store
        self._hasher = hasher
        self._min_password_length = min_password_length

    def _validate_credentials(self, username: object, password: object, check_password_length: bool) -> None:
        if not validate_username(username):
            raise ValidationError("Invalid username", field="username", user_friendly=ErrorMessages.INVALID_USERNAME)
        if not isinstance(password, str) or not password:
            raise ValidationError(
                "Missing password",
                field="password",
                user_friendly=ErrorMessages.PASSWORD_TOO_SHORT.format(min_length=self._min_password_length),
            )
        if check_password_length and len(password) < self._min_password_length:
            raise ValidationError(
                "Password too short",
                field="password",
                user_friendly=ErrorMessages.PASSWORD_TOO_SHORT.format(min_length=self._min_password_length),
            )

    async def register(self, username: object, password: object) -> AuthResult:
        """
        Create an account and issue its first token.

        Raises:
            ValidationError: Invalid username or password
            ConflictError: Username already taken
            DatabaseError: Store failure
        """
        self._validate_credentials(username, password, check_password_length=True)
        assert isinstance(username, str) and isinstance(password, str)

        # Argon2 is CPU bound; keep it off the event loop
        password_hash = await run_in_threadpool(hash_password, self._hasher, password)
        token = generate_token()
        user = await self._store.insert_user(username, password_hash, token)
        logger.info("User registered", username=user.username)
        return AuthResult(token=token, username=user.username)

    async def login(self, username: object, password: object) -> AuthResult:
        """
        Verify credentials and rotate the user's token.

        Raises:
            ValidationError: Malformed username
            AuthenticationError: Unknown user or wrong password
            DatabaseError: Store failure
        """
        self._validate_credentials(username, password, check_password_length=False)
        assert isinstance(username, str) and isinstance(password, str)

        user = await self._store.find_user_by_credential(username)
        if user is None:
            raise AuthenticationError(
                "Unknown username", auth_type="password", user_friendly=ErrorMessages.INVALID_CREDENTIALS
            )
        if not await run_in_threadpool(verify_password, self._hasher, password, user.password_hash):
            raise AuthenticationError(
                "Password mismatch", auth_type="password", user_friendly=ErrorMessages.INVALID_CREDENTIALS
            )

        token = generate_token()
        await self._store.rotate_token(user.id, token)
        logger.info("User logged in", username=user.username)
        return AuthResult(token=token, username=user.username)

    async def verify_token(self, token: object) -> str:
        """
        Resolve a realtime token to its username.

        Store failures surface as authentication failures here, since an
        unverifiable token must never open a session.

        Raises:
            AuthenticationError: Missing, unknown or unverifiable token
        """
        if not isinstance(token, str) or not token:
            raise AuthenticationError("Missing token", auth_type="token", user_friendly=ErrorMessages.INVALID_TOKEN)
        try:
            user = await self._store.find_user_by_token(token)
        except DatabaseError as e:
            raise AuthenticationError(
                "Token lookup failed", auth_type="token", user_friendly=ErrorMessages.INVALID_TOKEN
            ) from e
        if user is None:
            raise AuthenticationError("Unknown token", auth_type="token", user_friendly=ErrorMessages.INVALID_TOKEN)
        return user.username
