"""User repository for async persistence operations."""

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from ...error_types import ErrorMessages
from ...exceptions import ConflictError
from ...models.user import User
from ...structured_logging.enhanced_logging_config import get_logger
from .base_repository import BaseRepository

logger = get_logger(__name__)


class UserRepository(BaseRepository):
    """Repository for user accounts and their session tokens."""

    table = "users"

    async def insert_user(self, username: str, password_hash: str, token: str) -> User:
        """
        Create a user.

        Raises:
            ConflictError: If the username is already taken
            DatabaseError: If the insert fails for any other reason
        """
        try:
            async with self._session_maker() as session:
                user = User(username=username, password_hash=password_hash, token=token)
                session.add(user)
                await session.commit()
                await session.refresh(user)
        except IntegrityError as e:
            raise ConflictError(
                f"Username already exists: {username}",
                details={"username": username},
                user_friendly=ErrorMessages.USERNAME_TAKEN,
            ) from e
        except SQLAlchemyError as e:
            self._raise_database_error(e, "insert_user", username=username)

        logger.info("User created", username=username, user_id=user.id)
        return user

    async def find_by_username(self, username: str) -> User | None:
        """Return the user with this username, or None."""
        try:
            async with self._session_maker() as session:
                result = await session.execute(select(User).where(User.username == username))
                return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            self._raise_database_error(e, "find_by_username", username=username)

    async def find_by_token(self, token: str) -> User | None:
        """Return the user currently holding this token, or None."""
        try:
            async with self._session_maker() as session:
                result = await session.execute(select(User).where(User.token == token))
                return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            self._raise_database_error(e, "find_by_token")

    async def rotate_token(self, user_id: int, token: str) -> None:
        """Replace the user's token, invalidating the previous one."""
        try:
            async with self._session_maker() as session:
                await session.execute(update(User).where(User.id == user_id).values(token=token))
                await session.commit()
        except SQLAlchemyError as e:
            self._raise_database_error(e, "rotate_token", user_id=user_id)
