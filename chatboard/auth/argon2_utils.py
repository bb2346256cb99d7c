"""
Argon2 password hashing utilities for ChatBoard.

Passwords are hashed with Argon2id. Cost parameters come from AuthConfig so
tests can use cheap hashes while production keeps the recommended defaults.
"""

from argon2 import PasswordHasher, Type, exceptions

from ..exceptions import AuthenticationError
from ..structured_logging.enhanced_logging_config import get_logger

logger = get_logger(__name__)

HASH_LENGTH = 32  # 256 bits


def create_hasher(time_cost: int = 3, memory_cost: int = 65536, parallelism: int = 1) -> PasswordHasher:
    """
    Create an Argon2id PasswordHasher.

    Raises:
        ValueError: If a parameter is outside its safe range
    """
    if time_cost < 1 or time_cost > 10:
        raise ValueError(f"time_cost must be between 1 and 10, got {time_cost}")
    if memory_cost < 1024 or memory_cost > 1048576:
        raise ValueError(f"memory_cost must be between 1024 and 1048576, got {memory_cost}")
    if parallelism < 1 or parallelism > 16:
        raise ValueError(f"parallelism must be between 1 and 16, got {parallelism}")

    if time_cost < 3:
        logger.warning("time_cost is below recommended minimum of 3", time_cost=time_cost)

    return PasswordHasher(
        type=Type.ID,
        time_cost=time_cost,
        memory_cost=memory_cost,
        parallelism=parallelism,
        hash_len=HASH_LENGTH,
    )


def hash_password(hasher: PasswordHasher, password: str) -> str:
    """
    Hash a plaintext password.

    Raises:
        AuthenticationError: If hashing fails
    """
    try:
        return hasher.hash(password)
    except exceptions.HashingError as e:
        raise AuthenticationError(
            f"Failed to hash password: {e}",
            auth_type="password",
            user_friendly="Password processing failed",
        ) from e


def verify_password(hasher: PasswordHasher, password: str, hashed: str) -> bool:
    """Return True if ``password`` matches the Argon2 hash."""
    if not isinstance(password, str) or not hashed:
        return False
    try:
        return hasher.verify(hashed, password)
    except exceptions.VerifyMismatchError:
        return False
    except (exceptions.VerificationError, exceptions.InvalidHashError) as e:
        logger.warning("Password verification failed - invalid hash", error=str(e))
        return False
