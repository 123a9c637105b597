"""
Argon2 password hashing utilities for CharForge.

Passwords are hashed with Argon2id. Cost parameters can be tuned through the
ARGON2_TIME_COST, ARGON2_MEMORY_COST, ARGON2_PARALLELISM and
ARGON2_HASH_LENGTH environment variables; out-of-range values fail at import.
"""

import os

from argon2 import PasswordHasher, Type, exceptions
from argon2.exceptions import VerificationError

from ..exceptions import AuthenticationError
from ..structured_logging.enhanced_logging_config import get_logger
from ..utils.error_logging import log_and_raise

logger = get_logger(__name__)

# TIME_COST: 1-10, MEMORY_COST: 1024-1048576 KiB, PARALLELISM: 1-16, HASH_LENGTH: 16-64 bytes
TIME_COST = int(os.getenv("ARGON2_TIME_COST", "3"))
MEMORY_COST = int(os.getenv("ARGON2_MEMORY_COST", "65536"))  # 64MB
PARALLELISM = int(os.getenv("ARGON2_PARALLELISM", "1"))
HASH_LENGTH = int(os.getenv("ARGON2_HASH_LENGTH", "32"))

_PARAM_RANGES: dict[str, tuple[int, int]] = {
    "time_cost": (1, 10),
    "memory_cost": (1024, 1048576),
    "parallelism": (1, 16),
    "hash_len": (16, 64),
}


def _validate_params(time_cost: int, memory_cost: int, parallelism: int, hash_len: int) -> None:
    values = {"time_cost": time_cost, "memory_cost": memory_cost, "parallelism": parallelism, "hash_len": hash_len}
    for name, value in values.items():
        low, high = _PARAM_RANGES[name]
        if value < low or value > high:
            raise ValueError(f"{name} must be between {low} and {high}, got {value}")


_validate_params(TIME_COST, MEMORY_COST, PARALLELISM, HASH_LENGTH)

logger.info(
    "Argon2 utilities initialized",
    time_cost=TIME_COST,
    memory_cost=MEMORY_COST,
    parallelism=PARALLELISM,
    hash_length=HASH_LENGTH,
)


def create_hasher_with_params(
    time_cost: int = TIME_COST,
    memory_cost: int = MEMORY_COST,
    parallelism: int = PARALLELISM,
    hash_len: int = HASH_LENGTH,
) -> PasswordHasher:
    """Create an Argon2id PasswordHasher with validated parameters."""
    _validate_params(time_cost, memory_cost, parallelism, hash_len)

    if time_cost < 3:
        logger.warning("time_cost is below recommended minimum of 3", time_cost=time_cost)
    if memory_cost < 65536:
        logger.warning("memory_cost is below recommended minimum of 65536 (64MB)", memory_cost=memory_cost)

    return PasswordHasher(
        type=Type.ID,
        time_cost=time_cost,
        memory_cost=memory_cost,
        parallelism=parallelism,
        hash_len=hash_len,
    )


_default_hasher = PasswordHasher(
    type=Type.ID,
    time_cost=TIME_COST,
    memory_cost=MEMORY_COST,
    parallelism=PARALLELISM,
    hash_len=HASH_LENGTH,
)


def hash_password(password: str) -> str:
    """
    Hash a plaintext password using Argon2id.

    Args:
        password: Plaintext password

    Returns:
        Argon2id hash string ($argon2id$v=19$m=...,t=...,p=...$salt$hash)

    Raises:
        AuthenticationError: If password is not a string or hashing fails
    """
    if not isinstance(password, str):
        log_and_raise(AuthenticationError, "Password must be a string", user_friendly="Password processing failed")

    try:
        return _default_hasher.hash(password)
    except exceptions.HashingError as e:
        log_and_raise(
            AuthenticationError,
            f"Failed to hash password: {e}",
            details={"original_error": str(e), "error_type": type(e).__name__},
            user_friendly="Password processing failed",
        )


def verify_password(password: str, hashed: str) -> bool:
    """
    Verify a plaintext password against an Argon2 hash.

    Returns:
        True if the password matches, False otherwise (including malformed hashes)
    """
    if not isinstance(password, str) or not hashed:
        logger.warning("Password verification failed - missing password or hash")
        return False

    try:
        _default_hasher.verify(hashed, password)
        return True
    except (VerificationError, exceptions.InvalidHashError) as e:
        logger.debug("Password verification failed", error_type=type(e).__name__)
        return False


def is_argon2_hash(hash_value: str | None) -> bool:
    """Check if a given string is an Argon2 hash."""
    return isinstance(hash_value, str) and hash_value.startswith("$argon2")


def needs_rehash(hashed: str) -> bool:
    """Check if a hash was produced with parameters other than the current ones."""
    if not is_argon2_hash(hashed):
        return True
    try:
        return bool(_default_hasher.check_needs_rehash(hashed))
    except (ValueError, TypeError) as e:
        logger.error("Error checking password rehash needs", error=str(e), error_type=type(e).__name__)
        return True
