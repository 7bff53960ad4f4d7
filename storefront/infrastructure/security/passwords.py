"""Password hashing with bcrypt."""

import asyncio

import bcrypt

from storefront.infrastructure.constants import SecurityLimits


# bcrypt only reads the first 72 bytes of a password
_BCRYPT_MAX_BYTES = 72


def _encode(password: str) -> bytes:
    return password.encode("utf-8")[:_BCRYPT_MAX_BYTES]


class PasswordHasher:
    """Hashes and verifies passwords off the event loop.

    Args:
        rounds: bcrypt cost factor (log2 of the iteration count)
    """

    def __init__(self, rounds: int = 12) -> None:
        if not SecurityLimits.MIN_BCRYPT_ROUNDS <= rounds <= SecurityLimits.MAX_BCRYPT_ROUNDS:
            raise ValueError(
                f"bcrypt rounds must be between {SecurityLimits.MIN_BCRYPT_ROUNDS} "
                f"and {SecurityLimits.MAX_BCRYPT_ROUNDS}"
            )
        self.rounds = rounds

    def hash_sync(self, password: str) -> str:
        return bcrypt.hashpw(_encode(password), bcrypt.gensalt(rounds=self.rounds)).decode("utf-8")

    def verify_sync(self, password: str, password_hash: str) -> bool:
        try:
            return bcrypt.checkpw(_encode(password), password_hash.encode("utf-8"))
        except ValueError:
            # Stored value is not a bcrypt hash
            return False

    async def hash(self, password: str) -> str:
        """Hash a password in a worker thread."""
        return await asyncio.to_thread(self.hash_sync, password)

    async def verify(self, password: str, password_hash: str) -> bool:
        """Check a password against a stored hash in a worker thread."""
        return await asyncio.to_thread(self.verify_sync, password, password_hash)
