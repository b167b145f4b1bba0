# app/adapters/outbound/security/auth_client_manager.py (async version)

import secrets
import uuid
from typing import Tuple
from passlib.context import CryptContext


class ClientAuthManager:
    """
    Credential manager for API clients.

    Secrets are stored only as salted bcrypt hashes; the plaintext is
    returned once at creation time and never persisted.
    """

    crypt_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

    @classmethod
    def generate_credentials(cls) -> Tuple[str, str]:
        """
        Generate a new (api_key, api_secret) pair in plain text.
        """
        return str(uuid.uuid4()), str(uuid.uuid4())

    @classmethod
    async def hash_secret(cls, secret: str) -> str:
        """
        Generate secure secret hash for storage in the database.
        """
        return cls.crypt_context.hash(secret)

    @classmethod
    async def verify_secret(cls, plain_secret: str, hashed_secret: str) -> bool:
        """
        Compare plain text secret with stored hash.
        """
        return cls.crypt_context.verify(plain_secret, hashed_secret)

    @classmethod
    async def dummy_verify(cls) -> None:
        """
        Spend the same time as a real verification, used when the API key
        is unknown so response timing does not reveal it.
        """
        cls.crypt_context.dummy_verify()

    @staticmethod
    def compare_admin_credentials(username: str, password: str,
                                  expected_username: str, expected_password: str) -> bool:
        """
        Constant-time comparison against the configured admin pair.
        """
        user_ok = secrets.compare_digest(username.encode("utf-8"), expected_username.encode("utf-8"))
        pass_ok = secrets.compare_digest(password.encode("utf-8"), expected_password.encode("utf-8"))
        return user_ok and pass_ok
