"""
app/services/auth_service.py

Purpose: Authentication identity store

- One account per email, holding a bcrypt password hash
- Account id doubles as the user profile id
- Password generation for admin-created accounts
"""

import asyncio
import secrets
import uuid
from typing import Any, Dict, Optional

import bcrypt
from pymongo.errors import DuplicateKeyError

from app.core.config import settings
from app.core.exceptions import (
    DuplicateEmailError,
    InvalidEmailError,
    UserNotFoundError,
    WeakPasswordError,
)
from app.core.logging import get_logger
from utils.constants import RESET_PASSWORD_ALPHABET, RESET_PASSWORD_LENGTH
from utils.time_utils import utc_now
from utils.validation_utils import normalize_email, validate_email, validate_password

logger = get_logger(__name__)

# bcrypt only looks at the first 72 bytes of a password
BCRYPT_MAX_BYTES = 72


def generate_random_password(length: int = RESET_PASSWORD_LENGTH) -> str:
    return "".join(secrets.choice(RESET_PASSWORD_ALPHABET) for _ in range(length))


def generate_organization_password(organization: str) -> str:
    """
    Organization-derived password: the name without whitespace, lower-cased,
    followed by a number from 100 to 999.
    """
    base = "".join(organization.split()).lower()
    return f"{base}{secrets.randbelow(900) + 100}"


def hash_password(password: str, rounds: Optional[int] = None) -> str:
    salt = bcrypt.gensalt(rounds=rounds or settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


class AuthService:
    """Account store backed by the auth collection."""

    def __init__(self, collection, min_password_length: Optional[int] = None):
        self.collection = collection
        self.min_password_length = min_password_length or settings.MIN_PASSWORD_LENGTH

    def _check_password(self, password: str):
        if not validate_password(password, self.min_password_length):
            raise WeakPasswordError(
                f"Password must be at least {self.min_password_length} characters"
            )
        if len(password.encode("utf-8")) > BCRYPT_MAX_BYTES:
            raise WeakPasswordError(f"Password must be at most {BCRYPT_MAX_BYTES} bytes")

    async def create_account(self, email: str, password: str, display_name: str = "") -> str:
        """
        Creates an account.

        Args:
            email: Login email (normalized before storing)
            password: Plain password, hashed before storing
            display_name: Name shown for the account

        Returns:
            The new account id

        Raises:
            InvalidEmailError: Malformed email
            WeakPasswordError: Password below the minimum strength
            DuplicateEmailError: Email already registered
        """
        normalized = normalize_email(email)
        if not validate_email(normalized):
            raise InvalidEmailError(f"Invalid email format: {email}")
        self._check_password(password)

        if await self.collection.find_one({"email": normalized}):
            raise DuplicateEmailError(f"Email already exists: {normalized}")

        password_hash = await asyncio.to_thread(hash_password, password)
        account_id = uuid.uuid4().hex
        now = utc_now()
        try:
            await self.collection.insert_one({
                "_id": account_id,
                "email": normalized,
                "password_hash": password_hash,
                "display_name": display_name,
                "created_at": now,
                "updated_at": now,
            })
        except DuplicateKeyError:
            # Lost a race with a concurrent create for the same email
            raise DuplicateEmailError(f"Email already exists: {normalized}")

        logger.info("Auth account created", extra={"user_id": account_id})
        return account_id

    async def get_account_by_email(self, email: str) -> Dict[str, Any]:
        account = await self.collection.find_one({"email": normalize_email(email)})
        if not account:
            raise UserNotFoundError()
        return account

    async def update_password(self, account_id: str, password: str):
        self._check_password(password)
        password_hash = await asyncio.to_thread(hash_password, password)
        result = await self.collection.update_one(
            {"_id": account_id},
            {"$set": {"password_hash": password_hash, "updated_at": utc_now()}}
        )
        if result.matched_count == 0:
            raise UserNotFoundError()
        logger.info("Password updated", extra={"user_id": account_id})

    async def delete_account(self, account_id: str):
        result = await self.collection.delete_one({"_id": account_id})
        if result.deleted_count == 0:
            raise UserNotFoundError()
        logger.info("Auth account deleted", extra={"user_id": account_id})
