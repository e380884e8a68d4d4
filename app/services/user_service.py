"""
app/services/user_service.py

Purpose: User account management

- Create a user (auth account + linked profile)
- Reset passwords
- Profile CRUD, freeze toggle
- Push token listing and pruning
"""

from typing import Any, Dict, List, Optional, Tuple

from pymongo.errors import PyMongoError

from app.core.exceptions import (
    ExternalServiceError,
    ResourceNotFoundError,
    UserNotFoundError,
    ValidationError,
)
from app.core.logging import get_logger
from app.db.mongo import document_filter
from app.models.base import parse_documents
from app.models.user import User
from app.services.auth_service import AuthService, generate_random_password
from utils.constants import SUBSCRIPTION_NONE
from utils.time_utils import utc_now

logger = get_logger(__name__)


class UserService:
    """Users: auth accounts and their profile documents"""

    def __init__(self, users, auth: AuthService):
        self.users = users
        self.auth = auth

    async def create_user(
        self,
        email: str,
        password: str,
        name: str,
        phone_no: Optional[str] = None,
        gender: Optional[str] = None,
        organization: Optional[str] = None,
        password_reset_required: bool = False,
    ) -> Tuple[str, Dict[str, Any]]:
        """
        Creates an auth account and its profile document.

        If the profile cannot be written the auth account is deleted again,
        so no account is left without a profile.

        Returns:
            (uid, profile document)

        Raises:
            DuplicateEmailError, InvalidEmailError, WeakPasswordError: From the auth store
            ExternalServiceError: Profile write failed
        """
        uid = await self.auth.create_account(email, password, name)

        now = utc_now()
        user_data = {
            "_id": uid,
            "UserID": uid,
            "Name": name,
            "Email": email.strip(),
            "PhoneNo": phone_no or "",
            "Gender": gender or "",
            "Subscription": SUBSCRIPTION_NONE,
            "SubscriptionStartDate": now,
            "SubscriptionEndDate": now,
            "FCMToken": "",
            "Verified": True,
            "CreatedAt": now,
            "UpdatedAt": now,
        }
        if organization:
            user_data["Organization"] = organization
        if password_reset_required:
            user_data["PasswordResetRequired"] = True

        try:
            await self.users.insert_one(user_data)
        except PyMongoError as e:
            logger.error(f"Failed to write user profile: {e}", extra={"user_id": uid})
            await self.auth.delete_account(uid)
            raise ExternalServiceError("Failed to create user profile")

        logger.info("User created", extra={"user_id": uid})

        profile = {key: value for key, value in user_data.items() if key != "_id"}
        return uid, profile

    async def reset_password(self, email: str) -> str:
        """
        Replaces the password of an existing account with a random one.

        Returns:
            The new password (shown once, never stored in clear)

        Raises:
            UserNotFoundError: No account for this email
        """
        account = await self.auth.get_account_by_email(email)
        password = generate_random_password()
        await self.auth.update_password(account["_id"], password)
        logger.info("Password reset", extra={"user_id": account["_id"]})
        return password

    async def list_users(self) -> List[User]:
        documents = await self.users.find({}).to_list(length=None)
        return parse_documents(User, documents)

    async def get_user(self, user_id: str) -> User:
        document = await self.users.find_one(document_filter(user_id))
        if not document:
            raise ResourceNotFoundError("User not found")
        return User.from_document(document)

    async def update_user(self, user_id: str, changes: Dict[str, Any]) -> User:
        """
        Applies profile changes given by stored field name.

        Raises:
            ValidationError: Nothing to change
            ResourceNotFoundError: Unknown user
        """
        if not changes:
            raise ValidationError("No changes provided")

        result = await self.users.update_one(
            document_filter(user_id),
            {"$set": {**changes, "UpdatedAt": utc_now()}}
        )
        if result.matched_count == 0:
            raise ResourceNotFoundError("User not found")

        logger.info(f"User updated: {', '.join(sorted(changes))}", extra={"user_id": user_id})
        return await self.get_user(user_id)

    async def toggle_freeze(self, user_id: str) -> User:
        user = await self.get_user(user_id)
        return await self.update_user(user_id, {"isUserFreezed": not user.is_frozen})

    async def delete_user(self, user_id: str):
        """Deletes the profile and its auth account."""
        user = await self.get_user(user_id)
        try:
            await self.auth.delete_account(user.id)
        except UserNotFoundError:
            logger.warning("Profile had no auth account", extra={"user_id": user_id})

        await self.users.delete_one(document_filter(user_id))
        logger.info("User deleted", extra={"user_id": user_id})

    async def users_with_push_tokens(self) -> List[User]:
        return [user for user in await self.list_users() if user.has_push_token]

    async def prune_push_tokens(self, tokens: List[str]) -> int:
        """
        Clears the push token on every user holding one of ``tokens``.

        Returns:
            Number of users updated
        """
        tokens = [token for token in tokens if token]
        if not tokens:
            return 0

        result = await self.users.update_many(
            {"FCMToken": {"$in": tokens}},
            {"$set": {"FCMToken": "", "UpdatedAt": utc_now()}}
        )
        logger.info(f"Pruned {result.modified_count} push tokens")
        return result.modified_count
