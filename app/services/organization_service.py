"""
app/services/organization_service.py

Purpose: Organization (corporate group) operations

- Bulk-create members of an organization and email their credentials
- Delete an organization together with all of its members
- Organization roll-up for the dashboard

Bulk operations run sequentially; each item succeeds or fails on its own
and nothing already done is rolled back.
"""

from typing import Any, Dict, List, Optional

from app.analytics.organizations import group_by_organization, search_organizations
from app.core.config import settings
from app.core.exceptions import BatchFailedError, GymVisaError, ResourceNotFoundError, UserNotFoundError
from app.core.logging import get_logger, LogContext
from app.db.mongo import document_filter
from app.models.base import parse_documents
from app.models.user import User
from app.services.auth_service import generate_organization_password, generate_random_password
from app.services.email_service import EmailService
from app.services.user_service import UserService

logger = get_logger(__name__)


class OrganizationService:

    def __init__(
        self,
        user_service: UserService,
        email: EmailService,
        password_scheme: Optional[str] = None,
    ):
        self.user_service = user_service
        self.email = email
        self.password_scheme = password_scheme or settings.ORG_PASSWORD_SCHEME

    def new_password(self, organization: str) -> str:
        if self.password_scheme == "organization":
            return generate_organization_password(organization)
        return generate_random_password()

    async def create_org_users(self, organization: str, users: List[Dict[str, Any]]) -> Dict[str, Any]:
        """
        Creates one account per entry and emails the credentials.

        Args:
            organization: Organization name stamped on every profile
            users: Entries with email, name and optional phoneNo / gender

        Returns:
            {"results": [{email, password, uid}], "errors": [str], "emailResults": {...}}

        Raises:
            BatchFailedError: If no user could be created
        """
        created: List[Dict[str, Any]] = []
        errors: List[str] = []

        with LogContext(organization=organization):
            logger.info(f"Creating {len(users)} organization users")

            for entry in users:
                email = (entry.get("email") or "").strip()
                name = (entry.get("name") or "").strip()
                if not email or not name:
                    errors.append(f"User missing email or name: {email or name or 'unknown'}")
                    continue

                password = self.new_password(organization)
                try:
                    uid, _ = await self.user_service.create_user(
                        email=email,
                        password=password,
                        name=name,
                        phone_no=entry.get("phoneNo"),
                        gender=entry.get("gender"),
                        organization=organization,
                        password_reset_required=self.password_scheme == "random",
                    )
                except GymVisaError as e:
                    logger.warning(f"Organization user not created: {e.code}")
                    errors.append(f"Failed to create user {email}: {e.message}")
                    continue
                except Exception as e:
                    logger.error(f"Unexpected error creating organization user: {e}", exc_info=True)
                    errors.append(f"Failed to create user {email}: {e}")
                    continue

                created.append({"email": email, "password": password, "uid": uid, "name": name})

            if not created:
                logger.error("No organization users were created")
                raise BatchFailedError("No users were created", errors)

            sent = await self.email.send_bulk_credentials(created, organization)
            logger.info(f"Created {len(created)} organization users, {len(errors)} failed")

        email_results = {"emailsSent": sent["sent"], "emailsFailed": sent["failed"]}
        if sent["errors"]:
            email_results["emailErrors"] = sent["errors"]

        return {
            "results": [
                {"email": user["email"], "password": user["password"], "uid": user["uid"]}
                for user in created
            ],
            "errors": errors,
            "emailResults": email_results,
        }

    async def delete_organization(self, organization: str) -> Dict[str, Any]:
        """
        Deletes every member of an organization (auth account and profile).

        Returns:
            {"deletedUsers": [{email, name}], "errors": [str]}

        Raises:
            ResourceNotFoundError: No users belong to the organization
            BatchFailedError: No user could be deleted
        """
        users_collection = self.user_service.users
        auth = self.user_service.auth

        with LogContext(organization=organization):
            documents = await users_collection.find({"Organization": organization}).to_list(length=None)
            members = parse_documents(User, documents)
            if not members:
                raise ResourceNotFoundError("No users found for this organization")

            deleted: List[Dict[str, str]] = []
            errors: List[str] = []

            for member in members:
                label = member.email or member.id
                try:
                    try:
                        await auth.delete_account(member.id)
                    except UserNotFoundError:
                        logger.warning("Member had no auth account; deleting profile only")
                    await users_collection.delete_one(document_filter(member.id))
                except Exception as e:
                    logger.error(f"Failed to delete organization member: {e}", exc_info=True)
                    errors.append(f"Failed to delete user {label}: {e}")
                    continue

                deleted.append({"email": member.email, "name": member.name})

            if not deleted:
                raise BatchFailedError("No users were deleted", errors)

            logger.info(f"Deleted organization with {len(deleted)} users, {len(errors)} failed")

        return {"deletedUsers": deleted, "errors": errors}

    async def list_organizations(self, search: Optional[str] = None) -> List[Dict[str, Any]]:
        """Organization roll-up, largest first, optionally filtered by name."""
        summaries = group_by_organization(await self.user_service.list_users())
        return [
            {
                "name": summary.name,
                "total": summary.total,
                "active": summary.active,
                "frozen": summary.frozen,
                "users": [user.to_api() for user in summary.users],
            }
            for summary in search_organizations(summaries, search or "")
        ]
