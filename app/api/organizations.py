"""
app/api/organizations.py

Purpose: Organization endpoints

- Bulk-create organization members (credentials emailed)
- Delete an organization and its members
- Organization roll-up
"""

from typing import Optional

from fastapi import APIRouter, Depends

from app.api.deps import get_organization_service
from app.schemas.users import CreateOrgUsersRequest, DeleteOrganizationRequest
from app.services.organization_service import OrganizationService

router = APIRouter()


@router.post("/create-org-users")
async def create_org_users(
    payload: CreateOrgUsersRequest,
    organizations: OrganizationService = Depends(get_organization_service),
):
    """
    Creates every listed member of an organization.

    Each entry succeeds or fails on its own; failures are listed in
    ``errors``. Fails with 500 only when no member could be created.
    """
    outcome = await organizations.create_org_users(payload.org_name, payload.entries())

    response = {
        "success": True,
        "message": f"Created {len(outcome['results'])} users successfully",
        "results": outcome["results"],
        "emailResults": outcome["emailResults"],
    }
    if outcome["errors"]:
        response["errors"] = outcome["errors"]
    return response


@router.delete("/delete-organization")
async def delete_organization(
    payload: DeleteOrganizationRequest,
    organizations: OrganizationService = Depends(get_organization_service),
):
    outcome = await organizations.delete_organization(payload.organization_name)

    response = {
        "success": True,
        "message": (
            f'Successfully deleted organization "{payload.organization_name}" '
            f"and {len(outcome['deletedUsers'])} associated users"
        ),
        "deletedUsers": outcome["deletedUsers"],
    }
    if outcome["errors"]:
        response["errors"] = outcome["errors"]
    return response


@router.get("/organizations")
async def list_organizations(
    search: Optional[str] = None,
    organizations: OrganizationService = Depends(get_organization_service),
):
    return {"organizations": await organizations.list_organizations(search)}
