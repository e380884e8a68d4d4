"""
app/schemas/users.py

Purpose: Request bodies for user and organization endpoints
"""

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class CreateUserRequest(BaseModel):
    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "email": "jane@example.com",
                "password": "s3cret!",
                "name": "Jane Doe",
                "phoneNo": "+923001234567",
                "gender": "female",
            }
        },
    )

    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    phone_no: Optional[str] = Field(default=None, alias="phoneNo")
    gender: Optional[str] = None
    organization: Optional[str] = None


class OrgUserEntry(BaseModel):
    """One member in a bulk request; missing email or name is reported per entry."""

    model_config = ConfigDict(populate_by_name=True)

    email: Optional[str] = None
    name: Optional[str] = None
    phone_no: Optional[str] = Field(default=None, alias="phoneNo")
    gender: Optional[str] = None


class CreateOrgUsersRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    org_name: str = Field(..., alias="orgName", min_length=1)
    users: List[OrgUserEntry] = Field(..., min_length=1)

    def entries(self) -> List[Dict[str, Any]]:
        return [entry.model_dump(by_alias=True) for entry in self.users]


class DeleteOrganizationRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    organization_name: str = Field(..., alias="organizationName", min_length=1)


class ResetPasswordRequest(BaseModel):
    email: str = Field(..., min_length=1)


class PrunePushTokensRequest(BaseModel):
    tokens: List[str]


class UserUpdateRequest(BaseModel):
    """Editable profile fields, by stored name."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    name: Optional[str] = Field(default=None, alias="Name", min_length=1)
    phone_no: Optional[str] = Field(default=None, alias="PhoneNo")
    gender: Optional[str] = Field(default=None, alias="Gender")
    subscription: Optional[Literal["None", "Standard", "Premium"]] = Field(default=None, alias="Subscription")
    subscription_end_date: Optional[datetime] = Field(default=None, alias="SubscriptionEndDate")
    is_frozen: Optional[bool] = Field(default=None, alias="isUserFreezed")
    organization: Optional[str] = Field(default=None, alias="Organization")

    def changes(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_unset=True)
