"""
app/schemas/gyms.py

Purpose: Request bodies for gym endpoints
"""

from typing import Any, Dict, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from app.models.gym import OperatingHours


class GymFields(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    name: Optional[str] = Field(default=None, min_length=1)
    address: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None
    description: Optional[str] = None
    email: Optional[str] = None
    phone_no: Optional[str] = Field(default=None, alias="phoneNo")
    google_maps_link: Optional[str] = Field(default=None, alias="googleMapsLink")
    credits_per_visit: Optional[float] = Field(default=None, alias="creditsPerVisit", ge=0)
    subscription: Optional[Literal["Standard", "Premium"]] = None
    operating_hours: Optional[OperatingHours] = Field(default=None, alias="operatingHours")

    def stored_fields(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_unset=True)


class GymCreateRequest(GymFields):
    name: str = Field(..., min_length=1)


class GymUpdateRequest(GymFields):
    pass


class UnifiedHoursRequest(BaseModel):
    unified: bool


class EditHoursRequest(BaseModel):
    gender: Literal["male", "female"]
    day: str
    field: Literal["open", "close", "closed"]
    value: Union[bool, str]
