"""
app/models/gym.py

Purpose: Gym document and operating hours

- Contact details, images, map link, tier
- Cached access code (data URL)
- Male/female weekly schedules with a unified mode

Invariant: when ``unified`` is set, the male and female schedules are
identical for every day.
"""

import re
from typing import Any, Dict, Literal, Optional, Union

from pydantic import BaseModel, Field, model_validator

from app.models.base import StoredDocument
from utils.constants import SUBSCRIPTION_STANDARD, WEEK_DAYS, WEEKDAY_HOURS, WEEKEND_HOURS

TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")

Gender = Literal["male", "female"]
HoursField = Literal["open", "close", "closed"]


class DayHours(BaseModel):
    open: str = WEEKDAY_HOURS["open"]
    close: str = WEEKDAY_HOURS["close"]
    closed: bool = False


def default_schedule() -> Dict[str, DayHours]:
    return {
        day: DayHours(**(WEEKEND_HOURS if day in ("saturday", "sunday") else WEEKDAY_HOURS))
        for day in WEEK_DAYS
    }


class OperatingHours(BaseModel):
    unified: bool = True
    male: Dict[str, DayHours] = Field(default_factory=default_schedule)
    female: Dict[str, DayHours] = Field(default_factory=default_schedule)

    @model_validator(mode="after")
    def fill_missing_days(self) -> "OperatingHours":
        defaults = default_schedule()
        for schedule in (self.male, self.female):
            for day in WEEK_DAYS:
                schedule.setdefault(day, defaults[day].model_copy())
        return self

    def schedules_match(self) -> bool:
        """True when every day is identical for both genders."""
        return all(self.male[day] == self.female[day] for day in WEEK_DAYS)

    def set_unified(self, unified: bool) -> "OperatingHours":
        """
        Switches unified mode.

        Turning it on copies the male schedule onto the female one;
        turning it off keeps both schedules as they are.
        """
        if unified:
            male = {day: hours.model_copy() for day, hours in self.male.items()}
            female = {day: hours.model_copy() for day, hours in self.male.items()}
            return OperatingHours(unified=True, male=male, female=female)
        return self.model_copy(update={"unified": False}, deep=True)

    def synchronized(self) -> "OperatingHours":
        """Re-applies the invariant (used before every write)."""
        return self.set_unified(True) if self.unified else self.model_copy(deep=True)

    def edit_day(
        self,
        gender: Gender,
        day: str,
        field: HoursField,
        value: Union[str, bool],
    ) -> "OperatingHours":
        """
        Changes one field of one day.

        In unified mode the edit lands on both genders and ``unified`` is then
        recomputed from whether every day still matches. In separate mode only
        the named gender changes.

        Raises:
            ValueError: On an unknown gender/day/field or a malformed value
        """
        if gender not in ("male", "female"):
            raise ValueError(f"Unknown gender: {gender}")
        day = day.lower()
        if day not in WEEK_DAYS:
            raise ValueError(f"Unknown day: {day}")
        if field == "closed":
            if not isinstance(value, bool):
                raise ValueError("closed must be true or false")
        elif field in ("open", "close"):
            if not isinstance(value, str) or not TIME_PATTERN.match(value):
                raise ValueError(f"{field} must be a HH:MM time")
        else:
            raise ValueError(f"Unknown field: {field}")

        updated = self.model_copy(deep=True)
        targets = ("male", "female") if self.unified else (gender,)
        for target in targets:
            schedule = getattr(updated, target)
            schedule[day] = schedule[day].model_copy(update={field: value})

        if self.unified:
            updated.unified = updated.schedules_match()
        return updated


class Gym(StoredDocument):
    gym_id: str = Field(default="", alias="gymID")
    name: str = ""
    address: str = ""
    city: str = ""
    country: str = ""
    description: str = ""
    email: str = ""
    phone_no: str = Field(default="", alias="phoneNo")
    image_url1: str = Field(default="", alias="imageUrl1")
    image_url2: str = Field(default="", alias="imageUrl2")
    google_maps_link: str = Field(default="", alias="googleMapsLink")
    credits_per_visit: float = Field(default=0, alias="creditsPerVisit")
    qr_code_url: str = Field(default="", alias="qrCodeUrl")
    subscription: str = SUBSCRIPTION_STANDARD
    operating_hours: Optional[OperatingHours] = Field(default=None, alias="operatingHours")

    def hours(self) -> OperatingHours:
        return self.operating_hours or OperatingHours()


def hours_document(hours: OperatingHours) -> Dict[str, Any]:
    """Stored shape of an operating hours block."""
    return hours.model_dump()
