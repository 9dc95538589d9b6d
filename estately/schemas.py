# estately/schemas.py
import base64
import binascii
import re
from typing import List, Literal, Optional

import humanize
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from estately.config import settings

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

PropertyType = Literal["House", "Flat", "Plot", "Commercial"]
ConstructionStatus = Literal["Ready to move", "Under construction"]
Currency = Literal["USD", "PKR"]
AreaUnit = Literal["sq ft", "marla", "kanal"]


class CamelModel(BaseModel):
    """Snake-case attributes, camelCase on the wire (matches the webhook payloads)."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class EmailModel(CamelModel):
    email: str

    @field_validator("email")
    @classmethod
    def email_valid(cls, v: str) -> str:
        v = v.strip()
        if not EMAIL_RE.match(v):
            raise ValueError("Invalid email address")
        return v


class ListingRecord(CamelModel):
    id: Optional[str] = None
    name: Optional[str] = None
    email: Optional[str] = None
    phone_number: Optional[str] = None
    location: Optional[str] = None
    price_range: Optional[str] = None
    property_type: Optional[str] = None
    area: Optional[str] = None
    construction_status: Optional[str] = None
    image_url: Optional[str] = None


# ---------------------------- auth ----------------------------

class SignupForm(EmailModel):
    name: str = Field(min_length=1)
    password: str = Field(min_length=8)
    confirm_password: str

    @model_validator(mode="after")
    def passwords_match(self):
        if self.password != self.confirm_password:
            raise ValueError("Passwords don't match")
        return self

    def payload(self) -> dict:
        return {"name": self.name, "email": self.email, "password": self.password}


class VerifyEmailForm(EmailModel):
    code: str = Field(min_length=1)


class LoginForm(EmailModel):
    password: str = Field(min_length=1)


class ForgotPasswordForm(EmailModel):
    pass


class ResetCodeForm(EmailModel):
    code: str = Field(min_length=4)


class ResetPasswordForm(EmailModel):
    password: str = Field(min_length=8)
    confirm_password: str

    @model_validator(mode="after")
    def passwords_match(self):
        if self.password != self.confirm_password:
            raise ValueError("Passwords don't match")
        return self

    def payload(self) -> dict:
        return {"email": self.email, "password": self.password}


class SessionUser(CamelModel):
    name: Optional[str] = None
    email: str


class LoginResponse(CamelModel):
    token: str
    user: SessionUser
    expires_at: str
    expires_in: str


# ------------------------- intake forms -------------------------

class BuyerForm(EmailModel):
    name: str = Field(min_length=1)
    phone_number: str = Field(min_length=1)
    location: str = Field(min_length=1)
    price_range: str = Field(min_length=1)
    property_type: PropertyType = "House"
    area: str = Field(min_length=1)
    construction_status: ConstructionStatus = "Ready to move"

    def payload(self) -> dict:
        return self.model_dump(by_alias=True)


class ListingForm(EmailModel):
    name: str = Field(min_length=1)
    phone_number: str = Field(min_length=1)
    location: str = Field(min_length=1)
    price_range: str = Field(min_length=1)
    price_currency: Currency = "USD"
    property_type: PropertyType = "House"
    area: str = Field(min_length=1)
    area_unit: AreaUnit = "sq ft"
    construction_status: ConstructionStatus = "Ready to move"

    def _composite_payload(self) -> dict:
        data = self.model_dump(by_alias=True, exclude={"price_currency", "area_unit"})
        data["priceRange"] = f"{self.price_range} {self.price_currency}"
        data["area"] = f"{self.area} {self.area_unit}"
        return data


class SellerForm(ListingForm):
    image: Optional[str] = None

    @field_validator("image")
    @classmethod
    def image_within_limit(cls, v: Optional[str]) -> Optional[str]:
        if not v or not v.startswith("data:"):
            return v or None
        _, sep, encoded = v.partition(",")
        if not sep:
            raise ValueError("Image is not a valid data URL.")
        try:
            raw = base64.b64decode(encoded, validate=True)
        except (binascii.Error, ValueError):
            raise ValueError("Image is not valid base64 data.")
        if len(raw) > settings.MAX_IMAGE_BYTES:
            raise ValueError(f"Image size cannot exceed {humanize.naturalsize(settings.MAX_IMAGE_BYTES, binary=True)}.")
        return v

    def payload(self) -> dict:
        data = self._composite_payload()
        if not self.image:
            data.pop("image")
        return data


class EditListingForm(ListingForm):
    def payload(self, listing_id: str) -> dict:
        data = self._composite_payload()
        data["id"] = listing_id
        return data


# --------------------------- AI tools ---------------------------

class AgentMatchingInput(CamelModel):
    location: str = Field(min_length=2)
    property_type: str = Field(min_length=3)
    budget: str = Field(min_length=4)
    unique_requirements: Optional[str] = None


class RecommendedAgent(CamelModel):
    name: str
    specialization: str
    experience_years: Optional[float] = None
    contact_info: str
    why_recommended: str


class AgentMatchingOutput(CamelModel):
    recommended_agents: List[RecommendedAgent] = Field(default_factory=list)


class PriceCheckForm(CamelModel):
    prompt: str = Field(min_length=1)


class PriceCheckResponse(CamelModel):
    output: Optional[str] = None
    raw: Optional[dict | list] = None


# ------------------------- browse views -------------------------

class CriteriaUpdate(CamelModel):
    """Partial criteria mutation; fields left as None are untouched."""
    location: Optional[str] = None
    price_range_label: Optional[str] = None
    price_currency: Optional[str] = None
    property_type: Optional[str] = None
    area_value: Optional[str] = None
    area_unit: Optional[str] = None
    construction_status: Optional[str] = None


class BrowseResponse(CamelModel):
    loaded: bool
    criteria: dict
    price_brackets: List[str]
    listings: Optional[List[ListingRecord]] = None
    notice: Optional[str] = None
