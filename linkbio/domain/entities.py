from datetime import UTC, datetime
from typing import Annotated, Literal

from pydantic import BaseModel, Field, model_validator

# --- Enums / Literals ---
LinkType = Literal["custom", "platform", "contact", "embed"]
DisplayMode = Literal["standard", "featured", "grid"]
PlatformCategory = Literal["social", "business", "music", "entertainment", "lifestyle", "news"]
SupportBanner = Literal[
    "none", "stop_genocide", "black_lives_matter", "climate_action", "mental_health"
]
EventType = Literal["view", "click"]


def utc_now() -> datetime:
    return datetime.now(UTC)


# --- Profile ---

class Profile(BaseModel):
    id: int | None = None
    owner_id: str
    username: str
    display_name: str | None = None
    bio: str | None = None
    avatar_url: str | None = None
    banner_url: str | None = None
    support_banner: SupportBanner = "none"
    onboarding_completed_at: datetime | None = None
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

# --- Link extension records ---

class PlatformDetails(BaseModel):
    kind: Literal["platform"] = "platform"
    name: str
    category: PlatformCategory = "social"
    icon_url: str | None = None

class CustomDetails(BaseModel):
    kind: Literal["custom"] = "custom"
    display_mode: DisplayMode = "standard"
    thumbnail_url: str | None = None

class ContactDetails(BaseModel):
    kind: Literal["contact"] = "contact"
    contact_type: str
    contact_value: str

LinkDetails = Annotated[
    PlatformDetails | CustomDetails | ContactDetails,
    Field(discriminator="kind"),
]

# --- Links ---

class Link(BaseModel):
    id: int | None = None
    profile_id: int
    type: LinkType = "custom"
    title: str
    url: str
    sort_order: int = 0
    is_hidden: bool = False
    details: LinkDetails | None = None
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @model_validator(mode="after")
    def _details_match_type(self) -> "Link":
        if self.details is not None and self.details.kind != self.type:
            raise ValueError(
                f"{self.details.kind} details cannot be attached to a {self.type} link"
            )
        return self

# --- Analytics ---

class AnalyticsEvent(BaseModel):
    id: int | None = None
    profile_id: int
    link_id: int | None = None
    type: EventType
    created_at: datetime = Field(default_factory=utc_now)
