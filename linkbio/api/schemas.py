"""
API request/response models.

JSON uses camelCase keys; Python attributes stay snake_case.
"""

from dataclasses import asdict
from datetime import datetime
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from linkbio.components.analytics import StatsReport
from linkbio.domain.entities import (
    DisplayMode,
    Link,
    LinkType,
    PlatformCategory,
    Profile,
    SupportBanner,
)


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- Links ---


class PlatformDetailsSchema(CamelModel):
    kind: Literal["platform"] = "platform"
    name: str
    category: PlatformCategory
    icon_url: str | None = None


class CustomDetailsSchema(CamelModel):
    kind: Literal["custom"] = "custom"
    display_mode: DisplayMode
    thumbnail_url: str | None = None


class ContactDetailsSchema(CamelModel):
    kind: Literal["contact"] = "contact"
    contact_type: str
    contact_value: str


DetailsSchema = Annotated[
    PlatformDetailsSchema | CustomDetailsSchema | ContactDetailsSchema,
    Field(discriminator="kind"),
]


class LinkResponse(CamelModel):
    id: int
    profile_id: int
    type: LinkType
    title: str
    url: str
    sort_order: int
    is_hidden: bool
    details: DetailsSchema | None = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, link: Link) -> "LinkResponse":
        return cls.model_validate(link.model_dump())


class LinkCreateRequest(CamelModel):
    title: str
    url: str
    type: str | None = None
    platform_name: str | None = None
    platform_category: str | None = None
    display_mode: str | None = None
    thumbnail_url: str | None = None
    contact_type: str | None = None
    contact_value: str | None = None
    is_hidden: bool = False


class LinkUpdateRequest(CamelModel):
    title: str | None = None
    url: str | None = None
    is_hidden: bool | None = None
    platform_name: str | None = None
    platform_category: str | None = None
    display_mode: str | None = None
    thumbnail_url: str | None = None
    contact_type: str | None = None
    contact_value: str | None = None


class ReorderRequest(CamelModel):
    ordered_ids: list[int]


class SuccessResponse(CamelModel):
    success: bool = True


# --- Profiles ---


class ProfileResponse(CamelModel):
    id: int
    username: str
    display_name: str | None = None
    bio: str | None = None
    avatar_url: str | None = None
    banner_url: str | None = None
    support_banner: SupportBanner = "none"
    onboarding_completed_at: datetime | None = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, profile: Profile) -> "ProfileResponse":
        return cls.model_validate(profile.model_dump())


class PublicProfileResponse(CamelModel):
    profile: ProfileResponse
    links: list[LinkResponse]


class ProfileCreateRequest(CamelModel):
    username: str
    display_name: str | None = None
    bio: str | None = None
    avatar_url: str | None = None
    banner_url: str | None = None
    support_banner: str | None = None


class ProfileUpdateRequest(CamelModel):
    username: str | None = None
    display_name: str | None = None
    bio: str | None = None
    avatar_url: str | None = None
    banner_url: str | None = None
    support_banner: str | None = None


# --- Onboarding ---


class StarterLinkRequest(CamelModel):
    title: str
    url: str
    type: str | None = None
    platform_name: str | None = None
    platform_category: str | None = None


class OnboardingCompleteRequest(CamelModel):
    username: str
    display_name: str | None = None
    bio: str | None = None
    avatar_url: str | None = None
    banner_url: str | None = None
    links: list[StarterLinkRequest] = []


class OnboardingStateResponse(CamelModel):
    is_onboarding_complete: bool


class OnboardingCompleteResponse(CamelModel):
    profile: ProfileResponse
    links: list[LinkResponse]


# --- Analytics ---


class RecordViewRequest(CamelModel):
    username: str


class RecordClickRequest(CamelModel):
    link_id: int


class ChartPointResponse(CamelModel):
    timestamp: str
    views: int
    clicks: int


class TopLinkResponse(CamelModel):
    id: int
    title: str
    url: str
    clicks: int


class StatsResponse(CamelModel):
    start: datetime
    end: datetime
    total_views: int
    total_clicks: int
    ctr: float
    prev_total_views: int
    prev_total_clicks: int
    prev_ctr: float
    views_change: float
    clicks_change: float
    ctr_change: float
    chart_data: list[ChartPointResponse]
    top_links: list[TopLinkResponse]

    @classmethod
    def from_report(cls, report: StatsReport) -> "StatsResponse":
        return cls.model_validate(asdict(report))


class LinkClickCountResponse(CamelModel):
    link_id: int
    click_count: int

