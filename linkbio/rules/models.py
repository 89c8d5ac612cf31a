from pydantic import BaseModel, Field


class ProjectRules(BaseModel):
    slug: str
    rules_version: str

class RangeRule(BaseModel):
    min: int
    max: int

class MaxRule(BaseModel):
    max: int

class RegexRule(RangeRule):
    pattern: str

class ProfileRules(BaseModel):
    username: RegexRule
    display_name: MaxRule
    bio: MaxRule
    support_banner_values: list[str]

class LinkRules(BaseModel):
    title: RangeRule
    allowed_url_schemes: list[str]
    contact_url_schemes: list[str] = Field(default_factory=lambda: ["mailto", "tel"])
    types: list[str]
    display_modes: list[str]
    platform_categories: list[str]

class AnalyticsRules(BaseModel):
    default_range: str = "last7"
    top_links_limit: int = Field(default=5, ge=1)
    timezone: str = "UTC"

class OpsRules(BaseModel):
    data_dir_required: bool
    required_env: list[str] = Field(default_factory=list)

class Rules(BaseModel):
    project: ProjectRules
    profiles: ProfileRules
    links: LinkRules
    analytics: AnalyticsRules
    ops: OpsRules
