"""
ProfileService - username claims and public profile identity.

Functional core with injected repositories and clock.

Invariants:
- Usernames are trimmed and lower-cased before validation and storage.
- A username belongs to at most one profile; an owner has at most one profile.
- A uniqueness clash detected late by storage is reported as a conflict,
  never as an overwrite.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any

from linkbio.domain.entities import Link, Profile
from linkbio.domain.errors import (
    DomainError,
    UniqueViolationError,
    conflict,
    invalid,
    not_found,
)
from linkbio.domain.urls import is_absolute_url
from linkbio.ports.clock import ClockPort
from linkbio.rules.models import ProfileRules

from .ports import ProfileRepoPort, VisibleLinksPort

logger = logging.getLogger(__name__)

# --- Configuration ---


@dataclass(frozen=True)
class ProfileConfig:
    """Profile validation limits."""

    username_min: int = 3
    username_max: int = 30
    username_pattern: str = r"^[a-zA-Z0-9_]+$"
    display_name_max: int = 30
    bio_max: int = 500
    support_banner_values: tuple[str, ...] = (
        "none",
        "stop_genocide",
        "black_lives_matter",
        "climate_action",
        "mental_health",
    )

    @classmethod
    def from_rules(cls, rules: ProfileRules | None) -> ProfileConfig:
        if rules is None:
            return cls()
        return cls(
            username_min=rules.username.min,
            username_max=rules.username.max,
            username_pattern=rules.username.pattern,
            display_name_max=rules.display_name.max,
            bio_max=rules.bio.max,
            support_banner_values=tuple(rules.support_banner_values),
        )


DEFAULT_CONFIG = ProfileConfig()

NULLABLE_TEXT_FIELDS = ("bio", "avatar_url", "banner_url")


# --- Validation Functions ---


def normalize_username(username: str) -> str:
    return username.strip().lower()


def validate_username(username: str, config: ProfileConfig = DEFAULT_CONFIG) -> list[DomainError]:
    """Validate an already-normalized username."""
    if len(username) < config.username_min or len(username) > config.username_max:
        return [
            invalid(
                "username_length",
                f"Username must be {config.username_min}-{config.username_max} characters",
                field="username",
            )
        ]
    if not re.fullmatch(config.username_pattern, username):
        return [
            invalid(
                "username_pattern",
                "Username can only contain letters, numbers, and underscores",
                field="username",
            )
        ]
    return []


def validate_profile_fields(
    display_name: str | None = None,
    bio: str | None = None,
    avatar_url: str | None = None,
    banner_url: str | None = None,
    support_banner: str | None = None,
    config: ProfileConfig = DEFAULT_CONFIG,
) -> list[DomainError]:
    """Validate optional profile fields; None means 'not supplied'."""
    errors: list[DomainError] = []

    if display_name is not None and len(display_name.strip()) > config.display_name_max:
        errors.append(
            invalid(
                "display_name_too_long",
                f"Display name must be {config.display_name_max} characters or less",
                field="display_name",
            )
        )

    if bio is not None and len(bio) > config.bio_max:
        errors.append(
            invalid(
                "bio_too_long",
                f"Bio must be {config.bio_max} characters or less",
                field="bio",
            )
        )

    for name, value in (("avatar_url", avatar_url), ("banner_url", banner_url)):
        if value and not is_absolute_url(value.strip()):
            errors.append(invalid("url_invalid", f"{name} must be an absolute URL", field=name))

    if support_banner is not None and support_banner not in config.support_banner_values:
        errors.append(
            invalid(
                "support_banner_invalid",
                f"Unknown support banner '{support_banner}'",
                field="support_banner",
            )
        )

    return errors


def _clean(value: str | None) -> str | None:
    """Strip; empty string becomes None."""
    if value is None:
        return None
    value = value.strip()
    return value or None


# --- Profile Service ---


class ProfileService:
    """
    Profile service.

    Owns profile identity and the username uniqueness invariant.
    """

    def __init__(
        self,
        repo: ProfileRepoPort,
        links: VisibleLinksPort,
        clock: ClockPort,
        config: ProfileConfig | None = None,
    ) -> None:
        self._repo = repo
        self._links = links
        self._clock = clock
        self._config = config or DEFAULT_CONFIG

    def get_for_owner(self, owner_id: str) -> Profile | None:
        return self._repo.get_by_owner(owner_id)

    def get_public(self, username: str) -> tuple[Profile | None, list[Link]]:
        """Profile plus its visible links; (None, []) when unknown."""
        profile = self._repo.get_by_username(normalize_username(username))
        if profile is None or profile.id is None:
            return None, []
        return profile, self._links.list_by_profile(profile.id, include_hidden=False)

    def create(
        self,
        owner_id: str,
        username: str,
        display_name: str | None = None,
        bio: str | None = None,
        avatar_url: str | None = None,
        banner_url: str | None = None,
        support_banner: str | None = None,
    ) -> tuple[Profile | None, list[DomainError]]:
        """
        Claim a username for the caller.

        Returns:
            Tuple of (profile, errors). Profile is None on failure.
        """
        username = normalize_username(username)
        errors = validate_username(username, self._config)
        errors += validate_profile_fields(
            display_name=display_name,
            bio=bio,
            avatar_url=avatar_url,
            banner_url=banner_url,
            support_banner=support_banner,
            config=self._config,
        )
        if errors:
            return None, errors

        if self._repo.get_by_owner(owner_id) is not None:
            return None, [conflict("profile_exists", "Profile already exists for this user")]

        if self._repo.get_by_username(username) is not None:
            return None, [conflict("username_taken", "Username already exists", field="username")]

        now = self._clock.now_utc()
        profile = Profile(
            owner_id=owner_id,
            username=username,
            display_name=_clean(display_name) or username,
            bio=_clean(bio),
            avatar_url=_clean(avatar_url),
            banner_url=_clean(banner_url),
            support_banner=support_banner or "none",  # type: ignore[arg-type]
            created_at=now,
            updated_at=now,
        )

        try:
            return self._repo.create(profile), []
        except UniqueViolationError as e:
            logger.info("Late uniqueness clash creating profile for %s: %s", owner_id, e.field)
            if e.field == "owner_id":
                return None, [conflict("profile_exists", "Profile already exists for this user")]
            return None, [conflict("username_taken", "Username already exists", field="username")]

    def update(
        self, owner_id: str, updates: dict[str, Any]
    ) -> tuple[Profile | None, list[DomainError]]:
        """
        Partially update the caller's profile.

        Only keys present in ``updates`` are changed; an empty string clears
        bio, avatar_url and banner_url.
        """
        updates = {k: v for k, v in updates.items() if v is not None}
        if not updates:
            return None, [invalid("empty_update", "At least one field must be provided for update")]

        profile = self._repo.get_by_owner(owner_id)
        if profile is None:
            return None, [not_found("profile_not_found", "Profile not found")]

        errors: list[DomainError] = []
        username = updates.get("username")
        if username is not None:
            username = normalize_username(str(username))
            errors += validate_username(username, self._config)
        errors += validate_profile_fields(
            display_name=updates.get("display_name"),
            bio=updates.get("bio"),
            avatar_url=updates.get("avatar_url"),
            banner_url=updates.get("banner_url"),
            support_banner=updates.get("support_banner"),
            config=self._config,
        )
        if errors:
            return None, errors

        if username is not None and username != profile.username:
            holder = self._repo.get_by_username(username)
            if holder is not None and holder.owner_id != owner_id:
                return None, [
                    conflict("username_taken", "Username already exists", field="username")
                ]

        changes: dict[str, Any] = {"updated_at": self._clock.now_utc()}
        if username is not None:
            changes["username"] = username
        if updates.get("display_name") is not None:
            changes["display_name"] = _clean(updates["display_name"]) or changes.get(
                "username", profile.username
            )
        for name in NULLABLE_TEXT_FIELDS:
            if updates.get(name) is not None:
                changes[name] = _clean(updates[name])
        if updates.get("support_banner") is not None:
            changes["support_banner"] = updates["support_banner"]

        try:
            return self._repo.update(profile.model_copy(update=changes)), []
        except UniqueViolationError:
            return None, [conflict("username_taken", "Username already exists", field="username")]
