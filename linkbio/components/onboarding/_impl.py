"""
OnboardingService - first-run profile setup.

Profile create/update, the onboarding stamp and the starter links are
written in one unit of work: either all of them land or none do.
"""

from __future__ import annotations

import logging
from typing import Any

from linkbio.components.links._impl import (
    DEFAULT_CONFIG as DEFAULT_LINK_CONFIG,
)
from linkbio.components.links._impl import (
    LinkConfig,
    build_details,
    infer_link_type,
    validate_link_fields,
    validate_type_fields,
)
from linkbio.components.profiles._impl import (
    DEFAULT_CONFIG as DEFAULT_PROFILE_CONFIG,
)
from linkbio.components.profiles._impl import (
    ProfileConfig,
    normalize_username,
    validate_profile_fields,
    validate_username,
)
from linkbio.domain.entities import Link, Profile
from linkbio.domain.errors import DomainError, UniqueViolationError, conflict, invalid
from linkbio.ports.clock import ClockPort

from .models import StarterLink
from .ports import OnboardingProfilesPort, UnitOfWorkFactory

logger = logging.getLogger(__name__)

STARTER_LINK_TYPES = ("custom", "platform")


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    return value.strip() or None


class OnboardingService:
    """Onboarding state and completion."""

    def __init__(
        self,
        profiles: OnboardingProfilesPort,
        uow_factory: UnitOfWorkFactory,
        clock: ClockPort,
        profile_config: ProfileConfig | None = None,
        link_config: LinkConfig | None = None,
    ) -> None:
        self._profiles = profiles
        self._uow_factory = uow_factory
        self._clock = clock
        self._profile_config = profile_config or DEFAULT_PROFILE_CONFIG
        self._link_config = link_config or DEFAULT_LINK_CONFIG

    def is_complete(self, owner_id: str) -> bool:
        profile = self._profiles.get_by_owner(owner_id)
        return bool(profile and profile.onboarding_completed_at)

    def _validate_links(
        self, links: list[StarterLink]
    ) -> tuple[list[tuple[str, Any, StarterLink]], list[DomainError]]:
        prepared: list[tuple[str, Any, StarterLink]] = []
        errors: list[DomainError] = []
        for index, starter in enumerate(links):
            fields = {
                k: v
                for k, v in (
                    ("platform_name", starter.platform_name),
                    ("platform_category", starter.platform_category),
                )
                if v is not None
            }
            link_type = infer_link_type(starter.type, starter.platform_name)
            if link_type not in STARTER_LINK_TYPES:
                errors.append(
                    invalid(
                        "type_invalid",
                        f"links[{index}]: onboarding links must be custom or platform",
                        field=f"links[{index}].type",
                    )
                )
                continue

            link_errors = validate_link_fields(starter.title, starter.url, self._link_config)
            link_errors += validate_type_fields(link_type, fields, self._link_config)
            details = None
            if not link_errors:
                details, link_errors = build_details(link_type, fields)

            if link_errors:
                errors.extend(
                    DomainError(
                        kind=e.kind,
                        code=e.code,
                        message=f"links[{index}]: {e.message}",
                        field=f"links[{index}].{e.field}" if e.field else None,
                    )
                    for e in link_errors
                )
                continue
            prepared.append((link_type, details, starter))
        return prepared, errors

    def complete(
        self,
        owner_id: str,
        username: str,
        display_name: str | None = None,
        bio: str | None = None,
        avatar_url: str | None = None,
        banner_url: str | None = None,
        links: list[StarterLink] | None = None,
    ) -> tuple[Profile | None, list[Link], list[DomainError]]:
        """
        Create or update the caller's profile and add starter links.

        Returns:
            Tuple of (profile, created links, errors).
        """
        username = normalize_username(username)
        errors = validate_username(username, self._profile_config)
        errors += validate_profile_fields(
            display_name=display_name,
            bio=bio,
            avatar_url=avatar_url,
            banner_url=banner_url,
            config=self._profile_config,
        )
        prepared, link_errors = self._validate_links(list(links or []))
        errors += link_errors
        if errors:
            return None, [], errors

        now = self._clock.now_utc()
        taken = [conflict("username_taken", "Username already exists", field="username")]

        try:
            with self._uow_factory() as uow:
                holder = uow.profiles.get_by_username(username)
                if holder is not None and holder.owner_id != owner_id:
                    return None, [], taken

                fields = {
                    "username": username,
                    "display_name": _clean(display_name) or username,
                    "bio": _clean(bio),
                    "avatar_url": _clean(avatar_url),
                    "banner_url": _clean(banner_url),
                    "onboarding_completed_at": now,
                    "updated_at": now,
                }
                existing = uow.profiles.get_by_owner(owner_id)
                if existing is None:
                    profile = uow.profiles.create(
                        Profile(owner_id=owner_id, created_at=now, **fields)
                    )
                else:
                    profile = uow.profiles.update(existing.model_copy(update=fields))

                if profile.id is None:
                    raise RuntimeError("Profile was not assigned an id")
                created = uow.links.create_many(
                    [
                        Link(
                            profile_id=profile.id,
                            type=link_type,
                            title=starter.title.strip(),
                            url=starter.url.strip(),
                            details=details,
                            created_at=now,
                            updated_at=now,
                        )
                        for link_type, details, starter in prepared
                    ]
                )
                uow.commit()
        except UniqueViolationError as e:
            if e.field == "owner_id":
                return None, [], [conflict("profile_exists", "Profile already exists for this user")]
            return None, [], taken

        logger.info(
            "Onboarding completed for %s with %d starter links", profile.username, len(created)
        )
        return profile, created, []
