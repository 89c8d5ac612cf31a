"""
LinkService - ordered, polymorphic link collection per profile.

Functional Core - validation and extension-record shaping; persistence and
transactions live behind LinkRepoPort.

Invariants:
- Reads are ordered by sort_order ASC, then id ASC.
- A link carries at most one extension, and only one matching its type.
- Validation happens before any write; reorder is all-or-nothing.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from linkbio.domain.entities import (
    ContactDetails,
    CustomDetails,
    Link,
    LinkDetails,
    PlatformDetails,
)
from linkbio.domain.errors import DomainError, forbidden, invalid, not_found
from linkbio.domain.urls import is_absolute_url
from linkbio.ports.clock import ClockPort
from linkbio.rules.models import LinkRules

from .platforms import category_for
from .ports import LinkRepoPort, ProfileLookupPort

logger = logging.getLogger(__name__)

PLATFORM_FIELDS = ("platform_name", "platform_category")
CUSTOM_FIELDS = ("display_mode", "thumbnail_url")
CONTACT_FIELDS = ("contact_type", "contact_value")

FIELDS_BY_TYPE: dict[str, tuple[str, ...]] = {
    "platform": PLATFORM_FIELDS,
    "custom": CUSTOM_FIELDS,
    "contact": CONTACT_FIELDS,
    "embed": (),
}

# --- Configuration ---


@dataclass(frozen=True)
class LinkConfig:
    """Link validation limits."""

    title_min: int = 1
    title_max: int = 200
    allowed_url_schemes: tuple[str, ...] = ("http", "https")
    contact_url_schemes: tuple[str, ...] = ("mailto", "tel")
    types: tuple[str, ...] = ("custom", "platform", "contact", "embed")
    display_modes: tuple[str, ...] = ("standard", "featured", "grid")
    platform_categories: tuple[str, ...] = (
        "social",
        "business",
        "music",
        "entertainment",
        "lifestyle",
        "news",
    )

    @classmethod
    def from_rules(cls, rules: LinkRules | None) -> LinkConfig:
        if rules is None:
            return cls()
        return cls(
            title_min=rules.title.min,
            title_max=rules.title.max,
            allowed_url_schemes=tuple(rules.allowed_url_schemes),
            contact_url_schemes=tuple(rules.contact_url_schemes),
            types=tuple(rules.types),
            display_modes=tuple(rules.display_modes),
            platform_categories=tuple(rules.platform_categories),
        )


DEFAULT_CONFIG = LinkConfig()


# --- Validation Functions ---


def infer_link_type(link_type: str | None, platform_name: str | None) -> str:
    if link_type:
        return link_type
    return "platform" if platform_name else "custom"


def validate_link_fields(
    title: str | None = None,
    url: str | None = None,
    config: LinkConfig = DEFAULT_CONFIG,
    link_type: str | None = None,
) -> list[DomainError]:
    """
    Validate base link fields; None means 'not supplied'.

    Contact links may also use mailto: and tel: URIs.
    """
    opaque = config.contact_url_schemes if link_type == "contact" else ()
    errors: list[DomainError] = []

    if title is not None:
        stripped = title.strip()
        if len(stripped) < config.title_min:
            errors.append(invalid("title_required", "Title is required", field="title"))
        elif len(stripped) > config.title_max:
            errors.append(
                invalid(
                    "title_too_long",
                    f"Title must be {config.title_max} characters or less",
                    field="title",
                )
            )

    if url is not None:
        if not url.strip():
            errors.append(invalid("url_required", "URL is required", field="url"))
        elif not is_absolute_url(url.strip(), config.allowed_url_schemes, opaque):
            errors.append(
                invalid(
                    "url_invalid",
                    "URL must be an absolute URL",
                    field="url",
                )
            )

    return errors


def validate_type_fields(
    link_type: str, fields: dict[str, Any], config: LinkConfig = DEFAULT_CONFIG
) -> list[DomainError]:
    """
    Validate type-specific fields against the link type.

    Non-empty fields belonging to another type are rejected.
    """
    errors: list[DomainError] = []

    if link_type not in config.types:
        return [invalid("type_invalid", f"Unknown link type '{link_type}'", field="type")]

    allowed = FIELDS_BY_TYPE.get(link_type, ())
    for name, value in fields.items():
        if value not in (None, "") and name not in allowed:
            errors.append(
                invalid(
                    "field_type_mismatch",
                    f"{name} does not apply to {link_type} links",
                    field=name,
                )
            )

    category = fields.get("platform_category")
    if category and category not in config.platform_categories:
        errors.append(
            invalid(
                "platform_category_invalid",
                f"Unknown platform category '{category}'",
                field="platform_category",
            )
        )

    display_mode = fields.get("display_mode")
    if display_mode and display_mode not in config.display_modes:
        errors.append(
            invalid(
                "display_mode_invalid",
                f"Unknown display mode '{display_mode}'",
                field="display_mode",
            )
        )

    thumbnail = fields.get("thumbnail_url")
    if thumbnail and not is_absolute_url(thumbnail.strip(), config.allowed_url_schemes):
        errors.append(
            invalid("url_invalid", "thumbnail_url must be an absolute URL", field="thumbnail_url")
        )

    return errors


def _blank(value: str | None) -> bool:
    return value is None or not value.strip()


def build_details(
    link_type: str,
    fields: dict[str, Any],
    existing: LinkDetails | None = None,
) -> tuple[LinkDetails | None, list[DomainError]]:
    """
    Produce the extension record for a link of ``link_type``.

    ``existing`` is merged with ``fields`` (None keeps the stored value).
    A missing extension is created on demand.
    """
    if link_type == "platform":
        current = existing if isinstance(existing, PlatformDetails) else None
        name = fields.get("platform_name")
        if name is not None and _blank(name):
            return None, [
                invalid("platform_name_required", "Platform name is required", field="platform_name")
            ]
        renamed = bool(name and current and name.strip().lower() != current.name.lower())
        name = name.strip() if name else (current.name if current else None)
        if not name:
            return None, [
                invalid("platform_name_required", "Platform name is required", field="platform_name")
            ]
        category = fields.get("platform_category") or (
            category_for(name) if current is None or renamed else current.category
        )
        return PlatformDetails(
            name=name,
            category=category,
            icon_url=current.icon_url if current else None,
        ), []

    if link_type == "custom":
        current = existing if isinstance(existing, CustomDetails) else CustomDetails()
        updates: dict[str, Any] = {}
        if fields.get("display_mode"):
            updates["display_mode"] = fields["display_mode"]
        thumbnail = fields.get("thumbnail_url")
        if thumbnail is not None:
            updates["thumbnail_url"] = thumbnail.strip() or None
        return current.model_copy(update=updates), []

    if link_type == "contact":
        current = existing if isinstance(existing, ContactDetails) else None
        errors: list[DomainError] = []
        for name in CONTACT_FIELDS:
            value = fields.get(name)
            if value is not None and _blank(value):
                errors.append(invalid(f"{name}_required", f"{name} cannot be empty", field=name))
        if errors:
            return None, errors

        contact_type = fields.get("contact_type")
        contact_value = fields.get("contact_value")
        if current is None and (contact_type or contact_value):
            current = ContactDetails(contact_type="email", contact_value="")
        if current is None:
            return None, []
        return current.model_copy(
            update={
                "contact_type": contact_type.strip() if contact_type else current.contact_type,
                "contact_value": contact_value.strip() if contact_value else current.contact_value,
            }
        ), []

    return None, []


# --- Link Service ---


class LinkService:
    """
    Link Collection Manager.

    All operations are scoped to the caller's own profile.
    """

    def __init__(
        self,
        repo: LinkRepoPort,
        profiles: ProfileLookupPort,
        clock: ClockPort,
        config: LinkConfig | None = None,
    ) -> None:
        self._repo = repo
        self._profiles = profiles
        self._clock = clock
        self._config = config or DEFAULT_CONFIG

    def _profile_id(self, owner_id: str) -> int | None:
        profile = self._profiles.get_by_owner(owner_id)
        return profile.id if profile else None

    def list_for_owner(self, owner_id: str) -> list[Link]:
        """All of the caller's links; [] when the caller has no profile."""
        profile_id = self._profile_id(owner_id)
        if profile_id is None:
            return []
        return self._repo.list_by_profile(profile_id, include_hidden=True)

    def list_public(self, username: str) -> list[Link]:
        """Visible links for a username; [] when the profile does not exist."""
        profile = self._profiles.get_by_username(username)
        if profile is None or profile.id is None:
            return []
        return self._repo.list_by_profile(profile.id, include_hidden=False)

    def create(
        self,
        owner_id: str,
        title: str,
        url: str,
        link_type: str | None = None,
        type_fields: dict[str, Any] | None = None,
        is_hidden: bool = False,
    ) -> tuple[Link | None, list[DomainError]]:
        """
        Create a link with its extension record.

        Returns:
            Tuple of (link, errors). Link is None on failure.
        """
        fields = {k: v for k, v in (type_fields or {}).items() if v is not None}
        resolved_type = infer_link_type(link_type, fields.get("platform_name"))

        errors = validate_link_fields(
            title=title, url=url, config=self._config, link_type=resolved_type
        )
        errors += validate_type_fields(resolved_type, fields, self._config)
        if errors:
            return None, errors

        details, errors = build_details(resolved_type, fields)
        if errors:
            return None, errors
        if resolved_type == "contact" and (
            details is None or _blank(fields.get("contact_type")) or _blank(fields.get("contact_value"))
        ):
            return None, [
                invalid(
                    "contact_fields_required",
                    "Contact links require contact_type and contact_value",
                    field="contact_type",
                )
            ]

        profile_id = self._profile_id(owner_id)
        if profile_id is None:
            return None, [not_found("profile_not_found", "Profile not found")]

        now = self._clock.now_utc()
        link = Link(
            profile_id=profile_id,
            type=resolved_type,  # type: ignore[arg-type]
            title=title.strip(),
            url=url.strip(),
            is_hidden=is_hidden,
            details=details,
            created_at=now,
            updated_at=now,
        )
        created = self._repo.create(link)
        logger.debug(
            "Created %s link %s for profile %s at position %s",
            created.type,
            created.id,
            profile_id,
            created.sort_order,
        )
        return created, []

    def update(
        self, owner_id: str, link_id: int, updates: dict[str, Any]
    ) -> tuple[Link | None, list[DomainError]]:
        """
        Partially update an owned link.

        Only keys present in ``updates`` with non-None values are changed.
        """
        updates = {k: v for k, v in updates.items() if v is not None}

        profile_id = self._profile_id(owner_id)
        link = self._repo.get_by_id(link_id)
        if profile_id is None or link is None or link.profile_id != profile_id:
            return None, [not_found("link_not_found", f"Link {link_id} not found")]

        type_fields = {
            k: v for k, v in updates.items() if k in PLATFORM_FIELDS + CUSTOM_FIELDS + CONTACT_FIELDS
        }
        errors = validate_link_fields(
            title=updates.get("title"),
            url=updates.get("url"),
            config=self._config,
            link_type=link.type,
        )
        errors += validate_type_fields(link.type, type_fields, self._config)
        if errors:
            return None, errors

        if not updates:
            return link, []

        details = link.details
        if type_fields:
            details, errors = build_details(link.type, type_fields, existing=link.details)
            if errors:
                return None, errors

        changes: dict[str, Any] = {
            "details": details,
            "updated_at": self._clock.now_utc(),
        }
        if "title" in updates:
            changes["title"] = updates["title"].strip()
        if "url" in updates:
            changes["url"] = updates["url"].strip()
        if "is_hidden" in updates:
            changes["is_hidden"] = bool(updates["is_hidden"])

        return self._repo.update(link.model_copy(update=changes)), []

    def reorder(self, owner_id: str, ordered_ids: list[int]) -> tuple[bool, list[DomainError]]:
        """
        Assign sort_order = index for each id, all-or-nothing.

        Forbidden (no writes) when any id is not the caller's.
        """
        if len(set(ordered_ids)) != len(ordered_ids):
            return False, [
                invalid("duplicate_ids", "orderedIds must not contain duplicates", field="ordered_ids")
            ]

        profile_id = self._profile_id(owner_id)
        if profile_id is None:
            return False, [not_found("profile_not_found", "Profile not found")]

        if not self._repo.reorder(profile_id, list(ordered_ids)):
            logger.info("Rejected reorder for profile %s: foreign link ids", profile_id)
            return False, [forbidden("link_not_owned", "One or more links do not belong to you")]

        logger.debug("Reordered %d links for profile %s", len(ordered_ids), profile_id)
        return True, []

    def delete(self, owner_id: str, link_id: int) -> tuple[Link | None, list[DomainError]]:
        """Delete an owned link, returning the deleted row."""
        profile_id = self._profile_id(owner_id)
        deleted = self._repo.delete(profile_id, link_id) if profile_id is not None else None
        if deleted is None:
            return None, [not_found("link_not_found", f"Link {link_id} not found")]
        return deleted, []
