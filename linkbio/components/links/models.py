"""
Links component - Data models.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from linkbio.domain.entities import Link
from linkbio.domain.errors import DomainError

# --- Input Models ---


@dataclass(frozen=True)
class ListOwnerLinksInput:
    owner_id: str


@dataclass(frozen=True)
class ListPublicLinksInput:
    username: str


@dataclass(frozen=True)
class CreateLinkInput:
    """Input for creating a link.

    When ``type`` is omitted it is inferred: platform if ``platform_name`` is
    set, otherwise custom.
    """

    owner_id: str
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


@dataclass(frozen=True)
class UpdateLinkInput:
    """Partial update; None leaves a field untouched."""

    owner_id: str
    link_id: int
    title: str | None = None
    url: str | None = None
    is_hidden: bool | None = None
    platform_name: str | None = None
    platform_category: str | None = None
    display_mode: str | None = None
    thumbnail_url: str | None = None
    contact_type: str | None = None
    contact_value: str | None = None


@dataclass(frozen=True)
class ReorderLinksInput:
    owner_id: str
    ordered_ids: tuple[int, ...]


@dataclass(frozen=True)
class DeleteLinkInput:
    owner_id: str
    link_id: int


# --- Output Models ---


@dataclass(frozen=True)
class LinkOperationOutput:
    """Output from a single-link operation."""

    link: Link | None
    errors: tuple[DomainError, ...] = field(default_factory=tuple)
    success: bool = True


@dataclass(frozen=True)
class LinkListOutput:
    """Output from a list operation."""

    links: tuple[Link, ...]
    total: int


@dataclass(frozen=True)
class ReorderOutput:
    errors: tuple[DomainError, ...] = field(default_factory=tuple)
    success: bool = True
