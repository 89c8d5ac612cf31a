"""
SQLite repositories for profiles, links and analytics events.

Timestamps are stored as ISO-8601 UTC strings truncated to milliseconds, the
same precision as window bounds, so lexical order equals chronological order
and no instant falls between a day's end and the next day's start.
"""

from __future__ import annotations

import logging
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import UTC, datetime
from typing import Any

from linkbio.domain.entities import (
    AnalyticsEvent,
    ContactDetails,
    CustomDetails,
    Link,
    LinkDetails,
    PlatformDetails,
    Profile,
)
from linkbio.domain.errors import UniqueViolationError

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Helper functions
# -----------------------------------------------------------------------------


def dict_factory(cursor: sqlite3.Cursor, row: tuple[Any, ...]) -> dict[str, Any]:
    """Convert SQLite row to dictionary."""
    return {col[0]: row[idx] for idx, col in enumerate(cursor.description)}


def format_dt(dt: datetime) -> str:
    """Serialize a datetime as a fixed-width UTC ISO string (naive = UTC)."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC).isoformat(timespec="milliseconds")


def parse_dt(s: str | None) -> datetime | None:
    """Parse ISO datetime string."""
    return datetime.fromisoformat(s) if s else None


# -----------------------------------------------------------------------------
# Base SQLite Repository
# -----------------------------------------------------------------------------


class SQLiteRepoBase:
    """Base class for SQLite repositories."""

    def __init__(self, db_path: str, connection: sqlite3.Connection | None = None):
        self.db_path = db_path
        self._external_conn = connection

    def _get_conn(self) -> sqlite3.Connection:
        """Get database connection (uses external if provided)."""
        if self._external_conn is not None:
            return self._external_conn

        conn = sqlite3.connect(self.db_path)
        conn.row_factory = dict_factory
        conn.execute("PRAGMA foreign_keys = ON;")
        return conn

    def _should_close(self) -> bool:
        """Whether to close connection after use."""
        return self._external_conn is None

    @contextmanager
    def _read(self) -> Iterator[sqlite3.Connection]:
        conn = self._get_conn()
        try:
            yield conn
        finally:
            if self._should_close():
                conn.close()

    @contextmanager
    def _transaction(self, immediate: bool = False) -> Iterator[sqlite3.Connection]:
        """
        Run the block in one transaction.

        With an external connection the caller (unit of work) owns commit and
        rollback; the block just joins its transaction.
        """
        conn = self._get_conn()
        owned = self._should_close()
        try:
            if owned and immediate:
                conn.execute("BEGIN IMMEDIATE")
            yield conn
            if owned:
                conn.commit()
        except Exception:
            if owned:
                conn.rollback()
                logger.debug("Rolled back transaction on %s", self.db_path)
            raise
        finally:
            if owned:
                conn.close()


# -----------------------------------------------------------------------------
# Profiles
# -----------------------------------------------------------------------------


def _unique_field(error: sqlite3.IntegrityError) -> str | None:
    message = str(error)
    if "UNIQUE constraint failed" not in message:
        return None
    if "profiles.username" in message:
        return "username"
    if "profiles.owner_id" in message:
        return "owner_id"
    return "unknown"


class SQLiteProfileRepo(SQLiteRepoBase):
    """SQLite implementation of ProfileRepoPort."""

    def get_by_id(self, profile_id: int) -> Profile | None:
        return self._get_one("SELECT * FROM profiles WHERE id = ?", (profile_id,))

    def get_by_owner(self, owner_id: str) -> Profile | None:
        return self._get_one("SELECT * FROM profiles WHERE owner_id = ?", (owner_id,))

    def get_by_username(self, username: str) -> Profile | None:
        return self._get_one(
            "SELECT * FROM profiles WHERE username = ?", (username.strip().lower(),)
        )

    def create(self, profile: Profile) -> Profile:
        with self._transaction() as conn:
            try:
                cursor = conn.execute(
                    """
                    INSERT INTO profiles (
                        owner_id, username, display_name, bio, avatar_url, banner_url,
                        support_banner, onboarding_completed_at, created_at, updated_at
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        profile.owner_id,
                        profile.username,
                        profile.display_name,
                        profile.bio,
                        profile.avatar_url,
                        profile.banner_url,
                        profile.support_banner,
                        format_dt(profile.onboarding_completed_at)
                        if profile.onboarding_completed_at
                        else None,
                        format_dt(profile.created_at),
                        format_dt(profile.updated_at),
                    ),
                )
            except sqlite3.IntegrityError as e:
                field = _unique_field(e)
                if field is None:
                    raise
                raise UniqueViolationError(field) from e
            return profile.model_copy(update={"id": cursor.lastrowid})

    def update(self, profile: Profile) -> Profile:
        with self._transaction() as conn:
            try:
                conn.execute(
                    """
                    UPDATE profiles SET
                        username = ?, display_name = ?, bio = ?, avatar_url = ?,
                        banner_url = ?, support_banner = ?, onboarding_completed_at = ?,
                        updated_at = ?
                    WHERE id = ?
                    """,
                    (
                        profile.username,
                        profile.display_name,
                        profile.bio,
                        profile.avatar_url,
                        profile.banner_url,
                        profile.support_banner,
                        format_dt(profile.onboarding_completed_at)
                        if profile.onboarding_completed_at
                        else None,
                        format_dt(profile.updated_at),
                        profile.id,
                    ),
                )
            except sqlite3.IntegrityError as e:
                field = _unique_field(e)
                if field is None:
                    raise
                raise UniqueViolationError(field) from e
            return profile

    def _get_one(self, query: str, params: tuple[Any, ...]) -> Profile | None:
        with self._read() as conn:
            row = conn.execute(query, params).fetchone()
            return self._map_row(row) if row else None

    def _map_row(self, row: dict[str, Any]) -> Profile:
        return Profile(
            id=row["id"],
            owner_id=row["owner_id"],
            username=row["username"],
            display_name=row["display_name"],
            bio=row["bio"],
            avatar_url=row["avatar_url"],
            banner_url=row["banner_url"],
            support_banner=row["support_banner"],
            onboarding_completed_at=parse_dt(row["onboarding_completed_at"]),
            created_at=parse_dt(row["created_at"]) or datetime.min,
            updated_at=parse_dt(row["updated_at"]) or datetime.min,
        )


# -----------------------------------------------------------------------------
# Links
# -----------------------------------------------------------------------------


_LINK_SELECT = """
    SELECT
        l.*,
        lp.link_id AS platform_link_id,
        lp.name AS platform_name,
        lp.category AS platform_category,
        lp.icon_url AS platform_icon_url,
        lc.link_id AS custom_link_id,
        lc.display_mode AS custom_display_mode,
        lc.thumbnail_url AS custom_thumbnail_url,
        lk.link_id AS contact_link_id,
        lk.contact_type AS contact_type,
        lk.contact_value AS contact_value
    FROM links l
    LEFT JOIN link_platforms lp ON lp.link_id = l.id
    LEFT JOIN link_customs lc ON lc.link_id = l.id
    LEFT JOIN link_contacts lk ON lk.link_id = l.id
"""


class SQLiteLinkRepo(SQLiteRepoBase):
    """SQLite implementation of LinkRepoPort (base row + one extension table per type)."""

    def list_by_profile(self, profile_id: int, include_hidden: bool = True) -> list[Link]:
        query = _LINK_SELECT + " WHERE l.profile_id = ?"
        if not include_hidden:
            query += " AND l.is_hidden = 0"
        query += " ORDER BY l.sort_order ASC, l.id ASC"

        with self._read() as conn:
            rows = conn.execute(query, (profile_id,)).fetchall()
            return [self._map_row(r) for r in rows]

    def get_by_id(self, link_id: int) -> Link | None:
        with self._read() as conn:
            return self._fetch(conn, link_id)

    def create(self, link: Link) -> Link:
        """Insert a link after the profile's current last position, with its extension."""
        with self._transaction(immediate=True) as conn:
            return self._insert(conn, link)

    def create_many(self, links: list[Link]) -> list[Link]:
        """Insert several links (appended in order) in a single transaction."""
        with self._transaction(immediate=True) as conn:
            return [self._insert(conn, link) for link in links]

    def update(self, link: Link) -> Link:
        with self._transaction(immediate=True) as conn:
            conn.execute(
                """
                UPDATE links SET title = ?, url = ?, is_hidden = ?, updated_at = ?
                WHERE id = ? AND profile_id = ?
                """,
                (
                    link.title,
                    link.url,
                    1 if link.is_hidden else 0,
                    format_dt(link.updated_at),
                    link.id,
                    link.profile_id,
                ),
            )
            if link.details is not None and link.id is not None:
                self._write_details(conn, link.id, link.details)

            saved = self._fetch(conn, link.id)
            if saved is None:
                raise LookupError(f"Link {link.id} vanished during update")
            return saved

    def reorder(self, profile_id: int, ordered_ids: list[int]) -> bool:
        """
        Assign sort_order = index for each id.

        Returns False without writing anything if any id is not one of the
        profile's links.
        """
        if not ordered_ids:
            return True

        placeholders = ",".join("?" for _ in ordered_ids)
        with self._transaction(immediate=True) as conn:
            row = conn.execute(
                f"SELECT COUNT(*) AS owned FROM links "
                f"WHERE profile_id = ? AND id IN ({placeholders})",
                (profile_id, *ordered_ids),
            ).fetchone()
            if row["owned"] != len(set(ordered_ids)):
                return False

            conn.executemany(
                "UPDATE links SET sort_order = ? WHERE id = ? AND profile_id = ?",
                [(index, link_id, profile_id) for index, link_id in enumerate(ordered_ids)],
            )
            return True

    def delete(self, profile_id: int, link_id: int) -> Link | None:
        """Delete an owned link; extension rows and events cascade."""
        with self._transaction(immediate=True) as conn:
            link = self._fetch(conn, link_id)
            if link is None or link.profile_id != profile_id:
                return None
            conn.execute(
                "DELETE FROM links WHERE id = ? AND profile_id = ?", (link_id, profile_id)
            )
            return link

    # --- internals ---

    def _insert(self, conn: sqlite3.Connection, link: Link) -> Link:
        row = conn.execute(
            "SELECT COALESCE(MAX(sort_order) + 1, 0) AS next_order FROM links WHERE profile_id = ?",
            (link.profile_id,),
        ).fetchone()

        cursor = conn.execute(
            """
            INSERT INTO links (
                profile_id, type, title, url, sort_order, is_hidden, created_at, updated_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                link.profile_id,
                link.type,
                link.title,
                link.url,
                row["next_order"],
                1 if link.is_hidden else 0,
                format_dt(link.created_at),
                format_dt(link.updated_at),
            ),
        )
        link_id = cursor.lastrowid
        if link_id is None:
            raise sqlite3.DatabaseError("Insert into links returned no row id")

        if link.details is not None:
            self._write_details(conn, link_id, link.details)

        created = self._fetch(conn, link_id)
        if created is None:
            raise sqlite3.DatabaseError(f"Link {link_id} not readable after insert")
        return created

    def _write_details(
        self, conn: sqlite3.Connection, link_id: int, details: LinkDetails
    ) -> None:
        if isinstance(details, PlatformDetails):
            conn.execute(
                """
                INSERT INTO link_platforms (link_id, name, category, icon_url)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(link_id) DO UPDATE SET
                    name=excluded.name,
                    category=excluded.category,
                    icon_url=excluded.icon_url
                """,
                (link_id, details.name, details.category, details.icon_url),
            )
        elif isinstance(details, CustomDetails):
            conn.execute(
                """
                INSERT INTO link_customs (link_id, display_mode, thumbnail_url)
                VALUES (?, ?, ?)
                ON CONFLICT(link_id) DO UPDATE SET
                    display_mode=excluded.display_mode,
                    thumbnail_url=excluded.thumbnail_url
                """,
                (link_id, details.display_mode, details.thumbnail_url),
            )
        elif isinstance(details, ContactDetails):
            conn.execute(
                """
                INSERT INTO link_contacts (link_id, contact_type, contact_value)
                VALUES (?, ?, ?)
                ON CONFLICT(link_id) DO UPDATE SET
                    contact_type=excluded.contact_type,
                    contact_value=excluded.contact_value
                """,
                (link_id, details.contact_type, details.contact_value),
            )

    def _fetch(self, conn: sqlite3.Connection, link_id: int | None) -> Link | None:
        row = conn.execute(_LINK_SELECT + " WHERE l.id = ?", (link_id,)).fetchone()
        return self._map_row(row) if row else None

    def _map_row(self, row: dict[str, Any]) -> Link:
        # Only the extension matching the link type is surfaced.
        details: LinkDetails | None = None
        link_type = row["type"]
        if link_type == "platform" and row["platform_link_id"] is not None:
            details = PlatformDetails(
                name=row["platform_name"],
                category=row["platform_category"],
                icon_url=row["platform_icon_url"],
            )
        elif link_type == "custom" and row["custom_link_id"] is not None:
            details = CustomDetails(
                display_mode=row["custom_display_mode"],
                thumbnail_url=row["custom_thumbnail_url"],
            )
        elif link_type == "contact" and row["contact_link_id"] is not None:
            details = ContactDetails(
                contact_type=row["contact_type"],
                contact_value=row["contact_value"],
            )

        return Link(
            id=row["id"],
            profile_id=row["profile_id"],
            type=link_type,
            title=row["title"],
            url=row["url"],
            sort_order=row["sort_order"],
            is_hidden=bool(row["is_hidden"]),
            details=details,
            created_at=parse_dt(row["created_at"]) or datetime.min,
            updated_at=parse_dt(row["updated_at"]) or datetime.min,
        )


# -----------------------------------------------------------------------------
# Analytics events
# -----------------------------------------------------------------------------


class SQLiteAnalyticsRepo(SQLiteRepoBase):
    """SQLite implementation of the analytics event store and query port."""

    def append(self, event: AnalyticsEvent) -> AnalyticsEvent:
        with self._transaction() as conn:
            cursor = conn.execute(
                """
                INSERT INTO analytics_events (profile_id, link_id, type, created_at)
                VALUES (?, ?, ?, ?)
                """,
                (event.profile_id, event.link_id, event.type, format_dt(event.created_at)),
            )
            return event.model_copy(update={"id": cursor.lastrowid})

    def count_by_type(self, profile_id: int, start: datetime, end: datetime) -> dict[str, int]:
        """Count events per type with created_at in [start, end]."""
        with self._read() as conn:
            rows = conn.execute(
                """
                SELECT type, COUNT(*) AS n FROM analytics_events
                WHERE profile_id = ? AND created_at >= ? AND created_at <= ?
                GROUP BY type
                """,
                (profile_id, format_dt(start), format_dt(end)),
            ).fetchall()
            counts = {"view": 0, "click": 0}
            for r in rows:
                counts[r["type"]] = r["n"]
            return counts

    def list_events(self, profile_id: int, start: datetime, end: datetime) -> list[AnalyticsEvent]:
        with self._read() as conn:
            rows = conn.execute(
                """
                SELECT * FROM analytics_events
                WHERE profile_id = ? AND created_at >= ? AND created_at <= ?
                ORDER BY created_at ASC, id ASC
                """,
                (profile_id, format_dt(start), format_dt(end)),
            ).fetchall()
            return [self._map_row(r) for r in rows]

    def top_links(
        self, profile_id: int, start: datetime, end: datetime, limit: int = 5
    ) -> list[dict[str, Any]]:
        """Links ranked by clicks in [start, end]; ties broken by link id."""
        with self._read() as conn:
            return conn.execute(
                """
                SELECT l.id AS id, l.title AS title, l.url AS url, COUNT(*) AS clicks
                FROM analytics_events e
                JOIN links l ON l.id = e.link_id
                WHERE e.profile_id = ? AND e.type = 'click'
                  AND e.created_at >= ? AND e.created_at <= ?
                GROUP BY l.id, l.title, l.url
                ORDER BY clicks DESC, l.id ASC
                LIMIT ?
                """,
                (profile_id, format_dt(start), format_dt(end), limit),
            ).fetchall()

    def count_link_clicks(self, link_id: int) -> int:
        with self._read() as conn:
            row = conn.execute(
                "SELECT COUNT(*) AS n FROM analytics_events WHERE link_id = ? AND type = 'click'",
                (link_id,),
            ).fetchone()
            return int(row["n"])

    def _map_row(self, row: dict[str, Any]) -> AnalyticsEvent:
        return AnalyticsEvent(
            id=row["id"],
            profile_id=row["profile_id"],
            link_id=row["link_id"],
            type=row["type"],
            created_at=parse_dt(row["created_at"]) or datetime.min,
        )


# -----------------------------------------------------------------------------
# Unit of Work
# -----------------------------------------------------------------------------


class SQLiteUnitOfWork:
    """
    SQLite Unit of Work implementation.

    Holds one connection in an IMMEDIATE transaction; repositories obtained
    from it join that transaction. Nothing is persisted until commit().
    """

    def __init__(self, db_path: str):
        self.db_path = db_path
        self._conn: sqlite3.Connection | None = None
        self._profiles: SQLiteProfileRepo | None = None
        self._links: SQLiteLinkRepo | None = None

    def __enter__(self) -> SQLiteUnitOfWork:
        self._conn = sqlite3.connect(self.db_path)
        self._conn.row_factory = dict_factory
        self._conn.execute("PRAGMA foreign_keys = ON;")
        self._conn.execute("BEGIN IMMEDIATE")
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        if self._conn:
            if self._conn.in_transaction:
                self._conn.rollback()
            self._conn.close()
            self._conn = None
        self._profiles = None
        self._links = None

    def commit(self) -> None:
        if self._conn:
            self._conn.commit()

    def rollback(self) -> None:
        if self._conn:
            self._conn.rollback()

    @property
    def profiles(self) -> SQLiteProfileRepo:
        if self._profiles is None:
            self._profiles = SQLiteProfileRepo(self.db_path, self._conn)
        return self._profiles

    @property
    def links(self) -> SQLiteLinkRepo:
        if self._links is None:
            self._links = SQLiteLinkRepo(self.db_path, self._conn)
        return self._links
