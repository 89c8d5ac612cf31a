"""Integration tests for the SQLite repositories against a migrated database."""

import sqlite3
from datetime import UTC, datetime

import pytest

from linkbio.adapters.sqlite.repos import SQLiteUnitOfWork
from linkbio.domain.entities import (
    AnalyticsEvent,
    ContactDetails,
    CustomDetails,
    Link,
    PlatformDetails,
    Profile,
)
from linkbio.domain.errors import UniqueViolationError


def _profile(owner_id="owner-1", username="alice"):
    return Profile(owner_id=owner_id, username=username, display_name=username)


def _count(db_path, table, where="1=1", params=()):
    conn = sqlite3.connect(db_path)
    try:
        return conn.execute(f"SELECT COUNT(*) FROM {table} WHERE {where}", params).fetchone()[0]
    finally:
        conn.close()


@pytest.fixture
def profile(profile_repo):
    return profile_repo.create(_profile())


# --- Profiles ---


class TestProfileRepo:
    def test_create_assigns_id_and_reads_back(self, profile_repo):
        created = profile_repo.create(_profile())
        assert created.id is not None

        loaded = profile_repo.get_by_owner("owner-1")
        assert loaded is not None
        assert loaded.id == created.id
        assert loaded.username == "alice"
        assert loaded.support_banner == "none"

    def test_username_lookup_is_case_insensitive(self, profile_repo, profile):
        assert profile_repo.get_by_username("ALICE").id == profile.id

    def test_duplicate_username_raises(self, profile_repo, profile):
        with pytest.raises(UniqueViolationError) as exc:
            profile_repo.create(_profile(owner_id="owner-2", username="alice"))
        assert exc.value.field == "username"

    def test_second_profile_for_owner_raises(self, profile_repo, profile):
        with pytest.raises(UniqueViolationError) as exc:
            profile_repo.create(_profile(owner_id="owner-1", username="other"))
        assert exc.value.field == "owner_id"

    def test_update_to_taken_username_raises(self, profile_repo, profile):
        bob = profile_repo.create(_profile(owner_id="owner-2", username="bob"))
        with pytest.raises(UniqueViolationError):
            profile_repo.update(bob.model_copy(update={"username": "alice"}))
        assert profile_repo.get_by_id(bob.id).username == "bob"


# --- Links ---


class TestLinkRepo:
    def test_create_appends_to_end(self, link_repo, profile):
        first = link_repo.create(Link(profile_id=profile.id, title="A", url="https://a.example"))
        second = link_repo.create(Link(profile_id=profile.id, title="B", url="https://b.example"))
        assert (first.sort_order, second.sort_order) == (0, 1)

    def test_extensions_round_trip(self, link_repo, profile):
        platform = link_repo.create(
            Link(
                profile_id=profile.id,
                type="platform",
                title="IG",
                url="https://instagram.com/alice",
                details=PlatformDetails(name="Instagram", category="social"),
            )
        )
        custom = link_repo.create(
            Link(
                profile_id=profile.id,
                title="Blog",
                url="https://blog.example",
                details=CustomDetails(display_mode="featured"),
            )
        )
        contact = link_repo.create(
            Link(
                profile_id=profile.id,
                type="contact",
                title="Mail",
                url="https://mail.example",
                details=ContactDetails(contact_type="email", contact_value="a@b.example"),
            )
        )

        assert link_repo.get_by_id(platform.id).details == PlatformDetails(
            name="Instagram", category="social"
        )
        assert link_repo.get_by_id(custom.id).details.display_mode == "featured"
        assert link_repo.get_by_id(contact.id).details.contact_value == "a@b.example"

    def test_ordering_ties_broken_by_id(self, link_repo, profile, db_path):
        ids = [
            link_repo.create(
                Link(profile_id=profile.id, title=f"L{i}", url="https://x.example")
            ).id
            for i in range(3)
        ]
        conn = sqlite3.connect(db_path)
        conn.execute("UPDATE links SET sort_order = 0")
        conn.commit()
        conn.close()

        assert [link.id for link in link_repo.list_by_profile(profile.id)] == sorted(ids)

    def test_hidden_filter(self, link_repo, profile):
        link_repo.create(Link(profile_id=profile.id, title="Shown", url="https://a.example"))
        link_repo.create(
            Link(profile_id=profile.id, title="Hidden", url="https://b.example", is_hidden=True)
        )

        assert len(link_repo.list_by_profile(profile.id)) == 2
        assert [link.title for link in link_repo.list_by_profile(profile.id, include_hidden=False)] == [
            "Shown"
        ]

    def test_update_upserts_missing_extension(self, link_repo, profile, db_path):
        link = link_repo.create(
            Link(profile_id=profile.id, type="contact", title="Call", url="https://c.example")
        )
        assert link.details is None

        updated = link_repo.update(
            link.model_copy(
                update={"details": ContactDetails(contact_type="phone", contact_value="+1555")}
            )
        )

        assert updated.details == ContactDetails(contact_type="phone", contact_value="+1555")
        assert _count(db_path, "link_contacts", "link_id = ?", (link.id,)) == 1

    def test_reorder_rejects_foreign_ids_without_writes(self, link_repo, profile_repo, profile):
        other = profile_repo.create(_profile(owner_id="owner-2", username="bob"))
        mine = [
            link_repo.create(Link(profile_id=profile.id, title=t, url="https://x.example")).id
            for t in "ABC"
        ]
        theirs = link_repo.create(Link(profile_id=other.id, title="Z", url="https://z.example")).id

        assert link_repo.reorder(profile.id, [mine[2], theirs, mine[0]]) is False
        assert [link.id for link in link_repo.list_by_profile(profile.id)] == mine

    def test_failed_extension_insert_leaves_no_base_row(
        self, link_repo, profile, db_path, monkeypatch
    ):
        def fail(self, conn, link_id, details):
            raise sqlite3.OperationalError("disk I/O error")

        monkeypatch.setattr(type(link_repo), "_write_details", fail)

        with pytest.raises(sqlite3.OperationalError):
            link_repo.create(
                Link(
                    profile_id=profile.id,
                    type="platform",
                    title="IG",
                    url="https://instagram.com/alice",
                    details=PlatformDetails(name="Instagram"),
                )
            )

        assert _count(db_path, "links") == 0
        assert _count(db_path, "link_platforms") == 0

    def test_reorder_failing_midway_writes_nothing(self, link_repo, profile, db_path):
        ids = [
            link_repo.create(Link(profile_id=profile.id, title=t, url="https://x.example")).id
            for t in "ABC"
        ]
        conn = sqlite3.connect(db_path)
        try:
            conn.execute(
                f"""
                CREATE TRIGGER fail_reorder BEFORE UPDATE OF sort_order ON links
                WHEN NEW.id = {ids[1]}
                BEGIN SELECT RAISE(ABORT, 'reorder interrupted'); END
                """
            )
            conn.commit()
        finally:
            conn.close()

        with pytest.raises(sqlite3.DatabaseError):
            link_repo.reorder(profile.id, [ids[2], ids[1], ids[0]])

        links = link_repo.list_by_profile(profile.id)
        assert [(link.id, link.sort_order) for link in links] == list(zip(ids, [0, 1, 2]))

    def test_delete_cascades(self, link_repo, analytics_repo, profile, db_path):
        link = link_repo.create(
            Link(
                profile_id=profile.id,
                title="Blog",
                url="https://blog.example",
                details=CustomDetails(),
            )
        )
        analytics_repo.append(AnalyticsEvent(profile_id=profile.id, link_id=link.id, type="click"))
        analytics_repo.append(AnalyticsEvent(profile_id=profile.id, type="view"))

        deleted = link_repo.delete(profile.id, link.id)

        assert deleted.id == link.id
        assert link_repo.get_by_id(link.id) is None
        assert _count(db_path, "link_customs", "link_id = ?", (link.id,)) == 0
        assert _count(db_path, "analytics_events", "link_id = ?", (link.id,)) == 0
        # views are not tied to the link
        assert _count(db_path, "analytics_events") == 1

    def test_delete_other_profiles_link_is_noop(self, link_repo, profile_repo, profile):
        other = profile_repo.create(_profile(owner_id="owner-2", username="bob"))
        link = link_repo.create(Link(profile_id=other.id, title="Z", url="https://z.example"))

        assert link_repo.delete(profile.id, link.id) is None
        assert link_repo.get_by_id(link.id) is not None


# --- Analytics ---


class TestAnalyticsRepo:
    def test_counts_are_inclusive(self, analytics_repo, profile):
        start = datetime(2024, 3, 8, tzinfo=UTC)
        end = datetime(2024, 3, 15, 23, 59, 59, 999000, tzinfo=UTC)
        for at in (start, end, datetime(2024, 3, 16, tzinfo=UTC)):
            analytics_repo.append(AnalyticsEvent(profile_id=profile.id, type="view", created_at=at))

        assert analytics_repo.count_by_type(profile.id, start, end) == {"view": 2, "click": 0}

    def test_last_microseconds_of_a_day_belong_to_that_day(self, analytics_repo, profile):
        day_end = datetime(2024, 3, 15, 23, 59, 59, 999000, tzinfo=UTC)
        at = datetime(2024, 3, 15, 23, 59, 59, 999500, tzinfo=UTC)
        analytics_repo.append(AnalyticsEvent(profile_id=profile.id, type="view", created_at=at))

        today = analytics_repo.count_by_type(
            profile.id, datetime(2024, 3, 15, tzinfo=UTC), day_end
        )
        tomorrow = analytics_repo.count_by_type(
            profile.id, datetime(2024, 3, 16, tzinfo=UTC), datetime(2024, 3, 16, 23, tzinfo=UTC)
        )

        assert today["view"] == 1
        assert tomorrow["view"] == 0

    def test_list_events_ascending(self, analytics_repo, profile):
        late = datetime(2024, 3, 10, 12, tzinfo=UTC)
        early = datetime(2024, 3, 10, 9, tzinfo=UTC)
        analytics_repo.append(AnalyticsEvent(profile_id=profile.id, type="view", created_at=late))
        analytics_repo.append(AnalyticsEvent(profile_id=profile.id, type="view", created_at=early))

        events = analytics_repo.list_events(
            profile.id, datetime(2024, 3, 10, tzinfo=UTC), datetime(2024, 3, 11, tzinfo=UTC)
        )
        assert [e.created_at for e in events] == [early, late]


# --- Unit of Work ---


class TestUnitOfWork:
    def test_nothing_persists_without_commit(self, db_path, profile_repo):
        with SQLiteUnitOfWork(db_path) as uow:
            uow.profiles.create(_profile())

        assert profile_repo.get_by_owner("owner-1") is None

    def test_commit_persists_profile_and_links(self, db_path, profile_repo, link_repo):
        with SQLiteUnitOfWork(db_path) as uow:
            profile = uow.profiles.create(_profile())
            uow.links.create_many(
                [
                    Link(profile_id=profile.id, title="A", url="https://a.example"),
                    Link(profile_id=profile.id, title="B", url="https://b.example"),
                ]
            )
            uow.commit()

        stored = profile_repo.get_by_owner("owner-1")
        assert [(link.title, link.sort_order) for link in link_repo.list_by_profile(stored.id)] == [
            ("A", 0),
            ("B", 1),
        ]
