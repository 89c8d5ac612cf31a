"""Unit tests for username and profile field validation."""

import pytest

from linkbio.components.profiles import (
    ProfileConfig,
    normalize_username,
    validate_profile_fields,
    validate_username,
)


def _codes(errors):
    return [e.code for e in errors]


def test_normalize_trims_and_lowercases():
    assert normalize_username("  Alice_01 ") == "alice_01"


@pytest.mark.parametrize("username", ["abc", "a_b_c", "user123", "x" * 30])
def test_valid_usernames(username):
    assert validate_username(username) == []


@pytest.mark.parametrize("username", ["ab", "x" * 31, ""])
def test_username_length(username):
    assert _codes(validate_username(username)) == ["username_length"]


@pytest.mark.parametrize("username", ["bad-name", "with space", "dot.ted", "émile"])
def test_username_pattern(username):
    assert _codes(validate_username(username)) == ["username_pattern"]


def test_username_limits_come_from_config():
    config = ProfileConfig(username_min=5)
    assert _codes(validate_username("abcd", config)) == ["username_length"]


def test_profile_field_limits():
    assert _codes(validate_profile_fields(display_name="x" * 31)) == ["display_name_too_long"]
    assert _codes(validate_profile_fields(bio="x" * 501)) == ["bio_too_long"]
    assert validate_profile_fields(display_name="x" * 30, bio="x" * 500) == []


def test_image_urls_must_be_absolute():
    errors = validate_profile_fields(avatar_url="me.png", banner_url="https://cdn.example/b.png")
    assert _codes(errors) == ["url_invalid"]
    assert errors[0].field == "avatar_url"


def test_empty_image_url_is_allowed():
    assert validate_profile_fields(avatar_url="", banner_url="") == []


def test_support_banner_values():
    assert validate_profile_fields(support_banner="climate_action") == []
    assert _codes(validate_profile_fields(support_banner="free_pizza")) == [
        "support_banner_invalid"
    ]
