"""
Supported platform catalog.

Maps a platform name to its category and profile base URL.
"""

from __future__ import annotations

from dataclasses import dataclass

from linkbio.domain.entities import PlatformCategory


@dataclass(frozen=True)
class Platform:
    key: str
    name: str
    category: PlatformCategory
    base_url: str


SUPPORTED_PLATFORMS: tuple[Platform, ...] = (
    Platform("Instagram", "Instagram", "social", "https://instagram.com/"),
    Platform("TikTok", "TikTok", "social", "https://tiktok.com/@"),
    Platform("YouTube", "YouTube", "entertainment", "https://youtube.com/@"),
    Platform("Spotify", "Spotify", "music", "https://open.spotify.com/"),
    Platform("X", "X", "social", "https://x.com/"),
    Platform("Reddit", "Reddit", "social", "https://reddit.com/"),
    Platform("Facebook", "Facebook", "social", "https://facebook.com/"),
    Platform("Threads", "Threads", "social", "https://threads.net/@"),
    Platform("AppleMusic", "Apple Music", "music", "https://music.apple.com/us/album/"),
    Platform("Telegram", "Telegram", "business", "https://t.me/"),
    Platform("Discord", "Discord", "social", "https://discord.com/"),
    Platform("Twitch", "Twitch", "entertainment", "https://twitch.tv/"),
    Platform("OnlyFans", "OnlyFans", "lifestyle", "https://onlyfans.com/"),
    Platform("Patreon", "Patreon", "lifestyle", "https://patreon.com/"),
    Platform("YoutubeMusic", "Youtube Music", "music", "https://music.youtube.com/"),
)

_BY_NAME = {}
for _p in SUPPORTED_PLATFORMS:
    _BY_NAME[_p.key.lower()] = _p
    _BY_NAME[_p.name.lower()] = _p


def find_platform(name: str | None) -> Platform | None:
    """Look up a platform by key or display name (case-insensitive)."""
    if not name:
        return None
    return _BY_NAME.get(name.strip().lower())


def category_for(name: str | None) -> PlatformCategory:
    """Catalog category for a platform, falling back to 'social'."""
    platform = find_platform(name)
    return platform.category if platform else "social"
