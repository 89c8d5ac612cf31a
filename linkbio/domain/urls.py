from urllib.parse import urlparse

DEFAULT_SCHEMES = ("http", "https")


def is_absolute_url(
    url: str,
    schemes: tuple[str, ...] | list[str] = DEFAULT_SCHEMES,
    opaque_schemes: tuple[str, ...] | list[str] = (),
) -> bool:
    """
    Check that a URL is absolute and well formed.

    Requires one of the allowed schemes and a network location.
    ``opaque_schemes`` (mailto, tel) need a non-empty path instead.
    """
    if not url or any(c.isspace() for c in url):
        return False

    try:
        parsed = urlparse(url)
    except ValueError:
        return False

    scheme = parsed.scheme.lower()
    if scheme in opaque_schemes:
        return bool(parsed.path) and not parsed.netloc
    if scheme not in schemes:
        return False

    return bool(parsed.netloc)
