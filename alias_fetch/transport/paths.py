"""Path joining utilities for building request URIs."""

import base64


def join_path(*segments: str) -> str:
    """Join URL segments with exactly one slash between them.

    The first segment keeps its scheme, host and leading slash; only its
    trailing slashes are removed. Every later segment is stripped of
    leading and trailing slashes and re-split on embedded slashes, with
    empty parts dropped.

    The query string is not treated specially, so repeated slashes inside
    it collapse too: ``?url=https://a.b`` becomes ``?url=https:/a.b``.
    Percent-encode such values (``%2F``) before joining.

    Args:
        *segments: Base URL followed by path segments.

    Returns:
        Joined URI, or an empty string when no segments are given.

    Examples:
        >>> join_path("https://play.example.org/", "/api/", "query//alias")
        'https://play.example.org/api/query/alias'
    """
    if not segments:
        return ""

    first, *rest = segments
    parts: list[str] = []
    head = first.rstrip("/")
    if head or first.startswith("/"):
        parts.append(head)

    for segment in rest:
        parts.extend(part for part in segment.strip("/").split("/") if part)

    joined = "/".join(parts)
    if not joined and first.startswith("/"):
        return "/"
    return joined


def basic_auth_header(username: str, password: str) -> str:
    """Build an HTTP Basic Authorization header value.

    Args:
        username: User name.
        password: Password.

    Returns:
        Header value of the form ``Basic <base64(username:password)>``.
    """
    token = base64.b64encode(f"{username}:{password}".encode()).decode("ascii")
    return f"Basic {token}"
