"""
Video link shape check.

Only two YouTube URL shapes are accepted:

    https://www.youtube.com/watch?v=<id>[&more=params]
    https://www.youtube.com/embed/<id>[?start=10...]

where <id> is exactly 11 characters of letters, digits, "_" or "-".
This is a structural match only: we never fetch the URL, and we never
rewrite it. Whatever the client sent is what gets stored.
"""

import re
from typing import Optional

# YouTube video ID: 11 chars, alphanumeric + underscore + hyphen
VIDEO_ID_PATTERN = r"[A-Za-z0-9_-]{11}"

WATCH_LINK_RE = re.compile(
    rf"^https://www\.youtube\.com/watch\?v=(?P<id>{VIDEO_ID_PATTERN})(?:&[^\s#]*)?\Z"
)
EMBED_LINK_RE = re.compile(
    rf"^https://www\.youtube\.com/embed/(?P<id>{VIDEO_ID_PATTERN})(?:\?[^\s#]*)?\Z"
)

ACCEPTED_SHAPES = (WATCH_LINK_RE, EMBED_LINK_RE)


def _match(link: str) -> Optional[re.Match]:
    if not isinstance(link, str):
        return None
    for pattern in ACCEPTED_SHAPES:
        match = pattern.match(link)
        if match:
            return match
    return None


def accepts(link: str) -> bool:
    """True if ``link`` is a watch or embed YouTube URL with a valid id."""
    return _match(link) is not None


def extract_video_id(link: str) -> Optional[str]:
    """Return the 11-char video id of an accepted link, else None."""
    match = _match(link)
    return match.group("id") if match else None
