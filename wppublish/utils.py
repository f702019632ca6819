import re
from datetime import date, datetime
from pathlib import PurePath

__all__ = ["WP_DATETIME_FMT", "from_datetime", "slugify", "is_remote_url", "mime_type"]

WP_DATETIME_FMT = "%Y-%m-%dT%H:%M:%S"

_WHITESPACE = re.compile(r"\s+")

MIME_TYPES = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",
    ".svg": "image/svg+xml",
    ".webp": "image/webp",
    ".avif": "image/avif",
    ".bmp": "image/bmp",
    ".ico": "image/x-icon",
}


def from_datetime(dt):
    if isinstance(dt, str):
        return dt
    if not isinstance(dt, datetime) and isinstance(dt, date):
        dt = datetime(dt.year, dt.month, dt.day)
    return dt.strftime(WP_DATETIME_FMT)


def slugify(name):
    """Lowercase `name` and turn each run of whitespace into a single hyphen."""
    return _WHITESPACE.sub("-", str(name).lower())


def is_remote_url(target):
    return target.startswith(("http://", "https://"))


def mime_type(path):
    return MIME_TYPES.get(PurePath(path).suffix.lower(), "application/octet-stream")
