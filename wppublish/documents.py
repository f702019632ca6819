"""Load Markdown documents and their frontmatter."""

from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import frontmatter
import yaml

from .errors import DocumentError
from .utils import from_datetime, slugify

POST_STATUSES = ("publish", "future", "draft", "pending", "private")
DEFAULT_STATUS = "draft"

KNOWN_KEYS = ("title", "slug", "status", "categories", "excerpt", "date", "featured_image")


@dataclass(frozen=True)
class FrontMatter:
    title: Optional[str] = None
    slug: Optional[str] = None
    status: str = DEFAULT_STATUS
    categories: Tuple[str, ...] = ()
    excerpt: str = ""
    date: Optional[str] = None
    featured_image: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_metadata(cls, metadata) -> "FrontMatter":
        """Validate a raw frontmatter mapping.

        Raises ValueError for values that cannot be published as given.
        """
        data = dict(metadata)
        extra = {k: v for k, v in data.items() if k not in KNOWN_KEYS}

        status = data.get("status") or DEFAULT_STATUS
        if status not in POST_STATUSES:
            raise ValueError(f"Unknown post status {status!r}, expected one of {POST_STATUSES}")

        categories = data.get("categories") or ()
        if isinstance(categories, str):
            categories = [cat.strip() for cat in categories.split(",")]
        elif not isinstance(categories, (list, tuple)):
            raise ValueError(f"categories must be a list or a comma-separated string, got {categories!r}")
        categories = tuple(str(cat) for cat in categories if cat is not None and str(cat).strip())

        post_date = data.get("date")
        if isinstance(post_date, date):
            post_date = from_datetime(post_date)
        elif post_date is not None:
            post_date = str(post_date)

        return cls(
            title=_optional_str(data.get("title")),
            slug=_optional_str(data.get("slug")),
            status=status,
            categories=categories,
            excerpt=_optional_str(data.get("excerpt")) or "",
            date=post_date,
            featured_image=_optional_str(data.get("featured_image")),
            extra=extra,
        )


def _optional_str(value):
    if value is None or value == "":
        return None
    return str(value)


@dataclass(frozen=True)
class Document:
    path: Path
    frontmatter: FrontMatter
    body: str

    @property
    def title(self) -> str:
        return self.frontmatter.title or self.path.stem

    @property
    def slug(self) -> str:
        return self.frontmatter.slug or slugify(self.path.stem)


def parse_document(path, text) -> Document:
    path = Path(path)
    try:
        post = frontmatter.loads(text)
        return Document(path, FrontMatter.from_metadata(post.metadata), post.content)
    except (ValueError, yaml.YAMLError) as e:
        raise DocumentError(f"invalid frontmatter: {e}", path=path) from e


def load_document(path) -> Document:
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise DocumentError(f"cannot read file: {e}", path=path) from e
    return parse_document(path, text)
