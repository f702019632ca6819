import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

import requests

from .errors import DocumentError, PromotionError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PublishedPost:
    id: int
    slug: str
    status: str
    link: str
    created: bool


@dataclass
class PromotionSummary:
    published: List[int] = field(default_factory=list)
    skipped: List[int] = field(default_factory=list)
    failures: List[PromotionError] = field(default_factory=list)

    @property
    def failed(self):
        return len(self.failures)


def _title(post):
    title = post.get("title", "")
    if isinstance(title, dict):
        return title.get("rendered", "")
    return title


class PostPublisher:
    # https://developer.wordpress.org/rest-api/reference/posts/
    def __init__(self, wp_api):
        self.wp_api = wp_api

    def find_by_slug(self, slug) -> Optional[dict]:
        # status=any matches drafts as well as published posts
        try:
            posts = self.wp_api.get("wp/v2/posts", slug=slug, status="any")
        except requests.RequestException as e:
            raise DocumentError(f"lookup of post {slug!r} failed: {e}") from e
        if len(posts) > 1:
            logger.warning("Several posts share the slug %r, updating ID %s", slug, posts[0]["id"])
        return posts[0] if posts else None

    def publish(self, payload) -> PublishedPost:
        """Create the post with `payload["slug"]`, or overwrite it if it exists."""
        slug = payload["slug"]
        existing = self.find_by_slug(slug)
        try:
            if existing is not None:
                logger.info("Updating post: %s (ID: %s)", payload["title"], existing["id"])
                result = self.wp_api.put(f"wp/v2/posts/{existing['id']}", json=payload)
            else:
                logger.info("Creating post: %s", payload["title"])
                result = self.wp_api.post("wp/v2/posts", json=payload)
        except requests.RequestException as e:
            action = "update" if existing is not None else "create"
            raise DocumentError(f"{action} of post {slug!r} failed: {e}") from e
        logger.info("✓ %s: %s", "Updated" if existing is not None else "Created", result.get("link", slug))
        return PublishedPost(
            id=result["id"],
            slug=result.get("slug", slug),
            status=result.get("status", payload.get("status", "")),
            link=result.get("link", ""),
            created=existing is None,
        )

    def promote(self, post_id) -> bool:
        """Publish the post if it is a draft. Returns False when it was left alone."""
        try:
            post = self.wp_api.get(f"wp/v2/posts/{post_id}")
            if post.get("status") != "draft":
                logger.info("Skipping: %s (ID: %s) - already %s", _title(post), post_id, post.get("status"))
                return False
            logger.info("Publishing: %s (ID: %s)", _title(post), post_id)
            self.wp_api.put(f"wp/v2/posts/{post_id}", json={"status": "publish"})
        except requests.RequestException as e:
            raise PromotionError(f"failed to publish post ID {post_id}: {e}", post_id=post_id) from e
        logger.info("✓ Published: %s", post.get("link", post_id))
        return True

    def promote_drafts(self, post_ids: Iterable[int]) -> PromotionSummary:
        summary = PromotionSummary()
        for post_id in post_ids:
            try:
                if self.promote(post_id):
                    summary.published.append(post_id)
                else:
                    summary.skipped.append(post_id)
            except PromotionError as e:
                logger.error("✗ %s", e)
                summary.failures.append(e)
        return summary
