import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from tqdm.auto import tqdm

from .cache import SyncCache
from .categories import CategoryResolver, category_names
from .core import WordPressAPI
from .documents import load_document
from .encoding import encode_content
from .errors import AssetError, DocumentError
from .media import ImageUploader
from .posts import PostPublisher, PromotionSummary
from .selector import select_markdown_files
from .utils import from_datetime

logger = logging.getLogger(__name__)


@dataclass
class SyncResult:
    path: Path
    success: bool
    slug: Optional[str] = None
    post_id: Optional[int] = None
    created: bool = False
    error: Optional[str] = None


@dataclass
class RunSummary:
    results: List[SyncResult] = field(default_factory=list)
    promotion: Optional[PromotionSummary] = None

    @property
    def total(self):
        return len(self.results)

    @property
    def succeeded(self):
        return sum(1 for r in self.results if r.success)

    @property
    def failed(self):
        return sum(1 for r in self.results if not r.success)

    @property
    def ok(self):
        promotion_failed = self.promotion is not None and self.promotion.failed > 0
        return self.failed == 0 and not promotion_failed

    def report(self):
        lines = [
            "=" * 50,
            "Publishing Summary",
            "=" * 50,
            f"Total files: {self.total}",
            f"Successful: {self.succeeded}",
            f"Failed: {self.failed}",
        ]
        for result in self.results:
            if not result.success:
                lines.append(f"  ✗ {result.path}: {result.error}")
        if self.promotion is not None:
            lines.append("-" * 50)
            lines.append(f"Published: {len(self.promotion.published)}")
            if self.promotion.skipped:
                lines.append(f"Skipped (already published): {len(self.promotion.skipped)}")
            lines.append(f"Failed: {self.promotion.failed}")
        return "\n".join(lines)


class SyncRun:
    """One publishing run: caches live exactly as long as this object."""

    def __init__(self, wp_api, settings, cache=None):
        self.wp_api = wp_api
        self.settings = settings
        self.cache = SyncCache() if cache is None else cache
        self.images = ImageUploader(wp_api, self.cache, replace_existing=settings.replace_media)
        self.categories = CategoryResolver(wp_api, self.cache, max_workers=settings.workers)
        self.posts = PostPublisher(wp_api)

    def build_payload(self, document):
        logger.info("  Processing images...")
        body = self.images.process_images(document.body, document.path)
        content = encode_content(body, block_format=self.settings.block_format, theme=self.settings.theme)

        names = category_names(document.path, self.settings.root, document.frontmatter.categories)
        category_ids = []
        for category_id in self.categories.resolve_all(names):
            if category_id not in category_ids:
                category_ids.append(category_id)

        fm = document.frontmatter
        payload = {
            "title": document.title,
            "content": content,
            "slug": document.slug,
            "status": fm.status,
            "categories": category_ids,
            "excerpt": fm.excerpt,
            "date": fm.date or from_datetime(datetime.now()),
        }
        if fm.featured_image:
            logger.info("  Processing featured image...")
            try:
                media_id = self.images.featured_media_id(fm.featured_image, document.path)
            except AssetError as e:
                logger.error("  Error setting featured image: %s", e)
            else:
                if media_id is not None:
                    payload["featured_media"] = media_id
        return payload

    def process_file(self, path) -> SyncResult:
        path = Path(path)
        logger.info("Processing: %s", path)
        try:
            document = load_document(path)
            payload = self.build_payload(document)
            post = self.posts.publish(payload)
        except DocumentError as e:
            logger.error("✗ Error processing %s: %s", path, e)
            return SyncResult(path, success=False, error=str(e))
        except Exception as e:
            logger.exception("✗ Error processing %s", path)
            return SyncResult(path, success=False, error=f"{type(e).__name__}: {e}")
        return SyncResult(path, success=True, slug=document.slug, post_id=post.id, created=post.created)

    def run(self, paths) -> RunSummary:
        paths = list(paths)
        summary = RunSummary()
        if not paths:
            logger.info("No Markdown files found to process")
            return summary
        logger.info("Found %d file(s) to process", len(paths))
        with ThreadPoolExecutor(max_workers=self.settings.workers) as pool:
            futures = [pool.submit(self.process_file, path) for path in paths]
            with tqdm(total=len(futures), unit="file", disable=not self.settings.progress,
                      desc="publish", leave=False) as pbar:
                for future in as_completed(futures):
                    pbar.update(1)
        # report in selection order, not completion order
        summary.results = [future.result() for future in futures]

        if self.settings.publish_drafts:
            post_ids = [r.post_id for r in summary.results if r.success and r.post_id is not None]
            logger.info("Publishing %d draft post(s) from this run", len(post_ids))
            summary.promotion = self.posts.promote_drafts(post_ids)
        return summary


def sync_markdown_directory(settings, wp_api=None, *, changed=None) -> RunSummary:
    if wp_api is None:
        wp_api = WordPressAPI.from_settings(settings)
    logger.info("WordPress URL: %s", settings.base_url)
    logger.info("Posts directory: %s", settings.root)
    paths = select_markdown_files(settings.root, force=settings.force, changed=changed)
    return SyncRun(wp_api, settings).run(paths)
