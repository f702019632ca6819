import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Iterable, List

import requests

from .cache import SyncCache
from .errors import DocumentError
from .utils import slugify

logger = logging.getLogger(__name__)


def path_categories(document_path, root) -> List[str]:
    """Directory names between `root` and the file: docs/tech/ai/post.md -> ['tech', 'ai']."""
    try:
        relative = Path(document_path).resolve().relative_to(Path(root).resolve())
    except ValueError:
        return []
    return [part for part in relative.parts[:-1] if part]


def category_names(document_path, root, frontmatter_categories=()) -> List[str]:
    names = []
    for name in [*path_categories(document_path, root), *frontmatter_categories]:
        if name not in names:
            names.append(name)
    return names


class CategoryResolver:
    # https://developer.wordpress.org/rest-api/reference/categories/
    def __init__(self, wp_api, cache: SyncCache, *, max_workers=4):
        self.wp_api = wp_api
        self.cache = cache
        self.max_workers = max_workers

    def resolve(self, name) -> int:
        slug = slugify(name)
        return self.cache.categories.get_or_create(slug, lambda: self._lookup_or_create(name, slug))

    def _lookup_or_create(self, name, slug):
        try:
            found = self.wp_api.get("wp/v2/categories", slug=slug)
            if found:
                return found[0]["id"]
            created = self.wp_api.post("wp/v2/categories", json={"name": name, "slug": slug})
        except requests.RequestException as e:
            logger.error("Error with category %r: %s", name, e)
            raise DocumentError(f"category {name!r} could not be resolved: {e}") from e
        logger.info("  Created category: %s (ID: %s)", name, created["id"])
        return created["id"]

    def resolve_all(self, names: Iterable[str]) -> List[int]:
        names = list(names)
        if len(names) <= 1:
            return [self.resolve(name) for name in names]
        with ThreadPoolExecutor(max_workers=min(self.max_workers, len(names))) as pool:
            return list(pool.map(self.resolve, names))
