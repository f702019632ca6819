import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

import requests

from .cache import MediaAsset, SyncCache
from .errors import AssetError
from .utils import is_remote_url, mime_type

logger = logging.getLogger(__name__)

IMAGE_PATTERN = re.compile(r"!\[([^\]]*)\]\(([^)]+)\)")
# ![alt](path "title")
TITLE_PATTERN = re.compile(r'^(.*?)(\s+"[^"]*")?$', re.DOTALL)


@dataclass(frozen=True)
class ImageReference:
    start: int
    end: int
    alt: str
    target: str
    title: str = ""

    @property
    def is_remote(self):
        return is_remote_url(self.target)


def find_image_references(body) -> List[ImageReference]:
    refs = []
    for m in IMAGE_PATTERN.finditer(body):
        target, title = TITLE_PATTERN.match(m.group(2).strip()).groups()
        refs.append(ImageReference(m.start(), m.end(), m.group(1), target, title or ""))
    return refs


def rewrite_image_references(body, replacements):
    """Rebuild `body` with each (reference, url) pair pointing at `url`.

    Offsets come from the scan of the same body, so identical snippets at
    different positions are rewritten independently.
    """
    parts = []
    cursor = 0
    for ref, new_target in sorted(replacements, key=lambda pair: pair[0].start):
        parts.append(body[cursor:ref.start])
        parts.append(f"![{ref.alt}]({new_target}{ref.title})")
        cursor = ref.end
    parts.append(body[cursor:])
    return "".join(parts)


def resolve_local_path(target, document_path) -> Path:
    path = Path(target)
    if not path.is_absolute():
        path = Path(document_path).parent / path
    return path.resolve()


class ImageUploader:
    # https://developer.wordpress.org/rest-api/reference/media/
    def __init__(self, wp_api, cache: SyncCache, *, replace_existing=False):
        self.wp_api = wp_api
        self.cache = cache
        self.replace_existing = replace_existing

    def process_images(self, body, document_path) -> str:
        """Upload the local images `body` references and point them at the media library.

        Uploads run one at a time. A failed upload leaves its reference as written.
        """
        replacements = []
        for ref in find_image_references(body):
            if ref.is_remote:
                continue
            try:
                asset = self.upload(ref.target, document_path)
            except AssetError as e:
                logger.error("  Error uploading image %s: %s", ref.target, e)
                continue
            replacements.append((ref, asset.url))
        return rewrite_image_references(body, replacements)

    def upload(self, target, document_path) -> MediaAsset:
        try:
            path = resolve_local_path(target, document_path)
        except (OSError, ValueError) as e:
            raise AssetError(f"invalid image path {target!r}: {e}") from e
        cached = self.cache.images.get(path)
        if cached is not None:
            logger.info("  Using cached image: %s", target)
            return cached
        return self.cache.images.get_or_create(path, lambda: self._upload(path))

    def _upload(self, path) -> MediaAsset:
        try:
            data = path.read_bytes()
        except (OSError, ValueError) as e:
            raise AssetError(f"cannot read {path}: {e}", path=path) from e

        post_to_url = "wp/v2/media"
        existing = self.find_by_filename(path.name) if self.replace_existing else None
        if existing is not None:
            logger.info("  Replacing existing media: %s (ID: %s)", path.name, existing["id"])
            post_to_url += f"/{existing['id']}"
        try:
            result = self.wp_api.post(post_to_url, files={"file": (path.name, data, mime_type(path))})
            asset = MediaAsset(url=result["source_url"], id=result["id"])
        except (requests.RequestException, KeyError, ValueError) as e:
            raise AssetError(f"upload of {path.name} failed: {e!r}", path=path) from e
        logger.info("  Uploaded image: %s -> %s", path.name, asset.url)
        return asset

    def find_by_filename(self, filename) -> Optional[dict]:
        """Media library item whose file name is exactly `filename`, if any."""
        try:
            for media in self.wp_api.paged("wp/v2/media", per_page=100, search=filename):
                if media.get("source_url", "").rsplit("/", 1)[-1] == filename:
                    return media
        except requests.RequestException as e:
            logger.warning("  Could not search for existing media %s: %s", filename, e)
        return None

    def featured_media_id(self, value, document_path) -> Optional[int]:
        """Media id for a frontmatter `featured_image`, uploading local files."""
        if is_remote_url(value):
            filename = value.rsplit("/", 1)[-1]
            try:
                for media in self.wp_api.paged("wp/v2/media", per_page=100, search=filename):
                    if media.get("source_url") == value:
                        return media["id"]
            except requests.RequestException as e:
                raise AssetError(f"lookup of {value} failed: {e}") from e
            logger.info("  Featured image %s is not in the media library", value)
            return None
        return self.upload(value, document_path).id
