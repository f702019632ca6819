"""Shared fixtures: an in-memory WordPress and a Markdown posts directory."""

import threading

import pytest
import requests

from wppublish.config import Settings


class FakeWordPress:
    """Stands in for WordPressAPI, keeping categories, posts and media in memory."""

    host = "https://blog.example.com"

    def __init__(self):
        self.calls = []
        self.categories = []
        self.posts = []
        self.media = []
        self.failures = []
        self._next_id = 100
        self._lock = threading.Lock()

    def fail(self, method, endpoint_prefix):
        self.failures.append((method, endpoint_prefix))

    def _record(self, method, endpoint, payload):
        with self._lock:
            self.calls.append((method, endpoint, payload))
        for fail_method, prefix in self.failures:
            if fail_method == method and endpoint.startswith(prefix):
                raise requests.HTTPError(f"500 Server Error for {method} {endpoint}")

    def _new_id(self):
        with self._lock:
            self._next_id += 1
            return self._next_id

    def calls_to(self, method, endpoint=None):
        return [c for c in self.calls if c[0] == method and (endpoint is None or c[1] == endpoint)]

    def add_post(self, slug, status="publish", title="Existing"):
        post = {"id": self._new_id(), "slug": slug, "status": status,
                "title": {"rendered": title}, "link": f"{self.host}/{slug}/"}
        self.posts.append(post)
        return post

    def add_media(self, filename):
        item = {"id": self._new_id(), "source_url": f"{self.host}/wp-content/uploads/{filename}"}
        self.media.append(item)
        return item

    def get(self, endpoint, **params):
        self._record("GET", endpoint, params)
        if endpoint == "wp/v2/categories":
            return [c for c in self.categories if c["slug"] == params.get("slug")]
        if endpoint == "wp/v2/posts":
            return [p for p in self.posts if p["slug"] == params.get("slug")]
        if endpoint.startswith("wp/v2/posts/"):
            post_id = int(endpoint.rsplit("/", 1)[-1])
            for post in self.posts:
                if post["id"] == post_id:
                    return dict(post)
            raise requests.HTTPError(f"404 Not Found for {endpoint}")
        if endpoint == "wp/v2/media":
            search = params.get("search", "")
            return [m for m in self.media if search in m["source_url"]]
        raise AssertionError(f"unexpected GET {endpoint}")

    def paged(self, endpoint, per_page=10, **params):
        yield from self.get(endpoint, per_page=per_page, **params)

    def post(self, endpoint, json=None, files=None):
        self._record("POST", endpoint, json if files is None else files)
        if endpoint == "wp/v2/categories":
            category = {"id": self._new_id(), "name": json["name"], "slug": json["slug"]}
            self.categories.append(category)
            return category
        if endpoint == "wp/v2/posts":
            post = {"id": self._new_id(), "slug": json["slug"], "status": json["status"],
                    "title": {"rendered": json["title"]}, "link": f"{self.host}/{json['slug']}/"}
            self.posts.append(post)
            return post
        if endpoint == "wp/v2/media":
            filename = files["file"][0]
            return self.add_media(filename)
        if endpoint.startswith("wp/v2/media/"):
            media_id = int(endpoint.rsplit("/", 1)[-1])
            return next(m for m in self.media if m["id"] == media_id)
        raise AssertionError(f"unexpected POST {endpoint}")

    def put(self, endpoint, json=None):
        self._record("PUT", endpoint, json)
        post_id = int(endpoint.rsplit("/", 1)[-1])
        for post in self.posts:
            if post["id"] == post_id:
                post.update({k: v for k, v in json.items() if k in ("status", "slug")})
                return dict(post)
        raise requests.HTTPError(f"404 Not Found for {endpoint}")


@pytest.fixture
def wp():
    return FakeWordPress()


@pytest.fixture
def docs(tmp_path):
    root = tmp_path / "docs"
    root.mkdir()
    return root


@pytest.fixture
def settings(docs):
    return Settings(
        base_url=FakeWordPress.host,
        username="editor",
        app_password="secret",
        root=docs,
        workers=2,
    )
