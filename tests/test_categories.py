"""Tests for category naming and resolution."""

import pytest

from wppublish.cache import SyncCache
from wppublish.categories import CategoryResolver, category_names, path_categories
from wppublish.errors import DocumentError
from wppublish.utils import slugify


class TestCategoryNames:

    def test_nested_directories(self, docs):
        assert path_categories(docs / "tech" / "ai" / "article.md", docs) == ["tech", "ai"]

    def test_file_at_root_has_no_categories(self, docs):
        assert path_categories(docs / "article.md", docs) == []

    def test_file_outside_root(self, docs, tmp_path):
        assert path_categories(tmp_path / "elsewhere" / "a.md", docs) == []

    def test_union_with_frontmatter_keeps_order(self, docs):
        names = category_names(docs / "tech" / "post.md", docs, ("news", "tech"))

        assert names == ["tech", "news"]


class TestSlugify:

    @pytest.mark.parametrize("name,expected", [
        ("Tech", "tech"),
        ("Machine  Learning", "machine-learning"),
        ("Already-slugged", "already-slugged"),
        ("tabs\tand\nnewlines", "tabs-and-newlines"),
    ])
    def test_slugify(self, name, expected):
        assert slugify(name) == expected

    @pytest.mark.parametrize("name", ["Tech News", " padded ", "MiXeD Case Words", "x"])
    def test_idempotent(self, name):
        assert slugify(slugify(name)) == slugify(name)


class TestCategoryResolver:

    def test_existing_category_found_by_slug(self, wp):
        wp.categories.append({"id": 7, "name": "Tech", "slug": "tech"})

        assert CategoryResolver(wp, SyncCache()).resolve("Tech") == 7
        assert not wp.calls_to("POST")

    def test_missing_category_created(self, wp):
        category_id = CategoryResolver(wp, SyncCache()).resolve("Machine Learning")

        _, _, payload = wp.calls_to("POST", "wp/v2/categories")[0]
        assert payload == {"name": "Machine Learning", "slug": "machine-learning"}
        assert wp.categories[0]["id"] == category_id

    def test_same_name_resolved_once_per_run(self, wp):
        resolver = CategoryResolver(wp, SyncCache())

        first = resolver.resolve("Tech")
        second = resolver.resolve("tech")

        assert first == second
        assert len(wp.calls_to("GET", "wp/v2/categories")) == 1
        assert len(wp.calls_to("POST", "wp/v2/categories")) == 1

    def test_parallel_resolution_single_round_trip(self, wp):
        resolver = CategoryResolver(wp, SyncCache(), max_workers=4)

        ids = resolver.resolve_all(["Tech", "tech", "News", "Tech"])

        assert ids[0] == ids[1] == ids[3]
        assert len(wp.calls_to("POST", "wp/v2/categories")) == 2

    def test_failure_is_document_error(self, wp):
        wp.fail("GET", "wp/v2/categories")

        with pytest.raises(DocumentError):
            CategoryResolver(wp, SyncCache()).resolve_all(["Tech", "News"])
