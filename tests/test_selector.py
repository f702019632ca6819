"""Tests for choosing which files a run publishes."""

import subprocess

import pytest

from wppublish import selector
from wppublish.errors import ConfigError
from wppublish.selector import all_markdown_files, changed_markdown_files, filter_markdown_paths, select_markdown_files


@pytest.fixture
def tree(docs):
    (docs / "a.md").write_text("a")
    (docs / "tech").mkdir()
    (docs / "tech" / "b.md").write_text("b")
    (docs / "tech" / "notes.txt").write_text("not markdown")
    return docs


class TestAllMarkdownFiles:

    def test_recursive(self, tree):
        assert all_markdown_files(tree) == [tree / "a.md", tree / "tech" / "b.md"]

    def test_missing_root(self, tmp_path):
        with pytest.raises(ConfigError):
            all_markdown_files(tmp_path / "nope")


class TestSelectMarkdownFiles:

    def test_changed_files_only(self, tree):
        changed = [tree / "tech" / "b.md", tree / "tech" / "b.md", tree / "tech" / "notes.txt"]

        assert select_markdown_files(tree, changed=changed) == [(tree / "tech" / "b.md").resolve()]

    def test_changed_outside_root_ignored(self, tree, tmp_path):
        outside = tmp_path / "README.md"

        assert filter_markdown_paths([outside], tree) == []

    def test_empty_signal_falls_back(self, tree):
        assert select_markdown_files(tree, changed=[]) == all_markdown_files(tree)

    def test_unavailable_signal_falls_back(self, tree, monkeypatch):
        monkeypatch.setattr(selector, "changed_markdown_files", lambda root: None)

        assert select_markdown_files(tree) == all_markdown_files(tree)

    def test_force_ignores_changes(self, tree):
        selected = select_markdown_files(tree, force=True, changed=[tree / "a.md"])

        assert selected == all_markdown_files(tree)

    def test_missing_root(self, tmp_path):
        with pytest.raises(ConfigError):
            select_markdown_files(tmp_path / "nope", changed=[])


class TestChangedMarkdownFiles:

    def test_git_output_parsed(self, tree, monkeypatch):
        outputs = {
            "rev-parse": str(tree.parent) + "\n",
            "diff": "docs/a.md\nother/c.md\ndocs/tech/notes.txt\n\n",
        }

        def fake_run(args, **kwargs):
            return subprocess.CompletedProcess(args, 0, stdout=outputs[args[1]], stderr="")

        monkeypatch.setattr(selector.subprocess, "run", fake_run)

        assert changed_markdown_files(tree) == [(tree / "a.md").resolve()]

    def test_git_failure_returns_none(self, tree, monkeypatch):
        def fake_run(args, **kwargs):
            return subprocess.CompletedProcess(args, 128, stdout="", stderr="fatal: not a git repository")

        monkeypatch.setattr(selector.subprocess, "run", fake_run)

        assert changed_markdown_files(tree) is None

    def test_git_missing_returns_none(self, tree, monkeypatch):
        def fake_run(args, **kwargs):
            raise FileNotFoundError("git")

        monkeypatch.setattr(selector.subprocess, "run", fake_run)

        assert changed_markdown_files(tree) is None
