"""Pick the Markdown files a run should publish."""

import logging
import subprocess
from pathlib import Path
from typing import Iterable, List, Optional

from .errors import ConfigError

logger = logging.getLogger(__name__)

MARKDOWN_SUFFIX = ".md"
GIT_TIMEOUT = 10


def all_markdown_files(root) -> List[Path]:
    root = Path(root)
    if not root.is_dir():
        raise ConfigError(f"Posts directory not found: {root}")
    try:
        return sorted(p for p in root.rglob(f"*{MARKDOWN_SUFFIX}") if p.is_file())
    except OSError as e:
        raise ConfigError(f"Posts directory not readable: {root}: {e}") from e


def _git(args, cwd):
    result = subprocess.run(["git", *args], cwd=cwd, capture_output=True, text=True, timeout=GIT_TIMEOUT)
    if result.returncode != 0:
        raise RuntimeError(result.stderr.strip() or f"git {' '.join(args)} failed")
    return result.stdout


def changed_markdown_files(root, base="HEAD~1") -> Optional[List[Path]]:
    """Markdown files under `root` changed between `base` and HEAD.

    Returns None when git cannot answer (not installed, not a repository, no
    parent commit). Deleted files are left out since there is nothing to upload.
    """
    root = Path(root)
    try:
        toplevel = Path(_git(["rev-parse", "--show-toplevel"], cwd=root).strip())
        stdout = _git(["diff", "--name-only", "--diff-filter=d", base, "HEAD"], cwd=root)
    except (OSError, RuntimeError, subprocess.TimeoutExpired) as e:
        logger.info("Could not detect changed files: %s", e)
        return None
    return filter_markdown_paths((toplevel / line.strip() for line in stdout.splitlines() if line.strip()), root)


def filter_markdown_paths(paths: Iterable, root) -> List[Path]:
    root = Path(root).resolve()
    selected = set()
    for path in paths:
        path = Path(path)
        if path.suffix != MARKDOWN_SUFFIX:
            continue
        resolved = path.resolve()
        if resolved == root or root not in resolved.parents:
            continue
        selected.add(resolved)
    return sorted(selected)


def select_markdown_files(root, *, force=False, changed=None) -> List[Path]:
    """Files to process this run.

    `changed` is the change-detection signal (a list of paths, or None when
    unavailable); by default it is read from git. An unavailable or empty
    signal, or `force`, selects every Markdown file under `root`.
    """
    root = Path(root)
    if not root.is_dir():
        raise ConfigError(f"Posts directory not found: {root}")
    if force:
        logger.info("Force publish enabled - processing all Markdown files")
        return all_markdown_files(root)
    if changed is None:
        changed = changed_markdown_files(root)
    else:
        changed = filter_markdown_paths(changed, root)
    if changed:
        logger.info("Processing changed files only:")
        for path in changed:
            logger.info("  - %s", path)
        return changed
    logger.info("No changed files detected or git diff unavailable - processing all files")
    return all_markdown_files(root)
