"""Run settings, read from the environment and overridden from the command line."""

import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Mapping, Optional

from .core import DEFAULT_TIMEOUT
from .errors import ConfigError

BLOCK_FORMATS = ("gfm", "markdown")
DEFAULT_THEME = "github-dark"

# setting name -> environment variables, first match wins
ENV_VARS = {
    "base_url": ("WORDPRESS_URL", "WP_URL"),
    "username": ("WORDPRESS_USERNAME", "WP_USERNAME"),
    "app_password": ("WORDPRESS_APP_PASSWORD", "WP_APP_PASSWORD"),
    "root": ("POSTS_DIR",),
    "force": ("FORCE_PUBLISH",),
    "publish_drafts": ("PUBLISH_DRAFTS",),
    "block_format": ("BLOCK_FORMAT",),
    "theme": ("SHIKI_THEME",),
    "replace_media": ("REPLACE_MEDIA",),
    "workers": ("SYNC_WORKERS",),
    "timeout": ("WP_TIMEOUT",),
}

REQUIRED = ("base_url", "username", "app_password")

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"", "0", "false", "no", "off"}


def parse_bool(name, value):
    if isinstance(value, bool):
        return value
    lowered = str(value).strip().lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise ConfigError(f"{name} must be a boolean, got {value!r}")


@dataclass(frozen=True)
class Settings:
    base_url: str
    username: str
    app_password: str
    root: Path = Path("docs")
    force: bool = False
    publish_drafts: bool = False
    block_format: str = "gfm"
    theme: str = DEFAULT_THEME
    replace_media: bool = False
    workers: int = 4
    timeout: float = DEFAULT_TIMEOUT
    progress: bool = False
    debug: bool = False

    def __post_init__(self):
        missing = [name for name in REQUIRED if not getattr(self, name)]
        if missing:
            env_names = ", ".join(ENV_VARS[name][0] for name in missing)
            raise ConfigError(f"Missing required environment variables: {env_names}")
        if self.block_format not in BLOCK_FORMATS:
            raise ConfigError(f"Unknown block format {self.block_format!r}, expected one of {BLOCK_FORMATS}")
        if self.workers < 1:
            raise ConfigError(f"workers must be at least 1, got {self.workers}")
        if self.timeout <= 0:
            raise ConfigError(f"timeout must be positive, got {self.timeout}")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, **overrides) -> "Settings":
        """Build settings from environment variables, then apply non-None overrides."""
        environ = os.environ if environ is None else environ
        values = {}
        for name, env_names in ENV_VARS.items():
            for env_name in env_names:
                if environ.get(env_name):
                    values[name] = environ[env_name]
                    break
        values.update({k: v for k, v in overrides.items() if v is not None})
        for name in REQUIRED:
            values.setdefault(name, "")
        return cls(**_coerce(values))

    def with_overrides(self, **overrides) -> "Settings":
        return replace(self, **_coerce({k: v for k, v in overrides.items() if v is not None}))


def _coerce(values):
    types = {f.name: f.type for f in fields(Settings)}
    coerced = {}
    for name, value in values.items():
        kind = types.get(name)
        if kind is None:
            raise ConfigError(f"Unknown setting {name!r}")
        if kind in (bool, "bool"):
            value = parse_bool(name, value)
        elif kind in (int, "int"):
            try:
                value = int(value)
            except (TypeError, ValueError):
                raise ConfigError(f"{name} must be an integer, got {value!r}") from None
        elif kind in (float, "float"):
            try:
                value = float(value)
            except (TypeError, ValueError):
                raise ConfigError(f"{name} must be a number, got {value!r}") from None
        elif kind in (Path, "Path"):
            value = Path(value)
        coerced[name] = value
    return coerced
