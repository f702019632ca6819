"""Exception hierarchy for wppublish.

Only ConfigError aborts a run. The others are caught at the boundary of the
document, asset or promotion they belong to and folded into the run summary.
"""


class WordPressSyncError(Exception):
    """Base exception for all wppublish errors."""


class ConfigError(WordPressSyncError):
    """Missing credentials, invalid settings or an unusable posts directory."""


class DocumentError(WordPressSyncError):
    """A single Markdown document could not be loaded or published."""

    def __init__(self, message, path=None):
        if path is not None:
            message = f"{path}: {message}"
        super().__init__(message)
        self.path = path


class AssetError(WordPressSyncError):
    """An image could not be uploaded to the media library."""

    def __init__(self, message, path=None):
        super().__init__(message)
        self.path = path


class PromotionError(WordPressSyncError):
    """A draft created in this run could not be switched to published."""

    def __init__(self, message, post_id=None):
        super().__init__(message)
        self.post_id = post_id
