from .core import WordPressAPI
from .config import Settings
from .errors import AssetError, ConfigError, DocumentError, PromotionError, WordPressSyncError
from .sync import RunSummary, SyncResult, SyncRun, sync_markdown_directory

__version__ = "0.1.0"

__all__ = [
    "WordPressAPI",
    "Settings",
    "WordPressSyncError",
    "ConfigError",
    "DocumentError",
    "AssetError",
    "PromotionError",
    "RunSummary",
    "SyncResult",
    "SyncRun",
    "sync_markdown_directory",
]
