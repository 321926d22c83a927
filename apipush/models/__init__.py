"""Data models for the push tool."""

from .config import (
    DEFAULT_API_URL,
    DEFAULT_BASE_BRANCH,
    DEFAULT_BRANCH,
    DEFAULT_MESSAGE,
    DEFAULT_WEB_URL,
    PushConfig,
    PushOptions,
    PushSettings,
    SettingsError,
)
from .results import FileUploadResult, RemoteFileState, UploadStatus, UploadSummary

__all__ = [
    "DEFAULT_API_URL",
    "DEFAULT_BASE_BRANCH",
    "DEFAULT_BRANCH",
    "DEFAULT_MESSAGE",
    "DEFAULT_WEB_URL",
    "FileUploadResult",
    "PushConfig",
    "PushOptions",
    "PushSettings",
    "RemoteFileState",
    "SettingsError",
    "UploadStatus",
    "UploadSummary",
]
