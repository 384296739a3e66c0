"""Dependency injection for FastAPI endpoints.

Controllers receive the shared submission store and the settings through
these dependencies rather than importing global state, which lets tests
swap either one with ``app.dependency_overrides``.

Usage in controllers:
    from coderunner.dependencies import Store, AppSettings

    @router.post("/build")
    def build(store: Store, settings: AppSettings) -> str:
        ...
"""

from typing import Annotated

from fastapi import Depends

from coderunner import state
from coderunner.config import Settings, get_settings
from coderunner.session import SubmissionStore


def get_submission_store() -> SubmissionStore:
    """Get the process-wide submission store."""
    return state.submission_store


def get_app_settings() -> Settings:
    """Get the cached application settings."""
    return get_settings()


Store = Annotated[SubmissionStore, Depends(get_submission_store)]
AppSettings = Annotated[Settings, Depends(get_app_settings)]
