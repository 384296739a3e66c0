"""Startup and shutdown for the code runner app.

The server owns two pieces of process-wide state: the assignments tree on
disk and the submission store. Startup makes sure the former exists and
resets the latter; shutdown leaves extracted submissions in place.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from coderunner import state
from coderunner.config import get_settings
from coderunner.session import SubmissionStore

logger = logging.getLogger(__name__)


@dataclass
class LifespanResources:
    """Container for resources initialized during lifespan."""

    assignments_dir: Path | None = None
    submission_store: SubmissionStore | None = None


def init_assignments_dir() -> Path:
    """Create the assignments directory if it does not exist yet.

    Returns:
        The configured assignments directory.
    """
    assignments_dir = get_settings().workspace.assignments_dir
    assignments_dir.mkdir(parents=True, exist_ok=True)
    return assignments_dir


def setup_resources() -> LifespanResources:
    """Set up all shared resources.

    Returns:
        LifespanResources containing all initialized resources.
    """
    resources = LifespanResources()
    resources.assignments_dir = init_assignments_dir()
    resources.submission_store = SubmissionStore()

    state.submission_store = resources.submission_store

    settings = get_settings()
    logger.info(
        "** Service ready: assignments=%s shell=%s language=%r **",
        resources.assignments_dir, settings.runner.shell, settings.language.supported_language
    )
    return resources


def cleanup_resources(resources: LifespanResources) -> None:
    """Release resources on shutdown.

    Args:
        resources: The resources to clean up.
    """
    if resources.submission_store is not None and state.submission_store is resources.submission_store:
        state.submission_store = SubmissionStore()
    logger.info("** Service stopped **")
