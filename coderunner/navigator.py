import logging
import os
from pathlib import Path

from coderunner.errors import NavigationError
from coderunner.session import SubmissionSession

logger = logging.getLogger(__name__)


def resolve_work_dir(session: SubmissionSession, assignments_dir: Path, base: Path | None = None) -> Path:
    """Locate the directory build and run commands execute in.

    The result is ``base / assignments_dir / root_dir / work_dir`` with ``base``
    defaulting to the process working directory. The process directory itself
    is never changed; the caller hands the result to the child process as its
    ``cwd``.

    Raises:
        NavigationError: if the directory is missing, not a directory, or
            lies outside the assignments directory.
    """
    base = base if base is not None else Path.cwd()
    assignments = os.path.normpath(os.path.join(base, assignments_dir))
    target = os.path.normpath(os.path.join(assignments, session.root_dir, session.work_dir))

    if target != assignments and not target.startswith(assignments + os.sep):
        logger.warning("work directory %r escapes %s", session.work_dir, assignments)
        raise NavigationError(path=target)
    if not os.path.isdir(target):
        logger.warning("error while navigating to the working directory: %s", target)
        raise NavigationError(path=target)
    return Path(target)
