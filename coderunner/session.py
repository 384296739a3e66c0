"""The most recently uploaded build/run configuration.

There is exactly one session per process. Every upload replaces it and every
build or run reads it, so two callers submitting at the same time would
clobber each other. ``SubmissionStore.lock`` makes the single-submission
assumption explicit: the pipeline holds it across upload, build and run so
those operations never interleave.
"""

import threading
from dataclasses import dataclass, field, replace


@dataclass
class SubmissionSession:
    compile_command: str = ""
    run_command: str = ""
    work_dir: str = ""
    root_dir: str = ""
    arguments: dict[str, str] = field(default_factory=dict)

    def copy(self) -> "SubmissionSession":
        return replace(self, arguments=dict(self.arguments))


class SubmissionStore:
    """Holds the current ``SubmissionSession``; last writer wins."""

    def __init__(self) -> None:
        self.lock = threading.RLock()
        self._session = SubmissionSession()

    def store(self, session: SubmissionSession) -> None:
        """Replace the session wholesale with metadata from a new upload."""
        with self.lock:
            self._session = session.copy()

    def current(self) -> SubmissionSession:
        """Return a copy of the session for build/run to read."""
        with self.lock:
            return self._session.copy()
