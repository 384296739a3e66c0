"""Upload, build and run operations.

All three take the shared ``SubmissionStore`` and hold its lock for their
whole duration, so at most one of them touches the session or the
assignments tree at a time.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import IO, Any

from coderunner.archive import (
    ArchiveKind,
    ExtractionReport,
    contained_path,
    detect_archive_kind,
    extract_archive,
    strip_archive_suffixes,
)
from coderunner.errors import FileRetrievalError, SecurityViolationError
from coderunner.navigator import resolve_work_dir
from coderunner.sandbox import DEFAULT_SHELL, CommandResult, compose_command, run_command
from coderunner.session import SubmissionSession, SubmissionStore

logger = logging.getLogger(__name__)

FORM_FILE_KEY = "file"
FORM_COMPILE_KEY = "compileCmd"
FORM_RUN_KEY = "runCmd"
FORM_WORK_DIR_KEY = "workDir"
FORM_ARG_KEY_PREFIX = "argKey"
FORM_ARG_VALUE_PREFIX = "argValue"


@dataclass
class SubmissionUpload:
    filename: str
    stream: IO[bytes]
    compile_command: str = ""
    run_command: str = ""
    work_dir: str = ""
    arguments: dict[str, str] = field(default_factory=dict)


def _text(form: Mapping[str, Any], key: str) -> str:
    value = form.get(key)
    return value if isinstance(value, str) else ""


def parse_arguments(form: Mapping[str, Any]) -> dict[str, str]:
    """Collect ``argKey<i>``/``argValue<i>`` pairs for ``i`` in ``1..len(form)``.

    An index counts when its value field is present. A missing key field falls
    back to the index itself. Insertion order is argument order.
    """
    arguments: dict[str, str] = {}
    for index in range(1, len(form) + 1):
        value_field = f"{FORM_ARG_VALUE_PREFIX}{index}"
        if value_field not in form:
            continue
        key = _text(form, f"{FORM_ARG_KEY_PREFIX}{index}") or str(index)
        arguments[key] = _text(form, value_field)
    return arguments


def parse_submission_form(form: Mapping[str, Any]) -> SubmissionUpload:
    """Pull the archive and build/run settings out of an upload form.

    Raises:
        FileRetrievalError: if the form has no file under ``FORM_FILE_KEY``.
    """
    upload = form.get(FORM_FILE_KEY)
    if upload is None or isinstance(upload, str) or not getattr(upload, "filename", None):
        logger.warning("error retrieving the file: no %r field in upload", FORM_FILE_KEY)
        raise FileRetrievalError()

    return SubmissionUpload(
        filename=upload.filename,
        stream=upload.file,
        compile_command=_text(form, FORM_COMPILE_KEY),
        run_command=_text(form, FORM_RUN_KEY),
        work_dir=_text(form, FORM_WORK_DIR_KEY),
        arguments=parse_arguments(form),
    )


def _read_header(stream: IO[bytes], size: int) -> bytes:
    header = stream.read(size)
    stream.seek(0)
    return header


def extraction_root(filename: str, kind: ArchiveKind, assignments_dir: Path) -> tuple[str, Path]:
    """Return the root name and destination directory for an upload."""
    root_name = strip_archive_suffixes(filename, kind)
    if root_name in ("", ".", ".."):
        raise SecurityViolationError(filename=filename, reason="no usable root name")
    dest = contained_path(assignments_dir, root_name)
    return root_name, dest


def receive_submission(
    store: SubmissionStore,
    upload: SubmissionUpload,
    assignments_dir: Path,
    sniff_bytes: int = 512,
) -> ExtractionReport:
    """Record the upload's settings as the current session and extract it.

    The session is written before extraction begins, so a failed extraction
    still leaves the new settings in place alongside whatever was written.
    """
    header = _read_header(upload.stream, sniff_bytes)
    kind = detect_archive_kind(header)
    logger.info("received %s (detected %s)", upload.filename, kind.value)

    with store.lock:
        root_name, dest = extraction_root(upload.filename, kind, assignments_dir)
        store.store(
            SubmissionSession(
                compile_command=upload.compile_command,
                run_command=upload.run_command,
                work_dir=upload.work_dir,
                root_dir=root_name,
                arguments=upload.arguments,
            )
        )
        report = extract_archive(upload.stream, kind, dest)

    logger.info(
        "extracted %s into %s: %d directories, %d files",
        upload.filename, report.root, report.directories, report.files
    )
    return report


def build_submission(store: SubmissionStore, assignments_dir: Path, shell: str = DEFAULT_SHELL) -> CommandResult:
    """Run the session's compile command in its work directory."""
    with store.lock:
        session = store.current()
        work_dir = resolve_work_dir(session, assignments_dir)
        result = run_command(session.compile_command, cwd=work_dir, shell=shell)
    if not result.success:
        logger.warning("error while building the assignment: %s", result.error)
    return result


def run_submission(store: SubmissionStore, assignments_dir: Path, shell: str = DEFAULT_SHELL) -> CommandResult:
    """Run the session's run command, with its arguments, in its work directory."""
    with store.lock:
        session = store.current()
        work_dir = resolve_work_dir(session, assignments_dir)
        command = compose_command(session.run_command, session.arguments)
        result = run_command(command, cwd=work_dir, shell=shell)
    if not result.success:
        logger.warning("error while executing the assignment: %s", result.error)
    return result


def describe_failure(result: CommandResult) -> str:
    """Combined output followed by the reason the command failed."""
    reason = result.error.status_line() if result.error else ""
    return f"{result.output}{reason}"
