import logging
import ntpath
import os
import shutil
import tarfile
import zipfile
import zlib
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import IO

from coderunner.archive.detect import ArchiveKind
from coderunner.archive.entries import (
    ArchiveEntry,
    DirectoryEntry,
    FileEntry,
    UnsupportedEntry,
    iter_tar_entries,
    iter_zip_entries,
)
from coderunner.errors import DecompressionError, SecurityViolationError

logger = logging.getLogger(__name__)

_READ_ERRORS = (OSError, EOFError, zlib.error, tarfile.TarError, zipfile.BadZipFile)


@dataclass
class ExtractionReport:
    root: Path
    directories: int = 0
    files: int = 0


def contained_path(root: Path, name: str) -> Path:
    """Join ``name`` onto ``root``, refusing anything that lands outside it.

    The check is lexical: absolute names, drive-qualified names and ``..``
    segments are rejected outright, then the cleaned join must start with
    ``root`` plus a separator. The root itself is returned for names that
    clean to ``.``.
    """
    normalized = name.replace("\\", "/")
    if normalized.startswith("/") or ntpath.splitdrive(name)[0]:
        raise SecurityViolationError(entry=name, reason="absolute path")
    if ".." in PurePosixPath(normalized).parts:
        raise SecurityViolationError(entry=name, reason="parent directory segment")

    base = os.path.normpath(os.path.abspath(root))
    target = os.path.normpath(os.path.join(base, normalized))
    if target == base:
        return Path(base)
    if not target.startswith(base + os.sep):
        raise SecurityViolationError(entry=name, reason="escapes destination root")
    return Path(target)


def _write_file(entry: FileEntry, target: Path) -> None:
    target.parent.mkdir(parents=True, exist_ok=True)
    with entry.open() as src, open(target, "wb") as out:
        shutil.copyfileobj(src, out)
    os.chmod(target, entry.mode)


def extract_entries(entries: Iterable[ArchiveEntry], dest: Path) -> ExtractionReport:
    """Materialize entries under ``dest`` in arrival order.

    Stops at the first failure. Files already written stay where they are.
    Directory modes are applied once every entry is written, deepest first,
    so a read-only directory can still receive its own contents.
    """
    report = ExtractionReport(root=dest)
    directory_modes: list[tuple[Path, int]] = []
    dest.mkdir(parents=True, exist_ok=True)
    base = Path(os.path.abspath(dest))
    try:
        for entry in entries:
            if isinstance(entry, UnsupportedEntry):
                logger.warning("unsupported archive entry %r (%s)", entry.name, entry.kind)
                raise DecompressionError(
                    detail=f"Unsupported entry type in uploaded file: {entry.kind}",
                    entry=entry.name,
                )

            if isinstance(entry, DirectoryEntry):
                target = contained_path(dest, entry.name)
                if target == base:
                    continue
                target.mkdir(parents=True, exist_ok=True)
                directory_modes.append((target, entry.mode))
                report.directories += 1
            elif isinstance(entry, FileEntry):
                target = contained_path(dest, entry.name)
                if target == base:
                    raise SecurityViolationError(entry=entry.name, reason="names the destination root")
                _write_file(entry, target)
                report.files += 1
            else:
                raise TypeError(f"unknown archive entry {entry!r}")

        directory_modes.sort(key=lambda item: len(item[0].parts), reverse=True)
        for target, mode in directory_modes:
            os.chmod(target, mode)
    except _READ_ERRORS as e:
        logger.warning("extraction into %s failed: %s", dest, e)
        raise DecompressionError(reason=str(e)) from e
    return report


def extract_archive(stream: IO[bytes], kind: ArchiveKind, dest: Path) -> ExtractionReport:
    """Decode ``stream`` as ``kind`` and extract it under ``dest``."""
    try:
        if kind is ArchiveKind.ZIP:
            with zipfile.ZipFile(stream) as archive:
                return extract_entries(iter_zip_entries(archive), dest)
        mode = "r:gz" if kind is ArchiveKind.GZIP_TAR else "r:"
        with tarfile.open(fileobj=stream, mode=mode) as archive:
            return extract_entries(iter_tar_entries(archive), dest)
    except _READ_ERRORS as e:
        logger.warning("could not read %s archive: %s", kind.value, e)
        raise DecompressionError(reason=str(e)) from e
