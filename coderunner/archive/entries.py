"""Format-neutral view of archive members.

ZIP and TAR readers both yield ``ArchiveEntry`` values so the extractor
handles every format through one code path.
"""

import stat
import tarfile
import zipfile
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import IO, Union

DEFAULT_DIR_MODE = 0o755
DEFAULT_FILE_MODE = 0o644


@dataclass(frozen=True)
class DirectoryEntry:
    name: str
    mode: int


@dataclass(frozen=True)
class FileEntry:
    name: str
    mode: int
    size: int
    open: Callable[[], IO[bytes]]


@dataclass(frozen=True)
class UnsupportedEntry:
    name: str
    kind: str


ArchiveEntry = Union[DirectoryEntry, FileEntry, UnsupportedEntry]


def _zip_mode(info: zipfile.ZipInfo) -> int:
    return info.external_attr >> 16


def _open_zip_member(archive: zipfile.ZipFile, info: zipfile.ZipInfo) -> IO[bytes]:
    # encrypted members and unknown compression methods are unreadable here
    try:
        return archive.open(info)
    except (RuntimeError, NotImplementedError) as e:
        raise zipfile.BadZipFile(f"cannot read member {info.filename!r}: {e}") from e


def iter_zip_entries(archive: zipfile.ZipFile) -> Iterator[ArchiveEntry]:
    for info in archive.infolist():
        unix_mode = _zip_mode(info)
        perm = stat.S_IMODE(unix_mode) & 0o777
        if stat.S_ISLNK(unix_mode):
            yield UnsupportedEntry(name=info.filename, kind="symlink")
        elif info.is_dir():
            yield DirectoryEntry(name=info.filename, mode=perm or DEFAULT_DIR_MODE)
        else:
            yield FileEntry(
                name=info.filename,
                mode=perm or DEFAULT_FILE_MODE,
                size=info.file_size,
                open=lambda info=info: _open_zip_member(archive, info),
            )


def _tar_kind(member: tarfile.TarInfo) -> str:
    if member.issym():
        return "symlink"
    if member.islnk():
        return "hardlink"
    if member.ischr() or member.isblk():
        return "device"
    if member.isfifo():
        return "fifo"
    return f"type {member.type!r}"


def _open_tar_member(archive: tarfile.TarFile, member: tarfile.TarInfo) -> IO[bytes]:
    handle = archive.extractfile(member)
    if handle is None:
        raise tarfile.ReadError(f"no data for member {member.name!r}")
    return handle


def iter_tar_entries(archive: tarfile.TarFile) -> Iterator[ArchiveEntry]:
    for member in archive:
        perm = member.mode & 0o777
        if member.isdir():
            yield DirectoryEntry(name=member.name, mode=perm)
        elif member.isreg():
            yield FileEntry(
                name=member.name,
                mode=perm,
                size=member.size,
                open=lambda member=member: _open_tar_member(archive, member),
            )
        else:
            yield UnsupportedEntry(name=member.name, kind=_tar_kind(member))
