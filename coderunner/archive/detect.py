from enum import Enum

ZIP_SIGNATURES = (b"PK\x03\x04", b"PK\x05\x06", b"PK\x07\x08")
GZIP_SIGNATURE = b"\x1f\x8b\x08"


class ArchiveKind(str, Enum):
    ZIP = "zip"
    GZIP_TAR = "tar.gz"
    TAR = "tar"


def detect_archive_kind(header: bytes) -> ArchiveKind:
    """Pick a decoder from the upload's leading bytes.

    The filename is never consulted. Unknown signatures fall back to plain
    TAR, which then fails in the extractor if the data is not a tarball.
    """
    if header.startswith(ZIP_SIGNATURES):
        return ArchiveKind.ZIP
    if header.startswith(GZIP_SIGNATURE):
        return ArchiveKind.GZIP_TAR
    return ArchiveKind.TAR


def strip_archive_suffixes(filename: str, kind: ArchiveKind) -> str:
    """Derive the extraction root name from an uploaded filename.

    One extension is dropped for ZIP and TAR uploads, two for gzip tarballs
    (``hw1.tar.gz`` -> ``hw1``, ``hw1.tgz`` -> ``hw1``).
    """
    name = filename.replace("\\", "/").rsplit("/", 1)[-1]
    rounds = 2 if kind is ArchiveKind.GZIP_TAR else 1
    for _ in range(rounds):
        stem, dot, _ext = name.rpartition(".")
        if dot and stem:
            name = stem
    return name
