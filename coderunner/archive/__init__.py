from coderunner.archive.detect import ArchiveKind, detect_archive_kind, strip_archive_suffixes
from coderunner.archive.entries import ArchiveEntry, DirectoryEntry, FileEntry, UnsupportedEntry
from coderunner.archive.extract import ExtractionReport, contained_path, extract_archive, extract_entries

__all__ = [
    "ArchiveEntry",
    "ArchiveKind",
    "DirectoryEntry",
    "ExtractionReport",
    "FileEntry",
    "UnsupportedEntry",
    "contained_path",
    "detect_archive_kind",
    "extract_archive",
    "extract_entries",
    "strip_archive_suffixes",
]
