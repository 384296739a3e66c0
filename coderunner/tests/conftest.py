import io
import os
import sys
import tarfile
import zipfile
REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", ".."))
if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)

import pytest
from fastapi.testclient import TestClient

from coderunner.config import clear_settings_cache
from coderunner.session import SubmissionStore


def _zip_bytes(tree: dict) -> bytes:
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w") as archive:
        for name, value in tree.items():
            if name.endswith("/"):
                info = zipfile.ZipInfo(name)
                info.external_attr = ((0o040000 | value) << 16) | 0x10
                archive.writestr(info, b"")
            else:
                data, mode = value
                info = zipfile.ZipInfo(name)
                info.external_attr = (0o100000 | mode) << 16
                archive.writestr(info, data)
    return buf.getvalue()


def _tar_bytes(tree: dict, compress: bool) -> bytes:
    buf = io.BytesIO()
    with tarfile.open(fileobj=buf, mode="w:gz" if compress else "w") as archive:
        for name, value in tree.items():
            info = tarfile.TarInfo(name.rstrip("/") if name.endswith("/") else name)
            if name.endswith("/"):
                info.type = tarfile.DIRTYPE
                info.mode = value
                archive.addfile(info)
            else:
                data, mode = value
                info.size = len(data)
                info.mode = mode
                archive.addfile(info, io.BytesIO(data))
    return buf.getvalue()


@pytest.fixture
def make_archive():
    """Build archive bytes from ``{name: mode}`` dirs and ``{name: (data, mode)}`` files.

    Directory names end with a slash. ``kind`` is "zip", "tar" or "tar.gz".
    """
    def _make(tree: dict, kind: str) -> bytes:
        if kind == "zip":
            return _zip_bytes(tree)
        return _tar_bytes(tree, compress=kind == "tar.gz")

    return _make


@pytest.fixture
def assignments_dir(tmp_path, monkeypatch):
    path = tmp_path / "assignments"
    path.mkdir()
    monkeypatch.setenv("WORKSPACE_ASSIGNMENTS_DIR", str(path))
    clear_settings_cache()
    yield path
    clear_settings_cache()


@pytest.fixture
def store():
    return SubmissionStore()


@pytest.fixture
def client(assignments_dir, store):
    import coderunner.main as main
    from coderunner.dependencies import get_submission_store

    main.app.dependency_overrides[get_submission_store] = lambda: store
    with TestClient(main.app) as c:
        yield c
    main.app.dependency_overrides.clear()
