# File: tests/conftest.py

import pytest

import photokit.log as photokit_log


@pytest.fixture(autouse=True)
def quiet_logs(monkeypatch):
    """
    Keeps test output readable and makes sure no developer env var
    (PHOTOKIT_EXIFTOOL, PHOTOKIT_LOG_FILE, ...) leaks into a test.
    """
    for name in ("PHOTOKIT_EXIFTOOL", "PHOTOKIT_TOOLS_DIR", "PHOTOKIT_LOG_LEVEL", "PHOTOKIT_LOG_FILE"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(photokit_log, "LOG_LEVEL", "ERROR")
    monkeypatch.setattr(photokit_log, "LOG_FILE", None)
    yield


def build_tree(root, layout):
    """
    Creates files/folders from a nested dict:
    {"a.txt": "text", "sub": {"b.txt": ""}} -> root/a.txt, root/sub/b.txt
    """
    root.mkdir(parents=True, exist_ok=True)
    for name, content in layout.items():
        path = root / name
        if isinstance(content, dict):
            build_tree(path, content)
        elif isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content)
    return root


@pytest.fixture
def make_tree(tmp_path):
    def _make(layout, name="root"):
        return build_tree(tmp_path / name, layout)

    return _make
