import pytest


@pytest.fixture
def write_kml(tmp_path):
    """Write KML text to a file in tmp_path and return its path."""
    def _write(content, name="1.kml"):
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return path
    return _write
