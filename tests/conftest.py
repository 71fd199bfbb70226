import pytest


@pytest.fixture
def write_file(tmp_path):
    """Writes bytes (or text) under tmp_path and returns the path."""
    def write(name, content):
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, str):
            path.write_text(content, encoding='utf8')
        else:
            path.write_bytes(content)
        return path
    return write
