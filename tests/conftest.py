import io

import pytest

from linescribe.core.registry import PropertyRegistry


@pytest.fixture
def output():
    """Captures 'print' output and echo diagnostics."""
    return io.StringIO()


@pytest.fixture
def registry():
    return PropertyRegistry.with_globals()


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    """Runs the test inside tmp_path so '@relative' references resolve there."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def write(workdir):
    def _write(name, text):
        path = workdir / name
        path.write_text(text, encoding="utf-8")
        return path
    return _write


@pytest.fixture
def drain():
    """Collects every line a scanner surfaces, in order."""
    def _drain(scanner):
        lines = []
        while scanner.has_next_line():
            lines.append(scanner.next_line())
        return lines
    return _drain
