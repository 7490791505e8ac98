import pytest
from click.testing import CliRunner


@pytest.fixture()
def cli_runner() -> CliRunner:
    """Provides a reusable Click CLI runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def _no_size_override(monkeypatch):
    """Keep a size limit exported in the developer's shell out of the tests."""
    monkeypatch.delenv("DIRECTIVE_MARKDOWN_MAX_FILE_SIZE", raising=False)
