import pytest

from snap_vcs.config.loader import ROOT_ENV_VAR


@pytest.fixture(autouse=True)
def isolate_root_env(monkeypatch):
    """Make sure a storage root exported in the developer's shell does not leak into tests."""
    monkeypatch.delenv(ROOT_ENV_VAR, raising=False)
    yield
