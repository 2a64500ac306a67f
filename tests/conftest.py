import pytest


@pytest.fixture
def config_home(monkeypatch, tmp_path):
    """Isolated config location per test.

    Provides:
    - XDG_CONFIG_HOME pointed at tmp_path
    - DTCTL_* environment overrides cleared
    - cwd inside tmp_path so no stray .dtctl.yaml is discovered

    Yields the default config file path (not created).
    """
    xdg = tmp_path / "xdg"
    workdir = tmp_path / "work"
    workdir.mkdir()

    monkeypatch.setenv("XDG_CONFIG_HOME", str(xdg))
    for var in ("DTCTL_CONFIG", "DTCTL_CONTEXT", "DTCTL_SAFETY_OVERRIDE"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(workdir)

    yield xdg / "dtctl" / "config"


@pytest.fixture
def write_config(config_home):
    def _write(text: str):
        config_home.parent.mkdir(parents=True, exist_ok=True)
        config_home.write_text(text)
        return config_home

    return _write
