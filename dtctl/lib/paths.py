import os
from pathlib import Path

LOCAL_CONFIG_NAME = ".dtctl.yaml"


def config_home() -> Path:
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg).expanduser()
    return Path.home() / ".config"


def config_dir() -> Path:
    return config_home() / "dtctl"


def default_config_file() -> Path:
    return config_dir() / "config"


def find_local_config(start: Path | None = None) -> Path | None:
    """Return the nearest .dtctl.yaml from start upwards, or None."""
    directory = (start or Path.cwd()).resolve()
    for candidate_dir in (directory, *directory.parents):
        candidate = candidate_dir / LOCAL_CONFIG_NAME
        if candidate.is_file():
            return candidate
    return None


def config_file(explicit: str | Path | None = None) -> Path:
    """Resolve the config path: explicit > DTCTL_CONFIG > local .dtctl.yaml > XDG default."""
    if explicit:
        return Path(explicit).expanduser()
    env = os.environ.get("DTCTL_CONFIG")
    if env:
        return Path(env).expanduser()
    local = find_local_config()
    if local is not None:
        return local
    return default_config_file()
