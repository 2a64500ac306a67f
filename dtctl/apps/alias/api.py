"""Alias table operations and argv expansion."""

import logging
import os
import re
import subprocess
import sys
from collections.abc import Callable
from pathlib import Path

import yaml

from dtctl.errors import (
    AliasArgumentShortfall,
    AliasNameCollision,
    AliasNotFound,
    ConfigError,
    EmptyAliasExpansion,
    InvalidAliasName,
)
from dtctl.lib.argv import split_command, substitute_params
from dtctl.models import AliasEntry, Config

logger = logging.getLogger(__name__)

SHELL_PREFIX = "!"

_NAME_RE = re.compile(r"^[a-zA-Z0-9][a-zA-Z0-9_-]*$")

BuiltinCheck = Callable[[str], bool]


def resolve_alias(args: list[str], cfg: Config | None) -> tuple[list[str] | None, bool]:
    """Expand args[0] if it names an alias.

    Returns (expanded args, is_shell). (None, False) means args[0] is not an
    alias and should be dispatched as typed. A shell alias expands to a single
    command string.

    Raises AliasArgumentShortfall when the template references $N and fewer
    than N arguments follow the alias name.
    """
    if not args or cfg is None or args[0].startswith("-"):
        return None, False

    name = args[0]
    expansion = cfg.get_alias(name)
    if expansion is None:
        return None, False

    extra = args[1:]

    if expansion.startswith(SHELL_PREFIX):
        shell_cmd = expansion[len(SHELL_PREFIX) :]
        if extra:
            shell_cmd += " " + " ".join(extra)
        logger.info(f"Alias {name!r} expands to shell command: {shell_cmd}")
        return [shell_cmd], True

    max_used = 0
    parts = []
    for token in split_command(expansion):
        token, max_used = substitute_params(token, extra, max_used)
        parts.append(token)

    if max_used > len(extra):
        raise AliasArgumentShortfall(name, max_used, len(extra))

    parts.extend(extra[max_used:])
    logger.info(f"Alias {name!r} expands to: {parts}")
    return parts, False


def run_shell_alias(shell_cmd: str) -> int:
    """Run a shell alias with the process's standard streams and return its exit code."""
    if os.name == "nt":
        argv = ["cmd", "/c", shell_cmd]
    else:
        argv = ["sh", "-c", shell_cmd]
    completed = subprocess.run(argv, stdin=sys.stdin, stdout=sys.stdout, stderr=sys.stderr)
    if completed.returncode < 0:
        # killed by signal N: report 128+N like a shell does
        return 128 - completed.returncode
    return completed.returncode


def validate_alias_name(name: str) -> None:
    if not name or not _NAME_RE.match(name):
        raise InvalidAliasName(name)


def set_alias(
    cfg: Config, name: str, expansion: str, is_builtin: BuiltinCheck | None = None
) -> None:
    """Add or update an alias. The table is untouched when validation fails."""
    validate_alias_name(name)
    if is_builtin is not None and is_builtin(name):
        raise AliasNameCollision(name)
    if not expansion:
        raise EmptyAliasExpansion(name)
    cfg.aliases[name] = expansion


def delete_alias(cfg: Config, name: str) -> None:
    if name not in cfg.aliases:
        raise AliasNotFound(name)
    del cfg.aliases[name]


def list_aliases(cfg: Config) -> list[AliasEntry]:
    return [AliasEntry(name, cfg.aliases[name]) for name in sorted(cfg.aliases)]


def export_aliases(cfg: Config, path: str | Path) -> int:
    """Write aliases to path as YAML. Returns the number written."""
    target = Path(path)
    fd = os.open(target, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    with os.fdopen(fd, "w") as f:
        yaml.safe_dump({"aliases": dict(cfg.aliases)}, f, default_flow_style=False)
    return len(cfg.aliases)


def import_aliases(
    cfg: Config,
    path: str | Path,
    overwrite: bool = False,
    is_builtin: BuiltinCheck | None = None,
) -> list[str]:
    """Merge aliases from a YAML file into cfg.

    Every entry is validated before anything is merged. Without overwrite,
    names that already exist are skipped; their names are returned sorted.
    """
    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"failed to parse alias file: {e}") from e

    incoming = data.get("aliases") if isinstance(data, dict) else None
    if incoming is None:
        incoming = {}
    if not isinstance(incoming, dict):
        raise ConfigError("alias file 'aliases' must be a mapping")

    for name, expansion in incoming.items():
        name = str(name)
        validate_alias_name(name)
        if is_builtin is not None and is_builtin(name):
            raise AliasNameCollision(name)
        if not expansion:
            raise EmptyAliasExpansion(name)

    conflicts = []
    for name, expansion in incoming.items():
        name = str(name)
        if name in cfg.aliases and not overwrite:
            conflicts.append(name)
            continue
        cfg.aliases[name] = str(expansion)
    return sorted(conflicts)
