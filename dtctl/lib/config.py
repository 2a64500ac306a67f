import logging
import os
from pathlib import Path

import yaml

from dtctl.errors import ConfigError, ContextNotFound
from dtctl.models import Config, Context, NamedContext, SafetyLevel

from . import paths

logger = logging.getLogger(__name__)

_KNOWN_KEYS = {
    "apiVersion",
    "kind",
    "current-context",
    "contexts",
    "tokens",
    "preferences",
    "aliases",
}

_KIND_NAMES = {list: "list", dict: "mapping"}


def parse_safety_level(value: str | None) -> SafetyLevel | None:
    """Parse a safety level string. Empty means unset; unknown raises ValueError."""
    if not value:
        return None
    try:
        return SafetyLevel(value)
    except ValueError:
        valid = ", ".join(level.value for level in SafetyLevel)
        raise ValueError(f"invalid safety level {value!r} (valid: {valid})") from None


def _context_from_dict(name: str, data: dict) -> Context:
    if not isinstance(data, dict):
        raise ConfigError(f"Config context {name!r} must be a mapping")
    raw_level = data.get("safety-level") or ""
    try:
        level = parse_safety_level(raw_level)
    except ValueError:
        logger.warning(f"Context {name!r} has unknown safety level {raw_level!r}, using default")
        level = None
    return Context(
        environment=data.get("environment") or "",
        token_ref=data.get("token-ref") or "",
        safety_level=level,
        description=data.get("description") or "",
    )


def from_dict(data: dict, path: Path | None = None) -> Config:
    if not isinstance(data, dict):
        raise ConfigError(f"Config must be a mapping, got {type(data).__name__}")

    aliases = data.get("aliases") or {}
    if not isinstance(aliases, dict):
        raise ConfigError("Config 'aliases' must be a mapping")

    for key, kind in (("contexts", list), ("tokens", list), ("preferences", dict)):
        value = data.get(key)
        if value is not None and not isinstance(value, kind):
            raise ConfigError(f"Config {key!r} must be a {_KIND_NAMES[kind]}")

    for name, expansion in aliases.items():
        if not isinstance(expansion, str) or not expansion:
            raise ConfigError(f"Config alias {name!r} must have a non-empty string expansion")

    contexts = []
    for entry in data.get("contexts") or []:
        if not isinstance(entry, dict) or not entry.get("name"):
            raise ConfigError("Config 'contexts' entries need a name")
        contexts.append(
            NamedContext(
                name=str(entry["name"]),
                context=_context_from_dict(entry["name"], entry.get("context") or {}),
            )
        )

    cfg = Config(
        api_version=data.get("apiVersion") or "v1",
        kind=data.get("kind") or "Config",
        current_context=data.get("current-context") or "",
        contexts=contexts,
        tokens=list(data.get("tokens") or []),
        preferences=dict(data.get("preferences") or {}),
        aliases={str(k): v for k, v in aliases.items()},
        extra={k: v for k, v in data.items() if k not in _KNOWN_KEYS},
        path=path,
    )
    return cfg


def _context_to_dict(ctx: Context) -> dict:
    out = {"environment": ctx.environment, "token-ref": ctx.token_ref}
    if ctx.safety_level is not None:
        out["safety-level"] = ctx.safety_level.value
    if ctx.description:
        out["description"] = ctx.description
    return out


def to_dict(cfg: Config) -> dict:
    out = {
        "apiVersion": cfg.api_version,
        "kind": cfg.kind,
        "current-context": cfg.current_context,
        "contexts": [{"name": nc.name, "context": _context_to_dict(nc.context)} for nc in cfg.contexts],
        "tokens": cfg.tokens,
        "preferences": cfg.preferences,
    }
    if cfg.aliases:
        out["aliases"] = dict(cfg.aliases)
    out.update(cfg.extra)
    return out


def load_config(path: str | Path | None = None) -> Config:
    """Load the config file, returning a fresh default config if it does not exist."""
    target = paths.config_file(path)
    logger.debug(f"Using config file {target}")
    if not target.exists():
        return Config(path=target)
    try:
        with open(target) as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"failed to parse config file {target}: {e}") from e
    except OSError as e:
        raise ConfigError(f"failed to read config file {target}: {e}") from e
    return from_dict(data, path=target)


def save_config(cfg: Config, path: str | Path | None = None) -> Path:
    target = Path(path) if path else (cfg.path or paths.default_config_file())
    try:
        target.parent.mkdir(mode=0o700, parents=True, exist_ok=True)
        fd = os.open(target, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w") as f:
            yaml.safe_dump(to_dict(cfg), f, default_flow_style=False, sort_keys=False)
    except OSError as e:
        raise ConfigError(f"failed to write config file {target}: {e}") from e
    cfg.path = target
    logger.info(f"Saved config to {target}")
    return target


def apply_context_override(cfg: Config, context_name: str | None = None) -> Config:
    """Switch current context for this invocation only (--context, then DTCTL_CONTEXT)."""
    override = context_name or os.environ.get("DTCTL_CONTEXT")
    if override:
        cfg.current_context = override
    return cfg


def current_context(cfg: Config) -> tuple[str, Context]:
    if not cfg.current_context:
        raise ConfigError("no current context set. Run 'dtctl config set-context' to create one")
    ctx = cfg.get_context(cfg.current_context)
    if ctx is None:
        raise ContextNotFound(cfg.current_context)
    return cfg.current_context, ctx


def set_context(
    cfg: Config,
    name: str,
    environment: str | None = None,
    token_ref: str | None = None,
    safety_level: SafetyLevel | None = None,
    description: str | None = None,
) -> Context:
    """Create or update a context. Only the fields that are given change."""
    ctx = cfg.get_context(name)
    if ctx is None:
        ctx = Context()
        cfg.contexts.append(NamedContext(name=name, context=ctx))
    if environment:
        ctx.environment = environment
    if token_ref:
        ctx.token_ref = token_ref
    if safety_level is not None:
        ctx.safety_level = safety_level
    if description:
        ctx.description = description
    return ctx


def use_context(cfg: Config, name: str) -> None:
    if cfg.get_context(name) is None:
        raise ContextNotFound(name)
    cfg.current_context = name


def delete_context(cfg: Config, name: str) -> None:
    for i, nc in enumerate(cfg.contexts):
        if nc.name == name:
            del cfg.contexts[i]
            if cfg.current_context == name:
                cfg.current_context = ""
            return
    raise ContextNotFound(name)
