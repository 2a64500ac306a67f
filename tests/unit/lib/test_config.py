import stat

import pytest
import yaml

from dtctl.errors import ConfigError, ContextNotFound
from dtctl.lib import config
from dtctl.models import SafetyLevel

SAMPLE = """\
apiVersion: v1
kind: Config
current-context: dev
contexts:
  - name: dev
    context:
      environment: https://dev.example.com
      token-ref: dev-token
      safety-level: readwrite-mine
  - name: prod
    context:
      environment: https://prod.example.com
      token-ref: prod-token
tokens: []
preferences:
  output: table
aliases:
  wf: get workflows
  wfj: get workflow $1 -o json
custom-key: keep-me
"""


def test_load_missing_file_returns_defaults(config_home):
    cfg = config.load_config()
    assert cfg.aliases == {}
    assert cfg.contexts == []
    assert cfg.path == config_home


def test_load_parses_contexts_and_aliases(write_config):
    write_config(SAMPLE)
    cfg = config.load_config()
    assert cfg.current_context == "dev"
    assert cfg.get_context("dev").safety_level is SafetyLevel.READWRITE_MINE
    assert cfg.get_context("prod").safety_level is None
    assert cfg.get_context("prod").effective_safety_level is SafetyLevel.READWRITE_ALL
    assert cfg.aliases["wfj"] == "get workflow $1 -o json"


def test_unknown_safety_level_falls_back_to_default(write_config, caplog):
    write_config(
        "current-context: x\ncontexts:\n  - name: x\n    context:\n      safety-level: yolo\n"
    )
    cfg = config.load_config()
    assert cfg.get_context("x").effective_safety_level is SafetyLevel.READWRITE_ALL
    assert "unknown safety level" in caplog.text


def test_save_round_trip_keeps_unknown_keys(write_config):
    path = write_config(SAMPLE)
    cfg = config.load_config()
    cfg.aliases["new"] = "get slos"
    config.save_config(cfg)

    data = yaml.safe_load(path.read_text())
    assert data["custom-key"] == "keep-me"
    assert data["aliases"]["new"] == "get slos"
    assert data["contexts"][0]["context"]["safety-level"] == "readwrite-mine"
    assert "safety-level" not in data["contexts"][1]["context"]


def test_save_creates_private_file(config_home):
    cfg = config.load_config()
    config.save_config(cfg)
    assert config_home.exists()
    assert stat.S_IMODE(config_home.stat().st_mode) == 0o600


def test_invalid_yaml_raises_config_error(write_config):
    write_config("contexts: [unclosed\n")
    with pytest.raises(ConfigError, match="failed to parse"):
        config.load_config()


def test_aliases_must_be_mapping(write_config):
    write_config("aliases:\n  - wf\n")
    with pytest.raises(ConfigError, match="aliases"):
        config.load_config()


def test_preferences_must_be_mapping(write_config):
    write_config("preferences: [a, b]\n")
    with pytest.raises(ConfigError, match="preferences"):
        config.load_config()


def test_tokens_must_be_list(write_config):
    write_config("tokens: secret\n")
    with pytest.raises(ConfigError, match="tokens"):
        config.load_config()


def test_context_body_must_be_mapping(write_config):
    write_config("contexts:\n  - name: dev\n    context: [a]\n")
    with pytest.raises(ConfigError, match="dev"):
        config.load_config()


def test_null_alias_expansion_rejected(write_config):
    write_config("aliases:\n  wf:\n")
    with pytest.raises(ConfigError, match="wf"):
        config.load_config()


def test_context_override_flag_then_env(write_config, monkeypatch):
    write_config(SAMPLE)
    cfg = config.apply_context_override(config.load_config(), "prod")
    assert cfg.current_context == "prod"

    monkeypatch.setenv("DTCTL_CONTEXT", "prod")
    cfg = config.apply_context_override(config.load_config())
    assert cfg.current_context == "prod"


def test_set_context_updates_only_given_fields(write_config):
    write_config(SAMPLE)
    cfg = config.load_config()
    config.set_context(cfg, "dev", safety_level=SafetyLevel.READONLY)
    ctx = cfg.get_context("dev")
    assert ctx.environment == "https://dev.example.com"
    assert ctx.safety_level is SafetyLevel.READONLY

    config.set_context(cfg, "staging", environment="https://staging.example.com")
    assert cfg.get_context("staging").environment == "https://staging.example.com"


def test_use_and_delete_context(write_config):
    write_config(SAMPLE)
    cfg = config.load_config()
    config.use_context(cfg, "prod")
    assert cfg.current_context == "prod"

    config.delete_context(cfg, "prod")
    assert cfg.get_context("prod") is None
    assert cfg.current_context == ""

    with pytest.raises(ContextNotFound):
        config.use_context(cfg, "prod")
    with pytest.raises(ContextNotFound):
        config.delete_context(cfg, "prod")


def test_parse_safety_level():
    assert config.parse_safety_level("") is None
    assert config.parse_safety_level("readonly") is SafetyLevel.READONLY
    with pytest.raises(ValueError, match="valid:"):
        config.parse_safety_level("read-only")
