import yaml
from typer.testing import CliRunner

from dtctl.cli import app

runner = CliRunner()

CONFIG = """\
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
      safety-level: readonly
"""


def test_set_context_creates_and_selects_first_context(config_home):
    result = runner.invoke(
        app,
        [
            "config",
            "set-context",
            "dev",
            "--environment",
            "https://dev.example.com",
            "--safety-level",
            "readwrite-mine",
        ],
    )
    assert result.exit_code == 0
    assert "Context 'dev' created" in result.output
    data = yaml.safe_load(config_home.read_text())
    assert data["current-context"] == "dev"
    assert data["contexts"][0]["context"]["safety-level"] == "readwrite-mine"


def test_set_context_new_requires_environment(config_home):
    result = runner.invoke(app, ["config", "set-context", "dev"])
    assert result.exit_code == 1
    assert "--environment is required" in result.output


def test_set_context_rejects_unknown_safety_level(write_config):
    write_config(CONFIG)
    result = runner.invoke(app, ["config", "set-context", "dev", "--safety-level", "yolo"])
    assert result.exit_code == 1
    assert "invalid safety level" in result.output


def test_get_contexts_marks_current(write_config):
    write_config(CONFIG)
    result = runner.invoke(app, ["config", "get-contexts"])
    assert result.exit_code == 0
    lines = result.output.splitlines()
    assert lines[0].split() == ["CURRENT", "NAME", "ENVIRONMENT", "SAFETY-LEVEL"]
    assert lines[1].split() == ["*", "dev", "https://dev.example.com", "readwrite-mine"]
    assert lines[2].split() == ["prod", "https://prod.example.com", "readonly"]


def test_current_context_with_flag_override(write_config):
    write_config(CONFIG)
    assert runner.invoke(app, ["config", "current-context"]).output.strip() == "dev"
    result = runner.invoke(app, ["--context", "prod", "config", "current-context"])
    assert result.output.strip() == "prod"


def test_use_context_persists(write_config):
    path = write_config(CONFIG)
    result = runner.invoke(app, ["config", "use-context", "prod"])
    assert result.exit_code == 0
    assert yaml.safe_load(path.read_text())["current-context"] == "prod"


def test_use_unknown_context_fails(write_config):
    write_config(CONFIG)
    result = runner.invoke(app, ["config", "use-context", "staging"])
    assert result.exit_code == 1
    assert "context 'staging' not found" in result.output


def test_delete_context(write_config):
    path = write_config(CONFIG)
    result = runner.invoke(app, ["config", "delete-context", "prod"])
    assert result.exit_code == 0
    names = [c["name"] for c in yaml.safe_load(path.read_text())["contexts"]]
    assert names == ["dev"]


def test_view_honours_config_flag(config_home, tmp_path):
    other = tmp_path / "other.yaml"
    other.write_text("current-context: elsewhere\n")
    result = runner.invoke(app, ["--config", str(other), "config", "view"])
    assert result.exit_code == 0
    assert "current-context: elsewhere" in result.output


def test_invalid_output_format(config_home):
    result = runner.invoke(app, ["-o", "xml", "config", "view"])
    assert result.exit_code != 0
