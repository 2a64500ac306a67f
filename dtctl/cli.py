import difflib
import logging
import sys

import click
import typer
from typer.core import TyperGroup

from dtctl.apps import alias, safety
from dtctl.apps import config as config_app
from dtctl.apps.alias import api as alias_api
from dtctl.errors import DtctlError
from dtctl.lib import config, output


class DtctlGroup(TyperGroup):
    """Root group that suggests the closest command for unknown names."""

    def resolve_command(self, ctx, args):
        name = click.utils.make_str(args[0])
        if self.get_command(ctx, name) is None and not name.startswith("-"):
            match = difflib.get_close_matches(name, self.list_commands(ctx), n=1)
            if match:
                ctx.fail(f"unknown command {name!r}, did you mean {match[0]!r}?")
            ctx.fail(f"unknown command {name!r}\nRun 'dtctl --help' for usage.")
        return super().resolve_command(ctx, args)


app = typer.Typer(
    cls=DtctlGroup,
    no_args_is_help=True,
    add_completion=False,
    help="dtctl: manage observability platform resources from the command line.",
)


LOG_FORMAT = "[dtctl] %(levelname)s %(message)s"


def _set_verbosity(verbosity: int) -> None:
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.getLogger().setLevel(level)


@app.callback()
def common_options_callback(
    ctx: typer.Context,
    config_path: str = typer.Option(
        None, "--config", help="Config file (default $XDG_CONFIG_HOME/dtctl/config)"
    ),
    context_name: str = typer.Option(None, "--context", help="Use a specific context."),
    output_format: str = typer.Option(
        "table", "--output", "-o", help="Output format: table|json|yaml."
    ),
    verbose: int = typer.Option(0, "--verbose", "-v", count=True, help="Verbose output."),
    override_safety: str = typer.Option(
        None,
        "--override-safety",
        help="Raise the safety level for this invocation only.",
    ),
):
    if output_format not in output.FORMATS:
        raise typer.BadParameter(
            f"must be one of {', '.join(output.FORMATS)}", param_hint="--output"
        )
    _set_verbosity(verbose)
    output.init_context(ctx, config_path, context_name, output_format, override_safety)


app.add_typer(alias.app, name="alias")
app.add_typer(config_app.app, name="config")
app.add_typer(safety.app, name="safety")


def builtin_commands() -> set[str]:
    group = typer.main.get_command(app)
    return set(group.commands)


def is_builtin_command(name: str) -> bool:
    return name in builtin_commands()


def expand_argv(argv: list[str]) -> tuple[list[str], bool]:
    """Apply alias expansion to argv. Returns (argv, is_shell)."""
    if not argv or argv[0].startswith("-") or is_builtin_command(argv[0]):
        return argv, False
    cfg = config.load_config()
    expanded, is_shell = alias_api.resolve_alias(argv, cfg)
    if expanded is None:
        return argv, False
    return expanded, is_shell


def main() -> None:
    """Entry point for dtctl command."""
    logging.basicConfig(format=LOG_FORMAT)
    try:
        argv, is_shell = expand_argv(sys.argv[1:])
    except DtctlError as e:
        typer.echo(f"Error: {e}", err=True)
        raise SystemExit(1) from e

    if is_shell:
        raise SystemExit(alias_api.run_shell_alias(argv[0]))

    app(args=argv, prog_name="dtctl")
