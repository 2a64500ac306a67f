"""Manage command aliases.

Aliases expand before command parsing, so they work exactly like typing the
full command. Use positional parameters ($1, $2, ...) for reusable templates,
or prefix with ! for shell expansion.
"""

import typer

from dtctl.apps.alias import api
from dtctl.lib import config, output
from dtctl.lib.errors import error_feedback

HELP = """Create, list, and delete shorthand names for dtctl commands.

\b
Examples:
  dtctl alias set prod-wf "get workflows --context=production"
  dtctl alias set wf 'get workflow $1 --context=production'
  dtctl alias set wf-count '!dtctl get workflows -o json | jq length'
"""

app = typer.Typer(help=HELP, no_args_is_help=True)


def _is_builtin(name: str) -> bool:
    from dtctl.cli import is_builtin_command

    return is_builtin_command(name)


def _load(ctx: typer.Context):
    return config.load_config((ctx.obj or {}).get("config_path"))


@app.command("set")
@error_feedback
def set_alias(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Alias name"),
    expansion: str = typer.Argument(..., help="Command the alias expands to"),
):
    """Create or update an alias."""
    cfg = _load(ctx)
    api.set_alias(cfg, name, expansion, _is_builtin)
    config.save_config(cfg)
    typer.echo(f"Alias {name!r} set to {expansion!r}")


@app.command("list")
@error_feedback
def list_aliases(ctx: typer.Context):
    """List all aliases."""
    entries = api.list_aliases(_load(ctx))
    if not entries and output.get_format(ctx) == "table":
        typer.echo("No aliases configured.")
        typer.echo("Use 'dtctl alias set <name> <command>' to create one.")
        return
    records = [{"name": e.name, "expansion": e.expansion} for e in entries]
    output.echo_records(ctx, records, ["NAME", "EXPANSION"])


@app.command("ls", hidden=True)
def ls_aliases(ctx: typer.Context):
    """List all aliases."""
    list_aliases(ctx)


@app.command("delete")
@error_feedback
def delete_aliases(
    ctx: typer.Context,
    names: list[str] = typer.Argument(..., help="Alias names to delete"),
):
    """Delete one or more aliases."""
    cfg = _load(ctx)
    for name in names:
        api.delete_alias(cfg, name)
    config.save_config(cfg)
    for name in names:
        typer.echo(f"Alias {name!r} deleted")


@app.command("rm", hidden=True)
def rm_aliases(
    ctx: typer.Context,
    names: list[str] = typer.Argument(..., help="Alias names to delete"),
):
    """Delete one or more aliases."""
    delete_aliases(ctx, names)


@app.command("export")
@error_feedback
def export_aliases(
    ctx: typer.Context,
    file: str = typer.Option(..., "--file", "-f", help="Output file path"),
):
    """Export aliases to a YAML file."""
    cfg = _load(ctx)
    if not cfg.aliases:
        typer.echo("Error: no aliases to export", err=True)
        raise typer.Exit(1)
    count = api.export_aliases(cfg, file)
    typer.echo(f"Exported {count} alias(es) to {file}")


@app.command("import")
@error_feedback
def import_aliases(
    ctx: typer.Context,
    file: str = typer.Option(..., "--file", "-f", help="Input file path"),
    overwrite: bool = typer.Option(False, "--overwrite", help="Overwrite existing aliases"),
):
    """Import aliases from a YAML file."""
    cfg = _load(ctx)
    conflicts = api.import_aliases(cfg, file, overwrite=overwrite, is_builtin=_is_builtin)
    if conflicts:
        typer.echo(f"Skipped {len(conflicts)} existing alias(es): {', '.join(conflicts)}")
        typer.echo("Use --overwrite to replace existing aliases.")
    config.save_config(cfg)
    typer.echo("Aliases imported successfully.")
