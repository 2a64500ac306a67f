import typer

from dtctl.lib import config, output
from dtctl.lib.errors import error_feedback

app = typer.Typer(help="Manage dtctl configuration.", no_args_is_help=True)


def _load(ctx: typer.Context):
    return config.load_config((ctx.obj or {}).get("config_path"))


@app.command("view")
@error_feedback
def view(ctx: typer.Context):
    """Display the current configuration."""
    cfg = _load(ctx)
    data = config.to_dict(cfg)
    if output.get_format(ctx) == "json":
        typer.echo(output.out_json(data))
    else:
        typer.echo(output.out_yaml(data))


@app.command("get-contexts")
@error_feedback
def get_contexts(ctx: typer.Context):
    """List all available contexts."""
    cfg = config.apply_context_override(_load(ctx), (ctx.obj or {}).get("context_name"))
    records = [
        {
            "current": "*" if nc.name == cfg.current_context else "",
            "name": nc.name,
            "environment": nc.context.environment,
            "safety-level": nc.context.effective_safety_level.value,
            "description": nc.context.description,
        }
        for nc in cfg.contexts
    ]
    output.echo_records(ctx, records, ["CURRENT", "NAME", "ENVIRONMENT", "SAFETY-LEVEL"])


@app.command("current-context")
@error_feedback
def current_context(ctx: typer.Context):
    """Display the current context."""
    cfg = config.apply_context_override(_load(ctx), (ctx.obj or {}).get("context_name"))
    name, _ = config.current_context(cfg)
    typer.echo(name)


@app.command("use-context")
@error_feedback
def use_context(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Context to switch to"),
):
    """Switch to a different context."""
    cfg = _load(ctx)
    config.use_context(cfg, name)
    config.save_config(cfg)
    typer.echo(f"Switched to context {name!r}")


@app.command("set-context")
@error_feedback
def set_context(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Context name"),
    environment: str = typer.Option(None, "--environment", help="Environment URL"),
    token_ref: str = typer.Option(None, "--token-ref", help="Token reference name"),
    safety_level: str = typer.Option(
        None,
        "--safety-level",
        help="readonly | readwrite-mine | readwrite-all | dangerously-unrestricted",
    ),
    description: str = typer.Option(None, "--description", help="Human-readable description"),
):
    """Set a context entry in the config."""
    level = config.parse_safety_level(safety_level)
    cfg = _load(ctx)
    created = cfg.get_context(name) is None
    if created and not environment:
        typer.echo("Error: --environment is required for a new context", err=True)
        raise typer.Exit(1)
    config.set_context(cfg, name, environment, token_ref, level, description)
    if not cfg.current_context:
        cfg.current_context = name
    config.save_config(cfg)
    typer.echo(f"Context {name!r} {'created' if created else 'modified'}")


@app.command("delete-context")
@error_feedback
def delete_context(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Context to delete"),
):
    """Delete a context from the config."""
    cfg = _load(ctx)
    config.delete_context(cfg, name)
    config.save_config(cfg)
    typer.echo(f"Deleted context {name!r}")
