"""Inspect safety levels and test what the active context allows."""

import typer

from dtctl.lib import config, output, safety
from dtctl.lib.errors import error_feedback
from dtctl.models import SAFETY_LEVEL_DESCRIPTIONS, Operation, SafetyLevel

app = typer.Typer(help="Inspect context safety levels.", no_args_is_help=True)


@app.command("levels")
def levels(ctx: typer.Context):
    """List safety levels from least to most permissive."""
    records = [
        {"level": level.value, "description": SAFETY_LEVEL_DESCRIPTIONS[level]}
        for level in SafetyLevel
    ]
    output.echo_records(ctx, records, ["LEVEL", "DESCRIPTION"])


@app.command("check")
@error_feedback
def check(
    ctx: typer.Context,
    operation: str = typer.Argument(..., help="read | create | update | delete | delete-bucket"),
    owner: str = typer.Option(None, "--owner", help="Owner ID of the target resource"),
    user: str = typer.Option(None, "--user", help="ID of the current user"),
):
    """Check whether the current context allows an operation.

    Exits with status 1 when the operation is denied.
    """
    op = Operation(operation)
    obj = ctx.obj or {}
    cfg = config.apply_context_override(
        config.load_config(obj.get("config_path")), obj.get("context_name")
    )
    checker = safety.checker_for(cfg, obj.get("override_safety"))
    ownership = safety.determine_ownership(owner, user)

    if checker.is_overridden(op, ownership):
        typer.echo(
            f"Warning: safety level overridden to {checker.effective_level} "
            f"(context {checker.context_name!r} is {checker.level})",
            err=True,
        )

    checker.require(op, ownership)
    typer.echo(
        f"allowed: {op} ({ownership}) in context {checker.context_name!r} "
        f"({checker.effective_level})"
    )
