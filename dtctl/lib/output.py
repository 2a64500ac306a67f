import json as json_lib

import typer
import yaml

FORMATS = ("table", "json", "yaml")


def init_context(
    ctx: typer.Context,
    config_path: str | None = None,
    context_name: str | None = None,
    output_format: str = "table",
    override_safety: str | None = None,
) -> None:
    """Initialize CLI context with the root flags."""
    if ctx.obj is None or not isinstance(ctx.obj, dict):
        ctx.obj = {}
    ctx.obj["config_path"] = config_path
    ctx.obj["context_name"] = context_name
    ctx.obj["output"] = output_format
    ctx.obj["override_safety"] = override_safety


def get_format(ctx: typer.Context) -> str:
    return (ctx.obj or {}).get("output") or "table"


def out_json(data) -> str:
    return json_lib.dumps(data, indent=2)


def out_yaml(data) -> str:
    return yaml.safe_dump(data, default_flow_style=False, sort_keys=False).rstrip("\n")


def out_table(headers: list[str], rows: list[list[str]]) -> str:
    widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(cell))
    lines = []
    for row in [headers, *rows]:
        lines.append("   ".join(cell.ljust(widths[i]) for i, cell in enumerate(row)).rstrip())
    return "\n".join(lines)


def echo_records(ctx: typer.Context, records: list[dict], headers: list[str]) -> None:
    """Print records as a table, or as JSON/YAML when -o asks for it.

    Table columns are looked up by lowercased header name.
    """
    fmt = get_format(ctx)
    if fmt == "json":
        typer.echo(out_json(records))
        return
    if fmt == "yaml":
        typer.echo(out_yaml(records))
        return
    rows = [[str(r.get(h.lower(), "") or "") for h in headers] for r in records]
    typer.echo(out_table(headers, rows))
