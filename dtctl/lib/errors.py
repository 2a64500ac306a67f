"""CLI error handling: report domain errors on stderr instead of tracebacks."""

import logging
from functools import wraps

import typer
from click.exceptions import Exit

from dtctl.errors import DtctlError

logger = logging.getLogger(__name__)


def error_feedback(f):
    """Wrap command to catch exceptions and report them before exiting.

    DtctlError and I/O failures are echoed as "Error: ..." to stderr and
    end the command with exit status 1.
    """

    @wraps(f)
    def wrapper(*args, **kwargs):
        try:
            return f(*args, **kwargs)
        except (SystemExit, Exit):
            raise
        except DtctlError as e:
            typer.echo(f"Error: {e}", err=True)
            raise typer.Exit(1) from e
        except ValueError as e:
            typer.echo(f"Invalid input: {e}", err=True)
            raise typer.Exit(1) from e
        except OSError as e:
            logger.debug("File error", exc_info=True)
            typer.echo(f"File error: {e}", err=True)
            raise typer.Exit(1) from e

    return wrapper
