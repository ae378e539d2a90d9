"""Decorators for jirafs CLI commands."""

import functools
import logging
from typing import Any, Callable

import typer
from rich.console import Console

from jirafs.source import DataSourceError
from jirafs.vfs.errors import InvalidPathError, NotFoundError, PathError

logger = logging.getLogger(__name__)
console = Console(stderr=True)


def handle_fs_errors(func: Callable) -> Callable:
    """
    Decorator to handle common filesystem errors in CLI commands.

    Maps the VFS error taxonomy to a message and exit code 1:
    - InvalidPathError: Malformed path
    - NotFoundError: Path does not exist
    - PathError: Any other filesystem failure (remote, not a directory)
    - DataSourceError: Failure outside a path operation
    """
    @functools.wraps(func)
    def wrapper(*args, **kwargs) -> Any:
        try:
            return func(*args, **kwargs)
        except InvalidPathError as e:
            console.print(f"[bold red]Error:[/bold red] Invalid path: {e}")
            raise typer.Exit(code=1)
        except NotFoundError as e:
            console.print(f"[bold red]Error:[/bold red] No such file or directory: {e}")
            raise typer.Exit(code=1)
        except PathError as e:
            logger.debug(f"{func.__name__} failed", exc_info=True)
            console.print(f"[bold red]Error:[/bold red] {e}")
            raise typer.Exit(code=1)
        except DataSourceError as e:
            console.print(f"[bold red]Error:[/bold red] Jira request failed: {e}")
            raise typer.Exit(code=1)
        except KeyboardInterrupt:
            console.print("\n[yellow]Operation cancelled by user[/yellow]")
            raise typer.Exit(code=130)

    return wrapper
