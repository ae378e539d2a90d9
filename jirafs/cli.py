import logging
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table
from rich.traceback import install
from rich.tree import Tree

from .client import JiraClient
from .config import load_config, update_config, get_config_path
from .decorators import console as error_console, handle_fs_errors
from .render import print_issues
from .source import DataSource
from .vfs import JiraFS, path_for_key, is_issue_key

# Initialize Rich Traceback for better error messages
install(show_locals=False)

# Initialize Rich Console
console = Console()

# Configure logging to use Rich's RichHandler
logging.basicConfig(
    level=logging.INFO,
    format="%(message)s",
    datefmt="[%X]",
    handlers=[RichHandler(rich_tracebacks=True)]
)
logger = logging.getLogger("jirafs")

app = typer.Typer(help="Browse a Jira server as a read-only filesystem")


def make_source(api_root: str, timeout: float) -> DataSource:
    """Build the data source used by every command."""
    return JiraClient(api_root, timeout=timeout)


@app.callback()
def main(
    ctx: typer.Context,
    api_root: Optional[str] = typer.Option(
        None, "--api-root", "-r", help="Jira REST API root (default: config or $JIRA_API_ROOT)"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose mode"),
):
    """
    jirafs - browse projects, issues and comments as files.

    Paths look like TEST, TEST/1, TEST/1/issue and TEST/1/69.
    """
    config = load_config()
    if verbose or config.cli.verbose:
        logger.setLevel(logging.DEBUG)
    console.no_color = error_console.no_color = not config.cli.color

    ctx.obj = {
        "api_root": api_root or config.server.api_root,
        "timeout": config.server.timeout,
    }


def _get_source(ctx: typer.Context) -> DataSource:
    api_root = ctx.obj.get("api_root")
    if not api_root:
        console.print("[bold red]Error:[/bold red] No Jira API root configured")
        console.print("[yellow]Tip: pass --api-root, set $JIRA_API_ROOT or run 'jirafs config --api-root URL'[/yellow]")
        raise typer.Exit(code=1)
    return make_source(api_root, ctx.obj["timeout"])


def _get_fs(ctx: typer.Context) -> JiraFS:
    return JiraFS(_get_source(ctx))


@app.command()
@handle_fs_errors
def ls(
    ctx: typer.Context,
    path: str = typer.Argument(".", help="Directory to list"),
    long: bool = typer.Option(False, "--long", "-l", help="Show size and modification time"),
):
    """List a directory."""
    fsys = _get_fs(ctx)
    entries = fsys.list_dir(path)

    if not long:
        for entry in entries:
            typer.echo(entry.name + ("/" if entry.is_dir else ""))
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("Name", style="cyan")
    table.add_column("Type")
    table.add_column("Size", justify="right")
    table.add_column("Modified")
    for entry in entries:
        info = entry.stat()
        modified = info.mtime.strftime("%Y-%m-%d %H:%M") if info.mtime else ""
        table.add_row(
            escape(entry.name),
            "dir" if info.is_dir else "file",
            str(info.size) if info.size >= 0 else "-",
            modified,
        )
    console.print(table)


@app.command()
@handle_fs_errors
def cat(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="File to print, e.g. TEST/1/issue"),
):
    """Print a file (or a directory listing)."""
    fsys = _get_fs(ctx)
    typer.echo(fsys.read_file(path).decode("utf-8"), nl=False)


@app.command()
@handle_fs_errors
def show(
    ctx: typer.Context,
    key: str = typer.Argument(..., help="Issue key, e.g. TEST-1"),
):
    """Print an issue by its key."""
    if not is_issue_key(key):
        console.print(f"[bold red]Error:[/bold red] Not an issue key: {escape(key)}")
        raise typer.Exit(code=1)
    fsys = _get_fs(ctx)
    typer.echo(fsys.read_file(path_for_key(key)).decode("utf-8"), nl=False)


@app.command()
@handle_fs_errors
def search(
    ctx: typer.Context,
    jql: str = typer.Argument(..., help="JQL query, e.g. 'project = TEST AND status = Open'"),
):
    """List the issue files matching a JQL query."""
    source = _get_source(ctx)
    typer.echo(print_issues(source.search_issues(jql)), nl=False)


@app.command()
@handle_fs_errors
def stat(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="Path to stat"),
):
    """Show metadata for a path."""
    fsys = _get_fs(ctx)
    info = fsys.stat(path)
    console.print(f"[bold]Name:[/bold] {escape(info.name)}")
    console.print(f"[bold]Type:[/bold] {'directory' if info.is_dir else 'file'}")
    console.print(f"[bold]Size:[/bold] {info.size}")
    console.print(f"[bold]Mode:[/bold] {oct(info.mode)}")
    if info.mtime:
        console.print(f"[bold]Modified:[/bold] {info.mtime.isoformat()}")


@app.command()
@handle_fs_errors
def tree(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="Directory to walk, e.g. TEST or TEST/1"),
):
    """Show a directory tree (every level is fetched)."""
    fsys = _get_fs(ctx)
    branches = {}
    for dirpath, dirnames, filenames in fsys.walk(path):
        if not branches:
            branch = Tree(f"[bold]{escape(dirpath)}/[/bold]")
            root = branch
        else:
            branch = branches[dirpath]
        for name in dirnames:
            child = dirpath + "/" + name if dirpath != "." else name
            branches[child] = branch.add(f"[bold blue]{escape(name)}/[/bold blue]")
        for name in filenames:
            branch.add(escape(name))
    console.print(root)


@app.command()
def config(
    api_root: Optional[str] = typer.Option(None, "--api-root", help="Set the Jira REST API root"),
    timeout: Optional[float] = typer.Option(None, "--timeout", help="Set the request timeout in seconds"),
    verbose: Optional[bool] = typer.Option(None, "--verbose/--quiet", help="Set default verbosity"),
    color: Optional[bool] = typer.Option(None, "--color/--no-color", help="Set colored output"),
):
    """Show or update configuration."""
    if api_root is None and timeout is None and verbose is None and color is None:
        current = load_config()
        console.print(f"[bold]Config file:[/bold] {get_config_path()}")
        console.print(f"[bold]API root:[/bold] {current.server.api_root or '(not set)'}")
        console.print(f"[bold]Timeout:[/bold] {current.server.timeout}")
        console.print(f"[bold]Verbose:[/bold] {current.cli.verbose}")
        console.print(f"[bold]Color:[/bold] {current.cli.color}")
        return

    update_config(api_root=api_root, timeout=timeout, verbose=verbose, color=color)
    console.print(f"[green]Configuration saved to {get_config_path()}[/green]")


if __name__ == "__main__":
    app()
