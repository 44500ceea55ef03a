"""Main CLI application for Coop."""

import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from coop import __version__
from coop.config.parser import ConfigError
from coop.core.errors import AddonError
from coop.core.installer import AddonInstaller
from coop.core.project import Project
from coop.core.repo import AddonRepo
from coop.utils.platform import get_platform_info
from coop.utils.shell import ShellError

# Create the main Typer app
app = typer.Typer(
    name="coop",
    help="Install and sync project addons from git repositories",
    add_completion=False,
    no_args_is_help=True,
)

console = Console()
error_console = Console(stderr=True)

# Set up logger for the coop package
logger = logging.getLogger("coop")

PathOption = Annotated[
    Path | None,
    typer.Option(
        "--path",
        "-p",
        help="Project directory",
    ),
]


def setup_logging(verbosity: int) -> None:
    """Configure logging based on verbosity level.

    Args:
        verbosity: 0=WARNING, 1=INFO, 2=DEBUG, 3+=DEBUG with source paths
    """
    if verbosity == 0:
        level = logging.WARNING
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.DEBUG

    logger.setLevel(level)

    # Only add handler if not already configured
    if not logger.handlers:
        handler = RichHandler(
            console=error_console,
            show_time=verbosity >= 2,
            show_path=verbosity >= 3,
            rich_tracebacks=True,
        )
        handler.setLevel(level)
        logger.addHandler(handler)
    else:
        for h in logger.handlers:
            h.setLevel(level)


def print_error(message: str) -> None:
    """Print an error message to stderr."""
    error_console.print(f"[red]Error:[/red] {message}", highlight=False)


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]✓[/green] {message}")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]⚠[/yellow] {message}")


def get_project(path: Path | None = None) -> Project:
    """Get the current project, raising an error if not found."""
    try:
        return Project.load(path)
    except FileNotFoundError as e:
        print_error(str(e))
        print_error("Run 'coop init' to create a new project")
        raise typer.Exit(1) from e
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(1) from e


@app.callback()
def callback(
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose",
            "-v",
            count=True,
            help="Increase verbosity (-v info, -vv debug, -vvv debug with paths)",
        ),
    ] = 0,
) -> None:
    """Coop - addon cache and sync manager."""
    setup_logging(verbose)
    logger.debug("Platform: %s", get_platform_info())


@app.command()
def version() -> None:
    """Show the Coop version."""
    console.print(f"coop {__version__}")


@app.command()
def init(path: PathOption = None) -> None:
    """Initialize a new Coop project.

    Creates an addons.yaml configuration file in the specified directory.
    """
    path = Path.cwd() if path is None else path.resolve()

    if not path.exists():
        print_error(f"Directory does not exist: {path}")
        raise typer.Exit(1)

    try:
        project = Project.init(path)
    except FileExistsError as e:
        print_error(str(e))
        raise typer.Exit(1) from e

    print_success("Initialized Coop project")
    console.print(f"  Created: {project.config_path}")


@app.command()
def install(
    addons: Annotated[
        list[str] | None,
        typer.Argument(help="Addons to install (defaults to every configured addon)"),
    ] = None,
    jobs: Annotated[
        int,
        typer.Option(
            "--jobs",
            "-j",
            min=1,
            help="Number of addons to install in parallel",
        ),
    ] = 1,
    path: PathOption = None,
) -> None:
    """Install addons.

    Each addon is cloned into the cache on first use, checked out at its
    configured reference and copied into the addons directory. An installed
    addon with local changes is left alone and reported as a failure.
    """
    project = get_project(path)

    if not project.addons:
        console.print("No addons to install")
        return

    installer = AddonInstaller(project)
    try:
        summary = installer.install(names=addons or None, jobs=jobs)
    except AddonError as e:
        print_error(str(e))
        raise typer.Exit(1) from e

    for result in summary.results:
        if result.success:
            print_success(result.message)
        else:
            print_error(f"Failed to install {result.addon_name}: {result.message}")

    if not summary.all_successful:
        raise typer.Exit(1)


@app.command()
def uninstall(
    addons: Annotated[
        list[str],
        typer.Argument(help="Addons to uninstall"),
    ],
    path: PathOption = None,
) -> None:
    """Uninstall addons from the project.

    Only addons without local changes are deleted. The cache is kept.
    """
    project = get_project(path)
    repo = AddonRepo(copy_strategy=project.copy_strategy)
    failed = False

    for name in addons:
        spec = project.get_addon(name)
        if spec is None:
            print_warning(f"Addon not configured: {name}")
            continue

        try:
            deleted = repo.delete_addon(spec, project.paths)
        except (AddonError, ShellError, OSError) as e:
            print_error(str(e))
            failed = True
            continue

        if deleted:
            print_success(f"Uninstalled {name}")
        else:
            print_warning(f"Addon not installed: {name}")

    if failed:
        raise typer.Exit(1)


@app.command("list")
def list_addons(path: PathOption = None) -> None:
    """List configured addons and their install status."""
    project = get_project(path)

    if not project.addons:
        console.print("No addons configured")
        return

    repo = AddonRepo(copy_strategy=project.copy_strategy)
    styles = {"clean": "green", "modified": "yellow", "missing": "dim"}

    table = Table(title="Addons")
    table.add_column("Addon", style="cyan")
    table.add_column("Checkout", style="green")
    table.add_column("Subfolder")
    table.add_column("Status")
    table.add_column("Source", style="dim")

    for spec in project.addons:
        try:
            status = repo.addon_status(spec, project.paths)
        except ShellError as e:
            print_error(str(e))
            raise typer.Exit(1) from e
        table.add_row(
            spec.name,
            spec.checkout,
            spec.subfolder,
            f"[{styles[status]}]{status}[/{styles[status]}]",
            spec.url,
        )

    console.print(table)


@app.command()
def cache(path: PathOption = None) -> None:
    """Show the addon cache: each cached repository and its directory."""
    project = get_project(path)
    repo = AddonRepo(copy_strategy=project.copy_strategy)

    try:
        index = repo.load_cache(project.paths)
    except (AddonError, ShellError, OSError) as e:
        print_error(str(e))
        raise typer.Exit(1) from e

    if not index:
        console.print(f"Cache is empty ({project.paths.cache_root})")
        return

    table = Table(title=f"Addon Cache ({project.paths.cache_root})")
    table.add_column("URL", style="cyan")
    table.add_column("Directory", style="dim")
    for url, directory in index.items():
        table.add_row(url, str(directory))

    console.print(table)


if __name__ == "__main__":
    app()
