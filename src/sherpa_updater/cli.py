"""
Sherpa Updater CLI - Command-line interface.

Replace a local directory with the latest CI build artifact.
"""

import logging
from pathlib import Path
from typing import Callable, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from sherpa_updater.config import (
    DEFAULT_API_BASE_URL,
    DEFAULT_ARCHIVE_PATH,
    DEFAULT_DIRECTORY,
    DEFAULT_REPOSITORY,
    load_config,
)
from sherpa_updater.core.exceptions import UpdaterError, format_exception
from sherpa_updater.core.models import Artifact
from sherpa_updater.orchestrator.core import UpdateOrchestrator, UpdateState

app = typer.Typer(
    name="sherpa-updater",
    help="Sherpa Updater - keep a directory in sync with the latest CI artifact",
    no_args_is_help=True,
)
console = Console()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def _artifact_table(artifact: Artifact) -> Table:
    table = Table(title="Selected Artifact", show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    table.add_row("Name", escape(artifact.name))
    table.add_row("ID", str(artifact.id))
    table.add_row("Size", str(artifact.size()))
    table.add_row("Created", escape(artifact.created_at))
    table.add_row("Expires", escape(artifact.expires_at))
    table.add_row("URL", escape(artifact.archive_download_url))
    return table


def _progress_reporter(directory: Path) -> Callable[[UpdateState, Artifact | None], None]:
    """Build the callback printing a progress line for each pipeline step."""

    def report(state: UpdateState, artifact: Artifact | None) -> None:
        if state == UpdateState.FETCHING:
            console.print("Downloading artifacts data, please wait ...")
        elif state == UpdateState.DOWNLOADING and artifact is not None:
            console.print(_artifact_table(artifact))
            console.print(
                f"Downloading artifact archive `{escape(artifact.name)}` ({artifact.size()}) "
                f"created at {escape(artifact.created_at)}"
            )
            console.print(f"Artifact location URL: {escape(artifact.archive_download_url)}")
            console.print("Please be patient ...")
        elif state == UpdateState.PREPARING_TARGET:
            if directory.exists():
                console.print("Removing catalog contents")
            else:
                console.print("Directory doesn't exist, creating one")
        elif state == UpdateState.EXTRACTING:
            console.print("Extracting archive contents")
        elif state == UpdateState.CLEANING_UP:
            console.print("Removing archive")

    return report


@app.command()
def update(
    repository: str = typer.Option(
        DEFAULT_REPOSITORY,
        "--repository",
        "-r",
        envvar="SHERPA_REPOSITORY",
        help="GitHub repository as owner/name",
    ),
    token: str = typer.Option(
        "",
        "--token",
        "-t",
        envvar="SHERPA_TOKEN",
        help="Authentication token",
    ),
    directory: str = typer.Option(
        DEFAULT_DIRECTORY,
        "--directory",
        "-d",
        envvar="SHERPA_DIRECTORY",
        help="Asset directory, relative or fully qualified",
    ),
    api_url: str = typer.Option(
        DEFAULT_API_BASE_URL, "--api-url", envvar="SHERPA_API_URL", help="Registry API base URL"
    ),
    archive: Path = typer.Option(
        Path(DEFAULT_ARCHIVE_PATH),
        "--archive",
        envvar="SHERPA_ARCHIVE_PATH",
        help="Where to store the downloaded archive",
    ),
    timeout: Optional[float] = typer.Option(
        None, "--timeout", envvar="SHERPA_TIMEOUT", help="Transport timeout in seconds"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """Download the latest artifact and replace the directory contents."""
    _configure_logging(verbose)

    try:
        config = load_config(
            repository,
            token,
            directory,
            api_base_url=api_url,
            archive_path=archive,
            timeout_seconds=timeout,
        )
    except UpdaterError as e:
        console.print(f"[red]{escape(format_exception(e))}[/red]")
        raise typer.Exit(1)

    console.print(
        Panel.fit(
            f"[bold blue]Sherpa Updater[/bold blue]\n"
            f"Repository: {escape(config.repository)}\n"
            f"Directory: {escape(str(config.directory))}",
        )
    )

    orchestrator = UpdateOrchestrator(config, on_transition=_progress_reporter(config.directory))
    try:
        result = orchestrator.run()
    except UpdaterError as e:
        console.print(f"[red]{escape(format_exception(e))}[/red]")
        raise typer.Exit(1)

    if result.state == UpdateState.NOTHING_TO_DO:
        console.print("[blue]No artifacts found![/blue]")
    else:
        console.print(escape(result.summary()))

    console.print("[green]All done[/green]")


@app.command()
def version():
    """Show Sherpa Updater version."""
    from sherpa_updater import __version__

    console.print(f"Sherpa Updater v{__version__}")


def main():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
