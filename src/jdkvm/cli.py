from __future__ import annotations

import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.filesize import decimal
from rich.logging import RichHandler
from rich.progress import BarColumn, Progress, SpinnerColumn, TaskProgressColumn, TextColumn

from jdkvm import config, installer, oracle, resolver
from jdkvm.errors import JdkvmError, VersionNotInstalledError

app = typer.Typer(
    no_args_is_help=True,
    help=(
        "A dead-simple Oracle JDK version manager.\n\n"
        "Versions are either a bare major like [cyan]21[/cyan], which resolves to the "
        "latest Oracle release of that line, or a full version like [cyan]21.0.3[/cyan]."
    ),
    rich_markup_mode="rich",
)
console = Console()
err_console = Console(stderr=True)


def _configure_logging(verbose: bool) -> None:
    package_logger = logging.getLogger("jdkvm")
    package_logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    if not any(isinstance(handler, RichHandler) for handler in package_logger.handlers):
        handler = RichHandler(console=err_console, show_time=False, show_path=False)
        handler.setFormatter(logging.Formatter("%(message)s"))
        package_logger.addHandler(handler)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging."),
) -> None:
    _configure_logging(verbose)


def _handle_error(err: JdkvmError) -> None:
    console.print(f"[red]{err.format()}[/red]")
    raise typer.Exit(code=1)


def _install_with_progress(
    version: str,
    arch: str | None,
    package_type: str,
    check_latest: bool,
) -> installer.InstallResult:
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        console=console,
        transient=True,
    ) as progress:
        task_id = progress.add_task("Preparing install...", total=100.0, completed=0.0)

        def on_status(stage: str) -> None:
            if stage == "resolving":
                progress.update(task_id, description="Resolving Oracle JDK release...", completed=5.0)
            elif stage == "downloading":
                progress.update(task_id, description="Downloading Oracle JDK archive...", completed=10.0)
            elif stage == "verifying_checksum":
                progress.update(task_id, description="Verifying checksum...", completed=85.0)
            elif stage == "extracting":
                progress.update(task_id, description="Extracting archive...", completed=90.0)
            elif stage == "caching":
                progress.update(task_id, description="Adding to tool cache...", completed=97.0)
            elif stage == "done":
                progress.update(task_id, description="Install complete.", completed=100.0)
            elif stage == "already_installed":
                progress.update(task_id, description="Version already installed.", completed=100.0)

        def on_download(total_bytes: int | None, downloaded_bytes: int) -> None:
            if total_bytes and total_bytes > 0:
                ratio = min(downloaded_bytes / total_bytes, 1.0)
                progress.update(
                    task_id,
                    description="Downloading Oracle JDK archive...",
                    completed=10.0 + (ratio * 75.0),
                )
                return
            # Unknown content length: keep moving the bar while showing bytes received.
            task = progress.tasks[task_id]
            next_progress = task.completed + 1.0
            if next_progress > 85.0:
                next_progress = 10.0
            progress.update(
                task_id,
                description=f"Downloading Oracle JDK archive... {decimal(downloaded_bytes)}",
                completed=next_progress,
            )

        return installer.install(
            version,
            arch=arch,
            package_type=package_type,
            check_latest=check_latest,
            on_status=on_status,
            on_download=on_download,
        )


@app.command()
def install(
    version: str = typer.Argument(..., help="Major (`21`) or full (`21.0.3`) Java version."),
    arch: str | None = typer.Option(None, "--arch", "-a", help="`x64` or `aarch64`. Defaults to host."),
    package_type: str = typer.Option(oracle.PACKAGE_TYPE, "--package-type", help="Only `jdk` is published."),
    check_latest: bool = typer.Option(
        False, "--check-latest", help="Query Oracle even when a matching version is cached."
    ),
) -> None:
    """Install an Oracle JDK.

    [bold cyan]Examples[/]
    [green]jdkvm install 21[/green]
    [green]jdkvm install 21.0.3 --arch aarch64[/green]
    """
    try:
        result = _install_with_progress(version, arch, package_type, check_latest)
    except JdkvmError as err:
        _handle_error(err)
    console.print(f"Installed Oracle JDK {result.resolved_version} for {result.version}.")
    console.print(f"JAVA_HOME: {result.java_home}")


@app.command()
def resolve(
    version: str = typer.Argument(..., help="Major (`21`) or full (`21.0.3`) Java version."),
    arch: str | None = typer.Option(None, "--arch", "-a", help="`x64` or `aarch64`. Defaults to host."),
) -> None:
    """Print the verified download URL for a version without installing it."""
    try:
        release = installer.resolve(version, arch=arch)
    except JdkvmError as err:
        _handle_error(err)
    if not release:
        console.print(f"[yellow]No Oracle JDK release found for {version}.[/yellow]")
        raise typer.Exit(code=1)
    console.print(f"{release.version} {release.url}")


@app.command("list")
def list_versions(
    arch: str | None = typer.Option(None, "--arch", "-a", help="`x64` or `aarch64`. Defaults to host."),
) -> None:
    """List installed Oracle JDK versions."""
    try:
        versions = installer.installed_versions(arch=arch)
    except JdkvmError as err:
        _handle_error(err)
    if not versions:
        console.print("No installed versions. Run: jdkvm install 21")
        return
    for version in versions:
        console.print(version)


@app.command()
def use(version: str) -> None:
    """Set global default Java version."""
    try:
        if installer.find_installed(version) is None:
            raise VersionNotInstalledError("Version not installed.", f"Run: jdkvm install {version}")
        config.set_global_default(version)
    except JdkvmError as err:
        _handle_error(err)
    console.print(f"Global default set to {version}.")


@app.command()
def pin(version: str) -> None:
    """Pin Java version for current project."""
    try:
        if installer.find_installed(version) is None:
            should_install = typer.confirm(f"Version {version} is not installed. Install now?", default=True)
            if not should_install:
                raise VersionNotInstalledError("Version not installed.", f"Run: jdkvm install {version}")
            _install_with_progress(version, None, oracle.PACKAGE_TYPE, False)
        pin_file = Path.cwd() / config.PIN_FILENAME
        pin_file.write_text(f"{version}\n", encoding="utf-8")
    except JdkvmError as err:
        _handle_error(err)
    console.print(f"Pinned {version} in {pin_file}.")


@app.command()
def current() -> None:
    """Show selected Java version and resolution reason."""
    try:
        version, reason = resolver.resolve_version(Path.cwd())
    except JdkvmError as err:
        _handle_error(err)
    console.print(f"Oracle JDK {version} ({reason})")


@app.command()
def which() -> None:
    """Print JAVA_HOME of the selected Java version."""
    try:
        version, _ = resolver.resolve_version(Path.cwd())
        home = installer.java_home_for(version)
    except JdkvmError as err:
        _handle_error(err)
    typer.echo(str(home.resolve()))


@app.command()
def uninstall(
    version: str = typer.Argument(..., help="Installed full version, as shown by `jdkvm list`."),
    arch: str | None = typer.Option(None, "--arch", "-a", help="`x64` or `aarch64`. Defaults to host."),
) -> None:
    """Uninstall a specific Java version."""
    try:
        installer.uninstall(version, arch=arch)
    except JdkvmError as err:
        _handle_error(err)
    console.print(f"Uninstalled Oracle JDK {version}.")
