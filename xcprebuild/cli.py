"""Thin CLI wrapper for xcprebuild.

This module provides the command-line interface using Typer.
All business logic is delegated to core modules.
"""

import json
import logging
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from xcprebuild import __version__
from xcprebuild.config import get_settings, print_settings_json
from xcprebuild.errors import PrebuildError

app = typer.Typer(
    name="xcprebuild",
    help="xcprebuild - prebuild native iOS packages into universal xcframeworks",
    no_args_is_help=True,
)
console = Console()
err_console = Console(stderr=True)


def configure_logging(level: str) -> None:
    """Route log records through rich on stderr."""
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"xcprebuild version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """xcprebuild - prebuild native iOS packages into universal xcframeworks."""


@app.command()
def config(
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output as JSON"),
    ] = False,
) -> None:
    """Show effective configuration."""
    settings = get_settings()
    if json_output:
        typer.echo(print_settings_json(settings))
        return

    tmp_dir_display = str(settings.tmp_dir) if settings.tmp_dir else "(system default)"
    console.print("[bold]Effective Configuration:[/bold]")
    console.print()
    console.print("[bold]Paths:[/bold]")
    console.print(f"  Temp directory:      {tmp_dir_display}")
    console.print(f"  Derived data:        {settings.derived_data_dir}")
    console.print(f"  Packages directory:  {settings.packages_dir}")
    console.print()
    console.print("[bold]Tools:[/bold]")
    console.print(f"  xcodebuild:          {settings.xcodebuild_path}")
    console.print(f"  xcodegen:            {settings.xcodegen_path}")
    console.print(f"  Deployment target:   {settings.ios_deployment_target}")
    console.print()
    console.print("[bold]Operational:[/bold]")
    console.print(f"  Log level:           {settings.log_level}")
    console.print(f"  Build timeout:       {settings.build_timeout}")
    console.print(f"  Prebuild packages:   {', '.join(settings.prebuild_packages)}")


def _prebuild(
    package_names: list[str] | None,
    remove_artifacts: bool,
    clean_cache: bool,
    generate_specs: bool,
    verbose: bool,
) -> None:
    from xcprebuild.builds.service import run_prebuild

    settings = get_settings()
    configure_logging("DEBUG" if verbose else settings.log_level)

    try:
        results = run_prebuild(
            list(package_names or []),
            settings=settings,
            remove_artifacts_only=remove_artifacts,
            clean_cache=clean_cache,
            generate_specs=generate_specs,
            verbose=verbose,
        )
    except PrebuildError as e:
        err_console.print(f"[red]Prebuild failed ({e.code}): {escape(str(e))}[/red]")
        raise typer.Exit(code=1) from None

    for result in results:
        path = result.xcframework_path or "(specs only)"
        console.print(
            f"[green]✓ {result.package_name}[/green] "
            f"{path} [magenta]{result.duration_seconds:.2f}s[/magenta]"
        )


PackageNamesArg = Annotated[
    list[str] | None,
    typer.Argument(help="Packages to prebuild (all prebuildable if omitted)"),
]
RemoveArtifactsOpt = Annotated[
    bool,
    typer.Option(
        "--remove-artifacts", "-r", help="Removes `.xcframework` artifacts for given packages."
    ),
]
CleanCacheOpt = Annotated[
    bool,
    typer.Option("--clean-cache", "-c", help="Cleans the shared derived data folder."),
]
GenerateSpecsOpt = Annotated[
    bool,
    typer.Option("--generate-specs", "-g", help="Only generates project specs"),
]
VerboseOpt = Annotated[
    bool,
    typer.Option("--verbose", "-v", help="Outputs `xcodebuild` logs"),
]


@app.command("prebuild")
def prebuild(
    package_names: PackageNamesArg = None,
    remove_artifacts: RemoveArtifactsOpt = False,
    clean_cache: CleanCacheOpt = False,
    generate_specs: GenerateSpecsOpt = False,
    verbose: VerboseOpt = False,
) -> None:
    """Prebuild packages into universal xcframeworks."""
    _prebuild(package_names, remove_artifacts, clean_cache, generate_specs, verbose)


@app.command("prebuild-packages", hidden=True)
def prebuild_packages(
    package_names: PackageNamesArg = None,
    remove_artifacts: RemoveArtifactsOpt = False,
    clean_cache: CleanCacheOpt = False,
    generate_specs: GenerateSpecsOpt = False,
    verbose: VerboseOpt = False,
) -> None:
    """Alias of `prebuild`."""
    _prebuild(package_names, remove_artifacts, clean_cache, generate_specs, verbose)


packages_app = typer.Typer(help="Inspect prebuildable packages")
app.add_typer(packages_app, name="packages")


@packages_app.command("list")
def packages_list(
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output as JSON"),
    ] = False,
) -> None:
    """List prebuildable packages and where they live."""
    from xcprebuild.packages.registry import (
        get_package_by_name,
        list_prebuildable_package_names,
    )

    settings = get_settings()
    rows = []
    for name in list_prebuildable_package_names(settings):
        package = get_package_by_name(name, settings=settings)
        rows.append(
            {
                "name": name,
                "found": package is not None,
                "path": str(package.path) if package else None,
                "podspec": package.podspec_name if package else None,
            }
        )

    if json_output:
        typer.echo(json.dumps(rows, indent=2))
        return

    if not rows:
        console.print("[yellow]No prebuildable packages configured[/yellow]")
        return

    console.print(f"[bold]Found {len(rows)} prebuildable package(s):[/bold]")
    for row in rows:
        if row["found"]:
            console.print(f"  [green]{row['name']}[/green] {row['path']}")
        else:
            console.print(f"  [yellow]{row['name']}[/yellow] (not found)")


if __name__ == "__main__":
    app()
