"""Typer CLI entrypoint for layergen."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from layergen.cli.bootstrap import (
    build_database,
    configure_logging,
    load_config,
    load_project_settings,
    select_config_files,
)
from layergen.config import (
    LayergenSettings,
    SettingsError,
    default_settings_file,
    write_default_settings,
)
from layergen.kernel import (
    Found,
    GenerationError,
    GeneratorConfigError,
    NotFound,
    WrongType,
    generate,
    locate_artifact,
    resolve_config_target,
    save_generator_config,
    sync_target_path,
)

app = typer.Typer(help="layergen: regenerate controllers from generator layers")
_CONSOLE = Console()
_LOGGER = logging.getLogger(__name__)

ProjectRootOption = Annotated[
    Path | None,
    typer.Option(
        file_okay=False,
        dir_okay=True,
        help="Project tree root (defaults to the current directory).",
    ),
]
SettingsFileOption = Annotated[
    Path | None,
    typer.Option(
        file_okay=True,
        dir_okay=False,
        help="Path to layergen settings YAML/JSON file.",
    ),
]
ConfigFilesArgument = Annotated[
    list[Path] | None,
    typer.Argument(help="Generator config files.", exists=True, dir_okay=False),
]
AllOption = Annotated[
    bool,
    typer.Option("--all", help="Process every generator config in the project."),
]


def _fail(message: str) -> typer.Exit:
    _CONSOLE.print(f"[bold red]{message}[/bold red]")
    return typer.Exit(code=1)


def _prepare(
    project_root: Path | None, settings_file: Path | None
) -> tuple[Path, LayergenSettings]:
    root = (project_root or Path.cwd()).resolve()
    try:
        settings = load_project_settings(root, settings_file)
    except SettingsError as exc:
        raise _fail(str(exc)) from exc
    configure_logging(settings.log_level.value)
    return root, settings


@app.command("init")
def init_command(
    project_root: ProjectRootOption = None,
    overwrite: Annotated[
        bool,
        typer.Option("--overwrite", help="Overwrite existing settings file."),
    ] = False,
) -> None:
    """Write default layergen settings for a project.

    Args:
        project_root: Optional project root override.
        overwrite: Whether to overwrite an existing settings file.
    """
    root = (project_root or Path.cwd()).resolve()
    settings_file = default_settings_file(root)
    written = write_default_settings(settings_file, overwrite=overwrite)
    status = "written" if written else "exists"
    _CONSOLE.print(f"settings: {settings_file} ({status})")


@app.command("generate")
def generate_command(
    config_files: ConfigFilesArgument = None,
    all_configs: AllOption = False,
    project_root: ProjectRootOption = None,
    settings_file: SettingsFileOption = None,
) -> None:
    """Regenerate target controllers and save them.

    Args:
        config_files: Generator configs to run.
        all_configs: Run every generator config in the project.
        project_root: Optional project root override.
        settings_file: Optional settings file override.
    """
    root, settings = _prepare(project_root, settings_file)
    paths = select_config_files(root, settings, config_files or [], all_configs=all_configs)
    if not paths:
        raise _fail("No generator configs given (pass files or --all).")
    database = build_database(root, settings)
    table = Table(title="layergen generate", show_header=True, header_style="bold cyan")
    table.add_column("Config", style="bold")
    table.add_column("Target")
    table.add_column("Status", style="green")
    table.add_column("Layers", justify="right")
    configs = []
    for path in paths:
        try:
            config = load_config(root, path)
            result = generate(config, database)
        except (GenerationError, GeneratorConfigError, ValueError) as exc:
            raise _fail(f"{path}: {exc}") from exc
        configs.append(config)
        table.add_row(
            config.asset_path or str(path),
            result.asset_path,
            "created" if result.created else "regenerated",
            str(result.layer_count),
        )
    database.save_assets()
    for config in configs:
        if config.dirty:
            save_generator_config(root, config)
    _CONSOLE.print(table)


@app.command("sync")
def sync_command(
    config_files: ConfigFilesArgument = None,
    all_configs: AllOption = False,
    project_root: ProjectRootOption = None,
    settings_file: SettingsFileOption = None,
) -> None:
    """Rewrite target paths of configs whose targets or selves were moved.

    Args:
        config_files: Generator configs to check.
        all_configs: Check every generator config in the project.
        project_root: Optional project root override.
        settings_file: Optional settings file override.
    """
    root, settings = _prepare(project_root, settings_file)
    paths = select_config_files(root, settings, config_files or [], all_configs=all_configs)
    database = build_database(root, settings)
    for path in paths:
        try:
            config = load_config(root, path, assign_identifier=False)
            changed = sync_target_path(config, database)
        except (GenerationError, GeneratorConfigError, ValueError) as exc:
            raise _fail(f"{path}: {exc}") from exc
        if changed:
            save_generator_config(root, config)
            _CONSOLE.print(
                f"{config.asset_path}: target_path -> {config.target_path.to_raw()!r}"
            )
        else:
            _LOGGER.debug("%s: target path unchanged", config.asset_path)


@app.command("locate")
def locate_command(
    config_file: Annotated[
        Path, typer.Argument(help="Generator config file.", exists=True, dir_okay=False)
    ],
    project_root: ProjectRootOption = None,
    settings_file: SettingsFileOption = None,
) -> None:
    """Show where a config's target resolves to and where it actually is.

    Args:
        config_file: Generator config to inspect.
        project_root: Optional project root override.
        settings_file: Optional settings file override.
    """
    root, settings = _prepare(project_root, settings_file)
    database = build_database(root, settings)
    try:
        config = load_config(root, config_file, assign_identifier=False)
        resolved = resolve_config_target(config)
    except (GenerationError, GeneratorConfigError, ValueError) as exc:
        raise _fail(f"{config_file}: {exc}") from exc
    match locate_artifact(config, database):
        case Found(controller=controller):
            located = controller.asset_path or ""
        case WrongType(asset_path=path, kind=kind):
            located = f"{path} (wrong asset type: {kind})"
        case NotFound():
            located = "(not found)"
    table = Table(title="layergen locate", show_header=False)
    table.add_column("Field", style="bold")
    table.add_column("Value")
    table.add_row("config", config.asset_path or "")
    table.add_row("identifier", config.identifier or "(empty)")
    table.add_row("target_path", repr(config.target_path.to_raw()))
    table.add_row("resolved", resolved)
    table.add_row("located", located)
    _CONSOLE.print(table)


@app.command("watched")
def watched_command(
    config_file: Annotated[
        Path, typer.Argument(help="Generator config file.", exists=True, dir_okay=False)
    ],
    project_root: ProjectRootOption = None,
    settings_file: SettingsFileOption = None,
) -> None:
    """List the project paths whose changes should retrigger generation.

    Args:
        config_file: Generator config to inspect.
        project_root: Optional project root override.
        settings_file: Optional settings file override.
    """
    root, _settings = _prepare(project_root, settings_file)
    try:
        config = load_config(root, config_file, assign_identifier=False)
    except (GeneratorConfigError, ValueError) as exc:
        raise _fail(f"{config_file}: {exc}") from exc
    for path in sorted(config.watching_objects):
        _CONSOLE.print(path)
