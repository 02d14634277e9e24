"""Command line interface for projopen."""

from __future__ import annotations

import difflib
import logging
import os
from pathlib import Path
from typing import Any, List, Optional, Sequence, Tuple

import click
import yaml
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.syntax import Syntax
from rich.table import Table

from projopen.catalog import all_collections, group_projects
from projopen.catalog.grouping import GROUPING_MODES, GroupedSection
from projopen.catalog.icons import ICON_CHOICES, is_known_icon, resolve_icon_color
from projopen.catalog.loader import ProjectCatalog, ProjectWithSettings
from projopen.catalog.recency import format_relative_time, is_stale_project
from projopen.catalog.registration import (
    ide_from_path,
    register_project,
    register_source,
    resolve_collection_id,
)
from projopen.catalog.suggestions import search_suggestions
from projopen.config import ConfigError, ConfigManager, ProjopenConfig, resolve_with_precedence
from projopen.launcher import LaunchError
from projopen.paths import expand_path
from projopen.search import filter_projects, parse_search_query
from projopen.state import StateRepository, ValidationError
from projopen.state.migration import run_migration_if_needed
from projopen.state.models import Collection

console = Console()
err_console = Console(stderr=True)

LOGGER = logging.getLogger(__name__)


def _handle_cli_error(
    message: str,
    *,
    code: str,
    json_output: bool,
    details: Any | None = None,
    original: Exception | None = None,
) -> None:
    """Emit a standardized error and terminate the command appropriately.

    Args:
        message: Human-readable error message.
        code: Machine-readable error identifier.
        json_output: Indicates whether JSON mode is active.
        details: Optional structured details to include in the payload.
        original: Original exception for chaining when not using JSON.

    Raises:
        SystemExit: When emitting JSON output to terminate the command.
        click.ClickException: For non-JSON flows to surface the error.
    """

    if json_output:
        payload: dict[str, Any] = {"error": {"code": code, "message": message}}
        if details is not None:
            payload["error"]["details"] = details
        console.print_json(data=payload)
        raise SystemExit(1)

    if isinstance(original, click.ClickException):
        raise original

    raise click.ClickException(message) from original


def _emit_message(message: Any, *, mode: str, quiet: bool, summary_only: bool) -> None:
    """Conditionally print CLI output according to quiet/summary settings.

    Args:
        message: Renderable or string to emit.
        mode: Output mode identifier (`detail`, `summary`, `warning`, or `error`).
        quiet: Whether quiet mode is active.
        summary_only: Whether only summary lines should be emitted.
    """

    if quiet and mode != "error":
        return

    if summary_only and mode not in {"summary", "warning", "error"}:
        return

    console.print(message)


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _load_config() -> ProjopenConfig:
    """Load the effective configuration, surfacing problems as CLI errors."""
    try:
        config = ConfigManager().load()
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc
    _configure_logging(config.logging.level)
    return config


def _load_catalog(*, migrate: bool = True, announce: bool = True) -> ProjectCatalog:
    """Build the catalog for the current configuration, migrating legacy preferences once."""
    config = _load_config()
    state = StateRepository(config.storage.support_dir)
    if migrate:
        migrated = run_migration_if_needed(state, config.legacy)
        if migrated is not None and announce:
            err_console.print(
                f"[cyan]Migrated legacy projects directory {migrated.path} into a source. "
                "projopen now supports multiple directories and collections.[/cyan]"
            )
    return ProjectCatalog(state, config)


def _resolve_project_path(catalog: ProjectCatalog, target: str) -> str:
    """Return the absolute path for a directory argument or a known project name."""
    expanded = os.path.abspath(expand_path(target))
    if Path(expanded).is_dir():
        return expanded
    project = catalog.find(target)
    if project is None:
        raise click.ClickException(f"No project matches '{target}'.")
    return project.path


def _project_payload(
    project: ProjectWithSettings, collections: Sequence[Collection]
) -> dict[str, Any]:
    names = {c.id: c.name for c in collections}
    return {
        "name": project.display_name,
        "path": project.path,
        "relative_path": project.relative_path,
        "language": project.detected_lang,
        "org": project.git_org,
        "collections": [names.get(cid, cid) for cid in project.collections],
        "last_opened": project.last_opened,
        "missing": project.missing,
    }


def _render_section(
    section: GroupedSection,
    collections: Sequence[Collection],
    *,
    show_stale: bool,
) -> Table:
    names = {c.id: c.name for c in collections if c.type == "manual"}
    table = Table(title=f"{escape(section.title)} ({len(section.projects)})", title_justify="left")
    table.add_column("Name", style="bold")
    table.add_column("Language")
    table.add_column("Org")
    table.add_column("Collections")
    table.add_column("Last opened")
    table.add_column("Path", overflow="fold")

    for project in section.projects:
        name = escape(getattr(project, "display_name", project.name))
        if getattr(project, "missing", False):
            name = f"{name} [red](missing)[/red]"
        elif show_stale and is_stale_project(project.last_opened):
            name = f"{name} [yellow](stale)[/yellow]"
        table.add_row(
            name,
            project.detected_lang or "",
            project.git_org or "",
            ", ".join(names[cid] for cid in project.collections if cid in names),
            format_relative_time(project.last_opened) or "never",
            escape(project.relative_path),
        )
    return table


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="projopen")
def cli() -> None:
    """projopen finds your local projects and opens them in your editor."""


@cli.command("list")
@click.argument("query", nargs=-1)
@click.option(
    "--group",
    "grouping",
    type=click.Choice(GROUPING_MODES),
    help="Group by collection, recency, or not at all.",
)
@click.option("--json", "json_output", is_flag=True, help="Emit matching projects as JSON.")
@click.option("--summary", "summary_mode", is_flag=True, help="Only emit summary lines.")
@click.option("--quiet", is_flag=True, help="Suppress non-error output.")
def list_projects(
    query: Tuple[str, ...],
    grouping: Optional[str],
    json_output: bool,
    summary_mode: bool,
    quiet: bool,
) -> None:
    """List projects, optionally filtered by QUERY.

    QUERY accepts free text plus `#collection`, `lang:`, `org:` and `in:` filters.
    """
    try:
        catalog = _load_catalog(announce=not json_output)
    except click.ClickException as exc:
        _handle_cli_error(exc.message, code="config_error", json_output=json_output, original=exc)
        return

    config = catalog.config
    quiet = quiet or config.cli.quiet_default
    summary_only = summary_mode or config.cli.summary_default

    projects = catalog.load()
    manual = catalog.state.collections.load()
    collections = all_collections(manual)
    parsed = parse_search_query(" ".join(query))
    matches = filter_projects(projects, parsed, manual)
    mode = grouping or config.display.default_grouping
    sections = group_projects(matches, mode, manual)  # type: ignore[arg-type]

    if json_output:
        console.print_json(
            data={
                "query": parsed.to_query(),
                "counts": {"total": len(projects), "matches": len(matches)},
                "sections": [
                    {
                        "title": section.title,
                        "auto": section.is_auto,
                        "projects": [
                            _project_payload(project, collections)  # type: ignore[arg-type]
                            for project in section.projects
                        ],
                    }
                    for section in sections
                ],
            }
        )
        return

    for section in sections:
        _emit_message(
            _render_section(section, collections, show_stale=config.display.show_stale_indicator),
            mode="detail",
            quiet=quiet,
            summary_only=summary_only,
        )
    _emit_message(
        f"[green]{len(matches)} of {len(projects)} project(s) shown.[/green]",
        mode="summary",
        quiet=quiet,
        summary_only=summary_only,
    )


@cli.command("open")
@click.argument("target")
@click.option("--ide", "ide_path", type=str, help="Editor to use instead of the configured one.")
def open_project(target: str, ide_path: Optional[str]) -> None:
    """Open the project named TARGET (or at path TARGET) in its editor."""
    catalog = _load_catalog()
    project = catalog.find(target)
    if project is None:
        raise click.ClickException(f"No project matches '{target}'.")
    if project.missing:
        raise click.ClickException(f"Project directory no longer exists: {project.path}")

    try:
        editor = catalog.open(project, ide=ide_from_path(ide_path) if ide_path else None)
    except LaunchError as exc:
        raise click.ClickException(str(exc)) from exc

    editor_label = escape(editor.name or editor.path)
    console.print(f"[green]Opened {escape(project.display_name)} in {editor_label}.[/green]")


@cli.command("add")
@click.argument("path", type=str)
@click.option("--collection", type=str, help="Collection name or id to assign.")
@click.option("--ide", "ide_path", type=str, help="Editor used for this project.")
def add_project(path: str, collection: Optional[str], ide_path: Optional[str]) -> None:
    """Register a single project directory at PATH."""
    catalog = _load_catalog(migrate=False)
    try:
        project = register_project(
            catalog.state, path, collection=collection, ide_path=ide_path
        )
    except ValidationError as exc:
        raise click.ClickException(str(exc)) from exc
    console.print(f"[green]Project added: {escape(Path(project.path).name)}[/green]")


@cli.group()
def sources() -> None:
    """Manage the directories scanned for projects."""


@sources.command("list")
def sources_list() -> None:
    """Show configured source directories."""
    catalog = _load_catalog()
    state = catalog.state
    table = Table(title="Sources", title_justify="left")
    table.add_column("ID")
    table.add_column("Path")
    table.add_column("Depth", justify="right")
    table.add_column("Collection")
    table.add_column("Editor")
    for source in state.sources.load():
        collection = (
            state.collections.get(source.default_collection) if source.default_collection else None
        )
        table.add_row(
            source.id,
            escape(source.path),
            str(source.depth),
            escape(collection.name) if collection else "",
            escape(source.default_ide.name) if source.default_ide else "",
        )
    console.print(table)


@sources.command("add")
@click.argument("path", type=str)
@click.option("--depth", type=click.IntRange(min=0), default=2, show_default=True)
@click.option("--collection", type=str, help="Collection assigned to projects found here.")
@click.option("--ide", "ide_path", type=str, help="Editor used for projects found here.")
def sources_add(path: str, depth: int, collection: Optional[str], ide_path: Optional[str]) -> None:
    """Add PATH as a source directory."""
    catalog = _load_catalog(migrate=False)
    try:
        source, found = register_source(
            catalog.state,
            path,
            depth,
            collection=collection,
            ide_path=ide_path,
            scanner=catalog.scanner,
        )
    except ValidationError as exc:
        raise click.ClickException(str(exc)) from exc
    noun = "project" if found == 1 else "projects"
    console.print(f"[green]Source added ({source.id}). Found {found} {noun}.[/green]")


@sources.command("remove")
@click.argument("source_id")
def sources_remove(source_id: str) -> None:
    """Remove the source with SOURCE_ID."""
    catalog = _load_catalog(migrate=False)
    if not catalog.state.sources.delete(source_id):
        raise click.ClickException(f"No source with id '{source_id}'.")
    console.print(f"[green]Removed source {source_id}.[/green]")


@cli.group()
def collections() -> None:
    """Manage collections."""


@collections.command("list")
def collections_list() -> None:
    """Show manual and auto collections."""
    catalog = _load_catalog(migrate=False)
    table = Table(title="Collections", title_justify="left")
    table.add_column("ID")
    table.add_column("Name")
    table.add_column("Type")
    table.add_column("Filter")
    for collection in all_collections(catalog.state.collections.load()):
        table.add_row(
            collection.id,
            escape(collection.name),
            collection.type,
            escape(f"#{collection.name.lower()}") if collection.type == "manual" else "",
        )
    console.print(table)


@collections.command("create")
@click.argument("name")
@click.option("--icon", type=str, help="Icon key; see `projopen project icons`.")
@click.option("--color", type=str, help="Palette color name or hex value.")
def collections_create(name: str, icon: Optional[str], color: Optional[str]) -> None:
    """Create a manual collection called NAME."""
    catalog = _load_catalog(migrate=False)
    if icon and not is_known_icon(icon):
        raise click.ClickException(f"Unknown icon '{icon}'.")
    try:
        collection = catalog.state.collections.create(name, icon=icon or None, color=color)
    except ValidationError as exc:
        raise click.ClickException(str(exc)) from exc
    console.print(f"[green]Created collection {escape(collection.name)} ({collection.id}).[/green]")


@collections.command("rename")
@click.argument("collection")
@click.argument("name")
def collections_rename(collection: str, name: str) -> None:
    """Rename COLLECTION (name or id) to NAME."""
    catalog = _load_catalog(migrate=False)
    state = catalog.state
    try:
        collection_id = resolve_collection_id(state, collection)
    except ValidationError as exc:
        raise click.ClickException(str(exc)) from exc
    if not name.strip():
        raise click.ClickException("Collection name is required.")
    clash = state.collections.find_by_name(name)
    if clash is not None and clash.id != collection_id:
        raise click.ClickException(f"A collection named '{name}' already exists.")
    state.collections.update(collection_id, name=name.strip())  # type: ignore[arg-type]
    console.print(f"[green]Renamed collection to {escape(name.strip())}.[/green]")


@collections.command("delete")
@click.argument("collection")
def collections_delete(collection: str) -> None:
    """Delete COLLECTION (name or id) and remove it from every project."""
    catalog = _load_catalog(migrate=False)
    state = catalog.state
    try:
        collection_id = resolve_collection_id(state, collection)
    except ValidationError as exc:
        raise click.ClickException(str(exc)) from exc
    cleaned = state.collections.delete(collection_id, state.settings)  # type: ignore[arg-type]
    console.print(
        f"[green]Deleted collection; removed it from {cleaned or 0} project(s).[/green]"
    )


@collections.command("assign")
@click.argument("project")
@click.argument("collection")
def collections_assign(project: str, collection: str) -> None:
    """Add PROJECT (name or path) to COLLECTION."""
    catalog = _load_catalog()
    try:
        collection_id = resolve_collection_id(catalog.state, collection)
    except ValidationError as exc:
        raise click.ClickException(str(exc)) from exc
    path = _resolve_project_path(catalog, project)
    if catalog.state.settings.add_to_collection(path, collection_id):  # type: ignore[arg-type]
        console.print(f"[green]Added {escape(Path(path).name)} to {escape(collection)}.[/green]")
    else:
        console.print(
            f"[yellow]{escape(Path(path).name)} is already in {escape(collection)}.[/yellow]"
        )


@collections.command("unassign")
@click.argument("project")
@click.argument("collection")
def collections_unassign(project: str, collection: str) -> None:
    """Remove PROJECT (name or path) from COLLECTION."""
    catalog = _load_catalog()
    try:
        collection_id = resolve_collection_id(catalog.state, collection)
    except ValidationError as exc:
        raise click.ClickException(str(exc)) from exc
    path = _resolve_project_path(catalog, project)
    if catalog.state.settings.remove_from_collection(path, collection_id):  # type: ignore[arg-type]
        console.print(
            f"[green]Removed {escape(Path(path).name)} from {escape(collection)}.[/green]"
        )
    else:
        console.print(f"[yellow]{escape(Path(path).name)} is not in {escape(collection)}.[/yellow]")


@cli.group()
def project() -> None:
    """Inspect and customize individual projects."""


@project.command("show")
@click.argument("target")
def project_show(target: str) -> None:
    """Show stored settings for TARGET (name or path)."""
    catalog = _load_catalog()
    path = _resolve_project_path(catalog, target)
    settings = catalog.state.settings.get(path)
    data = {"path": path, **settings.model_dump(mode="json", exclude_none=True)}
    console.print(Syntax(yaml.safe_dump(data, sort_keys=False), "yaml", word_wrap=True))


@project.command("icons")
def project_icons() -> None:
    """List the available icon keys."""
    table = Table(title="Icons", title_justify="left")
    table.add_column("Key")
    table.add_column("Label")
    for key, label in ICON_CHOICES:
        table.add_row(key or "(none)", label)
    console.print(table)


@project.command("set")
@click.argument("target")
@click.option("--name", "display_name", type=str, help="Display name; empty to clear.")
@click.option("--icon", type=str, help="Icon key; empty to clear.")
@click.option("--color", type=str, help="Palette color name or hex value.")
@click.option("--custom-icon", type=str, help="Image file copied as the project icon.")
@click.option("--ide", "ide_path", type=str, help="Editor used for this project.")
@click.option("--clear-ide", is_flag=True, help="Remove the editor override.")
def project_set(
    target: str,
    display_name: Optional[str],
    icon: Optional[str],
    color: Optional[str],
    custom_icon: Optional[str],
    ide_path: Optional[str],
    clear_ide: bool,
) -> None:
    """Update settings for TARGET (name or path)."""
    catalog = _load_catalog()
    settings_repo = catalog.state.settings
    path = _resolve_project_path(catalog, target)

    updates: dict[str, Any] = {}
    if display_name is not None:
        updates["display_name"] = display_name.strip() or None
    if icon is not None:
        if icon and not is_known_icon(icon):
            raise click.ClickException(f"Unknown icon '{icon}'.")
        updates["icon"] = icon or None
    if color is not None:
        resolved = resolve_icon_color(color)
        if resolved is None:
            raise click.ClickException(f"Unknown color '{color}'.")
        updates["icon_color"] = resolved
    if ide_path and clear_ide:
        raise click.ClickException("Use either --ide or --clear-ide, not both.")
    if ide_path:
        updates["ide"] = ide_from_path(ide_path)
    if clear_ide:
        updates["ide"] = None

    current = settings_repo.get(path)
    if custom_icon:
        try:
            updates["custom_icon"] = settings_repo.copy_custom_icon(path, custom_icon)
        except ValidationError as exc:
            raise click.ClickException(str(exc)) from exc
        if current.custom_icon and current.custom_icon != updates["custom_icon"]:
            settings_repo.delete_custom_icon(current.custom_icon)

    if not updates:
        console.print("[yellow]No changes requested.[/yellow]")
        return

    settings_repo.save(path, current.model_copy(update=updates))
    console.print(f"[green]Updated settings for {escape(Path(path).name)}.[/green]")


@project.command("reset")
@click.argument("target")
def project_reset(target: str) -> None:
    """Delete every stored setting for TARGET (name or path)."""
    catalog = _load_catalog()
    settings_repo = catalog.state.settings
    path = _resolve_project_path(catalog, target)
    settings_repo.delete_custom_icon(settings_repo.get(path).custom_icon)
    settings_repo.delete(path)
    console.print(f"[green]Reset settings for {escape(Path(path).name)}.[/green]")


@cli.command("suggest")
@click.argument("prefix", required=False, default="")
def suggest(prefix: str) -> None:
    """List search filters that match the current projects."""
    catalog = _load_catalog()
    projects = catalog.load()
    table = Table(title="Search filters", title_justify="left")
    table.add_column("Filter")
    table.add_column("Title")
    table.add_column("Details")
    for suggestion in search_suggestions(projects, catalog.state.collections.load(), prefix):
        table.add_row(
            escape(suggestion.filter), escape(suggestion.title), suggestion.subtitle or ""
        )
    console.print(table)


@cli.group()
def config() -> None:
    """Manage projopen configuration files and overrides."""


@config.command("view")
@click.option("--no-env", is_flag=True, help="Ignore environment overrides when displaying output.")
def config_view(no_env: bool) -> None:
    """Display the effective configuration after applying precedence rules."""
    manager = ConfigManager()
    try:
        manager.ensure_exists()
        loaded = manager.load(include_env=not no_env)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    yaml_text = yaml.safe_dump(loaded.model_dump(mode="python"), sort_keys=False)
    console.print(Syntax(yaml_text, "yaml", word_wrap=True))


@config.command("set")
@click.argument("key")
@click.option("--value", required=True, help="Value to assign to KEY.")
def config_set(key: str, value: str) -> None:
    """Persist a configuration value expressed as a dotted KEY."""
    manager = ConfigManager()
    manager.ensure_exists()

    before = manager.read_text().splitlines()
    segments = [segment.strip() for segment in key.split(".") if segment.strip()]
    if not segments:
        raise click.ClickException("KEY must specify a dotted path such as 'ide.path'.")

    try:
        parsed_value = yaml.safe_load(value)
    except yaml.YAMLError as exc:
        raise click.ClickException(f"Unable to parse value: {exc}") from exc

    file_data = manager.load_file_overrides()

    try:
        _assign_nested(file_data, segments, parsed_value)
        resolve_with_precedence(defaults=ProjopenConfig(), file_overrides=file_data)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    manager.save(file_data)
    after = manager.read_text().splitlines()

    diff = list(
        difflib.unified_diff(
            before,
            after,
            fromfile="config.yaml (before)",
            tofile="config.yaml (after)",
            lineterm="",
        )
    )
    if not any(
        line.startswith(("+", "-")) and not line.startswith(("+++", "---", "+# Last", "-# Last"))
        for line in diff
    ):
        console.print("[yellow]No changes applied; value already up to date.[/yellow]")
        return

    console.print(Syntax("\n".join(diff), "diff", word_wrap=False))
    console.print(f"[green]Updated {'.'.join(segments)}.[/green]")


@config.command("edit")
def config_edit() -> None:
    """Open the configuration file in an interactive editor session."""
    manager = ConfigManager()
    manager.ensure_exists()

    original = manager.read_text()
    edited = click.edit(original, extension=".yaml")

    if edited is None:
        console.print("[yellow]Edit cancelled; no changes applied.[/yellow]")
        return

    if edited == original:
        console.print("[yellow]No changes detected.[/yellow]")
        return

    try:
        parsed = yaml.safe_load(edited) or {}
    except yaml.YAMLError as exc:
        raise click.ClickException(f"Invalid YAML: {exc}") from exc

    if not isinstance(parsed, dict):
        raise click.ClickException("Configuration file must contain a top-level mapping.")

    try:
        resolve_with_precedence(defaults=ProjopenConfig(), file_overrides=parsed)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    manager.save(parsed)
    console.print("[green]Configuration updated successfully.[/green]")


def _assign_nested(target: dict[str, Any], path: List[str], value: Any) -> None:
    """Assign a nested value within a dictionary for a dotted path.

    Raises:
        ConfigError: If a non-mapping value is encountered along the path.
    """

    node = target
    for segment in path[:-1]:
        existing = node.get(segment)
        if existing is None:
            existing = {}
            node[segment] = existing
        elif not isinstance(existing, dict):
            raise ConfigError(
                f"Cannot assign into '{segment}' because it is not a mapping in the config file."
            )
        node = existing
    node[path[-1]] = value


def main() -> None:
    """Invoke the Click CLI as the console script entry point."""
    cli()


if __name__ == "__main__":
    main()
