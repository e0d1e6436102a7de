"""CLI entrypoints for inspecting, linting and rendering plot galleries."""

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape

from .config import Config, load_config
from .manifests import GalleryLoadError, read_manifest_payload, resolve_manifest_path
from .navigation import DEFAULT_URL
from .pages import DEFAULT_PAGE_TITLE, write_gallery_site
from .session import GallerySession
from .urls import with_query_param
from .validation import IssueSeverity, ManifestIssue, lint_manifest

console = Console()
app = typer.Typer(help="Plot gallery toolkit.")

ConfigPathOption = Annotated[
    str,
    typer.Option("--config", "-c", help="Path to configuration file or project directory."),
]
UrlOption = Annotated[
    str | None,
    typer.Option("--url", help="Page URL to emulate (its 'category' and 'data' parameters are honored)."),
]
DataOption = Annotated[
    str | None,
    typer.Option("--data", "-d", help="Manifest name or .json path, as the page's 'data' parameter."),
]
ManifestOption = Annotated[
    str | None,
    typer.Option("--manifest", "-m", help="Explicit manifest path; overrides --data."),
]


@app.command()
def categories(
    config_path: ConfigPathOption = "plotgallery.yml",
    data: DataOption = None,
    manifest: ManifestOption = None,
) -> None:
    """List the manifest's categories in navigation order."""
    config = _load(config_path)
    session = _open_session(config, _page_url(None, data=data), manifest)

    if session.source_label:
        console.print(f"[bold blue]Source[/]: {escape(session.source_label)}")
    for entry in session.nav_entries():
        marker = "[bold green]*[/]" if entry.active else " "
        console.print(f"{marker} {escape(entry.slug)} - {escape(entry.name)} ({entry.item_count})")
    console.print(f"[bold blue]Summary[/]: {len(session.store.categories)} categories.")


@app.command()
def show(
    config_path: ConfigPathOption = "plotgallery.yml",
    category: Annotated[
        str | None,
        typer.Option("--category", help="Category slug to select (unknown slugs fall back to the first)."),
    ] = None,
    page: Annotated[
        int,
        typer.Option("--page", "-p", min=1, help="One-based page number to display."),
    ] = 1,
    url: UrlOption = None,
    data: DataOption = None,
    manifest: ManifestOption = None,
) -> None:
    """Print the items, tags and pagination state of one gallery page."""
    config = _load(config_path)
    session = _open_session(config, _page_url(url, data=data), manifest)
    if category is not None:
        session.select_category(category)

    for _ in range(page - 1):
        if not session.next_page():
            console.print(f"[bold yellow]Note[/]: only {session.pagination.total_pages()} page(s) available.")
            break

    current = session.current_category
    if current is not None:
        console.print(f"[bold green]{escape(current.name or current.slug)}[/] ({escape(current.slug)})")
    console.print(escape(session.category_meta))
    if session.message:
        console.print(f"[bold yellow]{escape(session.message)}[/]")

    for view in session.item_views():
        tags = ", ".join(f"{escape(tag.label)} (tier {tag.tier})" for tag in view.tags) or "-"
        console.print(f"- {escape(view.title)} ({view.kind}) {escape(view.src)} :: {tags}")

    pagination = session.pagination_view()
    prev_state = "disabled" if pagination.prev_disabled else "enabled"
    next_state = "disabled" if pagination.next_disabled else "enabled"
    console.print(f"[bold blue]Page[/]: {pagination.label} (prev {prev_state}, next {next_state})")
    console.print(f"[bold blue]URL[/]: {escape(session.history.url)}")


@app.command()
def render(
    config_path: ConfigPathOption = "plotgallery.yml",
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Directory for rendered pages (defaults to output_dir)."),
    ] = None,
    data: DataOption = None,
    manifest: ManifestOption = None,
) -> None:
    """Write static HTML pages for every category and page."""
    config = _load(config_path)
    session = _open_session(config, _page_url(None, data=data), manifest)
    output_dir = (output or config.output_dir).resolve()

    title = config.project_name or DEFAULT_PAGE_TITLE
    written = write_gallery_site(session, output_dir, title=title)
    console.print(
        f"[bold green]Rendered[/]: {len(written)} page(s) for "
        f"{len(session.store.categories)} categories into {_display_path(output_dir)}"
    )


@app.command()
def lint(
    config_path: ConfigPathOption = "plotgallery.yml",
    strict: Annotated[
        bool,
        typer.Option("--strict", help="Treat warnings as errors."),
    ] = False,
    data: DataOption = None,
    manifest: ManifestOption = None,
) -> None:
    """Check the manifest against the schema and report common mistakes."""
    config = _load(config_path)
    manifest_path = resolve_manifest_path(
        _page_url(None, data=data),
        declared=manifest or config.manifest_path,
        data_dir=config.data_dir,
    )
    try:
        payload = read_manifest_payload(manifest_path, root=config.site_root)
    except GalleryLoadError as exc:
        console.print(f"[bold red]Cannot lint[/]: {escape(str(exc))}")
        raise typer.Exit(code=1) from exc

    report = lint_manifest(payload, asset_root=config.site_root)
    if not report.issues:
        console.print(
            f"[bold green]Lint clean[/]: {report.category_count} categories, "
            f"{report.item_count} item(s); no issues detected."
        )
        raise typer.Exit()

    for issue in sorted(report.issues, key=_lint_sort_key):
        style = "red" if issue.severity is IssueSeverity.ERROR else "yellow"
        location = f" {issue.pointer}" if issue.pointer else ""
        console.print(f"[bold {style}]{issue.severity.name}[/]{escape(location)} - {escape(issue.message)}")

    console.print(
        f"[bold blue]Summary[/]: {report.error_count} error(s), {report.warning_count} warning(s) "
        f"across {report.item_count} item(s)."
    )

    exit_code = 0
    if report.error_count > 0 or (strict and report.warning_count > 0):
        exit_code = 1
    raise typer.Exit(code=exit_code)


def _open_session(config: Config, page_url: str, declared: str | None) -> GallerySession:
    console.print(f"[dim]{escape(config.messages.loading)}[/]")
    try:
        return GallerySession.open(config, page_url=page_url, declared=declared)
    except GalleryLoadError as exc:
        console.print(f"[bold red]{escape(config.messages.load_failed)}[/]")
        console.print(f"[red]{escape(str(exc))}[/]")
        raise typer.Exit(code=1) from exc


def _page_url(url: str | None, *, data: str | None = None) -> str:
    page_url = url or DEFAULT_URL
    if data:
        page_url = with_query_param(page_url, "data", data)
    return page_url


def _lint_sort_key(issue: ManifestIssue) -> tuple[int, str]:
    severity_rank = 0 if issue.severity is IssueSeverity.ERROR else 1
    return (severity_rank, issue.pointer or "")


def _display_path(path: Path) -> str:
    try:
        return path.relative_to(Path.cwd()).as_posix()
    except ValueError:
        return path.as_posix()


def _load(path: str) -> Config:
    try:
        return load_config(path)
    except FileNotFoundError as exc:
        raise typer.BadParameter(f"Config file not found: {path}") from exc
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc

