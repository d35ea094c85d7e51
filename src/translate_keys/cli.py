"""
CLI for translate-keys.

Provides commands to export missing translations (optionally translated by
DeepL), import reviewed CSV files into YAML dictionaries, and inspect the
translation store.

Every command exits with status 0 on invalid input; problems are reported
on the console.
"""

from __future__ import annotations

import subprocess
from pathlib import Path

import typer
from rich.console import Console
from rich.panel import Panel
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskProgressColumn,
    TextColumn,
)
from rich.table import Table

from translate_keys.config import Settings, create_default_config, load_config
from translate_keys.database import Database, Domain
from translate_keys.engine import (
    DisabledEngine,
    create_engine,
    create_engine_or_disabled,
    resolve_api_key,
)
from translate_keys.errors import EngineError, EngineInitError, ValidationError
from translate_keys.jobs import ExportJob, ExportStage, ImportJob, ProgressInfo
from translate_keys.jobs.import_job import rebuild_cache as run_rebuild_command
from translate_keys.logging_config import setup_logging
from translate_keys.repository import DEEPL_API_KEY_SETTING, TranslationRepository

app = typer.Typer(
    name="translate-keys",
    help="Export missing translations through DeepL and merge reviewed files back.",
    add_completion=False,
)

console = Console()

CACHE_REMINDER = (
    "Then reload the translations of the application, "
    "e.g. bin/console --env=prod cache:clear && bin/console --env=prod oro:translation:load"
)


def get_settings(config_path: Path | None = None) -> Settings:
    """Load settings from config file or defaults, and set up logging."""
    if config_path and config_path.exists():
        settings = load_config(config_path)
    else:
        settings = load_config()
    setup_logging(settings.logging)
    return settings


def get_database(settings: Settings) -> Database:
    """Get database instance."""
    return Database(settings.paths.database_path)


def _print_locales(repository: TranslationRepository, locale: str) -> None:
    console.print(
        f"[cyan]Available locales[/cyan]: {', '.join(repository.available_locales())}. "
        f"[cyan]Should be processed:[/cyan] {locale}."
    )


def _resolve_key(
    settings: Settings, repository: TranslationRepository, cli_key: str | None
) -> str:
    return resolve_api_key(
        repository.get_setting(DEEPL_API_KEY_SETTING),
        cli_key,
        settings.paths.license_file,
    )


@app.command()
def export(
    locale: str = typer.Argument(..., help="Target locale, e.g. de_DE"),
    fmt: str | None = typer.Option(
        None, "--format", "-f", help="Export format: csv, yml or yaml (default from config)"
    ),
    overwrite: bool = typer.Option(
        False,
        "--overwrite",
        "-o",
        help="Write to <domain>.<locale>.<format>; the previous file is kept as .backup "
        "and YAML content is merged",
    ),
    deepl_api_key: str | None = typer.Option(
        None,
        "--deepl-api-key",
        envvar="DEEPL_API_KEY",
        help="DeepL API key, used when none is stored in the database settings",
    ),
    disable_deepl: bool = typer.Option(
        False, "--disable-deepl", "-d", help="Export without translating"
    ),
    domains: str | None = typer.Option(
        None,
        "--domains",
        help=f"Comma separated domains. Supported: {','.join(Domain.values())}",
    ),
    limit: int | None = typer.Option(
        None, "--limit", help="Maximum number of keys per domain; 0 means no limit"
    ),
    simulate: bool = typer.Option(
        False,
        "--simulate",
        help="Only count the characters that would be sent to DeepL; nothing is written",
    ),
    config: Path | None = typer.Option(None, "--config", "-c", help="Config file"),
) -> None:
    """Translate missing strings with DeepL and export them to CSV or YAML."""
    settings = get_settings(config)
    db = get_database(settings)
    repository = TranslationRepository(db)

    try:
        _print_locales(repository, locale)

        translate = not (disable_deepl or simulate)
        api_key = _resolve_key(settings, repository, deepl_api_key) if translate else ""
        engine = create_engine_or_disabled(
            api_key,
            settings.deepl,
            disabled=disable_deepl,
            simulate=simulate,
            license_file=settings.paths.license_file,
        )
        if isinstance(engine, DisabledEngine) and translate:
            console.print(f"[red]{engine.reason}[/red]")

        with Progress(
            SpinnerColumn(),
            TextColumn("[bold blue]{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            console=console,
        ) as progress:
            tasks: dict[str, int] = {}

            def on_progress(info: ProgressInfo) -> None:
                if info.domain not in tasks:
                    tasks[info.domain] = progress.add_task(
                        f"Domain {info.domain} in progress", total=None
                    )
                task = tasks[info.domain]
                if info.total:
                    progress.update(task, total=info.total, completed=info.current)
                if info.stage == ExportStage.DONE:
                    progress.update(task, description=f"Domain {info.domain} done")

            job = ExportJob(
                repository,
                engine,
                settings.paths.translations_dir,
                source_language=settings.deepl.source_language,
                reference_locale=settings.translation.reference_locale,
                timestamp_format=settings.export.timestamp_format,
                progress_callback=on_progress,
            )
            try:
                summary = job.run(
                    locale,
                    fmt=fmt or settings.export.default_format,
                    domains=domains or settings.export.default_domains,
                    overwrite=overwrite,
                    limit=limit,
                    simulate=simulate,
                )
            except ValidationError as e:
                console.print(f"[red]{e}[/red]")
                return

        for result in summary.domains:
            for skipped in result.skipped:
                console.print(f"[red]Skipped {skipped.key}: {skipped.message}[/red]")
            if simulate:
                continue
            if result.written:
                console.print(
                    f"[green]File {result.output_path} successfully written "
                    f"for the domain {result.domain}[/green]"
                )
                if result.backup_path:
                    console.print(f"[dim]Previous file saved as {result.backup_path}[/dim]")
            else:
                console.print(f"[yellow]Nothing to export for the domain {result.domain}[/yellow]")

        if simulate:
            console.print(
                "Number total of characters which could be translated: "
                f"{summary.simulated_chars} chars."
            )

        if summary.usage is not None:
            console.print(
                f"You have used {summary.usage.character_count} of "
                f"{summary.usage.character_limit} in the current billing period."
            )
        elif summary.usage_error:
            console.print(f"[yellow]{summary.usage_error}[/yellow]")
    finally:
        db.close()


@app.command("import")
def import_translations(
    source: Path = typer.Argument(..., help="CSV file to import"),
    locale: str = typer.Argument(..., help="Locale of the translations, e.g. de_DE"),
    domain: str | None = typer.Option(
        None,
        "--domain",
        "-d",
        help="Domain to merge into; detected from <domain>.<locale>.csv when omitted. "
        f"Supported: {','.join(Domain.values())}",
    ),
    rebuild_cache: bool = typer.Option(
        False, "--rebuild-cache", "-r", help="Run the configured cache rebuild command"
    ),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
    config: Path | None = typer.Option(None, "--config", "-c", help="Config file"),
) -> None:
    """Merge a reviewed CSV file into the YAML dictionary of a domain and locale."""
    settings = get_settings(config)
    db = get_database(settings)
    repository = TranslationRepository(db)

    def confirm(question: str) -> bool:
        return yes or typer.confirm(question, default=False)

    try:
        _print_locales(repository, locale)
        job = ImportJob(
            repository,
            settings.paths.translations_dir,
            confirm=confirm,
            timestamp_format=settings.export.timestamp_format,
        )
        try:
            result = job.run(source, locale, domain=domain)
        except ValidationError as e:
            console.print(f"[red]Aborted. {e}[/red]")
            return

        if not result.confirmed:
            console.print(f"[red]Import of {source} aborted.[/red]")
            return

        console.print(
            f"[green]The file {result.source} has been merged with {result.target} "
            f"with success ({result.imported} translations, {result.total_keys} keys).[/green]"
        )
        if result.backup_path:
            console.print(f"[dim]Previous dictionary saved as {result.backup_path}[/dim]")

        if rebuild_cache and settings.imports.rebuild_command:
            try:
                completed = run_rebuild_command(settings.imports.rebuild_command)
            except (subprocess.CalledProcessError, OSError) as e:
                console.print(f"[red]Cache rebuild failed: {e}[/red]")
                console.print(f"[yellow]{CACHE_REMINDER}[/yellow]")
            else:
                if completed.stdout:
                    console.print(completed.stdout.rstrip())
                console.print("[green]Translation cache rebuilt.[/green]")
        else:
            if rebuild_cache:
                console.print(
                    "[yellow]No rebuild command configured (imports.rebuild_command)[/yellow]"
                )
            console.print(f"[yellow]{CACHE_REMINDER}[/yellow]")
    finally:
        db.close()


@app.command()
def locales(
    config: Path | None = typer.Option(None, "--config", "-c", help="Config file"),
) -> None:
    """List the languages of the translation store."""
    settings = get_settings(config)
    db = get_database(settings)

    try:
        languages = db.get_languages()
    finally:
        db.close()

    if not languages:
        console.print("[yellow]No languages in database[/yellow]")
        return

    table = Table(title="Languages")
    table.add_column("Code", style="cyan")
    table.add_column("Enabled")
    table.add_column("Default")
    for lang in languages:
        table.add_row(
            lang.code,
            "[green]yes[/green]" if lang.enabled else "[red]no[/red]",
            "yes" if lang.is_default else "",
        )
    console.print(table)


@app.command()
def usage(
    deepl_api_key: str | None = typer.Option(
        None, "--deepl-api-key", envvar="DEEPL_API_KEY", help="DeepL API key"
    ),
    config: Path | None = typer.Option(None, "--config", "-c", help="Config file"),
) -> None:
    """Show the DeepL character usage of the current billing period."""
    settings = get_settings(config)
    db = get_database(settings)

    try:
        api_key = _resolve_key(settings, TranslationRepository(db), deepl_api_key)
    finally:
        db.close()

    try:
        engine = create_engine(
            api_key, settings.deepl, license_file=settings.paths.license_file
        )
        quota = engine.usage()
    except (EngineInitError, EngineError) as e:
        console.print(f"[red]{e}[/red]")
        return

    remaining = quota.remaining
    console.print(
        Panel(
            f"Characters used: {quota.character_count}\n"
            f"Character limit: {quota.character_limit}\n"
            f"Remaining: {remaining if remaining is not None else 'unknown'}",
            title="DeepL Usage",
        )
    )


@app.command("set-api-key")
def set_api_key(
    api_key: str = typer.Argument(..., help="DeepL API key to store"),
    config: Path | None = typer.Option(None, "--config", "-c", help="Config file"),
) -> None:
    """Store the DeepL API key in the database settings."""
    settings = get_settings(config)
    db = get_database(settings)
    try:
        db.set_setting(DEEPL_API_KEY_SETTING, api_key.strip())
    finally:
        db.close()
    console.print("[green]DeepL API key stored[/green]")


@app.command()
def logs(
    domain: str | None = typer.Option(None, "--domain", "-d", help="Filter by domain"),
    level: str | None = typer.Option(None, "--level", "-l", help="Filter by level"),
    limit: int = typer.Option(50, "--limit", "-n", help="Max entries to show"),
    config: Path | None = typer.Option(None, "--config", "-c", help="Config file"),
) -> None:
    """View processing logs."""
    settings = get_settings(config)
    db = get_database(settings)

    try:
        entries = db.get_logs(level=level, domain=domain, limit=limit)
    finally:
        db.close()

    if not entries:
        console.print("[yellow]No log entries found[/yellow]")
        return

    table = Table(title="Processing Logs")
    table.add_column("Time", style="dim")
    table.add_column("Level")
    table.add_column("Stage", style="cyan")
    table.add_column("Domain")
    table.add_column("Message")

    for entry in entries:
        level_style = {
            "INFO": "green",
            "WARNING": "yellow",
            "ERROR": "red",
        }.get(entry["level"], "white")

        table.add_row(
            str(entry["created_at"])[:19],
            f"[{level_style}]{entry['level']}[/{level_style}]",
            entry["stage"] or "",
            entry["domain"] or "",
            (entry["message"] or "")[:80],
        )

    console.print(table)


@app.command()
def stats(
    config: Path | None = typer.Option(None, "--config", "-c", help="Config file"),
) -> None:
    """Show translated and missing key counts per locale and domain."""
    settings = get_settings(config)
    db = get_database(settings)

    try:
        rows = db.get_statistics()
    finally:
        db.close()

    if not rows:
        console.print("[yellow]No translation keys in database[/yellow]")
        return

    table = Table(title="Translation Statistics")
    table.add_column("Locale", style="cyan")
    table.add_column("Domain")
    table.add_column("Keys", justify="right")
    table.add_column("Translated", justify="right", style="green")
    table.add_column("Missing", justify="right", style="yellow")
    for row in rows:
        table.add_row(
            row["locale"],
            row["domain"],
            str(row["total"]),
            str(row["translated"]),
            str(row["missing"]),
        )
    console.print(table)


@app.command()
def init(
    output_path: Path = typer.Option(
        Path("config.yaml"),
        "--output",
        "-o",
        help="Output path for config file",
    ),
) -> None:
    """Generate a default configuration file."""
    if output_path.exists():
        overwrite = typer.confirm(f"{output_path} already exists. Overwrite?")
        if not overwrite:
            console.print(f"[yellow]Kept the existing {output_path}[/yellow]")
            return

    create_default_config(output_path)
    console.print(f"[green]Created config file: {output_path}[/green]")
    console.print("\nStore your DeepL key, then run:")
    console.print("  translate-keys set-api-key <KEY> --config config.yaml")
    console.print("  translate-keys export de_DE --simulate --config config.yaml")


def main() -> None:
    """Entry point for CLI."""
    app()


if __name__ == "__main__":
    main()
