"""CLI interface for the web page exercise grader."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Annotated, Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table
from rich.text import Text

from page_grader.config import GraderConfig, get_config, load_config
from page_grader.config.loader import _DEFAULT_CONFIG_PATH
from page_grader.document import SourceDocument
from page_grader.domain.errors import ConfigurationError, DocumentLoadError
from page_grader.grader import ExerciseGrader
from page_grader.validators.checker import CheckGroup, CheckResult

app = typer.Typer(
    name="page-grader",
    help="📝 Grade an HTML/CSS web page exercise",
    rich_markup_mode="rich",
    no_args_is_help=True,
)

# Sub-app for config commands
config_app = typer.Typer(
    name="config",
    help="⚙️  Manage the grader configuration",
    rich_markup_mode="rich",
    no_args_is_help=True,
)
app.add_typer(config_app, name="config")

console = Console()


@app.callback()
def main(
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Show debug logging")
    ] = False,
) -> None:
    """Grade a student web page: lint it, then check required HTML and CSS."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


# ---------------------------------------------------------------------------
# page-grader check
# ---------------------------------------------------------------------------


@app.command()
def check(
    document: Annotated[
        Optional[str], typer.Argument(help="HTML file to grade (default: index.html)")
    ] = None,
    config: Annotated[
        Optional[str], typer.Option("--config", "-c", help="Path to a JSON config file")
    ] = None,
) -> None:
    """Run every check group against a submission."""
    cfg = _load_config_or_exit(config)
    grader = ExerciseGrader(cfg)

    try:
        report = grader.grade(Path(document) if document else None)
    except DocumentLoadError as e:
        console.print(f"[bold red]❌ Error:[/] {escape(str(e))}")
        raise typer.Exit(code=1)

    for group in report.groups:
        console.print(_group_table(group))
    _print_details(report.results)

    score_color = "green" if report.is_passing else "yellow" if report.score >= 60 else "red"
    status = "✅ PASS" if report.is_passing else "❌ FAIL"
    console.print(
        Panel(
            f"Result: [bold {score_color}]{status}[/]\n"
            f"Score: [bold {score_color}]{report.score:.0f}%[/] "
            f"({report.passed}/{report.total} checks)\n"
            f"  ✅ Passed: {report.passed}  |  ❌ Failed: {report.failed}",
            title="📊 Summary",
            border_style=score_color,
        )
    )

    if not report.is_passing:
        raise typer.Exit(code=1)


# ---------------------------------------------------------------------------
# page-grader lint
# ---------------------------------------------------------------------------


@app.command()
def lint(
    document: Annotated[
        Optional[str], typer.Argument(help="HTML file to lint (default: index.html)")
    ] = None,
    config: Annotated[
        Optional[str], typer.Option("--config", "-c", help="Path to a JSON config file")
    ] = None,
) -> None:
    """Lint the markup and its stylesheet only."""
    cfg = _load_config_or_exit(config)
    path = Path(document or cfg.paths.document)

    try:
        source = SourceDocument.load(path)
    except DocumentLoadError as e:
        console.print(f"[bold red]❌ Error:[/] {escape(str(e))}")
        raise typer.Exit(code=1)

    group = ExerciseGrader(cfg).check_validity(source)
    console.print(_group_table(group))
    _print_details(group.results)

    if not group.passed:
        raise typer.Exit(code=1)


# ---------------------------------------------------------------------------
# page-grader rules
# ---------------------------------------------------------------------------


@app.command()
def rules(
    config: Annotated[
        Optional[str], typer.Option("--config", "-c", help="Path to a JSON config file")
    ] = None,
) -> None:
    """Show the rule set and expected values."""
    cfg = _load_config_or_exit(config)
    markup = cfg.markup_lint

    table = Table(title=f"📐 Rules for {cfg.exercise}", show_header=True, border_style="blue")
    table.add_column("Rule", style="cyan", width=32)
    table.add_column("Value", style="green")

    table.add_row("Document", cfg.paths.document)
    table.add_row("Stylesheet", cfg.paths.stylesheet)
    table.add_row("", "")
    table.add_row("attr-bans", ", ".join(markup.attr_bans) or "-")
    table.add_row("tag-bans", ", ".join(markup.tag_bans) or "-")
    for name in ("doctype_first", "doctype_html5", "html_req_lang", "line_end_style",
                 "indent_style", "indent_width"):
        table.add_row(name.replace("_", "-"), str(getattr(markup, name)))
    table.add_row("", "")
    for rule, severity in cfg.stylesheet_lint.rules.items():
        table.add_row(rule, severity)
    table.add_row("", "")
    table.add_row("Title placeholder", cfg.structure.title_placeholder)
    table.add_row("Author placeholder", cfg.structure.author_placeholder)
    table.add_row("Image src prefix", cfg.structure.image_src_prefix)
    table.add_row("Minimum list items", str(cfg.structure.min_list_items))
    table.add_row("Body font-size", cfg.styles.body_font_size)
    table.add_row("Body font-family", escape(cfg.styles.body_font_family_pattern))
    table.add_row("Paragraph line-height", cfg.styles.paragraph_line_height)
    table.add_row("Image max-height", cfg.styles.image_max_height)

    console.print(table)


# ---------------------------------------------------------------------------
# page-grader config show / init / validate
# ---------------------------------------------------------------------------


@config_app.command("show")
def config_show(
    config: Annotated[
        Optional[str], typer.Option("--config", "-c", help="Path to a JSON config file")
    ] = None,
) -> None:
    """Show the active configuration as JSON."""
    cfg = _load_config_or_exit(config)
    raw_json = cfg.model_dump_json(indent=2)
    console.print(
        Panel(
            Syntax(raw_json, "json", theme="monokai", line_numbers=True),
            title="⚙️  Active configuration",
            border_style="blue",
        )
    )


@config_app.command("init")
def config_init(
    output: Annotated[
        str, typer.Option("--output", "-o", help="Destination file name")
    ] = "grader_config.json",
) -> None:
    """Copy the default configuration into the current directory."""
    dest = Path(output)
    if dest.exists():
        console.print(f"[bold yellow]⚠️  File already exists:[/] {dest}")
        overwrite = typer.confirm("Overwrite it?")
        if not overwrite:
            raise typer.Abort()

    shutil.copy2(_DEFAULT_CONFIG_PATH, dest)
    console.print(
        Panel(
            f"✅ Configuration copied to: [bold green]{dest}[/]\n\n"
            "Edit it and pass it with [bold]--config[/]:\n"
            f'  page-grader check --config "{dest}"',
            title="⚙️  Config Init",
            border_style="green",
        )
    )


@config_app.command("validate")
def config_validate(
    config_file: Annotated[str, typer.Argument(help="JSON config file to validate")],
) -> None:
    """Validate a JSON configuration file."""
    path = Path(config_file)
    if not path.exists():
        console.print(f"[bold red]❌ File not found:[/] {path}")
        raise typer.Exit(code=1)

    cfg = _load_config_or_exit(config_file)
    console.print(
        Panel(
            f"✅ Valid configuration\n\n"
            f"  Exercise: [cyan]{cfg.exercise}[/]\n"
            f"  Banned attributes: [cyan]{len(cfg.markup_lint.attr_bans)}[/]\n"
            f"  Stylesheet rules: [cyan]{len(cfg.stylesheet_lint.rules)}[/]",
            title="✅ Validation",
            border_style="green",
        )
    )


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _load_config_or_exit(config: Optional[str]) -> GraderConfig:
    try:
        return load_config(Path(config)) if config else get_config()
    except (FileNotFoundError, ConfigurationError, ValidationError) as e:
        console.print(
            Panel(
                f"[bold red]❌ Invalid configuration:[/]\n\n{escape(str(e))}",
                title="❌ Configuration",
                border_style="red",
            )
        )
        raise typer.Exit(code=1)


def _group_table(group: CheckGroup) -> Table:
    table = Table(title=f"📋 {group.name}", show_header=True, border_style="blue")
    table.add_column("", width=3)
    table.add_column("Check", style="cyan", width=38)
    table.add_column("Expected", width=30)
    table.add_column("Actual", width=30)

    for r in group.results:
        style = "green" if r.passed else "red"
        table.add_row(r.icon, f"[{style}]{escape(r.rule)}[/]", escape(r.expected), escape(r.actual))
    return table


def _print_details(results: list[CheckResult]) -> None:
    for r in results:
        if not r.passed and r.details:
            console.print(Panel(Text(r.details.rstrip()), title=escape(r.rule), border_style="red"))


if __name__ == "__main__":
    app()
