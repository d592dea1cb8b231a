"""CLI for the CICTT Hazard Scorer.

Analyzes incident reports and other safety documents against the CICTT
taxonomy and lets an analyst adjust the result from the command line.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import click
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from . import __version__
from .config import find_config_file, load_config, save_default_config
from .editor import add_manual, clamp_weight, set_enabled, set_weight
from .engine import HazardEngine
from .exceptions import HazardScorerError
from .export import save_report, to_json
from .schema import AnalysisResult, CategoryResult, RiskLevel
from .scorer import estimate_risk
from .taxonomy import Taxonomy, get_taxonomy, reset_taxonomy

console = Console()
logger = logging.getLogger(__name__)

RISK_STYLES = {
    RiskLevel.CRITICAL: "bold red",
    RiskLevel.HIGH: "dark_orange",
    RiskLevel.MEDIUM: "yellow",
    RiskLevel.LOW: "green",
}

CLI_ERRORS = (HazardScorerError, ValidationError, OSError)


def configure_logging(verbose: bool) -> None:
    """Route library logging through rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@click.group()
@click.version_option(version=__version__, prog_name="cictt-scorer")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    help="Path to hazard-config.yaml (default: search standard locations)"
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def main(config_path: Optional[str], verbose: bool):
    """CICTT Hazard Scorer.

    Classifies aviation safety text against the CICTT occurrence taxonomy
    with keyword-weighted risk scores.
    """
    configure_logging(verbose)

    path = Path(config_path) if config_path else find_config_file()
    if path:
        try:
            load_config(path)
        except CLI_ERRORS as e:
            console.print(f"[red]Error loading config {path}: {e}[/red]")
            sys.exit(1)
        reset_taxonomy()
        logger.debug("Using configuration from %s", path)


@main.command("analyze")
@click.argument("file", type=click.File("r", encoding="utf-8"), required=False)
@click.option("--text", "-t", help="Text to analyze (instead of FILE or stdin)")
@click.option(
    "--disable", "-d",
    multiple=True,
    help="Exclude a category from the overall score (repeatable)"
)
@click.option(
    "--weight", "-w",
    multiple=True,
    help="Per-category weight multiplier (format: CODE=0.5..2.0, repeatable)"
)
@click.option(
    "--add",
    multiple=True,
    help="Manually add a category with no textual evidence (repeatable)"
)
@click.option(
    "--out", "-o",
    type=click.Path(),
    help="Save the JSON report to this file"
)
@click.option(
    "--json-output", "-j",
    is_flag=True,
    help="Output raw JSON instead of formatted text"
)
@click.option(
    "--all", "show_all",
    is_flag=True,
    help="List every category, not only detected ones"
)
def analyze_cmd(
    file,
    text: Optional[str],
    disable: tuple,
    weight: tuple,
    add: tuple,
    out: Optional[str],
    json_output: bool,
    show_all: bool,
):
    """Analyze a document against the CICTT taxonomy.

    Examples:
        cictt-scorer analyze report.txt
        cictt-scorer analyze --text "Crew reported wind shear on approach"
        cictt-scorer analyze report.txt -d ICE -w FUEL=2.0 --add BIRD -o report.json
    """
    if text is None:
        source = file or click.get_text_stream("stdin")
        text = source.read()

    try:
        engine = HazardEngine()
        result = engine.analyze(text)
        result = apply_edits(engine, result, disable, weight, add)

        if json_output:
            click.echo(to_json(result))
        else:
            display_result(result, show_all)

        if out:
            saved = save_report(result, out)
            if not json_output:
                console.print(f"\n[green]Report saved to {saved}[/green]")

    except CLI_ERRORS as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)


def apply_edits(
    engine: HazardEngine,
    result: AnalysisResult,
    disable: tuple,
    weight: tuple,
    add: tuple,
) -> AnalysisResult:
    """Apply command-line analyst edits through the category editor."""
    if not (disable or weight or add):
        return result

    categories = list(result.categories)

    for code in add:
        updated = add_manual(categories, code, engine.taxonomy)
        if updated is None:
            console.print(f"[yellow]Cannot add {code}: unknown code or already present[/yellow]")
        else:
            categories = updated

    for code in disable:
        updated = set_enabled(categories, code, False)
        if updated is None:
            console.print(f"[yellow]Cannot disable {code}: not in result set[/yellow]")
        else:
            categories = updated

    for entry in weight:
        code, sep, raw_value = entry.partition("=")
        try:
            value = float(raw_value) if sep else None
        except ValueError:
            value = None
        if value is None:
            console.print(f"[yellow]Ignoring weight '{entry}': expected CODE=NUMBER[/yellow]")
            continue
        updated = set_weight(categories, code.strip(), clamp_weight(value))
        if updated is None:
            console.print(f"[yellow]Cannot weight {code}: not in result set[/yellow]")
        else:
            categories = updated

    return engine.apply_categories(result, categories)


@main.command("estimate")
@click.argument("file", type=click.File("r", encoding="utf-8"), required=False)
@click.option("--text", "-t", help="Text to estimate (instead of FILE or stdin)")
@click.option("--code", "-c", help="Only use this category's keywords")
def estimate_cmd(file, text: Optional[str], code: Optional[str]):
    """Quick keyword-density risk estimate (average matched weight x 10).

    Examples:
        cictt-scorer estimate report.txt
        cictt-scorer estimate --text "Deep stall after icing" --code LOC-I
    """
    if text is None:
        source = file or click.get_text_stream("stdin")
        text = source.read()

    try:
        taxonomy = get_taxonomy()
        if code and code not in taxonomy:
            console.print(f"[red]Category not found: {code}[/red]")
            sys.exit(1)
        score = estimate_risk(text, code, taxonomy)
    except CLI_ERRORS as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)

    level = RiskLevel.from_score(score)
    style = RISK_STYLES[level]
    scope = code or "all categories"
    console.print(f"Estimated risk ({scope}): [{style}]{score}/100 - {level.value}[/{style}]")


@main.command("categories")
@click.option("--group", "-g", help="Only show categories in this group")
def categories_cmd(group: Optional[str]):
    """List taxonomy categories."""
    try:
        taxonomy = get_taxonomy()
    except CLI_ERRORS as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)

    categories = taxonomy.by_group(group) if group else list(taxonomy)
    if group and not categories:
        console.print(f"[red]Unknown group: {group}[/red]")
        sys.exit(1)

    table = Table(show_header=True, header_style="bold")
    table.add_column("Code", style="cyan", no_wrap=True)
    table.add_column("Name")
    table.add_column("Group")
    table.add_column("Keywords", justify="right")

    for category in categories:
        table.add_row(category.code, category.name, category.group, str(len(category.keywords)))

    console.print(table)
    console.print(f"\n[dim]{len(categories)} of {len(taxonomy)} categories[/dim]")


@main.command("groups")
def groups_cmd():
    """List taxonomy groups in display order."""
    try:
        taxonomy = get_taxonomy()
    except CLI_ERRORS as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)

    for group in taxonomy.groups:
        codes = ", ".join(c.code for c in taxonomy.by_group(group))
        console.print(f"[bold]{group}[/bold]: {codes}")


@main.command("inspect")
@click.argument("code")
def inspect_cmd(code: str):
    """Show one category with its keyword weights."""
    try:
        category = get_taxonomy().get(code)
    except CLI_ERRORS as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)

    if category is None:
        console.print(f"[red]Category not found: {code}[/red]")
        sys.exit(1)

    console.print(f"\n[bold cyan]{category.code}[/bold cyan] {category.name}")
    console.print(f"Group: {category.group}")
    if category.description:
        console.print(f"[dim]{category.description}[/dim]")
    console.print()

    table = Table(show_header=True, header_style="bold")
    table.add_column("Keyword")
    table.add_column("Weight", justify="right")
    for phrase, weight in category.keywords.items():
        table.add_row(phrase, str(weight))
    console.print(table)
    console.print(f"\n[dim]Total weight: {category.total_weight}[/dim]")


@main.command("search")
@click.argument("term")
@click.option("--threshold", "-t", default=0, type=int, help="Only keywords weighted above this")
def search_cmd(term: str, threshold: int):
    """Find categories whose keywords contain TERM."""
    try:
        matches = get_taxonomy().search(term, threshold)
    except CLI_ERRORS as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)

    if not matches:
        console.print(f"[yellow]No categories with keywords matching '{term}'[/yellow]")
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("Code", style="cyan", no_wrap=True)
    table.add_column("Name")
    table.add_column("Max Weight", justify="right")
    for category, max_weight in matches:
        table.add_row(category.code, category.name, str(max_weight))
    console.print(table)


@main.command("validate")
@click.option(
    "--taxonomy", "taxonomy_path",
    type=click.Path(exists=True, dir_okay=False),
    help="Taxonomy YAML file to validate (default: the active taxonomy)"
)
def validate_cmd(taxonomy_path: Optional[str]):
    """Validate a taxonomy file."""
    try:
        taxonomy = Taxonomy.from_file(Path(taxonomy_path)) if taxonomy_path else get_taxonomy()
    except CLI_ERRORS as e:
        console.print(f"[red]✗ Taxonomy invalid: {e}[/red]")
        sys.exit(1)

    console.print(
        f"[green]✓ Taxonomy valid: {len(taxonomy)} categories in "
        f"{len(taxonomy.groups)} groups[/green]"
    )


@main.command("init-config")
@click.argument("path", type=click.Path(dir_okay=False), default="hazard-config.yaml")
def init_config_cmd(path: str):
    """Write the default configuration to PATH."""
    try:
        save_default_config(Path(path))
    except OSError as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)
    console.print(f"[green]Default configuration written to {path}[/green]")


def display_result(result: AnalysisResult, show_all: bool = False):
    """Display an analysis result in formatted text."""
    style = RISK_STYLES[result.overall_risk_level]
    console.print(Panel(
        f"[{style}]{result.overall_risk_score}/100 - {result.overall_risk_level.value}[/{style}]\n\n"
        f"{result.summary}",
        title="CICTT Hazard Analysis",
        subtitle=f"{result.detected_count} of {result.total_categories} categories detected",
    ))

    rows = result.categories if show_all else [
        c for c in result.categories if c.score > 0 or c.is_manually_added
    ]
    if not rows:
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("Code", style="cyan", no_wrap=True)
    table.add_column("Category")
    table.add_column("Group")
    table.add_column("Score", justify="right")
    table.add_column("Risk")
    table.add_column("Weight", justify="right")
    table.add_column("Matched Keywords")

    for category in rows:
        table.add_row(*_category_row(category))

    console.print(table)


def _category_row(category: CategoryResult) -> list[str]:
    style = RISK_STYLES[category.risk_level]
    name = category.name + (" [dim](manual)[/dim]" if category.is_manually_added else "")
    if not category.is_enabled:
        name = f"[strike]{category.name}[/strike] [dim](disabled)[/dim]"

    keywords = ", ".join(
        f"{k.word} x{k.count}" if k.count > 1 else k.word
        for k in category.matched_keywords[:5]
    )
    if len(category.matched_keywords) > 5:
        keywords += f" (+{len(category.matched_keywords) - 5})"

    return [
        category.code,
        name,
        category.group,
        str(category.score),
        f"[{style}]{category.risk_level.value}[/{style}]",
        f"{category.user_weight:.1f}",
        keywords or "-",
    ]


if __name__ == "__main__":
    main()
