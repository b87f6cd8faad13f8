"""Command-line interface for siterisk."""

import logging
import warnings
import webbrowser
from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from siterisk import __version__
from siterisk.config import load_config
from siterisk.exceptions import MalformedRowWarning, SiteRiskError
from siterisk.scoring.categories import DEFAULT_CATEGORIES
from siterisk.scoring.factors import ScoringConfig
from siterisk.services.loader import load_rows
from siterisk.services.pipeline import run_analysis
from siterisk.services.render import write_html
from siterisk.services.report import UNNAMED_SITE, ViewModel

app = typer.Typer(
    name="siterisk",
    help="Oversharing risk scoring for collaboration sites",
    add_completion=False,
)
console = Console()


def version_callback(value: bool):
    if value:
        console.print(f"siterisk version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
):
    """siterisk - Oversharing risk scoring for collaboration sites."""
    load_dotenv()


@app.command()
def analyze(
    input_file: str = typer.Argument(..., help="CSV export of site permissions"),
    output: Optional[str] = typer.Option(None, "--output", "-o", help="HTML report path (default: <input>_risk_report.html)"),
    json_path: Optional[str] = typer.Option(None, "--json", help="Also export ranked sites as JSON"),
    csv_path: Optional[str] = typer.Option(None, "--csv", help="Also export ranked sites as CSV"),
    config_file: Optional[str] = typer.Option(
        None, "--config", "-c", envvar="SITERISK_CONFIG", help="YAML/JSON file with weights and categories"
    ),
    public_site: Optional[int] = typer.Option(None, "--public-site", help="Weight for public sites"),
    eeeu: Optional[int] = typer.Option(None, "--eeeu", help="Weight for EEEU permissions"),
    everyone: Optional[int] = typer.Option(None, "--everyone", help="Weight for Everyone permissions"),
    anyone_links: Optional[int] = typer.Option(None, "--anyone-links", help="Weight for anyone links"),
    no_label: Optional[int] = typer.Option(None, "--no-label", help="Weight for missing sensitivity label"),
    high_users: Optional[int] = typer.Option(None, "--high-users", help="Weight for high user count"),
    user_threshold: Optional[int] = typer.Option(None, "--user-threshold", help="User count that counts as high"),
    top: int = typer.Option(5, "--top", "-t", help="Number of top sites to show"),
    open_report: bool = typer.Option(False, "--open", help="Open the HTML report in a browser"),
    verbose: bool = typer.Option(False, "--verbose", help="Show progress logging"),
):
    """Score every site in an export and write the risk report."""
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    input_path = Path(input_file)
    html_path = Path(output) if output else input_path.with_name(f"{input_path.stem}_risk_report.html")

    try:
        config, table = load_config(config_file)
        config = config.with_overrides(
            public_site=public_site,
            eeeu_permissions=eeeu,
            everyone_permissions=everyone,
            anyone_links=anyone_links,
            no_sensitivity_label=no_label,
            high_user_count=high_users,
            user_count_threshold=user_threshold,
        )

        rows = load_rows(input_path)
        with console.status(f"[bold blue]Scoring {len(rows)} sites...[/bold blue]"):
            # Malformed cells are already logged by the pipeline
            with warnings.catch_warnings():
                warnings.simplefilter("ignore", MalformedRowWarning)
                view_model = run_analysis(rows, config, table)
    except SiteRiskError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(1)

    try:
        write_html(view_model, html_path)
        if json_path:
            view_model.write_json(json_path)
        if csv_path:
            view_model.write_csv(csv_path)
    except OSError as e:
        console.print(f"[red]Could not write output: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    _display_results(view_model, top)

    console.print(f"\n[bold]Report:[/bold] {html_path}")
    if json_path:
        console.print(f"[bold]JSON:[/bold] {json_path}")
    if csv_path:
        console.print(f"[bold]CSV:[/bold] {csv_path}")

    if open_report:
        webbrowser.open(html_path.resolve().as_uri())


def _display_results(view_model: ViewModel, top: int):
    """Display summary and top sites in a formatted way."""
    stats = view_model.statistics

    summary = (
        f"Total sites: [bold]{stats.total_sites}[/bold]\n"
        f"High risk (7+): [bold red]{stats.high_risk_sites}[/bold red]\n"
        f"Public sites: [bold]{stats.public_sites}[/bold]\n"
        f"Sites with anyone links: [bold]{stats.sites_with_anyone_links}[/bold]\n"
        f"Average score: {stats.average_score:.1f}   Highest: {stats.max_score}"
    )
    if stats.sites_with_warnings:
        summary += f"\n[yellow]{stats.sites_with_warnings} rows had unreadable values (treated as 0)[/yellow]"
    console.print(Panel(summary, title="[bold]Risk Summary[/bold]", border_style="blue"))

    if stats.total_sites:
        dist = Table(title="Risk Levels")
        dist.add_column("Level")
        dist.add_column("Range", justify="right")
        dist.add_column("Sites", justify="right")
        for category in view_model.categories:
            dist.add_row(
                f"[{category.color}]{escape(category.name)}[/]",
                category.label,
                str(stats.category_counts.get(category.name, 0)),
            )
        console.print(dist)

    sites = view_model.top(top)
    if not sites:
        return

    table = Table(title=f"Top {len(sites)} Sites")
    table.add_column("Score", justify="right", style="bold")
    table.add_column("Level")
    table.add_column("Site", style="cyan")
    table.add_column("Users", justify="right")
    table.add_column("Reasons")
    for s in sites:
        color = s.category.color
        table.add_row(
            str(s.score),
            f"[{color}]{escape(s.category.name)}[/]",
            escape(s.site.name or UNNAMED_SITE),
            str(s.site.user_count),
            escape(s.reasons_text),
        )
    console.print(table)


@app.command()
def defaults():
    """Show the default scoring weights and risk levels."""
    weights = Table(title="Default Weights")
    weights.add_column("Setting", style="cyan")
    weights.add_column("Value", justify="right")
    for key, value in ScoringConfig().to_dict().items():
        weights.add_row(key, str(value))
    console.print(weights)

    levels = Table(title="Risk Levels")
    levels.add_column("Level")
    levels.add_column("Range", justify="right")
    for category in DEFAULT_CATEGORIES:
        levels.add_row(f"[{category.color}]{escape(category.name)}[/]", category.label)
    console.print(levels)


if __name__ == "__main__":
    app()
