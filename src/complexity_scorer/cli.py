"""CLI for the Complexity Scoring Engine.

Provides command-line interface for scoring project records and
inspecting the rubric catalog.
"""

import json
import sys
from pathlib import Path
from typing import Optional

import click
import yaml
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .catalog import get_default_catalog, load_rubric_catalog
from .config import find_config_file, get_config, load_config, reset_config, save_default_config
from .engine import ComplexityEngine
from .schema import KnowledgeAreaComplexity, Priority, ProjectComplexityProfile

console = Console()

PRIORITY_STYLES = {
    Priority.CRITICAL: "bold red",
    Priority.HIGH: "red",
    Priority.MEDIUM: "yellow",
    Priority.LOW: "dim",
}


@click.group()
@click.version_option(version="1.0.0", prog_name="complexity-scorer")
def main():
    """PMBOK Complexity Scoring Engine.

    Scores project complexity across the PMBOK knowledge areas and
    recommends the project documents worth producing.
    """
    pass


@main.command("analyze")
@click.argument("project_file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--config", "-c",
    type=click.Path(exists=True, dir_okay=False),
    help="Path to scorer configuration YAML"
)
@click.option(
    "--out", "-o",
    type=click.Path(),
    help="Output file for JSON results"
)
@click.option(
    "--json-output", "-j",
    is_flag=True,
    help="Output raw JSON instead of formatted text"
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    help="Show factor breakdown for every area"
)
def analyze_cmd(
    project_file: str,
    config: Optional[str],
    out: Optional[str],
    json_output: bool,
    verbose: bool,
):
    """Score a project record (JSON or YAML).

    The file may hold a single project or a list of projects.

    Examples:
        complexity-scorer analyze project.json
        complexity-scorer analyze projects.yaml --json-output --out profiles.json
    """
    try:
        _load_scorer_config(config)
        engine = ComplexityEngine(config=get_config())

        data = _read_project_file(Path(project_file))
        if isinstance(data, list):
            profiles = engine.analyze_many(data)
        else:
            profiles = [engine.analyze(data)]

        if json_output:
            output_json(profiles, out)
        else:
            for profile in profiles:
                display_profile(profile, verbose)
            if out:
                output_json(profiles, out)
                console.print(f"\n[green]Results saved to {out}[/green]")

    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)


@main.command("rubrics")
@click.argument("area", required=False)
@click.option(
    "--catalog", "-r",
    type=click.Path(exists=True, dir_okay=False),
    help="Rubric catalog YAML (default: packaged catalog)"
)
def rubrics_cmd(area: Optional[str], catalog: Optional[str]):
    """Inspect the rubric catalog.

    Without AREA, lists every rubric and its factors. With AREA, shows
    the level criteria of that area's factors.
    """
    try:
        cat = load_rubric_catalog(catalog) if catalog else get_default_catalog()

        if area:
            rubric = cat.get_rubric(area.strip().lower())
            console.print(f"\n[bold blue]{rubric.area.value.title()} Rubric[/bold blue]")
            if rubric.description:
                console.print(rubric.description)
            console.print()
            for factor in rubric.factors:
                console.print(
                    f"[bold cyan]{factor.name}[/bold cyan] "
                    f"(weight {factor.weight:.2f}, reads {factor.attribute})"
                )
                table = Table(show_header=True, header_style="bold")
                table.add_column("Level", justify="right")
                table.add_column("From", justify="right")
                table.add_column("Description")
                table.add_column("Triggers")
                for criteria in factor.criteria:
                    table.add_row(
                        str(criteria.level),
                        f"{criteria.min_value:g}",
                        criteria.description,
                        ", ".join(a.value for a in criteria.secondary_triggers) or "-",
                    )
                console.print(table)
                console.print()
            return

        console.print(f"\n[bold blue]Rubric Catalog[/bold blue]")
        console.print(f"Version: {cat.version}")
        console.print()

        table = Table(show_header=True, header_style="bold")
        table.add_column("Area", style="cyan")
        table.add_column("Factor")
        table.add_column("Weight", justify="right")
        table.add_column("Attribute")
        for rubric in cat.rubrics:
            for i, factor in enumerate(rubric.factors):
                table.add_row(
                    rubric.area.value if i == 0 else "",
                    factor.name,
                    f"{factor.weight:.2f}",
                    factor.attribute,
                )
        console.print(table)

    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)


@main.command("init-config")
@click.option(
    "--out", "-o",
    type=click.Path(),
    default="complexity-config.yaml",
    help="Output path for the configuration file"
)
@click.option(
    "--force", "-f",
    is_flag=True,
    help="Overwrite existing config file"
)
def init_config_cmd(out: str, force: bool):
    """Generate a default scorer configuration file.

    Example:
        complexity-scorer init-config --out my-config.yaml
    """
    out_path = Path(out)
    if out_path.exists() and not force:
        console.print(f"[red]Error:[/red] Config file already exists: {out}")
        console.print("Use --force to overwrite")
        sys.exit(1)

    try:
        save_default_config(out_path)
        console.print(f"[green]✓[/green] Config file created: {out}")
        console.print("\nThis file configures:")
        console.print("  • primary_weights - How much each primary area contributes to overall complexity")
        console.print("  • secondary_derivation - Coefficients and multipliers for derived areas")
        console.print("  • priority - Score cutoffs for documentation priority")
        console.print("\nThe scorer will look for config in this order:")
        console.print("  1. COMPLEXITY_SCORER_CONFIG environment variable")
        console.print("  2. ./complexity-config.yaml (current directory)")
        console.print("  3. ~/.config/complexity-scorer/config.yaml")
    except Exception as e:
        console.print(f"[red]Error creating config:[/red] {e}")
        sys.exit(1)


def _load_scorer_config(config: Optional[str]) -> None:
    """Load an explicit config, or the first one found on the search path."""
    if config:
        load_config(Path(config))
        return

    config_path = find_config_file()
    if config_path:
        try:
            load_config(config_path)
        except Exception as e:
            console.print(f"[yellow]Warning:[/yellow] Could not load config: {e}")
            reset_config()
    else:
        reset_config()


def _read_project_file(path: Path):
    """Read project data from a JSON or YAML file."""
    with open(path, "r", encoding="utf-8") as f:
        if path.suffix.lower() == ".json":
            return json.load(f)
        return yaml.safe_load(f)


def output_json(profiles: list[ProjectComplexityProfile], out_path: Optional[str]):
    """Output profiles as JSON: an object for one project, a list otherwise."""
    if len(profiles) == 1:
        json_str = profiles[0].model_dump_json(indent=2)
    else:
        json_str = json.dumps([p.model_dump(mode="json") for p in profiles], indent=2)

    if out_path:
        with open(out_path, "w", encoding="utf-8") as f:
            f.write(json_str)
    else:
        print(json_str)


def display_profile(profile: ProjectComplexityProfile, verbose: bool):
    """Display a complexity profile in formatted text."""
    summary = profile.summary
    console.print(Panel(
        f"[bold]{profile.project_name}[/bold] ({profile.project_id})\n\n"
        f"Overall Complexity: [bold cyan]{profile.overall_complexity:.2f}/5[/bold cyan] "
        f"({summary.overall_level.value})\n"
        f"Areas needing documentation: {summary.primary_areas_requiring_documentation} primary, "
        f"{summary.secondary_areas_requiring_documentation} secondary\n"
        f"Recommendations: {summary.recommendation_count}",
        title="Complexity Summary",
    ))

    table = Table(show_header=True, header_style="bold")
    table.add_column("Area", style="cyan")
    table.add_column("Kind")
    table.add_column("Score", justify="right")
    table.add_column("Level")
    table.add_column("Weight", justify="right")
    table.add_column("Docs")
    for result in profile.all_areas():
        table.add_row(
            result.area.value,
            "primary" if result.area.is_primary else "secondary",
            f"{result.complexity_score:.2f}",
            result.complexity_level.value,
            f"{result.weight:.2f}" if result.weight is not None else "-",
            "[green]yes[/green]" if result.documentation_required else "[dim]no[/dim]",
        )
    console.print(table)

    if verbose:
        for result in profile.all_areas():
            _display_area_detail(result)

    if profile.documentation_recommendations:
        console.print("\n[bold]Recommended Documents:[/bold]\n")
        for rec in profile.documentation_recommendations:
            style = PRIORITY_STYLES[rec.priority]
            docs = ", ".join(d.value for d in rec.document_types)
            console.print(f"  [{style}]{rec.priority.value:<8}[/{style}] {docs}")
            console.print(f"           [dim]{rec.reason}[/dim]")
    else:
        console.print("\n[green]No additional documentation recommended.[/green]")
    console.print()


def _display_area_detail(result: KnowledgeAreaComplexity):
    console.print(f"\n[bold]{result.area.value.title()}[/bold]: {result.reasoning}")
    for factor in result.factors:
        console.print(f"  • {factor.name} [bold]{factor.score:g}[/bold] - {factor.description}")
    if result.secondary_triggers:
        console.print(f"  [yellow]Triggers:[/yellow] {', '.join(a.value for a in result.secondary_triggers)}")


if __name__ == "__main__":
    main()
