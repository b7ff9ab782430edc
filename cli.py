#!/usr/bin/env python3
"""
Sprout CLI

Command-line interface for WHO growth percentiles, percentile charts and
growth velocity.
"""

import json
import logging
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

console = Console()


def setup_paths():
    """Add the project root to sys.path for imports."""
    root = Path(__file__).parent
    if str(root) not in sys.path:
        sys.path.insert(0, str(root))


setup_paths()


def _format(value: Optional[float], suffix: str = "") -> str:
    return "-" if value is None else f"{value}{suffix}"


@click.group()
@click.version_option(version="0.1.0", prog_name="sprout")
@click.option("--verbose", "-v", is_flag=True, help="Show engine log messages")
@click.option("--unknown-sex", type=click.Choice(["male", "reject"]),
              help="How to treat a sex other than male/female")
@click.option("--backend", type=click.Choice(["approximation", "scipy"]),
              help="Normal distribution implementation")
@click.pass_context
def cli(ctx: click.Context, verbose: bool, unknown_sex: Optional[str], backend: Optional[str]):
    """
    Sprout - WHO Growth Percentile Calculator

    Percentiles, Z-scores, percentile curves and growth velocity for
    children from birth to 24 months.
    """
    from src.config import GrowthSettings
    from src.engines import GrowthEngine

    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=console, show_path=False)],
        )

    overrides = {}
    if unknown_sex:
        overrides["unknown_sex"] = unknown_sex
    if backend:
        overrides["normal_backend"] = backend

    try:
        settings = GrowthSettings.model_validate(
            {**GrowthSettings.from_env().model_dump(), **overrides}
        )
    except ValueError as e:
        raise click.ClickException(f"Invalid settings: {e}")

    ctx.obj = GrowthEngine(settings)


@cli.command()
@click.option("--sex", required=True, help="Child's sex (male or female)")
@click.option("--dob", required=True, type=click.DateTime(formats=["%Y-%m-%d"]),
              help="Date of birth (YYYY-MM-DD)")
@click.option("--date", "measured", required=True, type=click.DateTime(formats=["%Y-%m-%d"]),
              help="Measurement date (YYYY-MM-DD)")
@click.option("--weight-g", type=float, help="Weight in grams")
@click.option("--height-mm", type=float, help="Length/height in millimeters")
@click.option("--head-mm", type=float, help="Head circumference in millimeters")
@click.pass_obj
def percentile(
    engine,
    sex: str,
    dob,
    measured,
    weight_g: Optional[float],
    height_mm: Optional[float],
    head_mm: Optional[float],
):
    """
    Calculate percentiles for one set of measurements.

    Example:

        sprout percentile --sex male --dob 2024-01-01 --date 2024-07-01 --weight-g 7934
    """
    from knowledge.growth import calculate_age_in_months, interpret_percentile

    if weight_g is None and height_mm is None and head_mm is None:
        raise click.UsageError("Give at least one of --weight-g, --height-mm, --head-mm")

    try:
        result = engine.calculate_growth_percentiles(
            weight_g, height_mm, head_mm, dob.date(), measured.date(), sex
        )
    except ValueError as e:
        raise click.ClickException(str(e))

    age_months = calculate_age_in_months(dob.date(), measured.date())

    table = Table(title=f"Growth Percentiles (age {age_months:.1f} months)")
    table.add_column("Measurement", style="cyan")
    table.add_column("Recorded", justify="right")
    table.add_column("Percentile", justify="right", style="green")
    table.add_column("Z-score", justify="right")
    table.add_column("Interpretation")

    rows = [
        ("Weight", weight_g, "g", "weight", result.weight_percentile, result.weight_z),
        ("Length", height_mm, "mm", "length", result.height_percentile, result.height_z),
        ("Head circumference", head_mm, "mm", "head circumference",
         result.head_percentile, result.head_z),
    ]
    for label, recorded, unit, measure, pct, z in rows:
        if recorded is None:
            continue
        table.add_row(
            label,
            _format(recorded, f" {unit}"),
            _format(pct),
            _format(z),
            interpret_percentile(pct, measure) if pct is not None else "Not computed",
        )

    console.print(table)


@cli.command()
@click.option("--type", "measurement_type", required=True,
              type=click.Choice(["weight", "height", "head_circumference"]),
              help="Measurement type")
@click.option("--sex", required=True, help="Child's sex (male or female)")
@click.option("--start", "start_month", type=int, default=0, help="First month (default 0)")
@click.option("--end", "end_month", type=int, default=24, help="Last month (default 24)")
@click.option("--json", "as_json", is_flag=True, help="Print JSON instead of a table")
@click.pass_obj
def chart(engine, measurement_type: str, sex: str, start_month: int, end_month: int, as_json: bool):
    """
    Print percentile curves for a measurement type.

    Example:

        sprout chart --type weight --sex female --start 0 --end 12
    """
    from knowledge.growth import STANDARD_PERCENTILES

    if start_month > end_month:
        raise click.BadParameter("--start must not be after --end")

    try:
        series = engine.build_chart_series(
            measurement_type, sex, start_month=start_month, end_month=end_month
        )
    except ValueError as e:
        raise click.ClickException(str(e))

    if as_json:
        click.echo(series.model_dump_json(indent=2))
        return

    table = Table(title=f"{measurement_type.replace('_', ' ').title()}-for-age "
                        f"({series.sex.value}, {series.unit})")
    table.add_column("Month", style="cyan", justify="right")
    for p in STANDARD_PERCENTILES:
        table.add_column(f"P{p}", justify="right", style="bold" if p == 50 else None)

    for row in series.data:
        table.add_row(str(row.age_months), *(f"{row.value_at(p):.2f}" for p in STANDARD_PERCENTILES))

    console.print(table)


@cli.command()
@click.argument("records_path", type=click.Path(exists=True, dir_okay=False))
@click.option("--unit", "time_unit", type=click.Choice(["day", "week"]),
              help="Time unit (default from SPROUT_VELOCITY_UNIT, else week)")
@click.option("--json", "as_json", is_flag=True, help="Print JSON instead of tables")
@click.pass_obj
def velocity(engine, records_path: str, time_unit: Optional[str], as_json: bool):
    """
    Calculate growth velocity from a JSON file of growth records.

    The file holds a list of objects with "timestamp" and any of
    "weight_g", "height_mm", "head_circumference_mm".

    Example:

        sprout velocity records.json --unit day
    """
    from pydantic import TypeAdapter

    from src.models import GrowthRecord

    try:
        data = json.loads(Path(records_path).read_text())
        records = TypeAdapter(list[GrowthRecord]).validate_python(data)
        report = engine.calculate_growth_velocity(records, time_unit)
    except ValueError as e:
        raise click.ClickException(f"Could not read growth records: {e}")

    if as_json:
        click.echo(report.model_dump_json(indent=2))
        return

    table = Table(title=f"Growth Velocity ({report.unit_description})")
    table.add_column("From", style="cyan")
    table.add_column("To", style="cyan")
    table.add_column("Days", justify="right")
    table.add_column("Weight", justify="right")
    table.add_column("Length", justify="right")
    table.add_column("Head", justify="right")

    for point in report.velocity_data:
        table.add_row(
            point.from_date.date().isoformat(),
            point.to_date.date().isoformat(),
            str(point.days_between),
            _format(point.weight_velocity),
            _format(point.height_velocity),
            _format(point.head_circumference_velocity),
        )

    console.print(table)

    summary = report.summary
    unit = report.time_unit.value
    console.print(Panel(
        f"Measurements: {report.measurement_count}\n"
        f"Average weight velocity: {_format(summary.average_weight_velocity, f' g/{unit}')}\n"
        f"Average length velocity: {_format(summary.average_height_velocity, f' mm/{unit}')}\n"
        f"Average head velocity: {_format(summary.average_head_circumference_velocity, f' mm/{unit}')}\n"
        f"Net weight change: {_format(summary.total_weight_change, ' g')}\n"
        f"Net length change: {_format(summary.total_height_change, ' mm')}\n"
        f"Net head change: {_format(summary.total_head_circumference_change, ' mm')}",
        title="Summary",
        border_style="green",
    ))


@cli.command()
def info():
    """Show information about Sprout."""
    console.print(Panel(
        "[bold]Sprout[/bold] - WHO Growth Percentile Calculator\n\n"
        "Reference: WHO Child Growth Standards (2006), birth to 24 months",
        border_style="blue",
    ))

    console.print("\n[bold]Features:[/bold]")
    console.print("  • Weight, length and head circumference percentiles")
    console.print("  • Z-scores by the LMS method")
    console.print("  • Percentile curves (1st-99th) for charting")
    console.print("  • Growth velocity per day or per week")

    console.print("\n[bold]Quick Start:[/bold]")
    console.print("  sprout percentile --sex female --dob 2024-01-01 --date 2024-04-01 --weight-g 5800")
    console.print("  sprout chart --type height --sex male")
    console.print("  sprout velocity records.json --unit week")


def main():
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
