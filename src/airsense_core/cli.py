from __future__ import annotations

from pathlib import Path
from typing import Any

import typer

from airsense_core.config import DEFAULT_CONFIG_PATH, AppConfig, load_config
from airsense_core.io.read import load_entity_series, load_json
from airsense_core.io.write import write_summary, write_table
from airsense_core.limits.messages import (
    FIELD_LABELS,
    format_days,
    remediation_message,
    upgrade_benefits,
)
from airsense_core.limits.table import (
    LIMIT_FIELDS,
    PLAN_LIMITS,
    PLAN_TIERS,
    normalize_limit_field,
    normalize_plan_tier,
)
from airsense_core.limits.validator import validate_plan_limit
from airsense_core.logging import configure_logging
from airsense_core.report.summary import build_entity_reports, summarize_forecast
from airsense_core.series.align import align_series, combine_observations
from airsense_core.series.frames import aligned_frame, report_frame

app = typer.Typer(no_args_is_help=True, add_completion=False)


def _load_app_config(config_path: Path | None) -> AppConfig:
    return load_config(config_path)


def _setup(config_path: Path | None) -> AppConfig:
    cfg = _load_app_config(config_path)
    configure_logging(cfg.logging.level)
    return cfg


def _require_field(field: str) -> str:
    try:
        return normalize_limit_field(field)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--field") from exc


def _read_series(input_path: Path) -> dict[str, list[dict[str, Any]]]:
    try:
        return load_entity_series(input_path)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--input") from exc


@app.command()
def validate(
    plan: str | None = typer.Option(None, help="Plan tier: free, pro or enterprise."),
    field: str = typer.Option(..., help=f"One of: {', '.join(LIMIT_FIELDS)}."),
    value: float = typer.Option(..., help="Requested number of days."),
    config: Path | None = typer.Option(
        None,
        exists=True,
        readable=True,
        resolve_path=True,
        help=f"YAML config. Defaults to {DEFAULT_CONFIG_PATH} when present.",
    ),
) -> None:
    """Check a requested day count against the plan ceiling."""
    _setup(config)
    result = validate_plan_limit(plan, _require_field(field), value)
    label = FIELD_LABELS[result.field]
    if result.accepted:
        typer.echo(
            f"Accepted: {label} = {format_days(result.requested_value)} "
            f"(max {result.ceiling} days on {result.tier} plan)"
        )
        return

    typer.echo("Plan Limit Exceeded")
    typer.echo(remediation_message(result))
    for line in upgrade_benefits(result.tier):
        typer.echo(f"- {line}")
    raise typer.Exit(code=1)


@app.command()
def limits(
    plan: str | None = typer.Option(None, help="Show a single tier instead of the full table."),
) -> None:
    """Print the per-plan ceiling table in days."""
    tiers = PLAN_TIERS if plan is None else (normalize_plan_tier(plan),)
    width = max(len(label) for label in FIELD_LABELS.values())
    typer.echo(" " * width + "".join(f"{tier:>12}" for tier in tiers))
    for field in LIMIT_FIELDS:
        cells = "".join(f"{PLAN_LIMITS[tier][field]:>12}" for tier in tiers)
        typer.echo(f"{FIELD_LABELS[field]:<{width}}{cells}")


@app.command()
def align(
    input_path: Path = typer.Option(
        ..., "--input", exists=True, readable=True, resolve_path=True
    ),
    out: Path = typer.Option(Path("out/aligned.csv"), resolve_path=True),
    config: Path | None = typer.Option(
        None,
        exists=True,
        readable=True,
        resolve_path=True,
        help=f"YAML config. Defaults to {DEFAULT_CONFIG_PATH} when present.",
    ),
) -> None:
    """Merge per-entity forecast series into one timestamp-ordered table."""
    cfg = _setup(config)
    series = _read_series(input_path)
    rows = align_series(series)
    path = write_table(
        aligned_frame(rows, list(series)), out, default_fmt=cfg.outputs.tables_format
    )
    typer.echo(f"Aligned {len(rows)} rows. Table: {path}")


@app.command()
def combine(
    input_path: Path = typer.Option(
        ..., "--input", exists=True, readable=True, resolve_path=True
    ),
    out: Path = typer.Option(Path("out/combined.csv"), resolve_path=True),
    value_field: str | None = typer.Option(
        None,
        help="Observation value field. Falls back to observations.value_field in config.",
    ),
    config: Path | None = typer.Option(
        None,
        exists=True,
        readable=True,
        resolve_path=True,
        help=f"YAML config. Defaults to {DEFAULT_CONFIG_PATH} when present.",
    ),
) -> None:
    """Merge per-entity observation series for side-by-side comparison."""
    cfg = _setup(config)
    series = _read_series(input_path)
    rows = combine_observations(
        series,
        value_field=value_field or cfg.observations.value_field,
    )
    path = write_table(
        aligned_frame(rows, list(series)), out, default_fmt=cfg.outputs.tables_format
    )
    typer.echo(f"Combined {len(rows)} rows. Table: {path}")


@app.command()
def report(
    input_path: Path = typer.Option(
        ..., "--input", exists=True, readable=True, resolve_path=True
    ),
    out: Path = typer.Option(Path("out/report.csv"), resolve_path=True),
    config: Path | None = typer.Option(
        None,
        exists=True,
        readable=True,
        resolve_path=True,
        help=f"YAML config. Defaults to {DEFAULT_CONFIG_PATH} when present.",
    ),
) -> None:
    """Build per-entity forecast report rows and an overview summary."""
    cfg = _setup(config)
    payload = load_json(input_path)
    series = _read_series(input_path)
    rows = align_series(series)
    reports = build_entity_reports(
        rows,
        payload.get("summary"),
        [entity for entity, points in series.items() if points],
        hours_per_day=cfg.report.hours_per_day,
        unit=cfg.report.unit,
    )
    table_path = write_table(report_frame(reports), out, default_fmt=cfg.outputs.tables_format)

    overview = summarize_forecast(payload).to_dict()
    overview["entities_without_summary"] = sorted(
        entity for entity, entity_rows in reports.items() if not entity_rows
    )
    overview_path = write_summary(overview, out.with_name(f"{out.stem}_overview.json"))
    typer.echo(f"Report complete. Table: {table_path}")
    typer.echo(f"- overview: {overview_path}")


if __name__ == "__main__":
    app()
