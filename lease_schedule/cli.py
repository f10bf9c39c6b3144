"""Command-line interface for the lease schedule parser."""

from __future__ import annotations

import json
from contextlib import closing
from pathlib import Path
from typing import Any, Optional

import typer

from .compare import compare_schedules
from .config import load_config
from .logging import configure_logging, get_logger
from .models import RawSchedule, ScheduleEntry
from .parser import parse_schedules
from .runtime import build_runtime

logger = get_logger(__name__)

app = typer.Typer(add_completion=False, help="Schedule of Notices of Leases parser")


@app.command("parse")
def parse_command(
    input_path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Raw schedules JSON file"),
    output_path: Optional[Path] = typer.Option(None, "--output", "-o", help="Write parsed JSON here"),
    workers: Optional[int] = typer.Option(None, "--workers", min=1, help="Parse entries on a thread pool"),
) -> None:
    config = load_config()
    configure_logging(config.log_level, config.log_format)

    raws = [RawSchedule.from_payload(item) for item in _read_list(input_path)]
    entries = parse_schedules(raws, max_workers=workers or config.parser_max_workers)
    logger.info("schedules_parsed", parsed=len(entries), raw=len(raws))
    _emit([entry.to_payload() for entry in entries], output_path)


@app.command("compare")
def compare_command(
    candidate_path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Parsed schedules JSON"),
    reference_path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Reference schedules JSON"),
    as_json: bool = typer.Option(False, "--json", help="Print the report as JSON"),
) -> None:
    config = load_config()
    configure_logging(config.log_level, config.log_format)

    candidate = [ScheduleEntry.from_payload(item) for item in _read_list(candidate_path)]
    reference = [ScheduleEntry.from_payload(item) for item in _read_list(reference_path)]
    report = compare_schedules(candidate, reference)

    if as_json:
        typer.echo(json.dumps(report.to_payload(), ensure_ascii=False, indent=2))
    elif report.is_empty:
        typer.echo("YES")
    else:
        typer.echo("\n".join(["NO", *report.lines()]))

    if not report.is_empty:
        raise typer.Exit(code=1)


@app.command("fetch")
def fetch_command(
    output_path: Optional[Path] = typer.Option(None, "--output", "-o", help="Write parsed JSON here"),
) -> None:
    runtime = build_runtime()
    with closing(runtime):
        entries = runtime.service.get_schedules()
        _emit([entry.to_payload() for entry in entries], output_path)


@app.command("verify")
def verify_command() -> None:
    runtime = build_runtime()
    with closing(runtime):
        runtime.service.get_schedules()
        outcome = runtime.service.verify_against_results()
        typer.echo(outcome.summary)
        if not outcome.same:
            raise typer.Exit(code=1)


@app.command("service")
def service_command(
    host: str = typer.Option("0.0.0.0", "--host", help="Service bind host"),
    port: int = typer.Option(8000, "--port", help="Service port"),
) -> None:
    import uvicorn

    uvicorn.run(
        "lease_schedule.app:create_app",
        host=host,
        port=port,
        factory=True,
        log_level="info",
    )


def _read_list(path: Path) -> list[Any]:
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise typer.BadParameter(f"{path} is not valid JSON: {exc}") from exc
    if payload is None:
        return []
    if not isinstance(payload, list):
        raise typer.BadParameter(f"{path} must contain a JSON array")
    return payload


def _emit(payload: Any, output_path: Optional[Path]) -> None:
    text = json.dumps(payload, ensure_ascii=False, indent=2)
    if output_path:
        output_path.write_text(text + "\n", encoding="utf-8")
        typer.echo(f"Wrote {len(payload)} schedule(s) to {output_path}")
    else:
        typer.echo(text)


def main():
    app()


if __name__ == "__main__":  # pragma: no cover
    main()
