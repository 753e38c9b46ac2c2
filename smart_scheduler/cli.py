from __future__ import annotations

import json
import logging
from typing import Any

import typer

from smart_scheduler.core.calendar.config import (
    calendar_config_from_request,
    load_calendar_file,
    merged_calendar,
)
from smart_scheduler.core.calendar.dates import weekday_name
from smart_scheduler.core.errors import RequestLoadError, ScheduleError
from smart_scheduler.core.io.load_request import load_request
from smart_scheduler.core.model import ScheduleResult
from smart_scheduler.core.schedule.schedule_tasks import build_schedule
from smart_scheduler.core.sequence.sequence_tasks import sequence_tasks
from smart_scheduler.core.validate.build_registry import summarize_registry, validate_tasks

app = typer.Typer(add_completion=False, no_args_is_help=True)


@app.callback()
def _callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log scheduling progress to stderr"),
) -> None:
    """Smart Scheduler CLI."""
    if verbose:
        logging.basicConfig(
            level=logging.INFO, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s"
        )
    return


def _to_item(e: ScheduleError) -> dict:
    return {
        "code": e.code,
        "kind": type(e).__name__,
        "message": e.message,
        "file": e.file,
        "path": e.path,
    }


def _emit_json(command: str, *, ok: bool, exit_code: int, errors: list[ScheduleError], **extra: Any) -> None:
    payload = {
        "tool": "smart-scheduler",
        "command": command,
        "ok": ok,
        "error_count": len(errors),
        "errors": [_to_item(e) for e in errors],
        **extra,
    }
    typer.echo(json.dumps(payload, indent=2, sort_keys=True))
    raise typer.Exit(code=exit_code)


def _check_format(format: str, code: str) -> None:
    if format not in ("text", "json"):
        err = ScheduleError(
            code=code,
            message=f"unknown format: {format} (choose one of: text, json)",
            file=None,
            path="format",
        )
        _print_errors([err])
        raise typer.Exit(code=2)


@app.command("validate")
def validate(
    path: str = typer.Argument(..., help="Path to a request file (.yaml/.yml/.json)"),
    format: str = typer.Option("text", "--format", help="Output format: text|json"),
) -> None:
    """Validate the tasks and calendar fields of a request file and show the recommended order."""
    _check_format(format, "E_VALIDATE_UNKNOWN_FORMAT")

    try:
        request = load_request(path)
    except RequestLoadError as e:
        if format == "json":
            _emit_json("validate", ok=False, exit_code=1, errors=[e], summary=None)
        _print_errors([e])
        raise typer.Exit(code=1)

    registry, errors = validate_tasks(request.get("tasks"), file=request.get("__file__"))
    try:
        calendar_config_from_request(request, file=request.get("__file__"))
    except ScheduleError as e:
        errors = [e] + errors
    if errors:
        if format == "json":
            _emit_json("validate", ok=False, exit_code=2, errors=errors, summary=None)
        _print_errors(errors)
        raise typer.Exit(code=2)

    assert registry is not None

    try:
        order = sequence_tasks(registry)
    except ScheduleError as e:
        if format == "json":
            _emit_json("validate", ok=False, exit_code=2, errors=[e], summary=None)
        _print_errors([e])
        raise typer.Exit(code=2)

    if format == "text":
        typer.echo(summarize_registry(registry, order))
        return

    summary = {
        "task_count": len(registry.tasks_by_title),
        "total_hours": sum(t.estimated_hours for t in registry.tasks_by_title.values()),
        "recommended_order": order,
    }
    _emit_json("validate", ok=True, exit_code=0, errors=[], summary=summary)


@app.command("schedule")
def schedule(
    path: str = typer.Argument(..., help="Path to a request file (.yaml/.yml/.json)"),
    format: str = typer.Option("text", "--format", help="Output format: text|json"),
    hours_per_day: float | None = typer.Option(
        None, "--hours-per-day", help="Override workHoursPerDay"
    ),
    work_days: str | None = typer.Option(
        None, "--work-days", help="Override workDays, comma separated (e.g. Mon,Tue,Wed)"
    ),
    start_date: str | None = typer.Option(
        None, "--start-date", help="Override startDate (YYYY-MM-DD)"
    ),
    calendar_file: str | None = typer.Option(
        None, "--calendar-file", help="Optional YAML file with calendar defaults"
    ),
) -> None:
    """Compute a day-by-day schedule for a request file."""
    _check_format(format, "E_SCHEDULE_UNKNOWN_FORMAT")

    try:
        request = load_request(path)
    except RequestLoadError as e:
        if format == "json":
            _emit_json("schedule", ok=False, exit_code=1, errors=[e], result=None)
        _print_errors([e])
        raise typer.Exit(code=1)

    file_layer: dict[str, Any] = {}
    if calendar_file:
        try:
            file_layer = load_calendar_file(calendar_file)
        except RequestLoadError as e:
            if format == "json":
                _emit_json("schedule", ok=False, exit_code=1, errors=[e], result=None)
            _print_errors([e])
            raise typer.Exit(code=1)
        except ScheduleError as e:
            if format == "json":
                _emit_json("schedule", ok=False, exit_code=2, errors=[e], result=None)
            _print_errors([e])
            raise typer.Exit(code=2)

    cli_layer = {
        "workHoursPerDay": hours_per_day,
        "workDays": [d.strip() for d in work_days.split(",") if d.strip()] if work_days is not None else None,
        "startDate": start_date,
    }

    try:
        calendar = merged_calendar(file_layer, request, cli_layer)
        config = calendar_config_from_request(calendar, file=request.get("__file__"))
        result = build_schedule(request.get("tasks"), config, file=request.get("__file__"))
    except ScheduleError as e:
        if format == "json":
            _emit_json("schedule", ok=False, exit_code=2, errors=[e], result=None)
        _print_errors([e])
        raise typer.Exit(code=2)

    if format == "json":
        _emit_json("schedule", ok=True, exit_code=0, errors=[], result=result.to_dict())

    typer.echo(_format_schedule(result))


def _format_schedule(result: ScheduleResult) -> str:
    lines = ["Order: " + ", ".join(result.recommended_order)]
    for rec in result.schedule:
        allocs = ", ".join(f"{a.title} ({a.hours:g}h)" for a in rec.allocations)
        lines.append(f"{rec.day.isoformat()} {weekday_name(rec.day)}: {allocs}")
    if result.warnings:
        lines.append(f"Warnings ({len(result.warnings)}):")
        lines.extend(f"- {w}" for w in result.warnings)
    return "\n".join(lines)


def _print_errors(errors: list[ScheduleError]) -> None:
    for e in errors:
        typer.echo(str(e), err=True)


def main() -> None:
    app(prog_name="smart-scheduler")


cli = typer.main.get_command(app)

if __name__ == "__main__":
    main()
