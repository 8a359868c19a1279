"""CLI entrypoint for univariate linear regression training."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Any

import typer
from rich.console import Console
from rich.markup import escape

from gd_linreg.exceptions import GDLinRegError
from gd_linreg.gradient import compute_cost
from gd_linreg.models import LogRecord, Weights
from gd_linreg.pairs import load_pairs
from gd_linreg.settings import load_settings
from gd_linreg.sink import open_sink
from gd_linreg.tracing import RunTraceCollector
from gd_linreg.trainer import format_log_line, train

app = typer.Typer(
    help="Train y = w*x + b on integer pairs with batch gradient descent.",
    add_completion=False,
)
console = Console(stderr=True, soft_wrap=True)

USAGE = """\
Error: Invalid number of arguments provided.

Usage: gd-linreg <input-target pairs file> [<initial settings file>] [OPTIONS]

<input-target pairs file> (input-target.txt) example:
1 2
2 3
3 4
123 432
10 1
-10 37

<initial settings file> (settings.txt) example:
w 0.0
b 0.0
alpha 0.00001
iterations 100000
output stdout
log-every 100

Settings file explanation:
w = initial weight, b = initial bias, alpha = learning rate,
iterations = number of iterations to train (inclusive) starting from 0
(e.g. 1000 would be 0..1000 or 1001 total),
log-every = number of iterations to pass between logs (e.g. log-every 100 logs 0 100 200 ...),
output = file where the output will be written (stdout or left unspecified uses stdout)

The settings file is optional; without one the settings listed above are used.
Settings may be given in any order and any subset, so a file containing only

log-every 1000
w 100

is also valid. Settings files ending in .yaml or .yml are read as a YAML mapping
with the same keys. Command line options override the settings file.
Run with --help for the option list.
"""


def _vprint(enabled: bool, message: str) -> None:
    """Print verbose progress messages."""
    if enabled:
        console.print(f"[cyan]verbose:[/cyan] {escape(message)}")


def _warn(message: str) -> None:
    console.print(f"[yellow]{escape(message)}[/yellow]")


def _configure_trace_streaming(trace: RunTraceCollector, enabled: bool) -> None:
    """Enable live trace-event printing in verbose mode."""
    if not enabled:
        trace.set_live_sink(None)
        return

    def _sink(event: dict[str, Any]) -> None:
        parts = [
            f"trace[{event.get('seq', '?')}]",
            f"{event.get('event_type', '')}.{event.get('action', '')}",
            f"status={event.get('status', '')}",
        ]
        if event.get("iteration") != "":
            parts.append(f"iteration={event.get('iteration')}")
        if event.get("details"):
            parts.append(f"details={event['details']}")
        _vprint(True, " ".join(parts))

    trace.set_live_sink(_sink)


@app.command(context_settings={"allow_extra_args": True})
def train_cmd(
    ctx: typer.Context,
    pairs_file: Annotated[
        Path | None,
        typer.Argument(
            help="Whitespace-separated integer input/target pairs.", show_default=False
        ),
    ] = None,
    settings_file: Annotated[
        Path | None,
        typer.Argument(
            help="Optional settings file (key value tokens or YAML).", show_default=False
        ),
    ] = None,
    w: Annotated[float | None, typer.Option("--w", help="Initial weight.")] = None,
    b: Annotated[float | None, typer.Option("--b", help="Initial bias.")] = None,
    alpha: Annotated[float | None, typer.Option(help="Learning rate.")] = None,
    iterations: Annotated[
        int | None, typer.Option(help="Last iteration index (inclusive).")
    ] = None,
    log_every: Annotated[
        int | None, typer.Option("--log-every", help="Iterations between log lines.")
    ] = None,
    output: Annotated[
        str | None, typer.Option(help="Log file path; 'stdout' or '-' for standard output.")
    ] = None,
    lenient: Annotated[
        bool,
        typer.Option(help="Stop at the first malformed pair instead of failing."),
    ] = False,
    trace: Annotated[
        Path | None, typer.Option(help="Write a run trace (.json, or .csv) to this path.")
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose/--no-verbose", help="Print progress details to stderr."),
    ] = False,
) -> None:
    """Train the model and write progress lines to the configured output."""
    if pairs_file is None or ctx.args:
        console.print(USAGE, markup=False, highlight=False)
        raise typer.Exit(code=1)

    collector: RunTraceCollector | None = None
    if trace is not None or verbose:
        collector = RunTraceCollector()
        _configure_trace_streaming(collector, verbose)
    try:
        _vprint(verbose, f"Loading pairs: {pairs_file}")
        samples = load_pairs(pairs_file, strict=not lenient)
        if collector is not None:
            collector.log(
                event_type="run",
                action="samples_loaded",
                details={"path": str(pairs_file), "count": len(samples)},
            )

        settings = load_settings(
            settings_file,
            overrides={
                "w": w,
                "b": b,
                "alpha": alpha,
                "iterations": iterations,
                "log_every": log_every,
                "output": output,
            },
            warn=_warn,
        )
        if collector is not None:
            collector.log(
                event_type="run",
                action="settings_loaded",
                details=settings.model_dump(mode="json"),
            )

        with open_sink(settings.output) as sink:

            def _emit(record: LogRecord) -> None:
                sink.write(format_log_line(record) + "\n")
                if collector is None:
                    return
                collector.log(
                    event_type="train",
                    action="progress",
                    iteration=record.iteration,
                    details={
                        "w": record.w,
                        "b": record.b,
                        "cost": compute_cost(samples, Weights(w=record.w, b=record.b)),
                    },
                )

            final = train(samples, settings, on_log=_emit)

        if collector is not None:
            collector.log(
                event_type="run",
                action="train_finished",
                details={
                    "iterations": settings.iterations,
                    "w": final.w,
                    "b": final.b,
                    "cost": compute_cost(samples, final),
                },
            )
        if collector is not None and trace is not None:
            collector.write(trace)
            _vprint(verbose, f"Trace written: {trace}")
    except GDLinRegError as exc:
        console.print(f"[red]{escape(str(exc))}[/red]")
        raise typer.Exit(code=1) from exc


def main() -> None:
    """Script entrypoint."""
    app()


if __name__ == "__main__":
    main()
