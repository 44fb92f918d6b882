"""
Termina CLI Harness

Subcommands:
  - run: Shuffle events, run the engine for one simulation, render the result
  - classify: Run free-text descriptions through the keyword classifier
  - events: List the default events
  - validate-config: Validate a JSON/YAML run config

Exit codes:
  - 0: run settled (INCONCLUSIVE or unresolved), or command succeeded
  - 1: run ended in a classified failure / config invalid (actionable)
  - 2: fatal error (missing or unparseable file, malformed events, bad input)
"""

from __future__ import annotations

import json
import sys
import warnings
from dataclasses import replace
from typing import List, Optional, Tuple

import click
import yaml
from rich.console import Console
from rich.table import Table

import config_schema
from termina import (
    DEFAULT_EVENTS,
    ConsoleSink,
    JsonlSink,
    NumpyRandomSource,
    classify_many,
    export_json,
    load_events,
    run_simulation,
)
from termina.types_event import WorldEvent

console = Console()


def print_success(message: str) -> None:
    """Print a success message with green checkmark."""
    console.print(f"[green]✓[/green] {message}")


def print_error(message: str) -> None:
    """Print an error message with red X."""
    console.print(f"[red]✗[/red] {message}")


def print_warning(message: str) -> None:
    """Print a warning message with yellow warning sign."""
    console.print(f"[yellow]⚠[/yellow] {message}")


def _event_table(events: List[WorldEvent], title: str) -> Table:
    table = Table(title=title, show_header=True)
    table.add_column("Description", style="cyan")
    table.add_column("Pain", justify="right")
    table.add_column("Joy", justify="right")
    table.add_column("Death", justify="center")
    table.add_column("Betrayal", justify="center")
    table.add_column("Kindness", justify="center")
    for e in events:
        table.add_row(
            e.description,
            f"{e.pain:.1f}",
            f"{e.joy:.1f}",
            "●" if e.death else "",
            "●" if e.betrayal else "",
            "●" if e.kindness else "",
        )
    return table


@click.group()
def cli():
    """Termina narrative accumulator."""
    pass


# --- run ---

@cli.command("run")
@click.option("--variant", "-v", type=click.Choice(["OMEGA", "TERMINA"], case_sensitive=False),
              default="OMEGA", help="Engine preset")
@click.option("--config", "-c", "config_path", type=click.Path(), help="JSON/YAML run config")
@click.option("--seed", "-s", type=int, default=None, help="Random seed")
@click.option("--noise", "-n", type=float, default=None, help="Override catalyst emotional noise")
@click.option("--events", "-e", "events_path", type=click.Path(), help="JSON/YAML event file")
@click.option("--event", "free_text", multiple=True, help="Free-text event (repeatable)")
@click.option("--no-shuffle", is_flag=True, help="Feed events in the given order")
@click.option("--receipts", "-r", "receipts_path", type=click.Path(), help="Append receipts as JSONL")
@click.option("--quiet", "-q", is_flag=True, help="Hide the cycle log")
@click.option("--output", "-o", type=click.Choice(["rich", "json"]), default="rich")
def run_cmd(variant: str, config_path: Optional[str], seed: Optional[int],
            noise: Optional[float], events_path: Optional[str], free_text: Tuple[str, ...],
            no_shuffle: bool, receipts_path: Optional[str], quiet: bool, output: str) -> None:
    """Run one simulation and render its log and verdict."""
    try:
        if config_path:
            with warnings.catch_warnings(record=True) as caught:
                warnings.simplefilter("always")
                config = config_schema.load(config_path)
            if output == "rich":
                for w in caught:
                    print_warning(str(w.message))
        else:
            config = config_schema.default(variant)

        if seed is not None:
            config = replace(config, random_seed=seed)
        if noise is not None:
            config = replace(config, catalyst=replace(config.catalyst, emotional_noise=noise))

        events: List[WorldEvent] = []
        if events_path:
            events.extend(load_events(events_path))
        if free_text:
            events.extend(classify_many(free_text))
        if not events:
            events = list(DEFAULT_EVENTS)
    except (FileNotFoundError, ValueError, yaml.YAMLError) as e:
        if output == "json":
            click.echo(json.dumps({"error": str(e)}))
        else:
            print_error(str(e))
        sys.exit(2)

    result = run_simulation(
        events,
        config=config,
        rng=NumpyRandomSource(config.random_seed),
        shuffle=not no_shuffle,
    )

    if receipts_path:
        JsonlSink(receipts_path).emit(result)

    if output == "json":
        click.echo(export_json(result))
    else:
        ConsoleSink(console=console, show_log=not quiet).emit(result)
        if receipts_path:
            print_success(f"Receipts: {receipts_path}")

    sys.exit(1 if result.failed else 0)


# --- classify ---

@cli.command("classify")
@click.argument("texts", nargs=-1, required=True)
@click.option("--output", "-o", type=click.Choice(["rich", "json"]), default="rich")
def classify_cmd(texts: Tuple[str, ...], output: str) -> None:
    """Derive event attributes from free-text descriptions."""
    try:
        events = classify_many(texts)
    except ValueError as e:
        if output == "json":
            click.echo(json.dumps({"error": str(e)}))
        else:
            print_error(str(e))
        sys.exit(2)

    if not events:
        if output == "json":
            click.echo(json.dumps({"error": "no non-blank descriptions"}))
        else:
            print_error("No non-blank descriptions given")
        sys.exit(2)

    if output == "json":
        click.echo(json.dumps([e.to_dict() for e in events], indent=2))
    else:
        console.print(_event_table(events, "Classified events"))


# --- events ---

@cli.command("events")
@click.option("--output", "-o", type=click.Choice(["rich", "json"]), default="rich")
def events_cmd(output: str) -> None:
    """List the default events."""
    if output == "json":
        click.echo(json.dumps([e.to_dict() for e in DEFAULT_EVENTS], indent=2))
    else:
        console.print(_event_table(list(DEFAULT_EVENTS), "Default events"))


# --- validate-config ---

@cli.command("validate-config")
@click.argument("config_path", type=click.Path())
@click.option("--strict", is_flag=True, help="Fail instead of self-healing")
@click.option("--output", "-o", type=click.Choice(["rich", "json"]), default="rich")
def validate_config_cmd(config_path: str, strict: bool, output: str) -> None:
    """Validate a run config file."""
    try:
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            config = config_schema.load(config_path, strict=strict)
    except (FileNotFoundError, yaml.YAMLError, json.JSONDecodeError) as e:
        if output == "json":
            click.echo(json.dumps({"error": str(e)}))
        else:
            print_error(str(e))
        sys.exit(2)
    except ValueError as e:
        if output == "json":
            click.echo(json.dumps({"valid": False, "error": str(e)}))
        else:
            print_error(str(e))
        sys.exit(1)

    messages = [str(w.message) for w in caught]
    if output == "json":
        click.echo(json.dumps({
            "valid": True,
            "warnings": messages,
            "config": config_schema.to_dict(config),
        }, indent=2))
    else:
        for m in messages:
            print_warning(m)
        print_success(f"Config valid: {config.variant_name} "
                      f"(noise {config.catalyst.emotional_noise:.2f})")


if __name__ == "__main__":
    cli()
