"""
termina/sinks.py - Report Sinks

Consumers of a finished RunResult. The engine never talks to a renderer
directly; the driver hands its result to whichever sink the host supplies.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from receipts import write_receipt_jsonl

from .export import generate_report, summary_table
from .types_result import RunResult


class ReportSink(ABC):
    """Consumes log lines, terminal status and summary of one run."""

    @abstractmethod
    def emit(self, result: RunResult) -> None:
        ...


class MemorySink(ReportSink):
    """Keeps every result it receives."""

    def __init__(self):
        self.results: List[RunResult] = []

    def emit(self, result: RunResult) -> None:
        self.results.append(result)

    @property
    def last(self) -> Optional[RunResult]:
        return self.results[-1] if self.results else None


class ConsoleSink(ReportSink):
    """Renders the log, summary table and verdict panel with rich."""

    def __init__(self, console: Optional[Console] = None, show_log: bool = True):
        self.console = console or Console()
        self.show_log = show_log

    def emit(self, result: RunResult) -> None:
        if self.show_log:
            for line in result.log:
                # Log lines carry literal brackets; keep rich from parsing them as markup
                self.console.print(line, markup=False, highlight=False)
        self.console.print(summary_table(result))

        border = "red" if result.failed else "yellow"
        title = "[bold]TERM-FAILURE[/bold]" if result.failed else "[bold]RESULT[/bold]"
        self.console.print(Panel(Text(generate_report(result)), title=title, border_style=border))


class JsonlSink(ReportSink):
    """Appends every receipt of the run to a JSONL file."""

    def __init__(self, path: str):
        self.path = Path(path)

    def emit(self, result: RunResult) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("a") as fh:
            for receipt in result.final_state.receipt_ledger:
                write_receipt_jsonl(receipt, fh)
