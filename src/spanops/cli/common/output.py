"""Output formatting utilities for the CLI."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterable, Mapping

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.theme import Theme

_THEME = Theme(
    {
        "ok": "bold green",
        "warn": "yellow",
        "err": "bold red",
        "title": "bold cyan",
        "meta": "dim",
    }
)

console = Console(theme=_THEME)


@dataclass(frozen=True)
class Out:
    """Output formatter for CLI messages and tables."""

    def info(self, msg: str) -> None:
        """Print an info message."""
        console.print(f"[title]›[/] {msg}")

    @contextmanager
    def status(self, msg: str):
        """Show a transient status spinner while work is in progress."""
        with console.status(msg, spinner="dots"):
            yield

    def success(self, msg: str) -> None:
        """Print a success message."""
        console.print(f"[ok]✓[/] {msg}")

    def warn(self, msg: str) -> None:
        """Print a warning message."""
        console.print(f"[warn]⚠[/] {msg}")

    def error(self, msg: str) -> None:
        """Print an error message."""
        console.print(f"[err]✗[/] {msg}")

    def header(self, title: str) -> None:
        """Print a header message."""
        console.print(f"[title]{title}[/]")

    def kv(self, items: Mapping[str, Any]) -> None:
        """Print key-value pairs."""
        for k, v in items.items():
            console.print(f"[meta]{k}[/]: {v}")

    def steps_table(self, steps: Iterable[Any], title: str = "CRUD steps") -> None:
        """
        Expects objects with .step .method .path .expected .observed .passed
        (like spanops.core.models.StepResult)
        """
        t = Table(title=title, show_lines=False)
        t.add_column("#", style="meta", no_wrap=True)
        t.add_column("Request", no_wrap=True)
        t.add_column("Expected", style="meta")
        t.add_column("Observed")
        t.add_column("Result")

        for s in steps:
            t.add_row(
                str(s.step),
                f"{s.method} {s.path}",
                escape(s.expected),
                escape(s.observed),
                "[ok]PASS[/]" if s.passed else "[err]FAIL[/]",
            )

        console.print(t)

    def teardown_table(self, results: Iterable[Any], title: str = "Teardown") -> None:
        """
        Expects objects with .resource .attempted .ok and optional .error
        (like spanops.core.models.TeardownResult)
        """
        t = Table(title=title, show_lines=False)
        t.add_column("Resource", style="ok")
        t.add_column("Result")

        for r in results:
            if not getattr(r, "attempted", False):
                result = "[meta]skipped (not created)[/]"
            elif getattr(r, "ok", False):
                result = "[ok]OK[/]"
            else:
                result = f"[err]FAIL[/] {escape(str(getattr(r, 'error', '') or ''))}"
            t.add_row(str(r.resource), result)

        console.print(t)


out = Out()
