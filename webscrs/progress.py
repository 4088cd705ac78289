"""Progress output — one spinner line per job step, resolved as it finishes."""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape

console = Console()


class ProgressStep:
    """A single in-flight step. Resolving it a second time is a no-op."""

    def __init__(self, console: Console, text: str, prefix: str = ""):
        self.console = console
        self.text = text
        self.prefix = f"{prefix} " if prefix else ""
        self._done = False
        self._status = None
        if console.is_terminal:
            self._status = console.status(f"{self.prefix}{text}")
            self._status.start()

    def _finish(self, symbol: str, suffix: str = "") -> None:
        if self._done:
            return
        self._done = True
        if self._status is not None:
            self._status.stop()
        self.console.print(f"{self.prefix}{symbol} {self.text}{suffix}", soft_wrap=True)

    def succeed(self, note: str = "") -> None:
        self._finish("[green]✔[/green]", f" - [green]{escape(note)}[/green]" if note else "")

    def warn(self, note: str = "") -> None:
        self._finish("[yellow]⚠[/yellow]", f" - [yellow]{escape(note)}[/yellow]" if note else "")

    def fail(self, reason: str | None = None, error_name: str = "Error") -> None:
        if self._done:
            return
        self._finish("[red]✖[/red]")
        if reason:
            self.console.print(f"[red]{escape(error_name)}:[/red] {escape(reason)}", soft_wrap=True)


class ProgressReporter:
    """Prints run banners and creates job steps on a rich console."""

    def __init__(self, output: Console | None = None):
        self.console = output or console

    def start(self, text: str, prefix: str = "") -> ProgressStep:
        """Begin a step. *text* may carry rich markup."""
        return ProgressStep(self.console, text, prefix=prefix)

    def banner(self, text: str) -> None:
        self.console.print(f"\n[bold green]{escape(text)}[/bold green]")

    def summary(self, succeeded: bool) -> None:
        if succeeded:
            self.console.print("✨ [bold green]All tasks completed successfully![/bold green]")
        else:
            self.console.print("🚨 [bold yellow]Tasks completed with some failures![/bold yellow]")
