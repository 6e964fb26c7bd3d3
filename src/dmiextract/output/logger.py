"""
Run log for dmiextract exports.

Every line is timestamped and tagged [INFO], [SUCCESS], [WARNING], [ERROR] or
[CRITICAL]. Per-artifact errors and the fatal output-root error go to stderr;
progress and the run summary go to stdout.
With --log-file every line is also appended to that file under a session
header.
"""

from __future__ import annotations

import time
from datetime import datetime
from pathlib import Path

from rich.console import Console


class SimpleLogger:
    """Console (rich) and optional file logger shared by the CLI and the Exporter."""

    STYLES = {
        "[SUCCESS]": "green",
        "[WARNING]": "yellow",
        "[ERROR]": "red",
        "[CRITICAL]": "bold red",
    }

    def __init__(self, log_file: Path | None = None, console: Console | None = None):
        self.log_file = log_file
        self.start_time = time.time()
        self.console = console or Console(highlight=False, soft_wrap=True)
        self.err_console = console or Console(stderr=True, highlight=False, soft_wrap=True)

        if self.log_file:
            self.log_file.parent.mkdir(parents=True, exist_ok=True)
            with open(self.log_file, 'a', encoding='utf-8') as f:
                f.write(f"\n{'='*60}\n")
                f.write(f"Session started: {datetime.now().isoformat()} (dmiextract)\n")
                f.write(f"{'='*60}\n")

    def log(self, message: str, prefix: str = "", error: bool = False) -> None:
        """Log a message to console and file.

        Args:
            message: The message to log
            prefix: Optional prefix like [INFO], [ERROR], etc.
            error: Whether to write to stderr instead of stdout
        """
        timestamp = datetime.now().strftime("%H:%M:%S")

        if prefix:
            formatted = f"[{timestamp}] {prefix} {message}"
        else:
            formatted = f"[{timestamp}] {message}"

        output = self.err_console if error else self.console
        output.print(formatted, style=self.STYLES.get(prefix), markup=False, highlight=False, emoji=False)

        if self.log_file:
            try:
                with open(self.log_file, 'a', encoding='utf-8') as f:
                    f.write(formatted + '\n')
            except OSError:
                pass  # Don't fail on logging errors

    def table(self, headers: list[str], rows: list[list[str]]) -> None:
        """Print a simple table.

        Args:
            headers: Column headers
            rows: Table rows
        """
        if not headers or not rows:
            return

        widths = [len(h) for h in headers]
        for row in rows:
            for i, cell in enumerate(row):
                if i < len(widths):
                    widths[i] = max(widths[i], len(str(cell)))

        separator = "+" + "+".join("-" * (w + 2) for w in widths) + "+"
        self.log(separator)
        header_row = "|" + "|".join(f" {h:<{w}} " for h, w in zip(headers, widths)) + "|"
        self.log(header_row)
        self.log(separator)
        for row in rows:
            row_str = "|" + "|".join(f" {str(cell):<{w}} " for cell, w in zip(row, widths)) + "|"
            self.log(row_str)
        self.log(separator)

    def section(self, title: str) -> None:
        """Print a section header."""
        self.log("")
        self.log("=" * 60)
        self.log(title.center(60))
        self.log("=" * 60)

    def elapsed(self) -> float:
        return time.time() - self.start_time

    def success(self, message: str) -> None:
        """Log a success message."""
        self.log(message, prefix="[SUCCESS]")

    def error(self, message: str) -> None:
        """Log an error message."""
        self.log(message, prefix="[ERROR]", error=True)

    def critical(self, message: str) -> None:
        """Log a fatal error message."""
        self.log(message, prefix="[CRITICAL]", error=True)

    def warning(self, message: str) -> None:
        """Log a warning message."""
        self.log(message, prefix="[WARNING]")

    def info(self, message: str) -> None:
        """Log an info message."""
        self.log(message, prefix="[INFO]")
