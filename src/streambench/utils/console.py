"""
Console utilities for rich terminal output and status updates.

Provides an extended Rich console with custom formatting for status messages,
spinner-backed update steps, and column-oriented table display. Status levels map
to fixed icons and styles so every command reports progress consistently.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Annotated, Any, Literal

from rich.console import Console as RichConsole
from rich.padding import Padding
from rich.status import Status
from rich.text import Text

from streambench.settings import settings

__all__ = [
    "Colors",
    "Console",
    "ConsoleUpdateStep",
    "StatusIcons",
    "StatusLevel",
    "StatusStyles",
]

StatusLevel = Annotated[
    Literal["debug", "info", "warning", "error", "success"],
    "Status level for console messages indicating severity or state",
]


class Colors:
    """
    Color constants for console styling.

    :cvar info: Color for informational messages
    :cvar progress: Color for progress indicators and live output
    :cvar success: Color for successful operations
    :cvar warning: Color for warning messages
    :cvar error: Color for error messages
    :cvar primary: Primary brand color
    """

    info: str = "light_steel_blue"
    progress: str = "dark_slate_gray1"
    success: str = "chartreuse1"
    warning: str = "#FDB516"
    error: str = "orange_red1"

    primary: str = "#30A2FF"


StatusIcons: Annotated[
    Mapping[str, str],
    "Mapping of status levels to unicode icon characters for visual indicators",
] = {
    "debug": "…",
    "info": "ℹ",
    "warning": "⚠",
    "error": "✖",
    "success": "✔",
}

StatusStyles: Annotated[
    Mapping[str, str],
    "Mapping of status levels to Rich console style strings for colored output",
] = {
    "debug": "dim",
    "info": f"bold {Colors.info}",
    "warning": f"bold {Colors.warning}",
    "error": f"bold {Colors.error}",
    "success": f"bold {Colors.success}",
}


@dataclass
class ConsoleUpdateStep:
    """
    Context manager for a single console step rendered with a spinner.

    Example:
    ::
        console = Console()
        with console.print_update_step("Resolving capability") as step:
            step.update("Probing capability presence")
            step.finish("Capability ready", status_level="success")

    :param console: The Console instance to use for output
    :param title: Initial progress message to display
    :param status_level: Initial status level determining style
    :param spinner: Spinner animation style name from Rich's spinner set
    """

    console: Console
    title: str
    status_level: StatusLevel = "info"
    spinner: str = "dots"
    _status: Status | None = None

    def __enter__(self) -> ConsoleUpdateStep:
        if self.console.quiet:
            return self

        style = StatusStyles.get(self.status_level, "bold")
        self._status = self.console.status(
            f"[{style}]{self.title}[/]", spinner=self.spinner
        )
        self._status.__enter__()
        return self

    def update(self, title: str, status_level: StatusLevel | None = None):
        """
        Update the spinner message and optionally the status level.

        :param title: New progress message to display
        :param status_level: Optional new status level to apply
        """
        self.title = title
        if status_level is not None:
            self.status_level = status_level

        if self._status:
            style = StatusStyles.get(self.status_level, "bold")
            self._status.update(status=f"[{style}]{title}[/]")

    def finish(
        self,
        title: str,
        details: Any | None = None,
        status_level: StatusLevel = "info",
    ):
        """
        Stop the spinner and print the final status message.

        :param title: Final completion message to display
        :param details: Optional additional information to show below message
        :param status_level: Status level for final message styling
        """
        self.title = title
        self.status_level = status_level

        if self._status:
            self._status.stop()

        self.console.print_update(title, details, status_level)

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self._status:
            self._status.__exit__(exc_type, exc_val, exc_tb)


class Console(RichConsole):
    """
    Extended Rich console with status reporting and table output.

    Example:
    ::
        console = Console()
        console.print_update("Starting benchmark", status="info")
        console.print_table(
            ["Metric", "Result"], [["Prompt Tokens"], ["12"]], title="Metrics"
        )
    """

    def print_update(
        self,
        title: str,
        details: Any | None = None,
        status: StatusLevel = "info",
    ):
        """
        Print a status message with icon and optional details.

        :param title: Main status message to display
        :param details: Optional additional details shown indented below message
        :param status: Status level determining icon and styling
        """
        icon = StatusIcons.get(status, "•")
        style = StatusStyles.get(status, "bold")
        self.print(Text.assemble(f"{icon} ", (title, style)))

        if details:
            self.print(
                Padding(
                    Text.from_markup(str(details)),
                    (0, 0, 0, 2),
                    style=StatusStyles["debug"],
                )
            )

    def print_update_step(
        self, title: str, status: StatusLevel = "info", spinner: str = "dots"
    ) -> ConsoleUpdateStep:
        """
        Create a context manager for a spinner-backed progress step.

        :param title: Initial progress message to display
        :param status: Initial status level for styling
        :param spinner: Spinner animation style name
        :return: ConsoleUpdateStep context manager for progress tracking
        """
        return ConsoleUpdateStep(
            console=self, title=title, status_level=status, spinner=spinner
        )

    def print_table(
        self,
        headers: Sequence[str],
        columns: Sequence[Sequence[str]],
        title: str | None = None,
    ):
        """
        Print a bordered table from column-major values.

        :param headers: One header per column
        :param columns: Cell values for each column, all of equal length
        :param title: Optional title printed as an info update before the table
        """
        if len(headers) != len(columns):
            raise ValueError(
                f"Expected {len(headers)} columns for the headers, got {len(columns)}"
            )

        if title is not None:
            self.print_update(title, None, "info")

        widths = [
            max([len(header), *(len(value) for value in column)]) + 2
            for header, column in zip(headers, columns, strict=True)
        ]
        num_rows = max((len(column) for column in columns), default=0)

        self.print_table_divider(widths, settings.table_border_char)
        self.print_table_row(headers, widths, style="bold")
        self.print_table_divider(widths, settings.table_headers_border_char)
        for row in range(num_rows):
            self.print_table_row(
                [column[row] if row < len(column) else "" for column in columns],
                widths,
            )
        self.print_table_divider(widths, settings.table_border_char)

    def print_table_divider(self, widths: Sequence[int], char: str):
        """
        Print a horizontal divider line across table columns.

        :param widths: Column widths for divider line
        :param char: Character to use for divider line (e.g., '=', '-')
        """
        sep = settings.table_column_separator_char
        line = sep + sep.join(char * width for width in widths) + sep
        self.print(line, style="bold", overflow="ignore", crop=False, markup=False)

    def print_table_row(
        self, values: Sequence[str], widths: Sequence[int], style: str = ""
    ):
        """
        Print a single table row with each value left aligned and padded.

        :param values: Cell values for the row
        :param widths: Column widths to pad each cell to
        :param style: Optional Rich style string applied to the cell values
        """
        sep = settings.table_column_separator_char
        line = Text(sep, style="bold")
        for value, width in zip(values, widths, strict=True):
            line.append(f" {value}".ljust(width), style=style)
            line.append(sep, style="bold")
        self.print(line, overflow="ignore", crop=False)
