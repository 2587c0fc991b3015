"""Rich terminal renderer for publish transcripts.

Color scheme
------------
- cyan      : info
- green     : success
- yellow    : warning
- bold red  : error
"""

from __future__ import annotations

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from brewpublish.metadata import ArchiveMetadata
from brewpublish.models.events import EventSeverity, PublishEvent, PublishResult

_SEVERITY_STYLES: dict[EventSeverity, str] = {
    EventSeverity.INFO: "cyan",
    EventSeverity.SUCCESS: "green",
    EventSeverity.WARNING: "yellow",
    EventSeverity.ERROR: "bold red",
}

_SEVERITY_LABELS: dict[EventSeverity, str] = {
    EventSeverity.INFO: "..",
    EventSeverity.SUCCESS: "OK",
    EventSeverity.WARNING: "!!",
    EventSeverity.ERROR: "XX",
}


class PublishRenderer:
    """Prints publish events and results.

    Parameters
    ----------
    console:
        Rich Console instance.  A new one is created if not provided.
    """

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def format_event(self, event: PublishEvent) -> Text:
        style = _SEVERITY_STYLES[event.severity]
        line = Text()
        line.append(f"[{_SEVERITY_LABELS[event.severity]}] ", style=style)
        # Messages carry raw API bodies; keep them out of markup parsing.
        line.append(event.message, style=style if event.severity == EventSeverity.ERROR else "")
        return line

    def print_event(self, event: PublishEvent) -> None:
        """Event-log listener: print one line per event as it arrives."""
        self.console.print(self.format_event(event))

    def render_transcript(self, events: tuple[PublishEvent, ...]) -> Table:
        table = Table(title="Publish transcript", show_lines=False)
        table.add_column("#", justify="right", style="dim")
        table.add_column("State")
        table.add_column("Severity")
        table.add_column("Message", overflow="fold")
        for event in events:
            style = _SEVERITY_STYLES[event.severity]
            table.add_row(
                str(event.sequence),
                event.state.value,
                Text(event.severity.value, style=style),
                Text(event.message),
            )
        return table

    def render_result(self, result: PublishResult) -> Panel:
        if result.succeeded:
            lines = [
                Text("Publish complete!", style="bold green"),
                Text(""),
                Text(f"Release:  {result.release.html_url if result.release else '-'}"),
                Text(f"Asset:    {result.asset.browser_download_url if result.asset else '-'}"),
                Text(f"Manifest: {result.manifest.path if result.manifest else '-'}"),
                Text(f"SHA-256:  {result.digest or '-'}"),
                Text(""),
                Text(f"Install:  {result.install_command}", style="bold"),
            ]
            return Panel(
                Text("\n").join(lines),
                title="[bold]Published[/bold]",
                border_style="green",
                padding=(1, 2),
            )

        title = "[bold]Cancelled[/bold]" if result.cancelled else "[bold]Failed[/bold]"
        lines = [
            Text(f"Publish stopped in state {result.state.value}", style="bold red"),
            Text(""),
            Text(result.error or "unknown error"),
        ]
        if result.release is not None:
            lines.append(Text(""))
            lines.append(
                Text(
                    "Remote changes made before the failure were kept; "
                    "re-run the same publish to finish it.",
                    style="dim",
                )
            )
        return Panel(
            Text("\n").join(lines),
            title=title,
            border_style="red",
            padding=(1, 2),
        )

    def print_result(self, result: PublishResult) -> None:
        self.console.print()
        self.console.print(self.render_result(result))

    def render_metadata(self, path: str, metadata: ArchiveMetadata, digest: str) -> Table:
        table = Table(title=f"Archive {path}", show_header=False)
        table.add_column("Field", style="cyan")
        table.add_column("Value")
        table.add_row("Name", metadata.name or "[dim]unknown[/dim]")
        table.add_row("Version", metadata.version or "[dim]unknown[/dim]")
        table.add_row("Bundle ID", metadata.bundle_identifier or "[dim]unknown[/dim]")
        table.add_row("SHA-256", digest)
        return table
