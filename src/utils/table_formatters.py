#!/usr/bin/env python3
"""
Rich table formatters for Bandix query output.
Provides colorful tabular output for CLI commands.
"""

from datetime import datetime
from typing import Dict, Any, List
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich import box

from .formatters import format_bytes, format_duration, format_kbps, format_speed, short_hostname

console = Console()


def _render(output: List[Any]) -> str:
    """Render a list of Rich renderables to a string."""
    with console.capture() as capture:
        for item in output:
            console.print(item)
            console.print()

    return capture.get()


def _format_timestamp(timestamp_ms: int) -> str:
    if not timestamp_ms:
        return "N/A"
    return datetime.fromtimestamp(timestamp_ms / 1000).strftime('%Y-%m-%d %H:%M:%S')


def format_clients_rich(data: Dict[str, Any]) -> str:
    """Format the client list with Rich tables."""
    output = []
    clients = data.get('clients', [])

    if not clients:
        output.append(Panel("[yellow]No clients reported[/yellow]", border_style="yellow"))
        return _render(output)

    table = Table(
        title=f"[bold magenta]Clients ({len(clients)})[/bold magenta]",
        box=box.ROUNDED,
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("Hostname", style="yellow", no_wrap=True)
    table.add_column("IP Address", style="cyan")
    table.add_column("MAC", style="dim")
    table.add_column("Download", justify="right", style="green")
    table.add_column("Upload", justify="right", style="magenta")
    table.add_column("↓ Speed", justify="right", style="bold green")
    table.add_column("↑ Speed", justify="right", style="bold magenta")
    table.add_column("Limit", justify="center")

    for client in clients:
        limit = client.get('speedLimit')
        if limit and limit.get('enabled'):
            limit_text = (
                f"[red]↓{format_kbps(limit.get('downloadLimit', 0))} "
                f"↑{format_kbps(limit.get('uploadLimit', 0))}[/red]"
            )
        else:
            limit_text = "[dim]-[/dim]"

        table.add_row(
            short_hostname(client.get('hostname')),
            client.get('ip') or 'N/A',
            client.get('mac', 'N/A'),
            format_bytes(client.get('download', 0)),
            format_bytes(client.get('upload', 0)),
            format_speed(client.get('downloadSpeed', 0)),
            format_speed(client.get('uploadSpeed', 0)),
            limit_text
        )

    output.append(table)
    return _render(output)


def format_status_rich(data: Dict[str, Any]) -> str:
    """Format the bandixd service status."""
    output = []
    status = data.get('status', data)

    running = status.get('running', False)
    state_style = "green" if running else "red"
    state_text = "Running" if running else "Stopped"

    table = Table(
        title="[bold magenta]Bandix Service[/bold magenta]",
        box=box.ROUNDED,
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("Property", style="yellow", no_wrap=True)
    table.add_column("Value", style="green")

    table.add_row("State", f"[{state_style}]{state_text}[/{state_style}]")
    table.add_row("Interface", str(status.get('interface', 'unknown')))
    table.add_row("Uptime", format_duration(status.get('uptime', 0)) if running else "N/A")
    table.add_row("Version", str(status.get('version') or 'N/A'))

    output.append(table)
    return _render(output)


def format_history_rich(data: Dict[str, Any]) -> str:
    """Format the bandwidth history series with a peak summary."""
    output = []
    history = data.get('history', [])

    if not history:
        output.append(Panel("[yellow]No bandwidth history available[/yellow]", border_style="yellow"))
        return _render(output)

    table = Table(
        title=f"[bold magenta]Bandwidth History ({len(history)} points)[/bold magenta]",
        box=box.ROUNDED,
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("Time", style="cyan", no_wrap=True)
    table.add_column("Download", justify="right", style="green")
    table.add_column("Upload", justify="right", style="magenta")

    for point in history:
        table.add_row(
            _format_timestamp(point.get('timestamp', 0)),
            format_speed(point.get('download', 0)),
            format_speed(point.get('upload', 0))
        )

    output.append(table)

    peak_down = max(point.get('download', 0) for point in history)
    peak_up = max(point.get('upload', 0) for point in history)
    output.append(Panel(
        f"[bold]Peak download:[/bold] [green]{format_speed(peak_down)}[/green]    "
        f"[bold]Peak upload:[/bold] [magenta]{format_speed(peak_up)}[/magenta]",
        border_style="cyan"
    ))

    return _render(output)


def format_stats_rich(data: Dict[str, Any]) -> str:
    """Format aggregate totals and rates."""
    output = []
    totals = data.get('totals', {})
    rates = data.get('rates', {})
    reported = data.get('reported')

    table = Table(
        title=f"[bold magenta]Traffic Totals ({data.get('device_count', 0)} devices)[/bold magenta]",
        box=box.ROUNDED,
        show_header=True,
        header_style="bold cyan"
    )
    table.add_column("Metric", style="yellow", no_wrap=True)
    table.add_column("Download", justify="right", style="green")
    table.add_column("Upload", justify="right", style="magenta")
    table.add_column("Combined", justify="right", style="bold white")

    table.add_row(
        "Total traffic",
        format_bytes(totals.get('download', 0)),
        format_bytes(totals.get('upload', 0)),
        format_bytes(totals.get('combined', 0))
    )
    table.add_row(
        "Current rate",
        format_speed(rates.get('download', 0)),
        format_speed(rates.get('upload', 0)),
        format_speed(rates.get('download', 0) + rates.get('upload', 0))
    )
    if reported:
        table.add_row(
            "Router reported",
            format_bytes(reported.get('download', 0)),
            format_bytes(reported.get('upload', 0)),
            format_bytes(reported.get('combined', 0))
        )

    output.append(table)
    return _render(output)


def format_write_result(data: Dict[str, Any]) -> str:
    """Format the outcome of a write command (limit, interface, service)."""
    if data.get('success'):
        panel = Panel(
            f"[bold green]OK:[/bold green] {data.get('message', 'Done')}",
            border_style="green"
        )
    else:
        panel = Panel(
            f"[bold red]Error:[/bold red] {data.get('error', 'Unknown error')}",
            border_style="red"
        )
    return _render([panel])
