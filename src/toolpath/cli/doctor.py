# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Installation diagnostics rendered with rich."""

from __future__ import annotations

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.rule import Rule
from rich.table import Table

from ..models import ProbeStatus
from ..resolver import BinaryResolver

_STATUS_STYLES = {
    ProbeStatus.FOUND: "green",
    ProbeStatus.MISSING: "dim",
    ProbeStatus.UNUSABLE: "red",
}


def run_doctor(resolver: BinaryResolver, *, console: Console | None = None, show_missing: bool = False) -> int:
    """Render every probed location and return 0 when an installation is usable."""

    console = console or Console()
    binary = resolver.settings.binary_name
    console.print(Rule(f"[bold cyan]{binary} installations[/bold cyan]"))

    results = resolver.probe_locations()
    table = Table(title="Probed Locations", box=box.SIMPLE, expand=True)
    table.add_column("Source", style="bold")
    table.add_column("Kind")
    table.add_column("Status")
    table.add_column("Version")
    table.add_column("Path", overflow="fold")
    table.add_column("Notes", overflow="fold")

    for result in results:
        if result.status is ProbeStatus.MISSING and not show_missing:
            continue
        style = _STATUS_STYLES[result.status]
        version = "-"
        if result.installation is not None and result.installation.version is not None:
            version = str(result.installation.version)
        table.add_row(
            result.source,
            result.install_kind.value,
            f"[{style}]{result.status.value}[/]",
            version,
            result.candidate,
            result.detail or "-",
        )
    console.print(table)

    installations = [result.installation for result in results if result.installation is not None]
    best = resolver.select_best(installations)
    if best is None:
        console.print(
            Panel(
                f"[red]No usable {binary} installation found.[/red]",
                title="Selection",
                border_style="red",
            )
        )
        return 1
    console.print(Panel(f"[green]{best.describe()}[/green]", title="Selection", border_style="green"))
    return 0


__all__ = ["run_doctor"]
