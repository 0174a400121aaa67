"""Config command - show or write the effective configuration."""

from __future__ import annotations

from pathlib import Path

from rich.console import Console
from rich.table import Table

from ..config import ConfigError, dump_config, load_config


def run_config(config_path: Path, *, write: bool = False, force: bool = False) -> int:
    """Print the effective config, or write it as YAML to `config_path`."""
    console = Console(stderr=True)

    try:
        config = load_config(config_path)
    except ConfigError as e:
        console.print(f"[red]Error:[/red] {e}")
        return 1

    if write:
        if config_path.exists() and not force:
            console.print(f"[yellow]{config_path} already exists[/yellow] (use --force to overwrite)")
            return 1
        try:
            dump_config(config, config_path)
        except OSError as e:
            console.print(f"[red]Error:[/red] Can't write {config_path}: {e}")
            return 1
        console.print(f"Wrote {config_path}", style="green")
        return 0

    source = str(config_path) if config_path.is_file() else f"{config_path} (absent, defaults)"
    table = Table(title=f"gitseclog config: {source}")
    table.add_column("Option", style="cyan", no_wrap=True)
    table.add_column("Value")
    for key, value in config.to_dict().items():
        if isinstance(value, list):
            value = ", ".join(value)
        elif key in ("delimiter", "empty"):
            value = repr(value)
        table.add_row(key, str(value))
    Console().print(table)
    return 0
