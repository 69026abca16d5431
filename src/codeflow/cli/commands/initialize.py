"""
Init Command - Write a default configuration.

Creates ``.codeflow/config.yaml`` in the current directory with the
built-in rendering defaults.
"""

from pathlib import Path

import click
import yaml
from rich.console import Console
from rich.panel import Panel

from ...config import DEFAULT_CONFIG, config_path

console = Console()


def _init_project(root_dir: Path) -> Path:
    config_file = config_path(root_dir)
    config = dict(DEFAULT_CONFIG)
    config["title"] = f"{root_dir.name} architecture"

    config_file.parent.mkdir(parents=True, exist_ok=True)
    with open(config_file, "w") as f:
        yaml.dump(config, f, sort_keys=False, default_flow_style=False)
    return config_file


@click.command()
@click.option("--force", is_flag=True, help="Overwrite existing configuration")
def init(force: bool):
    """
    Initialize codeflow in the current directory.
    """
    console.print(Panel.fit("[bold blue]codeflow Initialization[/bold blue]", border_style="blue"))

    root_dir = Path.cwd()
    config_file = config_path(root_dir)

    if config_file.exists() and not force:
        console.print(f"[yellow]Configuration already exists at {config_file}[/yellow]")
        console.print("Use --force to overwrite it.")
        return

    config_file = _init_project(root_dir)
    console.print("\n✨ [bold green]Initialized successfully![/bold green]")
    console.print(f"   Config created at: [dim]{config_file}[/dim]")
