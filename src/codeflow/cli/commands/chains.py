"""
Chains Command - List or export execution chains.

Without ``-o`` the chains are summarised in a table (or as JSON with
``--json``). With ``-o DIR`` one ``.mmd`` file is written per chain.
"""

import json
import logging
import re
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.table import Table

from ...analysis.chains import ChainExtractor
from ...render.chain_diagrams import render_chain_flowchart
from ..utils import echo_info, echo_success, echo_warning, load_analysis

logger = logging.getLogger(__name__)

console = Console()

_UNSAFE_FILENAME = re.compile(r"[^A-Za-z0-9._-]+")


def chain_filename(position: int, name: str) -> str:
    """Stable, filesystem-safe name: ``001-OrderController.Post.mmd``."""
    slug = _UNSAFE_FILENAME.sub("_", name).strip("_") or "chain"
    return f"{position:03d}-{slug}.mmd"


@click.command()
@click.argument("analysis_file", type=click.Path())
@click.option("--commands", "command_chains", is_flag=True,
              help="One chain per (sender, command) pair instead of per root")
@click.option("-o", "--output-dir", default=None, help="Write one .mmd file per chain here")
@click.option("--json", "as_json", is_flag=True, help="Output chains as JSON")
def chains(analysis_file: str, command_chains: bool, output_dir: Optional[str], as_json: bool):
    """
    Extract independent execution chains.
    """
    analysis = load_analysis(analysis_file)
    if analysis is None:
        raise SystemExit(1)

    extractor = ChainExtractor(analysis)
    found = extractor.command_chains() if command_chains else extractor.extract()

    if as_json:
        click.echo(json.dumps([c.to_dict() for c in found], indent=2))
        return

    if not found:
        echo_warning("No chains found")
        return

    if output_dir is not None:
        out = Path(output_dir)
        out.mkdir(parents=True, exist_ok=True)
        for position, chain in enumerate(found, start=1):
            path = out / chain_filename(position, chain.name)
            path.write_text(render_chain_flowchart(chain, analysis.index), encoding="utf-8")
            logger.debug("Wrote %s", path)
        echo_success(f"Wrote {len(found)} chain diagram(s) to {out}")
        return

    table = Table(title=f"Chains ({len(found)})")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Chain", style="cyan")
    table.add_column("Root")
    table.add_column("Nodes", justify="right")
    table.add_column("Edges", justify="right")
    for position, chain in enumerate(found, start=1):
        table.add_row(str(position), chain.name, str(chain.root),
                      str(len(chain.nodes)), str(len(chain.edges)))
    console.print(table)
    echo_info("Use -o DIR to export one Mermaid file per chain")
