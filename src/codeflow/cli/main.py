"""
codeflow CLI - Main entry point.

This module registers all CLI commands. Each command is implemented
in its own module under cli/commands/.
"""

import logging

import click

from .commands import chains, html, initialize, render, stats


@click.group()
@click.version_option(package_name="codeflow")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
def main(verbose: bool):
    """codeflow: Code-flow chains and Mermaid diagrams.

    Reads an analysis result JSON produced by an extractor and renders
    architecture, command, event, class and chain diagrams.

    \b
    Quick Start:
      codeflow render analysis.json -d architecture
      codeflow chains analysis.json -o chains/
      codeflow html analysis.json -o architecture.html
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


# Register commands
main.add_command(render.render)
main.add_command(chains.chains)
main.add_command(html.html)
main.add_command(stats.stats)
main.add_command(initialize.init)

if __name__ == "__main__":
    main()
