"""
HTML Command - Build the standalone diagram browser.
"""

from typing import Optional

import click

from ...config import DEFAULT_HTML_OUTPUT, load_config
from ...graph.visualize import open_visualization
from ..utils import echo_success, load_analysis


@click.command()
@click.argument("analysis_file", type=click.Path())
@click.option("-o", "--output", default=DEFAULT_HTML_OUTPUT, show_default=True, help="Output HTML file")
@click.option("-t", "--title", default=None, help="Page title (defaults to the configured title)")
@click.option("--open", "open_browser", is_flag=True, help="Open the page in a browser")
def html(analysis_file: str, output: str, title: Optional[str], open_browser: bool):
    """
    Generate an HTML page embedding every diagram.
    """
    analysis = load_analysis(analysis_file)
    if analysis is None:
        raise SystemExit(1)

    config = load_config()
    path = open_visualization(
        analysis,
        output,
        title=title or config.title,
        max_class_methods=config.max_class_methods,
        open_browser=open_browser,
        diagrams=config.diagrams,
    )
    echo_success(f"Visualization written to {path}")
