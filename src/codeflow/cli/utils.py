"""
CLI Utilities - Shared helper functions for command line operations.

This module provides the formatted printing helpers used by every command
and the analysis loading logic that turns a ``Result`` into user output.
"""

from pathlib import Path
from typing import Optional

import click

from ..core.analysis import AnalysisResult, load_analysis_result
from ..core.result import Err


def echo_success(message: str) -> None:
    """
    Print a success message with a green checkmark.

    Args:
        message (str): The message to display.
    """
    click.echo(click.style(f"✅ {message}", fg="green"))


def echo_error(message: str) -> None:
    """
    Print an error message with a red cross.

    Args:
        message (str): The error message to display.
    """
    click.echo(click.style(f"❌ {message}", fg="red"), err=True)


def echo_warning(message: str) -> None:
    """
    Print a warning message with a yellow alert symbol.

    Args:
        message (str): The warning message to display.
    """
    click.echo(click.style(f"⚠️  {message}", fg="yellow"))


def echo_info(message: str) -> None:
    """
    Print an informational message, dimmed.

    Args:
        message (str): The info message to display.
    """
    click.echo(click.style(f"   {message}", dim=True))


def load_analysis(analysis_file: str) -> Optional[AnalysisResult]:
    """
    Load an AnalysisResult from a JSON file.

    Args:
        analysis_file (str): Path to the analysis result JSON.

    Returns:
        Optional[AnalysisResult]: The loaded snapshot, or None if loading failed.
    """
    result = load_analysis_result(analysis_file)
    if isinstance(result, Err):
        echo_error(result.error.message)
        return None

    analysis = result.value
    if analysis.is_empty:
        echo_warning(f"{analysis_file} contains no elements or relationships")
    return analysis


def write_output(content: str, output: Optional[str]) -> None:
    """Write ``content`` to ``output``, or to stdout when no path is given."""
    if output is None:
        click.echo(content, nl=False)
        return
    out_file = Path(output)
    out_file.parent.mkdir(parents=True, exist_ok=True)
    out_file.write_text(content, encoding="utf-8")
    echo_success(f"Wrote {out_file}")
