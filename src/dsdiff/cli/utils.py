"""
CLI Utilities - Shared helper functions for command line operations.

Formatted printing and snapshot loading used across commands.
"""

from typing import Any, Optional

import click

from ..analysis.comparison import Comparison, compare_files, load_docstore


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

    Goes to stderr so JSON written to stdout stays parseable.

    Args:
        message (str): The warning message to display.
    """
    click.echo(click.style(f"⚠️  {message}", fg="yellow"), err=True)


def echo_info(message: str) -> None:
    """
    Print an informational message, dimmed.

    Args:
        message (str): The info message to display.
    """
    click.echo(click.style(f"   {message}", dim=True))


def load_comparison(before_file: str, after_file: str) -> Optional[Comparison]:
    """
    Load and compare two snapshot files, reporting failures to the user.

    Returns:
        Optional[Comparison]: The comparison, or None if either file was
        unusable (the reason has already been printed).
    """
    result = compare_files(before_file, after_file)
    if result.is_err():
        echo_error(result.error)
        return None
    return result.unwrap()


def load_snapshot(path: str) -> Optional[Any]:
    """Load one snapshot file, printing the reason on failure."""
    result = load_docstore(path)
    if result.is_err():
        echo_error(f"{path}: {result.error}")
        return None
    return result.unwrap()
