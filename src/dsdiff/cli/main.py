"""
dsdiff CLI - Main entry point.

This module registers all CLI commands. Each command is implemented
in its own module under cli/commands/.
"""

import logging

import click

from .commands import compare, layout, stats


@click.group()
@click.version_option(package_name="dsdiff")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
def main(verbose: bool):
    """dsdiff: compare two docstore snapshots.

    \b
    Quick Start:
      dsdiff compare before.json after.json
      dsdiff layout before.json after.json --view after -o graph.json
      dsdiff stats after.json
    """
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(name)s %(levelname)s: %(message)s",
        )


# Register commands
main.add_command(compare.compare)
main.add_command(layout.layout)
main.add_command(stats.stats)

if __name__ == "__main__":
    main()
