"""
cli:
    Command-line interface for promptsync
"""

import click

from promptsync import __version__
from promptsync.cli.catalog import catalog
from promptsync.cli.sync import init_catalog, status, sync_cmd, validate_cmd
from promptsync.layout import configure_logging


@click.group()
@click.version_option(__version__, prog_name='promptsync')
@click.option('-v', '--verbose', is_flag=True, help='Enable debug logging')
def main(verbose: bool):
    """
    promptsync - install rules, skills and hooks for AI assistants.

    Reads promptsync.yml in the project, copies each asset to the location
    its assistant expects, and checks that hook manifests point at
    executable scripts.
    """
    configure_logging(verbose)


main.add_command(init_catalog)
main.add_command(sync_cmd)
main.add_command(validate_cmd)
main.add_command(status)
main.add_command(catalog)
