#!/usr/bin/env python3

import click

from ghsemver.commands.version import current_handler, next_handler
from ghsemver.commands.action import action_handler


@click.group()
@click.version_option(package_name='ghsemver')
def cli():
    """ghsemver - Semantic versioning from Conventional Commits history.

    Reads branches, tags and commits from the local checkout and falls
    back to the GitHub API when local history is missing or shallow.
    """
    pass


cli.add_command(current_handler, name='current')
cli.add_command(next_handler, name='next')
cli.add_command(action_handler, name='action')


def main():
    cli()

if __name__ == "__main__":
    main()
