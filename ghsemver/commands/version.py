"""
Handles the 'current' and 'next' commands.

Thin CLI layer: options become a VersionQuery, the api answers,
and the answer is printed as a single line on stdout.
"""

import click

from ..api import get_current_version, get_next_version
from ..cli_utils import standard_command, add_common_options
from ..config import load_config, configure_logging
from ..domain import VersionQuery


@click.command(name='current')
@add_common_options('branch', 'main_branch', 'log')
@standard_command
def current_handler(branch, main_branch, log):
    """Print the current version.

    \b
    The latest version tag reachable from the branch, without the 'v'.
    On the main branch only stable tags count. Prints an empty line
    when there is no version tag.

    Examples:

    \b
        ghsemver current
        ghsemver current -b develop -m main --log
    """
    config = load_config()
    configure_logging(config)
    query = VersionQuery(branch=branch, main_branch=main_branch, verbose=log)
    return get_current_version(query, config=config)


@click.command(name='next')
@add_common_options('branch', 'main_branch', 'suffix', 'log')
@standard_command
def next_handler(branch, main_branch, suffix, log):
    """Print the next version.

    \b
    Classifies the Conventional Commits since the last stable tag:
    breaking change -> major, feat -> minor, fix/perf -> patch.
    On the main branch the result is stable; elsewhere it is a
    prerelease like 1.3.0-beta.2. Prints an empty line when no
    release is warranted.

    Examples:

    \b
        ghsemver next
        ghsemver next -s beta --log
    """
    config = load_config()
    configure_logging(config)
    query = VersionQuery(branch=branch, main_branch=main_branch, suffix=suffix, verbose=log)
    return get_next_version(query, config=config)
