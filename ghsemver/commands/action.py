"""
Handles the 'action' command, the GitHub Actions entry point.

Inputs arrive as INPUT_<NAME> environment variables and the result is
written to the step output file named by GITHUB_OUTPUT.
"""

import os
import sys
from typing import Dict, Optional

import click

from ..api import get_current_version, get_next_version
from ..config import load_config, configure_logging
from ..domain import VersionQuery
from ..exit_codes import SUCCESS, GENERAL_ERROR, CommandError


COMMANDS = ('current', 'next')


def get_input(name: str, env: Optional[Dict[str, str]] = None) -> str:
    """Read an action input the way the Actions runner exposes it."""
    env = os.environ if env is None else env
    return env.get(f"INPUT_{name.replace(' ', '_').upper()}", "").strip()


def set_output(name: str, value: str, env: Optional[Dict[str, str]] = None) -> None:
    """Append name=value to the GITHUB_OUTPUT file, or use the legacy stdout command."""
    env = os.environ if env is None else env
    output_path = env.get("GITHUB_OUTPUT")
    if output_path:
        with open(output_path, 'a', encoding='utf-8') as f:
            f.write(f"{name}={value}\n")
    else:
        click.echo(f"::set-output name={name}::{value}")


def set_failed(message: str) -> None:
    click.echo(f"::error::{message}")
    sys.exit(GENERAL_ERROR)


def run_action() -> str:
    """
    Run one action step.

    Returns:
        The version that was set as output
    """
    command = get_input('command')
    log = get_input('log') == 'true'

    if command not in COMMANDS:
        set_failed(f"Invalid command: {command}. Must be 'current' or 'next'.")

    config = load_config()
    configure_logging(config)
    if command == 'current':
        query = VersionQuery(
            branch=get_input('branch'),
            main_branch=get_input('main-branch'),
            verbose=log,
        )
        version = get_current_version(query, config=config)
    else:
        query = VersionQuery(
            branch=get_input('branch'),
            main_branch=get_input('main-branch'),
            suffix=get_input('suffix'),
            verbose=log,
        )
        version = get_next_version(query, config=config)

    set_output('version', version)

    if log or version:
        click.echo(f"Version: {version}")

    return version


@click.command(name='action')
def action_handler():
    """Run as a GitHub Action step.

    \b
    Reads INPUT_COMMAND ('current' or 'next'), INPUT_BRANCH,
    INPUT_MAIN-BRANCH, INPUT_SUFFIX and INPUT_LOG, then writes
    version=<value> to $GITHUB_OUTPUT.
    """
    try:
        run_action()
    except CommandError as e:
        set_failed(str(e))
    except OSError as e:
        set_failed(f"Could not write step output: {e}")
    sys.exit(SUCCESS)
