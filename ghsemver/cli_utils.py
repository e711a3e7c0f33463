"""
Common CLI utilities and decorators for consistent command behavior.
"""

import sys
import click
from functools import wraps

from .exit_codes import SUCCESS, GENERAL_ERROR, INTERRUPTED, CommandError


def standard_command(func):
    """
    Decorator that provides standard CLI behavior:
    - The returned value (the version, possibly empty) is the only stdout line
    - Errors go to stderr
    - CommandError exit codes are honoured (ConfigError exits 66)
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            result = func(*args, **kwargs)
            if result is not None:
                click.echo(result)
            sys.exit(SUCCESS)

        except KeyboardInterrupt:
            click.echo("Interrupted by user", err=True)
            sys.exit(INTERRUPTED)
        except click.ClickException:
            # Click exceptions already have their exit code
            raise
        except CommandError as e:
            click.echo(f"Error: {e}", err=True)
            sys.exit(e.exit_code)
        except Exception as e:
            click.echo(f"Command failed: {e}", err=True)
            sys.exit(GENERAL_ERROR)

    return wrapper


# Options shared by 'current' and 'next'
common_options = {
    'branch': click.option('-b', '--branch', default=None,
                           help='Branch to compute the version for (default: current branch)'),
    'main_branch': click.option('-m', '--main-branch', default=None,
                                help='Stable release branch (default: repository default branch)'),
    'suffix': click.option('-s', '--suffix', default=None,
                           help='Prerelease identifier on non-main branches (default: branch name)'),
    'log': click.option('--log', 'log', is_flag=True,
                        help='Print diagnostic tracing to stderr'),
}


def add_common_options(*option_names):
    """
    Decorator to add common options to a command.

    Example:
        @add_common_options('branch', 'log')
        def my_command(branch, log):
            ...
    """
    def decorator(func):
        for name in reversed(option_names):
            if name in common_options:
                func = common_options[name](func)
        return func
    return decorator
