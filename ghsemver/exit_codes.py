"""
Standard exit codes and error types for ghsemver.

Following Unix/POSIX conventions for command-line tools.
"""

# Standard POSIX exit codes
SUCCESS = 0              # Successful termination
GENERAL_ERROR = 1        # General errors

# Application-specific exit codes (64-113 are typically available)
CONFIG_ERROR = 66        # Configuration file or option error
INTERRUPTED = 130        # Terminated by Ctrl+C (SIGINT)


class CommandError(Exception):
    """
    Exception that commands can raise to indicate specific exit codes.
    """
    def __init__(self, message: str, exit_code: int = GENERAL_ERROR):
        super().__init__(message)
        self.exit_code = exit_code


class ConfigError(CommandError):
    """Raised when configuration (file or options) is malformed."""
    def __init__(self, message: str):
        super().__init__(message, CONFIG_ERROR)


class SourceUnavailableError(Exception):
    """
    Raised by a version source that cannot answer at all.

    Never reaches the caller: the source chain catches it and moves on
    to the next source.
    """
    def __init__(self, source: str, reason: str):
        super().__init__(f"{source} unavailable: {reason}")
        self.source = source
        self.reason = reason
