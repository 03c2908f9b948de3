# topmark:header:start
#
#   project      : ZipSniff
#   file         : exit_codes.py
#   file_relpath : src/zipsniff/cli/exit_codes.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Defines standardized exit codes used by the ZipSniff CLI application.

Codes from 64 upwards follow the BSD ``sysexits.h`` convention so that shell
scripts can tell usage and configuration problems apart from detection
outcomes.
"""

from enum import IntEnum


class ExitCode(IntEnum):
    """Standardized exit codes for the ZipSniff CLI.

    Attributes:
        SUCCESS (int): Every input was processed.
        FAILURE (int): Generic failure (unreadable input, unexpected error).
        UNKNOWN_TYPE (int): ``--fail-on-unknown`` was given and at least one input
            was reported as ``application/octet-stream``.
        USAGE_ERROR (int): Invalid command-line usage (EX_USAGE).
        FILE_NOT_FOUND (int): An input path does not exist (EX_NOINPUT).
        CONFIG_ERROR (int): Missing or invalid configuration (EX_CONFIG).

    Usage:
        ```python
        import subprocess
        from zipsniff.cli.exit_codes import ExitCode

        result = subprocess.run(["zipsniff", "detect", "--fail-on-unknown", "a.bin"])
        if result.returncode == ExitCode.UNKNOWN_TYPE:
            print("a.bin is not a recognized container")
        ```
    """

    SUCCESS = 0
    FAILURE = 1
    UNKNOWN_TYPE = 3
    USAGE_ERROR = 64
    FILE_NOT_FOUND = 66
    CONFIG_ERROR = 78
