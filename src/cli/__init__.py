"""Command-line interface for publishing Markdown to Confluence.

This package provides the `confluence-publish` CLI tool: configuration
loading, the sample-config generator and the publish command with rich
terminal output and meaningful exit codes.
"""

from .config import ConfigLoader
from .errors import (
    CLIError,
    ConfigError,
    FilesystemError,
    InitError,
)
from .init_command import InitCommand
from .models import ExitCode
from .publish_command import PublishCommand

__all__ = [
    'ConfigLoader',
    'PublishCommand',
    'InitCommand',
    'ExitCode',
    'CLIError',
    'ConfigError',
    'FilesystemError',
    'InitError',
]
