"""Main CLI entry point for confluence-publish command.

This module provides the Typer application that serves as the entry point
for the confluence-publish command-line tool. It uses options on the main
command rather than subcommands for a simpler user experience.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

import typer

from src.cli.config import DEFAULT_CONFIG_PATH
from src.cli.errors import InitError
from src.cli.init_command import InitCommand
from src.cli.models import ExitCode
from src.cli.output import OutputHandler
from src.cli.publish_command import PublishCommand

__version__ = "0.1.0"

# Create Typer app - no_args_is_help=False allows running without args
app = typer.Typer(
    name="confluence-publish",
    help="""Publish local Markdown files to Confluence pages.

QUICK START:
  confluence-publish --init                  # Write a sample confluence-publish.yaml
  confluence-publish                         # Publish changed pages
  confluence-publish --force                 # Publish every page unconditionally
  confluence-publish --config docs/pub.yaml  # Use another configuration file""",
    add_completion=False,
    rich_markup_mode=None,  # Disable Rich markup to avoid compatibility issues
    no_args_is_help=False,
)

# Module logger
logger = logging.getLogger(__name__)


def _configure_logging(verbosity: int, logdir: Optional[str] = None) -> None:
    """Configure logging based on verbosity level.

    Configures only the 'src' namespace logger to avoid affecting third-party
    libraries. The root logger is left unchanged.

    Args:
        verbosity: Verbosity level (0=WARNING, 1=INFO, 2=DEBUG)
        logdir: Optional directory for log files (creates timestamped log file)
    """
    if verbosity == 0:
        level = logging.WARNING
    elif verbosity == 1:
        level = logging.INFO
    else:  # verbosity >= 2
        level = logging.DEBUG

    # Configure app-specific logger (not root) to avoid affecting libraries
    app_logger = logging.getLogger("src")
    app_logger.setLevel(level)

    log_format = "%(asctime)s [%(levelname)8s] %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S"
    formatter = logging.Formatter(log_format, datefmt=date_format)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    app_logger.addHandler(console_handler)

    if logdir:
        log_path = Path(logdir)
        log_path.mkdir(parents=True, exist_ok=True)

        # Timestamped filename in local timezone
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = log_path / f"confluence-publish_{timestamp}.log"

        file_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        file_formatter = logging.Formatter(file_format, datefmt=date_format)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(file_formatter)
        app_logger.addHandler(file_handler)

        logger.info(f"Logging to file: {log_file}")


def _run_init(config_path: str, verbosity: int, no_color: bool) -> None:
    """Run initialization command.

    Args:
        config_path: Where to write the sample configuration
        verbosity: Verbosity level
        no_color: Whether to disable colored output
    """
    _configure_logging(verbosity)
    output = OutputHandler(verbosity=verbosity, no_color=no_color)

    try:
        init_cmd = InitCommand()
        written_path = init_cmd.run(config_path)

        output.success(f"Sample configuration written to {written_path}")
        output.info("")
        output.info("Next steps:")
        output.info(f"  1. Edit {written_path} and list the files to publish")
        output.info("  2. Set CONFLUENCE_USER and CONFLUENCE_API_TOKEN (or a .env file)")
        output.info("  3. Run 'confluence-publish'")

        raise typer.Exit(ExitCode.SUCCESS)

    except InitError as e:
        logger.error(f"Initialization failed: {e}")
        output.error(f"Initialization failed: {e}")
        raise typer.Exit(ExitCode.GENERAL_ERROR)

    except typer.Exit:
        raise

    except Exception as e:
        logger.exception("Unexpected error during initialization")
        output.error(f"Unexpected error: {e}")
        raise typer.Exit(ExitCode.GENERAL_ERROR)


def _run_publish(
    config_path: str,
    force: bool,
    insecure: bool,
    logdir: Optional[str],
    verbosity: int,
    no_color: bool
) -> None:
    """Run publish command.

    Args:
        config_path: Path to the configuration file
        force: Publish every page unconditionally
        insecure: Skip TLS certificate verification
        logdir: Directory for log files
        verbosity: Verbosity level
        no_color: Whether to disable colored output
    """
    _configure_logging(verbosity, logdir)
    output = OutputHandler(verbosity=verbosity, no_color=no_color)

    publish_cmd = PublishCommand(config_path=config_path, output_handler=output)
    exit_code = publish_cmd.run(force=force, insecure=insecure)

    raise typer.Exit(exit_code)


@app.command()
def main_command(
    config: str = typer.Option(
        DEFAULT_CONFIG_PATH,
        "--config",
        "-c",
        help="Path to the configuration file",
        metavar="PATH",
    ),
    force: bool = typer.Option(
        False,
        "--force",
        "-f",
        help="Publish every page, ignoring the local cache and remote state",
    ),
    insecure: bool = typer.Option(
        False,
        "--insecure",
        help="Skip TLS certificate verification",
    ),
    init: bool = typer.Option(
        False,
        "--init",
        help="Write a sample configuration file and exit",
    ),
    logdir: Optional[str] = typer.Option(
        None,
        "--logdir",
        help="Directory for log files (creates timestamped log file)",
    ),
    verbosity: int = typer.Option(
        0,
        "--verbosity",
        "-v",
        help="Verbosity level: 0=summary, 1=info, 2=debug",
    ),
    no_color: bool = typer.Option(
        False,
        "--no-color",
        help="Disable colored output",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        help="Show version and exit",
    ),
) -> None:
    """Publish local Markdown files to Confluence pages.

    \b
    QUICK START:
      confluence-publish --init                  # Write a sample confluence-publish.yaml
      confluence-publish                         # Publish changed pages
      confluence-publish --force                 # Publish every page unconditionally

    \b
    CREDENTIALS (environment or .env):
      CONFLUENCE_URL, CONFLUENCE_USER, CONFLUENCE_API_TOKEN
      or CONFLUENCE_PERSONAL_ACCESS_TOKEN for Server/Data Center
    """
    if version:
        typer.echo(f"confluence-publish version {__version__}")
        raise typer.Exit()

    if init:
        _run_init(config, verbosity, no_color)
        return

    _run_publish(config, force, insecure, logdir, verbosity, no_color)


def main() -> None:
    """Main entry point for the CLI application.

    This function is called when the module is executed directly or
    when the console script is invoked.
    """
    app()


# Allow running as: python -m src.cli.main
if __name__ == "__main__":
    main()
