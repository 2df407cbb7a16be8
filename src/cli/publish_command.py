"""Publish command orchestration for CLI.

This module provides the PublishCommand class that runs one publish: load
the configuration, build the Confluence gateway, publish every configured
document and report the outcome.
"""

import logging
import os
from typing import Optional

from src.cli.config import DEFAULT_CONFIG_PATH, ConfigLoader
from src.cli.errors import CLIError, ConfigError, FilesystemError
from src.cli.models import ExitCode
from src.cli.output import OutputHandler
from src.confluence_client.api_wrapper import APIWrapper
from src.confluence_client.auth import Authenticator
from src.confluence_client.errors import (
    APIAccessError,
    APIUnreachableError,
    InvalidCredentialsError,
)
from src.content_converter.renderer import MarkupRenderer
from src.page_sync.errors import SpaceNotFoundError
from src.page_sync.publisher import publish_pages

logger = logging.getLogger(__name__)


class PublishCommand:
    """Orchestrates a publish run for the CLI.

    The publish workflow:
        1. Load configuration
        2. Validate credentials and build the API wrapper
        3. Publish the configured documents (see publish_pages)
        4. Print the summary and return an exit code

    Example:
        >>> output = OutputHandler(verbosity=1)
        >>> publish_cmd = PublishCommand(output_handler=output)
        >>> exit_code = publish_cmd.run(force=False)
        >>> sys.exit(exit_code)
    """

    def __init__(
        self,
        config_path: str = DEFAULT_CONFIG_PATH,
        output_handler: Optional[OutputHandler] = None,
        authenticator: Optional[Authenticator] = None,
        api: Optional[APIWrapper] = None,
        renderer: Optional[MarkupRenderer] = None,
    ):
        """Initialize publish command with dependencies.

        Args:
            config_path: Path to configuration YAML file
            output_handler: OutputHandler for terminal output (optional)
            authenticator: Authenticator for Confluence API (optional)
            api: APIWrapper to use instead of building one (optional)
            renderer: Markdown renderer (optional, defaults to Pandoc)
        """
        self.config_path = config_path
        self.output_handler = output_handler or OutputHandler()
        self.authenticator = authenticator
        self.api = api
        self.renderer = renderer

    def run(self, force: bool = False, insecure: bool = False) -> ExitCode:
        """Execute the publish run.

        Args:
            force: Bypass the local cache and remote drift checks
            insecure: Skip TLS certificate verification (or'ed with config)

        Returns:
            ExitCode indicating success or specific failure type
        """
        try:
            if not os.path.exists(self.config_path):
                self.output_handler.print(f"No configuration found at {self.config_path}.\n")
                self.output_handler.print("To get started, write a sample configuration:\n")
                self.output_handler.print("  confluence-publish --init\n")
                self.output_handler.print("Required environment variables:")
                self.output_handler.print("  CONFLUENCE_URL                    - Your Confluence base URL")
                self.output_handler.print("  CONFLUENCE_USER                   - Your email address")
                self.output_handler.print("  CONFLUENCE_API_TOKEN              - API token from Atlassian")
                self.output_handler.print("  CONFLUENCE_PERSONAL_ACCESS_TOKEN  - Alternative to user/token (Server/Data Center)\n")
                self.output_handler.print("Run 'confluence-publish --help' for more options.")
                return ExitCode.GENERAL_ERROR

            logger.info(f"Loading configuration from {self.config_path}")
            self.output_handler.info(f"Loading configuration from {self.config_path}")
            config = ConfigLoader.load(self.config_path)

            if not config.pages:
                self.output_handler.warning("No pages configured")
                return ExitCode.SUCCESS

            if not self.api:
                if not self.authenticator:
                    self.authenticator = Authenticator(base_url=config.base_url)
                self.authenticator.get_credentials()
                self.api = APIWrapper(self.authenticator, insecure=insecure or config.insecure)

            if force:
                self.output_handler.info("Force mode: cache and remote checks are skipped")

            with self.output_handler.spinner(f"Publishing {len(config.pages)} page(s)..."):
                summary = publish_pages(config, self.api, force=force, renderer=self.renderer)

            self.output_handler.print_summary(
                created=summary.created,
                updated=summary.updated,
                unchanged=summary.unchanged,
                failed=summary.failed,
                failed_files=[config.relative_path(path) for path in summary.failed_files],
            )

            if summary.failed > 0:
                return ExitCode.PAGE_FAILURES
            return ExitCode.SUCCESS

        except InvalidCredentialsError as e:
            logger.error(f"Authentication failed: {e}")
            self.output_handler.error(f"Authentication failed: {e}")
            self.output_handler.info(
                "Check CONFLUENCE_USER and CONFLUENCE_API_TOKEN "
                "(or CONFLUENCE_PERSONAL_ACCESS_TOKEN) environment variables"
            )
            return ExitCode.AUTH_ERROR

        except (APIUnreachableError, APIAccessError) as e:
            logger.error(f"API error: {e}")
            self.output_handler.error(f"API error: {e}")
            self.output_handler.info("Check your internet connection and try again")
            return ExitCode.NETWORK_ERROR

        except SpaceNotFoundError as e:
            logger.error(f"{e}")
            self.output_handler.error(f"{e}")
            return ExitCode.GENERAL_ERROR

        except (ConfigError, FilesystemError) as e:
            logger.error(f"Configuration error: {e}")
            self.output_handler.error(f"Configuration error: {e}")
            return ExitCode.GENERAL_ERROR

        except CLIError as e:
            logger.error(f"CLI error: {e}")
            self.output_handler.error(f"Error: {e}")
            return ExitCode.GENERAL_ERROR

        except Exception as e:
            logger.exception("Unexpected error during publish")
            self.output_handler.error(f"Unexpected error: {e}")
            return ExitCode.GENERAL_ERROR
