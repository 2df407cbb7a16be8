"""InitCommand for configuration initialization.

This module implements the --init command that writes a commented sample
configuration file to start from.
"""

import logging
import os
from typing import Optional

from .config import DEFAULT_CONFIG_PATH
from .errors import InitError

logger = logging.getLogger(__name__)

SAMPLE_CONFIG = """\
# Confluence base URL. Optional, falls back to the CONFLUENCE_URL environment variable.
# Credentials are read from CONFLUENCE_USER and CONFLUENCE_API_TOKEN, or from
# CONFLUENCE_PERSONAL_ACCESS_TOKEN (a .env file next to this config works too).
base_url: https://example.atlassian.net/wiki

# Space to search for pages and create new pages in. Optional, but pages
# can only be created when it is set.
space_key: DOCS

# Directory for the local change cache, relative to this file.
cache_path: build

# Parent for every page that does not declare its own. Optional.
default_parent_page_id: "2345678"

# Banner shown above the content of every page. Optional.
prefix: "This document is automatically generated. Please don't edit it directly!"

# Insert a table of contents into every page.
add_toc: true

# Heading whose section content is replaced by the table of contents. Optional.
replace_section_with_toc: Contents

# Skip TLS certificate verification.
insecure: false

pages:
  - file: README.md
    # Link to an existing page by id. Leave out to search for the page by
    # title, or create it when it does not exist.
    page_id: "1234567890"
    # Parent page id. Optional; without a parent the page is top level.
    parent_id: "1244505"
    # Parent page title, for when the parent id is unknown. Optional.
    parent_page: Parent title
    # Page title. Optional; defaults to the first "# " heading of the file.
    # Titles should be unique within the space.
    title: Title for the page
"""


class InitCommand:
    """Writes a sample publish configuration.

    Example:
        >>> init = InitCommand()
        >>> init.run("confluence-publish.yaml")
    """

    def __init__(self, config_path: Optional[str] = None):
        """Initialize the init command.

        Args:
            config_path: Optional config file path (defaults to confluence-publish.yaml)
        """
        self.config_path = config_path or DEFAULT_CONFIG_PATH

    def _check_config_exists(self) -> None:
        """Check if config file already exists.

        Raises:
            InitError: If config file already exists
        """
        if os.path.exists(self.config_path):
            raise InitError(
                f"Configuration file already exists at {self.config_path}\n"
                "Please delete it first if you want to reinitialize."
            )

    def run(self, config_path: Optional[str] = None) -> str:
        """Write the sample configuration.

        Args:
            config_path: Target path (overrides the one given at construction)

        Returns:
            Path of the written file

        Raises:
            InitError: If the file exists or cannot be written
        """
        if config_path:
            self.config_path = config_path

        self._check_config_exists()

        config_dir = os.path.dirname(self.config_path)
        try:
            if config_dir:
                os.makedirs(config_dir, exist_ok=True)
            with open(self.config_path, 'w', encoding='utf-8') as f:
                f.write(SAMPLE_CONFIG)
        except OSError as e:
            raise InitError(
                f"Failed to write configuration to {self.config_path}: {str(e)}"
            )

        logger.info(f"Sample configuration written to {self.config_path}")
        return self.config_path
