"""YAML configuration loading and validation.

This module loads the publish configuration: which markdown files to
publish, where to put them in Confluence, and global rendering options.
Document paths and the cache directory are resolved against the directory
of the configuration file.
"""

import logging
import os
from typing import Any, Dict, Optional

import yaml

from src.models.document import Document
from src.page_sync.models import PublishConfig

from .errors import ConfigError, FilesystemError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "confluence-publish.yaml"


class ConfigLoader:
    """Handles configuration file loading and validation.

    Configuration file structure:
        base_url: https://example.atlassian.net/wiki
        space_key: DOCS
        cache_path: build
        default_parent_page_id: "2345678"
        prefix: "This document is automatically generated."
        add_toc: false
        replace_section_with_toc: Contents
        insecure: false
        pages:
          - file: README.md
            page_id: "1234567890"
            parent_id: "1244505"
            parent_page: Parent title
            title: Title for the page
            toc: true
    """

    # Required top-level config fields
    REQUIRED_TOP_LEVEL_FIELDS = {'pages'}

    # Default values for optional fields
    DEFAULTS = {
        'cache_path': 'build',
        'add_toc': False,
        'insecure': False,
    }

    OPTIONAL_STRING_FIELDS = (
        'base_url',
        'space_key',
        'default_parent_page_id',
        'prefix',
        'replace_section_with_toc',
    )

    PAGE_STRING_FIELDS = ('page_id', 'parent_id', 'parent_page', 'title')

    @classmethod
    def load(cls, config_path: str) -> PublishConfig:
        """Load and parse configuration from a YAML file.

        Args:
            config_path: Path to the YAML configuration file

        Returns:
            PublishConfig with absolute document paths

        Raises:
            FilesystemError: If file cannot be read
            ConfigError: If configuration is invalid or malformed
        """
        config_path = os.path.abspath(config_path)
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                content = f.read()
        except FileNotFoundError:
            raise FilesystemError(
                config_path,
                'read',
                'Configuration file not found'
            )
        except PermissionError:
            raise FilesystemError(
                config_path,
                'read',
                'Permission denied'
            )
        except OSError as e:
            raise FilesystemError(
                config_path,
                'read',
                str(e)
            )

        try:
            config_dict = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ConfigError(
                f"Invalid YAML syntax: {str(e)}"
            )

        if config_dict is None:
            raise ConfigError("Configuration file is empty")

        if not isinstance(config_dict, dict):
            raise ConfigError(
                f"Configuration must be a YAML dictionary, got {type(config_dict).__name__}"
            )

        config = cls._parse_config(config_dict, config_path)
        logger.debug(f"Loaded {len(config.pages)} page(s) from {config_path}")
        return config

    @classmethod
    def _parse_config(cls, config_dict: Dict[str, Any], config_path: str) -> PublishConfig:
        """Parse and validate configuration dictionary.

        Args:
            config_dict: Raw configuration dictionary from YAML
            config_path: Absolute path of the configuration file

        Returns:
            Validated PublishConfig object

        Raises:
            ConfigError: If configuration is invalid
        """
        missing_fields = cls.REQUIRED_TOP_LEVEL_FIELDS - set(config_dict.keys())
        if missing_fields:
            raise ConfigError(
                f"Missing required fields: {', '.join(sorted(missing_fields))}"
            )

        pages_raw = config_dict.get('pages')
        if not isinstance(pages_raw, list):
            raise ConfigError(
                "Field 'pages' must be a list",
                'pages'
            )

        config_dir = os.path.dirname(config_path)
        pages = tuple(
            cls._parse_page(page_dict, i, config_dir)
            for i, page_dict in enumerate(pages_raw)
        )

        strings = {
            name: cls._optional_string(config_dict, name, name)
            for name in cls.OPTIONAL_STRING_FIELDS
        }

        cache_path = config_dict.get('cache_path', cls.DEFAULTS['cache_path'])
        if not isinstance(cache_path, str) or not cache_path.strip():
            raise ConfigError(
                "Field 'cache_path' must be a non-empty string",
                'cache_path'
            )

        add_toc = cls._bool(config_dict, 'add_toc', cls.DEFAULTS['add_toc'], 'add_toc')
        insecure = cls._bool(config_dict, 'insecure', cls.DEFAULTS['insecure'], 'insecure')

        return PublishConfig(
            config_path=config_path,
            pages=pages,
            base_url=strings['base_url'],
            space_key=strings['space_key'],
            cache_path=cache_path,
            default_parent_page_id=strings['default_parent_page_id'],
            prefix=strings['prefix'],
            add_toc=add_toc,
            replace_section_with_toc=strings['replace_section_with_toc'],
            insecure=insecure,
        )

    @classmethod
    def _parse_page(cls, page_dict: Any, index: int, config_dir: str) -> Document:
        field_prefix = f'pages[{index}]'
        if not isinstance(page_dict, dict):
            raise ConfigError(
                f"Page configuration at index {index} must be a dictionary",
                field_prefix
            )

        file_value = page_dict.get('file')
        if not isinstance(file_value, str) or not file_value.strip():
            raise ConfigError(
                f"Missing required field 'file' in page {index}",
                f'{field_prefix}.file'
            )

        strings = {
            name: cls._optional_string(page_dict, name, f'{field_prefix}.{name}')
            for name in cls.PAGE_STRING_FIELDS
        }

        toc = page_dict.get('toc')
        if toc is not None and not isinstance(toc, bool):
            raise ConfigError(
                f"Field 'toc' in page {index} must be a boolean",
                f'{field_prefix}.toc'
            )

        return Document(
            file_path=os.path.normpath(os.path.join(config_dir, file_value)),
            title=strings['title'],
            page_id=strings['page_id'],
            parent_id=strings['parent_id'],
            parent_page=strings['parent_page'],
            toc=toc,
        )

    @staticmethod
    def _optional_string(values: Dict[str, Any], name: str, config_field: str) -> Optional[str]:
        """Read an optional scalar as string; numeric ids are accepted."""
        value = values.get(name)
        if value is None:
            return None
        if isinstance(value, bool) or not isinstance(value, (str, int)):
            raise ConfigError(
                f"Field '{name}' must be a string, got {type(value).__name__}",
                config_field
            )
        value = str(value).strip()
        return value or None

    @staticmethod
    def _bool(values: Dict[str, Any], name: str, default: bool, config_field: str) -> bool:
        value = values.get(name, default)
        if value is None:
            return default
        if not isinstance(value, bool):
            raise ConfigError(
                f"Field '{name}' must be a boolean, got {type(value).__name__}",
                config_field
            )
        return value
