"""Authentication module for loading Confluence credentials.

This module handles loading Confluence credentials from environment variables
using python-dotenv. Two schemes are supported: user + API token (Confluence
Cloud basic auth) and a personal access token (Server / Data Center bearer
auth). Missing credentials raise InvalidCredentialsError.
"""

import os
from typing import NamedTuple, Optional

from dotenv import load_dotenv

from .errors import InvalidCredentialsError


class Credentials(NamedTuple):
    """Confluence API credentials.

    Exactly one of (user, api_token) or personal_access_token is set.
    """
    url: str
    user: Optional[str]
    api_token: Optional[str]
    personal_access_token: Optional[str] = None

    @property
    def uses_token(self) -> bool:
        """True when the bearer-token scheme is in use."""
        return bool(self.personal_access_token)


class Authenticator:
    """Loads and validates Confluence credentials from environment variables.

    Credentials are loaded from a .env file using python-dotenv and are never
    cached or logged to prevent security risks.

    Environment variables:
        CONFLUENCE_URL: Confluence base URL (e.g., https://yourinstance.atlassian.net/wiki).
            Optional when the configuration file provides base_url.
        CONFLUENCE_USER: Confluence user email address
        CONFLUENCE_API_TOKEN: Confluence API token
        CONFLUENCE_PERSONAL_ACCESS_TOKEN: Personal access token, used instead
            of CONFLUENCE_USER / CONFLUENCE_API_TOKEN

    Example:
        >>> auth = Authenticator(base_url="https://example.atlassian.net/wiki")
        >>> creds = auth.get_credentials()
        >>> print(f"Connecting to {creds.url}")
    """

    def __init__(self, base_url: Optional[str] = None):
        """Initialize the authenticator by loading environment variables from .env file.

        Args:
            base_url: Base URL from the configuration file; takes precedence
                over CONFLUENCE_URL
        """
        load_dotenv()
        self._base_url = base_url

    def get_credentials(self) -> Credentials:
        """Get Confluence credentials from environment variables.

        Returns:
            Credentials: A named tuple with url and one credential scheme

        Raises:
            InvalidCredentialsError: If the URL or every credential scheme is missing
        """
        url = self._base_url or os.getenv('CONFLUENCE_URL')
        user = os.getenv('CONFLUENCE_USER')
        api_token = os.getenv('CONFLUENCE_API_TOKEN')
        personal_access_token = os.getenv('CONFLUENCE_PERSONAL_ACCESS_TOKEN')

        if not url:
            raise InvalidCredentialsError(user=user or "unknown", endpoint="unknown")

        if personal_access_token:
            return Credentials(
                url=url.rstrip('/'),
                user=None,
                api_token=None,
                personal_access_token=personal_access_token,
            )

        if not user or not api_token:
            raise InvalidCredentialsError(user=user or "unknown", endpoint=url)

        return Credentials(url=url.rstrip('/'), user=user, api_token=api_token)
