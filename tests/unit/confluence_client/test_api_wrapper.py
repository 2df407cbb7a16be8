"""Unit tests for confluence_client.api_wrapper module."""

import pytest
from unittest.mock import Mock, patch
from requests.exceptions import HTTPError, ConnectionError
from src.confluence_client.api_wrapper import APIWrapper, PAGE_EXPAND
from src.confluence_client.auth import Credentials
from src.confluence_client.errors import (
    InvalidCredentialsError,
    PageNotFoundError,
    APIUnreachableError,
    APIAccessError
)


def create_mock_auth(token=None):
    """Create a mock authenticator with standard credentials."""
    mock_auth = Mock()
    if token:
        creds = Credentials(
            url='https://confluence.example.com',
            user=None,
            api_token=None,
            personal_access_token=token,
        )
    else:
        creds = Credentials(
            url='https://test.atlassian.net/wiki',
            user='test@example.com',
            api_token='token123',
        )
    mock_auth.get_credentials.return_value = creds
    return mock_auth


def http_error(status_code):
    error = HTTPError()
    error.response = Mock()
    error.response.status_code = status_code
    return error


class TestClientConstruction:
    """Test cases for lazy client construction."""

    @patch('src.confluence_client.api_wrapper.Confluence')
    def test_init_lazy_loads_client(self, mock_confluence):
        """__init__ should not create client until first use."""
        mock_auth = Mock()
        APIWrapper(mock_auth)

        mock_auth.get_credentials.assert_not_called()
        mock_confluence.assert_not_called()

    @patch('src.confluence_client.api_wrapper.Confluence')
    def test_basic_auth_client(self, mock_confluence):
        """User + API token credentials build a cloud client."""
        wrapper = APIWrapper(create_mock_auth())
        wrapper.get_page('123')

        mock_confluence.assert_called_once_with(
            url='https://test.atlassian.net/wiki',
            username='test@example.com',
            password='token123',
            cloud=True,
            verify_ssl=True,
            timeout=30,
        )

    @patch('src.confluence_client.api_wrapper.Confluence')
    def test_token_client_and_insecure(self, mock_confluence):
        """A personal access token builds a bearer client; insecure disables TLS checks."""
        wrapper = APIWrapper(create_mock_auth(token='pat-abc'), insecure=True)
        wrapper.get_page('123')

        mock_confluence.assert_called_once_with(
            url='https://confluence.example.com',
            token='pat-abc',
            verify_ssl=False,
            timeout=30,
        )

    @patch('src.confluence_client.api_wrapper.Confluence')
    def test_client_is_reused(self, mock_confluence):
        wrapper = APIWrapper(create_mock_auth())
        wrapper.get_page('1')
        wrapper.get_page('2')

        assert mock_confluence.call_count == 1


class TestReads:
    """Test cases for read operations."""

    @patch('src.confluence_client.api_wrapper.Confluence')
    def test_get_page_uses_full_expand(self, mock_confluence):
        mock_client = Mock()
        mock_client.get_page_by_id.return_value = {'id': '123', 'title': 'Test'}
        mock_confluence.return_value = mock_client

        result = APIWrapper(create_mock_auth()).get_page('123')

        assert result == {'id': '123', 'title': 'Test'}
        mock_client.get_page_by_id.assert_called_once_with(page_id='123', expand=PAGE_EXPAND)
        assert 'ancestors' in PAGE_EXPAND
        assert 'body.storage' in PAGE_EXPAND

    @patch('src.confluence_client.api_wrapper.Confluence')
    def test_get_page_raises_page_not_found_on_404(self, mock_confluence):
        mock_client = Mock()
        mock_client.get_page_by_id.side_effect = http_error(404)
        mock_confluence.return_value = mock_client

        with pytest.raises(PageNotFoundError) as exc_info:
            APIWrapper(create_mock_auth()).get_page('123')

        assert exc_info.value.page_id == '123'

    @patch('src.confluence_client.api_wrapper.Confluence')
    def test_get_page_raises_invalid_credentials_on_401(self, mock_confluence):
        mock_client = Mock()
        mock_client.get_page_by_id.side_effect = http_error(401)
        mock_confluence.return_value = mock_client

        with pytest.raises(InvalidCredentialsError) as exc_info:
            APIWrapper(create_mock_auth()).get_page('123')

        assert exc_info.value.user == 'test@example.com'

    @patch('src.confluence_client.api_wrapper.Confluence')
    def test_get_page_raises_unreachable_on_connection_error(self, mock_confluence):
        mock_client = Mock()
        mock_client.get_page_by_id.side_effect = ConnectionError("Connection refused")
        mock_confluence.return_value = mock_client

        with pytest.raises(APIUnreachableError):
            APIWrapper(create_mock_auth()).get_page('123')

    @patch('src.confluence_client.api_wrapper.Confluence')
    def test_get_space(self, mock_confluence):
        mock_client = Mock()
        mock_client.get_space.return_value = {'key': 'DOCS', 'name': 'Docs'}
        mock_confluence.return_value = mock_client

        result = APIWrapper(create_mock_auth()).get_space('DOCS')

        assert result['key'] == 'DOCS'
        mock_client.get_space.assert_called_once_with(space_key='DOCS', expand='homepage')

    @patch('src.confluence_client.api_wrapper.Confluence')
    def test_search_pages_by_title_scoped_to_space(self, mock_confluence):
        mock_client = Mock()
        mock_client.get.return_value = {'results': [{'id': '42', 'title': 'Setup Guide'}]}
        mock_confluence.return_value = mock_client

        results = APIWrapper(create_mock_auth()).search_pages_by_title('Setup Guide', 'DOCS')

        assert results == [{'id': '42', 'title': 'Setup Guide'}]
        mock_client.get.assert_called_once_with(
            'rest/api/content',
            params={
                'title': 'Setup Guide',
                'type': 'page',
                'expand': PAGE_EXPAND,
                'spaceKey': 'DOCS',
            },
        )

    @patch('src.confluence_client.api_wrapper.Confluence')
    def test_search_pages_by_title_without_space(self, mock_confluence):
        mock_client = Mock()
        mock_client.get.return_value = None
        mock_confluence.return_value = mock_client

        results = APIWrapper(create_mock_auth()).search_pages_by_title('Setup Guide')

        assert results == []
        params = mock_client.get.call_args.kwargs['params']
        assert 'spaceKey' not in params

    @patch('src.confluence_client.api_wrapper.Confluence')
    def test_get_attachments(self, mock_confluence):
        mock_client = Mock()
        mock_client.get.return_value = {'results': [{'id': 'att1', 'title': 'a.png'}]}
        mock_confluence.return_value = mock_client

        results = APIWrapper(create_mock_auth()).get_attachments('555')

        assert results == [{'id': 'att1', 'title': 'a.png'}]
        mock_client.get.assert_called_once_with(
            'rest/api/content/555/child/attachment',
            params={'start': 0, 'limit': 200},
        )

    @patch('src.confluence_client.api_wrapper.Confluence')
    def test_get_attachments_follows_next_link(self, mock_confluence):
        mock_client = Mock()
        mock_client.get.side_effect = [
            {
                'results': [{'id': 'att1'}, {'id': 'att2'}],
                '_links': {'next': '/rest/api/content/555/child/attachment?start=2'},
            },
            {'results': [{'id': 'att3'}], '_links': {}},
        ]
        mock_confluence.return_value = mock_client

        results = APIWrapper(create_mock_auth()).get_attachments('555')

        assert [r['id'] for r in results] == ['att1', 'att2', 'att3']
        assert mock_client.get.call_count == 2
        assert mock_client.get.call_args.kwargs['params'] == {'start': 2, 'limit': 200}

    def test_get_attachments_rejects_non_numeric_id(self):
        with pytest.raises(ValueError):
            APIWrapper(create_mock_auth()).get_attachments('abc')


class TestWrites:
    """Test cases for create/update with the single retry."""

    @patch('src.confluence_client.api_wrapper.Confluence')
    def test_create_page_success(self, mock_confluence):
        mock_client = Mock()
        mock_client.post.return_value = {'id': '9001'}
        mock_confluence.return_value = mock_client
        payload = {'title': 'Setup Guide'}

        result = APIWrapper(create_mock_auth()).create_page(payload)

        assert result == {'id': '9001'}
        mock_client.post.assert_called_once_with(
            'rest/api/content',
            data=payload,
            params={'expand': PAGE_EXPAND},
        )

    @patch('src.confluence_client.api_wrapper.Confluence')
    def test_create_page_retries_once(self, mock_confluence):
        mock_client = Mock()
        mock_client.post.side_effect = [Exception("boom"), {'id': '9001'}]
        mock_confluence.return_value = mock_client

        result = APIWrapper(create_mock_auth()).create_page({'title': 'T'})

        assert result == {'id': '9001'}
        assert mock_client.post.call_count == 2

    @patch('src.confluence_client.api_wrapper.Confluence')
    def test_create_page_fails_after_second_attempt(self, mock_confluence):
        mock_client = Mock()
        mock_client.post.side_effect = [Exception("boom"), Exception("boom again")]
        mock_confluence.return_value = mock_client

        with pytest.raises(APIAccessError):
            APIWrapper(create_mock_auth()).create_page({'title': 'T'})

        assert mock_client.post.call_count == 2

    @patch('src.confluence_client.api_wrapper.Confluence')
    def test_update_page_puts_payload(self, mock_confluence):
        mock_client = Mock()
        mock_confluence.return_value = mock_client
        payload = {'title': 'T', 'version': {'number': '4'}}

        APIWrapper(create_mock_auth()).update_page('555', payload)

        mock_client.put.assert_called_once_with('rest/api/content/555', data=payload)

    @patch('src.confluence_client.api_wrapper.Confluence')
    def test_update_page_conflict_is_access_error(self, mock_confluence):
        mock_client = Mock()
        mock_client.put.side_effect = Exception("409 Conflict: version mismatch")
        mock_confluence.return_value = mock_client

        with pytest.raises(APIAccessError) as exc_info:
            APIWrapper(create_mock_auth()).update_page('555', {'version': {'number': '4'}})

        assert 'Version conflict' in str(exc_info.value)
        assert mock_client.put.call_count == 2


class TestBestEffortAttachments:
    """Upload and delete never raise."""

    @patch('src.confluence_client.api_wrapper.Confluence')
    def test_upload_attachment_success(self, mock_confluence):
        mock_client = Mock()
        mock_confluence.return_value = mock_client

        assert APIWrapper(create_mock_auth()).upload_attachment('/tmp/a.png', '555') is True
        mock_client.attach_file.assert_called_once_with('/tmp/a.png', page_id='555')

    @patch('src.confluence_client.api_wrapper.Confluence')
    def test_upload_attachment_failure_is_swallowed(self, mock_confluence):
        mock_client = Mock()
        mock_client.attach_file.side_effect = Exception("413 too large")
        mock_confluence.return_value = mock_client

        assert APIWrapper(create_mock_auth()).upload_attachment('/tmp/a.png', '555') is False

    @patch('src.confluence_client.api_wrapper.Confluence')
    def test_delete_attachment_success(self, mock_confluence):
        mock_client = Mock()
        mock_confluence.return_value = mock_client

        assert APIWrapper(create_mock_auth()).delete_attachment('att7', 'old.png') is True
        mock_client.delete.assert_called_once_with('rest/api/content/att7')

    @patch('src.confluence_client.api_wrapper.Confluence')
    def test_delete_attachment_failure_is_swallowed(self, mock_confluence):
        mock_client = Mock()
        mock_client.delete.side_effect = http_error(403)
        mock_confluence.return_value = mock_client

        assert APIWrapper(create_mock_auth()).delete_attachment('att7') is False


class TestPageUrl:

    def test_page_url(self):
        wrapper = APIWrapper(create_mock_auth())
        assert wrapper.page_url('555') == (
            'https://test.atlassian.net/wiki/pages/viewpage.action?pageId=555'
        )

    def test_page_url_strips_rest_api_suffix(self):
        mock_auth = Mock()
        mock_auth.get_credentials.return_value = Credentials(
            url='https://wiki.example.com/rest/api', user='u', api_token='t'
        )
        assert APIWrapper(mock_auth).page_url('7') == (
            'https://wiki.example.com/pages/viewpage.action?pageId=7'
        )
