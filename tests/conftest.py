"""
Pytest configuration and fixtures for tools5e-taglinks tests.
"""

import asyncio
import sys
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

# Add src directory to Python path to allow importing tools5e_taglinks
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from tools5e_taglinks.config import TagLinkSettings


class InvalidJson:
    """Marker response body: the server answers 200 with a non-JSON body."""


class ServerError:
    """Marker response body: the server answers 503."""


def _build_mock_client(url_responses: dict[str, Any], delay: float = 0.0) -> AsyncMock:
    """
    Create a mock httpx.AsyncClient that returns predefined responses.

    Args:
        url_responses: Maps exact URLs to JSON response bodies. The dict is
            read on every request, so tests may change it between calls.
            URLs not in the dict answer 404; a ServerError body answers 503.
        delay: Seconds each request takes, to let concurrent callers overlap.
    """
    mock_client = AsyncMock()

    async def get_side_effect(url: str):
        if delay:
            await asyncio.sleep(delay)
        if url in url_responses and url_responses[url] is not ServerError:
            body = url_responses[url]
            json_mock = (
                MagicMock(side_effect=ValueError("Expecting value: line 1 column 1"))
                if body is InvalidJson
                else MagicMock(return_value=body)
            )
            return MagicMock(
                status_code=200,
                json=json_mock,
                raise_for_status=MagicMock(),
            )

        status_code = 503 if url_responses.get(url) is ServerError else 404
        mock_resp = MagicMock(status_code=status_code)

        def raise_status():
            raise httpx.HTTPStatusError(
                f"{status_code} error", request=MagicMock(), response=mock_resp
            )

        mock_resp.raise_for_status = raise_status
        return mock_resp

    mock_client.get = AsyncMock(side_effect=get_side_effect)
    return mock_client


def requested_urls(mock_client: AsyncMock) -> list[str]:
    """URLs passed to the mock client's get(), in call order."""
    return [call.args[0] for call in mock_client.get.call_args_list]


@pytest.fixture
def build_mock_client():
    return _build_mock_client


@pytest.fixture
def settings():
    return TagLinkSettings(mode="link")


@pytest.fixture
def notices():
    """Collects user notices; pass ``notices.append`` as the notifier."""
    return []


@pytest.fixture
def invalid_json():
    return InvalidJson


@pytest.fixture
def server_error():
    return ServerError


@pytest.fixture
def urls_requested():
    return requested_urls
