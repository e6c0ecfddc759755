"""Global test configuration and fixtures."""
import os
import pytest
from typing import Dict, Optional
from unittest.mock import AsyncMock, MagicMock

from src.core.config import Config
from src.utils.api import Connection, ResponseEnvelope

ENV_PREFIX = "BANDWIDTH_"

@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep BANDWIDTH_ variables from the host environment out of tests"""
    for key in list(os.environ):
        if key.startswith(ENV_PREFIX):
            monkeypatch.delenv(key)
    yield

@pytest.fixture
def config():
    """Default configuration"""
    return Config()

@pytest.fixture
def connection():
    """Fixture for connection credentials"""
    return Connection(user_id="u1", api_token="token", api_secret="secret", host="api.example.com")

def build_envelope(
    status: int = 200,
    body: bytes = b"",
    content_type: str = "",
    headers: Optional[Dict[str, str]] = None
) -> ResponseEnvelope:
    """Build a response envelope for interpreter and facade tests"""
    return ResponseEnvelope.build(status=status, body=body, content_type=content_type, headers=headers)

def build_http_response(
    status: int = 200,
    body: bytes = b"",
    content_type: str = "application/json",
    headers: Optional[Dict[str, str]] = None
):
    """Build an async context manager standing in for ClientSession.request()"""
    mock_response = MagicMock()
    mock_response.status = status
    mock_response.content_type = content_type
    mock_response.read = AsyncMock(return_value=body)
    mock_response.headers = headers or {"Content-Type": content_type}

    mock_cm = AsyncMock()
    mock_cm.__aenter__.return_value = mock_response
    mock_cm.__aexit__.return_value = None
    return mock_cm

@pytest.fixture
def make_envelope():
    """Factory fixture for response envelopes"""
    return build_envelope

@pytest.fixture
def make_http_response():
    """Factory fixture for mocked aiohttp responses"""
    return build_http_response
