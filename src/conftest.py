"""
Shared fixtures for all apps: API token clients and a clean wallet service.
"""

import typing as t
from collections.abc import Generator

import pytest
from django.test.client import Client

import wallet.service

API_TOKEN = "test-api-token"


@pytest.fixture(autouse=True)
def api_tokens(settings: t.Any) -> None:
    """Accept ``API_TOKEN`` on every authenticated endpoint."""
    settings.WALLET_API_TOKENS = [API_TOKEN]


@pytest.fixture(autouse=True)
def reset_wallet_service() -> Generator[None, None, None]:
    """Drop the wallet service singleton so settings overrides take effect."""
    wallet.service._wallet_service = None
    yield
    wallet.service._wallet_service = None


@pytest.fixture
def api_client() -> Client:
    """A client authenticated with a valid API token."""
    return Client(HTTP_AUTHORIZATION=f"Bearer {API_TOKEN}")  # type: ignore[arg-type]
