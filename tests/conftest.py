"""Shared test fixtures for pytest."""

from unittest.mock import AsyncMock

import pytest

from catalog.client import CatalogClient
from session.state import SessionSnapshot, SessionState
from tests.factories import make_resource, make_search_payload


@pytest.fixture
def mock_catalog_client():
    """Create a mock catalog client."""
    client = AsyncMock(spec=CatalogClient)
    client.default_region_code = "us"
    client.check_api = AsyncMock(return_value=True)
    return client


@pytest.fixture
def session_state():
    """Session state with a developer token and no user token."""
    return SessionState(SessionSnapshot(developer_token="dev-token"))


@pytest.fixture
def sample_search_payload():
    """A search response with two songs and one album."""
    return make_search_payload(
        songs=[
            make_resource(id="s1", name="One More Time", artist_name="Daft Punk"),
            make_resource(id="s2", name="Around the World", artist_name="Daft Punk"),
        ],
        albums=[
            make_resource(id="a1", type="albums", name="Discovery", artist_name="Daft Punk"),
        ],
    )
