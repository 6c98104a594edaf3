# conftest.py

import pytest
from unittest.mock import MagicMock, AsyncMock
from skyq.endpoint import SkyqApiEndpoint
from skyq.state import MemoryStateStore


@pytest.fixture
def mock_response():
    response = MagicMock(name="mock_response")
    response.status = 200
    response.text = AsyncMock(return_value='{"key": "value"}')
    return response


@pytest.fixture
def mock_session(mock_response):
    """
    Fixture for a mocked aiohttp.ClientSession.
    session.get and session.post both return an async context manager
    yielding the same mocked response.
    """
    session = MagicMock(name="mock_aiohttp_session")
    mock_get_context = AsyncMock(name="mock_session_get_context")
    mock_get_context.__aenter__.return_value = mock_response
    mock_post_context = AsyncMock(name="mock_session_post_context")
    mock_post_context.__aenter__.return_value = mock_response

    session.get = MagicMock(return_value=mock_get_context)
    session.post = MagicMock(return_value=mock_post_context)
    return session


@pytest.fixture
def store():
    return MemoryStateStore()


@pytest.fixture
def mock_endpoint():
    """An endpoint whose requests are AsyncMocks."""
    return AsyncMock(spec=SkyqApiEndpoint)


@pytest.fixture
def base_data():
    """A trimmed /as/system/information payload."""
    return {
        "activeStandby": False,
        "ASVersion": "Q1.2.3",
        "deviceType": "GATEWAYSTB",
        "hardwareModel": "ES240",
        "hardwareName": "Falcon",
        "IPAddress": "192.168.1.50",
        "manufacturer": "Sky",
        "numDTTTuners": 0,
        "serialNumber": "0123456789",
        "uhdCapable": True,
        "systemUptime": 86400,
    }


@pytest.fixture
def services():
    return [
        {"sk": "1", "t": "BBC", "sf": "hd"},
        {"sk": "2002", "t": "BBC One Lon", "sf": "sd"},
        {"sk": "2019", "t": "ITV", "sf": "hd"},
    ]


@pytest.fixture
def media_info_response():
    """Builds a SkyPlay GetMediaInfo SOAP response for a CurrentURI."""

    def _build(current_uri: str) -> str:
        return (
            '<?xml version="1.0"?>'
            '<s:Envelope xmlns:s="http://schemas.xmlsoap.org/soap/envelope/" '
            's:encodingStyle="http://schemas.xmlsoap.org/soap/encoding/">'
            "<s:Body>"
            '<u:GetMediaInfoResponse xmlns:u="urn:schemas-nds-com:service:SkyPlay:2">'
            "<NrTracks>1</NrTracks>"
            f"<CurrentURI>{current_uri}</CurrentURI>"
            "<CurrentURIMetaData>NOT_IMPLEMENTED</CurrentURIMetaData>"
            "</u:GetMediaInfoResponse>"
            "</s:Body>"
            "</s:Envelope>"
        )

    return _build
