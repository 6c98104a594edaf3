# test_endpoint.py
import asyncio

import aiohttp
import pytest
from unittest.mock import AsyncMock, ANY
from skyq.endpoint import SkyqApiEndpoint
from skyq.exceptions import (
    SkyqConnectionException,
    SkyqInvalidDataException,
    SkyqRequestException,
    SkyqResponseException,
)


class TestSkyqApiEndpoint:
    """Tests for the SkyqApiEndpoint class."""

    def test_init_urls(self, mock_session):
        """Test that REST and UPnP base URLs are built from the host."""
        api = SkyqApiEndpoint("192.168.1.50", mock_session)
        assert str(api) == "http://192.168.1.50:9006"
        assert api.upnp_url == "http://192.168.1.50:49153"

    @pytest.mark.asyncio
    async def test_fetch_base_data_ok(self, mock_session, mock_response):
        """Test a successful system information request."""
        mock_response.text = AsyncMock(
            return_value='{"activeStandby": false, "modelNumber": "Q200"}'
        )
        api = SkyqApiEndpoint("192.168.1.50", mock_session)

        data = await api.async_fetch_base_data()

        assert data == {"activeStandby": False, "modelNumber": "Q200"}
        mock_session.get.assert_called_with(
            "http://192.168.1.50:9006/as/system/information",
            headers=None,
            timeout=ANY,
        )

    @pytest.mark.asyncio
    async def test_non_200_raises_response_exception(
        self, mock_session, mock_response
    ):
        """Test that any status other than 200 is reported with the status."""
        mock_response.status = 500
        api = SkyqApiEndpoint("192.168.1.50", mock_session)

        with pytest.raises(SkyqResponseException) as exc_info:
            await api.async_fetch_base_data()

        assert exc_info.value.status == 500

    @pytest.mark.asyncio
    async def test_invalid_json_raises_invalid_data(self, mock_session, mock_response):
        mock_response.text = AsyncMock(return_value="<html>not json</html>")
        api = SkyqApiEndpoint("192.168.1.50", mock_session)

        with pytest.raises(SkyqInvalidDataException):
            await api.async_fetch_base_data()

    @pytest.mark.asyncio
    async def test_base_data_must_be_an_object(self, mock_session, mock_response):
        mock_response.text = AsyncMock(return_value="[1, 2, 3]")
        api = SkyqApiEndpoint("192.168.1.50", mock_session)

        with pytest.raises(SkyqInvalidDataException):
            await api.async_fetch_base_data()

    @pytest.mark.asyncio
    async def test_connection_error_raises_connection_exception(self, mock_session):
        """Test that a request without a response is classified as connectivity."""
        mock_session.get.side_effect = aiohttp.ClientConnectionError("refused")
        api = SkyqApiEndpoint("192.168.1.50", mock_session)

        with pytest.raises(SkyqConnectionException):
            await api.async_fetch_services()

    @pytest.mark.asyncio
    async def test_timeout_raises_connection_exception(self, mock_session):
        mock_session.get.side_effect = asyncio.TimeoutError()
        api = SkyqApiEndpoint("192.168.1.50", mock_session)

        with pytest.raises(SkyqConnectionException):
            await api.async_fetch_base_data()

    @pytest.mark.asyncio
    async def test_invalid_url_raises_request_exception(self, mock_session):
        """Test that a request that cannot be built is not reported as connectivity."""
        mock_session.get.side_effect = aiohttp.InvalidURL("http://:9006")
        api = SkyqApiEndpoint("192.168.1.50", mock_session)

        with pytest.raises(SkyqRequestException) as exc_info:
            await api.async_fetch_base_data()

        assert not isinstance(exc_info.value, SkyqConnectionException)

    @pytest.mark.asyncio
    async def test_fetch_services(self, mock_session, mock_response):
        mock_response.text = AsyncMock(
            return_value='{"services": [{"sk": "2002", "t": "BBC One", "sf": "hd"}]}'
        )
        api = SkyqApiEndpoint("192.168.1.50", mock_session)

        services = await api.async_fetch_services()

        assert services == [{"sk": "2002", "t": "BBC One", "sf": "hd"}]
        mock_session.get.assert_called_with(
            "http://192.168.1.50:9006/as/services", headers=None, timeout=ANY
        )

    @pytest.mark.asyncio
    async def test_fetch_services_without_list(self, mock_session, mock_response):
        mock_response.text = AsyncMock(return_value='{"documentId": "1"}')
        api = SkyqApiEndpoint("192.168.1.50", mock_session)

        with pytest.raises(SkyqInvalidDataException):
            await api.async_fetch_services()

    @pytest.mark.asyncio
    async def test_post_media_info(self, mock_session, mock_response):
        """Test the SOAP request sent to the SkyPlay service."""
        mock_response.text = AsyncMock(return_value="<s:Envelope/>")
        api = SkyqApiEndpoint("192.168.1.50", mock_session)

        body = await api.async_post_media_info("ABCD-1234")

        assert body == "<s:Envelope/>"
        args, kwargs = mock_session.post.call_args
        assert args == ("http://192.168.1.50:49153/ABCD-1234SkyPlay",)
        headers = kwargs["headers"]
        assert (
            headers["SOAPACTION"]
            == '"urn:schemas-nds-com:service:SkyPlay:2#GetMediaInfo"'
        )
        assert headers["Content-Type"] == "text/xml; charset=utf-8"
        assert headers["User-Agent"] == "SKYPLUS_skyplus"
        assert headers["Host"] == "192.168.1.50:49153"
        assert "<u:GetMediaInfo" in kwargs["data"]
        assert kwargs["timeout"].total == 5
