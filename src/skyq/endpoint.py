# skyq/endpoint.py
"""HTTP transport for the box's REST (port 9006) and SkyPlay SOAP (port 49153) APIs."""

from __future__ import annotations

import asyncio
import json
from http import HTTPStatus
from typing import Any

import aiohttp
from aiohttp import ClientSession

from .consts import (
    BASE_DATA_PATH,
    GET_MEDIA_INFO_ACTION,
    GET_MEDIA_INFO_BODY,
    HTTP_TIMEOUT_TIME,
    REST_PORT,
    SDK_LOGGER,
    SERVICES_PATH,
    SKY_USER_AGENT,
    SKYPLAY_PATH,
    SOAP_TIMEOUT_TIME,
    UPNP_PORT,
)
from .exceptions import (
    SkyqConnectionException,
    SkyqInvalidDataException,
    SkyqRequestException,
    SkyqResponseException,
)


class SkyqApiEndpoint:
    """Issues requests against a single Sky Q box."""

    def __init__(
        self,
        host: str,
        session: ClientSession,
        rest_port: int = REST_PORT,
        upnp_port: int = UPNP_PORT,
        timeout: float = HTTP_TIMEOUT_TIME,
    ) -> None:
        self.host = host
        self._session = session
        self._rest_port = rest_port
        self._upnp_port = upnp_port
        self._timeout = timeout
        self._rest_url = f"http://{host}:{rest_port}"
        self._upnp_url = f"http://{host}:{upnp_port}"

    def __str__(self) -> str:
        return self._rest_url

    @property
    def upnp_url(self) -> str:
        return self._upnp_url

    async def _async_request(
        self,
        method: str,
        url: str,
        timeout: float,
        headers: dict[str, str] | None = None,
        data: str | None = None,
    ) -> str:
        """Send a request and return the body of a 200 response as text."""
        client_timeout = aiohttp.ClientTimeout(total=timeout)
        try:
            if method == "POST":
                context = self._session.post(
                    url, headers=headers, data=data, timeout=client_timeout
                )
            else:
                context = self._session.get(url, headers=headers, timeout=client_timeout)
            async with context as response:
                status = response.status
                text = await response.text()
        except asyncio.TimeoutError as err:
            raise SkyqConnectionException(
                f"{method} {url} timed out after {timeout}s"
            ) from err
        except aiohttp.ClientConnectionError as err:
            raise SkyqConnectionException(f"{method} {url}: no response: {err}") from err
        except (aiohttp.ClientError, ValueError) as err:
            raise SkyqRequestException(f"{method} {url}: request failed: {err}") from err

        if status != HTTPStatus.OK:
            raise SkyqResponseException(
                f"{method} {url}: unexpected status {status}", status=status
            )
        return text

    async def request(self, path: str) -> str:
        """GET a REST path and return the raw body."""
        url = f"{self._rest_url}{path}"
        SDK_LOGGER.debug("Requesting %s", url)
        return await self._async_request("GET", url, self._timeout)

    async def json_request(self, path: str) -> Any:
        """GET a REST path and decode the JSON body."""
        text = await self.request(path)
        try:
            return json.loads(text)
        except ValueError as err:
            raise SkyqInvalidDataException(
                f"{self._rest_url}{path}: body is not JSON: {text[:80]!r}"
            ) from err

    async def async_fetch_base_data(self) -> dict[str, Any]:
        data = await self.json_request(BASE_DATA_PATH)
        if not isinstance(data, dict):
            raise SkyqInvalidDataException(
                f"{BASE_DATA_PATH}: expected an object, got {type(data).__name__}"
            )
        return data

    async def async_fetch_services(self) -> list[dict[str, Any]]:
        data = await self.json_request(SERVICES_PATH)
        services = data.get("services") if isinstance(data, dict) else None
        if not isinstance(services, list):
            raise SkyqInvalidDataException(f"{SERVICES_PATH}: no services list")
        return services

    async def async_post_media_info(self, uuid: str) -> str:
        """Call SkyPlay GetMediaInfo on the UPnP port and return the SOAP response."""
        url = f"{self._upnp_url}{SKYPLAY_PATH.format(uuid)}"
        headers = {
            "Host": f"{self.host}:{self._upnp_port}",
            "Accept-Encoding": "gzip,deflate",
            "User-Agent": SKY_USER_AGENT,
            "Content-Type": "text/xml; charset=utf-8",
            "SOAPACTION": GET_MEDIA_INFO_ACTION,
        }
        SDK_LOGGER.debug("Posting GetMediaInfo to %s", url)
        return await self._async_request(
            "POST", url, SOAP_TIMEOUT_TIME, headers=headers, data=GET_MEDIA_INFO_BODY
        )
