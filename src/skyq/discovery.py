# skyq/discovery.py
"""Discovery of the box's UPnP identity.

The SkyPlay service is addressed by a path that contains the box's UUID.
The box publishes a number of description documents
(``description0.xml``, ``description1.xml``, ...); not all indices exist and
some may fail transiently, so they are tried in order and the first one
carrying a usable UDN wins.

Only ``root/device/UDN`` is read from a document. Service descriptions are
never fetched, so a box that publishes an incomplete device tree still yields
its UUID.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from async_upnp_client.aiohttp import AiohttpSessionRequester
from async_upnp_client.const import HttpRequest
from async_upnp_client.exceptions import UpnpConnectionError, UpnpError

from .consts import (
    DESCRIPTION_PATH,
    DESCRIPTION_COUNT,
    SDK_LOGGER,
    SKY_USER_AGENT,
    SOAP_TIMEOUT_TIME,
    UPNP_PORT,
)
from .exceptions import SkyqInvalidDataException, SkyqResponseException
from .handler import parse_udn

if TYPE_CHECKING:
    from aiohttp import ClientSession


def description_url(host: str, index: int, port: int = UPNP_PORT) -> str:
    return f"http://{host}:{port}{DESCRIPTION_PATH.format(index)}"


def create_requester(session: ClientSession) -> AiohttpSessionRequester:
    return AiohttpSessionRequester(
        session,
        timeout=SOAP_TIMEOUT_TIME,
        http_headers={"User-Agent": SKY_USER_AGENT},
    )


async def async_fetch_description(
    requester: AiohttpSessionRequester,
    host: str,
    index: int,
    port: int = UPNP_PORT,
) -> str | bytes:
    """Fetch ``description{index}.xml`` and return its body.

    Raises SkyqResponseException for any status other than 200.
    """
    url = description_url(host, index, port)
    response = await requester.async_http_request(HttpRequest("GET", url, {}, None))
    if response.status_code != 200:
        raise SkyqResponseException(
            f"{url} answered with status {response.status_code}",
            status=response.status_code,
        )
    return response.body or ""


async def async_discover_uuid(
    host: str,
    session: ClientSession,
    port: int = UPNP_PORT,
    description_count: int = DESCRIPTION_COUNT,
) -> str | None:
    """Return the box's UUID token, or None if no description document yields one."""
    requester = create_requester(session)

    for index in range(description_count):
        location = description_url(host, index, port)
        try:
            body = await async_fetch_description(requester, host, index, port)
        except SkyqResponseException as err:
            SDK_LOGGER.debug("%s answered with status %s", location, err.status)
            continue
        except UpnpConnectionError as err:
            SDK_LOGGER.debug("No response from %s: %s", location, err)
            continue
        except UpnpError as err:
            SDK_LOGGER.debug("Could not read description %s: %s", location, err)
            continue
        except Exception as err:
            SDK_LOGGER.warning(
                "Unexpected error reading description %s: %s",
                location,
                err,
                exc_info=True,
            )
            continue

        try:
            uuid = parse_udn(body)
        except SkyqInvalidDataException as err:
            SDK_LOGGER.warning("Ignoring description %s: %s", location, err)
            continue

        SDK_LOGGER.debug("Found UUID %s in %s", uuid, location)
        return uuid

    SDK_LOGGER.warning(
        "No usable description document among %d tried on %s",
        description_count,
        host,
    )
    return None
