# skyq/handler.py
from __future__ import annotations

import xml.etree.ElementTree as ET

from .exceptions import SkyqInvalidDataException


def udn_to_uuid(udn: str | None) -> str:
    """Return the token of a UDN such as ``uuid:2f402f80-da50-11e1-9b23-...``."""
    if not udn:
        raise SkyqInvalidDataException("Description document has no UDN")
    parts = udn.split(":")
    if len(parts) < 2 or not parts[1]:
        raise SkyqInvalidDataException(f"Unexpected UDN format: {udn!r}")
    return parts[1]


def parse_udn(xml_text: str | bytes) -> str:
    """Return the UUID token of a ``description{N}.xml`` document.

    The lookup ignores namespaces, so both bare and UPnP-namespaced
    documents are accepted.
    """
    try:
        root = ET.fromstring(xml_text)
    except ET.ParseError as err:
        raise SkyqInvalidDataException(f"Description document is not XML: {err}") from err

    node = root.find("{*}device/{*}UDN")
    if node is None or node.text is None:
        raise SkyqInvalidDataException("Description document has no UDN")
    return udn_to_uuid(node.text.strip())


def parse_current_uri(xml_text: str) -> str:
    """Extract CurrentURI from a SkyPlay GetMediaInfo SOAP response."""
    try:
        root = ET.fromstring(xml_text)
    except ET.ParseError as err:
        raise SkyqInvalidDataException(f"GetMediaInfo response is not XML: {err}") from err

    if not root.tag.endswith("Envelope"):
        raise SkyqInvalidDataException(f"Unexpected SOAP root element {root.tag}")

    node = root.find("{*}Body/{*}GetMediaInfoResponse/{*}CurrentURI")
    if node is None or not node.text:
        raise SkyqInvalidDataException("GetMediaInfo response has no CurrentURI")
    return node.text.strip()


def station_id_from_uri(uri: str) -> int:
    """Parse the hex service id of a CurrentURI like ``xsi://7E3``."""
    parts = uri.split("//")
    if len(parts) < 2:
        raise SkyqInvalidDataException(f"CurrentURI has no station part: {uri!r}")
    try:
        return int(parts[1], 16)
    except ValueError as err:
        raise SkyqInvalidDataException(
            f"CurrentURI station part is not hexadecimal: {uri!r}"
        ) from err
