# skyq/consts.py
from __future__ import annotations

import logging
from enum import StrEnum
from typing import Final

SDK_LOGGER = logging.getLogger("skyq")

MANUFACTURER_SKY: Final[str] = "Sky"

REST_PORT: Final[int] = 9006
UPNP_PORT: Final[int] = 49153

BASE_DATA_PATH: Final[str] = "/as/system/information"
SERVICES_PATH: Final[str] = "/as/services"
DESCRIPTION_PATH: Final[str] = "/description{}.xml"
SKYPLAY_PATH: Final[str] = "/{}SkyPlay"

# Seconds
BASE_DATA_INTERVAL: Final[int] = 15
UUID_INTERVAL: Final[int] = 60 * 60
CURRENT_STATION_INTERVAL: Final[int] = 30
BOOTSTRAP_RETRY_INTERVAL: Final[int] = 60

HTTP_TIMEOUT_TIME: Final[int] = 10
SOAP_TIMEOUT_TIME: Final[int] = 5

DESCRIPTION_COUNT: Final[int] = 40

# The box answers UPnP requests only for its own client user agent.
SKY_USER_AGENT: Final[str] = "SKYPLUS_skyplus"

SKYPLAY_SERVICE_TYPE: Final[str] = "urn:schemas-nds-com:service:SkyPlay:2"
SOAP_ENVELOPE_NS: Final[str] = "http://schemas.xmlsoap.org/soap/envelope/"
GET_MEDIA_INFO_ACTION: Final[str] = f'"{SKYPLAY_SERVICE_TYPE}#GetMediaInfo"'
GET_MEDIA_INFO_BODY: Final[str] = (
    '<?xml version="1.0" encoding="utf-8"?>'
    '<s:Envelope s:encodingStyle="http://schemas.xmlsoap.org/soap/encoding/" '
    f'xmlns:s="{SOAP_ENVELOPE_NS}">'
    f'<s:Body><u:GetMediaInfo xmlns:u="{SKYPLAY_SERVICE_TYPE}">'
    "<InstanceID>0</InstanceID>"
    "</u:GetMediaInfo></s:Body></s:Envelope>"
)

STATION_PLACEHOLDER: Final[str] = "-"

STATUS_PREFIX: Final[str] = "status."
POWER_ON_KEY: Final[str] = "powerOn"

CONFIG_IP_ADDRESS: Final[str] = "ipaddress"
CONFIG_BASE_DATA_INTERVAL: Final[str] = "base_data_interval"
CONFIG_UUID_INTERVAL: Final[str] = "uuid_interval"
CONFIG_CURRENT_STATION_INTERVAL: Final[str] = "current_station_interval"
CONFIG_CURRENT_STATION_POLLING: Final[str] = "current_station_polling"


class StateType(StrEnum):
    STRING = "string"
    BOOLEAN = "boolean"
    NUMBER = "number"


class DeviceAttribute(StrEnum):
    """Attributes reported by /as/system/information, mirrored as status.<name>."""

    WAKE_REASON = "wakeReason"
    VIEWING_CARD_NUMBER = "viewingCardNumber"
    VERSION_NUMBER = "versionNumber"
    UHD_CAPABLE = "uhdCapable"
    SYSTEM_UPTIME = "systemUptime"
    SERIAL_NUMBER = "serialNumber"
    RECEIVER_ID = "receiverID"
    PIP_CAPABLE = "pipCapable"
    NUM_DTT_TUNERS = "numDTTTuners"
    NETWORK_VERSION = "networkVersion"
    MODEL_NUMBER = "modelNumber"
    MESH_ENABLED = "meshEnabled"
    MANUFACTURER = "manufacturer"
    LOCAL_IR_DATABASE = "localIRDatabase"
    HOUSEHOLD_TOKEN = "householdToken"
    HDR_CAPABLE = "hdrCapable"
    HARDWARE_NAME = "hardwareName"
    HARDWARE_MODEL = "hardwareModel"
    GATEWAY_IP_ADDRESS = "gatewayIPAddress"
    GATEWAY = "gateway"
    DEVICE_TYPE = "deviceType"
    DEVICE_ID = "deviceID"
    CHIP_ID = "chipID"
    CAM_ID = "camID"
    CABLE = "cable"
    BT_ID = "btID"
    AIRPLAY_ID = "airplayID"
    ACTIVE_STANDBY = "activeStandby"
    MAC_ADDRESS = "MACAddress"
    IP_ADDRESS = "IPAddress"
    EUID = "EUID"
    DRM_ACTIVATION_STATUS = "DRMActivationStatus"
    CA_TYPE = "CAType"
    AS_VERSION = "ASVersion"
    UUID = "UUID"
    CURRENT_STATION = "CurrentStation"


_BOOLEAN_ATTRIBUTES = {
    DeviceAttribute.UHD_CAPABLE,
    DeviceAttribute.PIP_CAPABLE,
    DeviceAttribute.MESH_ENABLED,
    DeviceAttribute.LOCAL_IR_DATABASE,
    DeviceAttribute.HDR_CAPABLE,
    DeviceAttribute.GATEWAY,
    DeviceAttribute.CABLE,
    DeviceAttribute.ACTIVE_STANDBY,
    DeviceAttribute.DRM_ACTIVATION_STATUS,
}
_NUMBER_ATTRIBUTES = {
    DeviceAttribute.SYSTEM_UPTIME,
    DeviceAttribute.NUM_DTT_TUNERS,
}

ATTRIBUTE_TYPES: Final[dict[DeviceAttribute, StateType]] = {
    attr: (
        StateType.BOOLEAN
        if attr in _BOOLEAN_ATTRIBUTES
        else StateType.NUMBER
        if attr in _NUMBER_ATTRIBUTES
        else StateType.STRING
    )
    for attr in DeviceAttribute
}


def status_key(attribute: DeviceAttribute | str) -> str:
    """Return the state store key for a device attribute."""
    return f"{STATUS_PREFIX}{attribute}"


UUID_KEY: Final[str] = status_key(DeviceAttribute.UUID)
CURRENT_STATION_KEY: Final[str] = status_key(DeviceAttribute.CURRENT_STATION)
