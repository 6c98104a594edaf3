"""Read-only telemetry for Sky Q set-top boxes over their local HTTP and UPnP APIs."""

from .catalog import ServiceCatalog, ServiceEntry
from .consts import SDK_LOGGER, DeviceAttribute, StateType
from .endpoint import SkyqApiEndpoint
from .exceptions import (
    SkyqConfigException,
    SkyqConnectionException,
    SkyqException,
    SkyqInvalidDataException,
    SkyqRequestException,
    SkyqResponseException,
)
from .scheduler import CycleState, RefreshCycle
from .skyq_device import SkyqDevice, validate_ip_address
from .state import MemoryStateStore, SkyqState, StateEntry, StateStore

__all__ = [
    "SDK_LOGGER",
    "CycleState",
    "DeviceAttribute",
    "MemoryStateStore",
    "RefreshCycle",
    "ServiceCatalog",
    "ServiceEntry",
    "SkyqApiEndpoint",
    "SkyqConfigException",
    "SkyqConnectionException",
    "SkyqDevice",
    "SkyqException",
    "SkyqInvalidDataException",
    "SkyqRequestException",
    "SkyqResponseException",
    "SkyqState",
    "StateEntry",
    "StateStore",
    "StateType",
    "validate_ip_address",
]
