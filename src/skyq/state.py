# skyq/state.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

from .catalog import ServiceCatalog
from .consts import SDK_LOGGER, StateType


@runtime_checkable
class StateStore(Protocol):
    """Host key-value store the adapter mirrors device data into."""

    async def async_ensure_state(self, key: str, value_type: StateType) -> None:
        """Create the state object for ``key`` if it does not exist yet."""

    async def async_write_state(self, key: str, value: Any, ack: bool) -> None:
        """Write ``value``; ``ack`` marks it as confirmed by the device."""


@dataclass
class StateEntry:
    value_type: StateType
    value: Any = None
    ack: bool = False


class MemoryStateStore:
    """In-process StateStore, used standalone and in tests."""

    def __init__(self) -> None:
        self._entries: dict[str, StateEntry] = {}

    async def async_ensure_state(self, key: str, value_type: StateType) -> None:
        if key not in self._entries:
            self._entries[key] = StateEntry(value_type=StateType(value_type))

    async def async_write_state(self, key: str, value: Any, ack: bool) -> None:
        entry = self._entries.get(key)
        if entry is None:
            SDK_LOGGER.debug("State %s written before it was created", key)
            entry = self._entries[key] = StateEntry(value_type=StateType.STRING)
        entry.value = value
        entry.ack = ack

    def get(self, key: str) -> StateEntry | None:
        return self._entries.get(key)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)


@dataclass
class SkyqState:
    """Everything the refresh cycles know about the box."""

    snapshot: dict[str, Any] = field(default_factory=dict)
    catalog: ServiceCatalog = field(default_factory=ServiceCatalog)
    uuid: str = ""
    current_station_id: int | None = None
    current_station_name: str | None = None
