# skyq/projection.py
from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .consts import POWER_ON_KEY, DeviceAttribute, status_key
from .state import StateStore

SCHEMA_KEYS = frozenset(attr.value for attr in DeviceAttribute)


def power_on(raw: Mapping[str, Any]) -> bool:
    """The box is on unless it reports active standby; unknown counts as on."""
    return not raw.get(DeviceAttribute.ACTIVE_STANDBY)


async def async_project_base_data(
    raw: Mapping[str, Any],
    store: StateStore,
    schema: frozenset[str] = SCHEMA_KEYS,
) -> list[str]:
    """Mirror the known attributes of a base-data snapshot into ``store``.

    Keys outside ``schema`` are dropped. Attributes missing from ``raw`` are
    not touched, so their previous value stays in the store. ``powerOn`` is
    always written. Returns the store keys written, ``powerOn`` last.
    """
    written: list[str] = []
    for key, value in raw.items():
        if key not in schema:
            continue
        await store.async_write_state(status_key(key), value, True)
        written.append(status_key(key))

    await store.async_write_state(POWER_ON_KEY, power_on(raw), True)
    written.append(POWER_ON_KEY)
    return written
