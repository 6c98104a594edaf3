# skyq/catalog.py
from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from typing import Any

from .consts import STATION_PLACEHOLDER


@dataclass(frozen=True)
class ServiceEntry:
    """A channel as listed by /as/services."""

    name: str | None
    format: str | None


def _catalog_key(key: Any) -> str | None:
    # The box reports ``sk`` as a string; station ids come in as ints.
    return None if key is None else str(key)


class ServiceCatalog(Mapping[str, ServiceEntry]):
    """Immutable index of the box's services keyed by service key."""

    def __init__(self, entries: Mapping[Any, ServiceEntry] | None = None) -> None:
        self._entries: dict[str | None, ServiceEntry] = {
            _catalog_key(key): entry for key, entry in (entries or {}).items()
        }

    @classmethod
    def from_services(cls, services: Iterable[Mapping[str, Any]]) -> ServiceCatalog:
        """Build a catalog from ``[{sk, t, sf}, ...]``.

        Later duplicates of a key replace earlier ones. Fields are not
        validated: a service without ``sk`` is stored under ``None`` and
        missing ``t``/``sf`` become ``None``.
        """
        entries: dict[str | None, ServiceEntry] = {}
        for service in services:
            entries[_catalog_key(service.get("sk"))] = ServiceEntry(
                name=service.get("t"), format=service.get("sf")
            )
        return cls(entries)

    def __getitem__(self, key: Any) -> ServiceEntry:
        return self._entries[_catalog_key(key)]

    def __contains__(self, key: object) -> bool:
        return _catalog_key(key) in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)  # type: ignore[arg-type]

    def __len__(self) -> int:
        return len(self._entries)

    def resolve(self, station_id: int | str | None) -> str:
        """Return the display name for a station id, or the placeholder.

        A missing id never matches the entry of a service without ``sk``.
        """
        if station_id is None:
            return STATION_PLACEHOLDER
        entry = self._entries.get(_catalog_key(station_id))
        if entry is None or not entry.name:
            return STATION_PLACEHOLDER
        return entry.name
