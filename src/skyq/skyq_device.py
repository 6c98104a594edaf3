# skyq/skyq_device.py
from __future__ import annotations

import asyncio
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Callable

from .catalog import ServiceCatalog
from .consts import (
    ATTRIBUTE_TYPES,
    BASE_DATA_INTERVAL,
    BOOTSTRAP_RETRY_INTERVAL,
    CONFIG_BASE_DATA_INTERVAL,
    CONFIG_CURRENT_STATION_INTERVAL,
    CONFIG_CURRENT_STATION_POLLING,
    CONFIG_IP_ADDRESS,
    CONFIG_UUID_INTERVAL,
    CURRENT_STATION_INTERVAL,
    CURRENT_STATION_KEY,
    MANUFACTURER_SKY,
    POWER_ON_KEY,
    SDK_LOGGER,
    STATION_PLACEHOLDER,
    UUID_INTERVAL,
    UUID_KEY,
    DeviceAttribute,
    StateType,
    status_key,
)
from .discovery import async_discover_uuid
from .endpoint import SkyqApiEndpoint
from .exceptions import (
    SkyqConfigException,
    SkyqConnectionException,
    SkyqException,
    SkyqInvalidDataException,
    SkyqResponseException,
)
from .handler import parse_current_uri, station_id_from_uri
from .projection import async_project_base_data, power_on
from .scheduler import RefreshCycle
from .state import SkyqState, StateStore

if TYPE_CHECKING:
    from aiohttp import ClientSession

GeneralEventCallback = Callable[["SkyqDevice"], None]


def validate_ip_address(value: Any) -> str:
    """Return the configured address, stripped; raise if it is empty."""
    address = str(value).strip() if value is not None else ""
    if not address:
        raise SkyqConfigException("missing ip address")
    return address


def _interval(config: Mapping[str, Any], key: str, default: int) -> int:
    value = config.get(key, default)
    try:
        interval = int(value)
    except (TypeError, ValueError) as err:
        raise SkyqConfigException(f"{key} must be a number, got {value!r}") from err
    if interval <= 0:
        raise SkyqConfigException(f"{key} must be positive, got {interval}")
    return interval


class SkyqDevice:
    """
    Mirrors one Sky Q box into a state store.

    Three refresh cycles run on the event loop: base data (system information
    and power state), UUID discovery, and the optional current-station poll.
    A one-off bootstrap loads the service catalog and then starts the UUID
    cycle, since the current station can only be resolved once both the
    catalog and the UUID are known.
    """

    general_event_callback: GeneralEventCallback | None = None

    def __init__(
        self,
        ip_address: str,
        session: ClientSession,
        store: StateStore,
        http_api_endpoint: SkyqApiEndpoint | None = None,
        base_data_interval: int = BASE_DATA_INTERVAL,
        uuid_interval: int = UUID_INTERVAL,
        current_station_interval: int = CURRENT_STATION_INTERVAL,
        current_station_polling: bool = False,
    ):
        self.ip_address = (ip_address or "").strip()
        self._session = session
        self.store = store
        self.logger = SDK_LOGGER

        self.state = SkyqState()
        self._http_api: SkyqApiEndpoint | None = http_api_endpoint
        if self._http_api is None and self.ip_address:
            self._http_api = SkyqApiEndpoint(self.ip_address, session)

        self.current_station_polling = current_station_polling
        self.base_data_cycle = RefreshCycle(
            "base data", base_data_interval, self.async_update_base_data
        )
        self.uuid_cycle = RefreshCycle("uuid", uuid_interval, self.async_update_uuid)
        self.current_station_cycle = RefreshCycle(
            "current station",
            current_station_interval,
            self.async_update_current_station,
        )

        self._available: bool = False
        self._started: bool = False
        self._bootstrap_timer: asyncio.TimerHandle | None = None
        self._bootstrap_task: asyncio.Task | None = None

    @classmethod
    def from_config(
        cls,
        config: Mapping[str, Any],
        session: ClientSession,
        store: StateStore,
    ) -> SkyqDevice:
        """Create a device from the host's adapter configuration.

        An empty address is accepted here and reported when the cycles run.
        """
        return cls(
            str(config.get(CONFIG_IP_ADDRESS) or ""),
            session,
            store,
            base_data_interval=_interval(
                config, CONFIG_BASE_DATA_INTERVAL, BASE_DATA_INTERVAL
            ),
            uuid_interval=_interval(config, CONFIG_UUID_INTERVAL, UUID_INTERVAL),
            current_station_interval=_interval(
                config, CONFIG_CURRENT_STATION_INTERVAL, CURRENT_STATION_INTERVAL
            ),
            current_station_polling=bool(
                config.get(CONFIG_CURRENT_STATION_POLLING, False)
            ),
        )

    @property
    def name(self) -> str:
        return f"Sky Q {self.ip_address or '<unconfigured>'}"

    @property
    def available(self) -> bool:
        return self._available

    @property
    def started(self) -> bool:
        return self._started

    @property
    def uuid(self) -> str:
        return self.state.uuid

    @property
    def catalog(self) -> ServiceCatalog:
        return self.state.catalog

    @property
    def current_station(self) -> str:
        return self.state.current_station_name or STATION_PLACEHOLDER

    @property
    def power_on(self) -> bool:
        return power_on(self.state.snapshot)

    @property
    def manufacturer(self) -> str:
        return self.state.snapshot.get(DeviceAttribute.MANUFACTURER) or MANUFACTURER_SKY

    @property
    def model_name(self) -> str | None:
        return self.state.snapshot.get(DeviceAttribute.HARDWARE_MODEL)

    @property
    def serial_number(self) -> str | None:
        return self.state.snapshot.get(DeviceAttribute.SERIAL_NUMBER)

    def _require_api(self) -> SkyqApiEndpoint:
        validate_ip_address(self.ip_address)
        if self._http_api is None:
            self._http_api = SkyqApiEndpoint(self.ip_address, self._session)
        return self._http_api

    def _log_request_error(self, operation: str, err: SkyqException) -> None:
        """Log a failed device request at a level matching its cause."""
        if isinstance(err, SkyqConfigException):
            self.logger.error("Device %s: %s: %s", self.name, operation, err)
        elif isinstance(err, SkyqResponseException):
            self.logger.warning(
                "Device %s: %s failed with HTTP status %s: %s",
                self.name,
                operation,
                err.status,
                err,
            )
        elif isinstance(err, SkyqConnectionException):
            if self._available:
                self.logger.warning(
                    "Device %s: %s got no response, marking as unavailable: %s",
                    self.name,
                    operation,
                    err,
                )
            else:
                self.logger.debug(
                    "Device %s: %s got no response again: %s", self.name, operation, err
                )
            self._available = False
        elif isinstance(err, SkyqInvalidDataException):
            self.logger.warning(
                "Device %s: %s returned unexpected data: %s", self.name, operation, err
            )
        else:
            self.logger.warning(
                "Device %s: %s could not be sent: %s", self.name, operation, err
            )

    async def async_ensure_states(self) -> None:
        """Create powerOn and one status.<attribute> object per schema entry."""
        await self.store.async_ensure_state(POWER_ON_KEY, StateType.BOOLEAN)
        for attribute, value_type in ATTRIBUTE_TYPES.items():
            await self.store.async_ensure_state(status_key(attribute), value_type)

    async def async_update_base_data(self) -> bool:
        """Fetch system information and mirror it into the store."""
        try:
            raw = await self._require_api().async_fetch_base_data()
        except SkyqException as err:
            self._log_request_error("base data request", err)
            return False

        self.state.snapshot = raw
        written = await async_project_base_data(raw, self.store)
        self.logger.debug(
            "Device %s: base data refreshed, %d states written.",
            self.name,
            len(written),
        )

        if not self._available:
            self._available = True
            self.logger.info("Device %s: responding, marking as available.", self.name)

        if self.general_event_callback:
            try:
                self.general_event_callback(self)
            except Exception as e:
                self.logger.warning(
                    "Device %s: Error in general_event_callback: %s",
                    self.name,
                    e,
                    exc_info=True,
                )
        return True

    async def async_update_services(self) -> bool:
        """Rebuild the service catalog from /as/services."""
        try:
            services = await self._require_api().async_fetch_services()
        except SkyqException as err:
            self._log_request_error("services request", err)
            return False

        self.state.catalog = ServiceCatalog.from_services(services)
        self.logger.debug(
            "Device %s: service catalog holds %d services.",
            self.name,
            len(self.state.catalog),
        )
        return True

    async def async_update_uuid(self) -> bool:
        """Rediscover the UUID; keep the previous one if no description answers."""
        try:
            self._require_api()
        except SkyqConfigException as err:
            self._log_request_error("UUID discovery", err)
            return False

        uuid = await async_discover_uuid(self.ip_address, self._session)
        if uuid:
            if uuid != self.state.uuid:
                self.logger.info("Device %s: UUID is %s.", self.name, uuid)
            self.state.uuid = uuid
        else:
            self.logger.warning(
                "Device %s: UUID discovery failed, keeping %r.",
                self.name,
                self.state.uuid,
            )

        await self.store.async_write_state(UUID_KEY, self.state.uuid, True)
        if self.state.current_station_name is None:
            await self.store.async_write_state(
                CURRENT_STATION_KEY, STATION_PLACEHOLDER, True
            )
        return uuid is not None

    async def async_update_current_station(self) -> bool:
        """Ask SkyPlay what is playing and write the station name."""
        if not self.state.uuid:
            self.logger.debug(
                "Device %s: UUID not discovered yet, skipping current station.",
                self.name,
            )
            return False

        try:
            body = await self._require_api().async_post_media_info(self.state.uuid)
        except SkyqException as err:
            self._log_request_error("GetMediaInfo request", err)
            return False

        station_id: int | None
        try:
            station_id = station_id_from_uri(parse_current_uri(body))
        except SkyqInvalidDataException as err:
            self._log_request_error("GetMediaInfo request", err)
            station_id = None

        if station_id is None:
            name = STATION_PLACEHOLDER
        else:
            name = self.state.catalog.resolve(station_id)
            if name == STATION_PLACEHOLDER:
                self.logger.debug(
                    "Device %s: station %s is not in the service catalog.",
                    self.name,
                    station_id,
                )

        self.state.current_station_id = station_id
        self.state.current_station_name = name
        await self.store.async_write_state(CURRENT_STATION_KEY, name, True)
        return station_id is not None

    async def async_bootstrap(self) -> bool:
        """Load the service catalog, then start the UUID and station cycles."""
        if not self.ip_address:
            self.logger.error("Device %s: missing ip address.", self.name)
            return False

        if not await self.async_update_services():
            if self._started:
                self.logger.error(
                    "Device %s: problems to get data, retrying in %s seconds.",
                    self.name,
                    BOOTSTRAP_RETRY_INTERVAL,
                )
                self._schedule_bootstrap(BOOTSTRAP_RETRY_INTERVAL)
            return False

        if not self._started:
            return False

        await self.uuid_cycle.async_start()
        if self.current_station_polling and self._started:
            self.current_station_cycle.start()
        return True

    def _spawn_bootstrap(self) -> None:
        self._bootstrap_timer = None
        self._bootstrap_task = asyncio.create_task(self.async_bootstrap())

    def _schedule_bootstrap(self, delay: float) -> None:
        if self._bootstrap_timer:
            self._bootstrap_timer.cancel()
        loop = asyncio.get_running_loop()
        self._bootstrap_timer = loop.call_later(delay, self._spawn_bootstrap)

    async def async_start(self) -> None:
        """Create the state objects and start polling."""
        if self._started:
            return
        self._started = True
        self.logger.info("Device %s: starting.", self.name)

        await self.async_ensure_states()
        self.base_data_cycle.start()
        self._spawn_bootstrap()

    async def async_stop(self) -> None:
        """Cancel every pending timer.

        Requests already in flight are not cancelled; they finish but do not
        schedule further runs.
        """
        self.logger.info("Device %s: stopping.", self.name)
        self._started = False
        if self._bootstrap_timer:
            self._bootstrap_timer.cancel()
            self._bootstrap_timer = None
        self.base_data_cycle.cancel()
        self.uuid_cycle.cancel()
        self.current_station_cycle.cancel()
        self._available = False
