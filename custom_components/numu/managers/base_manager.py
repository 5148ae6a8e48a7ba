"""Base manager class for Numu managers."""

from __future__ import annotations

from abc import ABC, abstractmethod
import asyncio
from typing import TYPE_CHECKING, Any

from homeassistant.exceptions import HomeAssistantError
from homeassistant.helpers.dispatcher import (
    async_dispatcher_connect,
    async_dispatcher_send,
)

from .. import const
from ..utils.dt_utils import start_of_day

if TYPE_CHECKING:
    from collections.abc import Callable
    from datetime import date, datetime

    from homeassistant.core import HomeAssistant

    from ..coordinator import NumuDataCoordinator
    from ..data_builders import EntityValidationError
    from ..type_defs import SystemData


def get_event_signal(entry_id: str, suffix: str) -> str:
    """Build an instance-scoped dispatcher signal name.

    Format: 'numu_{entry_id}_{suffix}', so two config entries never hear
    each other's events.
    """
    return f"{const.DOMAIN}_{entry_id}_{suffix}"


class BaseManager(ABC):
    """Base class for all Numu managers with scoped event support.

    Provides:
    - Instance-scoped event emitting (emit)
    - Instance-scoped event listening (listen)
    - Per-entity asyncio locks (single writer per task / profile)
    - Automatic cleanup via coordinator's config_entry.async_on_unload

    Data Persistence:
    - Use coordinator._persist_and_update() for user-visible state changes
    - Use coordinator._persist() alone for internal bookkeeping

    Subclasses must implement:
    - async_setup(): Subscribe to events, initialize state
    """

    def __init__(self, hass: HomeAssistant, coordinator: NumuDataCoordinator) -> None:
        """Initialize manager.

        Args:
            hass: Home Assistant instance
            coordinator: Parent coordinator managing this integration instance
        """
        self.hass = hass
        self.coordinator = coordinator
        self.entry_id = coordinator.config_entry.entry_id
        self._locks: dict[str, asyncio.Lock] = {}

    def emit(self, suffix: str, **payload: Any) -> None:
        """Emit instance-scoped event to other managers.

        Args:
            suffix: Signal suffix constant (e.g., const.SIGNAL_SUFFIX_COMPLETION_ADDED)
            **payload: Event data dict passed to listeners (must be JSON-serializable)

        Example:
            self.emit(
                const.SIGNAL_SUFFIX_COMPLETION_ADDED,
                task_id=task_id,
                system_id=system_id,
                day="2025-04-07",
            )
        """
        signal = get_event_signal(self.entry_id, suffix)
        const.LOGGER.debug(
            "Emitting event '%s' for instance %s with payload keys: %s",
            suffix,
            self.entry_id,
            list(payload.keys()),
        )
        # Pass payload as single dict argument (dispatcher only supports *args)
        async_dispatcher_send(self.hass, signal, payload)

    def listen(self, suffix: str, callback: Callable[..., Any]) -> None:
        """Subscribe to instance-scoped event with automatic cleanup.

        Sync callbacks decorated with @callback run immediately inside emit();
        coroutine callbacks are scheduled as tasks.

        Args:
            suffix: Signal suffix constant to listen for
            callback: Function called when event fires (receives payload dict as arg)
        """
        signal = get_event_signal(self.entry_id, suffix)
        unsub = async_dispatcher_connect(self.hass, signal, callback)
        self.coordinator.config_entry.async_on_unload(unsub)
        const.LOGGER.debug(
            "Manager %s listening to event '%s' for instance %s",
            self.__class__.__name__,
            suffix,
            self.entry_id,
        )

    def _get_lock(self, operation: str, *identifiers: str) -> asyncio.Lock:
        """Get or create a lock for a specific operation and identifiers.

        Args:
            operation: The operation name (e.g., "task", "progress")
            *identifiers: Unique identifiers for this lock (e.g., task_id)
        """
        lock_key = f"{operation}:{':'.join(identifiers)}"
        if lock_key not in self._locks:
            self._locks[lock_key] = asyncio.Lock()
        return self._locks[lock_key]

    def _require_system(self, system_id: str) -> SystemData:
        system = self.coordinator.systems_data.get(system_id)
        if system is None:
            raise HomeAssistantError(
                translation_domain=const.DOMAIN,
                translation_key=const.TRANS_KEY_ERROR_SYSTEM_NOT_FOUND,
                translation_placeholders={"system_id": system_id},
            )
        return system

    @staticmethod
    def _validation_error(err: EntityValidationError) -> HomeAssistantError:
        return HomeAssistantError(
            translation_domain=const.DOMAIN,
            translation_key=err.translation_key,
            translation_placeholders={"field": err.field, **err.placeholders},
        )

    @staticmethod
    def _resolve_day(day: date | None, now: datetime) -> date:
        """Default to today; reject days in the future."""
        today = start_of_day(now)
        if day is None:
            return today
        if day > today:
            raise HomeAssistantError(
                translation_domain=const.DOMAIN,
                translation_key=const.TRANS_KEY_ERROR_INVALID_DATE,
                translation_placeholders={"date": day.isoformat()},
            )
        return day

    @abstractmethod
    async def async_setup(self) -> None:
        """Set up the manager (subscribe to events, initialize state).

        Called once during coordinator initialization.
        Subclasses should subscribe to events here using self.listen().
        """
