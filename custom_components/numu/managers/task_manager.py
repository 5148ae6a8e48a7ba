"""Task Manager - systems, tasks and the completion log.

Owns every write to systems, tasks and completion events:
- create / delete systems (deleting a system deletes its tasks)
- create / update frequency / delete tasks (deleting a task deletes its log)
- mark / unmark a task complete for a calendar day

Each write commits to the store and emits its signal before returning.
StatisticsManager's cache invalidation runs synchronously inside emit(), so
the next read of derived state always reflects the write.

Events emitted:
- SIGNAL_SUFFIX_SYSTEM_CREATED / SIGNAL_SUFFIX_SYSTEM_DELETED
- SIGNAL_SUFFIX_TASK_CREATED / SIGNAL_SUFFIX_TASK_UPDATED / SIGNAL_SUFFIX_TASK_DELETED
- SIGNAL_SUFFIX_COMPLETION_ADDED / SIGNAL_SUFFIX_COMPLETION_REMOVED
"""

from __future__ import annotations

from datetime import date, datetime
from typing import TYPE_CHECKING, Any

from homeassistant.exceptions import HomeAssistantError

from .. import const
from ..data_builders import EntityValidationError, build_system, build_task
from ..utils.dt_utils import dt_now_utc
from .base_manager import BaseManager

if TYPE_CHECKING:
    from ..type_defs import CompletionEventData, TaskData


__all__ = ["TaskManager"]


class TaskManager(BaseManager):
    """Manager for systems, tasks and completion events."""

    async def async_setup(self) -> None:
        """Nothing to subscribe to: this manager only emits."""
        const.LOGGER.debug(
            "TaskManager: ready with %s systems and %s tasks",
            len(self.coordinator.systems_data),
            len(self.coordinator.tasks_data),
        )

    # =========================================================================
    # Lookups
    # =========================================================================

    def _require_task(self, task_id: str) -> TaskData:
        task = self.coordinator.tasks_data.get(task_id)
        if task is None:
            raise HomeAssistantError(
                translation_domain=const.DOMAIN,
                translation_key=const.TRANS_KEY_ERROR_TASK_NOT_FOUND,
                translation_placeholders={"task_id": task_id},
            )
        return task

    # =========================================================================
    # Systems
    # =========================================================================

    async def async_create_system(
        self, user_input: dict[str, Any], now: datetime | None = None
    ) -> str:
        """Create a system and return its internal_id."""
        now = now or dt_now_utc()
        try:
            system = build_system(user_input, now=now)
        except EntityValidationError as err:
            raise self._validation_error(err) from err

        system_id = system[const.DATA_INTERNAL_ID]
        self.coordinator.systems_data[system_id] = system
        const.LOGGER.info("INFO: Created system '%s' (%s)", system["name"], system_id)

        self.emit(
            const.SIGNAL_SUFFIX_SYSTEM_CREATED,
            system_id=system_id,
            now=now.isoformat(),
        )
        self.coordinator._persist_and_update()
        return system_id

    async def async_delete_system(self, system_id: str) -> None:
        """Delete a system together with its tasks and their completion logs."""
        system = self._require_system(system_id)
        for task_id in self.coordinator.task_ids_for_system(system_id):
            self._delete_task_data(task_id, system_id)

        del self.coordinator.systems_data[system_id]
        const.LOGGER.info("INFO: Deleted system '%s' (%s)", system["name"], system_id)

        self.emit(const.SIGNAL_SUFFIX_SYSTEM_DELETED, system_id=system_id)
        self.coordinator._persist_and_update()

    # =========================================================================
    # Tasks
    # =========================================================================

    async def async_create_task(
        self, user_input: dict[str, Any], now: datetime | None = None
    ) -> str:
        """Create a task under an existing system and return its internal_id.

        Raises:
            HomeAssistantError: Unknown system, empty name or invalid frequency.
        """
        now = now or dt_now_utc()
        self._require_system(user_input.get(const.DATA_TASK_SYSTEM_ID, ""))
        try:
            task = build_task(user_input, now=now)
        except EntityValidationError as err:
            raise self._validation_error(err) from err

        task_id = task[const.DATA_INTERNAL_ID]
        self.coordinator.tasks_data[task_id] = task
        const.LOGGER.info(
            "INFO: Created task '%s' (%s) in system %s with frequency %s",
            task["name"],
            task_id,
            task["system_id"],
            task["frequency"],
        )

        self.emit(
            const.SIGNAL_SUFFIX_TASK_CREATED,
            task_id=task_id,
            system_id=task["system_id"],
        )
        self.coordinator._persist_and_update()
        return task_id

    async def async_update_task_frequency(
        self, task_id: str, frequency: dict[str, Any]
    ) -> None:
        """Replace a task's frequency. The completion log is kept."""
        async with self._get_lock("task", task_id):
            task = self._require_task(task_id)
            try:
                updated = build_task(
                    {const.DATA_TASK_FREQUENCY: frequency}, existing=task
                )
            except EntityValidationError as err:
                raise self._validation_error(err) from err

            task[const.DATA_TASK_FREQUENCY] = updated[const.DATA_TASK_FREQUENCY]
            const.LOGGER.info(
                "INFO: Task %s frequency changed to %s",
                task_id,
                task[const.DATA_TASK_FREQUENCY],
            )
            self.emit(
                const.SIGNAL_SUFFIX_TASK_UPDATED,
                task_id=task_id,
                system_id=task[const.DATA_TASK_SYSTEM_ID],
            )
            self.coordinator._persist_and_update()

    async def async_delete_task(self, task_id: str) -> None:
        """Delete a task and its completion log."""
        async with self._get_lock("task", task_id):
            task = self._require_task(task_id)
            self._delete_task_data(task_id, task[const.DATA_TASK_SYSTEM_ID])
            self.coordinator._persist_and_update()

    def _delete_task_data(self, task_id: str, system_id: str) -> None:
        removed = self.coordinator.store.remove_task_events(task_id)
        self.coordinator.tasks_data.pop(task_id, None)
        self._locks.pop(f"task:{task_id}", None)
        const.LOGGER.info(
            "INFO: Deleted task %s and %s completion events", task_id, removed
        )
        self.emit(
            const.SIGNAL_SUFFIX_TASK_DELETED,
            task_id=task_id,
            system_id=system_id,
        )

    # =========================================================================
    # Completion log
    # =========================================================================

    async def async_mark_complete(
        self,
        task_id: str,
        day: date | None = None,
        *,
        duration_minutes: int | None = None,
        source: str | None = const.SOURCE_MANUAL,
        now: datetime | None = None,
    ) -> CompletionEventData:
        """Record a completion for a task on a calendar day (default today).

        A second completion on the same day merges into the first.
        """
        now = now or dt_now_utc()
        async with self._get_lock("task", task_id):
            task = self._require_task(task_id)
            completion_day = self._resolve_day(day, now)

            event, created = self.coordinator.store.put_event(
                task_id,
                completion_day,
                now,
                duration_minutes=duration_minutes,
                source=source,
            )

            self.emit(
                const.SIGNAL_SUFFIX_COMPLETION_ADDED,
                task_id=task_id,
                system_id=task[const.DATA_TASK_SYSTEM_ID],
                day=completion_day.isoformat(),
                now=now.isoformat(),
                created=created,
                source=source,
            )
            self.coordinator._persist_and_update()
            return event

    async def async_unmark_complete(
        self,
        task_id: str,
        day: date | None = None,
        *,
        now: datetime | None = None,
    ) -> bool:
        """Remove a task's completion for a day. Returns True if one existed."""
        now = now or dt_now_utc()
        async with self._get_lock("task", task_id):
            task = self._require_task(task_id)
            completion_day = self._resolve_day(day, now)

            removed = self.coordinator.store.remove_event(task_id, completion_day)
            if not removed:
                const.LOGGER.debug(
                    "DEBUG: No completion to remove for task %s on %s",
                    task_id,
                    completion_day,
                )
                return False

            self.emit(
                const.SIGNAL_SUFFIX_COMPLETION_REMOVED,
                task_id=task_id,
                system_id=task[const.DATA_TASK_SYSTEM_ID],
                day=completion_day.isoformat(),
            )
            self.coordinator._persist_and_update()
            return True
