from __future__ import annotations

import logging
from contextlib import contextmanager
from threading import RLock
from typing import Any, Dict, Iterator, Optional, Tuple

from .config import Settings
from .models import PlanningSnapshot, ServiceConfig

logger = logging.getLogger(__name__)

DELETE_POLICIES = ("reject", "cascade")


def _as_hours(value: Any, fallback: float) -> float:
    if value in (None, ""):
        return fallback
    hours = float(value)
    if hours < 0:
        raise ValueError("Service hours must not be negative")
    return hours


class RuntimeState:
    """Planning stores plus the settings that can be adjusted at runtime.

    All mutating calls go through :meth:`writer`, which serialises them on a
    single lock; the engines themselves never lock.
    """

    def __init__(self, base_settings: Settings, planning: Optional[PlanningSnapshot] = None):
        self._lock = RLock()
        self.planning = planning or PlanningSnapshot()
        if planning is None:
            self.planning.service_config = ServiceConfig(
                s=base_settings.service_hours_s,
                m=base_settings.service_hours_m,
                l=base_settings.service_hours_l,
            )
        self.timezone: str = base_settings.timezone
        self.default_start_hour: float = base_settings.default_start_hour
        self.default_day_window: Tuple[float, float] = (
            base_settings.default_day_start,
            base_settings.default_day_end,
        )
        self.backlog_window_days: int = base_settings.backlog_window_days
        self.reminder_overdue_days: int = base_settings.reminder_overdue_days
        self.reminder_ahead_days: int = base_settings.reminder_ahead_days
        self.capacity_free_hours: float = base_settings.capacity_free_hours
        self.enforce_slot_conflicts: bool = base_settings.enforce_slot_conflicts
        self.technician_delete_policy: str = base_settings.technician_delete_policy

    @contextmanager
    def writer(self) -> Iterator[PlanningSnapshot]:
        with self._lock:
            yield self.planning

    def snapshot(self) -> Dict[str, Any]:
        with self._lock:
            config = self.planning.service_config
            return {
                "service_hours": {"s": config.s, "m": config.m, "l": config.l},
                "enforce_slot_conflicts": self.enforce_slot_conflicts,
                "technician_delete_policy": self.technician_delete_policy,
                "default_start_hour": self.default_start_hour,
                "backlog_window_days": self.backlog_window_days,
            }

    def apply(self, updates: Dict[str, Any]) -> None:
        with self._lock:
            if updates.get("service_hours") is not None:
                hours = updates["service_hours"]
                config = self.planning.service_config
                self.planning.service_config = ServiceConfig(
                    s=_as_hours(hours.get("s"), config.s),
                    m=_as_hours(hours.get("m"), config.m),
                    l=_as_hours(hours.get("l"), config.l),
                )
            if updates.get("enforce_slot_conflicts") is not None:
                self.enforce_slot_conflicts = bool(updates["enforce_slot_conflicts"])
            if updates.get("technician_delete_policy") is not None:
                policy = updates["technician_delete_policy"]
                if policy not in DELETE_POLICIES:
                    raise ValueError(f"Unknown technician delete policy: {policy}")
                self.technician_delete_policy = policy
            if updates.get("default_start_hour") is not None:
                self.default_start_hour = float(updates["default_start_hour"])
            if updates.get("backlog_window_days") is not None:
                self.backlog_window_days = max(0, int(updates["backlog_window_days"]))
        logger.info("Runtime settings updated: %s", sorted(k for k, v in updates.items() if v is not None))
