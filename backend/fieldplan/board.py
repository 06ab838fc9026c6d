"""Placement, moves and removal of assignments on the technician board.

Durations come from the work package catalog or from the machine's size
class. Start hours are either the dropped timeline position or stacked after
the technician's last assignment of the day. Moves keep duration and target
and do not validate against the technician's working hours.
"""

from __future__ import annotations

import datetime as dt
import uuid
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple, Union

from typing_extensions import Literal

from .errors import NotFound, SlotConflict, UnknownTarget
from .hierarchy import AssetHierarchyIndex
from .models import Assignment, PlanningSnapshot, Technician

DEFAULT_START_HOUR = 8.0
DEFAULT_DAY_WINDOW = (8.0, 18.0)
ALL_LOCATIONS = "All"


def _new_id() -> str:
    return uuid.uuid4().hex


def _check_slot(
    snapshot: PlanningSnapshot,
    candidate: Assignment,
    ignore_id: Optional[str] = None,
) -> None:
    for existing in snapshot.assignments_for(candidate.technician_id, candidate.date):
        if existing.id == ignore_id:
            continue
        if existing.overlaps(candidate):
            raise SlotConflict(candidate.technician_id, existing.id)


def _require_technician(snapshot: PlanningSnapshot, technician_id: str) -> Technician:
    technician = snapshot.find_technician(technician_id)
    if technician is None:
        raise NotFound("technician", technician_id)
    return technician


def next_free_hour(
    snapshot: PlanningSnapshot,
    technician_id: str,
    day: dt.date,
    default: float = DEFAULT_START_HOUR,
) -> float:
    existing = sorted(snapshot.assignments_for(technician_id, day), key=lambda a: a.start_hour)
    if not existing:
        return default
    last = existing[-1]
    return last.start_hour + last.duration


def place(
    snapshot: PlanningSnapshot,
    target_id: str,
    is_package: bool,
    technician_id: str,
    day: dt.date,
    dropped_hour: Optional[float] = None,
    *,
    default_start_hour: float = DEFAULT_START_HOUR,
    enforce_slot_conflicts: bool = False,
) -> Assignment:
    custom_name: Optional[str] = None
    if is_package:
        package = snapshot.find_package(target_id)
        if package is None:
            raise UnknownTarget(target_id, is_package)
        duration = package.duration
        custom_name = package.name
    else:
        asset = AssetHierarchyIndex(snapshot.assets).find(target_id)
        if asset is None:
            raise UnknownTarget(target_id, is_package)
        size = asset.machine.service_size if asset.machine else None
        duration = snapshot.service_config.hours_for(size)
    _require_technician(snapshot, technician_id)

    if dropped_hour is not None:
        start_hour = float(dropped_hour)
    else:
        start_hour = next_free_hour(snapshot, technician_id, day, default_start_hour)

    assignment = Assignment(
        id=_new_id(),
        entity_id=target_id,
        is_package=is_package,
        custom_name=custom_name,
        technician_id=technician_id,
        date=day,
        duration=duration,
        start_hour=start_hour,
        status="planned",
    )
    if enforce_slot_conflicts:
        _check_slot(snapshot, assignment)
    snapshot.assignments.append(assignment)
    return assignment


def move(
    snapshot: PlanningSnapshot,
    assignment_id: str,
    technician_id: str,
    day: dt.date,
    start_hour: Optional[float] = None,
    *,
    default_start_hour: float = DEFAULT_START_HOUR,
    enforce_slot_conflicts: bool = False,
) -> Assignment:
    assignment = snapshot.find_assignment(assignment_id)
    if assignment is None:
        raise NotFound("assignment", assignment_id)
    _require_technician(snapshot, technician_id)
    new_start = float(start_hour) if start_hour is not None else default_start_hour
    if enforce_slot_conflicts:
        candidate = Assignment(
            id=assignment.id,
            entity_id=assignment.entity_id,
            technician_id=technician_id,
            date=day,
            duration=assignment.duration,
            start_hour=new_start,
        )
        _check_slot(snapshot, candidate, ignore_id=assignment.id)
    assignment.technician_id = technician_id
    assignment.date = day
    assignment.start_hour = new_start
    return assignment


def remove(snapshot: PlanningSnapshot, assignment_id: str) -> None:
    snapshot.assignments[:] = [a for a in snapshot.assignments if a.id != assignment_id]


def complete(snapshot: PlanningSnapshot, assignment_id: str) -> Assignment:
    assignment = snapshot.find_assignment(assignment_id)
    if assignment is None:
        raise NotFound("assignment", assignment_id)
    assignment.mark_completed()
    return assignment


def technicians_at(technicians: Iterable[Technician], location: Optional[str] = None) -> List[Technician]:
    if not location or location == ALL_LOCATIONS:
        return list(technicians)
    return [t for t in technicians if t.location == location]


def locations(technicians: Iterable[Technician]) -> List[str]:
    seen: List[str] = []
    for technician in technicians:
        if technician.location not in seen:
            seen.append(technician.location)
    return seen


def day_window(
    technicians: Iterable[Technician],
    default: Tuple[float, float] = DEFAULT_DAY_WINDOW,
) -> Tuple[float, float]:
    technicians = list(technicians)
    if not technicians:
        return default
    return (
        min(t.work_day_start for t in technicians),
        max(t.work_day_end for t in technicians),
    )


@dataclass(slots=True)
class HourSlot:
    hour: float
    working: bool


def hour_slots(technician: Technician, window: Tuple[float, float]) -> List[HourSlot]:
    min_hour, max_hour = window
    slots: List[HourSlot] = []
    hour = min_hour
    while hour < max_hour:
        slots.append(HourSlot(hour=hour, working=technician.is_working(hour)))
        hour += 1
    return slots


def route_for(snapshot: PlanningSnapshot, technician_id: str, day: dt.date) -> List[Assignment]:
    return sorted(snapshot.assignments_for(technician_id, day), key=lambda a: a.start_hour)


@dataclass(slots=True)
class TechnicianDay:
    technician: Technician
    slots: List[HourSlot]
    assignments: List[Assignment]
    booked_hours: float


def day_board(
    snapshot: PlanningSnapshot,
    day: dt.date,
    location: Optional[str] = None,
    default_window: Tuple[float, float] = DEFAULT_DAY_WINDOW,
) -> Tuple[Tuple[float, float], List[TechnicianDay]]:
    technicians = technicians_at(snapshot.technicians, location)
    window = day_window(technicians, default_window)
    rows: List[TechnicianDay] = []
    for technician in technicians:
        assignments = route_for(snapshot, technician.id, day)
        rows.append(
            TechnicianDay(
                technician=technician,
                slots=hour_slots(technician, window),
                assignments=assignments,
                booked_hours=sum(a.duration for a in assignments),
            )
        )
    return window, rows


# Drag and drop: a pick-up message followed by exactly one terminal drop.

@dataclass(frozen=True, slots=True)
class BeginMove:
    item_id: str
    kind: Literal["entity", "package", "assignment"]
    origin: Literal["stock", "board"]
    duration: Optional[float] = None


@dataclass(frozen=True, slots=True)
class CompleteMove:
    technician_id: str
    date: dt.date
    dropped_hour: Optional[float] = None


@dataclass(frozen=True, slots=True)
class ReturnToStock:
    pass


Drop = Union[CompleteMove, ReturnToStock]


def resolve_drop(
    snapshot: PlanningSnapshot,
    payload: Optional[BeginMove],
    drop: Drop,
    *,
    default_start_hour: float = DEFAULT_START_HOUR,
    enforce_slot_conflicts: bool = False,
) -> Optional[Assignment]:
    """Apply a terminal drop; returns the placed or moved assignment, if any."""
    if payload is None:
        return None
    if isinstance(drop, ReturnToStock):
        if payload.origin == "board":
            remove(snapshot, payload.item_id)
        return None
    if payload.origin == "board":
        return move(
            snapshot,
            payload.item_id,
            drop.technician_id,
            drop.date,
            drop.dropped_hour,
            default_start_hour=default_start_hour,
            enforce_slot_conflicts=enforce_slot_conflicts,
        )
    return place(
        snapshot,
        payload.item_id,
        payload.kind == "package",
        drop.technician_id,
        drop.date,
        drop.dropped_hour,
        default_start_hour=default_start_hour,
        enforce_slot_conflicts=enforce_slot_conflicts,
    )
