"""Which machines need a visit, and the reminders derived from that.

A machine drops out of the backlog as soon as a non-package assignment for it
sits on the board today or later. Past visits, completed or not, never hide a
machine.
"""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from typing import Iterable, List, Optional

from typing_extensions import Literal

from .calendar_service import iso_week_number, monday_of, next_weekday
from .hierarchy import AssetHierarchyIndex
from .models import Asset, Assignment, PlanningSnapshot

TaskKind = Literal["reminder", "warning", "planning", "info"]


@dataclass(slots=True)
class Task:
    id: str
    title: str
    description: str
    kind: TaskKind
    related_id: Optional[str] = None
    date: Optional[dt.date] = None
    days_until_due: Optional[int] = None


def has_future_visit(asset_id: str, assignments: Iterable[Assignment], today: dt.date) -> bool:
    return any(
        not assignment.is_package and assignment.entity_id == asset_id and assignment.date >= today
        for assignment in assignments
    )


def backlog(
    snapshot: PlanningSnapshot,
    window_start: dt.date,
    window_end: dt.date,
    today: dt.date,
) -> List[Asset]:
    """Machines due in ``[window_start, window_end]`` or overdue, in store order."""
    result: List[Asset] = []
    for asset in snapshot.assets:
        if asset.category != "machine":
            continue
        detail = asset.machine
        if has_future_visit(asset.id, snapshot.assignments, today):
            continue
        due = detail.next_service_date if detail else None
        if due is None:
            if detail is not None and detail.needs_attention():
                result.append(asset)
            continue
        if due < today:
            result.append(asset)
        elif window_start <= due <= window_end:
            result.append(asset)
    return result


def most_overdue_first(assets: Iterable[Asset]) -> List[Asset]:
    """Sort by due date ascending; machines without a due date go last."""
    def key(asset: Asset):
        due = asset.machine.next_service_date if asset.machine else None
        return (due is None, due or dt.date.max)

    return sorted(assets, key=key)


def reminders(
    snapshot: PlanningSnapshot,
    today: dt.date,
    overdue_days: int = 10,
    ahead_days: int = 30,
) -> List[Task]:
    index = AssetHierarchyIndex(snapshot.assets)
    tasks: List[Task] = []
    for machine in index.machines():
        detail = machine.machine
        if detail is None or detail.next_service_date is None:
            continue
        if has_future_visit(machine.id, snapshot.assignments, today):
            continue
        days = (detail.next_service_date - today).days
        if not -overdue_days < days < ahead_days:
            continue
        parent = index.find(machine.parent_id)
        parent_name = parent.name if parent else "-"
        if days < 0:
            tasks.append(
                Task(
                    id=f"task_m_{machine.id}",
                    title="Wartung überfällig",
                    description=(
                        f'Kunde "{parent_name}" auf überfällige Wartung für "{machine.name}" '
                        f"hinweisen (Überfällig seit {abs(days)} Tagen)."
                    ),
                    kind="warning",
                    related_id=machine.id,
                    date=detail.next_service_date,
                    days_until_due=days,
                )
            )
        else:
            tasks.append(
                Task(
                    id=f"task_m_{machine.id}",
                    title="Wartungserinnerung",
                    description=(
                        f'Kunde "{parent_name}" auf bevorstehende Wartung für "{machine.name}" '
                        f"hinweisen (Fällig in {days} Tagen)."
                    ),
                    kind="reminder",
                    related_id=machine.id,
                    date=detail.next_service_date,
                    days_until_due=days,
                )
            )
    return tasks


def planning_tasks(snapshot: PlanningSnapshot, today: dt.date) -> List[Task]:
    """Technicians with nothing booked from next Monday to next Friday."""
    week_start = monday_of(today) + dt.timedelta(days=7)
    week_end = week_start + dt.timedelta(days=4)
    week = iso_week_number(week_start)
    tasks: List[Task] = []
    for technician in snapshot.technicians:
        booked = any(
            a.technician_id == technician.id and week_start <= a.date <= week_end
            for a in snapshot.assignments
        )
        if booked:
            continue
        tasks.append(
            Task(
                id=f"task_t_{technician.id}",
                title="Planung erforderlich",
                description=(
                    f"Kollege {technician.name} hat für die nächste Woche (KW {week}) "
                    "noch keine Einsätze geplant."
                ),
                kind="planning",
                related_id=technician.id,
                date=week_start,
            )
        )
    return tasks


def capacity_tasks(snapshot: PlanningSnapshot, today: dt.date, free_hours: float = 4) -> List[Task]:
    """Technicians with more than ``free_hours`` unbooked on the upcoming Friday."""
    friday = next_weekday(today, 4)
    tasks: List[Task] = []
    for technician in snapshot.technicians:
        booked = sum(a.duration for a in snapshot.assignments_for(technician.id, friday))
        hours_left = technician.working_hours - booked
        if hours_left <= free_hours:
            continue
        tasks.append(
            Task(
                id=f"task_cap_{technician.id}",
                title="Freie Kapazität",
                description=(
                    f"Kollege {technician.name} hat am nächsten Freitag "
                    f"({friday.strftime('%d.%m.%Y')}) noch {hours_left:g} Stunden frei."
                ),
                kind="info",
                related_id=technician.id,
                date=friday,
            )
        )
    return tasks


def task_list(
    snapshot: PlanningSnapshot,
    today: dt.date,
    overdue_days: int = 10,
    ahead_days: int = 30,
    free_hours: float = 4,
) -> List[Task]:
    return (
        reminders(snapshot, today, overdue_days, ahead_days)
        + planning_tasks(snapshot, today)
        + capacity_tasks(snapshot, today, free_hours)
    )
