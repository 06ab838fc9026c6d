from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from typing import Iterable, List

from .models import Assignment, Technician

WORKING_DAYS_PER_WEEK = 5


@dataclass(slots=True)
class TechnicianLoad:
    technician_id: str
    name: str
    count: int
    hours: float
    utilisation: int


@dataclass(slots=True)
class UtilisationReport:
    start: dt.date
    end: dt.date
    total_assignments: int = 0
    total_hours: float = 0
    active_technicians: int = 0
    technicians: List[TechnicianLoad] = field(default_factory=list)


def utilisation(
    assignments: Iterable[Assignment],
    technicians: Iterable[Technician],
    start: dt.date,
    end: dt.date,
) -> UtilisationReport:
    """Booked hours per technician against one working week of capacity."""
    in_range = [a for a in assignments if start <= a.date <= end]
    technicians = list(technicians)
    report = UtilisationReport(
        start=start,
        end=end,
        total_assignments=len(in_range),
        total_hours=sum(a.duration for a in in_range),
        active_technicians=len(technicians),
    )
    for technician in technicians:
        mine = [a for a in in_range if a.technician_id == technician.id]
        hours = sum(a.duration for a in mine)
        capacity = technician.max_hours * WORKING_DAYS_PER_WEEK
        percent = min(100, round(hours / capacity * 100)) if capacity > 0 else 0
        report.technicians.append(
            TechnicianLoad(
                technician_id=technician.id,
                name=technician.name,
                count=len(mine),
                hours=hours,
                utilisation=percent,
            )
        )
    return report
