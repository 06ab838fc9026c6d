from __future__ import annotations

import datetime as dt
import logging
import uuid
from typing import Any, Dict, List, Optional, Tuple
from zoneinfo import ZoneInfo

from . import backlog as backlog_engine
from . import board
from .calendar_service import add_weeks, holidays_for_year, iso_week_number, monday_of, week_days
from .errors import NotFound, PlanningError, TechnicianInUse
from .hierarchy import AssetHierarchyIndex
from .materials import PartRequirement, required_parts
from .models import Asset, Assignment, Technician, WorkPackage
from .reports import UtilisationReport, utilisation
from .state import RuntimeState

logger = logging.getLogger(__name__)

UNSET: Any = object()


def _today(state: RuntimeState) -> dt.date:
    return dt.datetime.now(ZoneInfo(state.timezone)).date()


def _new_id(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex[:12]}"


def _board_options(state: RuntimeState) -> Dict[str, Any]:
    return {
        "default_start_hour": state.default_start_hour,
        "enforce_slot_conflicts": state.enforce_slot_conflicts,
    }


# --- Calendar ---------------------------------------------------------------


def calendar_week(day: dt.date, days: int = 5) -> Dict[str, Any]:
    monday = monday_of(day)
    return {
        "monday": monday,
        "iso_week": iso_week_number(monday),
        "previous_monday": add_weeks(monday, -1),
        "next_monday": add_weeks(monday, 1),
        "days": week_days(monday, days),
    }


def holiday_table(year: int) -> Dict[str, str]:
    return holidays_for_year(year)


# --- Assets -----------------------------------------------------------------


def list_assets(state: RuntimeState, parent_id: Optional[str], query: Optional[str]) -> List[Asset]:
    with state.writer() as planning:
        index = AssetHierarchyIndex(planning.assets)
        if parent_id is not None:
            index.get(parent_id)
        if query:
            return index.search(query, parent_id)
        return index.children_of(parent_id)


def get_asset(state: RuntimeState, asset_id: str) -> Asset:
    with state.writer() as planning:
        return AssetHierarchyIndex(planning.assets).get(asset_id)


def asset_breadcrumbs(state: RuntimeState, asset_id: str) -> List[Asset]:
    with state.writer() as planning:
        return AssetHierarchyIndex(planning.assets).breadcrumb_path(asset_id)


def update_asset(
    state: RuntimeState,
    asset_id: str,
    name: Any = UNSET,
    description: Any = UNSET,
    customer_number: Any = UNSET,
    detail: Optional[Dict[str, Any]] = None,
) -> Asset:
    with state.writer() as planning:
        asset = AssetHierarchyIndex(planning.assets).get(asset_id)
        new_detail = asset.detail
        if detail:
            if asset.category not in ("machine", "part"):
                raise PlanningError(f"Assets of category '{asset.category}' have no detail record")
            try:
                new_detail = asset.merged_detail(detail)
            except ValueError as exc:
                logger.warning("Detail edit of %s rejected: %s", asset_id, exc)
                raise PlanningError(str(exc)) from exc
        if name is not UNSET and name:
            asset.name = name.strip()
        if description is not UNSET:
            asset.description = description
        if customer_number is not UNSET:
            asset.customer_number = customer_number
        asset.detail = new_detail
    logger.info("Asset %s updated", asset_id)
    return asset


def escalate_asset(state: RuntimeState, asset_id: str) -> Asset:
    """Incident escalation: mark critical and due today so it enters the backlog."""
    today = _today(state)
    with state.writer() as planning:
        asset = AssetHierarchyIndex(planning.assets).get(asset_id)
        if asset.category != "machine":
            raise PlanningError("Only machines can be escalated")
        asset.update_detail({"status": "critical", "next_service_date": today})
    logger.info("Asset %s escalated to critical, due %s", asset_id, today)
    return asset


# --- Backlog and tasks -------------------------------------------------------


def get_backlog(
    state: RuntimeState,
    from_date: Optional[dt.date],
    to_date: Optional[dt.date],
    sort_overdue: bool = False,
) -> Tuple[dt.date, dt.date, List[Asset]]:
    today = _today(state)
    start = from_date or today
    end = to_date or start + dt.timedelta(days=state.backlog_window_days)
    if end < start:
        raise PlanningError("Invalid range")
    with state.writer() as planning:
        items = backlog_engine.backlog(planning, start, end, today)
    if sort_overdue:
        items = backlog_engine.most_overdue_first(items)
    return start, end, items


def list_tasks(state: RuntimeState) -> List[backlog_engine.Task]:
    today = _today(state)
    with state.writer() as planning:
        return backlog_engine.task_list(
            planning,
            today,
            overdue_days=state.reminder_overdue_days,
            ahead_days=state.reminder_ahead_days,
            free_hours=state.capacity_free_hours,
        )


# --- Board ------------------------------------------------------------------


def board_window(state: RuntimeState, location: Optional[str]) -> Dict[str, Any]:
    with state.writer() as planning:
        technicians = board.technicians_at(planning.technicians, location)
        min_hour, max_hour = board.day_window(technicians, state.default_day_window)
        return {
            "min_hour": min_hour,
            "max_hour": max_hour,
            "locations": board.locations(planning.technicians),
            "technicians": technicians,
        }


def board_day(state: RuntimeState, day: dt.date, location: Optional[str]) -> Dict[str, Any]:
    holidays = holidays_for_year(day.year)
    with state.writer() as planning:
        (min_hour, max_hour), rows = board.day_board(planning, day, location, state.default_day_window)
    return {
        "date": day,
        "iso_week": iso_week_number(day),
        "holiday": holidays.get(day.isoformat()),
        "min_hour": min_hour,
        "max_hour": max_hour,
        "rows": rows,
    }


def technician_route(state: RuntimeState, technician_id: str, day: dt.date) -> List[Assignment]:
    with state.writer() as planning:
        if planning.find_technician(technician_id) is None:
            raise NotFound("technician", technician_id)
        return board.route_for(planning, technician_id, day)


def list_assignments(
    state: RuntimeState,
    from_date: Optional[dt.date],
    to_date: Optional[dt.date],
    technician_id: Optional[str],
) -> List[Assignment]:
    with state.writer() as planning:
        result = [
            a
            for a in planning.assignments
            if (from_date is None or a.date >= from_date)
            and (to_date is None or a.date <= to_date)
            and (technician_id is None or a.technician_id == technician_id)
        ]
    return sorted(result, key=lambda a: (a.date, a.technician_id, a.start_hour))


def place_assignment(
    state: RuntimeState,
    target_id: str,
    is_package: bool,
    technician_id: str,
    day: dt.date,
    dropped_hour: Optional[float] = None,
) -> Assignment:
    with state.writer() as planning:
        try:
            assignment = board.place(
                planning, target_id, is_package, technician_id, day, dropped_hour, **_board_options(state)
            )
        except PlanningError as exc:
            logger.warning("Placement of %s rejected: %s", target_id, exc.detail)
            raise
    logger.info(
        "Placed %s for %s on %s at %.2f (%.2fh)",
        target_id,
        technician_id,
        day,
        assignment.start_hour,
        assignment.duration,
    )
    return assignment


def move_assignment(
    state: RuntimeState,
    assignment_id: str,
    technician_id: str,
    day: dt.date,
    start_hour: Optional[float] = None,
) -> Assignment:
    with state.writer() as planning:
        try:
            assignment = board.move(
                planning, assignment_id, technician_id, day, start_hour, **_board_options(state)
            )
        except PlanningError as exc:
            logger.warning("Move of %s rejected: %s", assignment_id, exc.detail)
            raise
    logger.info("Moved %s to %s on %s at %.2f", assignment_id, technician_id, day, assignment.start_hour)
    return assignment


def remove_assignment(state: RuntimeState, assignment_id: str) -> None:
    with state.writer() as planning:
        board.remove(planning, assignment_id)
    logger.info("Removed assignment %s", assignment_id)


def complete_assignment(state: RuntimeState, assignment_id: str) -> Assignment:
    with state.writer() as planning:
        assignment = board.complete(planning, assignment_id)
    logger.info("Assignment %s completed", assignment_id)
    return assignment


def apply_drop(
    state: RuntimeState,
    payload: Optional[board.BeginMove],
    drop: board.Drop,
) -> Optional[Assignment]:
    if payload is None:
        logger.debug("Drop without pick-up payload ignored")
    with state.writer() as planning:
        try:
            return board.resolve_drop(planning, payload, drop, **_board_options(state))
        except PlanningError as exc:
            logger.warning("Drop of %s rejected: %s", payload.item_id if payload else "-", exc.detail)
            raise


# --- Materials and reports --------------------------------------------------


def material_requirements(
    state: RuntimeState,
    from_date: Optional[dt.date],
    to_date: Optional[dt.date],
) -> List[PartRequirement]:
    with state.writer() as planning:
        index = AssetHierarchyIndex(planning.assets)
        scheduled = [
            a
            for a in planning.assignments
            if (from_date is None or a.date >= from_date) and (to_date is None or a.date <= to_date)
        ]
        return required_parts(index, scheduled)


def utilisation_report(
    state: RuntimeState,
    from_date: Optional[dt.date],
    to_date: Optional[dt.date],
) -> UtilisationReport:
    today = _today(state)
    start = from_date or today - dt.timedelta(days=30)
    end = to_date or today + dt.timedelta(days=30)
    if end < start:
        raise PlanningError("Invalid range")
    with state.writer() as planning:
        return utilisation(planning.assignments, planning.technicians, start, end)


# --- Technicians --------------------------------------------------------------


def list_technicians(state: RuntimeState, location: Optional[str] = None) -> List[Technician]:
    with state.writer() as planning:
        return board.technicians_at(planning.technicians, location)


def _validate_hours(start: float, end: float) -> None:
    if not 0 <= start < end <= 24:
        raise PlanningError("Working hours must satisfy 0 <= start < end <= 24")


def create_technician(
    state: RuntimeState,
    name: str,
    role: str,
    location: str,
    work_day_start: float,
    work_day_end: float,
    max_hours: float,
    avatar_color: Optional[str] = None,
) -> Technician:
    _validate_hours(work_day_start, work_day_end)
    technician = Technician(
        id=_new_id("tech"),
        name=name.strip(),
        role=role,
        location=location,
        work_day_start=work_day_start,
        work_day_end=work_day_end,
        max_hours=max_hours,
        avatar_color=avatar_color,
    )
    with state.writer() as planning:
        planning.technicians.append(technician)
    logger.info("Technician %s (%s) created", technician.id, technician.name)
    return technician


def update_technician(state: RuntimeState, technician_id: str, updates: Dict[str, Any]) -> Technician:
    with state.writer() as planning:
        technician = planning.find_technician(technician_id)
        if technician is None:
            raise NotFound("technician", technician_id)
        start = updates.get("work_day_start")
        end = updates.get("work_day_end")
        _validate_hours(
            technician.work_day_start if start is None else start,
            technician.work_day_end if end is None else end,
        )
        for key in ("name", "role", "location", "work_day_start", "work_day_end", "max_hours", "avatar_color"):
            if key in updates and updates[key] is not None:
                setattr(technician, key, updates[key])
    logger.info("Technician %s updated", technician_id)
    return technician


def delete_technician(state: RuntimeState, technician_id: str) -> None:
    with state.writer() as planning:
        technician = planning.find_technician(technician_id)
        if technician is None:
            raise NotFound("technician", technician_id)
        referencing = [a for a in planning.assignments if a.technician_id == technician_id]
        if referencing and state.technician_delete_policy == "reject":
            logger.warning("Refusing to delete technician %s with %d assignments", technician_id, len(referencing))
            raise TechnicianInUse(technician_id, len(referencing))
        planning.assignments[:] = [a for a in planning.assignments if a.technician_id != technician_id]
        planning.technicians[:] = [t for t in planning.technicians if t.id != technician_id]
    logger.info("Technician %s deleted (%d assignments dropped)", technician_id, len(referencing))


# --- Work packages ------------------------------------------------------------


def list_packages(state: RuntimeState) -> List[WorkPackage]:
    with state.writer() as planning:
        return list(planning.packages)


def create_package(state: RuntimeState, name: str, duration: float) -> WorkPackage:
    package = WorkPackage(id=_new_id("pkg"), name=name.strip(), duration=duration)
    with state.writer() as planning:
        planning.packages.append(package)
    logger.info("Work package %s (%s, %.2fh) created", package.id, package.name, package.duration)
    return package


def update_package(
    state: RuntimeState,
    package_id: str,
    name: Optional[str] = None,
    duration: Optional[float] = None,
) -> WorkPackage:
    with state.writer() as planning:
        package = planning.find_package(package_id)
        if package is None:
            raise NotFound("work package", package_id)
        if name:
            package.name = name.strip()
        if duration is not None:
            package.duration = duration
    logger.info("Work package %s updated", package_id)
    return package


def delete_package(state: RuntimeState, package_id: str) -> None:
    with state.writer() as planning:
        if planning.find_package(package_id) is None:
            raise NotFound("work package", package_id)
        planning.packages[:] = [p for p in planning.packages if p.id != package_id]
    logger.info("Work package %s deleted", package_id)


# --- Settings -----------------------------------------------------------------


def update_runtime_settings(state: RuntimeState, updates: Dict[str, Any]) -> Dict[str, Any]:
    normalized = {key: value for key, value in updates.items() if value is not None}
    try:
        state.apply(normalized)
    except ValueError as exc:
        raise PlanningError(str(exc)) from exc
    return state.snapshot()
