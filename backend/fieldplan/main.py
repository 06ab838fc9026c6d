from __future__ import annotations

import datetime as dt
import logging
from typing import Optional
from zoneinfo import ZoneInfo

from fastapi import Depends, FastAPI, Path, Query, Request, Response, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import services
from .board import BeginMove, CompleteMove, ReturnToStock
from .config import settings
from .errors import PlanningError
from .models import ServiceConfig
from .schemas import (
    AssetResponse,
    AssetUpdateRequest,
    AssignmentCreateRequest,
    AssignmentMoveRequest,
    AssignmentResponse,
    BacklogResponse,
    BoardDayResponse,
    BoardWindowResponse,
    CalendarWeekResponse,
    DropRequest,
    DropResponse,
    PartRequirementResponse,
    SettingsResponse,
    SettingsUpdateRequest,
    TaskResponse,
    TechnicianCreateRequest,
    TechnicianResponse,
    TechnicianUpdateRequest,
    UtilisationResponse,
    WorkPackageCreateRequest,
    WorkPackageResponse,
    WorkPackageUpdateRequest,
)
from .seed import demo_snapshot
from .state import RuntimeState

logger = logging.getLogger(__name__)


def _build_runtime_state() -> RuntimeState:
    if not settings.seed_demo:
        return RuntimeState(settings)
    today = dt.datetime.now(ZoneInfo(settings.timezone)).date()
    config = ServiceConfig(s=settings.service_hours_s, m=settings.service_hours_m, l=settings.service_hours_l)
    logger.info("Seeding demo planning data for %s", today)
    return RuntimeState(settings, demo_snapshot(today, config))


runtime_state = _build_runtime_state()

app = FastAPI(title=settings.app_name)
app.state.runtime_state = runtime_state
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(PlanningError)
async def planning_error_handler(request: Request, exc: PlanningError) -> JSONResponse:
    return JSONResponse({"detail": exc.detail}, status_code=exc.status_code)


def get_state(request: Request) -> RuntimeState:
    return request.app.state.runtime_state


@app.get("/healthz")
def healthz() -> dict[str, str]:
    return {"status": "ok"}


# Calendar


@app.get("/calendar/week", response_model=CalendarWeekResponse)
def calendar_week(
    day: Optional[dt.date] = None,
    days: int = Query(default=5, ge=1, le=7),
    state: RuntimeState = Depends(get_state),
) -> dict:
    return services.calendar_week(day or services._today(state), days)


@app.get("/calendar/holidays/{year}", response_model=dict[str, str])
def calendar_holidays(year: int = Path(ge=1583, le=9999)) -> dict[str, str]:
    return services.holiday_table(year)


# Assets


@app.get("/assets", response_model=list[AssetResponse])
def assets_list(
    parent_id: Optional[str] = None,
    q: Optional[str] = None,
    state: RuntimeState = Depends(get_state),
):
    return services.list_assets(state, parent_id, q)


@app.get("/assets/{asset_id}", response_model=AssetResponse)
def assets_get(asset_id: str, state: RuntimeState = Depends(get_state)):
    return services.get_asset(state, asset_id)


@app.get("/assets/{asset_id}/breadcrumbs", response_model=list[AssetResponse])
def assets_breadcrumbs(asset_id: str, state: RuntimeState = Depends(get_state)):
    return services.asset_breadcrumbs(state, asset_id)


@app.patch("/assets/{asset_id}", response_model=AssetResponse)
def assets_update(asset_id: str, payload: AssetUpdateRequest, state: RuntimeState = Depends(get_state)):
    data = payload.model_dump(exclude_unset=True)
    return services.update_asset(
        state,
        asset_id,
        name=data.get("name", services.UNSET),
        description=data.get("description", services.UNSET),
        customer_number=data.get("customer_number", services.UNSET),
        detail=data.get("detail"),
    )


@app.post("/assets/{asset_id}/escalate", response_model=AssetResponse)
def assets_escalate(asset_id: str, state: RuntimeState = Depends(get_state)):
    return services.escalate_asset(state, asset_id)


# Backlog and tasks


@app.get("/backlog", response_model=BacklogResponse)
def backlog_list(
    from_date: Optional[dt.date] = None,
    to_date: Optional[dt.date] = None,
    sort: Optional[str] = Query(default=None, pattern="^overdue$"),
    state: RuntimeState = Depends(get_state),
) -> dict:
    start, end, items = services.get_backlog(state, from_date, to_date, sort_overdue=sort == "overdue")
    return {"from_date": start, "to_date": end, "items": items}


@app.get("/tasks", response_model=list[TaskResponse])
def tasks_list(state: RuntimeState = Depends(get_state)):
    return services.list_tasks(state)


# Board


@app.get("/board/window", response_model=BoardWindowResponse)
def board_window(location: Optional[str] = None, state: RuntimeState = Depends(get_state)) -> dict:
    return services.board_window(state, location)


@app.get("/board/day/{day}", response_model=BoardDayResponse)
def board_day(day: dt.date, location: Optional[str] = None, state: RuntimeState = Depends(get_state)) -> dict:
    return services.board_day(state, day, location)


@app.get("/board/route/{technician_id}/{day}", response_model=list[AssignmentResponse])
def board_route(technician_id: str, day: dt.date, state: RuntimeState = Depends(get_state)):
    return services.technician_route(state, technician_id, day)


@app.post("/board/drop", response_model=DropResponse)
def board_drop(payload: DropRequest, state: RuntimeState = Depends(get_state)) -> dict:
    begin = (
        BeginMove(
            item_id=payload.payload.item_id,
            kind=payload.payload.kind,
            origin=payload.payload.origin,
            duration=payload.payload.duration,
        )
        if payload.payload
        else None
    )
    if payload.target == "stock":
        drop = ReturnToStock()
    else:
        drop = CompleteMove(
            technician_id=payload.technician_id,
            date=payload.date,
            dropped_hour=payload.dropped_hour,
        )
    assignment = services.apply_drop(state, begin, drop)
    if begin is None:
        action = "ignored"
    elif isinstance(drop, ReturnToStock):
        action = "removed" if begin.origin == "board" else "ignored"
    else:
        action = "moved" if begin.origin == "board" else "placed"
    return {"action": action, "assignment": assignment}


@app.get("/assignments", response_model=list[AssignmentResponse])
def assignments_list(
    from_date: Optional[dt.date] = None,
    to_date: Optional[dt.date] = None,
    technician_id: Optional[str] = None,
    state: RuntimeState = Depends(get_state),
):
    return services.list_assignments(state, from_date, to_date, technician_id)


@app.post("/assignments", response_model=AssignmentResponse, status_code=status.HTTP_201_CREATED)
def assignments_place(payload: AssignmentCreateRequest, state: RuntimeState = Depends(get_state)):
    return services.place_assignment(
        state,
        payload.target_id,
        payload.is_package,
        payload.technician_id,
        payload.date,
        payload.dropped_hour,
    )


@app.patch("/assignments/{assignment_id}", response_model=AssignmentResponse)
def assignments_move(
    assignment_id: str,
    payload: AssignmentMoveRequest,
    state: RuntimeState = Depends(get_state),
):
    return services.move_assignment(state, assignment_id, payload.technician_id, payload.date, payload.start_hour)


@app.post("/assignments/{assignment_id}/complete", response_model=AssignmentResponse)
def assignments_complete(assignment_id: str, state: RuntimeState = Depends(get_state)):
    return services.complete_assignment(state, assignment_id)


@app.delete("/assignments/{assignment_id}", status_code=status.HTTP_204_NO_CONTENT)
def assignments_remove(assignment_id: str, state: RuntimeState = Depends(get_state)) -> Response:
    services.remove_assignment(state, assignment_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# Materials and reports


@app.get("/materials", response_model=list[PartRequirementResponse])
def materials_list(
    from_date: Optional[dt.date] = None,
    to_date: Optional[dt.date] = None,
    state: RuntimeState = Depends(get_state),
):
    return services.material_requirements(state, from_date, to_date)


@app.get("/reports/utilisation", response_model=UtilisationResponse)
def reports_utilisation(
    from_date: Optional[dt.date] = None,
    to_date: Optional[dt.date] = None,
    state: RuntimeState = Depends(get_state),
):
    return services.utilisation_report(state, from_date, to_date)


# Administration


@app.get("/technicians", response_model=list[TechnicianResponse])
def technicians_list(location: Optional[str] = None, state: RuntimeState = Depends(get_state)):
    return services.list_technicians(state, location)


@app.post("/technicians", response_model=TechnicianResponse, status_code=status.HTTP_201_CREATED)
def technicians_create(payload: TechnicianCreateRequest, state: RuntimeState = Depends(get_state)):
    return services.create_technician(
        state,
        payload.name,
        payload.role,
        payload.location,
        payload.work_day_start,
        payload.work_day_end,
        payload.max_hours,
        payload.avatar_color,
    )


@app.patch("/technicians/{technician_id}", response_model=TechnicianResponse)
def technicians_update(
    technician_id: str,
    payload: TechnicianUpdateRequest,
    state: RuntimeState = Depends(get_state),
):
    return services.update_technician(state, technician_id, payload.model_dump(exclude_unset=True))


@app.delete("/technicians/{technician_id}", status_code=status.HTTP_204_NO_CONTENT)
def technicians_delete(technician_id: str, state: RuntimeState = Depends(get_state)) -> Response:
    services.delete_technician(state, technician_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@app.get("/packages", response_model=list[WorkPackageResponse])
def packages_list(state: RuntimeState = Depends(get_state)):
    return services.list_packages(state)


@app.post("/packages", response_model=WorkPackageResponse, status_code=status.HTTP_201_CREATED)
def packages_create(payload: WorkPackageCreateRequest, state: RuntimeState = Depends(get_state)):
    return services.create_package(state, payload.name, payload.duration)


@app.patch("/packages/{package_id}", response_model=WorkPackageResponse)
def packages_update(
    package_id: str,
    payload: WorkPackageUpdateRequest,
    state: RuntimeState = Depends(get_state),
):
    return services.update_package(state, package_id, payload.name, payload.duration)


@app.delete("/packages/{package_id}", status_code=status.HTTP_204_NO_CONTENT)
def packages_delete(package_id: str, state: RuntimeState = Depends(get_state)) -> Response:
    services.delete_package(state, package_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@app.get("/settings", response_model=SettingsResponse)
def settings_get(state: RuntimeState = Depends(get_state)) -> dict:
    return state.snapshot()


@app.put("/settings", response_model=SettingsResponse)
def settings_update(payload: SettingsUpdateRequest, state: RuntimeState = Depends(get_state)) -> dict:
    updates = payload.model_dump(exclude_unset=True)
    return services.update_runtime_settings(state, updates)
