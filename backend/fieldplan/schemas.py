from __future__ import annotations

import datetime as dt
from typing import Dict, List, Optional, Union

from typing_extensions import Literal

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator


class MachineDetailResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    kind: Literal["machine"]
    manufacturer: Optional[str] = None
    model: Optional[str] = None
    serial_number: Optional[str] = None
    operating_hours: Optional[float] = None
    next_service_hours: Optional[float] = None
    last_service_date: Optional[dt.date] = None
    next_service_date: Optional[dt.date] = None
    status: Optional[Literal["ok", "warning", "critical"]] = None
    service_size: Optional[Literal["S", "M", "L"]] = None


class PartDetailResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    kind: Literal["part"]
    article_number: Optional[str] = None
    manufacturer: Optional[str] = None
    quantity: Optional[float] = None


class AssetResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: str
    parent_id: Optional[str]
    category: str
    name: str
    description: Optional[str]
    customer_number: Optional[str]
    detail: Optional[Union[MachineDetailResponse, PartDetailResponse]]


class AssetDetailUpdate(BaseModel):
    """Detail fields of machines and parts; keys foreign to the asset's variant are ignored."""

    manufacturer: Optional[str] = None
    model: Optional[str] = None
    serial_number: Optional[str] = None
    operating_hours: Optional[float] = Field(default=None, ge=0)
    next_service_hours: Optional[float] = Field(default=None, ge=0)
    last_service_date: Optional[dt.date] = None
    next_service_date: Optional[dt.date] = None
    status: Optional[Literal["ok", "warning", "critical"]] = None
    service_size: Optional[Literal["S", "M", "L"]] = None
    article_number: Optional[str] = None
    quantity: Optional[float] = Field(default=None, ge=0)


class AssetUpdateRequest(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    customer_number: Optional[str] = None
    detail: Optional[AssetDetailUpdate] = None


class BacklogResponse(BaseModel):
    from_date: dt.date
    to_date: dt.date
    items: List[AssetResponse]


class TaskResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: str
    title: str
    description: str
    kind: Literal["reminder", "warning", "planning", "info"]
    related_id: Optional[str]
    date: Optional[dt.date]
    days_until_due: Optional[int]


class TechnicianResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: str
    name: str
    role: str
    location: str
    work_day_start: float
    work_day_end: float
    max_hours: float
    avatar_color: Optional[str]


class TechnicianCreateRequest(BaseModel):
    name: str = Field(min_length=1)
    role: str = "Techniker"
    location: str = "Berlin"
    work_day_start: float = Field(default=8, ge=0, le=24)
    work_day_end: float = Field(default=17, ge=0, le=24)
    max_hours: float = Field(default=8, gt=0, le=24)
    avatar_color: Optional[str] = None


class TechnicianUpdateRequest(BaseModel):
    name: Optional[str] = None
    role: Optional[str] = None
    location: Optional[str] = None
    work_day_start: Optional[float] = Field(default=None, ge=0, le=24)
    work_day_end: Optional[float] = Field(default=None, ge=0, le=24)
    max_hours: Optional[float] = Field(default=None, gt=0, le=24)
    avatar_color: Optional[str] = None


class WorkPackageResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: str
    name: str
    duration: float


class WorkPackageCreateRequest(BaseModel):
    name: str = Field(default="Neue Leistung", min_length=1)
    duration: float = Field(default=1, ge=0, le=24)


class WorkPackageUpdateRequest(BaseModel):
    name: Optional[str] = None
    duration: Optional[float] = Field(default=None, ge=0, le=24)


class AssignmentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: str
    entity_id: str
    is_package: bool
    custom_name: Optional[str]
    technician_id: str
    date: dt.date
    duration: float
    start_hour: float
    status: Literal["planned", "completed"]

    @computed_field
    @property
    def end_hour(self) -> float:
        return self.start_hour + self.duration


class AssignmentCreateRequest(BaseModel):
    target_id: str
    is_package: bool = False
    technician_id: str
    date: dt.date
    dropped_hour: Optional[float] = Field(default=None, ge=0, le=24)


class AssignmentMoveRequest(BaseModel):
    technician_id: str
    date: dt.date
    start_hour: Optional[float] = Field(default=None, ge=0, le=24)


class DragPayload(BaseModel):
    item_id: str
    kind: Literal["entity", "package", "assignment"]
    origin: Literal["stock", "board"]
    duration: Optional[float] = None


class DropRequest(BaseModel):
    payload: Optional[DragPayload] = None
    target: Literal["board", "stock"] = "board"
    technician_id: Optional[str] = None
    date: Optional[dt.date] = None
    dropped_hour: Optional[float] = Field(default=None, ge=0, le=24)

    @model_validator(mode="after")
    def _board_drop_needs_slot(self) -> "DropRequest":
        if self.target == "board" and (self.technician_id is None or self.date is None):
            raise ValueError("A board drop needs technician_id and date")
        return self


class DropResponse(BaseModel):
    action: Literal["placed", "moved", "removed", "ignored"]
    assignment: Optional[AssignmentResponse] = None


class HourSlotResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    hour: float
    working: bool


class TechnicianDayResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    technician: TechnicianResponse
    slots: List[HourSlotResponse]
    assignments: List[AssignmentResponse]
    booked_hours: float


class BoardDayResponse(BaseModel):
    date: dt.date
    iso_week: int
    holiday: Optional[str]
    min_hour: float
    max_hour: float
    rows: List[TechnicianDayResponse]


class BoardWindowResponse(BaseModel):
    min_hour: float
    max_hour: float
    locations: List[str]
    technicians: List[TechnicianResponse]


class CalendarDayResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    date: dt.date
    iso_week: int
    weekday: int
    holiday: Optional[str]

    @computed_field
    @property
    def is_weekend(self) -> bool:
        return self.weekday >= 5


class CalendarWeekResponse(BaseModel):
    monday: dt.date
    iso_week: int
    previous_monday: dt.date
    next_monday: dt.date
    days: List[CalendarDayResponse]


class PartRequirementResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    article_number: str
    name: str
    quantity: float
    machine_name: Optional[str]


class TechnicianLoadResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    technician_id: str
    name: str
    count: int
    hours: float
    utilisation: int


class UtilisationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    start: dt.date
    end: dt.date
    total_assignments: int
    total_hours: float
    active_technicians: int
    technicians: List[TechnicianLoadResponse]


class ServiceHours(BaseModel):
    s: Optional[float] = Field(default=None, ge=0)
    m: Optional[float] = Field(default=None, ge=0)
    l: Optional[float] = Field(default=None, ge=0)


class SettingsResponse(BaseModel):
    service_hours: Dict[str, float]
    enforce_slot_conflicts: bool
    technician_delete_policy: Literal["reject", "cascade"]
    default_start_hour: float
    backlog_window_days: int


class SettingsUpdateRequest(BaseModel):
    service_hours: Optional[ServiceHours] = None
    enforce_slot_conflicts: Optional[bool] = None
    technician_delete_policy: Optional[Literal["reject", "cascade"]] = None
    default_start_hour: Optional[float] = Field(default=None, ge=0, le=24)
    backlog_window_days: Optional[int] = Field(default=None, ge=0)
