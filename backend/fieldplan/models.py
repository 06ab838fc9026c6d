from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Mapping, Optional, Union

from typing_extensions import Literal

AssetCategory = Literal["customer", "station", "sub_station", "assembly", "machine", "component", "part"]
HealthStatus = Literal["ok", "warning", "critical"]
ServiceSize = Literal["S", "M", "L"]
AssignmentStatus = Literal["planned", "completed"]

ASSET_CATEGORIES: tuple[str, ...] = (
    "customer",
    "station",
    "sub_station",
    "assembly",
    "machine",
    "component",
    "part",
)
DUE_STATUSES = frozenset({"warning", "critical"})


def _parse_date(value: Any) -> Optional[dt.date]:
    if value in (None, ""):
        return None
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    return dt.date.fromisoformat(str(value))


@dataclass(slots=True)
class MachineDetail:
    kind: Literal["machine"] = "machine"
    manufacturer: Optional[str] = None
    model: Optional[str] = None
    serial_number: Optional[str] = None
    operating_hours: Optional[float] = None
    next_service_hours: Optional[float] = None
    last_service_date: Optional[dt.date] = None
    next_service_date: Optional[dt.date] = None
    status: Optional[HealthStatus] = None
    service_size: Optional[ServiceSize] = None

    def needs_attention(self) -> bool:
        return self.status in DUE_STATUSES


@dataclass(slots=True)
class PartDetail:
    kind: Literal["part"] = "part"
    article_number: Optional[str] = None
    manufacturer: Optional[str] = None
    quantity: Optional[float] = None


AssetDetail = Union[MachineDetail, PartDetail]

_DATE_FIELDS = {"last_service_date", "next_service_date"}
_NUMBER_FIELDS = {"operating_hours", "next_service_hours", "quantity"}
_CHOICES: Dict[str, frozenset] = {
    "status": frozenset({"ok", "warning", "critical"}),
    "service_size": frozenset({"S", "M", "L"}),
}


def _checked(key: str, value: Any) -> Any:
    if value is None:
        return None
    if key in _DATE_FIELDS:
        try:
            return _parse_date(value)
        except ValueError:
            raise ValueError(f"Invalid date for {key}: {value!r}") from None
    if key in _CHOICES and value not in _CHOICES[key]:
        raise ValueError(f"Invalid value for {key}: {value!r}")
    if key in _NUMBER_FIELDS:
        if isinstance(value, bool) or not isinstance(value, (int, float)) or value < 0:
            raise ValueError(f"Invalid value for {key}: {value!r}")
    return value


def detail_for(category: str, values: Optional[Mapping[str, Any]]) -> Optional[AssetDetail]:
    """Build the detail variant matching ``category`` from a flat mapping.

    Keys that do not belong to the variant are dropped, so a part never
    carries a health status and a machine never carries an article number.
    Only machines and parts have a detail record; other categories get None.
    Raises ``ValueError`` for malformed dates, numbers or choice values.
    """
    if values is None:
        return None
    if category == "machine":
        cls: type = MachineDetail
    elif category == "part":
        cls = PartDetail
    else:
        return None
    allowed = {f.name for f in fields(cls)} - {"kind"}
    kwargs: Dict[str, Any] = {}
    for key, value in values.items():
        if key not in allowed:
            continue
        kwargs[key] = _checked(key, value)
    return cls(**kwargs)


@dataclass(slots=True)
class Asset:
    id: str
    category: AssetCategory
    name: str
    parent_id: Optional[str] = None
    description: Optional[str] = None
    customer_number: Optional[str] = None
    detail: Optional[AssetDetail] = None

    @property
    def machine(self) -> Optional[MachineDetail]:
        return self.detail if isinstance(self.detail, MachineDetail) else None

    @property
    def part(self) -> Optional[PartDetail]:
        return self.detail if isinstance(self.detail, PartDetail) else None

    def merged_detail(self, values: Mapping[str, Any]) -> Optional[AssetDetail]:
        """Current detail with ``values`` applied; the asset itself is left untouched."""
        current: Dict[str, Any] = {}
        if self.detail is not None:
            current = {f.name: getattr(self.detail, f.name) for f in fields(self.detail) if f.name != "kind"}
        current.update(values)
        return detail_for(self.category, current)

    def update_detail(self, values: Mapping[str, Any]) -> None:
        self.detail = self.merged_detail(values)


@dataclass(slots=True)
class Technician:
    id: str
    name: str
    role: str = "Techniker"
    location: str = ""
    work_day_start: float = 8
    work_day_end: float = 17
    max_hours: float = 8
    avatar_color: Optional[str] = None

    @property
    def working_hours(self) -> float:
        return self.work_day_end - self.work_day_start

    def is_working(self, hour: float) -> bool:
        return self.work_day_start <= hour < self.work_day_end


@dataclass(slots=True)
class WorkPackage:
    id: str
    name: str
    duration: float


@dataclass(slots=True)
class Assignment:
    id: str
    entity_id: str
    technician_id: str
    date: dt.date
    duration: float
    start_hour: float
    is_package: bool = False
    custom_name: Optional[str] = None
    status: AssignmentStatus = "planned"

    @property
    def end_hour(self) -> float:
        return self.start_hour + self.duration

    def overlaps(self, other: "Assignment") -> bool:
        if self.technician_id != other.technician_id or self.date != other.date:
            return False
        return self.start_hour < other.end_hour and other.start_hour < self.end_hour

    def mark_completed(self) -> None:
        self.status = "completed"


@dataclass(slots=True)
class ServiceConfig:
    s: float = 2
    m: float = 4
    l: float = 8

    def hours_for(self, size: Optional[str]) -> float:
        size = (size or "M").upper()
        if size == "S":
            return self.s
        if size == "L":
            return self.l
        return self.m


@dataclass(slots=True)
class PlanningSnapshot:
    """The four stores plus the service configuration handed to every engine call."""

    assets: List[Asset] = field(default_factory=list)
    technicians: List[Technician] = field(default_factory=list)
    packages: List[WorkPackage] = field(default_factory=list)
    assignments: List[Assignment] = field(default_factory=list)
    service_config: ServiceConfig = field(default_factory=ServiceConfig)

    def find_technician(self, technician_id: str) -> Optional[Technician]:
        return next((t for t in self.technicians if t.id == technician_id), None)

    def find_package(self, package_id: str) -> Optional[WorkPackage]:
        return next((p for p in self.packages if p.id == package_id), None)

    def find_assignment(self, assignment_id: str) -> Optional[Assignment]:
        return next((a for a in self.assignments if a.id == assignment_id), None)

    def assignments_for(self, technician_id: str, day: dt.date) -> List[Assignment]:
        return [a for a in self.assignments if a.technician_id == technician_id and a.date == day]


__all__ = [
    "ASSET_CATEGORIES",
    "Asset",
    "AssetCategory",
    "AssetDetail",
    "Assignment",
    "AssignmentStatus",
    "DUE_STATUSES",
    "HealthStatus",
    "MachineDetail",
    "PartDetail",
    "PlanningSnapshot",
    "ServiceConfig",
    "ServiceSize",
    "Technician",
    "WorkPackage",
    "detail_for",
]
